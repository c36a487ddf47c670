"""Expression evaluation.

Walks a parsed expression tree and computes its value. Bare number
literals are plain numbers in decimal context and power scalars in the
radix of the enclosing vector constructor (``cc[...]`` reads decimal,
``tc[...]`` reads quaternary). Variables live in a :class:`VariableContext`
addressed as ``var``, and the result of every evaluation is kept in
``var.$ans``.
"""

from __future__ import annotations

import operator
from typing import Any

from .cartesian import TRIG_COS_PI_OVER_6, TRIG_SIN_PI_OVER_6, CartesianCoordinate
from .logging_config import get_logger
from .parser import NumberLiteral, parse_expression
from .plugins import ExpressionCalculator, PluginRegistry
from .powerscalar import PowerScalar, checked_arithmetic, is_number, parse_power_scalar
from .radix import IMAGINARY, RadixType, to_radix
from .symbols import (
    ABS_GROUP_OP,
    ACCESS_OP,
    ADD_OP,
    ASSIGN_OP,
    CALL_OP,
    CCOORD_X,
    CCOORD_Y,
    COLLECTION_DELIM,
    COSPI6_ID,
    DIV_OP,
    EQ_OP,
    EQ_STRICT_OP,
    EXP_OP,
    EXPR_CALC_TYPE,
    GROUP_OP,
    IRRATIONAL_OP,
    MULT_OP,
    NEQ_STRICT_OP,
    RADIX_OP,
    SINPI6_ID,
    SUB_OP,
    TCOORD_V,
    VAR_CTX_ID,
    VEC_CCOORD_ID,
    VEC_OP,
    VEC_TCOORD_ID,
)
from .tetracoordinate import Tetracoordinate
from .types import (
    ArithmeticDomainError,
    ExpressionSyntaxError,
    ExpressionTypeError,
    PluginEvalError,
    UndefinedVariableError,
    ValueCollection,
)
from .variable_context import VariableContext

logger = get_logger("evaluator")

CONSTANTS = {
    COSPI6_ID: TRIG_COS_PI_OVER_6,
    SINPI6_ID: TRIG_SIN_PI_OVER_6,
}

VECTOR_RADIX = {
    VEC_CCOORD_ID: RadixType.D,
    VEC_TCOORD_ID: RadixType.Q,
}

_Vector = (Tetracoordinate, CartesianCoordinate)


def _is_scalar(value: Any) -> bool:
    return is_number(value) or isinstance(value, PowerScalar)


def _describe(value: Any) -> str:
    return f"{type(value).__name__} {value}"


def eval_negate(a: Any) -> Any:
    if is_number(a):
        return -a
    if isinstance(a, PowerScalar):
        return a.negate()
    if isinstance(a, Tetracoordinate):
        return a.negate_from_cartesian()
    if isinstance(a, CartesianCoordinate):
        return a.negate()
    raise ExpressionTypeError(f"cannot negate {_describe(a)}")


def eval_abs(a: Any) -> Any:
    if is_number(a):
        return abs(a)
    if isinstance(a, PowerScalar):
        return PowerScalar.abs(a)
    if isinstance(a, Tetracoordinate):
        return a.magnitude_from_cartesian
    if isinstance(a, CartesianCoordinate):
        return a.magnitude
    raise ExpressionTypeError(f"cannot take magnitude of {_describe(a)}")


def eval_add_sub(op: str, a: Any, b: Any) -> Any:
    subtract = op == SUB_OP
    if is_number(a) and is_number(b):
        return checked_arithmetic(operator.sub if subtract else operator.add, a, b)
    if _is_scalar(a) and _is_scalar(b):
        return PowerScalar.subtract(a, b) if subtract else PowerScalar.add(a, b)
    if isinstance(a, Tetracoordinate) and isinstance(b, Tetracoordinate):
        return (
            Tetracoordinate.subtract_from_cartesian(a, b)
            if subtract
            else Tetracoordinate.add_from_cartesian(a, b)
        )
    if isinstance(a, CartesianCoordinate) and isinstance(b, CartesianCoordinate):
        return (
            CartesianCoordinate.subtract(a, b) if subtract else CartesianCoordinate.add(a, b)
        )
    raise ExpressionTypeError(
        f"binary add/subtract not supported for mixed types; convert first. "
        f"a={_describe(a)} b={_describe(b)}",
        code="MIXED_TYPES",
    )


def parse_semiscalar_operands(a: Any, b: Any, commutative: bool = True) -> tuple[bool, Any, Any]:
    """Order a vector/scalar operand pair so the vector is on the left.

    Returns:
        Tuple of (semiscalar, vector_or_a, scalar_or_b)
    """
    if isinstance(a, _Vector):
        semiscalar = True
    elif isinstance(b, _Vector):
        if not commutative:
            raise ExpressionTypeError(
                f"operands must be vector left, scalar right. a={_describe(a)} b={_describe(b)}",
                code="NOT_COMMUTATIVE",
            )
        semiscalar = True
        a, b = b, a
    else:
        return False, a, b

    if not _is_scalar(b):
        raise ExpressionTypeError(
            f"vector operation requires a scalar operand, got {_describe(b)}",
            code="MIXED_TYPES",
        )
    return semiscalar, a, b


def eval_mul_div(op: str, a: Any, b: Any) -> Any:
    multiply = op == MULT_OP
    if is_number(a) and is_number(b):
        return checked_arithmetic(operator.mul if multiply else operator.truediv, a, b)

    semiscalar, a, b = parse_semiscalar_operands(a, b, commutative=multiply)
    if semiscalar:
        if isinstance(a, Tetracoordinate):
            return (
                Tetracoordinate.multiply_from_cartesian(a, b)
                if multiply
                else Tetracoordinate.divide_from_cartesian(a, b)
            )
        return CartesianCoordinate.multiply(a, b) if multiply else CartesianCoordinate.divide(a, b)
    if _is_scalar(a) and _is_scalar(b):
        return PowerScalar.multiply(a, b) if multiply else PowerScalar.divide(a, b)
    raise ExpressionTypeError(
        f"binary multiply/divide not supported for given types a={_describe(a)} b={_describe(b)}",
        code="MIXED_TYPES",
    )


def eval_pow(a: Any, b: Any) -> Any:
    if is_number(a) and is_number(b):
        return checked_arithmetic(operator.pow, a, b)

    semiscalar, a, b = parse_semiscalar_operands(a, b, commutative=False)
    if semiscalar:
        if isinstance(a, Tetracoordinate):
            return Tetracoordinate.pow_from_cartesian(a, b)
        return CartesianCoordinate.pow(a, b)
    if _is_scalar(a) and _is_scalar(b):
        return PowerScalar.pow(a, b)
    raise ExpressionTypeError(
        f"exponent not supported for given types a={_describe(a)} b={_describe(b)}",
        code="MIXED_TYPES",
    )


def eval_eq(op: str, a: Any, b: Any) -> bool:
    """Strict equality within one value family.

    Raises:
        ExpressionSyntaxError: For loose equality
        ExpressionTypeError: For operands of different families
    """
    if op == EQ_OP:
        raise ExpressionSyntaxError(
            f"loose equality {op} for implicit type conversion is not supported",
            code="UNSUPPORTED_OPERATION",
        )
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, bool) and isinstance(b, bool):
        return a == b
    for family in (PowerScalar, Tetracoordinate, CartesianCoordinate):
        if isinstance(a, family) and isinstance(b, family):
            return a.equals(b)
    raise ExpressionTypeError(
        f"strict equality {op} not supported for mixed types; convert first. "
        f"a={_describe(a)} b={_describe(b)}",
        code="MIXED_TYPES",
    )


def parse_scalar_node(node: Any, radix: RadixType | str) -> PowerScalar:
    """Convert a ``[None, digits]`` or ``[~, [None, digits]]`` node to a power scalar."""
    radix = to_radix(radix)
    irrational = False
    if isinstance(node, list) and node and node[0] == IRRATIONAL_OP:
        irrational = True
        node = node[1]
    if not (isinstance(node, list) and len(node) == 2 and node[0] is None):
        raise ExpressionSyntaxError(f"invalid scalar number node={node}")

    scalar = parse_power_scalar(node[1], radix, irrational)
    if scalar is IMAGINARY:
        raise ExpressionSyntaxError(
            f"scalar {node[1]} in radix {radix.value} has an imaginary digit",
            code="IMAGINARY_DIGIT",
        )
    return scalar


def parse_string(node: Any) -> str:
    """Read a member key given as a bare identifier or a quoted string."""
    if isinstance(node, str):
        return node
    if isinstance(node, list) and len(node) == 2 and node[0] is None and isinstance(node[1], str):
        return str(node[1])
    raise ExpressionSyntaxError(f"expected an identifier or string key, got {node}")


def assert_var_access(acc: str, var_ctx_id: Any, var_ctx_key: Any) -> str:
    """Check that a member access targets ``var`` and return the member key."""
    if acc not in (ACCESS_OP, VEC_OP):
        raise ExpressionSyntaxError(
            f"cannot access parent={var_ctx_id} access-op={acc} member={var_ctx_key} "
            f"that doesn't belong to {VAR_CTX_ID}",
            code="INVALID_TARGET",
        )
    if var_ctx_id != VAR_CTX_ID:
        raise ExpressionSyntaxError(
            f"all variables must belong to variable context {VAR_CTX_ID}, "
            f"not {var_ctx_id}{ACCESS_OP}<member>",
            code="NAMESPACE_VIOLATION",
        )
    return parse_string(var_ctx_key)


class ExpressionEvaluator:
    """Evaluates parsed trees against an optional variable context."""

    def __init__(
        self,
        var_ctx: VariableContext | None = None,
        registry: PluginRegistry | None = None,
    ):
        self.var_ctx = var_ctx
        if registry is None:
            registry = var_ctx.registry if var_ctx is not None else PluginRegistry()
        self.registry = registry

    def _require_context(self, node: Any) -> VariableContext:
        if self.var_ctx is None:
            raise ExpressionSyntaxError(
                f"cannot evaluate {node} without variable context",
                code="NO_VARIABLE_CONTEXT",
            )
        return self.var_ctx

    def evaluate_tree(self, node: Any, radix_ctx: RadixType = RadixType.D) -> Any:
        if isinstance(node, str):
            if node in CONSTANTS:
                return CONSTANTS[node]
            raise ExpressionSyntaxError(
                f"unknown identifier {node}; all variables must belong to variable "
                f"context {VAR_CTX_ID}",
                code="NAMESPACE_VIOLATION",
            )
        if not isinstance(node, list) or not node:
            raise ExpressionSyntaxError(f"invalid expression node {node!r}")

        op = node[0]
        if op is None:
            return self._eval_literal(node[1], radix_ctx)

        operands = node[1:]
        arity = len(operands)

        if op == RADIX_OP:
            return parse_scalar_node(operands[1], operands[0])
        if op == IRRATIONAL_OP:
            return parse_scalar_node(node, radix_ctx)
        if op in (ADD_OP, SUB_OP):
            a = self.evaluate_tree(operands[0], radix_ctx)
            if arity == 1:
                return eval_negate(a) if op == SUB_OP else a
            return eval_add_sub(op, a, self.evaluate_tree(operands[1], radix_ctx))
        if op == ABS_GROUP_OP and arity == 1:
            return eval_abs(self.evaluate_tree(operands[0], radix_ctx))
        if op in (MULT_OP, DIV_OP) and arity == 2:
            a = self.evaluate_tree(operands[0], radix_ctx)
            return eval_mul_div(op, a, self.evaluate_tree(operands[1], radix_ctx))
        if op == EXP_OP and arity == 2:
            a = self.evaluate_tree(operands[0], radix_ctx)
            return eval_pow(a, self.evaluate_tree(operands[1], radix_ctx))
        if op == COLLECTION_DELIM:
            return ValueCollection([self.evaluate_tree(item, radix_ctx) for item in operands])
        if op == VEC_OP and isinstance(operands[0], str) and operands[0] in VECTOR_RADIX:
            return self._eval_vector(operands[0], operands[1])
        if op in (EQ_STRICT_OP, NEQ_STRICT_OP, EQ_OP) and arity == 2:
            a = self.evaluate_tree(operands[0], radix_ctx)
            equal = eval_eq(op, a, self.evaluate_tree(operands[1], radix_ctx))
            return not equal if op == NEQ_STRICT_OP else equal
        if op == GROUP_OP and arity == 1:
            return self.evaluate_tree(operands[0], radix_ctx)
        if op == CALL_OP and arity == 2:
            return self._eval_call(operands[0], operands[1], radix_ctx)
        if op == ASSIGN_OP and arity == 2:
            return self._eval_assign(node, operands[0], operands[1])
        if op == VEC_OP and operands[0] == EXPR_CALC_TYPE:
            return self.registry.load(parse_string(operands[1]))
        if op in (ACCESS_OP, VEC_OP) and arity == 2:
            return self._eval_access(node, op, operands[0], operands[1], radix_ctx)

        raise ExpressionSyntaxError(
            f"unsupported {'unary' if arity == 1 else 'binary'} operation {node}",
            code="UNSUPPORTED_OPERATION",
        )

    def _eval_literal(self, value: Any, radix_ctx: RadixType) -> Any:
        if isinstance(value, NumberLiteral):
            if radix_ctx is RadixType.D:
                try:
                    return float(value) if "." in value else int(value)
                except ValueError as err:
                    raise ArithmeticDomainError(f"number literal is too long: {err}") from err
            return parse_scalar_node([None, value], radix_ctx)
        if isinstance(value, bool) or is_number(value):
            return value
        raise ExpressionSyntaxError(
            f"string literal {value!r} is only valid as a member key or plugin path"
        )

    def _eval_vector(self, vector_type: str, inner: Any) -> Any:
        value = self.evaluate_tree(inner, VECTOR_RADIX[vector_type])

        if isinstance(value, _Vector):
            if vector_type == VEC_CCOORD_ID:
                if isinstance(value, CartesianCoordinate):
                    return value
                return value.to_cartesian_coord()
            if isinstance(value, Tetracoordinate):
                return value
            return Tetracoordinate.from_cartesian_coord(value)

        if vector_type == VEC_CCOORD_ID:
            if not (
                isinstance(value, ValueCollection)
                and len(value) == 2
                and all(_is_scalar(item) for item in value)
            ):
                raise ExpressionSyntaxError(
                    f"failed to parse {inner}-->{value} as ccoord x,y components"
                )
            return CartesianCoordinate(value[0], value[1])

        if not _is_scalar(value):
            raise ExpressionSyntaxError(f"failed to parse {inner}-->{value} as tcoord scalar value")
        return Tetracoordinate(value)

    def _eval_call(self, callee: Any, args: Any, radix_ctx: RadixType) -> Any:
        calculator = self.evaluate_tree(callee, radix_ctx)
        if not isinstance(calculator, ExpressionCalculator):
            raise ExpressionSyntaxError(
                f"invalid call of identifier={callee} that is not an expression calculator"
            )

        if args is None:
            collection = ValueCollection()
        else:
            value = self.evaluate_tree(args, radix_ctx)
            collection = value if isinstance(value, ValueCollection) else ValueCollection([value])

        logger.debug(f"calling {calculator!r} with {len(collection)} arguments")
        try:
            return calculator.eval(collection)
        except Exception as err:
            raise PluginEvalError(
                f"expression calculator {calculator.file_path} failed: {err}"
            ) from err

    def _eval_assign(self, node: Any, target: Any, value_node: Any) -> Any:
        if not (isinstance(target, list) and len(target) == 3):
            raise ExpressionSyntaxError(
                f"invalid assignment target {target}", code="INVALID_TARGET"
            )
        key = assert_var_access(*target)
        var_ctx = self._require_context(node)

        value = self.evaluate_tree(value_node)
        var_ctx.set(key, value)
        return value

    def _eval_access(self, node: Any, op: str, parent: Any, member: Any, radix_ctx: RadixType) -> Any:
        if isinstance(parent, list):
            vector = self.evaluate_tree(parent, radix_ctx)
            component = parse_string(member)
            if isinstance(vector, Tetracoordinate):
                if component != TCOORD_V:
                    raise ExpressionTypeError(
                        f"tcoord component={component} must be {TCOORD_V}",
                        code="INVALID_COMPONENT",
                    )
                return vector.value
            if isinstance(vector, CartesianCoordinate):
                if component not in (CCOORD_X, CCOORD_Y):
                    raise ExpressionTypeError(
                        f"ccoord component={component} must be {CCOORD_X} or {CCOORD_Y}",
                        code="INVALID_COMPONENT",
                    )
                return vector.x if component == CCOORD_X else vector.y
            raise ExpressionTypeError(
                f"cannot access member/component={component} of non vector parent={vector}",
                code="INVALID_COMPONENT",
            )

        key = assert_var_access(op, parent, member)
        var_ctx = self._require_context(node)
        if key not in var_ctx:
            raise UndefinedVariableError(f"{VAR_CTX_ID}{ACCESS_OP}{key} is not defined")
        return var_ctx.get(key)


def evaluate(
    expression: str,
    var_ctx: VariableContext | None = None,
    registry: PluginRegistry | None = None,
) -> Any:
    """Parse and evaluate an expression, reading and writing ``var_ctx``.

    Args:
        expression: Expression text
        var_ctx: Variable context; required for ``var`` access and assignment
        registry: Plugin registry; defaults to the context's registry

    Returns:
        The expression value; also stored as ``var.$ans`` when a context is given

    Raises:
        TetracoordError: Subclass describing the failure
    """
    logger.info(f"parse raw expression={expression}")
    tree = parse_expression(expression)
    logger.debug(f"parsed expression tree={tree}")

    evaluator = ExpressionEvaluator(var_ctx, registry)
    if var_ctx is None:
        result = evaluator.evaluate_tree(tree)
    else:
        with var_ctx.lock:
            result = evaluator.evaluate_tree(tree)
            var_ctx.set_answer(result)
    logger.debug(f"result={result}")
    return result

