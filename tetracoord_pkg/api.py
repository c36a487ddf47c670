"""Public API for Tetracoord - returns structured objects without raising."""

from __future__ import annotations

from typing import Any

import sympy as sp

from .cartesian import CartesianCoordinate
from .evaluator import evaluate as _evaluate
from .parser import parse_expression
from .plugins import ExpressionCalculator, PluginRegistry
from .powerscalar import PowerScalar, format_number, is_number, parse_power_scalar
from .radix import RadixType, to_radix
from .symbols import EXPR_CALC_TYPE, VEC_CCOORD_ID, VEC_TCOORD_ID
from .tetracoordinate import Tetracoordinate
from .types import EvalResult, TetracoordError, ValueCollection
from .variable_context import VariableContext


def value_type_name(value: Any) -> str:
    """Name of the value family, as reported in results."""
    if value is None:
        return "none"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    return getattr(value, "type", type(value).__name__)


def format_value(
    value: Any,
    scalar_radix: RadixType | str | None = None,
    vector_format: str | None = None,
) -> str:
    """Format an expression value for display.

    Args:
        value: Expression value
        scalar_radix: Radix to write scalars and vector components in
        vector_format: "cc" or "tc" to convert vectors before writing

    Returns:
        Display string
    """
    radix = to_radix(scalar_radix) if scalar_radix is not None else None
    if isinstance(value, Tetracoordinate):
        if vector_format == VEC_CCOORD_ID:
            return value.to_cartesian_coord().to_string(radix or RadixType.D)
        return value.to_string(radix or RadixType.Q)
    if isinstance(value, CartesianCoordinate):
        if vector_format == VEC_TCOORD_ID:
            return Tetracoordinate.from_cartesian_coord(value).to_string(radix or RadixType.Q)
        return value.to_string(radix or RadixType.D)
    if isinstance(value, PowerScalar):
        return value.to_string(radix)
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        if radix is not None:
            return parse_power_scalar(value, RadixType.D).to_string(radix, False)
        return format_number(value)
    if isinstance(value, ExpressionCalculator):
        return f'{EXPR_CALC_TYPE}["{value.file_path}"]'
    if isinstance(value, ValueCollection):
        return ", ".join(format_value(item, scalar_radix, vector_format) for item in value)
    if value is None:
        return "none"
    return str(value)


def exact_value(value: Any) -> str | None:
    """Exact rational form of a scalar or vector value, if it has one."""
    if isinstance(value, PowerScalar):
        return str(value.to_rational())
    if isinstance(value, Tetracoordinate):
        return str(value.value.to_rational())
    if isinstance(value, CartesianCoordinate):
        return f"({value.x.to_rational()}, {value.y.to_rational()})"
    if is_number(value):
        return str(sp.nsimplify(value, rational=True))
    return None


def evaluate(
    expression: str,
    var_ctx: VariableContext | None = None,
    registry: PluginRegistry | None = None,
    scalar_radix: RadixType | str | None = None,
    vector_format: str | None = None,
    exact: bool = False,
) -> EvalResult:
    """Evaluate an expression.

    Args:
        expression: Expression string (e.g., "tc[0q2] * 0d3", "cc[tc[0q3]]")
        var_ctx: Optional variable context read and written by the expression
        registry: Optional plugin registry
        scalar_radix: Radix used to format the result
        vector_format: Vector type used to format the result
        exact: Include the exact rational value

    Returns:
        EvalResult with the formatted result, or the error message and code

    Example:
        >>> from tetracoord_pkg.api import evaluate
        >>> evaluate("tc[0q0.2 + 0q0.2]").result
        'tc[0q1]'
    """
    try:
        value = _evaluate(expression, var_ctx, registry)
        return EvalResult(
            ok=True,
            result=format_value(value, scalar_radix, vector_format),
            value_type=value_type_name(value),
            exact=exact_value(value) if exact else None,
        )
    except TetracoordError as e:
        return EvalResult(ok=False, error=e.message, error_code=e.code)


def validate_expression(expression: str) -> tuple[bool, str | None]:
    """Validate expression syntax without evaluating it.

    Args:
        expression: Expression string to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        parse_expression(expression)
        return True, None
    except TetracoordError as e:
        return False, e.message
