"""Type definitions, error taxonomy and result dataclasses for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator


@dataclass
class ValueCollection:
    """Ordered values produced by the ',' operator."""

    type: ClassVar[str] = "collection"

    items: list[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Any:
        return self.items[index]


@dataclass
class EvalResult:
    """Result of evaluating a tetracoord expression."""

    ok: bool
    result: str | None = None
    value_type: str | None = None
    exact: str | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.value_type is not None:
            result_dict["type"] = self.value_type
        if self.exact is not None:
            result_dict["exact"] = self.exact
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r}, error_code={self.error_code!r})"
        parts = [f"ok={self.ok}"]
        if self.result is not None:
            parts.append(f"result={self.result!r}")
        if self.value_type is not None:
            parts.append(f"value_type={self.value_type!r}")
        if self.exact is not None:
            parts.append(f"exact={self.exact!r}")
        return f"EvalResult({', '.join(parts)})"


class TetracoordError(Exception):
    """Base class of every error raised by the calculator engine."""

    default_code = "TETRACOORD_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ExpressionSyntaxError(TetracoordError):
    """Raised for malformed literals, unsupported operators and namespace violations."""

    default_code = "SYNTAX_ERROR"


class ParseError(ExpressionSyntaxError):
    """Raised when the expression text cannot be parsed into a tree."""

    default_code = "PARSE_ERROR"


class ValidationError(ExpressionSyntaxError):
    """Raised when input validation fails before parsing."""

    default_code = "VALIDATION_ERROR"


class ExpressionTypeError(TetracoordError, TypeError):
    """Raised when operand types are not allowed together."""

    default_code = "TYPE_ERROR"


class ReservedNameError(TetracoordError):
    """Raised when a reserved identifier is assigned."""

    default_code = "RESERVED_NAME"


class PluginEvalError(TetracoordError):
    """Raised when an expression calculator plugin fails to evaluate its arguments."""

    default_code = "PLUGIN_EVAL_ERROR"


class UndefinedVariableError(TetracoordError):
    """Raised when reading a variable that was never assigned."""

    default_code = "UNDEFINED_VARIABLE"


class ArithmeticDomainError(TetracoordError):
    """Raised when an arithmetic result cannot be represented as a value."""

    default_code = "ARITHMETIC_ERROR"


class LoadError(TetracoordError):
    """Raised when a plugin, data file or persisted value cannot be loaded or written."""

    default_code = "LOAD_ERROR"

    def __init__(self, message: str, code: str | None = None, path: str | None = None):
        self.path = path
        super().__init__(message, code)
