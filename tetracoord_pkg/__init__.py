"""Tetracoord package: power scalars, tetracoordinates, expression evaluator and CLI."""

__all__ = [
    "config",
    "radix",
    "powerscalar",
    "cartesian",
    "tetracoordinate",
    "parser",
    "evaluator",
    "variable_context",
    "serializer",
    "plugins",
    "storage",
    "cli",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "evaluate",
    "format_value",
    "validate_expression",
    "PowerScalar",
    "parse_power_scalar",
    "CartesianCoordinate",
    "Tetracoordinate",
    "VariableContext",
    "PluginRegistry",
    "ExpressionCalculator",
]

from .api import evaluate, format_value, validate_expression  # noqa: E402
from .cartesian import CartesianCoordinate  # noqa: E402
from .plugins import ExpressionCalculator, PluginRegistry  # noqa: E402
from .powerscalar import PowerScalar, parse_power_scalar  # noqa: E402
from .tetracoordinate import Tetracoordinate  # noqa: E402
from .variable_context import VariableContext  # noqa: E402
