"""Conversion between runtime values and their JSON-compatible persisted forms.

Numbers and booleans pass through, ``None`` stands for "no value", and every
other value becomes a flat dict tagged with its ``type``.
"""

from __future__ import annotations

from typing import Any

from .cartesian import CartesianCoordinate
from .plugins import ExpressionCalculator, PluginRegistry
from .powerscalar import PowerScalar, is_number
from .symbols import (
    COLLECTION_TYPE,
    EXPR_CALC_TYPE,
    SCALAR_TYPE,
    VEC_CCOORD_ID,
    VEC_TCOORD_ID,
)
from .tetracoordinate import Tetracoordinate
from .types import ExpressionTypeError, LoadError, ValueCollection


class Serializer:
    """Serializes expression values; plugin references resolve through ``registry``."""

    def __init__(self, registry: PluginRegistry | None = None):
        self.registry = registry if registry is not None else PluginRegistry()

    def serialize(self, value: Any) -> Any:
        if value is None or isinstance(value, bool) or is_number(value):
            return value
        if isinstance(value, PowerScalar):
            return {
                "type": SCALAR_TYPE,
                "digits": list(value.digits) if isinstance(value.digits, bytes) else value.digits,
                "radix": value.radix.value,
                "power": value.power,
                "sign": value.sign,
                "irrational": value.irrational,
                "level_order": value.level_order.value,
            }
        if isinstance(value, Tetracoordinate):
            return {
                "type": VEC_TCOORD_ID,
                "value": self.serialize(value.value),
                "num_levels": value.num_levels,
            }
        if isinstance(value, CartesianCoordinate):
            return {
                "type": VEC_CCOORD_ID,
                "x": self.serialize(value.x),
                "y": self.serialize(value.y),
            }
        if isinstance(value, ExpressionCalculator):
            return value.save()
        if isinstance(value, ValueCollection):
            return {
                "type": COLLECTION_TYPE,
                "items": [self.serialize(item) for item in value],
            }
        raise ExpressionTypeError(
            f"{type(value).__name__} is not a valid expression value",
            code="NOT_SERIALIZABLE",
        )

    def deserialize(self, obj: Any) -> Any:
        """Rebuild a runtime value; ``obj`` is never modified.

        Raises:
            LoadError: If ``obj`` is not a recognized persisted form
        """
        if obj is None or isinstance(obj, bool) or is_number(obj):
            return obj
        if not isinstance(obj, dict):
            raise LoadError(
                f"cannot deserialize {obj!r}: expected a tagged object", "MALFORMED_DATA"
            )

        value_type = obj.get("type")
        try:
            if value_type == SCALAR_TYPE:
                digits = obj["digits"]
                if isinstance(digits, list):
                    digits = bytes(digits)
                return PowerScalar(
                    digits,
                    obj["radix"],
                    obj.get("power", 0),
                    obj.get("sign", 1),
                    obj.get("irrational", False),
                    obj.get("level_order"),
                )
            if value_type == VEC_TCOORD_ID:
                return Tetracoordinate(
                    self.deserialize(obj["value"]), num_levels=obj.get("num_levels")
                )
            if value_type == VEC_CCOORD_ID:
                return CartesianCoordinate(
                    self.deserialize(obj["x"]), self.deserialize(obj["y"])
                )
            if value_type == EXPR_CALC_TYPE:
                return self.registry.load(obj["file_path"])
            if value_type == COLLECTION_TYPE:
                return ValueCollection([self.deserialize(item) for item in obj["items"]])
        except LoadError:
            raise
        except (KeyError, TypeError, ValueError) as err:
            raise LoadError(
                f"malformed {value_type} value {obj!r}: {err}", "MALFORMED_DATA"
            ) from err
        raise LoadError(
            f"cannot deserialize {obj!r}: unknown type {value_type!r}", "MALFORMED_DATA"
        )


def serialize(value: Any, registry: PluginRegistry | None = None) -> Any:
    return Serializer(registry).serialize(value)


def deserialize(obj: Any, registry: PluginRegistry | None = None) -> Any:
    return Serializer(registry).deserialize(obj)
