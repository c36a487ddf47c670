"""Cartesian coordinates with power scalar components."""

from __future__ import annotations

import math
from typing import Any, ClassVar, Sequence

import numpy as np
import sympy as sp

from .config import CCOORD_EQUALS_THRESHOLD
from .powerscalar import (
    Number,
    PowerScalar,
    checked_arithmetic,
    is_number,
    parse_power_scalar,
    to_float,
)
from .radix import RadixType, to_radix
from .symbols import VEC_CCOORD_ID
from .types import ArithmeticDomainError, ExpressionTypeError

TRIG_COS_PI_OVER_6 = float(sp.cos(sp.pi / 6))
TRIG_SIN_PI_OVER_6 = float(sp.sin(sp.pi / 6))

_TWO_PI = 2 * math.pi


def _component(value: PowerScalar | Number) -> PowerScalar:
    if isinstance(value, PowerScalar):
        return value
    if is_number(value):
        return parse_power_scalar(value, RadixType.D)
    raise ExpressionTypeError(
        f"cartesian component must be a number or power scalar, got {type(value).__name__}"
    )


def _scalar(value: PowerScalar | Number) -> float:
    if isinstance(value, PowerScalar):
        return value.to_number()
    if is_number(value):
        return to_float(value)
    raise ExpressionTypeError(
        f"expected a scalar operand, got {type(value).__name__}", code="MIXED_TYPES"
    )


def vector_magnitude(v: np.ndarray) -> float:
    return math.sqrt(float(np.dot(v, v)))


def vector_angle(v: np.ndarray) -> float:
    """Angle of a vector from the x axis, bounded to [0, 2*pi)."""
    return math.atan2(float(v[1]), float(v[0])) % _TWO_PI


def angle_between(a: np.ndarray, b: np.ndarray) -> float:
    """Unsigned angle between two vectors, in [0, pi]."""
    da = abs(vector_angle(a) - vector_angle(b))
    if da > math.pi:
        da = _TWO_PI - da
    return da


class CartesianCoordinate:
    """Point in the plane whose components are power scalars.

    ``v`` is the read-only float pair derived from ``x`` and ``y``.
    """

    type: ClassVar[str] = VEC_CCOORD_ID

    def __init__(self, x: PowerScalar | Number = 0, y: PowerScalar | Number = 0):
        self.x = _component(x)
        self.y = _component(y)
        v = np.array([self.x.to_number(), self.y.to_number()], dtype=np.float64)
        v.setflags(write=False)
        self.v = v

    @classmethod
    def from_raw(cls, v: Sequence[float] | np.ndarray) -> "CartesianCoordinate":
        """Build from a raw float pair, re-encoding each component as a decimal scalar."""
        x, y = (to_float(c) for c in v)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ArithmeticDomainError(f"cartesian coordinate ({x}, {y}) is not finite")
        return cls(x, y)

    @property
    def magnitude(self) -> float:
        return vector_magnitude(self.v)

    def negate(self) -> "CartesianCoordinate":
        return CartesianCoordinate(self.x.negate(), self.y.negate())

    def equals(self, other: "CartesianCoordinate", threshold: float | None = None) -> bool:
        """Component-wise equality within ``threshold``."""
        if threshold is None:
            threshold = CCOORD_EQUALS_THRESHOLD
        return bool(np.all(np.abs(self.v - other.v) <= threshold))

    def to_string(self, radix: RadixType | str | int = RadixType.D) -> str:
        radix = to_radix(radix)
        return f"{VEC_CCOORD_ID}[{self.x.to_string(radix)},{self.y.to_string(radix)}]"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"CartesianCoordinate(x={self.x!r}, y={self.y!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, CartesianCoordinate):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    @staticmethod
    def add(a: "CartesianCoordinate", b: "CartesianCoordinate") -> "CartesianCoordinate":
        return CartesianCoordinate.from_raw(a.v + b.v)

    @staticmethod
    def subtract(a: "CartesianCoordinate", b: "CartesianCoordinate") -> "CartesianCoordinate":
        return CartesianCoordinate.from_raw(a.v - b.v)

    @staticmethod
    def multiply(a: "CartesianCoordinate", s: PowerScalar | Number) -> "CartesianCoordinate":
        return CartesianCoordinate.from_raw(a.v * _scalar(s))

    @staticmethod
    def divide(a: "CartesianCoordinate", s: PowerScalar | Number) -> "CartesianCoordinate":
        s = _scalar(s)
        if s == 0:
            raise ArithmeticDomainError("division by zero")
        return CartesianCoordinate.from_raw(a.v / s)

    @staticmethod
    def pow(a: "CartesianCoordinate", s: PowerScalar | Number) -> "CartesianCoordinate":
        """Raise the vector length to ``s``, keeping its direction."""
        scale = checked_arithmetic(math.pow, a.magnitude, _scalar(s) - 1)
        return CartesianCoordinate.from_raw(a.v * scale)
