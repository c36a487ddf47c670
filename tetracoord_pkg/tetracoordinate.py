"""Tetracoordinates: points of the triangular lattice addressed by base 4 digits.

Each quaternary digit selects one of four directions at its level. Digit 0
stays at the cell center, digits 1-3 point to the three corners of the
cell. The direction of every odd level is flipped, and each zero digit swaps
the parity for the digits that follow it.
"""

from __future__ import annotations

import math
from dataclasses import replace
from enum import Enum
from typing import Any, ClassVar, Sequence

import numpy as np

from .cartesian import (
    TRIG_COS_PI_OVER_6,
    TRIG_SIN_PI_OVER_6,
    CartesianCoordinate,
    angle_between,
    vector_magnitude,
)
from .logging_config import get_logger
from .powerscalar import (
    Number,
    PowerScalar,
    digits_to_bytes,
    format_number,
    is_number,
    parse_power_scalar,
)
from .radix import (
    DEFAULT_LEVEL_ORDER,
    IMAGINARY,
    LevelOrder,
    RadixType,
    to_level_order,
)
from .symbols import VEC_TCOORD_ID
from .types import ExpressionSyntaxError, ExpressionTypeError

logger = get_logger("tetracoordinate")


class Orientation(str, Enum):
    """Direction digit 1 points to."""

    UP = "up"
    DOWN = "dn"
    LEFT = "lf"
    RIGHT = "rt"


DEFAULT_ORIENTATION = Orientation.UP

# Unit cartesian vector of each signed direction digit at level 0.
UNIT_TO_CARTESIAN: dict[int, tuple[float, float]] = {
    0: (0.0, 0.0),
    1: (0.0, 1.0),
    2: (-TRIG_COS_PI_OVER_6, -TRIG_SIN_PI_OVER_6),
    3: (TRIG_COS_PI_OVER_6, -TRIG_SIN_PI_OVER_6),
    -1: (0.0, -1.0),
    -2: (TRIG_COS_PI_OVER_6, TRIG_SIN_PI_OVER_6),
    -3: (-TRIG_COS_PI_OVER_6, TRIG_SIN_PI_OVER_6),
    4: (1.0, 0.0),
    -4: (-1.0, 0.0),
}

_REORIENTED_DIGITS: dict[Orientation, dict[int, int]] = {
    Orientation.LEFT: {1: -4, 2: 3, 3: -2},
    Orientation.DOWN: {1: -1, 2: -2, 3: -3},
    Orientation.RIGHT: {1: 4, 2: -3, 3: 2},
}


def reorient_digit(digit: int | str, orientation: Orientation | str = DEFAULT_ORIENTATION) -> int:
    """Map a direction digit to the signed unit digit it points to under ``orientation``."""
    digit = int(digit)
    orientation = Orientation(orientation)
    if digit == 0 or orientation is Orientation.UP:
        return digit
    try:
        return _REORIENTED_DIGITS[orientation][digit]
    except KeyError:
        raise ExpressionSyntaxError(
            f"invalid digit={digit} at orientation={orientation.value}",
            code="INVALID_DIGIT",
        ) from None


def digit_to_cartesian(
    digit: int | str,
    orientation: Orientation | str = DEFAULT_ORIENTATION,
    level: int = 0,
    flip: bool = False,
) -> np.ndarray:
    """Cartesian vector of one digit, scaled to its level."""
    v = np.array(UNIT_TO_CARTESIAN[reorient_digit(digit, orientation)])
    if flip:
        v = -v
    return v * 2.0**level


def cell_radius(level: int = 0) -> float:
    """Distance from a cell centroid to its edge; 1/2 at level 0."""
    return 2.0**level / 2


def _to_quaternary(scalar: PowerScalar) -> PowerScalar:
    return parse_power_scalar(format_number(scalar.to_number(), 4), RadixType.Q)


class _LatticeWalk:
    """Greedy nearest-cell search state for ``Tetracoordinate.from_cartesian_coord``."""

    def __init__(self, target: np.ndarray, units: list[np.ndarray], flip: int):
        self.target = target
        self.units = units
        self.flip = flip
        self.loc = np.zeros(2)
        self.delta = target - self.loc
        self.dist = vector_magnitude(self.delta)

    def step(self, power: int) -> int:
        """Move one level toward the target and return the digit taken."""
        angles = [angle_between(self.delta, unit * self.flip) for unit in self.units]
        index = min(range(len(angles)), key=angles.__getitem__)

        prev = (self.loc, self.delta, self.dist)
        self.loc = self.loc + self.units[index] * (2.0**power * self.flip)
        self.delta = self.target - self.loc
        self.dist = vector_magnitude(self.delta)

        if self.dist > prev[2]:
            # stay at the cell center
            self.loc, self.delta, self.dist = prev
            self.flip = -self.flip
            return 0
        return index + 1


class Tetracoordinate:
    """Lattice point whose ``value`` is a quaternary power scalar.

    ``num_levels`` is the count of populated levels, leading zeros excluded.
    """

    type: ClassVar[str] = VEC_TCOORD_ID

    def __init__(
        self,
        value: "str | PowerScalar | Tetracoordinate | Sequence[int] | Number | None" = None,
        level_order: LevelOrder | str | None = None,
        num_levels: int | None = None,
        power_offset: int = 0,
        irrational: bool = False,
    ):
        level_order = to_level_order(level_order)

        if value is None:
            scalar = parse_power_scalar("0", RadixType.Q, irrational, level_order)
        elif isinstance(value, Tetracoordinate):
            scalar = value.value
            if num_levels is None:
                num_levels = value.num_levels
        elif isinstance(value, PowerScalar):
            scalar = value
        elif isinstance(value, str):
            scalar = parse_power_scalar(value, RadixType.Q, irrational, level_order)
        elif isinstance(value, (list, tuple)):
            packed = digits_to_bytes(value, RadixType.Q, level_order)
            scalar = (
                IMAGINARY
                if packed is IMAGINARY
                else PowerScalar(packed, RadixType.Q, 0, 1, irrational, level_order)
            )
        elif is_number(value):
            scalar = parse_power_scalar(value, RadixType.D)
        else:
            raise ExpressionTypeError(
                f"cannot build a tetracoordinate from {type(value).__name__}"
            )

        if scalar is IMAGINARY:
            raise ExpressionSyntaxError(
                f"tetracoordinate {value!r} has an imaginary digit",
                code="IMAGINARY_DIGIT",
            )
        if scalar.radix is not RadixType.Q:
            scalar = _to_quaternary(scalar)
        if power_offset:
            scalar = replace(scalar, power=scalar.power + int(power_offset))

        self.value: PowerScalar = scalar
        self.num_levels: int = (
            len(scalar.to_digit_string(RadixType.Q, show_power=False))
            if num_levels is None
            else int(num_levels)
        )

    @property
    def power(self) -> int:
        return self.value.power

    @property
    def irrational(self) -> bool:
        return self.value.irrational

    @property
    def level_order(self) -> LevelOrder:
        return self.value.level_order

    def get_quad_strs(self) -> list[str]:
        """Digit characters in stored order, trimmed to ``num_levels``."""
        quads = list(self.value.to_digit_string(RadixType.Q, show_power=False))
        excess = len(quads) - self.num_levels
        if excess > 0:
            if self.value.level_order is LevelOrder.HIGH_FIRST:
                quads = quads[excess:]
            else:
                quads = quads[:-excess]
        return quads

    def to_cartesian_coord(
        self, orientation: Orientation | str = DEFAULT_ORIENTATION
    ) -> CartesianCoordinate:
        digits = [int(q) for q in self.get_quad_strs()]
        if self.value.level_order is LevelOrder.LOW_FIRST:
            digits.reverse()

        level = self.num_levels - 1 + self.value.power
        level_even = level % 2 == 0
        total = np.zeros(2)
        last = total
        for digit in digits:
            last = digit_to_cartesian(digit, orientation, level, flip=not level_even)
            total = total + last
            level -= 1
            if digit == 0:
                level_even = not level_even

        if self.value.irrational:
            # repeating tail sums to the last vector once more
            total = total + last
        if self.value.sign < 0:
            total = -total
        return CartesianCoordinate.from_raw(total)

    @classmethod
    def from_cartesian_coord(
        cls,
        ccoord: CartesianCoordinate | Sequence[float],
        precision: int = 0,
        allow_irrational: bool = True,
        level_order: LevelOrder | str = DEFAULT_LEVEL_ORDER,
        orientation: Orientation | str = DEFAULT_ORIENTATION,
    ) -> "Tetracoordinate":
        """Find the lattice cell nearest to a cartesian point.

        Walks from the largest level needed to reach the target down to
        ``precision``, picking at each level the direction closest in angle
        to the remaining delta, or 0 when no step gets closer.

        Args:
            ccoord: Target point
            precision: Lowest level to resolve
            allow_irrational: Whether a repeating digit may close the remaining gap
            level_order: Digit order of the result
            orientation: Direction digit 1 points to

        Returns:
            Tetracoordinate of the cell containing the target
        """
        if not isinstance(ccoord, CartesianCoordinate):
            ccoord = CartesianCoordinate.from_raw(ccoord)
        level_order = to_level_order(level_order)
        precision = math.trunc(precision)
        radius = cell_radius(precision)
        units = [
            np.array(UNIT_TO_CARTESIAN[reorient_digit(d, orientation)]) for d in (1, 2, 3)
        ]

        target = np.array(ccoord.v, dtype=np.float64)
        target_dist = vector_magnitude(target)
        scale = max(math.ceil(math.log2(target_dist)), 0) if target_dist > 0 else 0
        power = scale
        walk = _LatticeWalk(target, units, flip=-1 if power % 2 != 0 else 1)

        digits: list[int] = []
        irrational = False
        while walk.dist > radius and power >= precision:
            digits.append(walk.step(power))
            power -= 1

        if allow_irrational and walk.dist >= radius:
            digit = walk.step(power + 1)
            if digit != 0:
                irrational = True
                digits.append(digit)
                power -= 1

        fill = (scale + 1 - precision) - len(digits)
        if fill > 0:
            digits.extend([0] * fill)
        if not digits:
            digits.append(0)

        power = scale + 1 - len(digits)
        if level_order is LevelOrder.LOW_FIRST:
            digits.reverse()

        logger.debug(
            f"cartesian {ccoord} -> digits={digits} power={power} irrational={irrational}"
        )
        return cls(digits, level_order, None, power, irrational)

    def equals(self, other: "Tetracoordinate") -> bool:
        if (
            not self.value.irrational
            and not other.value.irrational
            and self.value.sign == other.value.sign
        ):
            return self.value.equals(other.value)
        return self.equals_from_cartesian(other)

    def equals_from_cartesian(self, other: "Tetracoordinate") -> bool:
        diff = self.to_cartesian_coord().v - other.to_cartesian_coord().v
        return vector_magnitude(diff) < cell_radius(
            min(0, self.value.power, other.value.power)
        )

    @property
    def magnitude_from_cartesian(self) -> float:
        return self.to_cartesian_coord().magnitude

    def negate_from_cartesian(self) -> "Tetracoordinate":
        return Tetracoordinate.from_cartesian_coord(
            self.to_cartesian_coord().negate(),
            precision=min(0, self.value.power),
            level_order=self.value.level_order,
        )

    @staticmethod
    def add_from_cartesian(a: "Tetracoordinate", b: "Tetracoordinate") -> "Tetracoordinate":
        return Tetracoordinate.from_cartesian_coord(
            CartesianCoordinate.add(a.to_cartesian_coord(), b.to_cartesian_coord()),
            precision=min(a.value.power, b.value.power),
            level_order=a.value.level_order,
        )

    @staticmethod
    def subtract_from_cartesian(a: "Tetracoordinate", b: "Tetracoordinate") -> "Tetracoordinate":
        return Tetracoordinate.from_cartesian_coord(
            CartesianCoordinate.subtract(a.to_cartesian_coord(), b.to_cartesian_coord()),
            precision=min(a.value.power, b.value.power),
            level_order=a.value.level_order,
        )

    @staticmethod
    def multiply_from_cartesian(a: "Tetracoordinate", s: PowerScalar | Number) -> "Tetracoordinate":
        return Tetracoordinate.from_cartesian_coord(
            CartesianCoordinate.multiply(a.to_cartesian_coord(), s),
            precision=min(0, a.value.power),
            level_order=a.value.level_order,
        )

    @staticmethod
    def divide_from_cartesian(a: "Tetracoordinate", s: PowerScalar | Number) -> "Tetracoordinate":
        return Tetracoordinate.from_cartesian_coord(
            CartesianCoordinate.divide(a.to_cartesian_coord(), s),
            precision=min(0, a.value.power),
            level_order=a.value.level_order,
        )

    @staticmethod
    def pow_from_cartesian(a: "Tetracoordinate", s: PowerScalar | Number) -> "Tetracoordinate":
        return Tetracoordinate.from_cartesian_coord(
            CartesianCoordinate.pow(a.to_cartesian_coord(), s),
            precision=min(0, a.value.power),
            level_order=a.value.level_order,
        )

    def to_string(
        self,
        radix: RadixType | str | int = RadixType.Q,
        show_order: bool = False,
        show_num_levels: bool = False,
    ) -> str:
        parts = [f"{VEC_TCOORD_ID}[", self.value.to_string(radix)]
        if show_order:
            parts.append(f" order={self.value.level_order.value}")
        if show_num_levels:
            parts.append(f" levels={self.num_levels}")
        parts.append("]")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Tetracoordinate(value={self.value!r}, num_levels={self.num_levels})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Tetracoordinate):
            return NotImplemented
        return self.value == other.value and self.num_levels == other.num_levels

    def __hash__(self) -> int:
        return hash((self.value, self.num_levels))
