"""Radix model shared by power scalars and tetracoordinates.

Binary and quaternary digits are packed big-endian into bytes, each level
occupying ``bits_per_level`` bits. Decimal digits are stored as an integer.
"""

from __future__ import annotations

from enum import Enum


class RadixType(str, Enum):
    """Number base of a power scalar."""

    B = "b"
    Q = "q"
    D = "d"

    @property
    def base(self) -> int:
        return RADIX_BASE[self]

    @property
    def is_packed(self) -> bool:
        """True when digits are stored as a byte buffer."""
        return self is not RadixType.D

    @classmethod
    def from_base(cls, base: int) -> "RadixType":
        for radix, value in RADIX_BASE.items():
            if value == base:
                return radix
        raise ValueError(f"unsupported radix base {base}")


class LevelOrder(str, Enum):
    """Direction in which digits are written, most significant first or last."""

    HIGH_FIRST = "h"
    LOW_FIRST = "l"


DEFAULT_LEVEL_ORDER = LevelOrder.HIGH_FIRST

# Digit value equal to a radix's level count; maps to the imaginary axis.
IMAGINARY = None

RADIX_BASE = {
    RadixType.B: 2,
    RadixType.Q: 4,
    RadixType.D: 10,
}

BITS_PER_LEVEL = {
    RadixType.B: 1,
    RadixType.Q: 2,
}

VALUES_PER_LEVEL = {
    RadixType.B: 2,
    RadixType.Q: 4,
}

LEVELS_PER_BYTE = {
    RadixType.B: 8,
    RadixType.Q: 4,
}

# Denominator of the infinitely repeating least significant digit.
# Binary 0.111... = 1, quaternary 0.111... = 1/3, decimal 0.111... = 1/9.
IRRATIONAL_DENOMINATOR = {
    RadixType.B: 1,
    RadixType.Q: 3,
    RadixType.D: 9,
}


def to_radix(radix: RadixType | str | int) -> RadixType:
    """Coerce a radix tag, enum member or numeric base into a RadixType."""
    if isinstance(radix, RadixType):
        return radix
    if isinstance(radix, int) and not isinstance(radix, bool):
        return RadixType.from_base(radix)
    return RadixType(radix)


def to_level_order(level_order: LevelOrder | str | None) -> LevelOrder:
    if level_order is None:
        return DEFAULT_LEVEL_ORDER
    return LevelOrder(level_order)


def level_mask(radix: RadixType) -> int:
    return (1 << BITS_PER_LEVEL[radix]) - 1
