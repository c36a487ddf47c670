"""Power scalar numerals.

A power scalar is a signed numeral in radix 2, 4 or 10 with an explicit digit
place ``power`` and an optional infinitely repeating least significant digit.
Binary and quaternary digits are packed into bytes, decimal digits are kept as
a single integer. Arithmetic goes through floats and re-encodes the result in
the radix of the left operand.
"""

from __future__ import annotations

import math
import numbers
import operator
from dataclasses import dataclass, replace
from typing import Any, Callable, ClassVar, Iterable, Union

import numpy as np
import sympy as sp

from .config import SCALAR_EQUALS_PRECISION
from .radix import (
    BITS_PER_LEVEL,
    DEFAULT_LEVEL_ORDER,
    IMAGINARY,
    IRRATIONAL_DENOMINATOR,
    LEVELS_PER_BYTE,
    VALUES_PER_LEVEL,
    LevelOrder,
    RadixType,
    level_mask,
    to_level_order,
    to_radix,
)
from .symbols import SCALAR_TYPE
from .types import ArithmeticDomainError, ExpressionSyntaxError, ExpressionTypeError

Number = Union[int, float]

_DIGIT_CHARS = "0123456789"


def is_number(value: Any) -> bool:
    """Return True for real numbers, excluding booleans."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def to_float(value: Number) -> float:
    """Convert a real number to a float, raising ArithmeticDomainError when it overflows."""
    try:
        return float(value)
    except OverflowError as err:
        raise ArithmeticDomainError(f"number is too large to represent: {err}") from err


def _int_to_base(value: int, base: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    chars = []
    while value:
        value, digit = divmod(value, base)
        chars.append(_DIGIT_CHARS[digit])
    return sign + "".join(reversed(chars))


def format_number(value: Number, base: int = 10) -> str:
    """Format a number positionally in base 2, 4 or 10, never in exponent notation.

    Floats are dyadic rationals, so their binary and quaternary expansions
    always terminate and are written out exactly.

    Args:
        value: Number to format
        base: Target base

    Returns:
        Digit string with an optional leading '-' and fractional point

    Raises:
        ArithmeticDomainError: If the value is infinite, NaN or too long to write out
    """
    if isinstance(value, numbers.Integral):
        value = int(value)
        if base != 10:
            return _int_to_base(value, base)
        try:
            return str(value)
        except ValueError as err:
            raise ArithmeticDomainError(f"integer is too long to format: {err}") from err

    value = to_float(value)
    if not math.isfinite(value):
        raise ArithmeticDomainError(f"cannot represent {value} as a power scalar")
    if value == 0:
        return "0"
    if base == 10:
        return np.format_float_positional(value, trim="-")

    sign = "-" if value < 0 else ""
    value = abs(value)
    whole = int(value)
    frac = value - whole
    text = _int_to_base(whole, base)
    if frac:
        fraction_digits = []
        while frac:
            frac *= base
            digit = int(frac)
            fraction_digits.append(_DIGIT_CHARS[digit])
            frac -= digit
        text = f"{text}.{''.join(fraction_digits)}"
    return sign + text


def checked_arithmetic(op: Callable[..., Any], *operands: Number) -> Number:
    """Apply a float operation, raising ArithmeticDomainError when the result is not a real number."""
    try:
        result = op(*operands)
    except ZeroDivisionError as err:
        raise ArithmeticDomainError("division by zero") from err
    except OverflowError as err:
        raise ArithmeticDomainError("numeric overflow") from err
    except ValueError as err:
        raise ArithmeticDomainError(f"math domain error: {err}") from err
    if isinstance(result, complex):
        raise ArithmeticDomainError("operation has no real result")
    if isinstance(result, float) and not math.isfinite(result):
        raise ArithmeticDomainError(f"operation result {result} is not finite")
    return result


def parse_raw_digits(
    raw: str, level_order: LevelOrder = DEFAULT_LEVEL_ORDER
) -> tuple[int, list[int], int]:
    """Split a raw digit string into sign, digit values and power.

    The power is the negated count of digits on the least significant side
    of the fractional point.

    Returns:
        Tuple of (sign, digits, power)
    """
    level_order = to_level_order(level_order)
    sign = 1
    text = raw
    if text.startswith("-"):
        sign = -1
        text = text[1:]
    elif text.startswith("+"):
        text = text[1:]

    power = 0
    point_seen = False
    digits: list[int] = []
    for i, char in enumerate(text):
        if char == ".":
            if point_seen:
                raise ExpressionSyntaxError(
                    f"more than one fractional point in {raw!r}", code="INVALID_DIGIT"
                )
            point_seen = True
            if level_order is LevelOrder.HIGH_FIRST:
                power = -(len(text) - 1 - i)
            else:
                power = -i
        elif char in _DIGIT_CHARS:
            digits.append(int(char))
        else:
            raise ExpressionSyntaxError(
                f"invalid character {char!r} in scalar literal {raw!r}",
                code="INVALID_DIGIT",
            )
    return sign, digits, power


def digits_to_bytes(
    digits: Iterable[int | str],
    radix: RadixType | str,
    level_order: LevelOrder | str = DEFAULT_LEVEL_ORDER,
) -> bytes | None:
    """Pack level digits into bytes, padding zeros on the insignificant side.

    Returns:
        Packed digits, or IMAGINARY if a digit equals the level count of the radix

    Raises:
        ExpressionSyntaxError: If a digit is out of range for the radix
    """
    radix = to_radix(radix)
    level_order = to_level_order(level_order)
    if not radix.is_packed:
        raise ValueError("decimal digits are not packed into bytes")

    values = VALUES_PER_LEVEL[radix]
    levels = []
    for digit in digits:
        digit = int(digit)
        if digit == values:
            return IMAGINARY
        if digit < 0 or digit > values:
            raise ExpressionSyntaxError(
                f"digit {digit} is out of range for radix {radix.value}",
                code="INVALID_DIGIT",
            )
        levels.append(digit)

    levels_per_byte = LEVELS_PER_BYTE[radix]
    bits = BITS_PER_LEVEL[radix]
    pad = [0] * (-len(levels) % levels_per_byte)
    levels = pad + levels if level_order is LevelOrder.HIGH_FIRST else levels + pad

    packed = bytearray()
    for start in range(0, len(levels), levels_per_byte):
        byte = 0
        for digit in levels[start : start + levels_per_byte]:
            byte = (byte << bits) | digit
        packed.append(byte)
    return bytes(packed)


def parse_power_scalar(
    raw: str | Number,
    radix: RadixType | str = RadixType.D,
    irrational: bool = False,
    level_order: LevelOrder | str = DEFAULT_LEVEL_ORDER,
) -> "PowerScalar | None":
    """Parse a raw digit string or number into a power scalar.

    Numbers are first written positionally in base 10, and their digit
    characters are then read in ``radix``.

    Args:
        raw: Digit string like "-320.1" or a number
        radix: Radix the digits are read in
        irrational: Whether the least significant digit repeats forever
        level_order: Order in which ``raw`` lists its digits

    Returns:
        PowerScalar, or IMAGINARY if a digit maps to the imaginary axis
    """
    radix = to_radix(radix)
    level_order = to_level_order(level_order)
    raw_str = format_number(raw) if is_number(raw) else str(raw).strip()

    sign, digits, power = parse_raw_digits(raw_str, level_order)
    if not digits:
        raise ExpressionSyntaxError(
            f"no digits in scalar literal {raw_str!r}", code="INVALID_DIGIT"
        )
    least = digits[-1] if level_order is LevelOrder.HIGH_FIRST else digits[0]
    irrational = irrational and least != 0

    if radix is RadixType.D:
        if level_order is LevelOrder.LOW_FIRST:
            digits.reverse()
        try:
            value = int("".join(_DIGIT_CHARS[d] for d in digits))
        except ValueError as err:
            raise ArithmeticDomainError(f"scalar literal is too long: {err}") from err
        return PowerScalar(
            value,
            RadixType.D,
            power,
            sign,
            irrational,
            LevelOrder.HIGH_FIRST,
        )

    packed = digits_to_bytes(digits, radix, level_order)
    if packed is IMAGINARY:
        return IMAGINARY
    return PowerScalar(packed, radix, power, sign, irrational, level_order)


def _operand_number(value: Any) -> Number:
    if isinstance(value, PowerScalar):
        return value.to_number()
    if is_number(value):
        return value
    raise ExpressionTypeError(
        f"{type(value).__name__} is not a scalar operand", code="MIXED_TYPES"
    )


@dataclass(frozen=True)
class PowerScalar:
    """Immutable radix numeral with a digit place power.

    ``digits`` is an int for decimal scalars and packed bytes for binary and
    quaternary scalars. Decimal scalars are always stored high level first.
    """

    type: ClassVar[str] = SCALAR_TYPE

    digits: int | bytes = 0
    radix: RadixType | None = None
    power: int = 0
    sign: int = 1
    irrational: bool = False
    level_order: LevelOrder = DEFAULT_LEVEL_ORDER

    def __post_init__(self) -> None:
        digits = self.digits
        sign = -1 if self.sign < 0 else 1
        level_order = to_level_order(self.level_order)

        if isinstance(digits, (bytes, bytearray, memoryview, list, tuple)):
            digits = bytes(digits)
            radix = to_radix(self.radix) if self.radix is not None else RadixType.B
            if not radix.is_packed:
                raise ValueError("decimal power scalar digits must be an integer")
        else:
            if isinstance(digits, float) and not digits.is_integer():
                raise ValueError(f"decimal digits must be integral, got {digits}")
            digits = int(digits)
            radix = to_radix(self.radix) if self.radix is not None else RadixType.D
            if radix.is_packed:
                raise ValueError(
                    f"radix {radix.value} power scalar digits must be bytes"
                )
            if digits < 0:
                digits = -digits
                sign = -sign
            if level_order is LevelOrder.LOW_FIRST:
                digits = int(str(digits)[::-1])
                level_order = LevelOrder.HIGH_FIRST

        object.__setattr__(self, "digits", digits)
        object.__setattr__(self, "radix", radix)
        object.__setattr__(self, "power", int(self.power))
        object.__setattr__(self, "sign", sign)
        object.__setattr__(self, "level_order", level_order)
        object.__setattr__(
            self,
            "irrational",
            bool(self.irrational) and self.least_significant_digit() != 0,
        )

    def levels(self) -> list[int]:
        """Level digits in stored order, including byte padding."""
        if not self.radix.is_packed:
            return [int(c) for c in str(self.digits)]
        bits = BITS_PER_LEVEL[self.radix]
        mask = level_mask(self.radix)
        shifts = [i * bits for i in reversed(range(LEVELS_PER_BYTE[self.radix]))]
        return [(byte >> shift) & mask for byte in self.digits for shift in shifts]

    def least_significant_digit(self) -> int:
        if not self.radix.is_packed:
            return self.digits % 10
        if not self.digits:
            return 0
        mask = level_mask(self.radix)
        if self.level_order is LevelOrder.HIGH_FIRST:
            return self.digits[-1] & mask
        top_shift = (LEVELS_PER_BYTE[self.radix] - 1) * BITS_PER_LEVEL[self.radix]
        return (self.digits[0] >> top_shift) & mask

    def _integer_digits(self) -> int:
        """All digits read as one integer, ignoring power and sign."""
        if not self.radix.is_packed:
            return self.digits
        levels = self.levels()
        if self.level_order is LevelOrder.LOW_FIRST:
            levels.reverse()
        base = self.radix.base
        value = 0
        for digit in levels:
            value = value * base + digit
        return value

    def to_number(self, signed: bool = True) -> float:
        """Convert to a float, including the repeating digit tail.

        Raises:
            ArithmeticDomainError: If the value does not fit in a float
        """
        base = self.radix.base
        num: Number = self._integer_digits()
        try:
            if self.power >= 0:
                num = num * base**self.power
            else:
                num = num / base ** (-self.power)
            if self.irrational:
                num = num + self.least_significant_digit() * (
                    base**self.power
                ) / IRRATIONAL_DENOMINATOR[self.radix]
        except OverflowError as err:
            raise ArithmeticDomainError(f"power scalar is too large to represent: {err}") from err
        num = to_float(num)
        return self.sign * num if signed else num

    def to_rational(self) -> sp.Rational:
        """Exact value as a sympy Rational."""
        scale = sp.Integer(self.radix.base) ** self.power
        value = sp.Integer(self._integer_digits()) * scale
        if self.irrational:
            value += (
                sp.Rational(
                    self.least_significant_digit(), IRRATIONAL_DENOMINATOR[self.radix]
                )
                * scale
            )
        return self.sign * value

    def to_digit_string(
        self, radix: RadixType | str | int | None = None, show_power: bool = True
    ) -> str:
        """Digits in stored order, without sign, radix prefix or repeating suffix.

        When ``radix`` differs from the stored radix the value is converted
        through a float and written in the target base.
        """
        radix = self.radix if radix is None else to_radix(radix)
        if radix is not self.radix:
            return format_number(self.to_number(signed=False), radix.base)

        high_first = self.level_order is LevelOrder.HIGH_FIRST
        if not self.radix.is_packed:
            text = str(self.digits)
        else:
            text = "".join(_DIGIT_CHARS[d] for d in self.levels())
            text = (text.lstrip("0") if high_first else text.rstrip("0")) or "0"

        if not show_power or self.power == 0:
            return text
        if self.power < 0:
            width = -self.power + 1
            if high_first:
                text = text.rjust(width, "0")
                point = len(text) + self.power
            else:
                text = text.ljust(width, "0")
                point = -self.power
            return f"{text[:point]}.{text[point:]}"

        fill = (
            _DIGIT_CHARS[self.least_significant_digit()] if self.irrational else "0"
        ) * self.power
        return text + fill if high_first else fill + text

    def to_string(
        self,
        radix: RadixType | str | int | None = None,
        show_radix_prefix: bool = True,
        level_order: LevelOrder | str | None = None,
    ) -> str:
        """Format as ``[-][0<radix>]digits[i]``."""
        radix = self.radix if radix is None else to_radix(radix)
        level_order = (
            self.level_order if level_order is None else to_level_order(level_order)
        )
        text = self.to_digit_string(radix)
        if level_order is not self.level_order:
            text = text[::-1]
        sign = "-" if self.sign < 0 else ""
        prefix = f"0{radix.value}" if show_radix_prefix else ""
        suffix = "i" if self.irrational and radix is self.radix else ""
        return f"{sign}{prefix}{text}{suffix}"

    def __str__(self) -> str:
        return self.to_string()

    def __float__(self) -> float:
        return self.to_number()

    def equals(self, other: "PowerScalar | Number", precision: int | None = None) -> bool:
        """Numeric equality after rounding the difference to ``precision`` decimal places."""
        if precision is None:
            precision = SCALAR_EQUALS_PRECISION
        diff = self.to_number() - _operand_number(other)
        return math.floor(diff * 10**precision + 0.5) == 0

    def clone(self) -> "PowerScalar":
        return replace(self)

    def negate(self) -> "PowerScalar":
        """Return a copy with the opposite sign."""
        return replace(self, sign=-self.sign)

    @staticmethod
    def _eval(op: Callable[..., Any], *operands: "PowerScalar | Number") -> "PowerScalar":
        result = checked_arithmetic(op, *(_operand_number(x) for x in operands))
        left = operands[0]
        if is_number(left) or left.radix is RadixType.D:
            return parse_power_scalar(result, RadixType.D)
        return parse_power_scalar(format_number(result, left.radix.base), left.radix)

    @staticmethod
    def add(a: "PowerScalar | Number", b: "PowerScalar | Number") -> "PowerScalar":
        return PowerScalar._eval(operator.add, a, b)

    @staticmethod
    def subtract(a: "PowerScalar | Number", b: "PowerScalar | Number") -> "PowerScalar":
        return PowerScalar._eval(operator.sub, a, b)

    @staticmethod
    def multiply(a: "PowerScalar | Number", b: "PowerScalar | Number") -> "PowerScalar":
        return PowerScalar._eval(operator.mul, a, b)

    @staticmethod
    def divide(a: "PowerScalar | Number", b: "PowerScalar | Number") -> "PowerScalar":
        return PowerScalar._eval(operator.truediv, a, b)

    @staticmethod
    def pow(a: "PowerScalar | Number", b: "PowerScalar | Number") -> "PowerScalar":
        return PowerScalar._eval(operator.pow, a, b)

    @staticmethod
    def abs(a: "PowerScalar | Number") -> "PowerScalar":
        return PowerScalar._eval(abs, a)
