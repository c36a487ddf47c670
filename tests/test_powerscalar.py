"""Unit tests for power scalar parsing, formatting and arithmetic."""

import sys
import unittest

import sympy as sp

from tetracoord_pkg.powerscalar import (
    PowerScalar,
    digits_to_bytes,
    format_number,
    parse_power_scalar,
    parse_raw_digits,
    to_float,
)
from tetracoord_pkg.radix import IMAGINARY, LevelOrder, RadixType
from tetracoord_pkg.types import ArithmeticDomainError, ExpressionSyntaxError


class TestParsing(unittest.TestCase):
    """Test reading digit strings into power scalars."""

    def test_raw_digits(self):
        self.assertEqual(parse_raw_digits("-320.1"), (-1, [3, 2, 0, 1], -1))
        self.assertEqual(parse_raw_digits("12"), (1, [1, 2], 0))
        self.assertEqual(parse_raw_digits("1.02", LevelOrder.LOW_FIRST), (1, [1, 0, 2], -1))

    def test_multiple_points_rejected(self):
        with self.assertRaises(ExpressionSyntaxError) as ctx:
            parse_power_scalar("1.2.3", RadixType.Q)
        self.assertEqual(ctx.exception.code, "INVALID_DIGIT")

    def test_quaternary_packing(self):
        self.assertEqual(digits_to_bytes([3, 2, 0, 1], "q"), bytes([0xE1]))
        self.assertEqual(digits_to_bytes([2], "q"), bytes([0x02]))
        self.assertEqual(digits_to_bytes([2], "q", LevelOrder.LOW_FIRST), bytes([0x80]))
        self.assertEqual(digits_to_bytes([1, 0, 1], "b"), bytes([0x05]))

    def test_imaginary_digit(self):
        """A digit equal to the level count maps to the imaginary axis."""
        self.assertIs(parse_power_scalar("4", RadixType.Q), IMAGINARY)
        self.assertIs(parse_power_scalar("12", RadixType.B), IMAGINARY)

    def test_out_of_range_digit(self):
        with self.assertRaises(ExpressionSyntaxError) as ctx:
            parse_power_scalar("5", RadixType.Q)
        self.assertEqual(ctx.exception.code, "INVALID_DIGIT")

    def test_repeating_zero_is_rational(self):
        self.assertFalse(parse_power_scalar("10", RadixType.Q, irrational=True).irrational)


class TestToNumber(unittest.TestCase):
    """Test numeric values of power scalars."""

    def test_binary(self):
        self.assertEqual(parse_power_scalar("101", RadixType.B).to_number(), 5.0)

    def test_quaternary_fraction(self):
        self.assertEqual(parse_power_scalar("0.2", RadixType.Q).to_number(), 0.5)

    def test_decimal_keeps_sign(self):
        self.assertEqual(parse_power_scalar("-1.50", RadixType.D).to_number(), -1.5)
        self.assertEqual(parse_power_scalar("-1.50").to_number(signed=False), 1.5)

    def test_repeating_digit(self):
        scalar = parse_power_scalar("320.1", RadixType.Q, irrational=True)
        self.assertAlmostEqual(scalar.to_number(), 56 + 1 / 3)
        self.assertEqual(scalar.to_rational(), sp.Rational(169, 3))

    def test_repeating_digit_other_radixes(self):
        self.assertAlmostEqual(parse_power_scalar("0.1", "q", True).to_number(), 1 / 3)
        self.assertAlmostEqual(parse_power_scalar("0.3", "d", True).to_number(), 1 / 3)
        self.assertEqual(parse_power_scalar("0.1", "b", True).to_number(), 1.0)

    def test_positive_power(self):
        scalar = PowerScalar(bytes([0x01]), RadixType.Q, power=2)
        self.assertEqual(scalar.to_number(), 16.0)
        self.assertEqual(scalar.to_digit_string(), "100")

    def test_positive_power_repeating(self):
        scalar = PowerScalar(bytes([0x01]), RadixType.Q, power=2, irrational=True)
        self.assertEqual(scalar.to_digit_string(), "111")
        self.assertAlmostEqual(scalar.to_number(), 16 + 16 / 3)

    def test_low_first(self):
        scalar = parse_power_scalar("1.02", RadixType.Q, level_order=LevelOrder.LOW_FIRST)
        self.assertEqual(scalar.to_number(), 8.25)
        self.assertEqual(scalar.to_string(), "0q1.02")
        self.assertEqual(scalar.to_string(level_order="h"), "0q20.1")


class TestFormatting(unittest.TestCase):
    """Test digit strings written back out."""

    def test_round_trip_keeps_digits(self):
        self.assertEqual(parse_power_scalar("320.1", "q", True).to_string(), "0q320.1i")
        self.assertEqual(parse_power_scalar("-1.50", "d").to_string(), "-0d1.50")
        self.assertEqual(parse_power_scalar("0.2", "q").to_string(), "0q0.2")

    def test_cross_radix(self):
        self.assertEqual(parse_power_scalar("10", "q").to_string("d"), "0d4")
        self.assertEqual(parse_power_scalar("0.2", "q").to_string("b"), "0b0.1")
        self.assertEqual(parse_power_scalar("13", "d").to_string("q", False), "31")

    def test_repeating_suffix_only_in_own_radix(self):
        scalar = parse_power_scalar("0.1", "b", True)
        self.assertEqual(scalar.to_string(), "0b0.1i")
        self.assertEqual(scalar.to_string("d"), "0d1")

    def test_format_number(self):
        self.assertEqual(format_number(0.1), "0.1")
        self.assertEqual(format_number(7.0), "7")
        self.assertEqual(format_number(5, 2), "101")
        self.assertEqual(format_number(-2.5, 4), "-2.2")
        with self.assertRaises(ArithmeticDomainError):
            format_number(float("inf"))

    def test_to_float_overflow(self):
        self.assertEqual(to_float(3), 3.0)
        with self.assertRaises(ArithmeticDomainError):
            to_float(10**400)
        with self.assertRaises(ArithmeticDomainError):
            parse_power_scalar("1" + "0" * 400, "d").to_number()

    @unittest.skipUnless(
        getattr(sys, "get_int_max_str_digits", lambda: 0)(),
        "interpreter has no integer string conversion limit",
    )
    def test_format_number_digit_limit(self):
        """Integers past the interpreter's digit limit cannot be written out."""
        with self.assertRaises(ArithmeticDomainError):
            format_number(10**5000)
        with self.assertRaises(ArithmeticDomainError):
            parse_power_scalar("1" * 5000, "d")
        self.assertLessEqual(set(format_number(10**5000, 4)), set("0123"))


class TestArithmetic(unittest.TestCase):
    """Test arithmetic and equality between power scalars and numbers."""

    def test_equals(self):
        quarter = parse_power_scalar("0.1", "q")
        self.assertTrue(quarter.equals(0.25))
        self.assertFalse(quarter.equals(0.26))
        self.assertTrue(quarter.equals(parse_power_scalar("0.25", "d")))

    def test_result_takes_left_radix(self):
        half = parse_power_scalar("0.2", "q")
        self.assertEqual(PowerScalar.add(half, half).to_string(), "0q1")
        self.assertEqual(PowerScalar.add(parse_power_scalar("1.5"), half).to_string(), "0d2")
        self.assertEqual(PowerScalar.add(2, half).to_string(), "0d2.5")

    def test_multiply_and_subtract(self):
        three = parse_power_scalar("3", "q")
        self.assertEqual(PowerScalar.multiply(three, 3).to_string(), "0q21")
        self.assertEqual(PowerScalar.subtract(three, 5).to_string(), "-0q2")

    def test_abs_and_negate(self):
        minus_three = parse_power_scalar("-3", "q")
        self.assertEqual(PowerScalar.abs(minus_three).to_string(), "0q3")
        negated = minus_three.negate()
        self.assertEqual(negated.sign, 1)
        self.assertEqual(negated.digits, minus_three.digits)

    def test_domain_errors(self):
        with self.assertRaises(ArithmeticDomainError):
            PowerScalar.divide(parse_power_scalar("1"), 0)
        with self.assertRaises(ArithmeticDomainError):
            PowerScalar.pow(parse_power_scalar("-8"), 0.5)

    def test_clone_is_equal(self):
        scalar = parse_power_scalar("320.1", "q", True)
        self.assertEqual(scalar.clone(), scalar)
        self.assertIsNot(scalar.clone(), scalar)


if __name__ == "__main__":
    unittest.main()
