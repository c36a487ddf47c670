"""Unit tests for parser module."""

import unittest

from tetracoord_pkg.parser import (
    Lexer,
    NumberLiteral,
    is_balanced,
    parse_expression,
    preprocess,
)
from tetracoord_pkg.types import ParseError, ValidationError


class TestPreprocess(unittest.TestCase):
    """Test preprocessing functions."""

    def test_strips_whitespace(self):
        self.assertEqual(preprocess("  tc[0q1] "), "tc[0q1]")

    def test_empty_input(self):
        with self.assertRaises(ValidationError) as ctx:
            preprocess("   ")
        self.assertEqual(ctx.exception.code, "EMPTY_INPUT")

    def test_too_long(self):
        with self.assertRaises(ValidationError) as ctx:
            preprocess("1+" * 5001)
        self.assertEqual(ctx.exception.code, "TOO_LONG")

    def test_unbalanced(self):
        with self.assertRaises(ValidationError) as ctx:
            preprocess("tc[0q1")
        self.assertEqual(ctx.exception.code, "UNBALANCED")

    def test_non_string(self):
        with self.assertRaises(ValidationError) as ctx:
            preprocess(12)
        self.assertEqual(ctx.exception.code, "INVALID_TYPE")


class TestBalance(unittest.TestCase):
    """Test bracket balancing."""

    def test_balanced(self):
        self.assertEqual(is_balanced("cc[(1), 2]"), (True, None))

    def test_mismatched(self):
        self.assertEqual(is_balanced("cc[1)"), (False, 4))
        self.assertEqual(is_balanced("((1)"), (False, 0))

    def test_quoted_brackets_ignored(self):
        self.assertEqual(is_balanced('exprcalc["a(b.py"]'), (True, None))


class TestLexer(unittest.TestCase):
    """Test tokenizing of radix literals and repeating digit suffixes."""

    def types(self, text):
        return [(t.type, t.value) for t in Lexer(text).tokenize()]

    def test_radix_literal(self):
        self.assertEqual(
            self.types("0q320.1i"),
            [("RADIX", "q"), ("NUMBER", "320.1"), ("IRRATIONAL", "i"), ("EOF", "")],
        )

    def test_ellipsis_suffix(self):
        self.assertIn(("IRRATIONAL", "..."), self.types("0d0.3..."))

    def test_repeating_zero_dropped(self):
        self.assertNotIn("IRRATIONAL", [t for t, _ in self.types("0q10i")])

    def test_identifier_with_dollar(self):
        self.assertIn(("IDENT", "$ans"), self.types("var.$ans"))

    def test_unexpected_character(self):
        with self.assertRaises(ParseError):
            Lexer("1 # 2").tokenize()


class TestParseExpression(unittest.TestCase):
    """Test tree shapes produced by the parser."""

    def test_precedence(self):
        self.assertEqual(
            parse_expression("1 + 2 * 3"),
            ["+", [None, "1"], ["*", [None, "2"], [None, "3"]]],
        )

    def test_exponent_right_associative(self):
        self.assertEqual(
            parse_expression("2 ** 3 ** 2"),
            ["**", [None, "2"], ["**", [None, "3"], [None, "2"]]],
        )

    def test_number_literal_keeps_digits(self):
        tree = parse_expression("1.50")
        self.assertIsInstance(tree[1], NumberLiteral)
        self.assertEqual(tree[1], "1.50")

    def test_radix_and_repeating(self):
        self.assertEqual(
            parse_expression("0q320.1i"), ["@", "q", ["~", [None, "320.1"]]]
        )
        self.assertEqual(parse_expression("0q10i"), ["@", "q", [None, "10"]])

    def test_vectors(self):
        self.assertEqual(parse_expression("tc[0q1]"), ["[]", "tc", ["@", "q", [None, "1"]]])
        self.assertEqual(
            parse_expression("cc[1, 2]"), ["[]", "cc", [",", [None, "1"], [None, "2"]]]
        )

    def test_magnitude(self):
        self.assertEqual(
            parse_expression("|cc[3, 4]|"),
            ["||", ["[]", "cc", [",", [None, "3"], [None, "4"]]]],
        )

    def test_prefix_minus(self):
        self.assertEqual(
            parse_expression("-tc[1] * 2"),
            ["*", ["-", ["[]", "tc", [None, "1"]]], [None, "2"]],
        )

    def test_assignment_chain(self):
        self.assertEqual(
            parse_expression("var.a = var.b = 1"),
            ["=", [".", "var", "a"], ["=", [".", "var", "b"], [None, "1"]]],
        )

    def test_member_access(self):
        self.assertEqual(parse_expression('var["a"]'), ["[]", "var", [None, "a"]])
        self.assertEqual(
            parse_expression("cc[1, 2].x"),
            [".", ["[]", "cc", [",", [None, "1"], [None, "2"]]], "x"],
        )

    def test_call_and_group(self):
        self.assertEqual(
            parse_expression('exprcalc["avg.py"](1, 2)'),
            ["()", ["[]", "exprcalc", [None, "avg.py"]], [",", [None, "1"], [None, "2"]]],
        )
        self.assertEqual(parse_expression("var.f()"), ["()", [".", "var", "f"], None])
        self.assertEqual(parse_expression("(1)"), ["()", [None, "1"]])

    def test_equality_and_booleans(self):
        self.assertEqual(parse_expression("true === false"), ["===", [None, True], [None, False]])
        self.assertEqual(parse_expression("a !== b"), ["!==", "a", "b"])


class TestParseErrors(unittest.TestCase):
    """Test malformed expressions."""

    def assertParseError(self, text, code="PARSE_ERROR"):
        with self.assertRaises(ParseError) as ctx:
            parse_expression(text)
        self.assertEqual(ctx.exception.code, code)

    def test_incomplete(self):
        self.assertParseError("1 +")

    def test_adjacent_operands(self):
        self.assertParseError("1 2")

    def test_empty_brackets(self):
        self.assertParseError("tc[]")
        self.assertParseError("()")

    def test_missing_member_name(self):
        self.assertParseError("var.1")

    def test_unterminated_string(self):
        self.assertParseError('"avg.py')

    def test_too_deep(self):
        self.assertParseError("(" * 150 + "1" + ")" * 150, "TOO_DEEP")


if __name__ == "__main__":
    unittest.main()
