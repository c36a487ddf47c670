"""Fuzzing tests for parser and API with random inputs."""

import random
import string
import unittest

from tetracoord_pkg.api import evaluate
from tetracoord_pkg.parser import parse_expression
from tetracoord_pkg.types import EvalResult, TetracoordError


class TestParserFuzzing(unittest.TestCase):
    """Fuzz test parser with random inputs."""

    def test_random_strings(self):
        """Test parser either parses or raises a TetracoordError for random strings."""
        rng = random.Random(1234)
        alphabet = string.printable + "0q0b0d[]|~" * 3
        for _ in range(300):
            length = rng.randint(1, 60)
            random_str = "".join(rng.choices(alphabet, k=length))
            try:
                parse_expression(random_str)
            except TetracoordError:
                pass  # Expected

    def test_malformed_expressions(self):
        """Test parser rejects malformed expressions."""
        malformed = ["(((", ")))", "tc[", "0q1 +", "*/0q1", "|", "||", "tc[0q1]]", "var..a"]
        for expr in malformed:
            with self.assertRaises(TetracoordError, msg=expr):
                parse_expression(expr)


class TestEvaluateFuzzing(unittest.TestCase):
    """Fuzz test the API with edge-case expressions."""

    def test_edge_cases_return_results(self):
        """Test evaluate returns a structured result and never raises."""
        edge_cases = [
            "0",
            "-0q0",
            "0q0.0",
            "x",
            "var",
            "cc[1]",
            "tc[0q1] ** 0d2",
            "tc[0q1] / 0",
            "0 ** -1",
            "1.5 ** 10000",
            "cc[1, 2] ** 1000",
            "0b1.1i + 0q3.3i",
            "|tc[0q123]|",
            '"text" + 1',
        ]
        for expr in edge_cases:
            result = evaluate(expr)
            self.assertIsInstance(result, EvalResult)
            if not result.ok:
                self.assertIsNotNone(result.error_code, expr)


if __name__ == "__main__":
    unittest.main()
