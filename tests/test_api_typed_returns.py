"""Test that API functions return typed dataclasses."""

from tetracoord_pkg.api import evaluate, format_value, validate_expression
from tetracoord_pkg.cartesian import CartesianCoordinate
from tetracoord_pkg.tetracoordinate import Tetracoordinate
from tetracoord_pkg.types import EvalResult, ValueCollection
from tetracoord_pkg.variable_context import VariableContext


class TestAPITypedReturns:
    """Test that all API functions return typed dataclasses."""

    def test_evaluate_returns_eval_result(self):
        """Test that evaluate() returns EvalResult."""
        result = evaluate("tc[0q0.2 + 0q0.2]")
        assert isinstance(result, EvalResult)
        assert result.ok is True
        assert result.result == "tc[0q1]"
        assert result.value_type == "tc"

    def test_evaluate_error_returns_eval_result(self):
        """Test that evaluate() errors return EvalResult instead of raising."""
        result = evaluate("1 +")
        assert isinstance(result, EvalResult)
        assert result.ok is False
        assert result.error is not None
        assert result.error_code == "PARSE_ERROR"

    def test_value_types(self):
        """Test the reported value family of each kind of result."""
        assert evaluate("7 / 2").value_type == "number"
        assert evaluate("0q3").value_type == "powerscalar"
        assert evaluate("cc[1, 2]").value_type == "cc"
        assert evaluate("true").value_type == "boolean"
        assert evaluate("1, 2").value_type == "collection"

    def test_scalar_radix(self):
        """Test scalars written in a requested radix."""
        assert evaluate("0d10", scalar_radix="q").result == "0q22"
        assert evaluate("10", scalar_radix="b").result == "1010"
        assert evaluate("7 / 2").result == "3.5"

    def test_vector_format(self):
        """Test vectors converted before they are written."""
        assert evaluate("tc[0q1]", vector_format="cc").result == "cc[0d0,0d1]"
        assert evaluate("cc[0, 1]", vector_format="tc").result == "tc[0q1]"
        assert evaluate("tc[0q31]", scalar_radix="d").result == "tc[0d13]"

    def test_exact(self):
        """Test exact rational values."""
        assert evaluate("0q0.1i", exact=True).exact == "1/3"
        assert evaluate("0.1", exact=True).exact == "1/10"
        assert evaluate("cc[1, 0.5]", exact=True).exact == "(1, 1/2)"
        assert evaluate("0q0.1i").exact is None

    def test_to_dict(self):
        """Test the JSON form of results."""
        assert evaluate("true").to_dict() == {"ok": True, "result": "true", "type": "boolean"}
        data = evaluate("").to_dict()
        assert data["ok"] is False
        assert data["error_code"] == "EMPTY_INPUT"

    def test_context_is_updated(self):
        """Test that assignments land in the given context."""
        ctx = VariableContext()
        assert evaluate("var.a = tc[0q2]", ctx).ok
        assert evaluate("var.a * 0d3 === tc[0q202]", ctx).result == "true"

    def test_validate_expression(self):
        """Test syntax validation without evaluation."""
        assert validate_expression("var.a = tc[0q1]") == (True, None)
        ok, error = validate_expression("tc[0q1")
        assert ok is False
        assert error is not None


class TestFormatValue:
    def test_collection(self):
        value = ValueCollection([1, Tetracoordinate("2")])
        assert format_value(value) == "1, tc[0q2]"

    def test_vectors(self):
        assert format_value(CartesianCoordinate(1, -2.5), "b") == "cc[0b1,-0b10.1]"
        assert format_value(Tetracoordinate("1"), vector_format="cc") == "cc[0d0,0d1]"

    def test_missing_value(self):
        assert format_value(None) == "none"
