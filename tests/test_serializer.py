"""Tests for persisted value forms."""

import copy
from pathlib import Path

import pytest

from tetracoord_pkg.cartesian import CartesianCoordinate
from tetracoord_pkg.plugins import PluginRegistry
from tetracoord_pkg.powerscalar import parse_power_scalar
from tetracoord_pkg.serializer import Serializer, deserialize, serialize
from tetracoord_pkg.tetracoordinate import Tetracoordinate
from tetracoord_pkg.types import ExpressionTypeError, LoadError, ValueCollection

PLUGIN_PATH = str(Path(__file__).parent / "res" / "vector_average.py")


class TestSerialize:
    def test_passthrough(self):
        for value in (None, True, 3, 2.5):
            assert serialize(value) == value

    def test_power_scalar(self):
        assert serialize(parse_power_scalar("320.1", "q", True)) == {
            "type": "powerscalar",
            "digits": [0xE1],
            "radix": "q",
            "power": -1,
            "sign": 1,
            "irrational": True,
            "level_order": "h",
        }

    def test_decimal_digits_stay_integer(self):
        assert serialize(parse_power_scalar("-1.50", "d"))["digits"] == 150

    def test_vectors(self):
        tcoord = serialize(Tetracoordinate("31"))
        assert tcoord["type"] == "tc"
        assert tcoord["num_levels"] == 2
        assert tcoord["value"]["type"] == "powerscalar"

        ccoord = serialize(CartesianCoordinate(1, 2))
        assert ccoord["type"] == "cc"
        assert ccoord["x"]["digits"] == 1
        assert ccoord["y"]["digits"] == 2

    def test_collection(self):
        assert serialize(ValueCollection([1, False])) == {
            "type": "collection",
            "items": [1, False],
        }

    def test_unknown_value(self):
        with pytest.raises(ExpressionTypeError) as exc:
            serialize(object())
        assert exc.value.code == "NOT_SERIALIZABLE"


class TestDeserialize:
    @pytest.mark.parametrize(
        "value",
        [
            parse_power_scalar("320.1", "q", True),
            parse_power_scalar("1.02", "q", level_order="l"),
            parse_power_scalar("-1.50", "d"),
            parse_power_scalar("101", "b"),
            Tetracoordinate("1.1"),
            CartesianCoordinate(-0.5, 3),
            ValueCollection([Tetracoordinate("2"), 4]),
        ],
    )
    def test_round_trip(self, value):
        assert deserialize(serialize(value)) == value

    def test_input_not_modified(self):
        obj = serialize(Tetracoordinate("31"))
        snapshot = copy.deepcopy(obj)
        deserialize(obj)
        assert obj == snapshot

    def test_plugin_reference(self):
        registry = PluginRegistry()
        calculator = registry.load(PLUGIN_PATH)
        serializer = Serializer(registry)
        obj = serializer.serialize(calculator)
        assert obj == {"type": "exprcalc", "file_path": PLUGIN_PATH}
        assert serializer.deserialize(obj) is calculator

    @pytest.mark.parametrize(
        "obj",
        [
            "text",
            [1, 2],
            {"type": "unknown"},
            {"type": "powerscalar", "radix": "q"},
            {"type": "powerscalar", "digits": 1, "radix": "x"},
            {"type": "cc", "x": 1},
        ],
    )
    def test_malformed(self, obj):
        with pytest.raises(LoadError) as exc:
            deserialize(obj)
        assert exc.value.code == "MALFORMED_DATA"
