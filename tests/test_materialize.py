"""
Tests for value materialization.

These tests verify:
    - Default substitution and omission of absent values
    - Read-only properties are never written
    - Arrays keep order and length
    - Nested objects, model references and formats
    - Failure paths name every segment down to the failing value
"""

from datetime import date
from decimal import Decimal, InvalidOperation

import pytest

from typedmodel.errors import MaterializationError
from typedmodel.examples import Item
from typedmodel.formats import FormatRegistry
from typedmodel.materialize import materialize_object, materialize_value
from typedmodel.props import MISSING, normalize_props


FORMATS = FormatRegistry.with_builtins()
FORMATS.register("decimal", parse=Decimal, render=str)


def schema_of(props):
    return {
        "type": "object",
        "properties": {k: v.to_schema() for k, v in normalize_props(props).items()},
    }


class TestMaterializeValue:
    """Test single value conversion."""

    def test_passthrough(self):
        schema = schema_of({"n": {"type": "integer"}})["properties"]["n"]
        assert materialize_value(schema, 5, FORMATS) == 5

    def test_missing_without_default(self):
        schema = schema_of({"n": {"type": "integer"}})["properties"]["n"]
        assert materialize_value(schema, MISSING, FORMATS) is MISSING

    def test_missing_takes_default(self):
        schema = schema_of({"n": {"type": "integer", "default": 7}})["properties"]["n"]
        assert materialize_value(schema, MISSING, FORMATS) == 7

    def test_none_is_not_missing(self):
        schema = schema_of({"n": {"type": ["integer", "null"], "default": 7}})["properties"]["n"]
        assert materialize_value(schema, None, FORMATS) is None

    def test_no_schema(self):
        assert materialize_value(None, 5, FORMATS) is MISSING

    def test_default_is_copied(self):
        """Mutable defaults are not shared between results."""
        schema = schema_of({"tags": {"type": "array", "default": []}})["properties"]["tags"]
        first = materialize_value(schema, MISSING, FORMATS)
        first.append("x")
        assert materialize_value(schema, MISSING, FORMATS) == []

    def test_format_parsed(self):
        schema = schema_of({"on": {"type": "string", "format": "date"}})["properties"]["on"]
        assert materialize_value(schema, "2021-06-15", FORMATS) == date(2021, 6, 15)

    def test_custom_format(self):
        schema = schema_of({"amount": {"type": "string", "format": "decimal"}})["properties"]["amount"]
        assert materialize_value(schema, "12.50", FORMATS) == Decimal("12.50")

    def test_unknown_format_keeps_raw(self):
        schema = schema_of({"id": {"type": "string", "format": "uuid"}})["properties"]["id"]
        assert materialize_value(schema, "abc", FORMATS) == "abc"

    def test_format_ignored_for_non_string_type(self):
        schema = schema_of({"n": {"type": "integer", "format": "date"}})["properties"]["n"]
        assert materialize_value(schema, 3, FORMATS) == 3

    def test_nullable_formatted_string(self):
        schema = schema_of({"on": {"type": ["string", "null"], "format": "date"}})["properties"]["on"]
        assert materialize_value(schema, None, FORMATS) is None
        assert materialize_value(schema, "2021-06-15", FORMATS) == date(2021, 6, 15)

    def test_unresolved_passthrough(self):
        schema = schema_of({"any": {"description": "free form"}})["properties"]["any"]
        value = {"nested": [1, 2]}
        assert materialize_value(schema, value, FORMATS) is value

    def test_model_ref_constructed(self):
        schema = schema_of({"item": {"type": Item}})["properties"]["item"]
        item = materialize_value(schema, {"price": 2}, FORMATS)
        assert isinstance(item, Item)
        assert item.quantity == 1


class TestArrays:
    """Test element-wise array conversion."""

    def test_order_and_length(self):
        schema = schema_of({"items": {"type": "array", "items": {"type": Item}}})["properties"]["items"]
        items = materialize_value(schema, [{"sku": "a", "price": 1}, {"sku": "b", "price": 2}], FORMATS)
        assert [i.sku for i in items] == ["a", "b"]
        assert all(isinstance(i, Item) for i in items)

    def test_formats_in_array(self):
        schema = schema_of({"days": {"type": "array", "items": {"type": "string", "format": "date"}}})
        days = materialize_value(schema["properties"]["days"], ["2021-01-01", "2021-01-02"], FORMATS)
        assert days == [date(2021, 1, 1), date(2021, 1, 2)]

    def test_new_list(self):
        schema = schema_of({"xs": {"type": "array", "items": {"type": "integer"}}})["properties"]["xs"]
        raw = [1, 2]
        result = materialize_value(schema, raw, FORMATS)
        assert result == raw
        assert result is not raw

    def test_array_without_items(self):
        schema = schema_of({"xs": {"type": "array"}})["properties"]["xs"]
        assert materialize_value(schema, [1, "a"], FORMATS) == [1, "a"]


class TestMaterializeObject:
    """Test whole-object conversion."""

    def test_absent_properties_omitted(self):
        schema = schema_of({"a": {"type": "string"}, "b": {"type": "string"}})
        assert materialize_object(schema, {"a": "x"}, FORMATS) == {"a": "x"}

    def test_read_only_skipped(self):
        schema = schema_of({"a": {"type": "string"}, "total": {"type": "number", "readOnly": True}})
        assert materialize_object(schema, {"a": "x", "total": 3}, FORMATS) == {"a": "x"}

    def test_declared_order(self):
        schema = schema_of({"b": {"type": "string"}, "a": {"type": "string", "default": "z"}})
        assert list(materialize_object(schema, {"b": "y"}, FORMATS)) == ["b", "a"]

    def test_nested_object(self):
        schema = schema_of({
            "meta": {
                "type": "object",
                "properties": {"on": {"type": "string", "format": "date"}, "by": {"type": "string"}},
            },
        })
        result = materialize_object(schema, {"meta": {"on": "2021-06-15"}}, FORMATS)
        assert result == {"meta": {"on": date(2021, 6, 15)}}

    def test_object_without_properties_copied(self):
        schema = schema_of({"extra": {"type": "object"}})
        raw = {"k": 1}
        result = materialize_object(schema, {"extra": raw}, FORMATS)
        assert result["extra"] == raw
        assert result["extra"] is not raw


class TestFailurePaths:
    """Test path tracing of conversion failures."""

    def test_leaf_failure(self):
        schema = schema_of({"amount": {"type": "string", "format": "decimal"}})
        with pytest.raises(MaterializationError) as exc_info:
            materialize_object(schema, {"amount": "twelve"}, FORMATS)

        err = exc_info.value
        assert err.path == ("amount",)
        assert isinstance(err.__cause__, InvalidOperation)
        assert err.kind == type(err.__cause__).__name__

    def test_nested_array_failure(self):
        schema = schema_of({
            "events": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {"cost": {"type": "string", "format": "decimal"}},
                },
            },
        })
        values = {"events": [{"cost": "1"}, {"cost": "1.5"}, {"cost": "oops"}]}
        with pytest.raises(MaterializationError) as exc_info:
            materialize_object(schema, values, FORMATS)

        assert exc_info.value.path == ("events", 2, "cost")
        assert exc_info.value.location == "events[2].cost"

    def test_nested_model_violation(self):
        """A nested model's validation failure points at the offending field."""
        schema = schema_of({"items": {"type": "array", "items": {"type": Item}}})
        with pytest.raises(MaterializationError) as exc_info:
            materialize_object(schema, {"items": [{"price": 1}, {"price": "x"}]}, FORMATS)

        err = exc_info.value
        assert err.kind == "InvalidValuesError"
        assert err.path == ("items", 1, "price")
        assert len(err.violations) == 1

    def test_prefixed_returns_new_error(self):
        err = MaterializationError("ValueError", "bad", path=("b",))
        outer = err.prefixed("a", 0)
        assert outer.path == ("a", 0, "b")
        assert err.path == ("b",)

    def test_rooted_location(self):
        err = MaterializationError("ValueError", "bad", path=("items", 2, "price"))
        assert err.rooted("Order").location == "Order.items[2].price"
        assert "Order.items[2].price" in str(err.rooted("Order"))
