"""Const normalizer tests."""

from __future__ import annotations

import copy
import math

import pytest
from openapi_typegen.schema_normalization.const_normalizer import (
    ABSENT,
    InvalidConstValueError,
    assert_valid_const,
    create_const_schema,
    extract_const_values,
    has_const,
    normalize_const,
)
from openapi_typegen.schema_normalization.type_inference import infer_type

CONDITIONAL_SCHEMA = {
    "if": {"properties": {"type": {"const": "premium"}}},
    "then": {"properties": {"level": {"const": "gold"}}},
    "else": {"properties": {"level": {"const": "standard"}}},
}

RICH_SCHEMA = {
    "type": "object",
    "properties": {
        "kind": {"const": "order"},
        "lines": {"type": "array", "items": {"properties": {"unit": {"const": "kg"}}}},
        "pair": {"prefixItems": [{"const": 1}, {"const": 2.5}]},
        "tuple": {"items": [{"const": True}, {"const": None}]},
        "extra": {"additionalProperties": {"const": {"nested": [1, 2]}}},
    },
    "allOf": [{"const": "a"}],
    "anyOf": [{"const": "b"}, {"type": "string"}],
    "oneOf": [{"const": "c"}],
    **CONDITIONAL_SCHEMA,
}


def test_string_const_gets_type_and_single_element_enum() -> None:
    result = normalize_const({"const": "hello"})

    assert result.schema == {"const": "hello", "type": "string", "enum": ["hello"]}
    assert result.was_transformed is True
    assert result.collected_values == ("hello",)


def test_numeric_consts_distinguish_integer_and_number() -> None:
    assert normalize_const({"const": 3.14}).schema["type"] == "number"
    assert normalize_const({"const": 42}).schema["type"] == "integer"


def test_conditional_consts_are_collected_in_if_then_else_order() -> None:
    result = normalize_const(CONDITIONAL_SCHEMA)

    assert list(result.collected_values) == ["premium", "gold", "standard"]
    assert extract_const_values(CONDITIONAL_SCHEMA) == ["premium", "gold", "standard"]
    assert result.schema["then"]["properties"]["level"] == {
        "const": "gold",
        "type": "string",
        "enum": ["gold"],
    }


def test_second_pass_finds_nothing_to_rewrite() -> None:
    first = normalize_const(RICH_SCHEMA)
    second = normalize_const(first.schema)

    assert first.was_transformed is True
    assert second.was_transformed is False
    assert second.schema == first.schema
    assert second.collected_values == first.collected_values


def test_every_reachable_const_is_extracted_in_document_order() -> None:
    values = extract_const_values(RICH_SCHEMA)

    assert values == [
        "order",
        "kg",
        1,
        2.5,
        True,
        None,
        {"nested": [1, 2]},
        "a",
        "b",
        "c",
        "premium",
        "gold",
        "standard",
    ]
    assert list(normalize_const(RICH_SCHEMA).collected_values) == values


def test_existing_type_and_enum_are_preserved() -> None:
    result = normalize_const({"const": "a", "type": "string", "enum": ["a", "b"]})

    assert result.schema == {"const": "a", "type": "string", "enum": ["a", "b"]}
    assert result.was_transformed is False
    assert result.collected_values == ("a",)


def test_empty_type_counts_as_absent() -> None:
    result = normalize_const({"const": 1, "type": ""})

    assert result.schema["type"] == "integer"
    assert result.was_transformed is True


def test_declared_type_is_not_overwritten() -> None:
    result = normalize_const({"const": 1, "type": "number"})

    assert result.schema == {"const": 1, "type": "number", "enum": [1]}


def test_unknown_fields_are_kept() -> None:
    result = normalize_const({"const": "x", "description": "pinned", "x-internal": True})

    assert result.schema["description"] == "pinned"
    assert result.schema["x-internal"] is True


def test_input_tree_is_never_mutated_or_aliased() -> None:
    original = copy.deepcopy(RICH_SCHEMA)

    result = normalize_const(RICH_SCHEMA)
    result.schema["properties"]["kind"]["enum"].append("changed")
    result.schema["properties"]["extra"]["additionalProperties"]["const"]["nested"].append(3)

    assert RICH_SCHEMA == original


def test_enum_does_not_alias_the_const_value() -> None:
    result = normalize_const({"const": {"a": [1]}})

    result.schema["enum"][0]["a"].append(2)

    assert result.schema["const"] == {"a": [1]}


def test_non_mapping_input_passes_through() -> None:
    for value in ("text", 5, None, True, ["a"]):
        result = normalize_const(value)
        assert result.schema == value
        assert result.was_transformed is False
        assert result.collected_values == ()


def test_malformed_slots_pass_through_while_siblings_are_normalized() -> None:
    schema = {
        "properties": {"ok": {"const": 1}},
        "allOf": "not-a-list",
        "anyOf": [42, {"const": "b"}],
        "items": [None, {"const": "c"}],
    }

    result = normalize_const(schema)

    assert result.schema["allOf"] == "not-a-list"
    assert result.schema["anyOf"][0] == 42
    assert result.schema["anyOf"][1]["type"] == "string"
    assert result.schema["items"][0] is None
    assert list(result.collected_values) == [1, "c", "b"]


def test_properties_that_are_not_a_mapping_are_left_untouched() -> None:
    result = normalize_const({"const": 1, "properties": ["a", "b"]})

    assert result.schema["properties"] == ["a", "b"]
    assert result.schema["enum"] == [1]


def test_has_const_finds_nested_consts() -> None:
    assert has_const({"anyOf": [{"type": "string"}, {"items": {"const": 1}}]}) is True
    assert has_const({"else": {"const": "x"}}) is True
    assert has_const({"type": "object", "properties": {"a": {"type": "string"}}}) is False
    assert has_const("not a schema") is False


def test_extract_const_values_does_not_rewrite() -> None:
    schema = {"properties": {"a": {"const": 1}}}

    extract_const_values(schema)

    assert schema == {"properties": {"a": {"const": 1}}}


def test_assert_valid_const_accepts_json_values() -> None:
    for value in ({"a": 1}, [1, "two", None], "x", 0, 1.5, True, None):
        assert_valid_const(value)


@pytest.mark.parametrize(
    "value",
    [ABSENT, len, lambda: 1, math.nan, math.inf, {1, 2}, object(), {"a": object()}],
)
def test_assert_valid_const_rejects_non_json_values(value: object) -> None:
    with pytest.raises(InvalidConstValueError):
        assert_valid_const(value)


def test_assert_valid_const_rejects_cycles() -> None:
    cyclic: list[object] = []
    cyclic.append(cyclic)

    with pytest.raises(InvalidConstValueError):
        assert_valid_const(cyclic)


@pytest.mark.parametrize("value", ["hello", 42, 3.14, True, None, [1, 2], {"k": "v"}])
def test_create_const_schema_builds_const_type_enum(value: object) -> None:
    assert create_const_schema(value, {}) == {
        "const": value,
        "type": infer_type(value),
        "enum": [value],
    }


def test_create_const_schema_lets_extra_fields_win() -> None:
    schema = create_const_schema("x", {"type": "custom", "description": "pinned"})

    assert schema == {"const": "x", "type": "custom", "enum": ["x"], "description": "pinned"}


def test_create_const_schema_rejects_absent_value() -> None:
    with pytest.raises(InvalidConstValueError):
        create_const_schema(ABSENT)
