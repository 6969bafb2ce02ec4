"""Type inference tests."""

from __future__ import annotations

import math
from collections import OrderedDict

import pytest
from openapi_typegen.schema_normalization.type_inference import SCHEMA_TYPE_TAGS, infer_type


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "null"),
        (True, "boolean"),
        (False, "boolean"),
        (0, "integer"),
        (42, "integer"),
        (-7, "integer"),
        (3.0, "integer"),
        (3.14, "number"),
        (math.nan, "number"),
        (math.inf, "number"),
        ("", "string"),
        ("hello", "string"),
        ([], "array"),
        ((1, 2), "array"),
        ({}, "object"),
        (OrderedDict(a=1), "object"),
    ],
)
def test_infer_type_maps_json_literals_to_type_tags(value: object, expected: str) -> None:
    assert infer_type(value) == expected


def test_booleans_are_not_reported_as_integers() -> None:
    assert infer_type(True) != "integer"


def test_values_outside_the_json_model_fall_back_to_string() -> None:
    assert infer_type(object()) == "string"
    assert infer_type({1, 2}) == "string"
    assert infer_type(b"bytes") == "string"
    assert infer_type(1 + 2j) == "string"


def test_every_inferred_tag_is_a_known_schema_type() -> None:
    samples = [None, True, 1, 1.5, "x", [1], {"a": 1}, object()]

    assert {infer_type(sample) for sample in samples} <= set(SCHEMA_TYPE_TAGS)
