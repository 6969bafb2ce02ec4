"""Literal value to JSON-Schema type tag inference."""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping
from typing import Any

SCHEMA_TYPE_TAGS = ("null", "boolean", "integer", "number", "string", "array", "object")


def infer_type(value: Any) -> str:
    """Return the JSON-Schema type tag describing a literal value.

    Values outside the JSON model (sets, arbitrary objects, complex numbers)
    fall back to ``"string"`` instead of failing.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, numbers.Real):
        return "integer" if _has_no_fraction(value) else "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return "string"


def _has_no_fraction(value: numbers.Real) -> bool:
    if isinstance(value, numbers.Integral):
        return True
    as_float = float(value)
    return math.isfinite(as_float) and as_float.is_integer()
