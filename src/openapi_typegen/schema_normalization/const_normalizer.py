"""Const keyword normalization.

Every node carrying ``const`` is completed into a ``{const, type, enum}``
triple so model emitters can produce literal types from the single-element
``enum``. The rewrite reaches every composition point of the shared
traversal and never fails on malformed schema input.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from typing import Any

from .schema_traversal import any_node_matches, collect_from_tree, transform_schema_tree
from .transform_outcomes import TransformResult
from .type_inference import infer_type


class InvalidConstValueError(Exception):
    """Raised when a literal cannot be used as a JSON-Schema const value."""


class _Absent:
    """Sentinel type for a value that was never supplied."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Any = _Absent()


def normalize_const(node: Any) -> TransformResult:
    """Rewrite const keywords in ``node`` and collect their values in document order."""
    return transform_schema_tree(node, _complete_const_node)


def has_const(node: Any) -> bool:
    """Return True when any reachable node carries a ``const`` keyword."""
    return any_node_matches(node, lambda candidate: "const" in candidate)


def extract_const_values(node: Any) -> list[Any]:
    """Return every reachable const value in document order."""
    return collect_from_tree(
        node, lambda candidate, _location: [candidate["const"]] if "const" in candidate else []
    )


def assert_valid_const(value: Any) -> None:
    """Reject values that are not representable as a JSON literal.

    Raises:
      InvalidConstValueError: If the value is absent, callable, or does not
        survive strict JSON serialization (cycles, NaN, non-JSON objects).
    """
    if value is ABSENT:
        raise InvalidConstValueError("const value cannot be absent")
    if callable(value):
        raise InvalidConstValueError("const value cannot be a callable")
    try:
        json.dumps(value, allow_nan=False)
    except (TypeError, ValueError, RecursionError) as exc:
        raise InvalidConstValueError(f"Invalid const value: {exc}") from exc


def create_const_schema(
    value: Any, extra_fields: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """Build a const schema for ``value``; ``extra_fields`` win on key collision."""
    assert_valid_const(value)
    return {
        "const": value,
        "type": infer_type(value),
        "enum": [value],
        **(extra_fields or {}),
    }


def _complete_const_node(node: dict[str, Any], _location: str) -> TransformResult:
    if "const" not in node:
        return TransformResult(schema=node, was_transformed=False)

    const_value = node["const"]
    rewritten = False
    if node.get("type") in (None, ""):
        node["type"] = infer_type(const_value)
        rewritten = True
    if node.get("enum") is None:
        node["enum"] = [copy.deepcopy(const_value)]
        rewritten = True
    return TransformResult(schema=node, was_transformed=rewritten, collected_values=(const_value,))
