"""Null handling: OpenAPI 3.0 ``nullable`` and 3.1 type arrays."""

from __future__ import annotations

from typing import Any

from .schema_traversal import ROOT_LOCATION, transform_schema_tree
from .transform_outcomes import TransformResult


def normalize_null_types(node: Any, location: str = ROOT_LOCATION) -> TransformResult:
    """Express nullability with JSON-Schema type arrays.

    ``nullable: true`` becomes ``type: [<type>, "null"]`` (``None`` joins an
    existing ``enum``), single-element type arrays collapse to a plain string,
    and the ``nullable`` key is removed. Collected values are the locations of
    rewritten nodes.
    """
    return transform_schema_tree(node, _rewrite_null_node, location=location)


def _rewrite_null_node(node: dict[str, Any], location: str) -> TransformResult:
    rewritten = False

    if "nullable" in node:
        nullable = node.pop("nullable")
        rewritten = True
        if nullable is True:
            _add_null_type(node)

    node_type = node.get("type")
    if isinstance(node_type, list) and len(node_type) == 1 and isinstance(node_type[0], str):
        node["type"] = node_type[0]
        rewritten = True

    collected = (location,) if rewritten else ()
    return TransformResult(schema=node, was_transformed=rewritten, collected_values=collected)


def _add_null_type(node: dict[str, Any]) -> None:
    node_type = node.get("type")
    if isinstance(node_type, str) and node_type != "null":
        node["type"] = [node_type, "null"]
    elif isinstance(node_type, list) and "null" not in node_type:
        node["type"] = [*node_type, "null"]
    enum = node.get("enum")
    if isinstance(enum, list) and None not in enum:
        node["enum"] = [*enum, None]
