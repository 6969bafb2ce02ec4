"""OpenAPI 3.0 boolean ``exclusiveMinimum``/``exclusiveMaximum`` conversion."""

from __future__ import annotations

from typing import Any

from .schema_traversal import ROOT_LOCATION, transform_schema_tree
from .transform_outcomes import TransformResult

# (exclusive flag, inclusive bound) pairs.
_BOUND_KEYWORDS = (("exclusiveMinimum", "minimum"), ("exclusiveMaximum", "maximum"))


def normalize_exclusive_bounds(node: Any, location: str = ROOT_LOCATION) -> TransformResult:
    """Turn boolean exclusive flags into numeric exclusive bounds.

    ``{minimum: m, exclusiveMinimum: true}`` becomes ``{exclusiveMinimum: m}``
    and likewise for the maximum pair. A ``false`` flag, or a ``true`` flag
    without its bound, is dropped. Collected values are the locations of
    rewritten nodes.
    """
    return transform_schema_tree(node, _rewrite_bounds_node, location=location)


def _rewrite_bounds_node(node: dict[str, Any], location: str) -> TransformResult:
    rewritten = False
    for exclusive_keyword, bound_keyword in _BOUND_KEYWORDS:
        flag = node.get(exclusive_keyword)
        if not isinstance(flag, bool):
            continue
        del node[exclusive_keyword]
        rewritten = True
        if flag and _is_number(node.get(bound_keyword)):
            node[exclusive_keyword] = node.pop(bound_keyword)

    collected = (location,) if rewritten else ()
    return TransformResult(schema=node, was_transformed=rewritten, collected_values=collected)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
