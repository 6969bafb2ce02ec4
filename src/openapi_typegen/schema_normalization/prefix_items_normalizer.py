"""Tuple (``prefixItems``) normalization into the Draft-07 ``items`` array form."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .schema_traversal import (
    ROOT_LOCATION,
    TUPLE_CHILD_SLOTS,
    any_node_matches,
    collect_from_tree,
    transform_schema_tree,
)
from .transform_outcomes import TransformResult, TupleInfo


def normalize_prefix_items(node: Any, location: str = ROOT_LOCATION) -> TransformResult:
    """Rewrite every ``prefixItems`` tuple; collected values are ``TupleInfo`` records."""
    return transform_schema_tree(
        node, _rewrite_tuple_node, slots=TUPLE_CHILD_SLOTS, location=location
    )


def collect_tuples(node: Any, location: str = ROOT_LOCATION) -> TransformResult:
    """Record ``TupleInfo`` for every ``prefixItems`` tuple, leaving the 2020-12 form as is."""
    tuples = collect_from_tree(node, _tuple_info, slots=TUPLE_CHILD_SLOTS, location=location)
    return TransformResult(schema=node, was_transformed=False, collected_values=tuple(tuples))


def has_prefix_items(node: Any) -> bool:
    """Return True when any reachable node declares ``prefixItems``."""
    return any_node_matches(
        node,
        lambda candidate: isinstance(candidate.get("prefixItems"), list),
        slots=TUPLE_CHILD_SLOTS,
    )


def _tuple_info(node: Mapping[str, Any], location: str) -> list[TupleInfo]:
    prefix_items = node.get("prefixItems")
    if not isinstance(prefix_items, list) or not prefix_items:
        return []
    closed = node.get("items") is False or node.get("unevaluatedItems") is False
    return [TupleInfo(location=location, length=len(prefix_items), closed=closed)]


def _rewrite_tuple_node(node: dict[str, Any], location: str) -> TransformResult:
    prefix_items = node.get("prefixItems")
    if not isinstance(prefix_items, list):
        return TransformResult(schema=node, was_transformed=False)

    del node["prefixItems"]
    if not prefix_items:
        return TransformResult(schema=node, was_transformed=True)

    length = len(prefix_items)
    tail = node.pop("items", None)
    if tail is False or (tail is None and node.get("additionalItems") is False):
        node["additionalItems"] = False
        node["maxItems"] = length
        closed = True
    else:
        if tail is not None:
            node["additionalItems"] = tail
        else:
            node.setdefault("additionalItems", True)
        closed = False
    node["items"] = prefix_items
    node.setdefault("minItems", length)
    return TransformResult(
        schema=node,
        was_transformed=True,
        collected_values=(TupleInfo(location=location, length=length, closed=closed),),
    )
