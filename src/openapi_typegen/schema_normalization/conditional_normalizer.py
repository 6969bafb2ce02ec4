"""Conditional (``if``/``then``/``else``) normalization."""

from __future__ import annotations

from typing import Any

from .schema_traversal import ROOT_LOCATION, any_node_matches, transform_schema_tree
from .transform_outcomes import ConditionalPattern, TransformResult


def normalize_conditionals(node: Any, location: str = ROOT_LOCATION) -> TransformResult:
    """Collect conditional patterns and drop clauses with no validation effect.

    An ``if`` without ``then``/``else`` and a ``then``/``else`` without ``if``
    never change validation outcomes, so they are removed. Collected values are
    ``ConditionalPattern`` records for every remaining ``if``.
    """
    return transform_schema_tree(node, _rewrite_conditional_node, location=location)


def has_conditionals(node: Any) -> bool:
    """Return True when any reachable node uses if/then/else."""
    return any_node_matches(
        node, lambda candidate: any(key in candidate for key in ("if", "then", "else"))
    )


def _rewrite_conditional_node(node: dict[str, Any], location: str) -> TransformResult:
    has_if = "if" in node
    has_branch = "then" in node or "else" in node
    if not has_if and not has_branch:
        return TransformResult(schema=node, was_transformed=False)

    if not has_if:
        node.pop("then", None)
        node.pop("else", None)
        return TransformResult(schema=node, was_transformed=True)
    if not has_branch:
        del node["if"]
        return TransformResult(schema=node, was_transformed=True)

    pattern = ConditionalPattern(
        location=location,
        if_schema=node["if"],
        then_schema=node.get("then"),
        else_schema=node.get("else"),
    )
    return TransformResult(schema=node, was_transformed=False, collected_values=(pattern,))
