"""Detection of schemas that only validate correctly under JSON Schema 2020-12."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

DRAFT_2020_12_KEYWORDS = frozenset(
    {
        "$anchor",
        "$defs",
        "$dynamicAnchor",
        "$dynamicRef",
        "dependentRequired",
        "dependentSchemas",
        "maxContains",
        "minContains",
        "unevaluatedItems",
        "unevaluatedProperties",
    }
)

# Draft-07 ignores every sibling of $ref; these siblings carry no assertion.
_ANNOTATION_KEYWORDS = frozenset(
    {
        "$comment",
        "$ref",
        "default",
        "deprecated",
        "description",
        "discriminator",
        "example",
        "examples",
        "nullable",
        "readOnly",
        "title",
        "writeOnly",
        "xml",
    }
)
_DATA_KEYWORDS = frozenset({"const", "default", "discriminator", "enum", "example", "examples"})
_NAMED_SCHEMA_KEYWORDS = frozenset({"definitions", "patternProperties", "properties"})


def requires_draft_2020_12(node: Any) -> bool:
    """Return True when ``node`` uses keywords Draft-07 would silently ignore.

    Those are the 2020-12-only keywords and assertions placed next to ``$ref``.
    """
    if isinstance(node, list):
        return any(requires_draft_2020_12(child) for child in node)
    if not isinstance(node, Mapping):
        return False
    if DRAFT_2020_12_KEYWORDS.intersection(node):
        return True
    if "$ref" in node and any(_is_assertion_sibling(keyword) for keyword in node):
        return True
    for keyword, child in node.items():
        if keyword in _DATA_KEYWORDS:
            continue
        if keyword in _NAMED_SCHEMA_KEYWORDS and isinstance(child, Mapping):
            if any(requires_draft_2020_12(schema) for schema in child.values()):
                return True
        elif requires_draft_2020_12(child):
            return True
    return False


def _is_assertion_sibling(keyword: Any) -> bool:
    return (
        isinstance(keyword, str)
        and keyword not in _ANNOTATION_KEYWORDS
        and not keyword.startswith("x-")
    )
