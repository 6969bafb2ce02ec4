"""Shared child-slot traversal used by every schema transform.

All recursive transforms, predicates and extractors visit the children of a
node in one fixed order: ``properties`` (insertion order), ``items`` (single
node or each element), ``additionalProperties``, ``allOf``, ``anyOf``,
``oneOf``, ``prefixItems``, ``if``, ``then``, ``else``. Collected values and
emitted literals depend on this order, so it must never vary between passes.

Slots whose value does not have the expected shape are passed through
untouched and can be listed with :func:`find_malformed_slots`.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .transform_outcomes import TransformResult

ROOT_LOCATION = "#"
COMBINATOR_KEYWORDS = ("allOf", "anyOf", "oneOf")
CONDITIONAL_KEYWORDS = ("if", "then", "else")


class SlotKind(str, Enum):
    """Shape a child slot is expected to hold."""

    NODE = "node"
    NODE_LIST = "node_list"
    NODE_OR_LIST = "node_or_list"
    NODE_MAPPING = "node_mapping"


@dataclass(frozen=True)
class ChildSlot:
    """One keyword under which a schema node nests sub-schemas."""

    keyword: str
    kind: SlotKind


CHILD_SLOTS: tuple[ChildSlot, ...] = (
    ChildSlot("properties", SlotKind.NODE_MAPPING),
    ChildSlot("items", SlotKind.NODE_OR_LIST),
    ChildSlot("additionalProperties", SlotKind.NODE),
    *(ChildSlot(keyword, SlotKind.NODE_LIST) for keyword in COMBINATOR_KEYWORDS),
    ChildSlot("prefixItems", SlotKind.NODE_LIST),
    *(ChildSlot(keyword, SlotKind.NODE) for keyword in CONDITIONAL_KEYWORDS),
)

# Draft-07 tuples keep their tail schema under additionalItems.
TUPLE_CHILD_SLOTS: tuple[ChildSlot, ...] = (
    CHILD_SLOTS[0],
    CHILD_SLOTS[1],
    ChildSlot("additionalItems", SlotKind.NODE),
    *CHILD_SLOTS[2:],
)

NodeRewriter = Callable[[dict[str, Any], str], TransformResult]


def transform_schema_tree(
    node: Any,
    rewrite_node: NodeRewriter,
    *,
    slots: tuple[ChildSlot, ...] = CHILD_SLOTS,
    location: str = ROOT_LOCATION,
) -> TransformResult:
    """Apply ``rewrite_node`` to every schema node, parents before children.

    The input is deep-copied once, so the returned tree never aliases
    caller-owned structures. ``rewrite_node`` receives a fresh ``dict`` for
    each node and its JSON-pointer location.
    """
    return _transform_node(copy.deepcopy(node), rewrite_node, slots, location)


def iter_child_nodes(
    node: Any,
    *,
    slots: tuple[ChildSlot, ...] = CHILD_SLOTS,
    location: str = ROOT_LOCATION,
) -> Iterator[tuple[str, Mapping[str, Any]]]:
    """Yield ``(location, child)`` for every well-formed mapping child, in order."""
    if not isinstance(node, Mapping):
        return
    for slot in slots:
        if slot.keyword not in node:
            continue
        value = node[slot.keyword]
        slot_location = f"{location}/{_escape_pointer(slot.keyword)}"
        for child_location, child in _slot_children(slot, value, slot_location):
            if isinstance(child, Mapping):
                yield child_location, child


def any_node_matches(
    node: Any,
    predicate: Callable[[Mapping[str, Any]], bool],
    *,
    slots: tuple[ChildSlot, ...] = CHILD_SLOTS,
) -> bool:
    """Return True on the first node (depth-first) satisfying ``predicate``."""
    if not isinstance(node, Mapping):
        return False
    if predicate(node):
        return True
    return any(
        any_node_matches(child, predicate, slots=slots)
        for _, child in iter_child_nodes(node, slots=slots)
    )


def collect_from_tree(
    node: Any,
    collect: Callable[[Mapping[str, Any], str], list[Any]],
    *,
    slots: tuple[ChildSlot, ...] = CHILD_SLOTS,
    location: str = ROOT_LOCATION,
) -> list[Any]:
    """Gather values from every node in document order without rewriting."""
    if not isinstance(node, Mapping):
        return []
    values = list(collect(node, location))
    for child_location, child in iter_child_nodes(node, slots=slots, location=location):
        values.extend(collect_from_tree(child, collect, slots=slots, location=child_location))
    return values


def find_malformed_slots(
    node: Any,
    *,
    slots: tuple[ChildSlot, ...] = CHILD_SLOTS,
    location: str = ROOT_LOCATION,
) -> list[str]:
    """List locations whose slot value does not have the expected shape."""
    if not isinstance(node, Mapping):
        return []
    issues: list[str] = []
    for slot in slots:
        if slot.keyword not in node:
            continue
        value = node[slot.keyword]
        slot_location = f"{location}/{_escape_pointer(slot.keyword)}"
        if not _slot_is_well_formed(slot, value):
            issues.append(f"{slot_location}: expected {_describe_kind(slot.kind)}")
            continue
        for child_location, child in _slot_children(slot, value, slot_location):
            if not isinstance(child, (Mapping, bool)):
                issues.append(f"{child_location}: expected a schema object or boolean")
    for child_location, child in iter_child_nodes(node, slots=slots, location=location):
        issues.extend(find_malformed_slots(child, slots=slots, location=child_location))
    return issues


def _transform_node(
    node: Any,
    rewrite_node: NodeRewriter,
    slots: tuple[ChildSlot, ...],
    location: str,
) -> TransformResult:
    if not isinstance(node, Mapping):
        return TransformResult(schema=node, was_transformed=False)

    own = rewrite_node(dict(node), location)
    if not isinstance(own.schema, dict):
        return own
    transformed = own.schema
    was_transformed = own.was_transformed
    collected = list(own.collected_values)

    for slot in slots:
        if slot.keyword not in transformed:
            continue
        slot_location = f"{location}/{_escape_pointer(slot.keyword)}"
        rebuilt, changed, values = _transform_slot(
            slot, transformed[slot.keyword], rewrite_node, slots, slot_location
        )
        transformed[slot.keyword] = rebuilt
        was_transformed = was_transformed or changed
        collected.extend(values)

    return TransformResult(
        schema=transformed,
        was_transformed=was_transformed,
        collected_values=tuple(collected),
    )


def _transform_slot(
    slot: ChildSlot,
    value: Any,
    rewrite_node: NodeRewriter,
    slots: tuple[ChildSlot, ...],
    location: str,
) -> tuple[Any, bool, list[Any]]:
    if not _slot_is_well_formed(slot, value):
        return value, False, []

    changed = False
    values: list[Any] = []

    def visit(child: Any, child_location: str) -> Any:
        nonlocal changed
        result = _transform_node(child, rewrite_node, slots, child_location)
        changed = changed or result.was_transformed
        values.extend(result.collected_values)
        return result.schema

    if isinstance(value, Mapping) and slot.kind is SlotKind.NODE_MAPPING:
        rebuilt: Any = {
            key: visit(child, f"{location}/{_escape_pointer(key)}") for key, child in value.items()
        }
    elif isinstance(value, list):
        rebuilt = [visit(child, f"{location}/{index}") for index, child in enumerate(value)]
    else:
        rebuilt = visit(value, location)
    return rebuilt, changed, values


def _slot_children(slot: ChildSlot, value: Any, location: str) -> Iterator[tuple[str, Any]]:
    if not _slot_is_well_formed(slot, value):
        return
    if slot.kind is SlotKind.NODE_MAPPING:
        for key, child in value.items():
            yield f"{location}/{_escape_pointer(key)}", child
    elif isinstance(value, list):
        for index, child in enumerate(value):
            yield f"{location}/{index}", child
    else:
        yield location, value


def _slot_is_well_formed(slot: ChildSlot, value: Any) -> bool:
    if slot.kind is SlotKind.NODE_MAPPING:
        return isinstance(value, Mapping)
    if slot.kind is SlotKind.NODE_LIST:
        return isinstance(value, list)
    if slot.kind is SlotKind.NODE_OR_LIST:
        return isinstance(value, (Mapping, bool, list))
    return isinstance(value, (Mapping, bool))


def _describe_kind(kind: SlotKind) -> str:
    return {
        SlotKind.NODE: "a schema object or boolean",
        SlotKind.NODE_LIST: "a list of schemas",
        SlotKind.NODE_OR_LIST: "a schema or a list of schemas",
        SlotKind.NODE_MAPPING: "a mapping of names to schemas",
    }[kind]


def _escape_pointer(token: Any) -> str:
    return str(token).replace("~", "~0").replace("/", "~1")
