"""Discriminator normalization.

A ``discriminator`` next to ``oneOf``/``anyOf`` without a ``mapping`` gets one
inferred from the union members: ``$ref`` members map their definition name to
the reference, inline members map their single ``const``/``enum`` value or
their ``title`` to their own location. Inline members are pinned to their
value and must carry the discriminator property. A discriminator next to
``allOf`` makes its property required on the schema that declares it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .schema_traversal import ROOT_LOCATION, any_node_matches, transform_schema_tree
from .transform_outcomes import DiscriminatorInfo, TransformResult

_LOGGER = logging.getLogger(__name__)

UNION_KEYWORDS = ("oneOf", "anyOf")


class InvalidDiscriminatorError(Exception):
    """Raised when a discriminator object is structurally unusable."""


def normalize_discriminators(node: Any, location: str = ROOT_LOCATION) -> TransformResult:
    """Complete discriminators; collected values are ``DiscriminatorInfo`` records."""

    def rewrite(candidate: dict[str, Any], candidate_location: str) -> TransformResult:
        return _rewrite_discriminator_node(
            candidate, candidate_location, nested=candidate_location != location
        )

    return transform_schema_tree(node, rewrite, location=location)


def has_discriminators(node: Any) -> bool:
    """Return True when any reachable node declares a ``discriminator``."""
    return any_node_matches(node, lambda candidate: "discriminator" in candidate)


def extract_discriminator_info(node: Any) -> list[DiscriminatorInfo]:
    """Return the discriminators of ``node`` in document order."""
    return list(normalize_discriminators(node).collected_values)


def validate_discriminator(discriminator: Any, location: str) -> None:
    """Check the shape of one discriminator object.

    Raises:
      InvalidDiscriminatorError: If the discriminator is not a mapping, has no
        non-empty ``propertyName`` string, or its ``mapping`` is not a mapping
        of strings.
    """
    if not isinstance(discriminator, Mapping):
        raise InvalidDiscriminatorError(f"Discriminator at {location} must be a mapping.")
    property_name = discriminator.get("propertyName")
    if not isinstance(property_name, str) or not property_name:
        raise InvalidDiscriminatorError(
            f"Discriminator at {location} needs a non-empty propertyName string."
        )
    mapping = discriminator.get("mapping")
    if mapping is None:
        return
    if not isinstance(mapping, Mapping):
        raise InvalidDiscriminatorError(f"Discriminator mapping at {location} must be a mapping.")
    for value, target in mapping.items():
        if not isinstance(target, str):
            raise InvalidDiscriminatorError(
                f"Discriminator mapping value for '{value}' at {location} must be a string."
            )


def _rewrite_discriminator_node(
    node: dict[str, Any], location: str, *, nested: bool
) -> TransformResult:
    discriminator = node.get("discriminator")
    if discriminator is None:
        return TransformResult(schema=node, was_transformed=False)
    try:
        validate_discriminator(discriminator, location)
    except InvalidDiscriminatorError as exc:
        _LOGGER.warning("Discriminator left untouched: %s", exc)
        return TransformResult(schema=node, was_transformed=False)

    property_name = discriminator["propertyName"]
    changed = False
    infos: list[DiscriminatorInfo] = []

    for keyword in UNION_KEYWORDS:
        members = node.get(keyword)
        if not isinstance(members, list) or not members:
            continue
        explicit = discriminator.get("mapping")
        if explicit:
            mapping = dict(explicit)
        else:
            mapping = _infer_mapping(members, property_name, f"{location}/{keyword}")
            if mapping:
                node["discriminator"] = {**discriminator, "mapping": mapping}
                changed = True
        pinned = _pin_members(members, property_name, mapping, f"{location}/{keyword}")
        if pinned != members:
            node[keyword] = pinned
            changed = True
        infos.append(
            DiscriminatorInfo(
                location=location,
                property_name=property_name,
                mapping=mapping,
                inferred=not explicit,
                nested=nested,
            )
        )
        break

    if isinstance(node.get("allOf"), list):
        changed = _require_property(node, property_name, {"type": "string"}) or changed
        infos.append(
            DiscriminatorInfo(
                location=location,
                property_name=property_name,
                mapping=dict(discriminator.get("mapping") or {}),
                nested=nested,
                inheritance=True,
            )
        )

    return TransformResult(schema=node, was_transformed=changed, collected_values=tuple(infos))


def _infer_mapping(members: list[Any], property_name: str, location: str) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for index, member in enumerate(members):
        if not isinstance(member, Mapping):
            continue
        ref = member.get("$ref")
        if isinstance(ref, str):
            mapping[ref.rsplit("/", 1)[-1]] = ref
            continue
        value = _member_value(member, property_name)
        if value is not None:
            mapping[value] = f"{location}/{index}"
    return mapping


def _member_value(member: Mapping[str, Any], property_name: str) -> str | None:
    properties = member.get("properties")
    if isinstance(properties, Mapping) and isinstance(properties.get(property_name), Mapping):
        property_schema = properties[property_name]
        if "const" in property_schema:
            return str(property_schema["const"])
        enum = property_schema.get("enum")
        if isinstance(enum, list) and len(enum) == 1:
            return str(enum[0])
        return None
    title = member.get("title")
    return title if isinstance(title, str) and title else None


def _pin_members(
    members: list[Any], property_name: str, mapping: Mapping[str, str], location: str
) -> list[Any]:
    values_by_target = {target: value for value, target in mapping.items()}
    pinned: list[Any] = []
    for index, member in enumerate(members):
        value = values_by_target.get(f"{location}/{index}")
        if not isinstance(member, Mapping) or "$ref" in member or value is None:
            pinned.append(member)
            continue
        rewritten = dict(member)
        _require_property(rewritten, property_name, {"type": "string", "const": value})
        pinned.append(rewritten)
    return pinned


def _require_property(
    schema: dict[str, Any], property_name: str, property_schema: dict[str, Any]
) -> bool:
    properties = schema.get("properties", {})
    required = schema.get("required", [])
    if not isinstance(properties, Mapping) or not isinstance(required, list):
        return False
    changed = False
    if property_name not in properties:
        schema["properties"] = {**properties, property_name: property_schema}
        changed = True
    if property_name not in required:
        schema["required"] = [*required, property_name]
        changed = True
    return changed
