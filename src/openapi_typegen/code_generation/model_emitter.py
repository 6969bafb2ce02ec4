"""Python model source emission for normalized definitions.

Object definitions with properties become ``TypedDict`` classes; every other
definition becomes a ``TypeAlias``. Alias values and field annotations are
emitted as strings so definitions may reference each other in any order.
``NotRequired`` stays unquoted so ``TypedDict`` still sees optional keys.
"""

from __future__ import annotations

import json
import keyword
import re
from collections.abc import Iterable, Mapping
from typing import Any

GENERATED_HEADER = "# Generated by openapi-typegen. Do not edit."

_PRIMITIVE_TYPES = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
    "null": "None",
}
_DEFINITION_REF_PREFIX = "#/definitions/"
_NON_IDENTIFIER = re.compile(r"\W+")


def python_identifier(name: str) -> str:
    """Return a valid Python identifier for a definition or property name."""
    identifier = _NON_IDENTIFIER.sub("_", name).strip("_") or "Model"
    if identifier[0].isdigit():
        identifier = f"_{identifier}"
    if keyword.iskeyword(identifier):
        identifier = f"{identifier}_"
    return identifier


def definition_identifiers(names: Iterable[str]) -> dict[str, str]:
    """Map definition names to unique Python identifiers, preserving order."""
    identifiers: dict[str, str] = {}
    taken: set[str] = set()
    for name in names:
        candidate = python_identifier(name)
        unique = candidate
        suffix = 2
        while unique in taken:
            unique = f"{candidate}{suffix}"
            suffix += 1
        taken.add(unique)
        identifiers[name] = unique
    return identifiers


def render_models(definitions: Mapping[str, Any]) -> str:
    """Render the ``models.py`` module for a mapping of definitions."""
    identifiers = definition_identifiers(definitions)
    blocks = [
        _render_definition(identifiers[name], schema, identifiers)
        for name, schema in definitions.items()
    ]
    header = "\n".join(
        [
            GENERATED_HEADER,
            '"""Typed models for the generated schema definitions."""',
            "",
            "from typing import Any, Literal, NotRequired, TypeAlias, TypedDict",
        ]
    )
    if not blocks:
        return header + "\n"
    return header + "\n\n\n" + "\n\n\n".join(blocks) + "\n"


def type_expression(schema: Any, identifiers: Mapping[str, str]) -> str:
    """Return the Python type expression describing ``schema``."""
    if not isinstance(schema, Mapping):
        return "Any"

    ref = schema.get("$ref")
    if isinstance(ref, str):
        return _ref_expression(ref, identifiers)

    if "const" in schema:
        literal = _literal_expression([schema["const"]])
        if literal is not None:
            return literal
    enum = schema.get("enum")
    if isinstance(enum, list) and enum:
        literal = _literal_expression(enum)
        if literal is not None:
            return literal

    for combinator in ("oneOf", "anyOf"):
        members = schema.get(combinator)
        if isinstance(members, list) and members:
            return _union([type_expression(member, identifiers) for member in members])
    all_of = schema.get("allOf")
    if isinstance(all_of, list) and len(all_of) == 1:
        return type_expression(all_of[0], identifiers)

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        return _union(
            [_type_for_tag(tag, schema, identifiers) for tag in schema_type if isinstance(tag, str)]
        )
    if isinstance(schema_type, str):
        return _type_for_tag(schema_type, schema, identifiers)
    if "properties" in schema or "additionalProperties" in schema:
        return _type_for_tag("object", schema, identifiers)
    if "items" in schema or "prefixItems" in schema:
        return _type_for_tag("array", schema, identifiers)
    return "Any"


def _render_definition(identifier: str, schema: Any, identifiers: Mapping[str, str]) -> str:
    properties = schema.get("properties") if isinstance(schema, Mapping) else None
    if isinstance(properties, Mapping) and properties and "$ref" not in schema:
        return _render_typed_dict(identifier, schema, properties, identifiers)
    return f"{identifier}: TypeAlias = {json.dumps(type_expression(schema, identifiers))}"


def _render_typed_dict(
    identifier: str,
    schema: Mapping[str, Any],
    properties: Mapping[str, Any],
    identifiers: Mapping[str, str],
) -> str:
    required = schema.get("required")
    required_names = set(required) if isinstance(required, list) else set()
    fields = []
    for name, property_schema in properties.items():
        annotation = json.dumps(type_expression(property_schema, identifiers))
        if name not in required_names:
            annotation = f"NotRequired[{annotation}]"
        fields.append((str(name), annotation))

    description = schema.get("description") or schema.get("title")
    if all(name.isidentifier() and not keyword.iskeyword(name) for name, _ in fields):
        lines = [f"class {identifier}(TypedDict):"]
        if isinstance(description, str) and description.strip():
            lines.append(f"    {_docstring(description)}")
            lines.append("")
        lines.extend(f"    {name}: {annotation}" for name, annotation in fields)
        return "\n".join(lines)

    # Property names that are not identifiers need the functional syntax.
    lines = [f"{identifier} = TypedDict(", f"    {json.dumps(identifier)},", "    {"]
    lines.extend(f"        {json.dumps(name)}: {annotation}," for name, annotation in fields)
    lines.extend(["    },", ")"])
    return "\n".join(lines)


def _type_for_tag(tag: str, schema: Mapping[str, Any], identifiers: Mapping[str, str]) -> str:
    if tag in _PRIMITIVE_TYPES:
        return _PRIMITIVE_TYPES[tag]
    if tag == "array":
        items = schema.get("items")
        prefix_items = schema.get("prefixItems")
        if isinstance(prefix_items, list) and prefix_items:
            # 2020-12 tuples keep their tail schema under items.
            members = [type_expression(item, identifiers) for item in prefix_items]
            if isinstance(items, Mapping):
                members.append(type_expression(items, identifiers))
            elif items is not False:
                members = ["Any"]
            return f"list[{_union(members) or 'Any'}]"
        if isinstance(items, list):
            element = _union([type_expression(item, identifiers) for item in items]) or "Any"
            if items and schema.get("additionalItems") not in (False, None):
                element = "Any"
            return f"list[{element}]"
        if isinstance(items, Mapping):
            return f"list[{type_expression(items, identifiers)}]"
        return "list[Any]"
    if tag == "object":
        additional = schema.get("additionalProperties")
        if isinstance(additional, Mapping):
            return f"dict[str, {type_expression(additional, identifiers)}]"
        return "dict[str, Any]"
    return "Any"


def _ref_expression(ref: str, identifiers: Mapping[str, str]) -> str:
    if ref.startswith(_DEFINITION_REF_PREFIX):
        name = ref[len(_DEFINITION_REF_PREFIX) :]
        if name in identifiers:
            return identifiers[name]
    return "Any"


def _literal_expression(values: list[Any]) -> str | None:
    rendered: list[str] = []
    for value in values:
        if value is None or isinstance(value, bool):
            rendered.append(repr(value))
        elif isinstance(value, int):
            rendered.append(str(value))
        elif isinstance(value, str):
            rendered.append(json.dumps(value))
        else:
            return None
    unique = list(dict.fromkeys(rendered))
    return f"Literal[{', '.join(unique)}]"


def _union(expressions: list[str]) -> str:
    unique = list(dict.fromkeys(expression for expression in expressions if expression))
    if "Any" in unique:
        return "Any"
    return " | ".join(unique) if unique else "Any"


def _docstring(text: str) -> str:
    cleaned = " ".join(text.split()).replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if cleaned.endswith('"'):
        cleaned += " "
    return f'"""{cleaned}"""'
