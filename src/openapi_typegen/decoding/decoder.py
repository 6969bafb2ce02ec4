"""Runtime decoders built on a normalized schema document.

Every decoder exposes ``validate`` (returns a validation result, never
raises) and ``decode`` (returns the data or raises ``DecodeError``). Both
go through ``Decoder.check`` so they always agree on the same input.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jsonschema import exceptions as jsonschema_exceptions
from jsonschema import validators
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT7, specification_with

from .validation_outcomes import ValidationFailure, ValidationResult, ValidationSuccess

_LOGGER = logging.getLogger(__name__)

PREVIEW_LENGTH = 200
_DEFINITION_REF_PREFIX = "#/definitions/"
# Keywords holding instance data, never sub-schemas.
_DATA_KEYWORDS = frozenset({"const", "default", "enum", "examples"})


class DecodeError(Exception):
    """Raised by ``Decoder.decode`` when input violates the schema."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SchemaRegistryError(Exception):
    """Raised when a schema document cannot back decoders."""


class Decoder:
    """Validator for one named definition."""

    def __init__(self, definition_name: str, validator: Any) -> None:
        self.definition_name = definition_name
        self._validator = validator

    @property
    def schema_ref(self) -> str:
        return f"{_DEFINITION_REF_PREFIX}{self.definition_name}"

    def check(self, json_input: Any) -> ValidationResult:
        """Parse textual input and validate it against the definition."""
        try:
            data = _parse_input(json_input)
        except (ValueError, RecursionError) as exc:
            return ValidationFailure(
                message=f"{self.definition_name} Invalid JSON: {exc}. "
                f"JSON: {_preview(json_input, None)}"
            )

        try:
            errors = sorted(self._validator.iter_errors(data), key=lambda error: error.json_path)
        except Unresolvable as exc:
            return ValidationFailure(
                message=f"{self.definition_name} Unresolvable reference: {_ref_text(exc.ref)}. "
                f"JSON: {_preview(json_input, data)}"
            )
        except RecursionError:
            return ValidationFailure(
                message=f"{self.definition_name} Input is nested too deeply to validate. "
                f"JSON: {_preview(json_input, data)}"
            )
        if not errors:
            return ValidationSuccess(data=data)

        details = "\n".join(
            f"{error.json_path}: {error.message} ({error.validator})" for error in errors
        )
        return ValidationFailure(
            message=f"{self.definition_name} {details}. JSON: {_preview(json_input, data)}"
        )

    def validate(self, json_input: Any) -> ValidationResult:
        """Return ``ValidationSuccess`` or ``ValidationFailure``; never raises."""
        return self.check(json_input)

    def decode(self, json_input: Any) -> Any:
        """Return the decoded value.

        Raises:
          DecodeError: If the input is not valid JSON or violates the schema.
        """
        result = self.check(json_input)
        if isinstance(result, ValidationFailure):
            raise DecodeError(result.message)
        return result.data

    def __repr__(self) -> str:
        return f"Decoder({self.definition_name!r})"


class SchemaRegistry:
    """Decoders for every definition of one schema document."""

    def __init__(self, schema_document: Mapping[str, Any], *, add_formats: bool = False) -> None:
        definitions = schema_document.get("definitions")
        if not isinstance(definitions, Mapping):
            raise SchemaRegistryError('Schema document must contain a "definitions" mapping.')
        self._document = dict(schema_document)
        self._definitions = dict(definitions)
        self._validator_cls = validators.validator_for(self._document)
        self._add_formats = add_formats
        self._decoders: dict[str, Decoder] = {}
        try:
            self._validator_cls.check_schema(self._document)
        except jsonschema_exceptions.SchemaError as exc:
            raise SchemaRegistryError(f"Invalid schema document: {exc.message}") from exc
        self._check_references()

    @classmethod
    def from_file(cls, path: Path | str, *, add_formats: bool = False) -> SchemaRegistry:
        """Load a ``schema.json`` written by the artifact writer."""
        schema_path = Path(path)
        try:
            document = json.loads(schema_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SchemaRegistryError(f"Failed to read schema {schema_path}: {exc}") from exc
        if not isinstance(document, Mapping):
            raise SchemaRegistryError(f"Schema {schema_path} must contain a JSON object.")
        return cls(document, add_formats=add_formats)

    @property
    def definition_names(self) -> tuple[str, ...]:
        return tuple(self._definitions)

    def _check_references(self) -> None:
        """Resolve every local ``$ref`` once so broken references fail at build time."""
        specification = specification_with(str(self._document.get("$schema", "")), default=DRAFT7)
        resource = Resource(contents=self._document, specification=specification)
        base_uri = resource.id() or ""
        registry = Registry().with_resource(base_uri, resource).crawl()
        resolver = registry.resolver(base_uri=base_uri)
        for ref in sorted(set(_local_refs(self._document))):
            try:
                resolver.lookup(ref)
            except Unresolvable as exc:
                raise SchemaRegistryError(f"Unresolvable reference: {ref}") from exc

    def decoder(self, definition_name: str) -> Decoder:
        """Return the (cached) decoder for one definition."""
        cached = self._decoders.get(definition_name)
        if cached is not None:
            return cached
        if definition_name not in self._definitions:
            raise KeyError(f"Unknown definition: {definition_name}")

        schema = {
            "$schema": self._document.get("$schema", ""),
            "definitions": self._definitions,
            "$ref": f"{_DEFINITION_REF_PREFIX}{definition_name}",
        }
        if not schema["$schema"]:
            del schema["$schema"]
        format_checker = self._validator_cls.FORMAT_CHECKER if self._add_formats else None
        decoder = Decoder(
            definition_name, self._validator_cls(schema, format_checker=format_checker)
        )
        _LOGGER.debug("Built decoder for %s", definition_name)
        self._decoders[definition_name] = decoder
        return decoder


def _parse_input(json_input: Any) -> Any:
    if isinstance(json_input, (bytes, bytearray)):
        json_input = json_input.decode("utf-8")
    if isinstance(json_input, str):
        return json.loads(json_input)
    return json_input


def _local_refs(node: Any) -> list[str]:
    if isinstance(node, list):
        return [ref for child in node for ref in _local_refs(child)]
    if not isinstance(node, Mapping):
        return []
    refs: list[str] = []
    ref = node.get("$ref")
    if isinstance(ref, str) and ref.startswith("#"):
        refs.append(ref)
    for keyword, child in node.items():
        if keyword not in _DATA_KEYWORDS:
            refs.extend(_local_refs(child))
    return refs


def _ref_text(ref: str) -> str:
    # Failed pointer lookups report the bare fragment.
    return f"#{ref}" if ref.startswith("/") else ref


def _preview(json_input: Any, data: Any) -> str:
    if isinstance(json_input, (bytes, bytearray)):
        text = json_input.decode("utf-8", errors="replace")
    elif isinstance(json_input, str):
        text = json_input
    else:
        try:
            text = json.dumps(data, default=str)
        except (TypeError, ValueError, RecursionError):
            text = repr(data)
    return text[:PREVIEW_LENGTH]
