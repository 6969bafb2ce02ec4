"""Input document parsing service."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .document_models import ParsedDocument
from .version_detection import VersionDetectionError, detect_openapi_version

_LOGGER = logging.getLogger(__name__)


class DocumentError(Exception):
    """Raised for unreadable or structurally unusable input documents."""


def load_document(path: Path | str, schema_type: str) -> ParsedDocument:
    """Read and parse an OpenAPI (yaml/json) or custom type-map document."""
    source_path = Path(path)
    if not source_path.exists():
        raise DocumentError(f"Schema file not found: {source_path}")
    try:
        text = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(f"Failed to read schema file {source_path}: {exc}") from exc
    return parse_document_text(text, schema_type, source_path=source_path)


def parse_document_text(
    text: str, schema_type: str, *, source_path: Path | None = None
) -> ParsedDocument:
    """Parse document text of the given schema type."""
    root = _parse_text(text, schema_type)
    if not isinstance(root, Mapping):
        raise DocumentError("Document root must be a mapping.")
    if schema_type == "custom":
        return _custom_document(root, source_path)
    return _openapi_document(root, schema_type, source_path)


def _parse_text(text: str, schema_type: str) -> Any:
    if schema_type == "json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentError(f"Invalid JSON document: {exc}") from exc
    if schema_type in ("yaml", "custom"):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise DocumentError(f"Invalid YAML document: {exc}") from exc
    raise DocumentError(f"Unsupported schema type: {schema_type}")


def _openapi_document(
    root: Mapping[str, Any], schema_type: str, source_path: Path | None
) -> ParsedDocument:
    try:
        version = detect_openapi_version(root)
    except VersionDetectionError as exc:
        raise DocumentError(str(exc)) from exc

    components = root.get("components") or {}
    schemas = components.get("schemas") if isinstance(components, Mapping) else None
    if schemas is None:
        schemas = {}
    if not isinstance(schemas, Mapping):
        raise DocumentError("components.schemas must be a mapping.")

    webhooks = root.get("webhooks") or {}
    if not isinstance(webhooks, Mapping):
        _LOGGER.warning("Ignoring webhooks: expected a mapping, got %s", type(webhooks).__name__)
        webhooks = {}

    _LOGGER.debug(
        "Parsed OpenAPI %s document with %d schemas and %d webhooks",
        version.version,
        len(schemas),
        len(webhooks),
    )
    return ParsedDocument(
        source_path=source_path,
        schema_type=schema_type,
        version=version,
        definitions=dict(schemas),
        webhooks=dict(webhooks),
        raw=root,
    )


def _custom_document(root: Mapping[str, Any], source_path: Path | None) -> ParsedDocument:
    types = root.get("types")
    if not isinstance(types, Mapping):
        raise DocumentError('Custom schema "types" must be a mapping.')
    decoders = root.get("decoders")
    whitelisted: tuple[str, ...] | None = None
    if decoders is not None:
        if not isinstance(decoders, Sequence) or isinstance(decoders, str):
            raise DocumentError('Custom schema "decoders" must be a list of names.')
        whitelisted = tuple(str(name) for name in decoders)
    return ParsedDocument(
        source_path=source_path,
        schema_type="custom",
        version=None,
        definitions=dict(types),
        raw=root,
        whitelisted_decoders=whitelisted,
    )
