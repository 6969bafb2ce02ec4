"""Generation run use-case service."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

from openapi_typegen.code_generation import ArtifactWriteError, write_generated_artifacts
from openapi_typegen.configuration import (
    ConfigurationError,
    GenerationSettings,
    NormalizationOptions,
    load_configuration,
)
from openapi_typegen.decoding import SchemaRegistry, SchemaRegistryError
from openapi_typegen.document_loading import DocumentError, ParsedDocument, load_document
from openapi_typegen.schema_normalization import (
    NormalizedSchemaSet,
    UnsupportedVersionError,
    normalize_document,
    validate_webhook_config,
)

from .run_contracts import GenerationArtifacts, GenerationOutcome, GenerationRequest

_LOGGER = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when a generation run cannot be completed."""


def execute_generation_run(request: GenerationRequest) -> GenerationOutcome:
    """Load, normalize and write the artifacts for one configuration file."""
    artifacts = _load_generation_artifacts(request.config_path)
    settings = _with_output_override(artifacts.settings, request.output_dir)

    schema_set = _normalize(artifacts.document, settings.normalization)
    _check_schema_document(schema_set)
    decoder_names = _resolve_decoder_names(settings, artifacts.document, schema_set)
    definition_names = tuple(schema_set.all_definitions())

    if request.dry_run:
        _LOGGER.info("Dry run: %d definitions normalized, nothing written", len(definition_names))
        return GenerationOutcome(
            definition_names=definition_names,
            written_files=(),
            report=schema_set.report,
            dry_run=True,
        )

    try:
        generated = write_generated_artifacts(
            schema_set,
            settings.output,
            decoder_names=decoder_names,
            add_formats=settings.add_formats,
        )
    except ArtifactWriteError as exc:
        raise GenerationError(str(exc)) from exc
    return GenerationOutcome(
        definition_names=definition_names,
        written_files=generated.files,
        report=schema_set.report,
        dry_run=False,
    )


def inspect_schema(
    schema_path: Path | str,
    schema_type: str,
    options: NormalizationOptions | None = None,
) -> NormalizedSchemaSet:
    """Normalize one document without writing anything."""
    try:
        document = load_document(schema_path, schema_type)
    except DocumentError as exc:
        raise GenerationError(str(exc)) from exc
    return _normalize(document, options or NormalizationOptions())


def _load_generation_artifacts(config_path: str) -> GenerationArtifacts:
    try:
        settings = load_configuration(config_path)
        document = load_document(settings.source.path, settings.source.schema_type)
    except (ConfigurationError, DocumentError) as exc:
        raise GenerationError(str(exc)) from exc
    return GenerationArtifacts(settings=settings, document=document)


def _normalize(document: ParsedDocument, options: NormalizationOptions) -> NormalizedSchemaSet:
    if options.enable_webhooks and document.webhooks:
        report = validate_webhook_config(document.webhooks)
        for error in report.errors:
            _LOGGER.warning("Webhook configuration: %s", error)
    try:
        return normalize_document(document, options)
    except UnsupportedVersionError as exc:
        raise GenerationError(str(exc)) from exc


def _check_schema_document(schema_set: NormalizedSchemaSet) -> None:
    """Fail before writing when the generated decoders could not load the schema."""
    try:
        SchemaRegistry(schema_set.as_schema_document())
    except SchemaRegistryError as exc:
        raise GenerationError(f"Normalized schema is not usable by decoders: {exc}") from exc


def _resolve_decoder_names(
    settings: GenerationSettings, document: ParsedDocument, schema_set: NormalizedSchemaSet
) -> tuple[str, ...] | None:
    requested = settings.decoders
    if requested is None:
        requested = document.whitelisted_decoders
    if requested is None:
        return None
    available = schema_set.all_definitions()
    unknown = [name for name in requested if name not in available]
    if unknown:
        raise GenerationError(f"Unknown decoder definitions: {', '.join(unknown)}")
    return tuple(requested)


def _with_output_override(
    settings: GenerationSettings, output_dir: str | None
) -> GenerationSettings:
    if output_dir is None:
        return settings
    output = dataclasses.replace(settings.output, directories=(Path(output_dir).resolve(),))
    return dataclasses.replace(settings, output=output)
