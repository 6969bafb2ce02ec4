"""Schema normalization pipeline.

Routes a parsed document to OpenAPI 3.0 or 3.1 semantics and runs the
enabled passes over every definition in a fixed order: null types, const,
prefixItems, conditionals, discriminators (3.0 documents get null types and
exclusive bounds). Disabled passes are skipped entirely, so their output is
identical to never having run them.

3.1 output targets Draft-07 unless a definition uses keywords Draft-07 would
ignore; those documents keep the 2020-12 dialect and their ``prefixItems``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from openapi_typegen.configuration.runtime_settings import NormalizationOptions
from openapi_typegen.document_loading.document_models import OpenAPIVersion, ParsedDocument

from .conditional_normalizer import normalize_conditionals
from .const_normalizer import normalize_const
from .dialect_detection import requires_draft_2020_12
from .discriminator_normalizer import normalize_discriminators
from .exclusive_bounds_normalizer import normalize_exclusive_bounds
from .null_type_normalizer import normalize_null_types
from .prefix_items_normalizer import collect_tuples, normalize_prefix_items
from .schema_traversal import TUPLE_CHILD_SLOTS, find_malformed_slots
from .transform_outcomes import ConditionalPattern, DiscriminatorInfo, TransformResult, TupleInfo
from .webhook_normalizer import normalize_webhooks

_LOGGER = logging.getLogger(__name__)

DRAFT_07 = "http://json-schema.org/draft-07/schema#"
DRAFT_2020_12 = "https://json-schema.org/draft/2020-12/schema"

NULL_TYPES_PASS = "null_types"
EXCLUSIVE_BOUNDS_PASS = "exclusive_bounds"
CONST_KEYWORD_PASS = "const_keyword"
PREFIX_ITEMS_PASS = "prefix_items"
CONDITIONAL_SCHEMAS_PASS = "conditional_schemas"
DISCRIMINATORS_PASS = "discriminators"
WEBHOOKS_PASS = "webhooks"

_COMPONENT_REF_PREFIX = "#/components/schemas/"
_DEFINITION_REF_PREFIX = "#/definitions/"

SchemaPass = Callable[[Any, str], TransformResult]


class UnsupportedVersionError(Exception):
    """Raised when a document version has no processing semantics."""


class ProcessingMode(str, Enum):
    """Semantics applied to a document."""

    OPENAPI30 = "openapi30"
    OPENAPI31 = "openapi31"


@dataclass(frozen=True)
class PassOutcome:
    """Aggregated result of one pass over all definitions."""

    name: str
    was_transformed: bool
    collected_values: tuple[Any, ...] = ()


@dataclass(frozen=True)
class NormalizationReport:
    """What the pipeline did to a document."""

    mode: ProcessingMode
    passes: tuple[PassOutcome, ...] = ()
    issues: tuple[str, ...] = ()

    def outcome(self, pass_name: str) -> PassOutcome | None:
        """Return the outcome of a pass, or None when it did not run."""
        for candidate in self.passes:
            if candidate.name == pass_name:
                return candidate
        return None

    def was_transformed(self, pass_name: str) -> bool:
        """Return True when the named pass ran and rewrote something."""
        outcome = self.outcome(pass_name)
        return outcome is not None and outcome.was_transformed

    @property
    def const_values(self) -> tuple[Any, ...]:
        return self._collected(CONST_KEYWORD_PASS)

    @property
    def conditional_patterns(self) -> tuple[ConditionalPattern, ...]:
        return self._collected(CONDITIONAL_SCHEMAS_PASS)

    @property
    def tuples(self) -> tuple[TupleInfo, ...]:
        return self._collected(PREFIX_ITEMS_PASS)

    @property
    def discriminators(self) -> tuple[DiscriminatorInfo, ...]:
        return self._collected(DISCRIMINATORS_PASS)

    def _collected(self, pass_name: str) -> tuple[Any, ...]:
        outcome = self.outcome(pass_name)
        return outcome.collected_values if outcome else ()


@dataclass(frozen=True)
class NormalizedSchemaSet:
    """Normalized definitions ready for code generation."""

    definitions: Mapping[str, Any]
    dialect: str
    report: NormalizationReport
    webhook_definitions: Mapping[str, Any] = field(default_factory=dict)

    def all_definitions(self) -> dict[str, Any]:
        """Return component and webhook definitions in one mapping."""
        return {**self.definitions, **self.webhook_definitions}

    def as_schema_document(self) -> dict[str, Any]:
        """Return one JSON-Schema document holding every definition."""
        definitions = self.all_definitions()
        return {
            "$schema": self.dialect,
            "type": "object",
            "title": "Schema",
            "definitions": definitions,
            "properties": {
                name: {"$ref": f"{_DEFINITION_REF_PREFIX}{name}"} for name in definitions
            },
        }


def resolve_processing_mode(
    version: OpenAPIVersion | None, options: NormalizationOptions
) -> ProcessingMode:
    """Pick 3.0 or 3.1 semantics for a document version.

    Documents without a version (custom type maps) are plain JSON Schema and
    get 3.1 semantics.

    Raises:
      UnsupportedVersionError: If the version is neither 3.0 nor 3.1 and
        ``fallback_to_openapi30`` is not set.
    """
    if options.treat_as_openapi31 is not None:
        return ProcessingMode.OPENAPI31 if options.treat_as_openapi31 else ProcessingMode.OPENAPI30
    if version is None or version.is_version_31:
        return ProcessingMode.OPENAPI31
    if version.is_version_30:
        return ProcessingMode.OPENAPI30
    if options.fallback_to_openapi30:
        _LOGGER.warning(
            "OpenAPI %s is not supported, falling back to OpenAPI 3.0 processing", version.version
        )
        return ProcessingMode.OPENAPI30
    raise UnsupportedVersionError(
        f"OpenAPI version {version.version} is not supported. "
        "Only OpenAPI 3.0.x and 3.1.x are supported."
    )


def normalize_document(
    document: ParsedDocument, options: NormalizationOptions | None = None
) -> NormalizedSchemaSet:
    """Normalize every definition and, when enabled, the webhooks of a document."""
    resolved_options = options or NormalizationOptions()
    mode = resolve_processing_mode(document.version, resolved_options)
    component_definitions = _rewrite_component_refs(document.definitions)

    webhook_result = None
    if mode is ProcessingMode.OPENAPI31 and resolved_options.enable_webhooks:
        webhook_result = normalize_webhooks(
            _rewrite_component_refs(document.webhooks), reserved_names=tuple(component_definitions)
        )

    dialect = _dialect_for(
        mode,
        resolved_options,
        [component_definitions, webhook_result.definitions if webhook_result else {}],
    )
    passes = _schema_passes(mode, resolved_options, dialect)
    definitions, outcomes, issues = _run_passes(component_definitions, passes)

    webhook_definitions: dict[str, Any] = {}
    if webhook_result is not None:
        outcomes = (
            PassOutcome(
                name=WEBHOOKS_PASS,
                was_transformed=webhook_result.was_transformed,
                collected_values=tuple(webhook_result.definitions),
            ),
            *outcomes,
        )
        webhook_definitions, webhook_outcomes, webhook_issues = _run_passes(
            webhook_result.definitions, passes
        )
        outcomes = _merge_outcomes(outcomes, webhook_outcomes)
        issues = (*issues, *webhook_issues)

    return NormalizedSchemaSet(
        definitions=definitions,
        webhook_definitions=webhook_definitions,
        dialect=dialect,
        report=NormalizationReport(mode=mode, passes=outcomes, issues=issues),
    )


def normalize_definitions(
    definitions: Mapping[str, Any],
    version: OpenAPIVersion | None,
    options: NormalizationOptions | None = None,
) -> NormalizedSchemaSet:
    """Normalize a bare definitions mapping (no webhooks)."""
    document = ParsedDocument(
        source_path=None,
        schema_type="custom" if version is None else "json",
        version=version,
        definitions=definitions,
    )
    return normalize_document(document, options)


def _schema_passes(
    mode: ProcessingMode, options: NormalizationOptions, dialect: str
) -> tuple[tuple[str, SchemaPass], ...]:
    if mode is ProcessingMode.OPENAPI30:
        return (
            (NULL_TYPES_PASS, normalize_null_types),
            (EXCLUSIVE_BOUNDS_PASS, normalize_exclusive_bounds),
        )

    passes: list[tuple[str, SchemaPass]] = []
    if options.strict_null_handling:
        passes.append((NULL_TYPES_PASS, normalize_null_types))
    if options.enable_const_keyword:
        passes.append((CONST_KEYWORD_PASS, lambda node, _location: normalize_const(node)))
    if options.enable_prefix_items:
        tuple_pass = normalize_prefix_items if dialect == DRAFT_07 else collect_tuples
        passes.append((PREFIX_ITEMS_PASS, tuple_pass))
    if options.enable_conditional_schemas:
        passes.append((CONDITIONAL_SCHEMAS_PASS, normalize_conditionals))
    if options.enable_enhanced_discriminator:
        passes.append((DISCRIMINATORS_PASS, normalize_discriminators))
    return tuple(passes)


def _run_passes(
    definitions: Mapping[str, Any], passes: tuple[tuple[str, SchemaPass], ...]
) -> tuple[dict[str, Any], tuple[PassOutcome, ...], tuple[str, ...]]:
    current = dict(definitions)
    outcomes: list[PassOutcome] = []
    for pass_name, schema_pass in passes:
        was_transformed = False
        collected: list[Any] = []
        for name, schema in current.items():
            result = schema_pass(schema, f"{_DEFINITION_REF_PREFIX}{name}")
            current[name] = result.schema
            was_transformed = was_transformed or result.was_transformed
            collected.extend(result.collected_values)
        _LOGGER.debug("Pass %s transformed=%s", pass_name, was_transformed)
        outcomes.append(
            PassOutcome(
                name=pass_name, was_transformed=was_transformed, collected_values=tuple(collected)
            )
        )

    issues: list[str] = []
    for name, schema in current.items():
        for issue in find_malformed_slots(
            schema, slots=TUPLE_CHILD_SLOTS, location=f"{_DEFINITION_REF_PREFIX}{name}"
        ):
            _LOGGER.warning("Malformed schema node left untouched at %s", issue)
            issues.append(issue)
    return current, tuple(outcomes), tuple(issues)


def _merge_outcomes(
    first: tuple[PassOutcome, ...], second: tuple[PassOutcome, ...]
) -> tuple[PassOutcome, ...]:
    extra = {outcome.name: outcome for outcome in second}
    merged: list[PassOutcome] = []
    for outcome in first:
        other = extra.get(outcome.name)
        if other is None:
            merged.append(outcome)
            continue
        merged.append(
            PassOutcome(
                name=outcome.name,
                was_transformed=outcome.was_transformed or other.was_transformed,
                collected_values=(*outcome.collected_values, *other.collected_values),
            )
        )
    return tuple(merged)


def _dialect_for(
    mode: ProcessingMode,
    options: NormalizationOptions,
    definition_maps: Iterable[Mapping[str, Any]],
) -> str:
    if mode is ProcessingMode.OPENAPI30:
        return DRAFT_07
    if not options.enable_prefix_items:
        return DRAFT_2020_12
    for definitions in definition_maps:
        for name, schema in definitions.items():
            if requires_draft_2020_12(schema):
                _LOGGER.debug("Definition %s keeps the 2020-12 dialect", name)
                return DRAFT_2020_12
    return DRAFT_07


def _rewrite_component_refs(value: Any) -> Any:
    if isinstance(value, Mapping):
        rewritten = {key: _rewrite_component_refs(child) for key, child in value.items()}
        ref = rewritten.get("$ref")
        if isinstance(ref, str) and ref.startswith(_COMPONENT_REF_PREFIX):
            rewritten["$ref"] = _DEFINITION_REF_PREFIX + ref[len(_COMPONENT_REF_PREFIX) :]
        return rewritten
    if isinstance(value, list):
        return [_rewrite_component_refs(child) for child in value]
    return value
