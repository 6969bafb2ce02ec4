"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

SCHEMA_TYPES = ("yaml", "json", "custom")


@dataclass(frozen=True)
class NormalizationOptions:  # pylint: disable=too-many-instance-attributes
    """Toggles for the schema normalization pipeline.

    Attributes:
      enable_const_keyword: Complete ``const`` nodes into ``{const, type, enum}``.
      enable_prefix_items: Rewrite ``prefixItems`` tuples into Draft-07 ``items`` arrays
        unless a definition needs the 2020-12 dialect. False keeps 2020-12 output.
      enable_conditional_schemas: Collect if/then/else patterns and drop dangling clauses.
      enable_webhooks: Turn the document's ``webhooks`` map into schema definitions.
      strict_null_handling: Express ``nullable`` and type arrays as JSON-Schema type arrays
        for OpenAPI 3.1 documents (3.0 documents always get this conversion).
      treat_as_openapi31: Force 3.1 (True) or 3.0 (False) semantics; None detects the
        version from the document.
      fallback_to_openapi30: Process documents of an unsupported version with 3.0
        semantics instead of failing.
      enable_enhanced_discriminator: Infer missing discriminator mappings from
        ``oneOf``/``anyOf`` members and pin inline members to their value (3.1 only).
    """

    enable_const_keyword: bool = True
    enable_prefix_items: bool = True
    enable_conditional_schemas: bool = True
    enable_webhooks: bool = False
    strict_null_handling: bool = True
    treat_as_openapi31: bool | None = None
    fallback_to_openapi30: bool = False
    enable_enhanced_discriminator: bool = False


@dataclass(frozen=True)
class SchemaSourceSettings:
    """Location and format of the input document."""

    path: Path
    schema_type: str


@dataclass(frozen=True)
class OutputSettings:
    """Destinations and switches for generated artifacts."""

    directories: tuple[Path, ...]
    skip_meta_file: bool = False
    skip_schema_file: bool = False
    skip_decoders: bool = False


@dataclass(frozen=True)
class GenerationSettings:
    """Top-level configuration aggregate."""

    path: Path
    source: SchemaSourceSettings
    output: OutputSettings
    decoders: tuple[str, ...] | None = None
    add_formats: bool = False
    normalization: NormalizationOptions = field(default_factory=NormalizationOptions)
