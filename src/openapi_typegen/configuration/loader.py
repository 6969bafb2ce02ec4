"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    SCHEMA_TYPES,
    GenerationSettings,
    NormalizationOptions,
    OutputSettings,
    SchemaSourceSettings,
)

_NORMALIZATION_FLAGS = (
    "enable_const_keyword",
    "enable_prefix_items",
    "enable_conditional_schemas",
    "enable_webhooks",
    "strict_null_handling",
    "fallback_to_openapi30",
    "enable_enhanced_discriminator",
)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> GenerationSettings:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    source = _parse_schema_section(parsed.get("schema"), path.parent)
    output = _parse_output_section(parsed.get("output"), path.parent)
    decoders = _optional_string_sequence(parsed.get("decoders"), "decoders")
    add_formats = _optional_bool(parsed.get("add_formats"), "add_formats", default=False)
    normalization = _parse_normalization_section(parsed.get("normalization"))

    return GenerationSettings(
        path=path,
        source=source,
        output=output,
        decoders=decoders,
        add_formats=add_formats,
        normalization=normalization,
    )


def _parse_schema_section(value: Any, base_path: Path) -> SchemaSourceSettings:
    section = _require_mapping(value, "schema")
    raw_path = _require_non_empty_string(section.get("path"), "schema.path")
    schema_type = _require_non_empty_string(section.get("type", "yaml"), "schema.type").lower()
    if schema_type not in SCHEMA_TYPES:
        raise ConfigurationError(
            f"schema.type must be one of {', '.join(SCHEMA_TYPES)}; got '{schema_type}'."
        )
    schema_path = _resolve_path(base_path, raw_path)
    if not schema_path.exists():
        raise ConfigurationError(f"Schema file not found: {schema_path}")
    return SchemaSourceSettings(path=schema_path, schema_type=schema_type)


def _parse_output_section(value: Any, base_path: Path) -> OutputSettings:
    section = _require_mapping(value, "output")
    raw_directories = section.get("directories", section.get("directory"))
    names = _optional_string_sequence(raw_directories, "output.directories")
    if not names:
        raise ConfigurationError("output.directories must contain at least one directory.")
    return OutputSettings(
        directories=tuple(_resolve_path(base_path, name) for name in names),
        skip_meta_file=_optional_bool(
            section.get("skip_meta_file"), "output.skip_meta_file", default=False
        ),
        skip_schema_file=_optional_bool(
            section.get("skip_schema_file"), "output.skip_schema_file", default=False
        ),
        skip_decoders=_optional_bool(
            section.get("skip_decoders"), "output.skip_decoders", default=False
        ),
    )


def _parse_normalization_section(value: Any) -> NormalizationOptions:
    if value is None:
        return NormalizationOptions()
    section = _require_mapping(value, "normalization")
    unknown = sorted(set(section) - {*_NORMALIZATION_FLAGS, "treat_as_openapi31"})
    if unknown:
        raise ConfigurationError(f"Unknown normalization options: {', '.join(unknown)}.")

    defaults = NormalizationOptions()
    flags = {
        name: _optional_bool(
            section.get(name), f"normalization.{name}", default=getattr(defaults, name)
        )
        for name in _NORMALIZATION_FLAGS
    }
    treat_as_openapi31 = section.get("treat_as_openapi31")
    if treat_as_openapi31 is not None and not isinstance(treat_as_openapi31, bool):
        raise ConfigurationError("normalization.treat_as_openapi31 must be a boolean or null.")
    return NormalizationOptions(treat_as_openapi31=treat_as_openapi31, **flags)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_bool(value: Any, field_name: str, *, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _optional_string_sequence(value: Any, field_name: str) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")
