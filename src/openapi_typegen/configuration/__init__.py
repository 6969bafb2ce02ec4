"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration
from .runtime_settings import (
    SCHEMA_TYPES,
    GenerationSettings,
    NormalizationOptions,
    OutputSettings,
    SchemaSourceSettings,
)

__all__ = [
    "SCHEMA_TYPES",
    "GenerationSettings",
    "NormalizationOptions",
    "OutputSettings",
    "SchemaSourceSettings",
    "ConfigurationError",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
