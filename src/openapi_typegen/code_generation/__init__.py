"""Code generation exports."""

from .artifact_writer import (
    DECODERS_FILENAME,
    META_FILENAME,
    MODELS_FILENAME,
    SCHEMA_FILENAME,
    ArtifactWriteError,
    GeneratedArtifacts,
    render_decoders_module,
    render_meta_module,
    render_schema_json,
    write_generated_artifacts,
)
from .model_emitter import definition_identifiers, python_identifier, render_models, type_expression

__all__ = [
    "DECODERS_FILENAME",
    "META_FILENAME",
    "MODELS_FILENAME",
    "SCHEMA_FILENAME",
    "ArtifactWriteError",
    "GeneratedArtifacts",
    "render_decoders_module",
    "render_meta_module",
    "render_schema_json",
    "write_generated_artifacts",
    "definition_identifiers",
    "python_identifier",
    "render_models",
    "type_expression",
]
