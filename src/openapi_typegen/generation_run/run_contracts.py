"""Generation run entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from openapi_typegen.configuration.runtime_settings import GenerationSettings
from openapi_typegen.document_loading.document_models import ParsedDocument
from openapi_typegen.schema_normalization import NormalizationReport


@dataclass(frozen=True)
class GenerationRequest:
    """Input contract for executing one generation run."""

    config_path: str
    output_dir: str | None = None
    dry_run: bool = False


@dataclass(frozen=True)
class GenerationOutcome:
    """Output contract for one completed generation run."""

    definition_names: tuple[str, ...]
    written_files: tuple[Path, ...]
    report: NormalizationReport
    dry_run: bool


@dataclass(frozen=True)
class GenerationArtifacts:
    """Loaded inputs required during a generation run."""

    settings: GenerationSettings
    document: ParsedDocument
