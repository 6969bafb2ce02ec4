"""Document loading entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class OpenAPIVersion:
    """Parsed ``openapi`` version field."""

    version: str
    major: int
    minor: int
    patch: int | None = None

    @property
    def is_version_31(self) -> bool:
        return self.major == 3 and self.minor == 1

    @property
    def is_version_30(self) -> bool:
        return self.major == 3 and self.minor == 0


@dataclass(frozen=True)
class ParsedDocument:
    """Schema definitions and webhooks read from one input document."""

    source_path: Path | None
    schema_type: str
    version: OpenAPIVersion | None
    definitions: Mapping[str, Any]
    webhooks: Mapping[str, Any] = field(default_factory=dict)
    raw: Mapping[str, Any] = field(default_factory=dict)
    whitelisted_decoders: tuple[str, ...] | None = None
