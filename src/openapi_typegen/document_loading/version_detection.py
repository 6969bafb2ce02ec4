"""OpenAPI version detection."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .document_models import OpenAPIVersion

_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?(?:-.*)?$")


class VersionDetectionError(Exception):
    """Raised when a document's OpenAPI version cannot be determined."""


def detect_openapi_version(document: Any) -> OpenAPIVersion:
    """Read the ``openapi`` field of a parsed document."""
    if not isinstance(document, Mapping):
        raise VersionDetectionError("Document root must be a mapping.")
    version_field = document.get("openapi")
    if version_field is None:
        raise VersionDetectionError(
            'Missing "openapi" field. This may not be an OpenAPI document.'
        )
    if not isinstance(version_field, str):
        raise VersionDetectionError("OpenAPI version must be a string.")
    return parse_version_string(version_field)


def parse_version_string(version_string: str) -> OpenAPIVersion:
    """Parse ``major.minor[.patch][-suffix]``."""
    match = _VERSION_PATTERN.match(version_string.strip())
    if not match:
        raise VersionDetectionError(
            f'Invalid OpenAPI version format: "{version_string}". '
            'Expected format: "major.minor.patch".'
        )
    patch = match.group(3)
    return OpenAPIVersion(
        version=version_string,
        major=int(match.group(1)),
        minor=int(match.group(2)),
        patch=int(patch) if patch is not None else None,
    )


def is_supported_version(version: OpenAPIVersion) -> bool:
    """Return True for OpenAPI 3.0.x and 3.1.x."""
    return version.is_version_30 or version.is_version_31
