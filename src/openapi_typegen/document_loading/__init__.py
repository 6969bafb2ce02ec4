"""Document loading exports."""

from .document_models import OpenAPIVersion, ParsedDocument
from .document_parser import DocumentError, load_document, parse_document_text
from .version_detection import (
    VersionDetectionError,
    detect_openapi_version,
    is_supported_version,
    parse_version_string,
)

__all__ = [
    "OpenAPIVersion",
    "ParsedDocument",
    "DocumentError",
    "load_document",
    "parse_document_text",
    "VersionDetectionError",
    "detect_openapi_version",
    "is_supported_version",
    "parse_version_string",
]
