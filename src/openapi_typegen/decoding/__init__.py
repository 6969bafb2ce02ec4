"""Decoding exports."""

from .decoder import DecodeError, Decoder, SchemaRegistry, SchemaRegistryError
from .validation_outcomes import ValidationFailure, ValidationResult, ValidationSuccess

__all__ = [
    "DecodeError",
    "Decoder",
    "SchemaRegistry",
    "SchemaRegistryError",
    "ValidationFailure",
    "ValidationResult",
    "ValidationSuccess",
]
