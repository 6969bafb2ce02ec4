"""Generation run domain exports."""

from .generation_use_case import GenerationError, execute_generation_run, inspect_schema
from .run_contracts import GenerationArtifacts, GenerationOutcome, GenerationRequest

__all__ = [
    "GenerationRequest",
    "GenerationOutcome",
    "GenerationArtifacts",
    "GenerationError",
    "execute_generation_run",
    "inspect_schema",
]
