"""Validation result entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal


@dataclass(frozen=True)
class ValidationSuccess:
    """Input satisfied its schema; ``data`` is the decoded value."""

    data: Any
    success: Literal[True] = True

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "data": self.data}


@dataclass(frozen=True)
class ValidationFailure:
    """Input violated its schema; ``message`` locates every violation."""

    message: str
    success: Literal[False] = False

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}


ValidationResult = ValidationSuccess | ValidationFailure
