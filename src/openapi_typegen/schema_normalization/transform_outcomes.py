"""Schema normalization result entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TransformResult:
    """Outcome of one recursive transform over a schema subtree."""

    schema: Any
    was_transformed: bool
    collected_values: tuple[Any, ...] = ()


@dataclass(frozen=True)
class WebhookTransformResult:
    """Definitions synthesized from a webhook map."""

    was_transformed: bool
    definitions: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WebhookConfigReport:
    """Structural problems found in a webhook map."""

    errors: tuple[str, ...]

    @property
    def is_valid(self) -> bool:
        """Return True when no structural problems were found."""
        return not self.errors


@dataclass(frozen=True)
class TupleInfo:
    """Tuple shape recorded while rewriting prefixItems."""

    location: str
    length: int
    closed: bool


@dataclass(frozen=True)
class ConditionalPattern:
    """One if/then/else occurrence found in a schema tree."""

    location: str
    if_schema: Any
    then_schema: Any = None
    else_schema: Any = None


@dataclass(frozen=True)
class DiscriminatorInfo:
    """One discriminator found in a schema tree.

    ``mapping`` is the explicit mapping, or the one inferred from the union
    members when ``inferred`` is set.
    """

    location: str
    property_name: str
    mapping: Mapping[str, str] = field(default_factory=dict)
    inferred: bool = False
    nested: bool = False
    inheritance: bool = False
