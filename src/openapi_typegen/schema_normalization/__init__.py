"""Schema normalization exports."""

from .conditional_normalizer import has_conditionals, normalize_conditionals
from .const_normalizer import (
    ABSENT,
    InvalidConstValueError,
    assert_valid_const,
    create_const_schema,
    extract_const_values,
    has_const,
    normalize_const,
)
from .dialect_detection import DRAFT_2020_12_KEYWORDS, requires_draft_2020_12
from .discriminator_normalizer import (
    InvalidDiscriminatorError,
    extract_discriminator_info,
    has_discriminators,
    normalize_discriminators,
    validate_discriminator,
)
from .exclusive_bounds_normalizer import normalize_exclusive_bounds
from .normalization_pipeline import (
    DRAFT_07,
    DRAFT_2020_12,
    NormalizationReport,
    NormalizedSchemaSet,
    PassOutcome,
    ProcessingMode,
    UnsupportedVersionError,
    normalize_definitions,
    normalize_document,
    resolve_processing_mode,
)
from .null_type_normalizer import normalize_null_types
from .prefix_items_normalizer import collect_tuples, has_prefix_items, normalize_prefix_items
from .schema_traversal import find_malformed_slots
from .transform_outcomes import (
    ConditionalPattern,
    DiscriminatorInfo,
    TransformResult,
    TupleInfo,
    WebhookConfigReport,
    WebhookTransformResult,
)
from .type_inference import SCHEMA_TYPE_TAGS, infer_type
from .webhook_normalizer import (
    has_webhooks,
    normalize_webhooks,
    validate_webhook_config,
    webhook_definition_name,
    webhook_names,
)

__all__ = [
    "SCHEMA_TYPE_TAGS",
    "infer_type",
    "ABSENT",
    "InvalidConstValueError",
    "assert_valid_const",
    "create_const_schema",
    "extract_const_values",
    "has_const",
    "normalize_const",
    "has_webhooks",
    "normalize_webhooks",
    "validate_webhook_config",
    "webhook_definition_name",
    "webhook_names",
    "has_conditionals",
    "normalize_conditionals",
    "has_prefix_items",
    "normalize_prefix_items",
    "collect_tuples",
    "normalize_null_types",
    "normalize_exclusive_bounds",
    "InvalidDiscriminatorError",
    "extract_discriminator_info",
    "has_discriminators",
    "normalize_discriminators",
    "validate_discriminator",
    "DRAFT_2020_12_KEYWORDS",
    "requires_draft_2020_12",
    "find_malformed_slots",
    "ConditionalPattern",
    "DiscriminatorInfo",
    "TransformResult",
    "TupleInfo",
    "WebhookConfigReport",
    "WebhookTransformResult",
    "DRAFT_07",
    "DRAFT_2020_12",
    "NormalizationReport",
    "NormalizedSchemaSet",
    "PassOutcome",
    "ProcessingMode",
    "UnsupportedVersionError",
    "normalize_definitions",
    "normalize_document",
    "resolve_processing_mode",
]
