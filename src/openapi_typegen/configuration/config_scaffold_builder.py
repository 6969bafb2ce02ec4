"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "typegen.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Generation configuration for openapi-typegen.
# Replace every <REQUIRED> placeholder before running generate.
# Commented keys show their defaults; uncomment them only when you need another value.

schema:
  # Path to the input document, relative to this file.
  path: "<REQUIRED>"
  # One of: yaml, json, custom (a YAML map with "types" and optional "decoders").
  type: yaml

output:
  # Generated modules are written to every listed directory.
  directories:
    - "<REQUIRED>"
  # skip_meta_file: false
  # skip_schema_file: false
  # skip_decoders: false

# Only generate decoders for these definitions (all definitions when omitted).
# decoders:
#   - "<OPTIONAL>"

# Check "format" keywords (email, uuid, date-time, ...) in generated decoders.
# add_formats: false

# normalization:
#   enable_const_keyword: true
#   enable_prefix_items: true
#   enable_conditional_schemas: true
#   enable_webhooks: false
#   strict_null_handling: true
#   # true forces OpenAPI 3.1 semantics, false forces 3.0, null detects the version.
#   treat_as_openapi31: null
#   fallback_to_openapi30: false
#   enable_enhanced_discriminator: false
"""


def build_placeholder_configuration() -> str:
    """Build a YAML generation configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
