"""Generated artifact rendering and writing service."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from openapi_typegen.configuration.runtime_settings import OutputSettings
from openapi_typegen.schema_normalization import NormalizedSchemaSet

from .model_emitter import GENERATED_HEADER, definition_identifiers, render_models

_LOGGER = logging.getLogger(__name__)

MODELS_FILENAME = "models.py"
SCHEMA_FILENAME = "schema.json"
DECODERS_FILENAME = "decoders.py"
META_FILENAME = "meta.py"


class ArtifactWriteError(Exception):
    """Raised when generated artifacts cannot be written."""


@dataclass(frozen=True)
class GeneratedArtifacts:
    """Files written for one generation run."""

    directories: tuple[Path, ...]
    files: tuple[Path, ...]


def render_schema_json(schema_set: NormalizedSchemaSet) -> str:
    """Render the combined ``schema.json`` document."""
    return json.dumps(schema_set.as_schema_document(), indent=2, ensure_ascii=False) + "\n"


def render_decoders_module(
    definition_names: Sequence[str],
    *,
    embedded_schema: Mapping[str, Any] | None = None,
    add_formats: bool = False,
) -> str:
    """Render ``decoders.py`` with one module-level decoder per definition.

    Decoders load ``schema.json`` next to the module, or ``embedded_schema``
    when the schema file is not written.
    """
    identifiers = definition_identifiers(definition_names)
    lines = [
        GENERATED_HEADER,
        '"""Decoders for the generated schema definitions."""',
        "",
        "from __future__ import annotations",
        "",
    ]
    if embedded_schema is None:
        lines.extend(
            [
                "from pathlib import Path",
                "",
                "from openapi_typegen.decoding import Decoder, SchemaRegistry",
                "",
                "_REGISTRY = SchemaRegistry.from_file(",
                f'    Path(__file__).with_name("{SCHEMA_FILENAME}"), add_formats={add_formats!r}',
                ")",
            ]
        )
    else:
        schema_text = json.dumps(embedded_schema, ensure_ascii=False, separators=(",", ":"))
        lines.extend(
            [
                "import json",
                "",
                "from openapi_typegen.decoding import Decoder, SchemaRegistry",
                "",
                f"_SCHEMA = json.loads({schema_text!r})",
                f"_REGISTRY = SchemaRegistry(_SCHEMA, add_formats={add_formats!r})",
            ]
        )
    lines.append("")
    for name in definition_names:
        quoted = json.dumps(name)
        lines.append(f"{identifiers[name]}Decoder: Decoder = _REGISTRY.decoder({quoted})")
    lines.extend(["", "DECODERS: dict[str, Decoder] = {"])
    lines.extend(
        f"    {json.dumps(name)}: {identifiers[name]}Decoder," for name in definition_names
    )
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_meta_module(definition_names: Sequence[str]) -> str:
    """Render ``meta.py`` listing every definition and its schema reference."""
    lines = [
        GENERATED_HEADER,
        '"""Schema metadata for the generated definitions."""',
        "",
        "from __future__ import annotations",
        "",
        "from typing import NamedTuple",
        "",
        "",
        "class SchemaInfo(NamedTuple):",
        "    definition_name: str",
        "    schema_ref: str",
        "",
        "",
        "SCHEMA_DEFINITIONS: dict[str, SchemaInfo] = {",
    ]
    lines.extend(
        f"    {json.dumps(name)}: SchemaInfo({json.dumps(name)}, "
        f"{json.dumps('#/definitions/' + name)}),"
        for name in definition_names
    )
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_generated_artifacts(
    schema_set: NormalizedSchemaSet,
    output: OutputSettings,
    *,
    decoder_names: Iterable[str] | None = None,
    add_formats: bool = False,
) -> GeneratedArtifacts:
    """Write models, schema, decoders and meta modules into every output directory."""
    definitions = schema_set.all_definitions()
    names = list(definitions)
    selected_decoders = names if decoder_names is None else list(decoder_names)

    rendered: dict[str, str] = {MODELS_FILENAME: render_models(definitions)}
    if not output.skip_schema_file:
        rendered[SCHEMA_FILENAME] = render_schema_json(schema_set)
    if not output.skip_decoders:
        rendered[DECODERS_FILENAME] = render_decoders_module(
            selected_decoders,
            embedded_schema=schema_set.as_schema_document() if output.skip_schema_file else None,
            add_formats=add_formats,
        )
    if not output.skip_meta_file:
        rendered[META_FILENAME] = render_meta_module(names)

    written: list[Path] = []
    for directory in output.directories:
        try:
            directory.mkdir(parents=True, exist_ok=True)
            for filename, text in rendered.items():
                destination = directory / filename
                destination.write_text(text, encoding="utf-8")
                written.append(destination)
        except OSError as exc:
            raise ArtifactWriteError(f"Failed to write artifacts to {directory}: {exc}") from exc
        _LOGGER.info("Wrote %d files to %s", len(rendered), directory)

    return GeneratedArtifacts(directories=tuple(output.directories), files=tuple(written))
