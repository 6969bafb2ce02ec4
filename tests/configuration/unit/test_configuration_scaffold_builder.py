"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from openapi_typegen.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from openapi_typegen.configuration.loader import load_configuration
from openapi_typegen.configuration.runtime_settings import NormalizationOptions


def test_build_placeholder_configuration_contains_all_supported_sections() -> None:
    scaffold = build_placeholder_configuration()

    assert "Generation configuration for openapi-typegen" in scaffold
    assert "schema:" in scaffold
    assert "output:" in scaffold
    assert "# decoders:" in scaffold
    assert "# add_formats: false" in scaffold
    assert "# normalization:" in scaffold
    assert "enable_webhooks: false" in scaffold
    assert "<REQUIRED>" in scaffold
    assert "<OPTIONAL>" in scaffold


def test_filled_placeholder_configuration_loads_with_defaults(tmp_path: Path) -> None:
    (tmp_path / "openapi.yaml").write_text('openapi: "3.1.0"\n', encoding="utf-8")
    scaffold = build_placeholder_configuration()
    filled = scaffold.replace('path: "<REQUIRED>"', 'path: "openapi.yaml"').replace(
        '- "<REQUIRED>"', '- "generated"'
    )
    config_path = tmp_path / "typegen.yaml"
    config_path.write_text(filled, encoding="utf-8")

    settings = load_configuration(config_path)

    assert settings.source.path == (tmp_path / "openapi.yaml").resolve()
    assert settings.output.directories == ((tmp_path / "generated").resolve(),)
    assert settings.normalization == NormalizationOptions()


def test_write_placeholder_configuration_writes_file(tmp_path: Path) -> None:
    output_path = tmp_path / "typegen.yaml"

    written_path = write_placeholder_configuration(output_path)

    assert written_path == output_path.resolve()
    assert output_path.exists()
    assert "<REQUIRED>" in output_path.read_text(encoding="utf-8")


def test_write_placeholder_configuration_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "typegen.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_configuration(output_path)
