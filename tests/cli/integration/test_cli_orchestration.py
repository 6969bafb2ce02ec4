"""CLI orchestration integration tests."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner
from openapi_typegen.cli import cli

OPENAPI_31_DOCUMENT = """
openapi: "3.1.0"
info:
  title: Pets
  version: "1.0"
components:
  schemas:
    Pet:
      type: object
      properties:
        kind:
          const: pet
        position:
          type: array
          prefixItems:
            - type: number
            - type: number
    Tag:
      type: string
webhooks:
  newPet:
    post:
      requestBody:
        content:
          application/json:
            schema:
              $ref: "#/components/schemas/Pet"
"""

MALFORMED_DOCUMENT = """
openapi: "3.1.0"
info:
  title: Pets
  version: "1.0"
components:
  schemas:
    Broken:
      type: object
      properties: [a]
"""

DISCRIMINATED_DOCUMENT = """
openapi: "3.1.0"
info:
  title: Pets
  version: "1.0"
components:
  schemas:
    Pet:
      oneOf:
        - $ref: "#/components/schemas/Cat"
        - $ref: "#/components/schemas/Dog"
      discriminator:
        propertyName: petType
    Cat:
      type: object
      properties:
        petType:
          type: string
    Dog:
      type: object
      properties:
        petType:
          type: string
"""

OPENAPI_30_DOCUMENT = """
openapi: "3.0.3"
info:
  title: Pets
  version: "1.0"
components:
  schemas:
    Tag:
      type: string
      nullable: true
"""


def _write_config(tmp_path: Path, document: str = OPENAPI_31_DOCUMENT) -> Path:
    (tmp_path / "openapi.yaml").write_text(document, encoding="utf-8")
    path = tmp_path / "typegen.yaml"
    path.write_text(
        "schema:\n  path: openapi.yaml\noutput:\n  directories:\n    - generated\n",
        encoding="utf-8",
    )
    return path


def test_generate_command_writes_artifacts(tmp_path: Path) -> None:
    runner = CliRunner()
    config_path = _write_config(tmp_path)

    result = runner.invoke(cli, ["generate", "--config", str(config_path)])

    assert result.exit_code == 0
    generated = tmp_path / "generated"
    assert str((generated / "models.py").resolve()) in result.output
    schema = json.loads((generated / "schema.json").read_text(encoding="utf-8"))
    assert schema["definitions"]["Pet"]["properties"]["position"] == {
        "type": "array",
        "items": [{"type": "number"}, {"type": "number"}],
        "additionalItems": True,
        "minItems": 2,
    }


def test_generate_command_dry_run_reports_definition_count(tmp_path: Path) -> None:
    runner = CliRunner()
    config_path = _write_config(tmp_path)

    result = runner.invoke(cli, ["generate", "--config", str(config_path), "--dry-run"])

    assert result.exit_code == 0
    assert "2 definitions normalized (dry run)" in result.output
    assert not (tmp_path / "generated").exists()


def test_generate_command_honours_output_dir(tmp_path: Path) -> None:
    runner = CliRunner()
    config_path = _write_config(tmp_path)
    output_dir = tmp_path / "elsewhere"

    result = runner.invoke(
        cli,
        ["generate", "--config", str(config_path), "--output-dir", str(output_dir)],
    )

    assert result.exit_code == 0
    assert (output_dir / "decoders.py").exists()
    assert not (tmp_path / "generated").exists()


def test_generate_command_returns_error_for_unsupported_version(tmp_path: Path) -> None:
    runner = CliRunner()
    config_path = _write_config(tmp_path, 'openapi: "2.0"\n')

    result = runner.invoke(cli, ["generate", "--config", str(config_path)])

    assert result.exit_code != 0
    assert "OpenAPI version 2.0 is not supported" in str(result.exception)


def test_inspect_command_prints_normalization_report(tmp_path: Path) -> None:
    runner = CliRunner()
    _write_config(tmp_path)

    result = runner.invoke(
        cli, ["inspect", "--schema", str(tmp_path / "openapi.yaml"), "--webhooks"]
    )

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "mode: openapi31" in lines
    assert "dialect: http://json-schema.org/draft-07/schema#" in lines
    assert "definitions: Pet, Tag" in lines
    assert "webhook definitions: NewPetPostWebhook" in lines
    assert "pass webhooks: transformed" in lines
    assert "pass const_keyword: transformed" in lines
    assert "pass prefix_items: transformed" in lines
    assert "pass conditional_schemas: unchanged" in lines
    assert "tuples: 1" in lines
    assert "discriminators: 0" in lines


def test_inspect_command_lists_malformed_nodes(tmp_path: Path) -> None:
    runner = CliRunner()
    _write_config(tmp_path, MALFORMED_DOCUMENT)

    result = runner.invoke(cli, ["inspect", "--schema", str(tmp_path / "openapi.yaml")])

    assert result.exit_code == 0
    assert (
        "issue: #/definitions/Broken/properties: expected a mapping of names to schemas"
        in result.output.splitlines()
    )


def test_generate_command_rejects_schema_decoders_cannot_load(tmp_path: Path) -> None:
    runner = CliRunner()
    config_path = _write_config(tmp_path, MALFORMED_DOCUMENT)

    result = runner.invoke(cli, ["generate", "--config", str(config_path)])

    assert result.exit_code != 0
    assert "Normalized schema is not usable by decoders" in str(result.exception)
    assert not (tmp_path / "generated").exists()


def test_inspect_command_reports_inferred_discriminators(tmp_path: Path) -> None:
    runner = CliRunner()
    _write_config(tmp_path, DISCRIMINATED_DOCUMENT)

    result = runner.invoke(
        cli,
        ["inspect", "--schema", str(tmp_path / "openapi.yaml"), "--discriminators"],
    )

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "dialect: http://json-schema.org/draft-07/schema#" in lines
    assert "pass discriminators: transformed" in lines
    assert "discriminators: 1" in lines


def test_inspect_command_uses_openapi30_semantics(tmp_path: Path) -> None:
    runner = CliRunner()
    _write_config(tmp_path, OPENAPI_30_DOCUMENT)

    result = runner.invoke(cli, ["inspect", "--schema", str(tmp_path / "openapi.yaml")])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "mode: openapi30" in lines
    assert "pass null_types: transformed" in lines
    assert "const values: 0" in lines


def test_generate_config_command_writes_placeholder_file_with_default_name(
    tmp_path: Path,
) -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=str(tmp_path)):
        result = runner.invoke(cli, ["generate-config"])
        output_path = Path("typegen.yaml").resolve()

        assert result.exit_code == 0
        assert output_path.exists()
        content = output_path.read_text(encoding="utf-8")
        assert "schema:" in content
        assert "output:" in content
