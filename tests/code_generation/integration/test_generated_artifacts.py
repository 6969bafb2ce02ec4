"""Generated artifact integration tests."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path
from types import ModuleType

import pytest
from openapi_typegen.code_generation import (
    ArtifactWriteError,
    render_decoders_module,
    render_meta_module,
    write_generated_artifacts,
)
from openapi_typegen.configuration.runtime_settings import NormalizationOptions, OutputSettings
from openapi_typegen.document_loading import parse_document_text
from openapi_typegen.schema_normalization import normalize_document

OPENAPI_DOCUMENT = """
openapi: "3.1.0"
info:
  title: Pets
  version: "1.0"
components:
  schemas:
    Pet:
      type: object
      required: [id, kind]
      properties:
        id:
          type: integer
        kind:
          const: pet
        tags:
          type: array
          items:
            $ref: "#/components/schemas/Tag"
    Tag:
      type: string
      enum: [new, old]
    Point:
      type: array
      prefixItems:
        - type: number
        - type: number
      items: false
webhooks:
  newPet:
    post:
      requestBody:
        required: true
        content:
          application/json:
            schema:
              $ref: "#/components/schemas/Pet"
"""


def _schema_set():
    document = parse_document_text(OPENAPI_DOCUMENT, "yaml")
    return normalize_document(document, NormalizationOptions(enable_webhooks=True))


def _import_generated(path: Path, name: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(name, path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_writes_all_artifacts_into_every_directory(tmp_path: Path) -> None:
    output = OutputSettings(directories=(tmp_path / "a", tmp_path / "b"))

    generated = write_generated_artifacts(_schema_set(), output)

    assert generated.directories == (tmp_path / "a", tmp_path / "b")
    for directory in generated.directories:
        assert sorted(path.name for path in directory.iterdir()) == [
            "decoders.py",
            "meta.py",
            "models.py",
            "schema.json",
        ]
    assert len(generated.files) == 8


def test_schema_file_holds_normalized_definitions(tmp_path: Path) -> None:
    write_generated_artifacts(_schema_set(), OutputSettings(directories=(tmp_path,)))

    schema = json.loads((tmp_path / "schema.json").read_text(encoding="utf-8"))

    assert schema["$schema"] == "http://json-schema.org/draft-07/schema#"
    assert list(schema["definitions"]) == ["Pet", "Tag", "Point", "NewPetPostWebhook"]
    assert schema["definitions"]["Pet"]["properties"]["kind"] == {
        "const": "pet",
        "type": "string",
        "enum": ["pet"],
    }
    assert schema["definitions"]["Pet"]["properties"]["tags"]["items"] == {
        "$ref": "#/definitions/Tag"
    }
    assert schema["properties"]["Point"] == {"$ref": "#/definitions/Point"}


def test_generated_decoders_implement_the_validation_result_contract(tmp_path: Path) -> None:
    write_generated_artifacts(_schema_set(), OutputSettings(directories=(tmp_path,)))

    decoders = _import_generated(tmp_path / "decoders.py", "generated_decoders_contract")

    success = decoders.PetDecoder.validate({"id": 1, "kind": "pet", "tags": ["new"]})
    failure = decoders.PetDecoder.validate({"id": 1, "kind": "cat"})
    assert success.to_dict() == {
        "success": True,
        "data": {"id": 1, "kind": "pet", "tags": ["new"]},
    }
    assert failure.success is False
    assert failure.message.startswith("Pet $.kind:")
    assert decoders.PointDecoder.decode("[1.5, 2]") == [1.5, 2]
    assert decoders.PointDecoder.validate([1, 2, 3]).success is False
    assert decoders.NewPetPostWebhookDecoder.validate(
        {"requestBody": {"applicationJson": {"id": 1, "kind": "pet"}}}
    ).success
    assert set(decoders.DECODERS) == {"Pet", "Tag", "Point", "NewPetPostWebhook"}


def test_generated_models_and_meta_import(tmp_path: Path) -> None:
    write_generated_artifacts(_schema_set(), OutputSettings(directories=(tmp_path,)))

    models = _import_generated(tmp_path / "models.py", "generated_models_import")
    meta = _import_generated(tmp_path / "meta.py", "generated_meta_import")

    assert models.Pet.__required_keys__ == frozenset({"id", "kind"})
    assert models.Tag == 'Literal["new", "old"]'
    assert meta.SCHEMA_DEFINITIONS["Pet"] == ("Pet", "#/definitions/Pet")
    assert meta.SCHEMA_DEFINITIONS["Pet"].schema_ref == "#/definitions/Pet"


def test_skip_flags_omit_files_and_embed_schema(tmp_path: Path) -> None:
    output = OutputSettings(
        directories=(tmp_path,), skip_meta_file=True, skip_schema_file=True
    )

    write_generated_artifacts(_schema_set(), output, decoder_names=["Tag"])

    assert sorted(path.name for path in tmp_path.iterdir()) == ["decoders.py", "models.py"]
    decoders = _import_generated(tmp_path / "decoders.py", "generated_decoders_embedded")
    assert list(decoders.DECODERS) == ["Tag"]
    assert decoders.TagDecoder.decode('"old"') == "old"
    assert decoders.TagDecoder.validate('"other"').success is False


def test_skip_decoders_writes_no_decoder_module(tmp_path: Path) -> None:
    output = OutputSettings(directories=(tmp_path,), skip_decoders=True)

    write_generated_artifacts(_schema_set(), output)

    assert not (tmp_path / "decoders.py").exists()
    assert (tmp_path / "schema.json").exists()


def test_add_formats_is_passed_to_generated_decoders() -> None:
    source = render_decoders_module(["Pet"], add_formats=True)

    assert "add_formats=True" in source
    assert 'PetDecoder: Decoder = _REGISTRY.decoder("Pet")' in source


def test_meta_module_lists_schema_references() -> None:
    source = render_meta_module(["Pet", "Tag"])

    assert '"Pet": SchemaInfo("Pet", "#/definitions/Pet"),' in source
    assert '"Tag": SchemaInfo("Tag", "#/definitions/Tag"),' in source


def test_unwritable_directory_raises_artifact_write_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")

    with pytest.raises(ArtifactWriteError, match="Failed to write artifacts"):
        write_generated_artifacts(_schema_set(), OutputSettings(directories=(blocker / "out",)))
