"""Tests for repository toolchain baseline configuration."""

from __future__ import annotations

import tomllib
from pathlib import Path


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _pyproject() -> dict:
    pyproject_path = _project_root() / "pyproject.toml"
    return tomllib.loads(pyproject_path.read_text(encoding="utf-8"))


def test_project_uses_python_311_baseline_in_pyproject() -> None:
    pyproject = _pyproject()

    assert pyproject["project"]["requires-python"] == ">=3.11"
    assert pyproject["tool"]["ruff"]["target-version"] == "py311"
    assert pyproject["tool"]["mypy"]["python_version"] == "3.11"


def test_project_uses_uv_style_metadata_without_poetry() -> None:
    pyproject = _pyproject()
    dev_dependencies = pyproject["dependency-groups"]["dev"]

    assert "black" not in dev_dependencies
    assert "black" not in pyproject["tool"]
    assert "poetry" not in pyproject["tool"]
    assert pyproject["build-system"]["build-backend"] != "poetry.core.masonry.api"


def test_generated_decoders_runtime_is_a_declared_dependency() -> None:
    dependencies = " ".join(_pyproject()["project"]["dependencies"])

    assert "jsonschema" in dependencies
    assert "PyYAML" in dependencies
    assert "click" in dependencies


def test_dry_run_is_documented_for_the_generate_command() -> None:
    project_root = _project_root()

    files_to_check = (
        project_root / "README.md",
        project_root / "src" / "openapi_typegen" / "cli.py",
    )
    for path in files_to_check:
        text = path.read_text(encoding="utf-8")
        assert "--dry-run" in text
        for line in text.splitlines():
            lowered = line.lower()
            if "--dry-run" in lowered:
                assert "experimental" not in lowered
