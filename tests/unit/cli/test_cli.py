"""Unit tests for layergen CLI command entrypoints."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from click.testing import Result
from typer.testing import CliRunner

from layergen.cli.cli import app

from tests.unit.helpers import write_generator_config

_RUNNER = CliRunner()

CONFIG_PATH = "Assets/Chars/Hero.generator.yaml"
TARGET_PATH = "Assets/Chars/Hero.generated.controller"


def _invoke(project_root: Path, *args: str) -> Result:
    return _RUNNER.invoke(app, [*args, "--project-root", str(project_root)])


@pytest.mark.unit
def test_init_writes_default_settings(project_root: Path) -> None:
    """`layergen init` should write settings once and keep them afterwards."""
    result = _invoke(project_root, "init")

    assert result.exit_code == 0
    assert "written" in result.stdout
    assert (project_root / ".layergen" / "config.yaml").exists()

    again = _invoke(project_root, "init")
    assert again.exit_code == 0
    assert "exists" in again.stdout


@pytest.mark.unit
def test_generate_creates_target_and_persists_identifier(project_root: Path) -> None:
    """`layergen generate` should create the target and save the new identifier."""
    config_file = write_generator_config(project_root, CONFIG_PATH)

    result = _invoke(project_root, "generate", str(config_file))

    assert result.exit_code == 0, result.stdout
    body = yaml.safe_load((project_root / TARGET_PATH).read_text(encoding="utf-8"))
    assert [layer["name"] for layer in body["layers"]] == ["Visible", "Speed"]
    saved = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    assert len(saved["identifier"]) == 32
    meta = (project_root / f"{TARGET_PATH}.meta").read_text(encoding="utf-8")
    assert f"guid: {saved['identifier']}" in meta


@pytest.mark.unit
def test_generate_all_regenerates_in_place(project_root: Path) -> None:
    """A second `generate --all` run should regenerate, not recreate."""
    write_generator_config(project_root, CONFIG_PATH)
    assert _invoke(project_root, "generate", "--all").exit_code == 0
    first = (project_root / TARGET_PATH).read_bytes()

    result = _invoke(project_root, "generate", "--all")

    assert result.exit_code == 0, result.stdout
    assert (project_root / TARGET_PATH).read_bytes() == first


@pytest.mark.unit
def test_generate_without_configs_fails(project_root: Path) -> None:
    result = _invoke(project_root, "generate")

    assert result.exit_code == 1
    assert "No generator configs given" in result.stdout


@pytest.mark.unit
def test_generate_reports_invalid_config(project_root: Path) -> None:
    config_file = write_generator_config(
        project_root, CONFIG_PATH, layers=[{"kind": "missing", "name": "X"}]
    )

    result = _invoke(project_root, "generate", str(config_file))

    assert result.exit_code == 1
    assert not (project_root / TARGET_PATH).exists()


@pytest.mark.unit
def test_sync_rewrites_moved_target(project_root: Path) -> None:
    """`layergen sync` should point the config at the moved target."""
    config_file = write_generator_config(project_root, CONFIG_PATH)
    assert _invoke(project_root, "generate", str(config_file)).exit_code == 0
    moved = project_root / "Assets" / "Moved"
    moved.mkdir()
    (project_root / TARGET_PATH).rename(moved / "Hero.generated.controller")
    (project_root / f"{TARGET_PATH}.meta").rename(moved / "Hero.generated.controller.meta")

    result = _invoke(project_root, "sync", str(config_file))

    assert result.exit_code == 0, result.stdout
    saved = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    assert saved["target_path"] == "../Moved/Hero.generated.controller"


@pytest.mark.unit
def test_locate_reports_missing_target(project_root: Path) -> None:
    config_file = write_generator_config(project_root, CONFIG_PATH)

    result = _invoke(project_root, "locate", str(config_file))

    assert result.exit_code == 0, result.stdout
    assert "not found" in result.stdout
    saved = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    assert saved["identifier"] == ""


@pytest.mark.unit
def test_watched_lists_union_sorted(project_root: Path) -> None:
    """`layergen watched` should print every layer's watch entries once, sorted."""
    config_file = write_generator_config(
        project_root,
        CONFIG_PATH,
        layers=[
            {"kind": "toggle", "name": "A", "parameter": "a", "watch": ["Assets/Z.png"]},
            {
                "kind": "toggle",
                "name": "B",
                "parameter": "b",
                "watch": ["Assets/B.png", "Assets/Z.png"],
            },
        ],
    )

    result = _invoke(project_root, "watched", str(config_file))

    assert result.exit_code == 0, result.stdout
    assert result.stdout.split() == ["Assets/B.png", "Assets/Z.png"]
