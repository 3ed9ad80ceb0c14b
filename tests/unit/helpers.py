"""Test-only helpers for unit tests. Not part of the layergen API."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from layergen.kernel import (
    GenerationContext,
    GeneratorConfig,
    GeneratorLayer,
    load_generator_config,
)
from layergen.layers import LayerRegistry, default_registry

TOGGLE = {"kind": "toggle", "name": "Visible", "parameter": "visible"}
BLEND = {
    "kind": "blend",
    "name": "Speed",
    "parameter": "speed",
    "motions": ["Assets/Anim/Idle.anim", "Assets/Anim/Run.anim"],
}


class FailingLayer(GeneratorLayer):
    """Layer that raises after appending its layer record."""

    kind: str = "fail"

    def generate(self, context: GenerationContext) -> None:
        context.add_layer()
        raise RuntimeError(f"layer {self.name} failed")


def make_registry() -> LayerRegistry:
    """Built-in registry plus the failing test layer."""
    registry = default_registry()
    registry.register("fail", FailingLayer)
    return registry


def write_generator_config(
    project_root: Path,
    asset_path: str,
    *,
    identifier: str = "",
    target_path: str = "",
    layers: list[dict[str, Any]] | None = None,
) -> Path:
    """Write a generator config YAML at asset_path (project-relative)."""
    path = project_root / asset_path
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "identifier": identifier,
        "target_path": target_path,
        "layers": layers if layers is not None else [TOGGLE, BLEND],
    }
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def load_config(project_root: Path, asset_path: str) -> GeneratorConfig:
    """Load a config previously written with write_generator_config."""
    return load_generator_config(
        project_root, project_root / asset_path, make_registry()
    )


def write_foreign_asset(project_root: Path, asset_path: str, guid: str) -> None:
    """Write a non-controller asset plus .meta registering guid."""
    path = project_root / asset_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("kind: Texture\nwidth: 4\n", encoding="utf-8")
    (project_root / f"{asset_path}.meta").write_text(
        f"file_format_version: 2\nguid: {guid}\n", encoding="utf-8"
    )
