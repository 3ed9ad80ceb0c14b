"""Generator config model, defaults hook and on-disk persistence."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_serializer,
    field_validator,
)

from layergen.kernel.atomic_write import atomic_write_text
from layergen.kernel.controller import GeneratedController
from layergen.kernel.descriptor import PathDescriptor
from layergen.kernel.errors import NotPersistedError
from layergen.kernel.identifier import generate_identifier, normalize_identifier
from layergen.kernel.layer import GeneratorLayer
from layergen.kernel.paths import (
    CONFIG_SUFFIXES,
    owner_name_from_path,
    to_disk_path,
    to_project_path,
)

if TYPE_CHECKING:
    from layergen.layers.registry import LayerRegistry

_LOGGER = logging.getLogger(__name__)


class GeneratorConfigError(RuntimeError):
    """Raised when a generator config cannot be decoded or validated."""


class GeneratorConfig(BaseModel):
    """User-authored source of truth for one generated controller.

    identifier, target_path and layers are persisted. asset_path, dirty and
    the cached controller handle are runtime-only.
    """

    model_config = ConfigDict(validate_assignment=True)

    identifier: str = ""
    target_path: PathDescriptor = PathDescriptor()
    layers: list[GeneratorLayer] = []

    asset_path: str | None = Field(default=None, exclude=True)
    dirty: bool = Field(default=False, exclude=True)

    _resolved_handle: GeneratedController | None = PrivateAttr(default=None)
    _handle_key: tuple[str, str, str | None] | None = PrivateAttr(default=None)

    @field_validator("identifier", mode="before")
    @classmethod
    def _normalize_identifier(cls, value: object) -> str:
        if value is None:
            return ""
        return normalize_identifier(str(value))

    @field_validator("target_path", mode="before")
    @classmethod
    def _parse_target_path(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return PathDescriptor.from_raw(value)
        return value

    @field_validator("layers", mode="before")
    @classmethod
    def _default_layers(cls, value: object) -> object:
        return [] if value is None else value

    @field_serializer("target_path")
    def _serialize_target_path(self, value: PathDescriptor) -> str:
        return value.to_raw()

    @property
    def name(self) -> str:
        """Config name derived from its file name ("" when not persisted)."""
        if not self.asset_path:
            return ""
        return owner_name_from_path(self.asset_path)

    @property
    def watching_objects(self) -> frozenset[str]:
        """Union of every layer's watch set."""
        watched: set[str] = set()
        for layer in self.layers:
            watched |= layer.watching_objects
        return frozenset(watched)

    def _current_handle_key(self) -> tuple[str, str, str | None]:
        return (self.identifier, self.target_path.to_raw(), self.asset_path)

    @property
    def resolved_handle(self) -> GeneratedController | None:
        """Cached controller; dropped once identifier or resolved path changed."""
        if self._resolved_handle is None:
            return None
        if self._handle_key != self._current_handle_key():
            self.invalidate_handle()
            return None
        return self._resolved_handle

    def cache_handle(self, controller: GeneratedController) -> None:
        self._resolved_handle = controller
        self._handle_key = self._current_handle_key()

    def invalidate_handle(self) -> None:
        self._resolved_handle = None
        self._handle_key = None

    def to_file_dict(self) -> dict[str, Any]:
        """Serialize for the config file (layers keep their own fields)."""
        return {
            "identifier": self.identifier,
            "target_path": self.target_path.to_raw(),
            "layers": [layer.model_dump(mode="json") for layer in self.layers],
        }


def initialize_defaults(config: GeneratorConfig) -> bool:
    """Post-load hook: assign an identifier once. Missing layers already default to [].

    Args:
        config: Freshly deserialized config.

    Returns:
        True if an identifier was assigned (config is then marked dirty).
    """
    if config.identifier:
        return False
    config.identifier = generate_identifier()
    config.dirty = True
    return True


def _decode_config_payload(path: Path) -> dict[str, object]:
    """Decode generator config payload from JSON or YAML.

    Args:
        path: Config file path.

    Returns:
        Parsed mapping payload.

    Raises:
        GeneratorConfigError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise GeneratorConfigError(f"Invalid generator JSON {path}: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise GeneratorConfigError(f"Invalid generator YAML {path}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise GeneratorConfigError(
            f"Invalid generator config {path}: root must be an object"
        )
    return payload


def load_generator_config(
    project_root: Path,
    path: Path,
    registry: LayerRegistry | None = None,
) -> GeneratorConfig:
    """Load a generator config file from inside the project tree.

    Callers should run initialize_defaults() on the result.

    Args:
        project_root: Project tree root.
        path: Config file path (absolute or relative to cwd).
        registry: Layer registry used to build layer entries (built-ins when None).

    Returns:
        Config with asset_path set.

    Raises:
        GeneratorConfigError: If decode or validation fails.
    """
    from layergen.layers.registry import LayerRegistryError, default_registry

    if registry is None:
        registry = default_registry()

    payload = _decode_config_payload(path)
    raw_layers = payload.get("layers") or []
    if not isinstance(raw_layers, list):
        raise GeneratorConfigError(f"Invalid generator config {path}: layers must be a list")
    if not all(isinstance(entry, dict) for entry in raw_layers):
        raise GeneratorConfigError(f"Invalid generator config {path}: layers must be objects")
    try:
        layers = [registry.build(entry) for entry in raw_layers]
    except LayerRegistryError as exc:
        raise GeneratorConfigError(f"Invalid generator config {path}: {exc}") from exc
    try:
        config = GeneratorConfig.model_validate({**payload, "layers": layers})
    except ValidationError as exc:
        raise GeneratorConfigError(f"Invalid generator config {path}: {exc}") from exc
    config.asset_path = to_project_path(project_root, path)
    return config


def save_generator_config(project_root: Path, config: GeneratorConfig) -> Path:
    """Persist config atomically at its asset path and clear the dirty flag.

    Raises:
        NotPersistedError: If the config has no asset path.
    """
    if not config.asset_path:
        raise NotPersistedError()
    disk = to_disk_path(project_root, config.asset_path)
    data = config.to_file_dict()
    if disk.suffix.lower() == ".json":
        text = json.dumps(data, indent=2) + "\n"
    else:
        text = yaml.safe_dump(data, sort_keys=False)
    atomic_write_text(disk, text, "generator")
    config.dirty = False
    _LOGGER.debug("Saved generator config %s", config.asset_path)
    return disk


def discover_generator_configs(
    project_root: Path,
    suffixes: tuple[str, ...] = CONFIG_SUFFIXES,
) -> list[Path]:
    """List generator config files under project_root, sorted, skipping dot folders."""
    root = project_root.resolve()
    found: list[Path] = []
    for candidate in root.rglob("*"):
        if not candidate.is_file() or not candidate.name.endswith(suffixes):
            continue
        rel_parts = candidate.relative_to(root).parts
        if any(part.startswith(".") for part in rel_parts[:-1]):
            continue
        found.append(candidate)
    return sorted(found)
