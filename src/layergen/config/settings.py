"""Project-level layergen settings models and loading helpers."""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from layergen.kernel.paths import CONFIG_SUFFIXES, LAYERGEN_DIR, SETTINGS_FILENAMES


class LogLevel(StrEnum):
    """Supported CLI log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class IndexSettings(BaseModel):
    """Asset index configuration."""

    model_config = ConfigDict(extra="forbid")

    index_dir: str = LAYERGEN_DIR
    scan_roots: list[str] = []

    @field_validator("scan_roots")
    @classmethod
    def _plain_folder_names(cls, value: list[str]) -> list[str]:
        for name in value:
            if not name or "/" in name or name.startswith("."):
                raise ValueError(f"scan root must be a top-level folder name: {name!r}")
        return value


class GeneratorSettings(BaseModel):
    """Generator config discovery configuration."""

    model_config = ConfigDict(extra="forbid")

    config_suffixes: list[str] = Field(
        default_factory=lambda: list(CONFIG_SUFFIXES), min_length=1
    )


class LayergenSettings(BaseModel):
    """Root layergen settings model."""

    model_config = ConfigDict(extra="forbid")

    log_level: LogLevel = LogLevel.INFO
    index: IndexSettings = IndexSettings()
    generators: GeneratorSettings = GeneratorSettings()


class SettingsError(RuntimeError):
    """Raised when settings cannot be decoded or validated."""


def default_settings_file(project_root: Path) -> Path:
    """Return settings path for a project: existing yaml/json, else config.yaml."""
    folder = project_root / LAYERGEN_DIR
    for filename in SETTINGS_FILENAMES:
        candidate = folder / filename
        if candidate.exists():
            return candidate
    return folder / SETTINGS_FILENAMES[0]


def _decode_settings_payload(path: Path) -> dict[str, object]:
    """Decode settings payload from JSON or YAML.

    Args:
        path: Settings file path.

    Returns:
        Parsed mapping payload.

    Raises:
        SettingsError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"Invalid layergen settings JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise SettingsError(f"Invalid layergen settings YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise SettingsError("Invalid layergen settings payload: root must be an object")
    return payload


def load_settings(path: Path) -> LayergenSettings:
    """Load layergen settings from disk, defaulting when missing.

    Args:
        path: Settings file path.

    Returns:
        Parsed settings, or defaults when file does not exist.

    Raises:
        SettingsError: If payload decode or validation fails.
    """
    if not path.exists():
        return LayergenSettings()
    payload = _decode_settings_payload(path)
    try:
        return LayergenSettings.model_validate(payload)
    except ValidationError as exc:
        raise SettingsError(f"Invalid layergen settings payload: {exc}") from exc


def write_default_settings(path: Path, *, overwrite: bool = False) -> bool:
    """Write default settings to path.

    Returns:
        True if the file was written.
    """
    if path.exists() and not overwrite:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = LayergenSettings().model_dump(mode="json")
    if path.suffix.lower() == ".json":
        path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    else:
        path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return True
