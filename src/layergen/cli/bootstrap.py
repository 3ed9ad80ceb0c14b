"""CLI bootstrap helpers: logging, settings, asset database, config loading."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

from layergen.config import LayergenSettings, default_settings_file, load_settings
from layergen.kernel import (
    AssetDatabase,
    GeneratorConfig,
    discover_generator_configs,
    initialize_defaults,
    load_generator_config,
)
from layergen.layers import LayerRegistry, default_registry

_LOGGING_CONFIGURED = False


def configure_logging(level: str = "INFO") -> None:
    """Configure Rich-backed logging once for CLI commands."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        logging.getLogger().setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )
    _LOGGING_CONFIGURED = True


def load_project_settings(project_root: Path, settings_file: Path | None) -> LayergenSettings:
    """Load settings for project_root (explicit file wins over the default location)."""
    return load_settings(settings_file or default_settings_file(project_root))


def build_database(project_root: Path, settings: LayergenSettings) -> AssetDatabase:
    """Build and refresh the asset database for project_root.

    Args:
        project_root: Project tree root.
        settings: Loaded layergen settings.

    Returns:
        Refreshed asset database.
    """
    database = AssetDatabase(
        project_root,
        index_dir=settings.index.index_dir,
        scan_roots=tuple(settings.index.scan_roots),
    )
    database.refresh()
    return database


def select_config_files(
    project_root: Path,
    settings: LayergenSettings,
    config_files: list[Path],
    *,
    all_configs: bool,
) -> list[Path]:
    """Return explicit config files, or every discovered one with all_configs."""
    if all_configs:
        return discover_generator_configs(
            project_root, tuple(settings.generators.config_suffixes)
        )
    return list(config_files)


def load_config(
    project_root: Path,
    path: Path,
    registry: LayerRegistry | None = None,
    *,
    assign_identifier: bool = True,
) -> GeneratorConfig:
    """Load one generator config and run the post-load defaults hook.

    Args:
        project_root: Project tree root.
        path: Config file path.
        registry: Optional layer registry (defaults to built-in layers).
        assign_identifier: Whether to assign an identifier when empty.

    Returns:
        Loaded config.
    """
    config = load_generator_config(project_root, path, registry or default_registry())
    if assign_identifier:
        initialize_defaults(config)
    return config
