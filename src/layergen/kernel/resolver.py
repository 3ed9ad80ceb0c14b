"""Resolve a target path descriptor into a canonical project path."""

from __future__ import annotations

from typing import TYPE_CHECKING

from layergen.kernel.descriptor import PathDescriptor, PathKind
from layergen.kernel.errors import NotPersistedError
from layergen.kernel.paths import SEPARATOR, TARGET_SUFFIX

if TYPE_CHECKING:
    from layergen.kernel.generator_config import GeneratorConfig


def owner_folder(asset_path: str | None) -> str:
    """Return the folder containing a config, always ending in a separator.

    Args:
        asset_path: Project path of the config file.

    Returns:
        Folder prefix, e.g. "Assets/Foo/" for "Assets/Foo/Gen.generator.yaml".

    Raises:
        NotPersistedError: If the config has no project path yet.
    """
    if not asset_path:
        raise NotPersistedError()
    return asset_path[: asset_path.rfind(SEPARATOR) + 1]


def resolve_target_path(
    folder: str,
    owner_name: str,
    descriptor: PathDescriptor,
) -> str:
    """Resolve descriptor to a canonical path relative to the project tree root.

    RELATIVE paths are concatenated as-is; '.' and '..' are left for the
    author of the descriptor to normalize.

    Args:
        folder: Owner folder (ends in a separator).
        owner_name: Name of the owning config.
        descriptor: Target path descriptor.

    Returns:
        Canonical project path of the target.
    """
    if descriptor.kind == PathKind.EMPTY:
        return f"{folder}{owner_name}{TARGET_SUFFIX}"
    if descriptor.kind == PathKind.ABSOLUTE:
        return descriptor.path
    return folder + descriptor.path


def resolve_config_target(config: GeneratorConfig) -> str:
    """Resolve a config's target path from its own project location."""
    return resolve_target_path(
        owner_folder(config.asset_path), config.name, config.target_path
    )
