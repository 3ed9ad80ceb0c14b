"""Rewrite a target path descriptor after the target or its owner moved."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from layergen.kernel.descriptor import PathDescriptor, PathKind
from layergen.kernel.paths import SEPARATOR, normalize_project_path
from layergen.kernel.resolver import owner_folder, resolve_config_target

if TYPE_CHECKING:
    from layergen.kernel.generator_config import GeneratorConfig

_LOGGER = logging.getLogger(__name__)

PARENT_SEGMENT = ".." + SEPARATOR


def _split_folder(folder: str) -> list[str]:
    components = folder.split(SEPARATOR)
    # "Assets/A/" splits with a trailing empty component
    if components and components[-1] == "":
        components.pop()
    return components


def _common_prefix_length(left: list[str], right: list[str]) -> int:
    for i, (a, b) in enumerate(zip(left, right)):
        if a != b:
            return i
    return min(len(left), len(right))


def rewrite_target_path(
    descriptor: PathDescriptor,
    folder: str,
    current_path: str,
    new_path: str,
) -> PathDescriptor:
    """Compute the descriptor that resolves to new_path from folder.

    Keeps ABSOLUTE descriptors absolute. EMPTY and RELATIVE become RELATIVE
    with the fewest '../' segments, unless the tree root component differs,
    in which case the result is ABSOLUTE.

    Args:
        descriptor: Current descriptor.
        folder: Owner folder (ends in a separator).
        current_path: What descriptor currently resolves to.
        new_path: Canonical project path the descriptor must now point at.

    Returns:
        Updated descriptor (the same object when nothing changes).
    """
    if normalize_project_path(new_path) == normalize_project_path(current_path):
        return descriptor
    if descriptor.kind == PathKind.ABSOLUTE:
        return PathDescriptor.absolute(new_path)

    folder_components = _split_folder(folder)
    new_components = new_path.split(SEPARATOR)
    if not folder_components or folder_components[0] != new_components[0]:
        # e.g. Assets vs Packages: relative paths across tree roots are meaningless
        return PathDescriptor.absolute(new_path)

    common = _common_prefix_length(folder_components, new_components)
    ups = PARENT_SEGMENT * (len(folder_components) - common)
    remainder = SEPARATOR.join(new_components[common:])
    if not ups and not remainder:
        return PathDescriptor.absolute(new_path)
    return PathDescriptor.relative(ups + remainder)


def apply_target_path(config: GeneratorConfig, new_path: str) -> bool:
    """Point config at new_path, marking it dirty when the descriptor changes.

    Args:
        config: Generator config to update in place.
        new_path: Canonical project path of the target.

    Returns:
        True if the descriptor changed.
    """
    current = resolve_config_target(config)
    updated = rewrite_target_path(
        config.target_path, owner_folder(config.asset_path), current, new_path
    )
    if updated == config.target_path:
        return False
    _LOGGER.info(
        "Target path of %s rewritten: %r -> %r",
        config.asset_path,
        config.target_path.to_raw(),
        updated.to_raw(),
    )
    config.target_path = updated
    config.invalidate_handle()
    config.dirty = True
    return True
