"""Create a brand-new target controller file plus its .meta record."""

from __future__ import annotations

import logging

from layergen.kernel.asset_index import AssetDatabase
from layergen.kernel.atomic_write import atomic_write_text
from layergen.kernel.controller import (
    EMPTY_CONTROLLER,
    EMPTY_CONTROLLER_META,
    GeneratedController,
)
from layergen.kernel.errors import CreateLoadFailedError, TargetNotIndexedError
from layergen.kernel.generator_config import GeneratorConfig
from layergen.kernel.identifier import generate_identifier, normalize_identifier
from layergen.kernel.paths import get_meta_path, normalize_project_path

_LOGGER = logging.getLogger(__name__)


def create_artifact_at(
    config: GeneratorConfig,
    database: AssetDatabase,
    canonical_path: str,
) -> GeneratedController:
    """Write the bootstrap controller at canonical_path and load it back.

    Generates the config's identifier if it is still empty (marking the
    config dirty). Only call when locating the target found nothing.

    Args:
        config: Generator config owning the target.
        database: Host asset database.
        canonical_path: Project path to create.

    Returns:
        The freshly loaded controller (also cached on the config).

    Raises:
        ValueError: If canonical_path escapes the project root.
        TargetNotIndexedError: If refresh() would never index canonical_path.
        CreateLoadFailedError: If the index does not pick up the new file.
    """
    target_disk = database.disk_path(canonical_path)
    if not database.is_indexed_path(canonical_path):
        raise TargetNotIndexedError(canonical_path)
    if not config.identifier:
        config.identifier = generate_identifier()
        config.dirty = True
    guid = normalize_identifier(config.identifier)
    meta_path = get_meta_path(canonical_path)
    atomic_write_text(target_disk, EMPTY_CONTROLLER, "controller")
    atomic_write_text(
        database.disk_path(meta_path),
        EMPTY_CONTROLLER_META.replace("{GUID}", guid),
        "meta",
    )
    _LOGGER.info("Created controller %s (guid %s)", canonical_path, guid)
    database.refresh()
    registered = database.find_path_by_identifier(guid)
    controller = None
    if registered == normalize_project_path(canonical_path):
        controller = database.load_controller_at_path(canonical_path)
    if controller is None:
        raise CreateLoadFailedError(canonical_path)
    config.cache_handle(controller)
    return controller
