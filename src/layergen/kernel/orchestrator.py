"""Clear-and-regenerate cycle for one generator config."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from layergen.kernel.asset_index import AssetDatabase
from layergen.kernel.controller import GeneratedController
from layergen.kernel.generator_config import GeneratorConfig
from layergen.kernel.initializer import create_artifact_at
from layergen.kernel.layer import GenerationContext
from layergen.kernel.locator import require_artifact
from layergen.kernel.resolver import resolve_config_target
from layergen.kernel.rewriter import apply_target_path

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generate() call."""

    controller: GeneratedController
    asset_path: str
    created: bool
    layer_count: int


def clear_controller(controller: GeneratedController, database: AssetDatabase) -> int:
    """Empty layers and parameters and destroy every non-root co-located object.

    Returns:
        Number of sub-assets destroyed.
    """
    controller.layers = []
    controller.parameters = []
    destroyed = 0
    for obj in database.list_co_located_objects(controller.asset_path or ""):
        if obj is controller:
            continue
        database.destroy(obj)
        destroyed += 1
    return destroyed


def generate(config: GeneratorConfig, database: AssetDatabase) -> GenerationResult:
    """Regenerate the config's target controller from its layers.

    The target is located (or created), wiped if it already existed, then
    every layer runs in declared order and the controller is marked dirty.
    A failing layer propagates its exception; nothing is rolled back.

    Args:
        config: Generator config.
        database: Host asset database; call save_assets() afterwards to persist.

    Returns:
        GenerationResult for the target.

    Raises:
        NotPersistedError: If the target must be created and the config has no path.
        WrongAssetTypeError: If the identifier names a foreign asset.
        InvalidTargetError: If the located controller document is malformed.
        TargetNotIndexedError: If the target would be created outside indexed folders.
        CreateLoadFailedError: If a created target cannot be loaded back.
    """
    controller = require_artifact(config, database)
    created = controller is None
    if controller is None:
        controller = create_artifact_at(
            config, database, resolve_config_target(config)
        )
    else:
        destroyed = clear_controller(controller, database)
        _LOGGER.debug(
            "Cleared %s (%d stale sub-assets)", controller.asset_path, destroyed
        )

    for layer in config.layers:
        _LOGGER.debug("Running layer %r (%s)", layer.name, layer.kind)
        layer.generate(GenerationContext(layer.name, controller))

    database.mark_dirty(controller)
    asset_path = controller.asset_path or ""
    _LOGGER.info(
        "Generated %s from %s: %d layers, %d parameters",
        asset_path,
        config.asset_path,
        len(controller.layers),
        len(controller.parameters),
    )
    return GenerationResult(
        controller=controller,
        asset_path=asset_path,
        created=created,
        layer_count=len(controller.layers),
    )


def sync_target_path(config: GeneratorConfig, database: AssetDatabase) -> bool:
    """Rewrite the config's target path to wherever its target now lives.

    Used after the target or the config was moved. Nothing happens when the
    identifier is unknown to the index.

    Returns:
        True if the descriptor changed (config is then marked dirty).

    Raises:
        WrongAssetTypeError: If the identifier names a foreign asset.
    """
    controller = require_artifact(config, database)
    if controller is None or controller.asset_path is None:
        return False
    changed = apply_target_path(config, controller.asset_path)
    if changed:
        config.cache_handle(controller)
    return changed
