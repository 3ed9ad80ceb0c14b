"""Locate an existing target controller by cached handle or identifier."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TypeAlias

from layergen.kernel.asset_index import AssetDatabase, ForeignAsset
from layergen.kernel.controller import GeneratedController
from layergen.kernel.errors import WrongAssetTypeError
from layergen.kernel.generator_config import GeneratorConfig

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    """Target exists and is a generated controller."""

    controller: GeneratedController


@dataclass(frozen=True)
class WrongType:
    """The identifier names an asset of another kind."""

    asset_path: str
    kind: str | None


@dataclass(frozen=True)
class NotFound:
    """No asset is registered under the identifier."""


LocateResult: TypeAlias = Found | WrongType | NotFound


def locate_artifact(config: GeneratorConfig, database: AssetDatabase) -> LocateResult:
    """Find the config's target without creating anything.

    A cached, still-live handle is returned without touching the index.
    On success the handle is cached on the config.

    Args:
        config: Generator config.
        database: Host asset database.

    Returns:
        Found, WrongType or NotFound.
    """
    cached = config.resolved_handle
    if cached is not None:
        if database.is_loaded(cached):
            return Found(cached)
        config.invalidate_handle()
    if not config.identifier:
        return NotFound()
    path = database.find_path_by_identifier(config.identifier)
    if path is None:
        return NotFound()
    asset = database.load_by_path(path)
    if asset is None:
        return NotFound()
    if isinstance(asset, ForeignAsset):
        return WrongType(asset_path=asset.asset_path, kind=asset.kind)
    _LOGGER.debug("Located %s via identifier %s", path, config.identifier)
    config.cache_handle(asset)
    return Found(asset)


def require_artifact(
    config: GeneratorConfig, database: AssetDatabase
) -> GeneratedController | None:
    """Like locate_artifact, but a WrongType result is fatal.

    Returns:
        The controller, or None when nothing is registered.

    Raises:
        WrongAssetTypeError: If the identifier names a foreign asset.
    """
    result = locate_artifact(config, database)
    match result:
        case Found(controller=controller):
            return controller
        case WrongType(asset_path=path, kind=kind):
            raise WrongAssetTypeError(config.identifier, path, kind)
        case NotFound():
            return None
