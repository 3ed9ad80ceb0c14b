"""Kernel: target resolution, asset index, clear-and-regenerate cycle."""

from layergen.kernel.asset_index import AssetDatabase, ForeignAsset
from layergen.kernel.controller import (
    CONTROLLER_KIND,
    EMPTY_CONTROLLER,
    EMPTY_CONTROLLER_META,
    ControllerLayer,
    ControllerParameter,
    GeneratedController,
    ParameterType,
    SubAsset,
)
from layergen.kernel.descriptor import PathDescriptor, PathKind
from layergen.kernel.errors import (
    CreateLoadFailedError,
    GenerationError,
    GenerationErrorCode,
    InvalidTargetError,
    NotPersistedError,
    TargetNotIndexedError,
    WrongAssetTypeError,
)
from layergen.kernel.generator_config import (
    GeneratorConfig,
    GeneratorConfigError,
    discover_generator_configs,
    initialize_defaults,
    load_generator_config,
    save_generator_config,
)
from layergen.kernel.identifier import generate_identifier, normalize_identifier
from layergen.kernel.initializer import create_artifact_at
from layergen.kernel.layer import GenerationContext, GeneratorLayer
from layergen.kernel.locator import (
    Found,
    LocateResult,
    NotFound,
    WrongType,
    locate_artifact,
    require_artifact,
)
from layergen.kernel.orchestrator import (
    GenerationResult,
    clear_controller,
    generate,
    sync_target_path,
)
from layergen.kernel.paths import TARGET_SUFFIX, owner_name_from_path
from layergen.kernel.resolver import (
    owner_folder,
    resolve_config_target,
    resolve_target_path,
)
from layergen.kernel.rewriter import apply_target_path, rewrite_target_path

__all__ = [
    "CONTROLLER_KIND",
    "EMPTY_CONTROLLER",
    "EMPTY_CONTROLLER_META",
    "TARGET_SUFFIX",
    "AssetDatabase",
    "ControllerLayer",
    "ControllerParameter",
    "CreateLoadFailedError",
    "ForeignAsset",
    "Found",
    "GeneratedController",
    "GenerationContext",
    "GenerationError",
    "GenerationErrorCode",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorConfigError",
    "GeneratorLayer",
    "InvalidTargetError",
    "LocateResult",
    "NotFound",
    "NotPersistedError",
    "ParameterType",
    "PathDescriptor",
    "PathKind",
    "SubAsset",
    "TargetNotIndexedError",
    "WrongAssetTypeError",
    "WrongType",
    "apply_target_path",
    "clear_controller",
    "create_artifact_at",
    "discover_generator_configs",
    "generate",
    "generate_identifier",
    "initialize_defaults",
    "load_generator_config",
    "locate_artifact",
    "normalize_identifier",
    "owner_folder",
    "owner_name_from_path",
    "require_artifact",
    "resolve_config_target",
    "resolve_target_path",
    "rewrite_target_path",
    "save_generator_config",
    "sync_target_path",
]
