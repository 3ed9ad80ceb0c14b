"""Project-relative path helpers. .layergen is the tool root."""

import posixpath
from pathlib import Path, PurePosixPath

# Tool owns everything under .layergen/
LAYERGEN_DIR = ".layergen"
INDEX_FILENAME = "index.sqlite"
SETTINGS_FILENAMES = ("config.yaml", "config.json")

SEPARATOR = "/"
TARGET_SUFFIX = ".generated.controller"
META_SUFFIX = ".meta"
CONFIG_SUFFIXES = (".generator.yaml", ".generator.yml", ".generator.json")


def get_index_path(project_root: Path, index_dir: str = LAYERGEN_DIR) -> Path:
    """Return path to the asset index: .layergen/index.sqlite."""
    return project_root / index_dir / INDEX_FILENAME


def get_meta_path(asset_path: str) -> str:
    """Return project path of the companion metadata record for asset_path."""
    return asset_path + META_SUFFIX


def to_project_path(project_root: Path, path: Path) -> str:
    """
    Convert an on-disk path into a project path (POSIX, no leading separator).
    Raises ValueError if path is outside the project tree.
    """
    root = project_root.resolve()
    resolved = path if path.is_absolute() else Path.cwd() / path
    try:
        rel = resolved.resolve().relative_to(root)
    except ValueError:
        raise ValueError(
            f"Path is outside project root: {path!s} (root {root!s})"
        ) from None
    return rel.as_posix()


def to_disk_path(project_root: Path, project_path: str) -> Path:
    """Return on-disk location of a project path (normalized, confined to root)."""
    normalized = normalize_project_path(project_path)
    if posixpath.isabs(normalized) or normalized == ".." or normalized.startswith("../"):
        raise ValueError(f"Project path escapes project root: {project_path!r}")
    return project_root / normalized


def normalize_project_path(project_path: str) -> str:
    """Collapse '.' and '..' components; used for comparisons and disk access only."""
    return posixpath.normpath(project_path)


def owner_name_from_path(project_path: str, suffixes: tuple[str, ...] = CONFIG_SUFFIXES) -> str:
    """Return config name: file name minus a known config suffix, else its stem."""
    name = PurePosixPath(project_path).name
    for suffix in suffixes:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return PurePosixPath(name).stem
