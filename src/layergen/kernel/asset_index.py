"""Asset database: SQLite identifier index plus loaded-object bookkeeping."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from layergen.kernel.atomic_write import atomic_write_text
from layergen.kernel.controller import (
    CONTROLLER_KIND,
    GeneratedController,
    SubAsset,
    parse_document,
)
from layergen.kernel.errors import InvalidTargetError
from layergen.kernel.paths import (
    LAYERGEN_DIR,
    META_SUFFIX,
    get_index_path,
    normalize_project_path,
    to_disk_path,
)

_LOGGER = logging.getLogger(__name__)

TABLE_NAME = "assets"

CREATE_SQL = """
CREATE TABLE IF NOT EXISTS assets (
    guid TEXT PRIMARY KEY,
    path TEXT NOT NULL
)
"""


class ForeignAsset(BaseModel):
    """Any loadable asset that is not a generated controller."""

    asset_path: str
    kind: str | None = None


def _ensure_table(conn: sqlite3.Connection) -> None:
    conn.execute(CREATE_SQL)


def open_index(index_path: Path) -> sqlite3.Connection:
    """Open connection to the asset index; create file and table if needed.

    Args:
        index_path: Location of index.sqlite.

    Returns:
        An open SQLite connection with row_factory set.
    """
    index_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(index_path))
    conn.row_factory = sqlite3.Row
    _ensure_table(conn)
    return conn


def replace_rows(conn: sqlite3.Connection, rows: dict[str, str]) -> None:
    """Replace the whole index with guid -> path rows. Caller commits.

    Args:
        conn: Open index connection.
        rows: Mapping of guid to project path.
    """
    conn.execute("DELETE FROM assets")
    conn.executemany(
        "INSERT INTO assets (guid, path) VALUES (?, ?)",
        sorted(rows.items()),
    )


def get_path_by_guid(conn: sqlite3.Connection, guid: str) -> str | None:
    """Look up the project path registered for guid. Returns None if not found."""
    cur = conn.execute("SELECT path FROM assets WHERE guid = ?", (guid,))
    row = cur.fetchone()
    if row is None:
        return None
    return row["path"]


def _read_meta_guid(meta_file: Path) -> str | None:
    # BaseLoader keeps all-digit guids as strings
    try:
        payload = yaml.load(meta_file.read_text(encoding="utf-8"), Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        _LOGGER.warning("Skipping unreadable meta file %s: %s", meta_file, exc)
        return None
    if not isinstance(payload, dict) or not payload.get("guid"):
        return None
    return str(payload["guid"]).strip().lower()


class AssetDatabase:
    """Host asset index for one project tree.

    Objects handed out by load_by_path are identity-stable until refresh()
    drops them, so a cached handle stays valid across calls.
    """

    def __init__(
        self,
        project_root: Path,
        *,
        index_dir: str = LAYERGEN_DIR,
        scan_roots: tuple[str, ...] = (),
    ) -> None:
        self._project_root = project_root.resolve()
        self._index_path = get_index_path(self._project_root, index_dir)
        self._index_dir = index_dir
        self._scan_roots = scan_roots
        self._loaded: dict[str, GeneratedController] = {}
        self._dirty: list[GeneratedController] = []

    @property
    def project_root(self) -> Path:
        return self._project_root

    def disk_path(self, asset_path: str) -> Path:
        """On-disk location of a project path."""
        return to_disk_path(self._project_root, asset_path)

    def _iter_meta_files(self) -> list[Path]:
        found: list[Path] = []
        if self._scan_roots:
            roots = [self._project_root / name for name in self._scan_roots]
        else:
            roots = [
                child
                for child in self._project_root.iterdir()
                if child.is_dir() and not child.name.startswith(".")
            ]
            # files directly under the project root
            found.extend(
                meta_file
                for meta_file in self._project_root.glob(f"*{META_SUFFIX}")
                if meta_file.is_file()
            )
        for root in sorted(roots):
            if not root.is_dir():
                continue
            for meta_file in root.rglob(f"*{META_SUFFIX}"):
                rel_parts = meta_file.relative_to(self._project_root).parts
                if any(part.startswith(".") for part in rel_parts[:-1]):
                    continue
                found.append(meta_file)
        return sorted(found)

    def refresh(self) -> int:
        """Rediscover files: rebuild guid -> path rows from every *.meta record.

        Loaded controllers whose file disappeared are dropped and lose their
        asset path, which invalidates any handle cached on a config.

        Returns:
            Number of indexed assets.
        """
        rows: dict[str, str] = {}
        for meta_file in self._iter_meta_files():
            asset_file = meta_file.with_name(meta_file.name[: -len(META_SUFFIX)])
            if not asset_file.exists():
                continue
            guid = _read_meta_guid(meta_file)
            if guid is None:
                continue
            asset_path = asset_file.relative_to(self._project_root).as_posix()
            if guid in rows:
                _LOGGER.warning(
                    "Duplicate guid %s: keeping %s, ignoring %s",
                    guid,
                    rows[guid],
                    asset_path,
                )
                continue
            rows[guid] = asset_path
        conn = open_index(self._index_path)
        try:
            replace_rows(conn, rows)
            conn.commit()
        finally:
            conn.close()
        for path, controller in list(self._loaded.items()):
            if not self.disk_path(path).exists():
                _LOGGER.debug("Dropping loaded controller %s (file removed)", path)
                controller.bind_path(None)
                del self._loaded[path]
        _LOGGER.debug("Asset index refreshed: %d assets", len(rows))
        return len(rows)

    def is_indexed_path(self, asset_path: str) -> bool:
        """True if refresh() would pick up a file created at asset_path (no I/O)."""
        parts = normalize_project_path(asset_path).split("/")
        if any(part.startswith(".") for part in parts[:-1]):
            return False
        if self._scan_roots:
            return len(parts) > 1 and parts[0] in self._scan_roots
        return True

    def find_path_by_identifier(self, identifier: str) -> str | None:
        """Return the project path registered under identifier, if its file exists."""
        if not identifier:
            return None
        conn = open_index(self._index_path)
        try:
            path = get_path_by_guid(conn, identifier)
        finally:
            conn.close()
        if path is None or not self.disk_path(path).exists():
            return None
        return path

    def load_by_path(self, asset_path: str) -> GeneratedController | ForeignAsset | None:
        """Load the main object at asset_path. None if nothing is there.

        Args:
            asset_path: Project path.

        Returns:
            The controller (identity-stable), a ForeignAsset, or None.
        """
        key = normalize_project_path(asset_path)
        if key in self._loaded:
            return self._loaded[key]
        disk = self.disk_path(key)
        if not disk.is_file():
            return None
        payload = parse_document(disk.read_text(encoding="utf-8"))
        kind = payload.get("kind") if payload is not None else None
        if kind != CONTROLLER_KIND:
            return ForeignAsset(asset_path=key, kind=kind)
        try:
            controller = GeneratedController.model_validate(payload)
        except ValidationError as exc:
            raise InvalidTargetError(key, str(exc)) from exc
        controller.bind_path(key)
        self._loaded[key] = controller
        return controller

    def load_controller_at_path(self, asset_path: str) -> GeneratedController | None:
        """Load by type: the controller at asset_path, or None."""
        asset = self.load_by_path(asset_path)
        if isinstance(asset, GeneratedController):
            return asset
        return None

    def is_loaded(self, controller: GeneratedController) -> bool:
        """True if controller is the live object for its path (no I/O)."""
        path = controller.asset_path
        return path is not None and self._loaded.get(path) is controller

    def list_co_located_objects(
        self, asset_path: str
    ) -> list[GeneratedController | SubAsset]:
        """Return every object stored in the file at asset_path, root first."""
        controller = self.load_controller_at_path(asset_path)
        if controller is None:
            return []
        return [controller, *controller.sub_assets]

    def destroy(self, obj: SubAsset) -> None:
        """Destroy a sub-asset: remove it from its owning controller.

        Raises:
            ValueError: If obj is a controller root or is not owned by a loaded controller.
        """
        if isinstance(obj, GeneratedController):
            raise ValueError("Controller roots are never destroyed, only cleared")
        for controller in self._loaded.values():
            for i, asset in enumerate(controller.sub_assets):
                if asset is obj:
                    del controller.sub_assets[i]
                    self.mark_dirty(controller)
                    return
        raise ValueError(f"Sub-asset {obj.name!r} ({obj.object_id}) is not loaded")

    def mark_dirty(self, controller: GeneratedController) -> None:
        """Schedule controller to be written by the next save_assets()."""
        if not any(pending is controller for pending in self._dirty):
            self._dirty.append(controller)

    def is_dirty(self, controller: GeneratedController) -> bool:
        return any(pending is controller for pending in self._dirty)

    def save_assets(self) -> list[str]:
        """Write every dirty controller to disk.

        Returns:
            Project paths written, in the order they were marked dirty.
        """
        written: list[str] = []
        for controller in self._dirty:
            if controller.asset_path is None:
                continue
            atomic_write_text(
                self.disk_path(controller.asset_path),
                controller.to_document(),
                "controller",
            )
            written.append(controller.asset_path)
        self._dirty = []
        return written
