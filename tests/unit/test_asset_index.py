"""Asset database: guid index, identity-stable loads, destroy and save."""

from pathlib import Path

import pytest

from layergen.kernel import (
    EMPTY_CONTROLLER,
    AssetDatabase,
    ForeignAsset,
    GeneratedController,
    GenerationErrorCode,
    InvalidTargetError,
    SubAsset,
)

from tests.unit.helpers import write_foreign_asset

GUID = "0123456789abcdef0123456789abcdef"
OTHER_GUID = "fedcba9876543210fedcba9876543210"


def _write_controller(project_root: Path, asset_path: str, guid: str) -> None:
    path = project_root / asset_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(EMPTY_CONTROLLER, encoding="utf-8")
    (project_root / f"{asset_path}.meta").write_text(
        f"file_format_version: 2\nguid: {guid}\n", encoding="utf-8"
    )


@pytest.mark.unit
def test_refresh_indexes_meta_records(project_root: Path) -> None:
    _write_controller(project_root, "Assets/A/Out.controller", GUID)
    write_foreign_asset(project_root, "Assets/B/Tex.png", OTHER_GUID)
    db = AssetDatabase(project_root)
    assert db.refresh() == 2
    assert db.find_path_by_identifier(GUID) == "Assets/A/Out.controller"
    assert db.find_path_by_identifier(OTHER_GUID) == "Assets/B/Tex.png"
    assert db.find_path_by_identifier("") is None
    assert db.find_path_by_identifier("0" * 32) is None
    assert (project_root / ".layergen" / "index.sqlite").is_file()


@pytest.mark.unit
def test_meta_without_asset_is_ignored(project_root: Path) -> None:
    (project_root / "Assets" / "Gone.controller.meta").write_text(
        f"guid: {GUID}\n", encoding="utf-8"
    )
    db = AssetDatabase(project_root)
    assert db.refresh() == 0
    assert db.find_path_by_identifier(GUID) is None


@pytest.mark.unit
def test_dot_folders_are_not_scanned(project_root: Path) -> None:
    _write_controller(project_root, "Assets/.hidden/Out.controller", GUID)
    _write_controller(project_root, ".trash/Out.controller", OTHER_GUID)
    db = AssetDatabase(project_root)
    assert db.refresh() == 0


@pytest.mark.unit
def test_scan_roots_limit_refresh(project_root: Path) -> None:
    _write_controller(project_root, "Assets/Out.controller", GUID)
    _write_controller(project_root, "Packages/p/Out.controller", OTHER_GUID)
    db = AssetDatabase(project_root, scan_roots=("Packages",))
    assert db.refresh() == 1
    assert db.find_path_by_identifier(GUID) is None
    assert db.find_path_by_identifier(OTHER_GUID) == "Packages/p/Out.controller"


@pytest.mark.unit
def test_root_level_files_are_indexed(project_root: Path) -> None:
    _write_controller(project_root, "Out.controller", GUID)
    db = AssetDatabase(project_root)
    assert db.refresh() == 1
    assert db.find_path_by_identifier(GUID) == "Out.controller"
    assert AssetDatabase(project_root, scan_roots=("Assets",)).refresh() == 0


@pytest.mark.unit
def test_is_indexed_path_matches_refresh_rules(project_root: Path) -> None:
    db = AssetDatabase(project_root)
    assert db.is_indexed_path("Out.controller")
    assert db.is_indexed_path("Assets/A/Out.controller")
    assert db.is_indexed_path("Assets/A/../B/Out.controller")
    assert not db.is_indexed_path("Assets/.cache/Out.controller")
    assert not db.is_indexed_path(".trash/Out.controller")

    scoped = AssetDatabase(project_root, scan_roots=("Packages",))
    assert scoped.is_indexed_path("Packages/p/Out.controller")
    assert not scoped.is_indexed_path("Assets/Out.controller")
    assert not scoped.is_indexed_path("Out.controller")


@pytest.mark.unit
def test_duplicate_guid_keeps_first_sorted_path(
    project_root: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write_controller(project_root, "Assets/B/Out.controller", GUID)
    _write_controller(project_root, "Assets/A/Out.controller", GUID)
    db = AssetDatabase(project_root)
    assert db.refresh() == 1
    assert db.find_path_by_identifier(GUID) == "Assets/A/Out.controller"
    assert "Duplicate guid" in caplog.text


@pytest.mark.unit
def test_stale_row_is_not_returned(project_root: Path) -> None:
    _write_controller(project_root, "Assets/Out.controller", GUID)
    db = AssetDatabase(project_root)
    db.refresh()
    (project_root / "Assets" / "Out.controller").unlink()
    assert db.find_path_by_identifier(GUID) is None


@pytest.mark.unit
def test_load_by_path_is_identity_stable(project_root: Path) -> None:
    _write_controller(project_root, "Assets/Out.controller", GUID)
    db = AssetDatabase(project_root)
    first = db.load_by_path("Assets/Out.controller")
    assert isinstance(first, GeneratedController)
    assert first.asset_path == "Assets/Out.controller"
    assert db.load_by_path("Assets/./Out.controller") is first
    assert db.load_controller_at_path("Assets/Out.controller") is first
    assert db.is_loaded(first)


@pytest.mark.unit
def test_load_foreign_and_missing(project_root: Path) -> None:
    write_foreign_asset(project_root, "Assets/Tex.png", GUID)
    (project_root / "Assets" / "notes.txt").write_text("- just\n- a list\n", encoding="utf-8")
    db = AssetDatabase(project_root)
    foreign = db.load_by_path("Assets/Tex.png")
    assert foreign == ForeignAsset(asset_path="Assets/Tex.png", kind="Texture")
    assert db.load_by_path("Assets/notes.txt") == ForeignAsset(asset_path="Assets/notes.txt")
    assert db.load_by_path("Assets/Missing.controller") is None
    assert db.load_controller_at_path("Assets/Tex.png") is None


@pytest.mark.unit
def test_refresh_drops_controllers_whose_file_vanished(project_root: Path) -> None:
    _write_controller(project_root, "Assets/Out.controller", GUID)
    db = AssetDatabase(project_root)
    controller = db.load_controller_at_path("Assets/Out.controller")
    assert controller is not None
    (project_root / "Assets" / "Out.controller").unlink()
    db.refresh()
    assert controller.asset_path is None
    assert not db.is_loaded(controller)


@pytest.mark.unit
def test_destroy_sub_asset_and_save(project_root: Path) -> None:
    _write_controller(project_root, "Assets/Out.controller", GUID)
    db = AssetDatabase(project_root)
    controller = db.load_controller_at_path("Assets/Out.controller")
    assert controller is not None
    junk = SubAsset(object_id=controller.next_object_id(), kind="Junk", name="junk")
    controller.sub_assets.append(junk)
    assert db.list_co_located_objects("Assets/Out.controller") == [controller, junk]
    db.destroy(junk)
    assert controller.sub_assets == []
    assert db.is_dirty(controller)
    assert db.save_assets() == ["Assets/Out.controller"]
    assert not db.is_dirty(controller)
    assert "Junk" not in (project_root / "Assets" / "Out.controller").read_text(encoding="utf-8")


@pytest.mark.unit
def test_destroy_rejects_root_and_unknown(project_root: Path) -> None:
    _write_controller(project_root, "Assets/Out.controller", GUID)
    db = AssetDatabase(project_root)
    controller = db.load_controller_at_path("Assets/Out.controller")
    with pytest.raises(ValueError, match="never destroyed"):
        db.destroy(controller)
    with pytest.raises(ValueError, match="not loaded"):
        db.destroy(SubAsset(object_id=1, kind="Junk", name="stray"))


@pytest.mark.unit
def test_project_path_cannot_escape_root(project_root: Path) -> None:
    db = AssetDatabase(project_root)
    with pytest.raises(ValueError, match="escapes project root"):
        db.load_by_path("Assets/../../outside.controller")
    with pytest.raises(ValueError, match="escapes project root"):
        db.disk_path("/tmp/escaped.controller")
    with pytest.raises(ValueError, match="escapes project root"):
        db.disk_path("//tmp/escaped.controller")
    assert project_root.resolve() in db.disk_path("Assets/Out.controller").parents


@pytest.mark.unit
def test_malformed_controller_document_raises(project_root: Path) -> None:
    path = project_root / "Assets" / "Out.controller"
    path.write_text("kind: GeneratedController\nlayers: not-a-list\n", encoding="utf-8")
    (project_root / "Assets" / "Out.controller.meta").write_text(
        f"guid: {GUID}\n", encoding="utf-8"
    )
    db = AssetDatabase(project_root)
    db.refresh()
    with pytest.raises(InvalidTargetError, match="malformed") as excinfo:
        db.load_by_path("Assets/Out.controller")
    assert excinfo.value.code == GenerationErrorCode.INVALID_DOCUMENT
    assert excinfo.value.data == {"path": "Assets/Out.controller"}
