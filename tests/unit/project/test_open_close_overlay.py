from __future__ import annotations

from pathlib import Path

from nh_lsp.config import load_effective_config
from nh_lsp.logging import JsonlEventLogger
from nh_lsp.project import FileCategory, FileVersion, Project


def _discovered(root: Path, logger: JsonlEventLogger | None = None) -> Project:
    project = Project(root=root, discovery=load_effective_config(root).discovery, logger=logger)
    project.discover()
    return project


def _ship_log_uri(root: Path) -> str:
    return (root / "planets/ShipLogs/example.xml").resolve().as_uri()


def test_open_overlays_buffer_on_tracked_file(example_mod: Path) -> None:
    project = _discovered(example_mod)
    uri = _ship_log_uri(example_mod)

    tracked = project.open_file(uri, 3, "<AstroObjectEntry/>")

    assert tracked is not None
    assert tracked.category is FileCategory.SHIP_LOG
    assert tracked.version == 3
    assert tracked.contents == "<AstroObjectEntry/>"
    assert project.version_of(uri) == FileVersion(uri=uri, version=3)


def test_open_with_stale_version_is_ignored(example_mod: Path) -> None:
    project = _discovered(example_mod)
    uri = _ship_log_uri(example_mod)
    project.open_file(uri, 5, "newer")

    tracked = project.open_file(uri, 4, "older")

    assert tracked is not None
    assert tracked.version == 5
    assert tracked.contents == "newer"


def test_open_matches_editor_uri_spelling(example_mod: Path) -> None:
    project = _discovered(example_mod)
    editor_uri = "file://" + str(example_mod.resolve()) + "/planets/ShipLogs/./example.xml"

    tracked = project.open_file(editor_uri, 1, "<AstroObjectEntry/>")

    assert tracked is not None
    assert tracked.uri == _ship_log_uri(example_mod)
    assert len(project.files(FileCategory.SHIP_LOG)) == 1


def test_close_reverts_to_disk_contents(example_mod: Path, example_ship_log: str) -> None:
    project = _discovered(example_mod)
    uri = _ship_log_uri(example_mod)
    project.open_file(uri, 7, "<AstroObjectEntry/>")

    tracked = project.close_file(uri)

    assert tracked is not None
    assert tracked.version == 0
    assert tracked.contents == example_ship_log


def test_close_keeps_buffer_when_file_was_deleted(example_mod: Path) -> None:
    logger = JsonlEventLogger(path=example_mod / ".nh_lsp" / "events.jsonl")
    project = _discovered(example_mod, logger)
    uri = _ship_log_uri(example_mod)
    project.open_file(uri, 2, "<AstroObjectEntry/>")
    (example_mod / "planets/ShipLogs/example.xml").unlink()

    tracked = project.close_file(uri)

    assert tracked is not None
    assert tracked.version == 0
    assert tracked.contents == "<AstroObjectEntry/>"
    assert logger.read(kind="close.reread_failed")


def test_new_planet_config_opened_before_discovery_is_tracked(example_mod: Path) -> None:
    project = _discovered(example_mod)
    uri = (example_mod / "planets/NewMoon.json").resolve().as_uri()

    tracked = project.open_file(uri, 1, '{"name": "New Moon"}')

    assert tracked is not None
    assert tracked.category is FileCategory.PLANET
    assert project.find(uri) is tracked
    assert len(project.files(FileCategory.PLANET)) == 2


def test_unrelated_document_stays_untracked(example_mod: Path) -> None:
    project = _discovered(example_mod)
    before = project.counts()

    assert project.open_file((example_mod / "README.md").as_uri(), 1, "# mod") is None
    assert project.open_file("untitled:Untitled-1", 1, "{}") is None
    assert project.close_file((example_mod / "README.md").as_uri()) is None
    assert project.counts() == before


def test_new_config_under_nested_config_directory_is_tracked(tmp_path: Path) -> None:
    (tmp_path / "content" / "planets").mkdir(parents=True)
    (tmp_path / "content" / "planets" / "a.json").write_text("{}", encoding="utf-8")
    (tmp_path / "nh_lsp.toml").write_text(
        "\n".join(["[discovery]", 'planet_dirs = ["content/planets"]']),
        encoding="utf-8",
    )
    project = _discovered(tmp_path)
    uri = (tmp_path / "content/planets/b.json").resolve().as_uri()

    tracked = project.open_file(uri, 1, "{}")

    assert tracked is not None
    assert tracked.category is FileCategory.PLANET
    assert len(project.files(FileCategory.PLANET)) == 2
    assert project.open_file((tmp_path / "content/c.json").resolve().as_uri(), 1, "{}") is None
