from __future__ import annotations

from pathlib import Path

from nh_lsp.config import (
    DEFAULT_FILE_PATH_POINTERS,
    CliOverrides,
    load_effective_config,
)
from nh_lsp.server import create_server


def test_defaults_apply_without_project_config(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)

    assert config.project_root == tmp_path.resolve()
    assert config.data_dir == tmp_path.resolve() / ".nh_lsp"
    assert config.discovery.planet_dirs == ("planets",)
    assert config.discovery.system_dirs == ("systems",)
    assert config.discovery.config_extension == ".json"
    assert config.discovery.max_file_bytes == 1024 * 1024
    assert config.validation.file_paths_enabled is True
    assert config.validation.file_path_pointers == DEFAULT_FILE_PATH_POINTERS
    assert config.validation.extra_curiosities == ()


def test_merge_order_defaults_then_project_then_cli(tmp_path: Path) -> None:
    (tmp_path / "nh_lsp.toml").write_text(
        "\n".join(
            [
                "[discovery]",
                'planet_dirs = ["planets", "moons"]',
                "max_file_bytes = 2048",
                "",
                "[validation]",
                "file_paths_enabled = false",
                'extra_curiosities = ["MY_CURIOSITY"]',
            ]
        ),
        encoding="utf-8",
    )
    overrides = CliOverrides(max_file_bytes=4096, file_paths_enabled=True)
    server = create_server(project_root=str(tmp_path), cli_overrides=overrides)

    response = server.handle_payload({"id": "req-merge", "method": "nh/status", "params": {}})
    effective = response[0]["result"]["effective_config"]

    assert effective["discovery"]["planet_dirs"] == ["planets", "moons"]
    assert effective["discovery"]["system_dirs"] == ["systems"]
    assert effective["discovery"]["max_file_bytes"] == 4096
    assert effective["validation"]["file_paths_enabled"] is True
    assert effective["validation"]["extra_curiosities"] == ["MY_CURIOSITY"]


def test_data_dir_override_has_highest_precedence(tmp_path: Path) -> None:
    custom_data_dir = tmp_path / ".custom_data"
    server = create_server(
        project_root=str(tmp_path),
        cli_overrides=CliOverrides(data_dir=custom_data_dir),
    )

    response = server.handle_payload({"id": "req-data-dir", "method": "nh/status", "params": {}})
    effective = response[0]["result"]["effective_config"]

    assert effective["data_dir"] == str(custom_data_dir.resolve())
    assert (custom_data_dir / "events.jsonl").exists()


def test_unknown_sections_are_ignored(tmp_path: Path) -> None:
    (tmp_path / "nh_lsp.toml").write_text(
        "\n".join(["[editor]", "theme = 'dark'"]),
        encoding="utf-8",
    )

    config = load_effective_config(tmp_path)

    assert config.discovery.planet_dirs == ("planets",)


def test_disabling_file_paths_drops_the_validator(tmp_path: Path) -> None:
    server = create_server(
        project_root=str(tmp_path),
        cli_overrides=CliOverrides(file_paths_enabled=False),
    )

    response = server.handle_payload({"id": 1, "method": "nh/status", "params": {}})

    assert response[0]["result"]["validators"] == ["ship_log"]
