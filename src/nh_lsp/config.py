"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "nh_lsp.toml"
MAX_FILE_BYTES_CAP = 16 * 1024 * 1024

DEFAULT_PLANET_DIRS = ("planets",)
DEFAULT_SYSTEM_DIRS = ("systems",)
DEFAULT_CONFIG_EXTENSION = ".json"
DEFAULT_MAX_FILE_BYTES = 1024 * 1024
DEFAULT_FILE_PATH_POINTERS = (
    "/ShipLog/xmlFile",
    "/ShipLog/spriteFolder",
    "/Props/dialogue/*/xmlFile",
    "/Props/translatorText/*/xmlFile",
    "/Props/remotes/*/whiteboard/nomaiText/*/xmlFile",
    "/Props/details/*/assetBundle",
    "/Props/audioSources/*/audio",
    "/Atmosphere/clouds/texturePath",
    "/Base/ambientLight/texturePath",
)


@dataclass(slots=True, frozen=True)
class DiscoveryConfig:
    """Where project documents are looked for."""

    planet_dirs: tuple[str, ...]
    system_dirs: tuple[str, ...]
    config_extension: str
    max_file_bytes: int


@dataclass(slots=True, frozen=True)
class ValidationConfig:
    """Validator feature toggles and rule inputs."""

    file_paths_enabled: bool
    file_path_pointers: tuple[str, ...]
    extra_curiosities: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class ServerConfig:
    """Fully merged server configuration."""

    project_root: Path
    data_dir: Path
    discovery: DiscoveryConfig
    validation: ValidationConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for status responses."""
        return {
            "project_root": str(self.project_root),
            "data_dir": str(self.data_dir),
            "discovery": {
                "planet_dirs": list(self.discovery.planet_dirs),
                "system_dirs": list(self.discovery.system_dirs),
                "config_extension": self.discovery.config_extension,
                "max_file_bytes": self.discovery.max_file_bytes,
            },
            "validation": {
                "file_paths_enabled": self.validation.file_paths_enabled,
                "file_path_pointers": list(self.validation.file_path_pointers),
                "extra_curiosities": list(self.validation.extra_curiosities),
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    max_file_bytes: int | None = None
    file_paths_enabled: bool | None = None


def default_config(project_root: Path) -> ServerConfig:
    """Build default config for a given project root."""
    resolved_root = project_root.resolve()
    return ServerConfig(
        project_root=resolved_root,
        data_dir=resolved_root / ".nh_lsp",
        discovery=DiscoveryConfig(
            planet_dirs=DEFAULT_PLANET_DIRS,
            system_dirs=DEFAULT_SYSTEM_DIRS,
            config_extension=DEFAULT_CONFIG_EXTENSION,
            max_file_bytes=DEFAULT_MAX_FILE_BYTES,
        ),
        validation=ValidationConfig(
            file_paths_enabled=True,
            file_path_pointers=DEFAULT_FILE_PATH_POINTERS,
            extra_curiosities=(),
        ),
    )


def load_project_config_file(project_root: Path) -> dict[str, object]:
    """Load optional nh_lsp.toml from the project root."""
    config_path = project_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def merge_config(
    base: ServerConfig, project_payload: dict[str, object], overrides: CliOverrides
) -> ServerConfig:
    """Merge defaults, project config, then CLI/startup overrides."""
    discovery_payload = _get_table(project_payload, "discovery")
    validation_payload = _get_table(project_payload, "validation")

    planet_dirs = base.discovery.planet_dirs
    if "planet_dirs" in discovery_payload:
        planet_dirs = _tuple_of_strings(
            discovery_payload["planet_dirs"], "discovery", "planet_dirs"
        )
    system_dirs = base.discovery.system_dirs
    if "system_dirs" in discovery_payload:
        system_dirs = _tuple_of_strings(
            discovery_payload["system_dirs"], "discovery", "system_dirs"
        )

    config_extension = base.discovery.config_extension
    if "config_extension" in discovery_payload:
        raw_extension = discovery_payload["config_extension"]
        if not isinstance(raw_extension, str) or not raw_extension.startswith("."):
            raise ValueError(
                "Config field 'discovery.config_extension' must be a string starting with '.'."
            )
        config_extension = raw_extension.lower()

    max_file_bytes = _optional_positive_int_with_cap(
        discovery_payload.get("max_file_bytes"),
        "discovery.max_file_bytes",
        base.discovery.max_file_bytes,
        MAX_FILE_BYTES_CAP,
    )

    file_paths_enabled = base.validation.file_paths_enabled
    if "file_paths_enabled" in validation_payload:
        raw_enabled = validation_payload["file_paths_enabled"]
        if not isinstance(raw_enabled, bool):
            raise ValueError("Config field 'validation.file_paths_enabled' must be a boolean.")
        file_paths_enabled = raw_enabled

    file_path_pointers = base.validation.file_path_pointers
    if "file_path_pointers" in validation_payload:
        file_path_pointers = _tuple_of_strings(
            validation_payload["file_path_pointers"], "validation", "file_path_pointers"
        )
        for pointer in file_path_pointers:
            if not pointer.startswith("/"):
                raise ValueError(
                    "Config field 'validation.file_path_pointers' entries must start with '/'."
                )

    extra_curiosities = base.validation.extra_curiosities
    if "extra_curiosities" in validation_payload:
        extra_curiosities = _tuple_of_strings(
            validation_payload["extra_curiosities"], "validation", "extra_curiosities"
        )

    merged = ServerConfig(
        project_root=base.project_root,
        data_dir=base.data_dir,
        discovery=DiscoveryConfig(
            planet_dirs=planet_dirs,
            system_dirs=system_dirs,
            config_extension=config_extension,
            max_file_bytes=max_file_bytes,
        ),
        validation=ValidationConfig(
            file_paths_enabled=file_paths_enabled,
            file_path_pointers=file_path_pointers,
            extra_curiosities=extra_curiosities,
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ServerConfig, overrides: CliOverrides) -> ServerConfig:
    """Apply startup overrides at highest precedence."""
    max_file_bytes = _optional_positive_int_with_cap(
        overrides.max_file_bytes,
        "overrides.max_file_bytes",
        config.discovery.max_file_bytes,
        MAX_FILE_BYTES_CAP,
    )
    discovery = DiscoveryConfig(
        planet_dirs=config.discovery.planet_dirs,
        system_dirs=config.discovery.system_dirs,
        config_extension=config.discovery.config_extension,
        max_file_bytes=max_file_bytes,
    )
    validation = ValidationConfig(
        file_paths_enabled=(
            overrides.file_paths_enabled
            if overrides.file_paths_enabled is not None
            else config.validation.file_paths_enabled
        ),
        file_path_pointers=config.validation.file_path_pointers,
        extra_curiosities=config.validation.extra_curiosities,
    )
    data_dir = overrides.data_dir or config.data_dir
    return ServerConfig(
        project_root=config.project_root,
        data_dir=data_dir.resolve(),
        discovery=discovery,
        validation=validation,
    )


def load_effective_config(
    project_root: Path, overrides: CliOverrides | None = None
) -> ServerConfig:
    """Load effective config using merge order defaults -> project config -> overrides."""
    resolved_root = project_root.resolve()
    base = default_config(resolved_root)
    payload = load_project_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
