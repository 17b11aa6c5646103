"""Resolve paths written in mod configs without leaving the project root."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

WINDOWS_DRIVE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:/")
MOD_RELATIVE_HINT: Final[str] = "Use a path relative to the mod folder, e.g. 'planets/x.xml'."


class PathBlockedError(Exception):
    """Raised when a config references a path outside the project root."""

    def __init__(self, reason: str, hint: str = MOD_RELATIVE_HINT) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


def split_config_path(candidate: str) -> tuple[list[str], bool]:
    """Split a config path into segments and report whether it was absolute.

    Mod configs are written on Windows as often as anywhere else, so both
    separators are accepted. Empty and `.` segments are dropped.
    """
    unified = candidate.strip().replace("\\", "/")
    absolute = unified.startswith("/") or WINDOWS_DRIVE_PATTERN.match(unified) is not None
    return [part for part in unified.split("/") if part not in ("", ".")], absolute


def normalize_relative_path(candidate: str) -> str:
    """Return a config-relative path in POSIX form, used as a lookup key."""
    parts, _ = split_config_path(candidate)
    return "/".join(parts)


def resolve_project_path(project_root: Path, candidate: str) -> Path:
    """Resolve a config-supplied path to an absolute path under the project root."""
    root = project_root.resolve()
    parts, absolute = split_config_path(candidate)
    if not parts:
        raise PathBlockedError(reason="Path is empty.")

    if absolute:
        resolved = Path(candidate.strip()).resolve(strict=False)
        if not resolved.is_relative_to(root):
            raise PathBlockedError(reason="Absolute path is outside the project root.")
        return resolved

    if ".." in parts:
        raise PathBlockedError(
            reason="Path traversal is blocked.",
            hint="Remove '..' segments from the path.",
        )
    resolved = root.joinpath(*parts).resolve(strict=False)
    # Symlinks inside the mod may still point elsewhere.
    if not resolved.is_relative_to(root):
        raise PathBlockedError(reason="Resolved path escapes the project root.")
    return resolved
