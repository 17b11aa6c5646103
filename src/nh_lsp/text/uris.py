"""Conversion between filesystem paths and file:// document identifiers."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final
from urllib.parse import unquote, urlparse

WINDOWS_DRIVE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^/[a-zA-Z]:")


def path_to_uri(path: Path) -> str:
    """Return the canonical file:// URI for a filesystem path."""
    return path.resolve().as_uri()


def uri_to_path(uri: str) -> Path:
    """Return the filesystem path named by a file:// URI."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        raise ValueError(f"Unsupported document URI scheme: {uri}")
    raw_path = unquote(parsed.path)
    if WINDOWS_DRIVE_PATTERN.match(raw_path):
        raw_path = raw_path[1:]
    if parsed.netloc and parsed.netloc != "localhost":
        raw_path = f"//{parsed.netloc}{raw_path}"
    return Path(raw_path)


def normalize_uri(uri: str) -> str:
    """Canonicalize an editor-supplied URI so it compares equal to discovered ones."""
    try:
        return path_to_uri(uri_to_path(uri))
    except ValueError:
        return uri
