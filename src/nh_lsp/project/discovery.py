"""Deterministic project document discovery."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from nh_lsp.project.models import FileCategory


@dataclass(slots=True, frozen=True)
class DiscoveryProfile:
    """Counters for one discovery pass."""

    planet_files: int
    system_files: int
    ship_log_files: int
    dialogue_files: int
    text_files: int
    failures: int
    total_seconds: float


class DocumentTooLargeError(OSError):
    """Raised when a document exceeds the configured size limit."""


def scan_config_files(root: Path, directory: str, extension: str) -> list[Path]:
    """Recursively list config files below root/directory in sorted order."""
    base = root / directory
    found: list[Path] = []
    stack: list[Path] = [base]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError:
            continue
        for entry in reversed(ordered_entries):
            full_path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                if entry.name.startswith("."):
                    continue
                stack.append(full_path)
                continue
            if not entry.is_file(follow_symlinks=False):
                continue
            if full_path.suffix.lower() != extension:
                continue
            found.append(full_path)
    return sorted(found, key=lambda path: path.relative_to(root).as_posix())


def read_document(path: Path, max_file_bytes: int) -> str:
    """Read a UTF-8 document, rejecting files above max_file_bytes."""
    size = path.stat().st_size
    if size > max_file_bytes:
        raise DocumentTooLargeError(f"{size} bytes exceeds max_file_bytes {max_file_bytes}")
    return path.read_text(encoding="utf-8-sig")


def load_json_object(text: str) -> dict[str, object] | None:
    """Parse config text, returning None unless it holds a JSON object."""
    payload = json.loads(text.removeprefix("\ufeff"))
    if not isinstance(payload, dict):
        return None
    return payload


def referenced_documents(planet: dict[str, object]) -> list[tuple[FileCategory, str]]:
    """Return (category, relative path) pairs a planet config points at."""
    references: list[tuple[FileCategory, str]] = []
    ship_log = planet.get("ShipLog")
    if isinstance(ship_log, dict):
        xml_file = ship_log.get("xmlFile")
        if isinstance(xml_file, str) and xml_file.strip():
            references.append((FileCategory.SHIP_LOG, xml_file))

    props = planet.get("Props")
    if not isinstance(props, dict):
        return references
    for key, category in (
        ("dialogue", FileCategory.DIALOGUE),
        ("translatorText", FileCategory.TEXT),
    ):
        for item in _objects(props.get(key)):
            xml_file = item.get("xmlFile")
            if isinstance(xml_file, str) and xml_file.strip():
                references.append((category, xml_file))
    for remote in _objects(props.get("remotes")):
        whiteboard = remote.get("whiteboard")
        if not isinstance(whiteboard, dict):
            continue
        for text in _objects(whiteboard.get("nomaiText")):
            xml_file = text.get("xmlFile")
            if isinstance(xml_file, str) and xml_file.strip():
                references.append((FileCategory.TEXT, xml_file))
    return references


def _objects(value: object) -> list[dict[str, object]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
