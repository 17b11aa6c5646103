"""Typed models for tracked project documents."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FileCategory(str, Enum):
    """Kinds of documents a project tracks."""

    PLANET = "planet"
    SYSTEM = "system"
    SHIP_LOG = "ship_log"
    DIALOGUE = "dialogue"
    TEXT = "text"


# Search order used when an editor buffer is matched to a tracked file.
OPEN_SEARCH_ORDER = (
    FileCategory.DIALOGUE,
    FileCategory.SHIP_LOG,
    FileCategory.SYSTEM,
    FileCategory.PLANET,
    FileCategory.TEXT,
)


@dataclass(slots=True)
class TrackedFile:
    """A config or document under management.

    Version 0 means the contents came from disk; editor buffers carry the
    version the editor assigned them.
    """

    uri: str
    path: Path
    version: int
    contents: str
    category: FileCategory


@dataclass(slots=True, frozen=True)
class FileVersion:
    """Identifier plus version of a document at one point in time."""

    uri: str
    version: int

    @classmethod
    def of(cls, tracked: TrackedFile) -> FileVersion:
        return cls(uri=tracked.uri, version=tracked.version)


@dataclass(slots=True, frozen=True)
class LoadFailure:
    """A document discovery could not load."""

    path: str
    category: FileCategory
    reason: str
