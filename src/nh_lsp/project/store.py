"""In-memory project store with editor-buffer overlay semantics."""

from __future__ import annotations

import json
import time
from collections.abc import Iterator
from pathlib import Path

from nh_lsp.config import DiscoveryConfig
from nh_lsp.logging import JsonlEventLogger
from nh_lsp.project.discovery import (
    DiscoveryProfile,
    load_json_object,
    read_document,
    referenced_documents,
    scan_config_files,
)
from nh_lsp.project.models import (
    OPEN_SEARCH_ORDER,
    FileCategory,
    FileVersion,
    LoadFailure,
    TrackedFile,
)
from nh_lsp.security import PathBlockedError, normalize_relative_path, resolve_project_path
from nh_lsp.text import normalize_uri, path_to_uri, uri_to_path


class Project:
    """Categorized tracked files for one mod project.

    Every mutation happens on the server's single event loop; nothing reads
    the store while it is being changed.
    """

    def __init__(
        self,
        root: Path,
        discovery: DiscoveryConfig,
        logger: JsonlEventLogger | None = None,
    ) -> None:
        self.root_path = root.resolve()
        self._discovery = discovery
        self._logger = logger
        self._files: dict[FileCategory, list[TrackedFile]] = {
            category: [] for category in FileCategory
        }
        self.files_with_diagnostics: dict[str, int] = {}
        self.load_failures: list[LoadFailure] = []

    def files(self, category: FileCategory) -> tuple[TrackedFile, ...]:
        """Return tracked files of one category in discovery order."""
        return tuple(self._files[category])

    def iter_all(self) -> Iterator[TrackedFile]:
        """Lazily iterate every tracked file across all categories."""
        for category in FileCategory:
            yield from self._files[category]

    def find(self, uri: str) -> TrackedFile | None:
        canonical = normalize_uri(uri)
        for tracked in self.iter_all():
            if tracked.uri == canonical:
                return tracked
        return None

    def contains_any(self, uris: list[str], categories: tuple[FileCategory, ...]) -> bool:
        """Return True when any uri belongs to a tracked file of the given categories."""
        canonical = {normalize_uri(uri) for uri in uris}
        return any(
            tracked.uri in canonical
            for category in categories
            for tracked in self._files[category]
        )

    def relative_path(self, tracked: TrackedFile) -> str:
        """Return the file's POSIX path relative to the project root."""
        try:
            return tracked.path.relative_to(self.root_path).as_posix()
        except ValueError:
            return tracked.path.as_posix()

    def find_all_systems(self) -> list[str]:
        """Return star system names derived from system config file names."""
        extension = self._discovery.config_extension
        names = {
            tracked.path.name[: -len(extension)]
            for tracked in self._files[FileCategory.SYSTEM]
            if tracked.path.name.lower().endswith(extension)
        }
        return sorted(names)

    def counts(self) -> dict[str, int]:
        return {category.value: len(self._files[category]) for category in FileCategory}

    def discover(self) -> DiscoveryProfile:
        """Load every planet and system config plus the documents planets reference."""
        started = time.perf_counter()
        for category in FileCategory:
            self._files[category].clear()
        self.load_failures.clear()
        self._log("discovery.start", f"Begin project discovery at {self.root_path}")

        for directory in self._discovery.planet_dirs:
            for path in scan_config_files(
                self.root_path, directory, self._discovery.config_extension
            ):
                self._track_from_disk(path, FileCategory.PLANET)
        for directory in self._discovery.system_dirs:
            for path in scan_config_files(
                self.root_path, directory, self._discovery.config_extension
            ):
                self._track_from_disk(path, FileCategory.SYSTEM)

        for planet in self.files(FileCategory.PLANET):
            try:
                payload = load_json_object(planet.contents)
            except json.JSONDecodeError as error:
                self._record_failure(self.relative_path(planet), FileCategory.PLANET, str(error))
                continue
            if payload is None:
                continue
            for category, relative in referenced_documents(payload):
                try:
                    resolved = resolve_project_path(self.root_path, relative)
                except PathBlockedError as error:
                    self._record_failure(relative, category, error.reason)
                    continue
                self._track_from_disk(resolved, category)

        profile = DiscoveryProfile(
            planet_files=len(self._files[FileCategory.PLANET]),
            system_files=len(self._files[FileCategory.SYSTEM]),
            ship_log_files=len(self._files[FileCategory.SHIP_LOG]),
            dialogue_files=len(self._files[FileCategory.DIALOGUE]),
            text_files=len(self._files[FileCategory.TEXT]),
            failures=len(self.load_failures),
            total_seconds=time.perf_counter() - started,
        )
        self._log(
            "discovery.complete",
            "Project discovery complete",
            planets=profile.planet_files,
            systems=profile.system_files,
            ship_logs=profile.ship_log_files,
            dialogue=profile.dialogue_files,
            text=profile.text_files,
            failures=profile.failures,
            seconds=round(profile.total_seconds, 4),
        )
        return profile

    def open_file(self, uri: str, version: int, contents: str) -> TrackedFile | None:
        """Overlay an editor buffer onto the tracked file with the same uri.

        The first category holding the uri wins. Stale versions are ignored.
        A config under a planet or system directory that discovery did not
        see is added; any other unknown document is left untracked.
        """
        canonical = normalize_uri(uri)
        for category in OPEN_SEARCH_ORDER:
            for tracked in self._files[category]:
                if tracked.uri != canonical:
                    continue
                if version > tracked.version:
                    tracked.version = version
                    tracked.contents = contents
                return tracked

        try:
            path = uri_to_path(canonical)
        except ValueError:
            self._log("open.untracked", f"Ignoring non-file document {uri}", level="debug")
            return None
        category = self._config_category_for(path)
        if category is None:
            self._log(
                "open.untracked",
                f"Ignoring document outside discovered project files: {canonical}",
                level="debug",
            )
            return None
        tracked = TrackedFile(
            uri=canonical,
            path=path,
            version=version,
            contents=contents,
            category=category,
        )
        self._files[category].append(tracked)
        self._log(
            "open.tracked",
            f"Tracking new {category.value} config {canonical}",
            uri=canonical,
            version=version,
        )
        return tracked

    def close_file(self, uri: str) -> TrackedFile | None:
        """Drop the editor overlay and revert to on-disk contents."""
        tracked = self.find(uri)
        if tracked is None:
            return None
        tracked.version = 0
        try:
            tracked.contents = read_document(tracked.path, self._discovery.max_file_bytes)
        except (OSError, UnicodeDecodeError) as error:
            self._log(
                "close.reread_failed",
                f"Keeping last buffer for {tracked.uri}: {error}",
                level="warning",
                uri=tracked.uri,
            )
        return tracked

    def version_of(self, uri: str) -> FileVersion | None:
        tracked = self.find(uri)
        return FileVersion.of(tracked) if tracked is not None else None

    def _config_category_for(self, path: Path) -> FileCategory | None:
        if path.suffix.lower() != self._discovery.config_extension:
            return None
        try:
            relative = path.resolve().relative_to(self.root_path)
        except ValueError:
            return None
        if _under_any(relative, self._discovery.planet_dirs):
            return FileCategory.PLANET
        if _under_any(relative, self._discovery.system_dirs):
            return FileCategory.SYSTEM
        return None

    def _track_from_disk(self, path: Path, category: FileCategory) -> None:
        uri = path_to_uri(path)
        if any(tracked.uri == uri for tracked in self._files[category]):
            return
        try:
            contents = read_document(path, self._discovery.max_file_bytes)
        except (OSError, UnicodeDecodeError) as error:
            self._record_failure(_display_path(self.root_path, path), category, str(error))
            return
        self._files[category].append(
            TrackedFile(
                uri=uri,
                path=path.resolve(),
                version=0,
                contents=contents,
                category=category,
            )
        )

    def _record_failure(self, path: str, category: FileCategory, reason: str) -> None:
        self.load_failures.append(LoadFailure(path=path, category=category, reason=reason))
        self._log(
            "discovery.skipped",
            f"Failed to load {category.value} document {path}: {reason}",
            level="warning",
            path=path,
            category=category.value,
        )

    def _log(self, kind: str, message: str, level: str = "info", **metadata: object) -> None:
        if self._logger is not None:
            self._logger.log(kind, message, level=level, **metadata)


def _display_path(root: Path, path: Path) -> str:
    try:
        return path.resolve().relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _under_any(relative: Path, directories: tuple[str, ...]) -> bool:
    """Return True when relative lies below one of the configured directories."""
    for directory in directories:
        parts = tuple(normalize_relative_path(directory).split("/"))
        if len(relative.parts) > len(parts) and relative.parts[: len(parts)] == parts:
            return True
    return False
