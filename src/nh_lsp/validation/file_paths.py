"""Checks that file paths named in planet configs exist."""

from __future__ import annotations

from nh_lsp.logging import JsonlEventLogger
from nh_lsp.project import FileCategory, FileVersion, Project
from nh_lsp.security import PathBlockedError, resolve_project_path
from nh_lsp.text import JsonLocateError, parse_json_tree
from nh_lsp.validation.base import CONFIG_FILE_PATH_NOT_FOUND, FileDiagnostic, error


class FilePathValidator:
    """Validator resolving configured JSON pointers to on-disk paths."""

    name = "file_paths"

    def __init__(
        self,
        pointers: tuple[str, ...],
        logger: JsonlEventLogger | None = None,
    ) -> None:
        self._configured_pointers = pointers
        self._pointers: tuple[str, ...] = ()
        self._logger = logger

    @property
    def pointers(self) -> tuple[str, ...]:
        return self._pointers

    def prepare(self) -> None:
        """Deduplicate configured pointers while keeping their order."""
        self._pointers = tuple(dict.fromkeys(self._configured_pointers))

    def should_invalidate(self, changed_uris: list[str], project: Project) -> bool:
        # Any edit can create or remove the file a config points at.
        _ = changed_uris
        _ = project
        return True

    def validate(self, project: Project) -> list[FileDiagnostic]:
        errors: list[FileDiagnostic] = []
        for config in project.files(FileCategory.PLANET):
            try:
                tree = parse_json_tree(config.contents)
            except JsonLocateError as error_:
                self._log_parse_failure(config.uri, str(error_))
                continue
            file = FileVersion.of(config)
            for pointer in self._pointers:
                for node in tree.select(pointer):
                    if node.kind != "string" or not isinstance(node.value, str):
                        continue
                    if self._exists(project, node.value):
                        continue
                    errors.append(
                        error(
                            file,
                            tree.range_of(node),
                            CONFIG_FILE_PATH_NOT_FOUND,
                            f"File path `{node.value}` not found",
                        )
                    )
        return errors

    @staticmethod
    def _exists(project: Project, value: str) -> bool:
        try:
            resolved = resolve_project_path(project.root_path, value)
        except PathBlockedError:
            return False
        return resolved.is_file() or resolved.is_dir()

    def _log_parse_failure(self, uri: str, reason: str) -> None:
        if self._logger is not None:
            self._logger.log(
                "file_paths.parse_failed",
                f"Skipping path checks for {uri}: {reason}",
                level="warning",
                uri=uri,
            )
