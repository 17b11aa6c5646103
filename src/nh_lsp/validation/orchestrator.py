"""Decides which validators re-run and publishes or clears diagnostics."""

from __future__ import annotations

import time
from collections.abc import Callable
from itertools import groupby

from nh_lsp.logging import JsonlEventLogger
from nh_lsp.project import Project
from nh_lsp.text import normalize_uri
from nh_lsp.validation.base import FileDiagnostic, PublishDiagnostics
from nh_lsp.validation.registry import ValidatorRegistry

PublishSink = Callable[[PublishDiagnostics], None]


class ValidatorOrchestrator:
    """Runs registered validators and keeps editor diagnostics in sync.

    The last result of every validator is cached, so a change that only
    invalidates some validators still republishes the others' findings
    instead of clearing them.
    """

    def __init__(
        self,
        registry: ValidatorRegistry,
        publish: PublishSink,
        logger: JsonlEventLogger | None = None,
    ) -> None:
        self._registry = registry
        self._publish = publish
        self._logger = logger
        self._last_results: dict[str, list[FileDiagnostic]] = {}

    def current_diagnostics(self) -> list[FileDiagnostic]:
        """Return the cached diagnostics of every validator in registration order."""
        return [
            diagnostic
            for validator in self._registry
            for diagnostic in self._last_results.get(validator.name, [])
        ]

    def force_validate_all(self, project: Project) -> int:
        """Run every validator unconditionally and publish the result."""
        started = time.perf_counter()
        for validator in self._registry:
            self._last_results[validator.name] = validator.validate(project)
        errors = self.current_diagnostics()
        project.files_with_diagnostics = _dirty_set(errors)

        self._emit(errors)
        self._log(
            "validation.forced",
            f"Finished validation, found {len(errors)} errors",
            errors=len(errors),
            files=len(project.files_with_diagnostics),
            seconds=round(time.perf_counter() - started, 4),
        )
        return len(errors)

    def on_change(self, changed_uris: list[str], project: Project) -> int:
        """Re-run invalidated validators and publish the diagnostic diff."""
        started = time.perf_counter()
        changed = [normalize_uri(uri) for uri in changed_uris]
        rerun: list[str] = []
        for validator in self._registry:
            if validator.should_invalidate(changed, project):
                self._last_results[validator.name] = validator.validate(project)
                rerun.append(validator.name)
        errors = self.current_diagnostics()
        uris_with_diagnostics = {item.file.uri for item in errors}

        self._emit(errors)
        for tracked in project.iter_all():
            if tracked.uri in uris_with_diagnostics:
                continue
            was_dirty = tracked.uri in project.files_with_diagnostics
            self._publish(
                PublishDiagnostics(
                    uri=tracked.uri,
                    version=tracked.version if was_dirty else None,
                    diagnostics=(),
                )
            )

        project.files_with_diagnostics = _dirty_set(errors)

        self._log(
            "validation.changed",
            f"Re-validated {len(changed)} changed documents, found {len(errors)} errors",
            changed=changed,
            validators=rerun,
            errors=len(errors),
            seconds=round(time.perf_counter() - started, 4),
        )
        return len(errors)

    def _emit(self, errors: list[FileDiagnostic]) -> None:
        ordered = sorted(errors, key=lambda item: item.file.uri)
        for uri, group in groupby(ordered, key=lambda item: item.file.uri):
            items = list(group)
            self._publish(
                PublishDiagnostics(
                    uri=uri,
                    version=items[-1].file.version,
                    diagnostics=tuple(item.diagnostic for item in items),
                )
            )

    def _log(self, kind: str, message: str, **metadata: object) -> None:
        if self._logger is not None:
            self._logger.log(kind, message, **metadata)


def _dirty_set(errors: list[FileDiagnostic]) -> dict[str, int]:
    """Map every uri that carries a diagnostic to the version it was produced against."""
    dirty: dict[str, int] = {}
    for item in errors:
        dirty[item.file.uri] = item.file.version
    return dirty
