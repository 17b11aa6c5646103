"""Core validator protocol and diagnostic types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

from nh_lsp.project import FileVersion, Project
from nh_lsp.text import Range

ERROR_SOURCE = "New Horizons"

SHIPLOG_DUPLICATE_ID = "nh.shiplog.duplicate_ids"
SHIPLOG_RESERVED_ID = "nh.shiplog.reserved_id"
SHIPLOG_MISSING_CURIOSITY = "nh.shiplog.missing_curiosity"
SHIPLOG_MISSING_SOURCE_ID = "nh.shiplog.invalid_source_id"
CONFIG_FILE_PATH_NOT_FOUND = "nh.config.file_path_not_found"


class Severity(IntEnum):
    """Diagnostic severities as numbered by the editor protocol."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass(slots=True, frozen=True)
class Diagnostic:
    """Single positioned finding inside one document."""

    range: Range
    severity: Severity
    code: str
    message: str
    source: str = ERROR_SOURCE

    def to_dict(self) -> dict[str, object]:
        return {
            "range": self.range.to_dict(),
            "severity": int(self.severity),
            "code": self.code,
            "source": self.source,
            "message": self.message,
        }


@dataclass(slots=True, frozen=True)
class FileDiagnostic:
    """Diagnostic bound to the document version it was produced against."""

    file: FileVersion
    diagnostic: Diagnostic


def error(file: FileVersion, range_: Range, code: str, message: str) -> FileDiagnostic:
    """Build an error-severity FileDiagnostic."""
    return FileDiagnostic(
        file=file,
        diagnostic=Diagnostic(range=range_, severity=Severity.ERROR, code=code, message=message),
    )


@dataclass(slots=True, frozen=True)
class PublishDiagnostics:
    """One outbound diagnostics event for a single document."""

    uri: str
    version: int | None
    diagnostics: tuple[Diagnostic, ...]

    def to_params(self) -> dict[str, object]:
        return {
            "uri": self.uri,
            "version": self.version,
            "diagnostics": [diagnostic.to_dict() for diagnostic in self.diagnostics],
        }


class Validator(Protocol):
    """Protocol implemented by every registered validator."""

    name: str

    def prepare(self) -> None:
        """Load anything the validator needs before the first run."""

    def should_invalidate(self, changed_uris: list[str], project: Project) -> bool:
        """Return True when a change to these documents requires a re-run."""

    def validate(self, project: Project) -> list[FileDiagnostic]:
        """Re-derive all diagnostics from the current project state."""
