"""Validators, diagnostics and the orchestration layer."""

from .base import (
    CONFIG_FILE_PATH_NOT_FOUND,
    ERROR_SOURCE,
    SHIPLOG_DUPLICATE_ID,
    SHIPLOG_MISSING_CURIOSITY,
    SHIPLOG_MISSING_SOURCE_ID,
    SHIPLOG_RESERVED_ID,
    Diagnostic,
    FileDiagnostic,
    PublishDiagnostics,
    Severity,
    Validator,
)
from .file_paths import FilePathValidator
from .orchestrator import PublishSink, ValidatorOrchestrator
from .registry import ValidatorRegistry, build_validator_registry
from .ship_log import Entry, IdRecord, ShipLogContext, ShipLogValidator

__all__ = [
    "CONFIG_FILE_PATH_NOT_FOUND",
    "Diagnostic",
    "ERROR_SOURCE",
    "Entry",
    "FileDiagnostic",
    "FilePathValidator",
    "IdRecord",
    "PublishDiagnostics",
    "PublishSink",
    "SHIPLOG_DUPLICATE_ID",
    "SHIPLOG_MISSING_CURIOSITY",
    "SHIPLOG_MISSING_SOURCE_ID",
    "SHIPLOG_RESERVED_ID",
    "Severity",
    "ShipLogContext",
    "ShipLogValidator",
    "Validator",
    "ValidatorOrchestrator",
    "ValidatorRegistry",
    "build_validator_registry",
]
