"""Tracked project documents and discovery."""

from .discovery import (
    DiscoveryProfile,
    DocumentTooLargeError,
    load_json_object,
    read_document,
    referenced_documents,
    scan_config_files,
)
from .models import OPEN_SEARCH_ORDER, FileCategory, FileVersion, LoadFailure, TrackedFile
from .store import Project

__all__ = [
    "DiscoveryProfile",
    "DocumentTooLargeError",
    "FileCategory",
    "FileVersion",
    "LoadFailure",
    "OPEN_SEARCH_ORDER",
    "Project",
    "TrackedFile",
    "load_json_object",
    "read_document",
    "referenced_documents",
    "scan_config_files",
]
