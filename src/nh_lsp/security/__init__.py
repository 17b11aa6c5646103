"""Project-root sandboxing for config-referenced paths."""

from .paths import PathBlockedError, normalize_relative_path, resolve_project_path

__all__ = ["PathBlockedError", "normalize_relative_path", "resolve_project_path"]
