"""Structured logging utilities."""

from .events import LogEvent, JsonlEventLogger, sanitize_params, utc_timestamp

__all__ = ["JsonlEventLogger", "LogEvent", "sanitize_params", "utc_timestamp"]
