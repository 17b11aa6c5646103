"""Deterministic request and notification routing primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

RequestHandler = Callable[[dict[str, object]], dict[str, object]]
NotificationHandler = Callable[[dict[str, object]], None]


@dataclass(slots=True, frozen=True)
class RequestDispatchError(Exception):
    """Represents deterministic request dispatch failures."""

    code: str
    message: str


@dataclass(slots=True)
class HandlerRegistry:
    """In-memory method registry preserving deterministic insertion order."""

    _requests: dict[str, RequestHandler] = field(default_factory=dict)
    _notifications: dict[str, NotificationHandler] = field(default_factory=dict)

    def register(self, method: str, handler: RequestHandler) -> None:
        """Register a handler for a request that expects a response."""
        self._requests[method] = handler

    def register_notification(self, method: str, handler: NotificationHandler) -> None:
        """Register a handler for a notification that never gets a response."""
        self._notifications[method] = handler

    def get(self, method: str) -> RequestHandler | None:
        return self._requests.get(method)

    def names(self) -> tuple[str, ...]:
        """Return registered request methods in deterministic order."""
        return tuple(self._requests.keys())

    def notification_names(self) -> tuple[str, ...]:
        return tuple(self._notifications.keys())

    def dispatch(self, method: str, params: dict[str, object]) -> dict[str, object]:
        """Dispatch a request to its handler by method name."""
        handler = self.get(method)
        if handler is None:
            raise RequestDispatchError(code="UNKNOWN_METHOD", message=f"Unknown method: {method}")
        return handler(params)

    def notify(self, method: str, params: dict[str, object]) -> bool:
        """Dispatch a notification; return False when nothing handles the method."""
        handler = self._notifications.get(method)
        if handler is None:
            return False
        handler(params)
        return True
