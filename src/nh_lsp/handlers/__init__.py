"""Protocol method handlers and registrations."""

from .registry import HandlerRegistry, NotificationHandler, RequestDispatchError, RequestHandler

__all__ = ["HandlerRegistry", "NotificationHandler", "RequestDispatchError", "RequestHandler"]
