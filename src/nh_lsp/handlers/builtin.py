"""Built-in request and document notification handlers."""

from __future__ import annotations

from collections.abc import Callable

from nh_lsp.config import ServerConfig
from nh_lsp.handlers.registry import (
    HandlerRegistry,
    NotificationHandler,
    RequestDispatchError,
    RequestHandler,
)
from nh_lsp.project import Project
from nh_lsp.validation import ShipLogContext

SERVER_NAME = "nh-language-server"
SERVER_VERSION = "0.1.0"

# Full document sync: every didChange carries the whole buffer.
TEXT_DOCUMENT_SYNC_FULL = 1


def register_builtin_handlers(
    registry: HandlerRegistry,
    project: Project,
    config: ServerConfig,
    build_ship_log_context: Callable[[], ShipLogContext],
    validator_names: Callable[[], tuple[str, ...]],
    request_shutdown: Callable[[], None],
) -> None:
    """Register the request methods the server answers."""
    registry.register("initialize", _initialize_handler())
    registry.register("getSystems", _systems_handler(project))
    registry.register("getEntriesForSystem", _entries_handler(build_ship_log_context))
    registry.register("nh/status", _status_handler(project, config, validator_names))
    registry.register("shutdown", _shutdown_handler(request_shutdown))


def register_document_handlers(
    registry: HandlerRegistry,
    project: Project,
    on_change: Callable[[list[str]], None],
) -> None:
    """Register text document notifications that overlay editor buffers."""
    registry.register_notification("textDocument/didOpen", _did_open_handler(project, on_change))
    registry.register_notification(
        "textDocument/didChange", _did_change_handler(project, on_change)
    )
    registry.register_notification(
        "textDocument/didClose", _did_close_handler(project, on_change)
    )


def _initialize_handler() -> RequestHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            "capabilities": {"textDocumentSync": TEXT_DOCUMENT_SYNC_FULL},
        }

    return handler


def _systems_handler(project: Project) -> RequestHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {"systems": project.find_all_systems()}

    return handler


def _entries_handler(build_ship_log_context: Callable[[], ShipLogContext]) -> RequestHandler:
    def handler(params: dict[str, object]) -> dict[str, object]:
        system = params.get("system")
        if not isinstance(system, str) or not system:
            raise RequestDispatchError(
                code="INVALID_PARAMS",
                message="getEntriesForSystem params.system must be a non-empty string.",
            )
        entries = build_ship_log_context().entries_for_system(system)
        return {
            "system": system,
            "entries": None if entries is None else [entry.to_dict() for entry in entries],
        }

    return handler


def _status_handler(
    project: Project,
    config: ServerConfig,
    validator_names: Callable[[], tuple[str, ...]],
) -> RequestHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {
            "project_root": str(project.root_path),
            "file_counts": project.counts(),
            "files_with_diagnostics": [
                {"uri": uri, "version": version}
                for uri, version in sorted(project.files_with_diagnostics.items())
            ],
            "load_failures": [
                {
                    "path": failure.path,
                    "category": failure.category.value,
                    "reason": failure.reason,
                }
                for failure in project.load_failures
            ],
            "validators": list(validator_names()),
            "effective_config": config.to_public_dict(),
        }

    return handler


def _shutdown_handler(request_shutdown: Callable[[], None]) -> RequestHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        request_shutdown()
        return {}

    return handler


def _did_open_handler(
    project: Project, on_change: Callable[[list[str]], None]
) -> NotificationHandler:
    def handler(params: dict[str, object]) -> None:
        document = _text_document(params)
        uri = _required_uri(document)
        version = _required_version(document)
        text = document.get("text")
        if not isinstance(text, str):
            raise RequestDispatchError(
                code="INVALID_PARAMS",
                message="textDocument.text must be a string.",
            )
        if project.open_file(uri, version, text) is not None:
            on_change([uri])

    return handler


def _did_change_handler(
    project: Project, on_change: Callable[[list[str]], None]
) -> NotificationHandler:
    def handler(params: dict[str, object]) -> None:
        document = _text_document(params)
        uri = _required_uri(document)
        version = _required_version(document)
        changes = params.get("contentChanges")
        if not isinstance(changes, list) or not changes:
            raise RequestDispatchError(
                code="INVALID_PARAMS",
                message="contentChanges must be a non-empty list.",
            )
        last = changes[-1]
        text = last.get("text") if isinstance(last, dict) else None
        if not isinstance(text, str):
            raise RequestDispatchError(
                code="INVALID_PARAMS",
                message="contentChanges[].text must be a string.",
            )
        if project.open_file(uri, version, text) is not None:
            on_change([uri])

    return handler


def _did_close_handler(
    project: Project, on_change: Callable[[list[str]], None]
) -> NotificationHandler:
    def handler(params: dict[str, object]) -> None:
        uri = _required_uri(_text_document(params))
        if project.close_file(uri) is not None:
            on_change([uri])

    return handler


def _text_document(params: dict[str, object]) -> dict[str, object]:
    document = params.get("textDocument")
    if not isinstance(document, dict):
        raise RequestDispatchError(
            code="INVALID_PARAMS",
            message="params.textDocument must be an object.",
        )
    return document


def _required_uri(document: dict[str, object]) -> str:
    uri = document.get("uri")
    if not isinstance(uri, str) or not uri:
        raise RequestDispatchError(
            code="INVALID_PARAMS",
            message="textDocument.uri must be a non-empty string.",
        )
    return uri


def _required_version(document: dict[str, object]) -> int:
    version = document.get("version")
    if isinstance(version, bool) or not isinstance(version, int):
        raise RequestDispatchError(
            code="INVALID_PARAMS",
            message="textDocument.version must be an integer.",
        )
    return version
