"""JSON-line stdio language server entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from nh_lsp.config import CliOverrides, ServerConfig, load_effective_config
from nh_lsp.handlers.builtin import register_builtin_handlers, register_document_handlers
from nh_lsp.handlers.registry import HandlerRegistry, RequestDispatchError
from nh_lsp.logging import JsonlEventLogger, sanitize_params
from nh_lsp.project import Project
from nh_lsp.validation import (
    PublishDiagnostics,
    ShipLogContext,
    ValidatorOrchestrator,
    build_validator_registry,
)

PUBLISH_DIAGNOSTICS_METHOD = "textDocument/publishDiagnostics"
EVENT_LOG_NAME = "events.jsonl"


@dataclass(slots=True, frozen=True)
class Message:
    """Normalized incoming message; notifications carry no request id."""

    request_id: str | None
    method: str
    params: dict[str, object]


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for server startup configuration."""
    parser = argparse.ArgumentParser(prog="nh-language-server")
    parser.add_argument("--project-root", required=False, default=".")
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument("--max-file-bytes", type=int, required=False, default=None)
    parser.add_argument(
        "--file-paths-enabled", choices=("true", "false"), required=False, default=None
    )
    return parser


class StdioServer:
    """Single-threaded JSON-line server for one mod project.

    Each inbound line is handled to completion, including validation and
    diagnostic emission, before the next line is read.
    """

    def __init__(self, config: ServerConfig) -> None:
        self._config = config
        self._logger = JsonlEventLogger(path=config.data_dir / EVENT_LOG_NAME)
        self._project = Project(
            root=config.project_root,
            discovery=config.discovery,
            logger=self._logger,
        )
        self._validators = build_validator_registry(config, logger=self._logger)
        self._outbox: list[dict[str, object]] = []
        self._orchestrator = ValidatorOrchestrator(
            self._validators,
            publish=self._queue_diagnostics,
            logger=self._logger,
        )
        self._registry = HandlerRegistry()
        register_builtin_handlers(
            self._registry,
            project=self._project,
            config=config,
            build_ship_log_context=self._build_ship_log_context,
            validator_names=self._validators.names,
            request_shutdown=self._request_shutdown,
        )
        register_document_handlers(
            self._registry,
            project=self._project,
            on_change=self._on_change,
        )
        self._started = False
        self._shutdown_requested = False
        self._exit_requested = False
        self._fallback_request_counter = 0

    @property
    def project(self) -> Project:
        return self._project

    @property
    def logger(self) -> JsonlEventLogger:
        return self._logger

    @property
    def exit_requested(self) -> bool:
        return self._exit_requested

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_requested

    def start(self) -> list[dict[str, object]]:
        """Discover the project and publish the initial full validation once."""
        if self._started:
            return []
        self._started = True
        self._logger.log(
            "server.start",
            f"Starting language server for {self._config.project_root}",
            validators=list(self._validators.names()),
        )
        self._project.discover()
        self._orchestrator.force_validate_all(self._project)
        return self._drain_outbox()

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        """Process JSON-line messages from stdin and write JSON-line replies."""
        self._write(out_stream, self.start())
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            self._write(out_stream, self.handle_json_line(line))
            if self._exit_requested:
                break
        self._logger.log("server.stop", "Language server stopped")

    def handle_json_line(self, raw_line: str) -> list[dict[str, object]]:
        """Handle a single JSON line and return every outbound message it caused."""
        try:
            payload = json.loads(raw_line)
        except json.JSONDecodeError:
            request_id = self.next_request_id()
            response = self.error_response(
                request_id=request_id,
                code="INVALID_JSON",
                message="Message must be valid JSON.",
            )
            self.log_message(
                request_id=request_id,
                method="invalid_json",
                params={"raw_line_length": len(raw_line)},
                response=response,
                started=time.perf_counter(),
            )
            return [response]
        return self.handle_payload(payload)

    def handle_payload(self, payload: object) -> list[dict[str, object]]:
        """Validate and dispatch a parsed payload."""
        started = time.perf_counter()
        parsed = self.parse_message(payload)
        if isinstance(parsed, dict):
            request_id_value = parsed.get("request_id")
            request_id = (
                request_id_value if isinstance(request_id_value, str) else self.next_request_id()
            )
            self.log_message(
                request_id=request_id,
                method="invalid_request",
                params={},
                response=parsed,
                started=started,
            )
            return [parsed]

        message_id = parsed.request_id
        if message_id is None:
            self._handle_notification(parsed, started)
            return self._drain_outbox()

        response = self._handle_request(message_id, parsed)
        self.log_message(
            request_id=message_id,
            method=parsed.method,
            params=parsed.params,
            response=response,
            started=started,
        )
        return [response, *self._drain_outbox()]

    def parse_message(self, payload: object) -> Message | dict[str, object]:
        """Validate message payload and return a normalized Message."""
        if not isinstance(payload, dict):
            return self.error_response(
                request_id=self.next_request_id(),
                code="INVALID_REQUEST",
                message="Message must be an object.",
            )

        request_id = self.extract_request_id(payload) if "id" in payload else None
        method = payload.get("method")
        params = payload.get("params", {})

        if not isinstance(method, str) or not method:
            return self.error_response(
                request_id=request_id or self.next_request_id(),
                code="INVALID_REQUEST",
                message="Message method must be a non-empty string.",
            )
        if not isinstance(params, dict):
            return self.error_response(
                request_id=request_id or self.next_request_id(),
                code="INVALID_PARAMS",
                message="Message params must be an object.",
            )

        return Message(request_id=request_id, method=method, params=params)

    def extract_request_id(self, payload: dict[str, object]) -> str:
        """Extract request ID from payload or synthesize deterministic fallback."""
        request_id = payload.get("id")
        if isinstance(request_id, str) and request_id:
            return request_id
        if isinstance(request_id, int) and not isinstance(request_id, bool):
            return str(request_id)
        return self.next_request_id()

    def next_request_id(self) -> str:
        """Generate deterministic fallback request IDs for invalid/missing IDs."""
        self._fallback_request_counter += 1
        return f"req-{self._fallback_request_counter:06d}"

    @staticmethod
    def success_response(request_id: str, result: dict[str, object]) -> dict[str, object]:
        """Build success envelope."""
        return {"request_id": request_id, "ok": True, "result": result}

    @staticmethod
    def error_response(request_id: str, code: str, message: str) -> dict[str, object]:
        """Build explicit error envelope."""
        return {
            "request_id": request_id,
            "ok": False,
            "result": {},
            "error": {"code": code, "message": message},
        }

    @staticmethod
    def diagnostics_message(publish: PublishDiagnostics) -> dict[str, object]:
        """Build the outbound diagnostics notification for one document."""
        return {"method": PUBLISH_DIAGNOSTICS_METHOD, "params": publish.to_params()}

    def log_message(
        self,
        request_id: str | None,
        method: str,
        params: dict[str, object],
        response: dict[str, object] | None,
        started: float,
    ) -> None:
        """Log one sanitized message event."""
        error_code: str | None = None
        ok = True
        if response is not None:
            ok = bool(response.get("ok", False))
            error_payload = response.get("error")
            if isinstance(error_payload, dict):
                code_value = error_payload.get("code")
                if isinstance(code_value, str):
                    error_code = code_value
        self._logger.log(
            "notification" if request_id is None else "request",
            f"Handled {method}",
            level="info" if ok else "warning",
            request_id=request_id,
            method=method,
            ok=ok,
            error_code=error_code,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 3),
            params=sanitize_params(params),
        )

    def _handle_request(self, request_id: str, message: Message) -> dict[str, object]:
        try:
            result = self._registry.dispatch(message.method, message.params)
        except RequestDispatchError as error:
            return self.error_response(
                request_id=request_id,
                code=error.code,
                message=error.message,
            )
        except Exception as error:
            self._logger.log(
                "request.failed",
                f"Unhandled error in {message.method}: {error!r}",
                level="error",
                request_id=request_id,
                method=message.method,
            )
            return self.error_response(
                request_id=request_id,
                code="INTERNAL_ERROR",
                message="Unhandled server error while executing request.",
            )
        return self.success_response(request_id=request_id, result=result)

    def _handle_notification(self, message: Message, started: float) -> None:
        if message.method == "exit":
            self._exit_requested = True
            self.log_message(None, message.method, message.params, None, started)
            return
        error_code: str | None = None
        try:
            handled = self._registry.notify(message.method, message.params)
        except RequestDispatchError as error:
            error_code = error.code
            self._logger.log(
                "notification.rejected",
                f"Rejected {message.method}: {error.message}",
                level="warning",
                method=message.method,
                error_code=error.code,
            )
        except Exception as error:
            error_code = "INTERNAL_ERROR"
            self._logger.log(
                "notification.failed",
                f"Unhandled error in {message.method}: {error!r}",
                level="error",
                method=message.method,
            )
        else:
            if not handled:
                self._logger.log(
                    "notification.ignored",
                    f"No handler for notification {message.method}",
                    level="debug",
                    method=message.method,
                )
        response = None
        if error_code is not None:
            response = {"ok": False, "error": {"code": error_code}}
        self.log_message(None, message.method, message.params, response, started)

    def _build_ship_log_context(self) -> ShipLogContext:
        return ShipLogContext.from_project(
            self._project, self._config.validation.extra_curiosities
        )

    def _on_change(self, uris: list[str]) -> None:
        self._orchestrator.on_change(uris, self._project)

    def _request_shutdown(self) -> None:
        self._shutdown_requested = True
        self._logger.log("server.shutdown", "Shutdown requested")

    def _queue_diagnostics(self, publish: PublishDiagnostics) -> None:
        self._outbox.append(self.diagnostics_message(publish))

    def _drain_outbox(self) -> list[dict[str, object]]:
        drained = self._outbox
        self._outbox = []
        return drained

    @staticmethod
    def _write(out_stream: TextIO, messages: list[dict[str, object]]) -> None:
        for message in messages:
            out_stream.write(f"{json.dumps(message, sort_keys=True)}\n")
        out_stream.flush()


def create_server(
    project_root: str,
    data_dir: str | None = None,
    cli_overrides: CliOverrides | None = None,
) -> StdioServer:
    """Create a configured server instance; call start() or serve() to run it."""
    overrides = cli_overrides or CliOverrides()
    if data_dir is not None:
        overrides = CliOverrides(
            data_dir=Path(data_dir).resolve(),
            max_file_bytes=overrides.max_file_bytes,
            file_paths_enabled=overrides.file_paths_enabled,
        )
    config = load_effective_config(project_root=Path(project_root).resolve(), overrides=overrides)
    return StdioServer(config=config)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the language server process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    file_paths_enabled: bool | None = None
    if args.file_paths_enabled == "true":
        file_paths_enabled = True
    if args.file_paths_enabled == "false":
        file_paths_enabled = False
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        max_file_bytes=args.max_file_bytes,
        file_paths_enabled=file_paths_enabled,
    )
    try:
        server = create_server(project_root=args.project_root, cli_overrides=overrides)
    except ValueError as error:
        parser.error(str(error))
    server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
