from __future__ import annotations

import io
import json
from pathlib import Path

from nh_lsp.server import create_server


def _lines(out_stream: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in out_stream.getvalue().splitlines() if line]


def test_stdio_server_routes_requests_and_notifications(example_mod: Path) -> None:
    server = create_server(project_root=str(example_mod))
    ship_log_uri = (example_mod / "planets/ShipLogs/example.xml").resolve().as_uri()
    in_stream = io.StringIO(
        "\n".join(
            [
                json.dumps({"id": "req-1", "method": "initialize", "params": {}}),
                "",
                json.dumps(
                    {
                        "method": "textDocument/didChange",
                        "params": {
                            "textDocument": {"uri": ship_log_uri, "version": 2},
                            "contentChanges": [
                                {"text": "<AstroObjectEntry/>"},
                                {"text": "<AstroObjectEntry><ID>TH_VILLAGE</ID>"},
                                {
                                    "text": (
                                        "<AstroObjectEntry><ID>P</ID><Entry>"
                                        "<ID>TH_VILLAGE</ID></Entry></AstroObjectEntry>"
                                    )
                                },
                            ],
                        },
                    }
                ),
                json.dumps({"id": "req-2", "method": "nh/status", "params": {}}),
            ]
        )
        + "\n"
    )
    out_stream = io.StringIO()

    server.serve(in_stream=in_stream, out_stream=out_stream)
    messages = _lines(out_stream)

    assert messages[0]["request_id"] == "req-1"
    assert messages[0]["ok"] is True
    published = [m for m in messages if m.get("method") == "textDocument/publishDiagnostics"]
    assert len(published) == 4
    dirty = [m["params"] for m in published if m["params"]["diagnostics"]]
    assert len(dirty) == 1
    assert dirty[0]["uri"] == ship_log_uri
    assert dirty[0]["version"] == 2
    assert dirty[0]["diagnostics"][0]["code"] == "nh.shiplog.reserved_id"
    assert dirty[0]["diagnostics"][0]["source"] == "New Horizons"
    assert dirty[0]["diagnostics"][0]["severity"] == 1

    status = messages[-1]
    assert status["request_id"] == "req-2"
    assert status["result"]["files_with_diagnostics"] == [{"uri": ship_log_uri, "version": 2}]


def test_startup_publishes_existing_problems_once(example_mod: Path) -> None:
    (example_mod / "planets/ShipLogs/example.xml").write_text(
        "<AstroObjectEntry><ID>A</ID><Entry><ID>TH_VILLAGE</ID></Entry></AstroObjectEntry>",
        encoding="utf-8",
    )
    server = create_server(project_root=str(example_mod))

    first = server.start()
    second = server.start()

    assert [m["params"]["version"] for m in first] == [0]
    assert second == []


def test_exit_stops_reading_further_messages(tmp_path: Path) -> None:
    server = create_server(project_root=str(tmp_path))
    in_stream = io.StringIO(
        "\n".join(
            [
                json.dumps({"id": 1, "method": "shutdown", "params": {}}),
                json.dumps({"method": "exit"}),
                json.dumps({"id": 2, "method": "getSystems", "params": {}}),
            ]
        )
        + "\n"
    )
    out_stream = io.StringIO()

    server.serve(in_stream=in_stream, out_stream=out_stream)

    assert [m["request_id"] for m in _lines(out_stream)] == ["1"]
    assert server.shutdown_requested is True
    assert server.exit_requested is True
