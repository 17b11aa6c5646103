from __future__ import annotations

import json
from pathlib import Path

from nh_lsp.logging import sanitize_params
from nh_lsp.server import create_server


def test_document_text_is_reduced_to_length() -> None:
    sanitized = sanitize_params(
        {
            "textDocument": {
                "uri": "file:///mod/planets/a.json",
                "version": 3,
                "text": '{"secret": "value"}',
            }
        }
    )

    assert sanitized == {
        "textDocument": {
            "text_length": len('{"secret": "value"}'),
            "uri": "file:///mod/planets/a.json",
            "version": 3,
        }
    }


def test_lists_and_objects_are_summarized() -> None:
    sanitized = sanitize_params(
        {"contentChanges": [{"text": "abc"}], "options": {"b": 1, "a": 2}, "system": "Hearth"}
    )

    assert sanitized == {
        "contentChanges_length": 1,
        "contentChanges_type": "list",
        "options_keys": ["a", "b"],
        "options_type": "dict",
        "system": "Hearth",
    }


def test_notification_log_never_contains_buffer_contents(tmp_path: Path) -> None:
    server = create_server(project_root=str(tmp_path))
    server.start()
    server.handle_payload(
        {
            "method": "textDocument/didOpen",
            "params": {
                "textDocument": {
                    "uri": (tmp_path / "notes.txt").as_uri(),
                    "version": 1,
                    "text": "TOKEN=very-secret-buffer",
                }
            },
        }
    )

    log_text = (tmp_path / ".nh_lsp" / "events.jsonl").read_text(encoding="utf-8")
    events = [json.loads(line) for line in log_text.splitlines()]

    assert "very-secret-buffer" not in log_text
    assert events[-1]["kind"] == "notification"
    assert events[-1]["metadata"]["method"] == "textDocument/didOpen"
