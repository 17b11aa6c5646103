from __future__ import annotations

import pytest

from nh_lsp.handlers import HandlerRegistry, RequestDispatchError


def test_registry_keeps_deterministic_registration_order() -> None:
    registry = HandlerRegistry()
    registry.register("getSystems", lambda _: {"method": "systems"})
    registry.register("initialize", lambda _: {"method": "initialize"})

    assert registry.names() == ("getSystems", "initialize")


def test_registry_dispatches_registered_request() -> None:
    registry = HandlerRegistry()
    registry.register("echo", lambda params: {"params": params})

    result = registry.dispatch("echo", {"k": "v"})

    assert result == {"params": {"k": "v"}}


def test_unknown_request_raises_dispatch_error() -> None:
    registry = HandlerRegistry()

    with pytest.raises(RequestDispatchError) as caught:
        registry.dispatch("missing", {})

    assert caught.value.code == "UNKNOWN_METHOD"
    assert caught.value.message == "Unknown method: missing"


def test_notifications_route_separately_from_requests() -> None:
    registry = HandlerRegistry()
    seen: list[dict[str, object]] = []
    registry.register_notification("textDocument/didOpen", seen.append)

    assert registry.notify("textDocument/didOpen", {"a": 1}) is True
    assert registry.notify("textDocument/didSave", {}) is False
    assert seen == [{"a": 1}]
    assert registry.names() == ()
    assert registry.notification_names() == ("textDocument/didOpen",)
