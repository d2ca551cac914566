"""Shared fixtures: sessions backed by httpx.MockTransport."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import httpx
import pytest

from tinyhatchet.core.session import SessionContext

SERVER_URL = "https://logs.example.com"


def _offline(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, json={"error": "offline"})


@pytest.fixture()
def session() -> Iterator[SessionContext]:
    transport = httpx.Client(transport=httpx.MockTransport(_offline))
    ctx = SessionContext(server_url=SERVER_URL, email="", transport=transport)
    yield ctx
    ctx.close()


@pytest.fixture()
def make_session() -> Iterator[Callable[..., SessionContext]]:
    """Build sessions backed by a custom MockTransport handler."""
    created: list[SessionContext] = []

    def _make(handler=_offline, server_url: str = SERVER_URL, email: str = "") -> SessionContext:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        ctx = SessionContext(server_url=server_url, email=email, transport=client)
        created.append(ctx)
        return ctx

    yield _make
    for ctx in created:
        ctx.close()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TINYHATCHET_CONFIG",
        "TINYHATCHET_SERVER_URL",
        "TINYHATCHET_DEBUG_PATH",
        "TINYHATCHET_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
