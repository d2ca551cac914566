"""Unit tests for Command values and the SessionContext they snapshot."""

from __future__ import annotations

from collections.abc import Callable

import httpx

from tinyhatchet.core.config import Config
from tinyhatchet.core.events import Failure, Success
from tinyhatchet.core.session import SessionContext
from tinyhatchet.ui import commands
from tinyhatchet.ui.commands import Command


class TestCommandRun:
    def test_returns_outcome(self) -> None:
        assert Command("ok", lambda: Success()).run() == Success()

    def test_passes_kwargs(self) -> None:
        cmd = Command("echo", lambda detail: Failure(detail), {"detail": "hi"})
        assert cmd.run() == Failure("hi")

    def test_exception_becomes_failure(self) -> None:
        def boom() -> Success:
            raise RuntimeError("kaput")

        outcome = Command("boom", boom).run()
        assert outcome == Failure("boom failed: kaput")

    def test_non_event_becomes_failure(self) -> None:
        outcome = Command("odd", lambda: 42).run()
        assert isinstance(outcome, Failure)

    def test_repr_hides_arguments(self) -> None:
        cmd = Command("login", lambda **kw: Success(), {"password": "hunter2"})
        assert "hunter2" not in repr(cmd)


class TestCommandConstructors:
    def test_url_snapshot(self, make_session: Callable[..., SessionContext]) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"tokens": []})

        ctx = make_session(handler, server_url="https://one.example")
        cmd = commands.list_tokens(ctx)
        ctx.remember(server_url="https://two.example")
        cmd.run()
        commands.list_tokens(ctx).run()
        assert seen == ["https://one.example/auth/api_token", "https://two.example/auth/api_token"]

    def test_login_override_url(self, session: SessionContext) -> None:
        cmd = commands.login(session, "a@b.c", "pw", server_url="http://localhost:1")
        assert cmd.target.__self__.base_url == "http://localhost:1"
        assert commands.login(session, "a@b.c", "pw").target.__self__.base_url == session.server_url

    def test_offline_session_fails(self, session: SessionContext) -> None:
        outcome = commands.change_email(session, "x@y.z").run()
        assert isinstance(outcome, Failure)


class TestSessionContext:
    def test_from_config_and_store(self) -> None:
        transport = httpx.Client()
        ctx = SessionContext.from_config(
            Config(server_url="https://a.example", email_address="a@b.c"), transport=transport
        )
        try:
            assert ctx.server_url == "https://a.example"
            assert ctx.email == "a@b.c"
            ctx.remember(email="new@b.c")
            cfg = ctx.store(Config(debug_path="/tmp/x.log"))
            assert cfg.server_url == "https://a.example"
            assert cfg.email_address == "new@b.c"
            assert cfg.debug_path == "/tmp/x.log"
        finally:
            ctx.close()

    def test_remember_ignores_blanks(self, session: SessionContext) -> None:
        before = session.server_url
        session.remember(server_url="", email="")
        assert session.server_url == before
