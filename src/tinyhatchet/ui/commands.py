"""
Commands: deferred network calls emitted by screens.

A Command is a plain value: a name, the bound API call to make, and its
keyword arguments.  Screens build them with the constructors below, which
take the session explicitly and snapshot its server URL and transport via
``session.api()``.  The dispatcher hands them to a scheduler, which runs
each one exactly once off the UI thread.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from tinyhatchet.core.events import Event, Failure
from tinyhatchet.core.session import SessionContext

logger = structlog.get_logger()


@dataclass(frozen=True)
class Command:
    name: str
    target: Callable[..., Event] = field(repr=False)
    kwargs: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def run(self) -> Event:
        """Run the call and return its single outcome; never raises."""
        try:
            outcome = self.target(**self.kwargs)
        except Exception as exc:  # noqa: BLE001
            logger.exception("command_crashed", command=self.name)
            return Failure(f"{self.name} failed: {exc}")
        if not isinstance(outcome, Event):
            logger.error("command_bad_outcome", command=self.name, outcome=repr(outcome))
            return Failure(f"{self.name} failed: no result")
        return outcome


def login(session: SessionContext, email: str, password: str, server_url: str = "") -> Command:
    api = session.api(server_url or None)
    return Command("login", api.login, {"email": email, "password": password})


def register(session: SessionContext, email: str, password: str, server_url: str = "") -> Command:
    api = session.api(server_url or None)
    return Command("register", api.register, {"email": email, "password": password})


def confirm(session: SessionContext, code: str) -> Command:
    return Command("confirm", session.api().confirm, {"code": code})


def change_email(session: SessionContext, email: str) -> Command:
    return Command("change_email", session.api().change_email, {"email": email})


def create_token(session: SessionContext) -> Command:
    return Command("create_token", session.api().create_token)


def list_tokens(session: SessionContext) -> Command:
    return Command("list_tokens", session.api().list_tokens)


def delete_token(session: SessionContext, token_id: str) -> Command:
    return Command("delete_token", session.api().delete_token, {"token_id": token_id})


def get_entries(session: SessionContext, start: str = "", end: str = "", tags: str = "") -> Command:
    return Command(
        "get_entries",
        session.api().get_entries,
        {"start": start, "end": end, "tags": tags},
    )
