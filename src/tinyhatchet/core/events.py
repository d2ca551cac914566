"""
Events delivered to the dispatcher: immutable value objects.

Two families share one type hierarchy:

  - raw input:  ``KeyPress``, ``WindowResize``
  - outcomes:   everything a Command can resolve to

Events carry no identity beyond their content; two equal events are
interchangeable.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tinyhatchet.api.models import APIToken, LogEntry


class Event:
    """Base class of everything the dispatcher accepts."""

    __slots__ = ()


@dataclass(frozen=True)
class KeyPress(Event):
    """A key press.  ``key`` uses Textual key names (``enter``, ``shift+tab``)."""

    key: str
    character: str | None = None

    @classmethod
    def of(cls, key: str) -> KeyPress:
        """Build a key press, filling ``character`` for single printable keys."""
        if key == "space":
            return cls(key, " ")
        if len(key) == 1 and key.isprintable():
            return cls(key, key)
        return cls(key)

    @property
    def is_printable(self) -> bool:
        return self.character is not None and len(self.character) == 1 and self.character.isprintable()


@dataclass(frozen=True)
class WindowResize(Event):
    width: int
    height: int


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Success(Event):
    pass


@dataclass(frozen=True)
class VerificationRequired(Event):
    pass


@dataclass(frozen=True)
class ValidationErrors(Event):
    """Server-reported problems keyed by field name (``error`` = form level)."""

    errors: dict[str, list[str]] = field(default_factory=dict)

    def for_field(self, name: str) -> list[str]:
        return list(self.errors.get(name) or [])


@dataclass(frozen=True)
class Failure(Event):
    detail: str


@dataclass(frozen=True)
class TokenCreated(Event):
    token: APIToken


@dataclass(frozen=True)
class TokenList(Event):
    tokens: tuple[APIToken, ...] = ()


@dataclass(frozen=True)
class TokenDeleted(Event):
    token_id: str


@dataclass(frozen=True)
class LogEntries(Event):
    entries: tuple[LogEntry, ...] = ()


__all__ = [
    "Event",
    "Failure",
    "KeyPress",
    "LogEntries",
    "Success",
    "TokenCreated",
    "TokenDeleted",
    "TokenList",
    "ValidationErrors",
    "VerificationRequired",
    "WindowResize",
]
