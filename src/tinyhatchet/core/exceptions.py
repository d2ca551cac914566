"""Exception hierarchy.

Only the startup path lets these escape: the CLI turns them into a non-zero
exit.  Everything raised while a Command runs is converted into a
``Failure`` event before it reaches the dispatcher.
"""

from __future__ import annotations


class TinyHatchetError(Exception):
    """Base class for all tinyhatchet errors."""


class ConfigError(TinyHatchetError):
    """The config file exists but cannot be read, parsed or written."""


class TransportError(TinyHatchetError):
    """The HTTP transport could not be constructed."""


class APIError(TinyHatchetError):
    """A server response could not be decoded into the expected shape."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
