"""
Session context: the small amount of state shared by every screen.

``SessionContext`` is created once at startup and outlives all screens.
Only the login flow writes to it; Commands read a snapshot through
:meth:`SessionContext.api`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx
import structlog

from tinyhatchet import __version__
from tinyhatchet.api.client import APIClient
from tinyhatchet.core.config import Config
from tinyhatchet.core.exceptions import TransportError

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 30.0


def build_transport(timeout: float = DEFAULT_TIMEOUT_SECONDS) -> httpx.Client:
    """HTTP client with its own cookie store, shared by all commands."""
    try:
        return httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": f"tinyhatchet/{__version__}"},
        )
    except (httpx.HTTPError, ValueError, OSError) as exc:
        raise TransportError(f"Cannot construct HTTP transport: {exc}") from exc


@dataclass
class SessionContext:
    server_url: str = ""
    email: str = ""
    transport: httpx.Client = field(default_factory=build_transport, repr=False)

    @classmethod
    def from_config(cls, config: Config, transport: httpx.Client | None = None) -> SessionContext:
        return cls(
            server_url=config.server_url,
            email=config.email_address,
            transport=transport if transport is not None else build_transport(),
        )

    def api(self, base_url: str | None = None) -> APIClient:
        """Snapshot of the current server URL bound to the shared transport."""
        return APIClient(base_url=base_url or self.server_url, transport=self.transport)

    def remember(self, *, server_url: str = "", email: str = "") -> None:
        if server_url:
            self.server_url = server_url
        if email:
            self.email = email
        logger.info("session_updated", server_url=self.server_url, email=self.email)

    def store(self, config: Config) -> Config:
        """Copy the persisted fields back onto *config* for writing at shutdown."""
        config.server_url = self.server_url
        config.email_address = self.email
        return config

    def close(self) -> None:
        self.transport.close()
