"""Wire models for the tinyhatchet HTTP API: pure dataclasses, no I/O."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tinyhatchet.core.exceptions import APIError

_RFC3339 = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,6})?(Z|[+-]\d{2}:\d{2})",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class APIToken:
    """An API token.  ``secret`` is only populated in the creation response."""

    id: str
    secret: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> APIToken:
        if not isinstance(data, dict) or not data.get("id"):
            raise APIError(f"malformed api token: {data!r}")
        return cls(id=str(data["id"]), secret=str(data.get("secret") or ""))


@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    text: str
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> LogEntry:
        if not isinstance(data, dict):
            raise APIError(f"malformed log entry: {data!r}")
        raw_ts = data.get("timestamp")
        try:
            timestamp = datetime.fromisoformat(str(raw_ts))
        except ValueError as exc:
            raise APIError(f"bad log entry timestamp {raw_ts!r}") from exc
        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise APIError(f"bad log entry tags {tags!r}")
        return cls(timestamp=timestamp, text=str(data.get("text", "")), tags=[str(t) for t in tags])

    @property
    def title(self) -> str:
        return f"{format_rfc3339(self.timestamp)}: {self.text}"

    @property
    def description(self) -> str:
        return ",".join(self.tags)


def format_rfc3339(ts: datetime) -> str:
    """Second-precision RFC 3339, using ``Z`` for UTC."""
    text = ts.replace(microsecond=0).isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp; raise ValueError if it is not one."""
    if not _RFC3339.fullmatch(value):
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")
    return datetime.fromisoformat(value.upper())
