"""
Blocking client for the tinyhatchet HTTP API.

Every public method performs one request and resolves to exactly one event
(see :mod:`tinyhatchet.core.events`).  Transport failures and undecodable
bodies become ``Failure``; nothing raises out of a public method.

Response shapes::

    POST   /auth/login           {status} | {message|error: "verification required"} | {errors}
    POST   /auth/register        same as login
    GET    /auth/confirm?cnf=..  {status} | {errors}
    POST   /account/change_email HTTP 200 only
    POST   /auth/api_token       {id, secret}
    GET    /auth/api_token       {tokens: [{id, secret}]}
    DELETE /auth/api_token?id=.. HTTP 200 only
    GET    /client/get_entries   [{timestamp, text, tags}]
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar
from urllib.parse import urlencode

import httpx
import structlog

from tinyhatchet.api.models import APIToken, LogEntry
from tinyhatchet.core.events import (
    Event,
    Failure,
    LogEntries,
    Success,
    TokenCreated,
    TokenDeleted,
    TokenList,
    ValidationErrors,
    VerificationRequired,
)
from tinyhatchet.core.exceptions import APIError

logger = structlog.get_logger()

CONTENT_TYPE_JSON = "application/json"
STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"
MESSAGE_VERIFICATION_REQUIRED = "verification required"

_F = TypeVar("_F", bound=Callable[..., Event])


@dataclass
class APIResponse:
    """Generic envelope used by the auth endpoints."""

    status: str = ""
    errors: dict[str, list[str]] | None = None
    error: str = ""
    message: str = ""
    status_code: int = 0

    @classmethod
    def parse(cls, response: httpx.Response) -> APIResponse:
        data = _decode_json(response)
        if not isinstance(data, dict):
            raise APIError("response body is not a JSON object", response.status_code)
        errors = data.get("errors")
        if errors is not None:
            if not isinstance(errors, dict):
                raise APIError("'errors' is not an object", response.status_code)
            errors = {str(k): [str(m) for m in (v or [])] for k, v in errors.items()}
        return cls(
            status=str(data.get("status") or ""),
            errors=errors,
            error=str(data.get("error") or ""),
            message=str(data.get("message") or ""),
            status_code=response.status_code,
        )

    @property
    def verification_required(self) -> bool:
        return MESSAGE_VERIFICATION_REQUIRED in (self.message, self.error)

    def to_event(self, *, allow_verification: bool = True) -> Event:
        """Map the envelope onto exactly one outcome."""
        if allow_verification and self.verification_required:
            return VerificationRequired()
        if self.status == STATUS_SUCCESS:
            return Success()
        if self.errors is not None:
            errors = dict(self.errors)
            if self.error:
                errors["error"] = [self.error]
            return ValidationErrors(errors)
        if self.error:
            return Failure(self.error)
        return Failure(f"unexpected response from server (HTTP {self.status_code})")


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise APIError(
            f"cannot decode response body (HTTP {response.status_code})", response.status_code
        ) from exc


def _outcome(operation: str) -> Callable[[_F], _F]:
    """Convert transport and decode errors raised by *operation* into ``Failure``."""

    def decorator(fn: _F) -> _F:
        @functools.wraps(fn)
        def wrapper(self: APIClient, *args: Any, **kwargs: Any) -> Event:
            try:
                event = fn(self, *args, **kwargs)
            except httpx.HTTPError as exc:
                logger.warning("api_transport_error", operation=operation, error=str(exc))
                return Failure(f"could not reach server: {exc}" if str(exc) else "could not reach server")
            except APIError as exc:
                logger.warning(
                    "api_decode_error",
                    operation=operation,
                    status_code=exc.status_code,
                    error=str(exc),
                )
                return Failure(str(exc))
            logger.debug("api_outcome", operation=operation, outcome=type(event).__name__)
            return event

        return wrapper  # type: ignore[return-value]

    return decorator


@dataclass(frozen=True)
class APIClient:
    """A base URL bound to the shared transport.

    Instances are cheap snapshots: a Command holds one, so a later change to
    the session's server URL does not affect commands already issued.
    """

    base_url: str
    transport: httpx.Client = field(repr=False, compare=False)

    def url(self, path: str, params: dict[str, str] | None = None) -> str:
        url = f"{self.base_url.rstrip('/')}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    @_outcome("login")
    def login(self, email: str, password: str) -> Event:
        response = self.transport.post(
            self.url("/auth/login"), json={"email": email, "password": password}
        )
        return APIResponse.parse(response).to_event()

    @_outcome("register")
    def register(self, email: str, password: str) -> Event:
        response = self.transport.post(
            self.url("/auth/register"),
            json={"email": email, "password": password, "confirm_password": password},
        )
        return APIResponse.parse(response).to_event()

    @_outcome("confirm")
    def confirm(self, code: str) -> Event:
        response = self.transport.get(
            self.url("/auth/confirm", {"cnf": code}),
            headers={"Content-Type": CONTENT_TYPE_JSON},
        )
        return APIResponse.parse(response).to_event(allow_verification=False)

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    @_outcome("change_email")
    def change_email(self, email: str) -> Event:
        response = self.transport.post(self.url("/account/change_email"), json={"email": email})
        if response.status_code == httpx.codes.OK:
            return Success()
        return Failure(f"could not change email (HTTP {response.status_code})")

    # ------------------------------------------------------------------
    # API tokens
    # ------------------------------------------------------------------

    @_outcome("create_token")
    def create_token(self) -> Event:
        response = self.transport.post(
            self.url("/auth/api_token"), headers={"Content-Type": CONTENT_TYPE_JSON}
        )
        data = _decode_json(response)
        if not response.is_success:
            return Failure(_error_text(data, response.status_code))
        return TokenCreated(APIToken.from_dict(data))

    @_outcome("list_tokens")
    def list_tokens(self) -> Event:
        response = self.transport.get(self.url("/auth/api_token"))
        data = _decode_json(response)
        if not response.is_success:
            return Failure(_error_text(data, response.status_code))
        if not isinstance(data, dict):
            raise APIError("token listing is not a JSON object", response.status_code)
        raw = data.get("tokens") or []
        if not isinstance(raw, list):
            raise APIError("'tokens' is not a list", response.status_code)
        return TokenList(tuple(APIToken.from_dict(item) for item in raw))

    @_outcome("delete_token")
    def delete_token(self, token_id: str) -> Event:
        response = self.transport.delete(self.url("/auth/api_token", {"id": token_id}))
        if response.status_code == httpx.codes.OK:
            return TokenDeleted(token_id)
        return Failure(f"could not delete token {token_id} (HTTP {response.status_code})")

    # ------------------------------------------------------------------
    # Log entries
    # ------------------------------------------------------------------

    def entries_url(self, start: str = "", end: str = "", tags: str = "") -> str:
        """URL of the search endpoint; blank parameters are left out."""
        params = {k: v for k, v in (("start", start), ("end", end), ("tags", tags)) if v}
        return self.url("/client/get_entries", params)

    @_outcome("get_entries")
    def get_entries(self, start: str = "", end: str = "", tags: str = "") -> Event:
        response = self.transport.get(self.entries_url(start, end, tags))
        data = _decode_json(response)
        if not response.is_success:
            return Failure(_error_text(data, response.status_code))
        if not isinstance(data, list):
            raise APIError("log entry listing is not a JSON array", response.status_code)
        return LogEntries(tuple(LogEntry.from_dict(item) for item in data))


def _error_text(data: Any, status_code: int) -> str:
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return f"request failed (HTTP {status_code})"
