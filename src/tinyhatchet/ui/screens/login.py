"""
LoginForm and ConfirmForm: authentication flow.

LoginForm layout::

    Server   > https://tinyhatchet.com      (only while no server URL is known)
    Email    > tinyhatchet@example.com
    Password > ****

      [ Login ]

      [ Register ]

Flow:
  submit ──► Success              ──► HomeMenu
         ├─► VerificationRequired ──► ConfirmForm
         ├─► ValidationErrors     ──► stay, errors under each field
         └─► Failure              ──► stay, error line

Both submit buttons check that every field is filled in before any request
is made; an empty field yields the fixed "please enter credentials" error
with no command.
"""

from __future__ import annotations

from tinyhatchet.core.config import DEFAULT_SERVER_URL
from tinyhatchet.core.events import (
    Event,
    Failure,
    KeyPress,
    Success,
    ValidationErrors,
    VerificationRequired,
)
from tinyhatchet.core.session import SessionContext
from tinyhatchet.ui import commands
from tinyhatchet.ui.screens.base import FormScreen, Transition
from tinyhatchet.ui.state import TextField

NO_CREDENTIALS = "please enter credentials"
NO_CONFIRMATION_CODE = "please enter the confirmation code"

LOGIN_BUTTON = 0
REGISTER_BUTTON = 1


class LoginForm(FormScreen):
    buttons = ("[ Login ]", "[ Register ]")

    def __init__(self, session: SessionContext) -> None:
        self.url_input: TextField | None = None
        if not session.server_url:
            self.url_input = TextField(label="Server  ", placeholder=DEFAULT_SERVER_URL)
        self.email_input = TextField(
            label="Email   ", placeholder="tinyhatchet@example.com", value=session.email
        )
        self.password_input = TextField(label="Password", placeholder="Password", masked=True)

        fields = [f for f in (self.url_input, self.email_input, self.password_input) if f]
        focus = next((i for i, f in enumerate(fields) if not f.value), len(fields) - 1)
        super().__init__(session, fields, focus)

    @property
    def named_fields(self) -> dict[str, TextField]:
        names = {"email": self.email_input, "password": self.password_input}
        if self.url_input is not None:
            names["url"] = self.url_input
        return names

    @property
    def server_url(self) -> str:
        if self.url_input is None:
            return self.session.server_url
        return self.url_input.value.strip().rstrip("/") or DEFAULT_SERVER_URL

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    def activate(self, action: int) -> Transition:
        self.clear_errors()
        email = self.email_input.value.strip()
        password = self.password_input.value
        if not email or not password or not self.server_url:
            return self.fail(NO_CREDENTIALS)

        build = commands.register if action == REGISTER_BUTTON else commands.login
        return self.submit(build(self.session, email, password, server_url=self.server_url))

    # ------------------------------------------------------------------
    # Outcomes
    # ------------------------------------------------------------------

    def on_outcome(self, event: Event) -> Transition:
        if isinstance(event, Success):
            self._remember()
            from tinyhatchet.ui.screens.home import HomeMenu

            return self.go(HomeMenu(self.session))
        if isinstance(event, VerificationRequired):
            self._remember()
            return self.go(ConfirmForm(self.session))
        if isinstance(event, ValidationErrors):
            return self.apply_validation(event, self.named_fields)
        if isinstance(event, Failure):
            return self.fail(event.detail)
        return self.stay()

    def _remember(self) -> None:
        self.busy = False
        self.session.remember(server_url=self.server_url, email=self.email_input.value.strip())


class ConfirmForm(FormScreen):
    """Asks for the confirmation code mailed after registration."""

    buttons = ()
    intro = (
        "You must confirm your account before you can continue.\n"
        "Check your email for a confirmation code and enter it below.\n\n"
    )

    def __init__(self, session: SessionContext) -> None:
        self.code_input = TextField(label="Confirm Token", placeholder="ABCD123")
        super().__init__(session, [self.code_input])

    def on_key(self, event: KeyPress) -> Transition:
        if event.key == "enter":
            if self.busy:
                return self.stay()
            return self.activate(0)
        return super().on_key(event)

    def activate(self, action: int) -> Transition:
        self.clear_errors()
        code = self.code_input.value.strip()
        if not code:
            return self.fail(NO_CONFIRMATION_CODE)
        return self.submit(commands.confirm(self.session, code))

    def on_outcome(self, event: Event) -> Transition:
        if isinstance(event, Success):
            from tinyhatchet.ui.screens.home import HomeMenu

            return self.go(HomeMenu(self.session))
        if isinstance(event, ValidationErrors):
            return self.apply_validation(event, {"cnf": self.code_input})
        return super().on_outcome(event)

    def render(self) -> str:
        return f"{self.intro}{self.render_fields()}\n{self.render_status()}"
