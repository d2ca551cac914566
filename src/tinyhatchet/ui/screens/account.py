"""
AccountMenu and ChangeEmailForm.

Keybindings (menu):
  enter/space    open "Change Email" or "API Tokens"
  esc            back to HomeMenu
  q              quit
"""

from __future__ import annotations

from tinyhatchet.core.events import Event, KeyPress, Success
from tinyhatchet.core.session import SessionContext
from tinyhatchet.ui import commands
from tinyhatchet.ui.screens.base import FormScreen, MenuScreen, Transition
from tinyhatchet.ui.state import BACK_KEY, TextField

CHANGE_EMAIL_CHOICE = "Change Email"
API_TOKENS_CHOICE = "API Tokens"

NO_EMAIL = "please enter an email address"


class AccountMenu(MenuScreen):
    title = "Account Management"

    def __init__(self, session: SessionContext) -> None:
        super().__init__(session, [CHANGE_EMAIL_CHOICE, API_TOKENS_CHOICE])

    def on_key(self, event: KeyPress) -> Transition:
        if event.key == BACK_KEY:
            from tinyhatchet.ui.screens.home import HomeMenu

            return self.go(HomeMenu(self.session))
        return super().on_key(event)

    def select(self, index: int) -> Transition:
        if index == 0:
            return self.go(ChangeEmailForm(self.session))
        from tinyhatchet.ui.screens.tokens import APITokenMenu

        return self.go(APITokenMenu(self.session))


class ChangeEmailForm(FormScreen):
    title = "Account Management"

    def __init__(self, session: SessionContext) -> None:
        self.email_input = TextField(label="New Email", placeholder="mouseion@example.com")
        super().__init__(session, [self.email_input])

    def on_key(self, event: KeyPress) -> Transition:
        if event.key == BACK_KEY:
            return self.go(AccountMenu(self.session))
        return super().on_key(event)

    def activate(self, action: int) -> Transition:
        self.clear_errors()
        email = self.email_input.value.strip()
        if not email:
            return self.fail(NO_EMAIL)
        return self.submit(commands.change_email(self.session, email))

    def on_outcome(self, event: Event) -> Transition:
        if isinstance(event, Success):
            return self.go(AccountMenu(self.session))
        return super().on_outcome(event)
