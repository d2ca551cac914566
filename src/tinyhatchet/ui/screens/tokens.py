"""
APITokenMenu: list, create and delete API tokens.

The list always ends with exactly one ``Create New Token`` item.  Token
secrets are only known right after creation; listed tokens show their ID.

Keybindings:
  up/k, down/j    move
  enter/space     on "Create New Token": create a token
  ctrl+d          delete the token under the cursor
  esc             back to AccountMenu
  q               quit
"""

from __future__ import annotations

from tinyhatchet.api.models import APIToken
from tinyhatchet.core.events import (
    Event,
    Failure,
    KeyPress,
    TokenCreated,
    TokenDeleted,
    TokenList,
)
from tinyhatchet.core.session import SessionContext
from tinyhatchet.ui import commands
from tinyhatchet.ui.commands import Command
from tinyhatchet.ui.screens.base import MenuScreen, Transition
from tinyhatchet.ui.state import BACK_KEY, Viewport

CREATE_TOKEN_ITEM = "Create New Token"
DELETE_KEY = "ctrl+d"


class APITokenMenu(MenuScreen):
    title = "API Tokens"
    footer = "Press ctrl+d to delete a token.\nPress q to quit."

    def __init__(self, session: SessionContext) -> None:
        super().__init__(session, [CREATE_TOKEN_ITEM])
        self.error = ""

    @property
    def tokens(self) -> list[APIToken]:
        return [c for c in self.choices if isinstance(c, APIToken)]

    def enter(self, viewport: Viewport) -> list[Command]:
        super().enter(viewport)
        return [commands.list_tokens(self.session)]

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def on_key(self, event: KeyPress) -> Transition:
        if event.key == BACK_KEY:
            from tinyhatchet.ui.screens.account import AccountMenu

            return self.go(AccountMenu(self.session))
        if event.key == DELETE_KEY:
            choice = self.choices[self.cursor]
            if isinstance(choice, APIToken):
                self.error = ""
                return self.stay(commands.delete_token(self.session, choice.id))
            return self.stay()
        return super().on_key(event)

    def select(self, index: int) -> Transition:
        if index == len(self.choices) - 1:
            self.error = ""
            return self.stay(commands.create_token(self.session))
        return self.stay()

    # ------------------------------------------------------------------
    # Outcomes
    # ------------------------------------------------------------------

    def on_outcome(self, event: Event) -> Transition:
        if isinstance(event, TokenCreated):
            self.choices = [*self.tokens, event.token, CREATE_TOKEN_ITEM]
        elif isinstance(event, TokenList):
            if not event.tokens:
                return self.stay()
            self.choices = [*event.tokens, CREATE_TOKEN_ITEM]
        elif isinstance(event, TokenDeleted):
            self.choices = [
                c for c in self.choices if not (isinstance(c, APIToken) and c.id == event.token_id)
            ]
        elif isinstance(event, Failure):
            self.error = event.detail
            return self.stay()
        else:
            return self.stay()
        self.clamp_cursor()
        return self.stay()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_choice(self, choice: object, selected: bool) -> str:
        marker = ">" if selected else " "
        if isinstance(choice, APIToken):
            line = f"{marker} ID: {choice.id}\n"
            if choice.secret:
                line += f"\tSecret: {choice.secret}\n"
            return line
        return f"{marker} {choice}\n"

    def render(self) -> str:
        text = super().render()
        if self.error:
            text += f"\n{self.error}\n"
        return text
