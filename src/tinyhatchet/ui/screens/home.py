"""
HomeMenu: the hub shown after login.

Layout::

    What do you want to do?

    > Search log entries
      Account Management

    Press q to quit.

Keybindings:
  up/k, down/j     move
  enter/space      open the selected screen
  q / esc          quit
"""

from __future__ import annotations

from tinyhatchet.core.events import KeyPress
from tinyhatchet.core.session import SessionContext
from tinyhatchet.ui.screens.base import MenuScreen, Transition
from tinyhatchet.ui.state import BACK_KEY

SEARCH_CHOICE = "Search log entries"
ACCOUNT_CHOICE = "Account Management"


class HomeMenu(MenuScreen):
    title = "What do you want to do?"

    def __init__(self, session: SessionContext) -> None:
        super().__init__(session, [SEARCH_CHOICE, ACCOUNT_CHOICE])

    def on_key(self, event: KeyPress) -> Transition:
        if event.key == BACK_KEY:
            return self.exit()
        return super().on_key(event)

    def select(self, index: int) -> Transition:
        if index == 0:
            from tinyhatchet.ui.screens.search import SearchForm

            return self.go(SearchForm(self.session))
        from tinyhatchet.ui.screens.account import AccountMenu

        return self.go(AccountMenu(self.session))
