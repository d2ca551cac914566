"""Screen variants of the tinyhatchet state machine (no Textual imports)."""

from tinyhatchet.ui.screens.account import AccountMenu, ChangeEmailForm
from tinyhatchet.ui.screens.base import FormScreen, MenuScreen, Screen, Transition
from tinyhatchet.ui.screens.home import HomeMenu
from tinyhatchet.ui.screens.login import ConfirmForm, LoginForm
from tinyhatchet.ui.screens.search import EntryList, SearchForm, SearchResults
from tinyhatchet.ui.screens.tokens import CREATE_TOKEN_ITEM, APITokenMenu

__all__ = [
    "APITokenMenu",
    "AccountMenu",
    "CREATE_TOKEN_ITEM",
    "ChangeEmailForm",
    "ConfirmForm",
    "EntryList",
    "FormScreen",
    "HomeMenu",
    "LoginForm",
    "MenuScreen",
    "Screen",
    "SearchForm",
    "SearchResults",
    "Transition",
]
