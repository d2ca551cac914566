"""
tinyhatchet UI: Textual application shell.

A single focusable view forwards every key and resize to the dispatcher as
core events and shows the active screen's rendered text.  Commands run on
Textual thread workers; each worker hands its outcome back to the event
loop with ``call_from_thread``.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path

import structlog
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from tinyhatchet import __version__
from tinyhatchet.core.events import Event, KeyPress, WindowResize
from tinyhatchet.core.session import SessionContext
from tinyhatchet.ui.commands import Command
from tinyhatchet.ui.dispatcher import Dispatcher
from tinyhatchet.ui.screens import LoginForm, Screen

logger = structlog.get_logger()


class ScreenView(Static, can_focus=True):
    """Shows the active screen and captures all keyboard input."""

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.app.deliver(KeyPress(key=event.key, character=event.character))  # type: ignore[attr-defined]

    def on_resize(self, event: events.Resize) -> None:
        self.app.deliver(WindowResize(event.size.width, event.size.height))  # type: ignore[attr-defined]


class TinyHatchetApp(App):  # type: ignore[type-arg]
    """tinyhatchet interactive terminal UI."""

    TITLE = f"tinyhatchet {__version__}"
    CSS_PATH = str(Path(__file__).parent / "css" / "tinyhatchet.tcss")

    BINDINGS = [
        Binding("ctrl+c", "app.quit", "Quit", show=False, priority=True),
    ]

    def __init__(self, session: SessionContext, initial: Screen | None = None) -> None:
        super().__init__()
        self._session = session
        self.dispatcher = Dispatcher(initial or LoginForm(session), schedule=self._schedule)

    def compose(self) -> ComposeResult:
        yield ScreenView(id="screen-body")

    def on_mount(self) -> None:
        self.query_one(ScreenView).focus()
        self.dispatcher.start()
        self._redraw()

    # ------------------------------------------------------------------
    # Event flow
    # ------------------------------------------------------------------

    def deliver(self, event: Event) -> None:
        """Feed one event to the dispatcher and redraw (event-loop thread only)."""
        if not self.dispatcher.dispatch(event):
            self.exit()
            return
        self._redraw()

    def _redraw(self) -> None:
        self.query_one(ScreenView).update(Text(self.dispatcher.render()))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _schedule(self, command: Command) -> None:
        self.run_worker(
            partial(self._run_command, command),
            name=command.name,
            group="commands",
            thread=True,
            exit_on_error=False,
        )

    def _run_command(self, command: Command) -> None:
        outcome = command.run()
        logger.debug("command_finished", command=command.name, outcome=type(outcome).__name__)
        self.call_from_thread(self.deliver, outcome)


def run(session: SessionContext, initial: Screen | None = None) -> None:
    """Entry point called from the CLI."""
    TinyHatchetApp(session, initial).run()
