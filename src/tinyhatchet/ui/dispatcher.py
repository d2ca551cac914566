"""
Dispatcher: owns the active screen and drives it with events.

    event ──► screen.transition(event) ──► Transition(next, commands, quit)
                                              │
              new screen? ──► next.enter(viewport) may add commands
                                              │
              schedule(command) for each ─────┘
              command.run() result ──► dispatch(result)   (via the scheduler)

Events are applied one at a time in arrival order.  The dispatcher never
cancels or filters outcomes: a result that arrives after the user moved on
goes to whatever screen is active at that moment.

The scheduler is injected.  The Textual app runs each command on a thread
worker and hands the result back through ``call_from_thread``; tests pass a
list's ``append`` and run commands by hand.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from tinyhatchet.core.events import Event, KeyPress, WindowResize
from tinyhatchet.ui.commands import Command
from tinyhatchet.ui.screens.base import Screen
from tinyhatchet.ui.state import Viewport

logger = structlog.get_logger()

Scheduler = Callable[[Command], object]


class Dispatcher:
    def __init__(
        self,
        screen: Screen,
        schedule: Scheduler,
        viewport: Viewport | None = None,
    ) -> None:
        self.screen = screen
        self.viewport = viewport or Viewport()
        self.quit_requested = False
        self._schedule = schedule

    def start(self) -> None:
        """Enter the initial screen and schedule whatever it asks for."""
        logger.info("dispatcher_started", screen=self.screen.name)
        self._run(self.screen.enter(self.viewport))

    def dispatch(self, event: Event) -> bool:
        """Apply *event* to the active screen.  Returns False once quit was requested."""
        if isinstance(event, WindowResize):
            self.viewport = Viewport(event.width, event.height)
        elif not isinstance(event, KeyPress):
            logger.debug("outcome_received", outcome=type(event).__name__, screen=self.screen.name)

        transition = self.screen.transition(event)
        pending = list(transition.commands)

        if transition.screen is not self.screen:
            logger.info(
                "screen_changed",
                previous=self.screen.name,
                current=transition.screen.name,
            )
            self.screen = transition.screen
            pending.extend(self.screen.enter(self.viewport))

        self._run(pending)

        if transition.quit:
            logger.info("quit_requested", screen=self.screen.name)
            self.quit_requested = True
        return not self.quit_requested

    def render(self) -> str:
        return self.screen.render()

    def _run(self, commands: list[Command]) -> None:
        for command in commands:
            logger.debug("command_scheduled", command=command.name, screen=self.screen.name)
            self._schedule(command)
