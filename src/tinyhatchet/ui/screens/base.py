"""
Screen base classes.

A screen is one navigable UI state.  It never talks to other screens or to
the network: ``transition`` returns the next screen (itself or a new one)
plus any commands to schedule, and the dispatcher does the rest.

Outcome events a screen does not expect must be ignored.  A command issued
by a screen the user has already left is delivered to whatever screen is
active when it completes.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field

from tinyhatchet.core.events import (
    Event,
    Failure,
    KeyPress,
    ValidationErrors,
    WindowResize,
)
from tinyhatchet.core.session import SessionContext
from tinyhatchet.ui.commands import Command
from tinyhatchet.ui.state import (
    BACKWARD_KEYS,
    FORWARD_KEYS,
    QUIT_KEYS,
    SELECT_KEYS,
    FocusRing,
    TextField,
    Viewport,
)

ERROR_INDENT = " " * 11


@dataclass
class Transition:
    screen: Screen
    commands: list[Command] = field(default_factory=list)
    quit: bool = False


class Screen:
    """Base class of every screen variant."""

    title: str = ""

    def __init__(self, session: SessionContext) -> None:
        self.session = session
        self.viewport = Viewport()

    # ------------------------------------------------------------------
    # Protocol
    # ------------------------------------------------------------------

    def enter(self, viewport: Viewport) -> list[Command]:
        """Called by the dispatcher when this screen becomes active."""
        self.viewport = viewport
        return []

    def transition(self, event: Event) -> Transition:
        if isinstance(event, WindowResize):
            self.viewport = Viewport(event.width, event.height)
            return self.stay()
        if isinstance(event, KeyPress):
            return self.on_key(event)
        return self.on_outcome(event)

    def render(self) -> str:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def on_key(self, event: KeyPress) -> Transition:
        if event.key in QUIT_KEYS:
            return self.exit()
        return self.stay()

    def on_outcome(self, event: Event) -> Transition:
        return self.stay()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def stay(self, *commands: Command) -> Transition:
        return Transition(self, list(commands))

    def go(self, screen: Screen) -> Transition:
        return Transition(screen)

    def exit(self) -> Transition:
        return Transition(self, quit=True)

    @property
    def name(self) -> str:
        return type(self).__name__


# ---------------------------------------------------------------------------
# Menus
# ---------------------------------------------------------------------------


class MenuScreen(Screen):
    """A vertical list of choices with a clamped cursor."""

    footer = "Press q to quit."

    def __init__(self, session: SessionContext, choices: list[object]) -> None:
        super().__init__(session)
        self.choices = choices
        self.cursor = 0

    def on_key(self, event: KeyPress) -> Transition:
        key = event.key
        if key in ("up", "k"):
            self.cursor = max(0, self.cursor - 1)
        elif key in ("down", "j"):
            self.cursor = min(len(self.choices) - 1, self.cursor + 1)
        elif key in SELECT_KEYS:
            return self.select(self.cursor)
        else:
            return super().on_key(event)
        return self.stay()

    def select(self, index: int) -> Transition:
        return self.stay()

    def clamp_cursor(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.choices) - 1))

    def render_choice(self, choice: object, selected: bool) -> str:
        marker = ">" if selected else " "
        return f"{marker} {choice}\n"

    def render(self) -> str:
        lines = [f"{self.title}\n\n"]
        for i, choice in enumerate(self.choices):
            lines.append(self.render_choice(choice, i == self.cursor))
        lines.append(f"\n{self.footer}\n")
        return "".join(lines)


# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------


class FormScreen(Screen):
    """
    Text fields followed by action buttons, navigated with a focus ring.

    ``enter`` on a field moves focus forward; ``enter`` on a button calls
    :meth:`activate` with the button's index.  ``q`` only quits while a
    button has focus, otherwise it is typed into the field.
    """

    buttons: tuple[str, ...] = ("[ Submit ]",)

    def __init__(self, session: SessionContext, fields: list[TextField], focus: int = 0) -> None:
        super().__init__(session)
        self.fields = fields
        self.ring = FocusRing(len(fields), len(self.buttons), focus)
        self.error = ""
        self.busy = False
        self.sync_focus()

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    def sync_focus(self) -> None:
        for i, f in enumerate(self.fields):
            if i == self.ring.field_index:
                f.focus()
            else:
                f.blur()

    @property
    def focused_field(self) -> TextField | None:
        idx = self.ring.field_index
        return None if idx is None else self.fields[idx]

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def on_key(self, event: KeyPress) -> Transition:
        key = event.key
        if key == "ctrl+c":
            return self.exit()
        if key == "enter" and self.ring.action_index is not None:
            if self.busy:
                return self.stay()
            return self.activate(self.ring.action_index)
        if key in FORWARD_KEYS or key == "enter":
            self.ring.forward()
            self.sync_focus()
            return self.stay()
        if key in BACKWARD_KEYS:
            self.ring.backward()
            self.sync_focus()
            return self.stay()

        target = self.focused_field
        if target is None:
            if key in QUIT_KEYS:
                return self.exit()
            return self.stay()
        target.handle_key(event)
        return self.stay()

    def activate(self, action: int) -> Transition:
        return self.stay()

    # ------------------------------------------------------------------
    # Outcomes
    # ------------------------------------------------------------------

    def clear_errors(self) -> None:
        self.error = ""
        for f in self.fields:
            f.errors = []

    def fail(self, detail: str) -> Transition:
        self.busy = False
        self.error = detail
        return self.stay()

    def submit(self, command: Command) -> Transition:
        self.busy = True
        return self.stay(command)

    def apply_validation(self, event: ValidationErrors, names: dict[str, TextField]) -> Transition:
        self.busy = False
        for name, f in names.items():
            f.errors = event.for_field(name)
        unmatched = [
            msg for key, msgs in event.errors.items() if key not in names for msg in msgs
        ]
        self.error = "; ".join(unmatched)
        return self.stay()

    def on_outcome(self, event: Event) -> Transition:
        if isinstance(event, Failure):
            return self.fail(event.detail)
        return self.stay()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_fields(self) -> str:
        out: list[str] = []
        for f in self.fields:
            out.append(f.render())
            out.extend(f"{ERROR_INDENT}{err}" for err in f.errors)
        return "\n".join(out)

    def render_buttons(self) -> str:
        out = []
        for i, label in enumerate(self.buttons):
            marker = ">" if self.ring.action_index == i else " "
            out.append(f"{marker} {label}")
        return "\n\n".join(out)

    def render_status(self) -> str:
        if self.error:
            return f"\n{string.capwords(self.error)}\n"
        if self.busy:
            return "\nWorking...\n"
        return ""

    def render(self) -> str:
        header = f"{self.title}\n\n" if self.title else ""
        return f"{header}{self.render_fields()}\n{self.render_status()}\n{self.render_buttons()}\n"
