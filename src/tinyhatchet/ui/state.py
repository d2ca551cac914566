"""
UI state types: pure Python dataclasses, no Textual imports.

These can be constructed and tested without a running Textual app.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from tinyhatchet.core.events import KeyPress

CURSOR_GLYPH = "█"
MASK_CHARACTER = "*"

# Key groups shared by every screen (Textual key names).
QUIT_KEYS = frozenset({"ctrl+c", "q"})
FORWARD_KEYS = frozenset({"tab", "down"})
BACKWARD_KEYS = frozenset({"shift+tab", "up"})
SELECT_KEYS = frozenset({"enter", "space"})
BACK_KEY = "escape"


@dataclass(frozen=True)
class Viewport:
    width: int = 80
    height: int = 24


# ---------------------------------------------------------------------------
# Field controller
# ---------------------------------------------------------------------------


@dataclass
class TextField:
    """
    One text-entry field.

    ``handle_key`` edits the value only while the field is focused; an
    unfocused field ignores every key.  No validation happens here.
    """

    label: str = ""
    placeholder: str = ""
    masked: bool = False
    char_limit: int = 0
    value: str = ""
    cursor: int = 0
    focused: bool = False
    errors: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.cursor = len(self.value)

    @property
    def cursor_visible(self) -> bool:
        return self.focused

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def set_value(self, value: str) -> None:
        if self.char_limit:
            value = value[: self.char_limit]
        self.value = value
        self.cursor = len(value)

    def handle_key(self, event: KeyPress) -> TextField:
        if not self.focused:
            return self

        key = event.key
        if key == "backspace":
            if self.cursor > 0:
                self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
                self.cursor -= 1
        elif key == "delete":
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]
        elif key == "left":
            self.cursor = max(0, self.cursor - 1)
        elif key == "right":
            self.cursor = min(len(self.value), self.cursor + 1)
        elif key in ("home", "ctrl+a"):
            self.cursor = 0
        elif key in ("end", "ctrl+e"):
            self.cursor = len(self.value)
        elif key == "ctrl+u":
            self.value = self.value[self.cursor :]
            self.cursor = 0
        elif event.is_printable:
            if self.char_limit and len(self.value) >= self.char_limit:
                return self
            self.value = self.value[: self.cursor] + (event.character or "") + self.value[self.cursor :]
            self.cursor += 1
        return self

    def render(self) -> str:
        prompt = f"{self.label} > " if self.label else "> "
        if not self.value and not self.focused:
            return prompt + self.placeholder

        shown = MASK_CHARACTER * len(self.value) if self.masked else self.value
        if self.focused:
            shown = shown[: self.cursor] + CURSOR_GLYPH + shown[self.cursor :]
        return prompt + shown


# ---------------------------------------------------------------------------
# Focus ring
# ---------------------------------------------------------------------------


class Direction(Enum):
    FORWARD = 1
    BACKWARD = -1


def advance(index: int, direction: Direction, count: int, actions: int = 1) -> int:
    """Next focus index over *count* fields followed by *actions* trailing buttons.

    The result is ``(index + delta) mod (count + actions)``; stepping back
    from slot 0 wraps to the last action.
    """
    size = count + actions
    if size <= 0:
        return 0
    return (index + direction.value) % size


@dataclass
class FocusRing:
    """Current focus over ``fields`` inputs followed by ``actions`` buttons."""

    fields: int
    actions: int = 1
    index: int = 0

    def __post_init__(self) -> None:
        self.index = self._clamp(self.index)

    @property
    def size(self) -> int:
        return self.fields + self.actions

    @property
    def on_field(self) -> bool:
        return self.index < self.fields

    @property
    def field_index(self) -> int | None:
        return self.index if self.on_field else None

    @property
    def action_index(self) -> int | None:
        return None if self.on_field else self.index - self.fields

    def forward(self) -> int:
        self.index = advance(self.index, Direction.FORWARD, self.fields, self.actions)
        return self.index

    def backward(self) -> int:
        self.index = advance(self.index, Direction.BACKWARD, self.fields, self.actions)
        return self.index

    def move(self, direction: Direction) -> int:
        if direction is Direction.FORWARD:
            return self.forward()
        return self.backward()

    def resize(self, fields: int) -> None:
        """Change the field count, keeping the index valid."""
        self.fields = fields
        self.index = self._clamp(self.index)

    def _clamp(self, index: int) -> int:
        return max(0, min(index, self.size - 1))


__all__ = [
    "BACK_KEY",
    "BACKWARD_KEYS",
    "CURSOR_GLYPH",
    "Direction",
    "FORWARD_KEYS",
    "FocusRing",
    "MASK_CHARACTER",
    "QUIT_KEYS",
    "SELECT_KEYS",
    "TextField",
    "Viewport",
    "advance",
]
