"""Keystroke helpers for driving screens in tests."""

from __future__ import annotations

from tinyhatchet.core.events import KeyPress
from tinyhatchet.ui.screens.base import Screen, Transition


def press(screen: Screen, *keys: str) -> Transition:
    """Send key presses to *screen*, following transitions; return the last one."""
    result = Transition(screen)
    for key in keys:
        result = result.screen.transition(KeyPress.of(key))
    return result


def type_text(screen: Screen, text: str) -> Transition:
    return press(screen, *["space" if ch == " " else ch for ch in text])
