"""Keyboard handling: held-modifier tracking and arrow/Enter navigation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from selection import CONTROL

logger = logging.getLogger(__name__)

KEYDOWN = "keydown"
KEYUP = "keyup"

ARROW_UP = "ArrowUp"
ARROW_DOWN = "ArrowDown"
ARROW_LEFT = "ArrowLeft"
ARROW_RIGHT = "ArrowRight"
ENTER = "Enter"

# Held arrows may auto-repeat for fast scrubbing; any other repeat is dropped.
REPEATABLE_KEYS = frozenset({ARROW_UP, ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT})

_DAY_STEPS = {
    ARROW_UP: -7,
    ARROW_DOWN: 7,
    ARROW_LEFT: -1,
    ARROW_RIGHT: 1,
}


@dataclass(frozen=True)
class KeyEvent:
    key: str
    kind: str = KEYDOWN
    repeat: bool = False


class NavigationTarget(Protocol):
    """What the handler drives; implemented by ``DatePicker``."""

    def move_cursor(self, d: date) -> bool: ...

    def decrement_month(self) -> bool: ...

    def increment_month(self) -> bool: ...

    def apply_selection(self, d: date) -> bool: ...

    def focus_cursor(self) -> bool: ...


class KeyboardNavigator:
    """Translates key events on a date cell into picker transitions."""

    def __init__(self, target: NavigationTarget) -> None:
        self._target = target
        self.held_keys: set[str] = set()

    def clear(self) -> None:
        """Forget every held key (focus left the widget, keyups will not arrive)."""
        if self.held_keys:
            logger.debug("Dropping held keys %s", sorted(self.held_keys))
        self.held_keys.clear()

    def handle(self, event: KeyEvent, d: date) -> bool:
        """Process one key event for the cell showing ``d``.

        Returns True if the event was acted on.
        """
        if event.kind == KEYUP:
            self.held_keys.discard(event.key)
            return True
        if event.kind != KEYDOWN:
            return False
        if event.repeat and event.key not in REPEATABLE_KEYS:
            logger.debug("Ignoring repeated %s", event.key)
            return False

        self.held_keys.add(event.key)

        if event.key in (ARROW_LEFT, ARROW_RIGHT) and CONTROL in self.held_keys:
            if event.key == ARROW_LEFT:
                self._target.decrement_month()
            else:
                self._target.increment_month()
        elif event.key in _DAY_STEPS:
            self._target.move_cursor(d + timedelta(days=_DAY_STEPS[event.key]))
        elif event.key == ENTER:
            self._target.apply_selection(d)
            return True
        else:
            return False

        self._target.focus_cursor()
        return True
