"""Selection state for the three picker modes.

Each mode carries its own payload, so the state is one of three small
classes rather than a single record with fields the other modes ignore.
``apply`` is the only transition that changes what is selected; the date
picker calls it for both clicks and the Enter key.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import AbstractSet, Sequence, Union

CONTROL = "Control"
SHIFT = "Shift"


class SelectionMode(enum.Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    RANGE = "range"


@dataclass
class SingleSelection:
    selected: date | None = None

    mode = SelectionMode.SINGLE

    def apply(self, d: date, held_keys: AbstractSet[str] = frozenset(),
              dates_in_view: Sequence[date] = ()) -> bool:
        if self.selected == d:
            return False
        self.selected = d
        return True

    def is_selected(self, d: date) -> bool:
        return self.selected == d

    def is_in_range(self, d: date) -> bool:
        return False


@dataclass
class MultipleSelection:
    """Any set of dates.

    ``last_added`` is the anchor for Shift-extend; it is not moved by the
    extension itself, so repeated Shift-clicks re-extend from the same date.
    """

    selected: set[date] = field(default_factory=set)
    last_added: date | None = None

    mode = SelectionMode.MULTIPLE

    def apply(self, d: date, held_keys: AbstractSet[str] = frozenset(),
              dates_in_view: Sequence[date] = ()) -> bool:
        before = frozenset(self.selected)
        if CONTROL in held_keys:
            self._toggle(d)
        elif SHIFT in held_keys and self.last_added is not None:
            lo, hi = sorted((self.last_added, d))
            self.selected.update(x for x in dates_in_view if lo <= x <= hi)
        else:
            self.selected = {d}
            self.last_added = d
        return frozenset(self.selected) != before

    def _toggle(self, d: date) -> None:
        if d in self.selected:
            self.selected.discard(d)
            if self.last_added == d:
                self.last_added = None
        else:
            self.selected.add(d)
            self.last_added = d

    def is_selected(self, d: date) -> bool:
        return d in self.selected

    def is_in_range(self, d: date) -> bool:
        return False


@dataclass
class RangeSelection:
    """A contiguous range being built by successive clicks.

    ``hover`` previews the would-be end while only the start is set; it is
    never part of the selection.
    """

    start: date | None = None
    end: date | None = None
    hover: date | None = None

    mode = SelectionMode.RANGE

    def apply(self, d: date, held_keys: AbstractSet[str] = frozenset(),
              dates_in_view: Sequence[date] = ()) -> bool:
        before = (self.start, self.end)
        if self.start is None:
            self.start = d
        elif self.end is not None:
            if self.start < d < self.end:
                self.start = d
            else:
                self.start = d
                self.end = None
        elif d < self.start:
            self.start = d
        elif d > self.start:
            self.end = d
        return (self.start, self.end) != before

    def set_hover(self, d: date | None) -> bool:
        if self.hover == d:
            return False
        self.hover = d
        return True

    def is_selected(self, d: date) -> bool:
        return d == self.start or d == self.end

    def is_in_range(self, d: date) -> bool:
        if self.start is None:
            return False
        if self.end is not None:
            return self.start < d < self.end
        # preview up to the hovered cell
        return self.hover is not None and self.start < d < self.hover


Selection = Union[SingleSelection, MultipleSelection, RangeSelection]

_BY_MODE = {
    SelectionMode.SINGLE: SingleSelection,
    SelectionMode.MULTIPLE: MultipleSelection,
    SelectionMode.RANGE: RangeSelection,
}


def new_selection(mode: SelectionMode) -> Selection:
    """Return an empty selection for ``mode``."""
    return _BY_MODE[mode]()
