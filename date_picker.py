"""Date picker state: configuration, selection, cursor and change notifications."""

from __future__ import annotations

import calendar
import enum
import logging
from collections import defaultdict
from datetime import date
from typing import Any, Callable, Iterable

from calendar_logic import as_date
from errors import InvalidConfiguration
from key_navigation import KeyboardNavigator, KeyEvent
from selection import (
    MultipleSelection,
    RangeSelection,
    Selection,
    SelectionMode,
    SingleSelection,
    new_selection,
)
from view_window import ViewWindow

logger = logging.getLogger(__name__)

# Change notification names
SELECTED_DATE = "selected_date"
SELECTED_DATES = "selected_dates"
RANGE_START = "range_start"
RANGE_END = "range_end"
HOVER_DATE = "hover_date"
VIEW_DATE = "view_date"
CURSOR_DATE = "cursor_date"
VALUE_CHANGED = "value_changed"

EVENTS = (SELECTED_DATE, SELECTED_DATES, RANGE_START, RANGE_END,
          HOVER_DATE, VIEW_DATE, CURSOR_DATE, VALUE_CHANGED)


class Orientation(enum.Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


def _parse_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        raise InvalidConfiguration(f"unknown {enum_cls.__name__}: {value!r}") from None


class DatePicker:
    """Logic core of a date-picker widget.

    Owns the view window, the selection for the active mode and the
    keyboard handler. Every mutator returns whether something changed and
    observers are only called for values that actually changed.
    """

    def __init__(
        self,
        view_date: date | None = None,
        view_count: int = 1,
        orientation: Orientation | str = Orientation.HORIZONTAL,
        selection_mode: SelectionMode | str = SelectionMode.SINGLE,
        min_date: date | None = None,
        max_date: date | None = None,
        disabled_dates: Iterable[date] = (),
        first_weekday: int = calendar.SUNDAY,
    ) -> None:
        self._check_bounds(min_date, max_date)
        self._check_first_weekday(first_weekday)
        self._orientation = _parse_enum(Orientation, orientation)
        self._min_date = as_date(min_date) if min_date is not None else None
        self._max_date = as_date(max_date) if max_date is not None else None
        self._disabled: set[date] = {as_date(d) for d in disabled_dates}
        self._selection: Selection = new_selection(_parse_enum(SelectionMode, selection_mode))
        self._window = ViewWindow(view_date or date.today(), view_count, first_weekday)
        self._keyboard = KeyboardNavigator(self)
        self._listeners: dict[str, list[Callable[[Any], None]]] = defaultdict(list)
        self._focus_handler: Callable[[int, date], None] | None = None

    @classmethod
    def from_settings(cls, settings: dict, today: date | None = None) -> "DatePicker":
        """Build a picker from a dict produced by ``settings.load_settings``."""
        return cls(
            view_date=today,
            view_count=settings.get("view_count", 1),
            orientation=settings.get("orientation", Orientation.HORIZONTAL),
            selection_mode=settings.get("selection_mode", SelectionMode.SINGLE),
            min_date=settings.get("min_date"),
            max_date=settings.get("max_date"),
            disabled_dates=settings.get("disabled_dates", ()),
            first_weekday=settings.get("first_weekday", calendar.SUNDAY),
        )

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def subscribe(self, event: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Call ``callback(new_value)`` whenever ``event`` changes.

        Returns a function that removes the subscription.
        """
        if event not in EVENTS:
            raise ValueError(f"unknown event: {event!r}")
        self._listeners[event].append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners[event]:
                self._listeners[event].remove(callback)

        return unsubscribe

    def _notify(self, event: str, value: Any) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback(value)
            except Exception:
                logger.exception("Observer for %s failed", event)

    def _snapshot(self) -> dict[str, Any]:
        return {
            SELECTED_DATE: self.selected_date,
            SELECTED_DATES: self.selected_dates,
            RANGE_START: self.range_start,
            RANGE_END: self.range_end,
            HOVER_DATE: self.hover_date,
            VIEW_DATE: self._window.anchor,
            CURSOR_DATE: self._window.cursor,
        }

    def _publish(self, before: dict[str, Any]) -> bool:
        """Notify observers of every value that differs from ``before``."""
        after = self._snapshot()
        changed = False
        for event, value in after.items():
            if before[event] != value:
                changed = True
                self._notify(event, value)
        return changed

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def view_date(self) -> date:
        return self._window.anchor

    @property
    def view_count(self) -> int:
        return self._window.view_count

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @property
    def selection_mode(self) -> SelectionMode:
        return self._selection.mode

    @property
    def min_date(self) -> date | None:
        return self._min_date

    @property
    def max_date(self) -> date | None:
        return self._max_date

    @property
    def disabled_dates(self) -> frozenset[date]:
        return frozenset(self._disabled)

    @property
    def first_weekday(self) -> int:
        return self._window.first_weekday

    def set_view_date(self, value: date) -> bool:
        """Recompute the grid around ``value`` and put the cursor on it."""
        before = self._snapshot()
        self._window.reset(as_date(value))
        return self._publish(before)

    def set_view_count(self, count: int) -> bool:
        before = self._snapshot()
        try:
            changed = self._window.set_view_count(count)
        except InvalidConfiguration:
            logger.warning("Rejected view count %r, keeping %d", count, self.view_count)
            raise
        self._publish(before)
        return changed

    def set_orientation(self, orientation: Orientation | str) -> bool:
        value = self._rejecting(_parse_enum, Orientation, orientation)
        if value == self._orientation:
            return False
        self._orientation = value
        return True

    def set_selection_mode(self, mode: SelectionMode | str) -> bool:
        """Switch mode; all selection data is dropped, even for the same mode."""
        value = self._rejecting(_parse_enum, SelectionMode, mode)
        before = self._snapshot()
        previous = self._selection.mode
        self._selection = new_selection(value)
        changed = self._publish(before)
        return changed or value != previous

    def set_min_date(self, value: date | None) -> bool:
        value = as_date(value) if value is not None else None
        self._rejecting(self._check_bounds, value, self._max_date)
        if value == self._min_date:
            return False
        self._min_date = value
        return True

    def set_max_date(self, value: date | None) -> bool:
        value = as_date(value) if value is not None else None
        self._rejecting(self._check_bounds, self._min_date, value)
        if value == self._max_date:
            return False
        self._max_date = value
        return True

    def set_disabled_dates(self, dates: Iterable[date]) -> bool:
        value = {as_date(d) for d in dates}
        if value == self._disabled:
            return False
        self._disabled = value
        return True

    def set_first_weekday(self, first_weekday: int) -> bool:
        self._rejecting(self._check_first_weekday, first_weekday)
        return self._window.set_first_weekday(first_weekday)

    @staticmethod
    def _check_bounds(min_date: date | None, max_date: date | None) -> None:
        for bound in (min_date, max_date):
            if bound is not None and not isinstance(bound, date):
                raise InvalidConfiguration(f"date bound must be a date or None, got {bound!r}")
        if min_date is not None and max_date is not None and as_date(min_date) > as_date(max_date):
            raise InvalidConfiguration(f"min date {min_date} is after max date {max_date}")

    @staticmethod
    def _check_first_weekday(first_weekday: int) -> None:
        if not isinstance(first_weekday, int) or isinstance(first_weekday, bool) or not 0 <= first_weekday <= 6:
            raise InvalidConfiguration(f"first weekday must be 0-6, got {first_weekday!r}")

    @staticmethod
    def _rejecting(check, *args):
        try:
            return check(*args)
        except InvalidConfiguration as exc:
            logger.warning("Rejected configuration: %s", exc)
            raise

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def dates_in_view(self) -> tuple[date, ...]:
        return tuple(self._window.dates)

    @property
    def cursor_date(self) -> date:
        return self._window.cursor

    @property
    def held_keys(self) -> frozenset[str]:
        return frozenset(self._keyboard.held_keys)

    @property
    def selected_date(self) -> date | None:
        if isinstance(self._selection, SingleSelection):
            return self._selection.selected
        return None

    @property
    def selected_dates(self) -> frozenset[date]:
        if isinstance(self._selection, MultipleSelection):
            return frozenset(self._selection.selected)
        return frozenset()

    @property
    def range_start(self) -> date | None:
        if isinstance(self._selection, RangeSelection):
            return self._selection.start
        return None

    @property
    def range_end(self) -> date | None:
        if isinstance(self._selection, RangeSelection):
            return self._selection.end
        return None

    @property
    def hover_date(self) -> date | None:
        if isinstance(self._selection, RangeSelection):
            return self._selection.hover
        return None

    def month_blocks(self) -> list[tuple[int, int, list[date]]]:
        """(year, month, 42 dates) for each displayed month."""
        return [
            (year, month, block)
            for (year, month), block in zip(self._window.months(), self._window.blocks())
        ]

    def is_selected(self, value: date) -> bool:
        return self._selection.is_selected(as_date(value))

    def is_in_range(self, value: date) -> bool:
        return self._selection.is_in_range(as_date(value))

    def is_disabled(self, value: date) -> bool:
        d = as_date(value)
        if d in self._disabled:
            return True
        if self._min_date is not None and d < self._min_date:
            return True
        return self._max_date is not None and d > self._max_date

    def is_focused(self, value: date) -> bool:
        return as_date(value) == self._window.cursor

    def is_in_view_month(self, value: date) -> bool:
        return self._window.in_displayed_months(as_date(value))

    def decrement_month_enabled(self) -> bool:
        return self._window.can_page_backward(self._min_date)

    def increment_month_enabled(self) -> bool:
        return self._window.can_page_forward(self._max_date)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def move_cursor(self, value: date) -> bool:
        """Move the cursor, kept inside the min/max bounds."""
        d = self._clamp_to_bounds(as_date(value))
        before = self._snapshot()
        self._window.navigate_to(d)
        return self._publish(before)

    def decrement_month(self) -> bool:
        if not self.decrement_month_enabled():
            logger.debug("Paging back blocked by min date %s", self._min_date)
            return False
        return self._page(-1)

    def increment_month(self) -> bool:
        if not self.increment_month_enabled():
            logger.debug("Paging forward blocked by max date %s", self._max_date)
            return False
        return self._page(1)

    def _page(self, direction: int) -> bool:
        before = self._snapshot()
        self._window.page(direction)
        return self._publish(before)

    def decrement_year(self, years: int = 1) -> bool:
        return self.increment_year(-years)

    def increment_year(self, years: int = 1) -> bool:
        before = self._snapshot()
        self._window.step_years(years)
        return self._publish(before)

    def go_today(self, today: date | None = None) -> bool:
        return self.set_view_date(today or date.today())

    def _clamp_to_bounds(self, d: date) -> date:
        if self._min_date is not None and d < self._min_date:
            return self._min_date
        if self._max_date is not None and d > self._max_date:
            return self._max_date
        return d

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def apply_selection(self, value: date) -> bool:
        """Select ``value`` according to the active mode and held modifiers.

        Returns True if the selection changed. Disabled dates are ignored.
        """
        d = as_date(value)
        if self.is_disabled(d):
            logger.debug("Ignoring selection of disabled date %s", d)
            return False
        before = self._snapshot()
        selection_changed = self._selection.apply(d, self._keyboard.held_keys, self._window.dates)
        # With several months on screen the cursor stays where the user put it
        if self._window.view_count == 1:
            self._window.navigate_to(d)
        self._publish(before)
        if selection_changed:
            self._notify(VALUE_CHANGED, d)
        self.focus_cursor()
        return selection_changed

    # ------------------------------------------------------------------
    # Input surface
    # ------------------------------------------------------------------
    def click(self, value: date) -> bool:
        return self.apply_selection(value)

    def pointer_enter(self, value: date) -> bool:
        if not isinstance(self._selection, RangeSelection):
            return False
        before = self._snapshot()
        self._selection.set_hover(as_date(value))
        return self._publish(before)

    def pointer_leave(self, value: date) -> bool:
        if not isinstance(self._selection, RangeSelection) or self._selection.hover != as_date(value):
            return False
        before = self._snapshot()
        self._selection.set_hover(None)
        return self._publish(before)

    def handle_key(self, event: KeyEvent, value: date) -> bool:
        """Feed one key event raised on the cell showing ``value``."""
        return self._keyboard.handle(event, as_date(value))

    def focus_lost(self) -> None:
        """The widget lost input focus; pending keyups will never arrive."""
        self._keyboard.clear()

    def set_focus_handler(self, handler: Callable[[int, date], None] | None) -> None:
        """Register the host callback asked to focus a cell (index, date)."""
        self._focus_handler = handler

    def request_focus(self, value: date) -> bool:
        """Ask the host to focus the cell for ``value``.

        A date outside the current grid is a no-op.
        """
        d = as_date(value)
        index = self._window.index_of(d)
        if index is None:
            logger.debug("No cell for %s in current grid, focus request dropped", d)
            return False
        if self._focus_handler is not None:
            try:
                self._focus_handler(index, d)
            except Exception:
                logger.exception("Focus handler failed for %s", d)
        return True

    def focus_cursor(self) -> bool:
        return self.request_focus(self._window.cursor)
