"""Window of consecutive months shown by the picker, and the cursor inside it."""

from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta

from calendar_logic import (
    GRID_CELLS,
    add_months,
    add_years,
    as_date,
    month_start,
    view_grid,
)
from errors import InvalidConfiguration

logger = logging.getLogger(__name__)


def _check_view_count(count) -> None:
    if not isinstance(count, int) or isinstance(count, bool) or count < 1:
        raise InvalidConfiguration(f"view count must be an int >= 1, got {count!r}")


class ViewWindow:
    """Grid of 42 x ``view_count`` dates plus the focused cursor date.

    ``navigate_to`` is the one place that decides between sliding the window
    by a page of months, recomputing it around a far target, or only moving
    the cursor.
    """

    def __init__(self, anchor: date, view_count: int = 1,
                 first_weekday: int = calendar.SUNDAY) -> None:
        _check_view_count(view_count)
        self.view_count = view_count
        self.first_weekday = first_weekday
        self.anchor: date = as_date(anchor)
        self.cursor: date = self.anchor
        self.dates: list[date] = []
        self.recompute_count = 0
        self.recompute(self.anchor)

    # ------------------------------------------------------------------
    # Window geometry
    # ------------------------------------------------------------------
    @property
    def window_start(self) -> date:
        """First day of the earliest displayed month."""
        return month_start(self.anchor)

    @property
    def window_end(self) -> date:
        """First day of the month just past the last displayed month."""
        return add_months(self.window_start, self.view_count)

    def months(self) -> list[tuple[int, int]]:
        """(year, month) of each displayed month, in order."""
        result: list[tuple[int, int]] = []
        for i in range(self.view_count):
            d = add_months(self.window_start, i)
            result.append((d.year, d.month))
        return result

    def blocks(self) -> list[list[date]]:
        """The grid split into its 42-date month blocks."""
        return [self.dates[i:i + GRID_CELLS] for i in range(0, len(self.dates), GRID_CELLS)]

    def contains(self, d: date) -> bool:
        return bool(self.dates) and self.dates[0] <= d <= self.dates[-1]

    def in_displayed_months(self, d: date) -> bool:
        return self.window_start <= d < self.window_end

    def index_of(self, d: date) -> int | None:
        """Cell index for a date, or None if it is not in the grid.

        Overflow dates appear in two neighbouring blocks of a multi-month
        grid; the cell inside the date's own month wins.
        """
        fallback = None
        for i, cell in enumerate(self.dates):
            if cell != d:
                continue
            block_month = self.months()[i // GRID_CELLS]
            if (cell.year, cell.month) == block_month:
                return i
            if fallback is None:
                fallback = i
        return fallback

    # ------------------------------------------------------------------
    # Recompute
    # ------------------------------------------------------------------
    def recompute(self, anchor: date) -> None:
        self.anchor = as_date(anchor)
        self.dates = view_grid(self.anchor, self.view_count, self.first_weekday)
        self.recompute_count += 1
        logger.debug("Grid recomputed at %s (%d months, %d cells)",
                     self.anchor, self.view_count, len(self.dates))

    def set_view_count(self, count: int) -> bool:
        _check_view_count(count)
        if count == self.view_count:
            return False
        self.view_count = count
        self.recompute(self.anchor)
        self.cursor = self._clamp_to_months(self.cursor)
        return True

    def set_first_weekday(self, first_weekday: int) -> bool:
        if first_weekday == self.first_weekday:
            return False
        self.first_weekday = first_weekday
        self.recompute(self.anchor)
        return True

    def reset(self, anchor: date) -> None:
        """Recompute around ``anchor`` unconditionally and put the cursor on it."""
        self.recompute(anchor)
        self.cursor = self.anchor

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def navigate_to(self, target: date) -> bool:
        """Move the cursor to ``target``, regridding only when needed.

        Returns True if the grid was recomputed.
        """
        target = as_date(target)
        regridded = True
        if not self.dates:
            self.recompute(target)
        elif self.dates[0] <= target < self.window_start:
            self.recompute(add_months(self.anchor, -self.view_count))
        elif self.window_end <= target <= self.dates[-1]:
            self.recompute(add_months(self.anchor, self.view_count))
        elif self.window_start <= target < self.window_end:
            regridded = False
        else:
            self.recompute(target)
        self.cursor = target
        return regridded

    def page(self, direction: int) -> None:
        """Slide the window by one page (``view_count`` months) in ``direction``."""
        months = direction * self.view_count
        self.recompute(add_months(self.anchor, months))
        self.cursor = self._clamp_to_months(add_months(self.cursor, months))
        logger.debug("Paged %+d months, cursor at %s", months, self.cursor)

    def step_years(self, years: int) -> None:
        self.recompute(add_years(self.anchor, years))
        self.cursor = self._clamp_to_months(add_years(self.cursor, years))

    def can_page_backward(self, min_date: date | None) -> bool:
        if min_date is None:
            return True
        return add_months(self.window_start, -self.view_count) >= month_start(min_date)

    def can_page_forward(self, max_date: date | None) -> bool:
        if max_date is None:
            return True
        return add_months(self.window_start, self.view_count) <= month_start(max_date)

    def _clamp_to_months(self, d: date) -> date:
        last_day = self.window_end - timedelta(days=1)
        return max(self.window_start, min(d, last_day))
