"""Pure calendar calculations — no UI dependencies."""

import calendar
from datetime import date, datetime, timedelta

GRID_CELLS = 42
WEEK_DAYS = 7

DAY_ABBR = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def as_date(value: date) -> date:
    """Truncate a datetime to its calendar day; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def month_grid(year: int, month: int, first_weekday: int = calendar.SUNDAY) -> list[date]:
    """Return the 42 dates shown for the given month.

    Leading cells hold the tail of the previous month, trailing cells the
    head of the next one. Always 6 weeks so the calendar height stays
    constant whatever weekday the month starts on.
    """
    cal = calendar.Calendar(firstweekday=first_weekday)
    days = list(cal.itermonthdates(year, month))
    # Pad to exactly 6 weeks
    while len(days) < GRID_CELLS:
        days.append(days[-1] + timedelta(days=1))
    return days


def view_grid(anchor: date, count: int, first_weekday: int = calendar.SUNDAY) -> list[date]:
    """Concatenate the grids of ``count`` consecutive months starting at the anchor's month."""
    dates: list[date] = []
    y, m = anchor.year, anchor.month
    for _ in range(count):
        dates.extend(month_grid(y, m, first_weekday))
        y, m = next_month(y, m)
    return dates


def week_numbers(grid: list[date]) -> list[str]:
    """Return the ISO week number of each 7-day row of a grid."""
    return [
        str(grid[i].isocalendar()[1])
        for i in range(0, len(grid), WEEK_DAYS)
    ]


def weekday_headers(first_weekday: int = calendar.SUNDAY) -> list[str]:
    """Day abbreviations in grid column order."""
    return [DAY_ABBR[(first_weekday + i) % WEEK_DAYS] for i in range(WEEK_DAYS)]


def day_of_year(d: date) -> int:
    """Return the 1-based day-of-year for the given date."""
    return d.timetuple().tm_yday


def month_start(d: date) -> date:
    return d.replace(day=1)


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_years(d: date, years: int) -> date:
    """Shift by whole years; Feb 29 lands on Feb 28 in common years."""
    return add_months(d, years * 12)


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1
