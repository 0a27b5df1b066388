import calendar
from datetime import date, datetime, timedelta

import pytest

from calendar_logic import (
    DAY_ABBR,
    GRID_CELLS,
    add_months,
    add_years,
    as_date,
    day_of_year,
    month_grid,
    next_month,
    view_grid,
    week_numbers,
    weekday_headers,
)


@pytest.mark.parametrize("first_weekday", [calendar.SUNDAY, calendar.MONDAY, calendar.WEDNESDAY])
def test_month_grid_is_six_consecutive_weeks(first_weekday):
    for year in range(1999, 2031):
        for month in range(1, 13):
            grid = month_grid(year, month, first_weekday)
            assert len(grid) == GRID_CELLS
            assert all(b - a == timedelta(days=1) for a, b in zip(grid, grid[1:]))
            assert grid[0].weekday() == first_weekday
            in_month = [d for d in grid if (d.year, d.month) == (year, month)]
            assert len(in_month) == calendar.monthrange(year, month)[1]
            assert len(set(in_month)) == len(in_month)


def test_february_2024_starts_on_preceding_sunday():
    grid = month_grid(2024, 2)
    assert grid[0] == date(2024, 1, 28)
    assert grid[-1] == date(2024, 3, 9)


def test_month_starting_on_first_weekday_has_no_leading_days():
    grid = month_grid(2026, 2)
    assert grid[0] == date(2026, 2, 1)
    assert grid[28] == date(2026, 3, 1)
    assert grid[-1] == date(2026, 3, 14)


def test_monday_first_weekday():
    assert month_grid(2024, 2, calendar.MONDAY)[0] == date(2024, 1, 29)


@pytest.mark.parametrize("count", [1, 2, 3, 12])
def test_view_grid_concatenates_consecutive_months(count):
    anchor = date(2024, 11, 20)
    grid = view_grid(anchor, count)
    assert len(grid) == GRID_CELLS * count
    expected = []
    y, m = anchor.year, anchor.month
    for _ in range(count):
        expected.extend(month_grid(y, m))
        y, m = next_month(y, m)
    assert grid == expected


def test_view_grid_rolls_over_year():
    grid = view_grid(date(2024, 12, 1), 2)
    assert grid[GRID_CELLS:] == month_grid(2025, 1)


def test_add_months_clamps_day():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
    assert add_months(date(2024, 12, 15), 1) == date(2025, 1, 15)
    assert add_months(date(2024, 1, 15), -13) == date(2022, 12, 15)


def test_add_years_from_leap_day():
    assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)


def test_as_date_strips_time():
    assert as_date(datetime(2024, 2, 15, 13, 45)) == date(2024, 2, 15)
    assert as_date(date(2024, 2, 15)) == date(2024, 2, 15)


def test_week_numbers_per_row():
    weeks = week_numbers(month_grid(2024, 1, calendar.MONDAY))
    assert len(weeks) == 6
    assert weeks[0] == "1"


def test_weekday_headers_follow_first_weekday():
    assert weekday_headers(calendar.SUNDAY) == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert weekday_headers(calendar.MONDAY) == DAY_ABBR


def test_month_steps():
    assert next_month(2024, 12) == (2025, 1)
    assert day_of_year(date(2024, 12, 31)) == 366
