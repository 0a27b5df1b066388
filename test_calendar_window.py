from datetime import date
from types import SimpleNamespace

import pytest

pytest.importorskip("tkinter")

from calendar_window import CalendarWindow  # noqa: E402
from date_picker import EVENTS, DatePicker  # noqa: E402


class FakeRoot:
    def __init__(self):
        self.idle = []

    def after_idle(self, callback):
        self.idle.append(callback)

    def run_idle(self):
        pending, self.idle = self.idle, []
        for callback in pending:
            callback()


def make_window(picker):
    """A CalendarWindow wired to ``picker`` without creating any Tk widgets."""
    window = CalendarWindow.__new__(CalendarWindow)
    window.picker = picker
    window.root = FakeRoot()
    window._refresh_pending = False
    window._released_at = {}
    window.refreshes = 0

    def refresh():
        window.refreshes += 1

    window._refresh = refresh
    for event in EVENTS:
        picker.subscribe(event, lambda _value: window._schedule_refresh())
    return window


def key(keysym, time):
    return SimpleNamespace(keysym=keysym, time=time)


def test_one_redraw_per_transition():
    picker = DatePicker(view_date=date(2024, 2, 15))
    window = make_window(picker)
    # selected date, cursor and view date all change
    picker.click(date(2024, 3, 5))
    assert len(window.root.idle) == 1
    window.root.run_idle()
    assert window.refreshes == 1

    picker.click(date(2024, 3, 6))
    window.root.run_idle()
    assert window.refreshes == 2


def test_x11_autorepeat_enter_does_not_retoggle():
    picker = DatePicker(view_date=date(2024, 2, 15), selection_mode="multiple")
    window = make_window(picker)

    window._on_key_press(key("Control_L", 100))
    window._on_key_press(key("Return", 200))
    assert picker.selected_dates == {date(2024, 2, 15)}

    # auto-repeat: release and press share a timestamp
    window._on_key_release(key("Return", 300))
    window._on_key_press(key("Return", 300))
    assert picker.selected_dates == {date(2024, 2, 15)}

    # a real second press toggles the date off again
    window._on_key_release(key("Return", 400))
    window._on_key_press(key("Return", 900))
    assert picker.selected_dates == frozenset()


def test_held_arrow_keeps_scrubbing():
    picker = DatePicker(view_date=date(2024, 2, 15))
    window = make_window(picker)
    window._on_key_press(key("Right", 100))
    window._on_key_release(key("Right", 150))
    window._on_key_press(key("Right", 150))
    assert picker.cursor_date == date(2024, 2, 17)
