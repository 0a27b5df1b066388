from datetime import date

import pytest

from key_navigation import KEYUP, KeyboardNavigator, KeyEvent

D = date(2024, 2, 15)


class Recorder:
    def __init__(self):
        self.calls = []

    def move_cursor(self, d):
        self.calls.append(("move", d))
        return True

    def decrement_month(self):
        self.calls.append(("decrement",))
        return True

    def increment_month(self):
        self.calls.append(("increment",))
        return True

    def apply_selection(self, d):
        self.calls.append(("select", d))
        return True

    def focus_cursor(self):
        self.calls.append(("focus",))
        return True


@pytest.fixture
def target():
    return Recorder()


@pytest.fixture
def nav(target):
    return KeyboardNavigator(target)


@pytest.mark.parametrize("key, expected", [
    ("ArrowUp", date(2024, 2, 8)),
    ("ArrowDown", date(2024, 2, 22)),
    ("ArrowLeft", date(2024, 2, 14)),
    ("ArrowRight", date(2024, 2, 16)),
])
def test_arrows_move_cursor(nav, target, key, expected):
    assert nav.handle(KeyEvent(key), D) is True
    assert target.calls == [("move", expected), ("focus",)]


def test_control_arrows_page(nav, target):
    nav.handle(KeyEvent("Control"), D)
    nav.handle(KeyEvent("ArrowLeft"), D)
    nav.handle(KeyEvent("ArrowRight"), D)
    assert target.calls == [("decrement",), ("focus",), ("increment",), ("focus",)]


def test_enter_selects(nav, target):
    nav.handle(KeyEvent("Enter"), D)
    assert target.calls == [("select", D)]


def test_repeated_enter_is_dropped(nav, target):
    assert nav.handle(KeyEvent("Enter", repeat=True), D) is False
    assert target.calls == []


def test_repeated_arrow_is_allowed(nav, target):
    nav.handle(KeyEvent("ArrowDown", repeat=True), D)
    assert target.calls[0] == ("move", date(2024, 2, 22))


def test_keyup_releases_modifier(nav, target):
    nav.handle(KeyEvent("Control"), D)
    assert nav.held_keys == {"Control"}
    nav.handle(KeyEvent("Control", KEYUP), D)
    assert nav.held_keys == set()
    nav.handle(KeyEvent("ArrowRight"), D)
    assert target.calls[0] == ("move", date(2024, 2, 16))


def test_clear_forgets_stuck_modifier(nav, target):
    nav.handle(KeyEvent("Control"), D)
    nav.clear()
    nav.handle(KeyEvent("ArrowLeft"), D)
    assert target.calls[0] == ("move", date(2024, 2, 14))


def test_other_keys_are_tracked_but_ignored(nav, target):
    assert nav.handle(KeyEvent("a"), D) is False
    assert "a" in nav.held_keys
    assert target.calls == []
