"""tkinter host for a DatePicker: draws its grid and forwards input to it."""

from __future__ import annotations

import calendar as _cal
import tkinter as tk
from datetime import date
from tkinter import font as tkfont

from calendar_logic import GRID_CELLS, WEEK_DAYS, day_of_year, week_numbers, weekday_headers
from date_picker import EVENTS, DatePicker, Orientation
from key_navigation import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    ENTER,
    KEYDOWN,
    KEYUP,
    KeyEvent,
)
from selection import CONTROL, SHIFT


# Colours
ACCENT = "#0078D4"
SEL_BG = "#B3D7F2"
RANGE_BG = "#DCEBF7"
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
WN_FG = "#888888"
OVERFLOW_FG = "#AAAAAA"
DISABLED_FG = "#CCCCCC"

# A press this soon after a release of the same key is an auto-repeat
REPEAT_GAP_MS = 2

# Tk keysym -> key identifier understood by the picker
_KEYSYMS = {
    "Up": ARROW_UP,
    "Down": ARROW_DOWN,
    "Left": ARROW_LEFT,
    "Right": ARROW_RIGHT,
    "Return": ENTER,
    "KP_Enter": ENTER,
    "Control_L": CONTROL,
    "Control_R": CONTROL,
    "Shift_L": SHIFT,
    "Shift_R": SHIFT,
}


class _MonthPanel:
    """Pre-allocated widget pool for a single month (header + 6 weeks)."""

    __slots__ = ("frame", "header", "day_headers", "week_nums", "day_cells")

    def __init__(self, parent: tk.Frame, fonts: dict, on_click, on_enter, on_leave) -> None:
        self.frame = tk.Frame(parent, bg=GRID_BG)

        self.header = tk.Label(self.frame, font=fonts["header"], bg=HEADER_BG, fg="#333333")
        self.header.grid(row=0, column=0, columnspan=8, sticky="we", pady=(0, 2))

        tk.Label(
            self.frame, text="Wk", font=fonts["bold"], bg=GRID_BG, fg=WN_FG, width=3,
        ).grid(row=1, column=0)

        self.day_headers: list[tk.Label] = []
        for col in range(WEEK_DAYS):
            lbl = tk.Label(self.frame, font=fonts["bold"], bg=GRID_BG, fg="#333333", width=3)
            lbl.grid(row=1, column=col + 1)
            self.day_headers.append(lbl)

        self.week_nums: list[tk.Label] = []
        self.day_cells: list[tk.Label] = []
        for r in range(GRID_CELLS // WEEK_DAYS):
            wn = tk.Label(self.frame, font=fonts["wn"], bg=GRID_BG, fg=WN_FG, width=3)
            wn.grid(row=r + 2, column=0)
            self.week_nums.append(wn)
            for c in range(WEEK_DAYS):
                cell = tk.Label(
                    self.frame, font=fonts["normal"], bg=GRID_BG, width=3, cursor="hand2",
                    highlightthickness=1, highlightbackground=GRID_BG,
                )
                cell.grid(row=r + 2, column=c + 1)
                cell.bind("<Button-1>", on_click)
                cell.bind("<Enter>", on_enter)
                cell.bind("<Leave>", on_leave)
                self.day_cells.append(cell)


class CalendarWindow:
    """Window showing every month of the picker's view."""

    def __init__(self, picker: DatePicker) -> None:
        self.picker = picker
        self.root = tk.Tk()
        self.root.title(self._title())
        self.root.resizable(False, False)
        self.root.configure(bg=GRID_BG)
        self._setup_fonts()

        # Widget-to-date mapping (filled during _refresh)
        self._widget_dates: dict[int, date] = {}
        self._cells: list[tk.Label] = []
        self._panels: list[_MonthPanel] = []
        self._refresh_pending = False
        # Last KeyRelease time per key, to spot X11 auto-repeat pairs
        self._released_at: dict[str, int] = {}

        self._build_shell()
        self._refresh()

        for event in EVENTS:
            picker.subscribe(event, lambda _value: self._schedule_refresh())
        picker.set_focus_handler(self._focus_cell)

        self.root.bind("<KeyPress>", self._on_key_press)
        self.root.bind("<KeyRelease>", self._on_key_release)
        self.root.bind("<FocusOut>", self._on_focus_out)
        self.root.bind("<Escape>", lambda _e: self.root.destroy())

    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=9)
        self.font_bold = tkfont.Font(family=base, size=9, weight="bold")
        self.font_header = tkfont.Font(family=base, size=10, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")
        self.font_wn = tkfont.Font(family=base, size=8)

    @staticmethod
    def _title() -> str:
        return f"Date Picker  Day: {day_of_year(date.today())}"

    # ------------------------------------------------------------------
    # Build shell (once) — nav bar + months placeholder + footer
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        outer = tk.Frame(self.root, bg=GRID_BG)
        outer.pack(padx=6, pady=4)

        # Navigation row: ◀◀  ◀  Today  ▶  ▶▶
        nav = tk.Frame(outer, bg=GRID_BG)
        nav.pack(fill="x", pady=(0, 2))
        buttons = [
            ("left", "◀◀", lambda _e: self.picker.decrement_year()),
            ("left", "◀", lambda _e: self.picker.decrement_month()),
            ("right", "▶▶", lambda _e: self.picker.increment_year()),
            ("right", "▶", lambda _e: self.picker.increment_month()),
        ]
        for side, text, handler in buttons:
            btn = tk.Label(nav, text=text, font=self.font_nav, bg=GRID_BG, cursor="hand2")
            btn.pack(side=side, padx=6)
            btn.bind("<Button-1>", handler)

        btn_today = tk.Label(
            nav, text="Today", font=self.font_bold, bg=GRID_BG, fg=ACCENT, cursor="hand2",
        )
        btn_today.pack(side="left", padx=6)
        btn_today.bind("<Button-1>", lambda _e: self.picker.go_today())

        self._months_frame = tk.Frame(outer, bg=GRID_BG)
        self._months_frame.pack()

        self._footer = tk.Label(outer, font=self.font_normal, bg=GRID_BG, fg="#555555")
        self._footer.pack(pady=(4, 0))

    # ------------------------------------------------------------------
    # Redraw from picker state
    # ------------------------------------------------------------------
    def _refresh(self) -> None:
        picker = self.picker
        blocks = picker.month_blocks()
        fonts = {
            "header": self.font_header, "bold": self.font_bold,
            "normal": self.font_normal, "wn": self.font_wn,
        }
        while len(self._panels) < len(blocks):
            self._panels.append(_MonthPanel(
                self._months_frame, fonts,
                self._on_click, self._on_cell_enter, self._on_cell_leave,
            ))

        self._widget_dates.clear()
        self._cells = []
        headers = weekday_headers(picker.first_weekday)
        vertical = picker.orientation is Orientation.VERTICAL
        today = date.today()

        for i, (year, month, block) in enumerate(blocks):
            panel = self._panels[i]
            row, col = (i, 0) if vertical else (0, i)
            panel.frame.grid(row=row, column=col, padx=6, pady=2, sticky="n")
            panel.header.configure(text=f"{_cal.month_name[month]} {year}")
            for lbl, abbr in zip(panel.day_headers, headers):
                lbl.configure(text=abbr, fg="#CC0000" if abbr in ("Sat", "Sun") else "#333333")
            for lbl, wn in zip(panel.week_nums, week_numbers(block)):
                lbl.configure(text=wn)
            for cell, d in zip(panel.day_cells, block):
                self._draw_cell(cell, d, month, today)
                self._widget_dates[id(cell)] = d
                self._cells.append(cell)

        for panel in self._panels[len(blocks):]:
            panel.frame.grid_forget()

        self._footer.configure(text=self._footer_text())

    def _schedule_refresh(self) -> None:
        """Redraw once after the current transition, however many values it changed."""
        if self._refresh_pending:
            return
        self._refresh_pending = True
        self.root.after_idle(self._run_refresh)

    def _run_refresh(self) -> None:
        self._refresh_pending = False
        self._refresh()

    def _draw_cell(self, cell: tk.Label, d: date, month: int, today: date) -> None:
        picker = self.picker
        if picker.is_selected(d):
            bg, fg = SEL_BG, "black"
        elif picker.is_in_range(d):
            bg, fg = RANGE_BG, "black"
        else:
            bg, fg = GRID_BG, "black"
        if picker.is_disabled(d):
            fg = DISABLED_FG
        elif d.month != month and bg == GRID_BG:
            fg = OVERFLOW_FG
        focus = ACCENT if picker.is_focused(d) and d.month == month else GRID_BG
        cell.configure(
            text=str(d.day), bg=bg, fg=fg, highlightbackground=focus,
            font=self.font_bold if d == today else self.font_normal,
        )

    def _footer_text(self) -> str:
        picker = self.picker
        if picker.range_start and picker.range_end:
            days = (picker.range_end - picker.range_start).days + 1
            return f"{picker.range_start:%d.%m.%Y} → {picker.range_end:%d.%m.%Y}  ({days} days)"
        if picker.selected_dates:
            return f"{len(picker.selected_dates)} dates selected"
        if picker.selected_date:
            return f"Selected: {picker.selected_date:%d.%m.%Y}"
        return f"Today: {date.today():%d.%m.%Y}"

    def _focus_cell(self, index: int, _d: date) -> None:
        if 0 <= index < len(self._cells):
            self._cells[index].focus_set()

    # ------------------------------------------------------------------
    # Input forwarding
    # ------------------------------------------------------------------
    def _on_click(self, event: tk.Event) -> None:
        d = self._widget_dates.get(id(event.widget))
        if d:
            self.picker.click(d)

    def _on_cell_enter(self, event: tk.Event) -> None:
        d = self._widget_dates.get(id(event.widget))
        if d:
            self.picker.pointer_enter(d)

    def _on_cell_leave(self, event: tk.Event) -> None:
        d = self._widget_dates.get(id(event.widget))
        if d:
            self.picker.pointer_leave(d)

    def _on_key_press(self, event: tk.Event) -> None:
        key = _KEYSYMS.get(event.keysym, event.keysym)
        # Tk has no repeat flag. X11 sends each auto-repeat as a release and a
        # press with the same timestamp; other platforms repeat the press only.
        released = self._released_at.pop(key, None)
        repeat = key in self.picker.held_keys or (
            released is not None and event.time - released <= REPEAT_GAP_MS
        )
        self.picker.handle_key(KeyEvent(key, KEYDOWN, repeat), self.picker.cursor_date)

    def _on_key_release(self, event: tk.Event) -> None:
        key = _KEYSYMS.get(event.keysym, event.keysym)
        self._released_at[key] = event.time
        self.picker.handle_key(KeyEvent(key, KEYUP), self.picker.cursor_date)

    def _on_focus_out(self, _event: tk.Event) -> None:
        # FocusOut also fires when focus hops between cells; only a real
        # loss of window focus leaves nothing focused once Tk settles
        self.root.after_idle(self._check_focus)

    def _check_focus(self) -> None:
        if self.root.focus_get() is None:
            self.picker.focus_lost()

    def run(self) -> None:
        self.root.mainloop()
