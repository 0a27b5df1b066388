"""JSON-based settings persistence for the date picker."""

import json
import logging
import os
from datetime import date

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".mini-date-picker-settings.json")

_DEFAULTS = {
    "view_count": 1,
    "orientation": "horizontal",
    "selection_mode": "single",
    "first_weekday": 6,  # Sunday
    "min_date": None,
    "max_date": None,
    "disabled_dates": [],
}

_ORIENTATIONS = ("horizontal", "vertical")
_SELECTION_MODES = ("single", "multiple", "range")


def _parse_date(value) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing or invalid keys.

    Dates come back as ``datetime.date`` objects.
    """
    settings = dict(_DEFAULTS)
    settings["disabled_dates"] = []
    path = path or _SETTINGS_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read settings from %s: %s", path, exc)
        return settings
    if not isinstance(stored, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", path)
        return settings

    view_count = stored.get("view_count")
    if isinstance(view_count, int) and not isinstance(view_count, bool) and view_count >= 1:
        settings["view_count"] = view_count
    first_weekday = stored.get("first_weekday")
    if isinstance(first_weekday, int) and not isinstance(first_weekday, bool) and 0 <= first_weekday <= 6:
        settings["first_weekday"] = first_weekday
    if stored.get("orientation") in _ORIENTATIONS:
        settings["orientation"] = stored["orientation"]
    if stored.get("selection_mode") in _SELECTION_MODES:
        settings["selection_mode"] = stored["selection_mode"]
    for key in ("min_date", "max_date"):
        settings[key] = _parse_date(stored.get(key))
    if settings["min_date"] and settings["max_date"] and settings["min_date"] > settings["max_date"]:
        logger.warning("Ignoring min/max dates in %s: min is after max", path)
        settings["min_date"] = settings["max_date"] = None
    if isinstance(stored.get("disabled_dates"), list):
        parsed = (_parse_date(v) for v in stored["disabled_dates"])
        settings["disabled_dates"] = [d for d in parsed if d is not None]
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk; dates are written as ISO strings."""
    out = {}
    for key in _DEFAULTS:
        value = settings.get(key, _DEFAULTS[key])
        if isinstance(value, date):
            value = value.isoformat()
        elif key == "disabled_dates":
            value = sorted(d.isoformat() if isinstance(d, date) else d for d in value)
        elif hasattr(value, "value"):
            # Orientation / SelectionMode enums
            value = value.value
        out[key] = value
    with open(path or _SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(out, f, indent=2)
