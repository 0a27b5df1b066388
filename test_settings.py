import json
import logging
from datetime import date

from settings import load_settings, save_settings


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "absent.json"))
    assert settings["view_count"] == 1
    assert settings["selection_mode"] == "single"
    assert settings["first_weekday"] == 6
    assert settings["disabled_dates"] == []


def test_save_then_load(tmp_path):
    path = str(tmp_path / "settings.json")
    save_settings({
        "view_count": 3,
        "orientation": "vertical",
        "selection_mode": "range",
        "first_weekday": 0,
        "min_date": date(2024, 1, 1),
        "max_date": date(2024, 12, 31),
        "disabled_dates": [date(2024, 12, 25), date(2024, 1, 1)],
    }, path)

    with open(path, encoding="utf-8") as f:
        assert json.load(f)["disabled_dates"] == ["2024-01-01", "2024-12-25"]

    settings = load_settings(path)
    assert settings["view_count"] == 3
    assert settings["orientation"] == "vertical"
    assert settings["selection_mode"] == "range"
    assert settings["min_date"] == date(2024, 1, 1)
    assert settings["disabled_dates"] == [date(2024, 1, 1), date(2024, 12, 25)]


def test_invalid_values_fall_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "view_count": 0,
        "orientation": "diagonal",
        "first_weekday": 9,
        "min_date": "2024-05-01",
        "max_date": "2024-02-01",
        "disabled_dates": ["2024-02-30", "2024-03-01", 7],
    }), encoding="utf-8")
    settings = load_settings(str(path))
    assert settings["view_count"] == 1
    assert settings["orientation"] == "horizontal"
    assert settings["first_weekday"] == 6
    assert settings["min_date"] is None and settings["max_date"] is None
    assert settings["disabled_dates"] == [date(2024, 3, 1)]


def test_corrupt_file_logs_warning(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        settings = load_settings(str(path))
    assert settings["view_count"] == 1
    assert "Could not read settings" in caplog.text
