"""Entry point — loads settings and shows the date picker window."""

import argparse
import logging

from calendar_window import CalendarWindow
from date_picker import DatePicker
from settings import load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Mini date picker")
    parser.add_argument("--settings", help="path to a settings JSON file")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    picker = DatePicker.from_settings(load_settings(args.settings))
    CalendarWindow(picker).run()


if __name__ == "__main__":
    main()
