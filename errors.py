"""Exception types raised by the date picker core."""


class DatePickerError(Exception):
    """Base exception for all date picker errors."""


class InvalidConfiguration(DatePickerError, ValueError):
    """A configuration value was rejected.

    Raised when:
    - view count is below 1
    - min date lies after max date
    - first weekday is outside 0-6
    - an unknown selection mode or orientation name is given

    The previously configured value is kept.
    """
