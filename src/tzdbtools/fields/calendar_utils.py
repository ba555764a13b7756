# Copyright 2018 Brian T. Park
#
# MIT License
"""
Calendar primitives for the proleptic Gregorian calendar. All functions accept
any integer year, including 0 and negative years, using Python's floor
division so that the leap year cycle extends backwards without a break.
"""

from typing import List

from tzdbtools.data_types.tz_types import SECONDS_PER_DAY
from tzdbtools.data_types.tz_types import SECONDS_PER_HOUR
from tzdbtools.data_types.tz_types import SECONDS_PER_MINUTE
from tzdbtools.data_types.tz_types import UNIX_EPOCH_YEAR

DAYS_IN_MONTH: List[int] = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]

# Number of days from Jan 1 to the first of each month.
DAYS_BEFORE_MONTH: List[int] = [
    0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334
]
DAYS_BEFORE_MONTH_LEAP: List[int] = [
    0, 31, 60, 91, 121, 152, 182, 213, 244, 274, 305, 335
]

# Month offsets of the weekday congruence, with Jan and Feb counted as
# months of the previous year.
_WEEKDAY_MONTH_OFFSETS: List[int] = [0, 3, 2, 5, 0, 3, 5, 1, 4, 6, 2, 4]


def is_leap(year: int) -> bool:
    """Years divisible by 4, except centuries, unless divisible by 400."""
    return (year % 4 == 0) and ((year % 100 != 0) or (year % 400 == 0))


def days_in_month(month: int, leap: bool) -> int:
    """Return the length of the month (1-12) in a leap or non-leap year."""
    days = DAYS_IN_MONTH[month - 1]
    if month == 2 and leap:
        days += 1
    return days


def calc_day_of_week(year: int, month: int, day: int) -> int:
    """Return the day of week of the given date, 0=Sunday to 6=Saturday.

    The day does not need to be inside the month: (2016, 2, 30) gives the
    day of week of 2016-03-01.
    """
    y = year - 1 if month < 3 else year
    return (
        y + y // 4 - y // 100 + y // 400
        + _WEEKDAY_MONTH_OFFSETS[month - 1] + day
    ) % 7


def days_before_year(year: int) -> int:
    """Number of days from 1970-01-01 to Jan 1 of the given year. Negative
    for years before 1970.
    """
    return _days_since_year_one(year) - _days_since_year_one(UNIX_EPOCH_YEAR)


def _days_since_year_one(year: int) -> int:
    y = year - 1
    return 365 * y + y // 4 - y // 100 + y // 400


def seconds_before_year(year: int) -> int:
    """Return the number of seconds from the Unix epoch to 00:00:00 UTC of
    Jan 1 of the given year.
    """
    return days_before_year(year) * SECONDS_PER_DAY


def to_epoch_seconds(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> int:
    """Convert the (year, month, day, hour, minute, second) to seconds since
    the Unix epoch, treating the date as UTC. The hour, minute and second are
    added as-is, so 24:00 or negative components are allowed.
    """
    if is_leap(year):
        days_before_month = DAYS_BEFORE_MONTH_LEAP[month - 1]
    else:
        days_before_month = DAYS_BEFORE_MONTH[month - 1]
    return (
        seconds_before_year(year)
        + days_before_month * SECONDS_PER_DAY
        + (day - 1) * SECONDS_PER_DAY
        + hms_to_seconds(hour, minute, second)
    )


def hms_to_seconds(h: int, m: int, s: int) -> int:
    """Convert h:m:s to seconds. Each component carries its own sign.
    """
    return h * SECONDS_PER_HOUR + m * SECONDS_PER_MINUTE + s
