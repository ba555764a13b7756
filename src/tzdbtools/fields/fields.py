# Copyright 2018 Brian T. Park
#
# MIT License
"""
Value types for the individual columns of the TZ database source files. Each
type knows how to parse itself from a single whitespace-delimited column, and
the symbolic ones (DaySpec, ChangeTime) know how to resolve themselves into
concrete calendar points and Unix timestamps.

The columns look like this:

    # Rule  NAME    FROM    TO    TYPE IN   ON      AT      SAVE    LETTER
    Rule    US      2007    max   -    Mar  Sun>=8  2:00    1:00    D

    # Zone  NAME               STDOFF      RULES   FORMAT  [UNTIL]
    Zone    America/Chicago    -5:50:36    -       LMT     1883 Nov 18 12:09:24

Variant types (Year, TimeSpec, DaySpec, Saving, ChangeTime) are a plain base
class holding the parser and the shared behavior, with one frozen dataclass
per variant.
"""

import re
from dataclasses import dataclass
from enum import Enum
from enum import IntEnum
from typing import Dict
from typing import Optional
from typing import Tuple

from tzdbtools.data_types.tz_types import CalendarError
from tzdbtools.data_types.tz_types import ErrorKind
from tzdbtools.data_types.tz_types import ZoneInfoParseError
from tzdbtools.fields.calendar_utils import calc_day_of_week
from tzdbtools.fields.calendar_utils import days_in_month
from tzdbtools.fields.calendar_utils import hms_to_seconds
from tzdbtools.fields.calendar_utils import is_leap
from tzdbtools.fields.calendar_utils import to_epoch_seconds

_YEAR_RE = re.compile(r'[+-]?[0-9]+')
_HOURS_RE = re.compile(r'[+-]?[0-9]+')
_TWO_DIGITS_RE = re.compile(r'[0-9]{2}')
_ORDINAL_RE = re.compile(r'[0-9]+')
_RELATIVE_DAY_RE = re.compile(r'[0-9]{1,2}')


# -----------------------------------------------------------------------------
# Month, Weekday, TimeType
# -----------------------------------------------------------------------------

class Month(IntEnum):
    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    @classmethod
    def parse(cls, text: str) -> 'Month':
        """Parse 'Jan' or 'January', case-insensitive."""
        lower = text.lower()
        month = _MONTH_NAMES.get(lower)
        if month is None:
            raise ZoneInfoParseError(ErrorKind.FAILED_MONTH_PARSE, lower)
        return month

    def length(self, leap: bool) -> int:
        return days_in_month(self.value, leap)

    def next_in_year(self) -> 'Month':
        """Return the following month. December has no following month in
        the same year.
        """
        if self == Month.DECEMBER:
            raise CalendarError('Cannot wrap year from dec->jan')
        return Month(self.value + 1)

    def prev_in_year(self) -> 'Month':
        """Return the preceding month. January has no preceding month in the
        same year.
        """
        if self == Month.JANUARY:
            raise CalendarError('Cannot wrap year from jan->dec')
        return Month(self.value - 1)


_MONTH_NAMES: Dict[str, Month] = {}
for _month in Month:
    _MONTH_NAMES[_month.name.lower()] = _month
    _MONTH_NAMES[_month.name.lower()[:3]] = _month


class Weekday(IntEnum):
    """Day of week. The values are the residues of the day of week
    congruence in calc_day_of_week().
    """
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def parse(cls, text: str) -> 'Weekday':
        """Parse 'Sun' or 'Sunday', case-insensitive."""
        lower = text.lower()
        weekday = _WEEKDAY_NAMES.get(lower)
        if weekday is None:
            raise ZoneInfoParseError(ErrorKind.FAILED_WEEKDAY_PARSE, lower)
        return weekday

    @classmethod
    def calculate(cls, year: int, month: Month, day: int) -> 'Weekday':
        """Return the day of week of the given date in the proleptic Gregorian
        calendar. Works for negative years.
        """
        return Weekday(calc_day_of_week(year, month.value, day))


_WEEKDAY_NAMES: Dict[str, Weekday] = {}
for _weekday in Weekday:
    _WEEKDAY_NAMES[_weekday.name.lower()] = _weekday
    _WEEKDAY_NAMES[_weekday.name.lower()[:3]] = _weekday


class TimeType(Enum):
    """Reference frame of a time given in the AT or UNTIL columns."""
    WALL = 'w'  # local time with DST applied (default)
    STANDARD = 's'  # local standard time, without DST
    UTC = 'u'  # UTC, also written as 'g' or 'z'

    @classmethod
    def from_char(cls, c: str) -> Optional['TimeType']:
        return _TIME_TYPE_SUFFIXES.get(c)


_TIME_TYPE_SUFFIXES: Dict[str, TimeType] = {
    'w': TimeType.WALL,
    's': TimeType.STANDARD,
    'u': TimeType.UTC,
    'g': TimeType.UTC,
    'z': TimeType.UTC,
}


def split_time_suffix(text: str) -> Tuple[str, Optional[TimeType]]:
    """Split the trailing TimeType letter off an AT or UNTIL column. For
    example '2:00s' -> ('2:00', STANDARD), and '2:00' -> ('2:00', None).
    """
    if text:
        time_type = TimeType.from_char(text[-1])
        if time_type is not None:
            return text[:-1], time_type
    return text, None


# -----------------------------------------------------------------------------
# Year
# -----------------------------------------------------------------------------

class Year:
    """The FROM, TO and UNTIL year columns."""

    @staticmethod
    def parse(text: str) -> 'Year':
        """Parse 'min', 'minimum', 'max', 'maximum' (any case) or a signed
        integer.
        """
        lower = text.lower()
        if lower in ('min', 'minimum'):
            return YEAR_MINIMUM
        if lower in ('max', 'maximum'):
            return YEAR_MAXIMUM
        if not _YEAR_RE.fullmatch(text):
            raise ZoneInfoParseError(ErrorKind.FAILED_YEAR_PARSE, text)
        return YearNumber(int(text))


@dataclass(frozen=True)
class YearMinimum(Year):
    """The earliest possible year."""
    pass


@dataclass(frozen=True)
class YearMaximum(Year):
    """The latest possible year."""
    pass


@dataclass(frozen=True)
class YearNumber(Year):
    number: int


YEAR_MINIMUM = YearMinimum()
YEAR_MAXIMUM = YearMaximum()


# -----------------------------------------------------------------------------
# TimeSpec and TimeSpecAndType
# -----------------------------------------------------------------------------

class TimeSpec:
    """A time of day or a duration: '2', '2:00', '-0:01:15', or '-' for zero.
    Hour 24:00 is midnight at the end of the day.
    """

    @staticmethod
    def parse(text: str) -> 'TimeSpec':
        return _parse_time_spec(text, text)

    def as_seconds(self) -> int:
        """Return the signed number of seconds represented by this time."""
        raise NotImplementedError()

    def with_type(self, time_type: 'TimeType') -> 'TimeSpecAndType':
        return TimeSpecAndType(self, time_type)


@dataclass(frozen=True)
class TimeZero(TimeSpec):
    def as_seconds(self) -> int:
        return 0


@dataclass(frozen=True)
class Hours(TimeSpec):
    hours: int

    def as_seconds(self) -> int:
        return hms_to_seconds(self.hours, 0, 0)


@dataclass(frozen=True)
class HoursMinutes(TimeSpec):
    hours: int
    minutes: int

    def as_seconds(self) -> int:
        return hms_to_seconds(self.hours, self.minutes, 0)


@dataclass(frozen=True)
class HoursMinutesSeconds(TimeSpec):
    hours: int
    minutes: int
    seconds: int

    def as_seconds(self) -> int:
        return hms_to_seconds(self.hours, self.minutes, self.seconds)


TIME_ZERO = TimeZero()


def _parse_time_spec(text: str, original: str) -> TimeSpec:
    """Fold the ':'-separated parts of 'text' into a TimeSpec. The leading
    '-' of the hour also negates the minutes and seconds, so '-0:01:15'
    becomes (0, -1, -15). Errors report 'original'.
    """
    if text == '-':
        return TIME_ZERO

    sign = -1 if text.startswith('-') else 1
    spec: TimeSpec = TIME_ZERO
    for part in text.split(':'):
        if isinstance(spec, TimeZero) and _HOURS_RE.fullmatch(part):
            spec = Hours(int(part))
        elif isinstance(spec, Hours) and _TWO_DIGITS_RE.fullmatch(part):
            spec = HoursMinutes(spec.hours, sign * int(part))
        elif isinstance(spec, HoursMinutes) and _TWO_DIGITS_RE.fullmatch(part):
            spec = HoursMinutesSeconds(
                spec.hours, spec.minutes, sign * int(part))
        else:
            raise ZoneInfoParseError(
                ErrorKind.INVALID_TIME_SPEC_AND_TYPE, original)
    return spec


@dataclass(frozen=True)
class TimeSpecAndType:
    """A TimeSpec qualified by its reference frame, from the AT column of a
    Rule line, or the time part of an UNTIL.
    """
    time: TimeSpec
    time_type: TimeType

    @staticmethod
    def parse(text: str) -> 'TimeSpecAndType':
        """Parse '2:00', '2:00s', '1:00u', '-', etc. A missing suffix means
        wall time.

        The whole column is first tried as a plain time, so that something
        like '-1' is never mistaken for a suffixed value. Only if that fails
        is a trailing w/s/u/g/z stripped off and the remainder parsed again.
        """
        if text == '-':
            return TimeSpecAndType(TIME_ZERO, TimeType.WALL)

        # First attempt: no suffix.
        try:
            return TimeSpecAndType(TimeSpec.parse(text), TimeType.WALL)
        except ZoneInfoParseError:
            pass

        # Second attempt: strip the suffix letter.
        time_text, time_type = split_time_suffix(text)
        if time_type is None:
            raise ZoneInfoParseError(
                ErrorKind.INVALID_TIME_SPEC_AND_TYPE, text)
        return TimeSpecAndType(_parse_time_spec(time_text, text), time_type)

    def as_seconds(self) -> int:
        return self.time.as_seconds()


# -----------------------------------------------------------------------------
# DaySpec
# -----------------------------------------------------------------------------

class DaySpec:
    """The ON column of a Rule, or the day part of an UNTIL: '5', 'lastSun',
    'Sun>=8', 'Fri<=1'.
    """

    @staticmethod
    def parse(text: str) -> 'DaySpec':
        if _ORDINAL_RE.fullmatch(text):
            return Ordinal(int(text))
        if text.startswith('last'):
            return Last(Weekday.parse(text[4:]))

        if len(text) < 3:
            raise ZoneInfoParseError(ErrorKind.INVALID_DAY_SPEC, text)
        weekday = Weekday.parse(text[:3])

        operator = text[3:5]
        day_text = text[5:]
        if not _RELATIVE_DAY_RE.fullmatch(day_text):
            raise ZoneInfoParseError(ErrorKind.INVALID_DAY_SPEC, text)
        if operator == '>=':
            return FirstOnOrAfter(weekday, int(day_text))
        if operator == '<=':
            return LastOnOrBefore(weekday, int(day_text))
        raise ZoneInfoParseError(ErrorKind.INVALID_DAY_SPEC, text)

    def to_concrete_day(self, year: int, month: Month) -> Tuple[Month, int]:
        """Return the actual (month, day) of this day spec in the given year
        and month. The result can shift into the previous or next month, but
        never into another year.
        """
        raise NotImplementedError()


@dataclass(frozen=True)
class Ordinal(DaySpec):
    """A fixed day of the month. Not checked against the month length."""
    day: int

    def to_concrete_day(self, year: int, month: Month) -> Tuple[Month, int]:
        return (month, self.day)


@dataclass(frozen=True)
class Last(DaySpec):
    """The last given weekday of the month, e.g. 'lastSun'."""
    weekday: Weekday

    def to_concrete_day(self, year: int, month: Month) -> Tuple[Month, int]:
        length = month.length(is_leap(year))
        for day in range(length, length - 7, -1):
            if Weekday.calculate(year, month, day) == self.weekday:
                return (month, day)
        raise CalendarError(
            f'No {self.weekday.name} in {year}-{month.value:02}')


@dataclass(frozen=True)
class LastOnOrBefore(DaySpec):
    """The last given weekday on or before the day, e.g. 'Fri<=1'. May fall
    into the previous month.
    """
    weekday: Weekday
    day: int

    def to_concrete_day(self, year: int, month: Month) -> Tuple[Month, int]:
        for day in range(self.day, self.day - 7, -1):
            if day >= 1:
                if Weekday.calculate(year, month, day) == self.weekday:
                    return (month, day)
            else:
                # 'day' is zero or negative, counting back from the end of
                # the previous month.
                prev_month = month.prev_in_year()
                prev_day = prev_month.length(is_leap(year)) + day
                if Weekday.calculate(year, prev_month, prev_day) \
                        == self.weekday:
                    return (prev_month, prev_day)
        raise CalendarError(
            f'No {self.weekday.name} on or before {year}-{month.value:02}-'
            f'{self.day:02}')


@dataclass(frozen=True)
class FirstOnOrAfter(DaySpec):
    """The first given weekday on or after the day, e.g. 'Sun>=8'. May fall
    into the next month.
    """
    weekday: Weekday
    day: int

    def to_concrete_day(self, year: int, month: Month) -> Tuple[Month, int]:
        length = month.length(is_leap(year))
        for day in range(self.day, self.day + 8):
            if day <= length:
                if Weekday.calculate(year, month, day) == self.weekday:
                    return (month, day)
            else:
                next_month = month.next_in_year()
                next_day = day - length
                if Weekday.calculate(year, next_month, next_day) \
                        == self.weekday:
                    return (next_month, next_day)
        raise CalendarError(
            f'No {self.weekday.name} on or after {year}-{month.value:02}-'
            f'{self.day:02}')


# -----------------------------------------------------------------------------
# Saving
# -----------------------------------------------------------------------------

class Saving:
    """The RULES (or SAVE) column of a Zone line: '-', the name of a set of
    Rules, or a fixed amount of DST.
    """

    @staticmethod
    def parse(text: str) -> 'Saving':
        if text == '-':
            return NO_SAVING
        if all(c in '-_' or c.isalpha() for c in text):
            return Multiple(text)
        try:
            return OneOff(TimeSpec.parse(text))
        except ZoneInfoParseError:
            raise ZoneInfoParseError(
                ErrorKind.COULD_NOT_PARSE_SAVING, text) from None


@dataclass(frozen=True)
class NoSaving(Saving):
    """Standard time only."""
    pass


@dataclass(frozen=True)
class OneOff(Saving):
    """A fixed DST offset, as if a single Rule applied for the whole era."""
    time: TimeSpec


@dataclass(frozen=True)
class Multiple(Saving):
    """Apply all Rules with this name."""
    name: str


NO_SAVING = NoSaving()


# -----------------------------------------------------------------------------
# ChangeTime
# -----------------------------------------------------------------------------

class ChangeTime:
    """The UNTIL columns of a Zone or continuation line, with as much
    precision as was given. Missing fields default to the start of the
    period: the first of the month at 00:00 wall time.
    """
    year: Year

    def year_number(self) -> int:
        """Return the year as an integer. The symbolic 'min' and 'max' years
        have no numeric value.
        """
        if isinstance(self.year, YearNumber):
            return self.year.number
        raise CalendarError(f'Cannot resolve {self.year} to a number')

    def to_timestamp(self, utc_offset: int, dst_offset: int) -> int:
        """Convert to seconds since the Unix epoch. The 'utc_offset' (STDOFF)
        and 'dst_offset' (SAVE) in seconds are those in effect just before
        the change, and are used to convert the local time to UTC.
        """
        raise NotImplementedError()


@dataclass(frozen=True)
class UntilYear(ChangeTime):
    year: Year

    def to_timestamp(self, utc_offset: int, dst_offset: int) -> int:
        year = self.year_number()
        return to_epoch_seconds(year, 1, 1) - (utc_offset + dst_offset)


@dataclass(frozen=True)
class UntilMonth(ChangeTime):
    year: Year
    month: Month

    def to_timestamp(self, utc_offset: int, dst_offset: int) -> int:
        year = self.year_number()
        return (
            to_epoch_seconds(year, self.month.value, 1)
            - (utc_offset + dst_offset)
        )


@dataclass(frozen=True)
class UntilDay(ChangeTime):
    year: Year
    month: Month
    day: DaySpec

    def to_timestamp(self, utc_offset: int, dst_offset: int) -> int:
        year = self.year_number()
        month, day = self.day.to_concrete_day(year, self.month)
        return (
            to_epoch_seconds(year, month.value, day)
            - (utc_offset + dst_offset)
        )


@dataclass(frozen=True)
class UntilTime(ChangeTime):
    year: Year
    month: Month
    day: DaySpec
    time: TimeSpecAndType

    def to_timestamp(self, utc_offset: int, dst_offset: int) -> int:
        year = self.year_number()
        month, day = self.day.to_concrete_day(year, self.month)
        local_seconds = (
            to_epoch_seconds(year, month.value, day) + self.time.as_seconds()
        )
        if self.time.time_type == TimeType.UTC:
            return local_seconds
        if self.time.time_type == TimeType.STANDARD:
            return local_seconds - utc_offset
        return local_seconds - (utc_offset + dst_offset)
