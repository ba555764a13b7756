# Copyright 2018 Brian T. Park
#
# MIT License
"""
Parse a single line of a TZ database file into a Rule, Zone, Continuation,
Link or Space record. Each record type is parsed by a state machine which
walks the whitespace-separated columns from left to right, with one state per
expected column. Example:

    >>> parse_line('Link  Europe/Istanbul  Asia/Istanbul')
    Link(existing='Europe/Istanbul', new='Asia/Istanbul')

Quoted columns containing whitespace are not supported, since the TZ database
does not use them.
"""

import re
from enum import IntEnum
from typing import Iterable
from typing import List
from typing import Optional

from tzdbtools.data_types.tz_types import COLUMN_SEPARATORS
from tzdbtools.data_types.tz_types import COMMENT_CHAR
from tzdbtools.data_types.tz_types import ErrorKind
from tzdbtools.data_types.tz_types import RULE_TYPE_HYPHENS
from tzdbtools.data_types.tz_types import ZoneInfoParseError
from tzdbtools.extractor.records import Continuation
from tzdbtools.extractor.records import Line
from tzdbtools.extractor.records import Link
from tzdbtools.extractor.records import Rule
from tzdbtools.extractor.records import SPACE
from tzdbtools.extractor.records import Zone
from tzdbtools.extractor.records import ZoneInfo
from tzdbtools.fields.fields import ChangeTime
from tzdbtools.fields.fields import DaySpec
from tzdbtools.fields.fields import Month
from tzdbtools.fields.fields import NO_SAVING
from tzdbtools.fields.fields import Ordinal
from tzdbtools.fields.fields import Saving
from tzdbtools.fields.fields import TIME_ZERO
from tzdbtools.fields.fields import TimeSpec
from tzdbtools.fields.fields import TimeSpecAndType
from tzdbtools.fields.fields import TimeType
from tzdbtools.fields.fields import UntilDay
from tzdbtools.fields.fields import UntilMonth
from tzdbtools.fields.fields import UntilTime
from tzdbtools.fields.fields import UntilYear
from tzdbtools.fields.fields import Year
from tzdbtools.fields.fields import YEAR_MINIMUM

_COLUMN_RE = re.compile('[^' + COLUMN_SEPARATORS + ']+')


class _RuleColumn(IntEnum):
    """The next column expected on a RULE line."""
    KEYWORD = 0
    NAME = 1
    FROM = 2
    TO = 3
    TYPE = 4
    IN = 5
    ON = 6
    AT = 7
    SAVE = 8
    LETTERS = 9


class _ZoneColumn(IntEnum):
    """The next column expected after the NAME of a ZONE line, or on a
    continuation line.
    """
    STDOFF = 0
    RULES = 1
    FORMAT = 2
    UNTIL_YEAR = 3
    UNTIL_MONTH = 4
    UNTIL_DAY = 5
    UNTIL_TIME = 6


def split_columns(text: str) -> List[str]:
    """Split on runs of ASCII whitespace."""
    return _COLUMN_RE.findall(text)


def strip_comment(text: str) -> str:
    """Remove everything from the first '#' onwards."""
    index = text.find(COMMENT_CHAR)
    return text if index < 0 else text[:index]


def parse_line(text: str) -> Line:
    """Classify the line and parse it into the matching record.

    Raises ZoneInfoParseError if the line is not one of the known types or
    one of its columns is invalid.
    """
    content = strip_comment(text)
    if not content.strip():
        return SPACE
    if content.startswith('Zone'):
        return parse_zone(content)
    if content.startswith((' ', '\t')):
        return Continuation(parse_zone_info(split_columns(content), content))
    if content.startswith('Rule'):
        return parse_rule(content)
    if content.startswith('Link'):
        return parse_link(content)
    raise ZoneInfoParseError(ErrorKind.INVALID_LINE_TYPE, content)


def parse_rule(text: str) -> Rule:
    """Parse a RULE line. All 10 columns are required, anything after the
    LETTER/S column is ignored.
    """
    state = _RuleColumn.KEYWORD
    name = ''
    from_year: Year = YEAR_MINIMUM
    to_year: Optional[Year] = None
    month = Month.JANUARY
    day: DaySpec = Ordinal(1)
    time = TimeSpecAndType(TIME_ZERO, TimeType.WALL)
    time_to_add: TimeSpec = TIME_ZERO

    for column in split_columns(text):
        if column.startswith(COMMENT_CHAR):
            break

        if state == _RuleColumn.KEYWORD:
            if column != 'Rule':
                break
        elif state == _RuleColumn.NAME:
            name = column
        elif state == _RuleColumn.FROM:
            from_year = Year.parse(column)
        elif state == _RuleColumn.TO:
            to_year = None if column == 'only' else Year.parse(column)
        elif state == _RuleColumn.TYPE:
            # Historically a 'year type', now always a hyphen.
            if column not in RULE_TYPE_HYPHENS:
                raise ZoneInfoParseError(
                    ErrorKind.TYPE_COLUMN_CONTAINED_NON_HYPHEN, column)
        elif state == _RuleColumn.IN:
            month = Month.parse(column)
        elif state == _RuleColumn.ON:
            day = DaySpec.parse(column)
        elif state == _RuleColumn.AT:
            time = TimeSpecAndType.parse(column)
        elif state == _RuleColumn.SAVE:
            time_to_add = TimeSpec.parse(column)
        else:
            return Rule(
                name=name,
                from_year=from_year,
                to_year=to_year,
                month=month,
                day=day,
                time=time,
                time_to_add=time_to_add,
                letters=None if column == '-' else column,
            )
        state = _RuleColumn(state + 1)

    raise ZoneInfoParseError(ErrorKind.NOT_PARSED_AS_RULE_LINE, text)


def parse_zone(text: str) -> Zone:
    """Parse a ZONE line: the 'Zone' keyword, the NAME, then the columns
    handled by parse_zone_info().
    """
    columns = split_columns(text)
    if len(columns) < 2 or columns[0] != 'Zone' \
            or columns[1].startswith(COMMENT_CHAR):
        raise ZoneInfoParseError(ErrorKind.NOT_PARSED_AS_ZONE_LINE, text)
    return Zone(name=columns[1], info=parse_zone_info(columns[2:], text))


def parse_zone_info(columns: Iterable[str], text: str) -> ZoneInfo:
    """Parse the STDOFF, RULES, FORMAT and optional UNTIL columns of a ZONE
    or continuation line. The number of UNTIL columns (0 to 4) selects the
    precision of the returned ChangeTime. The 'text' is the whole line, used
    for error messages.
    """
    state = _ZoneColumn.STDOFF
    utc_offset: TimeSpec = TIME_ZERO
    saving: Saving = NO_SAVING
    format_string = ''
    year: Year = YEAR_MINIMUM
    month = Month.JANUARY
    day: DaySpec = Ordinal(1)

    for column in columns:
        # A comment could in theory follow a column without whitespace, but
        # the TZ database never does that.
        if column.startswith(COMMENT_CHAR):
            break

        if state == _ZoneColumn.STDOFF:
            utc_offset = TimeSpec.parse(column)
        elif state == _ZoneColumn.RULES:
            saving = Saving.parse(column)
        elif state == _ZoneColumn.FORMAT:
            format_string = column
        elif state == _ZoneColumn.UNTIL_YEAR:
            year = Year.parse(column)
        elif state == _ZoneColumn.UNTIL_MONTH:
            month = Month.parse(column)
        elif state == _ZoneColumn.UNTIL_DAY:
            day = DaySpec.parse(column)
        else:
            return ZoneInfo(
                utc_offset=utc_offset,
                saving=saving,
                format=format_string,
                time=UntilTime(
                    year, month, day, TimeSpecAndType.parse(column)),
            )
        state = _ZoneColumn(state + 1)

    until: Optional[ChangeTime]
    if state < _ZoneColumn.UNTIL_YEAR:
        raise ZoneInfoParseError(ErrorKind.NOT_PARSED_AS_ZONE_LINE, text)
    elif state == _ZoneColumn.UNTIL_YEAR:
        until = None
    elif state == _ZoneColumn.UNTIL_MONTH:
        until = UntilYear(year)
    elif state == _ZoneColumn.UNTIL_DAY:
        until = UntilMonth(year, month)
    else:
        until = UntilDay(year, month, day)

    return ZoneInfo(
        utc_offset=utc_offset,
        saving=saving,
        format=format_string,
        time=until,
    )


def parse_link(text: str) -> Link:
    """Parse a LINK line: 'Link', the existing (target) zone name, then the
    new (alias) name. Extra columns are ignored.
    """
    columns: List[str] = []
    for column in split_columns(text):
        if column.startswith(COMMENT_CHAR):
            break
        columns.append(column)

    if len(columns) < 3 or columns[0] != 'Link':
        raise ZoneInfoParseError(ErrorKind.NOT_PARSED_AS_LINK_LINE, text)
    return Link(existing=columns[1], new=columns[2])
