# Copyright 2018 Brian T. Park
#
# MIT License

from enum import Enum
from typing import Dict
from typing import Optional
from typing_extensions import TypedDict

"""
Data types shared by the fields and extractor packages: global constants, the
error taxonomy of the line parser, and the dict-shaped records produced by the
Extractor.
"""

# -----------------------------------------------------------------------------
# Constants used by various modules.
# -----------------------------------------------------------------------------

# Unix Epoch is 1970-01-01 00:00:00 UTC.
UNIX_EPOCH_YEAR: int = 1970

SECONDS_PER_MINUTE: int = 60
SECONDS_PER_HOUR: int = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY: int = 24 * SECONDS_PER_HOUR

# Values accepted in the TYPE column of a RULE line. Some older files use the
# Unicode HYPHEN (U+2010) instead of the ASCII HYPHEN-MINUS.
RULE_TYPE_HYPHENS = ('-', '‐')

# Characters which separate the columns of a line. Only ASCII whitespace is
# recognized, so NBSP and friends stay inside a column.
COLUMN_SEPARATORS = ' \t\n\r\f'

# Starts a comment which runs to the end of the line.
COMMENT_CHAR = '#'


# -----------------------------------------------------------------------------
# Errors.
# -----------------------------------------------------------------------------

class ErrorKind(Enum):
    """Reason why a single line (or a single column of a line) could not be
    parsed.
    """
    FAILED_YEAR_PARSE = 'FailedYearParse'
    FAILED_MONTH_PARSE = 'FailedMonthParse'
    FAILED_WEEKDAY_PARSE = 'FailedWeekdayParse'
    INVALID_LINE_TYPE = 'InvalidLineType'
    TYPE_COLUMN_CONTAINED_NON_HYPHEN = 'TypeColumnContainedNonHyphen'
    COULD_NOT_PARSE_SAVING = 'CouldNotParseSaving'
    INVALID_DAY_SPEC = 'InvalidDaySpec'
    INVALID_TIME_SPEC_AND_TYPE = 'InvalidTimeSpecAndType'
    # Not produced by the current parsers.
    NON_WALL_CLOCK_IN_TIME_SPEC = 'NonWallClockInTimeSpec'
    NOT_PARSED_AS_RULE_LINE = 'NotParsedAsRuleLine'
    NOT_PARSED_AS_ZONE_LINE = 'NotParsedAsZoneLine'
    NOT_PARSED_AS_LINK_LINE = 'NotParsedAsLinkLine'


_ERROR_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.FAILED_YEAR_PARSE: 'failed to parse as a year value',
    ErrorKind.FAILED_MONTH_PARSE: 'failed to parse as a month value',
    ErrorKind.FAILED_WEEKDAY_PARSE: 'failed to parse as a weekday value',
    ErrorKind.INVALID_LINE_TYPE: 'line with invalid format',
    ErrorKind.TYPE_COLUMN_CONTAINED_NON_HYPHEN:
        "'type' column is not a hyphen but has the value",
    ErrorKind.COULD_NOT_PARSE_SAVING: 'failed to parse RULES column',
    ErrorKind.INVALID_DAY_SPEC: "invalid day specification ('ON')",
    ErrorKind.INVALID_TIME_SPEC_AND_TYPE: 'invalid time',
    ErrorKind.NON_WALL_CLOCK_IN_TIME_SPEC:
        'time value not given as wall time',
    ErrorKind.NOT_PARSED_AS_RULE_LINE: 'failed to parse line as a rule',
    ErrorKind.NOT_PARSED_AS_ZONE_LINE: 'failed to parse line as a zone',
    ErrorKind.NOT_PARSED_AS_LINK_LINE: 'failed to parse line as a link',
}


class ZoneInfoParseError(Exception):
    """A line, or one of its columns, could not be parsed. The 'text' is the
    offending column (or the whole line for the NOT_PARSED_AS_* and
    INVALID_LINE_TYPE kinds).
    """
    def __init__(self, kind: ErrorKind, text: str):
        # args must match the constructor arguments for pickle to rebuild
        # the error.
        super().__init__(kind, text)
        self.kind = kind
        self.text = text

    def __str__(self) -> str:
        return f'{_ERROR_MESSAGES[self.kind]}: "{self.text}"'

    def __repr__(self) -> str:
        return f'ZoneInfoParseError({self.kind.value}, {self.text!r})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZoneInfoParseError):
            return NotImplemented
        return self.kind == other.kind and self.text == other.text

    def __hash__(self) -> int:
        return hash((self.kind, self.text))


class CalendarError(ValueError):
    """A calendar computation was asked for something the tz database never
    expresses, e.g. wrapping from December into January, or converting a
    'min'/'max' year into a timestamp. Indicates a bug in the caller, not bad
    input text.
    """
    pass


class ExtractorError(Exception):
    """Raised by the Extractor in strict mode for the first bad line."""
    def __init__(self, source: str, line_number: int, reason: str):
        super().__init__(source, line_number, reason)
        self.source = source
        self.line_number = line_number
        self.reason = reason

    def __str__(self) -> str:
        return f'{self.source}:{self.line_number}: {self.reason}'


# -----------------------------------------------------------------------------
# Data types produced by extractor.py.
# -----------------------------------------------------------------------------

class InvalidLine(TypedDict):
    """A line skipped by the Extractor in non-strict mode."""
    source: str  # name of the file (or other source) given by the caller
    line_number: int  # 1-based line number within the source
    raw_line: str  # the original line, including any comment
    reason: str  # human readable reason
    kind: Optional[str]  # ErrorKind.value if it was a parsing error
