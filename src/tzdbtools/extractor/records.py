# Copyright 2018 Brian T. Park
#
# MIT License
"""
Records produced by the line parser, one per line of a TZ database file. A
parsed line is exactly one of Space, Zone, Continuation, Rule or Link.
"""

from dataclasses import dataclass
from typing import Optional
from typing import Union

from tzdbtools.fields.fields import ChangeTime
from tzdbtools.fields.fields import DaySpec
from tzdbtools.fields.fields import Month
from tzdbtools.fields.fields import Saving
from tzdbtools.fields.fields import TimeSpec
from tzdbtools.fields.fields import TimeSpecAndType
from tzdbtools.fields.fields import Year


@dataclass(frozen=True)
class Rule:
    """A RULE line:

    # Rule  NAME  FROM  TO    TYPE  IN   ON       AT    SAVE  LETTER/S
    Rule    US    1967  1973  -     Apr  lastSun  2:00  1:00  D
    """
    name: str
    from_year: Year
    to_year: Optional[Year]  # None means 'only', i.e. from_year alone
    month: Month
    day: DaySpec
    time: TimeSpecAndType
    time_to_add: TimeSpec
    letters: Optional[str]  # None if '-'


@dataclass(frozen=True)
class ZoneInfo:
    """The columns shared by a ZONE line and its continuation lines:

    # Zone  NAME                STDOFF  RULES  FORMAT  [UNTIL]
    Zone    Australia/Adelaide  9:30    Aus    AC%sT   1971 Oct 31  2:00:00
                                9:30    Aus    AC%sT
    """
    utc_offset: TimeSpec  # STDOFF
    saving: Saving  # RULES
    format: str  # abbreviation format, '%s' left unexpanded
    time: Optional[ChangeTime]  # None for the last, open-ended era


@dataclass(frozen=True)
class Zone:
    """The first line of a zone. The name appears only on this line."""
    name: str
    info: ZoneInfo


@dataclass(frozen=True)
class Link:
    """A LINK line, which makes 'new' an alias of the 'existing' zone."""
    existing: str
    new: str


@dataclass(frozen=True)
class Space:
    """A blank or comment-only line."""
    pass


@dataclass(frozen=True)
class Continuation:
    """A continuation line of the most recent Zone. The zone it belongs to
    is tracked by the caller.
    """
    info: ZoneInfo


SPACE = Space()

Line = Union[Space, Zone, Continuation, Rule, Link]
