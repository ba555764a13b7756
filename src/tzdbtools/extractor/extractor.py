# Copyright 2018 Brian T. Park
#
# MIT License
"""
Collect the parsed lines of one or more TZ database files into maps of Rules,
Zones and Links. The caller reads the files; the Extractor only sees lines.

Usage:

    extractor = Extractor(strict=True)
    for name in ['africa', 'europe', 'northamerica']:
        with open(os.path.join(input_dir, name), encoding='utf-8') as f:
            extractor.parse_lines(f, source=name)
    extractor.print_summary()
    rules_map, zones_map, links_map = extractor.get_data()
"""

import logging
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import Tuple

from tzdbtools.data_types.tz_types import ExtractorError
from tzdbtools.data_types.tz_types import InvalidLine
from tzdbtools.data_types.tz_types import ZoneInfoParseError
from tzdbtools.extractor.line_parser import parse_line
from tzdbtools.extractor.records import Continuation
from tzdbtools.extractor.records import Link
from tzdbtools.extractor.records import Rule
from tzdbtools.extractor.records import Space
from tzdbtools.extractor.records import Zone
from tzdbtools.extractor.records import ZoneInfo

# Map of ruleName -> Rule[], in source order.
RulesMap = Dict[str, List[Rule]]

# Map of zoneName -> ZoneInfo[], the Zone line followed by its continuation
# lines.
ZonesMap = Dict[str, List[ZoneInfo]]

# Map of linkName -> zoneName.
LinksMap = Dict[str, str]


class Extractor:
    """Consume the lines of TZ database files, and group the records by name.
    A Zone line opens a zone block which collects the following continuation
    lines, until the next Zone, Rule or Link line. Blank and comment lines
    do not end the block.
    """
    def __init__(self, strict: bool = True):
        """
        Args:
            strict: raise ExtractorError on the first invalid line, instead
                of logging it and skipping it
        """
        self.strict = strict

        self.rules_map: RulesMap = {}
        self.zones_map: ZonesMap = {}
        self.links_map: LinksMap = {}
        self.invalid_lines: List[InvalidLine] = []

        self.line_count = 0
        self.space_count = 0
        self.rule_count = 0
        self.zone_count = 0
        self.continuation_count = 0
        self.link_count = 0

    def parse_lines(self, lines: Iterable[str], source: str = '') -> None:
        """Parse the lines of a single source. A zone block never continues
        from a previous call.
        """
        logging.info("Parsing '%s'", source)
        current_zone: Optional[str] = None
        for line_number, raw_line in enumerate(lines, start=1):
            self.line_count += 1
            line = raw_line.rstrip('\r\n')
            try:
                record = parse_line(line)
            except ZoneInfoParseError as e:
                # Only an invalid continuation line stays in the zone block.
                if not line.startswith((' ', '\t')):
                    current_zone = None
                self._add_invalid_line(
                    source, line_number, line, str(e), e.kind.value, e)
                continue

            if isinstance(record, Space):
                self.space_count += 1
            elif isinstance(record, Zone):
                current_zone = None
                if record.name in self.zones_map:
                    self._add_invalid_line(
                        source, line_number, line,
                        f"Duplicate zone '{record.name}'")
                    continue
                self.zone_count += 1
                self.zones_map[record.name] = [record.info]
                current_zone = record.name
            elif isinstance(record, Continuation):
                if current_zone is None:
                    self._add_invalid_line(
                        source, line_number, line,
                        'Continuation line without a preceding Zone')
                    continue
                self.continuation_count += 1
                self.zones_map[current_zone].append(record.info)
            elif isinstance(record, Rule):
                current_zone = None
                self.rule_count += 1
                rules = self.rules_map.get(record.name)
                if rules is None:
                    rules = []
                    self.rules_map[record.name] = rules
                rules.append(record)
            elif isinstance(record, Link):
                current_zone = None
                if record.new in self.links_map:
                    self._add_invalid_line(
                        source, line_number, line,
                        f"Duplicate link '{record.new}'")
                    continue
                self.link_count += 1
                self.links_map[record.new] = record.existing

    def get_data(self) -> Tuple[RulesMap, ZonesMap, LinksMap]:
        return self.rules_map, self.zones_map, self.links_map

    def print_summary(self) -> None:
        logging.info(
            'Line count: %d (%d blank or comment)',
            self.line_count, self.space_count)
        logging.info(
            'Rule lines: %d; Zone lines: %d; Continuation lines: %d; '
            'Link lines: %d',
            self.rule_count,
            self.zone_count,
            self.continuation_count,
            self.link_count,
        )
        logging.info(
            'Rules: %d; Zones: %d; Links: %d',
            len(self.rules_map), len(self.zones_map), len(self.links_map))
        logging.info('Invalid lines: %d', len(self.invalid_lines))

    def _add_invalid_line(
        self,
        source: str,
        line_number: int,
        line: str,
        reason: str,
        kind: Optional[str] = None,
        cause: Optional[ZoneInfoParseError] = None,
    ) -> None:
        if self.strict:
            raise ExtractorError(source, line_number, reason) from cause

        logging.warning('%s:%d: %s', source, line_number, reason)
        self.invalid_lines.append({
            'source': source,
            'line_number': line_number,
            'raw_line': line,
            'reason': reason,
            'kind': kind,
        })
