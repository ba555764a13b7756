# Copyright 2018 Brian T. Park
#
# MIT License

import pickle
import unittest

from tzdbtools.data_types.tz_types import ErrorKind
from tzdbtools.data_types.tz_types import ExtractorError
from tzdbtools.data_types.tz_types import ZoneInfoParseError
from tzdbtools.extractor.extractor import Extractor
from tzdbtools.fields.fields import HoursMinutes
from tzdbtools.fields.fields import HoursMinutesSeconds
from tzdbtools.fields.fields import Multiple
from tzdbtools.fields.fields import NO_SAVING
from tzdbtools.fields.fields import UntilYear
from tzdbtools.fields.fields import YearNumber

NORTHAMERICA = """\
# Rule  NAME  FROM  TO    -  IN   ON       AT    SAVE  LETTER/S
Rule    US    1967  2006  -  Oct  lastSun  2:00  0     S
Rule    US    1967  1973  -  Apr  lastSun  2:00  1:00  D

# Zone  NAME              STDOFF    RULES  FORMAT  [UNTIL]
Zone America/New_York    -4:56:02  -      LMT     1883 Nov 18 17:00u
                         -5:00     US     E%sT    1920
# a comment inside the zone block
                         -5:00     US     E%sT

Rule    NYC   1920  only  -  Mar  lastSun  2:00  1:00  D
Link America/New_York US/Eastern
""".splitlines(keepends=True)


class TestExtractor(unittest.TestCase):
    def test_parse_lines(self) -> None:
        extractor = Extractor()
        extractor.parse_lines(NORTHAMERICA, source='northamerica')
        rules_map, zones_map, links_map = extractor.get_data()

        self.assertEqual(['NYC', 'US'], sorted(rules_map.keys()))
        self.assertEqual(2, len(rules_map['US']))
        self.assertEqual('S', rules_map['US'][0].letters)
        self.assertEqual('D', rules_map['US'][1].letters)

        eras = zones_map['America/New_York']
        self.assertEqual(3, len(eras))
        self.assertEqual(HoursMinutesSeconds(-4, -56, -2), eras[0].utc_offset)
        self.assertEqual(NO_SAVING, eras[0].saving)
        self.assertEqual(HoursMinutes(-5, 0), eras[1].utc_offset)
        self.assertEqual(Multiple('US'), eras[1].saving)
        self.assertEqual(UntilYear(YearNumber(1920)), eras[1].time)
        self.assertIsNone(eras[2].time)

        self.assertEqual({'US/Eastern': 'America/New_York'}, links_map)

        self.assertEqual(12, extractor.line_count)
        self.assertEqual(5, extractor.space_count)
        self.assertEqual(3, extractor.rule_count)
        self.assertEqual(1, extractor.zone_count)
        self.assertEqual(2, extractor.continuation_count)
        self.assertEqual(1, extractor.link_count)
        self.assertEqual([], extractor.invalid_lines)

    def test_print_summary(self) -> None:
        extractor = Extractor()
        extractor.parse_lines(NORTHAMERICA, source='northamerica')
        with self.assertLogs(level='INFO') as cm:
            extractor.print_summary()
        self.assertIn('Rules: 2; Zones: 1; Links: 1', '\n'.join(cm.output))

    def test_zone_block_ends_at_rule_line(self) -> None:
        lines = [
            'Zone Europe/Paris 0:09:21 - LMT 1891 Mar 16',
            'Rule France 1916 only - Jun 14 23:00s 1:00 S',
            '\t\t\t0:09:21 - PMT 1911 Mar 11',
        ]
        extractor = Extractor()
        with self.assertRaises(ExtractorError) as cm:
            extractor.parse_lines(lines, source='europe')
        self.assertEqual('europe', cm.exception.source)
        self.assertEqual(3, cm.exception.line_number)

    def test_zone_block_does_not_span_sources(self) -> None:
        extractor = Extractor()
        extractor.parse_lines(
            ['Zone Europe/Paris 0:09:21 - LMT 1891 Mar 16'], source='a')
        with self.assertRaises(ExtractorError):
            extractor.parse_lines(['\t\t\t0:09:21 - PMT 1911 Mar 11'], 'b')

    def test_strict_chains_parse_error(self) -> None:
        extractor = Extractor(strict=True)
        with self.assertRaises(ExtractorError) as cm:
            extractor.parse_lines(['', 'GOLB'], source='backward')
        self.assertEqual(2, cm.exception.line_number)
        cause = cm.exception.__cause__
        assert isinstance(cause, ZoneInfoParseError)
        self.assertEqual(ErrorKind.INVALID_LINE_TYPE, cause.kind)

    def test_error_survives_pickle(self) -> None:
        extractor = Extractor()
        with self.assertRaises(ExtractorError) as cm:
            extractor.parse_lines(['GOLB'], source='backward')
        copy = pickle.loads(pickle.dumps(cm.exception))
        self.assertIsInstance(copy, ExtractorError)
        self.assertEqual('backward', copy.source)
        self.assertEqual(1, copy.line_number)
        self.assertEqual(cm.exception.reason, copy.reason)
        self.assertEqual(
            'backward:1: line with invalid format: "GOLB"', str(copy))

    def test_duplicates_are_errors(self) -> None:
        extractor = Extractor()
        with self.assertRaises(ExtractorError):
            extractor.parse_lines([
                'Zone Etc/UTC 0 - UTC',
                'Zone Etc/UTC 0 - UTC',
            ])

        extractor = Extractor()
        with self.assertRaises(ExtractorError):
            extractor.parse_lines([
                'Link Etc/UTC UTC',
                'Link Etc/GMT UTC',
            ])

    def test_non_strict_skips_invalid_lines(self) -> None:
        lines = [
            'Rule EU 1977 1980 - Febtober Sun>=1 1:00u 1:00 S',
            'Zone Bad/Zone 1:00 - XYZ 19x5',
            '\t\t\t1:00 - CET',
            'Zone Europe/Berlin 0:53:28 - LMT 1893 Apr',
            '\t\t\t1:00 C-Eur CE%sT',
        ]
        extractor = Extractor(strict=False)
        with self.assertLogs(level='WARNING') as cm:
            extractor.parse_lines(lines, source='europe')
        self.assertEqual(3, len(cm.output))

        invalid_lines = extractor.invalid_lines
        self.assertEqual(3, len(invalid_lines))
        self.assertEqual(1, invalid_lines[0]['line_number'])
        self.assertEqual('FailedMonthParse', invalid_lines[0]['kind'])
        self.assertEqual('FailedYearParse', invalid_lines[1]['kind'])
        # The continuation of the invalid Zone has no zone to belong to.
        self.assertEqual(3, invalid_lines[2]['line_number'])
        self.assertIsNone(invalid_lines[2]['kind'])
        self.assertEqual('\t\t\t1:00 - CET', invalid_lines[2]['raw_line'])

        rules_map, zones_map, links_map = extractor.get_data()
        self.assertEqual({}, rules_map)
        self.assertEqual(['Europe/Berlin'], list(zones_map.keys()))
        self.assertEqual(2, len(zones_map['Europe/Berlin']))


if __name__ == '__main__':
    unittest.main()
