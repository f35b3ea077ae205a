import unittest
from datetime import date

from resale_ledger.core.dates import normalize_date, parse_range_bound, week_bounds, year_bounds


class RangeBoundTest(unittest.TestCase):
    def test_plain_dates(self):
        self.assertEqual(parse_range_bound("2026-01-13"), date(2026, 1, 13))
        self.assertEqual(parse_range_bound(" 2026-01-13 "), date(2026, 1, 13))

    def test_timestamps_use_utc_date(self):
        self.assertEqual(parse_range_bound("2026-01-04T23:30:00-05:00"), date(2026, 1, 5))
        self.assertEqual(parse_range_bound("2026-01-04T05:00:00.000Z"), date(2026, 1, 4))
        self.assertEqual(parse_range_bound("2026-01-04T23:30:00"), date(2026, 1, 4))

    def test_unparseable(self):
        for value in (None, "", "   ", "last week", "2026-13-01"):
            with self.subTest(value=value):
                self.assertIsNone(parse_range_bound(value))

    def test_normalize_date(self):
        self.assertEqual(normalize_date("2026-02-01"), date(2026, 2, 1))
        self.assertIsNone(normalize_date("02/01/2026"))
        self.assertIsNone(normalize_date(12))


class PeriodBoundsTest(unittest.TestCase):
    def test_week_runs_sunday_to_saturday(self):
        cases = [
            (date(2026, 10, 18), date(2026, 10, 18)),
            (date(2026, 10, 19), date(2026, 10, 18)),
            (date(2026, 10, 24), date(2026, 10, 18)),
            (date(2026, 10, 25), date(2026, 10, 25)),
        ]
        for today, expected_start in cases:
            with self.subTest(today=today):
                start, end = week_bounds(today)
                self.assertEqual(start, expected_start)
                self.assertEqual((end - start).days, 6)

    def test_year_bounds(self):
        self.assertEqual(
            year_bounds(date(2026, 6, 15)),
            (date(2026, 1, 1), date(2026, 12, 31)),
        )


if __name__ == "__main__":
    unittest.main()
