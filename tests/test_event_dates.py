import unittest
from datetime import datetime, timezone

from event_dates import (
    EVENT_PASSED_TEXT,
    LOCAL_TZ,
    first_date,
    is_on_sale,
    last_date,
    next_date,
    parse_instant,
    sort_dates,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=LOCAL_TZ)


class TestParseInstant(unittest.TestCase):
    def test_plain_date_is_local_midnight(self):
        dt = parse_instant("2026-03-01")
        self.assertEqual(dt, datetime(2026, 3, 1, 0, 0, tzinfo=LOCAL_TZ))

    def test_zulu_suffix(self):
        dt = parse_instant("2026-07-01T09:30:00Z")
        self.assertEqual(dt, datetime(2026, 7, 1, 9, 30, tzinfo=timezone.utc))

    def test_offset_kept(self):
        dt = parse_instant("2026-07-01T10:30:00+01:00")
        self.assertEqual(dt, datetime(2026, 7, 1, 9, 30, tzinfo=timezone.utc))

    def test_garbage_and_non_strings(self):
        self.assertIsNone(parse_instant("next tuesday"))
        self.assertIsNone(parse_instant(""))
        self.assertIsNone(parse_instant(None))
        self.assertIsNone(parse_instant(20260301))


class TestDateSelection(unittest.TestCase):
    def test_sort_is_chronological_not_lexical(self):
        dates = ["2026-03-01T09:00:00+00:00", "2026-03-01T08:30:00-02:00"]
        # 08:30-02:00 is 10:30 UTC, later than 09:00 UTC
        self.assertEqual(sort_dates(dates), dates)
        self.assertEqual(first_date(dates), "2026-03-01T09:00:00+00:00")
        self.assertEqual(last_date(dates), "2026-03-01T08:30:00-02:00")

    def test_unparseable_dates_sort_last(self):
        self.assertEqual(sort_dates(["tbc", "2026-05-01", "2026-04-01"]), ["2026-04-01", "2026-05-01", "tbc"])

    def test_input_not_mutated(self):
        dates = ["2026-05-01", "2026-04-01"]
        first_date(dates)
        last_date(dates)
        next_date(dates, NOW)
        self.assertEqual(dates, ["2026-05-01", "2026-04-01"])

    def test_first_not_after_last(self):
        dates = ["2026-06-10", "2025-12-25", "2026-01-01T19:30:00"]
        self.assertEqual(first_date(dates), "2025-12-25")
        self.assertEqual(last_date(dates), "2026-06-10")

    def test_single_date(self):
        self.assertEqual(first_date(["2024-01-01"]), "2024-01-01")
        self.assertEqual(last_date(["2024-01-01"]), "2024-01-01")

    def test_empty_sequence(self):
        self.assertIsNone(first_date([]))
        self.assertIsNone(last_date([]))
        self.assertEqual(next_date([], NOW), EVENT_PASSED_TEXT)

    def test_next_date_picks_first_upcoming(self):
        dates = ["2026-04-01", "2026-02-01", "2026-03-15"]
        self.assertEqual(next_date(dates, NOW), "2026-03-15")

    def test_next_date_includes_now(self):
        self.assertEqual(next_date(["2026-03-01T12:00:00"], NOW), "2026-03-01T12:00:00")

    def test_next_date_all_passed(self):
        self.assertEqual(next_date(["2024-01-01", "2025-01-01"], NOW), EVENT_PASSED_TEXT)

    def test_next_date_ignores_unparseable(self):
        self.assertEqual(next_date(["soon"], NOW), EVENT_PASSED_TEXT)


class TestOnSale(unittest.TestCase):
    def test_inside_window(self):
        ev = {"startSelling": "2026-02-01T00:00:00", "stopSelling": "2026-04-01T00:00:00"}
        self.assertTrue(is_on_sale(ev, NOW))

    def test_window_bounds_inclusive(self):
        ev = {"startSelling": "2026-03-01T12:00:00", "stopSelling": "2026-03-01T12:00:00"}
        self.assertTrue(is_on_sale(ev, NOW))

    def test_not_started_or_finished(self):
        self.assertFalse(is_on_sale({"startSelling": "2026-03-02", "stopSelling": "2026-04-01"}, NOW))
        self.assertFalse(is_on_sale({"startSelling": "2026-01-01", "stopSelling": "2026-02-01"}, NOW))

    def test_missing_bounds(self):
        self.assertFalse(is_on_sale({"stopSelling": "2026-04-01"}, NOW))
        self.assertFalse(is_on_sale({"startSelling": "2026-01-01"}, NOW))
        self.assertFalse(is_on_sale({"startSelling": "2026-01-01", "stopSelling": "never"}, NOW))


if __name__ == "__main__":
    unittest.main()
