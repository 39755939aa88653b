from __future__ import annotations

from datetime import date
import unittest

from timebank.errors import InvalidPeriod
from timebank.services.periods import (
    PeriodType,
    add_months,
    month_window,
    quarter_window,
    resolve_period_window,
    year_window,
)


class PeriodWindowTests(unittest.TestCase):
    def test_month_window_keys(self) -> None:
        window = month_window(2024, 2)
        self.assertEqual(window.period_type, PeriodType.MONTH)
        self.assertEqual(window.start, date(2024, 2, 1))
        self.assertEqual(window.end, date(2024, 3, 1))
        self.assertEqual(window.last_day, date(2024, 2, 29))
        self.assertEqual(window.period_key, date(2024, 2, 1))
        self.assertEqual(window.prior_period_key, date(2024, 1, 1))
        self.assertEqual(window.label, "02/2024")

    def test_january_chains_off_previous_december(self) -> None:
        window = month_window("2024", "1")
        self.assertEqual(window.prior_period_key, date(2023, 12, 1))

    def test_december_window_ends_next_year(self) -> None:
        window = month_window(2023, 12)
        self.assertEqual(window.end, date(2024, 1, 1))

    def test_quarter_chains_off_month_before_start(self) -> None:
        q1 = quarter_window(2024, 1)
        self.assertEqual((q1.start, q1.end), (date(2024, 1, 1), date(2024, 4, 1)))
        self.assertEqual(q1.period_key, date(2024, 1, 1))
        self.assertEqual(q1.prior_period_key, date(2023, 12, 1))
        self.assertEqual(q1.label, "Q1/2024")

        q3 = quarter_window(2024, "3")
        self.assertEqual((q3.start, q3.end), (date(2024, 7, 1), date(2024, 10, 1)))
        self.assertEqual(q3.prior_period_key, date(2024, 6, 1))

    def test_year_window(self) -> None:
        window = year_window(2024)
        self.assertEqual((window.start, window.end), (date(2024, 1, 1), date(2025, 1, 1)))
        self.assertEqual(window.last_day, date(2024, 12, 31))
        self.assertEqual(window.prior_period_key, date(2023, 12, 1))

    def test_resolve_period_window_is_case_insensitive(self) -> None:
        self.assertEqual(resolve_period_window("quarter", 2024, 2), quarter_window(2024, 2))
        self.assertEqual(resolve_period_window(" Year ", 2024), year_window(2024))
        self.assertEqual(resolve_period_window("MONTH", 2024, 5), month_window(2024, 5))

    def test_invalid_inputs_raise_invalid_period(self) -> None:
        cases = [
            lambda: month_window(2024, 13),
            lambda: month_window(2024, 0),
            lambda: month_window("twenty", 1),
            lambda: month_window(2024, "feb"),
            lambda: month_window(True, 1),
            lambda: quarter_window(2024, 5),
            lambda: resolve_period_window("WEEK", 2024, 1),
            lambda: resolve_period_window("QUARTER", 2024, None),
            lambda: resolve_period_window(None, 2024),
        ]
        for case in cases:
            with self.assertRaises(InvalidPeriod) as ctx:
                case()
            self.assertEqual(ctx.exception.status_code, 400)
            self.assertEqual(ctx.exception.code, "INVALID_PERIOD")

    def test_add_months_crosses_years(self) -> None:
        self.assertEqual(add_months(date(2024, 1, 1), -1), date(2023, 12, 1))
        self.assertEqual(add_months(date(2024, 11, 1), 3), date(2025, 2, 1))
        self.assertEqual(add_months(date(2024, 1, 1), 12), date(2025, 1, 1))


if __name__ == "__main__":
    unittest.main()
