import unittest
from datetime import date, datetime

from fx_forecast.errors import (
    ErrorKind,
    FutureDateError,
    InvalidDateError,
    InvertedRangeError,
    RangeTooWideError,
)
from fx_forecast.utils.date_range import DateRange, parse_date, trailing_window, validate_range

TODAY = date(2024, 3, 15)


class DateRangeTests(unittest.TestCase):
    def test_days_are_inclusive_and_ascending(self) -> None:
        date_range = DateRange.from_values("2024-02-27", "2024-03-02")
        self.assertEqual(
            list(date_range.days()),
            [
                date(2024, 2, 27),
                date(2024, 2, 28),
                date(2024, 2, 29),
                date(2024, 3, 1),
                date(2024, 3, 2),
            ],
        )
        self.assertEqual(date_range.span_days, 4)
        self.assertEqual(date_range.as_tuple(), (date(2024, 2, 27), date(2024, 3, 2)))

    def test_single_day_range(self) -> None:
        date_range = DateRange(start=date(2024, 3, 1), end=date(2024, 3, 1))
        self.assertEqual(list(date_range.days()), [date(2024, 3, 1)])
        self.assertIs(validate_range(date_range, TODAY), date_range)

    def test_parse_date(self) -> None:
        self.assertEqual(parse_date("2024-01-05"), date(2024, 1, 5))
        self.assertEqual(parse_date(datetime(2024, 1, 5, 13, 30)), date(2024, 1, 5))
        for bad in ("05/01/2024", "2024-13-01", "", None):
            with self.assertRaises(InvalidDateError):
                parse_date(bad)

    def test_span_of_exactly_five_days_is_allowed(self) -> None:
        date_range = DateRange(start=date(2024, 3, 1), end=date(2024, 3, 6))
        self.assertEqual(validate_range(date_range, TODAY), date_range)

    def test_range_too_wide(self) -> None:
        with self.assertRaises(RangeTooWideError) as ctx:
            validate_range(DateRange(start=date(2024, 3, 1), end=date(2024, 3, 10)), TODAY)
        self.assertEqual(ctx.exception.span_days, 9)
        self.assertEqual(ctx.exception.kind, ErrorKind.RANGE_TOO_WIDE)

    def test_inverted_range(self) -> None:
        with self.assertRaises(InvertedRangeError):
            validate_range(DateRange(start=date(2024, 3, 5), end=date(2024, 3, 1)), TODAY)

    def test_future_check_wins_over_other_violations(self) -> None:
        # Inverted and in the future: the future-date check runs first.
        with self.assertRaises(FutureDateError):
            validate_range(DateRange(start=date(2099, 1, 10), end=date(2099, 1, 1)), TODAY)
        with self.assertRaises(FutureDateError):
            validate_range(DateRange(start=date(2024, 3, 14), end=date(2024, 3, 16)), TODAY)

    def test_today_is_not_in_the_future(self) -> None:
        validate_range(DateRange(start=TODAY, end=TODAY), TODAY)

    def test_trailing_window_ends_yesterday(self) -> None:
        window = trailing_window(TODAY)
        self.assertEqual(window, DateRange(start=date(2024, 3, 10), end=date(2024, 3, 14)))
        self.assertEqual(len(list(window.days())), 5)
        self.assertEqual(trailing_window(date(2024, 3, 1), 3).start, date(2024, 2, 27))
        with self.assertRaises(ValueError):
            trailing_window(TODAY, 0)


if __name__ == "__main__":
    unittest.main()
