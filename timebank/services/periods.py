from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, timedelta

from timebank.errors import InvalidPeriod

MIN_YEAR = 1970
MAX_YEAR = 9998


class PeriodType(str, enum.Enum):
    MONTH = "MONTH"
    QUARTER = "QUARTER"
    YEAR = "YEAR"


@dataclass(frozen=True)
class PeriodWindow:
    """Date range of one balance computation and the ledger keys it uses.

    ``start`` is inclusive and ``end`` exclusive. ``period_key`` is the ledger
    row written by the computation; ``prior_period_key`` is the month whose
    carry-over seeds it.
    """

    period_type: PeriodType
    label: str
    start: date
    end: date
    period_key: date
    prior_period_key: date

    @property
    def last_day(self) -> date:
        return self.end - timedelta(days=1)


def first_of_month(year: int, month: int) -> date:
    return date(year, month, 1)


def add_months(value: date, months: int) -> date:
    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _parse_int(value: object, field_name: str) -> int:
    if isinstance(value, bool):
        raise InvalidPeriod(f"{field_name} must be numeric")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidPeriod(f"{field_name} must be numeric") from None


def parse_year(value: object) -> int:
    year = _parse_int(value, "year")
    if year < MIN_YEAR or year > MAX_YEAR:
        raise InvalidPeriod(f"year must be between {MIN_YEAR} and {MAX_YEAR}")
    return year


def parse_month(value: object) -> int:
    month = _parse_int(value, "month")
    if month < 1 or month > 12:
        raise InvalidPeriod("month must be between 1 and 12")
    return month


def parse_period_type(value: object) -> PeriodType:
    raw = str(value or "").strip().upper()
    try:
        return PeriodType(raw)
    except ValueError:
        raise InvalidPeriod(f"Unsupported period type: {value!r}") from None


def _window(period_type: PeriodType, label: str, start: date, months: int) -> PeriodWindow:
    return PeriodWindow(
        period_type=period_type,
        label=label,
        start=start,
        end=add_months(start, months),
        period_key=start,
        prior_period_key=add_months(start, -1),
    )


def month_window(year: object, month: object) -> PeriodWindow:
    parsed_year = parse_year(year)
    parsed_month = parse_month(month)
    start = first_of_month(parsed_year, parsed_month)
    return _window(PeriodType.MONTH, f"{parsed_month:02d}/{parsed_year}", start, 1)


def quarter_window(year: object, quarter: object) -> PeriodWindow:
    parsed_year = parse_year(year)
    parsed_quarter = _parse_int(quarter, "quarter")
    if parsed_quarter < 1 or parsed_quarter > 4:
        raise InvalidPeriod("quarter must be between 1 and 4")
    start = first_of_month(parsed_year, (parsed_quarter - 1) * 3 + 1)
    return _window(PeriodType.QUARTER, f"Q{parsed_quarter}/{parsed_year}", start, 3)


def year_window(year: object) -> PeriodWindow:
    parsed_year = parse_year(year)
    return _window(PeriodType.YEAR, str(parsed_year), first_of_month(parsed_year, 1), 12)


def resolve_period_window(
    period_type: object,
    year: object,
    period_value: object | None = None,
) -> PeriodWindow:
    resolved_type = parse_period_type(period_type)
    if resolved_type == PeriodType.MONTH:
        if period_value is None:
            raise InvalidPeriod("month is required for MONTH periods")
        return month_window(year, period_value)
    if resolved_type == PeriodType.QUARTER:
        if period_value is None:
            raise InvalidPeriod("quarter (1-4) is required for QUARTER periods")
        return quarter_window(year, period_value)
    return year_window(year)
