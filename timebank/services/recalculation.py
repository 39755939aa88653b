from __future__ import annotations

from timebank.errors import InvalidPeriod
from timebank.schemas import PeriodBalanceResponse
from timebank.services.balance import calculate_monthly_balance
from timebank.services.periods import parse_month, parse_year
from timebank.services.store import BalanceStore


def recalculate_months(
    store: BalanceStore,
    *,
    employee_name: str,
    year: object,
    first_month: object = 1,
    last_month: object = 12,
) -> list[PeriodBalanceResponse]:
    """Recompute consecutive months of one year in order.

    Each month reads the carry-over the previous iteration just wrote, so the
    ledger chain is rebuilt from the carry-over stored before ``first_month``.
    Every month commits on its own: if month k fails, the months before it
    stay rewritten and the chain from k onward keeps its old values until the
    rebuild is run again.
    """
    parsed_year = parse_year(year)
    start = parse_month(first_month)
    end = parse_month(last_month)
    if end < start:
        raise InvalidPeriod("last_month must not be before first_month")

    return [
        calculate_monthly_balance(store, employee_name=employee_name, year=parsed_year, month=month)
        for month in range(start, end + 1)
    ]
