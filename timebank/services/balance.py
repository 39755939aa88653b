from __future__ import annotations

from timebank.errors import EmployeeNotFound
from timebank.schemas import (
    AbsenceEntryRead,
    AttendanceEntryRead,
    PeriodBalanceResponse,
    WeeklyScheduleRead,
)
from timebank.services.calendar_walk import walk_calendar
from timebank.services.expectation import expected_hours
from timebank.services.periods import PeriodWindow, month_window, resolve_period_window
from timebank.services.report_rows import build_day_rows, decimal_hours_to_hhmm
from timebank.services.store import BalanceStore

BALANCE_DECIMALS = 2


def _round_hours(value: float) -> float:
    rounded = round(value, BALANCE_DECIMALS)
    # Avoid "-0.0" in reports and in the ledger.
    return rounded + 0.0


def compute_balance(
    store: BalanceStore,
    *,
    employee_name: str,
    window: PeriodWindow,
) -> PeriodBalanceResponse:
    employee = store.find_employee_by_name(employee_name)
    if employee is None:
        raise EmployeeNotFound(employee_name)

    work_entries = store.list_attendance(employee.id, window.start, window.end)
    absence_entries = store.list_absences(employee.id, window.start, window.end)

    worked_hours = sum(entry.hours for entry in work_entries)
    absence_hours = sum(entry.credited_hours for entry in absence_entries)
    total_actual = worked_hours + absence_hours

    # An absence day never accrues expected hours, whatever it credits.
    excluded_dates = {entry.day_date for entry in absence_entries}
    total_expected = 0.0
    for day in walk_calendar(window.start, window.end):
        day_expected = expected_hours(employee.schedule, day)
        if day_expected > 0 and day.day not in excluded_dates:
            total_expected += day_expected

    stored_carry_over = store.get_carry_over(employee.id, window.prior_period_key)
    previous_carry_over = _round_hours(stored_carry_over or 0.0)
    difference = _round_hours(total_actual - total_expected)
    new_carry_over = _round_hours(previous_carry_over + difference)

    store.upsert_balance(employee.id, window.period_key, difference, new_carry_over)

    schedule = employee.schedule
    return PeriodBalanceResponse(
        employee_id=employee.id,
        employee_name=employee.name,
        schedule=WeeklyScheduleRead.model_validate(schedule),
        period_type=window.period_type.value,
        period_label=window.label,
        period_start=window.start,
        period_end=window.last_day,
        period_key=window.period_key,
        prior_period_key=window.prior_period_key,
        previous_carry_over=previous_carry_over,
        total_expected=_round_hours(total_expected),
        total_actual=_round_hours(total_actual),
        worked_hours=_round_hours(worked_hours),
        absence_hours=_round_hours(absence_hours),
        total_difference=difference,
        new_carry_over=new_carry_over,
        worked_hhmm=decimal_hours_to_hhmm(worked_hours),
        absence_hhmm=decimal_hours_to_hhmm(absence_hours),
        total_difference_hhmm=decimal_hours_to_hhmm(difference),
        new_carry_over_hhmm=decimal_hours_to_hhmm(new_carry_over),
        work_entries=[
            AttendanceEntryRead(
                date=entry.day_date,
                hours=entry.hours,
                comment=entry.comment,
                start_time=entry.start_time,
                end_time=entry.end_time,
            )
            for entry in work_entries
        ],
        absence_entries=[
            AbsenceEntryRead(
                date=entry.day_date,
                absence_type=entry.absence_type,
                credited_hours=entry.credited_hours,
                comment=entry.comment,
            )
            for entry in absence_entries
        ],
        days=build_day_rows(schedule, work_entries, absence_entries),
    )


def calculate_monthly_balance(
    store: BalanceStore,
    *,
    employee_name: str,
    year: object,
    month: object,
) -> PeriodBalanceResponse:
    return compute_balance(store, employee_name=employee_name, window=month_window(year, month))


def calculate_period_balance(
    store: BalanceStore,
    *,
    employee_name: str,
    year: object,
    period_type: object,
    period_value: object | None = None,
) -> PeriodBalanceResponse:
    window = resolve_period_window(period_type, year, period_value)
    return compute_balance(store, employee_name=employee_name, window=window)
