from __future__ import annotations

from collections.abc import Iterable

from timebank.models import AbsenceType
from timebank.schemas import BalanceDayRow
from timebank.services.expectation import WeeklySchedule, expected_hours
from timebank.services.store import AbsenceEntry, AttendanceEntry

ABSENCE_LABELS: dict[str, str] = {
    AbsenceType.VACATION.value: "Vacation",
    AbsenceType.SICK.value: "Sick leave",
    AbsenceType.PUBLIC_HOLIDAY.value: "Public holiday",
}


def absence_label(absence_type: str | None) -> str:
    if not absence_type:
        return ""
    return ABSENCE_LABELS.get(absence_type, absence_type)


def decimal_hours_to_hhmm(hours: float | None) -> str:
    value = float(hours or 0.0)
    total_minutes = int(round(abs(value) * 60))
    sign = "-" if value < 0 and total_minutes > 0 else ""
    return f"{sign}{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def build_day_rows(
    schedule: WeeklySchedule,
    work_entries: Iterable[AttendanceEntry],
    absence_entries: Iterable[AbsenceEntry],
) -> list[BalanceDayRow]:
    """Merge worked days and absence days into one row per date.

    A date with both a worked entry and an absence keeps only the worked row.
    """
    rows: list[BalanceDayRow] = []
    worked_dates = set()
    for entry in work_entries:
        worked_dates.add(entry.day_date)
        expected = expected_hours(schedule, entry.day_date)
        rows.append(
            BalanceDayRow(
                date=entry.day_date,
                kind="WORK",
                start_time=entry.start_time,
                end_time=entry.end_time,
                expected_hours=round(expected, 2),
                actual_hours=round(entry.hours, 2),
                difference_hours=round(entry.hours - expected, 2),
                actual_hhmm=decimal_hours_to_hhmm(entry.hours),
                difference_hhmm=decimal_hours_to_hhmm(entry.hours - expected),
                comment=entry.comment,
            )
        )

    for absence in absence_entries:
        if absence.day_date in worked_dates:
            continue
        expected = expected_hours(schedule, absence.day_date)
        rows.append(
            BalanceDayRow(
                date=absence.day_date,
                kind="ABSENCE",
                absence_type=absence.absence_type,
                absence_label=absence_label(absence.absence_type),
                expected_hours=round(expected, 2),
                actual_hours=round(absence.credited_hours, 2),
                difference_hours=round(absence.credited_hours - expected, 2),
                actual_hhmm=decimal_hours_to_hhmm(absence.credited_hours),
                difference_hhmm=decimal_hours_to_hhmm(absence.credited_hours - expected),
                comment=absence.comment,
            )
        )

    rows.sort(key=lambda row: (row.date, 0 if row.kind == "WORK" else 1))
    return rows
