from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from timebank.services.calendar_walk import CalendarDay, to_calendar_date


@dataclass(frozen=True)
class WeeklySchedule:
    monday: float | None = None
    tuesday: float | None = None
    wednesday: float | None = None
    thursday: float | None = None
    friday: float | None = None

    @classmethod
    def from_employee(cls, employee: Any) -> WeeklySchedule:
        return cls(
            monday=getattr(employee, "mo_hours", None),
            tuesday=getattr(employee, "tu_hours", None),
            wednesday=getattr(employee, "we_hours", None),
            thursday=getattr(employee, "th_hours", None),
            friday=getattr(employee, "fr_hours", None),
        )

    def hours_for_weekday(self, weekday: int) -> float:
        by_weekday = (self.monday, self.tuesday, self.wednesday, self.thursday, self.friday)
        if weekday < 0 or weekday >= len(by_weekday):
            return 0.0
        value = by_weekday[weekday]
        if value is None:
            return 0.0
        return max(0.0, float(value))


def expected_hours(schedule: WeeklySchedule, day: CalendarDay | date | datetime | str) -> float:
    if isinstance(day, CalendarDay):
        weekday = day.weekday
    else:
        weekday = to_calendar_date(day).weekday()
    return schedule.hours_for_weekday(weekday)
