from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AttendanceEntryRead(BaseModel):
    date: date
    hours: float
    comment: str | None = None
    start_time: str | None = None
    end_time: str | None = None


class AbsenceEntryRead(BaseModel):
    date: date
    absence_type: str
    credited_hours: float
    comment: str | None = None


class BalanceDayRow(BaseModel):
    date: date
    kind: Literal["WORK", "ABSENCE"]
    start_time: str | None = None
    end_time: str | None = None
    absence_type: str | None = None
    absence_label: str | None = None
    expected_hours: float
    actual_hours: float
    difference_hours: float
    actual_hhmm: str
    difference_hhmm: str
    comment: str | None = None


class WeeklyScheduleRead(BaseModel):
    monday: float | None = None
    tuesday: float | None = None
    wednesday: float | None = None
    thursday: float | None = None
    friday: float | None = None

    model_config = ConfigDict(from_attributes=True)


class PeriodBalanceResponse(BaseModel):
    employee_id: int
    employee_name: str
    schedule: WeeklyScheduleRead
    period_type: Literal["MONTH", "QUARTER", "YEAR"]
    period_label: str
    period_start: date
    period_end: date
    period_key: date
    prior_period_key: date
    previous_carry_over: float
    total_expected: float
    total_actual: float
    worked_hours: float
    absence_hours: float
    total_difference: float
    new_carry_over: float
    worked_hhmm: str
    absence_hhmm: str
    total_difference_hhmm: str
    new_carry_over_hhmm: str
    work_entries: list[AttendanceEntryRead] = Field(default_factory=list)
    absence_entries: list[AbsenceEntryRead] = Field(default_factory=list)
    days: list[BalanceDayRow] = Field(default_factory=list)


