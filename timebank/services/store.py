from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from timebank.errors import StorageError
from timebank.models import Absence, Employee, MonthlyBalance, WorkHours
from timebank.services.expectation import WeeklySchedule


@dataclass(frozen=True)
class EmployeeRecord:
    id: int
    name: str
    schedule: WeeklySchedule


@dataclass(frozen=True)
class AttendanceEntry:
    day_date: date
    hours: float
    comment: str | None = None
    start_time: str | None = None
    end_time: str | None = None


@dataclass(frozen=True)
class AbsenceEntry:
    day_date: date
    absence_type: str
    credited_hours: float
    comment: str | None = None


class BalanceStore(Protocol):
    def find_employee_by_name(self, name: str) -> EmployeeRecord | None: ...

    def list_attendance(self, employee_id: int, start: date, end: date) -> list[AttendanceEntry]: ...

    def list_absences(self, employee_id: int, start: date, end: date) -> list[AbsenceEntry]: ...

    def get_carry_over(self, employee_id: int, period_key: date) -> float | None: ...

    def upsert_balance(self, employee_id: int, period_key: date, difference: float, carry_over: float) -> None: ...


class SqlBalanceStore:
    """``BalanceStore`` backed by the SQLAlchemy session of the current request.

    Date ranges are half-open: ``start <= day_date < end``. Driver errors are
    re-raised as ``StorageError`` and never retried here.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_employee_by_name(self, name: str) -> EmployeeRecord | None:
        normalized = (name or "").strip().lower()
        if not normalized:
            return None
        try:
            employee = self.db.scalar(
                select(Employee).where(func.lower(Employee.name) == normalized).order_by(Employee.id.asc())
            )
        except SQLAlchemyError as exc:
            raise StorageError("find_employee_by_name") from exc
        if employee is None:
            return None
        return EmployeeRecord(
            id=employee.id,
            name=employee.name,
            schedule=WeeklySchedule.from_employee(employee),
        )

    def list_attendance(self, employee_id: int, start: date, end: date) -> list[AttendanceEntry]:
        try:
            rows = list(
                self.db.scalars(
                    select(WorkHours)
                    .where(
                        WorkHours.employee_id == employee_id,
                        WorkHours.day_date >= start,
                        WorkHours.day_date < end,
                    )
                    .order_by(WorkHours.day_date.asc(), WorkHours.id.asc())
                ).all()
            )
        except SQLAlchemyError as exc:
            raise StorageError("list_attendance") from exc
        return [
            AttendanceEntry(
                day_date=row.day_date,
                hours=float(row.hours or 0.0),
                comment=row.comment,
                start_time=row.start_time,
                end_time=row.end_time,
            )
            for row in rows
        ]

    def list_absences(self, employee_id: int, start: date, end: date) -> list[AbsenceEntry]:
        try:
            rows = list(
                self.db.scalars(
                    select(Absence)
                    .where(
                        Absence.employee_id == employee_id,
                        Absence.day_date >= start,
                        Absence.day_date < end,
                    )
                    .order_by(Absence.day_date.asc(), Absence.id.asc())
                ).all()
            )
        except SQLAlchemyError as exc:
            raise StorageError("list_absences") from exc
        return [
            AbsenceEntry(
                day_date=row.day_date,
                absence_type=row.absence_type.value,
                credited_hours=float(row.credited_hours or 0.0),
                comment=row.comment,
            )
            for row in rows
        ]

    def get_carry_over(self, employee_id: int, period_key: date) -> float | None:
        try:
            value = self.db.scalar(
                select(MonthlyBalance.carry_over).where(
                    MonthlyBalance.employee_id == employee_id,
                    MonthlyBalance.year_month == period_key,
                )
            )
        except SQLAlchemyError as exc:
            raise StorageError("get_carry_over") from exc
        if value is None:
            return None
        return float(value)

    def _find_balance(self, employee_id: int, period_key: date) -> MonthlyBalance | None:
        return self.db.scalar(
            select(MonthlyBalance).where(
                MonthlyBalance.employee_id == employee_id,
                MonthlyBalance.year_month == period_key,
            )
        )

    def upsert_balance(self, employee_id: int, period_key: date, difference: float, carry_over: float) -> None:
        try:
            balance = self._find_balance(employee_id, period_key)
            if balance is None:
                self.db.add(
                    MonthlyBalance(
                        employee_id=employee_id,
                        year_month=period_key,
                        difference=difference,
                        carry_over=carry_over,
                    )
                )
            else:
                balance.difference = difference
                balance.carry_over = carry_over
            self.db.commit()
        except IntegrityError:
            # A concurrent computation inserted the row first; overwrite it.
            self.db.rollback()
            try:
                balance = self._find_balance(employee_id, period_key)
                if balance is None:
                    raise StorageError("upsert_balance", "Balance row vanished during upsert")
                balance.difference = difference
                balance.carry_over = carry_over
                self.db.commit()
            except SQLAlchemyError as exc:
                self.db.rollback()
                raise StorageError("upsert_balance") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("upsert_balance") from exc
