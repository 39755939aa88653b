from __future__ import annotations

import enum
from datetime import date, datetime, timezone

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timebank.db import Base


class AbsenceType(str, enum.Enum):
    VACATION = "VACATION"
    SICK = "SICK"
    PUBLIC_HOLIDAY = "PUBLIC_HOLIDAY"


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    mo_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    tu_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    we_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    th_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    fr_hours: Mapped[float | None] = mapped_column(Float, nullable=True)

    work_hours: Mapped[list[WorkHours]] = relationship(back_populates="employee")
    absences: Mapped[list[Absence]] = relationship(back_populates="employee")
    balances: Mapped[list[MonthlyBalance]] = relationship(back_populates="employee")


class WorkHours(Base):
    __tablename__ = "work_hours"
    __table_args__ = (UniqueConstraint("employee_id", "day_date", name="uq_work_hours_employee_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    day_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default=text("0"))
    comment: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    start_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    end_time: Mapped[str | None] = mapped_column(String(5), nullable=True)

    employee: Mapped[Employee] = relationship(back_populates="work_hours")


class Absence(Base):
    __tablename__ = "absences"
    __table_args__ = (UniqueConstraint("employee_id", "day_date", name="uq_absences_employee_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    day_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    absence_type: Mapped[AbsenceType] = mapped_column(
        Enum(AbsenceType, name="absence_type"),
        nullable=False,
    )
    credited_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default=text("0"))
    comment: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    employee: Mapped[Employee] = relationship(back_populates="absences")


class MonthlyBalance(Base):
    __tablename__ = "monthly_balances"
    __table_args__ = (UniqueConstraint("employee_id", "year_month", name="uq_monthly_balances_employee_month"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    year_month: Mapped[date] = mapped_column(Date, nullable=False)
    difference: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    carry_over: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    employee: Mapped[Employee] = relationship(back_populates="balances")
