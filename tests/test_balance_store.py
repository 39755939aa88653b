from __future__ import annotations

import unittest
from datetime import date
from unittest.mock import patch

from sqlalchemy import create_engine, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from timebank.db import Base
from timebank.errors import StorageError
from timebank.models import Absence, AbsenceType, Employee, MonthlyBalance, WorkHours
from timebank.services.store import SqlBalanceStore


class _BrokenSession:
    def __init__(self) -> None:
        self.rolled_back = False

    def scalar(self, _statement):  # type: ignore[no-untyped-def]
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    def scalars(self, _statement):  # type: ignore[no-untyped-def]
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    def rollback(self) -> None:
        self.rolled_back = True


class SqlBalanceStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.db = Session(self.engine)

        employee = Employee(name="Anna Schmidt", mo_hours=8, tu_hours=8, we_hours=8, th_hours=8, fr_hours=None)
        self.db.add(employee)
        self.db.flush()
        self.employee_id = employee.id
        self.db.add_all(
            [
                WorkHours(employee_id=employee.id, day_date=date(2024, 1, 31), hours=8.0),
                WorkHours(employee_id=employee.id, day_date=date(2024, 2, 1), hours=7.5, start_time="08:00", end_time="15:30"),
                WorkHours(employee_id=employee.id, day_date=date(2024, 2, 29), hours=6.0, comment="doctor"),
                WorkHours(employee_id=employee.id, day_date=date(2024, 3, 1), hours=8.0),
                Absence(
                    employee_id=employee.id,
                    day_date=date(2024, 2, 12),
                    absence_type=AbsenceType.VACATION,
                    credited_hours=8.0,
                ),
                Absence(
                    employee_id=employee.id,
                    day_date=date(2024, 3, 4),
                    absence_type=AbsenceType.SICK,
                    credited_hours=8.0,
                ),
                MonthlyBalance(employee_id=employee.id, year_month=date(2024, 1, 1), difference=5.25, carry_over=5.25),
            ]
        )
        self.db.commit()
        self.store = SqlBalanceStore(self.db)

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def test_employee_lookup_ignores_case_and_whitespace(self) -> None:
        record = self.store.find_employee_by_name("  anna SCHMIDT ")

        self.assertIsNotNone(record)
        assert record is not None
        self.assertEqual(record.id, self.employee_id)
        self.assertEqual(record.name, "Anna Schmidt")
        self.assertEqual(record.schedule.monday, 8.0)
        self.assertIsNone(record.schedule.friday)

    def test_unknown_or_blank_employee_returns_none(self) -> None:
        self.assertIsNone(self.store.find_employee_by_name("Nobody"))
        self.assertIsNone(self.store.find_employee_by_name("   "))

    def test_attendance_range_is_half_open(self) -> None:
        rows = self.store.list_attendance(self.employee_id, date(2024, 2, 1), date(2024, 3, 1))

        self.assertEqual([row.day_date for row in rows], [date(2024, 2, 1), date(2024, 2, 29)])
        self.assertEqual(rows[0].start_time, "08:00")
        self.assertEqual(rows[1].comment, "doctor")

    def test_absence_range_is_half_open_and_exposes_type_code(self) -> None:
        rows = self.store.list_absences(self.employee_id, date(2024, 2, 1), date(2024, 3, 1))

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].absence_type, "VACATION")
        self.assertEqual(rows[0].credited_hours, 8.0)

    def test_get_carry_over_returns_none_when_no_row(self) -> None:
        self.assertEqual(self.store.get_carry_over(self.employee_id, date(2024, 1, 1)), 5.25)
        self.assertIsNone(self.store.get_carry_over(self.employee_id, date(2023, 12, 1)))

    def test_upsert_inserts_then_overwrites(self) -> None:
        self.store.upsert_balance(self.employee_id, date(2024, 2, 1), -148.0, -142.75)
        self.store.upsert_balance(self.employee_id, date(2024, 2, 1), -140.0, -134.75)

        rows = list(
            self.db.scalars(
                select(MonthlyBalance).where(
                    MonthlyBalance.employee_id == self.employee_id,
                    MonthlyBalance.year_month == date(2024, 2, 1),
                )
            ).all()
        )
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].difference, -140.0)
        self.assertEqual(rows[0].carry_over, -134.75)

    def test_upsert_recovers_from_concurrent_insert(self) -> None:
        real_find = self.store._find_balance
        calls: list[date] = []

        def _stale_then_real(employee_id: int, period_key: date) -> MonthlyBalance | None:
            calls.append(period_key)
            if len(calls) == 1:
                return None
            return real_find(employee_id, period_key)

        with patch.object(self.store, "_find_balance", side_effect=_stale_then_real):
            self.store.upsert_balance(self.employee_id, date(2024, 1, 1), 1.0, 2.0)

        self.assertEqual(len(calls), 2)
        self.assertEqual(self.store.get_carry_over(self.employee_id, date(2024, 1, 1)), 2.0)

    def test_driver_errors_become_storage_errors(self) -> None:
        broken = _BrokenSession()
        store = SqlBalanceStore(broken)  # type: ignore[arg-type]

        with self.assertRaises(StorageError) as find_ctx:
            store.find_employee_by_name("Anna")
        self.assertEqual(find_ctx.exception.operation, "find_employee_by_name")
        self.assertEqual(find_ctx.exception.status_code, 503)

        with self.assertRaises(StorageError):
            store.list_attendance(1, date(2024, 2, 1), date(2024, 3, 1))
        with self.assertRaises(StorageError):
            store.get_carry_over(1, date(2024, 1, 1))
        with self.assertRaises(StorageError):
            store.upsert_balance(1, date(2024, 2, 1), 0.0, 0.0)
        self.assertTrue(broken.rolled_back)


if __name__ == "__main__":
    unittest.main()
