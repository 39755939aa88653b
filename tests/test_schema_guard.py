from __future__ import annotations

import unittest

from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from timebank.db import Base
from timebank.services import schema_guard
from timebank.services.schema_guard import required_columns, required_enum_labels, verify_runtime_schema


class _NativeEnumInspector:
    def __init__(self, enums: list[dict[str, object]]):
        self._enums = enums

    def get_enums(self):  # type: ignore[no-untyped-def]
        return self._enums


class SchemaGuardTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    def tearDown(self) -> None:
        self.engine.dispose()

    def _stamp(self, version: str) -> None:
        with self.engine.begin() as connection:
            connection.execute(text("CREATE TABLE alembic_version (version_num VARCHAR(32) NOT NULL)"))
            connection.execute(text("INSERT INTO alembic_version (version_num) VALUES (:v)"), {"v": version})

    def test_requirements_come_from_mapped_models(self) -> None:
        columns = required_columns(Base.metadata)

        self.assertEqual(set(columns), {"employees", "work_hours", "absences", "monthly_balances"})
        self.assertIn("fr_hours", columns["employees"])
        self.assertIn("credited_hours", columns["absences"])
        self.assertEqual(required_enum_labels(Base.metadata), {"absence_type": {"VACATION", "SICK", "PUBLIC_HOLIDAY"}})

    def test_migrated_database_passes(self) -> None:
        Base.metadata.create_all(self.engine)
        self._stamp("0001_initial")

        result = verify_runtime_schema(self.engine)

        self.assertTrue(result.ok)
        self.assertEqual(result.issues, [])
        self.assertEqual(result.warnings, [])

    def test_reports_missing_table_and_columns(self) -> None:
        Base.metadata.create_all(self.engine)
        with self.engine.begin() as connection:
            connection.execute(text("DROP TABLE monthly_balances"))
            connection.execute(text("DROP TABLE absences"))
            connection.execute(
                text("CREATE TABLE absences (id INTEGER PRIMARY KEY, employee_id INTEGER, day_date DATE, absence_type VARCHAR(14))")
            )
        self._stamp("")

        result = verify_runtime_schema(self.engine)

        self.assertFalse(result.ok)
        self.assertIn("MISSING_TABLE:monthly_balances", result.issues)
        self.assertIn("MISSING_COLUMNS:absences:comment,credited_hours", result.issues)
        self.assertIn("ALEMBIC_VERSION_EMPTY", result.issues)

    def test_unmigrated_database_fails_version_check(self) -> None:
        Base.metadata.create_all(self.engine)

        result = verify_runtime_schema(self.engine)

        self.assertEqual(result.issues, ["ALEMBIC_VERSION_CHECK_FAILED:OperationalError"])

    def test_native_enum_labels_are_compared(self) -> None:
        inspector = _NativeEnumInspector([{"name": "absence_type", "labels": ["VACATION", "SICK"]}])

        issues, warnings = schema_guard._enum_issues(inspector, Base.metadata)  # type: ignore[arg-type]

        self.assertEqual(issues, ["MISSING_ENUM_VALUES:absence_type:PUBLIC_HOLIDAY"])
        self.assertEqual(warnings, [])

        issues, warnings = schema_guard._enum_issues(_NativeEnumInspector([]), Base.metadata)  # type: ignore[arg-type]
        self.assertEqual(issues, [])
        self.assertEqual(warnings, ["ENUM_NOT_FOUND:absence_type"])


if __name__ == "__main__":
    unittest.main()
