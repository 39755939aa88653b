from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Enum, MetaData, inspect, text
from sqlalchemy.engine import Connection, Engine, Inspector
from sqlalchemy.exc import SQLAlchemyError

import timebank.models  # noqa: F401  (maps the tables onto Base.metadata)
from timebank.db import Base


@dataclass(frozen=True, slots=True)
class SchemaGuardResult:
    ok: bool
    checked_at_utc: datetime
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "checked_at_utc": self.checked_at_utc.isoformat(),
            "issues": list(self.issues),
            "warnings": list(self.warnings),
        }


def required_columns(metadata: MetaData) -> dict[str, set[str]]:
    return {table.name: {column.name for column in table.columns} for table in metadata.sorted_tables}


def required_enum_labels(metadata: MetaData) -> dict[str, set[str]]:
    labels: dict[str, set[str]] = {}
    for table in metadata.sorted_tables:
        for column in table.columns:
            if isinstance(column.type, Enum) and column.type.name:
                labels.setdefault(column.type.name, set()).update(column.type.enums)
    return labels


def _column_issues(inspector: Inspector, metadata: MetaData) -> list[str]:
    issues: list[str] = []
    existing_tables = set(inspector.get_table_names())
    for table_name, columns in required_columns(metadata).items():
        if table_name not in existing_tables:
            issues.append(f"MISSING_TABLE:{table_name}")
            continue
        present = {str(item["name"]) for item in inspector.get_columns(table_name)}
        missing = sorted(columns - present)
        if missing:
            issues.append(f"MISSING_COLUMNS:{table_name}:{','.join(missing)}")
    return issues


def _enum_issues(inspector: Inspector, metadata: MetaData) -> tuple[list[str], list[str]]:
    # Only dialects with native enums (PostgreSQL) expose get_enums; elsewhere
    # the enum is a plain string column and there is nothing to compare.
    get_enums = getattr(inspector, "get_enums", None)
    if get_enums is None:
        return [], []

    found = {str(item["name"]): set(item.get("labels") or []) for item in get_enums()}
    issues: list[str] = []
    warnings: list[str] = []
    for enum_name, labels in required_enum_labels(metadata).items():
        if enum_name not in found:
            warnings.append(f"ENUM_NOT_FOUND:{enum_name}")
            continue
        missing = sorted(labels - found[enum_name])
        if missing:
            issues.append(f"MISSING_ENUM_VALUES:{enum_name}:{','.join(missing)}")
    return issues, warnings


def _migration_issues(connection: Connection) -> list[str]:
    try:
        version = connection.execute(text("SELECT version_num FROM alembic_version LIMIT 1")).scalar()
    except SQLAlchemyError as exc:
        return [f"ALEMBIC_VERSION_CHECK_FAILED:{exc.__class__.__name__}"]
    if not str(version or "").strip():
        return ["ALEMBIC_VERSION_EMPTY"]
    return []


def verify_runtime_schema(engine: Engine, metadata: MetaData = Base.metadata) -> SchemaGuardResult:
    """Compare the live database with the mapped models and the migration stamp."""
    checked_at_utc = datetime.now(timezone.utc)
    try:
        with engine.connect() as connection:
            inspector = inspect(connection)
            issues = _column_issues(inspector, metadata)
            enum_issues, warnings = _enum_issues(inspector, metadata)
            issues.extend(enum_issues)
            issues.extend(_migration_issues(connection))
    except SQLAlchemyError as exc:
        issues = [f"DATABASE_UNREACHABLE:{exc.__class__.__name__}"]
        warnings = []

    return SchemaGuardResult(
        ok=not issues,
        checked_at_utc=checked_at_utc,
        issues=issues,
        warnings=warnings,
    )
