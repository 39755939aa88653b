"""Initial employees, work hours, absences and monthly balances

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

absence_type = postgresql.ENUM(
    "VACATION",
    "SICK",
    "PUBLIC_HOLIDAY",
    name="absence_type",
    create_type=False,
)


def upgrade() -> None:
    bind = op.get_bind()
    absence_type.create(bind, checkfirst=True)

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("mo_hours", sa.Float(), nullable=True),
        sa.Column("tu_hours", sa.Float(), nullable=True),
        sa.Column("we_hours", sa.Float(), nullable=True),
        sa.Column("th_hours", sa.Float(), nullable=True),
        sa.Column("fr_hours", sa.Float(), nullable=True),
        sa.UniqueConstraint("name", name="uq_employees_name"),
    )
    op.create_index("ix_employees_name_lower", "employees", [sa.text("lower(name)")], unique=False)

    op.create_table(
        "work_hours",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("day_date", sa.Date(), nullable=False),
        sa.Column("hours", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("comment", sa.String(length=1000), nullable=True),
        sa.Column("start_time", sa.String(length=5), nullable=True),
        sa.Column("end_time", sa.String(length=5), nullable=True),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("employee_id", "day_date", name="uq_work_hours_employee_date"),
    )
    op.create_index("ix_work_hours_employee_id", "work_hours", ["employee_id"], unique=False)
    op.create_index("ix_work_hours_day_date", "work_hours", ["day_date"], unique=False)

    op.create_table(
        "absences",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("day_date", sa.Date(), nullable=False),
        sa.Column("absence_type", absence_type, nullable=False),
        sa.Column("credited_hours", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("comment", sa.String(length=1000), nullable=True),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("employee_id", "day_date", name="uq_absences_employee_date"),
    )
    op.create_index("ix_absences_employee_id", "absences", ["employee_id"], unique=False)
    op.create_index("ix_absences_day_date", "absences", ["day_date"], unique=False)

    op.create_table(
        "monthly_balances",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("year_month", sa.Date(), nullable=False),
        sa.Column("difference", sa.Float(), nullable=False),
        sa.Column("carry_over", sa.Float(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("employee_id", "year_month", name="uq_monthly_balances_employee_month"),
    )
    op.create_index("ix_monthly_balances_employee_id", "monthly_balances", ["employee_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_monthly_balances_employee_id", table_name="monthly_balances")
    op.drop_table("monthly_balances")
    op.drop_index("ix_absences_day_date", table_name="absences")
    op.drop_index("ix_absences_employee_id", table_name="absences")
    op.drop_table("absences")
    op.drop_index("ix_work_hours_day_date", table_name="work_hours")
    op.drop_index("ix_work_hours_employee_id", table_name="work_hours")
    op.drop_table("work_hours")
    op.drop_index("ix_employees_name_lower", table_name="employees")
    op.drop_table("employees")

    bind = op.get_bind()
    absence_type.drop(bind, checkfirst=True)
