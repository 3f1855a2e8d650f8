"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema completo desde cero (migración fundacional):
      sales_persons, customers, daily_reports, visit_records, comments
  - Definir constraints e índices en los que se apoyan los repositorios.

Collaborators:
  - PostgreSQL 14+
  - infrastructure/repositories/postgres/* (usan este esquema como contrato)
  - domain/repositories.py nombres UNIQUE_* (deben coincidir con los nombres
    de constraint de abajo para mapear duplicados al código de error correcto)

Policy:
  - Migración BASELINE. El downgrade borra todo.
  - Toda evolución futura va en migraciones aditivas (002+).
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*, with_updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        )
    ]
    if with_updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                nullable=False,
                server_default=sa.text("NOW()"),
            )
        )
    return columns


def upgrade() -> None:
    # =========================================================
    # 1) SALES PERSONS (identidad + organigrama)
    # =========================================================
    op.create_table(
        "sales_persons",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("employee_code", sa.String(20), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "role", sa.String(20), nullable=False, server_default=sa.text("'member'")
        ),
        sa.Column(
            "manager_id",
            sa.Integer,
            sa.ForeignKey("sales_persons.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "is_active", sa.Boolean, nullable=False, server_default=sa.text("true")
        ),
        *_timestamps(),
        sa.UniqueConstraint("employee_code", name="sales_persons_employee_code_key"),
        sa.UniqueConstraint("email", name="sales_persons_email_key"),
        sa.CheckConstraint(
            "role IN ('member', 'manager', 'admin')", name="ck_sales_persons_role"
        ),
        sa.CheckConstraint(
            "manager_id IS NULL OR manager_id <> id",
            name="ck_sales_persons_not_own_manager",
        ),
    )
    op.create_index("ix_sales_persons_manager_id", "sales_persons", ["manager_id"])

    # =========================================================
    # 2) CUSTOMERS
    # =========================================================
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("customer_code", sa.String(20), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column(
            "is_active", sa.Boolean, nullable=False, server_default=sa.text("true")
        ),
        *_timestamps(),
        sa.UniqueConstraint("customer_code", name="customers_customer_code_key"),
    )

    # =========================================================
    # 3) DAILY REPORTS
    # =========================================================
    op.create_table(
        "daily_reports",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "sales_person_id",
            sa.Integer,
            sa.ForeignKey("sales_persons.id"),
            nullable=False,
        ),
        sa.Column("report_date", sa.Date, nullable=False),
        sa.Column("problem", sa.Text, nullable=True),
        sa.Column("plan", sa.Text, nullable=True),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default=sa.text("'draft'")
        ),
        *_timestamps(),
        sa.UniqueConstraint(
            "sales_person_id",
            "report_date",
            name="daily_reports_sales_person_id_report_date_key",
        ),
        sa.CheckConstraint(
            "status IN ('draft', 'submitted', 'reviewed')",
            name="ck_daily_reports_status",
        ),
    )
    op.create_index(
        "ix_daily_reports_report_date", "daily_reports", ["report_date"]
    )

    # =========================================================
    # 4) VISIT RECORDS (pertenecen a un reporte)
    # =========================================================
    op.create_table(
        "visit_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "daily_report_id",
            sa.Integer,
            sa.ForeignKey("daily_reports.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=False
        ),
        # HH:MM, validado en el borde de la API
        sa.Column("visit_time", sa.String(5), nullable=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(with_updated=False),
    )
    op.create_index(
        "ix_visit_records_daily_report_id", "visit_records", ["daily_report_id"]
    )

    # =========================================================
    # 5) COMMENTS
    # =========================================================
    op.create_table(
        "comments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "daily_report_id",
            sa.Integer,
            sa.ForeignKey("daily_reports.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "sales_person_id",
            sa.Integer,
            sa.ForeignKey("sales_persons.id"),
            nullable=False,
        ),
        sa.Column("content", sa.Text, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_comments_daily_report_id", "comments", ["daily_report_id"])


def downgrade() -> None:
    op.drop_table("comments")
    op.drop_table("visit_records")
    op.drop_table("daily_reports")
    op.drop_table("customers")
    op.drop_table("sales_persons")
