"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/daily_report.py
============================================================
Class: PostgresDailyReportRepository

Responsibilities:
- Reportes diarios y sus visitas en PostgreSQL (SQL crudo).
- Alta/edición atómica: la fila del reporte y sus visitas se escriben en
  una sola transacción; la edición reemplaza las visitas.
- Listado filtrado y paginado con conteo de visitas.

Collaborators:
- domain.entities (DailyReport, VisitRecord, ReportRow, ReportFilter)
- PostgresRepositoryBase
- Tablas: daily_reports, visit_records (comments cae en cascada al borrar)

Constraints / Notes:
- La visibilidad la decide el llamador y llega como
  ReportFilter.sales_person_ids; este repo solo filtra.
============================================================
"""

from __future__ import annotations

from datetime import date

from psycopg import Connection

from ....crosscutting.pagination import Page, PageRequest
from ....domain.entities import (
    DailyReport,
    NewVisitRecord,
    ReportFilter,
    ReportRow,
    ReportStatus,
    VisitRecord,
)
from .base import PostgresRepositoryBase


class PostgresDailyReportRepository(PostgresRepositoryBase):
    _SELECT_COLUMNS = """
        r.id, r.sales_person_id, r.report_date, r.status,
        r.problem, r.plan, r.created_at, r.updated_at
    """

    _VISIT_COLUMNS = """
        v.id, v.daily_report_id, v.customer_id, v.content, v.visit_time,
        v.sort_order, c.name, v.created_at
    """

    @staticmethod
    def _row_to_report(row: tuple) -> DailyReport:
        (
            report_id,
            sales_person_id,
            report_date,
            status,
            problem,
            plan,
            created_at,
            updated_at,
        ) = row[:8]
        return DailyReport(
            id=report_id,
            sales_person_id=sales_person_id,
            report_date=report_date,
            status=ReportStatus(status),
            problem=problem,
            plan=plan,
            created_at=created_at,
            updated_at=updated_at,
        )

    @staticmethod
    def _row_to_visit(row: tuple) -> VisitRecord:
        (
            visit_id,
            report_id,
            customer_id,
            content,
            visit_time,
            sort_order,
            customer_name,
            created_at,
        ) = row
        return VisitRecord(
            id=visit_id,
            daily_report_id=report_id,
            customer_id=customer_id,
            content=content,
            visit_time=visit_time,
            sort_order=sort_order,
            customer_name=customer_name,
            created_at=created_at,
        )

    # =========================================================
    # Lecturas
    # =========================================================
    def get_report(self, report_id: int) -> DailyReport | None:
        row = self._fetchone(
            query=f"SELECT {self._SELECT_COLUMNS} FROM daily_reports r WHERE r.id = %s",
            params=[report_id],
            context_msg="PostgresDailyReportRepository: Failed to get report",
            extra={"report_id": report_id},
        )
        return self._row_to_report(row) if row else None

    def find_by_owner_and_date(
        self, sales_person_id: int, report_date: date
    ) -> DailyReport | None:
        row = self._fetchone(
            query=f"""
                SELECT {self._SELECT_COLUMNS}
                FROM daily_reports r
                WHERE r.sales_person_id = %s AND r.report_date = %s
            """,
            params=[sales_person_id, report_date],
            context_msg="PostgresDailyReportRepository: Failed to find report by date",
            extra={"sales_person_id": sales_person_id},
        )
        return self._row_to_report(row) if row else None

    def list_visit_records(self, report_id: int) -> list[VisitRecord]:
        rows = self._fetchall(
            query=f"""
                SELECT {self._VISIT_COLUMNS}
                FROM visit_records v
                LEFT JOIN customers c ON c.id = v.customer_id
                WHERE v.daily_report_id = %s
                ORDER BY v.sort_order ASC, v.id ASC
            """,
            params=[report_id],
            context_msg="PostgresDailyReportRepository: Failed to list visit records",
            extra={"report_id": report_id},
        )
        return [self._row_to_visit(r) for r in rows]

    def list_reports(
        self, report_filter: ReportFilter, page: PageRequest
    ) -> Page[ReportRow]:
        conditions: list[str] = []
        params: list[object] = []

        if report_filter.sales_person_ids is not None:
            if not report_filter.sales_person_ids:
                return Page.empty()
            conditions.append("r.sales_person_id = ANY(%s)")
            params.append(sorted(report_filter.sales_person_ids))
        if report_filter.start_date is not None:
            conditions.append("r.report_date >= %s")
            params.append(report_filter.start_date)
        if report_filter.end_date is not None:
            conditions.append("r.report_date <= %s")
            params.append(report_filter.end_date)
        if report_filter.status is not None:
            conditions.append("r.status = %s")
            params.append(report_filter.status.value)

        where_sql = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        extra = {"conditions": len(conditions)}

        total = self._count(
            query=f"SELECT COUNT(*) FROM daily_reports r {where_sql}",
            params=params,
            context_msg="PostgresDailyReportRepository: Failed to count reports",
            extra=extra,
        )
        rows = self._fetchall(
            query=f"""
                SELECT {self._SELECT_COLUMNS},
                       (SELECT COUNT(*) FROM visit_records v
                        WHERE v.daily_report_id = r.id) AS visit_count
                FROM daily_reports r
                {where_sql}
                ORDER BY r.report_date DESC, r.id DESC
                LIMIT %s OFFSET %s
            """,
            params=[*params, page.limit, page.offset],
            context_msg="PostgresDailyReportRepository: Failed to list reports",
            extra=extra,
        )
        items = [
            ReportRow(report=self._row_to_report(r), visit_count=int(r[8]))
            for r in rows
        ]
        return Page(items=items, total_count=total)

    # =========================================================
    # Escrituras
    # =========================================================
    @staticmethod
    def _insert_visits(
        conn: Connection, report_id: int, visit_records: list[NewVisitRecord]
    ) -> None:
        for index, visit in enumerate(visit_records):
            conn.execute(
                """
                INSERT INTO visit_records
                    (daily_report_id, customer_id, visit_time, content,
                     sort_order, created_at)
                VALUES (%s, %s, %s, %s, %s, NOW())
                """,
                (report_id, visit.customer_id, visit.visit_time, visit.content, index),
            )

    def create_report(
        self,
        *,
        sales_person_id: int,
        report_date: date,
        problem: str | None,
        plan: str | None,
        status: ReportStatus,
        visit_records: list[NewVisitRecord],
    ) -> DailyReport:
        context_msg = "PostgresDailyReportRepository: Failed to create report"
        with self._transaction(
            context_msg, {"sales_person_id": sales_person_id}
        ) as conn:
            row = conn.execute(
                f"""
                INSERT INTO daily_reports AS r
                    (sales_person_id, report_date, problem, plan, status,
                     created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, NOW(), NOW())
                RETURNING {self._SELECT_COLUMNS}
                """,
                (sales_person_id, report_date, problem, plan, status.value),
            ).fetchone()
            report = self._row_to_report(row)
            self._insert_visits(conn, report.id, visit_records)
        return report

    def update_report(
        self,
        report_id: int,
        *,
        report_date: date,
        problem: str | None,
        plan: str | None,
        status: ReportStatus,
        visit_records: list[NewVisitRecord],
    ) -> DailyReport | None:
        context_msg = "PostgresDailyReportRepository: Failed to update report"
        with self._transaction(context_msg, {"report_id": report_id}) as conn:
            row = conn.execute(
                f"""
                UPDATE daily_reports AS r
                SET report_date = %s, problem = %s, plan = %s, status = %s,
                    updated_at = NOW()
                WHERE r.id = %s
                RETURNING {self._SELECT_COLUMNS}
                """,
                (report_date, problem, plan, status.value, report_id),
            ).fetchone()
            if row is None:
                return None
            conn.execute(
                "DELETE FROM visit_records WHERE daily_report_id = %s", (report_id,)
            )
            self._insert_visits(conn, report_id, visit_records)
        return self._row_to_report(row)

    def update_status(
        self, report_id: int, status: ReportStatus
    ) -> DailyReport | None:
        row = self._fetchone(
            query=f"""
                UPDATE daily_reports AS r
                SET status = %s, updated_at = NOW()
                WHERE r.id = %s
                RETURNING {self._SELECT_COLUMNS}
            """,
            params=[status.value, report_id],
            context_msg="PostgresDailyReportRepository: Failed to update status",
            extra={"report_id": report_id, "status": status.value},
        )
        return self._row_to_report(row) if row else None

    def delete_report(self, report_id: int) -> bool:
        deleted = self._execute(
            query="DELETE FROM daily_reports WHERE id = %s",
            params=[report_id],
            context_msg="PostgresDailyReportRepository: Failed to delete report",
            extra={"report_id": report_id},
        )
        return deleted > 0
