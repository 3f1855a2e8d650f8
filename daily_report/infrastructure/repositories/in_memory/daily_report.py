"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/daily_report.py
============================================================
Class: InMemoryDailyReportRepository

Responsibilities:
  - Reportes diarios + visitas en memoria.
  - Respetar la clave única (sales_person_id, report_date) igual que Postgres.
  - Ordenar listados por report_date DESC, id DESC.

Notes:
  - Los nombres de cliente de las visitas no se resuelven acá (los completa
    el caso de uso desde el repositorio de clientes).
  - Thread-safe con Lock; reporte + visitas se escriben bajo el mismo lock.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from itertools import count
from threading import Lock

from ....crosscutting.exceptions import UniqueConstraintError
from ....crosscutting.pagination import Page, PageRequest
from ....domain.entities import (
    DailyReport,
    NewVisitRecord,
    ReportFilter,
    ReportRow,
    ReportStatus,
    VisitRecord,
)
from ....domain.repositories import UNIQUE_REPORT_DATE


class InMemoryDailyReportRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._reports: dict[int, DailyReport] = {}
        self._visits: dict[int, list[VisitRecord]] = {}
        self._report_ids = count(1)
        self._visit_ids = count(1)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def _assert_unique_date(
        self, sales_person_id: int, report_date: date, exclude_id: int | None
    ) -> None:
        for other in self._reports.values():
            if (
                other.id != exclude_id
                and other.sales_person_id == sales_person_id
                and other.report_date == report_date
            ):
                raise UniqueConstraintError(
                    "duplicate report date", constraint=UNIQUE_REPORT_DATE
                )

    def _build_visits(
        self, report_id: int, visit_records: list[NewVisitRecord]
    ) -> list[VisitRecord]:
        now = self._now()
        return [
            VisitRecord(
                id=next(self._visit_ids),
                daily_report_id=report_id,
                customer_id=v.customer_id,
                content=v.content,
                visit_time=v.visit_time,
                sort_order=index,
                created_at=now,
            )
            for index, v in enumerate(visit_records)
        ]

    # =========================================================
    # Lecturas
    # =========================================================
    def get_report(self, report_id: int) -> DailyReport | None:
        with self._lock:
            return self._reports.get(report_id)

    def find_by_owner_and_date(
        self, sales_person_id: int, report_date: date
    ) -> DailyReport | None:
        with self._lock:
            return next(
                (
                    r
                    for r in self._reports.values()
                    if r.sales_person_id == sales_person_id
                    and r.report_date == report_date
                ),
                None,
            )

    def list_visit_records(self, report_id: int) -> list[VisitRecord]:
        with self._lock:
            return sorted(
                self._visits.get(report_id, []), key=lambda v: (v.sort_order, v.id)
            )

    def list_reports(
        self, report_filter: ReportFilter, page: PageRequest
    ) -> Page[ReportRow]:
        f = report_filter
        with self._lock:
            matches = sorted(
                (
                    r
                    for r in self._reports.values()
                    if (f.sales_person_ids is None or r.sales_person_id in f.sales_person_ids)
                    and (f.start_date is None or r.report_date >= f.start_date)
                    and (f.end_date is None or r.report_date <= f.end_date)
                    and (f.status is None or r.status == f.status)
                ),
                key=lambda r: (r.report_date, r.id),
                reverse=True,
            )
            window = matches[page.offset : page.offset + page.limit]
            return Page(
                items=[
                    ReportRow(report=r, visit_count=len(self._visits.get(r.id, [])))
                    for r in window
                ],
                total_count=len(matches),
            )

    # =========================================================
    # Escrituras
    # =========================================================
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
        with self._lock:
            self._assert_unique_date(sales_person_id, report_date, exclude_id=None)
            now = self._now()
            report = DailyReport(
                id=next(self._report_ids),
                sales_person_id=sales_person_id,
                report_date=report_date,
                status=status,
                problem=problem,
                plan=plan,
                created_at=now,
                updated_at=now,
            )
            self._reports[report.id] = report
            self._visits[report.id] = self._build_visits(report.id, visit_records)
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
        with self._lock:
            current = self._reports.get(report_id)
            if current is None:
                return None
            self._assert_unique_date(
                current.sales_person_id, report_date, exclude_id=report_id
            )
            updated = replace(
                current,
                report_date=report_date,
                problem=problem,
                plan=plan,
                status=status,
                updated_at=self._now(),
            )
            self._reports[report_id] = updated
            self._visits[report_id] = self._build_visits(report_id, visit_records)
            return updated

    def update_status(
        self, report_id: int, status: ReportStatus
    ) -> DailyReport | None:
        with self._lock:
            current = self._reports.get(report_id)
            if current is None:
                return None
            updated = replace(current, status=status, updated_at=self._now())
            self._reports[report_id] = updated
            return updated

    def delete_report(self, report_id: int) -> bool:
        with self._lock:
            self._visits.pop(report_id, None)
            return self._reports.pop(report_id, None) is not None
