"""
===============================================================================
TARJETA CRC — schemas/reports.py
===============================================================================

Módulo:
    Schemas HTTP de reportes diarios, visitas y comentarios

Responsabilidades:
    - Validar formas y límites en el borde:
        * report_date como YYYY-MM-DD
        * problem / plan hasta 2000 caracteres
        * visit_time HH:MM (24h) o vacío
        * al menos una visita en el alta
        * contenido de comentario 1..1000 caracteres (trimmed)
    - Mapear proyecciones de dominio a respuestas snake_case.

Notas:
    - Las reglas que necesitan datos o el reloj (fechas futuras, estado del
      cliente, duplicados) viven en los casos de uso.
===============================================================================
"""

from __future__ import annotations

import re
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from daily_report.application.usecases import ReportInput, ReportPatch
from daily_report.domain.entities import (
    Comment,
    NewVisitRecord,
    ReportDetail,
    ReportStatus,
    ReportSummary,
    VisitRecord,
)

from .common import PersonRefRes, RequestModel

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
VISIT_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
MAX_TEXT = 2000


def _check_date_format(value: object) -> object:
    if isinstance(value, str) and not DATE_RE.match(value):
        raise ValueError("report_date must be in YYYY-MM-DD format")
    return value


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class VisitRecordReq(RequestModel):
    customer_id: int = Field(..., ge=1)
    content: str = Field(..., min_length=1, max_length=MAX_TEXT)
    visit_time: str | None = None

    @field_validator("visit_time", mode="before")
    @classmethod
    def validate_visit_time(cls, v: object) -> object:
        if v is None or v == "":
            return None
        if not isinstance(v, str) or not VISIT_TIME_RE.match(v):
            raise ValueError("visit_time must be in HH:MM format")
        return v

    def to_domain(self) -> NewVisitRecord:
        return NewVisitRecord(
            customer_id=self.customer_id,
            content=self.content,
            visit_time=self.visit_time,
        )


class CreateReportReq(RequestModel):
    report_date: date
    problem: str | None = Field(default=None, max_length=MAX_TEXT)
    plan: str | None = Field(default=None, max_length=MAX_TEXT)
    status: ReportStatus = ReportStatus.DRAFT
    visit_records: list[VisitRecordReq] = Field(
        ..., min_length=1, description="At least one visit record"
    )

    @field_validator("report_date", mode="before")
    @classmethod
    def validate_report_date(cls, v: object) -> object:
        return _check_date_format(v)

    def to_input(self) -> ReportInput:
        return ReportInput(
            report_date=self.report_date,
            problem=self.problem,
            plan=self.plan,
            status=self.status,
            visit_records=[v.to_domain() for v in self.visit_records],
        )


class UpdateReportReq(RequestModel):
    """Patch: los campos omitidos conservan su valor; "" limpia problem/plan."""

    report_date: date | None = None
    problem: str | None = Field(default=None, max_length=MAX_TEXT)
    plan: str | None = Field(default=None, max_length=MAX_TEXT)
    status: ReportStatus | None = None
    visit_records: list[VisitRecordReq] | None = Field(default=None, min_length=1)

    @field_validator("report_date", mode="before")
    @classmethod
    def validate_report_date(cls, v: object) -> object:
        return _check_date_format(v)

    def to_patch(self) -> ReportPatch:
        return ReportPatch(
            report_date=self.report_date,
            problem=self.problem,
            plan=self.plan,
            status=self.status,
            visit_records=(
                [v.to_domain() for v in self.visit_records]
                if self.visit_records is not None
                else None
            ),
        )


class CommentReq(RequestModel):
    content: str = Field(..., min_length=1, max_length=1000)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class ReportListItemRes(BaseModel):
    id: int
    report_date: date
    sales_person: PersonRefRes
    visit_count: int
    status: ReportStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_summary(cls, summary: ReportSummary) -> "ReportListItemRes":
        r = summary.report
        return cls(
            id=r.id,
            report_date=r.report_date,
            sales_person=PersonRefRes.from_ref(summary.sales_person),
            visit_count=summary.visit_count,
            status=r.status,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


class VisitRecordRes(BaseModel):
    id: int
    customer: PersonRefRes
    visit_time: str | None = None
    content: str
    sort_order: int

    @classmethod
    def from_entity(cls, v: VisitRecord) -> "VisitRecordRes":
        return cls(
            id=v.id,
            customer=PersonRefRes(id=v.customer_id, name=v.customer_name or ""),
            visit_time=v.visit_time,
            content=v.content,
            sort_order=v.sort_order,
        )


class CommentRes(BaseModel):
    id: int
    report_id: int
    commenter: PersonRefRes
    content: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, c: Comment) -> "CommentRes":
        return cls(
            id=c.id,
            report_id=c.daily_report_id,
            commenter=PersonRefRes(id=c.sales_person_id, name=c.author_name or ""),
            content=c.content,
            created_at=c.created_at,
            updated_at=c.updated_at,
        )


class ReportDetailRes(BaseModel):
    id: int
    report_date: date
    sales_person: PersonRefRes
    problem: str | None = None
    plan: str | None = None
    status: ReportStatus
    visit_records: list[VisitRecordRes] = Field(default_factory=list)
    comments: list[CommentRes] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_detail(cls, detail: ReportDetail) -> "ReportDetailRes":
        r = detail.report
        return cls(
            id=r.id,
            report_date=r.report_date,
            sales_person=PersonRefRes.from_ref(detail.sales_person),
            problem=r.problem,
            plan=r.plan,
            status=r.status,
            visit_records=[VisitRecordRes.from_entity(v) for v in detail.visit_records],
            comments=[CommentRes.from_entity(c) for c in detail.comments],
            created_at=r.created_at,
            updated_at=r.updated_at,
        )
