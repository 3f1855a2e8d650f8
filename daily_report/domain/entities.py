"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Responsabilidades:
    - Definir los registros de dominio: SalesPerson, Customer, DailyReport,
      VisitRecord, Comment y sus proyecciones de lectura.
    - Mantenerlos libres de frameworks (sin FastAPI, sin psycopg).

Colaboradores:
    - domain/repositories.py (ports que devuelven estos tipos)
    - infrastructure/repositories/* (mapeo de filas)
    - interfaces/api/http/routers/* (mapeo a DTOs)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from ..identity.users import UserRole


class ReportStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"


@dataclass(frozen=True, slots=True)
class PersonRef:
    """Referencia liviana {id, name} embebida en otras proyecciones."""

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class SalesPerson:
    id: int
    employee_code: str
    name: str
    email: str
    password_hash: str
    role: UserRole
    manager_id: int | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class SalesPersonView:
    """SalesPerson con su manager resuelto (proyección de listado/detalle)."""

    person: SalesPerson
    manager: PersonRef | None = None


@dataclass(frozen=True, slots=True)
class Customer:
    id: int
    customer_code: str
    name: str
    address: str | None = None
    phone: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class VisitRecord:
    id: int
    daily_report_id: int
    customer_id: int
    content: str
    visit_time: str | None = None
    sort_order: int = 0
    customer_name: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class NewVisitRecord:
    """Visita tal como la envía el cliente (todavía sin id)."""

    customer_id: int
    content: str
    visit_time: str | None = None


@dataclass(frozen=True, slots=True)
class DailyReport:
    id: int
    sales_person_id: int
    report_date: date
    status: ReportStatus
    problem: str | None = None
    plan: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ReportRow:
    """Reporte tal como lo lista el repo (el nombre del dueño se resuelve arriba)."""

    report: DailyReport
    visit_count: int = 0


@dataclass(frozen=True, slots=True)
class ReportSummary:
    """Fila del listado de reportes."""

    report: DailyReport
    sales_person: PersonRef
    visit_count: int = 0


@dataclass(frozen=True, slots=True)
class Comment:
    id: int
    daily_report_id: int
    sales_person_id: int
    content: str
    author_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ReportDetail:
    report: DailyReport
    sales_person: PersonRef
    visit_records: list[VisitRecord] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ReportFilter:
    """
    Filtro del listado de reportes.

    sales_person_ids=None significa "sin restricción de dueño" (alcance admin).
    """

    sales_person_ids: frozenset[int] | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: ReportStatus | None = None
