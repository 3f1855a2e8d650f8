"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts (ports) for sales persons, customers,
  daily reports (with visit records) and comments.
- Keep application code independent from PostgreSQL / in-memory adapters.

Collaborators
- domain.entities
- infrastructure.repositories.postgres.*, infrastructure.repositories.in_memory.*

Constraints
- Pure interfaces only: no SQL, no side effects.
- Writes that collide with a unique key raise UniqueConstraintError whose
  `constraint` is one of the UNIQUE_* names below.
- Listings are deterministically ordered.
"""

from datetime import date
from typing import Iterable, Protocol

from ..crosscutting.pagination import Page, PageRequest
from ..identity.users import UserRole
from .entities import (
    Comment,
    Customer,
    DailyReport,
    NewVisitRecord,
    ReportFilter,
    ReportRow,
    ReportStatus,
    SalesPerson,
    SalesPersonView,
    VisitRecord,
)

UNIQUE_EMPLOYEE_CODE = "sales_persons_employee_code_key"
UNIQUE_EMAIL = "sales_persons_email_key"
UNIQUE_CUSTOMER_CODE = "customers_customer_code_key"
UNIQUE_REPORT_DATE = "daily_reports_sales_person_id_report_date_key"


class SalesPersonRepository(Protocol):
    """Sales person master + manager/subordinate relation."""

    def ping(self) -> bool:
        """True when the backing store answers."""
        ...

    def get_sales_person(self, sales_person_id: int) -> SalesPerson | None: ...

    def get_by_email(self, email: str) -> SalesPerson | None: ...

    def get_by_employee_code(self, employee_code: str) -> SalesPerson | None: ...

    def get_manager_id(self, sales_person_id: int) -> int | None:
        """manager_id of the given person; None when missing or unmanaged."""
        ...

    def list_subordinate_ids(self, manager_id: int) -> list[int]: ...

    def list_subordinates(
        self, manager_id: int, *, active_only: bool = True
    ) -> list[SalesPerson]:
        """Direct reports ordered by name."""
        ...

    def get_names(self, ids: Iterable[int]) -> dict[int, str]: ...

    def get_view(self, sales_person_id: int) -> SalesPersonView | None: ...

    def list_sales_persons(
        self,
        *,
        is_active: bool | None,
        role: UserRole | None,
        page: PageRequest,
    ) -> Page[SalesPersonView]:
        """Ordered by name asc, id asc."""
        ...

    def create_sales_person(
        self,
        *,
        employee_code: str,
        name: str,
        email: str,
        password_hash: str,
        role: UserRole,
        manager_id: int | None,
        is_active: bool,
    ) -> SalesPerson: ...

    def update_sales_person(
        self,
        sales_person_id: int,
        *,
        name: str,
        email: str,
        role: UserRole,
        manager_id: int | None,
        is_active: bool,
        password_hash: str | None = None,
    ) -> SalesPerson | None: ...


class CustomerRepository(Protocol):
    def get_customer(self, customer_id: int) -> Customer | None: ...

    def get_by_code(self, customer_code: str) -> Customer | None: ...

    def get_customers(self, ids: Iterable[int]) -> dict[int, Customer]: ...

    def list_customers(
        self,
        *,
        keyword: str | None,
        is_active: bool | None,
        page: PageRequest,
    ) -> Page[Customer]:
        """keyword matches name OR customer_code (case-insensitive); code asc."""
        ...

    def create_customer(
        self,
        *,
        customer_code: str,
        name: str,
        address: str | None,
        phone: str | None,
        is_active: bool,
    ) -> Customer: ...

    def update_customer(
        self,
        customer_id: int,
        *,
        name: str,
        address: str | None,
        phone: str | None,
        is_active: bool,
    ) -> Customer | None: ...


class DailyReportRepository(Protocol):
    """Daily reports; visit records are owned by their report."""

    def get_report(self, report_id: int) -> DailyReport | None: ...

    def find_by_owner_and_date(
        self, sales_person_id: int, report_date: date
    ) -> DailyReport | None: ...

    def list_visit_records(self, report_id: int) -> list[VisitRecord]:
        """Ordered by sort_order."""
        ...

    def list_reports(
        self, report_filter: ReportFilter, page: PageRequest
    ) -> Page[ReportRow]:
        """Ordered by report_date desc, id desc."""
        ...

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
        """Insert report + visit records atomically (sort_order = index)."""
        ...

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
        """Update the report and replace its visit records atomically."""
        ...

    def update_status(
        self, report_id: int, status: ReportStatus
    ) -> DailyReport | None: ...

    def delete_report(self, report_id: int) -> bool:
        """Delete the report with its visit records and comments."""
        ...


class CommentRepository(Protocol):
    def list_comments(self, report_id: int) -> list[Comment]:
        """Ordered by created_at asc, id asc."""
        ...

    def get_comment(self, comment_id: int) -> Comment | None: ...

    def create_comment(
        self, *, report_id: int, sales_person_id: int, content: str
    ) -> Comment: ...

    def update_comment(self, comment_id: int, content: str) -> Comment | None: ...

    def delete_comment(self, comment_id: int) -> bool: ...

    def delete_for_report(self, report_id: int) -> int: ...
