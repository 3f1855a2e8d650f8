"""
===============================================================================
USE CASES: Daily reports
===============================================================================

Business Goal:
    Let sales people record their daily visits, and let their management
    chain read and review them, under the access policy.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Classes:
    ListReportsUseCase, GetReportUseCase, CreateReportUseCase,
    UpdateReportUseCase, DeleteReportUseCase, ReviewReportUseCase

Responsibilities:
    - Apply domain.access_policy for every read/write.
    - Validate business rules that need data or the clock:
        * report_date not in the future
        * at least one visit record; customers exist and are active
        * one report per sales person and date (CONFLICT)
        * reviewed reports are frozen for the owner
    - Assemble ReportDetail (visit records + comments, names resolved).

Collaborators:
    - DailyReportRepository, SalesPersonRepository, CustomerRepository,
      CommentRepository
    - domain.access_policy
    - crosscutting.metrics.record_access_denied

Error Mapping:
    - NOT_FOUND:        report missing
    - FORBIDDEN:        policy denied
    - VALIDATION_ERROR: rule above violated
    - CONFLICT:         duplicate (sales_person_id, report_date)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Callable

from ...crosscutting.exceptions import UniqueConstraintError
from ...crosscutting.logger import logger
from ...crosscutting.metrics import record_access_denied
from ...crosscutting.pagination import Page, PageRequest
from ...domain.access_policy import (
    can_edit_report,
    can_post_comment,
    can_view_report,
    viewable_sales_person_ids,
)
from ...domain.entities import (
    DailyReport,
    NewVisitRecord,
    PersonRef,
    ReportDetail,
    ReportFilter,
    ReportStatus,
    ReportSummary,
)
from ...domain.repositories import (
    CommentRepository,
    CustomerRepository,
    DailyReportRepository,
    SalesPersonRepository,
)
from ...identity.users import AuthUser
from .results import Result, UseCaseErrorCode, forbidden, invalid, not_found

Today = Callable[[], date]

DUPLICATE_REPORT_MESSAGE = "A report for this date already exists"
AUTHOR_STATUSES = frozenset({ReportStatus.DRAFT, ReportStatus.SUBMITTED})


@dataclass(frozen=True)
class ReportInput:
    report_date: date
    visit_records: list[NewVisitRecord]
    problem: str | None = None
    plan: str | None = None
    status: ReportStatus = ReportStatus.DRAFT


@dataclass(frozen=True)
class ReportPatch:
    """Partial update; None keeps the stored value."""

    report_date: date | None = None
    visit_records: list[NewVisitRecord] | None = None
    problem: str | None = None
    plan: str | None = None
    status: ReportStatus | None = None


def _blank_to_none(value: str | None) -> str | None:
    return value if value else None


class _ReportUseCaseBase:
    """Shared collaborators and helpers (detail assembly, input rules)."""

    def __init__(
        self,
        reports: DailyReportRepository,
        sales_persons: SalesPersonRepository,
        customers: CustomerRepository,
        comments: CommentRepository,
        today: Today | None = None,
    ) -> None:
        self._reports = reports
        self._sales_persons = sales_persons
        self._customers = customers
        self._comments = comments
        self._today = today or date.today

    def _manager_of(self, sales_person_id: int) -> int | None:
        return self._sales_persons.get_manager_id(sales_person_id)

    def _person_ref(self, sales_person_id: int) -> PersonRef:
        names = self._sales_persons.get_names([sales_person_id])
        return PersonRef(id=sales_person_id, name=names.get(sales_person_id, ""))

    def _build_detail(self, report: DailyReport) -> ReportDetail:
        visits = self._reports.list_visit_records(report.id)
        missing = {v.customer_id for v in visits if v.customer_name is None}
        if missing:
            customers = self._customers.get_customers(missing)
            visits = [
                replace(v, customer_name=customers[v.customer_id].name)
                if v.customer_name is None and v.customer_id in customers
                else v
                for v in visits
            ]

        comments = self._comments.list_comments(report.id)
        unnamed = {c.sales_person_id for c in comments if c.author_name is None}
        if unnamed:
            names = self._sales_persons.get_names(unnamed)
            comments = [
                replace(c, author_name=names.get(c.sales_person_id))
                if c.author_name is None
                else c
                for c in comments
            ]

        return ReportDetail(
            report=report,
            sales_person=self._person_ref(report.sales_person_id),
            visit_records=visits,
            comments=comments,
        )

    def _check_input(
        self,
        *,
        report_date: date,
        status: ReportStatus,
        visit_records: list[NewVisitRecord],
        check_customers: bool = True,
    ) -> Result | None:
        if report_date > self._today():
            return invalid("report_date must not be in the future")
        if status not in AUTHOR_STATUSES:
            return invalid("status must be draft or submitted")
        if not visit_records:
            return invalid("At least one visit record is required")
        if not check_customers:
            return None

        wanted = {v.customer_id for v in visit_records}
        found = self._customers.get_customers(wanted)
        for customer_id in sorted(wanted):
            customer = found.get(customer_id)
            if customer is None:
                return invalid(f"Customer {customer_id} does not exist")
            if not customer.is_active:
                return invalid(f"Customer {customer_id} is inactive")
        return None


class ListReportsUseCase(_ReportUseCaseBase):
    def execute(
        self,
        actor: AuthUser,
        *,
        page: PageRequest,
        sales_person_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        status: ReportStatus | None = None,
    ) -> Result[Page[ReportSummary]]:
        if start_date and end_date and start_date > end_date:
            return invalid("start_date must be on or before end_date")

        scope = viewable_sales_person_ids(
            actor, self._sales_persons.list_subordinate_ids
        )
        if sales_person_id is not None:
            if scope is not None and sales_person_id not in scope:
                # Outside the caller's visibility: behave like "no reports".
                return Result.ok(Page.empty())
            scope = frozenset({sales_person_id})

        rows = self._reports.list_reports(
            ReportFilter(
                sales_person_ids=scope,
                start_date=start_date,
                end_date=end_date,
                status=status,
            ),
            page,
        )
        names = self._sales_persons.get_names(
            {row.report.sales_person_id for row in rows.items}
        )
        summaries = [
            ReportSummary(
                report=row.report,
                sales_person=PersonRef(
                    id=row.report.sales_person_id,
                    name=names.get(row.report.sales_person_id, ""),
                ),
                visit_count=row.visit_count,
            )
            for row in rows.items
        ]
        return Result.ok(Page(items=summaries, total_count=rows.total_count))


class GetReportUseCase(_ReportUseCaseBase):
    def execute(self, actor: AuthUser, report_id: int) -> Result[ReportDetail]:
        report = self._reports.get_report(report_id)
        if report is None:
            return not_found("Report")

        if not can_view_report(actor, report.sales_person_id, self._manager_of):
            record_access_denied("report.view")
            return forbidden("You do not have permission to view this report")

        return Result.ok(self._build_detail(report))


class CreateReportUseCase(_ReportUseCaseBase):
    def execute(self, actor: AuthUser, data: ReportInput) -> Result[ReportDetail]:
        error = self._check_input(
            report_date=data.report_date,
            status=data.status,
            visit_records=data.visit_records,
        )
        if error is not None:
            return error

        if self._reports.find_by_owner_and_date(actor.id, data.report_date):
            return Result.fail(UseCaseErrorCode.CONFLICT, DUPLICATE_REPORT_MESSAGE)

        try:
            report = self._reports.create_report(
                sales_person_id=actor.id,
                report_date=data.report_date,
                problem=_blank_to_none(data.problem),
                plan=_blank_to_none(data.plan),
                status=data.status,
                visit_records=list(data.visit_records),
            )
        except UniqueConstraintError:
            return Result.fail(UseCaseErrorCode.CONFLICT, DUPLICATE_REPORT_MESSAGE)

        logger.info(
            "report created",
            extra={"report_id": report.id, "visit_count": len(data.visit_records)},
        )
        return Result.ok(self._build_detail(report))


class UpdateReportUseCase(_ReportUseCaseBase):
    def execute(
        self, actor: AuthUser, report_id: int, patch: ReportPatch
    ) -> Result[ReportDetail]:
        current = self._reports.get_report(report_id)
        if current is None:
            return not_found("Report")

        if not can_edit_report(actor, current.sales_person_id):
            record_access_denied("report.edit")
            return forbidden("Only the author can edit this report")

        if current.status == ReportStatus.REVIEWED:
            return invalid("Reviewed reports can no longer be edited")

        report_date = patch.report_date or current.report_date
        status = patch.status or current.status
        visit_records = (
            patch.visit_records
            if patch.visit_records is not None
            else [
                NewVisitRecord(
                    customer_id=v.customer_id,
                    content=v.content,
                    visit_time=v.visit_time,
                )
                for v in self._reports.list_visit_records(report_id)
            ]
        )

        error = self._check_input(
            report_date=report_date,
            status=status,
            visit_records=visit_records,
            check_customers=patch.visit_records is not None,
        )
        if error is not None:
            return error

        if report_date != current.report_date:
            other = self._reports.find_by_owner_and_date(
                current.sales_person_id, report_date
            )
            if other is not None and other.id != report_id:
                return Result.fail(UseCaseErrorCode.CONFLICT, DUPLICATE_REPORT_MESSAGE)

        try:
            updated = self._reports.update_report(
                report_id,
                report_date=report_date,
                problem=_blank_to_none(
                    patch.problem if patch.problem is not None else current.problem
                ),
                plan=_blank_to_none(
                    patch.plan if patch.plan is not None else current.plan
                ),
                status=status,
                visit_records=list(visit_records),
            )
        except UniqueConstraintError:
            return Result.fail(UseCaseErrorCode.CONFLICT, DUPLICATE_REPORT_MESSAGE)

        if updated is None:
            return not_found("Report")
        return Result.ok(self._build_detail(updated))


class DeleteReportUseCase(_ReportUseCaseBase):
    def execute(self, actor: AuthUser, report_id: int) -> Result[int]:
        report = self._reports.get_report(report_id)
        if report is None:
            return not_found("Report")

        if not can_edit_report(actor, report.sales_person_id):
            record_access_denied("report.delete")
            return forbidden("Only the author can delete this report")

        self._comments.delete_for_report(report_id)
        if not self._reports.delete_report(report_id):
            return not_found("Report")

        logger.info("report deleted", extra={"report_id": report_id})
        return Result.ok(report_id)


class ReviewReportUseCase(_ReportUseCaseBase):
    """A reviewer (anyone allowed to comment) marks a submitted report reviewed."""

    def execute(self, actor: AuthUser, report_id: int) -> Result[ReportDetail]:
        report = self._reports.get_report(report_id)
        if report is None:
            return not_found("Report")

        if not can_post_comment(actor, report.sales_person_id, self._manager_of):
            record_access_denied("report.review")
            return forbidden("You do not have permission to review this report")

        if report.status != ReportStatus.SUBMITTED:
            return invalid("Only submitted reports can be reviewed")

        updated = self._reports.update_status(report_id, ReportStatus.REVIEWED)
        if updated is None:
            return not_found("Report")
        return Result.ok(self._build_detail(updated))
