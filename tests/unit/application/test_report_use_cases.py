"""
Name: Daily Report Use Case Tests

Responsibilities:
  - Create: date/status/visit/customer rules and one report per day
  - Read/list: access policy and listing scope
  - Update/delete: owner only, reviewed reports frozen
  - Review: reviewers move submitted reports to reviewed
"""

from datetime import date, timedelta

import pytest

from daily_report.application.usecases import (
    CreateReportUseCase,
    DeleteReportUseCase,
    GetReportUseCase,
    ListReportsUseCase,
    ReportInput,
    ReportPatch,
    ReviewReportUseCase,
    UpdateReportUseCase,
    UseCaseErrorCode,
)
from daily_report.crosscutting.pagination import PageRequest
from daily_report.domain.entities import NewVisitRecord, ReportStatus

pytestmark = pytest.mark.unit

TODAY = date(2026, 10, 18)
YESTERDAY = TODAY - timedelta(days=1)


def _use_case(cls, repos):
    return cls(
        repos.reports,
        repos.sales_persons,
        repos.customers,
        repos.comments,
        today=lambda: TODAY,
    )


def _visits(*customer_ids: int) -> list[NewVisitRecord]:
    return [
        NewVisitRecord(customer_id=cid, content=f"visit {i}", visit_time="10:00")
        for i, cid in enumerate(customer_ids)
    ]


def _store_report(repos, owner, day=YESTERDAY, status=ReportStatus.DRAFT, customer_id=1):
    return repos.reports.create_report(
        sales_person_id=owner.id,
        report_date=day,
        problem="slow approvals",
        plan="follow up",
        status=status,
        visit_records=_visits(customer_id),
    )


class TestCreateReport:
    def test_owner_creates_report_with_resolved_names(self, repos, roster):
        use_case = _use_case(CreateReportUseCase, repos)

        result = use_case.execute(
            roster.member,
            ReportInput(
                report_date=TODAY,
                visit_records=_visits(roster.customer_id, roster.second_customer_id),
                problem="pricing",
                plan="send quote",
            ),
        )

        assert result.error is None
        detail = result.value
        assert detail.report.sales_person_id == roster.member.id
        assert detail.report.status == ReportStatus.DRAFT
        assert detail.sales_person.name == "Member"
        assert [v.customer_name for v in detail.visit_records] == ["Acme Corp", "Globex"]
        assert [v.sort_order for v in detail.visit_records] == [0, 1]
        assert detail.comments == []

    def test_blank_problem_and_plan_are_stored_as_none(self, repos, roster):
        use_case = _use_case(CreateReportUseCase, repos)

        result = use_case.execute(
            roster.member,
            ReportInput(
                report_date=TODAY,
                visit_records=_visits(roster.customer_id),
                problem="",
                plan="",
            ),
        )

        assert result.value.report.problem is None
        assert result.value.report.plan is None

    def test_future_date_is_rejected(self, repos, roster):
        use_case = _use_case(CreateReportUseCase, repos)

        result = use_case.execute(
            roster.member,
            ReportInput(
                report_date=TODAY + timedelta(days=1),
                visit_records=_visits(roster.customer_id),
            ),
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR

    def test_reviewed_status_cannot_be_chosen_by_author(self, repos, roster):
        use_case = _use_case(CreateReportUseCase, repos)

        result = use_case.execute(
            roster.member,
            ReportInput(
                report_date=TODAY,
                visit_records=_visits(roster.customer_id),
                status=ReportStatus.REVIEWED,
            ),
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR

    def test_at_least_one_visit_is_required(self, repos, roster):
        use_case = _use_case(CreateReportUseCase, repos)

        result = use_case.execute(
            roster.member, ReportInput(report_date=TODAY, visit_records=[])
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR

    def test_unknown_customer_is_rejected(self, repos, roster):
        use_case = _use_case(CreateReportUseCase, repos)

        result = use_case.execute(
            roster.member, ReportInput(report_date=TODAY, visit_records=_visits(999))
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR
        assert "999" in result.error.message

    def test_inactive_customer_is_rejected(self, repos, roster):
        use_case = _use_case(CreateReportUseCase, repos)

        result = use_case.execute(
            roster.member,
            ReportInput(
                report_date=TODAY, visit_records=_visits(roster.inactive_customer_id)
            ),
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR
        assert "inactive" in result.error.message

    def test_second_report_for_same_day_conflicts(self, repos, roster):
        _store_report(repos, roster.member, day=TODAY)
        use_case = _use_case(CreateReportUseCase, repos)

        result = use_case.execute(
            roster.member,
            ReportInput(report_date=TODAY, visit_records=_visits(roster.customer_id)),
        )

        assert result.error.code == UseCaseErrorCode.CONFLICT

    def test_same_day_for_another_person_is_fine(self, repos, roster):
        _store_report(repos, roster.peer, day=TODAY)
        use_case = _use_case(CreateReportUseCase, repos)

        result = use_case.execute(
            roster.member,
            ReportInput(report_date=TODAY, visit_records=_visits(roster.customer_id)),
        )

        assert result.error is None


class TestGetReport:
    @pytest.mark.parametrize("who", ["member", "manager", "admin"])
    def test_allowed_viewers(self, repos, roster, who):
        report = _store_report(repos, roster.member)

        result = _use_case(GetReportUseCase, repos).execute(
            getattr(roster, who), report.id
        )

        assert result.error is None
        assert result.value.report.id == report.id

    @pytest.mark.parametrize("who", ["peer", "other_manager", "outsider"])
    def test_other_viewers_are_forbidden(self, repos, roster, who):
        report = _store_report(repos, roster.member)

        result = _use_case(GetReportUseCase, repos).execute(
            getattr(roster, who), report.id
        )

        assert result.error.code == UseCaseErrorCode.FORBIDDEN

    def test_missing_report_is_not_found(self, repos, roster):
        result = _use_case(GetReportUseCase, repos).execute(roster.admin, 404)

        assert result.error.code == UseCaseErrorCode.NOT_FOUND
        assert result.error.resource == "Report"

    def test_detail_includes_comments_with_author_names(self, repos, roster):
        report = _store_report(repos, roster.member)
        repos.comments.create_comment(
            report_id=report.id, sales_person_id=roster.manager.id, content="Nice"
        )

        detail = _use_case(GetReportUseCase, repos).execute(
            roster.member, report.id
        ).value

        assert [(c.content, c.author_name) for c in detail.comments] == [
            ("Nice", "Manager")
        ]


class TestListReports:
    @pytest.fixture
    def stored(self, repos, roster):
        return {
            "member": _store_report(repos, roster.member, day=YESTERDAY),
            "member_old": _store_report(
                repos, roster.member, day=TODAY - timedelta(days=5),
                status=ReportStatus.SUBMITTED,
            ),
            "peer": _store_report(repos, roster.peer, day=YESTERDAY),
            "manager": _store_report(repos, roster.manager, day=YESTERDAY),
            "outsider": _store_report(repos, roster.outsider, day=YESTERDAY),
        }

    def _ids(self, result) -> set[int]:
        return {s.report.id for s in result.value.items}

    def test_member_lists_only_own_reports(self, repos, roster, stored):
        result = _use_case(ListReportsUseCase, repos).execute(
            roster.member, page=PageRequest()
        )

        assert self._ids(result) == {stored["member"].id, stored["member_old"].id}
        assert result.value.total_count == 2

    def test_manager_lists_self_and_direct_reports(self, repos, roster, stored):
        result = _use_case(ListReportsUseCase, repos).execute(
            roster.manager, page=PageRequest()
        )

        assert self._ids(result) == {
            stored["member"].id,
            stored["member_old"].id,
            stored["peer"].id,
            stored["manager"].id,
        }

    def test_admin_lists_everything(self, repos, roster, stored):
        result = _use_case(ListReportsUseCase, repos).execute(
            roster.admin, page=PageRequest()
        )

        assert result.value.total_count == len(stored)

    def test_filter_outside_scope_yields_empty_page(self, repos, roster, stored):
        result = _use_case(ListReportsUseCase, repos).execute(
            roster.manager, page=PageRequest(), sales_person_id=roster.outsider.id
        )

        assert result.error is None
        assert result.value.items == []
        assert result.value.total_count == 0

    def test_filter_by_sales_person_and_status(self, repos, roster, stored):
        result = _use_case(ListReportsUseCase, repos).execute(
            roster.manager,
            page=PageRequest(),
            sales_person_id=roster.member.id,
            status=ReportStatus.SUBMITTED,
        )

        assert self._ids(result) == {stored["member_old"].id}

    def test_date_range_filter(self, repos, roster, stored):
        result = _use_case(ListReportsUseCase, repos).execute(
            roster.member,
            page=PageRequest(),
            start_date=YESTERDAY,
            end_date=TODAY,
        )

        assert self._ids(result) == {stored["member"].id}

    def test_inverted_date_range_is_invalid(self, repos, roster, stored):
        result = _use_case(ListReportsUseCase, repos).execute(
            roster.member, page=PageRequest(), start_date=TODAY, end_date=YESTERDAY
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR

    def test_rows_carry_owner_name_and_visit_count(self, repos, roster, stored):
        result = _use_case(ListReportsUseCase, repos).execute(
            roster.member, page=PageRequest(per_page=1)
        )

        assert result.value.total_count == 2
        (row,) = result.value.items
        # newest first
        assert row.report.id == stored["member"].id
        assert row.sales_person.name == "Member"
        assert row.visit_count == 1


class TestUpdateReport:
    def test_owner_patch_keeps_omitted_fields(self, repos, roster):
        report = _store_report(repos, roster.member)

        result = _use_case(UpdateReportUseCase, repos).execute(
            roster.member, report.id, ReportPatch(problem="new problem")
        )

        detail = result.value
        assert detail.report.problem == "new problem"
        assert detail.report.plan == "follow up"
        assert detail.report.report_date == YESTERDAY
        assert len(detail.visit_records) == 1

    def test_empty_string_clears_text_fields(self, repos, roster):
        report = _store_report(repos, roster.member)

        result = _use_case(UpdateReportUseCase, repos).execute(
            roster.member, report.id, ReportPatch(plan="")
        )

        assert result.value.report.plan is None
        assert result.value.report.problem == "slow approvals"

    def test_visit_records_are_replaced(self, repos, roster):
        report = _store_report(repos, roster.member)

        result = _use_case(UpdateReportUseCase, repos).execute(
            roster.member,
            report.id,
            ReportPatch(
                visit_records=_visits(roster.second_customer_id, roster.customer_id),
                status=ReportStatus.SUBMITTED,
            ),
        )

        detail = result.value
        assert detail.report.status == ReportStatus.SUBMITTED
        assert [v.customer_name for v in detail.visit_records] == ["Globex", "Acme Corp"]

    def test_text_edit_ignores_customer_deactivated_since(self, repos, roster):
        report = _store_report(
            repos, roster.member, customer_id=roster.inactive_customer_id
        )

        result = _use_case(UpdateReportUseCase, repos).execute(
            roster.member, report.id, ReportPatch(problem="new text")
        )

        assert result.error is None
        assert result.value.report.problem == "new text"
        assert [v.customer_id for v in result.value.visit_records] == [
            roster.inactive_customer_id
        ]

    def test_replacing_visits_still_rejects_inactive_customer(self, repos, roster):
        report = _store_report(repos, roster.member)

        result = _use_case(UpdateReportUseCase, repos).execute(
            roster.member,
            report.id,
            ReportPatch(visit_records=_visits(roster.inactive_customer_id)),
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR

    @pytest.mark.parametrize("who", ["manager", "admin", "peer"])
    def test_non_owner_cannot_edit(self, repos, roster, who):
        report = _store_report(repos, roster.member)

        result = _use_case(UpdateReportUseCase, repos).execute(
            getattr(roster, who), report.id, ReportPatch(problem="x")
        )

        assert result.error.code == UseCaseErrorCode.FORBIDDEN

    def test_reviewed_report_is_frozen(self, repos, roster):
        report = _store_report(repos, roster.member, status=ReportStatus.REVIEWED)

        result = _use_case(UpdateReportUseCase, repos).execute(
            roster.member, report.id, ReportPatch(problem="x")
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR

    def test_moving_onto_an_existing_date_conflicts(self, repos, roster):
        _store_report(repos, roster.member, day=TODAY)
        report = _store_report(repos, roster.member, day=YESTERDAY)

        result = _use_case(UpdateReportUseCase, repos).execute(
            roster.member, report.id, ReportPatch(report_date=TODAY)
        )

        assert result.error.code == UseCaseErrorCode.CONFLICT

    def test_missing_report_is_not_found(self, repos, roster):
        result = _use_case(UpdateReportUseCase, repos).execute(
            roster.member, 404, ReportPatch(problem="x")
        )

        assert result.error.code == UseCaseErrorCode.NOT_FOUND


class TestDeleteReport:
    def test_owner_deletes_report_and_its_comments(self, repos, roster):
        report = _store_report(repos, roster.member)
        repos.comments.create_comment(
            report_id=report.id, sales_person_id=roster.manager.id, content="hi"
        )

        result = _use_case(DeleteReportUseCase, repos).execute(roster.member, report.id)

        assert result.value == report.id
        assert repos.reports.get_report(report.id) is None
        assert repos.comments.list_comments(report.id) == []

    def test_admin_cannot_delete_someone_elses_report(self, repos, roster):
        report = _store_report(repos, roster.member)

        result = _use_case(DeleteReportUseCase, repos).execute(roster.admin, report.id)

        assert result.error.code == UseCaseErrorCode.FORBIDDEN
        assert repos.reports.get_report(report.id) is not None

    def test_missing_report_is_not_found(self, repos, roster):
        result = _use_case(DeleteReportUseCase, repos).execute(roster.member, 404)

        assert result.error.code == UseCaseErrorCode.NOT_FOUND


class TestReviewReport:
    def test_manager_reviews_submitted_report(self, repos, roster):
        report = _store_report(repos, roster.member, status=ReportStatus.SUBMITTED)

        result = _use_case(ReviewReportUseCase, repos).execute(
            roster.manager, report.id
        )

        assert result.value.report.status == ReportStatus.REVIEWED

    def test_draft_cannot_be_reviewed(self, repos, roster):
        report = _store_report(repos, roster.member)

        result = _use_case(ReviewReportUseCase, repos).execute(
            roster.manager, report.id
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR

    @pytest.mark.parametrize("who", ["member", "peer", "other_manager"])
    def test_non_reviewers_are_forbidden(self, repos, roster, who):
        report = _store_report(repos, roster.member, status=ReportStatus.SUBMITTED)

        result = _use_case(ReviewReportUseCase, repos).execute(
            getattr(roster, who), report.id
        )

        assert result.error.code == UseCaseErrorCode.FORBIDDEN
