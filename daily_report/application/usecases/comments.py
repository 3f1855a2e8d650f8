"""
===============================================================================
USE CASES: Report comments
===============================================================================

Business Goal:
    Managers (and admins) leave feedback on reports; authors of a comment may
    correct or withdraw it.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Classes:
    ListCommentsUseCase, PostCommentUseCase, UpdateCommentUseCase,
    DeleteCommentUseCase

Responsibilities:
    - List: report must exist and be viewable (can_view_report).
    - Post: NOT_FOUND first, then can_post_comment.
    - Update/Delete: only the comment's author.
    - Content is trimmed; empty after trimming is a VALIDATION_ERROR.

Collaborators:
    - CommentRepository, DailyReportRepository, SalesPersonRepository
    - domain.access_policy
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace

from ...crosscutting.logger import logger
from ...crosscutting.metrics import record_access_denied
from ...domain.access_policy import can_post_comment, can_view_report
from ...domain.entities import Comment
from ...domain.repositories import (
    CommentRepository,
    DailyReportRepository,
    SalesPersonRepository,
)
from ...identity.users import AuthUser
from .results import Result, forbidden, invalid, not_found

MAX_COMMENT_LENGTH = 1000


def _clean_content(content: str) -> str | Result:
    cleaned = (content or "").strip()
    if not cleaned:
        return invalid("Comment content is required")
    if len(cleaned) > MAX_COMMENT_LENGTH:
        return invalid(f"Comment must be at most {MAX_COMMENT_LENGTH} characters")
    return cleaned


class _CommentUseCaseBase:
    def __init__(
        self,
        comments: CommentRepository,
        reports: DailyReportRepository,
        sales_persons: SalesPersonRepository,
    ) -> None:
        self._comments = comments
        self._reports = reports
        self._sales_persons = sales_persons

    def _manager_of(self, sales_person_id: int) -> int | None:
        return self._sales_persons.get_manager_id(sales_person_id)

    def _with_author(self, comment: Comment) -> Comment:
        if comment.author_name is not None:
            return comment
        names = self._sales_persons.get_names([comment.sales_person_id])
        return replace(comment, author_name=names.get(comment.sales_person_id))

    def _owned_comment(self, actor: AuthUser, comment_id: int, action: str):
        comment = self._comments.get_comment(comment_id)
        if comment is None:
            return not_found("Comment")
        if comment.sales_person_id != actor.id:
            record_access_denied(f"comment.{action}")
            return forbidden(f"Only the author can {action} this comment")
        return comment


class ListCommentsUseCase(_CommentUseCaseBase):
    def execute(self, actor: AuthUser, report_id: int) -> Result[list[Comment]]:
        report = self._reports.get_report(report_id)
        if report is None:
            return not_found("Report")
        if not can_view_report(actor, report.sales_person_id, self._manager_of):
            record_access_denied("comment.list")
            return forbidden("You do not have permission to view this report")

        comments = self._comments.list_comments(report_id)
        return Result.ok([self._with_author(c) for c in comments])


class PostCommentUseCase(_CommentUseCaseBase):
    def execute(
        self, actor: AuthUser, report_id: int, content: str
    ) -> Result[Comment]:
        report = self._reports.get_report(report_id)
        if report is None:
            return not_found("Report")
        if not can_post_comment(actor, report.sales_person_id, self._manager_of):
            record_access_denied("comment.post")
            return forbidden("You do not have permission to comment on this report")

        cleaned = _clean_content(content)
        if isinstance(cleaned, Result):
            return cleaned

        comment = self._comments.create_comment(
            report_id=report_id, sales_person_id=actor.id, content=cleaned
        )
        logger.info(
            "comment posted", extra={"report_id": report_id, "comment_id": comment.id}
        )
        return Result.ok(self._with_author(comment))


class UpdateCommentUseCase(_CommentUseCaseBase):
    def execute(
        self, actor: AuthUser, comment_id: int, content: str
    ) -> Result[Comment]:
        owned = self._owned_comment(actor, comment_id, "edit")
        if isinstance(owned, Result):
            return owned

        cleaned = _clean_content(content)
        if isinstance(cleaned, Result):
            return cleaned

        updated = self._comments.update_comment(comment_id, cleaned)
        if updated is None:
            return not_found("Comment")
        return Result.ok(self._with_author(updated))


class DeleteCommentUseCase(_CommentUseCaseBase):
    def execute(self, actor: AuthUser, comment_id: int) -> Result[int]:
        owned = self._owned_comment(actor, comment_id, "delete")
        if isinstance(owned, Result):
            return owned

        if not self._comments.delete_comment(comment_id):
            return not_found("Comment")
        logger.info("comment deleted", extra={"comment_id": comment_id})
        return Result.ok(comment_id)
