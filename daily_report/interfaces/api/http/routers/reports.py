"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/reports.py
===============================================================================

Clase/Módulo:
    Router de reportes diarios

Responsabilidades:
    - Exponer el CRUD de reportes, la revisión y los comentarios por reporte.
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir UseCaseError -> envelope de error (error_mapping).
    - Exigir un llamador activo en cada ruta (with_active_user).

Colaboradores:
    - application.usecases (reports, comments)
    - container (factories de casos de uso)
    - schemas.reports (DTOs)
===============================================================================
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from daily_report.application.usecases import (
    CreateReportUseCase,
    DeleteReportUseCase,
    GetReportUseCase,
    ListCommentsUseCase,
    ListReportsUseCase,
    PostCommentUseCase,
    ReviewReportUseCase,
    UpdateReportUseCase,
)
from daily_report.container import (
    get_create_report_use_case,
    get_delete_report_use_case,
    get_get_report_use_case,
    get_list_comments_use_case,
    get_list_reports_use_case,
    get_post_comment_use_case,
    get_review_report_use_case,
    get_update_report_use_case,
)
from daily_report.crosscutting.error_responses import (
    paginated_response,
    success_response,
)
from daily_report.crosscutting.pagination import (
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    PageRequest,
)
from daily_report.domain.entities import ReportStatus
from daily_report.identity.middleware import with_active_user
from daily_report.identity.users import AuthUser

from ..error_mapping import unwrap
from ..schemas.auth import MessageRes
from ..schemas.reports import (
    CommentReq,
    CommentRes,
    CreateReportReq,
    ReportDetailRes,
    ReportListItemRes,
    UpdateReportReq,
)

router = APIRouter(prefix="/reports", tags=["reports"])


def _detail_response(detail) -> dict:
    return success_response(ReportDetailRes.from_detail(detail).model_dump(mode="json"))


@router.get("")
def list_reports(
    sales_person_id: int | None = Query(None, ge=1),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    report_status: ReportStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
    user: AuthUser = Depends(with_active_user()),
    use_case: ListReportsUseCase = Depends(get_list_reports_use_case),
):
    result = unwrap(
        use_case.execute(
            user,
            page=PageRequest(page=page, per_page=per_page),
            sales_person_id=sales_person_id,
            start_date=start_date,
            end_date=end_date,
            status=report_status,
        )
    )
    return paginated_response(
        [ReportListItemRes.from_summary(s).model_dump(mode="json") for s in result.items],
        page=page,
        per_page=per_page,
        total_count=result.total_count,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_report(
    req: CreateReportReq,
    user: AuthUser = Depends(with_active_user()),
    use_case: CreateReportUseCase = Depends(get_create_report_use_case),
):
    return _detail_response(unwrap(use_case.execute(user, req.to_input())))


@router.get("/{report_id}")
def get_report(
    report_id: int,
    user: AuthUser = Depends(with_active_user()),
    use_case: GetReportUseCase = Depends(get_get_report_use_case),
):
    return _detail_response(unwrap(use_case.execute(user, report_id)))


@router.put("/{report_id}")
def update_report(
    report_id: int,
    req: UpdateReportReq,
    user: AuthUser = Depends(with_active_user()),
    use_case: UpdateReportUseCase = Depends(get_update_report_use_case),
):
    return _detail_response(unwrap(use_case.execute(user, report_id, req.to_patch())))


@router.delete("/{report_id}")
def delete_report(
    report_id: int,
    user: AuthUser = Depends(with_active_user()),
    use_case: DeleteReportUseCase = Depends(get_delete_report_use_case),
):
    unwrap(use_case.execute(user, report_id))
    return success_response(MessageRes(message="Report deleted").model_dump())


@router.post("/{report_id}/review")
def review_report(
    report_id: int,
    user: AuthUser = Depends(with_active_user()),
    use_case: ReviewReportUseCase = Depends(get_review_report_use_case),
):
    return _detail_response(unwrap(use_case.execute(user, report_id)))


# =============================================================================
# Comentarios de un reporte
# =============================================================================


@router.get("/{report_id}/comments")
def list_comments(
    report_id: int,
    user: AuthUser = Depends(with_active_user()),
    use_case: ListCommentsUseCase = Depends(get_list_comments_use_case),
):
    comments = unwrap(use_case.execute(user, report_id))
    return success_response(
        [CommentRes.from_entity(c).model_dump(mode="json") for c in comments]
    )


@router.post("/{report_id}/comments", status_code=status.HTTP_201_CREATED)
def post_comment(
    report_id: int,
    req: CommentReq,
    user: AuthUser = Depends(with_active_user()),
    use_case: PostCommentUseCase = Depends(get_post_comment_use_case),
):
    comment = unwrap(use_case.execute(user, report_id, req.content))
    return success_response(CommentRes.from_entity(comment).model_dump(mode="json"))
