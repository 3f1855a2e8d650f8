"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/comments.py
===============================================================================

Responsabilidades:
    - PUT /comments/{id}, DELETE /comments/{id} (solo el autor).
    - El listado y el alta viven bajo /reports/{id}/comments.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from daily_report.application.usecases import (
    DeleteCommentUseCase,
    UpdateCommentUseCase,
)
from daily_report.container import (
    get_delete_comment_use_case,
    get_update_comment_use_case,
)
from daily_report.crosscutting.error_responses import success_response
from daily_report.identity.middleware import with_active_user
from daily_report.identity.users import AuthUser

from ..error_mapping import unwrap
from ..schemas.auth import MessageRes
from ..schemas.reports import CommentReq, CommentRes

router = APIRouter(prefix="/comments", tags=["comments"])


@router.put("/{comment_id}")
def update_comment(
    comment_id: int,
    req: CommentReq,
    user: AuthUser = Depends(with_active_user()),
    use_case: UpdateCommentUseCase = Depends(get_update_comment_use_case),
):
    comment = unwrap(use_case.execute(user, comment_id, req.content))
    return success_response(CommentRes.from_entity(comment).model_dump(mode="json"))


@router.delete("/{comment_id}")
def delete_comment(
    comment_id: int,
    user: AuthUser = Depends(with_active_user()),
    use_case: DeleteCommentUseCase = Depends(get_delete_comment_use_case),
):
    unwrap(use_case.execute(user, comment_id))
    return success_response(MessageRes(message="Comment deleted").model_dump())
