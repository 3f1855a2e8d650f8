"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/sales_persons.py
===============================================================================

Responsabilidades:
    - GET listado/detalle para cualquier usuario activo.
    - POST/PUT/DELETE (desactivar) solo para admins.
    - Mapear DUPLICATE_EMPLOYEE_CODE / DUPLICATE_EMAIL a 409 vía error_mapping.

Colaboradores:
    - application.usecases.sales_persons
    - identity.middleware (with_active_user, with_admin)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from daily_report.application.usecases import (
    CreateSalesPersonUseCase,
    DeactivateSalesPersonUseCase,
    GetSalesPersonUseCase,
    ListSalesPersonsUseCase,
    UpdateSalesPersonUseCase,
)
from daily_report.container import (
    get_create_sales_person_use_case,
    get_deactivate_sales_person_use_case,
    get_get_sales_person_use_case,
    get_list_sales_persons_use_case,
    get_update_sales_person_use_case,
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
from daily_report.identity.middleware import with_active_user, with_admin
from daily_report.identity.users import AuthUser, UserRole

from ..error_mapping import unwrap
from ..schemas.master import (
    CreateSalesPersonReq,
    SalesPersonDetailRes,
    SalesPersonRes,
    UpdateSalesPersonReq,
)

router = APIRouter(prefix="/sales-persons", tags=["sales-persons"])


@router.get("")
def list_sales_persons(
    is_active: bool | None = Query(None),
    role: UserRole | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
    _user: AuthUser = Depends(with_active_user()),
    use_case: ListSalesPersonsUseCase = Depends(get_list_sales_persons_use_case),
):
    result = unwrap(
        use_case.execute(
            page=PageRequest(page=page, per_page=per_page),
            is_active=is_active,
            role=role,
        )
    )
    return paginated_response(
        [SalesPersonRes.from_view(v).model_dump(mode="json") for v in result.items],
        page=page,
        per_page=per_page,
        total_count=result.total_count,
    )


@router.get("/{sales_person_id}")
def get_sales_person(
    sales_person_id: int,
    _user: AuthUser = Depends(with_active_user()),
    use_case: GetSalesPersonUseCase = Depends(get_get_sales_person_use_case),
):
    detail = unwrap(use_case.execute(sales_person_id))
    return success_response(
        SalesPersonDetailRes.from_detail(detail).model_dump(mode="json")
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_sales_person(
    req: CreateSalesPersonReq,
    user: AuthUser = Depends(with_admin(fresh=True)),
    use_case: CreateSalesPersonUseCase = Depends(get_create_sales_person_use_case),
):
    view = unwrap(use_case.execute(user, req.to_input()))
    return success_response(SalesPersonRes.from_view(view).model_dump(mode="json"))


@router.put("/{sales_person_id}")
def update_sales_person(
    sales_person_id: int,
    req: UpdateSalesPersonReq,
    user: AuthUser = Depends(with_admin(fresh=True)),
    use_case: UpdateSalesPersonUseCase = Depends(get_update_sales_person_use_case),
):
    view = unwrap(use_case.execute(user, sales_person_id, req.to_changes()))
    return success_response(SalesPersonRes.from_view(view).model_dump(mode="json"))


@router.delete("/{sales_person_id}")
def deactivate_sales_person(
    sales_person_id: int,
    user: AuthUser = Depends(with_admin(fresh=True)),
    use_case: DeactivateSalesPersonUseCase = Depends(
        get_deactivate_sales_person_use_case
    ),
):
    view = unwrap(use_case.execute(user, sales_person_id))
    return success_response(SalesPersonRes.from_view(view).model_dump(mode="json"))
