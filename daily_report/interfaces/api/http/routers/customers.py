"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/customers.py
===============================================================================

Responsabilidades:
    - GET listado (keyword sobre name/code, is_active) y detalle para
      cualquier usuario activo.
    - POST/PUT/DELETE (desactivar) solo para admins.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from daily_report.application.usecases import (
    CreateCustomerUseCase,
    DeactivateCustomerUseCase,
    GetCustomerUseCase,
    ListCustomersUseCase,
    UpdateCustomerUseCase,
)
from daily_report.container import (
    get_create_customer_use_case,
    get_deactivate_customer_use_case,
    get_get_customer_use_case,
    get_list_customers_use_case,
    get_update_customer_use_case,
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
from daily_report.identity.users import AuthUser

from ..error_mapping import unwrap
from ..schemas.master import CreateCustomerReq, CustomerRes, UpdateCustomerReq

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("")
def list_customers(
    keyword: str | None = Query(None, max_length=200),
    is_active: bool | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
    _user: AuthUser = Depends(with_active_user()),
    use_case: ListCustomersUseCase = Depends(get_list_customers_use_case),
):
    result = unwrap(
        use_case.execute(
            page=PageRequest(page=page, per_page=per_page),
            keyword=keyword,
            is_active=is_active,
        )
    )
    return paginated_response(
        [CustomerRes.from_entity(c).model_dump(mode="json") for c in result.items],
        page=page,
        per_page=per_page,
        total_count=result.total_count,
    )


@router.get("/{customer_id}")
def get_customer(
    customer_id: int,
    _user: AuthUser = Depends(with_active_user()),
    use_case: GetCustomerUseCase = Depends(get_get_customer_use_case),
):
    customer = unwrap(use_case.execute(customer_id))
    return success_response(CustomerRes.from_entity(customer).model_dump(mode="json"))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_customer(
    req: CreateCustomerReq,
    user: AuthUser = Depends(with_admin(fresh=True)),
    use_case: CreateCustomerUseCase = Depends(get_create_customer_use_case),
):
    customer = unwrap(use_case.execute(user, req.to_input()))
    return success_response(CustomerRes.from_entity(customer).model_dump(mode="json"))


@router.put("/{customer_id}")
def update_customer(
    customer_id: int,
    req: UpdateCustomerReq,
    user: AuthUser = Depends(with_admin(fresh=True)),
    use_case: UpdateCustomerUseCase = Depends(get_update_customer_use_case),
):
    customer = unwrap(use_case.execute(user, customer_id, req.to_changes()))
    return success_response(CustomerRes.from_entity(customer).model_dump(mode="json"))


@router.delete("/{customer_id}")
def deactivate_customer(
    customer_id: int,
    user: AuthUser = Depends(with_admin(fresh=True)),
    use_case: DeactivateCustomerUseCase = Depends(get_deactivate_customer_use_case),
):
    customer = unwrap(use_case.execute(user, customer_id))
    return success_response(CustomerRes.from_entity(customer).model_dump(mode="json"))
