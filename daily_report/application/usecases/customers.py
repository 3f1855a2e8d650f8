"""
===============================================================================
USE CASES: Customer master data
===============================================================================

CRC CARD
-------------------------------------------------------------------------------
Classes:
    ListCustomersUseCase, GetCustomerUseCase, CreateCustomerUseCase,
    UpdateCustomerUseCase, DeactivateCustomerUseCase

Responsibilities:
    - Reads for any active user (visit records need a customer picker).
    - Writes gated by can_manage_master.
    - customer_code is unique (DUPLICATE_CUSTOMER_CODE) and immutable.
    - Deactivation keeps history: old visit records still resolve the name.

Collaborators:
    - CustomerRepository
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ...crosscutting.exceptions import UniqueConstraintError
from ...crosscutting.logger import logger
from ...crosscutting.metrics import record_access_denied
from ...crosscutting.pagination import Page, PageRequest
from ...domain.access_policy import can_manage_master
from ...domain.entities import Customer
from ...domain.repositories import CustomerRepository
from ...identity.users import AuthUser
from .results import Result, UseCaseErrorCode, forbidden, not_found

DUPLICATE_CUSTOMER_CODE_MESSAGE = "Customer code is already in use"
MASTER_FORBIDDEN_MESSAGE = "Only administrators can manage customers"


@dataclass(frozen=True)
class NewCustomer:
    customer_code: str
    name: str
    address: str | None = None
    phone: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class CustomerChanges:
    name: str
    address: str | None = None
    phone: str | None = None
    is_active: bool = True


class _CustomerUseCaseBase:
    def __init__(self, customers: CustomerRepository) -> None:
        self._customers = customers


class ListCustomersUseCase(_CustomerUseCaseBase):
    def execute(
        self,
        *,
        page: PageRequest,
        keyword: str | None = None,
        is_active: bool | None = None,
    ) -> Result[Page[Customer]]:
        keyword = (keyword or "").strip() or None
        return Result.ok(
            self._customers.list_customers(
                keyword=keyword, is_active=is_active, page=page
            )
        )


class GetCustomerUseCase(_CustomerUseCaseBase):
    def execute(self, customer_id: int) -> Result[Customer]:
        customer = self._customers.get_customer(customer_id)
        if customer is None:
            return not_found("Customer")
        return Result.ok(customer)


class CreateCustomerUseCase(_CustomerUseCaseBase):
    def execute(self, actor: AuthUser, data: NewCustomer) -> Result[Customer]:
        if not can_manage_master(actor):
            record_access_denied("customer.create")
            return forbidden(MASTER_FORBIDDEN_MESSAGE)

        duplicate = Result.fail(
            UseCaseErrorCode.DUPLICATE_CUSTOMER_CODE, DUPLICATE_CUSTOMER_CODE_MESSAGE
        )
        if self._customers.get_by_code(data.customer_code):
            return duplicate

        try:
            customer = self._customers.create_customer(
                customer_code=data.customer_code,
                name=data.name,
                address=data.address or None,
                phone=data.phone or None,
                is_active=data.is_active,
            )
        except UniqueConstraintError:
            return duplicate

        logger.info("customer created", extra={"customer_id": customer.id})
        return Result.ok(customer)


class UpdateCustomerUseCase(_CustomerUseCaseBase):
    def execute(
        self, actor: AuthUser, customer_id: int, changes: CustomerChanges
    ) -> Result[Customer]:
        if not can_manage_master(actor):
            record_access_denied("customer.update")
            return forbidden(MASTER_FORBIDDEN_MESSAGE)

        updated = self._customers.update_customer(
            customer_id,
            name=changes.name,
            address=changes.address or None,
            phone=changes.phone or None,
            is_active=changes.is_active,
        )
        if updated is None:
            return not_found("Customer")
        return Result.ok(updated)


class DeactivateCustomerUseCase(_CustomerUseCaseBase):
    def execute(self, actor: AuthUser, customer_id: int) -> Result[Customer]:
        if not can_manage_master(actor):
            record_access_denied("customer.deactivate")
            return forbidden(MASTER_FORBIDDEN_MESSAGE)

        current = self._customers.get_customer(customer_id)
        if current is None:
            return not_found("Customer")

        updated = self._customers.update_customer(
            customer_id,
            name=current.name,
            address=current.address,
            phone=current.phone,
            is_active=False,
        )
        if updated is None:
            return not_found("Customer")
        logger.info("customer deactivated", extra={"customer_id": customer_id})
        return Result.ok(updated)
