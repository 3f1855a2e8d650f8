"""
===============================================================================
USE CASES: Sales person master data
===============================================================================

Business Goal:
    Everyone can look up colleagues (to pick a report owner, to see who
    manages whom); only admins maintain the roster.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Classes:
    ListSalesPersonsUseCase, GetSalesPersonUseCase,
    CreateSalesPersonUseCase, UpdateSalesPersonUseCase,
    DeactivateSalesPersonUseCase

Responsibilities:
    - Reads for any active user.
    - Writes gated by can_manage_master.
    - Unique employee_code / email (DUPLICATE_EMPLOYEE_CODE, DUPLICATE_EMAIL).
    - Manager must exist and not be the person itself.
    - Admins cannot deactivate themselves.
    - Passwords are hashed with argon2 before they reach the repository.

Collaborators:
    - SalesPersonRepository
    - identity.passwords.hash_password
    - domain.access_policy.can_manage_master
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...crosscutting.exceptions import UniqueConstraintError
from ...crosscutting.logger import logger
from ...crosscutting.metrics import record_access_denied
from ...crosscutting.pagination import Page, PageRequest
from ...domain.access_policy import can_manage_master
from ...domain.entities import SalesPerson, SalesPersonView
from ...domain.repositories import (
    UNIQUE_EMAIL,
    UNIQUE_EMPLOYEE_CODE,
    SalesPersonRepository,
)
from ...identity.passwords import hash_password
from ...identity.users import AuthUser, UserRole
from .results import Result, UseCaseErrorCode, forbidden, invalid, not_found

DUPLICATE_EMPLOYEE_CODE_MESSAGE = "Employee code is already in use"
DUPLICATE_EMAIL_MESSAGE = "Email is already in use"
MASTER_FORBIDDEN_MESSAGE = "Only administrators can manage sales persons"


@dataclass(frozen=True)
class SalesPersonDetail:
    view: SalesPersonView
    subordinates: list[SalesPerson] = field(default_factory=list)


@dataclass(frozen=True)
class NewSalesPerson:
    employee_code: str
    name: str
    email: str
    password: str
    role: UserRole = UserRole.MEMBER
    manager_id: int | None = None
    is_active: bool = True


@dataclass(frozen=True)
class SalesPersonChanges:
    """Full replacement of the editable fields; an empty password keeps the old one."""

    name: str
    email: str
    role: UserRole
    manager_id: int | None = None
    is_active: bool = True
    password: str | None = None


def _duplicate_result(exc: UniqueConstraintError) -> Result:
    if exc.constraint == UNIQUE_EMPLOYEE_CODE:
        return Result.fail(
            UseCaseErrorCode.DUPLICATE_EMPLOYEE_CODE, DUPLICATE_EMPLOYEE_CODE_MESSAGE
        )
    if exc.constraint == UNIQUE_EMAIL:
        return Result.fail(UseCaseErrorCode.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)
    return Result.fail(UseCaseErrorCode.CONFLICT, "Sales person already exists")


class _SalesPersonUseCaseBase:
    def __init__(self, sales_persons: SalesPersonRepository) -> None:
        self._sales_persons = sales_persons

    def _check_manager(
        self, manager_id: int | None, *, self_id: int | None = None
    ) -> Result | None:
        if manager_id is None:
            return None
        if self_id is not None and manager_id == self_id:
            return invalid("A sales person cannot be their own manager")
        if self._sales_persons.get_sales_person(manager_id) is None:
            return invalid("Manager does not exist")
        return None

    def _email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        other = self._sales_persons.get_by_email(email)
        return other is not None and other.id != exclude_id


class ListSalesPersonsUseCase(_SalesPersonUseCaseBase):
    def execute(
        self,
        *,
        page: PageRequest,
        is_active: bool | None = None,
        role: UserRole | None = None,
    ) -> Result[Page[SalesPersonView]]:
        return Result.ok(
            self._sales_persons.list_sales_persons(
                is_active=is_active, role=role, page=page
            )
        )


class GetSalesPersonUseCase(_SalesPersonUseCaseBase):
    def execute(self, sales_person_id: int) -> Result[SalesPersonDetail]:
        view = self._sales_persons.get_view(sales_person_id)
        if view is None:
            return not_found("Sales person")
        subordinates = self._sales_persons.list_subordinates(
            sales_person_id, active_only=True
        )
        return Result.ok(SalesPersonDetail(view=view, subordinates=subordinates))


class CreateSalesPersonUseCase(_SalesPersonUseCaseBase):
    def execute(
        self, actor: AuthUser, data: NewSalesPerson
    ) -> Result[SalesPersonView]:
        if not can_manage_master(actor):
            record_access_denied("sales_person.create")
            return forbidden(MASTER_FORBIDDEN_MESSAGE)

        if self._sales_persons.get_by_employee_code(data.employee_code):
            return Result.fail(
                UseCaseErrorCode.DUPLICATE_EMPLOYEE_CODE,
                DUPLICATE_EMPLOYEE_CODE_MESSAGE,
            )
        if self._email_taken(data.email):
            return Result.fail(UseCaseErrorCode.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)

        error = self._check_manager(data.manager_id)
        if error is not None:
            return error

        try:
            person = self._sales_persons.create_sales_person(
                employee_code=data.employee_code,
                name=data.name,
                email=data.email,
                password_hash=hash_password(data.password),
                role=data.role,
                manager_id=data.manager_id,
                is_active=data.is_active,
            )
        except UniqueConstraintError as exc:
            return _duplicate_result(exc)

        logger.info(
            "sales person created",
            extra={"sales_person_id": person.id, "role": person.role.value},
        )
        return Result.ok(self._sales_persons.get_view(person.id))


class UpdateSalesPersonUseCase(_SalesPersonUseCaseBase):
    def execute(
        self, actor: AuthUser, sales_person_id: int, changes: SalesPersonChanges
    ) -> Result[SalesPersonView]:
        if not can_manage_master(actor):
            record_access_denied("sales_person.update")
            return forbidden(MASTER_FORBIDDEN_MESSAGE)

        if self._sales_persons.get_sales_person(sales_person_id) is None:
            return not_found("Sales person")

        if actor.id == sales_person_id and not changes.is_active:
            return invalid("You cannot deactivate your own account")

        if self._email_taken(changes.email, exclude_id=sales_person_id):
            return Result.fail(UseCaseErrorCode.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)

        error = self._check_manager(changes.manager_id, self_id=sales_person_id)
        if error is not None:
            return error

        try:
            updated = self._sales_persons.update_sales_person(
                sales_person_id,
                name=changes.name,
                email=changes.email,
                role=changes.role,
                manager_id=changes.manager_id,
                is_active=changes.is_active,
                password_hash=(
                    hash_password(changes.password) if changes.password else None
                ),
            )
        except UniqueConstraintError as exc:
            return _duplicate_result(exc)

        if updated is None:
            return not_found("Sales person")
        logger.info("sales person updated", extra={"sales_person_id": sales_person_id})
        return Result.ok(self._sales_persons.get_view(sales_person_id))


class DeactivateSalesPersonUseCase(_SalesPersonUseCaseBase):
    """Soft delete: reports and comments keep pointing at the record."""

    def execute(
        self, actor: AuthUser, sales_person_id: int
    ) -> Result[SalesPersonView]:
        if not can_manage_master(actor):
            record_access_denied("sales_person.deactivate")
            return forbidden(MASTER_FORBIDDEN_MESSAGE)

        if actor.id == sales_person_id:
            return invalid("You cannot deactivate your own account")

        person = self._sales_persons.get_sales_person(sales_person_id)
        if person is None:
            return not_found("Sales person")

        self._sales_persons.update_sales_person(
            sales_person_id,
            name=person.name,
            email=person.email,
            role=person.role,
            manager_id=person.manager_id,
            is_active=False,
        )
        logger.info(
            "sales person deactivated", extra={"sales_person_id": sales_person_id}
        )
        return Result.ok(self._sales_persons.get_view(sales_person_id))
