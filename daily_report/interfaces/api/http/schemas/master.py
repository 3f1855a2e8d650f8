"""
===============================================================================
TARJETA CRC — schemas/master.py
===============================================================================

Módulo:
    Schemas HTTP de datos maestros (vendedores, clientes)

Responsabilidades:
    - Bodies de vendedor: employee_code alfanumérico 1..20 (solo en alta),
      name 1..100, email <= 255, password 8..100 (opcional al editar),
      role, manager_id, is_active.
    - Bodies de cliente: customer_code alfanumérico 1..20 (solo en alta),
      name 1..200, address <= 500, phone tipo 03-1234-5678 (<= 20).
    - Las respuestas nunca exponen hashes de password.
===============================================================================
"""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from daily_report.application.usecases import (
    CustomerChanges,
    NewCustomer,
    NewSalesPerson,
    SalesPersonChanges,
    SalesPersonDetail,
)
from daily_report.domain.entities import Customer, SalesPerson, SalesPersonView
from daily_report.identity.users import UserRole

from .common import PersonRefRes, RequestModel, check_code, check_email

PHONE_RE = re.compile(r"^0\d{1,4}-?\d{1,4}-?\d{3,4}$")


# -----------------------------------------------------------------------------
# Vendedores
# -----------------------------------------------------------------------------
class _SalesPersonFields(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.MEMBER
    manager_id: int | None = Field(default=None, ge=1)
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return check_email(v)


class CreateSalesPersonReq(_SalesPersonFields):
    employee_code: str = Field(..., min_length=1, max_length=20)
    password: str = Field(..., min_length=8, max_length=100)

    @field_validator("employee_code")
    @classmethod
    def validate_employee_code(cls, v: str) -> str:
        return check_code(v, "employee_code")

    def to_input(self) -> NewSalesPerson:
        return NewSalesPerson(
            employee_code=self.employee_code,
            name=self.name,
            email=self.email,
            password=self.password,
            role=self.role,
            manager_id=self.manager_id,
            is_active=self.is_active,
        )


class UpdateSalesPersonReq(_SalesPersonFields):
    """employee_code es inmutable; un password vacío conserva el actual."""

    password: str | None = Field(default=None, max_length=100)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        if not v:
            return None
        if len(v) < 8:
            raise ValueError("password must be at least 8 characters")
        return v

    def to_changes(self) -> SalesPersonChanges:
        return SalesPersonChanges(
            name=self.name,
            email=self.email,
            role=self.role,
            manager_id=self.manager_id,
            is_active=self.is_active,
            password=self.password,
        )


class SalesPersonRes(BaseModel):
    id: int
    employee_code: str
    name: str
    email: str
    role: UserRole
    manager: PersonRefRes | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_view(cls, view: SalesPersonView) -> "SalesPersonRes":
        p = view.person
        return cls(
            id=p.id,
            employee_code=p.employee_code,
            name=p.name,
            email=p.email,
            role=p.role,
            manager=PersonRefRes.from_ref(view.manager),
            is_active=p.is_active,
            created_at=p.created_at,
            updated_at=p.updated_at,
        )


class SubordinateRes(BaseModel):
    id: int
    employee_code: str
    name: str

    @classmethod
    def from_entity(cls, person: SalesPerson) -> "SubordinateRes":
        return cls(id=person.id, employee_code=person.employee_code, name=person.name)


class SalesPersonDetailRes(SalesPersonRes):
    subordinates: list[SubordinateRes] = Field(default_factory=list)

    @classmethod
    def from_detail(cls, detail: SalesPersonDetail) -> "SalesPersonDetailRes":
        base = SalesPersonRes.from_view(detail.view)
        return cls(
            **base.model_dump(),
            subordinates=[SubordinateRes.from_entity(s) for s in detail.subordinates],
        )


# -----------------------------------------------------------------------------
# Clientes
# -----------------------------------------------------------------------------
class _CustomerFields(RequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: str | None = Field(default=None, max_length=500)
    phone: str | None = Field(default=None, max_length=20)
    is_active: bool = True

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        if not v:
            return None
        if not PHONE_RE.match(v):
            raise ValueError("phone must look like 03-1234-5678")
        return v


class CreateCustomerReq(_CustomerFields):
    customer_code: str = Field(..., min_length=1, max_length=20)

    @field_validator("customer_code")
    @classmethod
    def validate_customer_code(cls, v: str) -> str:
        return check_code(v, "customer_code")

    def to_input(self) -> NewCustomer:
        return NewCustomer(
            customer_code=self.customer_code,
            name=self.name,
            address=self.address,
            phone=self.phone,
            is_active=self.is_active,
        )


class UpdateCustomerReq(_CustomerFields):
    def to_changes(self) -> CustomerChanges:
        return CustomerChanges(
            name=self.name,
            address=self.address,
            phone=self.phone,
            is_active=self.is_active,
        )


class CustomerRes(BaseModel):
    id: int
    customer_code: str
    name: str
    address: str | None = None
    phone: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, c: Customer) -> "CustomerRes":
        return cls(
            id=c.id,
            customer_code=c.customer_code,
            name=c.name,
            address=c.address,
            phone=c.phone,
            is_active=c.is_active,
            created_at=c.created_at,
            updated_at=c.updated_at,
        )
