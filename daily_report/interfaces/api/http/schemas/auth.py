"""
===============================================================================
TARJETA CRC — schemas/auth.py
===============================================================================

Responsabilidades:
    - Request de login (email + password, límites de longitud).
    - Respuestas de usuario de sesión / perfil (nunca el hash del password).
===============================================================================
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from daily_report.domain.entities import SalesPerson, SalesPersonView
from daily_report.identity.users import UserRole

from .common import PersonRefRes, RequestModel, check_email


class LoginReq(RequestModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return check_email(v)


class SessionUserRes(BaseModel):
    id: int
    employee_code: str
    name: str
    email: str
    role: UserRole

    @classmethod
    def from_entity(cls, person: SalesPerson) -> "SessionUserRes":
        return cls(
            id=person.id,
            employee_code=person.employee_code,
            name=person.name,
            email=person.email,
            role=person.role,
        )


class LoginRes(BaseModel):
    token: str
    expires_at: datetime
    user: SessionUserRes


class ProfileRes(SessionUserRes):
    manager: PersonRefRes | None = None

    @classmethod
    def from_view(cls, view: SalesPersonView) -> "ProfileRes":
        p = view.person
        return cls(
            id=p.id,
            employee_code=p.employee_code,
            name=p.name,
            email=p.email,
            role=p.role,
            manager=PersonRefRes.from_ref(view.manager),
        )


class MessageRes(BaseModel):
    message: str
