"""
===============================================================================
TARJETA CRC — schemas/common.py
===============================================================================

Responsabilidades:
    - RequestModel: base de los bodies; acepta nombres snake_case y sus
      alias camelCase (reportDate, visitRecords, ...).
    - Fragmentos de respuesta compartidos (PersonRefRes) y helpers de query
      para listados.

Reglas:
    - Las respuestas son siempre snake_case.
===============================================================================
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from daily_report.domain.entities import PersonRef

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CODE_RE = re.compile(r"^[A-Za-z0-9]+$")


class RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class PersonRefRes(BaseModel):
    id: int
    name: str

    @classmethod
    def from_ref(cls, ref: PersonRef | None) -> "PersonRefRes | None":
        return cls(id=ref.id, name=ref.name) if ref is not None else None


def check_email(value: str) -> str:
    normalized = value.strip().lower()
    if not EMAIL_RE.match(normalized):
        raise ValueError("email must be a valid email address")
    return normalized


def check_code(value: str, field_name: str) -> str:
    if not CODE_RE.match(value):
        raise ValueError(f"{field_name} must be alphanumeric")
    return value

