"""
===============================================================================
USE CASE RESULTS (shared Result / Error models)
===============================================================================

Business Goal:
    Give every use case one explicit contract for outcomes: either a value or
    a typed error (validation, authorization, missing resource, conflict).

Why:
    - Use cases return results instead of raising, so the HTTP layer maps
      codes to statuses in one place (interfaces/api/http/error_mapping.py)
      and unit tests assert on codes, not on exceptions.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Component:
    results (module)

Responsibilities:
    - UseCaseErrorCode: small, stable set of failure categories.
    - UseCaseError: code + message (+ resource for NOT_FOUND).
    - Result[T]: value | error, with ok()/fail() constructors.

Collaborators:
    - application/usecases/* (producers)
    - interfaces/api/http/error_mapping.py (consumer)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class UseCaseErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    DUPLICATE_EMPLOYEE_CODE = "DUPLICATE_EMPLOYEE_CODE"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    DUPLICATE_CUSTOMER_CODE = "DUPLICATE_CUSTOMER_CODE"


@dataclass(frozen=True)
class UseCaseError:
    code: UseCaseErrorCode
    message: str
    resource: str | None = None


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: UseCaseError | None = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(
        cls,
        code: UseCaseErrorCode,
        message: str,
        *,
        resource: str | None = None,
    ) -> "Result[T]":
        return cls(error=UseCaseError(code=code, message=message, resource=resource))


def not_found(resource: str) -> Result:
    return Result.fail(
        UseCaseErrorCode.NOT_FOUND, f"{resource} not found", resource=resource
    )


def forbidden(message: str) -> Result:
    return Result.fail(UseCaseErrorCode.FORBIDDEN, message)


def invalid(message: str) -> Result:
    return Result.fail(UseCaseErrorCode.VALIDATION_ERROR, message)
