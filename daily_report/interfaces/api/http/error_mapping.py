"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCaseError -> envelope HTTP)
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a AppHTTPException.
  - Centralizar el mapeo para que los routers sigan siendo delgados.
  - Mantener el dominio libre de HTTP.

Reglas:
  - Los casos de uso devuelven errores tipados (code + message [+ resource]).
  - La API responde con el envelope de error estándar
    (crosscutting.error_responses).

Colaboradores:
  - application.usecases.results (UseCaseError, UseCaseErrorCode)
  - crosscutting.error_responses (ErrorCode, error_for)
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn, TypeVar

from daily_report.application.usecases.results import (
    Result,
    UseCaseError,
    UseCaseErrorCode,
)
from daily_report.crosscutting.error_responses import ErrorCode, error_for, internal_error

T = TypeVar("T")

_CODE_MAP: dict[UseCaseErrorCode, ErrorCode] = {
    UseCaseErrorCode.VALIDATION_ERROR: ErrorCode.VALIDATION_ERROR,
    UseCaseErrorCode.UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    UseCaseErrorCode.INVALID_CREDENTIALS: ErrorCode.INVALID_CREDENTIALS,
    UseCaseErrorCode.ACCOUNT_DISABLED: ErrorCode.ACCOUNT_DISABLED,
    UseCaseErrorCode.FORBIDDEN: ErrorCode.FORBIDDEN,
    UseCaseErrorCode.NOT_FOUND: ErrorCode.NOT_FOUND,
    UseCaseErrorCode.CONFLICT: ErrorCode.CONFLICT,
    UseCaseErrorCode.DUPLICATE_EMPLOYEE_CODE: ErrorCode.DUPLICATE_EMPLOYEE_CODE,
    UseCaseErrorCode.DUPLICATE_EMAIL: ErrorCode.DUPLICATE_EMAIL,
    UseCaseErrorCode.DUPLICATE_CUSTOMER_CODE: ErrorCode.DUPLICATE_CUSTOMER_CODE,
}


def raise_use_case_error(error: UseCaseError) -> NoReturn:
    """Lanza el AppHTTPException que corresponde al error del caso de uso."""
    code = _CODE_MAP.get(error.code)
    if code is None:
        # R: código desconocido => 500 (no adivinar un error de cliente).
        raise internal_error(error.message)
    raise error_for(code, error.message)


def unwrap(result: Result[T]) -> T:
    """Devuelve el valor de un resultado exitoso o lanza su error HTTP."""
    if result.error is not None:
        raise_use_case_error(result.error)
    return result.value
