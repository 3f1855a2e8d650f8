"""
===============================================================================
MÓDULO: Envelope de respuesta estándar y errores HTTP
===============================================================================

Objetivo
--------
Toda respuesta de la API comparte un único envelope para que el frontend
pueda decidir por `success` y `error.code`:

  éxito:     {"success": true,  "data": ...}
  paginado:  {"success": true,  "data": [...], "pagination": {...}}
  error:     {"success": false, "error": {"code": "...", "message": "..."}}

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  ErrorCode + AppHTTPException + handlers

Responsabilidades:
  - Definir el catálogo estable de códigos de error y su status HTTP
  - Proveer factories de errores frecuentes
  - Renderizar AppHTTPException como envelope de error

Colaboradores:
  - api/exception_handlers.py (registra handlers, mapea errores internos)
  - identity/middleware.py (UNAUTHORIZED / FORBIDDEN / ACCOUNT_DISABLED)
  - interfaces/api/http/error_mapping.py (errores de casos de uso -> HTTP)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 4xx
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    DUPLICATE_EMPLOYEE_CODE = "DUPLICATE_EMPLOYEE_CODE"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    DUPLICATE_CUSTOMER_CODE = "DUPLICATE_CUSTOMER_CODE"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.INVALID_CREDENTIALS: 401,
    ErrorCode.ACCOUNT_DISABLED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.DUPLICATE_EMPLOYEE_CODE: 409,
    ErrorCode.DUPLICATE_EMAIL: 409,
    ErrorCode.DUPLICATE_CUSTOMER_CODE: 409,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.DATABASE_ERROR: 503,
}


class ErrorBody(BaseModel):
    code: ErrorCode
    message: str


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: ErrorBody


class PaginationMeta(BaseModel):
    current_page: int
    per_page: int
    total_pages: int
    total_count: int


def success_response(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}


def paginated_response(
    data: list[Any], *, page: int, per_page: int, total_count: int
) -> dict[str, Any]:
    """Envelope para listados (total_pages = ceil(total/per_page))."""
    total_pages = (total_count + per_page - 1) // per_page if per_page > 0 else 0
    meta = PaginationMeta(
        current_page=page,
        per_page=per_page,
        total_pages=total_pages,
        total_count=total_count,
    )
    return {"success": True, "data": data, "pagination": meta.model_dump()}


class AppHTTPException(HTTPException):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      AppHTTPException

    Responsabilidades:
      - Transportar un ErrorCode estable junto al status HTTP
      - Permitir headers custom (WWW-Authenticate)

    Colaboradores:
      - app_exception_handler()
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code


def error_for(code: ErrorCode, detail: str) -> AppHTTPException:
    """Construye un AppHTTPException con el status que indica ERROR_STATUS."""
    return AppHTTPException(ERROR_STATUS[code], code, detail)


# ---------------------------------------------------------------------------
# Factories de error (helpers)
# ---------------------------------------------------------------------------
def bad_request(detail: str = "Malformed request") -> AppHTTPException:
    return error_for(ErrorCode.BAD_REQUEST, detail)


def validation_error(detail: str) -> AppHTTPException:
    return error_for(ErrorCode.VALIDATION_ERROR, detail)


def not_found(resource: str, identifier: object | None = None) -> AppHTTPException:
    if identifier is None:
        return error_for(ErrorCode.NOT_FOUND, f"{resource} not found")
    return error_for(ErrorCode.NOT_FOUND, f"{resource} '{identifier}' not found")


def conflict(
    detail: str, code: ErrorCode = ErrorCode.CONFLICT
) -> AppHTTPException:
    return error_for(code, detail)


def unauthorized(detail: str = "Authentication required") -> AppHTTPException:
    return error_for(ErrorCode.UNAUTHORIZED, detail)


def invalid_credentials(
    detail: str = "Invalid email or password",
) -> AppHTTPException:
    return error_for(ErrorCode.INVALID_CREDENTIALS, detail)


def account_disabled(detail: str = "This account has been disabled") -> AppHTTPException:
    return error_for(ErrorCode.ACCOUNT_DISABLED, detail)


def forbidden(
    detail: str = "You do not have permission to perform this action",
) -> AppHTTPException:
    return error_for(ErrorCode.FORBIDDEN, detail)


def internal_error(detail: str = "An unexpected error occurred") -> AppHTTPException:
    return error_for(ErrorCode.INTERNAL_ERROR, detail)


def database_error(detail: str = "Database operation failed") -> AppHTTPException:
    return error_for(ErrorCode.DATABASE_ERROR, detail)


# ---------------------------------------------------------------------------
# Handlers FastAPI
# ---------------------------------------------------------------------------
def error_json(
    status_code: int,
    code: ErrorCode,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    envelope = ErrorEnvelope(error=ErrorBody(code=code, message=message))
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json"),
        headers=headers,
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Renderiza AppHTTPException como envelope de error (conserva headers custom)."""
    return error_json(
        exc.status_code,
        exc.code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )
