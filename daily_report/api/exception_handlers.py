"""
===============================================================================
TARJETA CRC — daily_report/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones de la aplicación al envelope de error
    {"success": false, "error": {"code", "message"}}.
  - Loguear errores con request_id + error_id para correlación.
  - No filtrar detalles internos de errores no controlados en producción.

Mapeo:
  - AppHTTPException         -> su propio status/code
  - RequestValidationError   -> 422 VALIDATION_ERROR (primer mensaje);
                                JSON malformado -> 400 BAD_REQUEST
  - DatabaseError            -> 503 DATABASE_ERROR
  - DailyReportError         -> 500 INTERNAL_ERROR
  - Exception                -> 500 INTERNAL_ERROR

Colaboradores:
  - crosscutting.error_responses (AppHTTPException, ErrorCode, error_json)
  - crosscutting.exceptions (DailyReportError, DatabaseError)
  - crosscutting.config.get_settings (nivel de detalle)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    ERROR_STATUS,
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    error_json,
)
from ..crosscutting.exceptions import DailyReportError, DatabaseError
from ..crosscutting.logger import logger

_VALUE_ERROR_PREFIX = "Value error, "


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = str(first.get("msg", "Invalid request"))
    if message.startswith(_VALUE_ERROR_PREFIX):
        message = message[len(_VALUE_ERROR_PREFIX):]
    # R: se descarta el prefijo "body"/"query"; queda el path del campo.
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    return f"{'.'.join(loc)}: {message}" if loc else message


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    if any(err.get("type") == "json_invalid" for err in exc.errors()):
        code = ErrorCode.BAD_REQUEST
        message = "Malformed JSON body"
    else:
        code = ErrorCode.VALIDATION_ERROR
        message = _first_validation_message(exc)

    logger.info(
        "request validation failed",
        extra={"code": code.value, "request_id": _request_id_from(request)},
    )
    return error_json(ERROR_STATUS[code], code, message)


async def _handle_service_error(
    request: Request,
    *,
    exc: DailyReportError,
    code: ErrorCode,
) -> JSONResponse:
    logger.error(
        "service error",
        extra={
            "code": code.value,
            "error_id": exc.error_id,
            "error": exc.message,
            "request_id": _request_id_from(request),
        },
    )
    detail = exc.message if not get_settings().is_production() else (
        "Service temporarily unavailable"
        if code == ErrorCode.DATABASE_ERROR
        else "Internal server error"
    )
    return error_json(ERROR_STATUS[code], code, detail)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    return await _handle_service_error(request, exc=exc, code=ErrorCode.DATABASE_ERROR)


async def daily_report_error_handler(
    request: Request, exc: DailyReportError
) -> JSONResponse:
    return await _handle_service_error(request, exc=exc, code=ErrorCode.INTERNAL_ERROR)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback: stack trace completo en el log, mensaje genérico al cliente."""
    logger.error(
        "unhandled exception",
        exc_info=True,
        extra={"request_id": _request_id_from(request), "error": str(exc)},
    )
    detail = str(exc) if not get_settings().is_production() else "Internal server error"
    return error_json(500, ErrorCode.INTERNAL_ERROR, detail)


def register_exception_handlers(app) -> None:
    """Exception (genérica) se registra última como fallback."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(DailyReportError, daily_report_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
