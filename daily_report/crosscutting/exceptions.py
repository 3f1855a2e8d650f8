"""
===============================================================================
MÓDULO: Excepciones tipadas internas
===============================================================================

CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  DailyReportError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para correlacionar respuestas con logs

Colaboradores:
  - api/exception_handlers.py (mapea DatabaseError a DATABASE_ERROR)
  - identity/tokens.py (ConfigurationError si falta el secreto)
  - infrastructure/repositories/postgres/* (envuelven fallas del driver)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class DailyReportError(Exception):
    """Base de errores internos: error_code + error_id + mensaje legible."""

    error_code: str = "DAILY_REPORT_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(DailyReportError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class ConfigurationError(DailyReportError):
    """Configuración inválida detectada al arrancar (ej: secreto de firma vacío)."""

    error_code: str = "CONFIGURATION_ERROR"


class UniqueConstraintError(DatabaseError):
    """Escritura que chocó con una constraint UNIQUE (ej: fecha duplicada)."""

    error_code: str = "UNIQUE_VIOLATION"

    def __init__(
        self,
        message: str,
        *,
        constraint: str,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.constraint = constraint
