"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request
===============================================================================

CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Responsabilidades:
  - Formatear registros como JSON de una sola línea
  - Enriquecer con contexto del request (request_id, method, path, user_id)
  - Redactar campos sensibles (passwords, tokens, secretos) y limitar tamaños

Colaboradores:
  - daily_report/context.py (ContextVars)
  - variables de entorno LOG_LEVEL / LOG_JSON (nivel y formato)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

# Atributos de LogRecord que NO se copian como "extra".
_INTERNAL_LOGRECORD_KEYS: set[str] = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "taskName",
}


class _Redactor:
    """Redacta claves con pinta de secreto y trunca valores enormes."""

    SENSITIVE_KEYS = {
        "password",
        "password_hash",
        "secret",
        "jwt_secret",
        "token",
        "auth_token",
        "authorization",
        "cookie",
        "set-cookie",
    }

    def __init__(self, max_str: int = 4_000, max_depth: int = 4):
        self._max_str = max_str
        self._max_depth = max_depth

    def sanitize(self, value: Any, *, depth: int = 0, key: str | None = None) -> Any:
        if key and key.lower() in self.SENSITIVE_KEYS:
            return "***REDACTED***"

        if depth > self._max_depth:
            return "***TRUNCATED***"

        if isinstance(value, str):
            if len(value) <= self._max_str:
                return value
            return value[: self._max_str] + "...(truncated)"

        if isinstance(value, (bytes, bytearray)):
            return f"<bytes {len(value)}B>"

        if isinstance(value, dict):
            return {
                str(k): self.sanitize(v, depth=depth + 1, key=str(k))
                for k, v in value.items()
            }

        if isinstance(value, (list, tuple, set)):
            return [self.sanitize(v, depth=depth + 1, key=key) for v in value]

        try:
            json.dumps(value)
            return value
        except (TypeError, ValueError):
            return str(value)


class JSONFormatter(logging.Formatter):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      JSONFormatter

    Responsabilidades:
      - Convertir LogRecord -> JSON
      - Mezclar contexto del request y extras sanitizados
      - Adjuntar stacktrace si el registro trae excepción

    Colaboradores:
      - daily_report.context.get_context_dict()
      - _Redactor
    ----------------------------------------------------------------------------
    """

    def __init__(self):
        super().__init__()
        self._redactor = _Redactor()

    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }
        payload.update(get_context_dict())

        for k, v in record.__dict__.items():
            if k in _INTERNAL_LOGRECORD_KEYS:
                continue
            payload[k] = self._redactor.sanitize(v, key=k)

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            exc_msg = str(record.exc_info[1]) if record.exc_info[1] else None
            payload["exception"] = {
                "type": exc_type,
                "message": exc_msg,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(
            payload, ensure_ascii=False, default=str, separators=(",", ":")
        )


def _read_log_settings() -> tuple[str, bool]:
    """Nivel/formato desde env (lectura directa: el logging no depende de Settings)."""
    level = (os.getenv("LOG_LEVEL") or "INFO").upper()
    use_json = (os.getenv("LOG_JSON") or "true").strip().lower() not in {
        "0",
        "false",
        "no",
        "off",
    }
    return level, use_json


def setup_logger(name: str = "daily-report-api") -> logging.Logger:
    """
    Crea y configura el logger global.

    - Evita handlers duplicados al re-importar
    - Respeta LOG_LEVEL / LOG_JSON
    """
    log = logging.getLogger(name)
    level, use_json = _read_log_settings()

    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


logger = setup_logger()
