"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

TARJETA CRC (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus)

Responsabilidades:
    - Definir los collectors de Prometheus en un registry propio.
    - Ofrecer funciones chicas y estables para registrar eventos/duraciones.
    - Mantener baja la cardinalidad (sin user ids; segmentos numéricos colapsados).
    - Renderizar el payload de /metrics.

Colaboradores:
    - crosscutting.middleware: latencia y conteo HTTP.
    - identity.middleware: fallas de autenticación.
    - casos de uso de dominio: rechazos de la política de acceso.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

_requests_total = Counter(
    "daily_report_requests_total",
    "Total HTTP requests",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "daily_report_request_latency_seconds",
    "HTTP request latency (seconds)",
    ["endpoint", "method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=_registry,
)

_auth_failures_total = Counter(
    "daily_report_auth_failures_total",
    "Rejected authentications by error code",
    ["code"],
    registry=_registry,
)

_access_denied_total = Counter(
    "daily_report_access_denied_total",
    "Access policy denials by action",
    ["action"],
    registry=_registry,
)

_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")


def _normalize_endpoint(path: str) -> str:
    """/api/v1/reports/42/comments -> /api/v1/reports/{id}/comments"""
    return _NUMERIC_SEGMENT.sub("/{id}", path or "/")


def record_request_metrics(
    *, endpoint: str, method: str, status_code: int, latency_seconds: float
) -> None:
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=str(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def record_auth_failure(code: str) -> None:
    _auth_failures_total.labels(code=code).inc()


def record_access_denied(action: str) -> None:
    _access_denied_total.labels(action=action).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Devuelve (body, content_type) para el endpoint /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
