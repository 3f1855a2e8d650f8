"""
===============================================================================
TARJETA CRC — router.py (router raíz / composición)
===============================================================================

Responsabilidades:
  - Construir el APIRouter que api/main.py monta bajo /api/v1.
  - Componer un sub-router por contexto acotado.

Notas:
  - build_router() es una factory: los tests lo componen sin importar la
    aplicación completa.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from .routers import (
    auth_router,
    comments_router,
    customers_router,
    reports_router,
    sales_persons_router,
)

API_PREFIX = "/api/v1"


def build_router() -> APIRouter:
    api_router = APIRouter()

    api_router.include_router(auth_router)
    api_router.include_router(reports_router)
    api_router.include_router(comments_router)
    api_router.include_router(sales_persons_router)
    api_router.include_router(customers_router)

    return api_router


router = build_router()

__all__ = ["API_PREFIX", "build_router", "router"]
