"""
Paquete de routers (HTTP).

Re-exporta un APIRouter por contexto acotado; los endpoints viven en los
submódulos.
"""

from .auth import router as auth_router
from .comments import router as comments_router
from .customers import router as customers_router
from .reports import router as reports_router
from .sales_persons import router as sales_persons_router

__all__ = [
    "auth_router",
    "comments_router",
    "customers_router",
    "reports_router",
    "sales_persons_router",
]
