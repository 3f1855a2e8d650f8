"""
Adapters de repositorios.

- postgres/: persistencia de producción
- in_memory/: gemelos thread-safe que el container elige en entornos de test
"""

from .in_memory import (
    InMemoryCommentRepository,
    InMemoryCustomerRepository,
    InMemoryDailyReportRepository,
    InMemorySalesPersonRepository,
)
from .postgres import (
    PostgresCommentRepository,
    PostgresCustomerRepository,
    PostgresDailyReportRepository,
    PostgresSalesPersonRepository,
)

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryCustomerRepository",
    "InMemoryDailyReportRepository",
    "InMemorySalesPersonRepository",
    "PostgresCommentRepository",
    "PostgresCustomerRepository",
    "PostgresDailyReportRepository",
    "PostgresSalesPersonRepository",
]
