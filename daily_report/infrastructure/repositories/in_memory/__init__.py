"""In-memory repository adapters (tests / local runs without Postgres)."""

from .comment import InMemoryCommentRepository
from .customer import InMemoryCustomerRepository
from .daily_report import InMemoryDailyReportRepository
from .sales_person import InMemorySalesPersonRepository

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryCustomerRepository",
    "InMemoryDailyReportRepository",
    "InMemorySalesPersonRepository",
]
