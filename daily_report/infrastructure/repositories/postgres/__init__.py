"""Adapters de repositorios PostgreSQL (psycopg 3, SQL crudo)."""

from .comment import PostgresCommentRepository
from .customer import PostgresCustomerRepository
from .daily_report import PostgresDailyReportRepository
from .sales_person import PostgresSalesPersonRepository

__all__ = [
    "PostgresCommentRepository",
    "PostgresCustomerRepository",
    "PostgresDailyReportRepository",
    "PostgresSalesPersonRepository",
]
