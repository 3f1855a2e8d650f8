"""
Name: Database Pool and Postgres Repository Tests

Responsibilities:
  - Pool lifecycle (init, get, close, reset)
  - Row mapping for sales persons
  - Driver failures surface as DatabaseError, unique violations as
    UniqueConstraintError carrying the constraint name
  - ping() degrades to False instead of raising

Notes:
  - Offline unit tests (no real DB); the pool is a MagicMock
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from psycopg import errors as pg_errors

from daily_report.crosscutting.exceptions import DatabaseError, UniqueConstraintError
from daily_report.domain.repositories import UNIQUE_EMAIL
from daily_report.identity.users import UserRole
from daily_report.infrastructure.db.errors import (
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)
from daily_report.infrastructure.repositories.postgres import (
    PostgresSalesPersonRepository,
)

pytestmark = pytest.mark.unit

NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


class _EmailTaken(pg_errors.UniqueViolation):
    @property
    def diag(self):
        return SimpleNamespace(constraint_name=UNIQUE_EMAIL)


def _pool_returning(*, fetchone=None, fetchall=None, side_effect=None) -> MagicMock:
    pool = MagicMock()
    conn = pool.connection.return_value.__enter__.return_value
    if side_effect is not None:
        conn.execute.side_effect = side_effect
    else:
        cursor = conn.execute.return_value
        cursor.fetchone.return_value = fetchone
        cursor.fetchall.return_value = fetchall or []
    return pool


def _person_row(**overrides) -> tuple:
    row = {
        "id": 3,
        "employee_code": "EMP003",
        "name": "Member",
        "email": "member@example.com",
        "password_hash": "argon2-hash",
        "role": "member",
        "manager_id": 2,
        "is_active": True,
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return tuple(row.values())


class TestPoolLifecycle:
    def test_init_then_get_and_close(self):
        from daily_report.infrastructure.db.pool import (
            close_pool,
            get_pool,
            init_pool,
            is_pool_initialized,
            reset_pool,
        )

        reset_pool()
        with patch("daily_report.infrastructure.db.pool.ConnectionPool") as MockPool:
            mock_pool = MagicMock()
            MockPool.return_value = mock_pool

            assert init_pool("postgresql://test", min_size=1, max_size=2) is mock_pool
            assert get_pool() is mock_pool

            close_pool()

            mock_pool.close.assert_called_once()
            assert is_pool_initialized() is False

    def test_init_twice_raises(self):
        from daily_report.infrastructure.db.pool import init_pool, reset_pool

        reset_pool()
        with patch("daily_report.infrastructure.db.pool.ConnectionPool"):
            init_pool("postgresql://test", min_size=1, max_size=2)
            with pytest.raises(PoolAlreadyInitializedError):
                init_pool("postgresql://test", min_size=1, max_size=2)
        reset_pool()

    def test_get_before_init_raises(self):
        from daily_report.infrastructure.db.pool import get_pool, reset_pool

        reset_pool()
        with pytest.raises(PoolNotInitializedError):
            get_pool()


class TestPostgresSalesPersonRepository:
    def test_row_is_mapped_to_entity(self):
        repo = PostgresSalesPersonRepository(pool=_pool_returning(fetchone=_person_row()))

        person = repo.get_sales_person(3)

        assert person.id == 3
        assert person.role is UserRole.MEMBER
        assert person.manager_id == 2
        assert person.is_active is True

    def test_missing_row_is_none(self):
        repo = PostgresSalesPersonRepository(pool=_pool_returning(fetchone=None))

        assert repo.get_by_email("ghost@example.com") is None

    def test_email_lookup_is_normalized(self):
        pool = _pool_returning(fetchone=None)
        repo = PostgresSalesPersonRepository(pool=pool)

        repo.get_by_email("  Member@Example.COM ")

        conn = pool.connection.return_value.__enter__.return_value
        _, params = conn.execute.call_args.args
        assert params == ("member@example.com",)

    def test_driver_failure_becomes_database_error(self):
        repo = PostgresSalesPersonRepository(
            pool=_pool_returning(side_effect=RuntimeError("socket closed"))
        )

        with pytest.raises(DatabaseError, match="socket closed"):
            repo.list_subordinate_ids(2)

    def test_unique_violation_keeps_constraint_name(self):
        repo = PostgresSalesPersonRepository(
            pool=_pool_returning(side_effect=_EmailTaken("duplicate key"))
        )

        with pytest.raises(UniqueConstraintError) as excinfo:
            repo.create_sales_person(
                employee_code="EMP100",
                name="New Hire",
                email="member@example.com",
                password_hash="hash",
                role=UserRole.MEMBER,
                manager_id=None,
                is_active=True,
            )

        assert excinfo.value.constraint == UNIQUE_EMAIL

    def test_ping_reports_unreachable_database(self):
        healthy = PostgresSalesPersonRepository(pool=_pool_returning(fetchone=(1,)))
        broken = PostgresSalesPersonRepository(
            pool=_pool_returning(side_effect=OSError("connection refused"))
        )

        assert healthy.ping() is True
        assert broken.ping() is False
