"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/base.py
============================================================
Class: PostgresRepositoryBase

Responsibilities:
- Resolver el pool de conexiones de forma lazy (inyectable en tests).
- Ejecutar queries parametrizadas con manejo de errores uniforme:
  las fallas del driver se loguean y se relanzan como DatabaseError;
  las violaciones UNIQUE como UniqueConstraintError (con el nombre
  de la constraint).

Collaborators:
- psycopg / psycopg_pool
- crosscutting.exceptions, crosscutting.logger
============================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

from psycopg import Connection
from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, UniqueConstraintError
from ....crosscutting.logger import logger


class PostgresRepositoryBase:
    def __init__(self, pool: ConnectionPool | None = None):
        # R: inyectable en tests; en runtime se usa el pool global del proceso.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    @contextmanager
    def _transaction(self, context_msg: str, extra: dict) -> Iterator[Connection]:
        """Conexión dentro de una transacción (mismo mapeo de errores que los fetch)."""
        try:
            with self._get_pool().connection() as conn:
                with conn.transaction():
                    yield conn
        except pg_errors.UniqueViolation as exc:
            raise self._unique_error(context_msg, exc) from exc
        except DatabaseError:
            raise
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except pg_errors.UniqueViolation as exc:
            raise self._unique_error(context_msg, exc) from exc
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    def _execute(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> int:
        """Ejecuta un statement y devuelve la cantidad de filas afectadas."""
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).rowcount
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    @staticmethod
    def _unique_error(
        context_msg: str, exc: pg_errors.UniqueViolation
    ) -> UniqueConstraintError:
        constraint = getattr(exc.diag, "constraint_name", None) or ""
        logger.info(
            "unique constraint violated", extra={"constraint": constraint}
        )
        return UniqueConstraintError(
            f"{context_msg}: duplicate key", constraint=constraint, original_error=exc
        )

    def _count(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> int:
        row = self._fetchone(
            query=query, params=params, context_msg=context_msg, extra=extra
        )
        return int(row[0]) if row else 0

    def ping(self) -> bool:
        """SELECT 1 contra el pool; False si la base no responde."""
        try:
            with self._get_pool().connection() as conn:
                conn.execute("SELECT 1")
            return True
        except Exception as exc:
            logger.warning("database ping failed", extra={"error": str(exc)})
            return False
