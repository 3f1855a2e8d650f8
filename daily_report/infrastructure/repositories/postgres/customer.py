"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/customer.py
============================================================
Class: PostgresCustomerRepository

Responsibilities:
- Datos maestros de clientes en PostgreSQL (SQL crudo).
- Búsqueda por keyword sobre name o customer_code, ordenada por customer_code.

Collaborators:
- domain.entities.Customer
- PostgresRepositoryBase
- Tabla: customers
============================================================
"""

from __future__ import annotations

from typing import Iterable

from ....crosscutting.pagination import Page, PageRequest
from ....domain.entities import Customer
from .base import PostgresRepositoryBase


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostgresCustomerRepository(PostgresRepositoryBase):
    _SELECT_COLUMNS = """
        id, customer_code, name, address, phone, is_active, created_at, updated_at
    """

    @staticmethod
    def _row_to_customer(row: tuple) -> Customer:
        (
            customer_id,
            customer_code,
            name,
            address,
            phone,
            is_active,
            created_at,
            updated_at,
        ) = row
        return Customer(
            id=customer_id,
            customer_code=customer_code,
            name=name,
            address=address,
            phone=phone,
            is_active=bool(is_active),
            created_at=created_at,
            updated_at=updated_at,
        )

    def get_customer(self, customer_id: int) -> Customer | None:
        row = self._fetchone(
            query=f"SELECT {self._SELECT_COLUMNS} FROM customers WHERE id = %s",
            params=[customer_id],
            context_msg="PostgresCustomerRepository: Failed to get customer",
            extra={"customer_id": customer_id},
        )
        return self._row_to_customer(row) if row else None

    def get_by_code(self, customer_code: str) -> Customer | None:
        row = self._fetchone(
            query=f"SELECT {self._SELECT_COLUMNS} FROM customers WHERE customer_code = %s",
            params=[customer_code],
            context_msg="PostgresCustomerRepository: Failed to get customer by code",
            extra={"customer_code": customer_code},
        )
        return self._row_to_customer(row) if row else None

    def get_customers(self, ids: Iterable[int]) -> dict[int, Customer]:
        id_list = sorted(set(ids))
        if not id_list:
            return {}
        rows = self._fetchall(
            query=f"SELECT {self._SELECT_COLUMNS} FROM customers WHERE id = ANY(%s)",
            params=[id_list],
            context_msg="PostgresCustomerRepository: Failed to get customers",
            extra={"count": len(id_list)},
        )
        return {r[0]: self._row_to_customer(r) for r in rows}

    def list_customers(
        self,
        *,
        keyword: str | None,
        is_active: bool | None,
        page: PageRequest,
    ) -> Page[Customer]:
        conditions: list[str] = []
        params: list[object] = []

        if keyword:
            pattern = f"%{_escape_like(keyword)}%"
            conditions.append("(name ILIKE %s OR customer_code ILIKE %s)")
            params.extend([pattern, pattern])
        if is_active is not None:
            conditions.append("is_active = %s")
            params.append(is_active)

        where_sql = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        extra = {"keyword": keyword, "is_active": is_active}

        total = self._count(
            query=f"SELECT COUNT(*) FROM customers {where_sql}",
            params=params,
            context_msg="PostgresCustomerRepository: Failed to count customers",
            extra=extra,
        )
        rows = self._fetchall(
            query=f"""
                SELECT {self._SELECT_COLUMNS}
                FROM customers
                {where_sql}
                ORDER BY customer_code ASC, id ASC
                LIMIT %s OFFSET %s
            """,
            params=[*params, page.limit, page.offset],
            context_msg="PostgresCustomerRepository: Failed to list customers",
            extra=extra,
        )
        return Page(items=[self._row_to_customer(r) for r in rows], total_count=total)

    def create_customer(
        self,
        *,
        customer_code: str,
        name: str,
        address: str | None,
        phone: str | None,
        is_active: bool,
    ) -> Customer:
        row = self._fetchone(
            query=f"""
                INSERT INTO customers
                    (customer_code, name, address, phone, is_active, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, NOW(), NOW())
                RETURNING {self._SELECT_COLUMNS}
            """,
            params=[customer_code, name, address, phone, is_active],
            context_msg="PostgresCustomerRepository: Failed to create customer",
            extra={"customer_code": customer_code},
        )
        return self._row_to_customer(row)

    def update_customer(
        self,
        customer_id: int,
        *,
        name: str,
        address: str | None,
        phone: str | None,
        is_active: bool,
    ) -> Customer | None:
        row = self._fetchone(
            query=f"""
                UPDATE customers
                SET name = %s, address = %s, phone = %s, is_active = %s,
                    updated_at = NOW()
                WHERE id = %s
                RETURNING {self._SELECT_COLUMNS}
            """,
            params=[name, address, phone, is_active, customer_id],
            context_msg="PostgresCustomerRepository: Failed to update customer",
            extra={"customer_id": customer_id},
        )
        return self._row_to_customer(row) if row else None
