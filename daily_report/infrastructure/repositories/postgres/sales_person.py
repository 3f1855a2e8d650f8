"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/sales_person.py
============================================================
Class: PostgresSalesPersonRepository

Responsibilities:
- Datos maestros de vendedores en PostgreSQL (SQL crudo).
- Helpers de la relación manager usados por la política de acceso:
  get_manager_id(), list_subordinate_ids().
- Listado paginado con el manager resuelto (LEFT JOIN).

Collaborators:
- domain.entities.SalesPerson, SalesPersonView, PersonRef
- PostgresRepositoryBase (pool + mapeo de errores)
- Tabla: sales_persons

Constraints / Notes:
- Sin reglas de negocio aquí (unicidad y roles viven arriba).
- Queries siempre parametrizadas; los fragmentos WHERE salen de constantes.
- Ordenamiento determinístico: name ASC, id ASC.
============================================================
"""

from __future__ import annotations

from typing import Iterable

from ....crosscutting.pagination import Page, PageRequest
from ....domain.entities import PersonRef, SalesPerson, SalesPersonView
from ....identity.users import UserRole
from .base import PostgresRepositoryBase


class PostgresSalesPersonRepository(PostgresRepositoryBase):
    """Implementación PostgreSQL del repositorio de vendedores."""

    _SELECT_COLUMNS = """
        sp.id, sp.employee_code, sp.name, sp.email, sp.password_hash,
        sp.role, sp.manager_id, sp.is_active, sp.created_at, sp.updated_at
    """

    _VIEW_SELECT = f"""
        SELECT {_SELECT_COLUMNS}, m.id, m.name
        FROM sales_persons sp
        LEFT JOIN sales_persons m ON m.id = sp.manager_id
    """

    # =========================================================
    # Mapeo
    # =========================================================
    @staticmethod
    def _row_to_sales_person(row: tuple) -> SalesPerson:
        (
            sales_person_id,
            employee_code,
            name,
            email,
            password_hash,
            role,
            manager_id,
            is_active,
            created_at,
            updated_at,
        ) = row[:10]
        return SalesPerson(
            id=sales_person_id,
            employee_code=employee_code,
            name=name,
            email=email,
            password_hash=password_hash,
            role=UserRole(role),
            manager_id=manager_id,
            is_active=bool(is_active),
            created_at=created_at,
            updated_at=updated_at,
        )

    def _row_to_view(self, row: tuple) -> SalesPersonView:
        manager_id, manager_name = row[10], row[11]
        manager = (
            PersonRef(id=manager_id, name=manager_name)
            if manager_id is not None
            else None
        )
        return SalesPersonView(person=self._row_to_sales_person(row), manager=manager)

    def _get_one(self, column: str, value: object) -> SalesPerson | None:
        # R: column sale del set fijo que usan los getters públicos de abajo
        row = self._fetchone(
            query=f"SELECT {self._SELECT_COLUMNS} FROM sales_persons sp WHERE sp.{column} = %s",
            params=[value],
            context_msg="PostgresSalesPersonRepository: Failed to get sales person",
            extra={"column": column},
        )
        return self._row_to_sales_person(row) if row else None

    # =========================================================
    # Búsquedas
    # =========================================================
    def get_sales_person(self, sales_person_id: int) -> SalesPerson | None:
        return self._get_one("id", sales_person_id)

    def get_by_email(self, email: str) -> SalesPerson | None:
        return self._get_one("email", (email or "").strip().lower())

    def get_by_employee_code(self, employee_code: str) -> SalesPerson | None:
        return self._get_one("employee_code", employee_code)

    def get_manager_id(self, sales_person_id: int) -> int | None:
        row = self._fetchone(
            query="SELECT manager_id FROM sales_persons WHERE id = %s",
            params=[sales_person_id],
            context_msg="PostgresSalesPersonRepository: Failed to get manager id",
            extra={"sales_person_id": sales_person_id},
        )
        return row[0] if row else None

    def list_subordinate_ids(self, manager_id: int) -> list[int]:
        rows = self._fetchall(
            query="SELECT id FROM sales_persons WHERE manager_id = %s ORDER BY id",
            params=[manager_id],
            context_msg="PostgresSalesPersonRepository: Failed to list subordinate ids",
            extra={"manager_id": manager_id},
        )
        return [r[0] for r in rows]

    def list_subordinates(
        self, manager_id: int, *, active_only: bool = True
    ) -> list[SalesPerson]:
        where = "WHERE sp.manager_id = %s"
        if active_only:
            where += " AND sp.is_active = TRUE"
        rows = self._fetchall(
            query=f"""
                SELECT {self._SELECT_COLUMNS}
                FROM sales_persons sp
                {where}
                ORDER BY sp.name ASC, sp.id ASC
            """,
            params=[manager_id],
            context_msg="PostgresSalesPersonRepository: Failed to list subordinates",
            extra={"manager_id": manager_id},
        )
        return [self._row_to_sales_person(r) for r in rows]

    def get_names(self, ids: Iterable[int]) -> dict[int, str]:
        id_list = sorted(set(ids))
        if not id_list:
            return {}
        rows = self._fetchall(
            query="SELECT id, name FROM sales_persons WHERE id = ANY(%s)",
            params=[id_list],
            context_msg="PostgresSalesPersonRepository: Failed to get names",
            extra={"count": len(id_list)},
        )
        return {r[0]: r[1] for r in rows}

    def get_view(self, sales_person_id: int) -> SalesPersonView | None:
        row = self._fetchone(
            query=f"{self._VIEW_SELECT} WHERE sp.id = %s",
            params=[sales_person_id],
            context_msg="PostgresSalesPersonRepository: Failed to get sales person view",
            extra={"sales_person_id": sales_person_id},
        )
        return self._row_to_view(row) if row else None

    def list_sales_persons(
        self,
        *,
        is_active: bool | None,
        role: UserRole | None,
        page: PageRequest,
    ) -> Page[SalesPersonView]:
        conditions: list[str] = []
        params: list[object] = []

        if is_active is not None:
            conditions.append("sp.is_active = %s")
            params.append(is_active)
        if role is not None:
            conditions.append("sp.role = %s")
            params.append(role.value)

        where_sql = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        extra = {"is_active": is_active, "role": role.value if role else None}

        total = self._count(
            query=f"SELECT COUNT(*) FROM sales_persons sp {where_sql}",
            params=params,
            context_msg="PostgresSalesPersonRepository: Failed to count sales persons",
            extra=extra,
        )
        rows = self._fetchall(
            query=f"""
                {self._VIEW_SELECT}
                {where_sql}
                ORDER BY sp.name ASC, sp.id ASC
                LIMIT %s OFFSET %s
            """,
            params=[*params, page.limit, page.offset],
            context_msg="PostgresSalesPersonRepository: Failed to list sales persons",
            extra=extra,
        )
        return Page(items=[self._row_to_view(r) for r in rows], total_count=total)

    # =========================================================
    # Escrituras
    # =========================================================
    def create_sales_person(
        self,
        *,
        employee_code: str,
        name: str,
        email: str,
        password_hash: str,
        role: UserRole,
        manager_id: int | None,
        is_active: bool,
    ) -> SalesPerson:
        row = self._fetchone(
            query=f"""
                INSERT INTO sales_persons AS sp
                    (employee_code, name, email, password_hash, role,
                     manager_id, is_active, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, NOW(), NOW())
                RETURNING {self._SELECT_COLUMNS}
            """,
            params=[
                employee_code,
                name,
                email.strip().lower(),
                password_hash,
                role.value,
                manager_id,
                is_active,
            ],
            context_msg="PostgresSalesPersonRepository: Failed to create sales person",
            extra={"employee_code": employee_code},
        )
        return self._row_to_sales_person(row)

    def update_sales_person(
        self,
        sales_person_id: int,
        *,
        name: str,
        email: str,
        role: UserRole,
        manager_id: int | None,
        is_active: bool,
        password_hash: str | None = None,
    ) -> SalesPerson | None:
        row = self._fetchone(
            query=f"""
                UPDATE sales_persons AS sp
                SET name = %s,
                    email = %s,
                    role = %s,
                    manager_id = %s,
                    is_active = %s,
                    password_hash = COALESCE(%s, sp.password_hash),
                    updated_at = NOW()
                WHERE sp.id = %s
                RETURNING {self._SELECT_COLUMNS}
            """,
            params=[
                name,
                email.strip().lower(),
                role.value,
                manager_id,
                is_active,
                password_hash,
                sales_person_id,
            ],
            context_msg="PostgresSalesPersonRepository: Failed to update sales person",
            extra={"sales_person_id": sales_person_id},
        )
        return self._row_to_sales_person(row) if row else None
