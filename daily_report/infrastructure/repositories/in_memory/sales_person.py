"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/sales_person.py
============================================================
Class: InMemorySalesPersonRepository

Responsibilities:
  - Mantener vendedores en memoria (tests / ejecución local sin Postgres).
  - Replicar el contrato de Postgres: employee_code/email únicos,
    listados ordenados por nombre, manager resuelto en las vistas.

Collaborators:
  - domain.repositories.SalesPersonRepository (contrato)
  - crosscutting.exceptions.UniqueConstraintError

Notes:
  - Thread-safe: cada operación corre bajo un Lock.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from itertools import count
from threading import Lock
from typing import Iterable

from ....crosscutting.exceptions import UniqueConstraintError
from ....crosscutting.pagination import Page, PageRequest
from ....domain.entities import PersonRef, SalesPerson, SalesPersonView
from ....domain.repositories import UNIQUE_EMAIL, UNIQUE_EMPLOYEE_CODE
from ....identity.users import UserRole


class InMemorySalesPersonRepository:
    def __init__(self, sales_persons: Iterable[SalesPerson] = ()) -> None:
        self._lock = Lock()
        self._items: dict[int, SalesPerson] = {}
        for person in sales_persons:
            self._items[person.id] = person
        self._ids = count(max(self._items, default=0) + 1)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _sorted(items: Iterable[SalesPerson]) -> list[SalesPerson]:
        return sorted(items, key=lambda p: (p.name, p.id))

    def _view(self, person: SalesPerson) -> SalesPersonView:
        manager = self._items.get(person.manager_id) if person.manager_id else None
        return SalesPersonView(
            person=person,
            manager=PersonRef(id=manager.id, name=manager.name) if manager else None,
        )

    def _check_unique(
        self, *, employee_code: str | None, email: str, exclude_id: int | None
    ) -> None:
        for other in self._items.values():
            if other.id == exclude_id:
                continue
            if employee_code is not None and other.employee_code == employee_code:
                raise UniqueConstraintError(
                    "duplicate employee code", constraint=UNIQUE_EMPLOYEE_CODE
                )
            if other.email == email:
                raise UniqueConstraintError("duplicate email", constraint=UNIQUE_EMAIL)

    def ping(self) -> bool:
        return True

    # =========================================================
    # Búsquedas
    # =========================================================
    def get_sales_person(self, sales_person_id: int) -> SalesPerson | None:
        with self._lock:
            return self._items.get(sales_person_id)

    def get_by_email(self, email: str) -> SalesPerson | None:
        normalized = (email or "").strip().lower()
        with self._lock:
            return next(
                (p for p in self._items.values() if p.email == normalized), None
            )

    def get_by_employee_code(self, employee_code: str) -> SalesPerson | None:
        with self._lock:
            return next(
                (p for p in self._items.values() if p.employee_code == employee_code),
                None,
            )

    def get_manager_id(self, sales_person_id: int) -> int | None:
        with self._lock:
            person = self._items.get(sales_person_id)
            return person.manager_id if person else None

    def list_subordinate_ids(self, manager_id: int) -> list[int]:
        with self._lock:
            return sorted(
                p.id for p in self._items.values() if p.manager_id == manager_id
            )

    def list_subordinates(
        self, manager_id: int, *, active_only: bool = True
    ) -> list[SalesPerson]:
        with self._lock:
            return self._sorted(
                p
                for p in self._items.values()
                if p.manager_id == manager_id and (p.is_active or not active_only)
            )

    def get_names(self, ids: Iterable[int]) -> dict[int, str]:
        with self._lock:
            return {i: self._items[i].name for i in set(ids) if i in self._items}

    def get_view(self, sales_person_id: int) -> SalesPersonView | None:
        with self._lock:
            person = self._items.get(sales_person_id)
            return self._view(person) if person else None

    def list_sales_persons(
        self,
        *,
        is_active: bool | None,
        role: UserRole | None,
        page: PageRequest,
    ) -> Page[SalesPersonView]:
        with self._lock:
            matches = self._sorted(
                p
                for p in self._items.values()
                if (is_active is None or p.is_active == is_active)
                and (role is None or p.role == role)
            )
            window = matches[page.offset : page.offset + page.limit]
            return Page(
                items=[self._view(p) for p in window], total_count=len(matches)
            )

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
        normalized_email = email.strip().lower()
        with self._lock:
            self._check_unique(
                employee_code=employee_code, email=normalized_email, exclude_id=None
            )
            now = self._now()
            person = SalesPerson(
                id=next(self._ids),
                employee_code=employee_code,
                name=name,
                email=normalized_email,
                password_hash=password_hash,
                role=role,
                manager_id=manager_id,
                is_active=is_active,
                created_at=now,
                updated_at=now,
            )
            self._items[person.id] = person
            return person

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
        normalized_email = email.strip().lower()
        with self._lock:
            current = self._items.get(sales_person_id)
            if current is None:
                return None
            self._check_unique(
                employee_code=None, email=normalized_email, exclude_id=sales_person_id
            )
            updated = replace(
                current,
                name=name,
                email=normalized_email,
                role=role,
                manager_id=manager_id,
                is_active=is_active,
                password_hash=password_hash or current.password_hash,
                updated_at=self._now(),
            )
            self._items[sales_person_id] = updated
            return updated
