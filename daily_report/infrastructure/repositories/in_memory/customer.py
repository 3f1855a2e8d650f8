"""
============================================================
CRC CARD — infrastructure/repositories/in_memory/customer.py
============================================================
Class: InMemoryCustomerRepository

Responsibilities:
  - Customers in memory, same contract and ordering as Postgres
    (customer_code ASC; keyword over name OR code, case-insensitive).
  - Thread-safe via Lock.
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
from ....domain.entities import Customer
from ....domain.repositories import UNIQUE_CUSTOMER_CODE


class InMemoryCustomerRepository:
    def __init__(self, customers: Iterable[Customer] = ()) -> None:
        self._lock = Lock()
        self._items: dict[int, Customer] = {c.id: c for c in customers}
        self._ids = count(max(self._items, default=0) + 1)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def get_customer(self, customer_id: int) -> Customer | None:
        with self._lock:
            return self._items.get(customer_id)

    def get_by_code(self, customer_code: str) -> Customer | None:
        with self._lock:
            return next(
                (c for c in self._items.values() if c.customer_code == customer_code),
                None,
            )

    def get_customers(self, ids: Iterable[int]) -> dict[int, Customer]:
        with self._lock:
            return {i: self._items[i] for i in set(ids) if i in self._items}

    def list_customers(
        self,
        *,
        keyword: str | None,
        is_active: bool | None,
        page: PageRequest,
    ) -> Page[Customer]:
        needle = (keyword or "").lower()
        with self._lock:
            matches = sorted(
                (
                    c
                    for c in self._items.values()
                    if (
                        not needle
                        or needle in c.name.lower()
                        or needle in c.customer_code.lower()
                    )
                    and (is_active is None or c.is_active == is_active)
                ),
                key=lambda c: (c.customer_code, c.id),
            )
            return Page(
                items=matches[page.offset : page.offset + page.limit],
                total_count=len(matches),
            )

    def create_customer(
        self,
        *,
        customer_code: str,
        name: str,
        address: str | None,
        phone: str | None,
        is_active: bool,
    ) -> Customer:
        with self._lock:
            if any(c.customer_code == customer_code for c in self._items.values()):
                raise UniqueConstraintError(
                    "duplicate customer code", constraint=UNIQUE_CUSTOMER_CODE
                )
            now = self._now()
            customer = Customer(
                id=next(self._ids),
                customer_code=customer_code,
                name=name,
                address=address,
                phone=phone,
                is_active=is_active,
                created_at=now,
                updated_at=now,
            )
            self._items[customer.id] = customer
            return customer

    def update_customer(
        self,
        customer_id: int,
        *,
        name: str,
        address: str | None,
        phone: str | None,
        is_active: bool,
    ) -> Customer | None:
        with self._lock:
            current = self._items.get(customer_id)
            if current is None:
                return None
            updated = replace(
                current,
                name=name,
                address=address,
                phone=phone,
                is_active=is_active,
                updated_at=self._now(),
            )
            self._items[customer_id] = updated
            return updated
