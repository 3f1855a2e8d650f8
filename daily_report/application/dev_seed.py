"""
Name: Dev Seed Demo (Local-only)

Responsibilities:
  - Provision a local demo roster: one admin, one manager, two members
    reporting to the manager, and three customers.
  - Enforce safety guard: only allowed in a local/development environment.
  - Keep operations idempotent (safe to run on every startup).

CRC:
  Component: ensure_dev_demo
  Collaborators:
    - SalesPersonRepository (get_by_email / create_sales_person)
    - CustomerRepository (get_by_code / create_customer)
    - password_hasher (identity.passwords.hash_password)
    - Settings (dev_seed_demo / app_env)
  Constraints:
    - Must NEVER run outside a local environment
    - Must be idempotent
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from ..domain.repositories import CustomerRepository, SalesPersonRepository
from ..identity.users import UserRole

LOCAL_ENVS = frozenset({"local", "development", "dev"})


@dataclass(frozen=True, slots=True)
class _DemoPerson:
    employee_code: str
    name: str
    email: str
    password: str
    role: UserRole
    # employee_code of the manager, resolved after earlier entries are created
    manager_code: str | None = None


@dataclass(frozen=True, slots=True)
class _DemoCustomer:
    customer_code: str
    name: str
    address: str
    phone: str


# Order matters: managers before the people they manage.
_DEMO_PEOPLE: tuple[_DemoPerson, ...] = (
    _DemoPerson("EMP001", "Taro Admin", "admin@example.com", "admin123", UserRole.ADMIN),
    _DemoPerson("EMP002", "Sato Manager", "manager@example.com", "manager123", UserRole.MANAGER),
    _DemoPerson(
        "EMP003", "Taro Yamada", "yamada@example.com", "member123", UserRole.MEMBER, "EMP002"
    ),
    _DemoPerson(
        "EMP004", "Hanako Suzuki", "suzuki@example.com", "member123", UserRole.MEMBER, "EMP002"
    ),
)

_DEMO_CUSTOMERS: tuple[_DemoCustomer, ...] = (
    _DemoCustomer("C001", "ABC Corporation", "1-1-1 Shibakoen, Minato-ku, Tokyo", "03-1234-5678"),
    _DemoCustomer("C002", "DEF Inc.", "2-2-2 Umeda, Kita-ku, Osaka", "06-9876-5432"),
    _DemoCustomer("C003", "GHI Industries", "3-3-3 Yamashitacho, Naka-ku, Yokohama", "045-111-2222"),
)


def _assert_local_env(settings: Settings) -> None:
    env = (settings.app_env or "").strip().lower()
    if env not in LOCAL_ENVS:
        raise RuntimeError(
            f"FATAL: DEV_SEED_DEMO is enabled but APP_ENV is '{env}' "
            f"(must be one of {sorted(LOCAL_ENVS)})."
        )


def _ensure_people(
    sales_persons: SalesPersonRepository, password_hasher: Callable[[str], str]
) -> None:
    ids_by_code: dict[str, int] = {}
    for demo in _DEMO_PEOPLE:
        existing = sales_persons.get_by_email(demo.email)
        if existing is not None:
            ids_by_code[demo.employee_code] = existing.id
            logger.info("Dev seed demo: sales person already exists", extra={"email": demo.email})
            continue

        person = sales_persons.create_sales_person(
            employee_code=demo.employee_code,
            name=demo.name,
            email=demo.email,
            password_hash=password_hasher(demo.password),
            role=demo.role,
            manager_id=ids_by_code.get(demo.manager_code) if demo.manager_code else None,
            is_active=True,
        )
        ids_by_code[demo.employee_code] = person.id
        logger.info(
            "Dev seed demo: sales person created",
            extra={"email": demo.email, "role": demo.role.value},
        )


def _ensure_customers(customers: CustomerRepository) -> None:
    for demo in _DEMO_CUSTOMERS:
        if customers.get_by_code(demo.customer_code) is not None:
            continue
        customers.create_customer(
            customer_code=demo.customer_code,
            name=demo.name,
            address=demo.address,
            phone=demo.phone,
            is_active=True,
        )
        logger.info(
            "Dev seed demo: customer created",
            extra={"customer_code": demo.customer_code},
        )


def ensure_dev_demo(
    settings: Settings,
    *,
    sales_persons: SalesPersonRepository,
    customers: CustomerRepository,
    password_hasher: Callable[[str], str],
) -> None:
    """
    Ensure the demo roster exists if DEV_SEED_DEMO is enabled.

    Fail-fast:
      - If dev_seed_demo is enabled but the environment is not local.
    """
    if not settings.dev_seed_demo:
        return

    _assert_local_env(settings)

    logger.info("Dev seed demo: starting provisioning")
    _ensure_people(sales_persons, password_hasher)
    _ensure_customers(customers)
    logger.info("Dev seed demo: provisioning complete")
