"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment before the application is imported
  - Reset cached settings and container singletons between tests
  - Provide a seeded roster (admin, managers, members) and customers
  - Provide token helpers for API tests

Collaborators:
  - pytest: Test framework
  - daily_report.container: in-memory adapters when APP_ENV=test
  - daily_report.identity.tokens: TokenService

Notes:
  - Fixtures are auto-discovered by pytest
  - Use @pytest.fixture(scope="function") for per-test isolation
  - Use @pytest.fixture(scope="session") for expensive setup (password hashing)
"""

import os
from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

os.environ["APP_ENV"] = "test"
os.environ.setdefault("JWT_SECRET", "unit-test-secret-with-at-least-32-characters")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from daily_report.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from daily_report.container import (  # noqa: E402
    get_customer_repository,
    get_sales_person_repository,
    get_token_service,
    reset_container,
)
from daily_report.domain.entities import Customer, SalesPerson  # noqa: E402
from daily_report.identity.passwords import hash_password  # noqa: E402
from daily_report.identity.tokens import AuthSettings, TokenService  # noqa: E402
from daily_report.identity.users import AuthUser, UserRole  # noqa: E402
from daily_report.infrastructure.repositories.in_memory import (  # noqa: E402
    InMemoryCommentRepository,
    InMemoryCustomerRepository,
    InMemoryDailyReportRepository,
    InMemorySalesPersonRepository,
)

TEST_SECRET = "unit-test-secret-with-at-least-32-characters"
DEFAULT_PASSWORD = "password123"


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_singletons():
    """R: Every test starts with fresh settings and empty in-memory repos."""
    app_config.get_settings.cache_clear()
    reset_container()
    yield
    app_config.get_settings.cache_clear()
    reset_container()


# ============================================================================
# Clock / tokens
# ============================================================================


class FixedClock:
    """Mutable clock for TokenService expiry tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(jwt_secret=TEST_SECRET, token_ttl_seconds=3600)


@pytest.fixture
def token_service(auth_settings: AuthSettings, clock: FixedClock) -> TokenService:
    return TokenService(auth_settings, clock=clock)


# ============================================================================
# Roster
# ============================================================================


@dataclass
class Roster:
    """Seeded people as AuthUser identities plus the customer ids."""

    admin: AuthUser
    manager: AuthUser
    member: AuthUser
    peer: AuthUser
    other_manager: AuthUser
    outsider: AuthUser
    disabled: AuthUser
    customer_id: int
    second_customer_id: int
    inactive_customer_id: int


@pytest.fixture(scope="session")
def default_password() -> str:
    return DEFAULT_PASSWORD


@pytest.fixture(scope="session")
def password_hash() -> str:
    """R: Argon2 is slow; hash the shared password once per session."""
    return hash_password(DEFAULT_PASSWORD)


def _add_person(
    repo,
    password_hash: str,
    *,
    code: str,
    name: str,
    email: str,
    role: UserRole,
    manager: AuthUser | None = None,
    is_active: bool = True,
) -> AuthUser:
    person: SalesPerson = repo.create_sales_person(
        employee_code=code,
        name=name,
        email=email,
        password_hash=password_hash,
        role=role,
        manager_id=manager.id if manager else None,
        is_active=is_active,
    )
    return AuthUser(id=person.id, email=person.email, role=person.role)


def _add_customer(repo, *, code: str, name: str, is_active: bool = True) -> Customer:
    return repo.create_customer(
        customer_code=code,
        name=name,
        address=None,
        phone=None,
        is_active=is_active,
    )


def seed_roster(sales_persons, customers, password_hash: str) -> Roster:
    admin = _add_person(
        sales_persons, password_hash,
        code="EMP001", name="Admin", email="admin@example.com", role=UserRole.ADMIN,
    )
    manager = _add_person(
        sales_persons, password_hash,
        code="EMP002", name="Manager", email="manager@example.com",
        role=UserRole.MANAGER,
    )
    member = _add_person(
        sales_persons, password_hash,
        code="EMP003", name="Member", email="member@example.com",
        role=UserRole.MEMBER, manager=manager,
    )
    peer = _add_person(
        sales_persons, password_hash,
        code="EMP004", name="Peer", email="peer@example.com",
        role=UserRole.MEMBER, manager=manager,
    )
    other_manager = _add_person(
        sales_persons, password_hash,
        code="EMP005", name="Other Manager", email="other.manager@example.com",
        role=UserRole.MANAGER,
    )
    outsider = _add_person(
        sales_persons, password_hash,
        code="EMP006", name="Outsider", email="outsider@example.com",
        role=UserRole.MEMBER, manager=other_manager,
    )
    disabled = _add_person(
        sales_persons, password_hash,
        code="EMP007", name="Disabled", email="disabled@example.com",
        role=UserRole.MEMBER, manager=manager, is_active=False,
    )

    first = _add_customer(customers, code="C001", name="Acme Corp")
    second = _add_customer(customers, code="C002", name="Globex")
    inactive = _add_customer(customers, code="C003", name="Closed Ltd", is_active=False)

    return Roster(
        admin=admin,
        manager=manager,
        member=member,
        peer=peer,
        other_manager=other_manager,
        outsider=outsider,
        disabled=disabled,
        customer_id=first.id,
        second_customer_id=second.id,
        inactive_customer_id=inactive.id,
    )


@dataclass
class Repos:
    sales_persons: InMemorySalesPersonRepository
    customers: InMemoryCustomerRepository
    reports: InMemoryDailyReportRepository
    comments: InMemoryCommentRepository


@pytest.fixture
def repos() -> Repos:
    """R: Fresh in-memory repositories (use case tests)."""
    return Repos(
        sales_persons=InMemorySalesPersonRepository(),
        customers=InMemoryCustomerRepository(),
        reports=InMemoryDailyReportRepository(),
        comments=InMemoryCommentRepository(),
    )


@pytest.fixture
def roster(repos: Repos, password_hash: str) -> Roster:
    return seed_roster(repos.sales_persons, repos.customers, password_hash)


@pytest.fixture
def app_roster(password_hash: str) -> Roster:
    """R: Roster seeded into the container singletons (API tests)."""
    return seed_roster(
        get_sales_person_repository(), get_customer_repository(), password_hash
    )


@pytest.fixture
def auth_header():
    """R: Build an Authorization header for a roster identity."""

    def _make(user: AuthUser) -> dict[str, str]:
        issued = get_token_service().issue(user.id, user.email, user.role)
        return {"Authorization": f"Bearer {issued.token}"}

    return _make
