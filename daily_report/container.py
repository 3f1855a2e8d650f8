"""
===============================================================================
TARJETA CRC — daily_report/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, servicio de tokens, casos de uso).
  - Exponer factories para FastAPI (Depends) y para tareas de arranque.
  - Cachear singletons con lru_cache.
  - Elegir adapters in-memory en entornos de test; Postgres en el resto.

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories.* (ports)
  - infrastructure.repositories.* (implementaciones)
  - identity.tokens.TokenService
  - application.usecases.*

Notas:
  - Sin lógica de negocio.
  - No depende de FastAPI: solo expone factories planas.
  - Los tests resetean singletons con `reset_container()`.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases import (
    CreateCustomerUseCase,
    CreateReportUseCase,
    CreateSalesPersonUseCase,
    DeactivateCustomerUseCase,
    DeactivateSalesPersonUseCase,
    DeleteCommentUseCase,
    DeleteReportUseCase,
    GetCustomerUseCase,
    GetProfileUseCase,
    GetReportUseCase,
    GetSalesPersonUseCase,
    ListCommentsUseCase,
    ListCustomersUseCase,
    ListReportsUseCase,
    ListSalesPersonsUseCase,
    LoginUseCase,
    PostCommentUseCase,
    ReviewReportUseCase,
    UpdateCommentUseCase,
    UpdateCustomerUseCase,
    UpdateReportUseCase,
    UpdateSalesPersonUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import (
    CommentRepository,
    CustomerRepository,
    DailyReportRepository,
    SalesPersonRepository,
)
from .identity.tokens import AuthSettings, TokenService
from .infrastructure.repositories import (
    InMemoryCommentRepository,
    InMemoryCustomerRepository,
    InMemoryDailyReportRepository,
    InMemorySalesPersonRepository,
    PostgresCommentRepository,
    PostgresCustomerRepository,
    PostgresDailyReportRepository,
    PostgresSalesPersonRepository,
)

TEST_ENVS = frozenset({"test", "testing", "ci"})


def is_test_env() -> bool:
    """app_env ∈ {"test", "testing", "ci"} => adapters in-memory."""
    return get_settings().app_env.strip().lower() in TEST_ENVS


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_sales_person_repository() -> SalesPersonRepository:
    if is_test_env():
        return InMemorySalesPersonRepository()
    return PostgresSalesPersonRepository()


@lru_cache(maxsize=1)
def get_customer_repository() -> CustomerRepository:
    if is_test_env():
        return InMemoryCustomerRepository()
    return PostgresCustomerRepository()


@lru_cache(maxsize=1)
def get_daily_report_repository() -> DailyReportRepository:
    if is_test_env():
        return InMemoryDailyReportRepository()
    return PostgresDailyReportRepository()


@lru_cache(maxsize=1)
def get_comment_repository() -> CommentRepository:
    if is_test_env():
        return InMemoryCommentRepository()
    return PostgresCommentRepository()


# =============================================================================
# Servicios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """Servicio de tokens ligado a JWT_SECRET / JWT_EXPIRES_IN."""
    return TokenService(AuthSettings.from_settings(get_settings()))


def reset_container() -> None:
    """Descarta singletons cacheados (tests, recarga de settings)."""
    for factory in (
        get_sales_person_repository,
        get_customer_repository,
        get_daily_report_repository,
        get_comment_repository,
        get_token_service,
    ):
        factory.cache_clear()


# =============================================================================
# Casos de uso (factories por request)
# =============================================================================


def _report_deps() -> dict:
    return {
        "reports": get_daily_report_repository(),
        "sales_persons": get_sales_person_repository(),
        "customers": get_customer_repository(),
        "comments": get_comment_repository(),
    }


def _comment_deps() -> dict:
    return {
        "comments": get_comment_repository(),
        "reports": get_daily_report_repository(),
        "sales_persons": get_sales_person_repository(),
    }


def get_login_use_case() -> LoginUseCase:
    return LoginUseCase(get_sales_person_repository(), get_token_service())


def get_profile_use_case() -> GetProfileUseCase:
    return GetProfileUseCase(get_sales_person_repository())


def get_list_reports_use_case() -> ListReportsUseCase:
    return ListReportsUseCase(**_report_deps())


def get_get_report_use_case() -> GetReportUseCase:
    return GetReportUseCase(**_report_deps())


def get_create_report_use_case() -> CreateReportUseCase:
    return CreateReportUseCase(**_report_deps())


def get_update_report_use_case() -> UpdateReportUseCase:
    return UpdateReportUseCase(**_report_deps())


def get_delete_report_use_case() -> DeleteReportUseCase:
    return DeleteReportUseCase(**_report_deps())


def get_review_report_use_case() -> ReviewReportUseCase:
    return ReviewReportUseCase(**_report_deps())


def get_list_comments_use_case() -> ListCommentsUseCase:
    return ListCommentsUseCase(**_comment_deps())


def get_post_comment_use_case() -> PostCommentUseCase:
    return PostCommentUseCase(**_comment_deps())


def get_update_comment_use_case() -> UpdateCommentUseCase:
    return UpdateCommentUseCase(**_comment_deps())


def get_delete_comment_use_case() -> DeleteCommentUseCase:
    return DeleteCommentUseCase(**_comment_deps())


def get_list_sales_persons_use_case() -> ListSalesPersonsUseCase:
    return ListSalesPersonsUseCase(get_sales_person_repository())


def get_get_sales_person_use_case() -> GetSalesPersonUseCase:
    return GetSalesPersonUseCase(get_sales_person_repository())


def get_create_sales_person_use_case() -> CreateSalesPersonUseCase:
    return CreateSalesPersonUseCase(get_sales_person_repository())


def get_update_sales_person_use_case() -> UpdateSalesPersonUseCase:
    return UpdateSalesPersonUseCase(get_sales_person_repository())


def get_deactivate_sales_person_use_case() -> DeactivateSalesPersonUseCase:
    return DeactivateSalesPersonUseCase(get_sales_person_repository())


def get_list_customers_use_case() -> ListCustomersUseCase:
    return ListCustomersUseCase(get_customer_repository())


def get_get_customer_use_case() -> GetCustomerUseCase:
    return GetCustomerUseCase(get_customer_repository())


def get_create_customer_use_case() -> CreateCustomerUseCase:
    return CreateCustomerUseCase(get_customer_repository())


def get_update_customer_use_case() -> UpdateCustomerUseCase:
    return UpdateCustomerUseCase(get_customer_repository())


def get_deactivate_customer_use_case() -> DeactivateCustomerUseCase:
    return DeactivateCustomerUseCase(get_customer_repository())
