"""
===============================================================================
TARJETA CRC — identity/middleware.py
===============================================================================

Módulo:
    Dependencias de autenticación por request (FastAPI)

Responsabilidades:
    - Resolver el bearer token: primero el header Authorization, luego la
      cookie de sesión y por último la cookie legacy `token`.
    - Verificarlo con TokenService y exponer al llamador como AuthUser en
      request.state.user (y en el contexto de logging).
    - Exigir pertenencia a roles (with_role / with_admin).
    - Opcionalmente releer el SalesPerson para rechazar cuentas
      deshabilitadas o borradas aunque su token siga vigente.

Colaboradores:
    - identity.tokens.TokenService (verify, extract_from_header)
    - container.get_token_service / get_sales_person_repository
    - crosscutting.error_responses (unauthorized, forbidden, account_disabled)
    - crosscutting.metrics.record_auth_failure

Mapeo de fallas:
    - sin token                 -> 401 UNAUTHORIZED "Authentication required"
    - verificación fallida      -> 401 UNAUTHORIZED <mensaje del verificador>
    - registro inexistente      -> 401 UNAUTHORIZED
    - registro inactivo         -> 401 ACCOUNT_DISABLED
    - rol no permitido          -> 403 FORBIDDEN
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Header, Request

from ..container import get_sales_person_repository, get_token_service
from ..context import set_user_context
from ..crosscutting.error_responses import account_disabled, forbidden, unauthorized
from ..crosscutting.metrics import record_access_denied, record_auth_failure
from ..domain.repositories import SalesPersonRepository
from .tokens import TokenService
from .users import AuthUser, UserRole

USER_NOT_FOUND_MESSAGE = "User no longer exists"


def resolve_token(
    request: Request, authorization: str | None, tokens: TokenService
) -> str | None:
    """Gana el header; las cookies son el fallback del browser."""
    token = TokenService.extract_from_header(authorization)
    if token:
        return token
    settings = tokens.settings
    for cookie_name in (settings.cookie_name, settings.legacy_cookie_name):
        value = request.cookies.get(cookie_name) if cookie_name else None
        if value:
            return value
    return None


def _remember(request: Request, user: AuthUser) -> AuthUser:
    request.state.user = user
    set_user_context(user.id)
    return user


def with_auth() -> Callable:
    """Dependency: cualquier llamador con un token válido."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        tokens: TokenService = Depends(get_token_service),
    ) -> AuthUser:
        token = resolve_token(request, authorization, tokens)
        if not token:
            record_auth_failure("missing_token")
            raise unauthorized()

        result = tokens.verify(token)
        if not result.valid or result.payload is None:
            record_auth_failure("invalid_token")
            raise unauthorized(result.error or "Invalid token")

        payload = result.payload
        return _remember(
            request,
            AuthUser(id=payload.user_id, email=payload.email, role=payload.role),
        )

    return dependency


def with_active_user() -> Callable:
    """
    Dependency: token válido Y un SalesPerson existente y activo.

    El AuthUser devuelto lleva el email/rol guardados: los cambios de rol
    aplican antes de que expire el token.
    """

    async def dependency(
        request: Request,
        claimed: AuthUser = Depends(with_auth()),
        sales_persons: SalesPersonRepository = Depends(get_sales_person_repository),
    ) -> AuthUser:
        person = sales_persons.get_sales_person(claimed.id)
        if person is None:
            record_auth_failure("unknown_user")
            raise unauthorized(USER_NOT_FOUND_MESSAGE)
        if not person.is_active:
            record_auth_failure("account_disabled")
            raise account_disabled()

        return _remember(
            request, AuthUser(id=person.id, email=person.email, role=person.role)
        )

    return dependency


def with_role(*roles: UserRole, fresh: bool = False) -> Callable:
    """
    Dependency: llamador autenticado cuyo rol está en `roles`.

    fresh=True valida contra el registro guardado (with_active_user) en vez
    de confiar solo en los claims del token.
    """
    allowed = frozenset(UserRole(r) for r in roles)
    base = with_active_user() if fresh else with_auth()

    async def dependency(user: AuthUser = Depends(base)) -> AuthUser:
        if user.role not in allowed:
            record_access_denied("role")
            raise forbidden()
        return user

    return dependency


def with_admin(*, fresh: bool = False) -> Callable:
    return with_role(UserRole.ADMIN, fresh=fresh)
