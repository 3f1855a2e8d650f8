"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/auth.py
===============================================================================

Responsabilidades:
    - POST /auth/login: credenciales -> token + cookie de sesión HttpOnly.
    - POST /auth/logout: limpiar la(s) cookie(s) de sesión.
    - GET  /auth/me: perfil actual, releído del store.

Colaboradores:
    - LoginUseCase, GetProfileUseCase (container)
    - identity.middleware (with_active_user)
    - identity.tokens.TokenService (settings de cookies)

Notas:
    - Logout y /me exigen una cuenta activa: una cuenta deshabilitada recibe
      ACCOUNT_DISABLED como en cualquier otra ruta autenticada.
    - Logout NO revoca el token: sigue vigente hasta que expira. Un cliente
      con una copia (ej: en el header Authorization) puede seguir usándolo;
      no hay denylist del lado del servidor.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from daily_report.application.usecases import (
    GetProfileUseCase,
    LoginOutcome,
    LoginUseCase,
    UseCaseErrorCode,
)
from daily_report.container import (
    get_login_use_case,
    get_profile_use_case,
    get_token_service,
)
from daily_report.crosscutting.error_responses import success_response
from daily_report.crosscutting.metrics import record_auth_failure
from daily_report.identity.middleware import with_active_user
from daily_report.identity.tokens import AuthSettings, IssuedToken, TokenService
from daily_report.identity.users import AuthUser

from ..error_mapping import raise_use_case_error, unwrap
from ..schemas.auth import LoginReq, LoginRes, MessageRes, ProfileRes, SessionUserRes

router = APIRouter(prefix="/auth", tags=["auth"])


def set_session_cookie(
    response: Response, issued: IssuedToken, settings: AuthSettings
) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=issued.token,
        max_age=settings.token_ttl_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookies(response: Response, settings: AuthSettings) -> None:
    for name in {settings.cookie_name, settings.legacy_cookie_name}:
        response.delete_cookie(
            key=name,
            path="/",
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )


@router.post("/login")
def login(
    req: LoginReq,
    response: Response,
    use_case: LoginUseCase = Depends(get_login_use_case),
    tokens: TokenService = Depends(get_token_service),
):
    result = use_case.execute(req.email, req.password)
    if result.error is not None:
        if result.error.code in (
            UseCaseErrorCode.INVALID_CREDENTIALS,
            UseCaseErrorCode.ACCOUNT_DISABLED,
        ):
            record_auth_failure(result.error.code.value.lower())
        raise_use_case_error(result.error)

    outcome: LoginOutcome = result.value
    set_session_cookie(response, outcome.issued, tokens.settings)
    body = LoginRes(
        token=outcome.issued.token,
        expires_at=outcome.issued.expires_at,
        user=SessionUserRes.from_entity(outcome.user),
    )
    return success_response(body.model_dump(mode="json"))


@router.post("/logout")
def logout(
    response: Response,
    _user: AuthUser = Depends(with_active_user()),
    tokens: TokenService = Depends(get_token_service),
):
    clear_session_cookies(response, tokens.settings)
    return success_response(MessageRes(message="Logged out").model_dump())


@router.get("/me")
def me(
    user: AuthUser = Depends(with_active_user()),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
):
    view = unwrap(use_case.execute(user.id))
    return success_response(ProfileRes.from_view(view).model_dump(mode="json"))
