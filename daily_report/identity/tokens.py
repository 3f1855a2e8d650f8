"""
===============================================================================
TARJETA CRC — identity/tokens.py
===============================================================================

Módulo:
    Servicio de tokens de sesión (JWT, HS256)

Responsabilidades:
    - Emitir tokens firmados con {userId, email, role, iat, exp}.
    - Verificar tokens devolviendo un resultado tagueado (valid + payload | error),
      sin lanzar excepciones.
    - Extraer el token de un header literal "Bearer <token>".

Colaboradores:
    - crosscutting.config.Settings: origen del snapshot AuthSettings.
    - identity.users.UserRole: enumeración cerrada validada en verify.
    - identity.middleware: traduce resultados fallidos a respuestas 401.

Decisiones de diseño:
    - La configuración es un valor AuthSettings explícito pasado al construir;
      el servicio nunca lee el entorno por su cuenta.
    - La expiración se valida contra un reloj inyectable (tests).
    - Los tokens no son revocables: siguen válidos hasta `exp` aun después
      del logout. El logout solo limpia la cookie del cliente.
    - Nunca loguear tokens ni el secreto.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

import jwt

from ..crosscutting.config import Settings
from ..crosscutting.exceptions import ConfigurationError
from .users import UserRole

JWT_ALGORITHM: str = "HS256"

CLAIM_USER_ID: str = "userId"
CLAIM_EMAIL: str = "email"
CLAIM_ROLE: str = "role"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"

BEARER_PREFIX: str = "Bearer "
LEGACY_COOKIE_NAME: str = "token"

ERROR_EXPIRED = "Token has expired"
ERROR_SIGNATURE = "Invalid token signature"
ERROR_MALFORMED = "Invalid token"
ERROR_PAYLOAD = "Invalid token payload"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """Snapshot de configuración de auth."""

    jwt_secret: str
    token_ttl_seconds: int
    cookie_name: str = "auth_token"
    cookie_secure: bool = False
    legacy_cookie_name: str = LEGACY_COOKIE_NAME

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthSettings":
        return cls(
            jwt_secret=settings.jwt_secret,
            token_ttl_seconds=settings.token_ttl_seconds(),
            cookie_name=(settings.jwt_cookie_name or "").strip() or "auth_token",
            cookie_secure=settings.jwt_cookie_secure or settings.is_production(),
        )


@dataclass(frozen=True, slots=True)
class TokenPayload:
    user_id: int
    email: str
    role: UserRole
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class TokenVerifyResult:
    valid: bool
    payload: TokenPayload | None = None
    error: str | None = None

    @classmethod
    def ok(cls, payload: TokenPayload) -> "TokenVerifyResult":
        return cls(valid=True, payload=payload)

    @classmethod
    def fail(cls, error: str) -> "TokenVerifyResult":
        return cls(valid=False, error=error)


class TokenService:
    """Emisión/verificación stateless sobre un secreto del servidor."""

    def __init__(self, settings: AuthSettings, clock: Clock | None = None) -> None:
        if not (settings.jwt_secret or "").strip():
            raise ConfigurationError("JWT signing secret is not configured")
        if settings.token_ttl_seconds <= 0:
            raise ConfigurationError("Token lifetime must be positive")
        self._settings = settings
        self._clock = clock or _utcnow

    @property
    def settings(self) -> AuthSettings:
        return self._settings

    def issue(self, user_id: int, email: str, role: UserRole | str) -> IssuedToken:
        """Firma un token para la terna; expira a un TTL fijo desde ahora."""
        now = self._clock()
        issued_at = int(now.timestamp())
        expires_at = issued_at + self._settings.token_ttl_seconds

        claims: dict[str, object] = {
            CLAIM_USER_ID: int(user_id),
            CLAIM_EMAIL: email,
            CLAIM_ROLE: UserRole(role).value,
            CLAIM_IAT: issued_at,
            CLAIM_EXP: expires_at,
        }
        token = jwt.encode(claims, self._settings.jwt_secret, algorithm=JWT_ALGORITHM)
        return IssuedToken(
            token=token,
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )

    def verify(self, token: str | None) -> TokenVerifyResult:
        """
        Valida firma, expiración y claims.

        Las fallas esperadas (malformado, firma inválida, expirado, payload inválido)
        vuelven como TokenVerifyResult.fail(...) con un error legible.
        """
        if not token or not isinstance(token, str):
            return TokenVerifyResult.fail(ERROR_MALFORMED)

        try:
            claims = jwt.decode(
                token,
                self._settings.jwt_secret,
                algorithms=[JWT_ALGORITHM],
                # R: los claims de tiempo se validan abajo contra el reloj inyectado.
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": [CLAIM_EXP],
                },
            )
        except jwt.InvalidSignatureError:
            return TokenVerifyResult.fail(ERROR_SIGNATURE)
        except jwt.MissingRequiredClaimError:
            return TokenVerifyResult.fail(ERROR_PAYLOAD)
        except jwt.InvalidTokenError:
            return TokenVerifyResult.fail(ERROR_MALFORMED)

        exp = claims.get(CLAIM_EXP)
        if not _is_int(exp):
            return TokenVerifyResult.fail(ERROR_PAYLOAD)
        if int(self._clock().timestamp()) >= exp:
            return TokenVerifyResult.fail(ERROR_EXPIRED)

        payload = _payload_from_claims(claims)
        if payload is None:
            return TokenVerifyResult.fail(ERROR_PAYLOAD)
        return TokenVerifyResult.ok(payload)

    @staticmethod
    def extract_from_header(value: str | None) -> str | None:
        """Acepta solo la forma literal `Bearer <token>` (case-sensitive)."""
        if not value or not value.startswith(BEARER_PREFIX):
            return None
        token = value[len(BEARER_PREFIX):].strip()
        return token or None


def _is_int(value: object) -> bool:
    # R: bool es subclase de int; no vale como user id ni timestamp.
    return isinstance(value, int) and not isinstance(value, bool)


def _payload_from_claims(claims: dict) -> TokenPayload | None:
    user_id = claims.get(CLAIM_USER_ID)
    email = claims.get(CLAIM_EMAIL)
    role_value = claims.get(CLAIM_ROLE)
    iat = claims.get(CLAIM_IAT)

    if not _is_int(user_id) or not isinstance(email, str) or not email:
        return None
    if not isinstance(role_value, str):
        return None
    try:
        role = UserRole(role_value)
    except ValueError:
        return None

    exp = claims[CLAIM_EXP]
    issued_at = iat if _is_int(iat) else exp
    return TokenPayload(
        user_id=user_id,
        email=email,
        role=role,
        issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
    )
