"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Formas de identidad de usuario

Responsabilidades:
    - Definir la enumeración cerrada de roles (member / manager / admin).
    - Definir AuthUser, la identidad que el middleware entrega a los handlers.

Colaboradores:
    - identity/tokens.py: los claims transportan valores de UserRole.
    - identity/middleware.py: construye AuthUser desde un token verificado.
    - domain/access_policy.py: despacha de forma exhaustiva sobre UserRole.

Notas:
    - Agregar un rol obliga a revisar cada match de access_policy.py.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UserRole(str, Enum):
    """Roles soportados por el modelo de autorización."""

    MEMBER = "member"
    MANAGER = "manager"
    ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class AuthUser:
    """Llamador autenticado, según lo afirma un token verificado."""

    id: int
    email: str
    role: UserRole
