"""
===============================================================================
TARJETA CRC — domain/access_policy.py
===============================================================================

Módulo:
    Política de acceso (reportes, comentarios, datos maestros)

Responsabilidades:
    - Decidir, dado un usuario autenticado y el dueño de un reporte, si el
      usuario puede ver, comentar o editar el reporte.
    - Decidir si el usuario puede administrar datos maestros.
    - Calcular el conjunto de vendedores cuyos reportes puede listar.

Colaboradores:
    - identity.users: AuthUser / UserRole.
    - ManagerLookup: port de un solo salto "manager_id de X" (método del repo).

Reglas:
    ver:       admin | uno mismo | manager sobre un subordinado directo
    comentar:  admin | manager sobre un subordinado directo (nunca uno mismo,
               nunca member)
    editar:    solo uno mismo, sea cual sea el rol
    maestros:  solo admin

Notas:
    - Funciones puras. La única I/O es el lookup de is_subordinate_of,
      inyectado como callable. Un lookup fallido cuenta como "no subordinado"
      y no se reintenta.
    - El despacho por rol es exhaustivo: un UserRole nuevo rompe el type
      checking en las ramas assert_never hasta que se maneje acá.
===============================================================================
"""

from __future__ import annotations

from typing import Callable, Iterable, assert_never

from ..crosscutting.exceptions import DatabaseError
from ..crosscutting.logger import logger
from ..identity.users import AuthUser, UserRole

ManagerLookup = Callable[[int], "int | None"]
SubordinateLister = Callable[[int], Iterable[int]]


def is_subordinate_of(
    manager_id: int, target_user_id: int, manager_of: ManagerLookup
) -> bool:
    """
    True si el manager de `target_user_id` es `manager_id`.

    Uno mismo nunca es subordinado: corta antes del lookup.
    """
    if manager_id == target_user_id:
        return False

    try:
        target_manager_id = manager_of(target_user_id)
    except DatabaseError:
        logger.warning(
            "subordinate lookup failed; treating as not subordinate",
            extra={"manager_id": manager_id, "target_user_id": target_user_id},
        )
        return False

    return target_manager_id is not None and target_manager_id == manager_id


def can_view_report(
    user: AuthUser, report_owner_id: int, manager_of: ManagerLookup
) -> bool:
    if user.id == report_owner_id:
        return True

    match user.role:
        case UserRole.ADMIN:
            return True
        case UserRole.MANAGER:
            return is_subordinate_of(user.id, report_owner_id, manager_of)
        case UserRole.MEMBER:
            return False
        case _:
            assert_never(user.role)


def can_post_comment(
    user: AuthUser, report_owner_id: int, manager_of: ManagerLookup
) -> bool:
    # R: los members no comentan, ni siquiera sus propios reportes.
    match user.role:
        case UserRole.ADMIN:
            return True
        case UserRole.MANAGER:
            return is_subordinate_of(user.id, report_owner_id, manager_of)
        case UserRole.MEMBER:
            return False
        case _:
            assert_never(user.role)


def can_edit_report(user: AuthUser, report_owner_id: int) -> bool:
    """Solo el dueño; la restricción incluye a los admins."""
    return user.id == report_owner_id


def can_manage_master(user: AuthUser) -> bool:
    match user.role:
        case UserRole.ADMIN:
            return True
        case UserRole.MANAGER | UserRole.MEMBER:
            return False
        case _:
            assert_never(user.role)


def viewable_sales_person_ids(
    user: AuthUser, subordinates_of: SubordinateLister
) -> frozenset[int] | None:
    """
    Dueños cuyos reportes puede listar `user`.

    None significa sin restricción (admin). Coherente con can_view_report.
    """
    match user.role:
        case UserRole.ADMIN:
            return None
        case UserRole.MANAGER:
            return frozenset({user.id, *subordinates_of(user.id)})
        case UserRole.MEMBER:
            return frozenset({user.id})
        case _:
            assert_never(user.role)
