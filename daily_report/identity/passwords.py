"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Responsabilidades:
    - Hashear passwords con Argon2 (argon2-cffi).
    - Verificar un password contra el hash guardado sin lanzar si no coincide.

Colaboradores:
    - application/usecases/auth.py (login)
    - application/usecases/sales_persons.py (alta/edición)
    - application/dev_seed.py
===============================================================================
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

_password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hashea un password con Argon2."""
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verifica password vs hash guardado (False si no coincide o hash inválido)."""
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False
