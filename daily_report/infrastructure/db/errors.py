"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Componente:
  Errores tipados del pool/conectividad

Responsabilidades:
  - Dar semántica clara en lugar de RuntimeError genéricos: "no inicializado",
    "ya inicializado".
===============================================================================
"""


class DatabasePoolError(Exception):
    """Base de errores del pool de conexiones."""


class PoolAlreadyInitializedError(DatabasePoolError):
    """init_pool() se llamó más de una vez."""


class PoolNotInitializedError(DatabasePoolError):
    """Se usó el pool antes de init_pool()."""
