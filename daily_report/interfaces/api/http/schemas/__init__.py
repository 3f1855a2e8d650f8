"""
===============================================================================
TARJETA CRC — schemas/__init__.py
===============================================================================

Módulo:
    Paquete de schemas HTTP (DTOs Pydantic)

Reglas:
    - Los schemas NO importan infraestructura.
    - Los schemas NO ejecutan casos de uso.
    - Solo tipos, validación y mapeo entidad -> DTO.
===============================================================================
"""

__all__: list[str] = []
