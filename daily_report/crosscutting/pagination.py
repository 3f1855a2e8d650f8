"""
===============================================================================
MÓDULO: Helpers de paginación por número de página
===============================================================================

CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  PageRequest + Page

Responsabilidades:
  - Normalizar page/per_page a limit/offset para los repositorios
  - Transportar la página de items junto con el total

Colaboradores:
  - application/usecases/* (casos de uso de listado)
  - crosscutting/error_responses.paginated_response (envelope HTTP)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100


@dataclass(frozen=True, slots=True)
class PageRequest:
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if not 1 <= self.per_page <= MAX_PER_PAGE:
            raise ValueError(f"per_page must be between 1 and {MAX_PER_PAGE}")

    @property
    def limit(self) -> int:
        return self.per_page

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    total_count: int = 0

    @classmethod
    def empty(cls) -> "Page[T]":
        return cls(items=[], total_count=0)
