import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Paginacao:
    """Pedido de pagina (page comeca em 0)."""

    page: int = 0
    size: int = 20

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class Pagina(Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0
