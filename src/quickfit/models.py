"""
Modelos de datos para la simulación Quick Fit.

Este módulo define las estructuras de datos principales utilizadas en toda la
simulación, incluyendo la configuración del asignador, el estado de cada
categoría y los resultados de las operaciones.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


DEFAULT_CATEGORIES: Tuple[int, ...] = (50, 100, 200, 300, 500)
DEFAULT_INITIAL_FREE_COUNT = 5


class Outcome(Enum):
    """Resultados posibles de una operación sobre el asignador."""
    SUCCESS = "SUCCESS"
    ALLOCATION_FAILURE = "ALLOCATION_FAILURE"
    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"


class OperationKind(Enum):
    """Operaciones que el simulador sabe aplicar."""
    ALLOCATE = "allocate"
    DEALLOCATE = "deallocate"
    RESET = "reset"


@dataclass(frozen=True)
class AllocatorConfig:
    """
    Configuración del asignador.

    Attributes:
        categories: Tamaños de bloque reconocidos, en orden ascendente.
        initial_free_count: Bloques libres por categoría al inicio y tras un reset.
    """
    categories: Tuple[int, ...] = DEFAULT_CATEGORIES
    initial_free_count: int = DEFAULT_INITIAL_FREE_COUNT


@dataclass(frozen=True)
class CategoryStatus:
    """
    Estado de una categoría en un instante dado.

    Attributes:
        size: Tamaño de bloque de la categoría.
        free_count: Bloques libres actualmente en su pool.
    """
    size: int
    free_count: int

    @property
    def is_free(self) -> bool:
        """
        Comprueba si la categoría tiene al menos un bloque disponible.

        Returns:
            bool: True si free_count > 0.
        """
        return self.free_count > 0

    def to_row(self) -> dict:
        """
        Convierte el estado a un diccionario para registro o visualización.

        Returns:
            dict: Representación de la categoría en formato de diccionario.
        """
        return {
            'size': self.size,
            'free_count': self.free_count,
            'free': self.is_free
        }


@dataclass(frozen=True)
class AllocationResult:
    """Resultado de `allocate`: la categoría elegida, o None si no hubo lugar."""
    outcome: Outcome
    request_size: int
    category: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def internal_fragmentation(self) -> int:
        """Espacio desperdiciado dentro del bloque asignado (0 si falló)."""
        if not self.ok:
            return 0
        return self.category - self.request_size


@dataclass(frozen=True)
class DeallocationResult:
    """Resultado de `deallocate`."""
    outcome: Outcome
    block_size: int

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS


@dataclass(frozen=True)
class Request:
    """
    Una operación pedida por el usuario o leída de un guion CSV.

    Attributes:
        kind: Tipo de operación.
        size: Tamaño solicitado; None para RESET.
    """
    kind: OperationKind
    size: Optional[int] = None
