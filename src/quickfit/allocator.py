"""
Algoritmo de asignación de memoria Quick Fit.

Este módulo implementa la estrategia Quick Fit sobre un conjunto fijo de
categorías de tamaño de bloque. Cada categoría tiene su propio pool de bloques
libres, modelado como un contador porque los bloques de una misma categoría
son intercambiables.
"""

import threading
from typing import Dict, Iterable, Tuple

from .errors import ConfigurationError
from .models import (
    AllocationResult,
    AllocatorConfig,
    CategoryStatus,
    DEFAULT_INITIAL_FREE_COUNT,
    DeallocationResult,
    Outcome,
)


def _validar_categorias(categories: Iterable[int]) -> Tuple[int, ...]:
    """
    Valida y ordena los tamaños de categoría.

    Raises:
        ConfigurationError: Si la lista está vacía, o tiene tamaños no enteros,
            no positivos o duplicados.
    """
    sizes = list(categories)
    if not sizes:
        raise ConfigurationError("La lista de categorías no puede estar vacía")

    for size in sizes:
        # bool es subclase de int, pero True no es un tamaño de bloque.
        if isinstance(size, bool) or not isinstance(size, int):
            raise ConfigurationError(f"Tamaño de categoría no entero: {size!r}")
        if size <= 0:
            raise ConfigurationError(f"Tamaño de categoría no positivo: {size}")

    if len(set(sizes)) != len(sizes):
        duplicados = sorted({s for s in sizes if sizes.count(s) > 1})
        raise ConfigurationError(f"Tamaños de categoría duplicados: {duplicados}")

    return tuple(sorted(sizes))


class QuickFitAllocator:
    """
    Gestiona los pools de bloques libres de cada categoría.

    Invariante: para toda categoría, free_count >= 0. El conjunto de categorías
    nunca está vacío y no cambia después de la construcción.
    """

    def __init__(self, categories: Iterable[int], initial_free_count: int = DEFAULT_INITIAL_FREE_COUNT):
        """
        Inicializa cada pool con `initial_free_count` bloques libres.

        Args:
            categories: Tamaños de bloque distintos y positivos.
            initial_free_count: Bloques libres por categoría al inicio.

        Raises:
            ConfigurationError: Si la configuración no es válida.
        """
        self._categories = _validar_categorias(categories)
        if isinstance(initial_free_count, bool) or not isinstance(initial_free_count, int):
            raise ConfigurationError(f"Cantidad inicial no entera: {initial_free_count!r}")
        if initial_free_count < 0:
            raise ConfigurationError(f"Cantidad inicial negativa: {initial_free_count}")

        self._initial_free_count = initial_free_count
        self._lock = threading.Lock()
        self._free: Dict[int, int] = {}
        self._restaurar()

    @classmethod
    def from_config(cls, config: AllocatorConfig) -> "QuickFitAllocator":
        """Construye un asignador a partir de un `AllocatorConfig`."""
        return cls(config.categories, config.initial_free_count)

    @property
    def categories(self) -> Tuple[int, ...]:
        return self._categories

    @property
    def initial_free_count(self) -> int:
        return self._initial_free_count

    def _restaurar(self) -> None:
        self._free = {size: self._initial_free_count for size in self._categories}

    def allocate(self, request_size: int) -> AllocationResult:
        """
        Asigna un bloque de la categoría más pequeña que pueda alojar el pedido.

        Se recorren las categorías en orden ascendente y se elige la primera
        con tamaño >= request_size y al menos un bloque libre. Una categoría
        adecuada pero agotada se salta.

        Args:
            request_size: Tamaño requerido por el proceso.

        Returns:
            AllocationResult con la categoría elegida, o con
            Outcome.ALLOCATION_FAILURE si ninguna categoría tiene lugar.

        Raises:
            ValueError: Si request_size no es positivo.
        """
        if request_size <= 0:
            raise ValueError(f"El tamaño solicitado debe ser positivo: {request_size}")

        with self._lock:
            for size in self._categories:
                if request_size <= size and self._free[size] > 0:
                    self._free[size] -= 1
                    return AllocationResult(Outcome.SUCCESS, request_size, size)

        return AllocationResult(Outcome.ALLOCATION_FAILURE, request_size)

    def deallocate(self, block_size: int) -> DeallocationResult:
        """
        Devuelve un bloque al pool de la categoría con ese tamaño exacto.

        No se verifica que haya una asignación pendiente de ese tamaño: el
        contador puede superar la cantidad inicial.

        Args:
            block_size: Tamaño del bloque a liberar.

        Returns:
            DeallocationResult con Outcome.SUCCESS, o Outcome.UNKNOWN_CATEGORY
            si el tamaño no corresponde a ninguna categoría.

        Raises:
            ValueError: Si block_size no es positivo.
        """
        if block_size <= 0:
            raise ValueError(f"El tamaño de bloque debe ser positivo: {block_size}")

        with self._lock:
            if block_size not in self._free:
                return DeallocationResult(Outcome.UNKNOWN_CATEGORY, block_size)
            self._free[block_size] += 1

        return DeallocationResult(Outcome.SUCCESS, block_size)

    def reset(self) -> None:
        """Restaura todos los pools a la cantidad inicial configurada."""
        with self._lock:
            self._restaurar()

    def status(self) -> Tuple[CategoryStatus, ...]:
        """
        Genera una instantánea del estado de cada categoría, en orden ascendente.

        Returns:
            Tupla de CategoryStatus (tamaño, bloques libres, libre).
        """
        with self._lock:
            return tuple(CategoryStatus(size, self._free[size]) for size in self._categories)

    def free_count(self, size: int) -> int:
        """
        Bloques libres de una categoría.

        Raises:
            KeyError: Si el tamaño no es una categoría configurada.
        """
        with self._lock:
            return self._free[size]

    def total_free_blocks(self) -> int:
        with self._lock:
            return sum(self._free.values())
