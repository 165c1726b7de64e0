"""
Motor de la simulación Quick Fit y coordinación de componentes.

Este módulo orquesta la simulación: aplica las operaciones pedidas sobre el
asignador, traduce cada resultado a un mensaje para el usuario, mantiene la
bitácora de pasos y calcula las métricas de resumen.
"""

import logging
from typing import Dict, List, Optional

from .allocator import QuickFitAllocator
from .io import pretty_print_status
from .models import AllocatorConfig, OperationKind, Outcome, Request


class QuickFitSimulator:
    """
    Motor principal de la simulación Quick Fit.

    El asignador no registra nada por sí mismo; toda la bitácora y los
    mensajes al usuario se generan aquí.
    """

    def __init__(self, config: Optional[AllocatorConfig] = None, nivel_log: str = "INFO"):
        """
        Inicializa el simulador con un asignador nuevo.

        Args:
            config: Configuración del asignador (por defecto, la de referencia).
            nivel_log: Nivel de bitácora ("INFO" o "DEBUG").

        Raises:
            ConfigurationError: Si la configuración no es válida.
        """
        self.config = config or AllocatorConfig()
        self.allocator = QuickFitAllocator.from_config(self.config)
        self.step_log: List[Dict] = []

        # Configurar logger
        self.logger = logging.getLogger('quickfit')
        self.logger.setLevel(getattr(logging, nivel_log.upper()))

        # Crear un handler de consola si aún no existe
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def allocate(self, size: int) -> Dict:
        """Asigna un bloque para un proceso de `size` KB."""
        result = self.allocator.allocate(size)
        if result.ok:
            message = f"Process of size {size} KB allocated in block size {result.category} KB."
            self.logger.info(message)
        else:
            message = f"No suitable block found for process size {size} KB."
            self.logger.warning(message)
        return self._registrar_paso(OperationKind.ALLOCATE, size, result.outcome, result.category, message)

    def deallocate(self, size: int) -> Dict:
        """Libera un bloque de la categoría `size`."""
        result = self.allocator.deallocate(size)
        if result.ok:
            message = f"Block of size {size} KB deallocated."
            self.logger.info(message)
        else:
            message = "Invalid block size."
            self.logger.warning(f"{message} ({size} KB)")
        category = size if result.ok else None
        return self._registrar_paso(OperationKind.DEALLOCATE, size, result.outcome, category, message)

    def reset(self) -> Dict:
        """Restaura todos los pools al estado inicial."""
        self.allocator.reset()
        message = "Memory has been reset."
        self.logger.info(message)
        return self._registrar_paso(OperationKind.RESET, None, Outcome.SUCCESS, None, message)

    def apply(self, request: Request) -> Dict:
        """
        Aplica una operación leída del guion o tecleada por el usuario.

        Returns:
            dict: Registro del paso ejecutado.
        """
        if request.kind is OperationKind.ALLOCATE:
            return self.allocate(request.size)
        if request.kind is OperationKind.DEALLOCATE:
            return self.deallocate(request.size)
        return self.reset()

    def run(self, requests: List[Request]) -> Dict:
        """
        Ejecuta un guion completo de operaciones.

        Args:
            requests: Operaciones a aplicar en orden.

        Returns:
            dict: Métricas de resumen (ver `summarize`).
        """
        for request in requests:
            self.apply(request)
        return self.summarize()

    def snapshot(self, structured: bool = False, show_header: bool = True) -> object:
        """
        Devuelve la tabla de categorías actual.

        Args:
            structured: Si es True, devuelve una lista de diccionarios; de lo
                contrario, una cadena.
        """
        return pretty_print_status(self.allocator.status(), structured=structured, show_header=show_header)

    def _registrar_paso(self, kind: OperationKind, size: Optional[int], outcome: Outcome,
                        category: Optional[int], message: str) -> Dict:
        """Agrega un paso a la bitácora y lo devuelve."""
        record = {
            'step': len(self.step_log) + 1,
            'kind': kind.value,
            'size': size,
            'outcome': outcome.value,
            'category': category,
            'message': message,
            'status': self.snapshot(structured=True),
        }
        self.step_log.append(record)
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"Paso {record['step']}:\n{self.snapshot()}")
        return record

    def summarize(self) -> Dict:
        """Calcula las métricas de la bitácora actual."""
        allocations_ok = 0
        allocations_failed = 0
        deallocations_ok = 0
        deallocations_failed = 0
        resets = 0
        internal_fragmentation = 0
        allocated_by_category = {size: 0 for size in self.allocator.categories}

        for record in self.step_log:
            ok = record['outcome'] == Outcome.SUCCESS.value
            if record['kind'] == OperationKind.ALLOCATE.value:
                if ok:
                    allocations_ok += 1
                    allocated_by_category[record['category']] += 1
                    internal_fragmentation += record['category'] - record['size']
                else:
                    allocations_failed += 1
            elif record['kind'] == OperationKind.DEALLOCATE.value:
                if ok:
                    deallocations_ok += 1
                else:
                    deallocations_failed += 1
            else:
                resets += 1

        return {
            'steps': len(self.step_log),
            'allocations_ok': allocations_ok,
            'allocations_failed': allocations_failed,
            'deallocations_ok': deallocations_ok,
            'deallocations_failed': deallocations_failed,
            'resets': resets,
            'allocated_by_category': allocated_by_category,
            'internal_fragmentation': internal_fragmentation,
            'status': self.snapshot(structured=True),
            'step_log': self.step_log,
        }
