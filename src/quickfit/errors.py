"""
Excepciones del simulador Quick Fit.

Solo los errores de configuración son fatales. Los fallos de asignación y las
categorías desconocidas se informan como resultados (ver `models.Outcome`).
"""


class ConfigurationError(ValueError):
    """El conjunto de categorías o la cantidad inicial de bloques no es válido."""


class InvalidSizeError(ValueError):
    """La entrada del usuario no es un tamaño entero positivo."""
