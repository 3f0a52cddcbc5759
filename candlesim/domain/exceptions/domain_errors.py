"""
CandleSim – Domain Exceptions
================================
Excepciones específicas del dominio de simulación.

Solo existen errores de CONFIGURACIÓN y de uso: el núcleo no hace I/O,
así que no hay clase de error transitorio/reintentable. Los estados
numéricos degenerados (precio → 0) se corrigen con un piso EPSILON y
nunca se propagan como error.

JERARQUÍA:
    DomainError (base)
    ├── ConfigurationError
    ├── SimulationNotStartedError
    └── UnknownResolutionError
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class ConfigurationError(DomainError):
    """Parámetro de simulación inválido. Fatal para esa instancia, nunca se reintenta."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, code="INVALID_CONFIGURATION")
        self.field = field
        self.value = value

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class SimulationNotStartedError(DomainError):
    """Se pidió un tick a un simulador que nunca fue inicializado."""

    def __init__(self, message: str = "La simulación no ha sido inicializada"):
        super().__init__(message, code="SIMULATION_NOT_STARTED")


class UnknownResolutionError(DomainError):
    """Resolución UDF no soportada."""

    def __init__(self, resolution: str):
        super().__init__(
            f"Resolución '{resolution}' no soportada", code="UNKNOWN_RESOLUTION"
        )
        self.resolution = resolution
