"""
CandleSim – Application Port: Clock
=====================================
Interfaz para obtener la hora de pared en milisegundos.

El use case pregunta "¿qué hora es?"; la infraestructura decide CÓMO
(reloj del sistema en producción, reloj manual en tests).
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IClock(ABC):
    """Reloj de pared en milisegundos desde epoch."""

    @abstractmethod
    def now_ms(self) -> int:
        """Instante actual en milisegundos."""
        pass
