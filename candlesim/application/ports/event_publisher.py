"""
CandleSim – Application Port: Event Publisher
================================================
Interfaz para publicar eventos a sistemas externos.

Los use cases publican eventos; la infraestructura
decide CÓMO entregar esos eventos (EventBus en memoria, WebSocket, etc.)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class IEventPublisher(ABC):
    """
    Interfaz para publicar eventos del sistema.

    IMPLEMENTACIONES POSIBLES:
    - EventBus (memoria/async, fan-out por asyncio.Queue)
    - Publisher en memoria para tests
    """

    @abstractmethod
    async def publish(self, topic: str, data: Any) -> None:
        """
        Publica un evento a un tópico.

        Args:
            topic: Nombre del tópico (e.g. "ohlcv", "simulation_reset")
            data: Objeto con to_dict() o dict serializable a JSON
        """
        pass
