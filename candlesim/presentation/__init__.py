"""
CandleSim – Presentation Layer
=================================
API HTTP y WebSocket.

Este módulo contiene:
- api/: FastAPI routes y schemas
- websocket/: WebSocket manager (broadcast filtrado por símbolo)

REGLA DE DEPENDENCIA:
Esta capa llama a use cases de application/ y serializa value objects
del dominio. NO implementa lógica de simulación.
"""

from candlesim.presentation.api.routes import router, init_routes
from candlesim.presentation.websocket.websocket_manager import WebSocketManager

__all__ = [
    "router",
    "init_routes",
    "WebSocketManager",
]
