"""
CandleSim – WebSocket Manager (broadcast a clientes frontend)
===============================================================
Gestiona conexiones WebSocket de clientes y les envía las actualizaciones
OHLCV en tiempo real (formato TradingView Bar, time en segundos).

ARQUITECTURA:
  EventBus ──(ohlcv)────────────▸ WSManager._broadcast_loop()
  EventBus ──(simulation_reset)─▸ WSManager._broadcast_loop()
       │
       ▼
  [Cliente WS 1 (DOT/USDT, 1m), Cliente WS 2 (BTC/USD, *), ...]

FILTROS POR CLIENTE:
- Cada cliente se suscribe a UN símbolo y, opcionalmente, a una lista de
  timeframes ("1m,5m"). Sin lista → recibe todos los timeframes.

NO BLOQUEA EL LOOP PRINCIPAL:
- El broadcast corre como task independiente.
- El envío a cada cliente usa asyncio.wait_for con timeout; un cliente
  lento o desconectado se elimina sin afectar a los demás.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from fastapi import WebSocket, WebSocketDisconnect

from candlesim.application.use_cases.run_simulation_usecase import (
    OHLCV_TOPIC,
    SIMULATION_RESET_TOPIC,
)
from candlesim.infrastructure.external.event_bus import EventBus
from candlesim.shared.logging.logger import get_logger

logger = get_logger("ws_manager")

SEND_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class ClientFilter:
    """Suscripción de un cliente: símbolo + timeframes opcionales."""

    symbol: str
    timeframes: Optional[FrozenSet[str]] = None

    @classmethod
    def parse(cls, symbol: str, timeframes: Optional[str]) -> "ClientFilter":
        if not timeframes:
            return cls(symbol=symbol)
        parsed = frozenset(tf.strip() for tf in timeframes.split(",") if tf.strip())
        return cls(symbol=symbol, timeframes=parsed or None)

    def matches(self, symbol: Optional[str], timeframe: Optional[str]) -> bool:
        if symbol != self.symbol:
            return False
        if self.timeframes is None or timeframe is None:
            return True
        return timeframe in self.timeframes


class WebSocketManager:
    """Gestiona conexiones frontend y broadcast de velas en tiempo real."""

    def __init__(self, event_bus: EventBus) -> None:
        self._event_bus = event_bus
        self._clients: Dict[WebSocket, ClientFilter] = {}
        self._broadcast_tasks: list[asyncio.Task] = []

    async def start(self) -> None:
        """Lanzar loops de broadcast para los tópicos de simulación."""
        ohlcv_queue = await self._event_bus.subscribe(OHLCV_TOPIC, "ws_broadcast_ohlcv")
        reset_queue = await self._event_bus.subscribe(
            SIMULATION_RESET_TOPIC, "ws_broadcast_reset"
        )
        self._broadcast_tasks = [
            asyncio.create_task(
                self._broadcast_loop(ohlcv_queue, "ohlcv"),
                name="ws-broadcast-ohlcv",
            ),
            asyncio.create_task(
                self._broadcast_loop(reset_queue, "status"),
                name="ws-broadcast-reset",
            ),
        ]
        logger.info("WebSocketManager iniciado – broadcast loops para ohlcv y status")

    async def stop(self) -> None:
        """Cancelar broadcast y cerrar todos los clientes."""
        for task in self._broadcast_tasks:
            task.cancel()
        for task in self._broadcast_tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._broadcast_tasks = []

        for ws in list(self._clients):
            try:
                await ws.close()
            except (RuntimeError, WebSocketDisconnect):
                logger.debug("Cliente ya cerrado durante shutdown")
        self._clients.clear()
        logger.info("WebSocketManager detenido")

    async def connect(self, websocket: WebSocket, client_filter: ClientFilter) -> None:
        """Registrar un nuevo cliente WebSocket con su filtro."""
        await websocket.accept()
        self._clients[websocket] = client_filter
        logger.info(
            "Cliente WS conectado (%s). Total: %d",
            client_filter.symbol, len(self._clients),
        )

    def disconnect(self, websocket: WebSocket) -> None:
        """Des-registrar un cliente desconectado."""
        self._clients.pop(websocket, None)
        logger.info("Cliente WS desconectado. Total: %d", len(self._clients))

    @staticmethod
    def build_payload(data, event_type: str) -> tuple[list[str], Optional[str], Optional[str]]:
        """
        Serializar un evento → ([json, ...], symbol, timeframe) para filtrar.
        CandleUpdate ya trae su propio envelope {"type": "ohlcv", ...}; un
        rollover produce dos mensajes: la vela cerrada y luego la nueva.
        """
        if event_type == "ohlcv":
            messages = data.to_messages() if hasattr(data, "to_messages") else [dict(data)]
            return (
                [json.dumps(m) for m in messages],
                messages[-1].get("symbol"),
                messages[-1].get("timeframe"),
            )
        payload_data = data.to_dict() if hasattr(data, "to_dict") else dict(data)
        config = payload_data.get("config", {})
        message = {
            "type": "status",
            "message": "simulation_reset",
            "data": payload_data,
        }
        return [json.dumps(message)], config.get("symbol"), config.get("timeframe")

    async def _broadcast_loop(self, queue: asyncio.Queue, event_type: str) -> None:
        """
        Loop que consume eventos de una Queue y los envía a los clientes
        cuyo filtro coincide. Corre indefinidamente en su propio task.
        """
        try:
            while True:
                data = await queue.get()
                if not self._clients:
                    continue

                payloads, symbol, timeframe = self.build_payload(data, event_type)

                targets = [
                    ws for ws, flt in self._clients.items()
                    if flt.matches(symbol, timeframe)
                ]
                if not targets:
                    continue

                disconnected: list[WebSocket] = []
                await asyncio.gather(
                    *(self._safe_send(ws, payloads, disconnected) for ws in targets)
                )
                for ws in disconnected:
                    self._clients.pop(ws, None)

        except asyncio.CancelledError:
            pass  # Shutdown limpio

    async def _safe_send(
        self, ws: WebSocket, payloads: list[str], disconnected: list[WebSocket]
    ) -> None:
        """
        Enviar los payloads en orden a un cliente, con timeout por mensaje.
        Si falla, marcar como desconectado para limpieza.
        """
        try:
            for payload in payloads:
                await asyncio.wait_for(ws.send_text(payload), timeout=SEND_TIMEOUT_SECONDS)
        except (WebSocketDisconnect, asyncio.TimeoutError, RuntimeError):
            disconnected.append(ws)

    @property
    def client_count(self) -> int:
        return len(self._clients)
