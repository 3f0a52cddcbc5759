"""
Tests for WebSocket client filters, payload building and the broadcast loop.
"""

import asyncio
import json

from candlesim.application.use_cases.run_simulation_usecase import (
    OHLCV_TOPIC,
    SIMULATION_RESET_TOPIC,
)
from candlesim.domain.entities.candle import Candle
from candlesim.domain.value_objects.candle_update import CandleTransition, CandleUpdate
from candlesim.infrastructure.external.event_bus import EventBus
from candlesim.presentation.websocket.websocket_manager import ClientFilter, WebSocketManager


class FakeWebSocket:
    """Cliente en memoria: registra cada texto enviado."""

    def __init__(self, fail: bool = False) -> None:
        self.sent = []
        self.accepted = False
        self.closed = False
        self.fail = fail

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, text: str) -> None:
        if self.fail:
            raise RuntimeError("socket cerrado")
        self.sent.append(json.loads(text))

    async def close(self) -> None:
        self.closed = True


def make_update(symbol="DOT/USDT", timeframe="1m", rollover=False) -> CandleUpdate:
    live = Candle(time=120, open=1.0, high=1.2, low=0.9, close=1.1, volume=5.0)
    if not rollover:
        return CandleUpdate(symbol, timeframe, CandleTransition.UPDATE, live)
    closed = Candle(time=60, open=0.8, high=1.0, low=0.7, close=1.0, volume=9.0)
    return CandleUpdate(symbol, timeframe, CandleTransition.ROLLOVER, live, closed_bar=closed)


async def drain() -> None:
    for _ in range(50):
        await asyncio.sleep(0)


class TestClientFilter:

    def test_no_timeframes_matches_all(self):
        flt = ClientFilter.parse("DOT/USDT", None)
        assert flt.timeframes is None
        assert flt.matches("DOT/USDT", "1m")
        assert flt.matches("DOT/USDT", "5s")

    def test_empty_list_matches_all(self):
        assert ClientFilter.parse("DOT/USDT", "").timeframes is None
        assert ClientFilter.parse("DOT/USDT", " , ,").timeframes is None

    def test_whitespace_is_trimmed(self):
        flt = ClientFilter.parse("DOT/USDT", " 1m , 5m ")
        assert flt.timeframes == frozenset({"1m", "5m"})
        assert flt.matches("DOT/USDT", "5m")

    def test_mismatches(self):
        flt = ClientFilter.parse("DOT/USDT", "1m")
        assert not flt.matches("BTC/USD", "1m")
        assert not flt.matches("DOT/USDT", "5m")


class TestBuildPayload:

    def test_update_is_single_message(self):
        payloads, symbol, timeframe = WebSocketManager.build_payload(make_update(), "ohlcv")
        assert (symbol, timeframe) == ("DOT/USDT", "1m")
        assert len(payloads) == 1
        message = json.loads(payloads[0])
        assert message["type"] == "ohlcv"
        assert message["is_closed"] is False

    def test_rollover_sends_closed_bar_first(self):
        payloads, _, _ = WebSocketManager.build_payload(make_update(rollover=True), "ohlcv")
        closed, live = (json.loads(p) for p in payloads)
        assert closed["is_closed"] is True
        assert closed["bar"]["time"] == 60
        assert live["is_closed"] is False
        assert live["bar"]["time"] == 120

    def test_reset_becomes_status_message(self):
        event = {"config": {"symbol": "DOT/USDT", "timeframe": "1m"}, "candles": 3}
        payloads, symbol, timeframe = WebSocketManager.build_payload(event, "status")
        message = json.loads(payloads[0])
        assert message["type"] == "status"
        assert message["message"] == "simulation_reset"
        assert message["data"]["candles"] == 3
        assert (symbol, timeframe) == ("DOT/USDT", "1m")


class TestBroadcast:

    async def test_only_matching_clients_receive(self):
        bus = EventBus()
        manager = WebSocketManager(bus)
        await manager.start()

        match = FakeWebSocket()
        other_symbol = FakeWebSocket()
        other_timeframe = FakeWebSocket()
        await manager.connect(match, ClientFilter.parse("DOT/USDT", "1m"))
        await manager.connect(other_symbol, ClientFilter.parse("BTC/USD", None))
        await manager.connect(other_timeframe, ClientFilter.parse("DOT/USDT", "5m"))

        await bus.publish(OHLCV_TOPIC, make_update(rollover=True))
        await drain()

        assert [m["is_closed"] for m in match.sent] == [True, False]
        assert other_symbol.sent == []
        assert other_timeframe.sent == []
        await manager.stop()

    async def test_reset_status_broadcast(self):
        bus = EventBus()
        manager = WebSocketManager(bus)
        await manager.start()
        client = FakeWebSocket()
        await manager.connect(client, ClientFilter.parse("DOT/USDT", None))

        await bus.publish(
            SIMULATION_RESET_TOPIC,
            {"config": {"symbol": "DOT/USDT", "timeframe": "1m"}, "candles": 3},
        )
        await drain()

        assert client.sent[0]["type"] == "status"
        await manager.stop()

    async def test_failing_client_is_dropped(self):
        bus = EventBus()
        manager = WebSocketManager(bus)
        await manager.start()
        broken = FakeWebSocket(fail=True)
        healthy = FakeWebSocket()
        await manager.connect(broken, ClientFilter.parse("DOT/USDT", None))
        await manager.connect(healthy, ClientFilter.parse("DOT/USDT", None))

        await bus.publish(OHLCV_TOPIC, make_update())
        await drain()

        assert manager.client_count == 1
        assert len(healthy.sent) == 1
        await manager.stop()
        assert healthy.closed
