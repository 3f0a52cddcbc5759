"""
Fixtures compartidas: reloj manual y publicador en memoria.
"""

from __future__ import annotations

from typing import Any, List, Tuple

import pytest

from candlesim.application.ports.clock import IClock
from candlesim.application.ports.event_publisher import IEventPublisher

# Alineado a 60s y a 5s
FIXED_NOW_MS = 1_700_000_040_000


class ManualClock(IClock):
    """Reloj controlado por el test."""

    def __init__(self, now_ms: int = FIXED_NOW_MS) -> None:
        self.current_ms = now_ms

    def now_ms(self) -> int:
        return self.current_ms

    def advance(self, ms: int) -> None:
        self.current_ms += ms


class RecordingPublisher(IEventPublisher):
    """Guarda cada evento publicado en orden."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []

    async def publish(self, topic: str, data: Any) -> None:
        self.events.append((topic, data))

    def topic(self, name: str) -> List[Any]:
        return [data for topic, data in self.events if topic == name]


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


def assert_candle_invariants(candles, duration_s: int) -> None:
    """Invariantes de una secuencia en reposo."""
    for candle in candles:
        assert candle.is_consistent(), candle
    for prev, cur in zip(candles, candles[1:]):
        assert cur.time - prev.time == duration_s
