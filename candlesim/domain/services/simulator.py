"""
CandleSim – Domain Service: Candle Simulator
==============================================
Fachada pura sobre el estado de UNA simulación.

    simulator = CandleSimulator()
    candles = simulator.reset(config, now_ms)   # historia + alineación
    update = simulator.tick(now_ms)             # un tick simulado

reset() reemplaza el estado COMPLETO de forma atómica: seed nuevo desde el
símbolo, historia nueva, bucket re-alineado. No se reconcilia la cola de
la secuencia anterior. El scheduling (timer) vive fuera, en la capa de
aplicación.
"""

from __future__ import annotations

from typing import List, Optional

from candlesim.domain.entities.candle import Candle
from candlesim.domain.entities.simulation_state import SimulationState
from candlesim.domain.exceptions.domain_errors import SimulationNotStartedError
from candlesim.domain.services.bucket_alignment import align_bucket_ms
from candlesim.domain.services.candle_aggregator import LiveBucketAggregator
from candlesim.domain.services.history_generator import generate_history
from candlesim.domain.services.random_source import RandomSource
from candlesim.domain.value_objects.candle_update import CandleUpdate
from candlesim.domain.value_objects.simulation_config import SimulationConfig


class CandleSimulator:
    """Estado de simulación + operaciones reset/tick."""

    def __init__(self, aggregator: Optional[LiveBucketAggregator] = None) -> None:
        self._aggregator = aggregator or LiveBucketAggregator()
        self._state: Optional[SimulationState] = None

    def reset(self, config: SimulationConfig, now_ms: int) -> List[Candle]:
        """(Re)construir el estado completo para `config` en el instante `now_ms`."""
        source = RandomSource(config.seed)
        candles, last_close = generate_history(
            source,
            now_ms,
            config.candle_duration_ms,
            config.history_length,
            volatility=config.volatility,
            start_price=config.start_price,
        )
        self._state = SimulationState(
            config=config,
            source=source,
            last_price=last_close,
            bucket_start_ms=align_bucket_ms(now_ms, config.candle_duration_ms),
            candles=candles,
        )
        return list(candles)

    def tick(self, now_ms: int) -> CandleUpdate:
        if self._state is None:
            raise SimulationNotStartedError()
        return self._aggregator.tick(self._state, now_ms)

    @property
    def started(self) -> bool:
        return self._state is not None

    @property
    def config(self) -> Optional[SimulationConfig]:
        return self._state.config if self._state else None

    @property
    def state(self) -> Optional[SimulationState]:
        return self._state

    @property
    def candles(self) -> List[Candle]:
        """Copia de la secuencia actual (más antigua primero)."""
        if self._state is None:
            return []
        return list(self._state.candles)

    @property
    def stats(self) -> dict:
        if self._state is None:
            return {"started": False}
        return {"started": True, **self._state.snapshot()}
