"""
CandleSim – Domain Entity: SimulationState
============================================
Estado en memoria de UNA simulación: cursor del random source, último
precio simulado, inicio del bucket en construcción y la secuencia de velas.

- No se persiste ni se comparte entre instancias (ni siquiera para el
  mismo símbolo).
- Se reemplaza COMPLETO en cada reset; nunca se reconcilia con el anterior.
- Solo el callback del timer lo muta → no requiere locks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from candlesim.domain.entities.candle import Candle
from candlesim.domain.services.random_source import RandomSource
from candlesim.domain.value_objects.simulation_config import SimulationConfig


@dataclass
class SimulationState:
    """Estado mutable de una simulación activa."""

    config: SimulationConfig
    source: RandomSource
    last_price: float
    bucket_start_ms: int
    candles: List[Candle] = field(default_factory=list)

    # Contadores de monitoreo
    total_ticks: int = 0
    total_rollovers: int = 0

    @property
    def live_candle(self) -> Optional[Candle]:
        return self.candles[-1] if self.candles else None

    @property
    def bucket_end_ms(self) -> int:
        return self.bucket_start_ms + self.config.candle_duration_ms

    def snapshot(self) -> dict:
        """Snapshot para diagnóstico / API."""
        live = self.live_candle
        return {
            "symbol": self.config.symbol,
            "timeframe": self.config.timeframe,
            "seed": self.source.seed,
            "draws": self.source.draws,
            "last_price": self.last_price,
            "bucket_start": self.bucket_start_ms // 1000,
            "candles": len(self.candles),
            "total_ticks": self.total_ticks,
            "total_rollovers": self.total_rollovers,
            "live_candle": live.to_dict() if live else None,
        }
