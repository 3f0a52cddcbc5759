"""
CandleSim – Domain Entity: Candle
====================================
Vela OHLCV de un bucket de duración fija.

Decisiones de diseño:
- frozen=True → una vela cerrada no puede alterarse.
  La vela viva se "actualiza" reemplazando el último slot de la secuencia
  por una copia (dataclasses.replace); las anteriores nunca se tocan.
- time en SEGUNDOS desde epoch (formato UDF), nunca milisegundos.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Piso de precio: el random walk nunca produce precios <= 0
EPSILON = 0.0001


@dataclass(frozen=True, slots=True)
class Candle:
    """Vela OHLCV con timestamp de apertura del bucket."""

    time: int                       # inicio del bucket (segundos epoch)
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float] = None  # ausente solo antes del primer tick

    def is_consistent(self) -> bool:
        """Verifica los invariantes OHLC de una vela en reposo."""
        return (
            self.high >= max(self.open, self.close)
            and self.low <= min(self.open, self.close)
            and min(self.open, self.high, self.low, self.close) > 0
            and (self.volume is None or self.volume >= 0)
        )

    def to_dict(self) -> dict:
        """Serialización para WebSocket / frontend (TradingView Bar)."""
        return {
            "time": self.time,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }
