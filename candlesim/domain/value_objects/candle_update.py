"""
CandleSim – Domain Value Object: CandleUpdate
===============================================
Resultado de UN tick simulado. Es lo que viaja por el EventBus hacia
los clientes WebSocket (formato TradingView Bar).

- frozen=True → inmutable, seguro para pasar entre coroutines.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from candlesim.domain.entities.candle import Candle


class CandleTransition(str, Enum):
    """Transición de estado producida por un tick."""

    SEED = "seed"            # secuencia vacía → primera vela
    UPDATE = "update"        # actualización in-place de la vela viva
    ROLLOVER = "rollover"    # cierre de bucket + vela nueva


@dataclass(frozen=True, slots=True)
class CandleUpdate:
    """Vela viva tras un tick, más la vela cerrada si hubo rollover."""

    symbol: str
    timeframe: str
    transition: CandleTransition
    bar: Candle
    closed_bar: Optional[Candle] = None

    @property
    def rolled_over(self) -> bool:
        return self.transition is CandleTransition.ROLLOVER

    def to_dict(self) -> dict:
        """Mensaje OHLCV de la vela viva (is_closed = False)."""
        return self._message(self.bar, is_closed=False)

    def to_messages(self) -> List[dict]:
        """
        Mensajes OHLCV en orden de envío.
        En un rollover, primero la vela cerrada (is_closed = True) y luego
        la vela nueva; en cualquier otro caso, solo la vela viva.
        """
        if self.closed_bar is None:
            return [self.to_dict()]
        return [self._message(self.closed_bar, is_closed=True), self.to_dict()]

    def _message(self, bar: Candle, is_closed: bool) -> dict:
        return {
            "type": "ohlcv",
            "symbol": self.symbol,
            "timeframe": self.timeframe,
            "transition": self.transition.value,
            "bar": bar.to_dict(),
            "is_closed": is_closed,
            "closed_bar": self.closed_bar.to_dict() if self.closed_bar else None,
        }
