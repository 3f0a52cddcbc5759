"""
CandleSim – Application DTO: UDF History
==========================================
Data Transfer Object para /udf/history (TradingView Universal Data Feed).

Formato columnar:
    {"s": "ok", "t": [...], "o": [...], "h": [...], "l": [...], "c": [...], "v": [...]}
    {"s": "no_data"}
    {"s": "error", "errmsg": "..."}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from candlesim.domain.entities.candle import Candle


@dataclass
class UdfHistoryDTO:
    """Barras en formato columnar UDF."""

    status: str = "ok"
    t: List[int] = field(default_factory=list)
    o: List[float] = field(default_factory=list)
    h: List[float] = field(default_factory=list)
    l: List[float] = field(default_factory=list)  # noqa: E741
    c: List[float] = field(default_factory=list)
    v: List[float] = field(default_factory=list)
    errmsg: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.status == "error":
            return {"s": "error", "errmsg": self.errmsg}
        if self.status == "no_data" or not self.t:
            return {"s": "no_data"}
        return {
            "s": "ok",
            "t": self.t,
            "o": self.o,
            "h": self.h,
            "l": self.l,
            "c": self.c,
            "v": self.v,
        }

    @classmethod
    def from_candles(cls, candles: Sequence[Candle]) -> "UdfHistoryDTO":
        if not candles:
            return cls(status="no_data")
        return cls(
            t=[c.time for c in candles],
            o=[c.open for c in candles],
            h=[c.high for c in candles],
            l=[c.low for c in candles],
            c=[c.close for c in candles],
            v=[c.volume or 0.0 for c in candles],
        )

    @classmethod
    def error(cls, message: str) -> "UdfHistoryDTO":
        return cls(status="error", errmsg=message)
