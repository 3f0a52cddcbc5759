"""
CandleSim – Domain Value Object: SimulationConfig
===================================================
Parámetros de UNA simulación. Se valida al construirse: cualquier valor
inválido es un error de configuración fatal (ConfigurationError) y la
simulación nunca llega a arrancar.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from candlesim.domain.exceptions.domain_errors import ConfigurationError
from candlesim.domain.services.seed import DEFAULT_SYMBOL, seed_for_symbol

# Etiquetas de timeframe conocidas (ms → label UDF/WS)
_TIMEFRAME_LABELS = (
    (7 * 86_400_000, "W"),
    (86_400_000, "D"),
    (3_600_000, "h"),
    (60_000, "m"),
)


def timeframe_label(duration_ms: int) -> str:
    """Etiqueta legible de una duración: 60000 → '1m', 86400000 → '1D'."""
    for unit_ms, suffix in _TIMEFRAME_LABELS:
        if duration_ms % unit_ms == 0:
            return f"{duration_ms // unit_ms}{suffix}"
    return f"{duration_ms // 1000}s"


@dataclass(frozen=True)
class SimulationConfig:
    """Opciones reconocidas de start_simulation()."""

    symbol: str
    candle_duration_ms: int = 60_000
    history_length: int = 400
    tick_interval_ms: int = 1_000
    volatility: float = 0.002
    start_price: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.symbol:
            object.__setattr__(self, "symbol", DEFAULT_SYMBOL)

        if self.candle_duration_ms <= 0:
            raise ConfigurationError(
                "candle_duration_ms debe ser positivo",
                field="candle_duration_ms", value=self.candle_duration_ms,
            )
        if self.candle_duration_ms % 1000 != 0:
            raise ConfigurationError(
                "candle_duration_ms debe ser un número entero de segundos",
                field="candle_duration_ms", value=self.candle_duration_ms,
            )
        if self.tick_interval_ms <= 0:
            raise ConfigurationError(
                "tick_interval_ms debe ser positivo",
                field="tick_interval_ms", value=self.tick_interval_ms,
            )
        if self.history_length <= 0:
            raise ConfigurationError(
                "history_length debe ser positivo",
                field="history_length", value=self.history_length,
            )
        if self.volatility < 0:
            raise ConfigurationError(
                "volatility no puede ser negativa",
                field="volatility", value=self.volatility,
            )
        if self.start_price is not None and self.start_price <= 0:
            raise ConfigurationError(
                "start_price debe ser positivo",
                field="start_price", value=self.start_price,
            )

    @property
    def seed(self) -> int:
        return seed_for_symbol(self.symbol)

    @property
    def timeframe(self) -> str:
        return timeframe_label(self.candle_duration_ms)

    def with_changes(self, **changes) -> "SimulationConfig":
        """Copia con cambios (re-validada)."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "candle_duration_ms": self.candle_duration_ms,
            "history_length": self.history_length,
            "tick_interval_ms": self.tick_interval_ms,
            "volatility": self.volatility,
            "start_price": self.start_price,
            "timeframe": self.timeframe,
        }
