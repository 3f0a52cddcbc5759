"""
CandleSim – Settings (Pydantic BaseSettings)
=============================================
Configuración centralizada cargada desde variables de entorno / .env.
Se usa pydantic-settings para validación estricta al arranque.

Los valores de simulación son solo DEFAULTS: cada simulación puede
reconfigurarse en caliente vía API con su propio SimulationConfig.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ─── Simulación ─────────────────────────────────────────────────────
    simulation_symbols: List[str] = Field(
        default=["DOT/USDT"],
        description="Símbolos que se simulan automáticamente al arranque",
    )
    candle_duration_ms: int = Field(
        default=60_000, description="Duración de cada vela en milisegundos"
    )
    history_length: int = Field(
        default=400, description="Velas históricas generadas al (re)iniciar"
    )
    tick_interval_ms: int = Field(
        default=1_000, description="Intervalo (ms) entre ticks simulados"
    )
    volatility: float = Field(
        default=0.002, description="Banda de movimiento por tick (0.002 = 0.2%)"
    )
    start_price: Optional[float] = Field(
        default=None, description="Precio inicial; si es None se deriva del seed"
    )

    # ─── API ────────────────────────────────────────────────────────────
    max_candles_response: int = Field(
        default=1_000, description="Máximo de velas devueltas por request REST"
    )
    udf_max_bars: int = Field(
        default=5_000, description="Máximo de barras por request UDF /history"
    )
    max_history_length: int = Field(
        default=100_000, description="Máximo de velas históricas por simulación"
    )

    # ─── Event Bus ──────────────────────────────────────────────────────
    event_bus_max_queue_size: int = Field(
        default=10_000,
        description="Tamaño máximo de cola del Event Bus para contrapresión",
    )

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8888)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "CANDLESIM_",
        "case_sensitive": False,
    }


# Singleton global – se importa donde se necesite
settings = Settings()
