"""
CandleSim – API Schemas (Pydantic)
=====================================
Schemas de validación para request/response de la API REST.
La validación de NEGOCIO (duraciones positivas, etc.) vive en
SimulationConfig; aquí solo se validan tipos.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    service: str


class SimulationRequest(BaseModel):
    """Body para iniciar/reconfigurar una simulación. None → default de settings."""

    symbol: str = Field(..., description="Símbolo, e.g. 'DOT/USDT'")
    candle_duration_ms: Optional[int] = None
    history_length: Optional[int] = None
    tick_interval_ms: Optional[int] = None
    volatility: Optional[float] = None
    start_price: Optional[float] = None


class CandleSchema(BaseModel):
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float] = None


class CandlesResponse(BaseModel):
    symbol: str
    timeframe: str
    count: int
    candles: List[CandleSchema]


class SimulationResponse(BaseModel):
    symbol: str
    timeframe: str
    candles: int
    last_candle: Optional[CandleSchema] = None
    config: dict
