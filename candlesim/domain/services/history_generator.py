"""
CandleSim – Domain Service: History Generator
===============================================
Construye las `count` velas históricas que terminan en (e incluyen) el
bucket que contiene "now", con un random walk acotado.

ALGORITMO (por bucket, en orden temporal):
  open   = close anterior (la primera = precio base)
  drift  = (r - 0.5) * 2 * volatility * 20
  close  = max(EPSILON, open * (1 + drift))
  spread = |close - open|
  high   = max(open, close) + spread * (0.2 + r1 * 0.8)
  low    = min(open, close) - spread * (0.2 + r2 * 0.8)   (piso EPSILON)
  volume = 10 + r3 * 90

ORDEN DE SORTEOS:
  precio base (solo sin start_price), luego drift/high/low/volume por vela.
  Cambiar este orden cambia todas las secuencias grabadas.

ANCLA:
  La primera vela es align(now) - (count - 1) * duration, a propósito: la
  última vela ES el bucket vivo y el primer rollover no deja hueco.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from candlesim.domain.entities.candle import EPSILON, Candle
from candlesim.domain.exceptions.domain_errors import ConfigurationError
from candlesim.domain.services.bucket_alignment import align_bucket_ms
from candlesim.domain.services.random_source import RandomSource

DEFAULT_VOLATILITY = 0.002


def draw_base_price(source: RandomSource, start_price: Optional[float] = None) -> float:
    """Precio base: el provisto, o uniforme en ~[80, 120]."""
    if start_price is not None:
        return float(start_price)
    return 100 + (source.next() - 0.5) * 40


def generate_history(
    source: RandomSource,
    now_ms: int,
    duration_ms: int,
    count: int,
    volatility: float = DEFAULT_VOLATILITY,
    start_price: Optional[float] = None,
) -> Tuple[List[Candle], float]:
    """
    Generar la secuencia histórica.

    Returns:
        (velas ordenadas de la más antigua a la más reciente, último close).
        Con count == 0 la lista es vacía y el último close es el precio base.
    """
    if count < 0:
        raise ConfigurationError("count no puede ser negativo", field="count", value=count)

    base = draw_base_price(source, start_price)
    first_bucket_ms = align_bucket_ms(now_ms, duration_ms) - (count - 1) * duration_ms

    candles: List[Candle] = []
    last_close = base
    for i in range(count):
        bucket_ms = first_bucket_ms + i * duration_ms
        drift = (source.next() - 0.5) * 2 * volatility * 20
        open_ = last_close
        close = max(EPSILON, open_ * (1 + drift))
        spread = abs(close - open_)
        high = max(open_, close) + spread * (0.2 + source.next() * 0.8)
        low = max(EPSILON, min(open_, close) - spread * (0.2 + source.next() * 0.8))
        volume = 10 + source.next() * 90

        candles.append(
            Candle(
                time=bucket_ms // 1000,
                open=open_,
                high=high,
                low=low,
                close=close,
                volume=volume,
            )
        )
        last_close = close

    return candles, last_close


def generate(
    seed: int,
    now_ms: int,
    duration_ms: int,
    count: int,
    start_price: Optional[float] = None,
    volatility: float = DEFAULT_VOLATILITY,
) -> List[Candle]:
    """Historia determinista a partir de un seed (fuente nueva en cada llamada)."""
    candles, _ = generate_history(
        RandomSource(seed), now_ms, duration_ms, count,
        volatility=volatility, start_price=start_price,
    )
    return candles
