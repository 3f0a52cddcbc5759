"""
CandleSim – Domain Service: Live Bucket Aggregator
====================================================
Cada tick del timer simula UN movimiento de precio y ejecuta exactamente
UNA transición sobre la vela viva.

ALGORITMO:
  1. move = (r - 0.5) * 2 * volatility ; next = max(EPSILON, last * (1 + move))
  2. next_bucket = now_ms >= bucket_start_ms + duration_ms
  3. Secuencia vacía       → vela única OHLC = next, volume = 0
  4. UPDATE-IN-PLACE       → close/high/low/volume de la última vela
  5. ROLL-OVER             → bucket_start += duration (UN bucket), vela nueva

PAUSAS DEL RELOJ:
  Si el reloj saltó varios buckets (pausa), los buckets perdidos NO se
  rellenan: la pausa colapsa en un único rollover en el siguiente tick, y
  los siguientes ticks siguen avanzando de a un bucket.

CÓMO SE EVITA REPAINTING:
  Solo se reemplaza el último slot de la secuencia. Las velas anteriores
  están cerradas y son inmutables.
"""

from __future__ import annotations

from dataclasses import replace

from candlesim.domain.entities.candle import EPSILON, Candle
from candlesim.domain.entities.simulation_state import SimulationState
from candlesim.domain.value_objects.candle_update import CandleTransition, CandleUpdate

# Base de suavizado de volumen si la vela previa no tiene volumen
DEFAULT_ROLLOVER_VOLUME = 50.0


class LiveBucketAggregator:
    """Agregador sin estado propio: opera sobre un SimulationState."""

    def tick(self, state: SimulationState, now_ms: int) -> CandleUpdate:
        """Ejecutar un tick simulado. Operación O(1), sin I/O."""
        config = state.config
        source = state.source

        move = (source.next() - 0.5) * 2 * config.volatility
        next_price = max(EPSILON, state.last_price * (1 + move))
        state.last_price = next_price
        state.total_ticks += 1

        next_bucket = now_ms >= state.bucket_start_ms + config.candle_duration_ms
        last = state.live_candle

        # ── CASO 1: No hay velas → abrir la primera ──
        if last is None:
            bar = Candle(
                time=state.bucket_start_ms // 1000,
                open=next_price,
                high=next_price,
                low=next_price,
                close=next_price,
                volume=0.0,
            )
            state.candles.append(bar)
            return CandleUpdate(
                symbol=config.symbol,
                timeframe=config.timeframe,
                transition=CandleTransition.SEED,
                bar=bar,
            )

        # ── CASO 2: Mismo bucket → actualizar in-place ──
        if not next_bucket:
            bar = replace(
                last,
                close=next_price,
                high=max(last.high, next_price),
                low=min(last.low, next_price),
                volume=(last.volume or 0.0) + (0.2 + source.next() * 0.8),
            )
            state.candles[-1] = bar
            return CandleUpdate(
                symbol=config.symbol,
                timeframe=config.timeframe,
                transition=CandleTransition.UPDATE,
                bar=bar,
            )

        # ── CASO 3: Cruzó el límite → avanzar UN bucket y abrir vela nueva ──
        state.bucket_start_ms += config.candle_duration_ms
        open_ = last.close
        base_volume = last.volume if last.volume is not None else DEFAULT_ROLLOVER_VOLUME
        bar = Candle(
            time=state.bucket_start_ms // 1000,
            open=open_,
            high=max(open_, next_price),
            low=min(open_, next_price),
            close=next_price,
            volume=base_volume * (0.9 + source.next() * 0.2),
        )
        state.candles.append(bar)
        state.total_rollovers += 1

        return CandleUpdate(
            symbol=config.symbol,
            timeframe=config.timeframe,
            transition=CandleTransition.ROLLOVER,
            bar=bar,
            closed_bar=last,
        )
