"""
CandleSim – Run Simulation Use Case
=====================================
Ciclo de vida de UNA simulación: historia inicial + timer periódico de ticks.

CICLO DE VIDA:
  1. start(config)        → cancela timer previo, reset del simulador,
                            programa el timer nuevo, retorna la secuencia
  2. _tick_loop()         → sleep(tick_interval) → tick → publish, en bucle
  3. reconfigure(config)  → reemplazo atómico (igual que start)
  4. stop()               → cancela el timer exactamente una vez

CÓMO SE EVITA UN TICK "VIEJO":
- El timer anterior se cancela y se ESPERA antes de instalar el estado
  nuevo. Ningún tick construido con parámetros viejos puede mutar la
  secuencia nueva.
- start/reconfigure/stop se serializan con un asyncio.Lock.

CONCURRENCIA:
- Un único timer (asyncio.Task) por instancia. Los ticks son secuenciales:
  el siguiente sleep empieza después de publicar el tick anterior.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional

from candlesim.application.ports.clock import IClock
from candlesim.application.ports.event_publisher import IEventPublisher
from candlesim.domain.entities.candle import Candle
from candlesim.domain.services.simulator import CandleSimulator
from candlesim.domain.value_objects.candle_update import CandleUpdate
from candlesim.domain.value_objects.simulation_config import SimulationConfig
from candlesim.shared.logging.logger import get_logger

logger = get_logger("run_simulation")

OHLCV_TOPIC = "ohlcv"
SIMULATION_RESET_TOPIC = "simulation_reset"
SIMULATION_STOPPED_TOPIC = "simulation_stopped"


class RunSimulationUseCase:
    """
    Caso de uso: simular velas en vivo para un símbolo.

    Uso:
        usecase = RunSimulationUseCase(clock, publisher)
        candles = await usecase.start(SimulationConfig(symbol="DOT/USDT"))
        ...
        await usecase.stop()
    """

    def __init__(
        self,
        clock: IClock,
        event_publisher: IEventPublisher,
        simulator: Optional[CandleSimulator] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._clock = clock
        self._event_publisher = event_publisher
        self._simulator = simulator or CandleSimulator()
        self._sleep = sleep
        self._timer_task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

        self._resets: int = 0
        self._last_error: Optional[str] = None

    # ──────────────────────── Lifecycle ──────────────────────────────────

    async def start(self, config: SimulationConfig) -> List[Candle]:
        """Iniciar (o reiniciar) la simulación. Retorna la secuencia actual."""
        async with self._lock:
            await self._cancel_timer()

            candles = self._simulator.reset(config, self._clock.now_ms())
            self._resets += 1
            self._last_error = None
            self._timer_task = asyncio.create_task(
                self._tick_loop(config.tick_interval_ms / 1000),
                name=f"sim-tick-{config.symbol}",
            )

        logger.info(
            "Simulación iniciada: %s tf=%s velas=%d tick=%dms seed=%d",
            config.symbol, config.timeframe, len(candles),
            config.tick_interval_ms, config.seed,
        )
        await self._event_publisher.publish(
            SIMULATION_RESET_TOPIC,
            {"config": config.to_dict(), "candles": len(candles)},
        )
        return candles

    async def reconfigure(self, config: SimulationConfig) -> List[Candle]:
        """
        Reemplazar la simulación completa con parámetros nuevos.
        El estado en vuelo (vela parcial) se descarta sin reconciliar.
        """
        previous = self._simulator.config
        if previous is not None and previous != config:
            logger.info(
                "Reconfigurando %s: %s → %s",
                config.symbol, previous.to_dict(), config.to_dict(),
            )
        return await self.start(config)

    async def stop(self) -> bool:
        """Cancelar el timer. Retorna False si ya estaba detenido (no-op)."""
        async with self._lock:
            cancelled = await self._cancel_timer()

        if cancelled:
            config = self._simulator.config
            symbol = config.symbol if config else None
            logger.info("Simulación detenida: %s", symbol)
            await self._event_publisher.publish(
                SIMULATION_STOPPED_TOPIC, {"symbol": symbol}
            )
        return cancelled

    async def _cancel_timer(self) -> bool:
        task = self._timer_task
        self._timer_task = None
        if task is None:
            return False
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        return True

    # ──────────────────────── Ticking ───────────────────────────────────

    async def tick_once(self) -> CandleUpdate:
        """Un tick simulado: mutar el estado y publicar el resultado."""
        update = self._simulator.tick(self._clock.now_ms())
        if update.rolled_over:
            logger.debug(
                "Rollover %s [%s] t=%d O=%.5f C=%.5f",
                update.symbol, update.timeframe, update.bar.time,
                update.bar.open, update.bar.close,
            )
        await self._event_publisher.publish(OHLCV_TOPIC, update)
        return update

    async def _tick_loop(self, interval_s: float) -> None:
        """Timer periódico. Corre hasta ser cancelado o hasta un error inesperado."""
        try:
            while True:
                await self._sleep(interval_s)
                await self.tick_once()
        except asyncio.CancelledError:
            pass  # Shutdown limpio
        except Exception as exc:
            self._last_error = repr(exc)
            logger.exception("Tick falló – timer detenido")

    # ──────────────────────── Estado ────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    @property
    def config(self) -> Optional[SimulationConfig]:
        return self._simulator.config

    @property
    def candles(self) -> List[Candle]:
        """Secuencia actual (se re-observa tras cada tick)."""
        return self._simulator.candles

    @property
    def stats(self) -> dict:
        return {
            "running": self.is_running,
            "resets": self._resets,
            "last_error": self._last_error,
            **self._simulator.stats,
        }
