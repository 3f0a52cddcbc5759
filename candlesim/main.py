"""
CandleSim – Main Application Entry Point
==========================================
Orquesta todos los componentes: Simulaciones + Event Bus + WebSocket + UDF.

ARQUITECTURA DE ARRANQUE:
  1. Configurar logging
  2. Crear instancias desde el Container (Event Bus, reloj, simulaciones)
  3. FastAPI startup:
     a. Iniciar WebSocketManager (broadcast a frontend)
     b. Iniciar una simulación por cada símbolo de settings.simulation_symbols
  4. FastAPI shutdown:
     a. Detener todo en orden inverso (timers primero)

FLUJO DE DATOS:
  Timer (por símbolo) → CandleSimulator.tick() → CandleUpdate
       → EventBus(ohlcv) → WebSocketManager → Frontend
  GET /udf/history → GetUdfHistoryUseCase → generate() (sin estado)

  uvicorn candlesim.main:app --host 0.0.0.0 --port 8888
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from candlesim.container import Container, init_container
from candlesim.presentation.api.routes import init_routes, router
from candlesim.shared.config.settings import settings
from candlesim.shared.logging.logger import get_logger, setup_logging

# ─── Logging ────────────────────────────────────────────────────────────
setup_logging(settings.log_level.upper())
logger = get_logger("main")


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Construir la app FastAPI sobre un contenedor (inyectable en tests)."""
    container = container or init_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup/shutdown lifecycle de la aplicación.
        Cada simulación corre como su propio asyncio.Task.
        """
        cfg = container.settings
        logger.info("=" * 60)
        logger.info("  CandleSim - Simulador OHLCV determinista")
        logger.info("  Símbolos: %s", ", ".join(cfg.simulation_symbols) or "(ninguno)")
        logger.info("  Vela: %dms  Historia: %d  Tick: %dms  Volatilidad: %.4f",
                    cfg.candle_duration_ms, cfg.history_length,
                    cfg.tick_interval_ms, cfg.volatility)
        logger.info("=" * 60)

        init_routes(
            container.ws_manager,
            container.simulations,
            container.udf_history,
            container.clock,
            cfg,
        )

        await container.ws_manager.start()

        for symbol in cfg.simulation_symbols:
            await container.simulations.start(container.default_config(symbol))

        logger.info("✓ Todos los componentes iniciados correctamente")

        yield  # ← La app está corriendo aquí

        # ── SHUTDOWN ──
        logger.info("Iniciando shutdown...")
        await container.simulations.stop_all()
        await container.ws_manager.stop()
        await container.event_bus.unsubscribe_all()
        logger.info("✓ Shutdown completo")

    app = FastAPI(
        title="CandleSim",
        description="Simulador determinista de velas OHLCV con streaming en tiempo real y UDF",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS para frontend local
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Entry point de consola."""
    uvicorn.run(
        "candlesim.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
