"""
CandleSim – Simulation Manager
================================
Registro de simulaciones activas: UNA instancia de RunSimulationUseCase
por símbolo. Las instancias no comparten estado, ni siquiera el random
source: cada una re-siembra desde el seed de su símbolo.

Acceso: manager.get(symbol) → RunSimulationUseCase | None
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from candlesim.application.use_cases.run_simulation_usecase import RunSimulationUseCase
from candlesim.domain.entities.candle import Candle
from candlesim.domain.value_objects.simulation_config import SimulationConfig
from candlesim.shared.logging.logger import get_logger

logger = get_logger("simulation_manager")


class SimulationManager:
    """Gestor centralizado de simulaciones por símbolo."""

    def __init__(self, factory: Callable[[], RunSimulationUseCase]) -> None:
        self._factory = factory
        self._simulations: Dict[str, RunSimulationUseCase] = {}

    async def start(self, config: SimulationConfig) -> List[Candle]:
        """Iniciar la simulación de un símbolo, o reconfigurarla si ya existe."""
        usecase = self._simulations.get(config.symbol)
        if usecase is None:
            usecase = self._factory()
            self._simulations[config.symbol] = usecase
            logger.info("Simulación creada para símbolo '%s'", config.symbol)
            return await usecase.start(config)
        return await usecase.reconfigure(config)

    async def stop(self, symbol: str) -> bool:
        """Detener y olvidar la simulación de un símbolo. Idempotente."""
        usecase = self._simulations.pop(symbol, None)
        if usecase is None:
            return False
        return await usecase.stop()

    async def stop_all(self) -> None:
        """Cleanup al shutdown."""
        for symbol in list(self._simulations):
            await self.stop(symbol)
        logger.info("Todas las simulaciones detenidas")

    def get(self, symbol: str) -> Optional[RunSimulationUseCase]:
        return self._simulations.get(symbol)

    def symbols(self) -> List[str]:
        return list(self._simulations.keys())

    def snapshot(self) -> dict:
        """Snapshot completo para diagnóstico / API."""
        return {symbol: usecase.stats for symbol, usecase in self._simulations.items()}
