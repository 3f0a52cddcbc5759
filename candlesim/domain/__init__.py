"""
CandleSim – Domain Layer
===========================
Núcleo puro del sistema. CERO dependencias externas.

Este módulo contiene:
- entities/: Candle y SimulationState
- value_objects/: Objetos inmutables (SimulationConfig, CandleUpdate, Resolution)
- services/: Servicios de dominio puros (seed, random source, alineación,
  generador de historia, agregador en vivo, simulador)
- exceptions/: Excepciones de dominio

REGLA DE DEPENDENCIA:
Este módulo NO puede importar de:
- infrastructure/
- presentation/
- application/
- Frameworks externos (FastAPI, pydantic, etc.)
"""

from candlesim.domain.entities.candle import Candle, EPSILON
from candlesim.domain.value_objects.simulation_config import SimulationConfig
from candlesim.domain.value_objects.candle_update import CandleTransition, CandleUpdate

__all__ = [
    "Candle",
    "EPSILON",
    "SimulationConfig",
    "CandleTransition",
    "CandleUpdate",
]
