"""
CandleSim – Application Layer
================================
Capa de casos de uso y orquestación.

Este módulo contiene:
- use_cases/: Casos de uso (simulación en vivo, historia UDF)
- ports/: Interfaces hacia infraestructura (reloj, publicador de eventos)
- dto/: Data Transfer Objects
- services/: Application services de orquestación (gestor por símbolo)

REGLA DE DEPENDENCIA:
Esta capa puede importar de:
- domain/ (entidades, servicios, value objects)
- ports/ propios (interfaces hacia infra)

NO puede importar de:
- infrastructure/ (implementaciones concretas)
- presentation/ (API)
"""

from candlesim.application.use_cases.run_simulation_usecase import RunSimulationUseCase
from candlesim.application.use_cases.udf_history_usecase import GetUdfHistoryUseCase
from candlesim.application.services.simulation_manager import SimulationManager

__all__ = [
    "RunSimulationUseCase",
    "GetUdfHistoryUseCase",
    "SimulationManager",
]
