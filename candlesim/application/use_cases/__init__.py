"""Application use cases."""
from candlesim.application.use_cases.run_simulation_usecase import (
    RunSimulationUseCase,
    OHLCV_TOPIC,
    SIMULATION_RESET_TOPIC,
    SIMULATION_STOPPED_TOPIC,
)
from candlesim.application.use_cases.udf_history_usecase import GetUdfHistoryUseCase

__all__ = [
    "RunSimulationUseCase",
    "GetUdfHistoryUseCase",
    "OHLCV_TOPIC",
    "SIMULATION_RESET_TOPIC",
    "SIMULATION_STOPPED_TOPIC",
]
