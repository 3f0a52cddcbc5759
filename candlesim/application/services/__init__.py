"""Application services."""
from candlesim.application.services.simulation_manager import SimulationManager

__all__ = ["SimulationManager"]
