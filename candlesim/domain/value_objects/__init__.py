"""Domain value objects."""
from candlesim.domain.value_objects.simulation_config import SimulationConfig, timeframe_label
from candlesim.domain.value_objects.candle_update import CandleTransition, CandleUpdate

__all__ = ["SimulationConfig", "timeframe_label", "CandleTransition", "CandleUpdate"]
