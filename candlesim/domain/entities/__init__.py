"""Domain entities."""
from candlesim.domain.entities.candle import Candle, EPSILON

__all__ = ["Candle", "EPSILON"]
