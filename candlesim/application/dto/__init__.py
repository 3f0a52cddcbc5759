"""Data Transfer Objects."""
from candlesim.application.dto.udf_dto import UdfHistoryDTO

__all__ = ["UdfHistoryDTO"]
