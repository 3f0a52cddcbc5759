"""Domain exceptions."""
from candlesim.domain.exceptions.domain_errors import (
    DomainError,
    ConfigurationError,
    SimulationNotStartedError,
    UnknownResolutionError,
)

__all__ = [
    "DomainError",
    "ConfigurationError",
    "SimulationNotStartedError",
    "UnknownResolutionError",
]
