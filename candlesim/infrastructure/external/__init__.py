"""External adapters."""
from candlesim.infrastructure.external.event_bus import EventBus

__all__ = ["EventBus"]
