"""Application ports - Interfaces hacia infraestructura."""
from candlesim.application.ports.clock import IClock
from candlesim.application.ports.event_publisher import IEventPublisher

__all__ = ["IClock", "IEventPublisher"]
