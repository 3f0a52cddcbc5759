"""
CandleSim – Infrastructure Layer
==================================
Implementaciones concretas de los ports de aplicación.

- external/event_bus.py: IEventPublisher sobre asyncio.Queue fan-out
- system_clock.py: IClock sobre el reloj del sistema
"""

from candlesim.infrastructure.external.event_bus import EventBus
from candlesim.infrastructure.system_clock import SystemClock

__all__ = ["EventBus", "SystemClock"]
