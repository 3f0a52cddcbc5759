"""
CandleSim – System Clock
==========================
Implementación de IClock sobre el reloj de pared del sistema.
"""

from __future__ import annotations

import time

from candlesim.application.ports.clock import IClock


class SystemClock(IClock):
    """Reloj de pared real (time.time_ns)."""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000
