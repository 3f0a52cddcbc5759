"""
CandleSim – Domain Value Object: Resolution
=============================================
Resoluciones UDF (TradingView) → duración de vela en milisegundos.

Solo se aceptan resoluciones de duración FIJA: "1M" (mes) no tiene
longitud constante y rompería el espaciado uniforme de los buckets.
"""

from __future__ import annotations

from typing import Dict, List

from candlesim.domain.exceptions.domain_errors import UnknownResolutionError

RESOLUTION_MS: Dict[str, int] = {
    "1": 60_000,
    "5": 300_000,
    "15": 900_000,
    "30": 1_800_000,
    "60": 3_600_000,
    "240": 14_400_000,
    "1D": 86_400_000,
    "1W": 604_800_000,
}

# Alias aceptados por TradingView
_ALIASES: Dict[str, str] = {
    "D": "1D",
    "W": "1W",
}

SUPPORTED_RESOLUTIONS: List[str] = list(RESOLUTION_MS)


def resolution_to_ms(resolution: str) -> int:
    """'5' → 300000. Lanza UnknownResolutionError si no está soportada."""
    key = resolution.strip().upper()
    key = _ALIASES.get(key, key)
    try:
        return RESOLUTION_MS[key]
    except KeyError:
        raise UnknownResolutionError(resolution) from None
