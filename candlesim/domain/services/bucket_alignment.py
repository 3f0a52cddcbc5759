"""
CandleSim – Domain Service: Bucket Alignment
==============================================
Calcula el inicio canónico del bucket que contiene "now".

    bucket_start_ms = now_ms - (now_ms mod duration_ms)

Debe recalcularse cada vez que cambia la duración: un bucket alineado con
la duración anterior puede no serlo con la nueva.
"""

from __future__ import annotations

from candlesim.domain.exceptions.domain_errors import ConfigurationError


def align_bucket_ms(now_ms: int, duration_ms: int) -> int:
    """Inicio del bucket en milisegundos."""
    if duration_ms <= 0:
        raise ConfigurationError(
            "duration_ms debe ser positivo", field="duration_ms", value=duration_ms
        )
    now_ms = int(now_ms)
    return now_ms - (now_ms % duration_ms)


def align_bucket(now_ms: int, duration_ms: int) -> int:
    """Inicio del bucket en SEGUNDOS (formato UDF)."""
    return align_bucket_ms(now_ms, duration_ms) // 1000
