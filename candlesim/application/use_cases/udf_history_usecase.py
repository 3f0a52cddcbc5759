"""
CandleSim – UDF History Use Case
==================================
Barras históricas deterministas para /udf/history, sin estado.

Las barras se generan desde el seed del símbolo con "now" = `to`, así que
la misma consulta siempre retorna exactamente las mismas barras.
Si llega `countback`, tiene prioridad sobre `from` (semántica TradingView).
"""

from __future__ import annotations

from typing import Optional

from candlesim.application.dto.udf_dto import UdfHistoryDTO
from candlesim.domain.exceptions.domain_errors import UnknownResolutionError
from candlesim.domain.services.bucket_alignment import align_bucket_ms
from candlesim.domain.services.history_generator import DEFAULT_VOLATILITY, generate
from candlesim.domain.services.seed import seed_for_symbol
from candlesim.domain.value_objects.resolution import resolution_to_ms
from candlesim.shared.logging.logger import get_logger

logger = get_logger("udf_history")


class GetUdfHistoryUseCase:
    """Caso de uso: barras UDF para un rango [from, to] en segundos."""

    def __init__(
        self,
        max_bars: int = 5_000,
        volatility: float = DEFAULT_VOLATILITY,
        start_price: Optional[float] = None,
    ) -> None:
        self._max_bars = max_bars
        self._volatility = volatility
        self._start_price = start_price

    @staticmethod
    def bucket_count(from_s: int, to_s: int, duration_ms: int) -> int:
        """Cantidad de buckets cuyo inicio cae en [from_s, to_s]."""
        last_ms = align_bucket_ms(to_s * 1000, duration_ms)
        first_ms = align_bucket_ms(from_s * 1000, duration_ms)
        if first_ms < from_s * 1000:
            first_ms += duration_ms
        if last_ms < first_ms:
            return 0
        return (last_ms - first_ms) // duration_ms + 1

    def execute(
        self,
        symbol: str,
        resolution: str,
        from_s: int,
        to_s: int,
        countback: Optional[int] = None,
    ) -> UdfHistoryDTO:
        try:
            duration_ms = resolution_to_ms(resolution)
        except UnknownResolutionError as exc:
            logger.warning("UDF history: %s", exc.message)
            return UdfHistoryDTO.error(exc.message)

        if to_s < from_s:
            return UdfHistoryDTO.error("'to' debe ser mayor o igual que 'from'")

        if countback is not None and countback > 0:
            count = countback
        else:
            count = self.bucket_count(from_s, to_s, duration_ms)
        count = min(count, self._max_bars)

        if count <= 0:
            return UdfHistoryDTO(status="no_data")

        candles = generate(
            seed_for_symbol(symbol),
            to_s * 1000,
            duration_ms,
            count,
            start_price=self._start_price,
            volatility=self._volatility,
        )
        return UdfHistoryDTO.from_candles(candles)
