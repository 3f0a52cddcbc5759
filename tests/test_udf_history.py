"""
Tests for UDF resolutions and the stateless history use case.
"""

import pytest

from candlesim.application.dto.udf_dto import UdfHistoryDTO
from candlesim.application.use_cases.udf_history_usecase import GetUdfHistoryUseCase
from candlesim.domain.exceptions.domain_errors import UnknownResolutionError
from candlesim.domain.value_objects.resolution import resolution_to_ms

TO_S = 1_700_000_040


class TestResolution:

    @pytest.mark.parametrize(
        "resolution, expected",
        [("1", 60_000), ("5", 300_000), ("60", 3_600_000), ("1D", 86_400_000), ("D", 86_400_000), ("w", 604_800_000)],
    )
    def test_known(self, resolution, expected):
        assert resolution_to_ms(resolution) == expected

    @pytest.mark.parametrize("resolution", ["1M", "7", "", "abc"])
    def test_unknown(self, resolution):
        with pytest.raises(UnknownResolutionError):
            resolution_to_ms(resolution)


class TestGetUdfHistoryUseCase:

    def test_bucket_count(self):
        assert GetUdfHistoryUseCase.bucket_count(TO_S - 600, TO_S, 60_000) == 11
        assert GetUdfHistoryUseCase.bucket_count(TO_S - 599, TO_S, 60_000) == 10
        assert GetUdfHistoryUseCase.bucket_count(TO_S, TO_S, 60_000) == 1
        assert GetUdfHistoryUseCase.bucket_count(TO_S + 1, TO_S + 30, 60_000) == 0

    def test_range_returns_aligned_bars(self):
        result = GetUdfHistoryUseCase().execute("DOT/USDT", "1", TO_S - 600, TO_S)
        data = result.to_dict()

        assert data["s"] == "ok"
        assert len(data["t"]) == 11
        assert data["t"][-1] == TO_S
        assert all(b - a == 60 for a, b in zip(data["t"], data["t"][1:]))
        for o, h, l, c in zip(data["o"], data["h"], data["l"], data["c"]):
            assert l <= min(o, c) and h >= max(o, c)

    def test_countback_wins_over_from(self):
        result = GetUdfHistoryUseCase().execute("DOT/USDT", "5", TO_S - 600, TO_S, countback=50)
        assert len(result.t) == 50

    def test_capped_at_max_bars(self):
        result = GetUdfHistoryUseCase(max_bars=20).execute("DOT/USDT", "1", 0, TO_S)
        assert len(result.t) == 20

    def test_deterministic(self):
        usecase = GetUdfHistoryUseCase()
        a = usecase.execute("DOT/USDT", "15", TO_S - 86_400, TO_S).to_dict()
        b = usecase.execute("DOT/USDT", "15", TO_S - 86_400, TO_S).to_dict()
        assert a == b

    def test_unknown_resolution_is_error_payload(self):
        data = GetUdfHistoryUseCase().execute("DOT/USDT", "1M", TO_S - 600, TO_S).to_dict()
        assert data["s"] == "error"
        assert "1M" in data["errmsg"]

    def test_inverted_range_is_error(self):
        data = GetUdfHistoryUseCase().execute("DOT/USDT", "1", TO_S, TO_S - 600).to_dict()
        assert data["s"] == "error"

    def test_empty_range_is_no_data(self):
        data = GetUdfHistoryUseCase().execute("DOT/USDT", "1", TO_S + 1, TO_S + 30).to_dict()
        assert data == {"s": "no_data"}

    def test_dto_from_empty_candles(self):
        assert UdfHistoryDTO.from_candles([]).to_dict() == {"s": "no_data"}
