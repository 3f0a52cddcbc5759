"""
Tests for the live bucket aggregator and the simulator facade.
"""

import pytest

from candlesim.domain.entities.candle import EPSILON, Candle
from candlesim.domain.entities.simulation_state import SimulationState
from candlesim.domain.exceptions.domain_errors import SimulationNotStartedError
from candlesim.domain.services.candle_aggregator import LiveBucketAggregator
from candlesim.domain.services.random_source import RandomSource
from candlesim.domain.services.simulator import CandleSimulator
from candlesim.domain.value_objects.candle_update import CandleTransition
from candlesim.domain.value_objects.simulation_config import SimulationConfig

from tests.conftest import FIXED_NOW_MS, assert_candle_invariants


def make_state(candles=None, duration_ms=5_000, last_price=100.0, bucket_start_ms=FIXED_NOW_MS):
    config = SimulationConfig(symbol="TEST", candle_duration_ms=duration_ms, history_length=1)
    return SimulationState(
        config=config,
        source=RandomSource(config.seed),
        last_price=last_price,
        bucket_start_ms=bucket_start_ms,
        candles=list(candles or []),
    )


class TestLiveBucketAggregator:

    def test_empty_sequence_seeds_single_candle(self):
        state = make_state()
        update = LiveBucketAggregator().tick(state, FIXED_NOW_MS + 1_000)

        assert update.transition is CandleTransition.SEED
        assert len(state.candles) == 1
        bar = state.candles[0]
        assert bar.open == bar.high == bar.low == bar.close == state.last_price
        assert bar.volume == 0
        assert bar.time == FIXED_NOW_MS // 1000

    def test_update_in_place_touches_only_last_candle(self):
        first = Candle(time=FIXED_NOW_MS // 1000 - 5, open=100, high=101, low=99, close=100, volume=10)
        live = Candle(time=FIXED_NOW_MS // 1000, open=100, high=100.1, low=99.9, close=100, volume=5)
        state = make_state([first, live])

        update = LiveBucketAggregator().tick(state, FIXED_NOW_MS + 1_000)

        assert update.transition is CandleTransition.UPDATE
        assert state.candles[0] is first
        bar = state.candles[-1]
        assert bar.time == live.time
        assert bar.open == live.open
        assert bar.close == state.last_price
        assert bar.high == max(live.high, state.last_price)
        assert bar.low == min(live.low, state.last_price)
        assert 5.2 <= bar.volume < 6.0
        assert state.bucket_start_ms == FIXED_NOW_MS

    def test_update_with_absent_volume_counts_from_zero(self):
        live = Candle(time=FIXED_NOW_MS // 1000, open=100, high=100, low=100, close=100)
        state = make_state([live])
        LiveBucketAggregator().tick(state, FIXED_NOW_MS + 1)
        assert 0.2 <= state.candles[-1].volume < 1.0

    def test_rollover_opens_new_candle(self):
        live = Candle(time=FIXED_NOW_MS // 1000, open=100, high=101, low=99, close=100.5, volume=20)
        state = make_state([live])

        update = LiveBucketAggregator().tick(state, FIXED_NOW_MS + 5_000)

        assert update.transition is CandleTransition.ROLLOVER
        assert update.closed_bar == live
        assert len(state.candles) == 2
        bar = state.candles[-1]
        assert bar.time == live.time + 5
        assert bar.open == live.close
        assert bar.close == state.last_price
        assert bar.high == max(bar.open, bar.close)
        assert bar.low == min(bar.open, bar.close)
        assert 18.0 <= bar.volume < 22.0
        assert state.total_rollovers == 1

    def test_rollover_without_volume_uses_default_basis(self):
        live = Candle(time=FIXED_NOW_MS // 1000, open=100, high=100, low=100, close=100)
        state = make_state([live])
        LiveBucketAggregator().tick(state, FIXED_NOW_MS + 5_000)
        assert 45.0 <= state.candles[-1].volume < 55.0

    def test_long_pause_advances_exactly_one_bucket(self):
        live = Candle(time=FIXED_NOW_MS // 1000, open=100, high=100, low=100, close=100, volume=1)
        state = make_state([live])
        aggregator = LiveBucketAggregator()

        late = FIXED_NOW_MS + 10 * 5_000 + 1_234
        aggregator.tick(state, late)
        assert state.bucket_start_ms == FIXED_NOW_MS + 5_000
        assert state.candles[-1].time == live.time + 5

        # El siguiente tick sigue atrasado → otro rollover de UN bucket
        aggregator.tick(state, late + 1_000)
        assert state.bucket_start_ms == FIXED_NOW_MS + 10_000
        assert_candle_invariants(state.candles, 5)

    def test_price_floor(self):
        live = Candle(time=FIXED_NOW_MS // 1000, open=EPSILON, high=EPSILON, low=EPSILON, close=EPSILON, volume=1)
        config = SimulationConfig(symbol="TEST", candle_duration_ms=5_000, history_length=1, volatility=5.0)
        state = SimulationState(
            config=config, source=RandomSource(config.seed), last_price=EPSILON,
            bucket_start_ms=FIXED_NOW_MS, candles=[live],
        )
        aggregator = LiveBucketAggregator()
        for i in range(200):
            aggregator.tick(state, FIXED_NOW_MS + i * 1_000)
            assert state.last_price >= EPSILON
            assert state.candles[-1].is_consistent()


class TestCandleSimulator:

    def test_tick_before_reset_fails(self):
        with pytest.raises(SimulationNotStartedError):
            CandleSimulator().tick(FIXED_NOW_MS)

    def test_reset_builds_history_and_aligns_bucket(self):
        simulator = CandleSimulator()
        config = SimulationConfig(symbol="DOT/USDT", history_length=3, start_price=100)
        candles = simulator.reset(config, FIXED_NOW_MS + 7_000)

        assert len(candles) == 3
        assert candles[0].open == 100
        assert simulator.state.bucket_start_ms == FIXED_NOW_MS
        assert candles[-1].time == FIXED_NOW_MS // 1000
        assert simulator.state.last_price == candles[-1].close

    def test_five_ticks_one_rollover(self):
        """5 ticks de 1s con velas de 5s desde un límite: 4 updates y 1 rollover."""
        simulator = CandleSimulator()
        config = SimulationConfig(
            symbol="DOT/USDT", candle_duration_ms=5_000, history_length=3,
            tick_interval_ms=1_000, start_price=100,
        )
        simulator.reset(config, FIXED_NOW_MS)

        transitions = [
            simulator.tick(FIXED_NOW_MS + k * 1_000).transition for k in range(1, 6)
        ]

        assert transitions == [CandleTransition.UPDATE] * 4 + [CandleTransition.ROLLOVER]
        candles = simulator.candles
        assert len(candles) == 4
        assert_candle_invariants(candles, 5)
        assert candles[-1].time == FIXED_NOW_MS // 1000 + 5

    def test_five_ticks_golden_values(self):
        simulator = CandleSimulator()
        config = SimulationConfig(
            symbol="DOT/USDT", candle_duration_ms=5_000, history_length=3, start_price=100,
        )
        simulator.reset(config, FIXED_NOW_MS)
        for k in range(1, 6):
            simulator.tick(FIXED_NOW_MS + k * 1_000)

        live, closed = simulator.candles[-1], simulator.candles[-2]
        assert closed.close == pytest.approx(93.17147682898245, rel=1e-12)
        assert closed.volume == pytest.approx(36.074151202477516, rel=1e-12)
        assert live.open == closed.close
        assert live.close == pytest.approx(93.35086699295647, rel=1e-12)
        assert live.volume == pytest.approx(34.124623833202385, rel=1e-12)

    def test_reset_replaces_state_entirely(self):
        simulator = CandleSimulator()
        config = SimulationConfig(symbol="DOT/USDT", history_length=5, start_price=100)
        first = simulator.reset(config, FIXED_NOW_MS)
        for k in range(1, 4):
            simulator.tick(FIXED_NOW_MS + k * 1_000)

        again = simulator.reset(config, FIXED_NOW_MS)
        assert again == first
        assert simulator.state.total_ticks == 0

        changed = simulator.reset(config.with_changes(candle_duration_ms=300_000), FIXED_NOW_MS)
        assert_candle_invariants(changed, 300)
        assert simulator.state.bucket_start_ms == FIXED_NOW_MS - FIXED_NOW_MS % 300_000

    def test_candles_returns_copy(self):
        simulator = CandleSimulator()
        simulator.reset(SimulationConfig(symbol="X", history_length=2), FIXED_NOW_MS)
        snapshot = simulator.candles
        snapshot.clear()
        assert len(simulator.candles) == 2
