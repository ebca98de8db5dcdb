"""Tests for the ensemble aggregator."""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from signal_engine.ensemble import (
    EnsembleAggregator,
    EnsembleConfig,
    EnsemblePolicy,
    strict_winner,
)
from signal_engine.models import Candle, Direction, SignalPath, StrategySignal
from signal_engine.models.signal import signal_time

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _candles(n: int = 60) -> list[Candle]:
    return [
        Candle(
            open_time=T0 + timedelta(minutes=i),
            open=100.0, high=101.0, low=99.0, close=100.0, volume=10.0,
        )
        for i in range(n)
    ]


class _Fixed:
    """Strategy stub that always returns the same signal."""

    description = "fixed test signal"

    def __init__(
        self,
        name: str,
        direction: Direction,
        confidence: float,
        weight: float = 1.0,
        enabled: bool = True,
        path: SignalPath = SignalPath.PRIMARY,
    ):
        self.name = name
        self.direction = direction
        self.confidence = confidence
        self.weight = weight
        self.enabled = enabled
        self.path = path
        self.calls = 0

    def required_candles(self) -> int:
        return 1

    def signal(self, candles):
        self.calls += 1
        return StrategySignal(
            direction=self.direction,
            confidence=self.confidence,
            reason="fixed",
            strategy_name=self.name,
            timestamp=signal_time(candles),
            path=self.path,
        )


def _weighted(**kwargs) -> EnsembleAggregator:
    return EnsembleAggregator(EnsembleConfig(policy=EnsemblePolicy.WEIGHTED, **kwargs))


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestStrictWinner:
    """Tests for the strict arg-max."""

    def test_strict_lead(self):
        assert strict_winner({Direction.BUY: 2, Direction.SELL: 1, Direction.HOLD: 0}) == Direction.BUY
        assert strict_winner({Direction.BUY: 0, Direction.SELL: 3, Direction.HOLD: 1}) == Direction.SELL

    def test_ties_hold(self):
        assert strict_winner({Direction.BUY: 2, Direction.SELL: 2, Direction.HOLD: 0}) == Direction.HOLD
        assert strict_winner({Direction.BUY: 2, Direction.SELL: 0, Direction.HOLD: 2}) == Direction.HOLD


class TestEligibility:
    """Tests for which strategies take part."""

    def test_all_disabled(self):
        strategies = [_Fixed("a", Direction.BUY, 0.9, enabled=False)]
        result = EnsembleAggregator().aggregate(strategies, _candles())

        assert result.direction == Direction.HOLD
        assert result.confidence == 0.0
        assert result.contributing_strategies == []
        assert "No active strategies" in result.reason
        assert strategies[0].calls == 0

    def test_no_strategies(self):
        result = EnsembleAggregator().aggregate([], _candles())

        assert result.direction == Direction.HOLD
        assert result.confidence == 0.0

    def test_too_few_candles(self):
        strategy = _Fixed("a", Direction.BUY, 0.9)
        result = EnsembleAggregator().aggregate([strategy], _candles(10))

        assert result.direction == Direction.HOLD
        assert result.confidence == 0.0
        assert "Insufficient candles" in result.reason
        assert strategy.calls == 0

    def test_min_candles_configurable(self):
        aggregator = EnsembleAggregator(EnsembleConfig(min_candles=5))
        result = aggregator.aggregate([_Fixed("a", Direction.BUY, 0.9)], _candles(10))

        assert result.direction == Direction.BUY

    def test_disabled_strategies_skipped(self):
        strategies = [
            _Fixed("a", Direction.BUY, 0.8),
            _Fixed("b", Direction.SELL, 0.8, enabled=False),
        ]
        result = EnsembleAggregator().aggregate(strategies, _candles())

        assert result.contributing_strategies == ["a"]
        assert result.direction == Direction.BUY

    def test_fallback_signals_participate(self):
        strategies = [
            _Fixed("a", Direction.SELL, 0.3, path=SignalPath.INSUFFICIENT_DATA),
            _Fixed("b", Direction.SELL, 0.35, path=SignalPath.COMPUTATION_FAILURE),
        ]
        result = EnsembleAggregator().aggregate(strategies, _candles())

        assert result.direction == Direction.SELL
        assert result.vote_breakdown["SELL"] == 2


class TestVotePolicy:
    """Tests for the default vote policy."""

    def test_majority(self):
        strategies = [
            _Fixed("a", Direction.BUY, 0.8),
            _Fixed("b", Direction.BUY, 0.8),
            _Fixed("c", Direction.BUY, 0.8),
            _Fixed("d", Direction.SELL, 0.6),
        ]
        result = EnsembleAggregator().aggregate(strategies, _candles())

        # purity 0.75, mean confidence 0.75
        assert result.direction == Direction.BUY
        assert result.confidence == pytest.approx(0.75)
        assert result.vote_breakdown == {"BUY": 3, "SELL": 1, "HOLD": 0}
        assert result.contributing_strategies == ["a", "b", "c", "d"]
        assert result.policy == "vote"
        assert "purity=0.75" in result.reason

    def test_tie_resolves_to_hold(self):
        strategies = [_Fixed("a", Direction.BUY, 0.9), _Fixed("b", Direction.SELL, 0.9)]
        result = EnsembleAggregator().aggregate(strategies, _candles())

        assert result.direction == Direction.HOLD
        assert result.confidence == pytest.approx(0.55)

    def test_confidence_band_upper(self):
        strategies = [_Fixed("a", Direction.BUY, 1.0, weight=2.0)]
        result = EnsembleAggregator().aggregate(strategies, _candles())

        assert result.confidence == pytest.approx(0.90)

    def test_custom_band(self):
        aggregator = EnsembleAggregator(EnsembleConfig(confidence_min=0.1, confidence_max=0.99))
        result = aggregator.aggregate([_Fixed("a", Direction.SELL, 0.5)], _candles())

        # 1.0 * 0.6 + 0.5 * 0.4
        assert result.confidence == pytest.approx(0.8)

    def test_weight_scales_confidence(self):
        aggregator = EnsembleAggregator(EnsembleConfig(confidence_min=0.1, confidence_max=0.99))
        light = aggregator.aggregate(
            [_Fixed("a", Direction.BUY, 0.5, weight=0.5), _Fixed("b", Direction.HOLD, 0.5)],
            _candles(),
        )
        heavy = aggregator.aggregate(
            [_Fixed("a", Direction.BUY, 0.5, weight=1.5), _Fixed("b", Direction.HOLD, 0.5)],
            _candles(),
        )

        assert light.direction == heavy.direction == Direction.HOLD
        assert heavy.confidence > light.confidence

    def test_idempotent(self):
        strategies = [_Fixed("a", Direction.BUY, 0.7), _Fixed("b", Direction.HOLD, 0.4)]
        aggregator = EnsembleAggregator()
        candles = _candles()

        assert aggregator.aggregate(strategies, candles) == aggregator.aggregate(strategies, candles)

    def test_timestamp_and_signals(self):
        candles = _candles()
        result = EnsembleAggregator().aggregate([_Fixed("a", Direction.BUY, 0.7)], candles)

        assert result.timestamp == candles[-1].open_time
        assert [s.strategy_name for s in result.signals] == ["a"]

    def test_decision_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="signal_engine.ensemble")
        strategies = [_Fixed("a", Direction.BUY, 0.8), _Fixed("b", Direction.SELL, 0.6)]
        EnsembleAggregator().aggregate(strategies, _candles())

        assert "votes: BUY=1 SELL=1 HOLD=0" in caplog.text
        assert "FINAL=HOLD" in caplog.text


class TestWeightedPolicy:
    """Tests for the weighted policy."""

    def _signals(self):
        return [
            _Fixed("a", Direction.BUY, 0.8),
            _Fixed("b", Direction.SELL, 0.4),
            _Fixed("c", Direction.HOLD, 0.2),
        ]

    def test_normalised_score(self):
        result = _weighted().aggregate(self._signals(), _candles())

        assert result.direction == Direction.BUY
        assert result.confidence == pytest.approx(0.8 / 3)
        assert result.policy == "weighted"

    def test_single_signal_keeps_its_confidence(self):
        """Normalising by total weight does not inflate a lone signal."""
        result = _weighted().aggregate([_Fixed("a", Direction.BUY, 0.3)], _candles())

        assert result.direction == Direction.BUY
        assert result.confidence == pytest.approx(0.3)

    def test_weight_scales_score(self):
        strategies = [
            _Fixed("a", Direction.BUY, 0.6, weight=2.0),
            _Fixed("b", Direction.HOLD, 0.3, weight=1.0),
        ]
        result = _weighted().aggregate(strategies, _candles())

        # (0.6 * 2) / 3 for BUY against 0.3 / 3 for HOLD
        assert result.direction == Direction.BUY
        assert result.confidence == pytest.approx(0.4)

    def test_order_independent(self):
        forward = _weighted().aggregate(self._signals(), _candles())
        backward = _weighted().aggregate(list(reversed(self._signals())), _candles())

        assert forward.direction == backward.direction
        assert forward.confidence == backward.confidence
        assert forward.vote_breakdown == backward.vote_breakdown

    def test_weights_change_winner(self):
        strategies = [
            _Fixed("a", Direction.BUY, 0.6, weight=0.5),
            _Fixed("b", Direction.SELL, 0.5, weight=1.0),
        ]
        result = _weighted().aggregate(strategies, _candles())

        assert result.direction == Direction.SELL
        assert result.confidence == pytest.approx(0.5 / 1.5)

    def test_tie_holds(self):
        strategies = [_Fixed("a", Direction.BUY, 0.5), _Fixed("b", Direction.SELL, 0.5)]
        result = _weighted().aggregate(strategies, _candles())

        assert result.direction == Direction.HOLD
        assert result.confidence == 0.0

    def test_zero_total(self):
        strategies = [_Fixed("a", Direction.BUY, 0.9, weight=0.0)]
        result = _weighted().aggregate(strategies, _candles())

        assert result.direction == Direction.HOLD
        assert result.confidence == 0.0

    def test_not_clamped_by_default(self):
        strategies = [
            _Fixed("a", Direction.BUY, 0.4),
            _Fixed("b", Direction.SELL, 0.3),
            _Fixed("c", Direction.HOLD, 0.3),
        ]

        assert _weighted().aggregate(strategies, _candles()).confidence == pytest.approx(0.4 / 3)
        clamped = _weighted(clamp_weighted_confidence=True).aggregate(strategies, _candles())
        assert clamped.confidence == pytest.approx(0.55)


class TestCombine:
    """Tests for combining precomputed signals."""

    def test_length_mismatch(self):
        signal = _Fixed("a", Direction.BUY, 0.5).signal(_candles())
        with pytest.raises(ValueError):
            EnsembleAggregator().combine([signal], [1.0, 1.0], T0)

    def test_empty(self):
        result = EnsembleAggregator().combine([], [], T0)
        assert result.direction == Direction.HOLD
        assert result.confidence == 0.0


class TestEnsembleConfig:
    """Tests for EnsembleConfig validation."""

    def test_defaults(self):
        config = EnsembleConfig()

        assert config.policy == EnsemblePolicy.VOTE
        assert config.min_candles == 50
        assert config.confidence_min == 0.55
        assert config.confidence_max == 0.90

    def test_band_must_be_ordered(self):
        with pytest.raises(ValidationError):
            EnsembleConfig(confidence_min=0.9, confidence_max=0.5)

    def test_band_within_unit_interval(self):
        with pytest.raises(ValidationError):
            EnsembleConfig(confidence_max=1.5)

    def test_policy_from_string(self):
        assert EnsembleConfig(policy="weighted").policy == EnsemblePolicy.WEIGHTED
