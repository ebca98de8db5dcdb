"""Behaviour shared by every built-in strategy."""

import math
from datetime import datetime, timedelta, timezone

import pytest

from signal_engine.models import Candle, SignalPath
from signal_engine.strategy import (
    BUILTIN_STRATEGIES,
    FALLBACK_CONFIDENCE_CAP,
    create_strategy,
)

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _wave(n: int, amplitude: float = 5.0, drift: float = 0.05) -> list[Candle]:
    """Deterministic noisy series with varying volume."""
    candles = []
    for i in range(n):
        close = 100.0 + amplitude * math.sin(i / 4) + 2 * math.sin(i * 1.7) + drift * i
        open_ = close - math.sin(i * 0.9)
        candles.append(
            Candle(
                open_time=T0 + timedelta(minutes=i),
                open=open_,
                high=max(open_, close) + 0.5 + abs(math.cos(i)),
                low=min(open_, close) - 0.5 - abs(math.sin(i)),
                close=close,
                volume=1000.0 + 400.0 * math.sin(i / 3) + (900.0 if i % 17 == 0 else 0.0),
            )
        )
    return candles


def _flat(n: int) -> list[Candle]:
    return [
        Candle(
            open_time=T0 + timedelta(minutes=i),
            open=100.0, high=100.0, low=100.0, close=100.0, volume=0.0,
        )
        for i in range(n)
    ]


INPUTS = {
    "empty": [],
    "single": _wave(1),
    "short": _wave(3),
    "flat": _flat(200),
    "long": _wave(300),
    "volatile": _wave(150, amplitude=30.0),
}


@pytest.mark.parametrize("name", BUILTIN_STRATEGIES)
class TestStrategyContract:
    """Every strategy yields a bounded signal for any input."""

    @pytest.mark.parametrize("label", sorted(INPUTS))
    def test_confidence_bounds(self, name, label):
        candles = INPUTS[label]
        result = create_strategy(name).signal(candles)

        assert 0.0 <= result.confidence <= 1.0
        assert result.strategy_name == name
        if result.is_fallback:
            assert result.confidence <= FALLBACK_CONFIDENCE_CAP
        if candles:
            assert result.timestamp == candles[-1].open_time

    def test_short_history_uses_insufficient_data(self, name):
        strategy = create_strategy(name)
        candles = _wave(strategy.required_candles() - 1)
        result = strategy.signal(candles)

        assert result.path == SignalPath.INSUFFICIENT_DATA
        assert result.reason.startswith("Insufficient data")

    def test_full_history_leaves_insufficient_tier(self, name):
        strategy = create_strategy(name)
        result = strategy.signal(_wave(strategy.required_candles()))

        assert result.path != SignalPath.INSUFFICIENT_DATA

    def test_unknown_parameter_rejected(self, name):
        strategy = create_strategy(name)
        before = strategy.parameters

        assert not strategy.update_parameter("no_such_parameter", 1)
        assert strategy.parameters == before

    def test_weight_range(self, name):
        strategy = create_strategy(name)

        assert strategy.set_weight(2.0)
        assert not strategy.set_weight(2.5)
        assert not strategy.set_weight(-0.1)
        assert strategy.weight == 2.0

    def test_repeatable(self, name):
        """Same input, same output (grid state included)."""
        strategy = create_strategy(name)
        candles = INPUTS["long"]

        assert strategy.signal(candles) == strategy.signal(candles)


# (strategy, parameter, smaller value, larger value)
PERIOD_PARAMETERS = [
    ("rsi", "period", 10, 20),
    ("ema_crossover", "slow_period", 21, 40),
    ("macd", "slow_period", 26, 40),
    ("mean_reversion", "period", 15, 30),
    ("atr_breakout", "atr_period", 10, 20),
    ("bollinger_bands", "period", 10, 40),
    ("ichimoku", "senkou_b_period", 52, 80),
    ("parabolic_sar", "min_candles", 20, 50),
    ("williams_r", "period", 10, 30),
    ("grid_trading", "range_period", 50, 80),
    ("swing_trading", "support_resistance_period", 50, 90),
    ("scalping", "slow_ema_period", 13, 25),
    ("volume_breakout", "volume_period", 10, 40),
    ("adx_trend", "period", 10, 30),
    ("stochastic", "k_period", 10, 30),
]


class TestRequiredCandles:
    """Longer periods never need less history."""

    @pytest.mark.parametrize("name,key,small,large", PERIOD_PARAMETERS)
    def test_monotone_in_period(self, name, key, small, large):
        strategy = create_strategy(name)

        assert strategy.update_parameter(key, small)
        short = strategy.required_candles()
        assert strategy.update_parameter(key, large)
        assert strategy.required_candles() >= short

    def test_covers_every_builtin(self):
        assert {row[0] for row in PERIOD_PARAMETERS} == set(BUILTIN_STRATEGIES)
