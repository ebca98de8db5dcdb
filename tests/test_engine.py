"""Tests for the SignalEngine facade."""

import math
from datetime import datetime, timedelta, timezone

import pytest

from signal_engine import (
    Candle,
    CandleSeries,
    Direction,
    EngineConfig,
    EnsembleConfig,
    EnsemblePolicy,
    RegimeKind,
    SignalEngine,
    StrategyEntry,
    create_strategy,
)
from signal_engine.strategy import BUILTIN_STRATEGIES

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _wave(n: int = 120) -> list[Candle]:
    candles = []
    for i in range(n):
        close = 100.0 + 4 * math.sin(i / 6) + 0.05 * i
        candles.append(
            Candle(
                open_time=T0 + timedelta(minutes=5 * i),
                open=close - 0.2,
                high=close + 0.6,
                low=close - 0.6,
                close=close,
                volume=500.0 + 100.0 * math.cos(i / 2),
            )
        )
    return candles


def _trend(n: int = 60) -> list[Candle]:
    return [
        Candle(
            open_time=T0 + timedelta(minutes=5 * i),
            open=100 + 0.1 * i,
            high=100 + 0.1 * i + 0.05,
            low=100 + 0.1 * i - 0.05,
            close=100 + 0.1 * i,
            volume=100.0,
        )
        for i in range(n)
    ]


class TestStrategyManagement:
    """Tests for strategy lookup and runtime changes."""

    def test_default_strategies(self):
        engine = SignalEngine()

        assert [s.name for s in engine.strategies] == list(BUILTIN_STRATEGIES)
        assert len(engine.active_strategies()) == 15

    def test_unknown_strategy(self):
        with pytest.raises(KeyError, match="Available"):
            SignalEngine().strategy("nope")

    def test_enable_disable(self):
        engine = SignalEngine()
        engine.disable_strategy("rsi")

        assert not engine.strategy("rsi").enabled
        assert "rsi" not in [s.name for s in engine.active_strategies()]

        engine.enable_strategy("rsi")
        assert engine.strategy("rsi").enabled

    def test_update_weight(self):
        engine = SignalEngine()

        assert engine.update_strategy_weight("macd", 1.5)
        assert engine.strategy("macd").weight == 1.5
        assert not engine.update_strategy_weight("macd", 3.0)
        assert engine.strategy("macd").weight == 1.5

    def test_update_parameter(self):
        engine = SignalEngine()

        assert engine.update_strategy_parameter("rsi", "period", 10)
        assert engine.strategy("rsi").params.period == 10
        assert not engine.update_strategy_parameter("rsi", "period", 500)
        assert engine.strategy("rsi").params.period == 10

    def test_engines_are_independent(self):
        first = SignalEngine()
        second = SignalEngine()
        first.disable_strategy("macd")

        assert second.strategy("macd").enabled

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError):
            SignalEngine([create_strategy("rsi"), create_strategy("rsi")])

    def test_custom_strategy_list(self):
        engine = SignalEngine([create_strategy("macd"), create_strategy("rsi")])
        assert [s.name for s in engine.strategies] == ["macd", "rsi"]

    def test_strategies_copy(self):
        engine = SignalEngine()
        engine.strategies.clear()

        assert len(engine.strategies) == 15


class TestEvaluation:
    """Tests for evaluate and per-strategy signals."""

    def test_evaluate_all_strategies(self):
        result = SignalEngine().evaluate(_wave())

        assert result.contributing_strategies == list(BUILTIN_STRATEGIES)
        assert sum(result.vote_breakdown.values()) == 15
        assert 0.55 <= result.confidence <= 0.90
        assert result.regime is not None

    def test_evaluate_candle_series(self):
        candles = _wave()
        series = CandleSeries(symbol="BTCUSDT", timeframe="5m", candles=candles)
        engine = SignalEngine()

        assert engine.evaluate(series) == engine.evaluate(candles)

    def test_short_history(self):
        result = SignalEngine().evaluate(_wave(10))

        assert result.direction == Direction.HOLD
        assert result.confidence == 0.0
        assert result.regime.kind == RegimeKind.RANGING

    def test_disabled_strategies_excluded(self):
        engine = SignalEngine()
        engine.disable_strategy("grid_trading")
        engine.disable_strategy("scalping")

        assert len(engine.strategy_signals(_wave())) == 13
        assert "scalping" not in engine.evaluate(_wave()).contributing_strategies

    def test_strategy_signals_order(self):
        signals = SignalEngine().strategy_signals(_wave())
        assert [s.strategy_name for s in signals] == list(BUILTIN_STRATEGIES)

    def test_regime_and_recommendations(self):
        engine = SignalEngine()
        candles = _trend()

        assert engine.detect_regime(candles).is_trending
        assert engine.recommended_strategies(candles) == ["ema_crossover", "macd", "atr_breakout"]

    def test_regime_attached_to_result(self):
        engine = SignalEngine()
        candles = _trend()

        assert engine.evaluate(candles).regime == engine.detect_regime(candles)


class TestApplyConfig:
    """Tests for applying an EngineConfig."""

    def test_applies_strategy_entries(self):
        config = EngineConfig(
            strategies={
                "rsi": StrategyEntry(weight=1.8, parameters={"period": 21}),
                "grid_trading": StrategyEntry(enabled=False),
            }
        )
        engine = SignalEngine(config=config)

        assert engine.strategy("rsi").weight == 1.8
        assert engine.strategy("rsi").params.period == 21
        assert not engine.strategy("grid_trading").enabled
        assert engine.strategy("macd").enabled

    def test_invalid_values_rejected_per_strategy(self):
        config = EngineConfig(
            strategies={
                "rsi": StrategyEntry(weight=9.0, parameters={"period": 999}),
                "macd": StrategyEntry(weight=0.5),
            }
        )
        engine = SignalEngine()
        engine.apply_config(config)

        assert engine.strategy("rsi").weight == 1.0
        assert engine.strategy("rsi").params.period == 14
        assert engine.strategy("macd").weight == 0.5

    def test_unknown_strategy_raises(self):
        engine = SignalEngine()
        config = EngineConfig(
            strategies={
                "rsi": StrategyEntry(weight=1.5),
                "nope": StrategyEntry(enabled=False),
            }
        )

        with pytest.raises(KeyError):
            engine.apply_config(config)
        assert engine.strategy("rsi").weight == 1.0

    def test_ensemble_settings_applied(self):
        config = EngineConfig(
            ensemble=EnsembleConfig(policy=EnsemblePolicy.WEIGHTED, min_candles=5)
        )
        engine = SignalEngine(config=config)
        result = engine.evaluate(_wave(10))

        assert result.policy == "weighted"
        assert result.contributing_strategies == list(BUILTIN_STRATEGIES)
