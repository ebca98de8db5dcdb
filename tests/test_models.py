"""Tests for candle, signal and regime models."""

import math
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from signal_engine.models import (
    Candle,
    CandleSeries,
    Direction,
    EnsembleSignal,
    MarketRegime,
    RegimeKind,
    SignalPath,
    StrategySignal,
    TrendDirection,
    clamp_confidence,
    signal_time,
    to_arrays,
)

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _make_candle(i: int = 0, close: float = 100.0, open_: float | None = None) -> Candle:
    """Create a test candle at minute ``i``."""
    open_ = close - 1 if open_ is None else open_
    return Candle(
        open_time=T0 + timedelta(minutes=i),
        open=open_,
        high=max(open_, close) + 1,
        low=min(open_, close) - 1,
        close=close,
        volume=10.0,
    )


class TestCandle:
    """Tests for Candle model."""

    def test_candle_helpers(self):
        candle = _make_candle(close=105.0, open_=100.0)

        assert candle.is_bullish
        assert not candle.is_bearish
        assert candle.body_size == 5.0
        assert candle.range_size == 7.0

    def test_bearish_candle(self):
        candle = _make_candle(close=95.0, open_=100.0)

        assert candle.is_bearish
        assert candle.body_size == 5.0

    def test_inconsistent_ohlc_accepted(self):
        """Bad feed data is passed through; strategies deal with it."""
        candle = Candle(
            open_time=T0, open=100.0, high=99.0, low=101.0, close=100.0, volume=1.0
        )

        assert candle.range_size == -2.0

    def test_candle_is_immutable(self):
        candle = _make_candle()
        with pytest.raises(ValidationError):
            candle.close = 1.0

    def test_to_arrays(self):
        candles = [_make_candle(i, close=100.0 + i) for i in range(3)]
        data = to_arrays(candles)

        assert data.close.tolist() == [100.0, 101.0, 102.0]
        assert data.volume.tolist() == [10.0, 10.0, 10.0]

    def test_to_arrays_empty(self):
        assert len(to_arrays([]).close) == 0


class TestCandleSeries:
    """Tests for CandleSeries ordering and merging."""

    def test_rejects_unordered_candles(self):
        with pytest.raises(ValueError):
            CandleSeries(candles=[_make_candle(2), _make_candle(1)])

    def test_rejects_duplicate_timestamps(self):
        with pytest.raises(ValueError):
            CandleSeries(candles=[_make_candle(1), _make_candle(1)])

    def test_add_appends_newer(self):
        series = CandleSeries(symbol="BTCUSDT", timeframe="1m")
        series.add(_make_candle(0))
        series.add(_make_candle(1))

        assert len(series) == 2

    def test_add_replaces_same_timestamp(self):
        series = CandleSeries(candles=[_make_candle(0), _make_candle(1, close=100.0)])
        series.add(_make_candle(1, close=110.0))

        assert len(series) == 2
        assert series.get_closes() == [100.0, 110.0]

    def test_add_ignores_older(self):
        series = CandleSeries(candles=[_make_candle(5)])
        series.add(_make_candle(3))

        assert len(series) == 1
        assert series.candles[0].open_time == T0 + timedelta(minutes=5)

    def test_max_size_trims_oldest(self):
        series = CandleSeries(max_size=3)
        for i in range(5):
            series.add(_make_candle(i, close=100.0 + i))

        assert series.get_closes() == [102.0, 103.0, 104.0]

    def test_max_size_applied_on_construction(self):
        series = CandleSeries(candles=[_make_candle(i) for i in range(5)], max_size=2)
        assert len(series) == 2

    def test_accessors(self):
        series = CandleSeries(candles=[_make_candle(0, close=100.0)])

        assert series.get_highs() == [101.0]
        assert series.get_lows() == [98.0]
        assert series.get_volumes() == [10.0]


class TestStrategySignal:
    """Tests for StrategySignal and confidence clamping."""

    def _signal(self, confidence, path=SignalPath.PRIMARY):
        return StrategySignal(
            direction=Direction.BUY,
            confidence=confidence,
            reason="test",
            strategy_name="rsi",
            timestamp=T0,
            path=path,
        )

    def test_confidence_clamped(self):
        assert self._signal(1.7).confidence == 1.0
        assert self._signal(-0.3).confidence == 0.0

    def test_nan_confidence(self):
        assert self._signal(math.nan).confidence == 0.0

    def test_is_fallback(self):
        assert not self._signal(0.5).is_fallback
        assert self._signal(0.3, SignalPath.INSUFFICIENT_DATA).is_fallback
        assert self._signal(0.3, SignalPath.COMPUTATION_FAILURE).is_fallback

    def test_clamp_confidence_band(self):
        assert clamp_confidence(0.3, 0.55, 0.9) == 0.55
        assert clamp_confidence(0.95, 0.55, 0.9) == 0.9
        assert clamp_confidence(0.7, 0.55, 0.9) == 0.7

    def test_vote_key(self):
        assert Direction.BUY.vote_key == "BUY"
        assert Direction.HOLD.vote_key == "HOLD"

    def test_signal_time(self):
        candles = [_make_candle(0), _make_candle(4)]
        assert signal_time(candles) == T0 + timedelta(minutes=4)
        assert signal_time([]).tzinfo is not None

    def test_ensemble_signal_defaults(self):
        result = EnsembleSignal(
            direction=Direction.HOLD, confidence=0.0, reason="none", timestamp=T0
        )

        assert result.vote_breakdown == {"BUY": 0, "SELL": 0, "HOLD": 0}
        assert result.contributing_strategies == []
        assert result.regime is None


class TestMarketRegime:
    """Tests for MarketRegime model."""

    def test_trending_requires_direction(self):
        with pytest.raises(ValidationError):
            MarketRegime(kind=RegimeKind.TRENDING)

    def test_ranging_rejects_direction(self):
        with pytest.raises(ValidationError):
            MarketRegime(kind=RegimeKind.RANGING, direction=TrendDirection.BULLISH)

    def test_constructors(self):
        trending = MarketRegime.trending(TrendDirection.BEARISH, strength=0.8)

        assert trending.is_trending
        assert str(trending) == "trending(bearish)"
        assert trending.strength == 0.8
        assert str(MarketRegime.ranging()) == "ranging"
        assert str(MarketRegime.volatile(volatility=0.05)) == "volatile"
