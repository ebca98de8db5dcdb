"""Tests for market regime detection."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from signal_engine.models import Candle, MarketRegime, RegimeKind, TrendDirection
from signal_engine.regime import RegimeConfig, RegimeDetector

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _make_candles(closes: list[float], spread: float = 0.05) -> list[Candle]:
    return [
        Candle(
            open_time=T0 + timedelta(hours=i),
            open=close,
            high=close + spread,
            low=close - spread,
            close=close,
            volume=1.0,
        )
        for i, close in enumerate(closes)
    ]


class TestRegimeDetector:
    """Tests for RegimeDetector.detect."""

    def test_trending_bullish(self):
        candles = _make_candles([100 + 0.1 * i for i in range(30)])
        regime = RegimeDetector().detect(candles)

        assert regime.kind == RegimeKind.TRENDING
        assert regime.direction == TrendDirection.BULLISH
        assert regime.strength == pytest.approx(1.0)
        assert regime.slope > 0

    def test_trending_bearish(self):
        candles = _make_candles([100 - 0.1 * i for i in range(30)])
        regime = RegimeDetector().detect(candles)

        assert regime.kind == RegimeKind.TRENDING
        assert regime.direction == TrendDirection.BEARISH

    def test_volatile(self):
        """Wide candles: ATR well above 2% of price."""
        closes = [100.0 + (1 if i % 2 else -1) for i in range(30)]
        regime = RegimeDetector().detect(_make_candles(closes, spread=3.0))

        assert regime.kind == RegimeKind.VOLATILE
        assert regime.direction is None
        assert regime.volatility > 0.02

    def test_ranging(self):
        closes = [100.0 + (0.2 if i % 2 else -0.2) for i in range(30)]
        regime = RegimeDetector().detect(_make_candles(closes))

        assert regime.kind == RegimeKind.RANGING
        assert regime.strength < 0.5

    def test_short_history_is_ranging(self):
        candles = _make_candles([100 + i for i in range(10)])
        assert RegimeDetector().detect(candles) == MarketRegime.ranging()

    def test_empty_is_ranging(self):
        assert RegimeDetector().detect([]).kind == RegimeKind.RANGING

    def test_custom_threshold(self):
        """A looser volatility threshold turns a volatile market into a trend."""
        candles = _make_candles([100 + 0.5 * i for i in range(30)], spread=3.0)

        assert RegimeDetector().detect(candles).kind == RegimeKind.VOLATILE
        loose = RegimeDetector(RegimeConfig(volatility_threshold=0.2))
        assert loose.detect(candles).kind == RegimeKind.TRENDING

    def test_config_validation(self):
        with pytest.raises(ValidationError):
            RegimeConfig(trend_strength_threshold=1.5)


class TestRecommendations:
    """Tests for regime-to-strategy recommendations."""

    @pytest.mark.parametrize(
        "regime,expected",
        [
            (
                MarketRegime.trending(TrendDirection.BULLISH),
                ["ema_crossover", "macd", "atr_breakout"],
            ),
            (
                MarketRegime.trending(TrendDirection.BEARISH),
                ["ema_crossover", "macd", "rsi"],
            ),
            (MarketRegime.ranging(), ["mean_reversion", "rsi"]),
            (MarketRegime.volatile(), ["atr_breakout", "mean_reversion"]),
        ],
    )
    def test_mapping(self, regime, expected):
        assert RegimeDetector.recommend_strategies(regime) == expected
