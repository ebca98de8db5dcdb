"""Market regime detection.

Classifies recent candles as volatile, trending (bullish/bearish) or ranging:

1. ``ATR / close > volatility_threshold``          -> volatile
2. ``R^2`` of a linear fit over ``trend_period``
   closes above ``trend_strength_threshold``     -> trending(sign of slope)
3. otherwise                                     -> ranging

Short histories (or no ATR) classify as ranging.
"""

from __future__ import annotations

import logging
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from signal_engine.indicators import atr, linear_regression
from signal_engine.models.candle import Candle, to_arrays
from signal_engine.models.regime import MarketRegime, RegimeKind, TrendDirection

logger = logging.getLogger(__name__)

# Advisory mapping from regime to strategy names; not enforced by the ensemble
_RECOMMENDATIONS: dict[tuple[RegimeKind, TrendDirection | None], tuple[str, ...]] = {
    (RegimeKind.TRENDING, TrendDirection.BULLISH): ("ema_crossover", "macd", "atr_breakout"),
    (RegimeKind.TRENDING, TrendDirection.BEARISH): ("ema_crossover", "macd", "rsi"),
    (RegimeKind.RANGING, None): ("mean_reversion", "rsi"),
    (RegimeKind.VOLATILE, None): ("atr_breakout", "mean_reversion"),
}


class RegimeConfig(BaseModel):
    """Regime detector thresholds."""

    model_config = ConfigDict(frozen=True)

    atr_period: int = Field(14, ge=2, le=100)
    trend_period: int = Field(20, ge=3, le=200)
    # ATR as a fraction of the close above which the market is volatile
    volatility_threshold: float = Field(0.02, gt=0.0, le=1.0)
    # Minimum R-squared of the close regression for a trend
    trend_strength_threshold: float = Field(0.5, ge=0.0, le=1.0)


class RegimeDetector:
    """Classify market conditions from a candle window."""

    def __init__(self, config: RegimeConfig | None = None):
        self.config = config or RegimeConfig()

    def detect(self, candles: Sequence[Candle]) -> MarketRegime:
        """Classify the regime of ``candles``.

        Args:
            candles: Candles ordered ascending by open time.

        Returns:
            The regime with the volatility, normalised slope and R-squared
            it was based on.
        """
        cfg = self.config
        if len(candles) < max(cfg.atr_period, cfg.trend_period):
            return MarketRegime.ranging()

        data = to_arrays(candles)
        atr_values = atr(data.high, data.low, data.close, cfg.atr_period)
        close = float(data.close[-1])
        if not atr_values or not close > 0:
            return MarketRegime.ranging()

        volatility = atr_values[-1] / close
        trend = linear_regression(data.close, cfg.trend_period)
        slope = trend.slope / close if trend else 0.0
        strength = trend.r_squared if trend else 0.0
        metrics = {"volatility": volatility, "slope": slope, "strength": strength}

        if volatility > cfg.volatility_threshold:
            regime = MarketRegime.volatile(**metrics)
        elif strength > cfg.trend_strength_threshold:
            direction = TrendDirection.BULLISH if slope > 0 else TrendDirection.BEARISH
            regime = MarketRegime.trending(direction, **metrics)
        else:
            regime = MarketRegime.ranging(**metrics)

        logger.debug(
            "Regime %s (volatility=%.4f, slope=%.5f, r2=%.2f)",
            regime, volatility, slope, strength,
        )
        return regime

    @staticmethod
    def recommend_strategies(regime: MarketRegime) -> list[str]:
        """Strategy names suited to ``regime``."""
        return list(_RECOMMENDATIONS[(regime.kind, regime.direction)])
