"""ADX trend-strength strategy.

- ADX below ``trend_threshold``: HOLD (weak trend)
- +DI/-DI cross with ADX above the threshold: BUY/SELL, confidence scaled
  from 0.5 at ``trend_threshold`` to 0.9 at ``strong_trend_threshold``
- ADX above ``strong_trend_threshold``: follow the dominant DI at 0.6
- Otherwise HOLD (moderate trend)
"""

from signal_engine.indicators import adx
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.registry import register_strategy
from signal_engine.strategy.trend.models import AdxTrendParams


@register_strategy("adx_trend")
class AdxTrendStrategy(BaseStrategy[AdxTrendParams]):
    """Average Directional Index trend strength."""

    description = "Measures trend strength using Average Directional Index"
    params_model = AdxTrendParams

    def _required_candles(self, params: AdxTrendParams) -> int:
        return params.period * 3 + 10

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: AdxTrendParams
    ) -> StrategySignal:
        result = adx(data.high, data.low, data.close, params.period)
        if not result.adx or len(result.plus_di) < 2:
            return self._computation_failure(candles, data, params)

        current = result.adx[-1]
        plus_di, minus_di = result.plus_di[-1], result.minus_di[-1]
        prev_plus, prev_minus = result.plus_di[-2], result.minus_di[-2]

        if current < params.trend_threshold:
            return self._signal(
                candles, Direction.HOLD, 0.2, f"ADX indicates weak trend ({current:.1f})"
            )

        span = params.strong_trend_threshold - params.trend_threshold
        cross_confidence = min(0.9, 0.5 + 0.4 * (current - params.trend_threshold) / span)
        if current > params.trend_threshold:
            if plus_di > minus_di and prev_plus <= prev_minus:
                return self._signal(
                    candles, Direction.BUY, cross_confidence,
                    f"ADX bullish crossover with strong trend ({current:.1f})",
                )
            if minus_di > plus_di and prev_minus <= prev_plus:
                return self._signal(
                    candles, Direction.SELL, cross_confidence,
                    f"ADX bearish crossover with strong trend ({current:.1f})",
                )

        if current > params.strong_trend_threshold:
            if plus_di > minus_di:
                return self._signal(
                    candles, Direction.BUY, 0.6,
                    f"ADX indicates strong uptrend ({current:.1f})",
                )
            return self._signal(
                candles, Direction.SELL, 0.6,
                f"ADX indicates strong downtrend ({current:.1f})",
            )

        return self._signal(
            candles, Direction.HOLD, 0.3, f"ADX indicates moderate trend ({current:.1f})"
        )

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: AdxTrendParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(data.close, lookback=4, threshold=0.01, base=0.33)
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: AdxTrendParams
    ) -> StrategySignal:
        proxy = fallbacks.price_vs_average(data.close, threshold=0.01, base=0.33)
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
