"""EMA crossover strategy.

Simple trend-following strategy:
- Fast EMA crosses above slow EMA -> BUY
- Fast EMA crosses below slow EMA -> SELL
- Otherwise HOLD at 0.3, noting the side of the current trend

Confidence of a crossover is ``min(1, |fast - slow| / slow * 10)``.
"""

from signal_engine.indicators import ema
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.registry import register_strategy
from signal_engine.strategy.trend.models import EmaCrossoverParams


@register_strategy("ema_crossover")
class EmaCrossoverStrategy(BaseStrategy[EmaCrossoverParams]):
    """Exponential moving average crossover."""

    description = "Exponential Moving Average crossover strategy"
    params_model = EmaCrossoverParams

    def _required_candles(self, params: EmaCrossoverParams) -> int:
        return max(params.fast_period, params.slow_period) * 2

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: EmaCrossoverParams
    ) -> StrategySignal:
        fast = ema(data.close, params.fast_period)
        slow = ema(data.close, params.slow_period)
        if len(fast) < 2 or len(slow) < 2 or slow[-1] <= 0:
            return self._computation_failure(candles, data, params)

        prev_fast, curr_fast = fast[-2], fast[-1]
        prev_slow, curr_slow = slow[-2], slow[-1]
        confidence = min(1.0, abs(curr_fast - curr_slow) / curr_slow * 10)

        if prev_fast <= prev_slow and curr_fast > curr_slow:
            return self._signal(
                candles, Direction.BUY, confidence, "Fast EMA crossed above slow EMA"
            )
        if prev_fast >= prev_slow and curr_fast < curr_slow:
            return self._signal(
                candles, Direction.SELL, confidence, "Fast EMA crossed below slow EMA"
            )

        trend = "Bullish" if curr_fast > curr_slow else "Bearish"
        return self._signal(candles, Direction.HOLD, 0.3, f"{trend} trend, no crossover")

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: EmaCrossoverParams
    ) -> StrategySignal:
        proxy = fallbacks.price_vs_average(
            data.close, threshold=0.01, base=0.30, scale=2.0
        )
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA, cap=0.36)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: EmaCrossoverParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(
            data.close, lookback=2, threshold=0.005, base=0.30, scale=5.0
        )
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE, cap=0.38)
