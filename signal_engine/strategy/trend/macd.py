"""MACD crossover strategy.

- MACD crosses above its signal line -> BUY
- MACD crosses below its signal line -> SELL
- Otherwise HOLD at 0.3

Crossover confidence is ``min(1, |histogram| * 100)``.
"""

from signal_engine.indicators import ema, macd
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.registry import register_strategy
from signal_engine.strategy.trend.models import MacdParams


@register_strategy("macd")
class MacdStrategy(BaseStrategy[MacdParams]):
    """Moving Average Convergence Divergence crossover."""

    description = "Moving Average Convergence Divergence strategy"
    params_model = MacdParams

    def _required_candles(self, params: MacdParams) -> int:
        return params.slow_period + params.signal_period + 10

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: MacdParams
    ) -> StrategySignal:
        if not ema(data.close, params.fast_period) or not ema(data.close, params.slow_period):
            proxy = fallbacks.price_vs_average(
                data.close, threshold=0.01, base=0.30, scale=2.0
            )
            return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE, cap=0.36)

        result = macd(
            data.close, params.fast_period, params.slow_period, params.signal_period
        )
        if len(result.macd) < 2 or len(result.signal) < 2:
            return self._computation_failure(candles, data, params)

        prev_macd, curr_macd = result.macd[-2], result.macd[-1]
        prev_signal, curr_signal = result.signal[-2], result.signal[-1]
        confidence = min(1.0, abs(result.histogram[-1]) * 100)

        if prev_macd <= prev_signal and curr_macd > curr_signal:
            return self._signal(
                candles, Direction.BUY, confidence, "MACD crossed above signal line"
            )
        if prev_macd >= prev_signal and curr_macd < curr_signal:
            return self._signal(
                candles, Direction.SELL, confidence, "MACD crossed below signal line"
            )

        trend = "Bullish" if curr_macd > curr_signal else "Bearish"
        return self._signal(candles, Direction.HOLD, 0.3, f"{trend} momentum, no crossover")

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: MacdParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(
            data.close, lookback=2, threshold=0.005, base=0.30, scale=5.0
        )
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA, cap=0.38)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: MacdParams
    ) -> StrategySignal:
        # Five-close trend, 0.2% per candle
        proxy = fallbacks.momentum(
            data.close, lookback=4, threshold=0.008, base=0.31, scale=5.0
        )
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE, cap=0.37)
