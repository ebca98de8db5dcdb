"""Stochastic oscillator strategy.

- %K crosses above %D with both below ``oversold_level``: BUY, 0.7 to 0.9
- %K crosses below %D with both above ``overbought_level``: SELL, 0.7 to 0.9
- Both lines inside a zone without a cross: BUY / SELL at 0.4
- Otherwise HOLD at 0.3
"""

from signal_engine.indicators import stochastic
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.oscillator.models import StochasticParams
from signal_engine.strategy.registry import register_strategy


@register_strategy("stochastic")
class StochasticStrategy(BaseStrategy[StochasticParams]):
    """Stochastic %K/%D crossovers in overbought/oversold zones."""

    description = "Momentum oscillator comparing closing price to price range"
    params_model = StochasticParams

    def _required_candles(self, params: StochasticParams) -> int:
        return params.k_period + params.d_period + 5

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: StochasticParams
    ) -> StrategySignal:
        result = stochastic(
            data.high, data.low, data.close, params.k_period, params.d_period
        )
        if len(result.d) < 2:
            return self._computation_failure(candles, data, params)

        k, d = result.k[-1], result.d[-1]
        prev_k, prev_d = result.k[-2], result.d[-2]
        oversold, overbought = params.oversold_level, params.overbought_level

        if k < oversold and d < oversold and k > d and prev_k <= prev_d:
            confidence = 0.7 + 0.2 * (oversold - min(k, d)) / oversold
            return self._signal(
                candles, Direction.BUY, min(0.9, confidence),
                "Stochastic bullish crossover in oversold territory",
            )
        if k > overbought and d > overbought and k < d and prev_k >= prev_d:
            confidence = 0.7 + 0.2 * (min(k, d) - overbought) / (100 - overbought)
            return self._signal(
                candles, Direction.SELL, min(0.9, confidence),
                "Stochastic bearish crossover in overbought territory",
            )
        if k < oversold and d < oversold:
            return self._signal(
                candles, Direction.BUY, 0.4, "Stochastic in oversold territory"
            )
        if k > overbought and d > overbought:
            return self._signal(
                candles, Direction.SELL, 0.4, "Stochastic in overbought territory"
            )
        return self._signal(candles, Direction.HOLD, 0.3, "Stochastic in neutral territory")

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: StochasticParams
    ) -> StrategySignal:
        proxy = fallbacks.range_position(data.high, data.low, data.close, lookback=5)
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: StochasticParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(data.close, lookback=1, threshold=0.01, base=0.35)
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
