"""Parabolic SAR strategy.

- Close crosses above SAR -> BUY reversal, close crosses below -> SELL
  reversal; confidence ``min(0.9, 0.7 + min(0.2, distance * 10))``
- Otherwise the current side of SAR is a continuation signal: 0.6 when the
  close is more than 2% away from SAR, else 0.3
"""

from signal_engine.indicators import parabolic_sar
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.registry import register_strategy
from signal_engine.strategy.trend.models import ParabolicSarParams

STRONG_TREND_DISTANCE = 0.02


@register_strategy("parabolic_sar")
class ParabolicSarStrategy(BaseStrategy[ParabolicSarParams]):
    """Stop-and-reverse trend following."""

    description = "Trend-following indicator using stop and reverse points"
    params_model = ParabolicSarParams

    def _required_candles(self, params: ParabolicSarParams) -> int:
        return params.min_candles

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: ParabolicSarParams
    ) -> StrategySignal:
        sar = parabolic_sar(
            data.high, data.low, data.close,
            params.acceleration, params.max_acceleration,
        )
        close = float(data.close[-1]) if len(data.close) else 0.0
        if len(sar) < 2 or close <= 0:
            return self._computation_failure(candles, data, params)

        prev_close = float(data.close[-2])
        curr_up = close > sar[-1]
        prev_up = prev_close > sar[-2]
        distance = abs(close - sar[-1]) / close

        if curr_up and not prev_up:
            return self._signal(
                candles, Direction.BUY, self._reversal_confidence(distance),
                "Parabolic SAR bullish reversal",
            )
        if prev_up and not curr_up:
            return self._signal(
                candles, Direction.SELL, self._reversal_confidence(distance),
                "Parabolic SAR bearish reversal",
            )

        direction = Direction.BUY if curr_up else Direction.SELL
        trend = "uptrend" if curr_up else "downtrend"
        if distance > STRONG_TREND_DISTANCE:
            return self._signal(
                candles, direction, 0.6, f"Parabolic SAR strong {trend} continuation"
            )
        return self._signal(candles, direction, 0.3, f"Parabolic SAR {trend} continuation")

    @staticmethod
    def _reversal_confidence(distance: float) -> float:
        return min(0.9, 0.7 + min(0.2, distance * 10))

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: ParabolicSarParams
    ) -> StrategySignal:
        proxy = fallbacks.price_vs_average(data.close, base=0.35)
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: ParabolicSarParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(data.close, lookback=4, threshold=0.01, base=0.35)
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
