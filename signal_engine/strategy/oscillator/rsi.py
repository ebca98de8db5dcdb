"""RSI momentum strategy.

- RSI <= oversold: BUY, ``min(1, 0.6 + strength * 0.4)``
- RSI >= overbought: SELL, same scaling towards 100
- Otherwise HOLD, ``max(0.2, 0.5 - |RSI - 50| / 50 * 0.3)``

With at least ten RSI values a divergence check runs over the last ten
closes and RSI values. A lower price swing-low with a higher RSI swing-low
(bullish) or a higher price swing-high with a lower RSI swing-high (bearish)
overrides the threshold signal at 0.8.
"""

import numpy as np

from signal_engine.indicators import rsi
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.oscillator.models import RsiParams
from signal_engine.strategy.registry import register_strategy

DIVERGENCE_WINDOW = 10
DIVERGENCE_CONFIDENCE = 0.8


def find_swings(values, highs: bool) -> list[int]:
    """Indices of the last two local highs (or lows) in ``values``."""
    swings = []
    for i in range(1, len(values) - 1):
        if highs and values[i - 1] < values[i] > values[i + 1]:
            swings.append(i)
        elif not highs and values[i - 1] > values[i] < values[i + 1]:
            swings.append(i)
    return swings[-2:]


def detect_divergence(prices, rsi_values) -> Direction | None:
    """Compare the last two price swings with the last two RSI swings."""
    if len(prices) < DIVERGENCE_WINDOW or len(rsi_values) < DIVERGENCE_WINDOW:
        return None

    prices = list(prices[-DIVERGENCE_WINDOW:])
    rsi_values = list(rsi_values[-DIVERGENCE_WINDOW:])

    price_lows = find_swings(prices, highs=False)
    rsi_lows = find_swings(rsi_values, highs=False)
    if len(price_lows) == 2 and len(rsi_lows) == 2:
        first, last = price_lows
        if prices[last] < prices[first] and rsi_values[rsi_lows[1]] > rsi_values[rsi_lows[0]]:
            return Direction.BUY

    price_highs = find_swings(prices, highs=True)
    rsi_highs = find_swings(rsi_values, highs=True)
    if len(price_highs) == 2 and len(rsi_highs) == 2:
        first, last = price_highs
        if prices[last] > prices[first] and rsi_values[rsi_highs[1]] < rsi_values[rsi_highs[0]]:
            return Direction.SELL

    return None


@register_strategy("rsi")
class RsiStrategy(BaseStrategy[RsiParams]):
    """Relative Strength Index overbought/oversold with divergence."""

    description = "Relative Strength Index momentum strategy"
    params_model = RsiParams

    def _required_candles(self, params: RsiParams) -> int:
        return params.period * 3

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: RsiParams
    ) -> StrategySignal:
        closes = data.close[np.isfinite(data.close) & (data.close > 0)]
        if len(closes) <= params.period:
            # Invalid closes: judge the raw prices against their average
            proxy = fallbacks.price_vs_average(data.close, base=0.30, scale=0.5)
            return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)

        values = rsi(closes, params.period)
        if not values:
            return self._computation_failure(candles, data, params)

        current = values[-1]
        if current <= params.oversold_level:
            strength = (params.oversold_level - current) / params.oversold_level
            direction = Direction.BUY
            confidence = min(1.0, 0.6 + strength * 0.4)
            reason = (
                f"RSI oversold at {current:.1f} "
                f"(threshold: {params.oversold_level:.1f})"
            )
        elif current >= params.overbought_level:
            strength = (current - params.overbought_level) / (100 - params.overbought_level)
            direction = Direction.SELL
            confidence = min(1.0, 0.6 + strength * 0.4)
            reason = (
                f"RSI overbought at {current:.1f} "
                f"(threshold: {params.overbought_level:.1f})"
            )
        else:
            direction = Direction.HOLD
            confidence = max(0.2, 0.5 - abs(current - 50) / 50 * 0.3)
            bias = "bullish" if current > 50 else "bearish"
            reason = f"RSI neutral at {current:.1f} ({bias} bias)"

        divergence = detect_divergence(closes, values)
        if divergence == Direction.BUY:
            return self._signal(
                candles, divergence, DIVERGENCE_CONFIDENCE, "Bullish RSI divergence detected"
            )
        if divergence == Direction.SELL:
            return self._signal(
                candles, divergence, DIVERGENCE_CONFIDENCE, "Bearish RSI divergence detected"
            )

        return self._signal(candles, direction, confidence, reason)

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: RsiParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(data.close, lookback=1, threshold=0.01, base=0.35)
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: RsiParams
    ) -> StrategySignal:
        proxy = fallbacks.volatility(data.close, lookback=5, threshold=0.02, base=0.32)
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE, cap=0.38)
