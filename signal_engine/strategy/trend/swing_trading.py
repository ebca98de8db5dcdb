"""Swing trading composite strategy.

Combines an SMA trend filter, RSI, MACD and recent support/resistance:

- Uptrend setup (fast SMA > slow SMA, RSI < 70, close above fast SMA): BUY
  at 0.3 plus MACD bullish 0.2, MACD bullish cross 0.3, near support 0.2,
  RSI < 50 0.1, strong trend 0.1
- Downtrend setup: the mirror image, SELL
- Reversal at support/resistance with a MACD cross: 0.7
- Momentum continuation with RSI between 50 and 70 (30 and 50): 0.4

Confidence is capped at 0.9.
"""

from signal_engine.indicators import highest, lowest, macd, rsi, sma
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.registry import register_strategy
from signal_engine.strategy.trend.models import SwingTradingParams

MAX_CONFIDENCE = 0.9
STRONG_TREND = 0.02


def _near(price: float, level: float, tolerance: float) -> bool:
    return level > 0 and abs(price - level) / level <= tolerance


@register_strategy("swing_trading")
class SwingTradingStrategy(BaseStrategy[SwingTradingParams]):
    """Medium-term composite of trend, momentum and price levels."""

    description = "Medium-term strategy for capturing price swings"
    params_model = SwingTradingParams

    def _required_candles(self, params: SwingTradingParams) -> int:
        return (
            max(
                params.sma_slow_period,
                params.support_resistance_period,
                params.macd_slow_period + params.macd_signal_period,
            )
            + 20
        )

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: SwingTradingParams
    ) -> StrategySignal:
        sma_fast = sma(data.close, params.sma_fast_period)
        sma_slow = sma(data.close, params.sma_slow_period)
        rsi_values = rsi(data.close, params.rsi_period)
        macd_result = macd(
            data.close,
            params.macd_fast_period,
            params.macd_slow_period,
            params.macd_signal_period,
        )
        resistance = highest(data.high, params.support_resistance_period)
        support = lowest(data.low, params.support_resistance_period)

        if not (
            sma_fast and sma_slow and rsi_values and macd_result.signal
            and resistance and support
        ) or sma_slow[-1] <= 0:
            return self._computation_failure(candles, data, params)

        price = float(data.close[-1])
        prev_price = float(data.close[-2])
        fast, slow = sma_fast[-1], sma_slow[-1]
        current_rsi = rsi_values[-1]
        macd_line, signal_line = macd_result.macd[-1], macd_result.signal[-1]

        uptrend = fast > slow
        trend_strength = abs(fast - slow) / slow
        macd_bullish = macd_line > signal_line
        cross = self._macd_cross(macd_result.macd, macd_result.signal)
        near_support = _near(price, support[-1], params.level_tolerance)
        near_resistance = _near(price, resistance[-1], params.level_tolerance)

        notes: list[str] = []
        confidence = 0.0
        direction = Direction.HOLD

        if uptrend and current_rsi < 70 and price > fast:
            direction = Direction.BUY
            notes.append("Uptrend confirmed")
            confidence = 0.3
            for condition, points, note in (
                (macd_bullish, 0.2, "MACD bullish"),
                (cross == Direction.BUY, 0.3, "MACD bullish crossover"),
                (near_support, 0.2, "Near support level"),
                (current_rsi < 50, 0.1, "RSI not overbought"),
                (trend_strength > STRONG_TREND, 0.1, "Strong trend"),
            ):
                if condition:
                    notes.append(note)
                    confidence += points
        elif not uptrend and current_rsi > 30 and price < fast:
            direction = Direction.SELL
            notes.append("Downtrend confirmed")
            confidence = 0.3
            for condition, points, note in (
                (not macd_bullish, 0.2, "MACD bearish"),
                (cross == Direction.SELL, 0.3, "MACD bearish crossover"),
                (near_resistance, 0.2, "Near resistance level"),
                (current_rsi > 50, 0.1, "RSI not oversold"),
                (trend_strength > STRONG_TREND, 0.1, "Strong trend"),
            ):
                if condition:
                    notes.append(note)
                    confidence += points
        elif near_support and current_rsi < 35 and cross == Direction.BUY:
            direction = Direction.BUY
            notes += ["Potential bullish reversal", "Oversold at support"]
            confidence = 0.7
        elif near_resistance and current_rsi > 65 and cross == Direction.SELL:
            direction = Direction.SELL
            notes += ["Potential bearish reversal", "Overbought at resistance"]
            confidence = 0.7
        elif uptrend and price > prev_price and 50 < current_rsi < 70:
            direction = Direction.BUY
            notes.append("Bullish momentum continuation")
            confidence = 0.4
        elif not uptrend and price < prev_price and 30 < current_rsi < 50:
            direction = Direction.SELL
            notes.append("Bearish momentum continuation")
            confidence = 0.4

        reason = ", ".join(notes) if notes else "No swing trading opportunities"
        return self._signal(candles, direction, min(MAX_CONFIDENCE, confidence), reason)

    @staticmethod
    def _macd_cross(macd_line: list[float], signal_line: list[float]) -> Direction:
        if len(macd_line) < 2 or len(signal_line) < 2:
            return Direction.HOLD
        if macd_line[-1] > signal_line[-1] and macd_line[-2] <= signal_line[-2]:
            return Direction.BUY
        if macd_line[-1] < signal_line[-1] and macd_line[-2] >= signal_line[-2]:
            return Direction.SELL
        return Direction.HOLD

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: SwingTradingParams
    ) -> StrategySignal:
        proxy = fallbacks.price_vs_average(data.close, threshold=0.01, base=0.33, scale=2.0)
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA, cap=0.38)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: SwingTradingParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(data.close, lookback=4, threshold=0.01, base=0.33)
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
