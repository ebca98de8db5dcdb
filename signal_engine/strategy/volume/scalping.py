"""Scalping strategy.

Short-horizon entries that need several confirmations at once:
- EMA crossover + RSI not extreme + volume >= ``volume_multiplier`` x average
  + a 0.1% move in the same direction -> 0.8 (0.9 with RSI on the far side
  of 50)
- No crossover but a >0.2% move on 1.5x the volume requirement, with the
  close on the right side of the fast EMA -> 0.6

Confidence is scaled by 0.7 when 20-candle return volatility exceeds 2%.
"""

from signal_engine.indicators import ema, returns_volatility, rsi
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.registry import register_strategy
from signal_engine.strategy.volume.models import ScalpingParams

VOLUME_WINDOW = 10
VOLATILITY_WINDOW = 20
MIN_MOVE = 0.001
STRONG_MOVE = 0.002
HIGH_VOLATILITY = 0.02


@register_strategy("scalping")
class ScalpingStrategy(BaseStrategy[ScalpingParams]):
    """Fast EMA/RSI/volume confirmation scalper."""

    description = "High-frequency trading strategy for quick profits"
    params_model = ScalpingParams

    def _required_candles(self, params: ScalpingParams) -> int:
        return max(params.slow_ema_period, params.rsi_period) + 20

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: ScalpingParams
    ) -> StrategySignal:
        fast = ema(data.close, params.fast_ema_period)
        slow = ema(data.close, params.slow_ema_period)
        rsi_values = rsi(data.close, params.rsi_period)
        prev_close = float(data.close[-2])
        if len(fast) < 2 or len(slow) < 2 or not rsi_values or not prev_close > 0:
            return self._computation_failure(candles, data, params)

        price = float(data.close[-1])
        current_rsi = rsi_values[-1]
        average_volume = float(data.volume[-VOLUME_WINDOW:].mean())
        volume_ratio = data.volume[-1] / average_volume if average_volume > 0 else 0.0
        change = (price - prev_close) / prev_close
        strong_momentum = abs(change) > MIN_MOVE

        bullish_cross = fast[-1] > slow[-1] and fast[-2] <= slow[-2]
        bearish_cross = fast[-1] < slow[-1] and fast[-2] >= slow[-2]
        volume_ok = volume_ratio >= params.volume_multiplier

        notes: list[str] = []
        confidence = 0.0
        direction = Direction.HOLD

        if bullish_cross and current_rsi < 70 and volume_ok and strong_momentum and change > 0:
            direction = Direction.BUY
            notes += ["EMA bullish crossover", "Strong volume", "Positive momentum"]
            confidence = 0.8
            if current_rsi < 50:
                notes.append("RSI not overbought")
                confidence += 0.1
        elif bearish_cross and current_rsi > 30 and volume_ok and strong_momentum and change < 0:
            direction = Direction.SELL
            notes += ["EMA bearish crossover", "Strong volume", "Negative momentum"]
            confidence = 0.8
            if current_rsi > 50:
                notes.append("RSI not oversold")
                confidence += 0.1
        elif strong_momentum and volume_ratio >= params.volume_multiplier * 1.5:
            if change > STRONG_MOVE and current_rsi < 65 and price > fast[-1]:
                direction = Direction.BUY
                notes += ["Strong bullish momentum", "High volume spike"]
                confidence = 0.6
            elif change < -STRONG_MOVE and current_rsi > 35 and price < fast[-1]:
                direction = Direction.SELL
                notes += ["Strong bearish momentum", "High volume spike"]
                confidence = 0.6

        if returns_volatility(data.close[-VOLATILITY_WINDOW:]) > HIGH_VOLATILITY:
            confidence *= 0.7
            notes.append("High volatility adjustment")

        reason = ", ".join(notes) if notes else "No scalping opportunities"
        return self._signal(candles, direction, min(0.9, confidence), reason)

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: ScalpingParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(data.close, lookback=1, threshold=MIN_MOVE, base=0.33)
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: ScalpingParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(data.close, lookback=2, threshold=0.005, base=0.33)
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
