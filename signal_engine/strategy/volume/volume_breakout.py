"""Volume breakout strategy.

Signal Logic:
- Volume spike + significant move + breakout candle (close beyond the
  previous high/low in the move's direction) -> BUY/SELL, up to 0.9
- Volume spike + half-threshold move -> BUY/SELL at 0.5
- Five-candle price/volume divergence -> BUY/SELL at 0.4
- Significant move on thin volume -> HOLD at 0.3
"""

from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.registry import register_strategy
from signal_engine.strategy.volume.models import VolumeBreakoutParams

DIVERGENCE_WINDOW = 5
# Relative price change across the divergence window
DIVERGENCE_PRICE_MOVE = 0.01


@register_strategy("volume_breakout")
class VolumeBreakoutStrategy(BaseStrategy[VolumeBreakoutParams]):
    """Volume spikes confirming price breakouts."""

    description = "Trades based on volume spikes and price movements"
    params_model = VolumeBreakoutParams

    def _required_candles(self, params: VolumeBreakoutParams) -> int:
        return params.volume_period + 10

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: VolumeBreakoutParams
    ) -> StrategySignal:
        average_volume = float(data.volume[-params.volume_period:].mean())
        prev_close = float(data.close[-2])
        if not average_volume > 0 or not prev_close > 0:
            return self._computation_failure(candles, data, params)

        current, previous = candles[-1], candles[-2]
        volume_ratio = current.volume / average_volume
        spike = volume_ratio >= params.volume_threshold
        change = (current.close - prev_close) / prev_close
        significant = abs(change) >= params.price_change_threshold

        breaking_up = current.is_bullish and current.close > previous.high
        breaking_down = current.is_bearish and current.close < previous.low

        if spike and significant:
            if change > 0 and breaking_up:
                return self._signal(
                    candles, Direction.BUY,
                    self._confidence(volume_ratio, abs(change), params),
                    f"Volume spike with bullish breakout ({volume_ratio:.1f}x volume)",
                )
            if change < 0 and breaking_down:
                return self._signal(
                    candles, Direction.SELL,
                    self._confidence(volume_ratio, abs(change), params),
                    f"Volume spike with bearish breakdown ({volume_ratio:.1f}x volume)",
                )

        if spike:
            if change > params.price_change_threshold / 2:
                return self._signal(
                    candles, Direction.BUY, 0.5,
                    "High volume supporting upward price movement",
                )
            if change < -params.price_change_threshold / 2:
                return self._signal(
                    candles, Direction.SELL, 0.5,
                    "High volume supporting downward price movement",
                )

        divergence = self._divergence(data)
        if divergence == Direction.BUY:
            return self._signal(
                candles, Direction.BUY, 0.4, "Bullish volume divergence detected"
            )
        if divergence == Direction.SELL:
            return self._signal(
                candles, Direction.SELL, 0.4, "Bearish volume divergence detected"
            )

        if volume_ratio < 0.5 and significant:
            return self._signal(
                candles, Direction.HOLD, 0.3,
                "Significant price move on low volume - potential false signal",
            )
        return self._signal(
            candles, Direction.HOLD, 0.1, "No significant volume patterns detected"
        )

    @staticmethod
    def _confidence(volume_ratio: float, change: float, params: VolumeBreakoutParams) -> float:
        confidence = 0.5
        confidence += min(0.3, (volume_ratio - params.volume_threshold) * 0.1)
        confidence += min(0.2, change * 5)
        confidence += 0.1  # breakout candle
        return min(0.9, confidence)

    @staticmethod
    def _divergence(data: CandleArrays) -> Direction | None:
        """Price trend opposite to volume trend over the last five candles."""
        prices = data.close[-DIVERGENCE_WINDOW:]
        volumes = data.volume[-DIVERGENCE_WINDOW:]
        if len(prices) < DIVERGENCE_WINDOW or not prices[0] > 0:
            return None

        price_move = (prices[-1] - prices[0]) / prices[0]
        volume_slope = volumes[-1] - volumes[0]
        if price_move < -DIVERGENCE_PRICE_MOVE and volume_slope > 0:
            return Direction.BUY
        if price_move > DIVERGENCE_PRICE_MOVE and volume_slope < 0:
            return Direction.SELL
        return None

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: VolumeBreakoutParams
    ) -> StrategySignal:
        proxy = fallbacks.volume_bias(data.close, data.volume)
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: VolumeBreakoutParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(data.close, lookback=1, threshold=0.01, base=0.33)
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
