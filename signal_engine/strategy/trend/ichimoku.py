"""Ichimoku cloud strategy.

Accumulates points from corroborating conditions:
- Tenkan/Kijun cross: 0.3
- Price above/below the cloud: 0.4 with a matching cloud colour, else 0.2
  (price inside the cloud halves the points gathered so far)
- Price on the same side of both Tenkan and Kijun: 0.2
- Cloud twist (Senkou A crossing Senkou B): 0.2

Conditions that disagree with an already chosen direction are skipped.
Confidence is capped at 0.95.
"""

from signal_engine.indicators import ichimoku
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.registry import register_strategy
from signal_engine.strategy.trend.models import IchimokuParams

MAX_CONFIDENCE = 0.95


@register_strategy("ichimoku")
class IchimokuStrategy(BaseStrategy[IchimokuParams]):
    """Ichimoku Kinko Hyo composite trend analysis."""

    description = "Comprehensive trend analysis using Ichimoku Kinko Hyo"
    params_model = IchimokuParams

    def _required_candles(self, params: IchimokuParams) -> int:
        return params.senkou_b_period + params.displacement + 10

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: IchimokuParams
    ) -> StrategySignal:
        lines = ichimoku(
            data.high,
            data.low,
            data.close,
            params.tenkan_period,
            params.kijun_period,
            params.senkou_b_period,
            params.displacement,
        )
        if not (lines.tenkan and lines.kijun and lines.senkou_a and lines.senkou_b):
            return self._computation_failure(candles, data, params)

        price = float(data.close[-1])
        tenkan, kijun = lines.tenkan[-1], lines.kijun[-1]
        span_a, span_b = lines.senkou_a[-1], lines.senkou_b[-1]
        prev_tenkan = lines.tenkan[-2] if len(lines.tenkan) > 1 else tenkan
        prev_kijun = lines.kijun[-2] if len(lines.kijun) > 1 else kijun

        cloud_top = max(span_a, span_b)
        cloud_bottom = min(span_a, span_b)
        bullish_cloud = span_a > span_b

        notes: list[str] = []
        confidence = 0.0
        direction = Direction.HOLD

        if tenkan > kijun and prev_tenkan <= prev_kijun:
            notes.append("Tenkan-Kijun bullish cross")
            confidence += 0.3
            direction = Direction.BUY
        elif tenkan < kijun and prev_tenkan >= prev_kijun:
            notes.append("Tenkan-Kijun bearish cross")
            confidence += 0.3
            direction = Direction.SELL

        if price > cloud_top:
            if direction in (Direction.BUY, Direction.HOLD):
                notes.append("Price above cloud")
                confidence += 0.4 if bullish_cloud else 0.2
                direction = Direction.BUY
        elif price < cloud_bottom:
            if direction in (Direction.SELL, Direction.HOLD):
                notes.append("Price below cloud")
                confidence += 0.2 if bullish_cloud else 0.4
                direction = Direction.SELL
        else:
            notes.append("Price in cloud (neutral)")
            confidence *= 0.5

        if price > tenkan and price > kijun:
            if direction in (Direction.BUY, Direction.HOLD):
                notes.append("Price above Tenkan and Kijun")
                confidence += 0.2
                direction = Direction.BUY
        elif price < tenkan and price < kijun:
            if direction in (Direction.SELL, Direction.HOLD):
                notes.append("Price below Tenkan and Kijun")
                confidence += 0.2
                direction = Direction.SELL

        if len(lines.senkou_a) > 1 and len(lines.senkou_b) > 1:
            prev_a, prev_b = lines.senkou_a[-2], lines.senkou_b[-2]
            if span_a > span_b and prev_a <= prev_b:
                notes.append("Cloud twist bullish")
                confidence += 0.2
                if direction == Direction.HOLD:
                    direction = Direction.BUY
            elif span_a < span_b and prev_a >= prev_b:
                notes.append("Cloud twist bearish")
                confidence += 0.2
                if direction == Direction.HOLD:
                    direction = Direction.SELL

        reason = ", ".join(notes) if notes else "Ichimoku neutral"
        return self._signal(candles, direction, min(MAX_CONFIDENCE, confidence), reason)

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: IchimokuParams
    ) -> StrategySignal:
        # Close against the midpoint of the whole high/low range
        proxy = fallbacks.range_position(
            data.high, data.low, data.close, upper=0.5, lower=0.5, base=0.33, follow=True
        )
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: IchimokuParams
    ) -> StrategySignal:
        proxy = fallbacks.price_vs_average(data.close, threshold=0.005, base=0.33, scale=2.0)
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE, cap=0.36)
