"""ATR breakout strategy.

Breakout levels sit ``ATR * multiplier`` beyond the high/low of the
``atr_period`` candles before the current one. A close past a level is a
BUY/SELL with confidence ``min(1, 0.5 + breach_in_atr * 0.3)``. Without a
breakout the strategy holds, at 0.4 when ATR exceeds 2% of price and 0.2
otherwise.
"""

from signal_engine.indicators import atr
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.breakout.models import AtrBreakoutParams
from signal_engine.strategy.registry import register_strategy

HIGH_VOLATILITY = 0.02


@register_strategy("atr_breakout")
class AtrBreakoutStrategy(BaseStrategy[AtrBreakoutParams]):
    """Average True Range channel breakout."""

    description = "Average True Range breakout strategy"
    params_model = AtrBreakoutParams

    def _required_candles(self, params: AtrBreakoutParams) -> int:
        return params.atr_period * 2

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: AtrBreakoutParams
    ) -> StrategySignal:
        atr_values = atr(data.high, data.low, data.close, params.atr_period)
        if not atr_values or not atr_values[-1] > 0:
            return self._computation_failure(candles, data, params)

        current_atr = atr_values[-1]
        price = float(data.close[-1])
        # Channel from the candles before the current one
        recent_high = float(data.high[-params.atr_period - 1 : -1].max())
        recent_low = float(data.low[-params.atr_period - 1 : -1].min())
        upper = recent_high + current_atr * params.multiplier
        lower = recent_low - current_atr * params.multiplier

        if price > upper:
            strength = (price - upper) / current_atr
            return self._signal(
                candles, Direction.BUY, min(1.0, 0.5 + strength * 0.3),
                f"Upward breakout above {upper:.2f}",
            )
        if price < lower:
            strength = (lower - price) / current_atr
            return self._signal(
                candles, Direction.SELL, min(1.0, 0.5 + strength * 0.3),
                f"Downward breakout below {lower:.2f}",
            )

        if price > 0 and current_atr / price > HIGH_VOLATILITY:
            return self._signal(
                candles, Direction.HOLD, 0.4,
                f"High volatility (ATR: {current_atr:.2f}), waiting for breakout",
            )
        return self._signal(
            candles, Direction.HOLD, 0.2, f"Consolidating (ATR: {current_atr:.2f})"
        )

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: AtrBreakoutParams
    ) -> StrategySignal:
        proxy = fallbacks.range_position(
            data.high, data.low, data.close, upper=0.8, lower=0.2, base=0.33, follow=True
        )
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: AtrBreakoutParams
    ) -> StrategySignal:
        proxy = fallbacks.momentum(data.close, lookback=4, threshold=0.01, base=0.34)
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
