"""Williams %R strategy.

Signals on threshold crossings between the last two %R values:
- entering oversold (below ``oversold_level``): BUY, 0.6 to 0.9
- entering overbought (above ``overbought_level``): SELL, 0.6 to 0.9
- exiting oversold / overbought: BUY / SELL at 0.7
- staying inside a zone: weak BUY / SELL at 0.3
"""

from signal_engine.indicators import williams_r
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.oscillator.models import WilliamsRParams
from signal_engine.strategy.registry import register_strategy


@register_strategy("williams_r")
class WilliamsRStrategy(BaseStrategy[WilliamsRParams]):
    """Williams %R overbought/oversold zones."""

    description = "Momentum oscillator measuring overbought/oversold levels"
    params_model = WilliamsRParams

    def _required_candles(self, params: WilliamsRParams) -> int:
        return params.period + 5

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: WilliamsRParams
    ) -> StrategySignal:
        values = williams_r(data.high, data.low, data.close, params.period)
        if not values:
            return self._computation_failure(candles, data, params)

        current = values[-1]
        previous = values[-2] if len(values) > 1 else current
        oversold, overbought = params.oversold_level, params.overbought_level

        if current < oversold <= previous:
            confidence = 0.6 + 0.3 * (oversold - current) / (oversold + 100)
            return self._signal(
                candles, Direction.BUY, min(0.9, confidence),
                "Williams %R entering oversold territory",
            )
        if current > overbought >= previous:
            confidence = 0.6 + 0.3 * (current - overbought) / (0 - overbought)
            return self._signal(
                candles, Direction.SELL, min(0.9, confidence),
                "Williams %R entering overbought territory",
            )
        if current > oversold >= previous:
            return self._signal(
                candles, Direction.BUY, 0.7, "Williams %R exiting oversold territory"
            )
        if current < overbought <= previous:
            return self._signal(
                candles, Direction.SELL, 0.7, "Williams %R exiting overbought territory"
            )
        if current < oversold:
            return self._signal(
                candles, Direction.BUY, 0.3, "Williams %R in oversold territory"
            )
        if current > overbought:
            return self._signal(
                candles, Direction.SELL, 0.3, "Williams %R in overbought territory"
            )
        return self._signal(candles, Direction.HOLD, 0.3, "Williams %R in neutral range")

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: WilliamsRParams
    ) -> StrategySignal:
        proxy = fallbacks.price_vs_average(data.close, base=0.35)
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: WilliamsRParams
    ) -> StrategySignal:
        proxy = fallbacks.range_position(data.high, data.low, data.close, lookback=5)
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
