"""Bollinger band-touch strategy.

- Close crosses down through the lower band: BUY, up to 0.9
- Close crosses up through the upper band: SELL, up to 0.9
- Band position below 0.2 / above 0.8: weak BUY / SELL at 0.3
- Otherwise HOLD at 0.1
"""

from signal_engine.indicators import bollinger_bands
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.oscillator.models import BollingerBandsParams
from signal_engine.strategy.registry import register_strategy


@register_strategy("bollinger_bands")
class BollingerBandsStrategy(BaseStrategy[BollingerBandsParams]):
    """Trade touches of the Bollinger bands."""

    description = "Trades based on price touching or crossing Bollinger Bands"
    params_model = BollingerBandsParams

    def _required_candles(self, params: BollingerBandsParams) -> int:
        return params.period + 5

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: BollingerBandsParams
    ) -> StrategySignal:
        bands = bollinger_bands(data.close, params.period, params.num_std)
        if not bands.middle or len(data.close) < 2:
            return self._computation_failure(candles, data, params)

        upper, lower = bands.upper[-1], bands.lower[-1]
        width = upper - lower
        if not width > 0:
            return self._computation_failure(candles, data, params)

        price = float(data.close[-1])
        prev_price = float(data.close[-2])
        position = (price - lower) / width

        if price <= lower and prev_price > lower:
            return self._signal(
                candles, Direction.BUY, min(0.9, 0.5 + 0.5 * (1.0 - position)),
                "Price touched lower Bollinger Band (oversold)",
            )
        if price >= upper and prev_price < upper:
            return self._signal(
                candles, Direction.SELL, min(0.9, 0.5 + 0.5 * position),
                "Price touched upper Bollinger Band (overbought)",
            )
        if position < 0.2:
            return self._signal(
                candles, Direction.BUY, 0.3, "Price near lower Bollinger Band"
            )
        if position > 0.8:
            return self._signal(
                candles, Direction.SELL, 0.3, "Price near upper Bollinger Band"
            )
        return self._signal(
            candles, Direction.HOLD, 0.1, "Price within normal Bollinger Band range"
        )

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: BollingerBandsParams
    ) -> StrategySignal:
        # Price ratio to the mean: +/-2% reads as the upper/lower band
        proxy = fallbacks.price_vs_average(
            data.close, threshold=0.02, base=0.30, scale=5.0, revert=True
        )
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA, cap=0.36)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: BollingerBandsParams
    ) -> StrategySignal:
        proxy = fallbacks.Proxy(Direction.HOLD, 0.33, "neutral band analysis")
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
