"""Bollinger mean-reversion strategy.

- Close at or below the lower band: BUY
- Close at or above the upper band: SELL
- Confidence ``min(1, distance_past_band / stddev + 0.5)``
- Inside the bands: HOLD at 0.3
"""

from signal_engine.indicators import bollinger_bands
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.oscillator.models import MeanReversionParams
from signal_engine.strategy.registry import register_strategy


@register_strategy("mean_reversion")
class MeanReversionStrategy(BaseStrategy[MeanReversionParams]):
    """Fade closes that stretch beyond the Bollinger bands."""

    description = "Bollinger Bands mean reversion strategy"
    params_model = MeanReversionParams

    def _required_candles(self, params: MeanReversionParams) -> int:
        return params.period + 10

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: MeanReversionParams
    ) -> StrategySignal:
        bands = bollinger_bands(data.close, params.period, params.num_std)
        if not bands.middle:
            return self._computation_failure(candles, data, params)

        price = float(data.close[-1])
        middle, upper, lower = bands.middle[-1], bands.upper[-1], bands.lower[-1]
        std_dev = (upper - middle) / params.num_std
        if not std_dev > 0:
            return self._computation_failure(candles, data, params)

        if price <= lower:
            return self._signal(
                candles, Direction.BUY, min(1.0, (lower - price) / std_dev + 0.5),
                f"Price at lower band ({price:.2f})",
            )
        if price >= upper:
            return self._signal(
                candles, Direction.SELL, min(1.0, (price - upper) / std_dev + 0.5),
                f"Price at upper band ({price:.2f})",
            )

        position = (price - lower) / (upper - lower)
        return self._signal(
            candles, Direction.HOLD, 0.3, f"Price within bands ({position:.1%} position)"
        )

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: MeanReversionParams
    ) -> StrategySignal:
        proxy = fallbacks.price_vs_average(data.close, base=0.32, scale=2.0, revert=True)
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA, cap=0.38)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: MeanReversionParams
    ) -> StrategySignal:
        proxy = fallbacks.Proxy(Direction.HOLD, 0.35, "average price")
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
