"""Grid trading strategy for range-bound markets.

The grid is centred on the midpoint of the last ``range_period`` candles,
with ``grid_levels / 2`` buy levels below and as many sell levels above, each
``grid_spacing`` apart. A close within 0.2% of the nearest level is a
BUY/SELL (capped at 0.8).

The grid is rebuilt when price drifts more than three spacings from the
centre or volatility nears ``max_volatility``, and after any parameter change.
Above ``max_volatility`` the strategy pauses and holds.
"""

from __future__ import annotations

import logging

from signal_engine.indicators import returns_volatility
from signal_engine.models.candle import Candle, CandleArrays
from signal_engine.models.signal import Direction, SignalPath, StrategySignal
from signal_engine.strategy import fallbacks
from signal_engine.strategy.base import BaseStrategy
from signal_engine.strategy.breakout.models import GridLevels, GridTradingParams
from signal_engine.strategy.registry import register_strategy

logger = logging.getLogger(__name__)

LEVEL_PROXIMITY = 0.002
MAX_CONFIDENCE = 0.8


def build_grid(center: float, params: GridTradingParams) -> GridLevels:
    """Lay out symmetric levels around ``center``."""
    steps = range(1, params.grid_levels // 2 + 1)
    return GridLevels(
        center=center,
        buy_levels=tuple(center * (1 - params.grid_spacing * i) for i in steps),
        sell_levels=tuple(center * (1 + params.grid_spacing * i) for i in steps),
    )


@register_strategy("grid_trading")
class GridTradingStrategy(BaseStrategy[GridTradingParams]):
    """Volatility-bounded grid around a rolling centre price."""

    description = "Automated grid trading for range-bound markets"
    params_model = GridTradingParams

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._grid: GridLevels | None = None
        # Snapshot the grid was laid out with
        self._grid_params: GridTradingParams | None = None

    @property
    def grid(self) -> GridLevels | None:
        """Grid for the current parameters, None until the next full evaluation."""
        with self._lock:
            if self._grid_params is not self._params:
                return None
            return self._grid

    def _on_params_changed(self, params: GridTradingParams) -> None:
        self._grid = None
        self._grid_params = None

    def _required_candles(self, params: GridTradingParams) -> int:
        return max(params.volatility_period, params.range_period) + 10

    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: GridTradingParams
    ) -> StrategySignal:
        price = float(data.close[-1])
        if not price > 0:
            return self._computation_failure(candles, data, params)

        volatility = returns_volatility(data.close[-params.volatility_period:])
        if volatility > params.max_volatility:
            return self._signal(
                candles, Direction.HOLD, 0.2,
                f"Market too volatile for grid trading ({volatility:.2%})",
            )

        with self._lock:
            grid, grid_params = self._grid, self._grid_params
        if (
            grid is None
            or grid_params is not params
            or self._should_rebuild(grid, price, volatility, params)
        ):
            high = float(data.high[-params.range_period:].max())
            low = float(data.low[-params.range_period:].min())
            center = (high + low) / 2
            if not center > 0:
                return self._computation_failure(candles, data, params)
            grid = build_grid(center, params)
            with self._lock:
                self._grid, self._grid_params = grid, params
            logger.debug("%s grid re-anchored at %.4f", self.name, center)

        below = [level for level in grid.buy_levels if level < price]
        if below:
            level = max(below)
            if (price - level) / level <= LEVEL_PROXIMITY:
                return self._signal(
                    candles, Direction.BUY,
                    self._confidence(price, level, volatility, grid.center),
                    f"Grid buy level reached ({level:.2f})",
                )

        above = [level for level in grid.sell_levels if level > price]
        if above:
            level = min(above)
            if (level - price) / price <= LEVEL_PROXIMITY:
                return self._signal(
                    candles, Direction.SELL,
                    self._confidence(price, level, volatility, grid.center),
                    f"Grid sell level reached ({level:.2f})",
                )

        price_range = float(
            data.high[-params.range_period:].max() - data.low[-params.range_period:].min()
        )
        if price > grid.center + price_range * 1.5:
            return self._signal(
                candles, Direction.HOLD, 0.3,
                "Upward breakout detected - pausing grid trading",
            )
        if price < grid.center - price_range * 1.5:
            return self._signal(
                candles, Direction.HOLD, 0.3,
                "Downward breakout detected - pausing grid trading",
            )
        return self._signal(candles, Direction.HOLD, 0.3, "Waiting for grid level approach")

    @staticmethod
    def _should_rebuild(
        grid: GridLevels, price: float, volatility: float, params: GridTradingParams
    ) -> bool:
        drift = abs(price - grid.center) / grid.center
        return drift > params.grid_spacing * 3 or volatility > params.max_volatility * 0.8

    @staticmethod
    def _confidence(price: float, level: float, volatility: float, center: float) -> float:
        confidence = 0.6
        confidence += max(0.0, 0.3 - abs(price - level) / level * 100)
        confidence += max(0.0, 0.2 - volatility * 10)
        confidence += max(0.0, 0.1 - abs(level - center) / center)
        return min(MAX_CONFIDENCE, confidence)

    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: GridTradingParams
    ) -> StrategySignal:
        proxy = fallbacks.range_position(
            data.high, data.low, data.close, upper=0.6, lower=0.4, base=0.35
        )
        return self._fallback(candles, proxy, SignalPath.INSUFFICIENT_DATA)

    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: GridTradingParams
    ) -> StrategySignal:
        proxy = fallbacks.range_position(
            data.high, data.low, data.close,
            lookback=params.range_period, upper=0.6, lower=0.4, base=0.33,
        )
        return self._fallback(candles, proxy, SignalPath.COMPUTATION_FAILURE)
