"""Breakout and volatility strategies.

Importing this package triggers strategy registration via the
@register_strategy decorator on each strategy class.
"""

from signal_engine.strategy.breakout.atr_breakout import AtrBreakoutStrategy
from signal_engine.strategy.breakout.grid_trading import GridTradingStrategy, build_grid
from signal_engine.strategy.breakout.models import (
    AtrBreakoutParams,
    GridLevels,
    GridTradingParams,
)

__all__ = [
    "AtrBreakoutStrategy",
    "GridTradingStrategy",
    "build_grid",
    "AtrBreakoutParams",
    "GridLevels",
    "GridTradingParams",
]
