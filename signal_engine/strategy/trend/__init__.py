"""Trend-following strategies.

Importing this package triggers strategy registration via the
@register_strategy decorator on each strategy class.
"""

from signal_engine.strategy.trend.adx_trend import AdxTrendStrategy
from signal_engine.strategy.trend.ema_crossover import EmaCrossoverStrategy
from signal_engine.strategy.trend.ichimoku import IchimokuStrategy
from signal_engine.strategy.trend.macd import MacdStrategy
from signal_engine.strategy.trend.models import (
    AdxTrendParams,
    EmaCrossoverParams,
    IchimokuParams,
    MacdParams,
    ParabolicSarParams,
    SwingTradingParams,
)
from signal_engine.strategy.trend.parabolic_sar import ParabolicSarStrategy
from signal_engine.strategy.trend.swing_trading import SwingTradingStrategy

__all__ = [
    "AdxTrendStrategy",
    "EmaCrossoverStrategy",
    "IchimokuStrategy",
    "MacdStrategy",
    "ParabolicSarStrategy",
    "SwingTradingStrategy",
    "AdxTrendParams",
    "EmaCrossoverParams",
    "IchimokuParams",
    "MacdParams",
    "ParabolicSarParams",
    "SwingTradingParams",
]
