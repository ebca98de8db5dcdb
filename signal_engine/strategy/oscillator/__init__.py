"""Oscillator and mean-reversion strategies.

Importing this package triggers strategy registration via the
@register_strategy decorator on each strategy class.
"""

from signal_engine.strategy.oscillator.bollinger_bands import BollingerBandsStrategy
from signal_engine.strategy.oscillator.mean_reversion import MeanReversionStrategy
from signal_engine.strategy.oscillator.models import (
    BollingerBandsParams,
    MeanReversionParams,
    RsiParams,
    StochasticParams,
    WilliamsRParams,
)
from signal_engine.strategy.oscillator.rsi import RsiStrategy
from signal_engine.strategy.oscillator.stochastic import StochasticStrategy
from signal_engine.strategy.oscillator.williams_r import WilliamsRStrategy

__all__ = [
    "BollingerBandsStrategy",
    "MeanReversionStrategy",
    "RsiStrategy",
    "StochasticStrategy",
    "WilliamsRStrategy",
    "BollingerBandsParams",
    "MeanReversionParams",
    "RsiParams",
    "StochasticParams",
    "WilliamsRParams",
]
