"""Value types shared by indicators, strategies and the ensemble."""

from signal_engine.models.candle import Candle, CandleArrays, CandleSeries, to_arrays
from signal_engine.models.regime import MarketRegime, RegimeKind, TrendDirection
from signal_engine.models.signal import (
    Direction,
    EnsembleSignal,
    SignalPath,
    StrategyOutcome,
    StrategySignal,
    clamp_confidence,
    signal_time,
)

__all__ = [
    "Candle",
    "CandleArrays",
    "CandleSeries",
    "to_arrays",
    "MarketRegime",
    "RegimeKind",
    "TrendDirection",
    "Direction",
    "EnsembleSignal",
    "SignalPath",
    "StrategyOutcome",
    "StrategySignal",
    "clamp_confidence",
    "signal_time",
]
