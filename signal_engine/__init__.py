"""Technical-analysis signal engine.

Computes indicators over OHLCV candles, turns them into BUY/SELL/HOLD
signals through a set of pluggable strategies and combines those signals
into one ensemble decision.
"""

from signal_engine.config import (
    EngineConfig,
    EngineSettings,
    StrategyEntry,
    get_settings,
    load_engine_config,
)
from signal_engine.engine import SignalEngine
from signal_engine.ensemble import EnsembleAggregator, EnsembleConfig, EnsemblePolicy
from signal_engine.models import (
    Candle,
    CandleSeries,
    Direction,
    EnsembleSignal,
    MarketRegime,
    RegimeKind,
    SignalPath,
    StrategySignal,
    TrendDirection,
)
from signal_engine.regime import RegimeConfig, RegimeDetector
from signal_engine.strategy import (
    BaseStrategy,
    Strategy,
    create_strategy,
    default_strategies,
    list_strategies,
    register_strategy,
)

__version__ = "0.1.0"

__all__ = [
    "SignalEngine",
    "EngineConfig",
    "EngineSettings",
    "StrategyEntry",
    "get_settings",
    "load_engine_config",
    "EnsembleAggregator",
    "EnsembleConfig",
    "EnsemblePolicy",
    "RegimeConfig",
    "RegimeDetector",
    "Candle",
    "CandleSeries",
    "Direction",
    "EnsembleSignal",
    "MarketRegime",
    "RegimeKind",
    "SignalPath",
    "StrategySignal",
    "TrendDirection",
    "BaseStrategy",
    "Strategy",
    "create_strategy",
    "default_strategies",
    "list_strategies",
    "register_strategy",
]
