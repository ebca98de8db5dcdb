"""Strategy plugin system.

Public API:
- Strategy: Protocol that all strategies must implement
- BaseStrategy: Shared state and three-tier evaluation for built-ins
- register_strategy: Decorator to register a strategy class
- create_strategy: Factory function to instantiate strategies by name
- list_strategies: Discover all registered strategies
- get_strategy_class: Get strategy class by name without instantiating
- default_strategies: One fresh instance of every built-in, in order

Importing this package auto-registers all built-in strategies.
"""

from signal_engine.strategy.base import MAX_WEIGHT, MIN_WEIGHT, BaseStrategy
from signal_engine.strategy.fallbacks import FALLBACK_CONFIDENCE_CAP
from signal_engine.strategy.protocol import Strategy
from signal_engine.strategy.registry import (
    create_strategy,
    get_strategy_class,
    list_strategies,
    register_strategy,
)

# Import built-in strategies to trigger auto-registration
import signal_engine.strategy.breakout  # noqa: F401,E402
import signal_engine.strategy.oscillator  # noqa: F401,E402
import signal_engine.strategy.trend  # noqa: F401,E402
import signal_engine.strategy.volume  # noqa: F401,E402

# Evaluation order of the default engine
BUILTIN_STRATEGIES: tuple[str, ...] = (
    "rsi",
    "ema_crossover",
    "macd",
    "mean_reversion",
    "atr_breakout",
    "bollinger_bands",
    "ichimoku",
    "parabolic_sar",
    "williams_r",
    "grid_trading",
    "swing_trading",
    "scalping",
    "volume_breakout",
    "adx_trend",
    "stochastic",
)


def default_strategies() -> list[BaseStrategy]:
    """Create one new instance of each built-in strategy in declaration order."""
    return [create_strategy(name) for name in BUILTIN_STRATEGIES]


__all__ = [
    "Strategy",
    "BaseStrategy",
    "MIN_WEIGHT",
    "MAX_WEIGHT",
    "FALLBACK_CONFIDENCE_CAP",
    "register_strategy",
    "create_strategy",
    "list_strategies",
    "get_strategy_class",
    "BUILTIN_STRATEGIES",
    "default_strategies",
]
