"""Strategy protocol defining the interface all strategies must implement."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from signal_engine.models.candle import Candle
from signal_engine.models.signal import StrategySignal


@runtime_checkable
class Strategy(Protocol):
    """Protocol that all signal strategies must implement.

    A strategy turns a time-ordered candle sequence into one
    ``StrategySignal``. ``signal`` never raises on structurally valid input:
    short or degenerate histories produce a low-confidence fallback signal.
    """

    @property
    def name(self) -> str:
        """Unique strategy identifier (e.g., 'ema_crossover')."""
        ...

    @property
    def description(self) -> str:
        """Human-readable summary of the strategy."""
        ...

    @property
    def enabled(self) -> bool:
        """Whether the ensemble should consult this strategy."""
        ...

    @property
    def weight(self) -> float:
        """Multiplier applied to this strategy's confidence in the ensemble."""
        ...

    def required_candles(self) -> int:
        """Minimum candle count for the primary computation."""
        ...

    def signal(self, candles: Sequence[Candle]) -> StrategySignal:
        """Evaluate the candles and return a signal.

        Args:
            candles: Candles ordered ascending by open time.

        Returns:
            A signal with confidence in [0, 1].
        """
        ...
