"""Signal data models produced by strategies and the ensemble."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from signal_engine.models.candle import Candle
from signal_engine.models.regime import MarketRegime


class Direction(str, Enum):
    """Trade direction suggested by a signal."""

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"

    @property
    def vote_key(self) -> str:
        """Upper-case key used in vote breakdowns."""
        return self.value.upper()


class SignalPath(str, Enum):
    """Which evaluation tier produced a signal."""

    PRIMARY = "primary"
    INSUFFICIENT_DATA = "insufficient_data"  # fewer candles than required
    COMPUTATION_FAILURE = "computation_failure"  # indicator gave no usable value


def clamp_confidence(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp a confidence into [low, high]; NaN maps to ``low``."""
    value = float(value)
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def signal_time(candles: Sequence[Candle]) -> datetime:
    """Timestamp a signal by the last evaluated candle."""
    if candles:
        return candles[-1].open_time
    return datetime.now(timezone.utc)


class StrategySignal(BaseModel):
    """Directional signal emitted by a single strategy."""

    model_config = ConfigDict(frozen=True)

    direction: Direction
    confidence: float
    reason: str
    strategy_name: str
    timestamp: datetime
    path: SignalPath = SignalPath.PRIMARY

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_confidence(value)

    @property
    def is_fallback(self) -> bool:
        """True when a degraded-data heuristic produced this signal."""
        return self.path != SignalPath.PRIMARY


def empty_vote_breakdown() -> dict[str, int]:
    return {d.vote_key: 0 for d in Direction}


class EnsembleSignal(BaseModel):
    """Combined decision produced from multiple strategy signals."""

    model_config = ConfigDict(frozen=True)

    direction: Direction
    confidence: float
    reason: str
    contributing_strategies: list[str] = Field(default_factory=list)
    vote_breakdown: dict[str, int] = Field(default_factory=empty_vote_breakdown)
    timestamp: datetime
    policy: str = ""
    signals: list[StrategySignal] = Field(default_factory=list)
    regime: MarketRegime | None = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_confidence(value)


# Name used by execution layers for the ensemble output.
StrategyOutcome = EnsembleSignal
