"""Market regime classification model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class RegimeKind(str, Enum):
    TRENDING = "trending"
    RANGING = "ranging"
    VOLATILE = "volatile"


class TrendDirection(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"


class MarketRegime(BaseModel):
    """Qualitative market condition derived from recent candles.

    ``direction`` is set for trending regimes only. ``volatility``, ``slope``
    and ``strength`` are the measurements the classification was based on.
    """

    model_config = ConfigDict(frozen=True)

    kind: RegimeKind
    direction: TrendDirection | None = None
    volatility: float = 0.0
    slope: float = 0.0
    strength: float = 0.0

    @model_validator(mode="after")
    def _check_direction(self):
        if (self.kind == RegimeKind.TRENDING) != (self.direction is not None):
            raise ValueError("direction is required for trending regimes only")
        return self

    @classmethod
    def trending(cls, direction: TrendDirection, **metrics: float) -> MarketRegime:
        return cls(kind=RegimeKind.TRENDING, direction=direction, **metrics)

    @classmethod
    def ranging(cls, **metrics: float) -> MarketRegime:
        return cls(kind=RegimeKind.RANGING, **metrics)

    @classmethod
    def volatile(cls, **metrics: float) -> MarketRegime:
        return cls(kind=RegimeKind.VOLATILE, **metrics)

    @property
    def is_trending(self) -> bool:
        return self.kind == RegimeKind.TRENDING

    def __str__(self) -> str:
        if self.direction is not None:
            return f"{self.kind.value}({self.direction.value})"
        return self.kind.value
