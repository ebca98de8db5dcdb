"""Parameter models for the breakout and volatility strategies."""

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

_FROZEN = ConfigDict(frozen=True, strict=True, extra="forbid")


class AtrBreakoutParams(BaseModel):
    """Parameters for the ATR breakout strategy."""

    model_config = _FROZEN

    atr_period: int = Field(14, ge=5, le=30)
    multiplier: float = Field(1.5, ge=0.5, le=3.0)


class GridTradingParams(BaseModel):
    """Parameters for the grid trading strategy."""

    model_config = _FROZEN

    grid_levels: int = Field(10, ge=4, le=20)
    # Distance between levels as a fraction of the centre price
    grid_spacing: float = Field(0.01, ge=0.005, le=0.05)
    volatility_period: int = Field(20, ge=10, le=50)
    # Return volatility above which the grid pauses
    max_volatility: float = Field(0.03, ge=0.01, le=0.1)
    # Candles used to anchor the grid centre
    range_period: int = Field(50, ge=20, le=100)


class GridLevels(NamedTuple):
    """Grid anchored on ``center``; buy levels descend, sell levels ascend."""

    center: float
    buy_levels: tuple[float, ...]
    sell_levels: tuple[float, ...]
