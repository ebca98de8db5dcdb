"""Candle (OHLCV) data models."""

from datetime import datetime
from typing import NamedTuple, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Candle(BaseModel):
    """One OHLCV sample for a fixed time bucket."""

    model_config = ConfigDict(frozen=True)

    open_time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def is_bullish(self) -> bool:
        """Check if this is a bullish (green) candle."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """Check if this is a bearish (red) candle."""
        return self.close < self.open

    @property
    def body_size(self) -> float:
        """Get the absolute size of the candle body."""
        return abs(self.close - self.open)

    @property
    def range_size(self) -> float:
        """Get the full range (high - low) of the candle."""
        return self.high - self.low


class CandleSeries(BaseModel):
    """Time-ordered candles for one symbol/timeframe.

    Candles are kept strictly ascending by ``open_time``. ``add`` replaces the
    last candle when it shares a timestamp and ignores older candles, so a
    live feed can be merged in without re-sorting.
    """

    symbol: str = ""
    timeframe: str = ""
    candles: list[Candle] = Field(default_factory=list)
    max_size: int | None = None

    @model_validator(mode="after")
    def _check_order(self):
        for prev, curr in zip(self.candles, self.candles[1:]):
            if curr.open_time <= prev.open_time:
                raise ValueError(
                    f"candles must be strictly ascending by open_time "
                    f"({prev.open_time} followed by {curr.open_time})"
                )
        if self.max_size is not None and len(self.candles) > self.max_size:
            self.candles = self.candles[-self.max_size :]
        return self

    def add(self, candle: Candle) -> None:
        """Add a candle to the series, maintaining order and max size."""
        if self.candles and candle.open_time <= self.candles[-1].open_time:
            if candle.open_time == self.candles[-1].open_time:
                self.candles[-1] = candle
            return

        self.candles.append(candle)
        if self.max_size is not None and len(self.candles) > self.max_size:
            self.candles = self.candles[-self.max_size :]

    def get_closes(self) -> list[float]:
        """Get list of close prices."""
        return [c.close for c in self.candles]

    def get_highs(self) -> list[float]:
        """Get list of high prices."""
        return [c.high for c in self.candles]

    def get_lows(self) -> list[float]:
        """Get list of low prices."""
        return [c.low for c in self.candles]

    def get_volumes(self) -> list[float]:
        """Get list of volumes."""
        return [c.volume for c in self.candles]

    def __len__(self) -> int:
        return len(self.candles)


class CandleArrays(NamedTuple):
    """Column view of a candle sequence as float64 arrays."""

    open: np.ndarray
    high: np.ndarray
    low: np.ndarray
    close: np.ndarray
    volume: np.ndarray


def to_arrays(candles: Sequence[Candle]) -> CandleArrays:
    """Split a candle sequence into numpy columns."""
    if not candles:
        empty = np.empty(0, dtype=np.float64)
        return CandleArrays(empty, empty, empty, empty, empty)

    data = np.array(
        [(c.open, c.high, c.low, c.close, c.volume) for c in candles],
        dtype=np.float64,
    )
    return CandleArrays(data[:, 0], data[:, 1], data[:, 2], data[:, 3], data[:, 4])
