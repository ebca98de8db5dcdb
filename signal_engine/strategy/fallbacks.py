"""Cheap price proxies used when a strategy cannot run its primary math.

Each proxy returns a ``Proxy`` (direction, confidence, detail). Strategies
pick the proxies that suit their family and cap the confidence through
``BaseStrategy._fallback``.
"""

from typing import NamedTuple, Sequence

import numpy as np

from signal_engine.models.signal import Direction

FALLBACK_CONFIDENCE_CAP = 0.40


class Proxy(NamedTuple):
    direction: Direction
    confidence: float
    detail: str


def _direction(value: float, threshold: float) -> Direction:
    if value > threshold:
        return Direction.BUY
    if value < -threshold:
        return Direction.SELL
    return Direction.HOLD


def _finite(values: Sequence[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    return arr[np.isfinite(arr)]


def momentum(
    closes: Sequence[float],
    lookback: int = 1,
    threshold: float = 0.01,
    base: float = 0.35,
    scale: float = 0.0,
) -> Proxy:
    """Relative change of the close over the last ``lookback`` candles."""
    window = _finite(closes)[-(lookback + 1):]
    if len(window) < 2 or window[0] <= 0:
        return Proxy(Direction.HOLD, base, "no momentum")

    change = float((window[-1] - window[0]) / window[0])
    return Proxy(
        _direction(change, threshold),
        base + abs(change) * scale,
        f"{len(window) - 1}-candle momentum {change:+.2%}",
    )


def price_vs_average(
    closes: Sequence[float],
    threshold: float = 0.0,
    base: float = 0.35,
    scale: float = 0.0,
    revert: bool = False,
) -> Proxy:
    """Position of the last close relative to the mean close.

    With ``revert`` the direction is flipped (mean reversion bias).
    """
    arr = _finite(closes)
    if len(arr) == 0:
        return Proxy(Direction.HOLD, base, "no prices")

    average = float(arr.mean())
    if average <= 0:
        return Proxy(Direction.HOLD, base, "no positive prices")

    deviation = float((arr[-1] - average) / average)
    direction = _direction(deviation, threshold)
    if revert and direction != Direction.HOLD:
        direction = Direction.SELL if direction == Direction.BUY else Direction.BUY
    return Proxy(
        direction,
        base + abs(deviation) * scale,
        f"price {deviation:+.2%} vs average",
    )


def range_position(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    lookback: int | None = None,
    upper: float = 0.7,
    lower: float = 0.3,
    base: float = 0.35,
    follow: bool = False,
) -> Proxy:
    """Position of the last close inside the high/low range (0 = low, 1 = high).

    By default the top of the range is read as a sell and the bottom as a buy;
    ``follow`` inverts that for breakout-style strategies.
    """
    if len(closes) == 0:
        return Proxy(Direction.HOLD, base, "no prices")

    start = -lookback if lookback else 0
    high = float(np.max(highs[start:]))
    low = float(np.min(lows[start:]))
    span = high - low
    position = (closes[-1] - low) / span if span > 0 else 0.5

    if position > upper:
        direction = Direction.BUY if follow else Direction.SELL
    elif position < lower:
        direction = Direction.SELL if follow else Direction.BUY
    else:
        direction = Direction.HOLD
    return Proxy(direction, base, f"range position {position:.2f}")


def volatility(
    closes: Sequence[float],
    lookback: int = 5,
    threshold: float = 0.02,
    base: float = 0.32,
    scale: float = 10.0,
) -> Proxy:
    """Mean absolute close-to-close move relative to the mean price.

    A move above ``threshold`` follows the direction of the window.
    """
    window = _finite(closes)[-lookback:]
    if len(window) < 2:
        return Proxy(Direction.HOLD, base, "no volatility")

    average = float(window.mean())
    moves = float(np.abs(np.diff(window)).mean())
    normalized = moves / average if average > 0 else 0.0
    if normalized > threshold:
        direction = Direction.BUY if window[-1] >= window[0] else Direction.SELL
    else:
        direction = Direction.HOLD
    return Proxy(direction, base + normalized * scale, f"volatility {normalized:.2%}")


def volume_bias(
    closes: Sequence[float],
    volumes: Sequence[float],
    base: float = 0.30,
) -> Proxy:
    """Last candle's price move, trusted only when its volume beats the average."""
    if len(closes) < 2:
        return Proxy(Direction.HOLD, base, "no volume history")

    average = float(np.mean(volumes))
    ratio = volumes[-1] / average if average > 0 else 0.0
    change = (closes[-1] - closes[-2]) / closes[-2] if closes[-2] > 0 else 0.0
    if ratio >= 1.0:
        direction = _direction(change, 0.0)
        confidence = base + min(0.1, (ratio - 1.0) * 0.1)
    else:
        direction = Direction.HOLD
        confidence = base
    return Proxy(direction, confidence, f"volume ratio {ratio:.2f}")
