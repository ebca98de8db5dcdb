"""Technical indicators for signal generation.

Every function is pure and returns a compact ``list[float]`` series: no NaN
padding, the last element lines up with the last input, and the result is
empty when there is not enough history for a single value.
"""

from typing import NamedTuple, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view


class MACDResult(NamedTuple):
    macd: list[float]
    signal: list[float]
    histogram: list[float]


class BollingerBands(NamedTuple):
    middle: list[float]
    upper: list[float]
    lower: list[float]


class IchimokuLines(NamedTuple):
    tenkan: list[float]
    kijun: list[float]
    senkou_a: list[float]
    senkou_b: list[float]
    chikou: list[float]


class StochasticResult(NamedTuple):
    k: list[float]
    d: list[float]


class LinearTrend(NamedTuple):
    slope: float
    intercept: float
    r_squared: float


class ADXResult(NamedTuple):
    adx: list[float]
    plus_di: list[float]
    minus_di: list[float]


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def _windows(values: Sequence[float], period: int) -> np.ndarray | None:
    arr = _as_array(values)
    if period <= 0 or len(arr) < period:
        return None
    return sliding_window_view(arr, period)


# =============================================================================
# Moving averages
# =============================================================================

def sma(values: Sequence[float], period: int) -> list[float]:
    """Calculate the simple moving average over a trailing window.

    Args:
        values: Input series.
        period: Window length.

    Returns:
        One mean per complete window, empty if ``len(values) < period``.
    """
    windows = _windows(values, period)
    if windows is None:
        return []
    return windows.mean(axis=1).tolist()


def ema(values: Sequence[float], period: int) -> list[float]:
    """Calculate the exponential moving average.

    The first value is the SMA of the first ``period`` inputs; each later value
    is ``(value - prev) * 2 / (period + 1) + prev``.

    Args:
        values: Input series.
        period: EMA period.

    Returns:
        ``len(values) - period + 1`` values, empty if history is too short.
    """
    arr = _as_array(values)
    if period <= 0 or len(arr) < period:
        return []

    multiplier = 2.0 / (period + 1)
    result = np.empty(len(arr) - period + 1, dtype=np.float64)
    result[0] = arr[:period].mean()
    for i, value in enumerate(arr[period:], start=1):
        result[i] = (value - result[i - 1]) * multiplier + result[i - 1]
    return result.tolist()


# =============================================================================
# Oscillators
# =============================================================================

def rsi(closes: Sequence[float], period: int = 14) -> list[float]:
    """Calculate the Relative Strength Index with Wilder smoothing.

    When the average loss is zero the RSI is 100, a flat series included.
    Points whose averages are not finite are dropped, as are
    values outside ``[0, 100]``.

    Args:
        closes: Close prices.
        period: Smoothing period.

    Returns:
        RSI values, empty when ``len(closes) <= period``.
    """
    arr = _as_array(closes)
    if period <= 0 or len(arr) <= period:
        return []

    deltas = np.diff(arr)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = gains[:period].mean()
    avg_loss = losses[:period].mean()
    if not (np.isfinite(avg_gain) and np.isfinite(avg_loss)):
        return []

    def _point(gain: float, loss: float) -> float:
        if loss == 0:
            return 100.0
        return 100.0 - 100.0 / (1.0 + gain / loss)

    result = [_point(avg_gain, avg_loss)]
    for gain, loss in zip(gains[period:], losses[period:]):
        next_gain = (avg_gain * (period - 1) + gain) / period
        next_loss = (avg_loss * (period - 1) + loss) / period
        if not (np.isfinite(next_gain) and np.isfinite(next_loss)):
            continue
        avg_gain, avg_loss = next_gain, next_loss
        result.append(_point(avg_gain, avg_loss))

    return [float(v) for v in result if np.isfinite(v) and 0.0 <= v <= 100.0]


def stochastic(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    k_period: int = 14,
    d_period: int = 3,
) -> StochasticResult:
    """Calculate Stochastic %K and %D.

    %K compares each close with the high/low range of the trailing
    ``k_period`` candles (current candle included); a zero range gives 50.
    %D is the SMA of %K over ``d_period``.
    """
    highest_high = highest(highs, k_period)
    lowest_low = lowest(lows, k_period)
    if not highest_high:
        return StochasticResult([], [])

    hh = _as_array(highest_high)
    ll = _as_array(lowest_low)
    close = _as_array(closes)[-len(hh):]
    span = hh - ll
    with np.errstate(divide="ignore", invalid="ignore"):
        k = np.where(span > 0, (close - ll) / span * 100.0, 50.0)

    k_values = k.tolist()
    return StochasticResult(k_values, sma(k_values, d_period))


def williams_r(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> list[float]:
    """Calculate Williams %R in ``[-100, 0]``; a zero range gives -50."""
    highest_high = highest(highs, period)
    lowest_low = lowest(lows, period)
    if not highest_high:
        return []

    hh = _as_array(highest_high)
    ll = _as_array(lowest_low)
    close = _as_array(closes)[-len(hh):]
    span = hh - ll
    with np.errstate(divide="ignore", invalid="ignore"):
        values = np.where(span > 0, (hh - close) / span * -100.0, -50.0)
    return values.tolist()


# =============================================================================
# Volatility
# =============================================================================

def true_range(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> list[float]:
    """Calculate True Range from the second candle onward.

    ``TR = max(high - low, |high - prev_close|, |low - prev_close|)``
    """
    high = _as_array(highs)
    low = _as_array(lows)
    close = _as_array(closes)
    if len(close) < 2:
        return []

    prev_close = close[:-1]
    ranges = np.stack(
        [
            high[1:] - low[1:],
            np.abs(high[1:] - prev_close),
            np.abs(low[1:] - prev_close),
        ]
    )
    return ranges.max(axis=0).tolist()


def atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> list[float]:
    """Calculate Average True Range (Wilder smoothing).

    Args:
        highs: High prices.
        lows: Low prices.
        closes: Close prices.
        period: ATR period.

    Returns:
        ATR values; the first is the mean of the first ``period`` true ranges.
    """
    tr = true_range(highs, lows, closes)
    if period <= 0 or len(tr) < period:
        return []

    result = [sum(tr[:period]) / period]
    for value in tr[period:]:
        result.append((result[-1] * (period - 1) + value) / period)
    return result


def bollinger_bands(
    closes: Sequence[float],
    period: int = 20,
    num_std: float = 2.0,
) -> BollingerBands:
    """Calculate Bollinger Bands (SMA +/- k population standard deviations)."""
    windows = _windows(closes, period)
    if windows is None:
        return BollingerBands([], [], [])

    middle = windows.mean(axis=1)
    std = windows.std(axis=1)
    return BollingerBands(
        middle.tolist(),
        (middle + num_std * std).tolist(),
        (middle - num_std * std).tolist(),
    )


def returns_volatility(closes: Sequence[float]) -> float:
    """Population standard deviation of simple close-to-close returns."""
    arr = _as_array(closes)
    if len(arr) < 2:
        return 0.0

    with np.errstate(divide="ignore", invalid="ignore"):
        returns = np.diff(arr) / arr[:-1]
    returns = returns[np.isfinite(returns)]
    if len(returns) == 0:
        return 0.0
    return float(returns.std())


# =============================================================================
# Price extremes
# =============================================================================

def highest(values: Sequence[float], period: int) -> list[float]:
    """Calculate the rolling highest value over ``period``."""
    windows = _windows(values, period)
    if windows is None:
        return []
    return windows.max(axis=1).tolist()


def lowest(values: Sequence[float], period: int) -> list[float]:
    """Calculate the rolling lowest value over ``period``."""
    windows = _windows(values, period)
    if windows is None:
        return []
    return windows.min(axis=1).tolist()


# =============================================================================
# Trend
# =============================================================================

def macd(
    closes: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """Calculate MACD, its signal line and histogram.

    The MACD line is ``EMA(fast) - EMA(slow)`` aligned on the last input; the
    signal line is the EMA of the MACD line.
    """
    fast = ema(closes, fast_period)
    slow = ema(closes, slow_period)
    if not fast or not slow:
        return MACDResult([], [], [])

    n = min(len(fast), len(slow))
    macd_line = (_as_array(fast[-n:]) - _as_array(slow[-n:])).tolist()
    signal_line = ema(macd_line, signal_period)
    if not signal_line:
        return MACDResult(macd_line, [], [])

    histogram = (
        _as_array(macd_line[-len(signal_line):]) - _as_array(signal_line)
    ).tolist()
    return MACDResult(macd_line, signal_line, histogram)


def _midpoint(highs: Sequence[float], lows: Sequence[float], period: int) -> list[float]:
    hh = highest(highs, period)
    ll = lowest(lows, period)
    if not hh:
        return []
    return ((_as_array(hh) + _as_array(ll)) / 2.0).tolist()


def ichimoku(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    tenkan_period: int = 9,
    kijun_period: int = 26,
    senkou_b_period: int = 52,
    displacement: int = 26,
) -> IchimokuLines:
    """Calculate the Ichimoku lines.

    Tenkan, Kijun and Senkou B are high/low midpoints over their periods.
    Senkou A averages Tenkan and Kijun from the later of their start indices.
    Chikou is the close series shifted back by ``displacement``.
    """
    tenkan = _midpoint(highs, lows, tenkan_period)
    kijun = _midpoint(highs, lows, kijun_period)

    senkou_a: list[float] = []
    n = min(len(tenkan), len(kijun))
    if n:
        senkou_a = ((_as_array(tenkan[-n:]) + _as_array(kijun[-n:])) / 2.0).tolist()

    close = _as_array(closes)
    chikou = close[displacement:].tolist() if displacement >= 0 else []

    return IchimokuLines(
        tenkan=tenkan,
        kijun=kijun,
        senkou_a=senkou_a,
        senkou_b=_midpoint(highs, lows, senkou_b_period),
        chikou=chikou,
    )


def parabolic_sar(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    acceleration: float = 0.02,
    max_acceleration: float = 0.2,
) -> list[float]:
    """Calculate Parabolic SAR with a forward scan.

    The scan starts at the first close, trending in the direction of the first
    close-to-close move. The acceleration factor grows by ``acceleration``
    (capped at ``max_acceleration``) on every new extreme point. SAR may not
    cross the prior two lows in an uptrend (highs in a downtrend). A reversal
    flips the trend, moves SAR to the extreme point and resets acceleration.

    Returns:
        One SAR value per candle, empty for fewer than two candles.
    """
    high = _as_array(highs)
    low = _as_array(lows)
    close = _as_array(closes)
    n = len(close)
    if n < 2:
        return []

    uptrend = close[1] > close[0]
    extreme = high[1] if uptrend else low[1]
    af = acceleration
    sar = float(close[0])
    result = [sar]

    for i in range(1, n):
        sar = sar + af * (extreme - sar)

        reversal = low[i] <= sar if uptrend else high[i] >= sar
        if reversal:
            uptrend = not uptrend
            sar = float(extreme)
            extreme = high[i] if uptrend else low[i]
            af = acceleration
        elif uptrend:
            if high[i] > extreme:
                extreme = high[i]
                af = min(af + acceleration, max_acceleration)
            sar = min(sar, low[i - 1], low[i - 2]) if i >= 2 else min(sar, low[i - 1])
        else:
            if low[i] < extreme:
                extreme = low[i]
                af = min(af + acceleration, max_acceleration)
            sar = max(sar, high[i - 1], high[i - 2]) if i >= 2 else max(sar, high[i - 1])

        result.append(float(sar))

    return result


def linear_regression(
    values: Sequence[float],
    period: int | None = None,
) -> LinearTrend | None:
    """Fit a least-squares line over the trailing ``period`` values.

    Args:
        values: Input series.
        period: Window length; the whole series when None.

    Returns:
        Slope, intercept (at the window start) and R-squared, or None with
        fewer than two points. R-squared is 0 for a constant window.
    """
    arr = _as_array(values)
    if period is not None:
        if period < 2 or len(arr) < period:
            return None
        arr = arr[-period:]
    if len(arr) < 2 or not np.all(np.isfinite(arr)):
        return None

    x = np.arange(len(arr), dtype=np.float64)
    x_mean = x.mean()
    y_mean = arr.mean()
    slope = float(((x - x_mean) * (arr - y_mean)).sum() / ((x - x_mean) ** 2).sum())
    intercept = float(y_mean - slope * x_mean)

    ss_tot = float(((arr - y_mean) ** 2).sum())
    ss_res = float(((arr - (slope * x + intercept)) ** 2).sum())
    r_squared = 1.0 - ss_res / ss_tot if ss_tot > 0 else 0.0
    return LinearTrend(slope, intercept, max(0.0, min(1.0, r_squared)))


def adx(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> ADXResult:
    """Calculate ADX with +DI/-DI using Wilder smoothing.

    Smoothed TR/DM start as the sum of the first ``period`` values and then
    follow ``prev - prev / period + current``. ADX starts as the mean of the
    first ``period`` DX values and is Wilder-smoothed afterwards.
    """
    high = _as_array(highs)
    low = _as_array(lows)
    tr = _as_array(true_range(highs, lows, closes))
    if period <= 0 or len(tr) < period:
        return ADXResult([], [], [])

    up_move = high[1:] - high[:-1]
    down_move = low[:-1] - low[1:]
    plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
    minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)

    def _smooth(series: np.ndarray) -> np.ndarray:
        out = np.empty(len(series) - period + 1, dtype=np.float64)
        out[0] = series[:period].sum()
        for i, value in enumerate(series[period:], start=1):
            out[i] = out[i - 1] - out[i - 1] / period + value
        return out

    str_ = _smooth(tr)
    with np.errstate(divide="ignore", invalid="ignore"):
        plus_di = np.where(str_ > 0, _smooth(plus_dm) / str_ * 100.0, 0.0)
        minus_di = np.where(str_ > 0, _smooth(minus_dm) / str_ * 100.0, 0.0)
        di_sum = plus_di + minus_di
        dx = np.where(di_sum > 0, np.abs(plus_di - minus_di) / di_sum * 100.0, 0.0)

    if len(dx) < period:
        return ADXResult([], plus_di.tolist(), minus_di.tolist())

    adx_values = [float(dx[:period].mean())]
    for value in dx[period:]:
        adx_values.append((adx_values[-1] * (period - 1) + value) / period)
    return ADXResult(adx_values, plus_di.tolist(), minus_di.tolist())


# =============================================================================
# Volume
# =============================================================================

def vwap(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    volumes: Sequence[float],
) -> list[float]:
    """Calculate cumulative VWAP from typical prices.

    Where no volume has traded yet the typical price itself is returned.
    """
    high = _as_array(highs)
    low = _as_array(lows)
    close = _as_array(closes)
    volume = _as_array(volumes)
    if len(close) == 0:
        return []

    typical = (high + low + close) / 3.0
    cum_volume = np.cumsum(volume)
    cum_pv = np.cumsum(typical * volume)
    with np.errstate(divide="ignore", invalid="ignore"):
        values = np.where(cum_volume > 0, cum_pv / cum_volume, typical)
    return values.tolist()
