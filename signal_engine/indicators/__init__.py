"""Technical indicators (pure math, no I/O)."""

from signal_engine.indicators.indicators import (
    ADXResult,
    BollingerBands,
    IchimokuLines,
    LinearTrend,
    MACDResult,
    StochasticResult,
    adx,
    atr,
    bollinger_bands,
    ema,
    highest,
    ichimoku,
    linear_regression,
    lowest,
    macd,
    parabolic_sar,
    returns_volatility,
    rsi,
    sma,
    stochastic,
    true_range,
    vwap,
    williams_r,
)

__all__ = [
    "ADXResult",
    "BollingerBands",
    "IchimokuLines",
    "LinearTrend",
    "MACDResult",
    "StochasticResult",
    "adx",
    "atr",
    "bollinger_bands",
    "ema",
    "highest",
    "ichimoku",
    "linear_regression",
    "lowest",
    "macd",
    "parabolic_sar",
    "returns_volatility",
    "rsi",
    "sma",
    "stochastic",
    "true_range",
    "vwap",
    "williams_r",
]
