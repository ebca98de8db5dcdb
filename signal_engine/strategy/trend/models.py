"""Parameter models for the trend-following strategies."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

_FROZEN = ConfigDict(frozen=True, strict=True, extra="forbid")


class EmaCrossoverParams(BaseModel):
    """Parameters for the EMA crossover strategy."""

    model_config = _FROZEN

    fast_period: int = Field(9, ge=2, le=50)
    slow_period: int = Field(21, ge=5, le=200)

    @model_validator(mode="after")
    def _check_periods(self):
        if self.fast_period >= self.slow_period:
            raise ValueError("fast_period must be below slow_period")
        return self


class MacdParams(BaseModel):
    """Parameters for the MACD crossover strategy."""

    model_config = _FROZEN

    fast_period: int = Field(12, ge=2, le=50)
    slow_period: int = Field(26, ge=5, le=100)
    signal_period: int = Field(9, ge=1, le=20)

    @model_validator(mode="after")
    def _check_periods(self):
        if self.fast_period >= self.slow_period:
            raise ValueError("fast_period must be below slow_period")
        return self


class IchimokuParams(BaseModel):
    """Parameters for the Ichimoku cloud strategy."""

    model_config = _FROZEN

    tenkan_period: int = Field(9, ge=3, le=20)
    kijun_period: int = Field(26, ge=10, le=50)
    senkou_b_period: int = Field(52, ge=20, le=100)
    displacement: int = Field(26, ge=10, le=50)

    @model_validator(mode="after")
    def _check_periods(self):
        if not self.tenkan_period < self.kijun_period <= self.senkou_b_period:
            raise ValueError(
                "periods must satisfy tenkan < kijun <= senkou_b"
            )
        return self


class ParabolicSarParams(BaseModel):
    """Parameters for the Parabolic SAR strategy."""

    model_config = _FROZEN

    acceleration: float = Field(0.02, ge=0.01, le=0.1)
    max_acceleration: float = Field(0.2, ge=0.1, le=0.5)

    # Primary path needs a fixed amount of history regardless of the factors
    min_candles: int = Field(20, ge=5, le=200)

    @model_validator(mode="after")
    def _check_acceleration(self):
        if self.acceleration > self.max_acceleration:
            raise ValueError("acceleration must not exceed max_acceleration")
        return self


class SwingTradingParams(BaseModel):
    """Parameters for the swing-trading composite strategy."""

    model_config = _FROZEN

    sma_fast_period: int = Field(20, ge=10, le=30)
    sma_slow_period: int = Field(50, ge=30, le=100)
    rsi_period: int = Field(14, ge=10, le=25)
    macd_fast_period: int = Field(12, ge=2, le=50)
    macd_slow_period: int = Field(26, ge=5, le=100)
    macd_signal_period: int = Field(9, ge=1, le=20)
    support_resistance_period: int = Field(50, ge=30, le=100)
    # Max distance from a support/resistance level, as a fraction of price
    level_tolerance: float = Field(0.01, gt=0.0, le=0.05)

    @model_validator(mode="after")
    def _check_periods(self):
        if self.sma_fast_period >= self.sma_slow_period:
            raise ValueError("sma_fast_period must be below sma_slow_period")
        if self.macd_fast_period >= self.macd_slow_period:
            raise ValueError("macd_fast_period must be below macd_slow_period")
        return self


class AdxTrendParams(BaseModel):
    """Parameters for the ADX trend-strength strategy."""

    model_config = _FROZEN

    period: int = Field(14, ge=5, le=50)
    trend_threshold: float = Field(25.0, ge=15.0, le=35.0)
    strong_trend_threshold: float = Field(40.0, ge=30.0, le=60.0)

    @model_validator(mode="after")
    def _check_thresholds(self):
        if self.trend_threshold >= self.strong_trend_threshold:
            raise ValueError("trend_threshold must be below strong_trend_threshold")
        return self
