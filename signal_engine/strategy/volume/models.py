"""Parameter models for the volume-driven strategies."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

_FROZEN = ConfigDict(frozen=True, strict=True, extra="forbid")


class VolumeBreakoutParams(BaseModel):
    """Parameters for the volume breakout strategy."""

    model_config = _FROZEN

    volume_period: int = Field(20, ge=5, le=50)
    # Spike threshold as a multiple of the average volume
    volume_threshold: float = Field(1.5, ge=1.2, le=3.0)
    # Minimum close-to-close move counted as significant
    price_change_threshold: float = Field(0.02, ge=0.005, le=0.05)


class ScalpingParams(BaseModel):
    """Parameters for the scalping strategy."""

    model_config = _FROZEN

    fast_ema_period: int = Field(5, ge=3, le=15)
    slow_ema_period: int = Field(13, ge=5, le=30)
    rsi_period: int = Field(7, ge=5, le=20)
    volume_multiplier: float = Field(1.5, ge=1.2, le=3.0)

    @model_validator(mode="after")
    def _check_periods(self):
        if self.fast_ema_period >= self.slow_ema_period:
            raise ValueError("fast_ema_period must be below slow_ema_period")
        return self
