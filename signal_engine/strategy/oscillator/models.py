"""Parameter models for the oscillator and mean-reversion strategies."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

_FROZEN = ConfigDict(frozen=True, strict=True, extra="forbid")


class _Levels(BaseModel):
    """Overbought/oversold pair; oversold must sit below overbought."""

    model_config = _FROZEN

    @model_validator(mode="after")
    def _check_levels(self):
        if self.oversold_level >= self.overbought_level:
            raise ValueError("oversold_level must be below overbought_level")
        return self


class RsiParams(_Levels):
    """Parameters for the RSI strategy."""

    period: int = Field(14, ge=2, le=50)
    overbought_level: float = Field(70.0, ge=50.0, le=95.0)
    oversold_level: float = Field(30.0, ge=5.0, le=50.0)


class MeanReversionParams(BaseModel):
    """Parameters for the Bollinger mean-reversion strategy."""

    model_config = _FROZEN

    period: int = Field(20, ge=10, le=50)
    num_std: float = Field(2.0, ge=1.0, le=3.0)


class BollingerBandsParams(BaseModel):
    """Parameters for the Bollinger band-touch strategy."""

    model_config = _FROZEN

    period: int = Field(20, ge=5, le=100)
    num_std: float = Field(2.0, ge=0.5, le=4.0)


class WilliamsRParams(_Levels):
    """Parameters for the Williams %R strategy (levels are negative)."""

    period: int = Field(14, ge=5, le=50)
    overbought_level: float = Field(-20.0, ge=-50.0, le=-10.0)
    oversold_level: float = Field(-80.0, ge=-95.0, le=-50.0)


class StochasticParams(_Levels):
    """Parameters for the Stochastic %K/%D strategy."""

    k_period: int = Field(14, ge=5, le=50)
    d_period: int = Field(3, ge=1, le=20)
    overbought_level: float = Field(80.0, ge=70.0, le=95.0)
    oversold_level: float = Field(20.0, ge=5.0, le=30.0)
