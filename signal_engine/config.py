"""Engine configuration.

Two layers:

- ``EngineSettings``: environment variables (``SIGNAL_ENGINE_*``, optionally
  from ``.env``) for the ensemble knobs and the config file location.
- ``EngineConfig``: an optional YAML file with ensemble, regime and
  per-strategy sections::

      ensemble:
        policy: weighted
        min_candles: 60
      regime:
        volatility_threshold: 0.03
      strategies:
        rsi:
          weight: 1.5
          parameters: {period: 10}
        grid_trading:
          enabled: false

Values set in the file win over the environment.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from signal_engine.ensemble import EnsembleConfig, EnsemblePolicy
from signal_engine.regime import RegimeConfig

logger = logging.getLogger(__name__)

_DEFAULT_PATH = Path("signal_engine.yaml")

# EngineSettings fields that map onto EnsembleConfig
_ENSEMBLE_FIELDS = (
    "policy",
    "min_candles",
    "confidence_min",
    "confidence_max",
    "clamp_weighted_confidence",
)


class EngineSettings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SIGNAL_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Ensemble
    policy: EnsemblePolicy = EnsemblePolicy.VOTE
    min_candles: int = 50
    confidence_min: float = 0.55
    confidence_max: float = 0.90
    clamp_weighted_confidence: bool = False

    # YAML engine config
    config_file: Path | None = None


@lru_cache
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    return EngineSettings()


class StrategyEntry(BaseModel):
    """Per-strategy overrides; unset fields leave the strategy unchanged."""

    enabled: bool | None = None
    weight: float | None = None
    parameters: dict[str, Any] = {}


class EngineConfig(BaseModel):
    """Top-level engine configuration."""

    ensemble: EnsembleConfig = EnsembleConfig()
    regime: RegimeConfig = RegimeConfig()
    strategies: dict[str, StrategyEntry] = {}


def _ensemble_overrides(settings: EngineSettings) -> dict[str, Any]:
    """Ensemble values set explicitly, by the caller or the environment.

    Runs after the ``.env`` beside the config file has been loaded, so its
    values count as environment values. Fields the caller set win.
    """
    environment = EngineSettings(_env_file=None)
    overrides: dict[str, Any] = {}
    for source in (settings, environment):
        for field in _ENSEMBLE_FIELDS:
            if field in source.model_fields_set and field not in overrides:
                overrides[field] = getattr(source, field)
    return overrides


def load_engine_config(
    path: Path | None = None,
    settings: EngineSettings | None = None,
) -> EngineConfig:
    """Load engine config from a YAML file.

    Falls back to defaults (plus any environment overrides) if the file
    doesn't exist. A ``.env`` beside the file is loaded into ``os.environ``
    first, without replacing variables that are already set.

    Args:
        path: YAML file; defaults to ``settings.config_file`` and then
            ``signal_engine.yaml`` in the working directory.
        settings: Environment settings; defaults to ``get_settings()``.
    """
    settings = settings or get_settings()
    config_path = Path(path or settings.config_file or _DEFAULT_PATH)

    load_dotenv(config_path.parent / ".env", override=False)

    raw: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
    else:
        logger.info("No engine config found at %s, using defaults", config_path)

    ensemble = dict(raw.get("ensemble") or {})
    for field, value in _ensemble_overrides(settings).items():
        ensemble.setdefault(field, value)
    raw["ensemble"] = ensemble

    config = EngineConfig(**raw)
    logger.info(
        "Loaded engine config: policy=%s, min_candles=%d, %d strategy overrides",
        config.ensemble.policy.value,
        config.ensemble.min_candles,
        len(config.strategies),
    )
    return config
