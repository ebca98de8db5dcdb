"""Signal engine facade.

Owns a list of strategy instances, an ensemble aggregator and a regime
detector. Each engine has its own strategy instances, so several engines
(e.g. one per symbol) never share state.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from signal_engine.config import EngineConfig
from signal_engine.ensemble import EnsembleAggregator
from signal_engine.models.candle import Candle, CandleSeries
from signal_engine.models.regime import MarketRegime
from signal_engine.models.signal import EnsembleSignal, StrategySignal
from signal_engine.regime import RegimeDetector
from signal_engine.strategy import BaseStrategy, default_strategies

logger = logging.getLogger(__name__)


def _candle_list(candles: Sequence[Candle] | CandleSeries) -> list[Candle]:
    if isinstance(candles, CandleSeries):
        return list(candles.candles)
    return list(candles)


class SignalEngine:
    """Evaluate strategies over a candle window and combine their signals.

    Usage::

        engine = SignalEngine()
        engine.update_strategy_weight("rsi", 1.5)
        result = engine.evaluate(candles)
        print(result.direction, result.confidence, result.regime)
    """

    def __init__(
        self,
        strategies: Sequence[BaseStrategy] | None = None,
        config: EngineConfig | None = None,
    ):
        self._strategies: list[BaseStrategy] = (
            list(strategies) if strategies is not None else default_strategies()
        )
        names = [s.name for s in self._strategies]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate strategy names: {names}")

        self.config = config or EngineConfig()
        self.aggregator = EnsembleAggregator(self.config.ensemble)
        self.detector = RegimeDetector(self.config.regime)
        if config is not None:
            self.apply_config(config)

    # ------------------------------------------------------------------
    # Strategy management
    # ------------------------------------------------------------------

    @property
    def strategies(self) -> list[BaseStrategy]:
        """All strategies in evaluation order."""
        return list(self._strategies)

    def active_strategies(self) -> list[BaseStrategy]:
        return [s for s in self._strategies if s.enabled]

    def strategy(self, name: str) -> BaseStrategy:
        """Look up a strategy by name.

        Raises:
            KeyError: If no strategy with that name is loaded.
        """
        for s in self._strategies:
            if s.name == name:
                return s
        available = ", ".join(s.name for s in self._strategies)
        raise KeyError(f"Unknown strategy '{name}'. Available: {available}")

    def enable_strategy(self, name: str) -> None:
        self.strategy(name).enabled = True
        logger.info("Enabled strategy %s", name)

    def disable_strategy(self, name: str) -> None:
        self.strategy(name).enabled = False
        logger.info("Disabled strategy %s", name)

    def update_strategy_weight(self, name: str, weight: float) -> bool:
        """Set a strategy's ensemble weight; False if outside [0, 2]."""
        applied = self.strategy(name).set_weight(weight)
        if applied:
            logger.info("Strategy %s weight set to %s", name, weight)
        return applied

    def update_strategy_parameter(self, name: str, key: str, value: Any) -> bool:
        """Update one parameter; False if the key or value is rejected."""
        return self.strategy(name).update_parameter(key, value)

    def apply_config(self, config: EngineConfig) -> None:
        """Apply ensemble, regime and per-strategy settings.

        Invalid weights or parameters are rejected per strategy and logged.

        Raises:
            KeyError: If the config names a strategy that is not loaded.
        """
        for name in config.strategies:
            self.strategy(name)

        self.config = config
        self.aggregator = EnsembleAggregator(config.ensemble)
        self.detector = RegimeDetector(config.regime)

        for name, entry in config.strategies.items():
            strategy = self.strategy(name)
            if entry.enabled is not None:
                strategy.enabled = entry.enabled
            if entry.weight is not None:
                strategy.set_weight(entry.weight)
            if entry.parameters:
                strategy.update_parameters(**entry.parameters)

        logger.info(
            "Applied engine config: %d/%d strategies active",
            len(self.active_strategies()), len(self._strategies),
        )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def strategy_signals(
        self, candles: Sequence[Candle] | CandleSeries
    ) -> list[StrategySignal]:
        """Signals of the enabled strategies, in evaluation order."""
        window = _candle_list(candles)
        return [s.signal(window) for s in self.active_strategies()]

    def detect_regime(self, candles: Sequence[Candle] | CandleSeries) -> MarketRegime:
        return self.detector.detect(_candle_list(candles))

    def recommended_strategies(
        self, candles: Sequence[Candle] | CandleSeries
    ) -> list[str]:
        """Strategy names suited to the current regime (advisory only)."""
        return self.detector.recommend_strategies(self.detect_regime(candles))

    def evaluate(self, candles: Sequence[Candle] | CandleSeries) -> EnsembleSignal:
        """Run the ensemble over ``candles`` and attach the detected regime."""
        window = _candle_list(candles)
        regime = self.detector.detect(window)
        return self.aggregator.aggregate(self._strategies, window, regime=regime)
