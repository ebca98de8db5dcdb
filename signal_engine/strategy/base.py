"""Base class shared by the built-in strategies.

``BaseStrategy`` owns the runtime state every strategy has (enabled flag,
ensemble weight, parameter snapshot) and implements the three-tier
evaluation policy:

1. fewer candles than ``required_candles()``: cheap proxy signal
2. primary indicators give no usable value: second proxy signal
3. otherwise: the primary signal

Parameters live in a frozen pydantic model. Updates build a new snapshot and
swap it in under a lock; ``signal`` reads the snapshot once, so an evaluation
never sees a half-applied update.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from signal_engine.models.candle import Candle, CandleArrays, to_arrays
from signal_engine.models.signal import (
    Direction,
    SignalPath,
    StrategySignal,
    signal_time,
)
from signal_engine.strategy.fallbacks import FALLBACK_CONFIDENCE_CAP, Proxy

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseModel)

MIN_WEIGHT = 0.0
MAX_WEIGHT = 2.0


class BaseStrategy(ABC, Generic[P]):
    """Common state and evaluation flow for concrete strategies.

    Subclasses set ``params_model`` and ``description``, get ``name`` from
    ``@register_strategy`` and implement the four hooks below.
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    params_model: ClassVar[type[BaseModel]]

    def __init__(
        self,
        params: P | None = None,
        *,
        enabled: bool = True,
        weight: float = 1.0,
    ):
        if not MIN_WEIGHT <= weight <= MAX_WEIGHT:
            raise ValueError(
                f"weight must be within [{MIN_WEIGHT}, {MAX_WEIGHT}], got {weight}"
            )
        self._lock = threading.Lock()
        self._params: P = params if params is not None else self.params_model()
        self._enabled = enabled
        self._weight = float(weight)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(enabled={self._enabled}, "
            f"weight={self._weight}, params={self._params!r})"
        )

    # ------------------------------------------------------------------
    # Runtime configuration
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = bool(value)

    @property
    def weight(self) -> float:
        return self._weight

    @weight.setter
    def weight(self, value: float) -> None:
        self.set_weight(value)

    def set_weight(self, value: float) -> bool:
        """Set the ensemble weight; values outside [0, 2] are ignored.

        Returns:
            True if the weight was applied.
        """
        try:
            weight = float(value)
        except (TypeError, ValueError):
            weight = float("nan")
        if not MIN_WEIGHT <= weight <= MAX_WEIGHT:
            logger.warning(
                "Ignoring %s weight %r (valid range [%s, %s])",
                self.name, value, MIN_WEIGHT, MAX_WEIGHT,
            )
            return False
        self._weight = weight
        return True

    @property
    def params(self) -> P:
        """Current immutable parameter snapshot."""
        return self._params

    @property
    def parameters(self) -> dict[str, Any]:
        """Current parameters as a plain dict."""
        return self._params.model_dump()

    def update_parameter(self, key: str, value: Any) -> bool:
        """Update one named parameter.

        Returns:
            True if applied; False for unknown keys or invalid values, in
            which case the previous value stays in place.
        """
        return self.update_parameters(**{key: value})

    def update_parameters(self, **changes: Any) -> bool:
        """Apply several parameter changes at once (all or nothing)."""
        with self._lock:
            current = self._params
            unknown = sorted(set(changes) - set(type(current).model_fields))
            if unknown:
                logger.warning(
                    "Unknown %s parameter(s): %s", self.name, ", ".join(unknown)
                )
                return False
            try:
                updated = type(current).model_validate(
                    {**current.model_dump(), **changes}
                )
            except ValidationError as exc:
                logger.warning(
                    "Rejected %s parameter update %s: %s",
                    self.name, changes, exc.errors(include_url=False),
                )
                return False
            self._params = updated
            self._on_params_changed(updated)

        logger.info("Updated %s parameters: %s", self.name, changes)
        return True

    def _on_params_changed(self, params: P) -> None:
        """Hook called under the lock after a new snapshot is installed."""

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def required_candles(self) -> int:
        return self._required_candles(self._params)

    def signal(self, candles: Sequence[Candle]) -> StrategySignal:
        """Evaluate ``candles`` with one parameter snapshot; never raises."""
        params = self._params
        candles = list(candles)
        data = to_arrays(candles)

        if len(candles) < self._required_candles(params):
            result = self._insufficient_data(candles, data, params)
        else:
            try:
                result = self._evaluate(candles, data, params)
            except (ArithmeticError, ValueError, IndexError) as exc:
                logger.warning("%s computation failed: %s", self.name, exc)
                result = self._computation_failure(candles, data, params)

        logger.debug(
            "%s -> %s conf=%.2f path=%s (%s)",
            self.name, result.direction.value, result.confidence,
            result.path.value, result.reason,
        )
        return result

    @abstractmethod
    def _required_candles(self, params: P) -> int:
        """Minimum candle count for the primary path under ``params``."""

    @abstractmethod
    def _evaluate(
        self, candles: list[Candle], data: CandleArrays, params: P
    ) -> StrategySignal:
        """Primary computation; returns a tier-2 fallback when indicators fail."""

    @abstractmethod
    def _insufficient_data(
        self, candles: list[Candle], data: CandleArrays, params: P
    ) -> StrategySignal:
        """Tier-1 fallback for short histories."""

    @abstractmethod
    def _computation_failure(
        self, candles: list[Candle], data: CandleArrays, params: P
    ) -> StrategySignal:
        """Tier-2 fallback when the primary indicators are unusable."""

    # ------------------------------------------------------------------
    # Signal helpers
    # ------------------------------------------------------------------

    def _signal(
        self,
        candles: Sequence[Candle],
        direction: Direction,
        confidence: float,
        reason: str,
    ) -> StrategySignal:
        return StrategySignal(
            direction=direction,
            confidence=confidence,
            reason=reason,
            strategy_name=self.name,
            timestamp=signal_time(candles),
        )

    def _fallback(
        self,
        candles: Sequence[Candle],
        proxy: Proxy,
        path: SignalPath,
        cap: float = FALLBACK_CONFIDENCE_CAP,
    ) -> StrategySignal:
        if path == SignalPath.INSUFFICIENT_DATA:
            prefix = "Insufficient data"
        else:
            prefix = "Computation failed"
        logger.debug("%s using %s fallback", self.name, path.value)
        return StrategySignal(
            direction=proxy.direction,
            confidence=min(cap, FALLBACK_CONFIDENCE_CAP, proxy.confidence),
            reason=f"{prefix} - {proxy.detail} fallback",
            strategy_name=self.name,
            timestamp=signal_time(candles),
            path=path,
        )
