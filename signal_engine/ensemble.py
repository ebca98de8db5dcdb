"""Ensemble aggregation of strategy signals.

Two combination policies are supported:

``vote`` (default)
    One vote per strategy. BUY wins only with strictly more votes than both
    SELL and HOLD, SELL likewise, anything else is HOLD. Confidence is
    ``purity * 0.6 + mean(confidence * weight) * 0.4`` clamped to
    ``[confidence_min, confidence_max]``, where purity is the winning share
    of the votes.

``weighted``
    Each signal adds ``confidence * weight`` to its direction's score. Scores
    are normalised by the total weight of the participating strategies; the
    same strict arg-max picks the direction and its normalised score is the
    confidence. The result does not depend on evaluation order.

Strategies that used a fallback path take part like any other. Only
disabled strategies are excluded, or every strategy when there are fewer
than ``min_candles`` candles.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from signal_engine.models.candle import Candle
from signal_engine.models.regime import MarketRegime
from signal_engine.models.signal import (
    Direction,
    EnsembleSignal,
    StrategySignal,
    clamp_confidence,
    empty_vote_breakdown,
    signal_time,
)
from signal_engine.strategy.protocol import Strategy

logger = logging.getLogger(__name__)

VOTE_PURITY_WEIGHT = 0.6
VOTE_CONFIDENCE_WEIGHT = 0.4


class EnsemblePolicy(str, Enum):
    VOTE = "vote"
    WEIGHTED = "weighted"


class EnsembleConfig(BaseModel):
    """Aggregator settings."""

    model_config = ConfigDict(frozen=True)

    policy: EnsemblePolicy = EnsemblePolicy.VOTE
    # Hard floor on history length, independent of each strategy's needs
    min_candles: int = Field(50, ge=0)
    confidence_min: float = Field(0.55, ge=0.0, le=1.0)
    confidence_max: float = Field(0.90, ge=0.0, le=1.0)
    # Apply the confidence band to the weighted policy as well
    clamp_weighted_confidence: bool = False

    @model_validator(mode="after")
    def _check_band(self):
        if self.confidence_min >= self.confidence_max:
            raise ValueError("confidence_min must be below confidence_max")
        return self


def strict_winner(scores: dict[Direction, float]) -> Direction:
    """BUY or SELL only with a strict lead over both others; ties are HOLD."""
    buy = scores.get(Direction.BUY, 0.0)
    sell = scores.get(Direction.SELL, 0.0)
    hold = scores.get(Direction.HOLD, 0.0)
    if buy > sell and buy > hold:
        return Direction.BUY
    if sell > buy and sell > hold:
        return Direction.SELL
    return Direction.HOLD


class EnsembleAggregator:
    """Combine the signals of several strategies into one decision."""

    def __init__(self, config: EnsembleConfig | None = None):
        self.config = config or EnsembleConfig()

    def aggregate(
        self,
        strategies: Sequence[Strategy],
        candles: Sequence[Candle],
        regime: MarketRegime | None = None,
    ) -> EnsembleSignal:
        """Evaluate the enabled strategies in order and combine their signals.

        Args:
            strategies: Strategies in evaluation order.
            candles: Candles ordered ascending by open time.
            regime: Optional regime attached to the result for reference.

        Returns:
            The combined signal; HOLD with zero confidence when nothing is
            eligible.
        """
        candles = list(candles)
        timestamp = signal_time(candles)

        if len(candles) < self.config.min_candles:
            return self._no_active(
                f"Insufficient candles for ensemble "
                f"({len(candles)} < {self.config.min_candles})",
                timestamp, regime,
            )

        active = [s for s in strategies if s.enabled]
        if not active:
            return self._no_active("No active strategies", timestamp, regime)

        signals = [s.signal(candles) for s in active]
        weights = [s.weight for s in active]
        return self.combine(signals, weights, timestamp, regime)

    def combine(
        self,
        signals: Sequence[StrategySignal],
        weights: Sequence[float],
        timestamp: datetime,
        regime: MarketRegime | None = None,
    ) -> EnsembleSignal:
        """Combine already computed signals with their strategy weights."""
        if len(signals) != len(weights):
            raise ValueError("signals and weights must have the same length")
        if not signals:
            return self._no_active("No active strategies", timestamp, regime)

        if self.config.policy == EnsemblePolicy.WEIGHTED:
            return self._weighted(signals, weights, timestamp, regime)
        return self._vote(signals, weights, timestamp, regime)

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    def _vote(
        self,
        signals: Sequence[StrategySignal],
        weights: Sequence[float],
        timestamp: datetime,
        regime: MarketRegime | None,
    ) -> EnsembleSignal:
        cfg = self.config
        votes = self._votes(signals)
        winner = strict_winner({d: float(votes[d.vote_key]) for d in Direction})

        # Purity is the winning share; a tie resolved to HOLD counts the HOLD votes
        total = len(signals)
        purity = votes[winner.vote_key] / total
        avg_confidence = math.fsum(
            s.confidence * w for s, w in zip(signals, weights)
        ) / total
        confidence = clamp_confidence(
            purity * VOTE_PURITY_WEIGHT + avg_confidence * VOTE_CONFIDENCE_WEIGHT,
            cfg.confidence_min,
            cfg.confidence_max,
        )

        logger.info(
            "votes: BUY=%d SELL=%d HOLD=%d, purity=%.0f%%, avgConf=%.2f -> FINAL=%s conf=%.2f",
            votes["BUY"], votes["SELL"], votes["HOLD"],
            purity * 100, avg_confidence, winner.vote_key, confidence,
        )
        reason = (
            f"votes BUY:{votes['BUY']} SELL:{votes['SELL']} HOLD:{votes['HOLD']} "
            f"-> {winner.vote_key} (purity={purity:.2f})"
        )
        return self._result(winner, confidence, reason, signals, votes, timestamp, regime)

    def _weighted(
        self,
        signals: Sequence[StrategySignal],
        weights: Sequence[float],
        timestamp: datetime,
        regime: MarketRegime | None,
    ) -> EnsembleSignal:
        cfg = self.config
        contributions: dict[Direction, list[float]] = {d: [] for d in Direction}
        for signal, weight in zip(signals, weights):
            contributions[signal.direction].append(signal.confidence * weight)

        # fsum is exactly rounded, so the scores do not depend on order
        total = math.fsum(weights)
        if total > 0:
            scores = {d: math.fsum(values) / total for d, values in contributions.items()}
        else:
            scores = {d: 0.0 for d in Direction}

        winner = strict_winner(scores)
        confidence = scores[winner]
        if total > 0 and cfg.clamp_weighted_confidence:
            confidence = clamp_confidence(confidence, cfg.confidence_min, cfg.confidence_max)

        votes = self._votes(signals)
        logger.info(
            "scores: BUY=%.2f SELL=%.2f HOLD=%.2f, total=%.2f -> FINAL=%s conf=%.2f",
            scores[Direction.BUY], scores[Direction.SELL], scores[Direction.HOLD],
            total, winner.vote_key, confidence,
        )
        reason = (
            f"weighted BUY:{scores[Direction.BUY]:.2f} SELL:{scores[Direction.SELL]:.2f} "
            f"HOLD:{scores[Direction.HOLD]:.2f} -> {winner.vote_key}"
        )
        return self._result(winner, confidence, reason, signals, votes, timestamp, regime)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _votes(signals: Sequence[StrategySignal]) -> dict[str, int]:
        votes = empty_vote_breakdown()
        for signal in signals:
            votes[signal.direction.vote_key] += 1
        return votes

    def _result(
        self,
        direction: Direction,
        confidence: float,
        reason: str,
        signals: Sequence[StrategySignal],
        votes: dict[str, int],
        timestamp: datetime,
        regime: MarketRegime | None,
    ) -> EnsembleSignal:
        return EnsembleSignal(
            direction=direction,
            confidence=confidence,
            reason=reason,
            contributing_strategies=[s.strategy_name for s in signals],
            vote_breakdown=votes,
            timestamp=timestamp,
            policy=self.config.policy.value,
            signals=list(signals),
            regime=regime,
        )

    def _no_active(
        self,
        reason: str,
        timestamp: datetime,
        regime: MarketRegime | None,
    ) -> EnsembleSignal:
        logger.info("Ensemble holding: %s", reason)
        return EnsembleSignal(
            direction=Direction.HOLD,
            confidence=0.0,
            reason=reason,
            contributing_strategies=[],
            vote_breakdown=empty_vote_breakdown(),
            timestamp=timestamp,
            policy=self.config.policy.value,
            regime=regime,
        )
