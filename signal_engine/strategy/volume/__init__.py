"""Volume-driven strategies.

Importing this package triggers strategy registration via the
@register_strategy decorator on each strategy class.
"""

from signal_engine.strategy.volume.models import ScalpingParams, VolumeBreakoutParams
from signal_engine.strategy.volume.scalping import ScalpingStrategy
from signal_engine.strategy.volume.volume_breakout import VolumeBreakoutStrategy

__all__ = [
    "ScalpingStrategy",
    "VolumeBreakoutStrategy",
    "ScalpingParams",
    "VolumeBreakoutParams",
]
