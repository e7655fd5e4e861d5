"""
Fusion loop / 融合回路
"""

from .controller import FusionContext, FusionLoopController, LoopState, RunSummary
from .scheduler import PeriodicTicker, StopWatch

__all__ = [
    "FusionContext",
    "FusionLoopController",
    "LoopState",
    "RunSummary",
    "PeriodicTicker",
    "StopWatch",
]
