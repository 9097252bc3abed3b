"""
Data models for per-actor statistics and performance summaries.
"""

from .actor import ActorStats, UNKNOWN_PLAYER
from .summary import (
    AvoidableDamageRecord,
    EncounterInfo,
    Outcome,
    PerformanceSummary,
    PlayerContext,
    Severity,
    TimelineBucket,
)

__all__ = [
    "ActorStats",
    "UNKNOWN_PLAYER",
    "AvoidableDamageRecord",
    "EncounterInfo",
    "Outcome",
    "PerformanceSummary",
    "PlayerContext",
    "Severity",
    "TimelineBucket",
]
