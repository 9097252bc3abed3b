"""
Aggregation, heuristics and summaries built on classified combat events.
"""

from .aggregator import ActorAggregator
from .anonymizer import Anonymizer, anonymize_events
from .avoidable import AvoidableDamageDetector
from .encounter import guess_encounter, player_context_for
from .engine import AnalysisResult, analyze_combat_log
from .metrics import calculate_metrics
from .summary import summarize_for_ai
from .timeline import TimelineBucketizer

__all__ = [
    "ActorAggregator",
    "Anonymizer",
    "anonymize_events",
    "AvoidableDamageDetector",
    "guess_encounter",
    "player_context_for",
    "AnalysisResult",
    "analyze_combat_log",
    "calculate_metrics",
    "summarize_for_ai",
    "TimelineBucketizer",
]
