"""
WoW combat log parsing and per-player performance metrics.
"""

from .errors import ConfigError, InvalidFormat, LogCoachError
from .parser import check_combat_log, parse_combat_log, validate_combat_log
from .analysis import AnalysisResult, analyze_combat_log, calculate_metrics, summarize_for_ai

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "InvalidFormat",
    "LogCoachError",
    "check_combat_log",
    "parse_combat_log",
    "validate_combat_log",
    "AnalysisResult",
    "analyze_combat_log",
    "calculate_metrics",
    "summarize_for_ai",
]
