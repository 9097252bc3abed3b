"""
Combat log parser module for tokenizing and classifying WoW combat log lines.
"""

from .tokenizer import LineTokenizer, TokenizedLine
from .events import CombatEvent, EventCategory, EventFactory, EventKind
from .parser import CombatLogParser, ParseDiagnostics, parse_combat_log
from .validator import ValidationResult, check_combat_log, validate_combat_log

__all__ = [
    "LineTokenizer",
    "TokenizedLine",
    "CombatEvent",
    "EventCategory",
    "EventFactory",
    "EventKind",
    "CombatLogParser",
    "ParseDiagnostics",
    "parse_combat_log",
    "ValidationResult",
    "check_combat_log",
    "validate_combat_log",
]
