"""
Main combat log parser that coordinates tokenization and event classification.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union
import logging

from .tokenizer import LineTokenizer, strip_bom
from .events import CombatEvent, EventFactory


logger = logging.getLogger(__name__)


@dataclass
class ParseDiagnostics:
    """
    Side channel for lines the parser dropped.

    Dropping is the normal policy for malformed, truncated or
    uninteresting lines; the counts make it observable without
    changing the happy path.
    """

    lines_total: int = 0
    events_kept: int = 0
    drops: Counter = field(default_factory=Counter)

    def record_drop(self, reason: str, line_number: int, line: str):
        self.drops[reason] += 1
        logger.debug(f"Dropped line {line_number} ({reason}): {line[:100]}")

    @property
    def lines_dropped(self) -> int:
        return sum(self.drops.values())

    def as_dict(self) -> Dict[str, Any]:
        return {
            "lines_total": self.lines_total,
            "events_kept": self.events_kept,
            "lines_dropped": self.lines_dropped,
            "drops": dict(sorted(self.drops.items())),
        }


class CombatLogParser:
    """
    Parser for WoW combat log buffers and files.

    Handles line splitting, tokenization, and event creation. One
    instance can be reused; every parse call starts fresh diagnostics.
    """

    def __init__(self, min_line_length: int = 20):
        """
        Initialize the combat log parser.

        Args:
            min_line_length: Lines shorter than this are skipped
        """
        self.tokenizer = LineTokenizer(min_line_length=min_line_length)
        self.diagnostics = ParseDiagnostics()

    def parse(self, text: str) -> List[CombatEvent]:
        """
        Parse a whole combat log buffer.

        Args:
            text: Raw log text, optionally starting with a byte-order-mark

        Returns:
            List of classified events in log order
        """
        return self.parse_lines(strip_bom(text).splitlines())

    def parse_lines(self, lines: Iterable[str]) -> List[CombatEvent]:
        """
        Parse a list of lines and return events.

        Args:
            lines: Raw combat log lines

        Returns:
            List of CombatEvent objects
        """
        self.diagnostics = ParseDiagnostics()
        events = list(self.iter_events(lines))

        logger.info(
            f"Parsed {self.diagnostics.lines_total} lines: "
            f"{self.diagnostics.events_kept} events kept, "
            f"{self.diagnostics.lines_dropped} dropped"
        )
        return events

    def parse_file(self, file_path: Union[str, Path]) -> List[CombatEvent]:
        """
        Parse a combat log file.

        Args:
            file_path: Path to the combat log file

        Returns:
            List of CombatEvent objects
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Combat log file not found: {file_path}")

        logger.info(
            f"Starting parse of {file_path.name} "
            f"({file_path.stat().st_size / 1024 / 1024:.1f} MB)"
        )
        with open(file_path, "r", encoding="utf-8-sig", errors="replace") as f:
            return self.parse_lines(f)

    def iter_events(self, lines: Iterable[str]) -> Iterator[CombatEvent]:
        """
        Tokenize and classify lines lazily, counting into self.diagnostics.

        Args:
            lines: Raw combat log lines

        Yields:
            CombatEvent for every retained line
        """
        for line_number, line in enumerate(lines, start=1):
            self.diagnostics.lines_total += 1
            event = self._process_line(line, line_number)
            if event is not None:
                self.diagnostics.events_kept += 1
                yield event

    def _process_line(self, line: str, line_number: int) -> Optional[CombatEvent]:
        tokenized, reason = self.tokenizer.tokenize(line)
        if tokenized is None:
            self.diagnostics.record_drop(reason, line_number, line)
            return None

        event, reason = EventFactory.create_event(tokenized)
        if event is None:
            self.diagnostics.record_drop(reason, line_number, line)
            return None

        return event

    def get_stats(self) -> Dict[str, Any]:
        """
        Get parsing statistics.

        Returns:
            Dictionary with parsing stats
        """
        stats = self.diagnostics.as_dict()
        stats["success_rate"] = self.diagnostics.events_kept / max(
            self.diagnostics.lines_total, 1
        )
        return stats


def parse_combat_log(text: str, min_line_length: int = 20) -> List[CombatEvent]:
    """
    Parse a raw combat log buffer into classified events.

    Malformed and uninteresting lines are dropped; this never raises
    for per-line problems.
    """
    return CombatLogParser(min_line_length=min_line_length).parse(text)
