"""
End-to-end analysis entry point: validate, parse, anonymize, aggregate,
summarize.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config.settings import EngineSettings, get_settings
from ..models.summary import PerformanceSummary
from ..parser.parser import CombatLogParser, ParseDiagnostics
from ..parser.validator import validate_combat_log
from .anonymizer import Anonymizer
from .metrics import calculate_metrics
from .summary import summarize_for_ai

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one analysis call hands back to its caller."""

    summary: PerformanceSummary
    digest: str
    diagnostics: ParseDiagnostics
    anonymized: bool = False

    @property
    def events_processed(self) -> int:
        return self.diagnostics.events_kept

    def to_dict(self) -> Dict[str, Any]:
        return {
            "performance": self.summary.to_dict(),
            "digest": self.digest,
            "metadata": {
                "events_processed": self.events_processed,
                "anonymized": self.anonymized,
                "diagnostics": self.diagnostics.as_dict(),
            },
        }


def analyze_combat_log(
    text: str,
    anonymize: bool = False,
    target_name: Optional[str] = None,
    settings: Optional[EngineSettings] = None,
) -> AnalysisResult:
    """
    Analyze a raw combat log buffer.

    Args:
        text: Raw log text
        anonymize: Replace player names with pseudonyms before aggregation
        target_name: Optional display name of the player to summarize
        settings: Engine settings, defaults to the global settings

    Returns:
        AnalysisResult

    Raises:
        InvalidFormat: If the buffer does not look like a combat log
    """
    settings = settings or get_settings()

    validate_combat_log(
        text,
        min_bytes=settings.min_log_bytes,
        min_lines=settings.min_log_lines,
        sample_lines=settings.validation_sample_lines,
        required_matches=settings.validation_required_matches,
    )

    parser = CombatLogParser(min_line_length=settings.min_line_length)
    events = parser.parse(text)

    if anonymize:
        anonymizer = Anonymizer(player_prefix=settings.player_prefix)
        events = anonymizer.anonymize(events)
        target_name = anonymizer.translate(target_name)
        logger.info(f"Anonymized {len(anonymizer.mapping)} player names")

    summary = calculate_metrics(events, target_name=target_name, settings=settings)
    digest = summarize_for_ai(summary, max_chars=settings.digest_max_chars)

    return AnalysisResult(
        summary=summary,
        digest=digest,
        diagnostics=parser.diagnostics,
        anonymized=anonymize,
    )
