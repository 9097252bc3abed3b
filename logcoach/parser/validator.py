"""
Structural sniff test for combat log buffers.

Deliberately permissive: rejecting a real log costs the user far more
than letting a borderline file through to the tokenizer.
"""

from dataclasses import dataclass
from typing import Optional

from .timestamps import TIMESTAMP_PREFIX
from .tokenizer import strip_bom
from ..errors import InvalidFormat


HEADER_TOKENS = ("COMBAT_LOG_VERSION",)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation check."""

    valid: bool
    reason: Optional[str] = None


def _line_matches(line: str) -> bool:
    if TIMESTAMP_PREFIX.match(line):
        return True
    return any(token in line for token in HEADER_TOKENS)


def validate_combat_log(
    text: str,
    min_bytes: int = 100,
    min_lines: int = 2,
    sample_lines: int = 20,
    required_matches: int = 2,
) -> None:
    """
    Check that a buffer plausibly is a combat log.

    Args:
        text: Raw text buffer
        min_bytes: Minimum UTF-8 size of the buffer
        min_lines: Minimum number of non-blank lines
        sample_lines: How many leading non-blank lines are inspected
        required_matches: Sampled lines that must look like log lines

    Raises:
        InvalidFormat: With a user-facing reason when the check fails
    """
    if not text or not text.strip():
        raise InvalidFormat("The file is empty.")

    text = strip_bom(text)
    size = len(text.encode("utf-8"))
    if size < min_bytes:
        raise InvalidFormat(
            f"The file is too short to be a combat log ({size} bytes, "
            f"at least {min_bytes} expected)."
        )

    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < min_lines:
        raise InvalidFormat(
            f"The file is too short to be a combat log ({len(lines)} lines, "
            f"at least {min_lines} expected)."
        )

    matches = sum(1 for line in lines[:sample_lines] if _line_matches(line))
    if matches < required_matches:
        raise InvalidFormat(
            "Unrecognized format: this does not look like a WoWCombatLog.txt file."
        )


def check_combat_log(text: str, **thresholds) -> ValidationResult:
    """
    Non-raising form of validate_combat_log.

    Returns:
        ValidationResult with the user-facing reason on failure
    """
    try:
        validate_combat_log(text, **thresholds)
    except InvalidFormat as e:
        return ValidationResult(valid=False, reason=e.reason)
    return ValidationResult(valid=True)
