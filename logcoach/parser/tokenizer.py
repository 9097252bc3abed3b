"""
Line tokenizer for parsing WoW combat log lines.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .timestamps import TimestampFormat, match_timestamp


BYTE_ORDER_MARK = "\ufeff"

# Placeholder GUID for a missing unit
NULL_GUID = "0000000000000000"

# Kinds whose payload follows the kind token directly (no source/target block)
SPECIAL_SHAPE_KINDS = frozenset(
    {
        "ENCOUNTER_START",
        "ENCOUNTER_END",
        "CHALLENGE_MODE_START",
        "CHALLENGE_MODE_END",
        "COMBATANT_INFO",
        "ZONE_CHANGE",
        "MAP_CHANGE",
        "COMBAT_LOG_VERSION",
    }
)

# kind + sourceGUID, sourceName, sourceFlags, sourceRaidFlags,
# destGUID, destName, destFlags, destRaidFlags
STANDARD_MIN_FIELDS = 9

# Older clients omit both raid-flag columns
LEGACY_MIN_FIELDS = 7


@dataclass(frozen=True)
class TokenizedLine:
    """Represents a tokenized combat log line."""

    timestamp: str
    timestamp_format: TimestampFormat
    fields: Tuple[str, ...]
    raw_line: str

    @property
    def kind(self) -> str:
        return self.fields[0]


def strip_bom(text: str) -> str:
    """Remove a leading byte-order-mark from a buffer."""
    if text.startswith(BYTE_ORDER_MARK):
        return text[1:]
    return text


def split_fields(payload: str) -> List[str]:
    """
    Split a payload by commas, honoring quotes and bracket nesting.

    A comma inside double quotes or inside ``[...]``/``(...)`` belongs to
    the current field. Quote characters stay in the field text; brackets
    are only counted outside quotes.

    Args:
        payload: Everything after the timestamp separator

    Returns:
        List of trimmed field strings
    """
    fields = []
    current = []
    in_quotes = False
    depth = 0

    for char in payload:
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif in_quotes:
            current.append(char)
        elif char in "[(":
            depth += 1
            current.append(char)
        elif char in "])":
            depth = max(0, depth - 1)
            current.append(char)
        elif char == "," and depth == 0:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    # Don't forget the last field
    if current:
        fields.append("".join(current).strip())

    return fields


def unquote(value: str) -> str:
    """Strip a single pair of surrounding double quotes."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def has_raid_flags(fields: List[str]) -> bool:
    """
    Check whether a generic line carries the raid-flag columns.

    In the legacy layout the fifth field is the destination GUID; in the
    current layout it is the source raid flags (a hex value).
    """
    if len(fields) < 5:
        return True
    candidate = fields[4]
    if candidate == NULL_GUID:
        return False
    return candidate.startswith("0x") or candidate.isdigit() or candidate == "-1"


class LineTokenizer:
    """
    Tokenizes individual lines from WoW combat logs.

    Handles the CSV-like format with quoted names and bracketed
    sub-structures. Lines that cannot be tokenized yield None together
    with a short drop reason; they never raise.
    """

    def __init__(self, min_line_length: int = 20):
        self.min_line_length = min_line_length

    def tokenize(self, line: str) -> Tuple[Optional[TokenizedLine], Optional[str]]:
        """
        Tokenize a single combat log line.

        Args:
            line: Raw line from combat log file

        Returns:
            (TokenizedLine, None) on success, (None, reason) when dropped
        """
        line = line.rstrip()

        if not line.strip():
            return None, "blank"

        if len(line) < self.min_line_length:
            return None, "too_short"

        matched = match_timestamp(line)
        if not matched:
            return None, "bad_timestamp"

        timestamp_format, timestamp, payload = matched

        fields = split_fields(payload)
        if not fields or not fields[0]:
            return None, "empty_payload"

        fields = [unquote(field) for field in fields]
        kind = fields[0]

        if kind not in SPECIAL_SHAPE_KINDS:
            minimum = STANDARD_MIN_FIELDS if has_raid_flags(fields) else LEGACY_MIN_FIELDS
            if len(fields) < minimum:
                return None, "too_few_fields"

        return (
            TokenizedLine(
                timestamp=timestamp,
                timestamp_format=timestamp_format,
                fields=tuple(fields),
                raw_line=line,
            ),
            None,
        )

    def parse_line(self, line: str) -> Optional[TokenizedLine]:
        """Tokenize a line, discarding the drop reason."""
        tokenized, _ = self.tokenize(line)
        return tokenized
