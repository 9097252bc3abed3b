"""
Raw-log pre-filters that shrink a combat log into a prompt-sized excerpt.
"""

from collections import Counter
from dataclasses import dataclass
from typing import List

from .events import EventFactory, EventKind, clean_name
from .timestamps import TIMESTAMP_PREFIX
from .tokenizer import LineTokenizer, strip_bom


UNKNOWN_PLAYER = "Unknown Player"

PREFILTER_KINDS = frozenset(
    {
        "SPELL_CAST_SUCCESS",
        "SPELL_DAMAGE",
        "UNIT_DIED",
        "SPELL_AURA_APPLIED",
    }
)


@dataclass(frozen=True)
class RawLogDigest:
    """Pre-filtered log text plus headline counts for its main player."""

    cleaned_text: str
    source_name: str
    casts: int
    damage_taken: int
    deaths: int


def extract_combat_lines(text: str, max_lines: int = 5000) -> str:
    """
    Keep only timestamped lines, favoring the end of the log.

    Args:
        text: Raw log text
        max_lines: Maximum number of lines to keep

    Returns:
        The last max_lines timestamped lines joined by newlines
    """
    lines = [line for line in strip_bom(text).splitlines() if line.strip()]
    combat_lines = [line for line in lines if TIMESTAMP_PREFIX.match(line)]
    if max_lines <= 0:
        return ""
    return "\n".join(combat_lines[-max_lines:])


def prefilter_raw_log(
    text: str, max_lines: int = 500, player_prefix: str = "Player-"
) -> RawLogDigest:
    """
    Reduce a raw log to cast, damage, death and aura lines.

    The most frequent player source name is taken as the log owner;
    spell damage that player took is summed.

    Args:
        text: Raw log text
        max_lines: Maximum number of lines kept in cleaned_text
        player_prefix: Identifier prefix marking player characters

    Returns:
        RawLogDigest
    """
    tokenizer = LineTokenizer()
    kept: List[str] = []
    damage_lines = []
    name_counts: Counter = Counter()
    casts = 0
    deaths = 0

    for line in strip_bom(text).splitlines():
        tokenized = tokenizer.parse_line(line)
        if tokenized is None or tokenized.kind not in PREFILTER_KINDS:
            continue

        kept.append(tokenized.raw_line)
        fields = tokenized.fields
        source_name = clean_name(fields[2])
        if fields[1].startswith(player_prefix) and source_name:
            name_counts[source_name] += 1

        if tokenized.kind == EventKind.SPELL_CAST_SUCCESS.value:
            casts += 1
        elif tokenized.kind == EventKind.UNIT_DIED.value:
            deaths += 1
        elif tokenized.kind == EventKind.SPELL_DAMAGE.value:
            damage_lines.append(tokenized)

    source_name = name_counts.most_common(1)[0][0] if name_counts else UNKNOWN_PLAYER

    damage_taken = 0
    for tokenized in damage_lines:
        event = EventFactory.classify(tokenized)
        if event is not None and event.target_name == source_name:
            damage_taken += event.amount

    return RawLogDigest(
        cleaned_text="\n".join(kept[:max_lines]),
        source_name=source_name,
        casts=casts,
        damage_taken=damage_taken,
        deaths=deaths,
    )
