"""
Compact plain-text digest of a performance summary.

The digest is what gets forwarded to a text-generation service, so it is
bounded in size: headline facts first, then as much of the timeline as
fits.
"""

from typing import List

from ..models.summary import PerformanceSummary


def _format_number(value: float) -> str:
    return f"{round(value):,}"


def _headline(summary: PerformanceSummary) -> List[str]:
    encounter = summary.encounter
    context = summary.context

    encounter_parts = [encounter.boss_or_title, encounter.difficulty_tag]
    if encounter.keystone_level:
        encounter_parts.append(f"+{encounter.keystone_level}")
    encounter_parts.extend(
        [encounter.zone_name, encounter.kill_or_wipe.value, f"{encounter.duration_seconds}s"]
    )

    lines = [
        f"PLAYER: {summary.player_name}",
        f"CLASS: {context.player_class} / {context.player_spec} ({context.role})",
        f"ENCOUNTER: {' | '.join(encounter_parts)}",
        f"DAMAGE: {_format_number(summary.total_damage)}",
        f"DPS: {_format_number(summary.dps)}",
        f"HEAL: {_format_number(summary.total_healing)}",
        f"HPS: {_format_number(summary.hps)}",
        f"DURATION: {round(summary.fight_duration)}s",
        f"EVENTS: {summary.event_count}",
    ]

    if summary.avoidable_damage:
        lines.append("AVOIDABLE DAMAGE:")
        for record in summary.avoidable_damage:
            lines.append(
                f"- {record.ability_name}: {record.hit_count} hits, "
                f"{_format_number(record.total_damage)} total [{record.severity.value}]"
            )
    else:
        lines.append("AVOIDABLE DAMAGE: none detected")

    return lines


def summarize_for_ai(summary: PerformanceSummary, max_chars: int = 2000) -> str:
    """
    Render a summary as a size-bounded digest.

    Args:
        summary: PerformanceSummary to render
        max_chars: Upper bound on the digest length

    Returns:
        Digest text no longer than max_chars
    """
    lines = _headline(summary)
    text = "\n".join(lines)
    if len(text) >= max_chars:
        return text[:max_chars]

    if not summary.timeline:
        return text

    width = summary.timeline[0].width_seconds
    header = f"TIMELINE (dps/hps per {width}s):"
    if len(text) + 1 + len(header) > max_chars:
        return text
    text = f"{text}\n{header}"

    for position, bucket in enumerate(summary.timeline):
        entry = f"{bucket.bucket_start}s: {_format_number(bucket.dps)}/{_format_number(bucket.hps)}"
        remaining = len(summary.timeline) - position
        marker = f"... ({remaining} more buckets)"
        # Keep room for the truncation marker unless this is the last bucket
        reserve = 0 if remaining == 1 else 1 + len(marker)
        if len(text) + 1 + len(entry) + reserve > max_chars:
            if len(text) + 1 + len(marker) <= max_chars:
                text = f"{text}\n{marker}"
            break
        text = f"{text}\n{entry}"

    return text
