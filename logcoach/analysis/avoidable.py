"""
Avoidable damage heuristic.

Incoming hits on the main actor from non-player sources, grouped by
ability. This is a proxy for mechanic damage; it cannot tell a dodgeable
hit from an unavoidable one.
"""

from typing import Dict, List, Optional

from ..config.settings import EngineSettings, get_settings
from ..models.summary import AvoidableDamageRecord, Severity
from ..parser.events import CombatEvent


class AvoidableDamageDetector:
    """Ranks abilities by damage dealt to one actor by hostile units."""

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()

    def is_hostile_source(self, source_id: str) -> bool:
        return source_id.startswith(tuple(self.settings.hostile_prefixes))

    def ability_label(self, event: CombatEvent) -> str:
        if event.kind.is_swing:
            return self.settings.melee_ability_name
        return event.ability_name or self.settings.unknown_ability_name

    def severity_for(self, total_damage: int, reference_damage: int) -> Severity:
        """Critical when a group exceeds the configured share of outgoing damage."""
        if total_damage > reference_damage * self.settings.critical_damage_fraction:
            return Severity.CRITICAL
        return Severity.WARNING

    def detect(
        self, events: List[CombatEvent], main_actor_id: str, main_damage_total: int
    ) -> List[AvoidableDamageRecord]:
        """
        Run the filtered pass over damage events.

        Args:
            events: Classified events in log order
            main_actor_id: Identifier of the summary subject
            main_damage_total: The subject's total outgoing damage

        Returns:
            Top-N records, descending by total damage
        """
        groups: Dict[str, List[int]] = {}

        for event in events:
            if not event.is_damage:
                continue
            if event.target_id != main_actor_id or not self.is_hostile_source(event.source_id):
                continue

            label = self.ability_label(event)
            group = groups.setdefault(label, [0, 0])
            group[0] += 1
            group[1] += event.amount

        ranked = sorted(groups.items(), key=lambda item: item[1][1], reverse=True)
        return [
            AvoidableDamageRecord(
                ability_name=name,
                hit_count=hits,
                total_damage=total,
                severity=self.severity_for(total, main_damage_total),
            )
            for name, (hits, total) in ranked[: self.settings.avoidable_top_n]
        ]
