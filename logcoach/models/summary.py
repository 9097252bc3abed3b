"""
Output models for a parse call: timeline, avoidable damage, encounter
guess, player context and the aggregate performance summary.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .actor import UNKNOWN_PLAYER
from ..config import wow_data


class Severity(Enum):
    """How much an avoidable damage group weighs against output."""

    CRITICAL = "critical"
    WARNING = "warning"


class Outcome(Enum):
    """Encounter result."""

    KILL = "Kill"
    WIPE = "Wipe"
    UNKNOWN = "Unknown"


DEFAULT_ENCOUNTER_TITLE = "Unknown Encounter"
DEFAULT_ZONE = "Unknown Zone"


@dataclass(frozen=True)
class TimelineBucket:
    """
    Damage and healing summed over one fixed-width window.

    bucket_start is in seconds relative to the first bucket of the
    timeline, so no wall-clock value leaves the parse call.
    """

    bucket_start: int
    damage_sum: int
    healing_sum: int
    width_seconds: int = 5

    @property
    def dps(self) -> float:
        return self.damage_sum / self.width_seconds

    @property
    def hps(self) -> float:
        return self.healing_sum / self.width_seconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bucket_start": self.bucket_start,
            "damage_sum": self.damage_sum,
            "healing_sum": self.healing_sum,
            "dps": round(self.dps, 1),
            "hps": round(self.hps, 1),
        }


@dataclass(frozen=True)
class AvoidableDamageRecord:
    """Incoming damage from non-player sources, grouped by ability."""

    ability_name: str
    hit_count: int
    total_damage: int
    severity: Severity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ability_name": self.ability_name,
            "hit_count": self.hit_count,
            "total_damage": self.total_damage,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class EncounterInfo:
    """Best guess at what was being fought, from meta events when present."""

    boss_or_title: str = DEFAULT_ENCOUNTER_TITLE
    difficulty_tag: str = wow_data.DEFAULT_DIFFICULTY
    keystone_level: Optional[int] = None
    zone_name: str = DEFAULT_ZONE
    duration_seconds: int = 0
    kill_or_wipe: Outcome = Outcome.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "boss_or_title": self.boss_or_title,
            "difficulty_tag": self.difficulty_tag,
            "keystone_level": self.keystone_level,
            "zone_name": self.zone_name,
            "duration_seconds": self.duration_seconds,
            "kill_or_wipe": self.kill_or_wipe.value,
        }


@dataclass(frozen=True)
class PlayerContext:
    """Class, specialization and role of the main actor."""

    player_class: str = wow_data.FALLBACK_CLASS
    player_spec: str = wow_data.FALLBACK_SPEC
    role: str = wow_data.FALLBACK_ROLE

    @classmethod
    def resolve(cls, class_id: Optional[int], spec_id: Optional[int]) -> "PlayerContext":
        """
        Map class and spec identifiers to names.

        Unknown identifiers fall back to FALLBACK_CLASS / FALLBACK_SPEC /
        FALLBACK_ROLE rather than failing. A known spec also names its
        class when class_id is missing.
        """
        spec = wow_data.get_spec_info(spec_id)
        if class_id is None and spec is not None:
            class_id = spec.class_id

        return cls(
            player_class=wow_data.get_class_name(class_id),
            player_spec=spec.name if spec else wow_data.FALLBACK_SPEC,
            role=spec.role if spec else wow_data.FALLBACK_ROLE,
        )


@dataclass(frozen=True)
class PerformanceSummary:
    """Metrics for the main actor of one parse call."""

    player_name: str = UNKNOWN_PLAYER
    player_id: str = ""
    context: PlayerContext = field(default_factory=PlayerContext)
    total_damage: int = 0
    total_healing: int = 0
    dps: float = 0.0
    hps: float = 0.0
    fight_duration: float = 0.0
    event_count: int = 0
    timeline: List[TimelineBucket] = field(default_factory=list)
    avoidable_damage: List[AvoidableDamageRecord] = field(default_factory=list)
    encounter: EncounterInfo = field(default_factory=EncounterInfo)

    @classmethod
    def empty(cls, encounter: Optional[EncounterInfo] = None) -> "PerformanceSummary":
        """Default summary for logs without any player-sourced events."""
        return cls(encounter=encounter or EncounterInfo())

    @property
    def is_empty(self) -> bool:
        return not self.player_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "player_id": self.player_id,
            "player_class": self.context.player_class,
            "player_spec": self.context.player_spec,
            "role": self.context.role,
            "total_damage": self.total_damage,
            "total_healing": self.total_healing,
            "dps": round(self.dps, 1),
            "hps": round(self.hps, 1),
            "fight_duration": round(self.fight_duration, 1),
            "event_count": self.event_count,
            "timeline": [bucket.to_dict() for bucket in self.timeline],
            "avoidable_damage": [record.to_dict() for record in self.avoidable_damage],
            "encounter": self.encounter.to_dict(),
        }
