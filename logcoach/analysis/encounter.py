"""
Encounter and player-context extraction from meta events.
"""

from typing import Dict, List, Optional

from ..config import wow_data
from ..models.summary import (
    DEFAULT_ENCOUNTER_TITLE,
    DEFAULT_ZONE,
    EncounterInfo,
    Outcome,
    PlayerContext,
)
from ..parser.events import (
    ChallengeModePayload,
    CombatEvent,
    CombatantPayload,
    EncounterPayload,
    EventKind,
    ZonePayload,
)


def guess_encounter(events: List[CombatEvent], fallback_duration: float = 0.0) -> EncounterInfo:
    """
    Build an EncounterInfo from encounter, challenge mode and zone events.

    The last value seen wins for every field. Fields without a source
    keep their defaults; the duration falls back to fallback_duration.

    Args:
        events: Classified events in log order
        fallback_duration: Seconds to report when no end event has a duration

    Returns:
        EncounterInfo
    """
    title = DEFAULT_ENCOUNTER_TITLE
    difficulty = wow_data.DEFAULT_DIFFICULTY
    keystone: Optional[int] = None
    zone: Optional[str] = None
    challenge_zone: Optional[str] = None
    duration_ms: Optional[int] = None
    outcome = Outcome.UNKNOWN
    in_challenge_mode = False

    for event in events:
        payload = event.payload

        if event.kind is EventKind.ENCOUNTER_START and isinstance(payload, EncounterPayload):
            title = payload.encounter_name or title
            if not in_challenge_mode:
                difficulty = wow_data.get_difficulty_name(payload.difficulty_id)

        elif event.kind is EventKind.ENCOUNTER_END and isinstance(payload, EncounterPayload):
            title = payload.encounter_name or title
            if payload.success is not None:
                outcome = Outcome.KILL if payload.success else Outcome.WIPE
            if payload.duration_ms:
                duration_ms = payload.duration_ms

        elif event.kind is EventKind.CHALLENGE_MODE_START and isinstance(
            payload, ChallengeModePayload
        ):
            in_challenge_mode = True
            difficulty = wow_data.CHALLENGE_MODE_DIFFICULTY
            challenge_zone = payload.zone_name or challenge_zone
            if payload.keystone_level > 0:
                keystone = payload.keystone_level

        elif event.kind is EventKind.CHALLENGE_MODE_END and isinstance(
            payload, ChallengeModePayload
        ):
            if payload.success is not None:
                outcome = Outcome.KILL if payload.success else Outcome.WIPE
            if payload.duration_ms:
                duration_ms = payload.duration_ms
            if payload.keystone_level > 0:
                keystone = payload.keystone_level

        elif event.kind is EventKind.ZONE_CHANGE and isinstance(payload, ZonePayload):
            zone = payload.zone_name or zone

    if duration_ms is not None:
        duration_seconds = round(duration_ms / 1000)
    else:
        duration_seconds = round(fallback_duration)

    return EncounterInfo(
        boss_or_title=title,
        difficulty_tag=difficulty,
        keystone_level=keystone,
        zone_name=challenge_zone or zone or DEFAULT_ZONE,
        duration_seconds=duration_seconds,
        kill_or_wipe=outcome,
    )


def collect_combatants(events: List[CombatEvent]) -> Dict[str, CombatantPayload]:
    """Map player GUIDs to their latest COMBATANT_INFO payload."""
    combatants: Dict[str, CombatantPayload] = {}
    for event in events:
        if isinstance(event.payload, CombatantPayload) and event.payload.player_guid:
            combatants[event.payload.player_guid] = event.payload
    return combatants


def player_context_for(events: List[CombatEvent], player_id: str) -> PlayerContext:
    """Resolve class, spec and role for one player, with fallbacks."""
    info = collect_combatants(events).get(player_id)
    if info is None:
        return PlayerContext()
    return PlayerContext.resolve(info.class_id, info.spec_id)
