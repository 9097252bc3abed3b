"""
Event kinds, typed payloads and the classifier for WoW combat log events.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .tokenizer import NULL_GUID, TokenizedLine, has_raid_flags


class EventCategory(Enum):
    """Semantic bucket every event kind is assigned to."""

    DAMAGE = "damage"
    DAMAGE_LANDED = "damage_landed"
    HEAL = "heal"
    HEAL_ABSORBED = "heal_absorbed"
    CAST = "cast"
    DEATH = "death"
    ENCOUNTER = "encounter"
    CHALLENGE_MODE = "challenge_mode"
    COMBATANT = "combatant"
    ZONE = "zone"
    IGNORED = "ignored"


class EventKind(Enum):
    """Enumeration of known event types."""

    # Damage
    SWING_DAMAGE = "SWING_DAMAGE"
    SWING_DAMAGE_LANDED = "SWING_DAMAGE_LANDED"
    SPELL_DAMAGE = "SPELL_DAMAGE"
    SPELL_PERIODIC_DAMAGE = "SPELL_PERIODIC_DAMAGE"
    RANGE_DAMAGE = "RANGE_DAMAGE"
    ENVIRONMENTAL_DAMAGE = "ENVIRONMENTAL_DAMAGE"
    DAMAGE_SPLIT = "DAMAGE_SPLIT"

    # Healing
    SPELL_HEAL = "SPELL_HEAL"
    SPELL_PERIODIC_HEAL = "SPELL_PERIODIC_HEAL"
    SPELL_HEAL_ABSORBED = "SPELL_HEAL_ABSORBED"
    SPELL_ABSORBED = "SPELL_ABSORBED"

    # Casts
    SPELL_CAST_START = "SPELL_CAST_START"
    SPELL_CAST_SUCCESS = "SPELL_CAST_SUCCESS"
    SPELL_CAST_FAILED = "SPELL_CAST_FAILED"

    # Auras
    SPELL_AURA_APPLIED = "SPELL_AURA_APPLIED"
    SPELL_AURA_REMOVED = "SPELL_AURA_REMOVED"
    SPELL_AURA_APPLIED_DOSE = "SPELL_AURA_APPLIED_DOSE"
    SPELL_AURA_REMOVED_DOSE = "SPELL_AURA_REMOVED_DOSE"
    SPELL_AURA_REFRESH = "SPELL_AURA_REFRESH"

    # Misses and control
    SWING_MISSED = "SWING_MISSED"
    SPELL_MISSED = "SPELL_MISSED"
    RANGE_MISSED = "RANGE_MISSED"
    SPELL_INTERRUPT = "SPELL_INTERRUPT"
    SPELL_DISPEL = "SPELL_DISPEL"
    SPELL_ENERGIZE = "SPELL_ENERGIZE"
    SPELL_SUMMON = "SPELL_SUMMON"

    # Unit state
    UNIT_DIED = "UNIT_DIED"
    UNIT_DESTROYED = "UNIT_DESTROYED"
    PARTY_KILL = "PARTY_KILL"

    # Meta events
    ENCOUNTER_START = "ENCOUNTER_START"
    ENCOUNTER_END = "ENCOUNTER_END"
    CHALLENGE_MODE_START = "CHALLENGE_MODE_START"
    CHALLENGE_MODE_END = "CHALLENGE_MODE_END"
    COMBATANT_INFO = "COMBATANT_INFO"
    COMBAT_LOG_VERSION = "COMBAT_LOG_VERSION"
    ZONE_CHANGE = "ZONE_CHANGE"
    MAP_CHANGE = "MAP_CHANGE"

    @property
    def category(self) -> EventCategory:
        return KIND_CATEGORIES[self]

    @property
    def is_retained(self) -> bool:
        return KIND_CATEGORIES[self] is not EventCategory.IGNORED

    @property
    def is_swing(self) -> bool:
        return self.value.startswith("SWING_")

    @classmethod
    def lookup(cls, token: str) -> Optional["EventKind"]:
        """Find the kind for a raw kind token, if it is a known one."""
        return _KINDS_BY_TOKEN.get(token)


# Every kind must be categorized; IGNORED kinds are dropped at classification
KIND_CATEGORIES: Dict[EventKind, EventCategory] = {
    EventKind.SWING_DAMAGE: EventCategory.DAMAGE,
    EventKind.SWING_DAMAGE_LANDED: EventCategory.DAMAGE_LANDED,
    EventKind.SPELL_DAMAGE: EventCategory.DAMAGE,
    EventKind.SPELL_PERIODIC_DAMAGE: EventCategory.DAMAGE,
    EventKind.RANGE_DAMAGE: EventCategory.DAMAGE,
    EventKind.ENVIRONMENTAL_DAMAGE: EventCategory.IGNORED,
    EventKind.DAMAGE_SPLIT: EventCategory.IGNORED,
    EventKind.SPELL_HEAL: EventCategory.HEAL,
    EventKind.SPELL_PERIODIC_HEAL: EventCategory.HEAL,
    EventKind.SPELL_HEAL_ABSORBED: EventCategory.HEAL_ABSORBED,
    EventKind.SPELL_ABSORBED: EventCategory.IGNORED,
    EventKind.SPELL_CAST_START: EventCategory.CAST,
    EventKind.SPELL_CAST_SUCCESS: EventCategory.CAST,
    EventKind.SPELL_CAST_FAILED: EventCategory.IGNORED,
    EventKind.SPELL_AURA_APPLIED: EventCategory.IGNORED,
    EventKind.SPELL_AURA_REMOVED: EventCategory.IGNORED,
    EventKind.SPELL_AURA_APPLIED_DOSE: EventCategory.IGNORED,
    EventKind.SPELL_AURA_REMOVED_DOSE: EventCategory.IGNORED,
    EventKind.SPELL_AURA_REFRESH: EventCategory.IGNORED,
    EventKind.SWING_MISSED: EventCategory.IGNORED,
    EventKind.SPELL_MISSED: EventCategory.IGNORED,
    EventKind.RANGE_MISSED: EventCategory.IGNORED,
    EventKind.SPELL_INTERRUPT: EventCategory.IGNORED,
    EventKind.SPELL_DISPEL: EventCategory.IGNORED,
    EventKind.SPELL_ENERGIZE: EventCategory.IGNORED,
    EventKind.SPELL_SUMMON: EventCategory.IGNORED,
    EventKind.UNIT_DIED: EventCategory.DEATH,
    EventKind.UNIT_DESTROYED: EventCategory.IGNORED,
    EventKind.PARTY_KILL: EventCategory.IGNORED,
    EventKind.ENCOUNTER_START: EventCategory.ENCOUNTER,
    EventKind.ENCOUNTER_END: EventCategory.ENCOUNTER,
    EventKind.CHALLENGE_MODE_START: EventCategory.CHALLENGE_MODE,
    EventKind.CHALLENGE_MODE_END: EventCategory.CHALLENGE_MODE,
    EventKind.COMBATANT_INFO: EventCategory.COMBATANT,
    EventKind.COMBAT_LOG_VERSION: EventCategory.IGNORED,
    EventKind.ZONE_CHANGE: EventCategory.ZONE,
    EventKind.MAP_CHANGE: EventCategory.IGNORED,
}

_uncategorized = set(EventKind) - set(KIND_CATEGORIES)
if _uncategorized:
    raise RuntimeError(f"Event kinds without a category: {sorted(k.value for k in _uncategorized)}")

_KINDS_BY_TOKEN: Dict[str, EventKind] = {kind.value: kind for kind in EventKind}

# Categories whose lines carry no source/target block
META_CATEGORIES = frozenset(
    {
        EventCategory.ENCOUNTER,
        EventCategory.CHALLENGE_MODE,
        EventCategory.COMBATANT,
        EventCategory.ZONE,
    }
)

# Unit info block inserted by advanced combat logging before amounts
ADVANCED_PARAM_COUNT = 17

PLACEHOLDER_NAMES = frozenset({"", "nil"})


def safe_int(value: Any, default: int = 0) -> int:
    """Safely convert a value to int, returning default on failure."""
    if value is None:
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def parse_flags(value: str) -> int:
    """Parse a flag or school column written in hex (0x..) or decimal."""
    try:
        return int(value, 16) if value.startswith("0x") else int(value)
    except (ValueError, TypeError):
        return 0


def clean_name(value: str) -> str:
    """Normalize a name field; placeholders become an empty string."""
    value = value.strip()
    if value in PLACEHOLDER_NAMES:
        return ""
    return value


def _looks_like_unit_id(value: str) -> bool:
    return value == NULL_GUID or (
        "-" in value and value.split("-", 1)[0].isalpha()
    )


@dataclass(frozen=True)
class SpellRef:
    """Spell prefix shared by SPELL_* and RANGE_* events."""

    spell_id: int
    spell_name: str
    school: int


@dataclass(frozen=True)
class DamagePayload:
    """Damage event payload."""

    spell: Optional[SpellRef]
    amount: int
    overkill: int = 0


@dataclass(frozen=True)
class HealPayload:
    """Healing event payload."""

    spell: Optional[SpellRef]
    amount: int
    overhealing: int = 0

    @property
    def effective_healing(self) -> int:
        return max(0, self.amount - self.overhealing)


@dataclass(frozen=True)
class SpellPayload:
    """Payload for casts, absorbed heals and swing-landed mirrors."""

    spell: Optional[SpellRef]


@dataclass(frozen=True)
class DeathPayload:
    """UNIT_DIED carries no meaningful payload beyond the target."""

    unconscious: bool = False


@dataclass(frozen=True)
class EncounterPayload:
    """ENCOUNTER_START / ENCOUNTER_END payload."""

    encounter_id: int
    encounter_name: str
    difficulty_id: int
    group_size: int
    instance_id: int = 0
    success: Optional[bool] = None  # Only for ENCOUNTER_END
    duration_ms: Optional[int] = None  # Only for ENCOUNTER_END


@dataclass(frozen=True)
class ChallengeModePayload:
    """CHALLENGE_MODE_START / CHALLENGE_MODE_END payload."""

    zone_name: str = ""
    instance_id: int = 0
    challenge_id: int = 0
    keystone_level: int = 0
    success: Optional[bool] = None  # Only for CHALLENGE_MODE_END
    duration_ms: Optional[int] = None  # Only for CHALLENGE_MODE_END


@dataclass(frozen=True)
class CombatantPayload:
    """COMBATANT_INFO payload reduced to identity fields."""

    player_guid: str
    class_id: Optional[int] = None
    spec_id: Optional[int] = None


@dataclass(frozen=True)
class ZonePayload:
    """ZONE_CHANGE payload."""

    zone_id: int
    zone_name: str
    difficulty_id: int = 0


Payload = Union[
    DamagePayload,
    HealPayload,
    SpellPayload,
    DeathPayload,
    EncounterPayload,
    ChallengeModePayload,
    CombatantPayload,
    ZonePayload,
]


@dataclass(frozen=True)
class CombatEvent:
    """A classified combat log event. Only retained kinds are ever built."""

    timestamp: str
    kind: EventKind
    source_id: str
    source_name: str
    source_flags: str
    target_id: str
    target_name: str
    target_flags: str
    fields: Tuple[str, ...]
    payload: Payload

    @property
    def category(self) -> EventCategory:
        return self.kind.category

    @property
    def is_damage(self) -> bool:
        return self.kind.category is EventCategory.DAMAGE

    @property
    def is_heal(self) -> bool:
        return self.kind.category is EventCategory.HEAL

    @property
    def is_meta(self) -> bool:
        return self.kind.category in META_CATEGORIES

    @property
    def amount(self) -> int:
        """Damage or healing amount; zero for other kinds."""
        if isinstance(self.payload, (DamagePayload, HealPayload)):
            return self.payload.amount
        return 0

    @property
    def ability_name(self) -> Optional[str]:
        spell = getattr(self.payload, "spell", None)
        return spell.spell_name if spell else None


class EventFactory:
    """Classifies tokenized lines and builds typed events for retained kinds."""

    @classmethod
    def create_event(
        cls, tokenized: TokenizedLine
    ) -> Tuple[Optional[CombatEvent], Optional[str]]:
        """
        Create a specific event object from a tokenized line.

        Args:
            tokenized: TokenizedLine from the tokenizer

        Returns:
            (CombatEvent, None) for retained kinds, (None, reason) otherwise
        """
        kind = EventKind.lookup(tokenized.kind)
        if kind is None:
            return None, "unknown_kind"
        if not kind.is_retained:
            return None, "filtered_kind"

        if kind.category in META_CATEGORIES:
            return cls._create_meta_event(kind, tokenized), None
        return cls._create_combat_event(kind, tokenized), None

    @classmethod
    def classify(cls, tokenized: TokenizedLine) -> Optional[CombatEvent]:
        """Create an event, discarding the drop reason."""
        event, _ = cls.create_event(tokenized)
        return event

    @classmethod
    def _create_combat_event(cls, kind: EventKind, tokenized: TokenizedLine) -> CombatEvent:
        fields = tokenized.fields
        if has_raid_flags(list(fields)):
            # kind, srcGUID, srcName, srcFlags, srcRaidFlags, dstGUID, dstName, dstFlags, dstRaidFlags
            source = (fields[1], fields[2], fields[3])
            target = (fields[5], fields[6], fields[7])
            payload_fields = fields[9:]
        else:
            # kind, srcGUID, srcName, srcFlags, dstGUID, dstName, dstFlags
            source = (fields[1], fields[2], fields[3])
            target = (fields[4], fields[5], fields[6])
            payload_fields = fields[7:]

        return CombatEvent(
            timestamp=tokenized.timestamp,
            kind=kind,
            source_id=source[0],
            source_name=clean_name(source[1]),
            source_flags=source[2],
            target_id=target[0],
            target_name=clean_name(target[1]),
            target_flags=target[2],
            fields=payload_fields,
            payload=cls._build_combat_payload(kind, payload_fields),
        )

    @classmethod
    def _create_meta_event(cls, kind: EventKind, tokenized: TokenizedLine) -> CombatEvent:
        payload_fields = tokenized.fields[1:]
        payload = cls._build_meta_payload(kind, payload_fields)

        source_id = ""
        if isinstance(payload, CombatantPayload):
            source_id = payload.player_guid

        return CombatEvent(
            timestamp=tokenized.timestamp,
            kind=kind,
            source_id=source_id,
            source_name="",
            source_flags="",
            target_id="",
            target_name="",
            target_flags="",
            fields=payload_fields,
            payload=payload,
        )

    @classmethod
    def _spell_ref(cls, kind: EventKind, params: Tuple[str, ...]) -> Optional[SpellRef]:
        if kind.is_swing or len(params) < 3:
            return None
        return SpellRef(
            spell_id=safe_int(params[0]),
            spell_name=clean_name(params[1]),
            school=parse_flags(params[2]),
        )

    @classmethod
    def _amount_offset(cls, params: Tuple[str, ...], base: int) -> int:
        """
        Locate the amount field.

        Swing-type events place the amount at offset 0, spell-type at 3.
        With advanced combat logging the amount slot holds a unit GUID and
        the amount follows the advanced unit block.
        """
        if base < len(params) and _looks_like_unit_id(params[base]):
            shifted = base + ADVANCED_PARAM_COUNT
            if shifted < len(params):
                return shifted
        return base

    @classmethod
    def _build_combat_payload(cls, kind: EventKind, params: Tuple[str, ...]) -> Payload:
        category = kind.category
        spell = cls._spell_ref(kind, params)

        if category is EventCategory.DAMAGE:
            offset = cls._amount_offset(params, 0 if kind.is_swing else 3)
            return DamagePayload(
                spell=spell,
                amount=max(0, safe_int(params[offset])) if offset < len(params) else 0,
                overkill=max(0, safe_int(params[offset + 1])) if offset + 1 < len(params) else 0,
            )

        if category is EventCategory.HEAL:
            offset = cls._amount_offset(params, 3)
            return HealPayload(
                spell=spell,
                amount=max(0, safe_int(params[offset])) if offset < len(params) else 0,
                overhealing=max(0, safe_int(params[offset + 1])) if offset + 1 < len(params) else 0,
            )

        if category is EventCategory.DEATH:
            return DeathPayload(unconscious=bool(params) and params[0] == "1")

        return SpellPayload(spell=spell)

    @classmethod
    def _build_meta_payload(cls, kind: EventKind, params: Tuple[str, ...]) -> Payload:
        if kind is EventKind.ENCOUNTER_START:
            # encounterID, encounterName, difficultyID, groupSize, instanceID
            return EncounterPayload(
                encounter_id=safe_int(_at(params, 0)),
                encounter_name=clean_name(_at(params, 1)),
                difficulty_id=safe_int(_at(params, 2)),
                group_size=safe_int(_at(params, 3)),
                instance_id=safe_int(_at(params, 4)),
            )

        if kind is EventKind.ENCOUNTER_END:
            # encounterID, encounterName, difficultyID, groupSize, success, fightTime
            return EncounterPayload(
                encounter_id=safe_int(_at(params, 0)),
                encounter_name=clean_name(_at(params, 1)),
                difficulty_id=safe_int(_at(params, 2)),
                group_size=safe_int(_at(params, 3)),
                success=safe_int(_at(params, 4)) == 1 if len(params) > 4 else None,
                duration_ms=safe_int(_at(params, 5)) if len(params) > 5 else None,
            )

        if kind is EventKind.CHALLENGE_MODE_START:
            # zoneName, instanceID, challengeModeID, keystoneLevel, [affixIDs]
            return ChallengeModePayload(
                zone_name=clean_name(_at(params, 0)),
                instance_id=safe_int(_at(params, 1)),
                challenge_id=safe_int(_at(params, 2)),
                keystone_level=safe_int(_at(params, 3)),
            )

        if kind is EventKind.CHALLENGE_MODE_END:
            # instanceID, success, keystoneLevel, totalTime
            return ChallengeModePayload(
                instance_id=safe_int(_at(params, 0)),
                success=safe_int(_at(params, 1)) == 1 if len(params) > 1 else None,
                keystone_level=safe_int(_at(params, 2)),
                duration_ms=safe_int(_at(params, 3)) if len(params) > 3 else None,
            )

        if kind is EventKind.COMBATANT_INFO:
            return cls._build_combatant_payload(params)

        # ZONE_CHANGE: zoneID, zoneName, difficultyID
        return ZonePayload(
            zone_id=safe_int(_at(params, 0)),
            zone_name=clean_name(_at(params, 1)),
            difficulty_id=safe_int(_at(params, 2)),
        )

    @classmethod
    def _build_combatant_payload(cls, params: Tuple[str, ...]) -> CombatantPayload:
        """
        Build identity fields from COMBATANT_INFO.

        The full client layout is playerGUID, faction, 20 stat columns,
        armor, specID, talents... ; the class is then derived from the
        spec. The compact layout is playerGUID, classID, specID.
        """
        guid = _at(params, 0)
        if len(params) >= 24:
            spec_id = safe_int(params[23], default=-1)
            return CombatantPayload(
                player_guid=guid,
                class_id=None,
                spec_id=spec_id if spec_id >= 0 else None,
            )

        class_id = safe_int(_at(params, 1), default=-1)
        spec_id = safe_int(_at(params, 2), default=-1)
        return CombatantPayload(
            player_guid=guid,
            class_id=class_id if class_id >= 0 else None,
            spec_id=spec_id if spec_id >= 0 else None,
        )


def _at(params: Tuple[str, ...], index: int) -> str:
    return params[index] if index < len(params) else ""
