"""
World of Warcraft data mappings and configurations.

This module contains configurable mappings for class, specialization and
difficulty identifiers as they appear in combat logs.
"""

from typing import Dict, NamedTuple, Optional


ROLE_TANK = "Tank"
ROLE_HEALER = "Healer"
ROLE_DPS = "DPS"

FALLBACK_CLASS = "Unknown"
FALLBACK_SPEC = "Unknown"
FALLBACK_ROLE = ROLE_DPS


class SpecInfo(NamedTuple):
    """Specialization name, role and owning class."""

    name: str
    role: str
    class_id: int


# Configurable class name mappings
CLASS_NAMES: Dict[int, str] = {
    1: "Warrior",
    2: "Paladin",
    3: "Hunter",
    4: "Rogue",
    5: "Priest",
    6: "Death Knight",
    7: "Shaman",
    8: "Mage",
    9: "Warlock",
    10: "Monk",
    11: "Druid",
    12: "Demon Hunter",
    13: "Evoker",
}


# All specializations
SPECIALIZATIONS: Dict[int, SpecInfo] = {
    # Death Knight
    250: SpecInfo("Blood", ROLE_TANK, 6),
    251: SpecInfo("Frost", ROLE_DPS, 6),
    252: SpecInfo("Unholy", ROLE_DPS, 6),

    # Demon Hunter
    577: SpecInfo("Havoc", ROLE_DPS, 12),
    581: SpecInfo("Vengeance", ROLE_TANK, 12),

    # Druid
    102: SpecInfo("Balance", ROLE_DPS, 11),
    103: SpecInfo("Feral", ROLE_DPS, 11),
    104: SpecInfo("Guardian", ROLE_TANK, 11),
    105: SpecInfo("Restoration", ROLE_HEALER, 11),

    # Evoker
    1467: SpecInfo("Devastation", ROLE_DPS, 13),
    1468: SpecInfo("Preservation", ROLE_HEALER, 13),
    1473: SpecInfo("Augmentation", ROLE_DPS, 13),

    # Hunter
    253: SpecInfo("Beast Mastery", ROLE_DPS, 3),
    254: SpecInfo("Marksmanship", ROLE_DPS, 3),
    255: SpecInfo("Survival", ROLE_DPS, 3),

    # Mage
    62: SpecInfo("Arcane", ROLE_DPS, 8),
    63: SpecInfo("Fire", ROLE_DPS, 8),
    64: SpecInfo("Frost", ROLE_DPS, 8),

    # Monk
    268: SpecInfo("Brewmaster", ROLE_TANK, 10),
    269: SpecInfo("Windwalker", ROLE_DPS, 10),
    270: SpecInfo("Mistweaver", ROLE_HEALER, 10),

    # Paladin
    65: SpecInfo("Holy", ROLE_HEALER, 2),
    66: SpecInfo("Protection", ROLE_TANK, 2),
    70: SpecInfo("Retribution", ROLE_DPS, 2),

    # Priest
    256: SpecInfo("Discipline", ROLE_HEALER, 5),
    257: SpecInfo("Holy", ROLE_HEALER, 5),
    258: SpecInfo("Shadow", ROLE_DPS, 5),

    # Rogue
    259: SpecInfo("Assassination", ROLE_DPS, 4),
    260: SpecInfo("Outlaw", ROLE_DPS, 4),
    261: SpecInfo("Subtlety", ROLE_DPS, 4),

    # Shaman
    262: SpecInfo("Elemental", ROLE_DPS, 7),
    263: SpecInfo("Enhancement", ROLE_DPS, 7),
    264: SpecInfo("Restoration", ROLE_HEALER, 7),

    # Warlock
    265: SpecInfo("Affliction", ROLE_DPS, 9),
    266: SpecInfo("Demonology", ROLE_DPS, 9),
    267: SpecInfo("Destruction", ROLE_DPS, 9),

    # Warrior
    71: SpecInfo("Arms", ROLE_DPS, 1),
    72: SpecInfo("Fury", ROLE_DPS, 1),
    73: SpecInfo("Protection", ROLE_TANK, 1),
}


# Difficulty ID -> coarse tag shown in summaries
DIFFICULTY_NAMES: Dict[int, str] = {
    # Dungeons
    1: "Normal",
    2: "Heroic",
    23: "Mythic",
    24: "Timewalking",
    8: "Mythic+",

    # Raids - Classic
    3: "Normal",
    4: "Normal",
    5: "Heroic",
    6: "Heroic",

    # Raids - Modern
    17: "LFR",
    14: "Normal",
    15: "Heroic",
    16: "Mythic",

    # Raids - Special
    9: "Normal",
    33: "Timewalking",
}

DEFAULT_DIFFICULTY = "Normal"
CHALLENGE_MODE_DIFFICULTY = "Mythic+"


def get_class_name(class_id: Optional[int]) -> str:
    """Get the class name for a class ID, or the fallback."""
    if class_id is None:
        return FALLBACK_CLASS
    return CLASS_NAMES.get(class_id, FALLBACK_CLASS)


def get_spec_info(spec_id: Optional[int]) -> Optional[SpecInfo]:
    """Get specialization info for a spec ID, if known."""
    if spec_id is None:
        return None
    return SPECIALIZATIONS.get(spec_id)


def get_difficulty_name(difficulty_id: Optional[int]) -> str:
    """
    Get the difficulty tag for a difficulty ID.

    Args:
        difficulty_id: WoW difficulty ID from combat log

    Returns:
        Difficulty tag, DEFAULT_DIFFICULTY when unknown
    """
    if difficulty_id is None:
        return DEFAULT_DIFFICULTY
    return DIFFICULTY_NAMES.get(difficulty_id, DEFAULT_DIFFICULTY)
