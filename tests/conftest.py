"""
Pytest configuration and shared fixtures for the test suite.

Provides a combat log line builder and small sample logs used across
the parser, analysis and CLI tests.
"""

import pytest
from pathlib import Path

import sys

sys.path.insert(0, str(Path(__file__).parent.parent))


HERO = ("Player-1-AAA", "Hero")
HEALER = ("Player-1-CCC", "Mender")
BOSS = ("Creature-1-BBB", "Boss")

DEFAULT_TS = "9/18/2025 20:23:42.758-4"

SWING_PARAMS = ("-1", "1", "0", "0", "0", "nil", "nil", "nil")
SPELL_TAIL = ("0", "4", "0", "0", "0", "nil", "nil", "nil")


def build_line(kind, source=HERO, target=BOSS, params=(), ts=DEFAULT_TS):
    """Build a generic (raid-flag layout) combat log line."""
    line = (
        f'{ts}  {kind},{source[0]},"{source[1]}",0x511,0x0,'
        f'{target[0]},"{target[1]}",0xa48,0x0'
    )
    return line + "".join(f",{p}" for p in params)


def build_meta_line(kind, params=(), ts=DEFAULT_TS):
    """Build a special-shape line (no source/target block)."""
    return f"{ts}  {kind}," + ",".join(str(p) for p in params)


def swing(amount, source=HERO, target=BOSS, ts=DEFAULT_TS, kind="SWING_DAMAGE"):
    return build_line(kind, source, target, (amount,) + SWING_PARAMS, ts)


def spell_damage(amount, spell="Fireball", source=HERO, target=BOSS, ts=DEFAULT_TS,
                 kind="SPELL_DAMAGE", spell_id=133):
    return build_line(kind, source, target, (spell_id, f'"{spell}"', "0x4", amount) + SPELL_TAIL, ts)


def heal(amount, overhealing=0, source=HEALER, target=HERO, ts=DEFAULT_TS, kind="SPELL_HEAL"):
    return build_line(
        kind, source, target, (2061, '"Flash Heal"', "0x2", amount, overhealing, 0, "nil"), ts
    )


@pytest.fixture
def sample_log_lines():
    """Sample combat log lines for testing."""
    return [
        "9/18/2025 20:23:40.000-4  COMBAT_LOG_VERSION,22,ADVANCED_LOG_ENABLED,0,BUILD_VERSION,11.2.0,PROJECT_ID,1",
        build_meta_line("ZONE_CHANGE", (2649, '"Hallowfall"', 16), ts="9/18/2025 20:23:40.100-4"),
        build_meta_line(
            "ENCOUNTER_START", (2902, '"Ulgrax the Devourer"', 16, 20, 2657),
            ts="9/18/2025 20:23:40.200-4",
        ),
        build_meta_line("COMBATANT_INFO", ("Player-1-AAA", 8, 63), ts="9/18/2025 20:23:40.300-4"),
        swing(1000, ts="9/18/2025 20:23:42.758-4"),
        spell_damage(2000, ts="9/18/2025 20:23:44.000-4"),
        swing(300, source=BOSS, target=HERO, ts="9/18/2025 20:23:45.500-4"),
        heal(500, overhealing=100, ts="9/18/2025 20:23:46.000-4"),
        spell_damage(1500, ts="9/18/2025 20:23:52.758-4"),
        build_meta_line(
            "ENCOUNTER_END", (2902, '"Ulgrax the Devourer"', 16, 20, 1, 180000),
            ts="9/18/2025 20:23:53.000-4",
        ),
    ]


@pytest.fixture
def sample_log_text(sample_log_lines):
    """The sample lines joined into one buffer."""
    return "\n".join(sample_log_lines) + "\n"


@pytest.fixture
def scenario_a_text():
    """A player swings a creature for 1000, the creature swings back for 300."""
    return "\n".join(
        [
            swing(1000, ts="9/18/2025 20:23:42.758-4"),
            swing(300, source=BOSS, target=HERO, ts="9/18/2025 20:23:43.100-4"),
        ]
    )


@pytest.fixture
def log_file(tmp_path, sample_log_text):
    """Sample log written to disk with a byte-order-mark."""
    path = tmp_path / "WoWCombatLog.txt"
    path.write_text(sample_log_text, encoding="utf-8-sig")
    return path


@pytest.fixture
def isolated_config(monkeypatch):
    """Restore global settings and game-data tables after a test mutates them."""
    from logcoach.config import settings as settings_module
    from logcoach.config import wow_data

    monkeypatch.setattr(settings_module, "settings", settings_module.EngineSettings())
    monkeypatch.setattr(wow_data, "CLASS_NAMES", dict(wow_data.CLASS_NAMES))
    monkeypatch.setattr(wow_data, "SPECIALIZATIONS", dict(wow_data.SPECIALIZATIONS))
    monkeypatch.setattr(wow_data, "DIFFICULTY_NAMES", dict(wow_data.DIFFICULTY_NAMES))
    return settings_module
