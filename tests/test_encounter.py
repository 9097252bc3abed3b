"""
Unit tests for encounter and player context extraction.
"""

from logcoach.analysis.encounter import collect_combatants, guess_encounter, player_context_for
from logcoach.models.summary import DEFAULT_ENCOUNTER_TITLE, DEFAULT_ZONE, Outcome, PlayerContext
from logcoach.parser.parser import parse_combat_log

from conftest import build_meta_line, swing


def events_for(lines):
    return parse_combat_log("\n".join(lines))


class TestGuessEncounter:
    """Test the encounter guess."""

    def test_raid_kill(self, sample_log_text):
        info = guess_encounter(parse_combat_log(sample_log_text))

        assert info.boss_or_title == "Ulgrax the Devourer"
        assert info.difficulty_tag == "Mythic"
        assert info.keystone_level is None
        assert info.zone_name == "Hallowfall"
        assert info.duration_seconds == 180
        assert info.kill_or_wipe is Outcome.KILL

    def test_wipe(self):
        info = guess_encounter(
            events_for(
                [
                    build_meta_line("ENCOUNTER_START", (2902, '"Ulgrax"', 15, 20, 2657)),
                    build_meta_line("ENCOUNTER_END", (2902, '"Ulgrax"', 15, 20, 0, 61400)),
                ]
            )
        )
        assert info.difficulty_tag == "Heroic"
        assert info.kill_or_wipe is Outcome.WIPE
        assert info.duration_seconds == 61

    def test_last_encounter_wins(self):
        info = guess_encounter(
            events_for(
                [
                    build_meta_line("ENCOUNTER_START", (1, '"First Boss"', 14, 20, 1)),
                    build_meta_line("ENCOUNTER_END", (1, '"First Boss"', 14, 20, 1, 1000)),
                    build_meta_line("ENCOUNTER_START", (2, '"Second Boss"', 16, 20, 1)),
                ]
            )
        )
        assert info.boss_or_title == "Second Boss"
        assert info.difficulty_tag == "Mythic"

    def test_mythic_plus(self):
        """Test that a keystone run keeps its tag across boss pulls."""
        info = guess_encounter(
            events_for(
                [
                    build_meta_line("ZONE_CHANGE", (2652, '"The Stonevault"', 8)),
                    build_meta_line(
                        "CHALLENGE_MODE_START", ('"The Stonevault"', 2652, 501, 12, "[10,9,147]")
                    ),
                    build_meta_line("ENCOUNTER_START", (2854, '"E.D.N.A."', 8, 5, 2652)),
                    build_meta_line("ENCOUNTER_END", (2854, '"E.D.N.A."', 8, 5, 1, 90000)),
                    build_meta_line("CHALLENGE_MODE_END", (2652, 1, 12, 1834000)),
                ]
            )
        )

        assert info.boss_or_title == "E.D.N.A."
        assert info.difficulty_tag == "Mythic+"
        assert info.keystone_level == 12
        assert info.zone_name == "The Stonevault"
        assert info.duration_seconds == 1834
        assert info.kill_or_wipe is Outcome.KILL

    def test_defaults_without_meta_events(self):
        info = guess_encounter(events_for([swing(100)]), fallback_duration=42.4)

        assert info.boss_or_title == DEFAULT_ENCOUNTER_TITLE
        assert info.difficulty_tag == "Normal"
        assert info.zone_name == DEFAULT_ZONE
        assert info.duration_seconds == 42
        assert info.kill_or_wipe is Outcome.UNKNOWN

    def test_unknown_difficulty_falls_back(self):
        info = guess_encounter(
            events_for([build_meta_line("ENCOUNTER_START", (1, '"Boss"', 999, 20, 1))])
        )
        assert info.difficulty_tag == "Normal"

    def test_to_dict(self, sample_log_text):
        data = guess_encounter(parse_combat_log(sample_log_text)).to_dict()
        assert data["kill_or_wipe"] == "Kill"
        assert data["keystone_level"] is None


class TestPlayerContext:
    """Test class, spec and role resolution."""

    def test_latest_combatant_info_wins(self):
        events = events_for(
            [
                build_meta_line("COMBATANT_INFO", ("Player-1-AAA", 8, 62)),
                build_meta_line("COMBATANT_INFO", ("Player-1-AAA", 8, 64)),
                build_meta_line("COMBATANT_INFO", ("Player-1-CCC", 5, 256)),
            ]
        )

        assert set(collect_combatants(events)) == {"Player-1-AAA", "Player-1-CCC"}
        context = player_context_for(events, "Player-1-AAA")
        assert (context.player_class, context.player_spec, context.role) == ("Mage", "Frost", "DPS")

    def test_missing_player_falls_back(self):
        assert player_context_for([], "Player-1-AAA") == PlayerContext()

    def test_resolve(self):
        assert PlayerContext.resolve(None, 104) == PlayerContext("Druid", "Guardian", "Tank")
        assert PlayerContext.resolve(1, None) == PlayerContext("Warrior", "Unknown", "DPS")
        assert PlayerContext.resolve(None, None) == PlayerContext()
