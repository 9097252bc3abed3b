"""
Unit tests for aggregation and performance metric calculation.
"""

import pytest

from logcoach.analysis.aggregator import ActorAggregator
from logcoach.analysis.metrics import calculate_metrics
from logcoach.config.settings import EngineSettings
from logcoach.models.actor import UNKNOWN_PLAYER, ActorStats
from logcoach.models.summary import Outcome, PerformanceSummary, Severity
from logcoach.parser.parser import parse_combat_log

from conftest import BOSS, HEALER, HERO, build_meta_line, heal, spell_damage, swing


OTHER = ("Player-1-DDD", "Sidekick")


def metrics_for(lines, **kwargs):
    return calculate_metrics(parse_combat_log("\n".join(lines)), **kwargs)


class TestActorStats:
    """Test the per-actor accumulator."""

    def test_duration_floor(self):
        actor = ActorStats(id="Player-1-AAA", damage_total=500)
        actor.observe_instant(1000)
        actor.observe_instant(1200)

        assert actor.active_seconds == pytest.approx(0.2)
        assert actor.fight_duration() == 1.0
        assert actor.get_dps() == 500

    def test_refine_name(self):
        actor = ActorStats(id="Player-1-AAA")
        actor.refine_name("")
        assert actor.display_name == UNKNOWN_PLAYER
        actor.refine_name("Hero")
        assert actor.display_name == "Hero"

    def test_repr(self):
        actor = ActorStats(id="Player-1-AAA", display_name="Hero", damage_total=10)
        assert "Hero" in repr(actor)
        assert "10 dmg" in repr(actor)


class TestScenarios:
    """End-to-end behaviour on small hand-written logs."""

    def test_player_and_creature_trade_swings(self, scenario_a_text):
        """Test main actor, damage total and incoming melee."""
        summary = calculate_metrics(parse_combat_log(scenario_a_text))

        assert summary.player_name == "Hero"
        assert summary.player_id == HERO[0]
        assert summary.total_damage == 1000
        assert len(summary.avoidable_damage) == 1

        record = summary.avoidable_damage[0]
        assert record.ability_name == "Melee"
        assert record.hit_count == 1
        assert record.total_damage == 300
        assert record.severity is Severity.CRITICAL

    def test_unknown_class_and_spec_fall_back(self):
        """Test that unmapped combatant identifiers do not fail."""
        summary = metrics_for(
            [
                build_meta_line("COMBATANT_INFO", ("Player-1-AAA", 99, 9999)),
                swing(1000),
            ]
        )

        assert summary.context.player_class == "Unknown"
        assert summary.context.player_spec == "Unknown"
        assert summary.context.role == "DPS"

    def test_known_spec_resolves_context(self):
        summary = metrics_for(
            [
                build_meta_line("COMBATANT_INFO", ("Player-1-AAA", 0) + (100,) * 20 + (5000, 65)),
                swing(1000),
            ]
        )

        assert summary.context.player_class == "Paladin"
        assert summary.context.player_spec == "Holy"
        assert summary.context.role == "Healer"

    def test_no_player_events_yields_empty_summary(self):
        """Test that a log with only creature activity returns defaults."""
        summary = metrics_for(
            [
                swing(300, source=BOSS, target=("Creature-1-EEE", "Add")),
                spell_damage(500, source=BOSS, target=("Creature-1-EEE", "Add")),
            ]
        )

        assert summary == PerformanceSummary.empty()
        assert summary.is_empty
        assert summary.player_name == UNKNOWN_PLAYER
        assert summary.total_damage == 0
        assert summary.total_healing == 0
        assert summary.dps == 0
        assert summary.hps == 0
        assert summary.timeline == []
        assert summary.avoidable_damage == []

    def test_empty_input(self):
        assert calculate_metrics([]) == PerformanceSummary.empty()

    def test_malformed_timestamp_line_is_ignored(self):
        """Test that a bad stamp changes nothing but the dropped line."""
        good = [swing(1000, ts="9/18/2025 20:23:42.758-4"), swing(500, ts="9/18/2025 20:23:44.758-4")]
        bad = good[0].replace("9/18/2025 20:23:42.758-4", "9/18/2025 20:23:43")

        expected = metrics_for(good)
        actual = metrics_for([good[0], bad, good[1]])

        assert actual == expected
        assert actual.event_count == 2


class TestMetrics:
    """Test totals, rates and actor selection."""

    def test_sample_log(self, sample_log_text):
        summary = calculate_metrics(parse_combat_log(sample_log_text))

        assert summary.player_name == "Hero"
        assert summary.total_damage == 4500
        assert summary.total_healing == 0
        assert summary.event_count == 3
        assert summary.fight_duration == pytest.approx(10.0)
        assert summary.dps == pytest.approx(450.0)
        assert summary.context.player_class == "Mage"
        assert summary.context.player_spec == "Fire"
        assert summary.encounter.boss_or_title == "Ulgrax the Devourer"
        assert summary.encounter.kill_or_wipe is Outcome.KILL

    def test_duration_has_one_second_floor(self):
        summary = metrics_for([swing(1000), swing(1000)])
        assert summary.fight_duration == 1.0
        assert summary.dps == 2000.0

    def test_healing_totals(self):
        summary = metrics_for(
            [
                heal(500, overhealing=100, ts="9/18/2025 20:23:40.000-4"),
                heal(700, ts="9/18/2025 20:23:44.000-4"),
            ]
        )

        assert summary.player_name == "Mender"
        assert summary.total_healing == 1200
        assert summary.hps == pytest.approx(300.0)

    def test_mirror_events_do_not_add_totals(self):
        summary = metrics_for(
            [
                swing(1000),
                swing(1000, kind="SWING_DAMAGE_LANDED"),
                heal(400, source=HERO, kind="SPELL_HEAL_ABSORBED"),
            ]
        )

        assert summary.total_damage == 1000
        assert summary.total_healing == 0

    def test_negative_amounts_do_not_lower_totals(self):
        """Test that corrupt negative amounts count as zero."""
        summary = metrics_for(
            [
                swing(1000),
                swing(-400),
                heal(500, source=HERO, ts="9/18/2025 20:23:43.000-4"),
                heal(-200, source=HERO, ts="9/18/2025 20:23:44.000-4"),
            ]
        )

        assert summary.total_damage == 1000
        assert summary.total_healing == 500

    def test_most_active_player_wins(self):
        summary = metrics_for([swing(100, source=OTHER), swing(100), swing(100)])
        assert summary.player_name == "Hero"

    def test_tie_goes_to_first_seen(self):
        summary = metrics_for([swing(100, source=OTHER), swing(900)])
        assert summary.player_name == "Sidekick"

    def test_target_name_hint(self):
        """Test selecting a less active player by case-insensitive name."""
        summary = metrics_for(
            [swing(100, source=OTHER), swing(100), swing(100)], target_name="sIdEkIcK"
        )
        assert summary.player_name == "Sidekick"
        assert summary.total_damage == 100

    def test_unmatched_hint_falls_back(self):
        summary = metrics_for([swing(100, source=OTHER), swing(100), swing(100)], target_name="Nobody")
        assert summary.player_name == "Hero"

    def test_idempotent(self, sample_log_text):
        """Test that the same buffer always produces the same summary."""
        first = calculate_metrics(parse_combat_log(sample_log_text))
        second = calculate_metrics(parse_combat_log(sample_log_text))
        assert first == second

    def test_custom_settings(self, sample_log_text):
        settings = EngineSettings(bucket_width_seconds=10, avoidable_top_n=0)
        summary = calculate_metrics(parse_combat_log(sample_log_text), settings=settings)

        assert summary.avoidable_damage == []
        assert all(bucket.width_seconds == 10 for bucket in summary.timeline)


class TestActorAggregator:
    """Test the dense actor table."""

    def test_damage_conservation(self):
        """Test that actor totals add up to every player-sourced damage amount."""
        lines = [
            swing(1000),
            spell_damage(2500),
            swing(300, source=OTHER),
            spell_damage(700, source=OTHER, kind="SPELL_PERIODIC_DAMAGE"),
            swing(400, source=BOSS, target=HERO),
            heal(500),
        ]
        events = parse_combat_log("\n".join(lines))
        aggregator = ActorAggregator().process_events(events)

        expected = sum(e.amount for e in events if e.is_damage and e.source_id.startswith("Player-"))
        assert sum(actor.damage_total for actor in aggregator.actors) == expected == 4500

    def test_only_player_sources_tracked(self):
        events = parse_combat_log("\n".join([swing(1000), swing(300, source=BOSS, target=HERO), heal(10)]))
        aggregator = ActorAggregator().process_events(events)

        assert [actor.id for actor in aggregator.actors] == [HERO[0], HEALER[0]]
        assert aggregator.get_actor(BOSS[0]) is None
        assert aggregator.get_actor(HERO[0]).damage_total == 1000

    def test_no_actors(self):
        assert ActorAggregator().process_events([]).select_main_actor() is None
