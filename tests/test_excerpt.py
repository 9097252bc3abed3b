"""
Unit tests for raw-log pre-filters.
"""

from logcoach.parser.excerpt import UNKNOWN_PLAYER, extract_combat_lines, prefilter_raw_log

from conftest import BOSS, HERO, build_line, heal, spell_damage, swing


def cast(source=HERO, ts="9/18/2025 20:23:42.758-4"):
    return build_line("SPELL_CAST_SUCCESS", source, BOSS, (133, '"Fireball"', "0x4"), ts)


def died(target=HERO):
    return build_line("UNIT_DIED", ("0000000000000000", "nil"), target, (0,))


def aura(source=HERO):
    return build_line("SPELL_AURA_APPLIED", source, source, (1459, '"Arcane Intellect"', "0x40", "BUFF"))


class TestExtractCombatLines:
    """Test the timestamped-tail excerpt."""

    def test_keeps_only_timestamped_lines(self):
        text = "\n".join(["header junk", swing(1), "", "  ", spell_damage(2), "trailer"])
        assert extract_combat_lines(text) == "\n".join([swing(1), spell_damage(2)])

    def test_keeps_the_tail(self):
        lines = [swing(i) for i in range(10)]
        assert extract_combat_lines("\n".join(lines), max_lines=3) == "\n".join(lines[-3:])

    def test_byte_order_mark(self):
        assert extract_combat_lines("\ufeff" + swing(1)) == swing(1)

    def test_zero_lines(self):
        assert extract_combat_lines(swing(1), max_lines=0) == ""


class TestPrefilterRawLog:
    """Test the cast/damage/death/aura pre-filter."""

    def test_counts_for_main_player(self):
        text = "\n".join(
            [
                cast(),
                cast(),
                aura(),
                swing(999),
                heal(10),
                spell_damage(400, source=BOSS, target=HERO),
                spell_damage(600, source=BOSS, target=HERO),
                spell_damage(5000, source=BOSS, target=("Player-1-DDD", "Sidekick")),
                died(),
            ]
        )
        digest = prefilter_raw_log(text)

        assert digest.source_name == "Hero"
        assert digest.casts == 2
        assert digest.deaths == 1
        assert digest.damage_taken == 1000
        assert swing(999) not in digest.cleaned_text
        assert heal(10) not in digest.cleaned_text
        assert len(digest.cleaned_text.splitlines()) == 7

    def test_line_cap(self):
        text = "\n".join([cast()] * 20)
        digest = prefilter_raw_log(text, max_lines=5)

        assert len(digest.cleaned_text.splitlines()) == 5
        assert digest.casts == 20

    def test_no_player_lines(self):
        digest = prefilter_raw_log(spell_damage(100, source=BOSS, target=("Creature-1-EEE", "Add")))
        assert digest.source_name == UNKNOWN_PLAYER
        assert digest.damage_taken == 0
