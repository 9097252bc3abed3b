"""
Performance metric calculation for the main actor of a combat log.
"""

import logging
from typing import List, Optional

from ..config.settings import EngineSettings, get_settings
from ..models.summary import PerformanceSummary
from ..parser.events import CombatEvent
from .aggregator import ActorAggregator
from .avoidable import AvoidableDamageDetector
from .encounter import guess_encounter, player_context_for

logger = logging.getLogger(__name__)


def calculate_metrics(
    events: List[CombatEvent],
    target_name: Optional[str] = None,
    settings: Optional[EngineSettings] = None,
) -> PerformanceSummary:
    """
    Derive the performance summary from classified events.

    Aggregation and timeline bucketing share one forward pass; the
    avoidable damage detector runs a second, filtered pass once the main
    actor is known.

    Args:
        events: Classified events in log order
        target_name: Optional display name of the player to summarize
        settings: Engine settings, defaults to the global settings

    Returns:
        PerformanceSummary; the empty default when no player acted
    """
    settings = settings or get_settings()

    aggregator = ActorAggregator(settings).process_events(events)
    main_index = aggregator.select_main_actor(target_name)
    if main_index is None:
        logger.info("No player-sourced events found; returning empty summary")
        return PerformanceSummary.empty()

    actor = aggregator.actors[main_index]
    duration = actor.fight_duration()

    avoidable = AvoidableDamageDetector(settings).detect(
        events, main_actor_id=actor.id, main_damage_total=actor.damage_total
    )

    summary = PerformanceSummary(
        player_name=actor.display_name,
        player_id=actor.id,
        context=player_context_for(events, actor.id),
        total_damage=actor.damage_total,
        total_healing=actor.healing_total,
        dps=actor.damage_total / duration,
        hps=actor.healing_total / duration,
        fight_duration=duration,
        event_count=actor.event_count,
        timeline=aggregator.timeline_for(main_index),
        avoidable_damage=avoidable,
        encounter=guess_encounter(events, fallback_duration=duration),
    )

    logger.info(
        f"Main actor {summary.player_name}: {summary.total_damage} damage, "
        f"{summary.total_healing} healing over {duration:.1f}s "
        f"({len(aggregator.actors)} players seen)"
    )
    return summary
