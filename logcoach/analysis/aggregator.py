"""
Single-pass per-actor aggregation of classified combat events.
"""

import logging
from typing import Dict, List, Optional

from ..config.settings import EngineSettings, get_settings
from ..models.actor import ActorStats
from ..models.summary import TimelineBucket
from ..parser.events import CombatEvent
from ..parser.timestamps import TimestampNormalizer
from .timeline import TimelineBucketizer

logger = logging.getLogger(__name__)


class ActorAggregator:
    """
    Aggregates combat events into one ActorStats per player source.

    Actors live in a dense table: each identifier gets an index the
    first time it is seen, and stats and timelines are stored by index.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()
        self.actors: List[ActorStats] = []
        self._index: Dict[str, int] = {}
        self._timelines: List[TimelineBucketizer] = []
        self._normalizer = TimestampNormalizer()

    def process_events(self, events: List[CombatEvent]) -> "ActorAggregator":
        """
        Process a list of events and aggregate metrics.

        Args:
            events: Classified events in log order

        Returns:
            self, for chaining
        """
        for event in events:
            self._process_event(event)

        logger.debug(f"Aggregated {len(events)} events into {len(self.actors)} player actors")
        return self

    def _process_event(self, event: CombatEvent):
        if event.is_meta:
            return

        instant = self._normalizer.to_instant(event.timestamp)

        if not event.source_id.startswith(self.settings.player_prefix):
            return

        index = self._ensure_actor(event.source_id)
        actor = self.actors[index]
        actor.event_count += 1
        actor.refine_name(event.source_name)
        if instant is not None:
            actor.observe_instant(instant)

        if event.is_damage:
            actor.damage_total += event.amount
            if instant is not None:
                self._timelines[index].add(instant, damage=event.amount)
        elif event.is_heal:
            actor.healing_total += event.amount
            if instant is not None:
                self._timelines[index].add(instant, healing=event.amount)

    def _ensure_actor(self, actor_id: str) -> int:
        index = self._index.get(actor_id)
        if index is None:
            index = len(self.actors)
            self._index[actor_id] = index
            self.actors.append(ActorStats(id=actor_id))
            self._timelines.append(TimelineBucketizer(self.settings.bucket_width_seconds))
        return index

    def get_actor(self, actor_id: str) -> Optional[ActorStats]:
        index = self._index.get(actor_id)
        return self.actors[index] if index is not None else None

    def select_main_actor(self, target_name: Optional[str] = None) -> Optional[int]:
        """
        Pick the actor the summary is about.

        A name hint matches display names case-insensitively. Without a
        hint, or when it matches nothing, the actor with the most events
        wins; ties go to the actor seen first.

        Args:
            target_name: Optional display name to look for

        Returns:
            Index into self.actors, or None when there are no actors
        """
        if not self.actors:
            return None

        if target_name:
            wanted = target_name.strip().lower()
            for index, actor in enumerate(self.actors):
                if actor.display_name.lower() == wanted:
                    return index
            logger.info(f"No player named {target_name!r}; falling back to most active player")

        best = 0
        for index, actor in enumerate(self.actors):
            if actor.event_count > self.actors[best].event_count:
                best = index
        return best

    def timeline_for(self, index: int) -> List[TimelineBucket]:
        """Get the sorted sparse timeline of one actor."""
        return self._timelines[index].buckets()
