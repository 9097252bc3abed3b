"""
Deterministic pseudonyms for player names.
"""

from dataclasses import replace
from typing import Dict, List, Optional

from ..parser.events import CombatEvent


class Anonymizer:
    """
    Replaces player names with Player1, Player2, ... in order of first
    appearance.

    Only names attached to a player-prefixed identifier are substituted.
    The table lives on the instance, so use a fresh instance per call.
    """

    def __init__(self, player_prefix: str = "Player-", pseudonym_prefix: str = "Player"):
        self.player_prefix = player_prefix
        self.pseudonym_prefix = pseudonym_prefix
        self.mapping: Dict[str, str] = {}

    def pseudonym_for(self, name: str) -> str:
        pseudonym = self.mapping.get(name)
        if pseudonym is None:
            pseudonym = f"{self.pseudonym_prefix}{len(self.mapping) + 1}"
            self.mapping[name] = pseudonym
        return pseudonym

    def _rename(self, unit_id: str, name: str) -> str:
        if name and unit_id.startswith(self.player_prefix):
            return self.pseudonym_for(name)
        return name

    def anonymize_event(self, event: CombatEvent) -> CombatEvent:
        """Return a copy of the event with player names substituted."""
        source_name = self._rename(event.source_id, event.source_name)
        target_name = self._rename(event.target_id, event.target_name)
        if source_name == event.source_name and target_name == event.target_name:
            return event
        return replace(event, source_name=source_name, target_name=target_name)

    def anonymize(self, events: List[CombatEvent]) -> List[CombatEvent]:
        return [self.anonymize_event(event) for event in events]

    def translate(self, name: Optional[str]) -> Optional[str]:
        """
        Map a real name to its pseudonym, case-insensitively.

        Names that were never substituted are returned unchanged.
        """
        if not name:
            return name
        wanted = name.strip().lower()
        for original, pseudonym in self.mapping.items():
            if original.lower() == wanted:
                return pseudonym
        return name


def anonymize_events(events: List[CombatEvent], player_prefix: str = "Player-") -> List[CombatEvent]:
    """Anonymize a list of events with a fresh pseudonym table."""
    return Anonymizer(player_prefix=player_prefix).anonymize(events)
