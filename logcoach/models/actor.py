"""
Per-actor running statistics.
"""

from dataclasses import dataclass
from typing import Optional


UNKNOWN_PLAYER = "Unknown Player"


@dataclass
class ActorStats:
    """
    Accumulator for one player-prefixed source identifier.

    Totals and counts only ever increase during an aggregation pass; the
    display name is refined when a real name shows up.
    """

    id: str
    display_name: str = UNKNOWN_PLAYER
    damage_total: int = 0
    healing_total: int = 0
    event_count: int = 0
    first_seen_ms: Optional[int] = None
    last_seen_ms: Optional[int] = None

    def refine_name(self, name: str):
        """Adopt a name if it is a real one."""
        if name and name != UNKNOWN_PLAYER:
            self.display_name = name

    def observe_instant(self, instant_ms: int):
        """Widen the active window to include an instant."""
        if self.first_seen_ms is None or instant_ms < self.first_seen_ms:
            self.first_seen_ms = instant_ms
        if self.last_seen_ms is None or instant_ms > self.last_seen_ms:
            self.last_seen_ms = instant_ms

    @property
    def active_seconds(self) -> float:
        """Seconds between first and last observed event."""
        if self.first_seen_ms is None or self.last_seen_ms is None:
            return 0.0
        return (self.last_seen_ms - self.first_seen_ms) / 1000.0

    def fight_duration(self) -> float:
        """Active duration, never less than one second."""
        return max(1.0, self.active_seconds)

    def get_dps(self) -> float:
        return self.damage_total / self.fight_duration()

    def get_hps(self) -> float:
        return self.healing_total / self.fight_duration()

    def __repr__(self) -> str:
        return (
            f"ActorStats({self.display_name} [{self.id}]: "
            f"{self.damage_total} dmg, {self.healing_total} heal, {self.event_count} events)"
        )
