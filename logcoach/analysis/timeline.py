"""
Fixed-width timeline bucketing for damage and healing.

Buckets are sparse: a window without damage or healing events has no
bucket at all, which keeps "no data" distinct from "zero output".
"""

from typing import Dict, List

from ..models.summary import TimelineBucket


class TimelineBucketizer:
    """Accumulates amounts into windows keyed by floor(instant / width)."""

    def __init__(self, width_seconds: int = 5):
        if width_seconds <= 0:
            raise ValueError(f"Bucket width must be positive: {width_seconds}")
        self.width_seconds = width_seconds
        self.width_ms = width_seconds * 1000
        self._sums: Dict[int, List[int]] = {}

    def bucket_key(self, instant_ms: int) -> int:
        return (instant_ms // self.width_ms) * self.width_ms

    def add(self, instant_ms: int, damage: int = 0, healing: int = 0):
        """
        Add amounts at an instant.

        Args:
            instant_ms: Instant from the parse call's timestamp axis
            damage: Damage amount to add
            healing: Healing amount to add
        """
        sums = self._sums.setdefault(self.bucket_key(instant_ms), [0, 0])
        sums[0] += damage
        sums[1] += healing

    def buckets(self) -> List[TimelineBucket]:
        """
        Build the sorted timeline.

        Returns:
            Buckets ascending by start, with starts in seconds relative to
            the earliest bucket
        """
        if not self._sums:
            return []

        keys = sorted(self._sums)
        origin = keys[0]
        return [
            TimelineBucket(
                bucket_start=(key - origin) // 1000,
                damage_sum=self._sums[key][0],
                healing_sum=self._sums[key][1],
                width_seconds=self.width_seconds,
            )
            for key in keys
        ]
