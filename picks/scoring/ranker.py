"""Ordering of standings by a chain of sort keys with tied positions."""

from dataclasses import dataclass
from typing import Any

from picks.models import Standing


@dataclass(frozen=True)
class SortKey:
    """One link of a comparator chain.

    Attributes:
        name: Key in ``Standing.keys`` to compare
        descending: True if higher values rank better
    """
    name: str
    descending: bool = False

    def value(self, standing: Standing) -> Any:
        return standing.keys[self.name]


class LeaderboardRanker:
    """Sorts standings by an ordered chain of keys and assigns positions.

    The first key decides; later keys only break ties of the earlier ones.
    Rows equal on every key keep their input order and share a position.
    The next distinct row gets its own 1-indexed index, so three rows tied
    for 2nd are followed by 5th, not 3rd.

    Example:
        >>> ranker = LeaderboardRanker([
        ...     SortKey("success_count", descending=True),
        ...     SortKey("rank_sum"),
        ... ])
    """

    def __init__(self, keys: list[SortKey] | tuple[SortKey, ...]):
        if not keys:
            raise ValueError("A leaderboard needs at least one sort key")
        self.keys = tuple(keys)

    def signature(self, standing: Standing) -> tuple:
        return tuple(key.value(standing) for key in self.keys)

    def sort(self, standings: list[Standing]) -> list[Standing]:
        """Return standings in ranked order (stable for exact ties)."""
        ordered = list(standings)
        # Stable sorts from the least significant key up
        for key in reversed(self.keys):
            ordered.sort(key=key.value, reverse=key.descending)
        return ordered

    def rank(self, standings: list[Standing]) -> list[Standing]:
        """Sort standings and fill in ``position`` and ``tied``."""
        ordered = self.sort(standings)
        for index, standing in enumerate(ordered):
            if index > 0 and self.signature(standing) == self.signature(ordered[index - 1]):
                standing.position = ordered[index - 1].position
                standing.tied = True
                ordered[index - 1].tied = True
            else:
                standing.position = index + 1
                standing.tied = False
        return ordered
