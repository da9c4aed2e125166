"""Aggregate preference points over all finalized users' ranked picks."""

from dataclasses import dataclass

from picks.models import Candidate, RankedSelection, Standing
from picks.scoring.ranker import LeaderboardRanker, SortKey


@dataclass
class PreferenceStats:
    """Aggregate of every finalized user's picks of one candidate.

    Attributes:
        points: Sum of K + 1 - rank over all picks
        frequency: Number of users who ranked the candidate
        best_rank: Best (lowest) rank any user gave it; K + 1 if never picked.
            Only meaningful as a tie-break, never shown as a real rank.
    """
    points: int
    frequency: int
    best_rank: int

    def to_dict(self) -> dict[str, int]:
        return {"points": self.points, "frequency": self.frequency, "best_rank": self.best_rank}


PREFERENCE_KEYS = (
    SortKey("points", descending=True),
    SortKey("frequency", descending=True),
    SortKey("best_rank"),
)


def points_for_rank(rank: int | None, slots: int) -> int:
    """Points a single pick is worth: rank 1 = K points, rank K = 1 point.

    Unranked and out-of-range picks are worth nothing.
    """
    if rank is None or not 1 <= rank <= slots:
        return 0
    return slots + 1 - rank


def aggregate(
    candidates: list[Candidate], selections: list[RankedSelection], slots: int
) -> dict[str, PreferenceStats]:
    """Compute points, frequency and best rank for every candidate in the pool.

    Args:
        candidates: The pool; every candidate appears in the result
        selections: Ranked picks of finalized users only
        slots: K, the number of rankable slots

    Returns:
        Dict mapping candidate_id -> PreferenceStats, in pool order.
        Picks of candidates outside the pool are ignored.
    """
    stats = {
        c.id: PreferenceStats(points=0, frequency=0, best_rank=slots + 1)
        for c in candidates
    }
    for selection in selections:
        entry = stats.get(selection.candidate_id)
        points = points_for_rank(selection.rank, slots)
        if entry is None or points == 0:
            continue
        entry.points += points
        entry.frequency += 1
        entry.best_rank = min(entry.best_rank, selection.rank)
    return stats


def preference_table(
    candidates: list[Candidate], stats: dict[str, PreferenceStats]
) -> list[Standing]:
    """Rank the candidates that scored any points.

    Order: points (desc), frequency (desc), best rank (asc). Candidates equal
    on all three share a position.
    """
    rows = [
        Standing(id=c.id, name=c.name, keys=stats[c.id].to_dict())
        for c in candidates
        if c.id in stats and stats[c.id].points > 0
    ]
    return LeaderboardRanker(PREFERENCE_KEYS).rank(rows)
