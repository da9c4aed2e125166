"""Per-category statistics for the selection round."""

from dataclasses import dataclass, field
from typing import Any

from picks.models import Category, RoundSnapshot
from picks.scoring.prizes import DEFAULT_PRIZE_TABLE, PrizeTable, category_result


@dataclass
class CandidateGuesses:
    """How many complete selections included a candidate, and whose."""
    candidate_id: str
    name: str
    count: int
    users: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"candidate_id": self.candidate_id, "name": self.name,
                "count": self.count, "users": self.users}


@dataclass
class CategoryStats:
    """Aggregate view of one category across finalized users.

    Only complete selections (every slot filled) are counted. The result
    fields (earnings, accuracy) are filled in once the answers are revealed.

    Attributes:
        total_users: Users with a complete selection in this category
        guesses: Candidates by number of users picking them, most picked first
        top_candidates: All candidates tied for the most picks
        missed_top: For each top candidate, the users who did not pick it
        identical_selections: Groups of two or more users with the same picks
        total_earned: Sum of payouts in this category
        max_possible: Sum of payouts if everyone had been fully correct
        success_rate: total_earned / max_possible as a percentage
        successful_users: Users who won anything
        user_success_rate: successful_users / total_users as a percentage
        accuracy: accuracy[n] = number of users with exactly n correct picks
        min_correct_to_win: Fewest correct picks that pay in this pool tier
    """
    category_id: str
    category_name: str
    pool_size: int
    total_users: int
    guesses: list[CandidateGuesses]
    top_candidates: list[CandidateGuesses]
    missed_top: dict[str, list[str]]
    identical_selections: list[list[str]]
    revealed: bool = False
    total_earned: int = 0
    max_possible: int = 0
    success_rate: float = 0.0
    successful_users: int = 0
    user_success_rate: float = 0.0
    accuracy: list[int] = field(default_factory=list)
    min_correct_to_win: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "category_id": self.category_id,
            "category_name": self.category_name,
            "pool_size": self.pool_size,
            "total_users": self.total_users,
            "guesses": [g.to_dict() for g in self.guesses],
            "top_candidates": [g.to_dict() for g in self.top_candidates],
            "missed_top": self.missed_top,
            "identical_selections": self.identical_selections,
            "revealed": self.revealed,
            "total_earned": self.total_earned,
            "max_possible": self.max_possible,
            "success_rate": self.success_rate,
            "successful_users": self.successful_users,
            "user_success_rate": self.user_success_rate,
            "accuracy": self.accuracy,
            "min_correct_to_win": self.min_correct_to_win,
        }


def _percent(part: int, whole: int) -> float:
    return round(part * 100.0 / whole, 1) if whole else 0.0


def category_stats(
    snapshot: RoundSnapshot,
    category: Category,
    excluded_users: set[str] | None = None,
    table: PrizeTable = DEFAULT_PRIZE_TABLE,
) -> CategoryStats:
    """Build statistics for one category from finalized users' selections."""
    names = {c.id: c.name for c in category.pool}
    completed: dict[str, list[str]] = {}
    user_names = {p.id: p.name for p in snapshot.participants}
    for participant in snapshot.finalized_participants(excluded_users):
        picked = [
            s.candidate_id for s in snapshot.selections_for(participant.id, category.id)
            if s.candidate_id in names
        ]
        picked = list(dict.fromkeys(picked))
        if len(picked) == category.slots:
            completed[participant.id] = picked

    guess_map: dict[str, list[str]] = {}
    for user_id, picked in completed.items():
        for candidate_id in picked:
            guess_map.setdefault(candidate_id, []).append(user_names[user_id])

    guesses = sorted(
        (
            CandidateGuesses(
                candidate_id=candidate_id,
                name=names[candidate_id],
                count=len(users),
                users=sorted(users),
            )
            for candidate_id, users in guess_map.items()
        ),
        key=lambda g: (-g.count, g.name),
    )

    top = [g for g in guesses if g.count == guesses[0].count] if guesses else []
    missed_top = {}
    if top and top[0].count < len(completed):
        for guess in top:
            missed_top[guess.name] = sorted(
                user_names[user_id] for user_id, picked in completed.items()
                if guess.candidate_id not in picked
            )

    signatures: dict[tuple[str, ...], list[str]] = {}
    for user_id, picked in completed.items():
        signatures.setdefault(tuple(sorted(picked)), []).append(user_names[user_id])
    identical = [sorted(users) for users in signatures.values() if len(users) > 1]

    stats = CategoryStats(
        category_id=category.id,
        category_name=category.name,
        pool_size=category.pool_size,
        total_users=len(completed),
        guesses=guesses,
        top_candidates=top,
        missed_top=missed_top,
        identical_selections=identical,
    )
    if not category.revealed:
        return stats

    results = [category_result(category, picked, table) for picked in completed.values()]
    max_prize = table.max_prize(category.slots, category.pool_size)
    stats.revealed = True
    stats.total_earned = sum(r.prize for r in results)
    stats.max_possible = max_prize * len(results)
    stats.success_rate = _percent(stats.total_earned, stats.max_possible)
    stats.successful_users = sum(1 for r in results if r.prize >= 1)
    stats.user_success_rate = _percent(stats.successful_users, len(results))
    stats.accuracy = [0] * (category.slots + 1)
    for result in results:
        stats.accuracy[result.correct_count] += 1
    stats.min_correct_to_win = table.min_correct_to_win(category.slots, category.pool_size)
    return stats


def round_stats(
    snapshot: RoundSnapshot,
    excluded_users: set[str] | None = None,
    table: PrizeTable = DEFAULT_PRIZE_TABLE,
) -> list[CategoryStats]:
    """Statistics for every category of the round, in category order."""
    return [
        category_stats(snapshot, category, excluded_users, table)
        for category in snapshot.categories
    ]
