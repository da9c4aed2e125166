"""Prize table keyed on correct picks and shortlist size."""

from dataclasses import dataclass, field
from typing import Any

from picks.models import Category


@dataclass(frozen=True)
class PrizeBand:
    """One row of the prize table.

    Pays ``amount`` for exactly ``correct`` correct picks in a category whose
    shortlist size is within [min_pool, max_pool] (``max_pool=None`` means no
    upper bound).
    """
    correct: int
    min_pool: int
    max_pool: int | None
    amount: int

    def matches(self, correct: int, pool_size: int) -> bool:
        if correct != self.correct or pool_size < self.min_pool:
            return False
        return self.max_pool is None or pool_size <= self.max_pool


@dataclass(frozen=True)
class PrizeTable:
    """Lookup table of payouts. Anything not listed pays 0."""
    bands: tuple[PrizeBand, ...]

    def prize(self, correct: int, pool_size: int) -> int:
        for band in self.bands:
            if band.matches(correct, pool_size):
                return band.amount
        return 0

    def max_prize(self, slots: int, pool_size: int) -> int:
        """Payout for getting every slot right."""
        return self.prize(slots, pool_size)

    def min_correct_to_win(self, slots: int, pool_size: int) -> int | None:
        """Fewest correct picks that pay anything, or None if nothing pays."""
        for correct in range(slots + 1):
            if self.prize(correct, pool_size) > 0:
                return correct
        return None


# Shortlist tiers: up to 10, 11-16, 17 and more. Two correct picks only pay
# when the shortlist has at least 20 candidates.
DEFAULT_PRIZE_TABLE = PrizeTable(bands=(
    PrizeBand(correct=5, min_pool=0, max_pool=10, amount=10),
    PrizeBand(correct=5, min_pool=11, max_pool=16, amount=13),
    PrizeBand(correct=5, min_pool=17, max_pool=None, amount=17),
    PrizeBand(correct=4, min_pool=0, max_pool=10, amount=5),
    PrizeBand(correct=4, min_pool=11, max_pool=16, amount=6),
    PrizeBand(correct=4, min_pool=17, max_pool=None, amount=8),
    PrizeBand(correct=3, min_pool=0, max_pool=10, amount=2),
    PrizeBand(correct=3, min_pool=11, max_pool=16, amount=3),
    PrizeBand(correct=3, min_pool=17, max_pool=None, amount=4),
    PrizeBand(correct=2, min_pool=20, max_pool=None, amount=1),
))


def prize(correct: int, pool_size: int, table: PrizeTable = DEFAULT_PRIZE_TABLE) -> int:
    return table.prize(correct, pool_size)


@dataclass
class CategoryResult:
    """One user's outcome in one category.

    Attributes:
        participated: Whether the user filled every slot; incomplete
            categories pay nothing even if some picks are correct
        correct_candidates: Names of the correct picks (complete selections only)
    """
    category_id: str
    category_name: str
    pool_size: int
    participated: bool
    correct_count: int = 0
    prize: int = 0
    correct_candidates: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category_id": self.category_id,
            "category_name": self.category_name,
            "pool_size": self.pool_size,
            "participated": self.participated,
            "correct_count": self.correct_count,
            "prize": self.prize,
            "correct_candidates": self.correct_candidates,
        }


def category_result(
    category: Category,
    selected_ids: list[str],
    table: PrizeTable = DEFAULT_PRIZE_TABLE,
) -> CategoryResult:
    """Score one user's selection in a revealed category."""
    pool_ids = set(category.candidate_ids)
    selected = [c for c in dict.fromkeys(selected_ids) if c in pool_ids]
    if len(selected) != category.slots:
        return CategoryResult(
            category_id=category.id,
            category_name=category.name,
            pool_size=category.pool_size,
            participated=False,
        )

    answers = category.answer_set or frozenset()
    correct = [c for c in category.pool if c.id in answers and c.id in selected]
    return CategoryResult(
        category_id=category.id,
        category_name=category.name,
        pool_size=category.pool_size,
        participated=True,
        correct_count=len(correct),
        prize=table.prize(len(correct), category.pool_size),
        correct_candidates=[c.name for c in correct],
    )


def total_prize(results: list[CategoryResult]) -> int:
    return sum(r.prize for r in results)
