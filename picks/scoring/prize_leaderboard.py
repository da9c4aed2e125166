"""Money leaderboard for the per-category selection round."""

from picks.logger import setup_logger
from picks.models import Category, LeaderboardResult, RoundSnapshot, Standing
from picks.scoring import ResultsUnavailable, register_leaderboard
from picks.scoring.base import Leaderboard
from picks.scoring.prizes import DEFAULT_PRIZE_TABLE, PrizeTable, category_result, total_prize
from picks.scoring.ranker import SortKey

logger = setup_logger(__name__)


@register_leaderboard
class PrizeLeaderboard(Leaderboard):
    """Ranks users by total prize money won across categories.

    A category pays out only when the user filled every slot in it; see
    PrizeTable for the payouts. Categories whose answers are not revealed yet
    are skipped and reported as pending.
    """

    key = "prizes"
    sort_keys = (SortKey("total_prize", descending=True),)
    prize_table: PrizeTable = DEFAULT_PRIZE_TABLE

    @property
    def name(self) -> str:
        return "Prize Money"

    @property
    def description(self) -> str:
        return "Total payout over completed categories, by correct picks and shortlist size"

    def revealed_categories(self, snapshot: RoundSnapshot) -> list[Category]:
        return [c for c in snapshot.categories if c.revealed]

    def is_available(self, snapshot: RoundSnapshot) -> bool:
        return bool(self.revealed_categories(snapshot))

    def compute(self, snapshot: RoundSnapshot) -> LeaderboardResult:
        categories = self.revealed_categories(snapshot)
        if not categories:
            raise ResultsUnavailable(
                f"No category answers of round {snapshot.round_id!r} "
                f"have been revealed yet"
            )

        participants = sorted(
            snapshot.finalized_participants(self.excluded_users),
            key=lambda p: (p.name, p.id),
        )
        picked: dict[tuple[str, str], list[str]] = {}
        for selection in snapshot.finalized_selections(self.excluded_users):
            if selection.category_id is None:
                continue
            picked.setdefault((selection.user_id, selection.category_id), []).append(
                selection.candidate_id
            )

        standings = []
        for participant in participants:
            results = [
                category_result(
                    category, picked.get((participant.id, category.id), []), self.prize_table
                )
                for category in categories
            ]
            standings.append(Standing(
                id=participant.id,
                name=participant.name,
                keys={"total_prize": total_prize(results)},
                details={
                    "successful_categories": sum(1 for r in results if r.prize >= 1),
                    "completed_categories": sum(1 for r in results if r.participated),
                    "category_results": [r.to_dict() for r in results],
                },
            ))

        ranked = self.ranker.rank(standings)
        pending = [c.id for c in snapshot.categories if not c.revealed]
        if pending:
            logger.info("Round %s has unrevealed categories: %s", snapshot.round_id, pending)
        return LeaderboardResult(
            variant=self.key,
            name=self.name,
            standings=ranked,
            details={
                "total_users": len(participants),
                "total_paid": sum(s.keys["total_prize"] for s in ranked),
                "categories": [c.id for c in categories],
                "pending_categories": pending,
            },
        )
