"""Pick-based leaderboard for the flat top-K list."""

from picks.config import Config
from picks.logger import setup_logger
from picks.models import LeaderboardResult, RoundSnapshot, Standing
from picks.scoring import ResultsUnavailable, register_leaderboard
from picks.scoring.base import Leaderboard
from picks.scoring.preferences import aggregate, points_for_rank, preference_table
from picks.scoring.ranker import SortKey

logger = setup_logger(__name__)


@register_leaderboard
class TopPicksLeaderboard(Leaderboard):
    """Ranks users by how many of their top-K picks turned out correct.

    Tiebreakers (applied in order):
    1. Rank sum of the correct picks, lower wins: correct picks placed near
       the top of the list count for more.
    2. Preference points of the correct picks, lower wins: a correct pick few
       other users backed beats an obvious one.

    Users equal on all three keys share a position.
    """

    key = "top-picks"
    sort_keys = (
        SortKey("success_count", descending=True),
        SortKey("rank_sum"),
        SortKey("preference_points"),
    )

    @property
    def name(self) -> str:
        return "Top Picks"

    @property
    def description(self) -> str:
        return "Most correct picks; ties go to lower rank sum, then to less popular picks"

    def is_available(self, snapshot: RoundSnapshot) -> bool:
        return snapshot.top_list is not None and snapshot.top_list.revealed

    def compute(self, snapshot: RoundSnapshot) -> LeaderboardResult:
        if not self.is_available(snapshot):
            raise ResultsUnavailable(
                f"Answers for the top list of round {snapshot.round_id!r} "
                f"have not been revealed yet"
            )

        top_list = snapshot.top_list
        slots = top_list.slots
        names = {c.id: c.name for c in top_list.pool}
        participants = sorted(
            snapshot.finalized_participants(self.excluded_users),
            key=lambda p: (p.name, p.id),
        )
        selections = [
            s for s in snapshot.finalized_selections(self.excluded_users)
            if s.category_id is None and points_for_rank(s.rank, slots) > 0
        ]

        stats = aggregate(top_list.pool, selections, slots)

        by_user: dict[str, list] = {p.id: [] for p in participants}
        for selection in selections:
            by_user[selection.user_id].append(selection)

        standings = []
        for participant in participants:
            successful = []
            for selection in by_user[participant.id]:
                if selection.candidate_id not in top_list.answer_set:
                    continue
                successful.append({
                    "name": names.get(selection.candidate_id, "Unknown"),
                    "rank": selection.rank,
                    "points": stats[selection.candidate_id].points
                    if selection.candidate_id in stats else 0,
                })
            successful.sort(key=lambda pick: pick["rank"])

            standings.append(Standing(
                id=participant.id,
                name=participant.name,
                keys={
                    "success_count": len(successful),
                    "rank_sum": sum(pick["rank"] for pick in successful),
                    "preference_points": sum(pick["points"] for pick in successful),
                },
                details={"successful_picks": successful},
            ))

        ranked = self.ranker.rank(standings)
        logger.info(
            "Computed %s leaderboard for round %s: %d users",
            self.key, snapshot.round_id, len(ranked),
        )
        return LeaderboardResult(
            variant=self.key,
            name=self.name,
            standings=ranked,
            details={
                "total_users": len(participants),
                "answer_count": len(top_list.answer_set),
                "prize_pool": Config.ENTRY_FEE * len(participants),
                "preferences": [
                    row.to_dict() for row in preference_table(top_list.pool, stats)
                ],
            },
        )
