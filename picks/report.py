"""Orchestrator: load a round snapshot and compute its leaderboards."""

from dataclasses import dataclass, field
from typing import Any

from picks.config import Config
from picks.logger import setup_logger
from picks.models import LeaderboardResult, RoundSnapshot
from picks.scoring import (
    ResultsUnavailable,
    get_all_leaderboards,
    get_leaderboard,
    get_leaderboard_keys,
)
# Import variants to register them
from picks.scoring import prize_leaderboard  # noqa: F401
from picks.scoring import top_picks  # noqa: F401
from picks.scoring.stats import round_stats

logger = setup_logger(__name__)


@dataclass
class RoundReport:
    """Every available leaderboard of a round, plus category statistics."""
    snapshot: RoundSnapshot
    results: list[LeaderboardResult]
    unavailable: dict[str, str] = field(default_factory=dict)
    stats: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "round_id": self.snapshot.round_id,
            "num_participants": len(self.snapshot.participants),
            "num_finalized": sum(1 for p in self.snapshot.participants if p.finalized),
            "results": [r.to_dict() for r in self.results],
            "unavailable": self.unavailable,
            "category_stats": self.stats,
        }


class ReportError(Exception):
    """Error while building a report."""
    pass


def load_snapshot(data: dict[str, Any]) -> RoundSnapshot:
    """Build a RoundSnapshot from JSON data.

    Raises:
        ReportError: If the data is not a valid snapshot
    """
    if not isinstance(data, dict):
        raise ReportError("Round data must be a JSON object")
    try:
        return RoundSnapshot.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ReportError(f"Invalid round data: {e}") from e


def compute_leaderboard(snapshot: RoundSnapshot, variant: str) -> LeaderboardResult:
    """Compute one leaderboard variant.

    Raises:
        ReportError: If the variant is unknown
        ResultsUnavailable: If its answers have not been revealed
    """
    leaderboard = get_leaderboard(variant, excluded_users=Config.get_excluded_users())
    if leaderboard is None:
        raise ReportError(
            f"Unknown leaderboard {variant!r}. "
            f"Available: {', '.join(get_leaderboard_keys())}"
        )
    return leaderboard.compute(snapshot)


def compute_all(snapshot: RoundSnapshot) -> RoundReport:
    """Compute every registered leaderboard that is available.

    Leaderboards whose answers are not revealed yet are listed under
    ``unavailable`` with the reason, rather than shown with everyone at zero.
    """
    excluded = Config.get_excluded_users()
    results = []
    unavailable = {}
    for leaderboard in get_all_leaderboards(excluded_users=excluded):
        try:
            results.append(leaderboard.compute(snapshot))
        except ResultsUnavailable as e:
            logger.info("Leaderboard %s unavailable: %s", leaderboard.key, e)
            unavailable[leaderboard.key] = str(e)

    stats = [s.to_dict() for s in round_stats(snapshot, excluded_users=excluded)]
    return RoundReport(
        snapshot=snapshot,
        results=results,
        unavailable=unavailable,
        stats=stats,
    )
