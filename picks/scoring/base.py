"""Abstract base class for leaderboard variants."""

from abc import ABC, abstractmethod

from picks.models import LeaderboardResult, RoundSnapshot
from picks.scoring.ranker import LeaderboardRanker, SortKey


class Leaderboard(ABC):
    """Abstract base class for leaderboard variants.

    Each variant scores finalized users from a round snapshot and orders them
    with its own comparator chain. Variants are registered via the
    @register_leaderboard decorator in picks/scoring/__init__.py.
    """

    #: Registry key used to request this variant
    key: str = ""

    #: Default comparator chain, most significant key first
    sort_keys: tuple[SortKey, ...] = ()

    def __init__(
        self,
        sort_keys: tuple[SortKey, ...] | None = None,
        excluded_users: set[str] | None = None,
    ):
        self.ranker = LeaderboardRanker(sort_keys or self.sort_keys)
        self.excluded_users = excluded_users or set()

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this leaderboard."""
        pass

    @property
    def description(self) -> str:
        """Optional description of how this leaderboard ranks users."""
        return ""

    @abstractmethod
    def is_available(self, snapshot: RoundSnapshot) -> bool:
        """Whether the answers this leaderboard needs have been revealed."""
        pass

    @abstractmethod
    def compute(self, snapshot: RoundSnapshot) -> LeaderboardResult:
        """Rank the round's finalized users.

        Args:
            snapshot: Read model of the round

        Returns:
            LeaderboardResult with positioned standings

        Raises:
            ResultsUnavailable: If the answer set is not revealed yet
        """
        pass
