"""Leaderboard variants for scoring participants against revealed answers."""

from .base import Leaderboard

# Leaderboard registry - import variants here to register them
_leaderboards: list[type[Leaderboard]] = []


class ResultsUnavailable(Exception):
    """Raised when a leaderboard is requested before its answers are revealed."""
    pass


def register_leaderboard(leaderboard_class: type[Leaderboard]) -> type[Leaderboard]:
    """Decorator to register a leaderboard variant."""
    _leaderboards.append(leaderboard_class)
    return leaderboard_class


def get_all_leaderboards(excluded_users: set[str] | None = None) -> list[Leaderboard]:
    """Return instances of all registered leaderboard variants."""
    return [cls(excluded_users=excluded_users) for cls in _leaderboards]


def get_leaderboard(key: str, excluded_users: set[str] | None = None) -> Leaderboard | None:
    """Return an instance of the variant registered under ``key``."""
    for cls in _leaderboards:
        if cls.key == key:
            return cls(excluded_users=excluded_users)
    return None


def get_leaderboard_keys() -> list[str]:
    return [cls.key for cls in _leaderboards]
