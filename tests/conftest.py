"""Shared test helpers and fixtures."""

import copy

import pytest

from picks.models import (
    Candidate,
    Category,
    Participant,
    RankedSelection,
    RankMap,
    RankScope,
    RoundSnapshot,
)


def make_ranks(members: str, slots: int, ranks: dict[str, int] | None = None,
               user: str = "u1", category: str | None = "cat") -> RankMap:
    """Build a RankMap from a compact description.

    Args:
        members: Candidate ids as a string, one character each ("ABCDE")
        slots: Number of rankable slots
        ranks: {candidate_id: rank} for the ranked members

    Example:
        >>> make_ranks("ABCDE", 5, {"A": 1, "B": 2})
    """
    return RankMap.build(RankScope(user, category), list(members), slots, ranks)


def make_category(cat_id: str, pool: str | list[str], slots: int,
                  answers: str | list[str] | None = None) -> Category:
    """Build a Category whose candidates are named after their ids."""
    return Category(
        id=cat_id,
        name=cat_id.title(),
        pool=[Candidate(id=c, name=c) for c in pool],
        slots=slots,
        answer_set=frozenset(answers) if answers is not None else None,
    )


def make_snapshot(
    picks: dict[str, dict[str | None, dict[str, int | None]]],
    categories: list[Category] = (),
    top_list: Category | None = None,
    unfinalized: tuple[str, ...] = (),
) -> RoundSnapshot:
    """Build a RoundSnapshot from a compact picks table.

    Args:
        picks: {user_id: {category_id or None: {candidate_id: rank or None}}}
        unfinalized: Users whose finalization flag is not set

    User names equal their ids.
    """
    participants = [
        Participant(id=user, name=user, finalized=user not in unfinalized)
        for user in picks
    ]
    selections = [
        RankedSelection(user_id=user, candidate_id=candidate, rank=rank, category_id=cat)
        for user, by_category in picks.items()
        for cat, chosen in by_category.items()
        for candidate, rank in chosen.items()
    ]
    return RoundSnapshot(
        round_id="test",
        participants=participants,
        categories=list(categories),
        top_list=top_list,
        selections=selections,
    )


def standing_names(result) -> list[str]:
    """Extract row ids from a LeaderboardResult in display order."""
    return [s.id for s in result.standings]


def positions(result) -> dict[str, int]:
    return {s.id: s.position for s in result.standings}


def movies(prefix: str, count: int) -> list[dict[str, str]]:
    return [{"id": f"{prefix}{i}", "name": f"Movie {prefix}{i}"} for i in range(1, count + 1)]


ROUND = {
    "round_id": "2026",
    "participants": [
        {"id": "u1", "name": "Alice", "finalized": True},
        {"id": "u2", "name": "Bob", "finalized": True},
        {"id": "admin", "name": "Organiser", "finalized": True},
        {"id": "u3", "name": "Carol", "finalized": False},
    ],
    "top_list": {
        "id": "top", "name": "Top 3", "slots": 3,
        "pool": movies("m", 5),
        "answer_set": ["m1", "m2"],
    },
    "categories": [
        {
            "id": "picture", "name": "Best Picture", "slots": 2,
            "pool": movies("p", 4),
            "answer_set": None,
        },
    ],
    "selections": [
        {"user_id": "u1", "candidate_id": "m1", "rank": 1, "category_id": None},
        {"user_id": "u1", "candidate_id": "m3", "rank": 2, "category_id": None},
        {"user_id": "u2", "candidate_id": "m2", "rank": 1, "category_id": None},
        {"user_id": "u2", "candidate_id": "m1", "rank": 2, "category_id": None},
        {"user_id": "admin", "candidate_id": "m1", "rank": 1, "category_id": None},
        {"user_id": "admin", "candidate_id": "m2", "rank": 2, "category_id": None},
        {"user_id": "u3", "candidate_id": "m1", "rank": 1, "category_id": None},
        {"user_id": "u1", "candidate_id": "p1", "rank": None, "category_id": "picture"},
        {"user_id": "u1", "candidate_id": "p2", "rank": None, "category_id": "picture"},
    ],
}


@pytest.fixture
def round_data():
    """A round whose top-3 answers are out but whose category is not.

    Top-3 list (points = 4 - rank), answers m1 and m2:
    u1 (Alice):         m1 at 1, m3 at 2  -> 1 correct, rank sum 1
    u2 (Bob):           m2 at 1, m1 at 2  -> 2 correct, rank sum 3
    admin (Organiser):  m1 at 1, m2 at 2  -> 2 correct, rank sum 3
    u3 (Carol) has not finalized.

    Bob and Organiser tie on every key: m1 = 3 + 2 + 3 = 8 points and
    m2 = 3 + 2 = 5 points, so both carry 13 preference points.
    """
    return copy.deepcopy(ROUND)
