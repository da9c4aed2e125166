"""Shared fixtures for scoring tests."""

import pytest
from tests.conftest import make_category, make_snapshot


def pool(prefix: str, size: int) -> list[str]:
    return [f"{prefix}{i}" for i in range(1, size + 1)]


@pytest.fixture
def top_list():
    """Top-10 list over twelve movies; M1, M3, M4 and M5 are correct."""
    return make_category("top", pool("M", 12), 10, answers=["M1", "M3", "M4", "M5"])


@pytest.fixture
def top_round(top_list):
    """Three finalized users with overlapping top-10 picks, one unfinalized.

              u1   u2   u3   u4 (not finalized)
    M1         1    2    1    1
    M2         2    1    3
    M3         3
    M4             10
    M5                  5

    Preference points (K=10, points = 11 - rank):
    M1 = 10 + 9 + 10 = 29, M2 = 9 + 10 + 8 = 27, M3 = 8, M5 = 6, M4 = 1

    Correct picks (M1, M3, M4, M5):
    u1: M1(1), M3(3)  -> 2 correct, rank sum 4,  points 29 + 8 = 37
    u2: M1(2), M4(10) -> 2 correct, rank sum 12, points 29 + 1 = 30
    u3: M1(1), M5(5)  -> 2 correct, rank sum 6,  points 29 + 6 = 35
    """
    return make_snapshot(
        {
            "u1": {None: {"M1": 1, "M2": 2, "M3": 3}},
            "u2": {None: {"M2": 1, "M1": 2, "M4": 10}},
            "u3": {None: {"M1": 1, "M5": 5, "M2": 3}},
            "u4": {None: {"M1": 1}},
        },
        top_list=top_list,
        unfinalized=("u4",),
    )


@pytest.fixture
def prize_categories():
    """Three revealed categories (shortlists of 10, 16, 20; five slots each)
    and one category whose answers are still hidden. In each revealed
    category the first five candidates are correct."""
    return [
        make_category("c10", pool("t", 10), 5, answers=pool("t", 5)),
        make_category("c16", pool("s", 16), 5, answers=pool("s", 5)),
        make_category("c20", pool("z", 20), 5, answers=pool("z", 5)),
        make_category("hidden", pool("h", 10), 5),
    ]


def picks(*ids: str) -> dict[str, None]:
    return {candidate_id: None for candidate_id in ids}


@pytest.fixture
def prize_round(prize_categories):
    """Selections for the prize round.

            c10             c16              c20             total
    u1   5/5 -> 10       4/5 -> 6         2/5 -> 1          17
    u2   4 picks -> 0    5/5 -> 13        3/5 -> 4          17
    u3   -               -                2/5 -> 1           1
    u4   5/5 (not finalized, ignored)

    u1 and u3 made identical picks in c20.
    """
    return make_snapshot(
        {
            "u1": {
                "c10": picks("t1", "t2", "t3", "t4", "t5"),
                "c16": picks("s1", "s2", "s3", "s4", "s6"),
                "c20": picks("z1", "z2", "z6", "z7", "z8"),
                "hidden": picks("h1", "h2", "h3", "h4", "h5"),
            },
            "u2": {
                "c10": picks("t1", "t2", "t3", "t4"),
                "c16": picks("s1", "s2", "s3", "s4", "s5"),
                "c20": picks("z1", "z2", "z3", "z9", "z10"),
            },
            "u3": {
                "c20": picks("z1", "z2", "z6", "z7", "z8"),
            },
            "u4": {
                "c10": picks("t1", "t2", "t3", "t4", "t5"),
            },
        },
        categories=prize_categories,
        unfinalized=("u4",),
    )
