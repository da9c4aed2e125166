"""Shared fixtures for ranking engine tests."""

import pytest
from tests.conftest import make_ranks

from picks.ranking.batch import FinalizedError, RankBatch, RankStore, StoreError


class InMemoryRankStore(RankStore):
    """RankStore double that records applied batches.

    Set ``fail_next`` to make the next ``apply`` raise StoreError, and
    ``fail_finalize`` to make ``finalize`` raise it.
    """

    def __init__(self):
        self.finalized: set[str] = set()
        self.rows: dict[tuple, int] = {}
        self.applied: list[RankBatch] = []
        self.fail_next = False
        self.fail_finalize = False

    def is_finalized(self, user_id: str) -> bool:
        return user_id in self.finalized

    def apply(self, batch: RankBatch) -> None:
        if batch.scope.user_id in self.finalized:
            raise FinalizedError(batch.scope.user_id)
        if self.fail_next:
            self.fail_next = False
            raise StoreError("connection reset")
        for candidate_id in batch.to_delete:
            self.rows.pop((batch.scope, candidate_id), None)
        for candidate_id, rank in batch.to_upsert:
            self.rows[(batch.scope, candidate_id)] = rank
        self.applied.append(batch)

    def finalize(self, user_id: str) -> None:
        if self.fail_finalize:
            raise StoreError("connection reset")
        self.finalized.add(user_id)


@pytest.fixture
def store():
    return InMemoryRankStore()


@pytest.fixture
def top_three():
    """Five slots, A-B-C ranked 1-3, D and E unranked.

         rank
    A     1
    B     2
    C     3
    D     -
    E     -
    """
    return make_ranks("ABCDE", 5, {"A": 1, "B": 2, "C": 3})


@pytest.fixture
def full_five():
    """Five slots, all filled: A=1 ... E=5, plus unranked F."""
    return make_ranks("ABCDEF", 5, {"A": 1, "B": 2, "C": 3, "D": 4, "E": 5})


def assert_unique(ranks):
    """No two members share a non-null rank."""
    held = [r for r in ranks.as_dict().values() if r is not None]
    assert len(held) == len(set(held))
