"""All-or-nothing persistence of rank changes against an external store."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from picks.logger import setup_logger
from picks.models import RankMap, RankScope, RankValidationError
from picks.ranking import assigner, reorder as reorder_module

logger = setup_logger(__name__)


class FinalizedError(RankValidationError):
    """Raised when a user whose selections are finalized tries to change them."""

    def __init__(self, user_id: str):
        super().__init__(f"User {user_id!r} has already finalized their selections")
        self.user_id = user_id


class StoreError(Exception):
    """Raised by a RankStore when a batch could not be written."""
    pass


class BatchNotApplied(Exception):
    """Raised when the store did not confirm a batch.

    The caller's confirmed state is unchanged, so the same batch can be
    recomputed and retried.
    """
    pass


@dataclass
class RankBatch:
    """Rank changes for one scope, applied as a single unit.

    Attributes:
        scope: The scope the changes belong to
        to_upsert: (candidate_id, rank) pairs to create or update
        to_delete: Candidates whose selection should be removed
    """
    scope: RankScope
    to_upsert: list[tuple[str, int]] = field(default_factory=list)
    to_delete: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.to_upsert) + len(self.to_delete)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0


def diff_ranks(confirmed: RankMap, local: RankMap) -> RankBatch:
    """Compute the batch that turns ``confirmed`` into ``local``.

    The batch length is the number of unsaved changes.
    """
    if confirmed.scope != local.scope or confirmed.members != local.members:
        raise RankValidationError("Cannot diff rank maps of different scopes")
    batch = RankBatch(scope=local.scope)
    for candidate_id in local.members:
        old, new = confirmed.get(candidate_id), local.get(candidate_id)
        if old == new:
            continue
        if new is None:
            batch.to_delete.append(candidate_id)
        else:
            batch.to_upsert.append((candidate_id, new))
    return batch


class RankStore(ABC):
    """External storage for rank selections.

    Implementations must apply a batch atomically: either every upsert and
    delete is written, or none is.
    """

    @abstractmethod
    def is_finalized(self, user_id: str) -> bool:
        """Whether the user's selections for the round are locked."""
        pass

    @abstractmethod
    def apply(self, batch: RankBatch) -> None:
        """Apply every change in ``batch`` in one transaction.

        Raises:
            FinalizedError: If the user is finalized
            StoreError: If the batch could not be written
        """
        pass

    @abstractmethod
    def finalize(self, user_id: str) -> None:
        """Set the user's finalization flag.

        Raises:
            StoreError: If the flag could not be written
        """
        pass


def apply_rank_batch(
    store: RankStore,
    ranks: RankMap,
    to_upsert: list[tuple[str, int]],
    to_delete: list[str],
) -> RankMap:
    """Validate a batch against ``ranks`` and ask the store to apply it.

    Args:
        store: Where the batch is written
        ranks: Last confirmed ranks of the scope
        to_upsert: (candidate_id, rank) pairs
        to_delete: Candidates to unrank

    Returns:
        The confirmed rank map after the batch

    Raises:
        FinalizedError: If the user has finalized
        RankValidationError: If the batch references unknown candidates,
            out-of-range ranks, or leaves two candidates on the same rank
        BatchNotApplied: If the store failed
    """
    user_id = ranks.scope.user_id
    if store.is_finalized(user_id):
        raise FinalizedError(user_id)

    updates: dict[str, int | None] = {c: None for c in to_delete}
    for candidate_id, rank in to_upsert:
        if candidate_id in updates:
            raise RankValidationError(
                f"Candidate {candidate_id!r} appears more than once in the batch"
            )
        updates[candidate_id] = rank
    result = ranks.with_ranks(updates)

    batch = RankBatch(scope=ranks.scope, to_upsert=list(to_upsert), to_delete=list(to_delete))
    try:
        store.apply(batch)
    except StoreError as e:
        logger.warning("Batch of %d changes for %s not applied: %s", len(batch), ranks.scope, e)
        raise BatchNotApplied(f"Batch not applied: {e}") from e
    logger.info("Applied batch of %d changes for %s", len(batch), ranks.scope)
    return result


class RankSession:
    """One user's editing session for one scope.

    Keeps the last confirmed ranks next to the local working copy. Button
    clicks (``assign``/``clear``) and drags (``reorder``) only change the
    working copy; ``save`` sends the difference to the store and advances the
    confirmed copy once the store has accepted it.
    """

    def __init__(self, confirmed: RankMap, finalized: bool = False):
        self.confirmed = confirmed
        self.local = confirmed
        self.finalized = finalized

    @property
    def scope(self) -> RankScope:
        return self.confirmed.scope

    def _check_open(self) -> None:
        if self.finalized:
            raise FinalizedError(self.scope.user_id)

    def assign(self, candidate_id: str, rank: int) -> RankMap:
        self._check_open()
        self.local = assigner.assign(self.local, candidate_id, rank)
        return self.local

    def clear(self, candidate_id: str) -> RankMap:
        self._check_open()
        self.local = assigner.clear(self.local, candidate_id)
        return self.local

    def reorder(self, order: list[str], moved: str, from_index: int, to_index: int) -> list[str]:
        """Apply a drag gesture and return the new visual order."""
        self._check_open()
        result = reorder_module.reorder(self.local, order, moved, from_index, to_index)
        self.local = result.ranks
        return result.order

    def visual_order(self, keep_default_order: bool = False) -> list[str]:
        return reorder_module.visual_order(self.local, keep_default_order)

    def pending(self) -> RankBatch:
        return diff_ranks(self.confirmed, self.local)

    @property
    def has_unsaved_changes(self) -> bool:
        return not self.pending().is_empty

    @property
    def is_complete(self) -> bool:
        return self.local.is_complete

    def discard(self) -> None:
        """Drop unsaved changes."""
        self.local = self.confirmed

    def save(self, store: RankStore) -> RankMap:
        """Send pending changes to the store.

        Raises:
            FinalizedError: If the session or the stored user is finalized
            BatchNotApplied: If the store failed; local changes are kept
        """
        self._check_open()
        batch = self.pending()
        if batch.is_empty:
            return self.confirmed
        try:
            self.confirmed = apply_rank_batch(
                store, self.confirmed, batch.to_upsert, batch.to_delete
            )
        except FinalizedError:
            self.finalized = True
            raise
        return self.confirmed

    def finalize(self, store: RankStore) -> None:
        """Save pending changes, then lock the selections.

        Raises:
            FinalizedError: If the session or the stored user is finalized
            BatchNotApplied: If saving or setting the flag failed; the
                session stays open
        """
        self.save(store)
        try:
            store.finalize(self.scope.user_id)
        except StoreError as e:
            logger.warning("Finalization for %s not applied: %s", self.scope, e)
            raise BatchNotApplied(f"Finalization not applied: {e}") from e
        self.finalized = True
        logger.info("Finalized selections for %s", self.scope)
