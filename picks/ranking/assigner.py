"""Rank assignment with conflict resolution inside one scope."""

from picks.logger import setup_logger
from picks.models import RankMap

logger = setup_logger(__name__)


class RankInvariantError(RuntimeError):
    """Raised when conflict resolution cannot keep ranks unique.

    This never happens for valid input in an unsaturated scope. It signals a
    bug or a scope with no free rank left for a displaced candidate.
    """
    pass


def find_free_rank(taken: set[int], start: int, slots: int) -> int | None:
    """Find a rank for a candidate displaced from ``start``.

    Scans upward from ``start + 1`` to ``slots`` first, then downward from
    ``start - 1`` to 1, so displaced candidates drift towards the worse end
    of the list. Returns None if every rank is taken.
    """
    for rank in range(start + 1, slots + 1):
        if rank not in taken:
            return rank
    for rank in range(start - 1, 0, -1):
        if rank not in taken:
            return rank
    return None


def ensure_unique(ranks: dict[str, int | None]) -> None:
    """Raise RankInvariantError if two candidates share a non-null rank."""
    seen: dict[int, str] = {}
    for candidate_id, rank in ranks.items():
        if rank is None:
            continue
        if rank in seen:
            logger.error(
                "Duplicate rank %d survived resolution: %r and %r",
                rank, seen[rank], candidate_id,
            )
            raise RankInvariantError(
                f"Rank {rank} is held by both {seen[rank]!r} and {candidate_id!r}"
            )
        seen[rank] = candidate_id


def assign(ranks: RankMap, target: str, new_rank: int) -> RankMap:
    """Give ``target`` the rank ``new_rank``, resolving any conflict.

    - If ``new_rank`` is free, only ``target`` changes.
    - If another candidate holds it and ``target`` already had a rank, the
      two swap ranks.
    - If another candidate holds it and ``target`` was unranked, the holder
      is displaced towards the nearest free rank: the first free rank above
      ``new_rank`` or, failing that, the first free rank below it. Ranked
      candidates between ``new_rank`` and that free rank shift one step
      along with it, keeping their relative order.

    Args:
        ranks: Current ranks of the scope
        target: Candidate being ranked
        new_rank: Requested rank, within [1, K]

    Returns:
        A new RankMap where ``target`` holds ``new_rank``

    Raises:
        RankValidationError: If ``target`` is not in the scope or the rank is
            out of bounds
        RankInvariantError: If the scope has no free rank for the displaced
            holder
    """
    ranks.check_member(target)
    ranks.check_rank(new_rank)

    current = ranks.get(target)
    holder = ranks.holder_of(new_rank)

    if holder is None or holder == target:
        return ranks.with_ranks({target: new_rank})

    updates: dict[str, int | None] = {}
    if current is not None:
        # Both ranked - swap
        updates[holder] = current
    else:
        free = find_free_rank(ranks.taken_ranks(), new_rank, ranks.slots)
        if free is None:
            logger.error(
                "No free rank for %r displaced from %d in %s (slots=%d)",
                holder, new_rank, ranks.scope, ranks.slots,
            )
            raise RankInvariantError(
                f"Scope {ranks.scope} is saturated: no free rank for "
                f"{holder!r} displaced from rank {new_rank}"
            )
        # free itself is unheld, so the inclusive range only moves the block
        low, high, step = (new_rank, free, 1) if free > new_rank else (free, new_rank, -1)
        for candidate_id, rank in ranks.as_dict().items():
            if rank is not None and low <= rank <= high:
                updates[candidate_id] = rank + step
    updates[target] = new_rank

    result = ranks.as_dict()
    result.update(updates)
    ensure_unique(result)
    logger.debug("Assigned %r -> %d in %s (%s)", target, new_rank, ranks.scope, updates)
    return ranks.with_ranks(updates)


def clear(ranks: RankMap, target: str) -> RankMap:
    """Unrank ``target``. Other candidates are left untouched."""
    ranks.check_member(target)
    return ranks.with_ranks({target: None})
