"""Drag-style reordering and visual order derivation."""

from dataclasses import dataclass

from picks.models import RankMap, RankValidationError
from picks.ranking.assigner import ensure_unique


@dataclass
class ReorderResult:
    """Outcome of a reorder gesture.

    Attributes:
        order: The new visual order
        ranks: The rank map implied by that order
        updates: Only the ranks that changed, {candidate_id: new rank or None}
    """
    order: list[str]
    ranks: RankMap
    updates: dict[str, int | None]


def array_move(items: list[str], from_index: int, to_index: int) -> list[str]:
    """Move one item from ``from_index`` to ``to_index``, returning a new list."""
    result = list(items)
    item = result.pop(from_index)
    result.insert(to_index, item)
    return result


def reorder(
    ranks: RankMap,
    order: list[str],
    moved: str,
    from_index: int,
    to_index: int,
) -> ReorderResult:
    """Project a drag gesture onto the scope's ranks.

    After the move, every candidate at position ``i`` that is either the
    moved one or already ranked gets rank ``i + 1``; unranked candidates stay
    unranked wherever they land. Positions past the last slot are outside the
    top-K, so candidates landing there become unranked.

    The new ranks are computed for the whole scope in one pass, without going
    through ``assign``.

    Args:
        ranks: Ranks before the move
        order: Visual order before the move
        moved: The dragged candidate
        from_index: Its 0-based index in ``order``
        to_index: The 0-based index it was dropped at

    Returns:
        ReorderResult with the new order and ranks

    Raises:
        RankValidationError: If the order does not match the scope or the
            indices do not point at ``moved``
    """
    if sorted(order) != sorted(ranks.members):
        raise RankValidationError(
            f"Visual order does not match the members of scope {ranks.scope}"
        )
    if not 0 <= from_index < len(order) or not 0 <= to_index < len(order):
        raise RankValidationError(
            f"Move {from_index} -> {to_index} is outside a list of {len(order)}"
        )
    if order[from_index] != moved:
        raise RankValidationError(
            f"Candidate at index {from_index} is {order[from_index]!r}, not {moved!r}"
        )

    new_order = array_move(order, from_index, to_index)
    before = ranks.as_dict()

    after: dict[str, int | None] = {}
    for index, candidate_id in enumerate(new_order):
        if candidate_id == moved or before[candidate_id] is not None:
            after[candidate_id] = index + 1 if index < ranks.slots else None
        else:
            after[candidate_id] = None

    ensure_unique(after)
    updates = {c: r for c, r in after.items() if before[c] != r}
    return ReorderResult(
        order=new_order,
        ranks=ranks.with_ranks(updates),
        updates=updates,
    )


def visual_order(ranks: RankMap, keep_default_order: bool = False) -> list[str]:
    """Derive the display order from the rank map.

    Ranked candidates come first by rank, then unranked ones in the scope's
    default order. With ``keep_default_order`` the default order is returned
    as is.
    """
    if keep_default_order:
        return list(ranks.members)
    ranked = list(ranks.ranked())
    unranked = [m for m in ranks.members if ranks.get(m) is None]
    return ranked + unranked
