"""Core data models for rank scopes, round snapshots and leaderboard standings."""

from dataclasses import dataclass, field
from typing import Any, Iterator, Self


class RankValidationError(ValueError):
    """Raised when a requested rank change is invalid for its scope.

    Covers ranks outside [1, K], candidates that are not members of the
    scope, and caller-supplied rank maps that already contain duplicates.
    """
    pass


@dataclass(frozen=True)
class Candidate:
    """Something that can be picked: a movie, or a movie+person pair."""
    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass
class Category:
    """A pool of candidates with a fixed number of rankable slots.

    Attributes:
        id: Category identifier
        name: Display name
        pool: Eligible candidates in their default (display) order
        slots: Number of rankable slots (K)
        answer_set: Ids of the candidates that turned out to be correct,
            or None while the answers have not been revealed
    """
    id: str
    name: str
    pool: list[Candidate]
    slots: int
    answer_set: frozenset[str] | None = None

    @property
    def pool_size(self) -> int:
        """Shortlist size, used to pick the prize tier."""
        return len(self.pool)

    @property
    def revealed(self) -> bool:
        return bool(self.answer_set)

    @property
    def candidate_ids(self) -> list[str]:
        return [c.id for c in self.pool]

    def get_candidate(self, candidate_id: str) -> Candidate | None:
        for candidate in self.pool:
            if candidate.id == candidate_id:
                return candidate
        return None


@dataclass(frozen=True)
class RankScope:
    """The unit within which ranks must be unique.

    A scope is one user's ranking of one category, or of the flat top-list
    when ``category_id`` is None.
    """
    user_id: str
    category_id: str | None = None

    @property
    def is_top_list(self) -> bool:
        return self.category_id is None


@dataclass(frozen=True)
class RankMap:
    """Ranks of every member of one scope.

    Every member maps to either None (unranked) or an int in [1, slots], and
    no two members share a rank. Instances are immutable: the ranking
    operations return new maps.

    Example:
        >>> ranks = RankMap.build(
        ...     RankScope("u1", "best-picture"),
        ...     ["A", "B", "C", "D", "E"],
        ...     slots=5,
        ...     ranks={"A": 1, "B": 2},
        ... )
        >>> ranks.holder_of(2)
        'B'
    """
    scope: RankScope
    members: tuple[str, ...]
    slots: int
    ranks: tuple[int | None, ...]

    def __post_init__(self):
        if self.slots < 1:
            raise RankValidationError(f"Scope must have at least one slot, got {self.slots}")
        if len(self.members) != len(self.ranks):
            raise RankValidationError("Every member needs exactly one rank entry")
        if len(set(self.members)) != len(self.members):
            raise RankValidationError("Scope members must be unique")
        seen: dict[int, str] = {}
        for member, rank in zip(self.members, self.ranks):
            if rank is None:
                continue
            self.check_rank(rank)
            if rank in seen:
                raise RankValidationError(
                    f"Rank {rank} is held by both {seen[rank]!r} and {member!r}"
                )
            seen[rank] = member

    @classmethod
    def build(
        cls,
        scope: RankScope,
        members: list[str],
        slots: int,
        ranks: dict[str, int | None] | None = None,
    ) -> Self:
        """Build a map from a ``{candidate_id: rank}`` dict.

        Members missing from ``ranks`` are unranked. Keys that are not
        members raise RankValidationError.
        """
        ranks = ranks or {}
        unknown = [c for c in ranks if c not in members]
        if unknown:
            raise RankValidationError(
                f"Candidates {unknown} are not part of scope {scope}"
            )
        return cls(
            scope=scope,
            members=tuple(members),
            slots=slots,
            ranks=tuple(ranks.get(m) for m in members),
        )

    @classmethod
    def for_category(
        cls, user_id: str, category: Category, ranks: dict[str, int | None] | None = None
    ) -> Self:
        scope = RankScope(user_id, category.id)
        return cls.build(scope, category.candidate_ids, category.slots, ranks)

    def __contains__(self, candidate_id: object) -> bool:
        return candidate_id in self.members

    def __iter__(self) -> Iterator[str]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)

    def check_rank(self, rank: int) -> None:
        """Raise RankValidationError unless rank is within [1, slots]."""
        if isinstance(rank, bool) or not isinstance(rank, int):
            raise RankValidationError(f"Rank must be an integer, got {rank!r}")
        if not 1 <= rank <= self.slots:
            raise RankValidationError(
                f"Rank {rank} is outside [1, {self.slots}]"
            )

    def check_member(self, candidate_id: str) -> None:
        """Raise RankValidationError unless the candidate belongs to this scope."""
        if candidate_id not in self.members:
            raise RankValidationError(
                f"Candidate {candidate_id!r} is not part of scope {self.scope}"
            )

    def get(self, candidate_id: str) -> int | None:
        self.check_member(candidate_id)
        return self.ranks[self.members.index(candidate_id)]

    def holder_of(self, rank: int) -> str | None:
        """Return the candidate holding ``rank``, or None if it is free."""
        for member, held in zip(self.members, self.ranks):
            if held == rank:
                return member
        return None

    def as_dict(self) -> dict[str, int | None]:
        return dict(zip(self.members, self.ranks))

    def ranked(self) -> dict[str, int]:
        """Ranked members only, ordered by rank."""
        pairs = [(m, r) for m, r in zip(self.members, self.ranks) if r is not None]
        return dict(sorted(pairs, key=lambda pair: pair[1]))

    def taken_ranks(self) -> set[int]:
        return {r for r in self.ranks if r is not None}

    def free_ranks(self) -> list[int]:
        taken = self.taken_ranks()
        return [r for r in range(1, self.slots + 1) if r not in taken]

    @property
    def ranked_count(self) -> int:
        return sum(1 for r in self.ranks if r is not None)

    @property
    def is_complete(self) -> bool:
        """Whether every slot is filled."""
        return self.ranked_count == self.slots

    def with_ranks(self, updates: dict[str, int | None]) -> Self:
        """Return a copy with ``updates`` applied, validating the result."""
        for candidate_id in updates:
            self.check_member(candidate_id)
        current = self.as_dict()
        current.update(updates)
        return type(self)(
            scope=self.scope,
            members=self.members,
            slots=self.slots,
            ranks=tuple(current[m] for m in self.members),
        )


@dataclass(frozen=True)
class RankedSelection:
    """One user's pick of one candidate, in a category or in the top-list."""
    user_id: str
    candidate_id: str
    rank: int | None = None
    category_id: str | None = None

    @property
    def scope(self) -> RankScope:
        return RankScope(self.user_id, self.category_id)


@dataclass
class Participant:
    """A user taking part in a round."""
    id: str
    name: str
    finalized: bool = False


def _as_object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"Each {what} must be a JSON object, got {type(value).__name__}")
    return value


def _as_int(value: Any, what: str) -> int:
    """Parse a whole number; fractional values are rejected, not truncated."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"{what} must be an integer, got {value!r}")
    return int(value)


@dataclass
class RoundSnapshot:
    """Read model of one round, as supplied by the external store.

    Attributes:
        round_id: Round identifier
        participants: Everyone who has entered the round
        categories: Categories picked by unranked selection (prize round)
        top_list: The flat top-K list ranked without a category, whose
            answer set is the correct set for the pick leaderboard
        selections: Every user's selections, finalized or not
    """
    round_id: str
    participants: list[Participant]
    categories: list[Category] = field(default_factory=list)
    top_list: Category | None = None
    selections: list[RankedSelection] = field(default_factory=list)

    def get_category(self, category_id: str | None) -> Category | None:
        if category_id is None:
            return self.top_list
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def pool(self, category_id: str | None) -> list[Candidate]:
        """Ordered candidate pool of a category (None for the top-list)."""
        category = self.get_category(category_id)
        if category is None:
            raise KeyError(f"Unknown category: {category_id}")
        return list(category.pool)

    def answer_set(self, category_id: str | None) -> frozenset[str]:
        """Correct candidate ids of a category; empty before reveal."""
        category = self.get_category(category_id)
        if category is None:
            raise KeyError(f"Unknown category: {category_id}")
        return category.answer_set or frozenset()

    def finalized_participants(self, excluded: set[str] | None = None) -> list[Participant]:
        excluded = excluded or set()
        return [p for p in self.participants if p.finalized and p.id not in excluded]

    def finalized_selections(self, excluded: set[str] | None = None) -> list[RankedSelection]:
        """Selections of users whose finalization flag is set."""
        finalized = {p.id for p in self.finalized_participants(excluded)}
        return [s for s in self.selections if s.user_id in finalized]

    def selections_for(self, user_id: str, category_id: str | None) -> list[RankedSelection]:
        return [
            s for s in self.selections
            if s.user_id == user_id and s.category_id == category_id
        ]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Build a snapshot from its JSON representation.

        Expected shape::

            {
              "round_id": "2026",
              "participants": [{"id": "u1", "name": "Alice", "finalized": true}],
              "top_list": {"id": "top", "name": "Top 10", "slots": 10,
                           "pool": [{"id": "m1", "name": "Movie"}],
                           "answer_set": ["m1"]},
              "categories": [...same shape as top_list...],
              "selections": [{"user_id": "u1", "candidate_id": "m1",
                              "rank": 1, "category_id": null}]
            }

        Raises:
            KeyError: If a required field is missing
            ValueError: If a field has the wrong type, or a rank or slot
                count is not a whole number
        """
        def category(entry: Any) -> Category:
            entry = _as_object(entry, "category")
            answers = entry.get("answer_set")
            pool = [_as_object(c, "candidate") for c in entry["pool"]]
            return Category(
                id=str(entry["id"]),
                name=entry.get("name", str(entry["id"])),
                pool=[Candidate(id=str(c["id"]), name=c.get("name", str(c["id"])))
                      for c in pool],
                slots=_as_int(entry["slots"], "slots"),
                answer_set=frozenset(str(a) for a in answers) if answers is not None else None,
            )

        top_list = data.get("top_list")
        participants = [_as_object(p, "participant") for p in data.get("participants", [])]
        selections = [_as_object(s, "selection") for s in data.get("selections", [])]
        return cls(
            round_id=str(data.get("round_id", "")),
            participants=[
                Participant(
                    id=str(p["id"]),
                    name=p.get("name") or str(p["id"]),
                    finalized=bool(p.get("finalized", False)),
                )
                for p in participants
            ],
            categories=[category(c) for c in data.get("categories", [])],
            top_list=category(top_list) if top_list is not None else None,
            selections=[
                RankedSelection(
                    user_id=str(s["user_id"]),
                    candidate_id=str(s["candidate_id"]),
                    rank=_as_int(s["rank"], "rank") if s.get("rank") is not None else None,
                    category_id=str(s["category_id"]) if s.get("category_id") is not None else None,
                )
                for s in selections
            ],
        )


@dataclass
class Standing:
    """One row of a ranked table (a user on a leaderboard, or a candidate).

    Attributes:
        id: User or candidate identifier
        name: Display name
        position: 1-indexed position; tied rows share it and the next distinct
            row continues at its own index + 1
        tied: Whether another row shares this position
        keys: The comparator keys the row was ranked by
        details: Variant-specific extras (successful picks, prize breakdown)
    """
    id: str
    name: str
    position: int = 0
    tied: bool = False
    keys: dict[str, Any] = field(default_factory=dict)
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position,
            "tied": self.tied,
            **self.keys,
            **self.details,
        }


@dataclass
class LeaderboardResult:
    """Result from a leaderboard variant.

    Attributes:
        variant: Registry key of the leaderboard variant
        name: Human-readable name of the leaderboard
        standings: Rows in display order
        details: Variant-specific report data (prize pool, pending categories)
    """
    variant: str
    name: str
    standings: list[Standing]
    details: dict[str, Any] = field(default_factory=dict)

    def get_position(self, entry_id: str) -> int | None:
        """Get the position of a row, or None if not found."""
        for s in self.standings:
            if s.id == entry_id:
                return s.position
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "variant": self.variant,
            "name": self.name,
            "standings": [s.to_dict() for s in self.standings],
            "details": self.details,
        }
