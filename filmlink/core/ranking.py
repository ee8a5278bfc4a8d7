"""Alternate-name ranking.

The primary catalog lists every known name of a title with a locale label
("USA", "tytuł oryginalny", "Polska", ...). Names whose label suggests they
are what the secondary catalog indexes by are searched first.
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

MAX_RANK = 10

# First matching rule wins; order matters ("USA, tytuł oryginalny" is 10).
LABEL_RULES: tuple[tuple[tuple[str, ...], int], ...] = (
    (("USA", "angielski"), 10),  # English / US release
    (("oryginalny",), 9),  # original title
    (("główny",), 8),  # main title
    (("alternatywna pisownia",), 7),  # alternate spelling
    (("inny tytuł",), 6),  # other title
    (("Polska",), 5),  # home locale
)


def score_label(label: str) -> int:
    """Rank a locale label from 0 (unknown) to 10 (English title).

    Matching is plain, case-sensitive substring containment on the trimmed
    label.
    """
    text = label.strip()
    for markers, rank in LABEL_RULES:
        if any(marker in text for marker in markers):
            return rank
    return 0


@dataclass(frozen=True)
class AlternateNameCandidate:
    """A name variant of a title, ranked by how useful it is as a search query."""

    name: str
    label: str
    rank: int

    @classmethod
    def from_pair(cls, name: str, label: str) -> AlternateNameCandidate:
        return cls(name=name.strip(), label=label.strip(), rank=score_label(label))


@dataclass
class AlternateNameQueue:
    """Max-priority queue of alternate names.

    Equal ranks pop in insertion order. Popping is destructive; a popped
    candidate is never seen again.
    """

    _heap: list[tuple[int, int, AlternateNameCandidate]] = field(default_factory=list)
    _counter: Iterator[int] = field(default_factory=itertools.count, repr=False)

    def push(self, candidate: AlternateNameCandidate) -> None:
        heapq.heappush(self._heap, (-candidate.rank, next(self._counter), candidate))

    def pop(self) -> AlternateNameCandidate | None:
        """Remove and return the highest-ranked candidate, or None when empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]

    def peek(self) -> AlternateNameCandidate | None:
        return self._heap[0][2] if self._heap else None

    def clear(self) -> None:
        self._heap.clear()

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __iter__(self) -> Iterator[AlternateNameCandidate]:
        """Iterate in pop order without consuming the queue."""
        return (entry[2] for entry in sorted(self._heap))


def rank(pairs: Iterable[tuple[str, str]]) -> AlternateNameQueue:
    """Rank (name, label) pairs scraped for one title.

    Args:
        pairs: Name variants with their locale labels; may be empty

    Returns:
        Queue that pops the best search candidate first
    """
    queue = AlternateNameQueue()
    for name, label in pairs:
        queue.push(AlternateNameCandidate.from_pair(name, label))
    return queue
