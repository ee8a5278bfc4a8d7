"""Internal dataclass models for filmlink."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from filmlink.core.errors import InvalidYear
from filmlink.core.ranking import AlternateNameQueue, rank
from filmlink.core.taxonomy import CatalogGenre, SharedCategory, parse_genre_labels, project_genres
from filmlink.core.utils import parse_runtime, parse_year_bounds

if TYPE_CHECKING:
    from filmlink.core.search.models import ResolvedLink


class MediaKind(StrEnum):
    MOVIE = "movie"
    SHOW = "show"


@dataclass(frozen=True)
class Year:
    """Release year, or the inclusive year range of a show's run.

    Only ``start`` takes part in matching; a single year has ``end == start``.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start <= 0 or self.end < self.start:
            raise InvalidYear(f"{self.start}-{self.end}")

    @classmethod
    def single(cls, year: int) -> Year:
        return cls(year, year)

    @classmethod
    def parse(
        cls,
        value: str | int | Year | Mapping[str, int],
        record_id: int | str | None = None,
    ) -> Year:
        """Parse "2005", "(2005)", "2015-2017", "2015–" or {"start": .., "end": ..} into a Year.

        Raises:
            InvalidYear: If the value is malformed
        """
        if isinstance(value, Year):
            return value
        if isinstance(value, Mapping):
            try:
                start = int(value["start"])
                return cls(start, int(value.get("end", start)))
            except (KeyError, TypeError, ValueError):
                raise InvalidYear(repr(dict(value)), record_id) from None
        start, end = parse_year_bounds(value, record_id)
        return cls(start, end)

    @property
    def is_range(self) -> bool:
        return self.end != self.start

    def __str__(self) -> str:
        if self.is_range:
            return f"{self.start}-{self.end}"
        return str(self.start)


def parse_year(value: str | int | Year | Mapping[str, int], record_id: int | str | None = None) -> Year:
    """Module-level alias of ``Year.parse``."""
    return Year.parse(value, record_id)


@dataclass
class TitleRecord:
    """A primary-catalog title waiting to be cross-referenced.

    Plain, rated and watch-listed titles share this one type; the rating
    fields stay at their defaults for titles scraped outside a user's pages.
    ``alternate_names`` is consumed by the resolver. ``link`` is set at most
    once.
    """

    id: int | str
    name: str
    year: Year
    kind: MediaKind = MediaKind.MOVIE
    runtime: int | None = None  # minutes
    genres: list[CatalogGenre] = field(default_factory=list)
    alternate_names: AlternateNameQueue = field(default_factory=AlternateNameQueue)
    url: str | None = None
    rating: int | None = None
    favorited: bool = False
    watchlisted: bool = False
    _link: ResolvedLink | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.rating is not None and not 1 <= self.rating <= 10:
            raise ValueError(f"rating must be between 1 and 10, got {self.rating}")

    @classmethod
    def from_scraped(
        cls,
        id: int | str,
        name: str,
        year: str | int | Year,
        runtime: str | int | None = None,
        genre_labels: Iterable[str] = (),
        alternate_names: Iterable[tuple[str, str]] = (),
        kind: MediaKind = MediaKind.MOVIE,
        url: str | None = None,
        rating: int | None = None,
        favorited: bool = False,
        watchlisted: bool = False,
    ) -> TitleRecord:
        """Build a record from raw values handed over by the record provider.

        Args:
            id: Catalog identifier of the title
            name: Canonical (local) name
            year: Year string such as "2005" or "2015-2017"
            runtime: Runtime in minutes, as string or int; None when unknown
            genre_labels: Scraped genre labels, e.g. ["Dramat", "Thriller"]
            alternate_names: Unranked (name, locale label) pairs
            kind: Movie or show
            url: Page URL of the title
            rating: User rating 1-10, for titles taken from a ratings page
            favorited: Whether the user marked the title as a favorite
            watchlisted: Whether the title comes from the user's watch list

        Returns:
            TitleRecord with a ranked alternate-name queue

        Raises:
            InvalidYear: If the year is malformed
            InvalidRuntime: If the runtime is malformed
            UnmappedCategoryLabel: If a genre label is unknown
        """
        return cls(
            id=id,
            name=name.strip(),
            year=Year.parse(year, id),
            kind=kind,
            runtime=parse_runtime(runtime, id),
            genres=parse_genre_labels(genre_labels),
            alternate_names=rank(alternate_names),
            url=url,
            rating=rating,
            favorited=favorited,
            watchlisted=watchlisted,
        )

    @property
    def year_start(self) -> int:
        return self.year.start

    @property
    def shared_categories(self) -> list[SharedCategory]:
        return project_genres(self.genres)

    @property
    def is_rated(self) -> bool:
        return self.rating is not None

    @property
    def link(self) -> ResolvedLink | None:
        return self._link

    @property
    def is_resolved(self) -> bool:
        return self._link is not None

    def attach_link(self, link: ResolvedLink) -> None:
        """Store the accepted cross-reference.

        Raises:
            ValueError: If a different link is already attached
        """
        if self._link is not None and self._link != link:
            raise ValueError(f"title {self.id} is already linked to {self._link.candidate.id}")
        self._link = link
