"""Pydantic models for search results and resolution outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from filmlink.core.errors import NoMatchFound
from filmlink.core.models import MediaKind, Year
from filmlink.core.taxonomy import SharedCategory, shared_category_from_label
from filmlink.core.utils import parse_runtime

SearchStrategy = Literal["structured", "text"]


class MatchCandidate(BaseModel):
    """A title returned by one search of the secondary catalog."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Secondary-catalog identifier (e.g. 'tt0371257')")
    name: str = Field(..., description="Title as listed by the secondary catalog")
    year: Year = Field(..., description="Release year or year range")
    runtime: int | None = Field(default=None, description="Runtime in minutes")
    categories: list[SharedCategory] = Field(
        default_factory=list, description="Genres projected onto the shared taxonomy"
    )
    kind: MediaKind | None = Field(default=None, description="Movie or show, when known")
    url: str | None = Field(default=None, description="Page URL of the title")

    @field_validator("year", mode="before")
    @classmethod
    def _parse_year(cls, value: Any) -> Year:
        return Year.parse(value)

    @field_serializer("year")
    def _serialize_year(self, year: Year) -> str:
        return str(year)

    @field_validator("runtime", mode="before")
    @classmethod
    def _parse_runtime(cls, value: Any) -> int | None:
        return parse_runtime(value)

    @field_validator("categories", mode="before")
    @classmethod
    def _project_categories(cls, value: Any) -> list[SharedCategory]:
        """Project raw genre labels; labels outside the shared set are dropped."""
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        categories: list[SharedCategory] = []
        for item in value:
            if isinstance(item, SharedCategory):
                category: SharedCategory | None = item
            else:
                category = shared_category_from_label(str(item))
            if category is not None and category not in categories:
                categories.append(category)
        return categories


class SearchOutcome(BaseModel):
    """Result of a single search attempt.

    ``found`` carries a candidate, ``not_found`` carries nothing and ``error``
    carries a description of the collaborator failure.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["found", "not_found", "error"]
    candidate: MatchCandidate | None = None
    error: str | None = None

    @classmethod
    def found(cls, candidate: MatchCandidate) -> SearchOutcome:
        return cls(status="found", candidate=candidate)

    @classmethod
    def not_found(cls) -> SearchOutcome:
        return cls(status="not_found")

    @classmethod
    def failed(cls, error: str | BaseException) -> SearchOutcome:
        return cls(status="error", error=str(error))

    @model_validator(mode="after")
    def _check_consistency(self) -> SearchOutcome:
        if (self.candidate is not None) != (self.status == "found"):
            raise ValueError(f"a {self.status!r} outcome must carry a candidate only when found")
        if (self.error is not None) != (self.status == "error"):
            raise ValueError(f"a {self.status!r} outcome must carry an error only when failed")
        return self

    @property
    def is_found(self) -> bool:
        return self.status == "found" and self.candidate is not None


class ResolvedLink(BaseModel):
    """Accepted pairing of a primary-catalog title with one search result."""

    model_config = ConfigDict(frozen=True)

    record_id: int | str
    candidate: MatchCandidate
    matched_name: str = Field(..., description="Alternate name whose search found the candidate")
    strategy: SearchStrategy


@dataclass(frozen=True)
class Resolved:
    link: ResolvedLink


@dataclass(frozen=True)
class Unresolved:
    error: NoMatchFound

    @property
    def attempted_names(self) -> int:
        return self.error.attempted_names


ResolutionResult = Resolved | Unresolved
