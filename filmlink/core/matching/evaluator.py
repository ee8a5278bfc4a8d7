"""Match evaluator - combines the year and duration criteria.

A search result is accepted only when every criterion accepts it. The first
failing criterion rejects the candidate and is reported in the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from filmlink.core.models import Year

from .config import MatchingConfig, get_matching_config
from .criteria import match_duration, match_year

if TYPE_CHECKING:
    from filmlink.core.models import TitleRecord
    from filmlink.core.search.models import MatchCandidate

logger = structlog.get_logger("filmlink.matching")


class MatchResult:
    """Result of a match evaluation.

    Attributes:
        accepted: Whether the candidate passed every criterion
        details: List of strings explaining each criterion
        rejected_by: Name of the criterion that rejected the candidate ("year", "duration")
    """

    def __init__(self, accepted: bool, details: list[str], rejected_by: str | None = None):
        self.accepted = accepted
        self.details = details
        self.rejected_by = rejected_by

    def __bool__(self) -> bool:
        return self.accepted

    def __repr__(self) -> str:
        status = "ACCEPTED" if self.accepted else f"REJECTED({self.rejected_by})"
        return f"MatchResult(status={status}, details={len(self.details)})"


def _year_start(year: Year | int) -> int:
    return year.start if isinstance(year, Year) else year


def evaluate(
    record_year: Year | int,
    record_runtime: int | None,
    candidate_year: Year | int,
    candidate_runtime: int | None,
    config: MatchingConfig | None = None,
) -> MatchResult:
    """Evaluate raw year and runtime values of a record/candidate pair.

    Args:
        record_year: Year (or first year) of the title being resolved
        record_runtime: Runtime of the title in minutes, None when unknown
        candidate_year: Year (or first year) of the search result
        candidate_runtime: Runtime of the search result in minutes
        config: Matching configuration (if None, loads from settings file)

    Returns:
        MatchResult with acceptance and per-criterion details
    """
    if config is None:
        config = get_matching_config()

    details: list[str] = []

    year_ok, year_reason = match_year(
        _year_start(record_year), _year_start(candidate_year), config
    )
    details.append(year_reason)
    if not year_ok:
        return MatchResult(False, details, rejected_by="year")

    duration_ok, duration_reason = match_duration(record_runtime, candidate_runtime, config)
    details.append(duration_reason)
    if not duration_ok:
        return MatchResult(False, details, rejected_by="duration")

    return MatchResult(True, details)


def evaluate_candidate(
    record: TitleRecord,
    candidate: MatchCandidate,
    config: MatchingConfig | None = None,
) -> MatchResult:
    """Evaluate a search result against the title being resolved.

    Args:
        record: Title being resolved
        candidate: Result of one search attempt
        config: Matching configuration (if None, loads from settings file)

    Returns:
        MatchResult with acceptance and per-criterion details
    """
    result = evaluate(record.year, record.runtime, candidate.year, candidate.runtime, config)
    logger.debug(
        "Evaluated candidate",
        record_id=record.id,
        candidate_id=candidate.id,
        candidate_name=candidate.name,
        result=repr(result),
        details=result.details,
    )
    return result


def validate(
    record_year: Year | int,
    record_runtime: int | None,
    candidate_year: Year | int,
    candidate_runtime: int | None,
    config: MatchingConfig | None = None,
) -> bool:
    """Decide whether a search result plausibly is the same title.

    Accepts iff the start years differ by at most ``year_tolerance`` and the
    record runtime is absent or above the lower bound of the duration band.
    """
    return evaluate(record_year, record_runtime, candidate_year, candidate_runtime, config).accepted
