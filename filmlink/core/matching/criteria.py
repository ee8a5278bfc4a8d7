"""Individual match criteria.

Each function checks a single aspect of a search result (release year,
runtime) against the title being resolved and returns an accept flag and a
reason. Criteria are pure and can be tested independently.
"""

from .config import MatchingConfig, get_matching_config


def match_year(
    record_year_start: int,
    candidate_year_start: int,
    config: MatchingConfig | None = None,
) -> tuple[bool, str]:
    """Evaluate release year match.

    Args:
        record_year_start: First year of the title being resolved
        candidate_year_start: First year of the search result
        config: Matching configuration (if None, loads from settings file)

    Returns:
        Tuple of (accepted, reason)
    """
    if config is None:
        config = get_matching_config()

    diff = abs(record_year_start - candidate_year_start)
    if diff > config.year_tolerance:
        return (
            False,
            f"Year mismatch: {record_year_start} vs {candidate_year_start} "
            f"(diff {diff} > {config.year_tolerance})",
        )
    if diff == 0:
        return True, f"Exact year match: {record_year_start}"
    return True, f"Year within tolerance: {record_year_start} vs {candidate_year_start}"


def duration_band(
    record_runtime: int,
    candidate_runtime: int,
    config: MatchingConfig | None = None,
) -> tuple[float, float]:
    """Acceptance band for the record runtime, derived from the candidate runtime.

    Short-form content (both runtimes at or below the short-form limit) gets
    the wider band.

    Returns:
        Tuple of (lower, upper) bounds in minutes
    """
    if config is None:
        config = get_matching_config()

    if (
        candidate_runtime <= config.short_form_max_minutes
        and record_runtime <= config.short_form_max_minutes
    ):
        return (
            candidate_runtime * config.short_form_lower_factor,
            candidate_runtime * config.short_form_upper_factor,
        )
    return (
        candidate_runtime * config.feature_lower_factor,
        candidate_runtime * config.feature_upper_factor,
    )


def match_duration(
    record_runtime: int | None,
    candidate_runtime: int | None,
    config: MatchingConfig | None = None,
) -> tuple[bool, str]:
    """Evaluate runtime match.

    Only the lower bound rejects: a record runtime above the band's upper
    bound is still accepted.

    Args:
        record_runtime: Runtime of the title being resolved, in minutes
        candidate_runtime: Runtime of the search result, in minutes
        config: Matching configuration (if None, loads from settings file)

    Returns:
        Tuple of (accepted, reason)
    """
    if record_runtime is None:
        return True, "No runtime on record"
    if candidate_runtime is None:
        return True, "No runtime on candidate"

    lower, upper = duration_band(record_runtime, candidate_runtime, config)
    if record_runtime <= lower:
        return (
            False,
            f"Runtime too short: {record_runtime}m <= {lower:g}m "
            f"(candidate {candidate_runtime}m)",
        )
    if record_runtime > upper:
        return True, f"Runtime above band: {record_runtime}m > {upper:g}m (accepted)"
    return True, f"Runtime within band: {record_runtime}m in ({lower:g}, {upper:g}]"
