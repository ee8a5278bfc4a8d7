"""Match validation for secondary-catalog search results.

Decides whether a search result plausibly is the same title as the record
being resolved, using configurable year and runtime tolerances.
"""

from .config import DEFAULT_CONFIG, MatchingConfig, get_matching_config, reload_matching_config
from .criteria import duration_band, match_duration, match_year
from .evaluator import MatchResult, evaluate, evaluate_candidate, validate

__all__ = [
    "MatchingConfig",
    "DEFAULT_CONFIG",
    "get_matching_config",
    "reload_matching_config",
    "match_year",
    "match_duration",
    "duration_band",
    "MatchResult",
    "evaluate",
    "evaluate_candidate",
    "validate",
]
