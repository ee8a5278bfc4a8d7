"""Matching configuration - tolerances and duration bands."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields

import structlog

logger = structlog.get_logger("filmlink.matching.config")


@dataclass(frozen=True)
class MatchingConfig:
    """Configuration for validating search results against a title.

    This class centralizes all tolerances, making it easy to adjust
    matching behavior.
    """

    # Year: accept if |record start - candidate start| <= tolerance
    year_tolerance: int = 1

    # Duration: both runtimes at or below this are treated as short-form
    # (episodes), which the two catalogs report very differently
    short_form_max_minutes: int = 60
    short_form_lower_factor: float = 0.75
    short_form_upper_factor: float = 1.50
    feature_lower_factor: float = 0.85
    feature_upper_factor: float = 1.15

    # Resolver: names ranked below this are discarded without searching
    min_search_rank: int = 0


# Default config instance
DEFAULT_CONFIG = MatchingConfig()

# Cached config instance (loaded from settings file)
_cached_config: MatchingConfig | None = None


def get_matching_config() -> MatchingConfig:
    """Get the current matching configuration.

    Loads the "matching" object of settings.json if available, otherwise
    returns defaults. Caches the result.

    Returns:
        MatchingConfig instance with current settings
    """
    global _cached_config

    if _cached_config is not None:
        return _cached_config

    from filmlink.core.config import get_settings

    settings_file = get_settings().settings_file
    _cached_config = DEFAULT_CONFIG
    if settings_file.exists():
        try:
            with settings_file.open("r", encoding="utf-8") as f:
                matching_settings = json.load(f).get("matching")
            if matching_settings:
                known = {f.name for f in fields(MatchingConfig)}
                _cached_config = MatchingConfig(
                    **{k: v for k, v in matching_settings.items() if k in known}
                )
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(
                "Failed to load matching settings, using defaults",
                path=str(settings_file),
                error=str(e),
            )

    return _cached_config


def reload_matching_config() -> MatchingConfig:
    """Reload matching configuration from settings file.

    Call this after updating settings to ensure new values are used.
    """
    global _cached_config
    _cached_config = None
    return get_matching_config()
