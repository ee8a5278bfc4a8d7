"""Prometheus metrics for title resolution."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# Resolution outcomes
resolutions_total = Counter(
    "filmlink_resolutions_total",
    "Total number of finished title resolutions",
    ["outcome"],  # outcome: resolved, unresolved, already_linked
)
resolution_duration_seconds = Histogram(
    "filmlink_resolution_duration_seconds",
    "Wall time spent resolving one title",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

# Individual search attempts against the secondary catalog
search_attempts_total = Counter(
    "filmlink_search_attempts_total",
    "Total number of search attempts issued by the resolver",
    ["strategy", "outcome"],  # strategy: structured, text; outcome: found, not_found, error
)
candidate_rejections_total = Counter(
    "filmlink_candidate_rejections_total",
    "Search results rejected by the match validator",
    ["reason"],  # reason: year, duration
)

# Taxonomy
dropped_categories_total = Counter(
    "filmlink_dropped_categories_total",
    "Catalog genres dropped because they have no shared category",
)
