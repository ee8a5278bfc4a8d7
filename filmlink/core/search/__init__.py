"""Secondary-catalog search: client contract, client pool and title resolver."""

from .base import TitleSearchClient
from .models import (
    MatchCandidate,
    ResolutionResult,
    Resolved,
    ResolvedLink,
    SearchOutcome,
    Unresolved,
)
from .pool import SearchClientPool
from .resolver import TitleResolver, resolve

__all__ = [
    "TitleSearchClient",
    "SearchClientPool",
    "MatchCandidate",
    "SearchOutcome",
    "ResolvedLink",
    "Resolved",
    "Unresolved",
    "ResolutionResult",
    "TitleResolver",
    "resolve",
]
