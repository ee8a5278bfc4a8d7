"""Base abstract class for secondary-catalog search clients."""

from __future__ import annotations

from abc import ABC, abstractmethod

import structlog

from .models import SearchOutcome


class TitleSearchClient(ABC):
    """Abstract base class for secondary-catalog search clients.

    Implementations own their HTTP session. A failed request is reported as
    ``SearchOutcome.failed(...)`` or raised as ``TransientSearchError`` /
    ``httpx.HTTPError``; the resolver treats all three the same way.
    """

    def __init__(self, name: str) -> None:
        """Initialize search client.

        Args:
            name: Name of the client (for logging)
        """
        self.name = name
        self.logger = structlog.get_logger(f"filmlink.search.{name.lower()}")

    @abstractmethod
    async def structured_search(
        self,
        name: str,
        year_start: int,
        year_end: int,
    ) -> SearchOutcome:
        """Search by title restricted to a release year range.

        Args:
            name: Title to look for
            year_start: First release year accepted
            year_end: Last release year accepted

        Returns:
            Outcome carrying the best-ranked result, if any
        """

    @abstractmethod
    async def text_search(self, query: str) -> SearchOutcome:
        """Free-text search, e.g. "Stay 2005".

        Returns:
            Outcome carrying the first title result, if any
        """

    async def aclose(self) -> None:
        """Release the client's resources. Default: nothing to release."""
        return None
