"""Pool of equivalent search clients."""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence

from .base import TitleSearchClient
from .models import SearchOutcome


class SearchClientPool(TitleSearchClient):
    """Spreads searches over several equivalent clients.

    Each call goes to a pseudo-randomly chosen member; there is no affinity
    between consecutive calls.
    """

    def __init__(
        self,
        clients: Sequence[TitleSearchClient],
        rng: random.Random | None = None,
    ) -> None:
        if not clients:
            raise ValueError("SearchClientPool needs at least one client")
        super().__init__("pool")
        self.clients = list(clients)
        self._rng = rng or random.Random()

    @classmethod
    def create(
        cls,
        factory: Callable[[int], TitleSearchClient],
        size: int | None = None,
    ) -> SearchClientPool:
        """Build a pool of ``size`` clients from ``factory(index)``.

        ``size`` defaults to ``Settings.search_pool_size``.
        """
        if size is None:
            from filmlink.core.config import get_settings

            size = get_settings().search_pool_size
        return cls([factory(index) for index in range(size)])

    def __len__(self) -> int:
        return len(self.clients)

    def pick(self) -> TitleSearchClient:
        return self._rng.choice(self.clients)

    async def structured_search(self, name: str, year_start: int, year_end: int) -> SearchOutcome:
        client = self.pick()
        self.logger.debug("Structured search", client=client.name, name=name, year=year_start)
        return await client.structured_search(name, year_start, year_end)

    async def text_search(self, query: str) -> SearchOutcome:
        client = self.pick()
        self.logger.debug("Text search", client=client.name, query=query)
        return await client.text_search(query)

    async def aclose(self) -> None:
        for client in self.clients:
            await client.aclose()
