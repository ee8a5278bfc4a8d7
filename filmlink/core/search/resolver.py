"""Title resolver - finds the secondary-catalog entry for a primary-catalog title.

The resolver walks a record's alternate names from the highest-ranked down.
For each name it runs a structured search (name restricted to the release
year) and then a free-text search ("<name> <year>"). The first result that
passes match validation wins; the remaining names are discarded unsearched.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable

import httpx
import structlog

from filmlink.core.errors import NoMatchFound, TransientSearchError
from filmlink.core.matching import MatchingConfig, evaluate_candidate, get_matching_config
from filmlink.core.metrics import (
    candidate_rejections_total,
    resolution_duration_seconds,
    resolutions_total,
    search_attempts_total,
)
from filmlink.core.models import TitleRecord

from .base import TitleSearchClient
from .models import (
    MatchCandidate,
    ResolutionResult,
    Resolved,
    ResolvedLink,
    SearchOutcome,
    SearchStrategy,
    Unresolved,
)

logger = structlog.get_logger("filmlink.resolver")


class TitleResolver:
    """Resolves TitleRecords against a secondary-catalog search client."""

    def __init__(
        self,
        client: TitleSearchClient,
        config: MatchingConfig | None = None,
    ) -> None:
        self.client = client
        self.config = config or get_matching_config()

    async def resolve(self, record: TitleRecord) -> ResolutionResult:
        """Resolve a single record.

        Consumes ``record.alternate_names``. On success the link is attached
        to the record. A record that already carries a link returns it
        without searching.

        Returns:
            Resolved with the accepted link, or Unresolved carrying NoMatchFound
        """
        if record.link is not None:
            resolutions_total.labels(outcome="already_linked").inc()
            logger.debug("Title already linked", record_id=record.id, link=record.link.candidate.id)
            return Resolved(record.link)

        with resolution_duration_seconds.time():
            return await self._resolve_queue(record)

    async def _resolve_queue(self, record: TitleRecord) -> ResolutionResult:
        queue = record.alternate_names
        attempted = 0

        while (name_candidate := queue.pop()) is not None:
            if name_candidate.rank < self.config.min_search_rank:
                logger.debug(
                    "Remaining names ranked too low, stopping",
                    record_id=record.id,
                    name=name_candidate.name,
                    rank=name_candidate.rank,
                    discarded=len(queue),
                )
                queue.clear()
                break

            attempted += 1
            name = name_candidate.name
            log = logger.bind(record_id=record.id, name=name, rank=name_candidate.rank)
            log.debug("Trying alternate name")

            year = record.year
            strategy: SearchStrategy = "structured"
            match = await self._attempt(
                record,
                strategy,
                name,
                lambda: self.client.structured_search(name, year.start, year.start),
            )
            if match is None:
                strategy = "text"
                query = f"{name} {year}"
                match = await self._attempt(
                    record,
                    strategy,
                    query,
                    lambda: self.client.text_search(query),
                )

            if match is not None:
                link = ResolvedLink(
                    record_id=record.id,
                    candidate=match,
                    matched_name=name,
                    strategy=strategy,
                )
                record.attach_link(link)
                queue.clear()
                resolutions_total.labels(outcome="resolved").inc()
                log.info(
                    "Title resolved",
                    candidate_id=match.id,
                    candidate_name=match.name,
                    strategy=strategy,
                    attempted_names=attempted,
                )
                return Resolved(link)

        resolutions_total.labels(outcome="unresolved").inc()
        logger.info("No match found", record_id=record.id, name=record.name, attempted_names=attempted)
        return Unresolved(NoMatchFound(record.id, attempted))

    async def _attempt(
        self,
        record: TitleRecord,
        strategy: SearchStrategy,
        query: str,
        search: Callable[[], Awaitable[SearchOutcome]],
    ) -> MatchCandidate | None:
        """Run one search and validate its result.

        Collaborator failures are logged and reported as "no candidate" so the
        caller moves on to the next strategy or name.
        """
        try:
            outcome = await search()
        except TransientSearchError as e:
            outcome = SearchOutcome.failed(e)
        except httpx.HTTPError as e:
            outcome = SearchOutcome.failed(f"{type(e).__name__}: {e}")

        search_attempts_total.labels(strategy=strategy, outcome=outcome.status).inc()

        if outcome.status == "error":
            logger.warning(
                "Search failed, trying next",
                record_id=record.id,
                strategy=strategy,
                query=query,
                error=outcome.error,
            )
            return None

        candidate = outcome.candidate
        if candidate is None:
            logger.debug("No search result", record_id=record.id, strategy=strategy, query=query)
            return None

        result = evaluate_candidate(record, candidate, self.config)
        if not result.accepted:
            candidate_rejections_total.labels(reason=result.rejected_by or "unknown").inc()
            logger.debug(
                "Candidate rejected",
                record_id=record.id,
                strategy=strategy,
                query=query,
                candidate_id=candidate.id,
                details=result.details,
            )
            return None
        return candidate

    async def resolve_many(
        self,
        records: Iterable[TitleRecord],
        max_concurrent: int | None = None,
    ) -> list[ResolutionResult]:
        """Resolve many records concurrently.

        Each resolution stays sequential; at most ``max_concurrent`` run at
        once (default: ``Settings.resolve_concurrency``).

        Returns:
            Results in the same order as ``records``
        """
        if max_concurrent is None:
            from filmlink.core.config import get_settings

            max_concurrent = get_settings().resolve_concurrency
        semaphore = asyncio.Semaphore(max_concurrent)

        async def resolve_one(record: TitleRecord) -> ResolutionResult:
            async with semaphore:
                return await self.resolve(record)

        records = list(records)
        results = await asyncio.gather(*(resolve_one(record) for record in records))

        resolved = sum(1 for result in results if isinstance(result, Resolved))
        logger.info(
            "Batch resolution finished",
            total=len(records),
            resolved=resolved,
            unresolved=len(records) - resolved,
            max_concurrent=max_concurrent,
        )
        return list(results)


async def resolve(
    record: TitleRecord,
    client: TitleSearchClient,
    config: MatchingConfig | None = None,
) -> ResolutionResult:
    """Resolve one record with a throwaway TitleResolver."""
    return await TitleResolver(client, config).resolve(record)
