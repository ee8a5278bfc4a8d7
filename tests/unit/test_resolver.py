"""Tests for the title resolver."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest
from prometheus_client import REGISTRY

from filmlink.core.errors import NoMatchFound, TransientSearchError
from filmlink.core.matching import DEFAULT_CONFIG, MatchingConfig
from filmlink.core.models import TitleRecord
from filmlink.core.search import (
    MatchCandidate,
    Resolved,
    SearchOutcome,
    TitleResolver,
    TitleSearchClient,
    Unresolved,
    resolve,
)


class FakeSearchClient(TitleSearchClient):
    """Scripted search client.

    ``structured`` and ``text`` map a name (or query) to an outcome or to an
    exception to raise. Anything not listed is not found.
    """

    def __init__(
        self,
        structured: dict[str, SearchOutcome | Exception] | None = None,
        text: dict[str, SearchOutcome | Exception] | None = None,
        delay: float = 0.0,
    ) -> None:
        super().__init__("fake")
        self.structured = structured or {}
        self.text = text or {}
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _answer(
        self, kind: str, key: str, table: dict[str, SearchOutcome | Exception]
    ) -> SearchOutcome:
        self.calls.append((kind, key))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            answer = table.get(key, SearchOutcome.not_found())
            if isinstance(answer, Exception):
                raise answer
            return answer
        finally:
            self.in_flight -= 1

    async def structured_search(self, name: str, year_start: int, year_end: int) -> SearchOutcome:
        return await self._answer("structured", f"{name}|{year_start}|{year_end}", self.structured)

    async def text_search(self, query: str) -> SearchOutcome:
        return await self._answer("text", query, self.text)


def _found(
    candidate_id: str = "tt0371257",
    name: str = "Stay",
    year: str = "2005",
    runtime: int | None = 99,
) -> SearchOutcome:
    return SearchOutcome.found(MatchCandidate(id=candidate_id, name=name, year=year, runtime=runtime))


def _stay(**kwargs) -> TitleRecord:
    return TitleRecord.from_scraped(
        id=kwargs.pop("id", 1),
        name="Zostań",
        year=kwargs.pop("year", "2005"),
        alternate_names=kwargs.pop(
            "alternate_names", [("Stay", "USA"), ("Zostań", "tytuł główny")]
        ),
        **kwargs,
    )


def _counter(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.fixture
def make_resolver() -> Callable[..., TitleResolver]:
    def factory(client: FakeSearchClient, config: MatchingConfig = DEFAULT_CONFIG) -> TitleResolver:
        return TitleResolver(client, config)

    return factory


class TestResolve:
    """Tests for resolving a single record."""

    @pytest.mark.asyncio
    async def test_first_structured_hit_wins(self, make_resolver) -> None:
        """The best name resolves with one structured search; others are never queried."""
        client = FakeSearchClient(structured={"Stay|2005|2005": _found()})
        record = _stay()

        result = await make_resolver(client).resolve(record)

        assert isinstance(result, Resolved)
        assert result.link.candidate.id == "tt0371257"
        assert result.link.matched_name == "Stay"
        assert result.link.strategy == "structured"
        assert client.calls == [("structured", "Stay|2005|2005")]
        assert record.link == result.link
        assert len(record.alternate_names) == 0

    @pytest.mark.asyncio
    async def test_empty_queue_makes_no_calls(self, make_resolver) -> None:
        client = FakeSearchClient()
        record = _stay(alternate_names=[])

        result = await make_resolver(client).resolve(record)

        assert isinstance(result, Unresolved)
        assert isinstance(result.error, NoMatchFound)
        assert result.attempted_names == 0
        assert client.calls == []
        assert record.link is None

    @pytest.mark.asyncio
    async def test_falls_back_to_text_search(self, make_resolver) -> None:
        client = FakeSearchClient(text={"Stay 2005": _found()})

        result = await make_resolver(client).resolve(_stay())

        assert isinstance(result, Resolved)
        assert result.link.strategy == "text"
        assert client.calls == [("structured", "Stay|2005|2005"), ("text", "Stay 2005")]

    @pytest.mark.asyncio
    async def test_text_query_uses_year_range(self, make_resolver) -> None:
        client = FakeSearchClient(text={"Dark 2017-2020": _found("tt5753856", "Dark", "2017", 60)})
        record = TitleRecord.from_scraped(
            id=9, name="Dark", year="2017-2020", alternate_names=[("Dark", "tytuł oryginalny")]
        )

        result = await make_resolver(client).resolve(record)

        assert isinstance(result, Resolved)
        assert client.calls[0] == ("structured", "Dark|2017|2017")
        assert client.calls[1] == ("text", "Dark 2017-2020")

    @pytest.mark.asyncio
    async def test_moves_to_next_name(self, make_resolver) -> None:
        client = FakeSearchClient(structured={"Zostań|2005|2005": _found()})

        result = await make_resolver(client).resolve(_stay())

        assert isinstance(result, Resolved)
        assert result.link.matched_name == "Zostań"
        assert [kind for kind, _ in client.calls] == ["structured", "text", "structured"]

    @pytest.mark.asyncio
    async def test_exhausted_queue_is_unresolved(self, make_resolver) -> None:
        client = FakeSearchClient()
        record = _stay()

        result = await make_resolver(client).resolve(record)

        assert isinstance(result, Unresolved)
        assert result.attempted_names == 2
        assert len(client.calls) == 4
        assert len(record.alternate_names) == 0

    @pytest.mark.asyncio
    async def test_rejected_candidate_is_not_linked(self, make_resolver) -> None:
        """A result from the wrong year fails validation and the search goes on."""
        before = _counter("filmlink_candidate_rejections_total", reason="year")
        client = FakeSearchClient(
            structured={"Stay|2005|2005": _found(year="1995")},
            text={"Stay 2005": _found("tt9", year="2005")},
        )

        result = await make_resolver(client).resolve(_stay())

        assert isinstance(result, Resolved)
        assert result.link.candidate.id == "tt9"
        assert _counter("filmlink_candidate_rejections_total", reason="year") - before == 1

    @pytest.mark.asyncio
    async def test_runtime_too_short_is_rejected(self, make_resolver) -> None:
        client = FakeSearchClient(structured={"Stay|2005|2005": _found(runtime=200)})

        result = await make_resolver(client).resolve(_stay(runtime="99"))

        assert isinstance(result, Unresolved)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "failure",
        [
            TransientSearchError("structured", "Stay", "rate limited"),
            httpx.ConnectError("connection refused"),
            SearchOutcome.failed("503 Service Unavailable"),
        ],
    )
    async def test_search_failure_tries_next_strategy(self, make_resolver, failure) -> None:
        before = _counter("filmlink_search_attempts_total", strategy="structured", outcome="error")
        client = FakeSearchClient(
            structured={"Stay|2005|2005": failure},
            text={"Stay 2005": _found()},
        )

        result = await make_resolver(client).resolve(_stay())

        assert isinstance(result, Resolved)
        assert result.link.strategy == "text"
        after = _counter("filmlink_search_attempts_total", strategy="structured", outcome="error")
        assert after - before == 1

    @pytest.mark.asyncio
    async def test_failures_never_escape(self, make_resolver) -> None:
        error = TransientSearchError("text", "Stay 2005")
        client = FakeSearchClient(
            structured={"Stay|2005|2005": error, "Zostań|2005|2005": error},
            text={"Stay 2005": error, "Zostań 2005": error},
        )

        result = await make_resolver(client).resolve(_stay())

        assert isinstance(result, Unresolved)
        assert len(client.calls) == 4

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, make_resolver) -> None:
        client = FakeSearchClient(structured={"Stay|2005|2005": KeyError("bug")})

        with pytest.raises(KeyError):
            await make_resolver(client).resolve(_stay())

    @pytest.mark.asyncio
    async def test_already_linked_record_makes_no_calls(self, make_resolver) -> None:
        first = FakeSearchClient(structured={"Stay|2005|2005": _found()})
        record = _stay()
        linked = await make_resolver(first).resolve(record)
        assert isinstance(linked, Resolved)

        second = FakeSearchClient(structured={"Stay|2005|2005": _found("tt9")})
        result = await make_resolver(second).resolve(record)

        assert isinstance(result, Resolved)
        assert result.link == linked.link
        assert second.calls == []
        assert record.link is not None
        assert record.link.candidate.id == "tt0371257"

    @pytest.mark.asyncio
    async def test_min_search_rank_skips_low_ranked_names(self, make_resolver) -> None:
        client = FakeSearchClient(structured={"Stay (DE)|2005|2005": _found()})
        record = _stay(alternate_names=[("Stay", "USA"), ("Stay (DE)", "Niemcy")])

        result = await make_resolver(client, MatchingConfig(min_search_rank=1)).resolve(record)

        assert isinstance(result, Unresolved)
        assert result.attempted_names == 1
        assert all(key.startswith("Stay|") or key == "Stay 2005" for _, key in client.calls)
        assert len(record.alternate_names) == 0

    @pytest.mark.asyncio
    async def test_zero_ranked_names_searched_by_default(self, make_resolver) -> None:
        client = FakeSearchClient(structured={"Stay (DE)|2005|2005": _found()})
        record = _stay(alternate_names=[("Stay (DE)", "Niemcy")])

        result = await make_resolver(client).resolve(record)

        assert isinstance(result, Resolved)

    @pytest.mark.asyncio
    async def test_single_zero_ranked_name_not_found(self, make_resolver) -> None:
        """One unranked name, nothing found by either search: unresolved after two calls."""
        client = FakeSearchClient()
        record = _stay(alternate_names=[("Stay (DE)", "Niemcy")])

        result = await make_resolver(client).resolve(record)

        assert isinstance(result, Unresolved)
        assert result.attempted_names == 1
        assert client.calls == [("structured", "Stay (DE)|2005|2005"), ("text", "Stay (DE) 2005")]
        assert record.link is None

    @pytest.mark.asyncio
    async def test_records_outcome_metrics(self, make_resolver) -> None:
        resolved_before = _counter("filmlink_resolutions_total", outcome="resolved")
        unresolved_before = _counter("filmlink_resolutions_total", outcome="unresolved")
        client = FakeSearchClient(structured={"Stay|2005|2005": _found()})
        resolver = make_resolver(client)

        await resolver.resolve(_stay(id=1))
        await resolver.resolve(_stay(id=2, alternate_names=[]))

        assert _counter("filmlink_resolutions_total", outcome="resolved") - resolved_before == 1
        assert _counter("filmlink_resolutions_total", outcome="unresolved") - unresolved_before == 1

    @pytest.mark.asyncio
    async def test_module_level_resolve(self) -> None:
        client = FakeSearchClient(structured={"Stay|2005|2005": _found()})
        result = await resolve(_stay(), client, DEFAULT_CONFIG)
        assert isinstance(result, Resolved)


class TestResolveMany:
    """Tests for batch resolution."""

    @pytest.mark.asyncio
    async def test_results_keep_input_order(self, make_resolver) -> None:
        client = FakeSearchClient(structured={"Stay|2005|2005": _found()})
        records = [_stay(id=1), _stay(id=2, alternate_names=[]), _stay(id=3)]

        results = await make_resolver(client).resolve_many(records, max_concurrent=2)

        assert [type(r) for r in results] == [Resolved, Unresolved, Resolved]
        assert [r.link.record_id for r in results if isinstance(r, Resolved)] == [1, 3]

    @pytest.mark.asyncio
    async def test_bounded_concurrency(self, make_resolver) -> None:
        client = FakeSearchClient(delay=0.01)
        records = [_stay(id=i) for i in range(10)]

        results = await make_resolver(client).resolve_many(records, max_concurrent=3)

        assert all(isinstance(r, Unresolved) for r in results)
        assert 1 < client.max_in_flight <= 3

    @pytest.mark.asyncio
    async def test_default_concurrency_from_settings(self, make_resolver, monkeypatch) -> None:
        from filmlink.core.config import reload_settings

        monkeypatch.setenv("FILMLINK_RESOLVE_CONCURRENCY", "2")
        reload_settings()
        client = FakeSearchClient(delay=0.01)

        await make_resolver(client).resolve_many([_stay(id=i) for i in range(6)])

        assert client.max_in_flight <= 2

    @pytest.mark.asyncio
    async def test_empty_batch(self, make_resolver) -> None:
        assert await make_resolver(FakeSearchClient()).resolve_many([]) == []
