"""Tests for MultiSourceOrchestrator and CircuitBreaker."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from verify_evidence.data import NormalizedResponse, ResponseShape
from verify_evidence.errors import ProviderError
from verify_evidence.search.fallback import FallbackChain
from verify_evidence.search.multi_source import (
    DEFAULT_SITE_DOMAINS,
    CircuitBreaker,
    MultiSourceOrchestrator,
    site_scoped_queries,
)


def _response(query: str) -> NormalizedResponse:
    return NormalizedResponse(provider="p", query=query, shape=ResponseShape.RESULTS)


class DownProvider:
    """Adapter that fails every request and records the queries it saw."""

    def __init__(self, name: str) -> None:
        self._name = name
        self.queries: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def search(self, query: str, *, timeout: float) -> NormalizedResponse:
        self.queries.append(query)
        raise ProviderError(self._name, "service unavailable", status_code=503)


@pytest.fixture
def failing_chain() -> MagicMock:
    """A fallback chain whose every search fails."""
    chain = MagicMock()
    chain.search = AsyncMock(side_effect=ProviderError("primary", "down"))
    return chain


@pytest.fixture
def succeeding_chain() -> MagicMock:
    """A fallback chain whose every search succeeds."""
    chain = MagicMock()
    chain.search = AsyncMock(side_effect=lambda q: _response(q))
    return chain


def test_site_scoped_queries() -> None:
    assert site_scoped_queries("floods", ("a.com", "b.com")) == [
        "floods",
        "floods site:a.com",
        "floods site:b.com",
    ]


def test_default_site_domains() -> None:
    assert DEFAULT_SITE_DOMAINS == (
        "reuters.com",
        "bbc.com",
        "timesofindia.indiatimes.com",
        "ndtv.com",
    )


class TestCircuitBreaker:
    """Tests for CircuitBreaker."""

    def test_opens_at_threshold(self) -> None:
        breaker = CircuitBreaker()
        breaker.record_failure()
        breaker.record_failure()
        assert not breaker.is_open
        breaker.record_failure()
        assert breaker.is_open

    def test_success_resets(self) -> None:
        breaker = CircuitBreaker()
        breaker.record_failure()
        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()
        assert breaker.consecutive_failures == 1
        assert not breaker.is_open


async def test_breaker_stops_after_three_failures(failing_chain: MagicMock) -> None:
    orchestrator = MultiSourceOrchestrator(failing_chain, delay_seconds=0)

    results = await orchestrator.search_multiple_sources("floods")

    assert results == []
    assert failing_chain.search.await_count == 3


async def test_stops_after_two_successes(succeeding_chain: MagicMock) -> None:
    orchestrator = MultiSourceOrchestrator(succeeding_chain, delay_seconds=0)

    results = await orchestrator.search_multiple_sources("floods")

    assert [r.query for r in results] == ["floods", "floods site:reuters.com"]
    assert succeeding_chain.search.await_count == 2


async def test_failures_between_successes_reset_breaker() -> None:
    chain = MagicMock()
    chain.search = AsyncMock(
        side_effect=[
            ProviderError("p", "down"),
            ProviderError("p", "down"),
            _response("floods site:bbc.com"),
            ProviderError("p", "down"),
            _response("floods site:ndtv.com"),
        ]
    )
    orchestrator = MultiSourceOrchestrator(chain, delay_seconds=0)

    results = await orchestrator.search_multiple_sources("floods")

    assert len(results) == 2
    assert chain.search.await_count == 5


async def test_delay_between_sub_queries(
    failing_chain: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> None:
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    monkeypatch.setattr("verify_evidence.search.multi_source.asyncio.sleep", fake_sleep)
    orchestrator = MultiSourceOrchestrator(failing_chain)

    await orchestrator.search_multiple_sources("floods")

    assert sleeps == [0.1, 0.1]


async def test_unexpected_errors_propagate() -> None:
    chain = MagicMock()
    chain.search = AsyncMock(side_effect=KeyError("boom"))
    orchestrator = MultiSourceOrchestrator(chain, delay_seconds=0)

    with pytest.raises(KeyError):
        await orchestrator.search_multiple_sources("floods")


async def test_breaker_trips_behind_real_fallback_chain() -> None:
    primary = DownProvider("langsearch")
    secondary = DownProvider("tavily")
    orchestrator = MultiSourceOrchestrator(FallbackChain(primary, secondary), delay_seconds=0)

    results = await orchestrator.search_multiple_sources("floods in Berlin")

    assert results == []
    # one secondary attempt per sub-query: three sweeps, then the breaker opens
    assert secondary.queries == [
        "floods in Berlin",
        "floods in Berlin site:reuters.com",
        "floods in Berlin site:bbc.com",
    ]
    assert primary.queries
