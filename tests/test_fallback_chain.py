"""Tests for FallbackChain."""

import asyncio

import pytest

from verify_evidence.data import CandidateArticle, NormalizedResponse, ResponseShape
from verify_evidence.errors import ProviderError, ProviderTimeoutError
from verify_evidence.search.fallback import FallbackChain
from verify_evidence.search.retry import RetryPolicy


class FakeProvider:
    """Provider that replays scripted outcomes and records every call."""

    def __init__(self, name: str, outcomes: list[object] | None = None, delay: float = 0.0):
        self._name = name
        self._outcomes = list(outcomes or [])
        self._delay = delay
        self.calls: list[tuple[str, float]] = []

    @property
    def name(self) -> str:
        return self._name

    async def search(self, query: str, *, timeout: float) -> NormalizedResponse:
        self.calls.append((query, timeout))
        if self._delay:
            await asyncio.sleep(self._delay)
        outcome = self._outcomes.pop(0) if self._outcomes else ProviderError(self._name, "down")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome  # type: ignore[return-value]


def _response(provider: str, query: str = "q") -> NormalizedResponse:
    return NormalizedResponse(
        provider=provider,
        query=query,
        shape=ResponseShape.WEB_PAGES,
        articles=(CandidateArticle(title="T", snippet="S", url="https://example.com"),),
    )


QUERY = 'The "mayor" resigned, sources say!'


async def test_primary_success_skips_secondary() -> None:
    primary = FakeProvider("primary", [_response("primary")])
    secondary = FakeProvider("secondary", [_response("secondary")])
    chain = FallbackChain(primary, secondary)

    result = await chain.search(QUERY)

    assert result.provider == "primary"
    assert primary.calls == [("The mayor resigned sources say", 5.0)]
    assert secondary.calls == []


async def test_primary_retries_with_simpler_phrasings() -> None:
    primary = FakeProvider(
        "primary",
        [ProviderError("primary", "500"), ProviderError("primary", "500"), _response("primary")],
    )
    chain = FallbackChain(primary, None)

    result = await chain.search(QUERY)

    assert result.provider == "primary"
    assert primary.calls == [
        ("The mayor resigned sources say", 5.0),
        ("mayor resigned sources say", 7.0),
        (QUERY, 9.0),
    ]


async def test_secondary_used_after_primary_exhausted() -> None:
    primary = FakeProvider("primary")
    secondary = FakeProvider("secondary", [_response("secondary")])
    chain = FallbackChain(primary, secondary)

    result = await chain.search(f"  {QUERY}  ")

    assert result.provider == "secondary"
    assert len(primary.calls) == 3
    assert secondary.calls == [(QUERY, 10.0)]


async def test_both_failing_raises_primary_error() -> None:
    primary = FakeProvider(
        "primary",
        [ProviderError("primary", "first"), ProviderError("primary", "second"),
         ProviderError("primary", "last")],
    )
    secondary = FakeProvider("secondary", [ProviderError("secondary", "also down")])
    chain = FallbackChain(primary, secondary)

    with pytest.raises(ProviderError) as exc_info:
        await chain.search(QUERY)

    assert exc_info.value.provider == "primary"
    assert exc_info.value.message == "last"


async def test_only_secondary_configured() -> None:
    secondary = FakeProvider("secondary", [_response("secondary")])
    chain = FallbackChain(None, secondary)

    result = await chain.search(QUERY)

    assert result.provider == "secondary"


async def test_secondary_error_raised_when_primary_missing() -> None:
    secondary = FakeProvider("secondary", [ProviderError("secondary", "down")])
    chain = FallbackChain(None, secondary)

    with pytest.raises(ProviderError) as exc_info:
        await chain.search(QUERY)
    assert exc_info.value.provider == "secondary"


async def test_no_providers_raises() -> None:
    chain = FallbackChain(None, None)
    assert chain.providers == []
    with pytest.raises(ProviderError, match="no search providers configured"):
        await chain.search(QUERY)


async def test_slow_attempts_are_abandoned() -> None:
    primary = FakeProvider("primary", [_response("primary")] * 3, delay=1.0)
    secondary = FakeProvider("secondary", [_response("secondary")])
    chain = FallbackChain(
        primary,
        secondary,
        retry_policy=RetryPolicy(max_attempts=2, base_timeout=0.01, timeout_step=0.0),
    )

    result = await chain.search(QUERY)

    assert result.provider == "secondary"
    assert len(primary.calls) == 2


async def test_timeout_error_surfaces_when_everything_times_out() -> None:
    primary = FakeProvider("primary", [_response("primary")], delay=1.0)
    chain = FallbackChain(
        primary, retry_policy=RetryPolicy(max_attempts=1, base_timeout=0.01)
    )

    with pytest.raises(ProviderTimeoutError):
        await chain.search("earthquake")
