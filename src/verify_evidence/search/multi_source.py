"""Site-scoped multi-source search with circuit breaker and early exit."""

import asyncio
import logging
from dataclasses import dataclass

from verify_evidence.data import NormalizedResponse
from verify_evidence.errors import ProviderError
from verify_evidence.search.fallback import FallbackChain

logger = logging.getLogger(__name__)

DEFAULT_SITE_DOMAINS: tuple[str, ...] = (
    "reuters.com",
    "bbc.com",
    "timesofindia.indiatimes.com",
    "ndtv.com",
)


@dataclass
class CircuitBreaker:
    """Counts consecutive failures within one sweep; opens at *threshold*."""

    threshold: int = 3
    consecutive_failures: int = 0

    @property
    def is_open(self) -> bool:
        return self.consecutive_failures >= self.threshold

    def record_success(self) -> None:
        self.consecutive_failures = 0

    def record_failure(self) -> None:
        self.consecutive_failures += 1


def site_scoped_queries(query: str, domains: tuple[str, ...]) -> list[str]:
    """The general query followed by one ``site:`` restricted variant per domain."""
    return [query, *(f"{query} site:{domain}" for domain in domains)]


class MultiSourceOrchestrator:
    """Run one query against a general search and several site-scoped searches.

    Sub-queries run sequentially through the fallback chain. The sweep stops
    early once *min_successes* responses are collected, or when
    *max_consecutive_failures* sub-queries fail in a row. The goal is enough
    evidence quickly, not exhaustive coverage.

    Args:
        chain: Provider fallback chain used for every sub-query.
        site_domains: Domains used for ``site:`` restricted variants.
        min_successes: Successful sub-queries after which the sweep stops.
        max_consecutive_failures: Circuit breaker threshold.
        delay_seconds: Pause between consecutive sub-queries.
    """

    def __init__(
        self,
        chain: FallbackChain,
        *,
        site_domains: tuple[str, ...] = DEFAULT_SITE_DOMAINS,
        min_successes: int = 2,
        max_consecutive_failures: int = 3,
        delay_seconds: float = 0.1,
    ) -> None:
        self._chain = chain
        self._site_domains = site_domains
        self._min_successes = min_successes
        self._max_consecutive_failures = max_consecutive_failures
        self._delay = delay_seconds

    async def search_multiple_sources(self, query: str) -> list[NormalizedResponse]:
        """Collect normalized responses for *query* from several sources.

        Args:
            query: The search query.

        Returns:
            Responses from the successful sub-queries (possibly empty).
        """
        sub_queries = site_scoped_queries(query, self._site_domains)
        breaker = CircuitBreaker(threshold=self._max_consecutive_failures)
        results: list[NormalizedResponse] = []

        for index, sub_query in enumerate(sub_queries):
            if index > 0 and self._delay > 0:
                await asyncio.sleep(self._delay)

            try:
                response = await self._chain.search(sub_query)
            except ProviderError as e:
                breaker.record_failure()
                logger.warning(f"Search failed for: {sub_query} ({e})")
                if breaker.is_open:
                    logger.warning("Too many search failures, stopping remaining searches")
                    break
                continue

            results.append(response)
            breaker.record_success()
            if len(results) >= self._min_successes:
                logger.info("Got enough search results for this query, stopping early")
                break

        logger.info(
            f"Completed {len(results)}/{len(sub_queries)} sources for query: {query[:50]!r}"
        )
        return results
