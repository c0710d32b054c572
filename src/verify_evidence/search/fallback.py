"""Primary-then-secondary provider chain for a single query."""

import asyncio
import logging

from verify_evidence.data import NormalizedResponse
from verify_evidence.errors import ProviderError, ProviderTimeoutError
from verify_evidence.search.base import SearchProvider
from verify_evidence.search.retry import RetryMachine, RetryPolicy, attempt_phrasings

logger = logging.getLogger(__name__)


async def attempt_search(provider: SearchProvider, query: str, timeout: float) -> NormalizedResponse:
    """Run one provider call bounded by *timeout*; the call is cancelled on expiry."""
    try:
        return await asyncio.wait_for(provider.search(query, timeout=timeout), timeout=timeout)
    except TimeoutError as e:
        raise ProviderTimeoutError(provider.name, timeout) from e


class FallbackChain:
    """Search one query with a primary provider, falling back to a secondary.

    The primary is retried with progressively simpler phrasings and longer
    deadlines according to *retry_policy*. The secondary gets a single attempt
    with the original query. When both fail, the primary's error is raised so
    the root cause is not masked. Providers that were not configured are
    passed as None and skipped.

    Args:
        primary: Preferred provider.
        secondary: Backup provider.
        retry_policy: Attempt count and timeout schedule for the primary.
        secondary_timeout: Deadline for the secondary attempt, in seconds.
    """

    def __init__(
        self,
        primary: SearchProvider | None,
        secondary: SearchProvider | None = None,
        *,
        retry_policy: RetryPolicy | None = None,
        secondary_timeout: float = 10.0,
    ) -> None:
        self._primary = primary
        self._secondary = secondary
        self._retry_policy = retry_policy or RetryPolicy()
        self._secondary_timeout = secondary_timeout

    @property
    def providers(self) -> list[SearchProvider]:
        return [p for p in (self._primary, self._secondary) if p is not None]

    async def search(self, query: str) -> NormalizedResponse:
        """Return the first successful normalized response for *query*.

        Raises:
            ProviderError: If every configured provider failed, or none is configured.
        """
        primary_error: ProviderError | None = None
        if self._primary is not None:
            try:
                return await self._search_primary(self._primary, query)
            except ProviderError as e:
                primary_error = e
                if self._secondary is not None:
                    logger.warning(
                        f"{self._primary.name} failed for {query!r}, "
                        f"trying {self._secondary.name}..."
                    )

        secondary_error: ProviderError | None = None
        if self._secondary is not None:
            try:
                return await attempt_search(self._secondary, query.strip(), self._secondary_timeout)
            except ProviderError as e:
                logger.warning(f"{self._secondary.name} search failed: {e}")
                secondary_error = e

        if primary_error is not None:
            raise primary_error
        if secondary_error is not None:
            raise secondary_error
        raise ProviderError("search", "no search providers configured")

    async def _search_primary(
        self, provider: SearchProvider, query: str
    ) -> NormalizedResponse:
        machine = RetryMachine(self._retry_policy, attempt_phrasings(query))

        while not machine.finished:
            step = machine.begin()
            if step is None:
                break
            phrasing, timeout = step
            logger.debug(
                f"{provider.name} attempt {machine.attempt} with query {phrasing!r} "
                f"(timeout: {timeout:.1f}s)"
            )
            try:
                response = await attempt_search(provider, phrasing, timeout)
            except ProviderTimeoutError as e:
                logger.warning(f"{provider.name} attempt {machine.attempt} timed out ({e})")
                machine.fail(e)
                continue
            except ProviderError as e:
                logger.warning(f"{provider.name} attempt {machine.attempt} failed ({e})")
                machine.fail(e)
                continue

            machine.succeed()
            logger.info(
                f"{provider.name} search successful (attempt {machine.attempt}) - "
                f"found {len(response.articles)} results"
            )
            return response

        raise machine.last_error or ProviderError(provider.name, "no query phrasings to try")
