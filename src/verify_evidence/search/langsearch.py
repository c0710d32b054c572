"""LangSearch web search (primary provider)."""

import logging
import os

import httpx

from verify_evidence.data import NormalizedResponse
from verify_evidence.errors import ConfigurationError, ProviderError, ProviderTimeoutError
from verify_evidence.search.base import normalize_http_response

LANGSEARCH_API_URL = "https://api.langsearch.com/v1/web-search"

logger = logging.getLogger(__name__)


class LangSearchProvider:
    """Search the web using the LangSearch API.

    Sends ``POST /v1/web-search`` with a bearer token and asks for summaries.
    The response is normalized from whichever known payload shape it uses.

    Args:
        api_key: LangSearch API key (defaults to LANGSEARCH_API_KEY env var).
        endpoint: Override for the API URL.
        count: Number of results requested per query.
        freshness: Freshness filter passed to the API.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        endpoint: str = LANGSEARCH_API_URL,
        count: int = 10,
        freshness: str = "noLimit",
    ) -> None:
        self._api_key = api_key or os.environ.get("LANGSEARCH_API_KEY")
        if not self._api_key:
            raise ConfigurationError(
                "LangSearch API key required. Pass api_key or set LANGSEARCH_API_KEY env var."
            )
        self._endpoint = endpoint
        self._count = count
        self._freshness = freshness

    @property
    def name(self) -> str:
        return "langsearch"

    async def search(self, query: str, *, timeout: float) -> NormalizedResponse:
        if not query.strip():
            raise ProviderError(self.name, "search query cannot be empty")

        body = {
            "query": query,
            "freshness": self._freshness,
            "summary": True,
            "count": self._count,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        async with httpx.AsyncClient(timeout=timeout) as client:
            try:
                response = await client.post(self._endpoint, json=body, headers=headers)
            except httpx.TimeoutException as e:
                raise ProviderTimeoutError(self.name, timeout) from e
            except httpx.HTTPError as e:
                raise ProviderError(self.name, f"request failed: {e}") from e

        result = normalize_http_response(self.name, query, response)
        logger.debug(
            f"LangSearch returned {len(result.articles)} articles ({result.shape}) for {query!r}"
        )
        return result
