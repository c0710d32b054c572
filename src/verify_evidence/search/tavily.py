"""Tavily web search (secondary provider)."""

import logging
import os

import httpx

from verify_evidence.data import NormalizedResponse
from verify_evidence.errors import ConfigurationError, ProviderError, ProviderTimeoutError
from verify_evidence.search.base import normalize_http_response

TAVILY_API_URL = "https://api.tavily.com/search"

logger = logging.getLogger(__name__)


class TavilyProvider:
    """Search the web using the Tavily API.

    Tavily answers with a flat ``results`` list of ``title``/``content``/``url``
    records; ``content`` becomes the article snippet.

    Args:
        api_key: Tavily API key (defaults to TAVILY_API_KEY env var).
        endpoint: Override for the API URL.
        max_results: Number of results requested per query.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        endpoint: str = TAVILY_API_URL,
        max_results: int = 5,
    ) -> None:
        self._api_key = api_key or os.environ.get("TAVILY_API_KEY")
        if not self._api_key:
            raise ConfigurationError(
                "Tavily API key required. Pass api_key or set TAVILY_API_KEY env var."
            )
        self._endpoint = endpoint
        self._max_results = max_results

    @property
    def name(self) -> str:
        return "tavily"

    async def search(self, query: str, *, timeout: float) -> NormalizedResponse:
        if not query.strip():
            raise ProviderError(self.name, "search query cannot be empty")

        body = {
            "api_key": self._api_key,
            "query": query,
            "search_depth": "basic",
            "include_answer": False,
            "include_images": False,
            "max_results": self._max_results,
        }

        async with httpx.AsyncClient(timeout=timeout) as client:
            try:
                response = await client.post(self._endpoint, json=body)
            except httpx.TimeoutException as e:
                raise ProviderTimeoutError(self.name, timeout) from e
            except httpx.HTTPError as e:
                raise ProviderError(self.name, f"request failed: {e}") from e

        result = normalize_http_response(self.name, query, response)
        logger.debug(f"Tavily returned {len(result.articles)} articles for {query!r}")
        return result
