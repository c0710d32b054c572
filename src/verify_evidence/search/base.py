from typing import Protocol

import httpx

from verify_evidence.data import NormalizedResponse
from verify_evidence.errors import ProviderError
from verify_evidence.search.shapes import detect_shape


class SearchProvider(Protocol):
    """Interface for a single external web-search service."""

    @property
    def name(self) -> str: ...

    async def search(self, query: str, *, timeout: float) -> NormalizedResponse:
        """Issue one search request and normalize the response.

        Args:
            query: Search string sent to the provider.
            timeout: Deadline for this request, in seconds.

        Returns:
            The normalized response; never empty.

        Raises:
            ProviderTimeoutError: If the request exceeded *timeout*.
            ProviderError: On a non-2xx status, a malformed payload, or no results.
        """
        ...


def normalize_http_response(
    provider: str, query: str, response: httpx.Response
) -> NormalizedResponse:
    """Check status, decode JSON and normalize the first populated payload shape."""
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ProviderError(
            provider,
            f"API returned {response.status_code}",
            status_code=response.status_code,
        ) from e

    try:
        payload = response.json()
    except ValueError as e:
        raise ProviderError(provider, "response is not valid JSON") from e

    shape = detect_shape(payload)
    if shape is None:
        keys = sorted(payload) if isinstance(payload, dict) else type(payload).__name__
        raise ProviderError(provider, f"no results in response (keys: {keys})")

    articles = shape.articles()
    if not articles:
        raise ProviderError(provider, f"no usable records in {shape.kind} payload")

    return NormalizedResponse(
        provider=provider,
        query=query,
        shape=shape.kind,
        articles=articles,
    )
