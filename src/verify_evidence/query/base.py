from typing import Protocol

from verify_evidence.data import Claim, SearchQuery, Usage


class QueryGenerator(Protocol):
    """Interface for generating diversified search queries from a claim."""

    async def generate(
        self, claim: Claim, *, max_queries: int | None = None
    ) -> tuple[list[SearchQuery], Usage]: ...


class KeywordExtractor(Protocol):
    """Interface for extracting keyword phrases from claim text."""

    async def extract(self, content: str) -> tuple[list[str], Usage]:
        """Extract keyword phrases useful for verification searches.

        Args:
            content: Raw claim or article text.

        Returns:
            Tuple of (keyword phrases, usage).
        """
        ...
