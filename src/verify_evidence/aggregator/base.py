"""Result aggregator protocol."""

from typing import Protocol

from verify_evidence.data import CandidateArticle, NormalizedResponse


class ResultAggregator(Protocol):
    """Interface for merging provider responses into one candidate list."""

    def aggregate(self, responses: list[NormalizedResponse]) -> list[CandidateArticle]:
        """Flatten and deduplicate the articles of all *responses*.

        Args:
            responses: Normalized responses in the order they were collected.

        Returns:
            Candidate articles with no two sharing a non-empty URL.
        """
        ...
