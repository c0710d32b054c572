"""Protocol for article ranking."""

from typing import Protocol

from verify_evidence.data import CandidateArticle, ScoredArticle, Usage


class ArticleRanker(Protocol):
    """Interface for ranking candidate articles against a claim."""

    async def rank(
        self,
        articles: list[CandidateArticle],
        claim: str,
        *,
        top_k: int | None = None,
    ) -> tuple[list[ScoredArticle], Usage]:
        """Score and order candidate articles, most relevant first.

        Args:
            articles: Deduplicated candidates in encounter order.
            claim: The original claim text.
            top_k: Number of articles to return (ranker default when None).

        Returns:
            Tuple of (ranked articles, usage).
        """
        ...
