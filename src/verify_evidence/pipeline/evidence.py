"""Evidence pipeline: query generation, multi-source search, ranking and caching."""

import asyncio
import logging
import time

from verify_evidence.aggregator.base import ResultAggregator
from verify_evidence.cache import EvidenceCache
from verify_evidence.data import (
    CandidateArticle,
    Claim,
    EvidenceKind,
    NormalizedResponse,
    PipelineStatus,
    ScoredArticle,
    SearchQuery,
    Usage,
)
from verify_evidence.errors import PipelineError, ProviderError
from verify_evidence.pipeline.base import StatusCallback
from verify_evidence.query.base import QueryGenerator
from verify_evidence.ranker.base import ArticleRanker
from verify_evidence.ranker.relevance import DEFAULT_TOP_K, rank_articles
from verify_evidence.run_logger import RunLogger
from verify_evidence.search.multi_source import MultiSourceOrchestrator
from verify_evidence.url import web_search_url

logger = logging.getLogger(__name__)

DEGRADED_TITLE = "Search for related news"
DEGRADED_SNIPPET = (
    "No sources could be retrieved for this claim right now. "
    "Use the link to search the web for related coverage."
)


def degraded_evidence(claim: str) -> ScoredArticle:
    """Stand-in result pointing the reader at a web search for *claim*."""
    return ScoredArticle(
        article=CandidateArticle(
            title=DEGRADED_TITLE,
            snippet=DEGRADED_SNIPPET,
            url=web_search_url(claim.strip()),
            kind=EvidenceKind.DEGRADED,
        ),
        score=0,
    )


def _notify(on_status: StatusCallback | None, status: PipelineStatus) -> None:
    if on_status is not None:
        on_status(status)


class EvidencePipeline:
    """Turn a claim into a ranked, deduplicated list of evidence articles.

    Flow:
    1. Return cached results when a fresh entry exists for the claim
    2. Generate queries and search the first *max_queries* of them, one at a
       time, through the multi-source orchestrator
    3. Deduplicate the collected articles by URL
    4. Rank and keep the top *top_k*, then cache them

    If query generation, search or aggregation fails unexpectedly, a single
    direct search on the raw claim is ranked deterministically instead. When
    no evidence at all can be found the result is one degraded article, so
    callers always get a non-empty list.

    Args:
        generator: Query generator.
        orchestrator: Multi-source search orchestrator.
        aggregator: Result aggregator.
        ranker: Article ranker.
        cache: Optional evidence cache.
        max_queries: Number of generated queries to search.
        query_delay_seconds: Pause between consecutive queries.
        top_k: Number of ranked articles to return.
        run_logger: Optional RunLogger for intermediate result logging.
    """

    def __init__(
        self,
        generator: QueryGenerator,
        orchestrator: MultiSourceOrchestrator,
        aggregator: ResultAggregator,
        ranker: ArticleRanker,
        cache: EvidenceCache | None = None,
        *,
        max_queries: int = 3,
        query_delay_seconds: float = 0.2,
        top_k: int = DEFAULT_TOP_K,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._generator = generator
        self._orchestrator = orchestrator
        self._aggregator = aggregator
        self._ranker = ranker
        self._cache = cache
        self._max_queries = max_queries
        self._query_delay = query_delay_seconds
        self._top_k = top_k
        self._run_logger = run_logger

    async def comprehensive_search(
        self, claim: Claim | str, on_status: StatusCallback | None = None
    ) -> list[ScoredArticle]:
        """Like :meth:`run`, without the usage."""
        results, _usage = await self.run(claim, on_status=on_status)
        return results

    async def run(
        self,
        claim: Claim | str,
        *,
        on_status: StatusCallback | None = None,
    ) -> tuple[list[ScoredArticle], Usage]:
        """Execute the evidence pipeline.

        Args:
            claim: The claim to verify, as text or a :class:`Claim`.
            on_status: Optional callback receiving ``searching`` and ``ranking``.

        Returns:
            Tuple of (ranked evidence, usage).
        """
        if isinstance(claim, str):
            claim = Claim(text=claim)
        text = claim.text.strip()

        if self._run_logger:
            self._run_logger.start_run("evidence", claim)

        total_usage = Usage()
        _notify(on_status, PipelineStatus.SEARCHING)

        if not text:
            logger.warning("Empty claim, returning web search link")
            return self._finish([degraded_evidence(text)], total_usage)

        if self._cache is not None:
            # file-backed stores do blocking I/O
            entry = await asyncio.to_thread(self._cache.get, text)
            if entry is not None:
                total_usage.cache_hits += 1
                return self._finish(list(entry.results), total_usage)

        try:
            articles = await self._search_queries(claim, total_usage)
            _notify(on_status, PipelineStatus.RANKING)
            ranked = await self._rank(articles, text, total_usage)
        except PipelineError as e:
            logger.error(f"Evidence search failed, falling back to direct search: {e}")
            articles = await self._direct_search(text, total_usage)
            _notify(on_status, PipelineStatus.RANKING)
            ranked = rank_articles(articles, text, top_k=self._top_k)

        if not ranked:
            logger.warning(f"No evidence found for: {text[:50]!r}")
            return self._finish([degraded_evidence(text)], total_usage)

        if self._cache is not None:
            await asyncio.to_thread(self._cache.put, text, ranked)
        return self._finish(ranked, total_usage)

    def _finish(
        self, results: list[ScoredArticle], usage: Usage
    ) -> tuple[list[ScoredArticle], Usage]:
        if self._run_logger:
            self._run_logger.finish_run(results, usage)
        return (results, usage)

    async def _search_queries(self, claim: Claim, usage: Usage) -> list[CandidateArticle]:
        try:
            return await self._generate_and_search(claim, usage)
        except PipelineError:
            raise
        except Exception as e:
            raise PipelineError(str(e) or type(e).__name__) from e

    async def _generate_and_search(self, claim: Claim, usage: Usage) -> list[CandidateArticle]:
        t0 = time.monotonic()
        queries, gen_usage = await self._generator.generate(claim)
        usage += gen_usage
        queries = queries[: self._max_queries]
        logger.info(f"Generated {len(queries)} search queries")

        if self._run_logger:
            self._run_logger.log_stage(
                stage="query_generation",
                component=type(self._generator).__name__,
                input_data=claim,
                output_data=queries,
                usage=gen_usage,
                duration_seconds=time.monotonic() - t0,
            )

        if not queries:
            queries = [SearchQuery(text=claim.text.strip(), intent="original claim")]

        t0 = time.monotonic()
        responses: list[NormalizedResponse] = []
        for index, query in enumerate(queries):
            if index > 0 and self._query_delay > 0:
                await asyncio.sleep(self._query_delay)
            try:
                query_responses = await self._orchestrator.search_multiple_sources(query.text)
            except ProviderError as e:
                logger.warning(f"Search failed for query {query.text!r}: {e}")
                continue
            responses.extend(query_responses)

        usage.search_requests += len(responses)
        if self._run_logger:
            self._run_logger.log_stage(
                stage="search",
                component=type(self._orchestrator).__name__,
                input_data=queries,
                output_data={"response_count": len(responses)},
                usage=None,
                duration_seconds=time.monotonic() - t0,
            )

        return self._aggregate(responses)

    def _aggregate(self, responses: list[NormalizedResponse]) -> list[CandidateArticle]:
        t0 = time.monotonic()
        articles = self._aggregator.aggregate(responses)
        if self._run_logger:
            self._run_logger.log_stage(
                stage="aggregation",
                component=type(self._aggregator).__name__,
                input_data={"response_count": len(responses)},
                output_data=articles,
                usage=None,
                duration_seconds=time.monotonic() - t0,
            )
        return articles

    async def _rank(
        self, articles: list[CandidateArticle], text: str, usage: Usage
    ) -> list[ScoredArticle]:
        if not articles:
            return []

        t0 = time.monotonic()
        try:
            ranked, rank_usage = await self._ranker.rank(articles, text, top_k=self._top_k)
        except Exception as e:
            logger.warning(f"Ranking failed, using relevance scores: {e}")
            ranked, rank_usage = rank_articles(articles, text, top_k=self._top_k), Usage()
        usage += rank_usage

        if self._run_logger:
            self._run_logger.log_stage(
                stage="ranking",
                component=type(self._ranker).__name__,
                input_data={"candidate_count": len(articles)},
                output_data=ranked,
                usage=rank_usage,
                duration_seconds=time.monotonic() - t0,
            )
        return ranked

    async def _direct_search(self, text: str, usage: Usage) -> list[CandidateArticle]:
        try:
            responses = await self._orchestrator.search_multiple_sources(text)
            usage.search_requests += len(responses)
            return self._aggregate(responses)
        except Exception as e:
            logger.error(f"Direct search failed: {e}")
            return []
