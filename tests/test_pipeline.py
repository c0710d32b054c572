"""Tests for EvidencePipeline."""

import json
import threading
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from verify_evidence.aggregator import UrlDedupAggregator
from verify_evidence.cache import EvidenceCache, MemoryKeyValueStore
from verify_evidence.data import (
    CandidateArticle,
    Claim,
    EvidenceKind,
    NormalizedResponse,
    PipelineStatus,
    ResponseShape,
    ScoredArticle,
    SearchQuery,
    Usage,
)
from verify_evidence.errors import ProviderError
from verify_evidence.pipeline import EvidencePipeline, degraded_evidence
from verify_evidence.query import HeuristicQueryGenerator
from verify_evidence.ranker import RelevanceRanker
from verify_evidence.run_logger import RunLogger
from verify_evidence.search import FallbackChain, MultiSourceOrchestrator

CLAIM = "Company X announced layoffs"


def _response(*titles: str) -> NormalizedResponse:
    return NormalizedResponse(
        provider="langsearch",
        query="q",
        shape=ResponseShape.WEB_PAGES,
        articles=tuple(
            CandidateArticle(title=t, snippet="", url=f"https://example.com/{t}") for t in titles
        ),
    )


@pytest.fixture
def mock_generator() -> MagicMock:
    """Create a mock query generator returning five queries."""
    gen = MagicMock()
    gen.generate = AsyncMock(
        return_value=(
            [SearchQuery(text=f"query {i}", intent="test") for i in range(5)],
            Usage(),
        )
    )
    return gen


@pytest.fixture
def mock_orchestrator() -> MagicMock:
    """Create a mock orchestrator returning overlapping results."""
    orchestrator = MagicMock()
    orchestrator.search_multiple_sources = AsyncMock(
        return_value=[_response("Company layoffs", "Other story")]
    )
    return orchestrator


@pytest.fixture
def cache() -> EvidenceCache:
    return EvidenceCache(MemoryKeyValueStore())


@pytest.fixture
def pipeline(
    mock_generator: MagicMock, mock_orchestrator: MagicMock, cache: EvidenceCache
) -> EvidencePipeline:
    """Create a pipeline with mocked search components."""
    return EvidencePipeline(
        generator=mock_generator,
        orchestrator=mock_orchestrator,
        aggregator=UrlDedupAggregator(),
        ranker=RelevanceRanker(),
        cache=cache,
        query_delay_seconds=0,
    )


async def test_run_returns_ranked_deduplicated_results(pipeline: EvidencePipeline) -> None:
    results, usage = await pipeline.run(CLAIM)

    assert [r.article.title for r in results] == ["Company layoffs", "Other story"]
    assert all(isinstance(r, ScoredArticle) for r in results)
    assert results[0].score > results[1].score
    assert usage.search_requests == 3


async def test_only_first_three_queries_are_searched(
    pipeline: EvidencePipeline, mock_orchestrator: MagicMock
) -> None:
    await pipeline.run(CLAIM)

    searched = [c.args[0] for c in mock_orchestrator.search_multiple_sources.call_args_list]
    assert searched == ["query 0", "query 1", "query 2"]


async def test_status_callbacks(pipeline: EvidencePipeline) -> None:
    statuses: list[PipelineStatus] = []
    await pipeline.run(CLAIM, on_status=statuses.append)
    assert statuses == [PipelineStatus.SEARCHING, PipelineStatus.RANKING]


async def test_accepts_claim_objects(
    pipeline: EvidencePipeline, mock_generator: MagicMock
) -> None:
    claim = Claim(text=CLAIM, keywords=("Company X",))
    await pipeline.run(claim)
    assert mock_generator.generate.call_args.args[0] == claim


async def test_cache_hit_skips_providers(
    pipeline: EvidencePipeline, mock_orchestrator: MagicMock, mock_generator: MagicMock
) -> None:
    first, _ = await pipeline.run(CLAIM)
    mock_orchestrator.search_multiple_sources.reset_mock()
    mock_generator.generate.reset_mock()

    statuses: list[PipelineStatus] = []
    second, usage = await pipeline.run(f"  {CLAIM.upper()} ", on_status=statuses.append)

    assert second == first
    assert usage.cache_hits == 1
    assert usage.search_requests == 0
    mock_orchestrator.search_multiple_sources.assert_not_called()
    mock_generator.generate.assert_not_called()
    assert statuses == [PipelineStatus.SEARCHING]


async def test_failing_query_is_skipped(
    pipeline: EvidencePipeline, mock_orchestrator: MagicMock
) -> None:
    mock_orchestrator.search_multiple_sources.side_effect = [
        ProviderError("langsearch", "down"),
        [_response("Company layoffs")],
        [_response("Other story")],
    ]

    results, _ = await pipeline.run(CLAIM)

    assert {r.article.title for r in results} == {"Company layoffs", "Other story"}


async def test_no_evidence_returns_degraded_article(
    pipeline: EvidencePipeline, mock_orchestrator: MagicMock
) -> None:
    mock_orchestrator.search_multiple_sources.return_value = []

    results, _ = await pipeline.run(CLAIM)

    assert len(results) == 1
    assert results[0].is_degraded
    assert results[0].score == 0
    assert results[0].article.url.startswith("https://www.google.com/search?q=")


async def test_degraded_results_are_not_cached(
    pipeline: EvidencePipeline, mock_orchestrator: MagicMock
) -> None:
    mock_orchestrator.search_multiple_sources.return_value = []
    await pipeline.run(CLAIM)

    mock_orchestrator.search_multiple_sources.return_value = [_response("Company layoffs")]
    results, usage = await pipeline.run(CLAIM)

    assert not results[0].is_degraded
    assert usage.cache_hits == 0


async def test_generation_failure_falls_back_to_direct_search(
    pipeline: EvidencePipeline, mock_generator: MagicMock, mock_orchestrator: MagicMock
) -> None:
    mock_generator.generate.side_effect = RuntimeError("generator crashed")

    statuses: list[PipelineStatus] = []
    results, _ = await pipeline.run(CLAIM, on_status=statuses.append)

    mock_orchestrator.search_multiple_sources.assert_awaited_once_with(CLAIM)
    assert results[0].article.title == "Company layoffs"
    assert statuses == [PipelineStatus.SEARCHING, PipelineStatus.RANKING]


async def test_unexpected_search_error_falls_back(
    pipeline: EvidencePipeline, mock_orchestrator: MagicMock
) -> None:
    mock_orchestrator.search_multiple_sources.side_effect = [
        KeyError("bad payload"),
        [_response("Company layoffs")],
    ]

    results, _ = await pipeline.run(CLAIM)

    assert mock_orchestrator.search_multiple_sources.call_args_list[-1].args == (CLAIM,)
    assert results[0].article.title == "Company layoffs"


async def test_total_failure_never_raises(
    pipeline: EvidencePipeline, mock_generator: MagicMock, mock_orchestrator: MagicMock
) -> None:
    mock_generator.generate.side_effect = RuntimeError("generator crashed")
    mock_orchestrator.search_multiple_sources.side_effect = RuntimeError("network gone")

    results, _ = await pipeline.run(CLAIM)

    assert len(results) == 1
    assert results[0].is_degraded


async def test_ranker_failure_uses_relevance_scores(
    mock_generator: MagicMock, mock_orchestrator: MagicMock
) -> None:
    ranker = MagicMock()
    ranker.rank = AsyncMock(side_effect=RuntimeError("ranker broke"))
    pipeline = EvidencePipeline(
        mock_generator,
        mock_orchestrator,
        UrlDedupAggregator(),
        ranker,
        query_delay_seconds=0,
    )

    results, _ = await pipeline.run(CLAIM)

    assert results[0].article.title == "Company layoffs"


async def test_blank_claim_returns_degraded_without_searching(
    pipeline: EvidencePipeline, mock_generator: MagicMock, mock_orchestrator: MagicMock
) -> None:
    results, _ = await pipeline.run("   ")

    assert results[0].is_degraded
    mock_generator.generate.assert_not_called()
    mock_orchestrator.search_multiple_sources.assert_not_called()


async def test_comprehensive_search_returns_list(pipeline: EvidencePipeline) -> None:
    results = await pipeline.comprehensive_search(CLAIM)
    assert [r.article.title for r in results] == ["Company layoffs", "Other story"]


async def test_delay_between_queries(
    mock_generator: MagicMock, mock_orchestrator: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> None:
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    monkeypatch.setattr("verify_evidence.pipeline.evidence.asyncio.sleep", fake_sleep)
    pipeline = EvidencePipeline(
        mock_generator, mock_orchestrator, UrlDedupAggregator(), RelevanceRanker()
    )

    await pipeline.run(CLAIM)

    assert sleeps == [0.2, 0.2]


async def test_run_logger_records_stages(
    mock_generator: MagicMock, mock_orchestrator: MagicMock, tmp_path: Path
) -> None:
    run_logger = RunLogger(tmp_path)
    pipeline = EvidencePipeline(
        mock_generator,
        mock_orchestrator,
        UrlDedupAggregator(),
        RelevanceRanker(),
        query_delay_seconds=0,
        run_logger=run_logger,
    )

    await pipeline.run(CLAIM)

    assert run_logger.last_log_path is not None
    data = json.loads(run_logger.last_log_path.read_text())
    assert data["pipeline_type"] == "evidence"
    assert data["claim"]["text"] == CLAIM
    assert [s["stage"] for s in data["stages"]] == [
        "query_generation",
        "search",
        "aggregation",
        "ranking",
    ]
    assert data["final_result_count"] == 2
    assert data["degraded"] is False


def test_degraded_evidence() -> None:
    result = degraded_evidence("  floods in Berlin ")
    assert result.article.kind == EvidenceKind.DEGRADED
    assert result.article.url == "https://www.google.com/search?q=floods+in+Berlin"
    assert result.article.title
    assert result.article.snippet


RECALL_CLAIM = "Company X recalls 2 million vehicles"
RECALL_TITLES = (
    "Company X recalls 2 million vehicles over brake fault",
    "Regulators review Company X recall",
    "Auto industry braces for slower quarter",
    "Electric vehicle sales climb in Europe",
    "Weather update for the weekend",
    "Local council approves new budget",
)


class StaticProvider:
    """Adapter that answers every query with the same six articles."""

    def __init__(self, titles: tuple[str, ...]) -> None:
        self._titles = titles
        self.queries: list[str] = []

    @property
    def name(self) -> str:
        return "langsearch"

    async def search(self, query: str, *, timeout: float) -> NormalizedResponse:
        self.queries.append(query)
        return NormalizedResponse(
            provider=self.name,
            query=query,
            shape=ResponseShape.WEB_PAGES,
            articles=tuple(
                CandidateArticle(title=t, snippet="", url=f"https://news.example.com/{i}")
                for i, t in enumerate(self._titles)
            ),
        )


class DownProvider:
    """Adapter that fails every request."""

    def __init__(self, name: str) -> None:
        self._name = name
        self.queries: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def search(self, query: str, *, timeout: float) -> NormalizedResponse:
        self.queries.append(query)
        raise ProviderError(self._name, "service unavailable", status_code=503)


def _real_pipeline(chain: FallbackChain, **kwargs: object) -> EvidencePipeline:
    return EvidencePipeline(
        HeuristicQueryGenerator(),
        MultiSourceOrchestrator(chain, delay_seconds=0),
        UrlDedupAggregator(),
        RelevanceRanker(),
        query_delay_seconds=0,
        **kwargs,  # type: ignore[arg-type]
    )


async def test_recall_claim_end_to_end(tmp_path: Path) -> None:
    provider = StaticProvider(RECALL_TITLES)
    run_logger = RunLogger(tmp_path)
    pipeline = _real_pipeline(FallbackChain(provider), run_logger=run_logger)

    results, usage = await pipeline.run(RECALL_CLAIM)

    assert provider.queries
    assert usage.search_requests > 0
    assert run_logger.last_log_path is not None
    data = json.loads(run_logger.last_log_path.read_text())
    aggregation = next(s for s in data["stages"] if s["stage"] == "aggregation")
    assert len(aggregation["output"]) == 6

    assert 0 < len(results) <= 10
    assert len({r.article.url for r in results}) == len(results) == 6
    titles = [r.article.title for r in results]
    assert titles.index(RECALL_TITLES[0]) < titles.index("Weather update for the weekend")
    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)


async def test_every_provider_failing_returns_degraded_article() -> None:
    primary = DownProvider("langsearch")
    secondary = DownProvider("tavily")
    cache = EvidenceCache(MemoryKeyValueStore())
    pipeline = _real_pipeline(FallbackChain(primary, secondary), cache=cache)

    results, _ = await pipeline.run(RECALL_CLAIM)

    assert primary.queries and secondary.queries
    assert len(results) == 1
    assert results[0].is_degraded
    assert results[0].score == 0
    assert cache.get(RECALL_CLAIM) is None


class ThreadRecordingStore(MemoryKeyValueStore):
    """In-memory store that notes which thread touched it."""

    def __init__(self) -> None:
        super().__init__()
        self.threads: set[int] = set()

    def get_item(self, key: str) -> str | None:
        self.threads.add(threading.get_ident())
        return super().get_item(key)

    def set_item(self, key: str, value: str) -> None:
        self.threads.add(threading.get_ident())
        super().set_item(key, value)


async def test_cache_io_runs_off_the_event_loop_thread(
    mock_generator: MagicMock, mock_orchestrator: MagicMock
) -> None:
    store = ThreadRecordingStore()
    pipeline = EvidencePipeline(
        mock_generator,
        mock_orchestrator,
        UrlDedupAggregator(),
        RelevanceRanker(),
        EvidenceCache(store),
        query_delay_seconds=0,
    )

    await pipeline.run(CLAIM)

    assert store.threads
    assert threading.get_ident() not in store.threads
