"""Factory functions to create components from configuration."""

import logging
from datetime import timedelta
from pathlib import Path

from verify_evidence.aggregator import UrlDedupAggregator
from verify_evidence.cache import EvidenceCache, JsonFileKeyValueStore, MemoryKeyValueStore
from verify_evidence.config.models import (
    CacheConfig,
    ClaudeExtractorConfig,
    ClaudeRerankerConfig,
    EvidenceConfig,
    FileCacheConfig,
    LangSearchProviderConfig,
    MemoryCacheConfig,
    OrchestratorConfig,
    ProviderConfig,
    QueryGeneratorConfig,
    RankerConfig,
    RelevanceRankerConfig,
    SearchConfig,
    TavilyProviderConfig,
)
from verify_evidence.errors import ConfigurationError
from verify_evidence.pipeline import EvidencePipeline
from verify_evidence.query import ClaudeKeywordExtractor, HeuristicQueryGenerator
from verify_evidence.ranker import ArticleRanker, ClaudeReranker, RelevanceRanker
from verify_evidence.run_logger import RunLogger
from verify_evidence.search import (
    FallbackChain,
    LangSearchProvider,
    MultiSourceOrchestrator,
    RetryPolicy,
    SearchProvider,
    TavilyProvider,
)

logger = logging.getLogger(__name__)


def create_provider(config: ProviderConfig) -> SearchProvider:
    """Create a search provider from config.

    Raises:
        ConfigurationError: If the provider's API key is missing.
    """
    if isinstance(config, LangSearchProviderConfig):
        return LangSearchProvider(
            endpoint=config.endpoint,
            count=config.count,
            freshness=config.freshness,
        )
    if isinstance(config, TavilyProviderConfig):
        return TavilyProvider(endpoint=config.endpoint, max_results=config.max_results)
    msg = f"Unknown provider config type: {type(config)}"
    raise ValueError(msg)


def _optional_provider(config: ProviderConfig | None) -> SearchProvider | None:
    if config is None:
        return None
    try:
        return create_provider(config)
    except ConfigurationError as e:
        logger.warning(f"Skipping {config.type} provider: {e}")
        return None


def create_fallback_chain(config: SearchConfig) -> FallbackChain:
    """Create the primary/secondary provider chain.

    Providers without credentials are skipped with a warning.
    """
    secondary_timeout = 10.0
    if isinstance(config.secondary, TavilyProviderConfig):
        secondary_timeout = config.secondary.timeout
    return FallbackChain(
        _optional_provider(config.primary),
        _optional_provider(config.secondary),
        retry_policy=RetryPolicy(
            max_attempts=config.retry.max_attempts,
            base_timeout=config.retry.base_timeout,
            timeout_step=config.retry.timeout_step,
        ),
        secondary_timeout=secondary_timeout,
    )


def create_orchestrator(
    config: OrchestratorConfig, chain: FallbackChain
) -> MultiSourceOrchestrator:
    """Create a multi-source orchestrator around *chain*."""
    return MultiSourceOrchestrator(
        chain,
        site_domains=tuple(config.site_domains),
        min_successes=config.min_successes,
        max_consecutive_failures=config.max_consecutive_failures,
        delay_seconds=config.delay_seconds,
    )


def create_extractor(config: ClaudeExtractorConfig | None) -> ClaudeKeywordExtractor | None:
    """Create the keyword extractor, or None when unconfigured or missing its key."""
    if config is None:
        return None
    try:
        return ClaudeKeywordExtractor(
            model=config.model,
            system_prompt=config.system_prompt,
            max_keywords=config.max_keywords,
        )
    except ConfigurationError as e:
        logger.warning(f"Skipping keyword extractor, using basic extraction: {e}")
        return None


def create_generator(config: QueryGeneratorConfig) -> HeuristicQueryGenerator:
    """Create the query generator from config."""
    return HeuristicQueryGenerator(
        create_extractor(config.extractor),
        max_queries=config.max_queries,
    )


def create_ranker(config: RankerConfig, *, top_k: int) -> ArticleRanker:
    """Create an article ranker from config.

    A Claude re-ranker without credentials degrades to relevance ranking.
    """
    if isinstance(config, RelevanceRankerConfig):
        return RelevanceRanker(top_k=top_k)
    if isinstance(config, ClaudeRerankerConfig):
        try:
            return ClaudeReranker(model=config.model, top_k=top_k)
        except ConfigurationError as e:
            logger.warning(f"Skipping Claude re-ranker, using relevance ranking: {e}")
            return RelevanceRanker(top_k=top_k)
    msg = f"Unknown ranker config type: {type(config)}"
    raise ValueError(msg)


def create_cache(config: CacheConfig | None) -> EvidenceCache | None:
    """Create the evidence cache, or None when caching is disabled."""
    if config is None:
        return None
    ttl = timedelta(hours=config.ttl_hours)
    if isinstance(config, MemoryCacheConfig):
        return EvidenceCache(MemoryKeyValueStore(), ttl=ttl)
    if isinstance(config, FileCacheConfig):
        return EvidenceCache(JsonFileKeyValueStore(config.path), ttl=ttl)
    msg = f"Unknown cache config type: {type(config)}"
    raise ValueError(msg)


def create_from_config(
    config: EvidenceConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[EvidencePipeline, RunLogger | None]:
    """Create a complete pipeline from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (pipeline, run_logger). run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    chain = create_fallback_chain(config.search)
    if not chain.providers:
        logger.warning("No search providers configured; results will be web search links")

    pipeline = EvidencePipeline(
        generator=create_generator(config.query_generator),
        orchestrator=create_orchestrator(config.orchestrator, chain),
        aggregator=UrlDedupAggregator(),
        ranker=create_ranker(config.ranker, top_k=config.pipeline.top_k),
        cache=create_cache(config.cache),
        max_queries=config.pipeline.max_queries,
        query_delay_seconds=config.pipeline.query_delay_seconds,
        top_k=config.pipeline.top_k,
        run_logger=run_logger,
    )
    return (pipeline, run_logger)
