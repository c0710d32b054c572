"""Verify Evidence: gather ranked source articles for fact-checking news claims."""

from verify_evidence.aggregator.base import ResultAggregator
from verify_evidence.aggregator.url_dedup import UrlDedupAggregator
from verify_evidence.cache import (
    CacheEntry,
    EvidenceCache,
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
)
from verify_evidence.config import EvidenceConfig, create_from_config, load_config
from verify_evidence.data import (
    APICallUsage,
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
from verify_evidence.errors import (
    ConfigurationError,
    EvidenceError,
    PipelineError,
    ProviderError,
    ProviderTimeoutError,
)
from verify_evidence.pipeline import EvidencePipeline, Pipeline, degraded_evidence
from verify_evidence.query import (
    ClaudeKeywordExtractor,
    HeuristicQueryGenerator,
    KeywordExtractor,
    QueryGenerator,
)
from verify_evidence.ranker import (
    ArticleRanker,
    ClaudeReranker,
    RelevanceRanker,
    rank_articles,
    score_article,
)
from verify_evidence.run_logger import RunLogger
from verify_evidence.search import (
    FallbackChain,
    LangSearchProvider,
    MultiSourceOrchestrator,
    RetryPolicy,
    SearchProvider,
    TavilyProvider,
)
from verify_evidence.url import extract_domain

__all__ = [
    # Models
    "APICallUsage",
    "CandidateArticle",
    "Claim",
    "EvidenceKind",
    "NormalizedResponse",
    "PipelineStatus",
    "ResponseShape",
    "ScoredArticle",
    "SearchQuery",
    "Usage",
    # Errors
    "ConfigurationError",
    "EvidenceError",
    "PipelineError",
    "ProviderError",
    "ProviderTimeoutError",
    # Functions
    "degraded_evidence",
    "extract_domain",
    "rank_articles",
    "score_article",
    # Protocols
    "ArticleRanker",
    "KeyValueStore",
    "KeywordExtractor",
    "Pipeline",
    "QueryGenerator",
    "ResultAggregator",
    "SearchProvider",
    # Query Generation
    "ClaudeKeywordExtractor",
    "HeuristicQueryGenerator",
    # Search
    "FallbackChain",
    "LangSearchProvider",
    "MultiSourceOrchestrator",
    "RetryPolicy",
    "TavilyProvider",
    # Aggregators
    "UrlDedupAggregator",
    # Rankers
    "ClaudeReranker",
    "RelevanceRanker",
    # Cache
    "CacheEntry",
    "EvidenceCache",
    "JsonFileKeyValueStore",
    "MemoryKeyValueStore",
    # Pipelines
    "EvidencePipeline",
    # Logging
    "RunLogger",
    # Config
    "EvidenceConfig",
    "create_from_config",
    "load_config",
]
