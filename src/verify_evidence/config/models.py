"""Pydantic configuration models for evidence pipeline components."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from verify_evidence.search.langsearch import LANGSEARCH_API_URL
from verify_evidence.search.multi_source import DEFAULT_SITE_DOMAINS
from verify_evidence.search.tavily import TAVILY_API_URL

# ============================================================
# Search Provider Configs
# ============================================================


class LangSearchProviderConfig(BaseModel):
    """Configuration for LangSearchProvider."""

    type: Literal["langsearch"] = "langsearch"
    endpoint: str = LANGSEARCH_API_URL
    count: int = 10
    freshness: str = "noLimit"

    model_config = {"frozen": True}


class TavilyProviderConfig(BaseModel):
    """Configuration for TavilyProvider."""

    type: Literal["tavily"] = "tavily"
    endpoint: str = TAVILY_API_URL
    max_results: int = 5
    timeout: float = 10.0

    model_config = {"frozen": True}


ProviderConfig = Annotated[
    LangSearchProviderConfig | TavilyProviderConfig,
    Field(discriminator="type"),
]


class RetryConfig(BaseModel):
    """Attempt count and timeout schedule for the primary provider."""

    max_attempts: int = Field(default=3, ge=1)
    base_timeout: float = Field(default=5.0, gt=0)
    timeout_step: float = Field(default=2.0, ge=0)

    model_config = {"frozen": True}


class SearchConfig(BaseModel):
    """Primary and secondary providers for the fallback chain."""

    primary: ProviderConfig | None = Field(default_factory=LangSearchProviderConfig)
    secondary: ProviderConfig | None = Field(default_factory=TavilyProviderConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    model_config = {"frozen": True}


class OrchestratorConfig(BaseModel):
    """Configuration for MultiSourceOrchestrator."""

    site_domains: tuple[str, ...] = DEFAULT_SITE_DOMAINS
    min_successes: int = Field(default=2, ge=1)
    max_consecutive_failures: int = Field(default=3, ge=1)
    delay_seconds: float = Field(default=0.1, ge=0)

    model_config = {"frozen": True}


# ============================================================
# Query Generator Configs
# ============================================================


class ClaudeExtractorConfig(BaseModel):
    """Configuration for ClaudeKeywordExtractor."""

    type: Literal["claude"] = "claude"
    model: str = "claude-haiku-4-5-20251001"
    system_prompt: str | None = None
    max_keywords: int = 15

    model_config = {"frozen": True}


class QueryGeneratorConfig(BaseModel):
    """Configuration for HeuristicQueryGenerator."""

    max_queries: int = Field(default=25, ge=1, le=25)
    extractor: ClaudeExtractorConfig | None = None

    model_config = {"frozen": True}


# ============================================================
# Ranker Configs
# ============================================================


class RelevanceRankerConfig(BaseModel):
    """Deterministic relevance ranking."""

    type: Literal["relevance"] = "relevance"

    model_config = {"frozen": True}


class ClaudeRerankerConfig(BaseModel):
    """Claude re-ranking with relevance fallback."""

    type: Literal["claude"] = "claude"
    model: str = "claude-haiku-4-5-20251001"

    model_config = {"frozen": True}


RankerConfig = Annotated[
    RelevanceRankerConfig | ClaudeRerankerConfig,
    Field(discriminator="type"),
]


# ============================================================
# Cache Configs
# ============================================================


class MemoryCacheConfig(BaseModel):
    """In-process evidence cache."""

    type: Literal["memory"] = "memory"
    ttl_hours: float = Field(default=24.0, gt=0)

    model_config = {"frozen": True}


class FileCacheConfig(BaseModel):
    """Evidence cache persisted to a JSON file."""

    type: Literal["file"] = "file"
    path: str = ".cache/evidence_cache.json"
    ttl_hours: float = Field(default=24.0, gt=0)

    model_config = {"frozen": True}


CacheConfig = Annotated[
    MemoryCacheConfig | FileCacheConfig,
    Field(discriminator="type"),
]


# ============================================================
# Pipeline Config
# ============================================================


class PipelineConfig(BaseModel):
    """Configuration for EvidencePipeline."""

    max_queries: int = Field(default=3, ge=1)
    query_delay_seconds: float = Field(default=0.2, ge=0)
    top_k: int = Field(default=10, ge=1)

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for intermediate pipeline logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class EvidenceConfig(BaseModel):
    """Root configuration for the evidence pipeline."""

    search: SearchConfig = Field(default_factory=SearchConfig)
    orchestrator: OrchestratorConfig = Field(default_factory=OrchestratorConfig)
    query_generator: QueryGeneratorConfig = Field(default_factory=QueryGeneratorConfig)
    ranker: RankerConfig = Field(default_factory=RelevanceRankerConfig)
    cache: CacheConfig | None = Field(default_factory=MemoryCacheConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
