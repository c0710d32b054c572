"""Configuration module for the evidence pipeline."""

from verify_evidence.config.factory import (
    create_cache,
    create_fallback_chain,
    create_from_config,
    create_generator,
    create_orchestrator,
    create_provider,
    create_ranker,
)
from verify_evidence.config.loader import get_default_config_path, load_config
from verify_evidence.config.models import (
    CacheConfig,
    ClaudeExtractorConfig,
    ClaudeRerankerConfig,
    EvidenceConfig,
    FileCacheConfig,
    LangSearchProviderConfig,
    LoggingConfig,
    MemoryCacheConfig,
    OrchestratorConfig,
    PipelineConfig,
    ProviderConfig,
    QueryGeneratorConfig,
    RankerConfig,
    RelevanceRankerConfig,
    RetryConfig,
    SearchConfig,
    TavilyProviderConfig,
)

__all__ = [
    "CacheConfig",
    "ClaudeExtractorConfig",
    "ClaudeRerankerConfig",
    "EvidenceConfig",
    "FileCacheConfig",
    "LangSearchProviderConfig",
    "LoggingConfig",
    "MemoryCacheConfig",
    "OrchestratorConfig",
    "PipelineConfig",
    "ProviderConfig",
    "QueryGeneratorConfig",
    "RankerConfig",
    "RelevanceRankerConfig",
    "RetryConfig",
    "SearchConfig",
    "TavilyProviderConfig",
    "create_cache",
    "create_fallback_chain",
    "create_from_config",
    "create_generator",
    "create_orchestrator",
    "create_provider",
    "create_ranker",
    "get_default_config_path",
    "load_config",
]
