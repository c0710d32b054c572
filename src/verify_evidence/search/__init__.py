from verify_evidence.search.base import SearchProvider, normalize_http_response
from verify_evidence.search.fallback import FallbackChain, attempt_search
from verify_evidence.search.langsearch import LangSearchProvider
from verify_evidence.search.multi_source import (
    DEFAULT_SITE_DOMAINS,
    CircuitBreaker,
    MultiSourceOrchestrator,
    site_scoped_queries,
)
from verify_evidence.search.retry import AttemptPhase, RetryMachine, RetryPolicy, attempt_phrasings
from verify_evidence.search.shapes import ProviderPayload, detect_shape
from verify_evidence.search.tavily import TavilyProvider

__all__ = [
    "AttemptPhase",
    "CircuitBreaker",
    "DEFAULT_SITE_DOMAINS",
    "FallbackChain",
    "LangSearchProvider",
    "MultiSourceOrchestrator",
    "ProviderPayload",
    "RetryMachine",
    "RetryPolicy",
    "SearchProvider",
    "TavilyProvider",
    "attempt_phrasings",
    "attempt_search",
    "detect_shape",
    "normalize_http_response",
    "site_scoped_queries",
]
