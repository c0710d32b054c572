"""Core data models for the evidence pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class EvidenceKind(StrEnum):
    """Whether an article is real evidence or a stand-in for missing evidence."""

    SOURCE = "source"
    DEGRADED = "degraded"


class ResponseShape(StrEnum):
    """Known layouts of a search provider's JSON payload, in detection order."""

    WEB_PAGES = "webPages.value"
    NESTED_WEB_PAGES = "data.webPages.value"
    RESULTS = "results"
    VALUE = "value"


class PipelineStatus(StrEnum):
    """Progress notifications emitted to the caller's status callback."""

    SEARCHING = "searching"
    RANKING = "ranking"


@dataclass(frozen=True)
class Claim:
    """A user-submitted claim to gather evidence for.

    ``keywords`` may carry keyword phrases extracted upstream; when present
    the query generator uses them instead of calling an extractor.
    """

    text: str
    keywords: tuple[str, ...] | None = None


@dataclass(frozen=True)
class SearchQuery:
    """A search string derived from a claim."""

    text: str
    intent: str


@dataclass(frozen=True)
class CandidateArticle:
    """A provider-independent evidence record."""

    title: str
    snippet: str
    url: str = ""
    summary: str | None = None
    published_at: datetime | None = None
    crawled_at: datetime | None = None
    kind: EvidenceKind = EvidenceKind.SOURCE


@dataclass(frozen=True)
class ScoredArticle:
    """A candidate article paired with its relevance score."""

    article: CandidateArticle
    score: int = 0

    @property
    def is_degraded(self) -> bool:
        return self.article.kind == EvidenceKind.DEGRADED


@dataclass(frozen=True)
class NormalizedResponse:
    """One provider response, normalized into candidate articles."""

    provider: str
    query: str
    shape: ResponseShape
    articles: tuple[CandidateArticle, ...] = ()


@dataclass(frozen=True)
class APICallUsage:
    """Token usage from a single LLM API call."""

    model: str
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class Usage:
    """Accumulated usage across pipeline components."""

    api_calls: list[APICallUsage] = field(default_factory=list)
    search_requests: int = 0
    cache_hits: int = 0

    @property
    def input_tokens(self) -> int:
        return sum(c.input_tokens for c in self.api_calls)

    @property
    def output_tokens(self) -> int:
        return sum(c.output_tokens for c in self.api_calls)

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            api_calls=self.api_calls + other.api_calls,
            search_requests=self.search_requests + other.search_requests,
            cache_hits=self.cache_hits + other.cache_hits,
        )

    def __iadd__(self, other: "Usage") -> "Usage":
        self.api_calls.extend(other.api_calls)
        self.search_requests += other.search_requests
        self.cache_hits += other.cache_hits
        return self
