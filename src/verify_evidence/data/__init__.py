"""Data models for the evidence pipeline."""

from verify_evidence.data.models import (
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

__all__ = [
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
]
