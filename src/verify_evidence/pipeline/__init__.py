"""Pipeline module for claim evidence gathering."""

from verify_evidence.pipeline.base import Pipeline, StatusCallback
from verify_evidence.pipeline.evidence import EvidencePipeline, degraded_evidence

__all__ = [
    "EvidencePipeline",
    "Pipeline",
    "StatusCallback",
    "degraded_evidence",
]
