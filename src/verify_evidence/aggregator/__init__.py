from verify_evidence.aggregator.base import ResultAggregator
from verify_evidence.aggregator.url_dedup import UrlDedupAggregator

__all__ = [
    "ResultAggregator",
    "UrlDedupAggregator",
]
