from verify_evidence.ranker.base import ArticleRanker
from verify_evidence.ranker.claude import ClaudeReranker
from verify_evidence.ranker.relevance import (
    RelevanceRanker,
    query_terms,
    rank_articles,
    score_article,
)

__all__ = [
    "ArticleRanker",
    "ClaudeReranker",
    "RelevanceRanker",
    "query_terms",
    "rank_articles",
    "score_article",
]
