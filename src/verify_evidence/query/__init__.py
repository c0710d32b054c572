from verify_evidence.query.base import KeywordExtractor, QueryGenerator
from verify_evidence.query.claude import DEFAULT_KEYWORD_PROMPT, ClaudeKeywordExtractor
from verify_evidence.query.heuristic import HeuristicQueryGenerator
from verify_evidence.query.keywords import clean_query, extract_basic_keywords, keyword_query

__all__ = [
    "ClaudeKeywordExtractor",
    "DEFAULT_KEYWORD_PROMPT",
    "HeuristicQueryGenerator",
    "KeywordExtractor",
    "QueryGenerator",
    "clean_query",
    "extract_basic_keywords",
    "keyword_query",
]
