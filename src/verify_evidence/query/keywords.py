"""Deterministic text normalization and keyword extraction.

These helpers never touch the network. They back both the heuristic query
variations and the provider retry phrasings, and they are the fallback when
no LLM keyword extractor is available.
"""

import re

# Stop words dropped when building a keyword-only query.
STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "the", "is", "are", "was", "were", "will", "be", "to",
        "of", "in", "that", "this", "it", "for", "with", "on", "at", "by",
    }
)

# Common words dropped by basic keyword extraction.
COMMON_WORDS: frozenset[str] = frozenset(
    {
        "the", "and", "for", "are", "but", "not", "you", "all", "can", "had",
        "her", "was", "one", "our", "out", "day", "get", "has", "him", "his",
        "how", "its", "may", "new", "now", "old", "see", "two", "who", "boy",
        "did", "man", "end", "few", "got", "let", "put", "say", "she", "too",
        "use",
    }
)

KEYWORD_QUERY_TERMS = 6
BASIC_KEYWORD_LIMIT = 10

_QUOTES_RE = re.compile(r"[\"']")
# ":" and "." survive so that operators like site:reuters.com keep working.
_PUNCTUATION_RE = re.compile(r"[^\w\s:.]")
_WHITESPACE_RE = re.compile(r"\s+")
_BASIC_WORD_RE = re.compile(r"\b[a-z]{3,}\b")


def clean_query(text: str) -> str:
    """Strip quotes and punctuation (except ``:`` and ``.``) and collapse whitespace."""
    text = _QUOTES_RE.sub("", text)
    text = _PUNCTUATION_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def keyword_query(text: str, *, max_terms: int = KEYWORD_QUERY_TERMS) -> str:
    """Build a keyword-only query from the first meaningful tokens of *text*.

    Tokens of two characters or fewer and stop words are skipped.
    """
    tokens = [
        token
        for token in clean_query(text).split(" ")
        if len(token) > 2 and token.lower() not in STOP_WORDS
    ]
    return " ".join(tokens[:max_terms])


def extract_basic_keywords(content: str, *, limit: int = BASIC_KEYWORD_LIMIT) -> list[str]:
    """Extract unique lower-case words of three or more letters, minus common words."""
    keywords: list[str] = []
    for word in _BASIC_WORD_RE.findall(content.lower()):
        if word in COMMON_WORDS or word in keywords:
            continue
        keywords.append(word)
        if len(keywords) >= limit:
            break
    return keywords


def normalize_claim_key(text: str) -> str:
    """Key used to identify identical claims: trimmed and lower-cased."""
    return text.strip().lower()
