"""Heuristic query generator with optional LLM keyword extraction."""

import logging

from verify_evidence.data import Claim, SearchQuery, Usage
from verify_evidence.query.base import KeywordExtractor
from verify_evidence.query.keywords import clean_query, extract_basic_keywords, keyword_query

logger = logging.getLogger(__name__)

MAX_QUERIES = 25
EXACT_PHRASE_MAX_LENGTH = 60
# Pairwise keyword combinations use keywords[i] for i < 5 and keywords[j] for j < 6.
PAIR_FIRST_LIMIT = 5
PAIR_SECOND_LIMIT = 6

NEWS_SUFFIXES = ("news", "breaking news", "latest")
KEYWORD_SUFFIXES = ("news", "latest")
VERIFICATION_SUFFIXES = ("confirmed", "verified", "reports")


class HeuristicQueryGenerator:
    """Turn a claim into a bounded, ordered set of diversified search queries.

    Combines deterministic variations of the claim text (normalized,
    keyword-only, exact phrase, news suffixes) with keyword-driven queries.
    Keywords come from the claim itself when pre-extracted, otherwise from
    the optional *extractor*; when the extractor is missing or fails, basic
    regex extraction is used so generation never fails outright.

    Args:
        extractor: Optional LLM keyword extractor.
        max_queries: Upper bound on the number of queries returned.
    """

    def __init__(
        self,
        extractor: KeywordExtractor | None = None,
        *,
        max_queries: int = MAX_QUERIES,
    ) -> None:
        self._extractor = extractor
        self._max_queries = max_queries

    async def generate(
        self, claim: Claim, *, max_queries: int | None = None
    ) -> tuple[list[SearchQuery], Usage]:
        """Generate unique, non-empty queries in first-seen order.

        Args:
            claim: The claim to search evidence for.
            max_queries: Override for the configured upper bound.

        Returns:
            Tuple of (queries, usage).
        """
        limit = min(max_queries or self._max_queries, MAX_QUERIES)
        text = claim.text.strip()
        if not text:
            return ([], Usage())

        candidates = _claim_variations(text)
        keywords, usage = await self._keywords(claim)
        candidates.extend(_keyword_queries(keywords))

        seen: set[str] = set()
        queries: list[SearchQuery] = []
        for query in candidates:
            if not query.text or query.text in seen:
                continue
            seen.add(query.text)
            queries.append(query)
            if len(queries) >= limit:
                break

        logger.info(f"Generated {len(queries)} queries from {len(keywords)} keywords")
        return (queries, usage)

    async def _keywords(self, claim: Claim) -> tuple[list[str], Usage]:
        """Resolve keywords: pre-extracted, then extractor, then basic regex."""
        if claim.keywords:
            return ([k.strip() for k in claim.keywords if k.strip()], Usage())

        if self._extractor is not None:
            try:
                keywords, usage = await self._extractor.extract(claim.text)
            except Exception as e:
                logger.warning(f"Keyword extraction failed, using basic extraction: {e}")
            else:
                if keywords:
                    return (keywords, usage)
                logger.info("Keyword extractor returned nothing, using basic extraction")
                return (extract_basic_keywords(claim.text), usage)

        return (extract_basic_keywords(claim.text), Usage())


def _claim_variations(text: str) -> list[SearchQuery]:
    """Deterministic variations of the claim text itself."""
    normalized = clean_query(text)
    variations = [
        SearchQuery(text=normalized, intent="normalized claim"),
        SearchQuery(text=keyword_query(text), intent="keywords"),
        SearchQuery(text=text, intent="original claim"),
    ]
    if len(text) < EXACT_PHRASE_MAX_LENGTH and normalized:
        variations.append(SearchQuery(text=f'"{normalized}"', intent="exact phrase"))
    if normalized:
        for suffix in NEWS_SUFFIXES:
            variations.append(SearchQuery(text=f"{normalized} {suffix}", intent=suffix))
    return variations


def _keyword_queries(keywords: list[str]) -> list[SearchQuery]:
    """Queries built from extracted keyword phrases."""
    queries: list[SearchQuery] = []
    for keyword in keywords:
        queries.append(SearchQuery(text=f'"{keyword}"', intent="keyword"))
        for suffix in KEYWORD_SUFFIXES:
            queries.append(SearchQuery(text=f"{keyword} {suffix}", intent=f"keyword {suffix}"))

    for i in range(min(len(keywords) - 1, PAIR_FIRST_LIMIT)):
        for j in range(i + 1, min(len(keywords), PAIR_SECOND_LIMIT)):
            first, second = keywords[i], keywords[j]
            queries.append(SearchQuery(text=f'"{first}" "{second}"', intent="keyword pair"))
            queries.append(SearchQuery(text=f"{first} {second}", intent="keyword pair"))

    for keyword in keywords:
        for suffix in VERIFICATION_SUFFIXES:
            queries.append(SearchQuery(text=f"{keyword} {suffix}", intent="verification"))
    return queries
