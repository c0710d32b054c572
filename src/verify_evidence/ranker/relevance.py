"""Deterministic relevance scoring for candidate articles.

Each article earns additive points for topical match, freshness, source
credibility and content richness, and loses points for known unreliable
sources and clickbait markers:

    ====================================  =======
    Factor                                Points
    ====================================  =======
    distinct claim term in title          +10 each
    distinct claim term in snippet        +5 each
    exact claim phrase in title           +25
    exact claim phrase in snippet         +15
    published < 7 / 30 / 90 / 365 days   +15 / +10 / +5 / +2
    reliable news host                    +25
    fact-checking host                    +30
    ``.gov`` / ``.edu`` host              +20
    unreliable host                       -50
    suspicious pattern in title/snippet   -15
    snippet > 200 / > 100 characters      +8 / +4
    non-empty summary                     +3
    https URL                             +2
    ====================================  =======

Only the best freshness tier applies and the total is floored at zero.
Suspicious patterns that occur in the claim's own terms are not penalized.
"""

import logging
import string
from datetime import UTC, datetime

from verify_evidence.data import CandidateArticle, ScoredArticle, Usage
from verify_evidence.ranker.domains import (
    FACT_CHECK_DOMAINS,
    OFFICIAL_SUFFIXES,
    RELIABLE_DOMAINS,
    SUSPICIOUS_PATTERNS,
    UNRELIABLE_DOMAINS,
)
from verify_evidence.url import extract_domain, host_matches

logger = logging.getLogger(__name__)

TITLE_TERM_POINTS = 10
SNIPPET_TERM_POINTS = 5
TITLE_PHRASE_POINTS = 25
SNIPPET_PHRASE_POINTS = 15
# (max age in days, points), best tier first
FRESHNESS_TIERS: tuple[tuple[int, int], ...] = ((7, 15), (30, 10), (90, 5), (365, 2))
RELIABLE_POINTS = 25
FACT_CHECK_POINTS = 30
OFFICIAL_POINTS = 20
UNRELIABLE_PENALTY = 50
SUSPICIOUS_PENALTY = 15
LONG_SNIPPET = (200, 8)
MEDIUM_SNIPPET = (100, 4)
SUMMARY_POINTS = 3
HTTPS_POINTS = 2

MIN_TERM_LENGTH = 3
DEFAULT_TOP_K = 10


def query_terms(claim: str) -> list[str]:
    """Distinct lower-case claim terms longer than two characters, in order."""
    terms: list[str] = []
    for token in claim.lower().split():
        term = token.strip(string.punctuation)
        if len(term) >= MIN_TERM_LENGTH and term not in terms:
            terms.append(term)
    return terms


def _freshness_points(published_at: datetime | None, now: datetime) -> int:
    if published_at is None:
        return 0
    days_old = (now - published_at).total_seconds() / 86400
    for max_days, points in FRESHNESS_TIERS:
        if days_old < max_days:
            return points
    return 0


def _source_points(url: str) -> int:
    host = extract_domain(url)
    if not host:
        return 0
    points = 0
    if any(host_matches(host, domain) for domain in RELIABLE_DOMAINS):
        points += RELIABLE_POINTS
    if any(host_matches(host, domain) for domain in FACT_CHECK_DOMAINS):
        points += FACT_CHECK_POINTS
    if host.endswith(OFFICIAL_SUFFIXES):
        points += OFFICIAL_POINTS
    if any(host_matches(host, domain) for domain in UNRELIABLE_DOMAINS):
        points -= UNRELIABLE_PENALTY
    return points


def score_article(article: CandidateArticle, claim: str, *, now: datetime | None = None) -> int:
    """Score *article* against *claim*; higher is more relevant, never below zero.

    Args:
        article: The candidate to score.
        claim: The original claim text.
        now: Reference time for freshness (defaults to the current UTC time).
    """
    now = now or datetime.now(tz=UTC)
    title = article.title.lower()
    snippet = article.snippet.lower()
    terms = query_terms(claim)

    score = 0
    score += TITLE_TERM_POINTS * sum(1 for term in terms if term in title)
    score += SNIPPET_TERM_POINTS * sum(1 for term in terms if term in snippet)

    phrase = claim.strip().lower()
    if phrase and phrase in title:
        score += TITLE_PHRASE_POINTS
    if phrase and phrase in snippet:
        score += SNIPPET_PHRASE_POINTS

    score += _freshness_points(article.published_at, now)
    score += _source_points(article.url)

    # patterns the claim itself uses are topical, not clickbait
    patterns = [p for p in SUSPICIOUS_PATTERNS if not any(p in term for term in terms)]
    if any(pattern in title or pattern in snippet for pattern in patterns):
        score -= SUSPICIOUS_PENALTY

    snippet_length = len(article.snippet)
    if snippet_length > LONG_SNIPPET[0]:
        score += LONG_SNIPPET[1]
    elif snippet_length > MEDIUM_SNIPPET[0]:
        score += MEDIUM_SNIPPET[1]

    if article.summary:
        score += SUMMARY_POINTS
    if article.url.lower().startswith("https://"):
        score += HTTPS_POINTS

    return max(0, score)


def rank_articles(
    articles: list[CandidateArticle],
    claim: str,
    *,
    top_k: int = DEFAULT_TOP_K,
    now: datetime | None = None,
) -> list[ScoredArticle]:
    """Score every article, sort descending (ties keep encounter order), keep *top_k*."""
    now = now or datetime.now(tz=UTC)
    scored = [ScoredArticle(article=a, score=score_article(a, claim, now=now)) for a in articles]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:top_k]


class RelevanceRanker:
    """Rank articles with the deterministic relevance score.

    Args:
        top_k: Default number of articles to keep.
    """

    def __init__(self, top_k: int = DEFAULT_TOP_K) -> None:
        self._top_k = top_k

    async def rank(
        self,
        articles: list[CandidateArticle],
        claim: str,
        *,
        top_k: int | None = None,
    ) -> tuple[list[ScoredArticle], Usage]:
        ranked = rank_articles(articles, claim, top_k=top_k or self._top_k)
        logger.debug(f"Ranked {len(articles)} articles, kept {len(ranked)}")
        return (ranked, Usage())
