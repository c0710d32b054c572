"""Claude-based re-ranker with deterministic fallback."""

import json
import logging
import os

import anthropic

from verify_evidence.data import APICallUsage, CandidateArticle, ScoredArticle, Usage
from verify_evidence.errors import ConfigurationError
from verify_evidence.ranker.relevance import DEFAULT_TOP_K, RelevanceRanker, score_article

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You rank web search results by how useful they are for fact-checking a piece \
of news content. Prefer results that directly report on the same event, come \
from primary or reputable sources, and contain concrete details.

Respond ONLY with a JSON object of the form {"rankedIds": [number, ...]} listing \
result ids from most to least relevant. No markdown fences, no commentary.\
"""

# With this few candidates the ordering is not worth an API call.
MIN_CANDIDATES = 4


def _build_prompt(claim: str, articles: list[CandidateArticle]) -> str:
    simplified = [
        {"id": i, "title": article.title, "snippet": article.snippet}
        for i, article in enumerate(articles)
    ]
    return f'Original content: "{claim}"\n\nSearch results:\n{json.dumps(simplified, indent=2)}'


def parse_ranked_ids(text: str, candidate_count: int) -> list[int]:
    """Parse ``{"rankedIds": [...]}``, keeping valid, unique ids in order.

    Raises:
        ValueError: If the text is not the expected JSON object.
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = [line for line in cleaned.split("\n") if not line.strip().startswith("```")]
        cleaned = "\n".join(lines)

    data = json.loads(cleaned)
    if not isinstance(data, dict) or not isinstance(data.get("rankedIds"), list):
        raise ValueError("Ranking response has no rankedIds list")

    ids: list[int] = []
    for raw_id in data["rankedIds"]:
        if isinstance(raw_id, bool) or not isinstance(raw_id, int):
            continue
        if 0 <= raw_id < candidate_count and raw_id not in ids:
            ids.append(raw_id)
    return ids


class ClaudeReranker:
    """Order candidates with Claude, keeping deterministic scores attached.

    The model decides the order; each returned article still carries its
    :func:`score_article` score. Small candidate sets, API errors and
    unusable answers all fall back to *fallback*.

    Args:
        model: Anthropic model to use.
        api_key: API key (defaults to CLAUDE_API_KEY env var).
        fallback: Deterministic ranker used when re-ranking is skipped or fails.
        top_k: Default number of articles to keep.

    Raises:
        ConfigurationError: If no API key is available.
    """

    def __init__(
        self,
        *,
        model: str = "claude-haiku-4-5-20251001",
        api_key: str | None = None,
        fallback: RelevanceRanker | None = None,
        top_k: int = DEFAULT_TOP_K,
    ) -> None:
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        if not resolved_key:
            raise ConfigurationError(
                "Claude API key required. Pass api_key or set CLAUDE_API_KEY env var."
            )
        self._client = anthropic.AsyncAnthropic(api_key=resolved_key)
        self._model = model
        self._top_k = top_k
        self._fallback = fallback or RelevanceRanker(top_k=top_k)

    async def rank(
        self,
        articles: list[CandidateArticle],
        claim: str,
        *,
        top_k: int | None = None,
    ) -> tuple[list[ScoredArticle], Usage]:
        limit = top_k or self._top_k
        if len(articles) < MIN_CANDIDATES:
            return await self._fallback.rank(articles, claim, top_k=limit)

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=1024,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": _build_prompt(claim, articles)}],
            )
        except Exception as e:
            logger.warning(f"Claude ranking failed, using relevance scores: {e}")
            return await self._fallback.rank(articles, claim, top_k=limit)

        usage = Usage(
            api_calls=[
                APICallUsage(
                    model=self._model,
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                ),
            ],
        )

        response_text = ""
        for block in response.content:
            if hasattr(block, "text"):
                response_text += block.text

        try:
            ranked_ids = parse_ranked_ids(response_text, len(articles))
        except ValueError:
            logger.warning("Failed to parse ranking response, using relevance scores")
            ranked_ids = []

        if not ranked_ids:
            ranked, fallback_usage = await self._fallback.rank(articles, claim, top_k=limit)
            return (ranked, usage + fallback_usage)

        ranked = [
            ScoredArticle(article=articles[i], score=score_article(articles[i], claim))
            for i in ranked_ids[:limit]
        ]
        return (ranked, usage)
