import os

import anthropic
from anthropic.types import TextBlock

from verify_evidence.data import APICallUsage, Usage
from verify_evidence.errors import ConfigurationError

DEFAULT_KEYWORD_PROMPT = """\
Extract the most important keywords and phrases from this news content that \
would be useful for fact-checking and verification searches. Focus on:
- Names of people, organizations, companies
- Specific locations, places, airports
- Technical terms, model numbers, specifications
- Event types and actions
- Numbers, quantities, dates
- Any unique identifiers or specific details

Return only a comma-separated list of keywords/phrases, no explanations.\
"""

MAX_KEYWORDS = 15
MIN_KEYWORD_LENGTH = 3
MAX_KEYWORD_LENGTH = 49


class ClaudeKeywordExtractor:
    """Extract verification keywords using Anthropic's Claude API.

    Args:
        model: Anthropic model ID to use.
        api_key: API key (defaults to CLAUDE_API_KEY env var).
        system_prompt: Custom instructions. The model must answer with a
            comma-separated keyword list.
        max_keywords: Maximum keyword phrases to return.

    Raises:
        ConfigurationError: If no API key is available.
    """

    def __init__(
        self,
        *,
        model: str = "claude-haiku-4-5-20251001",
        api_key: str | None = None,
        system_prompt: str | None = None,
        max_keywords: int = MAX_KEYWORDS,
    ) -> None:
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        if not resolved_key:
            raise ConfigurationError(
                "Claude API key required. Pass api_key or set CLAUDE_API_KEY env var."
            )
        self._model = model
        self._client = anthropic.AsyncAnthropic(api_key=resolved_key)
        self._system_prompt = system_prompt or DEFAULT_KEYWORD_PROMPT
        self._max_keywords = max_keywords

    async def extract(self, content: str) -> tuple[list[str], Usage]:
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=512,
            system=self._system_prompt,
            messages=[{"role": "user", "content": f'News content: "{content}"\n\nKeywords:'}],
        )

        usage = Usage(
            api_calls=[
                APICallUsage(
                    model=self._model,
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                ),
            ],
        )

        content_block = response.content[0]
        if not isinstance(content_block, TextBlock):
            raise ValueError(f"Expected TextBlock, got {type(content_block).__name__}")
        return (parse_keyword_list(content_block.text, limit=self._max_keywords), usage)


def parse_keyword_list(raw: str, *, limit: int = MAX_KEYWORDS) -> list[str]:
    """Parse a comma-separated keyword answer, dropping too short or too long phrases."""
    raw = raw.strip()
    # Strip markdown code fences if present
    if raw.startswith("```"):
        raw = raw.split("\n", 1)[-1].rsplit("```", 1)[0]

    keywords: list[str] = []
    for part in raw.split(","):
        keyword = part.strip()
        if MIN_KEYWORD_LENGTH <= len(keyword) <= MAX_KEYWORD_LENGTH:
            keywords.append(keyword)
    return keywords[:limit]
