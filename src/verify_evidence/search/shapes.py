"""Known search-provider payload shapes and their normalization.

Providers do not agree on where the article list lives, and a single provider
has been seen to answer with more than one layout. Each known layout is a
variant of a small tagged union; :func:`detect_shape` picks the first variant
that yields usable articles, in this priority order:

1. ``webPages.value`` (top level)
2. ``data.webPages.value`` (nested under ``data``)
3. ``results`` (flat list)
4. ``value`` (flat list)

Each variant normalizes its raw records into :class:`CandidateArticle`
objects. Records whose URL is not a valid absolute URL, or that have neither
title nor snippet, are dropped here so that nothing downstream has to
re-check them.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, ClassVar

from dateutil import parser as dateparser

from verify_evidence.data import CandidateArticle, ResponseShape
from verify_evidence.url import is_valid_url

logger = logging.getLogger(__name__)

RawArticle = dict[str, Any]


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 or RFC 2822 timestamp; naive values are taken as UTC."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = dateparser.parse(value.strip())
    except (ValueError, OverflowError):
        logger.debug(f"Ignoring unparsable timestamp {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _first_text(raw: RawArticle, *keys: str) -> str:
    """Return the first non-empty string value among *keys*."""
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _build_article(
    *,
    title: str,
    snippet: str,
    url: str,
    summary: str,
    published: object,
    crawled: object,
) -> CandidateArticle | None:
    if not title and not snippet:
        return None
    if url and not is_valid_url(url):
        logger.debug(f"Dropping record with invalid url {url!r}")
        return None
    return CandidateArticle(
        title=title,
        snippet=snippet,
        url=url,
        summary=summary or None,
        published_at=parse_timestamp(published),
        crawled_at=parse_timestamp(crawled),
    )


def normalize_web_page(raw: RawArticle) -> CandidateArticle | None:
    """Normalize a Bing-style web page record (``name``, ``snippet``, ``datePublished``)."""
    return _build_article(
        title=_first_text(raw, "name", "title"),
        snippet=_first_text(raw, "snippet", "description"),
        url=_first_text(raw, "url", "displayUrl"),
        summary=_first_text(raw, "summary"),
        published=raw.get("datePublished"),
        crawled=raw.get("dateLastCrawled"),
    )


def normalize_result(raw: RawArticle) -> CandidateArticle | None:
    """Normalize a flat result record (``title``, ``content``, ``published_date``)."""
    return _build_article(
        title=_first_text(raw, "title", "name"),
        snippet=_first_text(raw, "content", "snippet", "description"),
        url=_first_text(raw, "url"),
        summary=_first_text(raw, "summary"),
        published=raw.get("published_date") or raw.get("publishedAt") or raw.get("datePublished"),
        crawled=raw.get("dateLastCrawled"),
    )


@dataclass(frozen=True)
class _PayloadShape:
    items: tuple[RawArticle, ...]

    kind: ClassVar[ResponseShape]
    normalize_item: ClassVar[Callable[[RawArticle], CandidateArticle | None]]

    def articles(self) -> tuple[CandidateArticle, ...]:
        """Normalize every raw record, dropping the ones that fail validation."""
        normalized = (type(self).normalize_item(item) for item in self.items)
        return tuple(article for article in normalized if article is not None)


@dataclass(frozen=True)
class WebPagesShape(_PayloadShape):
    kind = ResponseShape.WEB_PAGES
    normalize_item = staticmethod(normalize_web_page)


@dataclass(frozen=True)
class NestedWebPagesShape(_PayloadShape):
    kind = ResponseShape.NESTED_WEB_PAGES
    normalize_item = staticmethod(normalize_web_page)


@dataclass(frozen=True)
class ResultsShape(_PayloadShape):
    kind = ResponseShape.RESULTS
    normalize_item = staticmethod(normalize_result)


@dataclass(frozen=True)
class ValueShape(_PayloadShape):
    kind = ResponseShape.VALUE
    normalize_item = staticmethod(normalize_web_page)


ProviderPayload = WebPagesShape | NestedWebPagesShape | ResultsShape | ValueShape


def _records(container: object, *path: str) -> tuple[RawArticle, ...]:
    """Follow *path* through nested dicts and return the dict records found there."""
    node = container
    for key in path:
        if not isinstance(node, dict):
            return ()
        node = node.get(key)
    if not isinstance(node, list):
        return ()
    return tuple(item for item in node if isinstance(item, dict))


def detect_shape(payload: object) -> ProviderPayload | None:
    """Return the first known shape of *payload* with usable articles.

    When no shape yields a usable article, the first shape that carries raw
    records is returned so the caller can report it; None means no known
    shape carries records at all.
    """
    if not isinstance(payload, dict):
        return None

    candidates: list[ProviderPayload] = [
        WebPagesShape(_records(payload, "webPages", "value")),
        NestedWebPagesShape(_records(payload, "data", "webPages", "value")),
        ResultsShape(_records(payload, "results")),
        ValueShape(_records(payload, "value")),
    ]
    for shape in candidates:
        if shape.articles():
            return shape
    return next((shape for shape in candidates if shape.items), None)
