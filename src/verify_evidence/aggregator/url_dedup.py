"""URL-based deduplicating aggregator."""

import logging

from verify_evidence.data import CandidateArticle, NormalizedResponse

logger = logging.getLogger(__name__)


class UrlDedupAggregator:
    """Flatten responses and deduplicate articles by exact URL.

    A later duplicate replaces the earlier record (later responses may carry
    richer metadata) but keeps the earlier record's position. Articles without
    a URL cannot be matched and are all kept.
    """

    def aggregate(self, responses: list[NormalizedResponse]) -> list[CandidateArticle]:
        articles: list[CandidateArticle] = []
        positions: dict[str, int] = {}
        total = 0

        for response in responses:
            for article in response.articles:
                total += 1
                if not article.url:
                    articles.append(article)
                    continue
                if article.url in positions:
                    articles[positions[article.url]] = article
                    continue
                positions[article.url] = len(articles)
                articles.append(article)

        logger.info(f"Aggregated {total} articles into {len(articles)} unique candidates")
        return articles
