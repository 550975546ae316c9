import logging

from marketpulse.services.news.base import ArticleDraft, ArticleSource

logger = logging.getLogger(__name__)


class NullArticleSource(ArticleSource):
    """Placeholder source: no news feed is wired up, articles come from users."""

    async def fetch_articles(self, symbol: str) -> list[ArticleDraft]:
        logger.debug("No article source configured; nothing fetched for %s", symbol)
        return []


__all__ = ["ArticleDraft", "ArticleSource", "NullArticleSource"]
