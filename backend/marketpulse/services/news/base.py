from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ArticleDraft:
    """Article fields as delivered by a news source, before persistence."""
    headline: str
    summary: str
    url: str
    published_at: datetime


class ArticleSource(ABC):
    """Abstract base class for per-ticker news sources."""

    @abstractmethod
    async def fetch_articles(self, symbol: str) -> list[ArticleDraft]:
        """Return articles currently available for ``symbol``."""
        raise NotImplementedError
