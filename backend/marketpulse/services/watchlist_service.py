import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketpulse.core.database import AsyncSessionLocal
from marketpulse.core.exceptions import PersistenceError
from marketpulse.models.article import Article
from marketpulse.models.base import utcnow
from marketpulse.models.ticker import Ticker

logger = logging.getLogger(__name__)


class WatchlistService:
    """Manage tracked tickers and their articles."""

    def __init__(self, session: Optional[AsyncSession] = None):
        self.session = session

    async def add_ticker(self, symbol: str, name: str = "", price: float = 0.0) -> Ticker:
        """Get-or-create keyed by symbol; an existing row keeps its price."""
        symbol = symbol.strip().upper()
        async with self._get_session() as session:
            ticker = await self._find(session, symbol)
            if ticker is not None:
                if name and ticker.name != name:
                    ticker.name = name
                    await session.flush()
                return ticker
            ticker = Ticker(symbol=symbol, name=name or symbol, current_price=price)
            session.add(ticker)
            await session.flush()
            await session.refresh(ticker)
            logger.info("Added %s to the watch-list", symbol)
            return ticker

    async def list_tickers(self) -> list[Ticker]:
        async with self._get_session() as session:
            result = await session.execute(select(Ticker).order_by(Ticker.symbol.asc()))
            return list(result.scalars().all())

    async def get_ticker(self, symbol: str) -> Optional[Ticker]:
        async with self._get_session() as session:
            return await self._find(session, symbol.strip().upper())

    async def add_article(
        self,
        symbol: str,
        headline: str,
        summary: str = "",
        url: Optional[str] = None,
        published_at: Optional[datetime] = None,
    ) -> Optional[Article]:
        """Attach an article to a tracked ticker; duplicates by URL are returned as-is."""
        url = (url or "").strip() or None
        async with self._get_session() as session:
            ticker = await self._find(session, symbol.strip().upper())
            if ticker is None:
                return None
            if url:
                for existing in ticker.articles:
                    if existing.url == url:
                        return existing
            article = Article(
                headline=headline,
                summary=summary,
                url=url,
                published_at=published_at or utcnow(),
                ai_sentiment_score=0.0,
                sentiment_analysis=None,
            )
            ticker.articles.append(article)
            await session.flush()
            return article

    async def delete_article(self, article_id: int) -> bool:
        """Delete an article and, by cascade, its analysis."""
        async with self._get_session() as session:
            article = await session.get(Article, article_id)
            if article is None:
                return False
            await session.delete(article)
            await session.flush()
            logger.info("Deleted article %s", article_id)
            return True

    async def commit(self) -> None:
        async with self._get_session() as session:
            await session.commit()

    async def _find(self, session: AsyncSession, symbol: str) -> Optional[Ticker]:
        result = await session.execute(select(Ticker).where(Ticker.symbol == symbol))
        return result.scalars().first()

    @asynccontextmanager
    async def _get_session(self):
        if self.session is not None:
            try:
                yield self.session
            except SQLAlchemyError as exc:
                await self.session.rollback()
                raise PersistenceError(f"Watch-list update failed: {exc}") from exc
        else:
            async with AsyncSessionLocal() as session:
                try:
                    yield session
                    await session.commit()
                except SQLAlchemyError as exc:
                    await session.rollback()
                    raise PersistenceError(f"Watch-list update failed: {exc}") from exc
                except Exception:
                    await session.rollback()
                    raise
