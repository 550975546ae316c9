import logging
from typing import Any, Optional, Sequence, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketpulse.core.exceptions import PersistenceError
from marketpulse.models.article import Article
from marketpulse.models.base import primary_key
from marketpulse.models.ticker import Ticker

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordStore:
    """
    Predicate queries, inserts and transactional saves over one session.

    Every SQLAlchemy failure surfaces as ``PersistenceError``; a failed save
    is rolled back before raising so earlier committed rows stay intact.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def fetch(
        self,
        model: Type[T],
        *criteria: Any,
        order_by: Sequence[Any] = (),
    ) -> list[T]:
        stmt = select(model).where(*criteria)
        if order_by:
            stmt = stmt.order_by(*order_by)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to fetch {model.__name__} records: {exc}") from exc
        return list(result.scalars().all())

    async def first(self, model: Type[T], *criteria: Any) -> Optional[T]:
        rows = await self.fetch(model, *criteria)
        return rows[0] if rows else None

    async def get(self, model: Type[T], pk: Any) -> Optional[T]:
        """Load by primary key, refreshing any stale identity-map copy."""
        try:
            return await self.session.get(model, pk, populate_existing=True)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to load {model.__name__} {pk}: {exc}") from exc

    async def all_tickers(self) -> list[Ticker]:
        return await self.fetch(Ticker, order_by=(Ticker.symbol.asc(),))

    async def ticker_by_symbol(self, symbol: str) -> Optional[Ticker]:
        return await self.first(Ticker, Ticker.symbol == symbol.strip().upper())

    async def articles_for_ticker(self, ticker: Ticker) -> list[Article]:
        return await self.fetch(
            Article,
            Article.ticker_id == primary_key(ticker),
            order_by=(Article.published_at.asc(), Article.id.asc()),
        )

    def insert(self, record: Any) -> None:
        try:
            self.session.add(record)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to insert {record!r}: {exc}") from exc

    def discard(self, record: Any) -> None:
        """Drop a pending record from the session without writing it."""
        if record in self.session:
            self.session.expunge(record)

    async def delete(self, record: Any) -> None:
        try:
            await self.session.delete(record)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to delete {record!r}: {exc}") from exc

    async def save(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Save failed, transaction rolled back: %s", exc)
            raise PersistenceError(f"Failed to save changes: {exc}") from exc

    async def close(self) -> None:
        await self.session.close()
