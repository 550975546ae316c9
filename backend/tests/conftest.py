"""Shared fixtures: a throwaway SQLite database and wired orchestrators."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

import marketpulse.models  # noqa: F401
from marketpulse.core.database import Base
from marketpulse.models import Article, SentimentAnalysis
from marketpulse.services.record_store import RecordStore
from marketpulse.services.sentiment_orchestrator import SentimentOrchestrator
from marketpulse.services.watchlist_service import WatchlistService
from tests.utils import FakeInferenceProvider, FakeQuoteProvider


# Database


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'marketpulse.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(session_factory):
    """Create a ticker with articles in a separate, committed session."""

    async def _seed(
        symbol: str,
        name: str = "",
        headlines: tuple[str, ...] = (),
        price: float = 0.0,
    ) -> int:
        base = datetime(2024, 1, 2, 9, 30, tzinfo=timezone.utc)
        async with session_factory() as session:
            service = WatchlistService(session=session)
            ticker = await service.add_ticker(symbol, name or symbol, price=price)
            for i, headline in enumerate(headlines):
                await service.add_article(
                    symbol,
                    headline=headline,
                    summary=f"Summary of {headline}",
                    url=f"https://news.example.com/{symbol.lower()}/{i}",
                    published_at=base + timedelta(hours=i),
                )
            await session.commit()
            return ticker.id

    return _seed


@pytest.fixture
def count_analyses(session_factory):
    async def _count() -> int:
        async with session_factory() as session:
            result = await session.execute(select(func.count(SentimentAnalysis.id)))
            return result.scalar_one()

    return _count


@pytest.fixture
def load_articles(session_factory):
    async def _load(symbol_id: int) -> list[Article]:
        async with session_factory() as session:
            result = await session.execute(
                select(Article)
                .where(Article.ticker_id == symbol_id)
                .order_by(Article.published_at.asc())
            )
            return list(result.scalars().all())

    return _load


@pytest.fixture
def quotes():
    return FakeQuoteProvider({"AAPL": 190.5, "MSFT": 410.25})


@pytest.fixture
def inference():
    return FakeInferenceProvider()


@pytest_asyncio.fixture
async def orchestrator(session_factory, quotes, inference):
    async with session_factory() as session:
        yield SentimentOrchestrator(
            store=RecordStore(session),
            quote_provider=quotes,
            inference_provider=inference,
            model_name="llama3",
        )
