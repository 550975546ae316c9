from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from marketpulse.api.deps import get_orchestrator, to_http_error
from marketpulse.core.database import get_db
from marketpulse.core.exceptions import MarketPulseError
from marketpulse.models.ticker import Ticker
from marketpulse.services.sentiment_orchestrator import SentimentOrchestrator
from marketpulse.services.watchlist_service import WatchlistService

router = APIRouter()


# Schemas

class TickerCreate(BaseModel):
    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field("", max_length=255)


class ArticleCreate(BaseModel):
    headline: str = Field(..., min_length=1, max_length=500)
    summary: str = ""
    url: Optional[str] = Field(None, max_length=1000)
    published_at: Optional[datetime] = None


class SentimentAnalysisResponse(BaseModel):
    score: float
    summary: str
    analysis_date: datetime
    model_name: Optional[str] = None

    class Config:
        from_attributes = True


class ArticleResponse(BaseModel):
    id: int
    headline: str
    summary: str
    url: Optional[str] = None
    published_at: datetime
    ai_sentiment_score: float
    sentiment_analysis: Optional[SentimentAnalysisResponse] = None

    class Config:
        from_attributes = True


class TickerSummary(BaseModel):
    symbol: str
    name: str
    current_price: float
    currency: Optional[str] = None
    price_updated_at: Optional[datetime] = None
    average_sentiment_score: float
    article_count: int


class TickerDetail(TickerSummary):
    articles: list[ArticleResponse] = []


class AnalyzeResponse(BaseModel):
    symbol: str
    analyzed: int


class SymbolMatch(BaseModel):
    symbol: str
    name: Optional[str] = None
    exchange: Optional[str] = None
    quote_type: Optional[str] = None


def _summary(ticker: Ticker) -> TickerSummary:
    return TickerSummary(
        symbol=ticker.symbol,
        name=ticker.name,
        current_price=ticker.current_price,
        currency=ticker.currency,
        price_updated_at=ticker.price_updated_at,
        average_sentiment_score=ticker.average_sentiment_score,
        article_count=len(ticker.articles),
    )


# Endpoints


@router.get("", response_model=list[TickerSummary])
async def list_tickers(db: AsyncSession = Depends(get_db)):
    service = WatchlistService(session=db)
    return [_summary(t) for t in await service.list_tickers()]


@router.post("", response_model=TickerSummary, status_code=status.HTTP_201_CREATED)
async def add_ticker(
    payload: TickerCreate,
    db: AsyncSession = Depends(get_db),
):
    service = WatchlistService(session=db)
    try:
        ticker = await service.add_ticker(payload.symbol, payload.name)
        await service.commit()
    except MarketPulseError as exc:
        raise to_http_error(exc) from exc
    return _summary(ticker)


@router.get("/search", response_model=list[SymbolMatch])
async def search_symbols(
    q: str = Query(..., min_length=1),
    orchestrator: SentimentOrchestrator = Depends(get_orchestrator),
):
    """Look up instruments by company name or symbol."""
    try:
        matches = await orchestrator.search_symbols(q)
    except MarketPulseError as exc:
        raise to_http_error(exc) from exc
    return [
        SymbolMatch(
            symbol=m["symbol"],
            name=m.get("shortname") or m.get("longname"),
            exchange=m.get("exchange"),
            quote_type=m.get("quoteType"),
        )
        for m in matches
        if isinstance(m, dict) and m.get("symbol")
    ]


@router.get("/{symbol}", response_model=TickerDetail)
async def get_ticker(symbol: str, db: AsyncSession = Depends(get_db)):
    service = WatchlistService(session=db)
    ticker = await service.get_ticker(symbol)
    if not ticker:
        raise HTTPException(status_code=404, detail="Ticker not found")
    return TickerDetail(
        **_summary(ticker).model_dump(),
        articles=[ArticleResponse.model_validate(a) for a in ticker.articles],
    )


@router.post(
    "/{symbol}/articles",
    response_model=ArticleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_article(
    symbol: str,
    payload: ArticleCreate,
    db: AsyncSession = Depends(get_db),
):
    service = WatchlistService(session=db)
    try:
        article = await service.add_article(
            symbol,
            headline=payload.headline,
            summary=payload.summary,
            url=payload.url,
            published_at=payload.published_at,
        )
        if article is None:
            raise HTTPException(status_code=404, detail="Ticker not found")
        await service.commit()
    except MarketPulseError as exc:
        raise to_http_error(exc) from exc
    return article


@router.delete("/{symbol}/articles/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article(
    symbol: str,
    article_id: int,
    db: AsyncSession = Depends(get_db),
):
    service = WatchlistService(session=db)
    ticker = await service.get_ticker(symbol)
    if not ticker or all(a.id != article_id for a in ticker.articles):
        raise HTTPException(status_code=404, detail="Article not found")
    try:
        await service.delete_article(article_id)
        await service.commit()
    except MarketPulseError as exc:
        raise to_http_error(exc) from exc
    return None


@router.post("/{symbol}/analyze", response_model=AnalyzeResponse)
async def analyze_ticker(
    symbol: str,
    orchestrator: SentimentOrchestrator = Depends(get_orchestrator),
):
    try:
        ticker = await orchestrator.find_ticker(symbol)
        if ticker is None:
            raise HTTPException(status_code=404, detail="Ticker not found")
        analyses = await orchestrator.analyze_articles_for_ticker(ticker)
    except MarketPulseError as exc:
        raise to_http_error(exc) from exc
    return AnalyzeResponse(symbol=symbol.strip().upper(), analyzed=len(analyses))
