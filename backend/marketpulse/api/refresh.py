import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from marketpulse.api.deps import get_orchestrator, to_http_error
from marketpulse.core.config import settings
from marketpulse.core.exceptions import MarketPulseError
from marketpulse.services.sentiment_orchestrator import SentimentOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


class RefreshRequest(BaseModel):
    symbols: Optional[list[str]] = None


class RefreshResponse(BaseModel):
    updated: list[str]
    skipped: list[str]
    missing: list[str]
    analyzed: int


@router.post("", response_model=RefreshResponse)
async def refresh(
    payload: Optional[RefreshRequest] = None,
    orchestrator: SentimentOrchestrator = Depends(get_orchestrator),
):
    """Refresh prices, then analyze every pending article on the watch-list."""
    symbols = (payload.symbols if payload else None) or settings.WATCHLIST
    try:
        result = await orchestrator.refresh_and_analyze(symbols)
        extra = await orchestrator.analyze_all_tickers()
    except MarketPulseError as exc:
        logger.error("Refresh failed: %s", exc)
        raise to_http_error(exc) from exc
    return RefreshResponse(
        updated=result.updated,
        skipped=result.skipped,
        missing=result.missing,
        analyzed=result.analyzed + len(extra),
    )
