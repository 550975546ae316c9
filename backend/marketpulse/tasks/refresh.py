import asyncio
import logging

from marketpulse.core.config import settings
from marketpulse.core.database import AsyncSessionLocal, init_db
from marketpulse.scheduler.celery_app import app
from marketpulse.services.sentiment_orchestrator import RefreshResult, create_orchestrator

logger = logging.getLogger(__name__)


@app.task(name="marketpulse.tasks.refresh.refresh_watchlist")
def refresh_watchlist(model_name: str | None = None) -> dict[str, object]:
    """Scheduled task refreshing prices and sentiment for every tracked ticker."""
    result = asyncio.run(_refresh_watchlist_async(model_name))

    if result.updated:
        logger.info(
            "Refreshed %s tickers, analyzed %s articles",
            len(result.updated),
            result.analyzed,
        )
    else:
        logger.warning("No ticker prices refreshed")

    return {
        "status": "completed",
        "updated": result.updated,
        "skipped": result.skipped,
        "missing": result.missing,
        "analyzed": result.analyzed,
    }


async def _refresh_watchlist_async(model_name: str | None = None) -> RefreshResult:
    await init_db()
    async with AsyncSessionLocal() as session:
        orchestrator = create_orchestrator(
            session, model_name=model_name or settings.OLLAMA_DEFAULT_MODEL
        )
        symbols = await orchestrator.tracked_symbols() or settings.WATCHLIST
        return await orchestrator.refresh_and_analyze(symbols)
