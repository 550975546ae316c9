#!/usr/bin/env python3
"""
Refresh watch-list prices and score pending articles from the command line.

Usage:
    python scripts/refresh_watchlist.py [--add AAPL:"Apple Inc."] [--model mistral] [--list-models]
"""

import asyncio
import logging
import os
import sys
from argparse import ArgumentParser

# Add backend to path
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from marketpulse.core.config import settings
from marketpulse.core.database import AsyncSessionLocal, close_db, init_db
from marketpulse.core.exceptions import MarketPulseError
from marketpulse.core.logging import setup_logging
from marketpulse.services.sentiment_orchestrator import create_orchestrator
from marketpulse.services.watchlist_service import WatchlistService

logger = logging.getLogger(__name__)


async def refresh_watchlist(
    add: list[str],
    model: str | None,
    list_models: bool,
) -> int:
    await init_db()

    for entry in add:
        symbol, _, name = entry.partition(":")
        await WatchlistService().add_ticker(symbol, name)

    try:
        async with AsyncSessionLocal() as session:
            orchestrator = create_orchestrator(session, model_name=model)

            if list_models:
                for name in await orchestrator.list_models():
                    print(name)
                return 0

            symbols = await orchestrator.tracked_symbols()
            if not symbols:
                logger.warning("Watch-list is empty; add tickers with --add")
                return 1

            logger.info("Refreshing %s with model %s", symbols, orchestrator.current_model())
            result = await orchestrator.refresh_and_analyze(symbols)
            await orchestrator.analyze_all_tickers()

            for symbol in result.missing:
                logger.warning("No quote for %s", symbol)
            logger.info(
                "Updated %s tickers, analyzed %s articles",
                len(result.updated),
                result.analyzed,
            )
            return 0 if result.updated else 1
    except MarketPulseError as e:
        logger.error(f"Refresh failed: {e}")
        return 1
    finally:
        await close_db()


def main():
    parser = ArgumentParser(description="Refresh watch-list prices and sentiment")
    parser.add_argument(
        "--add",
        action="append",
        default=[],
        metavar="SYMBOL[:NAME]",
        help="Add a ticker to the watch-list before refreshing (repeatable)"
    )
    parser.add_argument(
        "--model",
        default=settings.OLLAMA_DEFAULT_MODEL,
        help=f"Inference model (default: {settings.OLLAMA_DEFAULT_MODEL})"
    )
    parser.add_argument(
        "--list-models",
        action="store_true",
        help="Print the models available on the inference host and exit"
    )
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(refresh_watchlist(args.add, args.model, args.list_models)))


if __name__ == "__main__":
    main()
