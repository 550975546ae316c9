import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from marketpulse.core.config import settings
from marketpulse.core.exceptions import DecodeError, MarketPulseError, TransportError
from marketpulse.services.http import client_scope, request_json
from marketpulse.services.market_data.base import Quote, QuoteProvider

logger = logging.getLogger(__name__)


class YahooQuoteProvider(QuoteProvider):
    """Quote provider for the Yahoo Finance chart and search endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        search_url: str | None = None,
        timeout_sec: float | None = None,
        max_concurrency: int | None = None,
        max_retries: int | None = None,
        backoff_sec: float | None = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = (base_url or settings.QUOTE_BASE_URL).rstrip("/")
        self.search_url = search_url or settings.QUOTE_SEARCH_URL
        self.timeout_sec = settings.HTTP_TIMEOUT_SEC if timeout_sec is None else timeout_sec
        self.max_concurrency = (
            settings.QUOTE_MAX_CONCURRENCY if max_concurrency is None else max_concurrency
        )
        self.max_retries = settings.QUOTE_MAX_RETRIES if max_retries is None else max_retries
        self.backoff_sec = (
            settings.QUOTE_RETRY_BACKOFF_SEC if backoff_sec is None else backoff_sec
        )
        self._client = client

    async def fetch_quote(self, symbol: str) -> Quote:
        async with client_scope(self._client, self.timeout_sec) as client:
            return await self._fetch_quote(client, symbol)

    async def fetch_quotes(self, symbols: List[str]) -> List[Quote]:
        symbols = self._normalize_symbols(symbols)
        if not symbols:
            return []

        gate = asyncio.Semaphore(max(self.max_concurrency or 1, 1))

        async with client_scope(self._client, self.timeout_sec) as client:

            async def fetch_symbol(symbol: str) -> Quote | None:
                async with gate:
                    try:
                        return await self._fetch_with_retry(client, symbol)
                    except MarketPulseError as exc:
                        logger.warning("Quote fetch failed for %s: %s", symbol, exc)
                        return None

            results = await asyncio.gather(*[fetch_symbol(symbol) for symbol in symbols])

        quotes = [q for q in results if q is not None]
        logger.info("Fetched %s/%s quotes", len(quotes), len(symbols))
        return quotes

    async def search_symbols(self, query: str) -> List[dict[str, Any]]:
        async with client_scope(self._client, self.timeout_sec) as client:
            data = await request_json(client, "GET", self.search_url, params={"q": query})
        quotes = data.get("quotes") if isinstance(data, dict) else None
        if not isinstance(quotes, list):
            raise DecodeError(f"Search response for {query!r} has no quotes array")
        return quotes

    async def _fetch_with_retry(self, client: httpx.AsyncClient, symbol: str) -> Quote:
        attempts = max(self.max_retries, 1)
        for attempt in range(1, attempts + 1):
            try:
                return await self._fetch_quote(client, symbol)
            except TransportError:
                if attempt >= attempts:
                    raise
                await _sleep_with_backoff(self.backoff_sec, attempt)
        raise TransportError(f"No attempts made for {symbol}")

    async def _fetch_quote(self, client: httpx.AsyncClient, symbol: str) -> Quote:
        url = self._chart_url(symbol)
        data = await request_json(
            client, "GET", url, params={"interval": "1d", "range": "1d"}
        )
        return self._parse_chart(data, symbol)

    def _chart_url(self, symbol: str) -> str:
        clean = (symbol or "").strip()
        if not clean:
            raise TransportError("Cannot build quote URL for an empty symbol")
        return f"{self.base_url}/{quote(clean, safe='')}"

    def _parse_chart(self, data: Any, symbol: str) -> Quote:
        try:
            meta = data["chart"]["result"][0]["meta"]
            price = meta["regularMarketPrice"]
            currency = meta["currency"]
            quoted_symbol = meta["symbol"]
        except (KeyError, IndexError, TypeError) as exc:
            raise DecodeError(f"Missing price data in chart response for {symbol}") from exc

        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise DecodeError(f"regularMarketPrice for {symbol} is not a number: {price!r}")
        if not isinstance(currency, str) or not isinstance(quoted_symbol, str):
            raise DecodeError(f"Malformed currency/symbol in chart response for {symbol}")

        return Quote(
            symbol=quoted_symbol.strip().upper(),
            price=float(price),
            currency=currency,
            observed_at=datetime.now(timezone.utc),
        )

    def _normalize_symbols(self, symbols: List[str]) -> List[str]:
        seen = set()
        normalized: List[str] = []
        for sym in symbols:
            if sym is None:
                continue
            value = sym.strip().upper()
            if not value or value in seen:
                continue
            seen.add(value)
            normalized.append(value)
        return normalized


async def _sleep_with_backoff(base: float, attempt: int) -> None:
    delay = base * (2 ** (attempt - 1))
    if delay > 0:
        await asyncio.sleep(delay)
