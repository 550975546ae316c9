"""Test doubles and HTTP stub helpers."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import httpx

from marketpulse.core.exceptions import TransportError
from marketpulse.services.inference.base import InferenceProvider
from marketpulse.services.market_data.base import Quote, QuoteProvider


class FakeQuoteProvider(QuoteProvider):
    """Returns fixed prices; symbols mapped to an exception are dropped."""

    def __init__(self, prices: dict[str, Any]):
        self.prices = prices
        self.requested: list[list[str]] = []
        self.matches: list[dict[str, Any]] = []

    async def fetch_quote(self, symbol: str) -> Quote:
        value = self.prices.get(symbol)
        if value is None:
            raise TransportError(f"No quote for {symbol}", status_code=404, body="Not Found")
        if isinstance(value, Exception):
            raise value
        return Quote(symbol=symbol, price=value, currency="USD", observed_at=datetime.now(timezone.utc))

    async def fetch_quotes(self, symbols: list[str]) -> list[Quote]:
        self.requested.append(list(symbols))
        quotes = []
        for symbol in symbols:
            try:
                quotes.append(await self.fetch_quote(symbol))
            except TransportError:
                continue
        return quotes

    async def search_symbols(self, query: str) -> list[dict[str, Any]]:
        return list(self.matches)


class FakeInferenceProvider(InferenceProvider):
    """
    Answers analyze_sentiment from a script of results.

    Each entry is a dict (returned), an Exception (raised) or a callable
    taking the prompt. When the script runs out the default is returned.
    """

    def __init__(self, script: Optional[list[Any]] = None, default: Optional[dict] = None):
        self.script = list(script or [])
        self.default = default or {"score": 0.25, "summary": "Mildly positive."}
        self.calls: list[tuple[str, str]] = []
        self.gate: Optional[asyncio.Event] = None

    async def generate(self, prompt: str, model: str) -> dict[str, Any]:
        return {"model": model, "response": json.dumps(await self.analyze_sentiment(prompt, model))}

    async def analyze_sentiment(self, text: str, model: str) -> dict[str, Any]:
        self.calls.append((text, model))
        if self.gate is not None:
            await self.gate.wait()
        await asyncio.sleep(0)
        item = self.script.pop(0) if self.script else self.default
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(text)
        return item

    async def list_models(self) -> list[str]:
        return ["llama3", "mistral"]


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def chart_payload(symbol: str, price: Any, currency: str = "USD") -> dict[str, Any]:
    return {
        "chart": {
            "result": [
                {
                    "meta": {
                        "symbol": symbol,
                        "currency": currency,
                        "regularMarketPrice": price,
                    }
                }
            ],
            "error": None,
        }
    }
