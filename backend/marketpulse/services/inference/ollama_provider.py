import logging
from typing import Any, Optional, Sequence

import httpx

from marketpulse.core.config import settings
from marketpulse.core.exceptions import DecodeError
from marketpulse.services.http import client_scope, request_json
from marketpulse.services.inference.base import InferenceProvider
from marketpulse.services.inference.parsing import (
    SENTIMENT_PARSE_STRATEGIES,
    ParseStrategy,
    extract_sentiment,
)

logger = logging.getLogger(__name__)


class OllamaProvider(InferenceProvider):
    """Inference provider for a local Ollama server."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout_sec: float | None = None,
        strategies: Sequence[ParseStrategy] = SENTIMENT_PARSE_STRATEGIES,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = (base_url or settings.OLLAMA_BASE_URL).rstrip("/")
        self.timeout_sec = settings.HTTP_TIMEOUT_SEC if timeout_sec is None else timeout_sec
        self.strategies = tuple(strategies)
        self._client = client

    async def generate(self, prompt: str, model: str) -> dict[str, Any]:
        payload = {
            "model": model,
            "prompt": prompt,
            "format": "json",
            "stream": False,
        }
        async with client_scope(self._client, self.timeout_sec) as client:
            data = await request_json(
                client, "POST", f"{self.base_url}/api/generate", json=payload
            )
        if not isinstance(data, dict):
            raise DecodeError("Generate response is not a JSON object")
        return data

    async def analyze_sentiment(self, text: str, model: str) -> dict[str, Any]:
        envelope = await self.generate(text, model)
        if not isinstance(envelope.get("response"), str):
            raise DecodeError("Generate response has no response text")
        sentiment = extract_sentiment(envelope, self.strategies)
        logger.debug("Model %s returned sentiment %s", model, sentiment)
        return sentiment

    async def list_models(self) -> list[str]:
        async with client_scope(self._client, self.timeout_sec) as client:
            data = await request_json(client, "GET", f"{self.base_url}/api/tags")
        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            raise DecodeError("Tags response has no models array")
        return [
            m["name"] for m in models
            if isinstance(m, dict) and isinstance(m.get("name"), str)
        ]
