from abc import ABC, abstractmethod
from typing import Any


class InferenceProvider(ABC):
    """Abstract base class for local language-model providers."""

    @abstractmethod
    async def generate(self, prompt: str, model: str) -> dict[str, Any]:
        """Run one non-streaming generation and return the response envelope."""
        raise NotImplementedError

    @abstractmethod
    async def analyze_sentiment(self, text: str, model: str) -> dict[str, Any]:
        """
        Send ``text`` as the prompt and return the model's sentiment object.
        Raises SentimentFormatError when no parse strategy yields an object.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_models(self) -> list[str]:
        """Names of the models installed on the inference host."""
        raise NotImplementedError
