from typing import Dict, Type

from marketpulse.core.exceptions import ConfigurationError
from marketpulse.services.inference.base import InferenceProvider
from marketpulse.services.inference.ollama_provider import OllamaProvider

PROVIDERS: Dict[str, Type[InferenceProvider]] = {
    "ollama": OllamaProvider,
}


def get_inference_provider(name: str = "ollama") -> InferenceProvider:
    provider_class = PROVIDERS.get(name)
    if not provider_class:
        raise ConfigurationError(f"Unknown inference provider: {name}")
    return provider_class()


__all__ = ["InferenceProvider", "OllamaProvider", "get_inference_provider"]
