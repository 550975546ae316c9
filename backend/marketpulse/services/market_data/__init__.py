from typing import Dict, Type
from marketpulse.core.exceptions import ConfigurationError
from marketpulse.services.market_data.base import Quote, QuoteProvider
from marketpulse.services.market_data.yahoo_provider import YahooQuoteProvider

PROVIDERS: Dict[str, Type[QuoteProvider]] = {
    "yahoo": YahooQuoteProvider,
}


def get_quote_provider(name: str = "yahoo") -> QuoteProvider:
    """Factory to get provider instance."""
    provider_class = PROVIDERS.get(name)
    if not provider_class:
        raise ConfigurationError(f"Unknown quote provider: {name}")
    return provider_class()


__all__ = ["Quote", "QuoteProvider", "YahooQuoteProvider", "get_quote_provider"]
