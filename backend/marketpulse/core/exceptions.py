"""
Error taxonomy shared by the clients, the record store and the orchestrator.

Adapters translate library errors (httpx, json, SQLAlchemy) into these types
at their boundary so callers only ever handle ``MarketPulseError``.
"""

from typing import Optional


class MarketPulseError(Exception):
    """Base class for all application errors."""


class TransportError(MarketPulseError):
    """Endpoint could not be built, reached, or answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.url = url
        self.status_code = status_code
        self.body = body
        if status_code is not None:
            message = f"{message} (HTTP {status_code}: {body or 'Unknown error'})"
        super().__init__(message)


class DecodeError(MarketPulseError):
    """Response was not valid JSON or lacked a required field."""


class SentimentFormatError(MarketPulseError):
    """No sentiment parse strategy produced a usable object."""


class InvalidSentimentResponseError(MarketPulseError):
    """Sentiment object lacks a numeric ``score`` or a string ``summary``."""


class PersistenceError(MarketPulseError):
    """Store insert or save failed; the transaction was rolled back."""


class ConfigurationError(MarketPulseError, ValueError):
    """Invalid runtime configuration value."""


class AnalysisFailedError(MarketPulseError):
    """Sentiment analysis of one article failed."""

    def __init__(self, article_id: Optional[int], headline: str, cause: Exception):
        self.article_id = article_id
        self.headline = headline
        self.cause = cause
        super().__init__(
            f"Sentiment analysis failed for article {article_id} ({headline!r}): {cause}"
        )
