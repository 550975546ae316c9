"""
Ordered strategies for pulling a sentiment object out of a generate envelope.

Local models do not reliably honor ``format: "json"``: some return the
object serialized inside the ``response`` string, others put it directly on
the envelope. Each strategy returns a dict or ``None``; the first dict wins.
"""

import json
from typing import Any, Callable, Optional, Sequence

from marketpulse.core.exceptions import SentimentFormatError

ParseStrategy = Callable[[dict[str, Any]], Optional[dict[str, Any]]]


def parse_response_text(envelope: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Decode the envelope's ``response`` string as a JSON object."""
    text = envelope.get("response")
    if not isinstance(text, str):
        return None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_envelope_sentiment(envelope: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Use a ``sentiment`` object already present on the envelope."""
    sentiment = envelope.get("sentiment")
    return sentiment if isinstance(sentiment, dict) else None


SENTIMENT_PARSE_STRATEGIES: tuple[ParseStrategy, ...] = (
    parse_response_text,
    parse_envelope_sentiment,
)


def extract_sentiment(
    envelope: dict[str, Any],
    strategies: Sequence[ParseStrategy] = SENTIMENT_PARSE_STRATEGIES,
) -> dict[str, Any]:
    for strategy in strategies:
        result = strategy(envelope)
        if result is not None:
            return result
    raise SentimentFormatError("Invalid sentiment analysis format in model response")
