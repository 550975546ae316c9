# Base
from marketpulse.models.base import TimestampMixin, IdMixin

# Watch-list
from marketpulse.models.ticker import Ticker
from marketpulse.models.article import Article

# Analysis
from marketpulse.models.sentiment_analysis import SentimentAnalysis

__all__ = [
    "TimestampMixin",
    "IdMixin",
    "Ticker",
    "Article",
    "SentimentAnalysis",
]
