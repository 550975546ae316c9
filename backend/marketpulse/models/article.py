from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship, validates
from marketpulse.core.database import Base
from marketpulse.models.base import IdMixin, TimestampMixin, utcnow


class Article(Base, IdMixin, TimestampMixin):
    """
    News item attached to a ticker, analyzable for sentiment.

    ``ai_sentiment_score`` mirrors the score of the attached analysis and is
    only ever written through the ``sentiment_analysis`` relationship.
    """
    __tablename__ = "articles"
    __table_args__ = (
        UniqueConstraint("ticker_id", "url", name="uq_article_ticker_url"),
    )

    ticker_id = Column(Integer, ForeignKey("tickers.id", ondelete="CASCADE"), nullable=False, index=True)
    headline = Column(String(500), nullable=False)
    summary = Column(Text, nullable=False, default="")
    published_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    url = Column(String(1000))  # NULL when unknown; unique per ticker otherwise
    ai_sentiment_score = Column(Float, nullable=False, default=0.0)

    ticker = relationship("Ticker", back_populates="articles", lazy="selectin")
    sentiment_analysis = relationship(
        "SentimentAnalysis",
        back_populates="article",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @validates("sentiment_analysis")
    def _project_score(self, key, analysis):
        self.ai_sentiment_score = analysis.score if analysis is not None else 0.0
        return analysis

    @property
    def is_analyzed(self) -> bool:
        return self.sentiment_analysis is not None

    def __repr__(self):
        return f"<Article(id={self.id}, headline={self.headline!r})>"
