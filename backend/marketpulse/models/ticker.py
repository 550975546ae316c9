from sqlalchemy import Column, DateTime, Float, String
from sqlalchemy.orm import relationship
from marketpulse.core.database import Base
from marketpulse.models.base import IdMixin, TimestampMixin


class Ticker(Base, IdMixin, TimestampMixin):
    """
    A tracked stock symbol with its latest price and owned articles.
    """
    __tablename__ = "tickers"

    symbol = Column(String(20), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False, default="")
    current_price = Column(Float, nullable=False, default=0.0)
    currency = Column(String(10))
    price_updated_at = Column(DateTime(timezone=True))

    articles = relationship(
        "Article",
        back_populates="ticker",
        cascade="all, delete-orphan",
        order_by="Article.published_at",
        lazy="selectin",
    )

    @property
    def average_sentiment_score(self) -> float:
        """Mean of the articles' cached scores, 0 without articles."""
        if not self.articles:
            return 0.0
        return sum(a.ai_sentiment_score for a in self.articles) / len(self.articles)

    def apply_quote(self, price: float, currency: str | None, observed_at) -> None:
        self.current_price = price
        if currency:
            self.currency = currency
        self.price_updated_at = observed_at

    def __repr__(self):
        return f"<Ticker(symbol={self.symbol}, price={self.current_price})>"
