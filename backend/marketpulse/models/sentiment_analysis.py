from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from marketpulse.core.database import Base
from marketpulse.models.base import IdMixin, utcnow


class SentimentAnalysis(Base, IdMixin):
    """
    Model-produced sentiment judgment for exactly one article.

    Written once; re-analysis of an analyzed article is skipped.
    """
    __tablename__ = "sentiment_analyses"
    __table_args__ = (
        CheckConstraint("score >= -1.0 AND score <= 1.0", name="ck_sentiment_score_range"),
    )

    article_id = Column(
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    score = Column(Float, nullable=False)  # -1.0 to 1.0
    summary = Column(Text, nullable=False)
    analysis_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    model_name = Column(String(100))

    article = relationship("Article", back_populates="sentiment_analysis")

    def __repr__(self):
        return f"<SentimentAnalysis(article_id={self.article_id}, score={self.score})>"
