"""
Sentiment orchestration: price refresh, article analysis and persistence.

One ``SentimentOrchestrator`` owns one ``RecordStore`` session. Every public
operation that reads or writes records runs under the instance lock, so
refreshes and analyses never interleave their writes. Quotes are fetched
concurrently by the provider before the lock is taken.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from marketpulse.core.config import settings
from marketpulse.core.exceptions import (
    AnalysisFailedError,
    ConfigurationError,
    InvalidSentimentResponseError,
    MarketPulseError,
    PersistenceError,
)
from marketpulse.models.article import Article
from marketpulse.models.base import primary_key
from marketpulse.models.sentiment_analysis import SentimentAnalysis
from marketpulse.models.ticker import Ticker
from marketpulse.services.inference import InferenceProvider, get_inference_provider
from marketpulse.services.inference.prompts import build_article_prompt, build_text_prompt
from marketpulse.services.market_data import QuoteProvider, get_quote_provider
from marketpulse.services.news import ArticleSource, NullArticleSource
from marketpulse.services.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class RefreshResult:
    """Outcome of one ``refresh_and_analyze`` batch."""
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # quoted, but not tracked
    missing: list[str] = field(default_factory=list)  # requested, no quote
    analyzed: int = 0


def clamp_score(score: float) -> float:
    return max(-1.0, min(1.0, score))


def validate_sentiment(data: dict[str, Any]) -> tuple[float, str]:
    """Return ``(score, summary)`` or raise InvalidSentimentResponseError."""
    score = data.get("score")
    summary = data.get("summary")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise InvalidSentimentResponseError(f"Sentiment score is not a number: {score!r}")
    if not math.isfinite(score):
        raise InvalidSentimentResponseError(f"Sentiment score is not finite: {score!r}")
    if not isinstance(summary, str):
        raise InvalidSentimentResponseError(f"Sentiment summary is not a string: {summary!r}")
    return float(score), summary


class SentimentOrchestrator:
    """Serializes price refreshes and sentiment analyses over one store."""

    def __init__(
        self,
        store: RecordStore,
        quote_provider: QuoteProvider,
        inference_provider: InferenceProvider,
        article_source: Optional[ArticleSource] = None,
        model_name: Optional[str] = None,
    ):
        self.store = store
        self.quote_provider = quote_provider
        self.inference_provider = inference_provider
        self.article_source = article_source or NullArticleSource()
        self._model = model_name or settings.OLLAMA_DEFAULT_MODEL
        self._lock = asyncio.Lock()

    # Model configuration

    def set_model(self, name: str) -> None:
        """Select the model for analyses started from now on."""
        if not name or not name.strip():
            raise ConfigurationError("Model name must not be empty")
        self._model = name.strip()
        logger.info("Sentiment model set to %s", self._model)

    def current_model(self) -> str:
        return self._model

    async def list_models(self) -> list[str]:
        return await self.inference_provider.list_models()

    async def analyze_text(self, text: str) -> tuple[float, str]:
        """Score free text with the current model without persisting anything."""
        data = await self.inference_provider.analyze_sentiment(build_text_prompt(text), self._model)
        score, summary = validate_sentiment(data)
        return clamp_score(score), summary

    async def search_symbols(self, query: str) -> list[dict[str, Any]]:
        return await self.quote_provider.search_symbols(query)

    # Lookups

    async def find_ticker(self, symbol: str) -> Optional[Ticker]:
        async with self._lock:
            return await self.store.ticker_by_symbol(symbol)

    async def tracked_symbols(self) -> list[str]:
        async with self._lock:
            return [t.symbol for t in await self.store.all_tickers()]

    # Analysis

    async def analyze_article(self, article: Article) -> Optional[SentimentAnalysis]:
        """
        Score one article and persist the result.

        Returns the new analysis, or None when the article is already analyzed
        (or no longer exists). Failures raise AnalysisFailedError.
        """
        async with self._lock:
            return await self._analyze_article(article)

    async def analyze_articles_for_ticker(self, ticker: Ticker) -> list[SentimentAnalysis]:
        """Analyze a ticker's articles in order; the first failure aborts the rest."""
        async with self._lock:
            return await self._analyze_articles_for_ticker(ticker)

    async def analyze_all_tickers(self) -> list[SentimentAnalysis]:
        async with self._lock:
            analyses: list[SentimentAnalysis] = []
            for ticker in await self.store.all_tickers():
                analyses.extend(await self._analyze_articles_for_ticker(ticker))
            return analyses

    # Refresh

    async def refresh_and_analyze(self, symbols: list[str]) -> RefreshResult:
        """
        Update tracked tickers from fresh quotes, then analyze their articles.

        Quote failures are tolerated: those symbols land in ``missing``.
        Quotes for symbols without a ticker record are skipped, never created.
        """
        quotes = await self.quote_provider.fetch_quotes(symbols)
        result = RefreshResult()
        quoted = {q.symbol for q in quotes}
        result.missing = [
            s.strip().upper() for s in symbols
            if s and s.strip() and s.strip().upper() not in quoted
        ]

        async with self._lock:
            for quote in quotes:
                ticker = await self.store.ticker_by_symbol(quote.symbol)
                if ticker is None:
                    logger.info("No tracked ticker for %s; quote ignored", quote.symbol)
                    result.skipped.append(quote.symbol)
                    continue

                ticker.apply_quote(quote.price, quote.currency, quote.observed_at)
                try:
                    await self.store.save()
                except PersistenceError as exc:
                    raise PersistenceError(
                        f"Failed to update price for {quote.symbol}: {exc}"
                    ) from exc
                result.updated.append(quote.symbol)
                logger.info("Updated %s price to %.2f %s", quote.symbol, quote.price, quote.currency)

                await self._ingest_articles(ticker)
                analyses = await self._analyze_articles_for_ticker(ticker)
                result.analyzed += len(analyses)

        logger.info(
            "Refresh complete: %s updated, %s skipped, %s without quote",
            len(result.updated),
            len(result.skipped),
            len(result.missing),
        )
        return result

    # Internals; callers hold the lock

    async def _analyze_articles_for_ticker(self, ticker: Ticker) -> list[SentimentAnalysis]:
        ticker_id = primary_key(ticker)
        if ticker_id is None:
            return []
        ticker = await self.store.get(Ticker, ticker_id)
        if ticker is None:
            logger.warning("Ticker %s no longer exists; skipping", ticker_id)
            return []

        analyses: list[SentimentAnalysis] = []
        for article in await self.store.articles_for_ticker(ticker):
            analysis = await self._analyze_article(article)
            if analysis is not None:
                analyses.append(analysis)
        if analyses:
            logger.info("Analyzed %s new articles for %s", len(analyses), ticker.symbol)
        return analyses

    async def _analyze_article(self, article: Article) -> Optional[SentimentAnalysis]:
        article_id = primary_key(article)
        headline = "" if article_id is not None else article.headline
        model = self._model

        try:
            if article_id is not None:
                article = await self.store.get(Article, article_id)
                if article is None:
                    logger.warning("Article %s no longer exists; skipping", article_id)
                    return None
                headline = article.headline

            if article.sentiment_analysis is not None:
                return None

            prompt = build_article_prompt(article.headline, article.summary)
            data = await self.inference_provider.analyze_sentiment(prompt, model)
            score, summary = validate_sentiment(data)

            analysis = SentimentAnalysis(
                score=clamp_score(score),
                summary=summary,
                analysis_date=datetime.now(timezone.utc),
                model_name=model,
            )
            article.sentiment_analysis = analysis
            if article_id is None:
                self.store.insert(article)
            self.store.insert(analysis)
            await self.store.save()
        except MarketPulseError as exc:
            if article_id is None:
                self._forget_unsaved(article)
            logger.error("Analysis of article %s failed: %s", article_id, exc)
            raise AnalysisFailedError(article_id, headline, exc) from exc

        logger.debug("Article %s scored %.2f with %s", article.id, analysis.score, model)
        return analysis

    def _forget_unsaved(self, article: Article) -> None:
        """Detach a never-saved article so a later save does not write it."""
        ticker = article.ticker
        if ticker is not None and "articles" not in inspect(ticker).unloaded:
            if article in ticker.articles:
                ticker.articles.remove(article)
        self.store.discard(article)

    async def _ingest_articles(self, ticker: Ticker) -> int:
        drafts = await self.article_source.fetch_articles(ticker.symbol)
        if not drafts:
            return 0

        known = {a.url for a in await self.store.articles_for_ticker(ticker) if a.url}
        added = 0
        for draft in drafts:
            url = (draft.url or "").strip() or None
            if url in known:
                continue
            if url:
                known.add(url)
            ticker.articles.append(
                Article(
                    headline=draft.headline,
                    summary=draft.summary,
                    url=url,
                    published_at=draft.published_at,
                    ai_sentiment_score=0.0,
                )
            )
            added += 1

        if added:
            await self.store.save()
            logger.info("Attached %s new articles to %s", added, ticker.symbol)
        return added


def create_orchestrator(
    session: AsyncSession,
    model_name: Optional[str] = None,
    article_source: Optional[ArticleSource] = None,
) -> SentimentOrchestrator:
    """Wire an orchestrator with the configured providers over ``session``."""
    return SentimentOrchestrator(
        store=RecordStore(session),
        quote_provider=get_quote_provider(settings.QUOTE_PROVIDER),
        inference_provider=get_inference_provider(settings.INFERENCE_PROVIDER),
        article_source=article_source,
        model_name=model_name,
    )
