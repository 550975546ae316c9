"""HTTP API tests against the ASGI app with the database and engine swapped out."""

import httpx
import pytest
import pytest_asyncio

from marketpulse.api.main import app
from marketpulse.core.database import get_db
from marketpulse.core.exceptions import TransportError


@pytest_asyncio.fixture
async def client(session_factory, orchestrator):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.orchestrator = orchestrator
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    app.state.orchestrator = None


@pytest.mark.asyncio
async def test_health(client) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestTickers:
    @pytest.mark.asyncio
    async def test_add_and_list(self, client) -> None:
        response = await client.post("/api/v1/tickers", json={"symbol": "aapl", "name": "Apple"})
        assert response.status_code == 201
        body = response.json()
        assert body["symbol"] == "AAPL"
        assert body["average_sentiment_score"] == 0.0
        assert body["article_count"] == 0

        await client.post("/api/v1/tickers", json={"symbol": "MSFT"})
        listed = await client.get("/api/v1/tickers")
        assert [t["symbol"] for t in listed.json()] == ["AAPL", "MSFT"]

    @pytest.mark.asyncio
    async def test_blank_symbol_rejected(self, client) -> None:
        response = await client.post("/api/v1/tickers", json={"symbol": ""})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_ticker(self, client) -> None:
        assert (await client.get("/api/v1/tickers/ZZZZ")).status_code == 404

    @pytest.mark.asyncio
    async def test_add_article_starts_unanalyzed(self, client, seed) -> None:
        await seed("AAPL")
        response = await client.post(
            "/api/v1/tickers/AAPL/articles",
            json={"headline": "Apple opens campus", "url": "https://news.example.com/aapl/x"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["ai_sentiment_score"] == 0.0
        assert body["sentiment_analysis"] is None

    @pytest.mark.asyncio
    async def test_articles_without_url_can_repeat(self, client, seed, load_articles) -> None:
        ticker_id = await seed("AAPL")
        for headline in ("Apple opens campus", "Apple hires chief"):
            response = await client.post(
                "/api/v1/tickers/AAPL/articles", json={"headline": headline, "url": "  "}
            )
            assert response.status_code == 201
            assert response.json()["url"] is None

        articles = await load_articles(ticker_id)
        assert [a.url for a in articles] == [None, None]

    @pytest.mark.asyncio
    async def test_article_for_unknown_ticker(self, client) -> None:
        response = await client.post("/api/v1/tickers/ZZZZ/articles", json={"headline": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_article(self, client, seed, load_articles) -> None:
        ticker_id = await seed("AAPL", headlines=("One", "Two"))
        [first, _] = await load_articles(ticker_id)

        response = await client.delete(f"/api/v1/tickers/AAPL/articles/{first.id}")
        assert response.status_code == 204
        assert [a.headline for a in await load_articles(ticker_id)] == ["Two"]

        again = await client.delete(f"/api/v1/tickers/AAPL/articles/{first.id}")
        assert again.status_code == 404


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_analyze_then_read_detail(self, client, seed) -> None:
        await seed("AAPL", headlines=("Apple beats earnings", "Apple raises guidance"))

        response = await client.post("/api/v1/tickers/aapl/analyze")
        assert response.status_code == 200
        assert response.json() == {"symbol": "AAPL", "analyzed": 2}

        detail = (await client.get("/api/v1/tickers/AAPL")).json()
        assert detail["average_sentiment_score"] == pytest.approx(0.25)
        assert [a["sentiment_analysis"]["model_name"] for a in detail["articles"]] == [
            "llama3",
            "llama3",
        ]

    @pytest.mark.asyncio
    async def test_inference_failure_is_bad_gateway(self, client, seed, inference) -> None:
        inference.script = [TransportError("Inference host unreachable")]
        await seed("AAPL", headlines=("Apple beats earnings",))

        response = await client.post("/api/v1/tickers/AAPL/analyze")

        assert response.status_code == 502
        assert "Inference host unreachable" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_ticker(self, client) -> None:
        assert (await client.post("/api/v1/tickers/ZZZZ/analyze")).status_code == 404

    @pytest.mark.asyncio
    async def test_engine_not_started(self, client) -> None:
        app.state.orchestrator = None
        assert (await client.post("/api/v1/tickers/AAPL/analyze")).status_code == 503


class TestRefresh:
    @pytest.mark.asyncio
    async def test_explicit_symbols(self, client, seed) -> None:
        await seed("AAPL", headlines=("Apple beats earnings",))

        response = await client.post("/api/v1/refresh", json={"symbols": ["AAPL", "ZZZZ"]})

        assert response.status_code == 200
        assert response.json() == {
            "updated": ["AAPL"],
            "skipped": [],
            "missing": ["ZZZZ"],
            "analyzed": 1,
        }
        detail = (await client.get("/api/v1/tickers/AAPL")).json()
        assert detail["current_price"] == 190.5

    @pytest.mark.asyncio
    async def test_defaults_to_configured_watchlist(self, client, seed, quotes, monkeypatch) -> None:
        monkeypatch.setattr("marketpulse.api.refresh.settings.WATCHLIST", ["AAPL", "MSFT", "META"])
        await seed("AAPL")

        body = (await client.post("/api/v1/refresh")).json()

        assert quotes.requested == [["AAPL", "MSFT", "META"]]
        assert body["updated"] == ["AAPL"]
        assert body["skipped"] == ["MSFT"]
        assert body["missing"] == ["META"]


class TestModels:
    @pytest.mark.asyncio
    async def test_list_models(self, client) -> None:
        assert (await client.get("/api/v1/models")).json() == ["llama3", "mistral"]

    @pytest.mark.asyncio
    async def test_select_model(self, client) -> None:
        assert (await client.get("/api/v1/models/current")).json() == {"name": "llama3"}

        response = await client.put("/api/v1/models/current", json={"name": "mistral"})

        assert response.status_code == 200
        assert (await client.get("/api/v1/models/current")).json() == {"name": "mistral"}

    @pytest.mark.asyncio
    async def test_blank_model_rejected(self, client) -> None:
        response = await client.put("/api/v1/models/current", json={"name": "   "})
        assert response.status_code == 422
        assert (await client.get("/api/v1/models/current")).json() == {"name": "llama3"}

    @pytest.mark.asyncio
    async def test_score_free_text(self, client, inference) -> None:
        response = await client.post("/api/v1/models/sentiment", json={"text": "Record quarter"})

        assert response.status_code == 200
        assert response.json() == {"score": 0.25, "summary": "Mildly positive.", "model_name": "llama3"}
        assert "Record quarter" in inference.calls[0][0]

    @pytest.mark.asyncio
    async def test_free_text_bad_model_output(self, client, inference) -> None:
        inference.script = [{"score": "high", "summary": "?"}]
        response = await client.post("/api/v1/models/sentiment", json={"text": "Record quarter"})
        assert response.status_code == 502


@pytest.mark.asyncio
async def test_symbol_search(client, quotes) -> None:
    quotes.matches = [
        {"symbol": "AAPL", "shortname": "Apple Inc.", "exchange": "NMS", "quoteType": "EQUITY"},
        {"shortname": "No symbol"},
    ]

    response = await client.get("/api/v1/tickers/search", params={"q": "apple"})

    assert response.status_code == 200
    assert response.json() == [
        {"symbol": "AAPL", "name": "Apple Inc.", "exchange": "NMS", "quote_type": "EQUITY"}
    ]
