"""Tests for dealgen/main.py"""

import pytest
from fastapi.testclient import TestClient

from dealgen import main
from dealgen.config import Config
from dealgen.layers.model_fallback import ModelCandidate, ModelFallbackLayer
from dealgen.layers.trends import TrendScout


@pytest.fixture
def client():
    return TestClient(main.app)


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_reports_missing_backend_credentials(self, client, monkeypatch):
        monkeypatch.setattr(Config, "MODEL_CANDIDATES", "anthropic:claude-3-5-haiku-20241022,gemini:gemini-2.5-flash")
        monkeypatch.setattr(Config, "CLAUDE_API_KEY", "sk-test")
        monkeypatch.setattr(Config, "GEMINI_API_KEY", None)

        body = client.get("/api/health").json()

        assert body["generation_configured"] is True
        assert body["missing_generation_vars"] == ["GEMINI_API_KEY"]


class TestGenerateProduct:
    def test_missing_name_is_400(self, client):
        response = client.post("/api/products/generate", json={"productUrl": "https://amazon.com/dp/B000TEST01"})
        assert response.status_code == 400
        assert "productName" in response.json()["detail"]

    def test_returns_product_json(self, client, monkeypatch, make_backend, make_provider, make_pipeline,
                                  earbuds_facts, generated_text):
        pipeline = make_pipeline(make_backend({"model-a": generated_text}), make_provider(facts=earbuds_facts))
        monkeypatch.setattr(main, "pipeline", pipeline)

        response = client.post("/api/products/generate", json={
            "productName": "Wireless Earbuds",
            "productUrl": "https://amazon.com/dp/B000TEST01",
        })

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        data = response.json()
        assert data["currentPrice"] == 49.99
        assert data["images"] == ["https://img/1.jpg"]
        assert data["isDraft"] is False

    def test_draft_is_still_200(self, client, monkeypatch, make_backend, make_pipeline):
        backend = make_backend({
            "model-a": RuntimeError("a"),
            "model-b": RuntimeError("b"),
            "model-c": RuntimeError("c"),
        })
        monkeypatch.setattr(main, "pipeline", make_pipeline(backend))

        response = client.post("/api/products/generate", json={"productName": "Kettle"})

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Kettle (Draft)"
        assert data["isDraft"] is True


class TestTrends:
    def test_returns_suggestions(self, client, monkeypatch, make_backend):
        backend = make_backend({"model-a": '[{"productName": "Kettle", "category": "Kitchen"}]'})
        generator = ModelFallbackLayer(backends={"fake": backend}, candidates=[ModelCandidate("fake", "model-a")])
        monkeypatch.setattr(main, "trend_scout", TrendScout(generator=generator, registry=main.registry))

        response = client.post("/api/trends", json={"query": "kitchen"})

        assert response.status_code == 200
        assert response.json() == [{
            "productName": "Kettle",
            "sourceUrl": "",
            "reasonForSuggestion": "",
            "category": "Kitchen",
            "store": "Other",
        }]
