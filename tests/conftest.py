"""Shared test fixtures."""

import json

import httpx
import pytest

from dealgen.adapters.retailer import ProviderRegistry, RetailerProvider
from dealgen.adapters.url_resolver import URLResolver
from dealgen.layers.model_fallback import ModelCandidate, ModelFallbackLayer
from dealgen.layers.pipeline import ProductContentPipeline
from dealgen.models.product import ProductFacts, StoreKind


class FakeBackend:
    """Generation backend returning scripted responses per model id."""

    def __init__(self, responses):
        # model id -> text, or an exception instance to raise
        self.responses = responses
        self.calls = []

    async def complete(self, prompt, model):
        self.calls.append(model)
        response = self.responses[model]
        if isinstance(response, BaseException):
            raise response
        return response


class FakeProvider(RetailerProvider):
    """Amazon-labelled provider returning fixed facts without network."""

    store = StoreKind.AMAZON
    domains = ("amazon.",)

    def __init__(self, facts=None, error=None):
        super().__init__()
        self.facts = facts
        self.error = error
        self.fetched_urls = []

    def extract_identifier(self, url):
        return None

    async def _fetch(self, client, url, api_key):
        self.fetched_urls.append(url)
        if self.error is not None:
            raise self.error
        return self.facts


class NetworkForbiddenResolver(URLResolver):
    """Resolver that fails the test if it is ever asked to resolve."""

    async def resolve(self, url):
        raise AssertionError(f"unexpected resolution of {url}")


@pytest.fixture
def generated_payload():
    """A well-formed model answer."""
    return {
        "title": "XYZ Wireless Earbuds - Crystal Clear Sound",
        "description": "Compact earbuds with punchy bass and all-day comfort.",
        "whyBuy": [
            "Active noise cancelling",
            "24-hour battery with case",
            "IPX5 sweat resistance",
        ],
        "currentPrice": 59.99,
        "originalPrice": 99.99,
        "category": "Electronics",
        "images": ["https://model.example.com/guess.jpg"],
    }


@pytest.fixture
def generated_text(generated_payload):
    return json.dumps(generated_payload)


@pytest.fixture
def earbuds_facts():
    return ProductFacts(
        title="XYZ Earbuds",
        price=49.99,
        msrp=79.99,
        images=["https://img/1.jpg"],
    )


@pytest.fixture
def candidates():
    return [
        ModelCandidate("fake", "model-a"),
        ModelCandidate("fake", "model-b"),
        ModelCandidate("fake", "model-c"),
    ]


@pytest.fixture
def make_backend():
    return FakeBackend


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def make_pipeline(candidates):
    """Build a pipeline around a fake backend and an optional fake provider."""

    def _make(backend, provider=None, resolver=None):
        registry = ProviderRegistry(
            providers=[provider] if provider else [],
            api_keys={StoreKind.AMAZON: "test-key"},
        )
        generator = ModelFallbackLayer(backends={"fake": backend}, candidates=candidates, timeout=5)
        return ProductContentPipeline(
            resolver=resolver or URLResolver(),
            registry=registry,
            generator=generator,
        )

    return _make


@pytest.fixture
def forbidden_resolver():
    return NetworkForbiddenResolver()


@pytest.fixture
def json_transport():
    """Build an httpx.MockTransport answering every request with one JSON payload."""

    def _make(payload, status_code=200, seen=None):
        def handler(request):
            if seen is not None:
                seen.append(request)
            return httpx.Response(status_code, json=payload)

        return httpx.MockTransport(handler)

    return _make
