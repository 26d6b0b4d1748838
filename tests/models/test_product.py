"""Tests for dealgen/models/product.py"""

import pytest
from pydantic import ValidationError

from dealgen.models.product import (
    Category,
    GeneratedContent,
    GenerationRequest,
    NormalizedProduct,
    ProductFacts,
    parse_category,
    parse_price,
)


class TestParsePrice:
    @pytest.mark.parametrize("value, expected", [
        (49.99, 49.99),
        (20, 20.0),
        ("$1,299.99", 1299.99),
        ("49.99 USD", 49.99),
        ("free shipping", None),
        (None, None),
        (True, None),
        (-5, None),
    ])
    def test_values(self, value, expected):
        assert parse_price(value) == expected


class TestParseCategory:
    def test_case_insensitive(self):
        assert parse_category(" kitchen ") == Category.KITCHEN

    def test_unknown(self):
        assert parse_category("Spaceships") is None
        assert parse_category(None) is None


class TestGeneratedContent:
    def test_coerces_loose_model_output(self):
        content = GeneratedContent.model_validate({
            "title": "Lamp",
            "description": "Bright.",
            "whyBuy": "- Dimmable\n- Warm light\n- USB-C",
            "currentPrice": "$19.99",
            "originalPrice": None,
            "category": "home",
            "images": ["https://img/1.jpg", "not-a-url", 7],
        })
        assert content.why_buy == ["Dimmable", "Warm light", "USB-C"]
        assert content.current_price == 19.99
        assert content.category == Category.HOME
        assert content.images == ["https://img/1.jpg"]

    def test_unknown_category_is_absent(self):
        content = GeneratedContent(title="T", description="D", why_buy=["a"], category="Toys")
        assert content.category is None

    @pytest.mark.parametrize("payload", [
        {"description": "D", "whyBuy": ["a"]},
        {"title": "", "description": "D", "whyBuy": ["a"]},
        {"title": "T", "description": "D", "whyBuy": []},
    ])
    def test_required_copy(self, payload):
        with pytest.raises(ValidationError):
            GeneratedContent.model_validate(payload)


class TestGenerationRequest:
    def test_facts_fill_context(self, earbuds_facts):
        request = GenerationRequest.build("Wireless Earbuds", "user text", "https://x", facts=earbuds_facts)
        assert request.context_title == "XYZ Earbuds"
        assert request.context_price == 49.99
        assert request.context_msrp == 79.99
        assert request.context_description == "user text"
        assert request.context_images == ["https://img/1.jpg"]

    def test_user_input_without_facts(self):
        request = GenerationRequest.build("Wireless Earbuds", "user text")
        assert request.context_title == "Wireless Earbuds"
        assert request.context_price is None
        assert request.context_images == []

    def test_facts_description_wins(self):
        request = GenerationRequest.build("Lamp", "user text", facts=ProductFacts(description="retailer text"))
        assert request.context_description == "retailer text"


class TestNormalizedProduct:
    def test_defaults_are_fully_populated(self):
        product = NormalizedProduct(title="T", description="D")
        data = product.model_dump(by_alias=True)
        assert data["currentPrice"] == 0
        assert data["originalPrice"] == 0
        assert data["images"] == []
        assert data["category"] == Category.OTHER
        assert data["store"] == "Other"
        assert data["whyBuy"] == []
