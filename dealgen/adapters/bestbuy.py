"""
Best Buy fact provider.
Uses the Best Buy Products API, keyed by the numeric SKU in the product URL.
"""
import re
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlparse

import httpx

from dealgen.adapters.retailer import RetailerProvider, first_present, string_list
from dealgen.config import config
from dealgen.errors import ProviderUnavailable
from dealgen.models.product import ProductFacts, StoreKind, parse_price


SKU_PATH_PATTERN = re.compile(r"/(\d{5,9})\.p(?:/|$)")

PRODUCT_FIELDS = ",".join([
    "sku",
    "name",
    "salePrice",
    "regularPrice",
    "longDescription",
    "shortDescription",
    "images",
    "largeImage",
    "image",
])


def extract_sku(url: str) -> Optional[str]:
    """
    Extract the numeric SKU from a Best Buy URL.

    The skuId query parameter wins; the "/1234567.p" path segment is the fallback.
    """
    if not url:
        return None
    parsed = urlparse(url)
    sku_values = parse_qs(parsed.query).get("skuId", [])
    for value in sku_values:
        if value.isdigit():
            return value
    match = SKU_PATH_PATTERN.search(parsed.path)
    if match:
        return match.group(1)
    return None


class BestBuyProvider(RetailerProvider):
    """Best Buy product lookup keyed by SKU."""

    store = StoreKind.BEST_BUY
    domains = ("bestbuy.com", "bby.us")

    def __init__(self, api_url: str = config.BESTBUY_API_URL, **kwargs):
        super().__init__(**kwargs)
        self.api_url = api_url.rstrip("/")

    def extract_identifier(self, url: str) -> Optional[str]:
        return extract_sku(url)

    async def _fetch(self, client: httpx.AsyncClient, url: str, api_key: str) -> Optional[ProductFacts]:
        sku = self.extract_identifier(url)
        if not sku:
            raise ProviderUnavailable(f"No Best Buy SKU found in {url}")

        response = await client.get(
            f"{self.api_url}/{sku}.json",
            params={"apiKey": api_key, "show": PRODUCT_FIELDS},
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict) or not data:
            raise ProviderUnavailable(f"Best Buy lookup found no product for SKU {sku}")

        return self._to_facts(data)

    def _to_facts(self, data: Dict[str, Any]) -> ProductFacts:
        """Map a Best Buy product payload onto ProductFacts."""
        images = string_list(data.get("images"))
        if not images:
            images = string_list(first_present(data, "largeImage", "image"))

        return ProductFacts(
            title=data.get("name"),
            price=parse_price(first_present(data, "salePrice", "regularPrice")),
            msrp=parse_price(data.get("regularPrice")),
            images=images,
            description=first_present(data, "longDescription", "shortDescription"),
        )
