"""
Amazon fact provider.
Looks products up by ASIN (or by raw URL when no ASIN can be found) through
a RapidAPI-style product data endpoint.
"""
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from dealgen.adapters.retailer import RetailerProvider, first_present, string_list
from dealgen.config import config
from dealgen.errors import ProviderUnavailable
from dealgen.models.product import ProductFacts, StoreKind, parse_price


# /dp/ID, /gp/product/ID, /product-reviews/ID, /slug/dp/ID, mobile and legacy paths
ASIN_PATTERN = re.compile(
    r"/(?:dp|gp/product|gp/aw/d|product-reviews|exec/obidos/ASIN|o/ASIN)/([A-Z0-9]{10})(?=[/?#]|$)",
    re.IGNORECASE,
)


def extract_asin(url: str) -> Optional[str]:
    """Extract the 10 character ASIN from an Amazon product URL."""
    if not url:
        return None
    path = urlparse(url).path or url
    match = ASIN_PATTERN.search(path)
    if not match:
        return None
    return match.group(1).upper()


def _price_value(value: Any) -> Optional[float]:
    # Offer blocks come either as plain values or as {"value": 49.99, "currency": "USD"}
    if isinstance(value, dict):
        value = first_present(value, "value", "amount", "raw")
    return parse_price(value)


class AmazonProvider(RetailerProvider):
    """Amazon product lookup keyed by ASIN."""

    store = StoreKind.AMAZON
    domains = ("amazon.", "amzn.to", "amzn.eu", "amzn.asia", "a.co")

    def __init__(
        self,
        api_url: str = config.AMAZON_API_URL,
        api_host: str = config.AMAZON_API_HOST,
        country: str = config.AMAZON_COUNTRY,
        **kwargs
    ):
        super().__init__(**kwargs)
        self.api_url = api_url
        self.api_host = api_host
        self.country = country

    def extract_identifier(self, url: str) -> Optional[str]:
        return extract_asin(url)

    async def _fetch(self, client: httpx.AsyncClient, url: str, api_key: str) -> Optional[ProductFacts]:
        asin = self.extract_identifier(url)
        params = {"country": self.country}
        if asin:
            params["asin"] = asin
        else:
            self.logger.log_decision(
                decision="lookup_by_url",
                reason="no_asin_in_url",
                url=url
            )
            params["url"] = url

        response = await client.get(
            self.api_url,
            params=params,
            headers={
                "X-RapidAPI-Key": api_key,
                "X-RapidAPI-Host": self.api_host,
            },
        )
        response.raise_for_status()
        payload = response.json()

        if isinstance(payload, dict) and str(payload.get("status", "OK")).upper() != "OK":
            raise ProviderUnavailable(f"Amazon lookup returned status {payload.get('status')}")

        data = self._product_payload(payload)
        if not data:
            raise ProviderUnavailable(f"Amazon lookup found no product for {asin or url}")

        return self._to_facts(data)

    def _product_payload(self, payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            return {}
        for key in ("data", "product"):
            if isinstance(payload.get(key), dict):
                return payload[key]
        return payload

    def _to_facts(self, data: Dict[str, Any]) -> ProductFacts:
        """Map an Amazon product payload onto ProductFacts."""
        # current offer first, then the generic price field
        price = _price_value(first_present(data, "offer_price", "product_price", "price"))
        # list price first, then recommended retail price
        msrp = _price_value(first_present(data, "list_price", "product_original_price", "rrp"))

        images = string_list(first_present(data, "images", "product_photos"))
        if not images:
            images = string_list(first_present(data, "main_image", "product_photo"))

        description = first_present(data, "description", "product_description", "about_product")
        if isinstance(description, list):
            description = " ".join(str(line) for line in description)

        return ProductFacts(
            title=first_present(data, "title", "product_title"),
            price=price,
            msrp=msrp,
            images=images,
            description=description,
        )
