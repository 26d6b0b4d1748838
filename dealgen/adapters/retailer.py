"""
Retailer fact providers.

A provider knows which domains belong to its store, how to pull the
retailer's product identifier out of a URL, and how to turn the retailer's
lookup API response into ProductFacts. The registry maps URLs to stores and
stores to providers, so adding a retailer never touches the pipeline.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

import httpx

from dealgen.adapters.url_resolver import with_scheme
from dealgen.config import config
from dealgen.errors import ProviderUnavailable
from dealgen.models.product import ProductFacts, StoreKind
from dealgen.utils.logger import LayerLogger


class RetailerProvider:
    """
    Base class for retailer fact providers.

    Subclasses set ``store`` and ``domains`` and implement
    ``extract_identifier`` and ``_fetch``. ``fetch_facts`` never raises.
    """

    store: StoreKind = StoreKind.OTHER
    domains: Tuple[str, ...] = ()

    def __init__(
        self,
        timeout: float = config.REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport
        self.logger = LayerLogger(f"{self.store.name.lower()}_provider")

    def detect(self, url: str) -> bool:
        """Check if the URL belongs to this provider's store."""
        return url_matches(url, self.domains)

    def extract_identifier(self, url: str) -> Optional[str]:
        raise NotImplementedError

    async def fetch_facts(self, url: str, api_key: Optional[str]) -> Optional[ProductFacts]:
        """
        Fetch retailer facts for a product URL.

        Args:
            url: Canonical (already resolved) product URL
            api_key: Lookup API credential for this retailer

        Returns:
            ProductFacts, or None when the retailer could not deliver any
        """
        self.logger.log_action("fetch_facts", "started", url=url, store=self.store.value)

        try:
            if not api_key:
                raise ProviderUnavailable(f"No API key configured for {self.store.value}")

            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                facts = await self._fetch(client, url, api_key)
        except Exception as e:
            self.logger.log_error(
                f"Fact lookup failed: {str(e)}",
                error_type=type(e).__name__,
                url=url,
                store=self.store.value
            )
            return None

        if facts is None or facts.is_empty():
            self.logger.log_action("fetch_facts", "empty", url=url, store=self.store.value)
            return None

        self.logger.log_action(
            "fetch_facts",
            "completed",
            url=url,
            store=self.store.value,
            has_title=bool(facts.title),
            price=facts.price,
            msrp=facts.msrp,
            images_count=len(facts.images)
        )
        return facts

    async def _fetch(self, client: httpx.AsyncClient, url: str, api_key: str) -> Optional[ProductFacts]:
        raise NotImplementedError


def url_matches(url: str, patterns: Sequence[str]) -> bool:
    """
    Match a URL's host against domain patterns.

    Patterns ending in "." (e.g. "amazon.") match any TLD; other patterns
    match the host itself or any subdomain of it.
    """
    host = (urlparse(with_scheme(url)).hostname or "").lower()
    if not host:
        return False
    for pattern in patterns:
        if pattern.endswith("."):
            labels = host.split(".")
            if pattern[:-1] in labels[:-1]:
                return True
        elif host == pattern or host.endswith("." + pattern):
            return True
    return False


def first_present(data: Dict[str, Any], *keys: str) -> Any:
    """Return the first truthy value among ``keys`` in ``data``."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


def string_list(value: Any) -> List[str]:
    """
    Normalize an image-like value into a list of URL strings.

    Accepts a string, a {"link"|"url"|"href": ...} dict, or a list of either.
    """
    if not value:
        return []
    if isinstance(value, (str, dict)):
        value = [value]
    urls = []
    for item in value:
        if isinstance(item, dict):
            item = first_present(item, "link", "url", "href")
        if item and isinstance(item, str):
            urls.append(item)
    return urls


class ProviderRegistry:
    """
    Maps URLs to StoreKind and StoreKind to providers.

    ``label_domains`` covers stores that are detected for labelling only
    and have no provider.
    """

    DEFAULT_LABEL_DOMAINS: Dict[StoreKind, Tuple[str, ...]] = {
        StoreKind.WALMART: ("walmart.com",),
        StoreKind.TARGET: ("target.com",),
    }

    def __init__(
        self,
        providers: Optional[Sequence[RetailerProvider]] = None,
        label_domains: Optional[Dict[StoreKind, Tuple[str, ...]]] = None,
        api_keys: Optional[Dict[StoreKind, Optional[str]]] = None,
    ):
        self.providers: Dict[StoreKind, RetailerProvider] = {}
        for provider in providers or []:
            self.register(provider)
        self.label_domains = dict(self.DEFAULT_LABEL_DOMAINS if label_domains is None else label_domains)
        self.api_keys = api_keys
        self.logger = LayerLogger("provider_registry")

    def register(self, provider: RetailerProvider):
        """Register (or replace) the provider for its store."""
        self.providers[provider.store] = provider

    def detect_store(self, url: Optional[str]) -> StoreKind:
        """Detect which store a URL belongs to. Unknown hosts map to OTHER."""
        if not url:
            return StoreKind.OTHER
        for store, provider in self.providers.items():
            if provider.detect(url):
                return store
        for store, domains in self.label_domains.items():
            if url_matches(url, domains):
                return store
        return StoreKind.OTHER

    def provider_for(self, store: StoreKind) -> Optional[RetailerProvider]:
        return self.providers.get(store)

    async def fetch_facts(self, url: str, store: Optional[StoreKind] = None) -> Optional[ProductFacts]:
        """Detect the store (unless given) and fetch facts from its provider."""
        store = store or self.detect_store(url)
        provider = self.provider_for(store)
        if provider is None:
            self.logger.log_decision(
                decision="skip_facts",
                reason="no_provider_for_store",
                url=url,
                store=store.value
            )
            return None
        return await provider.fetch_facts(url, self.api_key_for(store))

    def api_key_for(self, store: StoreKind) -> Optional[str]:
        if self.api_keys is not None:
            return self.api_keys.get(store)
        return config.api_key_for(store.value)
