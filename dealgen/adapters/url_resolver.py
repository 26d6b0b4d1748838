"""
URL Resolver for retailer links.
Expands shortened affiliate links (amzn.to, bit.ly, ...) into the
canonical retailer URL so store detection and identifier extraction work.
"""
import re
from typing import Optional
from urllib.parse import urlparse

import httpx

from dealgen.config import config
from dealgen.utils.logger import LayerLogger


# Only these hosts are followed; every other URL passes through untouched
SHORTENER_DOMAINS = frozenset({
    "amzn.to",
    "a.co",
    "amzn.eu",
    "amzn.asia",
    "bit.ly",
    "tinyurl.com",
    "t.co",
    "bby.us",
})

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def with_scheme(url: str) -> str:
    """Prefix a pasted URL without a scheme (``amazon.com/dp/...``) with https."""
    if SCHEME_PATTERN.match(url):
        return url
    return "https://" + url.lstrip("/")


def is_shortened(url: str) -> bool:
    """Check if the URL's host is a known link shortener."""
    host = (urlparse(with_scheme(url)).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host in SHORTENER_DOMAINS


class URLResolver:
    """
    Best-effort redirect follower.

    One attempt, no retries. Failures return the original URL.
    """

    def __init__(
        self,
        timeout: float = config.REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport
        self.logger = LayerLogger("url_resolver")

    async def resolve(self, url: str) -> str:
        """
        Resolve a shortened link to its final destination.

        Args:
            url: The URL supplied by the caller

        Returns:
            The redirect target for shortener URLs, otherwise ``url`` unchanged
        """
        if not is_shortened(url):
            self.logger.log_decision(
                decision="skip_resolution",
                reason="not_a_shortener_domain",
                url=url
            )
            return url

        self.logger.log_action("resolve_url", "started", url=url)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(url, headers=BROWSER_HEADERS)
                resolved = str(response.url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.log_fallback(
                from_source="redirect_target",
                to_source="original_url",
                reason=f"Resolution failed: {str(e)}",
                url=url
            )
            return url

        self.logger.log_action(
            "resolve_url",
            "completed",
            url=url,
            resolved_url=resolved,
            status_code=response.status_code
        )
        return resolved
