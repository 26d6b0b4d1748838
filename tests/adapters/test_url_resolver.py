"""Tests for dealgen/adapters/url_resolver.py"""

import httpx
import pytest

from dealgen.adapters.url_resolver import URLResolver, is_shortened, with_scheme


class TestIsShortened:
    @pytest.mark.parametrize("url", [
        "https://amzn.to/3abcDEF",
        "https://a.co/d/1234567",
        "http://bit.ly/deal",
        "https://www.tinyurl.com/xyz",
        "amzn.to/3abcDEF",
    ])
    def test_known_shorteners(self, url):
        assert is_shortened(url) is True

    @pytest.mark.parametrize("url", [
        "https://www.amazon.com/dp/B000TEST01",
        "https://www.bestbuy.com/site/x/6505727.p?skuId=6505727",
        "https://notbit.ly.example.com/x",
        "not a url",
    ])
    def test_other_urls(self, url):
        assert is_shortened(url) is False


class TestWithScheme:
    @pytest.mark.parametrize("url, expected", [
        ("amazon.com/dp/B000TEST01", "https://amazon.com/dp/B000TEST01"),
        ("//www.amazon.com/dp/B000TEST01", "https://www.amazon.com/dp/B000TEST01"),
        ("http://bit.ly/deal", "http://bit.ly/deal"),
        ("HTTPS://amzn.to/x", "HTTPS://amzn.to/x"),
    ])
    def test_prefixes_only_missing_scheme(self, url, expected):
        assert with_scheme(url) == expected


class TestResolve:
    @pytest.mark.asyncio
    async def test_non_shortener_passes_through_without_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        resolver = URLResolver(transport=httpx.MockTransport(handler))
        url = "https://www.amazon.com/dp/B000TEST01?tag=deals-20"
        assert await resolver.resolve(url) == url

    @pytest.mark.asyncio
    async def test_follows_redirect(self):
        seen = []

        def handler(request):
            seen.append(request)
            if request.url.host == "amzn.to":
                return httpx.Response(301, headers={"Location": "https://www.amazon.com/dp/B08N5WRWNW"})
            return httpx.Response(200, text="<html></html>")

        resolver = URLResolver(transport=httpx.MockTransport(handler))
        resolved = await resolver.resolve("https://amzn.to/3abcDEF")

        assert resolved == "https://www.amazon.com/dp/B08N5WRWNW"
        assert "Mozilla" in seen[0].headers["User-Agent"]

    @pytest.mark.asyncio
    async def test_network_error_returns_original(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        resolver = URLResolver(transport=httpx.MockTransport(handler))
        assert await resolver.resolve("https://bit.ly/deal") == "https://bit.ly/deal"

    @pytest.mark.asyncio
    async def test_timeout_returns_original(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        resolver = URLResolver(transport=httpx.MockTransport(handler))
        assert await resolver.resolve("https://amzn.to/slow") == "https://amzn.to/slow"
