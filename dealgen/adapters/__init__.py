"""Adapters package initialization."""
from dealgen.adapters.url_resolver import URLResolver
from dealgen.adapters.retailer import RetailerProvider, ProviderRegistry
from dealgen.adapters.amazon import AmazonProvider
from dealgen.adapters.bestbuy import BestBuyProvider
from dealgen.adapters.claude_client import ClaudeClient
from dealgen.adapters.gemini_client import GeminiClient

__all__ = [
    "URLResolver",
    "RetailerProvider",
    "ProviderRegistry",
    "AmazonProvider",
    "BestBuyProvider",
    "ClaudeClient",
    "GeminiClient",
]
