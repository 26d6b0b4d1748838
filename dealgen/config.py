"""
Configuration management for the deal content pipeline.
Handles environment variables and application settings.
"""
import os
from typing import Optional, List, Tuple
from dotenv import load_dotenv

load_dotenv()


DEFAULT_MODEL_CANDIDATES = (
    "anthropic:claude-3-5-haiku-20241022,"
    "anthropic:claude-sonnet-4-20250514,"
    "gemini:gemini-2.5-flash"
)


class Config:
    """Application configuration loaded from environment variables."""

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Generative backends
    # Loaded from environment variables, NEVER hardcoded
    CLAUDE_API_KEY: Optional[str] = os.getenv("CLAUDE_API_KEY")
    GEMINI_API_KEY: Optional[str] = os.getenv("GEMINI_API_KEY")
    MODEL_CANDIDATES: str = os.getenv("MODEL_CANDIDATES", DEFAULT_MODEL_CANDIDATES)
    MODEL_MAX_TOKENS: int = int(os.getenv("MODEL_MAX_TOKENS", "1024"))

    # Retailer lookup APIs (optional - providers return no facts without a key)
    AMAZON_API_KEY: Optional[str] = os.getenv("AMAZON_API_KEY")
    AMAZON_API_HOST: str = os.getenv("AMAZON_API_HOST", "real-time-amazon-data.p.rapidapi.com")
    AMAZON_API_URL: str = os.getenv(
        "AMAZON_API_URL", "https://real-time-amazon-data.p.rapidapi.com/product-details"
    )
    AMAZON_COUNTRY: str = os.getenv("AMAZON_COUNTRY", "US")
    BESTBUY_API_KEY: Optional[str] = os.getenv("BESTBUY_API_KEY")
    BESTBUY_API_URL: str = os.getenv("BESTBUY_API_URL", "https://api.bestbuy.com/v1/products")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console

    # Request settings (seconds)
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "15"))
    MODEL_TIMEOUT: float = float(os.getenv("MODEL_TIMEOUT", "45"))

    @classmethod
    def get_model_candidates(cls) -> List[Tuple[str, str]]:
        """
        Parse MODEL_CANDIDATES into ordered (provider, model) pairs.

        Format: "provider:model,provider:model". Entries without a provider
        prefix are treated as anthropic models. Order is preserved, cheaper
        models are expected first.
        """
        candidates = []
        for entry in cls.MODEL_CANDIDATES.split(","):
            entry = entry.strip()
            if not entry:
                continue
            if ":" in entry:
                provider, model = entry.split(":", 1)
            else:
                provider, model = "anthropic", entry
            candidates.append((provider.strip().lower(), model.strip()))
        return candidates

    @classmethod
    def api_key_for(cls, store: str) -> Optional[str]:
        """Return the lookup API key configured for a store label."""
        keys = {
            "Amazon": cls.AMAZON_API_KEY,
            "Best Buy": cls.BESTBUY_API_KEY,
        }
        return keys.get(store)

    @classmethod
    def is_generation_configured(cls) -> bool:
        """Check if at least one generative backend has credentials."""
        return bool(cls.CLAUDE_API_KEY or cls.GEMINI_API_KEY)

    @classmethod
    def get_missing_generation_vars(cls) -> List[str]:
        """Return the backend credentials whose model candidates cannot run."""
        keys = {
            "anthropic": ("CLAUDE_API_KEY", cls.CLAUDE_API_KEY),
            "gemini": ("GEMINI_API_KEY", cls.GEMINI_API_KEY),
        }
        missing = []
        for provider, _ in cls.get_model_candidates():
            name, value = keys.get(provider, (None, None))
            if name and not value and name not in missing:
                missing.append(name)
        return missing


config = Config()
