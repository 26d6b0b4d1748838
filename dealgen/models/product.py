"""
Product models for the deal content pipeline.

ProductFacts, GenerationRequest and GeneratedContent live for one pipeline
invocation only. NormalizedProduct is the pipeline's output and is owned by
the caller afterwards; it is always fully populated.
"""
import re
from typing import Any, List, Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class StoreKind(str, Enum):
    """Retailer a product URL belongs to."""
    AMAZON = "Amazon"
    BEST_BUY = "Best Buy"
    WALMART = "Walmart"
    TARGET = "Target"
    OTHER = "Other"


class Category(str, Enum):
    """Catalog categories used by the storefront filters."""
    ELECTRONICS = "Electronics"
    FASHION = "Fashion"
    HOME = "Home"
    GAMING = "Gaming"
    HEALTH = "Health"
    OUTDOOR = "Outdoor"
    KITCHEN = "Kitchen"
    OTHER = "Other"


_PRICE_RE = re.compile(r"-?\d+(?:\.\d+)?")


def parse_price(value: Any) -> Optional[float]:
    """
    Coerce a price value into a float.

    Accepts numbers and strings such as "$1,299.99" or "49.99 USD".
    Returns None when no number can be found or the value is negative.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        price = float(value)
    else:
        match = _PRICE_RE.search(str(value).replace(",", ""))
        if not match:
            return None
        price = float(match.group())
    if price < 0:
        return None
    return round(price, 2)


def parse_category(value: Any) -> Optional[Category]:
    """Map free-form category text onto the Category enum (case-insensitive)."""
    if isinstance(value, Category):
        return value
    if not value or not isinstance(value, str):
        return None
    wanted = value.strip().lower()
    for category in Category:
        if category.value.lower() == wanted:
            return category
    return None


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys (productName, whyBuy...)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductFacts(CamelModel):
    """Verifiable retailer data. Every field may be absent."""
    title: Optional[str] = None
    price: Optional[float] = None
    msrp: Optional[float] = None
    images: List[str] = Field(default_factory=list)
    description: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.title or self.price or self.msrp or self.images or self.description)


class GenerationRequest(CamelModel):
    """
    Input to prompt building.

    The context_* fields hold the fused view of user input and retailer
    facts, filled with the best available value before prompting.
    """
    product_name: str
    product_description: Optional[str] = None
    product_url: Optional[str] = None
    store: StoreKind = StoreKind.OTHER

    context_title: str
    context_price: Optional[float] = None
    context_msrp: Optional[float] = None
    context_description: Optional[str] = None
    context_images: List[str] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        product_name: str,
        product_description: Optional[str] = None,
        product_url: Optional[str] = None,
        facts: Optional[ProductFacts] = None,
        store: StoreKind = StoreKind.OTHER,
    ) -> "GenerationRequest":
        """Fuse user input with retailer facts (facts win when present)."""
        facts = facts or ProductFacts()
        return cls(
            product_name=product_name,
            product_description=product_description,
            product_url=product_url,
            store=store,
            context_title=facts.title or product_name,
            context_price=facts.price or None,
            context_msrp=facts.msrp or None,
            context_description=facts.description or product_description,
            context_images=list(facts.images),
        )


class GeneratedContent(CamelModel):
    """Marketing copy extracted from a model response."""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    why_buy: List[str] = Field(min_length=1)
    current_price: Optional[float] = None
    original_price: Optional[float] = None
    category: Optional[Category] = None
    images: Optional[List[str]] = None

    @field_validator("why_buy", mode="before")
    @classmethod
    def _split_why_buy(cls, value: Any) -> Any:
        # Some models return the selling points as one newline separated string
        if isinstance(value, str):
            return [line.strip(" -*•") for line in value.splitlines() if line.strip(" -*•")]
        if isinstance(value, list):
            return [str(item).strip() for item in value if str(item).strip()]
        return value

    @field_validator("current_price", "original_price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Optional[float]:
        return parse_price(value)

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> Optional[Category]:
        return parse_category(value)

    @field_validator("images", mode="before")
    @classmethod
    def _keep_url_strings(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            return [item for item in value if isinstance(item, str) and item.startswith("http")]
        return value


class NormalizedProduct(CamelModel):
    """
    Publishable product record returned to the catalog.

    Unresolved data degrades to zero, empty or "Other"; nothing is None
    except the optional source URL and failure reason.
    """
    title: str
    description: str
    why_buy: List[str] = Field(default_factory=list)
    current_price: float = 0.0
    original_price: float = 0.0
    images: List[str] = Field(default_factory=list)
    category: Category = Category.OTHER
    store: StoreKind = StoreKind.OTHER

    source_url: Optional[str] = None
    is_draft: bool = False
    failure_reason: Optional[str] = None

    def to_json_bytes(self) -> bytes:
        """Serialize as UTF-8 JSON with camelCase keys."""
        return self.model_dump_json(by_alias=True).encode("utf-8")


class SearchResult(CamelModel):
    """One search hit handed to the trend scout."""
    title: str
    url: str
    content: str = ""


class TrendSuggestion(CamelModel):
    """A product suggested by the trend scout."""
    product_name: str = Field(min_length=1)
    source_url: str = ""
    reason_for_suggestion: str = ""
    category: Category = Category.OTHER
    store: StoreKind = StoreKind.OTHER

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> Category:
        return parse_category(value) or Category.OTHER
