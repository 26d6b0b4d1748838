"""
Data fusion for generated product content.

Retailer facts are ground truth for numbers and images, so a model can
never invent a price that the retailer reported. Prose (title, description,
selling points) always comes from the model.
"""
from typing import Optional

from dealgen.models.product import (
    Category,
    GeneratedContent,
    NormalizedProduct,
    ProductFacts,
    StoreKind,
)


def fuse(
    facts: Optional[ProductFacts],
    generated: GeneratedContent,
    store: Optional[StoreKind] = None,
    source_url: Optional[str] = None,
) -> NormalizedProduct:
    """
    Merge retailer facts and generated copy into a NormalizedProduct.

    Precedence:
        images          facts (non-empty) > generated > []
        current price   facts.price (non-zero) > generated estimate > 0
        original price  facts.msrp (non-zero) > generated estimate > 0
        category/store  value when present > "Other"
        prose           generated only
    """
    facts = facts or ProductFacts()

    return NormalizedProduct(
        title=generated.title,
        description=generated.description,
        why_buy=list(generated.why_buy),
        current_price=facts.price or generated.current_price or 0.0,
        original_price=facts.msrp or generated.original_price or 0.0,
        images=list(facts.images or generated.images or []),
        category=generated.category or Category.OTHER,
        store=store or StoreKind.OTHER,
        source_url=source_url,
    )
