"""Prompt builders for product copy and trend suggestions."""
from typing import List, Optional, Sequence

from dealgen.models.product import Category, GenerationRequest, SearchResult


def category_names() -> str:
    return ", ".join(c.value for c in Category)


def product_content_prompt(request: GenerationRequest) -> str:
    """
    Build the product copy prompt.

    Only context fields that are present are included, and retailer data is
    labelled so the model treats it as fact.
    """
    parts = [
        f"Product name: {request.product_name}",
        f"Retailer title: {request.context_title}",
    ]
    if request.store.value != "Other":
        parts.append(f"Store: {request.store.value}")
    if request.product_url:
        parts.append(f"Product URL: {request.product_url}")
    if request.context_price:
        parts.append(f"Current price (retailer data): {request.context_price:.2f}")
    if request.context_msrp:
        parts.append(f"List price (retailer data): {request.context_msrp:.2f}")
    if request.context_description:
        parts.append(f"Description: {request.context_description[:2000]}")
    if request.context_images:
        parts.append(f"Images available: {len(request.context_images)}")

    product_block = "\n".join(parts)

    return f"""Write catalog copy for this product deal.

{product_block}

Return ONLY a JSON object with exactly these keys:
{{
  "title": "Short catchy product title (max 80 chars)",
  "description": "2-3 sentence engaging description",
  "whyBuy": ["Reason 1", "Reason 2", "Reason 3"],
  "currentPrice": number or null,
  "originalPrice": number or null,
  "category": one of [{category_names()}],
  "images": []
}}

Rules:
- whyBuy has exactly 3 short selling points
- Use the retailer prices above when given, otherwise your best estimate or null
- No markdown, no code fences, no text outside the JSON"""


def trends_prompt(queries: Sequence[str], results: Optional[List[SearchResult]] = None) -> str:
    """Build the trend analysis prompt over optional search results."""
    topics = ", ".join(q.strip() for q in queries if q.strip()) or "bestselling products"

    if results:
        listing = "\n\n".join(
            f"{i}. Title: {r.title}\nURL: {r.url}\nContent: {r.content}"
            for i, r in enumerate(results, start=1)
        )
        source_block = f"Search results:\n{listing}"
        task = "For each result, identify a single main product, extract its name, and a concise reason why it's trending."
    else:
        source_block = "No search results were provided."
        task = "Suggest up to 5 specific products that are currently popular, with a concise reason for each."

    return f"""You are a trend analyst for an affiliate marketing site. Find trending products in the category: "{topics}".
{task}

{source_block}

IMPORTANT: Return ONLY a valid JSON array of objects. No other text or markdown formatting.
Format your response EXACTLY like this:
[
  {{"productName": "Product A", "sourceUrl": "...", "reasonForSuggestion": "...", "category": "one of [{category_names()}]"}}
]"""
