"""
Trend Scout Layer.
Turns a category query and optional search results into product
suggestions for the catalog's review queue.
"""
from typing import List, Optional

from pydantic import ValidationError

from dealgen.adapters.retailer import ProviderRegistry
from dealgen.errors import AllBackendsFailed
from dealgen.layers.model_fallback import ModelFallbackLayer
from dealgen.models.product import SearchResult, TrendSuggestion
from dealgen.prompts import trends_prompt
from dealgen.utils.logger import LayerLogger


class TrendScout:
    """Suggests trending products using the model fallback chain."""

    def __init__(self, generator: ModelFallbackLayer, registry: ProviderRegistry):
        self.generator = generator
        self.registry = registry
        self.logger = LayerLogger("trend_scout")

    async def find_trends(
        self,
        query: Optional[str] = None,
        results: Optional[List[SearchResult]] = None,
    ) -> List[TrendSuggestion]:
        """
        Ask the models for trending products.

        Args:
            query: Comma-separated category/topic list
            results: Search results to analyze (optional)

        Returns:
            Suggestions; empty when every model candidate failed
        """
        queries = (query or "bestselling products").split(",")
        self.logger.log_action(
            "find_trends",
            "started",
            queries=queries,
            results_count=len(results or [])
        )

        try:
            items = await self.generator.generate(trends_prompt(queries, results), shape="array")
        except AllBackendsFailed as e:
            self.logger.log_error(str(e), error_type="all_backends_failed")
            return []

        suggestions = []
        for item in items:
            if not isinstance(item, dict):
                continue
            source_url = str(item.get("sourceUrl") or "")
            try:
                suggestion = TrendSuggestion(
                    product_name=str(item.get("productName") or "").strip(),
                    source_url=source_url,
                    reason_for_suggestion=str(item.get("reasonForSuggestion") or ""),
                    category=item.get("category"),
                    store=self.registry.detect_store(source_url),
                )
            except ValidationError as e:
                self.logger.log_decision(
                    decision="skip_suggestion",
                    reason=f"invalid_item: {e.error_count()} errors",
                    url=source_url or None
                )
                continue
            suggestions.append(suggestion)

        self.logger.log_action("find_trends", "completed", suggestions_count=len(suggestions))
        return suggestions
