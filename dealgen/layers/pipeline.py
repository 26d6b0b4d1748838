"""
Product Content Pipeline - the coordinator.

Sequences URL resolution, retailer facts, generation and fusion for one
request. Failures below this layer arrive as missing facts or as
AllBackendsFailed; the latter turns into a clearly flagged draft product.
Only InvalidRequest leaves this layer as an exception.
"""
from enum import Enum
from typing import Optional

from dealgen.adapters.url_resolver import URLResolver, with_scheme
from dealgen.adapters.retailer import ProviderRegistry
from dealgen.errors import AllBackendsFailed, InvalidRequest
from dealgen.layers.fusion import fuse
from dealgen.layers.model_fallback import ModelFallbackLayer
from dealgen.models.product import (
    GenerationRequest,
    NormalizedProduct,
    ProductFacts,
    StoreKind,
)
from dealgen.prompts import product_content_prompt
from dealgen.utils.logger import LayerLogger


DRAFT_WHY_BUY = [
    "Manual update required",
    "Verify AI provider credentials and model configuration",
    "Check the retailer link and regenerate content",
]


class PipelineState(str, Enum):
    """Lifecycle of one pipeline request."""
    IDLE = "idle"
    RESOLVING_INPUT = "resolving_input"
    FETCHING_FACTS = "fetching_facts"
    GENERATING = "generating"
    FUSING = "fusing"
    DONE = "done"
    DEGRADED = "degraded"


def build_draft(
    product_name: str,
    reason: str,
    store: StoreKind = StoreKind.OTHER,
    source_url: Optional[str] = None,
) -> NormalizedProduct:
    """Fabricate the draft product returned when generation is impossible."""
    return NormalizedProduct(
        title=f"{product_name} (Draft)",
        description=f"AI content generation failed: {reason}. Please update this product manually.",
        why_buy=list(DRAFT_WHY_BUY),
        current_price=0.0,
        original_price=0.0,
        images=[],
        store=store,
        source_url=source_url,
        is_draft=True,
        failure_reason=reason,
    )


class ProductContentPipeline:
    """
    Coordinator for product content synthesis.

    Stateless between calls: every collaborator is passed in at construction
    and each run keeps its state in local variables, so concurrent runs share
    nothing mutable.
    """

    def __init__(
        self,
        resolver: URLResolver,
        registry: ProviderRegistry,
        generator: ModelFallbackLayer,
    ):
        self.resolver = resolver
        self.registry = registry
        self.generator = generator
        self.logger = LayerLogger("product_pipeline")

    def _transition(self, state: PipelineState, product_name: str, **extra) -> PipelineState:
        self.logger.log_state_change(state.value, product_name, **extra)
        return state

    async def run(
        self,
        product_name: Optional[str],
        product_description: Optional[str] = None,
        product_url: Optional[str] = None,
    ) -> NormalizedProduct:
        """
        Produce a NormalizedProduct for one catalog entry.

        Args:
            product_name: Product name or topic (required)
            product_description: Optional caller-supplied description
            product_url: Optional retailer or affiliate URL

        Returns:
            A fully populated product, or a draft product when generation failed

        Raises:
            InvalidRequest: product_name is missing or blank
        """
        if not product_name or not product_name.strip():
            raise InvalidRequest("productName is required")
        product_name = product_name.strip()
        product_url = (product_url or "").strip() or None
        if product_url:
            product_url = with_scheme(product_url)
        product_description = (product_description or "").strip() or None

        state = self._transition(PipelineState.IDLE, product_name, has_url=bool(product_url))
        store = StoreKind.OTHER
        facts: Optional[ProductFacts] = None

        if product_url:
            try:
                state = self._transition(PipelineState.RESOLVING_INPUT, product_name)
                product_url = await self.resolver.resolve(product_url)
                store = self.registry.detect_store(product_url)

                state = self._transition(PipelineState.FETCHING_FACTS, product_name, store=store.value)
                facts = await self.registry.fetch_facts(product_url, store)
            except Exception as e:
                self.logger.log_fallback(
                    from_source=state.value,
                    to_source="no_facts",
                    reason=f"Unexpected fault: {str(e)}",
                    url=product_url
                )
                facts = None

        request = GenerationRequest.build(
            product_name=product_name,
            product_description=product_description,
            product_url=product_url,
            facts=facts,
            store=store,
        )

        state = self._transition(PipelineState.GENERATING, product_name, has_facts=facts is not None)
        try:
            generated = await self.generator.generate_content(product_content_prompt(request))
        except AllBackendsFailed as e:
            reason = str(e.last_error) if e.last_error else str(e)
            self._transition(PipelineState.DEGRADED, product_name, reason=reason[:300])
            return build_draft(product_name, reason or type(e.last_error).__name__, store, product_url)

        state = self._transition(PipelineState.FUSING, product_name)
        product = fuse(facts, generated, store=store, source_url=product_url)

        self._transition(
            PipelineState.DONE,
            product_name,
            title=product.title,
            current_price=product.current_price,
            original_price=product.original_price,
            images_count=len(product.images),
            category=product.category.value,
            store=product.store.value
        )
        return product

    async def generate_json(
        self,
        product_name: Optional[str],
        product_description: Optional[str] = None,
        product_url: Optional[str] = None,
    ) -> bytes:
        """Run the pipeline and return the product as UTF-8 encoded JSON."""
        product = await self.run(product_name, product_description, product_url)
        return product.to_json_bytes()
