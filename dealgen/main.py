"""
Deal Content Pipeline - FastAPI Application
Main entry point with REST API endpoints used by the catalog's admin tools.
"""
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from dealgen import __version__
from dealgen.config import config
from dealgen.utils.logger import get_logger, set_trace_id
from dealgen.adapters import (
    AmazonProvider,
    BestBuyProvider,
    ClaudeClient,
    GeminiClient,
    ProviderRegistry,
    URLResolver,
)
from dealgen.errors import InvalidRequest
from dealgen.layers import ModelFallbackLayer, ProductContentPipeline, TrendScout
from dealgen.models.product import SearchResult, TrendSuggestion


def build_registry() -> ProviderRegistry:
    """Registry with every retailer that has a lookup provider."""
    return ProviderRegistry(providers=[AmazonProvider(), BestBuyProvider()])


def build_generator() -> ModelFallbackLayer:
    """Fallback chain over the configured model candidates."""
    return ModelFallbackLayer(
        backends={
            ClaudeClient.provider: ClaudeClient(),
            GeminiClient.provider: GeminiClient(),
        }
    )


# Initialize FastAPI app
app = FastAPI(
    title="Deal Content Pipeline",
    description="Generates publishable product records from retailer data and AI copy",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Process-scoped collaborators
registry = build_registry()
generator = build_generator()
pipeline = ProductContentPipeline(resolver=URLResolver(), registry=registry, generator=generator)
trend_scout = TrendScout(generator=generator, registry=registry)

logger = get_logger("main")


# Request/Response models
class GenerateProductRequest(BaseModel):
    """Request model for product content generation."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_name: Optional[str] = None
    product_description: Optional[str] = None
    product_url: Optional[str] = None


class FindTrendsRequest(BaseModel):
    """Request model for trend suggestions."""
    query: Optional[str] = None
    results: List[SearchResult] = []


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "generation_configured": config.is_generation_configured(),
        "missing_generation_vars": config.get_missing_generation_vars(),
        "model_candidates": [f"{p}:{m}" for p, m in config.get_model_candidates()],
    }


@app.post("/api/products/generate")
async def generate_product_content(request: GenerateProductRequest):
    """
    Generate a normalized product record.

    Always answers with a product; when every model failed the product is a
    draft (isDraft=true) carrying the failure reason.
    """
    trace_id = set_trace_id()

    logger.info(
        "product_generation_request",
        product_name=request.product_name,
        product_url=request.product_url,
        trace_id=trace_id
    )

    try:
        body = await pipeline.generate_json(
            request.product_name,
            request.product_description,
            request.product_url,
        )
    except InvalidRequest as e:
        logger.warning("product_generation_rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("product_generation_error", error=str(e), error_type=type(e).__name__)
        raise HTTPException(status_code=500, detail="Product generation failed unexpectedly")

    return Response(
        content=body,
        media_type="application/json",
        headers={"X-Trace-Id": trace_id},
    )


@app.post("/api/trends", response_model=List[TrendSuggestion], response_model_by_alias=True)
async def find_trends(request: FindTrendsRequest):
    """Suggest trending products for a category query."""
    trace_id = set_trace_id()

    logger.info(
        "trends_request",
        query=request.query,
        results_count=len(request.results),
        trace_id=trace_id
    )

    try:
        return await trend_scout.find_trends(request.query, request.results)
    except Exception as e:
        logger.error("trends_error", error=str(e), error_type=type(e).__name__)
        raise HTTPException(status_code=500, detail="Trend search failed unexpectedly")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
