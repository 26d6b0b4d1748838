"""Layers package initialization."""
from dealgen.layers.extraction import extract
from dealgen.layers.fusion import fuse
from dealgen.layers.model_fallback import ModelFallbackLayer, ModelCandidate, candidates_from_config
from dealgen.layers.pipeline import ProductContentPipeline, PipelineState, build_draft
from dealgen.layers.trends import TrendScout

__all__ = [
    "extract",
    "fuse",
    "ModelFallbackLayer",
    "ModelCandidate",
    "candidates_from_config",
    "ProductContentPipeline",
    "PipelineState",
    "build_draft",
    "TrendScout",
]
