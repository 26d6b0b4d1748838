"""
Error taxonomy for the deal content pipeline.

Only InvalidRequest is meant to reach callers. The others are raised and
absorbed inside the pipeline: providers turn ProviderUnavailable into
missing facts, the model fallback turns MalformedOutput and
BackendUnavailable into "try the next candidate", and the coordinator turns
AllBackendsFailed into a draft product.
"""
from typing import List, Optional


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class InvalidRequest(PipelineError):
    """Required input is missing (e.g. no product name)."""


class ProviderUnavailable(PipelineError):
    """A retailer fact provider could not deliver facts."""


class MalformedOutput(PipelineError):
    """No structured payload could be located in model output."""


class BackendUnavailable(PipelineError):
    """A generative backend is not configured (missing key or SDK)."""


class AllBackendsFailed(PipelineError):
    """Every model candidate failed; carries the last underlying error."""

    def __init__(self, last_error: Optional[BaseException], attempts: Optional[List[str]] = None):
        self.last_error = last_error
        self.attempts = attempts or []
        if last_error is None:
            message = "No model candidates configured"
        else:
            message = f"All {len(self.attempts)} model candidates failed. Last error: {last_error}"
        super().__init__(message)
