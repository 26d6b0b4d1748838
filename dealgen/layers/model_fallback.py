"""
Model Fallback Layer.

Walks an ordered list of model candidates, one at a time, and returns the
first response that yields a usable structured payload. Candidate order is
a cost/quality preference, so candidates are never raced.
"""
import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, Union

from dealgen.config import config
from dealgen.errors import AllBackendsFailed, BackendUnavailable
from dealgen.layers.extraction import extract
from dealgen.models.product import GeneratedContent
from dealgen.utils.logger import LayerLogger


class GenerationBackend(Protocol):
    """Anything that can turn a prompt into a text completion for a model id."""

    async def complete(self, prompt: str, model: str) -> str:
        ...


@dataclass(frozen=True)
class ModelCandidate:
    """One entry of the fallback chain."""
    provider: str
    model: str

    @property
    def label(self) -> str:
        return f"{self.provider}:{self.model}"


def candidates_from_config() -> List[ModelCandidate]:
    """Build the ordered candidate list from MODEL_CANDIDATES."""
    return [ModelCandidate(provider, model) for provider, model in config.get_model_candidates()]


class ModelFallbackLayer:
    """
    Sequential fallback over generative backends.

    Every failure of a candidate (API error, timeout, missing backend,
    malformed output, schema mismatch) is recorded and the next candidate is
    tried. Only when all of them fail is AllBackendsFailed raised.
    """

    def __init__(
        self,
        backends: Dict[str, GenerationBackend],
        candidates: Optional[Sequence[ModelCandidate]] = None,
        timeout: float = config.MODEL_TIMEOUT,
    ):
        self.backends = backends
        self.candidates = list(candidates) if candidates is not None else candidates_from_config()
        self.timeout = timeout
        self.logger = LayerLogger("model_fallback")

    async def generate(
        self,
        prompt: str,
        candidates: Optional[Sequence[ModelCandidate]] = None,
        shape: str = "object",
    ) -> Union[dict, list]:
        """
        Run the fallback chain and return the first extracted payload.

        Args:
            prompt: Single text prompt sent to each candidate
            candidates: Ordered candidates (defaults to the configured chain)
            shape: Expected top-level JSON shape, "object" or "array"

        Raises:
            AllBackendsFailed: Every candidate failed
        """
        return await self._run(prompt, candidates, shape, validator=None)

    async def generate_content(
        self,
        prompt: str,
        candidates: Optional[Sequence[ModelCandidate]] = None,
    ) -> GeneratedContent:
        """Run the fallback chain until a response validates as GeneratedContent."""
        return await self._run(prompt, candidates, "object", validator=GeneratedContent.model_validate)

    async def _run(self, prompt, candidates, shape, validator):
        chain = list(candidates) if candidates is not None else self.candidates
        attempts: List[str] = []
        last_error: Optional[BaseException] = None

        self.logger.log_action(
            "generate",
            "started",
            candidates=[c.label for c in chain],
            shape=shape,
            prompt_length=len(prompt)
        )

        for position, candidate in enumerate(chain, start=1):
            attempts.append(candidate.label)
            try:
                result = await self._attempt(candidate, prompt, shape)
                if validator is not None:
                    result = validator(result)
            except Exception as e:
                last_error = e
                self.logger.log_attempt(
                    provider=candidate.provider,
                    model=candidate.model,
                    position=position,
                    result="failed",
                    error=str(e)[:300],
                    error_type=type(e).__name__
                )
                if position < len(chain):
                    self.logger.log_fallback(
                        from_source=candidate.label,
                        to_source=chain[position].label,
                        reason=type(e).__name__
                    )
                continue

            self.logger.log_attempt(
                provider=candidate.provider,
                model=candidate.model,
                position=position,
                result="success"
            )
            return result

        self.logger.log_error(
            "All model candidates failed",
            error_type="all_backends_failed",
            attempts=attempts,
            last_error=str(last_error) if last_error else None
        )
        raise AllBackendsFailed(last_error, attempts)

    async def _attempt(self, candidate: ModelCandidate, prompt: str, shape: str) -> Union[dict, list]:
        backend = self.backends.get(candidate.provider)
        if backend is None:
            raise BackendUnavailable(f"No backend registered for provider '{candidate.provider}'")

        text = await asyncio.wait_for(backend.complete(prompt, candidate.model), timeout=self.timeout)
        return extract(text, shape)
