"""
Claude API backend for product copy generation.
Provides an async completion interface used by the model fallback chain.

DESIGN PRINCIPLES:
- Never invent prices, specs or ratings
- Retailer facts in the prompt are ground truth
- Output is a single JSON object, no prose
"""
from typing import Optional
import anthropic

from dealgen.config import config
from dealgen.errors import BackendUnavailable
from dealgen.utils.logger import LayerLogger


# System prompt enforcing JSON-only, fact-bound output
SYSTEM_PROMPT = """You are a copywriter for an affiliate deals catalog.

You write short, persuasive and honest product copy.

ABSOLUTE RULES:
• Never invent prices, discounts, specifications or ratings
• Treat any retailer data in the request as ground truth
• If a price is unknown, use null
• Respond with ONE valid JSON value and nothing else
• No markdown, no code fences, no explanations"""


class ClaudeClient:
    """
    Anthropic backend for the model fallback chain.

    The SDK client is created per backend instance, with the SDK's own
    retries disabled: retrying is the fallback chain's job.
    """

    provider = "anthropic"

    def __init__(
        self,
        api_key: Optional[str] = config.CLAUDE_API_KEY,
        max_tokens: int = config.MODEL_MAX_TOKENS,
        timeout: float = config.MODEL_TIMEOUT,
    ):
        self.logger = LayerLogger("claude_client")
        self.max_tokens = max_tokens

        if not api_key:
            self.logger.log_error("CLAUDE_API_KEY not found in environment", error_type="config_error")
            self.client = None
        else:
            self.client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
            self.logger.log_action("init", "completed")

    def is_available(self) -> bool:
        """Check if Claude client is properly configured."""
        return self.client is not None

    async def complete(self, prompt: str, model: str) -> str:
        """
        Send one prompt to a Claude model and return the text completion.

        Raises:
            BackendUnavailable: No API key configured
            anthropic.APIError: Any API failure (handled by the fallback chain)
        """
        if not self.client:
            raise BackendUnavailable("Claude backend is not configured (CLAUDE_API_KEY missing)")

        response = await self.client.messages.create(
            model=model,
            max_tokens=self.max_tokens,
            temperature=0.7,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        self.logger.log_action(
            "complete",
            "success",
            model=model,
            output_length=len(text),
            tokens=response.usage.input_tokens + response.usage.output_tokens
        )
        return text
