"""
Gemini API backend for product copy generation.
"""
from typing import Optional

import google.generativeai as genai

from dealgen.adapters.claude_client import SYSTEM_PROMPT
from dealgen.config import config
from dealgen.errors import BackendUnavailable
from dealgen.utils.logger import LayerLogger


class GeminiClient:
    """Google Generative AI backend for the model fallback chain."""

    provider = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = config.GEMINI_API_KEY,
        max_tokens: int = config.MODEL_MAX_TOKENS,
        timeout: float = config.MODEL_TIMEOUT,
    ):
        self.logger = LayerLogger("gemini_client")
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.configured = bool(api_key)

        if not api_key:
            self.logger.log_error("GEMINI_API_KEY not found in environment", error_type="config_error")
        else:
            genai.configure(api_key=api_key)
            self.logger.log_action("init", "completed")

    def is_available(self) -> bool:
        return self.configured

    async def complete(self, prompt: str, model: str) -> str:
        """Send one prompt to a Gemini model and return the text completion."""
        if not self.configured:
            raise BackendUnavailable("Gemini backend is not configured (GEMINI_API_KEY missing)")

        generative_model = genai.GenerativeModel(model, system_instruction=SYSTEM_PROMPT)
        response = await generative_model.generate_content_async(
            prompt,
            generation_config=genai.GenerationConfig(
                max_output_tokens=self.max_tokens,
                temperature=0.7,
            ),
            request_options={"timeout": self.timeout},
        )

        # response.text raises ValueError when the candidate was blocked
        text = response.text
        self.logger.log_action("complete", "success", model=model, output_length=len(text))
        return text
