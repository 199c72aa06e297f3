"""
GeminiClient — Async wrapper around Google Generative AI SDK.

Used by the narrative layer to turn a scored analysis into
location-specific prose.

Supports two runtime modes (set via AI_MOCK_MODE env var):
  - MOCK mode (default): returns deterministic canned responses.
    Use for tests and local dev without API keys.
  - REAL mode: makes actual Gemini API calls.
    Requires GEMINI_API_KEY to be set.

Extension pattern: add new mock response keys to _MOCK_RESPONSES and
reference them in generate() calls via the response_key parameter.
"""

import logging
import os
from enum import Enum
from typing import Any

# Python 3.14 + protobuf native extension can fail when importing Gemini deps.
# Keep this as default-only so users can still override it explicitly.
os.environ.setdefault("PROTOCOL_BUFFERS_PYTHON_IMPLEMENTATION", "python")

import google.generativeai as genai  # noqa: E402

from launchsite.core.config import settings  # noqa: E402

logger = logging.getLogger(__name__)


class GeminiModel(str, Enum):
    PRO = "gemini-2.5-pro"
    FLASH = "gemini-2.5-flash"


# Canned responses for mock mode.
# Keys map to response_key arguments in generate() calls.
_MOCK_RESPONSES: dict[str, str] = {
    "default": (
        "[MOCK] This is a placeholder Gemini response. "
        "Set AI_MOCK_MODE=false and provide GEMINI_API_KEY for real responses."
    ),
    "launch_narrative": (
        '{"resourcesInsight": "[MOCK] Hobby suppliers and machine shops are within a day\'s '
        'drive; specialised propellant vendors ship to this region.", '
        '"legalInsight": "[MOCK] Launches here fall under the national aviation authority. '
        'Notify air traffic control and confirm landowner permission before flying.", '
        '"geographicalInsight": "[MOCK] Open, mostly flat terrain with seasonal wind '
        'variation. Road access is adequate for a small launch crew.", '
        '"geopoliticalInsight": "[MOCK] The region has a stable regulatory environment and '
        'established aerospace partnerships.", '
        '"recommendation": "[MOCK] Feasible with standard precautions. Secure permits, '
        'brief the recovery team and schedule launches for calm mornings."}'
    ),
}


class GeminiClient:
    """
    Central Gemini interface for the service.

    Don't instantiate per-request; use the module-level `gemini_client`
    singleton.
    """

    def __init__(self) -> None:
        self.mock_mode = settings.ai_mock_mode
        # True when real mode was requested but no key is configured;
        # canned replies must not be passed off as real output then.
        self.key_missing = False

        if not self.mock_mode:
            if not settings.gemini_api_key:
                logger.warning(
                    "GEMINI_API_KEY not set — AI output unavailable, callers use their fallbacks. "
                    "Set AI_MOCK_MODE=true to silence this warning."
                )
                self.mock_mode = True
                self.key_missing = True
            else:
                genai.configure(api_key=settings.gemini_api_key)
                self._genai = genai

        if self.mock_mode:
            logger.info("GeminiClient initialised in MOCK mode")
        else:
            logger.info("GeminiClient initialised in REAL mode")

    async def generate(
        self,
        prompt: str,
        model: GeminiModel = GeminiModel.FLASH,
        response_key: str = "default",
        **generation_kwargs: Any,
    ) -> str:
        """
        Generate text from a Gemini model.

        Args:
            prompt:             The full prompt string.
            model:              Which Gemini model to use.
            response_key:       Mock response key (ignored in real mode).
            **generation_kwargs: Passed through to GenerativeModel.generate_content_async().

        Returns:
            Generated text string.

        Raises:
            Exception: Propagates Gemini SDK errors in real mode.
        """
        if self.mock_mode:
            return _MOCK_RESPONSES.get(response_key, _MOCK_RESPONSES["default"])

        try:
            gemini_model = self._genai.GenerativeModel(model.value)
            response = await gemini_model.generate_content_async(prompt, **generation_kwargs)
            return response.text
        except Exception as exc:
            logger.error("Gemini API error (model=%s): %s", model.value, exc)
            raise

    async def generate_json(self, prompt: str, response_key: str = "default") -> str:
        """Ask for a JSON object reply (response_mime_type=application/json)."""
        return await self.generate(
            prompt,
            response_key=response_key,
            generation_config={"response_mime_type": "application/json"},
        )


# Module-level singleton — import and use this everywhere
gemini_client = GeminiClient()
