"""Text generation through Google Gemini."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from google import genai
from google.genai import types
from loguru import logger

from signalist.config.settings import settings
from signalist.errors import ConfigurationError, UpstreamError

_RETRYABLE_MARKERS = ("503", "429", "UNAVAILABLE", "overloaded", "RESOURCE_EXHAUSTED")


def first_candidate_text(response: Any) -> Optional[str]:
    """Return the text of the first part of the first candidate, if any."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return None
    text = getattr(parts[0], "text", None)
    if not isinstance(text, str) or not text.strip():
        return None
    return text


class GeminiClient:
    """Client for one-shot text completions."""

    def __init__(self, api_key: str | None = None, model: str | None = None):
        api_key = api_key or settings.gemini.api_key
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY must be set.")
        self.client = genai.Client(api_key=api_key)
        self.model = model or settings.gemini.model
        self.temperature = settings.gemini.temperature
        self.last_error: Optional[str] = None

    async def generate_text(self, prompt: str, max_retries: int = 2) -> Optional[str]:
        """Send a single-turn prompt and return the first candidate's text.

        Args:
            prompt: Full user prompt
            max_retries: Attempts for transient errors (503, 429, quota)

        Returns:
            Generated text, or None if the response carried no text

        Raises:
            UpstreamError: if every attempt failed
        """
        for attempt in range(max_retries):
            try:
                self.last_error = None
                if attempt > 0:
                    wait_time = 2 * (2 ** attempt)
                    logger.info(f"Retry attempt {attempt + 1}/{max_retries} after {wait_time}s delay...")
                    await asyncio.sleep(wait_time)

                response = await self.client.aio.models.generate_content(
                    model=self.model,
                    contents=[types.Content(role="user", parts=[types.Part(text=prompt)])],
                    config=types.GenerateContentConfig(temperature=self.temperature),
                )
                return first_candidate_text(response)

            except Exception as e:
                self.last_error = str(e)
                is_retryable = any(marker in str(e) for marker in _RETRYABLE_MARKERS)
                if is_retryable and attempt < max_retries - 1:
                    logger.warning(f"Retryable Gemini error on attempt {attempt + 1}: {e}")
                    continue
                logger.error(f"Error calling Gemini ({self.model}): {e}")
                break
        raise UpstreamError(f"Gemini request failed: {self.last_error}")


async def generate_text(prompt: str) -> Optional[str]:
    return await GeminiClient().generate_text(prompt)
