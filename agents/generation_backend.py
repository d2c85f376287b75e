"""
Generation backend capability.

The storyteller depends on `GenerationBackend` only. `GeminiBackend` is the
shipped provider; tests inject scripted doubles.
"""

import logging
from typing import Optional, Protocol

from google import genai
from google.genai import errors as genai_errors

from agents.generation_errors import (
    GenerationError,
    GenerationUnavailableError,
    GenerationDisabledError,
)

logger = logging.getLogger("GenerationBackend")


class GenerationBackend(Protocol):
    async def respond(self, system_instructions: str, prompt: str, temperature: float) -> str:
        """Return generated text.

        Raises:
            GenerationUnavailableError: unsupported here or not configured.
            GenerationDisabledError: present but switched off.
            GenerationError: anything else.
        """
        ...


class GeminiBackend:
    """Gemini via the google-genai async client.

    A 403 from the API (key lacks permission, or the Generative Language API
    is disabled for the project) maps to GenerationDisabledError so the
    player is sent to fix their settings instead of seeing fallback text.
    """

    def __init__(self, client, model_id: str = "gemini-2.0-flash"):
        self.client = client
        self.model_id = model_id

    async def respond(self, system_instructions: str, prompt: str, temperature: float) -> str:
        if not self.client:
            raise GenerationUnavailableError("Gemini client is not configured.")

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_id,
                contents=prompt,
                config=genai.types.GenerateContentConfig(
                    system_instruction=system_instructions,
                    temperature=temperature,
                )
            )
        except genai_errors.ClientError as e:
            if e.code == 403:
                logger.error(f"Gemini refused the request (403): {e}")
                raise GenerationDisabledError(
                    "Story generation is disabled for this API key. "
                    "Enable the Generative Language API in your project settings."
                ) from e
            raise GenerationError(f"Gemini request failed: {e}") from e
        except genai_errors.APIError as e:
            raise GenerationError(f"Gemini request failed: {e}") from e

        return response.text or ""


def build_gemini_backend(settings) -> Optional[GeminiBackend]:
    """Create a GeminiBackend from EngineSettings, or None without an API key."""
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set; stories will use fallback text.")
        return None
    client = genai.Client(api_key=settings.gemini_api_key)
    return GeminiBackend(client, model_id=settings.model_id)
