"""Google Gemini integration for outfit vision and text prompts."""

from typing import Optional, Protocol

import httpx
from google import genai
from google.genai import errors, types

from ..config import Settings
from .errors import ConfigurationError, ServiceError
from .image_encoder import EncodedImage


class VisionBackend(Protocol):
    """Anything that can answer a prompt, optionally with an inline image."""

    async def generate(
        self,
        prompt: str,
        *,
        image: Optional[EncodedImage] = None,
        max_output_tokens: int,
    ) -> str: ...


class GeminiClient:
    """Async wrapper for the Google Gemini API in JSON response mode."""

    def __init__(self, settings: Settings):
        if not settings.api_key:
            raise ConfigurationError("GEMINI_API_KEY is required")

        self.settings = settings
        self.model_id = settings.model
        self.client = genai.Client(api_key=settings.api_key)

    async def generate(
        self,
        prompt: str,
        *,
        image: Optional[EncodedImage] = None,
        max_output_tokens: int,
    ) -> str:
        """
        Send one prompt and return the generated text.

        Args:
            prompt: Instruction text
            image: Optional inline image sent after the prompt
            max_output_tokens: Ceiling on the reply size

        Returns:
            Text response from Gemini, expected to be JSON

        Raises:
            ServiceError: transport failure, API error or an empty reply
        """
        parts = [types.Part.from_text(text=prompt)]
        if image is not None:
            parts.append(types.Part.from_bytes(data=image.to_bytes(), mime_type=image.mime_type))

        options = {
            "temperature": self.settings.temperature,
            "max_output_tokens": max_output_tokens,
            "response_mime_type": "application/json",
        }
        if self.settings.thinking_budget is not None:
            options["thinking_config"] = types.ThinkingConfig(
                thinking_budget=self.settings.thinking_budget
            )
        config = types.GenerateContentConfig(**options)

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_id,
                contents=[types.Content(role="user", parts=parts)],
                config=config,
            )
        except errors.APIError as e:
            raise ServiceError(f"Gemini returned an error: {e.message or e}") from e
        except httpx.HTTPError as e:
            raise ServiceError(f"Could not reach Gemini: {e}") from e

        if not response.text:
            raise ServiceError("Gemini returned an empty response")

        return response.text
