"""Shared request discipline for the analysis and recommendation clients."""

import asyncio
import json
import logging
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from ..config import Settings
from .errors import ConfigurationError, OutfitAdvisorError, ParseError, RequestTimeoutError
from .image_encoder import EncodedImage
from .vision import GeminiClient, VisionBackend

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def extract_json(raw_response: str) -> dict:
    """Decode a JSON object, tolerating markdown code fences around it."""
    try:
        data = json.loads(raw_response.strip())
    except json.JSONDecodeError:
        data = _decode_fenced(raw_response)

    if not isinstance(data, dict):
        raise ParseError("Response JSON is not an object", raw_response)
    return data


def _decode_fenced(raw_response: str):
    json_str = raw_response
    if "```json" in raw_response:
        json_str = raw_response.split("```json", 1)[1].rsplit("```", 1)[0]
    elif "```" in raw_response:
        json_str = raw_response.split("```", 1)[1].rsplit("```", 1)[0]

    try:
        return json.loads(json_str.strip())
    except json.JSONDecodeError as e:
        raise ParseError(f"Response is not valid JSON: {e}", raw_response) from e


class JsonRequestClient:
    """Base for clients that make one bounded model call and parse its JSON."""

    def __init__(
        self,
        settings: Settings,
        backend: Optional[VisionBackend] = None,
        backend_factory: Callable[[Settings], VisionBackend] = GeminiClient,
    ):
        self.settings = settings
        self._backend = backend
        self._backend_factory = backend_factory

    @property
    def backend(self) -> VisionBackend:
        if not self.settings.has_credentials:
            raise ConfigurationError("GEMINI_API_KEY is required")
        if self._backend is None:
            self._backend = self._backend_factory(self.settings)
        return self._backend

    async def _request(
        self,
        prompt: str,
        result_type: type[ModelT],
        *,
        max_output_tokens: int,
        image: Optional[EncodedImage] = None,
    ) -> ModelT:
        """
        Call the model once under the request deadline and validate the reply.

        Raises:
            ConfigurationError: no API key; raised before any network call
            RequestTimeoutError: the deadline expired and the call was cancelled
            ServiceError: transport or service failure
            ParseError: the reply is not JSON or does not match ``result_type``
        """
        backend = self.backend
        timeout = self.settings.request_timeout

        try:
            raw_response = await asyncio.wait_for(
                backend.generate(prompt, image=image, max_output_tokens=max_output_tokens),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(timeout) from e

        data = extract_json(raw_response)
        # Only fallbacks built locally may carry a reason
        data.pop("fallbackReason", None)
        try:
            return result_type.model_validate(data)
        except ValidationError as e:
            raise ParseError(
                f"Response does not match {result_type.__name__}: {e.error_count()} errors",
                raw_response,
            ) from e

    def _log_fallback(self, operation: str, error: OutfitAdvisorError) -> None:
        logger.warning(
            "%s fell back after %s failure: %s",
            operation,
            error.kind.value,
            error,
            extra={"event": f"{operation}_fallback", "failure_kind": error.kind.value},
        )
