"""Shared fixtures: settings and fake vision backends."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import pytest
from PIL import Image

from outfit_advisor.config import Settings
from outfit_advisor.core.image_encoder import EncodedImage

NAVY_BLAZER_ANALYSIS = {
    "outfitItems": [{"name": "Navy Blazer", "fit": "Slim", "condition": "Good"}],
    "styleDescription": "Business casual",
}

RECOMMENDATION = {
    "styleAssessment": "A solid business casual base with room to sharpen the fit.",
    "recommendations": [
        "Have your trousers hemmed to achieve a slight break at the shoe",
        "Polish your shoes to elevate the overall look",
    ],
    "fashionTerms": [
        {
            "term": "Break",
            "definition": "The fold of trouser fabric where it meets the shoe",
        }
    ],
    "shoppingSuggestions": ["Burgundy pocket square"],
    "inspirationOutfits": [
        {
            "description": "Classic business casual with proper fit",
            "items": ["Navy tailored blazer", "Crisp white shirt"],
        }
    ],
}


class FakeBackend:
    """Deterministic stand-in for GeminiClient that records every call."""

    def __init__(
        self,
        analysis_reply=NAVY_BLAZER_ANALYSIS,
        recommendation_reply=RECOMMENDATION,
        delay: float = 0.0,
        error: Optional[Exception] = None,
        recommendation_delay: float = 0.0,
    ):
        self.analysis_reply = analysis_reply
        self.recommendation_reply = recommendation_reply
        self.delay = delay
        self.recommendation_delay = recommendation_delay
        self.error = error
        self.calls: list[dict] = []

    async def generate(
        self,
        prompt: str,
        *,
        image: Optional[EncodedImage] = None,
        max_output_tokens: int,
    ) -> str:
        self.calls.append(
            {"prompt": prompt, "image": image, "max_output_tokens": max_output_tokens}
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if image is None and self.recommendation_delay:
            await asyncio.sleep(self.recommendation_delay)
        if self.error is not None:
            raise self.error

        reply = self.analysis_reply if image is not None else self.recommendation_reply
        return reply if isinstance(reply, str) else json.dumps(reply)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        api_key="test-key",
        request_timeout=2.0,
        temp_image_path=tmp_path / "staged" / "download.jpg",
    )


@pytest.fixture
def unconfigured_settings(tmp_path: Path) -> Settings:
    return Settings(api_key=None, temp_image_path=tmp_path / "download.jpg")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def jpeg_file(tmp_path: Path) -> Path:
    path = tmp_path / "outfit.jpg"
    Image.new("RGB", (8, 8), color=(20, 30, 90)).save(path, format="JPEG")
    return path
