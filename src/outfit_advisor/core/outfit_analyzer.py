"""Outfit item detection from images using Gemini."""

import logging
from typing import Union

from .errors import FailureKind, OutfitAdvisorError
from .fallbacks import analysis_fallback
from .image_encoder import EncodedImage
from .llm_request import JsonRequestClient
from .models import AnalysisResult

logger = logging.getLogger(__name__)


OUTFIT_ANALYSIS_PROMPT = """You are a men's fashion expert. Analyze the outfit in this photo and describe every visible clothing item and accessory.

For EACH item, provide:
1. name: A short name for the item (e.g. "Navy Blazer", "White Oxford Shirt")
2. fit: How it fits the wearer (e.g. "Slim", "Slightly oversized", "Too long")
3. condition: Its visible condition (e.g. "Good", "Wrinkled", "Needs polish")
4. garmentType: The garment type
5. fitAndSilhouette: Fit and silhouette details
6. conditionAndWear: Condition and signs of wear
7. fabricAndTexture: Fabric and texture
8. stylingAndInfluence: Styling choices and style influence

Use precise fashion vocabulary. These examples are not exhaustive:
- Garment type: blazer, sport coat, overshirt, chore coat, Oxford shirt, polo, henley, crewneck, chinos, pleated trousers, selvedge denim, loafers, derbies, Chelsea boots, sneakers
- Fit and silhouette: slim, tailored, relaxed, boxy, oversized, cropped, tapered, straight-leg, full break, no break, dropped shoulder
- Condition and wear: crisp, pressed, wrinkled, faded, pilling, scuffed, needs polish, well-maintained
- Fabric and texture: wool, flannel, tweed, linen, cotton twill, poplin, seersucker, corduroy, suede, jersey, knit
- Styling and influence: business casual, smart casual, streetwear, workwear, preppy, Ivy, minimalist, Italian sprezzatura, Scandinavian, vintage

Return ONLY a valid JSON object with exactly these two keys:
{
    "outfitItems": [
        {
            "name": "...",
            "fit": "...",
            "condition": "...",
            "garmentType": "...",
            "fitAndSilhouette": "...",
            "conditionAndWear": "...",
            "fabricAndTexture": "...",
            "stylingAndInfluence": "..."
        }
    ],
    "styleDescription": "A few sentences describing the overall style of the outfit"
}

Include all visible items, even partially visible ones. Do not add any text outside the JSON object.
"""


class OutfitAnalyzer(JsonRequestClient):
    """Detect outfit items in an image; always returns an AnalysisResult."""

    async def analyze(self, image: Union[EncodedImage, str]) -> AnalysisResult:
        """
        Analyze an outfit image.

        Args:
            image: EncodedImage, or a bare base64 string (assumed JPEG)

        Returns:
            AnalysisResult from the model, or a fallback result describing the
            failure. Never raises.
        """
        if isinstance(image, str):
            image = EncodedImage(data=image)

        try:
            result = await self._request(
                OUTFIT_ANALYSIS_PROMPT,
                AnalysisResult,
                image=image,
                max_output_tokens=self.settings.analysis_max_tokens,
            )
        except OutfitAdvisorError as e:
            self._log_fallback("outfit_analysis", e)
            return analysis_fallback(e.kind)
        except Exception:
            logger.exception("Unexpected error during outfit analysis")
            return analysis_fallback(FailureKind.UNEXPECTED)

        logger.info(
            "Detected %d outfit items",
            len(result.outfit_items),
            extra={"event": "outfit_analysis_complete", "item_count": len(result.outfit_items)},
        )
        return result
