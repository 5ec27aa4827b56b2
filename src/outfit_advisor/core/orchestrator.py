"""Sequence image encoding, analysis and recommendations into one flow."""

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from ..config import Settings
from .errors import FailureKind, ImageEncodingError
from .fallbacks import analysis_fallback, complete_analysis_fallback
from .image_encoder import EncodedImage, ImageEncoder
from .models import AnalysisResult, CompleteOutfitAnalysis, OutfitItem
from .outfit_analyzer import OutfitAnalyzer
from .style_advisor import StyleAdvisor
from .vision import VisionBackend

logger = logging.getLogger(__name__)


class OutfitOrchestrator:
    """Encoder -> analyzer -> (on demand) style advisor."""

    def __init__(
        self,
        encoder: ImageEncoder,
        analyzer: OutfitAnalyzer,
        advisor: StyleAdvisor,
    ):
        self.encoder = encoder
        self.analyzer = analyzer
        self.advisor = advisor

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        backend: Optional[VisionBackend] = None,
    ) -> "OutfitOrchestrator":
        """Wire the default components, optionally sharing one backend."""
        return cls(
            encoder=ImageEncoder(settings),
            analyzer=OutfitAnalyzer(settings, backend=backend),
            advisor=StyleAdvisor(settings, backend=backend),
        )

    async def analyze_image(self, uri: str) -> AnalysisResult:
        """Encode the image at ``uri`` and analyze it. Never raises."""
        try:
            image = await self.encoder.encode(uri)
        except ImageEncodingError as e:
            logger.warning(
                "Image could not be encoded: %s",
                e,
                extra={"event": "image_encoding_failed", "failure_kind": e.kind.value},
            )
            return analysis_fallback(FailureKind.IMAGE)

        return await self.analyzer.analyze(image)

    async def analyze_upload(
        self,
        raw: bytes,
        mime_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> AnalysisResult:
        """Analyze raw uploaded bytes. Never raises."""
        try:
            image = EncodedImage.from_bytes(raw, mime_type=mime_type, filename=filename)
        except ImageEncodingError as e:
            logger.warning("Uploaded image rejected: %s", e, extra={"event": "image_encoding_failed"})
            return analysis_fallback(FailureKind.IMAGE)

        return await self.analyzer.analyze(image)

    async def get_complete_outfit_analysis(
        self, analysis: Union[AnalysisResult, Mapping[str, Any]]
    ) -> CompleteOutfitAnalysis:
        """
        Merge an analysis with its recommendations.

        The returned ``outfit_items`` are always the analysis' own items; a
        sentinel item is used only when the analysis has none. A fallback
        analysis is not sent to the advisor and keeps its failure reason.
        """
        items = _outfit_items(analysis)
        reason = _fallback_reason(analysis)
        if reason is not None or not items:
            logger.info(
                "Skipping recommendations for a degraded analysis",
                extra={
                    "event": "complete_analysis_skipped",
                    "failure_kind": (reason or FailureKind.UNEXPECTED).value,
                },
            )
            return complete_analysis_fallback(items, reason or FailureKind.UNEXPECTED)

        try:
            recommendation = await self.advisor.recommend(analysis)
            return CompleteOutfitAnalysis(
                outfit_items=items,
                style_assessment=recommendation.style_assessment,
                recommendations=recommendation.recommendations,
                fashion_terms=recommendation.fashion_terms,
                shopping_suggestions=recommendation.shopping_suggestions,
                inspiration_outfits=recommendation.inspiration_outfits,
                fallback_reason=recommendation.fallback_reason,
            )
        except Exception:
            logger.exception(
                "Could not build complete outfit analysis",
                extra={"event": "complete_analysis_failed"},
            )
            return complete_analysis_fallback(items)


def _outfit_items(analysis: Union[AnalysisResult, Mapping[str, Any]]) -> list[OutfitItem]:
    """Items from a model or a JSON-shaped mapping; unreadable entries are dropped."""
    if not isinstance(analysis, Mapping):
        return list(getattr(analysis, "outfit_items", None) or [])

    raw = analysis.get("outfitItems", analysis.get("outfit_items")) or []
    items = []
    for entry in raw:
        try:
            items.append(OutfitItem.model_validate(entry))
        except ValidationError:
            logger.warning("Dropping unreadable outfit item", extra={"event": "outfit_item_dropped"})
    return items


def _fallback_reason(
    analysis: Union[AnalysisResult, Mapping[str, Any]],
) -> Optional[FailureKind]:
    if not isinstance(analysis, Mapping):
        return getattr(analysis, "fallback_reason", None)

    reason = analysis.get("fallbackReason", analysis.get("fallback_reason"))
    if not reason:
        return None
    try:
        return FailureKind(reason)
    except ValueError:
        return FailureKind.UNEXPECTED
