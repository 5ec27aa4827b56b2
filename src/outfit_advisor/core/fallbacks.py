"""Deterministic fallback results, one set per failure kind."""

from typing import Iterable, Optional

from .errors import FailureKind
from .models import (
    AnalysisResult,
    CompleteOutfitAnalysis,
    FashionTerm,
    OutfitItem,
    RecommendationResult,
)

NOT_AVAILABLE = "N/A"

# Sentinel item names
ITEM_DETECTION_FAILED = "Item detection failed"
REQUEST_TIMED_OUT = "Request timed out"
SERVICE_NOT_CONFIGURED = "Analysis service not configured"
IMAGE_UNAVAILABLE = "Image could not be loaded"
ANALYSIS_NOT_AVAILABLE = "Analysis not available"

TIMEOUT_MESSAGE = (
    "The analysis took too long to complete. "
    "Please try again with a better internet connection."
)
GENERIC_MESSAGE = "We couldn't analyze your outfit. Please try again with a clearer photo."
CONFIGURATION_MESSAGE = (
    "The outfit analysis service is not configured yet. "
    "Please add an API key and try again."
)
IMAGE_MESSAGE = "We couldn't read your photo. Please try again with a different image."

STYLE_ANALYSIS_TERM = FashionTerm(
    term="Style Analysis",
    definition=(
        "The process of evaluating clothing choices based on fit, color coordination, "
        "and appropriateness for the occasion"
    ),
)

_ITEM_NAMES = {
    FailureKind.CONFIGURATION: SERVICE_NOT_CONFIGURED,
    FailureKind.TIMEOUT: REQUEST_TIMED_OUT,
    FailureKind.IMAGE: IMAGE_UNAVAILABLE,
}

_MESSAGES = {
    FailureKind.CONFIGURATION: CONFIGURATION_MESSAGE,
    FailureKind.TIMEOUT: TIMEOUT_MESSAGE,
    FailureKind.IMAGE: IMAGE_MESSAGE,
}

_RECOMMENDATIONS = {
    FailureKind.CONFIGURATION: [
        "Set GEMINI_API_KEY for the analysis service",
        "Try again once the service is configured",
    ],
    FailureKind.TIMEOUT: [
        "Check your internet connection",
        "Try again in a few moments",
    ],
}
_GENERIC_RECOMMENDATIONS = [
    "Take a photo with better lighting",
    "Ensure your full outfit is visible",
]


def sentinel_item(kind: FailureKind) -> OutfitItem:
    """Placeholder item whose name describes the failure category."""
    return OutfitItem(
        name=_ITEM_NAMES.get(kind, ITEM_DETECTION_FAILED),
        fit=NOT_AVAILABLE,
        condition=NOT_AVAILABLE,
    )


def fallback_message(kind: FailureKind) -> str:
    return _MESSAGES.get(kind, GENERIC_MESSAGE)


def analysis_fallback(kind: FailureKind) -> AnalysisResult:
    return AnalysisResult(
        outfit_items=[sentinel_item(kind)],
        style_description=fallback_message(kind),
        fallback_reason=kind,
    )


def recommendation_fallback(kind: FailureKind) -> RecommendationResult:
    # Image failures never reach this client; they share the generic text.
    return RecommendationResult(
        style_assessment=fallback_message(kind),
        recommendations=list(_RECOMMENDATIONS.get(kind, _GENERIC_RECOMMENDATIONS)),
        fashion_terms=[STYLE_ANALYSIS_TERM],
        fallback_reason=kind,
    )


def complete_analysis_fallback(
    items: Optional[Iterable[OutfitItem]],
    kind: FailureKind = FailureKind.UNEXPECTED,
) -> CompleteOutfitAnalysis:
    """Keep the caller's items when present, otherwise a single sentinel item."""
    kept = list(items) if items else []
    if not kept:
        kept = [
            OutfitItem(name=ANALYSIS_NOT_AVAILABLE, fit=NOT_AVAILABLE, condition=NOT_AVAILABLE)
        ]
    recommendation = recommendation_fallback(kind)
    return CompleteOutfitAnalysis(
        outfit_items=kept,
        style_assessment=recommendation.style_assessment,
        recommendations=recommendation.recommendations,
        fashion_terms=recommendation.fashion_terms,
        fallback_reason=kind,
    )
