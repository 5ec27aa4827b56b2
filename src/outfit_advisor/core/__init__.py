"""Core modules for Outfit Advisor."""

from .errors import (
    ConfigurationError,
    FailureKind,
    ImageEncodingError,
    OutfitAdvisorError,
    ParseError,
    RequestTimeoutError,
    ServiceError,
)
from .image_encoder import EncodedImage, ImageEncoder
from .models import (
    AnalysisResult,
    CompleteOutfitAnalysis,
    FashionTerm,
    InspirationOutfit,
    OutfitItem,
    RecommendationResult,
)
from .vision import GeminiClient, VisionBackend
from .outfit_analyzer import OutfitAnalyzer
from .style_advisor import StyleAdvisor
from .orchestrator import OutfitOrchestrator
from .session import AnalysisSession, SessionError, SessionState

__all__ = [
    "AnalysisResult",
    "AnalysisSession",
    "CompleteOutfitAnalysis",
    "ConfigurationError",
    "EncodedImage",
    "FailureKind",
    "FashionTerm",
    "GeminiClient",
    "ImageEncoder",
    "ImageEncodingError",
    "InspirationOutfit",
    "OutfitAdvisorError",
    "OutfitAnalyzer",
    "OutfitItem",
    "OutfitOrchestrator",
    "ParseError",
    "RecommendationResult",
    "RequestTimeoutError",
    "ServiceError",
    "SessionError",
    "SessionState",
    "StyleAdvisor",
    "VisionBackend",
]
