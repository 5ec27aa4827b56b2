"""Style recommendations for an analyzed outfit."""

import json
import logging
from typing import Any, Mapping, Union

from .errors import FailureKind, OutfitAdvisorError
from .fallbacks import recommendation_fallback
from .llm_request import JsonRequestClient
from .models import AnalysisResult, RecommendationResult

logger = logging.getLogger(__name__)


STYLE_RECOMMENDATION_PROMPT = """You are a men's fashion advisor. Based on this analysis of a client's outfit, give an honest style critique and practical advice.

Outfit analysis:
{analysis}

Provide:
- styleAssessment: An overall assessment of the outfit's fit, coordination and appropriateness (2-4 sentences)
- recommendations: 3-6 specific, actionable improvement suggestions
- fashionTerms: 2-5 fashion terms relevant to this outfit, each with a plain-language definition
- shoppingSuggestions: 2-4 items worth buying to improve or complete the look
- inspirationOutfits: 1-2 complete looks to aim for, each with a short description and its list of items

Return ONLY a valid JSON object matching this structure:
{{
    "styleAssessment": "...",
    "recommendations": ["..."],
    "fashionTerms": [
        {{"term": "...", "definition": "..."}}
    ],
    "shoppingSuggestions": ["..."],
    "inspirationOutfits": [
        {{"description": "...", "items": ["..."]}}
    ]
}}
"""


def describe_analysis(analysis: Union[AnalysisResult, Mapping[str, Any]]) -> str:
    """Serialize an analysis to the JSON text embedded in the prompt."""
    if isinstance(analysis, AnalysisResult):
        data = analysis.to_json_dict()
    else:
        data = dict(analysis)
    data.pop("fallbackReason", None)
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


class StyleAdvisor(JsonRequestClient):
    """Ask the model for recommendations; always returns a RecommendationResult."""

    async def recommend(
        self, analysis: Union[AnalysisResult, Mapping[str, Any]]
    ) -> RecommendationResult:
        """
        Produce a style assessment, suggestions and terminology.

        Args:
            analysis: AnalysisResult or an equivalent JSON-shaped mapping

        Returns:
            RecommendationResult from the model, or a fallback. Never raises.
        """
        try:
            prompt = STYLE_RECOMMENDATION_PROMPT.format(analysis=describe_analysis(analysis))
            result = await self._request(
                prompt,
                RecommendationResult,
                max_output_tokens=self.settings.recommendation_max_tokens,
            )
        except OutfitAdvisorError as e:
            self._log_fallback("style_recommendation", e)
            return recommendation_fallback(e.kind)
        except Exception:
            logger.exception("Unexpected error during style recommendation")
            return recommendation_fallback(FailureKind.UNEXPECTED)

        logger.info(
            "Generated %d recommendations",
            len(result.recommendations),
            extra={"event": "style_recommendation_complete"},
        )
        return result
