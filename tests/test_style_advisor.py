"""Tests for the style recommendation request client."""

import asyncio
import json
from dataclasses import replace

from outfit_advisor.config import Settings
from outfit_advisor.core.errors import FailureKind
from outfit_advisor.core.fallbacks import analysis_fallback
from outfit_advisor.core.models import AnalysisResult
from outfit_advisor.core.style_advisor import StyleAdvisor, describe_analysis

from conftest import NAVY_BLAZER_ANALYSIS, RECOMMENDATION, FakeBackend

ANALYSIS = AnalysisResult.model_validate(NAVY_BLAZER_ANALYSIS)


def test_recommend_returns_model_result(settings: Settings, backend: FakeBackend) -> None:
    result = asyncio.run(StyleAdvisor(settings, backend=backend).recommend(ANALYSIS))

    assert result.to_json_dict() == RECOMMENDATION
    call = backend.calls[0]
    assert call["image"] is None
    assert call["max_output_tokens"] == settings.recommendation_max_tokens
    assert '"Navy Blazer"' in call["prompt"]


def test_recommend_is_idempotent(settings: Settings, backend: FakeBackend) -> None:
    advisor = StyleAdvisor(settings, backend=backend)

    first = asyncio.run(advisor.recommend(ANALYSIS))
    second = asyncio.run(advisor.recommend(ANALYSIS))

    assert first == second
    assert len(backend.calls) == 2
    assert backend.calls[0]["prompt"] == backend.calls[1]["prompt"]


def test_recommend_accepts_plain_mapping(settings: Settings, backend: FakeBackend) -> None:
    result = asyncio.run(StyleAdvisor(settings, backend=backend).recommend(NAVY_BLAZER_ANALYSIS))
    assert not result.is_fallback


def test_describe_analysis_omits_fallback_reason() -> None:
    text = describe_analysis(analysis_fallback(FailureKind.PARSE))
    assert "fallbackReason" not in json.loads(text)


def test_missing_credential_makes_no_call(
    unconfigured_settings: Settings, backend: FakeBackend
) -> None:
    result = asyncio.run(StyleAdvisor(unconfigured_settings, backend=backend).recommend(ANALYSIS))

    assert backend.calls == []
    assert result.fallback_reason is FailureKind.CONFIGURATION


def test_timeout_fallback(settings: Settings) -> None:
    slow = FakeBackend(delay=10)
    result = asyncio.run(
        StyleAdvisor(replace(settings, request_timeout=0.05), backend=slow).recommend(ANALYSIS)
    )

    assert result.fallback_reason is FailureKind.TIMEOUT
    assert "internet connection" in result.style_assessment
    assert result.recommendations == ["Check your internet connection", "Try again in a few moments"]


def test_generic_fallback(settings: Settings) -> None:
    broken = FakeBackend(recommendation_reply="[]")
    result = asyncio.run(StyleAdvisor(settings, backend=broken).recommend(ANALYSIS))

    assert result.fallback_reason is FailureKind.PARSE
    assert result.recommendations == [
        "Take a photo with better lighting",
        "Ensure your full outfit is visible",
    ]
    assert result.fashion_terms
