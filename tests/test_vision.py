"""Tests for the Gemini client wrapper."""

import asyncio
import base64
from dataclasses import replace
from types import SimpleNamespace

import httpx
import pytest

from outfit_advisor.config import Settings
from outfit_advisor.core.errors import ConfigurationError, ServiceError
from outfit_advisor.core.image_encoder import EncodedImage
from outfit_advisor.core.vision import GeminiClient


def test_client_requires_api_key(unconfigured_settings: Settings) -> None:
    with pytest.raises(ConfigurationError):
        GeminiClient(unconfigured_settings)


def test_generate_sends_prompt_image_and_json_config(
    settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = GeminiClient(settings)
    captured = {}

    async def fake_generate_content(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(text='{"ok": true}')

    monkeypatch.setattr(client.client.aio.models, "generate_content", fake_generate_content)

    image = EncodedImage(data=base64.b64encode(b"img").decode(), mime_type="image/png")
    text = asyncio.run(client.generate("Describe", image=image, max_output_tokens=321))

    assert text == '{"ok": true}'
    assert captured["model"] == settings.model
    parts = captured["contents"][0].parts
    assert parts[0].text == "Describe"
    assert parts[1].inline_data.data == b"img"
    assert parts[1].inline_data.mime_type == "image/png"
    assert captured["config"].max_output_tokens == 321
    assert captured["config"].response_mime_type == "application/json"
    assert captured["config"].thinking_config.thinking_budget == 0


def test_transport_errors_become_service_errors(
    settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = GeminiClient(settings)

    async def failing_generate_content(**kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(client.client.aio.models, "generate_content", failing_generate_content)

    with pytest.raises(ServiceError):
        asyncio.run(client.generate("Describe", max_output_tokens=10))


def test_empty_reply_is_a_service_error(
    settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = GeminiClient(settings)

    async def empty_generate_content(**kwargs):
        return SimpleNamespace(text=None)

    monkeypatch.setattr(client.client.aio.models, "generate_content", empty_generate_content)

    with pytest.raises(ServiceError):
        asyncio.run(client.generate("Describe", max_output_tokens=10))


def test_default_token_ceilings_leave_room_for_json() -> None:
    defaults = Settings()
    assert defaults.analysis_max_tokens >= 4096
    assert defaults.recommendation_max_tokens >= 4096
    assert defaults.thinking_budget == 0


def test_thinking_config_omitted_when_unset(
    settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = GeminiClient(replace(settings, thinking_budget=None))
    captured = {}

    async def fake_generate_content(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(text="{}")

    monkeypatch.setattr(client.client.aio.models, "generate_content", fake_generate_content)
    asyncio.run(client.generate("Describe", max_output_tokens=10))

    assert captured["config"].thinking_config is None
