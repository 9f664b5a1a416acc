"""
Tests for the AI plumbing: provider selection with retry and mock fallback,
JSON parsing of model output, the per-feature config registry and the
OpenAI chat-completions adapter (driven through httpx.MockTransport).
"""

import json

import anyio
import httpx
import pytest

from adapters.openai_adapter import AIProviderError, OpenAIClient
from app.config import Settings
from services.ai.base import BaseAIService
from services.ai.config import (
    CHORE_ASSIGNMENT,
    MEAL_PLANNING,
    SHOPPING_SUGGESTIONS,
    AIConfigManager,
    default_configs,
)


class FlakyClient:
    """Stands in for OpenAIClient; fails the first `failures` calls."""

    def __init__(self, failures: int = 0):
        self.failures = failures
        self.calls = 0

    async def chat_completion(self, messages, model, **kwargs):
        self.calls += 1
        if self.calls <= self.failures:
            raise AIProviderError("upstream timeout")
        return '{"ok": true}'


def make_service(client=None, **config_changes) -> BaseAIService:
    manager = AIConfigManager(Settings(openai_api_key=""))
    if config_changes:
        manager.update_config(SHOPPING_SUGGESTIONS, **config_changes)
    service = BaseAIService(config_manager=manager, client=client)
    service.feature = SHOPPING_SUGGESTIONS
    service.retry_base_delay = 0
    return service


async def ask(client, config):
    content = await client.chat_completion([], config.model)
    return json.loads(content)


def mock_answer():
    return {"mock": True}


def run(service, ai_call=ask, mock_call=mock_answer):
    return anyio.run(service.execute_with_fallback, ai_call, mock_call)


# =============================================================================
# EXECUTE WITH FALLBACK
# =============================================================================


def test_disabled_feature_reports_failure():
    response = run(make_service(enabled=False))
    assert response.success is False
    assert response.provider == "disabled"
    assert "disabled" in response.error


def test_openai_success():
    client = FlakyClient()
    response = run(make_service(client))
    assert response.success is True
    assert response.provider == "openai"
    assert response.data == {"ok": True}
    assert response.fallback_used is False
    assert client.calls == 1


def test_openai_retries_then_succeeds():
    client = FlakyClient(failures=2)
    response = run(make_service(client, retry_attempts=2))
    assert response.provider == "openai"
    assert client.calls == 3


def test_openai_exhausted_falls_back_to_mock():
    client = FlakyClient(failures=10)
    response = run(make_service(client, retry_attempts=2))
    assert client.calls == 3
    assert response.success is True
    assert response.provider == "mock"
    assert response.fallback_used is True
    assert response.data == {"mock": True}


def test_openai_failure_without_fallback():
    response = run(make_service(FlakyClient(failures=10), fallback_to_mock=False, retry_attempts=0))
    assert response.success is False
    assert response.provider == "openai"
    assert response.error.startswith("OpenAI failed")


def test_openai_and_mock_both_fail():
    def broken_mock():
        raise RuntimeError("no data")

    response = run(make_service(FlakyClient(failures=10), retry_attempts=0), mock_call=broken_mock)
    assert response.success is False
    assert response.fallback_used is True
    assert response.error == "Both AI and mock failed: no data"


def test_no_client_uses_mock_when_allowed():
    response = run(make_service())
    assert response.success is True
    assert response.provider == "mock"
    assert response.fallback_used is True


def test_no_client_without_fallback_has_no_provider():
    response = run(make_service(fallback_to_mock=False))
    assert response.success is False
    assert response.error == f"No valid provider configured for {SHOPPING_SUGGESTIONS}"


def test_mock_provider_accepts_async_mock():
    async def async_mock():
        return ["apples"]

    response = run(make_service(provider="mock"), mock_call=async_mock)
    assert response.success is True
    assert response.provider == "mock"
    assert response.fallback_used is False
    assert response.data == ["apples"]


def test_processing_time_is_reported():
    response = run(make_service(provider="mock"))
    assert response.processing_time >= 0


# =============================================================================
# RETRY AND PARSING HELPERS
# =============================================================================


def test_with_retry_raises_last_error():
    service = make_service()
    attempts = []

    async def always_fails():
        attempts.append(1)
        raise ValueError(f"attempt {len(attempts)}")

    with pytest.raises(ValueError, match="attempt 3"):
        anyio.run(service.with_retry, always_fails, 2)
    assert len(attempts) == 3


@pytest.mark.parametrize(
    "content, expected",
    [
        ('{"items": ["milk"]}', {"items": ["milk"]}),
        ('```json\n{"items": ["milk"]}\n```', {"items": ["milk"]}),
        ("```\n[1, 2]\n```", [1, 2]),
        ("Sure! Here are some ideas", "fallback"),
        ("", "fallback"),
    ],
)
def test_parse_ai_response(content, expected):
    assert BaseAIService.parse_ai_response(content, "fallback") == expected


def test_create_openai_prompt():
    messages = BaseAIService.create_openai_prompt("You are helpful", "Suggest dinner")
    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[1]["content"] == "Suggest dinner"


# =============================================================================
# CONFIG REGISTRY
# =============================================================================


def test_defaults_follow_settings():
    configs = default_configs(Settings(openai_api_key="sk-test", ai_provider="mock", ai_meal_planning_enabled=False))
    assert configs[SHOPPING_SUGGESTIONS].provider == "mock"
    assert configs[SHOPPING_SUGGESTIONS].api_key == "sk-test"
    assert configs[MEAL_PLANNING].enabled is False
    assert configs[CHORE_ASSIGNMENT].provider == "mock"
    assert configs[CHORE_ASSIGNMENT].api_key is None


def test_config_manager_returns_copies():
    manager = AIConfigManager(Settings())
    config = manager.get_config(SHOPPING_SUGGESTIONS)
    config.enabled = False
    assert manager.is_enabled(SHOPPING_SUGGESTIONS) is True


def test_config_manager_updates_and_resets():
    manager = AIConfigManager(Settings())
    manager.disable_feature(MEAL_PLANNING)
    assert manager.is_enabled(MEAL_PLANNING) is False

    manager.enable_feature(MEAL_PLANNING)
    assert manager.is_enabled(MEAL_PLANNING) is True

    manager.update_config(MEAL_PLANNING, provider="disabled")
    assert manager.is_enabled(MEAL_PLANNING) is False

    manager.reset()
    assert manager.is_enabled(MEAL_PLANNING) is True


def test_config_manager_rejects_unknown_values():
    manager = AIConfigManager(Settings())
    with pytest.raises(ValueError):
        manager.update_config(SHOPPING_SUGGESTIONS, provider="anthropic")
    with pytest.raises(KeyError):
        manager.get_config("laundry_folding")


# =============================================================================
# OPENAI ADAPTER
# =============================================================================


def _client(handler) -> OpenAIClient:
    return OpenAIClient("sk-test", base_url="https://llm.test/v1/", transport=httpx.MockTransport(handler))


def _complete(client: OpenAIClient) -> str:
    async def call():
        return await client.chat_completion(
            [{"role": "user", "content": "hi"}], "gpt-test", response_format={"type": "json_object"}
        )

    return anyio.run(call)


def test_openai_client_sends_request_and_reads_content():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": '{"a": 1}'}}]})

    assert _complete(_client(handler)) == '{"a": 1}'
    assert seen["url"] == "https://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["model"] == "gpt-test"
    assert seen["body"]["response_format"] == {"type": "json_object"}


@pytest.mark.parametrize(
    "response, message",
    [
        (httpx.Response(500, json={"error": "boom"}), "HTTP 500"),
        (httpx.Response(200, json={"choices": []}), "Malformed"),
        (httpx.Response(200, json={"choices": [{"message": {"content": ""}}]}), "No response"),
        (httpx.Response(200, text="not json"), "request failed"),
    ],
)
def test_openai_client_errors(response, message):
    with pytest.raises(AIProviderError, match=message):
        _complete(_client(lambda request: response))
