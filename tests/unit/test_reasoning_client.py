"""Reasoning client request shape and response parsing."""

import asyncio
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from hiresense.integrations.reasoning_client import (
    ReasoningClient,
    ReasoningResponseError,
    build_reasoning_client,
)


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(
            id="resp-1",
            model=kwargs["model"],
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))],
            usage=SimpleNamespace(total_tokens=30, prompt_tokens=20, completion_tokens=10),
        )


@pytest.fixture
def live_client(monkeypatch):
    monkeypatch.delenv("HIRESENSE_TEST_MODE", raising=False)
    return ReasoningClient(api_key="test-key", max_retries=1)


def _install(client, completions):
    client.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_request_is_single_user_prompt_with_json_mode(live_client):
    completions = FakeCompletions(content='{"score": 77}')
    _install(live_client, completions)

    parsed, metadata = asyncio.run(live_client.complete_json("Analyze this", model="m-1"))

    assert parsed == {"score": 77}
    assert metadata["tokens_total"] == 30
    [request] = completions.requests
    assert request["model"] == "m-1"
    assert request["messages"] == [{"role": "user", "content": "Analyze this"}]
    assert request["response_format"] == {"type": "json_object"}
    assert request["temperature"] == 0.2


def test_empty_content_reads_as_empty_object(live_client):
    _install(live_client, FakeCompletions(content=None))
    parsed, _ = asyncio.run(live_client.complete_json("x"))
    assert parsed == {}


def test_non_json_content_raises(live_client):
    _install(live_client, FakeCompletions(content="I cannot help with that."))
    with pytest.raises(ReasoningResponseError):
        asyncio.run(live_client.complete_json("x"))


def test_provider_error_propagates_after_retries(live_client):
    _install(live_client, FakeCompletions(error=OpenAIError("rate limited")))
    with pytest.raises(OpenAIError):
        asyncio.run(live_client.complete_json("x"))


@pytest.mark.parametrize(
    "content, expected",
    [
        ('{"a": 1}', {"a": 1}),
        ('```json\n{"a": 1}\n```', {"a": 1}),
        ("Here you go: {\"a\": 1} thanks", {"a": 1}),
        ("   ", {}),
    ],
)
def test_parse_content(content, expected):
    assert ReasoningClient.parse_content(content) == expected


def test_parse_content_rejects_non_objects():
    with pytest.raises(ReasoningResponseError):
        ReasoningClient.parse_content("[1, 2, 3]")


def test_missing_api_key_is_rejected(monkeypatch):
    monkeypatch.delenv("HIRESENSE_TEST_MODE", raising=False)
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    with pytest.raises(ValueError):
        ReasoningClient()


def test_test_mode_answers_without_network(monkeypatch):
    monkeypatch.setenv("HIRESENSE_TEST_MODE", "1")
    client = ReasoningClient()
    parsed, metadata = asyncio.run(client.complete_json("x"))
    assert parsed == {}
    assert metadata["mock"] is True


def test_build_from_config(monkeypatch):
    monkeypatch.delenv("HIRESENSE_TEST_MODE", raising=False)
    monkeypatch.setenv("OTHER_KEY", "secret")
    client = build_reasoning_client(
        {"reasoning": {"model": "llama-3", "temperature": 0.0, "api_key_env": "OTHER_KEY"}}
    )
    assert client.model == "llama-3"
    assert client.temperature == 0.0
    assert client.api_key == "secret"
    asyncio.run(client.aclose())
    assert client.client is None
