"""Tests for the OpenAI analysis adapter."""

import asyncio
import json

import httpx
import openai
import pytest

from nutrilog.adapters.openai_analysis_client import OpenAIAnalysisClient
from nutrilog.errors import UpstreamError


class _FakeResponses:
    def __init__(self, output_text: str = "", error: Exception | None = None) -> None:
        self.output_text = output_text
        self.error = error
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        if self.error is not None:
            raise self.error
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, responses: _FakeResponses) -> None:
        self.responses = responses


def _analyze(client: OpenAIAnalysisClient, **overrides: object) -> object:
    arguments: dict[str, object] = {
        "model": "gpt-5.2",
        "reasoning_effort": "low",
        "store": False,
        "prompt": "Analyze the meal",
        "text": "two eggs",
        "image_data_url": "data:image/jpeg;base64,ZmFrZQ==",
        "schema": {"type": "object"},
    }
    arguments.update(overrides)
    return asyncio.run(client.analyze(**arguments))


def test_openai_client_builds_request_and_parses_output() -> None:
    responses = _FakeResponses(output_text=json.dumps({"error": "Not food"}))
    client = OpenAIAnalysisClient(client=_FakeOpenAI(responses))

    result = _analyze(client)

    assert result == {"error": "Not food"}
    payload = responses.last_payload
    assert payload is not None
    assert payload["model"] == "gpt-5.2"
    assert payload["reasoning"] == {"effort": "low"}
    assert payload["text"]["format"]["strict"] is True
    content = payload["input"][0]["content"]
    assert content[0] == {"type": "input_text", "text": "Analyze the meal"}
    assert content[1] == {"type": "input_text", "text": 'User text input: "two eggs"'}
    assert content[2]["type"] == "input_image"


def test_openai_client_omits_absent_parts() -> None:
    responses = _FakeResponses(output_text="{}")
    client = OpenAIAnalysisClient(client=_FakeOpenAI(responses))

    _analyze(client, text=None, reasoning_effort=None)

    payload = responses.last_payload
    assert payload is not None
    assert "reasoning" not in payload
    content = payload["input"][0]["content"]
    assert [part["type"] for part in content] == ["input_text", "input_image"]


@pytest.mark.parametrize("output_text", ["", "not json at all"])
def test_openai_client_rejects_unusable_output(output_text: str) -> None:
    client = OpenAIAnalysisClient(client=_FakeOpenAI(_FakeResponses(output_text)))

    with pytest.raises(UpstreamError):
        _analyze(client)


def test_openai_client_wraps_transport_errors() -> None:
    request = httpx.Request("POST", "https://api.openai.com/v1/responses")
    error = openai.APIConnectionError(request=request)
    client = OpenAIAnalysisClient(client=_FakeOpenAI(_FakeResponses(error=error)))

    with pytest.raises(UpstreamError) as excinfo:
        _analyze(client)

    assert isinstance(excinfo.value.__cause__, openai.APIConnectionError)
