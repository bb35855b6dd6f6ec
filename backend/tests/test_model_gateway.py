"""Model gateway: placeholder, error reply, retries and titles."""

from types import SimpleNamespace

import httpx
import pytest
from anthropic import APIConnectionError, APIStatusError

from adaptive_chat.errors import UpstreamError
from adaptive_chat.services.model_gateway import ModelGateway, clean_title, fallback_title
from adaptive_chat.services.prompt_composer import ImagePart, PromptPayload

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _message(text: str) -> SimpleNamespace:
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


class ScriptedMessages:
    """Stands in for `client.messages`: returns or raises each scripted item in turn."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return _message(outcome)


def _gateway(*outcomes, max_attempts=3) -> tuple[ModelGateway, ScriptedMessages]:
    messages = ScriptedMessages(*outcomes)
    client = SimpleNamespace(messages=messages)
    return ModelGateway(client=client, max_attempts=max_attempts, retry_base_delay=0), messages


async def test_unconfigured_gateway_returns_placeholder():
    gateway = ModelGateway(api_key="")

    reply = await gateway.generate(PromptPayload(text="prompt", user_message="hello there"))

    assert not gateway.configured
    assert "AI Provider Not Configured" in reply
    assert "**Your message**: hello there" in reply


async def test_generate_returns_model_text():
    gateway, messages = _gateway("Closures capture variables.")

    reply = await gateway.generate(PromptPayload(text="full prompt", user_message="q"))

    assert reply == "Closures capture variables."
    assert messages.calls[0]["messages"] == [{"role": "user", "content": "full prompt"}]
    assert messages.calls[0]["max_tokens"] == 2000


async def test_generate_sends_image_block_before_text():
    gateway, messages = _gateway("A cat.")
    payload = PromptPayload(
        text="prompt",
        user_message="what is this",
        image=ImagePart(media_type="image/png", data="aGVsbG8="),
    )

    await gateway.generate(payload)

    content = messages.calls[0]["messages"][0]["content"]
    assert content[0]["type"] == "image"
    assert content[0]["source"] == {"type": "base64", "media_type": "image/png", "data": "aGVsbG8="}
    assert content[1] == {"type": "text", "text": "prompt"}


async def test_transient_errors_are_retried():
    gateway, messages = _gateway(
        APIConnectionError(request=_REQUEST),
        APIStatusError("overloaded", response=httpx.Response(529, request=_REQUEST), body=None),
        "finally",
    )

    reply = await gateway.generate(PromptPayload(text="p", user_message="q"))

    assert reply == "finally"
    assert len(messages.calls) == 3


async def test_exhausted_retries_become_error_reply():
    gateway, messages = _gateway(
        APIConnectionError(request=_REQUEST),
        APIConnectionError(request=_REQUEST),
        max_attempts=2,
    )

    reply = await gateway.generate(PromptPayload(text="p", user_message="my question"))

    assert "AI Response Error" in reply
    assert "**Your message**: my question" in reply
    assert "Connection error" in reply
    assert len(messages.calls) == 2


async def test_non_retryable_status_fails_fast():
    gateway, messages = _gateway(
        APIStatusError("bad request", response=httpx.Response(400, request=_REQUEST), body=None),
        "never used",
    )

    with pytest.raises(UpstreamError):
        await gateway._complete("p", 10)

    assert len(messages.calls) == 1


async def test_generate_title_cleans_model_output():
    gateway, messages = _gateway('"Debugging Async Python"')

    title = await gateway.generate_title("Why does my coroutine never run?")

    assert title == "Debugging Async Python"
    assert messages.calls[0]["max_tokens"] == 30


async def test_generate_title_falls_back_on_failure():
    gateway, _ = _gateway(APIConnectionError(request=_REQUEST), max_attempts=1)

    title = await gateway.generate_title("Why does my coroutine never run at all")

    assert title == "Why does my coroutine never"


def test_fallback_title_rules():
    assert fallback_title("short one") == "short one"
    assert fallback_title("   ") == "New Chat"
    long_words = "supercalifragilistic expialidocious antidisestablishment words here"
    title = fallback_title(long_words)
    assert len(title) == 40
    assert title.endswith("...")


def test_clean_title_truncates_long_titles():
    title = clean_title("x" * 80)

    assert len(title) == 50
    assert title.endswith("...")
