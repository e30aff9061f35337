"""Shared fixtures: a scripted upstream, a fake gateway, and settings."""

from __future__ import annotations

import json
from typing import Any, AsyncGenerator, Callable, Mapping

import httpx
import pytest

from syncsenta_ai.domain.value_objects import Completion
from syncsenta_ai.infrastructure.config import Settings, UpstreamProfile
from syncsenta_ai.infrastructure.openai_gateway import OpenAIGateway

TEST_BASE_URL = "https://upstream.test/v1"


# ──────────────────────────────────────────────
# Upstream simulation
# ──────────────────────────────────────────────

class ScriptedStream(httpx.AsyncByteStream):
    """Response body that hands out one chunk per pull and records closing."""

    def __init__(self, chunks: list[bytes], error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error
        self.pulled = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            self.pulled += 1
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True


def sse_chunks(*deltas: str | None, done: bool = True) -> list[bytes]:
    """Build upstream SSE frames; ``None`` produces a frame without content."""
    chunks = []
    for delta in deltas:
        frame: dict[str, Any] = {"choices": [{"delta": {} if delta is None else {"content": delta}}]}
        chunks.append(f"data: {json.dumps(frame)}\n\n".encode())
    if done:
        chunks.append(b"data: [DONE]\n\n")
    return chunks


def completion_envelope(content: str) -> dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-test",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


@pytest.fixture
def profile() -> UpstreamProfile:
    return UpstreamProfile(
        base_url=TEST_BASE_URL,
        api_key="sk-test",
        model="gpt-test",
        max_tokens=256,
        temperature=0.5,
        timeout_seconds=5.0,
    )


@pytest.fixture
def make_gateway(profile) -> Callable[[Callable[[httpx.Request], httpx.Response]], OpenAIGateway]:
    """Factory: gateway whose upstream is answered by *handler*."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> OpenAIGateway:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return OpenAIGateway(profile, http_client=client)

    return _make


# ──────────────────────────────────────────────
# In-memory gateway
# ──────────────────────────────────────────────

class FakeGateway:
    """CompletionGateway double that returns canned output and records calls."""

    def __init__(
        self,
        text: str = "",
        *,
        degraded: bool = False,
        fragments: list[str] | None = None,
    ) -> None:
        self.text = text
        self.degraded = degraded
        self.fragments = fragments or []
        self.calls: list[tuple[str, ...]] = []
        self.context_data: list[Mapping[str, Any] | None] = []
        self.stream_closed = False

    async def complete(self, system_prompt: str, user_message: str) -> Completion:
        self.calls.append(("complete", system_prompt, user_message))
        return Completion(text=self.text, degraded=self.degraded)

    async def complete_stream(self, system_prompt: str, user_message: str) -> AsyncGenerator[str, None]:
        self.calls.append(("complete_stream", system_prompt, user_message))
        try:
            for fragment in self.fragments:
                yield fragment
        finally:
            self.stream_closed = True

    async def analysis_completion(
        self,
        system_prompt: str,
        user_query: str,
        context_data: Mapping[str, Any] | None,
    ) -> Completion:
        self.calls.append(("analysis_completion", system_prompt, user_query))
        self.context_data.append(context_data)
        return Completion(text=self.text, degraded=self.degraded)


@pytest.fixture
def fake_gateway_cls() -> type[FakeGateway]:
    return FakeGateway


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, openai_api_key="sk-test")  # type: ignore[call-arg]


@pytest.fixture
def scripted_stream_cls() -> type[ScriptedStream]:
    return ScriptedStream


@pytest.fixture
def sse() -> Callable[..., list[bytes]]:
    return sse_chunks


@pytest.fixture
def envelope() -> Callable[[str], dict[str, Any]]:
    return completion_envelope
