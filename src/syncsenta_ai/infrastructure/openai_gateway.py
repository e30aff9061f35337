"""OpenAI gateway — implements the CompletionGateway port.

Availability wins over correctness here: every upstream failure is logged
and replaced by a canned apology, so a tutoring or analysis request never
fails because the model provider hiccupped.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncGenerator, Mapping

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from syncsenta_ai.domain.entities import CompletionRequest
from syncsenta_ai.domain.value_objects import Completion
from syncsenta_ai.infrastructure.config import UpstreamProfile
from syncsenta_ai.infrastructure.stream_transformer import iter_fragments

logger = logging.getLogger(__name__)

COMPLETE_APOLOGY = "Sorry, I'm having trouble thinking right now. Please try again."
STREAM_APOLOGY = "Sorry, I had trouble with that. Could you ask again?"

ANALYSIS_INSTRUCTION = "\n\nYou are performing data analysis. Be thorough and provide insights."


def serialize_context(context_data: Mapping[str, Any] | None) -> str:
    """Canonical JSON for *context_data*; ``""`` if it cannot be encoded."""
    try:
        return json.dumps(context_data or {}, sort_keys=True, ensure_ascii=False)
    except (TypeError, ValueError):
        logger.warning("Failed to serialize context data — sending none", exc_info=True)
        return ""


def build_analysis_message(user_query: str, context_json: str) -> str:
    return f"Context Data:\n{context_json}\n\nUser Query:\n{user_query}\n"


class OpenAIGateway:
    """Concrete ``CompletionGateway`` backed by the chat-completions API.

    Parameters
    ----------
    profile:
        Immutable upstream connection profile (endpoint, key, model, limits).
    http_client:
        Optional pre-built ``httpx.AsyncClient``; lets tests swap in a
        mock transport.
    """

    def __init__(
        self,
        profile: UpstreamProfile,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._profile = profile
        self._client = AsyncOpenAI(
            api_key=profile.api_key,
            base_url=profile.base_url,
            timeout=profile.timeout_seconds,
            max_retries=0,  # one attempt: the timeout bounds the whole call
            http_client=http_client,
        )
        logger.info("Completion gateway initialised: %s at %s", profile.model, profile.base_url)

    # ── Public API ──────────────────────────────────────────────────────

    async def complete(self, system_prompt: str, user_message: str) -> Completion:
        """Send a single non-streaming request and return the assistant text."""
        request = CompletionRequest(system_prompt=system_prompt, user_message=user_message)
        try:
            response = await self._client.chat.completions.create(**self._payload(request))  # type: ignore[call-overload]
            content = response.choices[0].message.content

        except APITimeoutError:
            logger.error("Completion API timed out after %.1fs", self._profile.timeout_seconds)
            return Completion.fallback(COMPLETE_APOLOGY)

        except APIConnectionError as exc:
            logger.error("Completion API unreachable: %s", exc)
            return Completion.fallback(COMPLETE_APOLOGY)

        except APIStatusError as exc:
            logger.error("Completion API returned HTTP %d: %s", exc.status_code, exc.message)
            return Completion.fallback(COMPLETE_APOLOGY)

        except Exception:
            logger.exception("Error calling the completion API")
            return Completion.fallback(COMPLETE_APOLOGY)

        if not isinstance(content, str) or not content:
            logger.error("Completion API response carried no assistant content")
            return Completion.fallback(COMPLETE_APOLOGY)

        return Completion(text=content)

    async def complete_stream(
        self, system_prompt: str, user_message: str
    ) -> AsyncGenerator[str, None]:
        """Stream the assistant text fragment by fragment.

        Upstream lines are only read when the consumer pulls.  Closing this
        generator closes the upstream response.  On failure, one apology
        fragment is emitted and the stream ends.
        """
        request = CompletionRequest(
            system_prompt=system_prompt, user_message=user_message, streaming=True
        )
        try:
            async with self._client.chat.completions.with_streaming_response.create(
                **self._payload(request)
            ) as response:
                async for fragment in iter_fragments(response.iter_lines()):
                    yield fragment

        except APIStatusError as exc:
            logger.error("Streaming completion returned HTTP %d: %s", exc.status_code, exc.message)
            yield STREAM_APOLOGY

        except Exception:
            logger.exception("Error in streaming completion")
            yield STREAM_APOLOGY

    async def analysis_completion(
        self,
        system_prompt: str,
        user_query: str,
        context_data: Mapping[str, Any] | None,
    ) -> Completion:
        """Answer *user_query* against *context_data* with an analyst framing."""
        message = build_analysis_message(user_query, serialize_context(context_data))
        return await self.complete(system_prompt + ANALYSIS_INSTRUCTION, message)

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()

    # ── Helpers ─────────────────────────────────────────────────────────

    def _payload(self, request: CompletionRequest) -> dict[str, Any]:
        return {
            "model": self._profile.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_message},
            ],
            "max_tokens": self._profile.max_tokens,
            "temperature": self._profile.temperature,
            "stream": request.streaming,
        }
