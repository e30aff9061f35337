"""Upstream SSE lines → downstream text fragments.

The chat-completions stream is a sequence of ``data: {json}`` lines, with
blank and comment lines interleaved, terminated by ``data: [DONE]``.
"""

from __future__ import annotations

import json
import logging
from typing import AsyncIterable, AsyncIterator

logger = logging.getLogger(__name__)

EVENT_MARKER = "data:"
DONE_SENTINEL = "[DONE]"


def extract_delta(payload: str) -> str:
    """Return the text at ``choices[0].delta.content``, or ``""``.

    A corrupt frame yields ``""`` so that one bad line does not end an
    otherwise healthy stream.
    """
    try:
        frame = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug("Skipping malformed stream frame: %.100s", payload)
        return ""

    try:
        content = frame["choices"][0]["delta"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""

    return content if isinstance(content, str) else ""


async def iter_fragments(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Yield non-empty deltas from *lines*, in upstream order.

    Stops at the sentinel without pulling any further lines.
    """
    async for line in lines:
        if not line.startswith(EVENT_MARKER):
            continue

        payload = line[len(EVENT_MARKER):].strip()
        if payload == DONE_SENTINEL:
            return

        text = extract_delta(payload)
        if text:
            yield text
