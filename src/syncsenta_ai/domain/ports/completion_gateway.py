"""Port: completion gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Any, AsyncGenerator, Mapping, Protocol

from syncsenta_ai.domain.value_objects import Completion


class CompletionGateway(Protocol):
    """Contract for talking to the upstream language model.

    None of these methods raise on upstream failure; they return (or emit)
    an apology instead.
    """

    async def complete(self, system_prompt: str, user_message: str) -> Completion:
        """Send a system + user message pair and return the assistant text."""
        ...

    def complete_stream(self, system_prompt: str, user_message: str) -> AsyncGenerator[str, None]:
        """Stream the assistant text as ordered, non-empty fragments.

        ``aclose()`` on the returned generator releases the upstream connection.
        """
        ...

    async def analysis_completion(
        self,
        system_prompt: str,
        user_query: str,
        context_data: Mapping[str, Any] | None,
    ) -> Completion:
        """Answer *user_query* against serialized *context_data*."""
        ...
