"""Student tutoring use case — Mwalimu AI."""

from __future__ import annotations

import logging
import time
import uuid
from typing import AsyncGenerator

from syncsenta_ai.domain.entities import TutorReply
from syncsenta_ai.domain.ports.completion_gateway import CompletionGateway
from syncsenta_ai.domain.value_objects import TutoringContext
from syncsenta_ai.services.prompt_builder import build_tutor_prompt

logger = logging.getLogger(__name__)


class TutorService:
    """Builds the persona prompt for a student and asks the gateway."""

    def __init__(self, gateway: CompletionGateway) -> None:
        self._gateway = gateway

    async def reply(self, message: str, context: TutoringContext) -> TutorReply:
        """Return one complete tutoring answer, stamped with a fresh session id."""
        system_prompt = build_tutor_prompt(context)
        logger.info(
            "Creating tutor response for Grade %d %s student", context.grade_level, context.subject
        )
        if context.is_low_resource:
            logger.info("Adapting response for low-resource environment")

        completion = await self._gateway.complete(system_prompt, message)
        return TutorReply(
            response=completion.text,
            session_id=str(uuid.uuid4()),
            timestamp=int(time.time() * 1000),
        )

    def reply_stream(self, message: str, context: TutoringContext) -> AsyncGenerator[str, None]:
        """Return the tutoring answer as a lazy fragment stream."""
        system_prompt = build_tutor_prompt(context)
        logger.info(
            "Creating streaming tutor response for Grade %d %s student",
            context.grade_level,
            context.subject,
        )
        return self._gateway.complete_stream(system_prompt, message)
