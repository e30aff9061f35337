"""FastAPI dependency injection wiring."""

from __future__ import annotations

import logging

from syncsenta_ai.domain.exceptions import ConfigurationError
from syncsenta_ai.infrastructure.config import UpstreamProfile, get_settings
from syncsenta_ai.infrastructure.openai_gateway import OpenAIGateway
from syncsenta_ai.services.analysis import AnalysisAdapter
from syncsenta_ai.services.tutor import TutorService

logger = logging.getLogger(__name__)

_gateway: OpenAIGateway | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager.

    Raises :class:`ConfigurationError` when the upstream credential is
    missing, which aborts application startup.
    """
    global _gateway  # noqa: PLW0603

    profile = UpstreamProfile.from_settings(get_settings())
    logger.info("Upstream profile: %r", profile)
    _gateway = OpenAIGateway(profile)


async def shutdown() -> None:
    """Release shared resources."""
    global _gateway  # noqa: PLW0603

    if _gateway:
        await _gateway.close()
        _gateway = None


def get_gateway() -> OpenAIGateway:
    if _gateway is None:
        raise ConfigurationError("Completion gateway is not initialised.")
    return _gateway


def get_tutor_service() -> TutorService:
    """Build the tutoring use case over the shared gateway."""
    return TutorService(get_gateway())


def get_analysis_adapter() -> AnalysisAdapter:
    """Build the analysis use case over the shared gateway."""
    return AnalysisAdapter(get_gateway())
