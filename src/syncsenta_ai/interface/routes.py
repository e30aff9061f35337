"""API routes — thin controllers that delegate to the use cases."""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import AsyncGenerator, AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, StreamingResponse

from syncsenta_ai.domain.entities import AnalysisContext, SubjectArea
from syncsenta_ai.interface.dependencies import get_analysis_adapter, get_tutor_service
from syncsenta_ai.interface.schemas import (
    AnalysisRequest,
    AnalysisResponse,
    ChatRequest,
    ChatResponse,
    EquityAnalysisRequest,
    EquityAnalysisResponse,
)
from syncsenta_ai.services.analysis import AnalysisAdapter
from syncsenta_ai.services.tutor import TutorService

logger = logging.getLogger(__name__)

tutor_router = APIRouter(prefix="/tutor", tags=["tutor"])
analysis_router = APIRouter(prefix="/analysis", tags=["analysis"])

_SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


# ── Server-sent events ──────────────────────────────────────────────────────


def format_sse_event(fragment: str) -> str:
    """Frame *fragment* as one SSE event, one ``data:`` line per text line."""
    lines = fragment.split("\n")
    return "".join(f"data: {line}\n" for line in lines) + "\n"


async def _sse_stream(fragments: AsyncGenerator[str, None]) -> AsyncIterator[str]:
    # Closing here (client disconnect included) releases the upstream response.
    async with aclosing(fragments):
        async for fragment in fragments:
            yield format_sse_event(fragment)
    logger.info("Streaming chat response completed")


def _event_stream(fragments: AsyncGenerator[str, None]) -> StreamingResponse:
    return StreamingResponse(
        _sse_stream(fragments),
        media_type="text/event-stream",
        headers=_SSE_HEADERS,
    )


# ── Tutor ───────────────────────────────────────────────────────────────────


@tutor_router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        200: {"content": {"text/event-stream": {}}, "description": "Reply, or SSE when streamResponse is set"},
        422: {"description": "Invalid student context"},
    },
)
async def chat(
    body: ChatRequest,
    tutor: TutorService = Depends(get_tutor_service),
) -> ChatResponse | StreamingResponse:
    """Answer a student's message as Mwalimu AI."""
    context = body.student_context.to_domain()
    if body.stream_response:
        return _event_stream(tutor.reply_stream(body.message, context))

    reply = await tutor.reply(body.message, context)
    return ChatResponse.from_domain(reply)


@tutor_router.post(
    "/chat/stream",
    response_class=StreamingResponse,
    responses={200: {"content": {"text/event-stream": {}}}},
)
async def chat_stream(
    body: ChatRequest,
    tutor: TutorService = Depends(get_tutor_service),
) -> StreamingResponse:
    """Stream a Mwalimu AI answer as server-sent events."""
    context = body.student_context.to_domain()
    return _event_stream(tutor.reply_stream(body.message, context))


@tutor_router.get("/health", response_class=PlainTextResponse)
async def tutor_health() -> str:
    return "Mwalimu AI Tutor is ready! 🎓"


# ── Analysis ────────────────────────────────────────────────────────────────


async def _free_text_report(
    body: AnalysisRequest, area: SubjectArea, adapter: AnalysisAdapter
) -> AnalysisResponse:
    context = AnalysisContext(query=body.query, subject_area=area, context_data=body.context_data)
    report = await adapter.report(context)
    logger.info("%s analysis completed for school %s", area.value, body.school_id)
    return AnalysisResponse.from_domain(report)


@analysis_router.post("/school-head", response_model=AnalysisResponse)
async def school_head_analysis(
    body: AnalysisRequest,
    adapter: AnalysisAdapter = Depends(get_analysis_adapter),
) -> AnalysisResponse:
    """Operational analysis for a school head."""
    logger.info("Received school head analysis request for school: %s", body.school_id)
    return await _free_text_report(body, SubjectArea.SCHOOL_HEAD, adapter)


@analysis_router.post("/teacher", response_model=AnalysisResponse)
async def teacher_analysis(
    body: AnalysisRequest,
    adapter: AnalysisAdapter = Depends(get_analysis_adapter),
) -> AnalysisResponse:
    """Classroom insights for a teacher."""
    return await _free_text_report(body, SubjectArea.TEACHER, adapter)


@analysis_router.post("/county-strategic", response_model=AnalysisResponse)
async def county_strategic_analysis(
    body: AnalysisRequest,
    adapter: AnalysisAdapter = Depends(get_analysis_adapter),
) -> AnalysisResponse:
    """Strategic recommendations for a county education officer."""
    return await _free_text_report(body, SubjectArea.COUNTY_STRATEGIC, adapter)


@analysis_router.post("/equity", response_model=EquityAnalysisResponse)
async def equity_analysis(
    body: EquityAnalysisRequest,
    adapter: AnalysisAdapter = Depends(get_analysis_adapter),
) -> EquityAnalysisResponse:
    """Ward-level resource/score heatmap for a county."""
    logger.info("Received equity analysis request for county: %s", body.county)
    report = await adapter.equity_report(body.county)
    return EquityAnalysisResponse.from_domain(report)


@analysis_router.get("/health", response_class=PlainTextResponse)
async def analysis_health() -> str:
    return "Education Analysis Service is operational! 📊"
