"""Pydantic request / response DTOs for the API boundary.

JSON field names are camelCase to match the web frontend.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from syncsenta_ai.domain.entities import (
    AnalysisReport,
    Correlation,
    EquityHeatmapEntry,
    EquityReport,
    ResourceLevel,
    ResourceTier,
    TutorReply,
)
from syncsenta_ai.domain.value_objects import TutoringContext


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _not_blank(value: str, field_name: str) -> str:
    stripped = value.strip()
    if not stripped:
        msg = f"{field_name} must not be empty."
        raise ValueError(msg)
    return stripped


# ── Tutoring ────────────────────────────────────────────────────────────────


class StudentContext(_CamelModel):
    """The student's grade, subject and resource setting.

    Bounds are checked by :class:`TutoringContext` when the request is mapped
    to the domain, which answers 422 through the domain error handler.
    """

    grade_level: int
    current_subject: str
    resource_level: ResourceTier
    school_id: str | None = None
    teacher_customization: str | None = None

    def to_domain(self) -> TutoringContext:
        return TutoringContext(
            grade_level=self.grade_level,
            subject=self.current_subject,
            resource_tier=self.resource_level,
            school_id=self.school_id,
            customization=self.teacher_customization,
        )


class ChatRequest(_CamelModel):
    """Request body for ``POST /tutor/chat`` and ``/tutor/chat/stream``."""

    message: str
    student_context: StudentContext
    stream_response: bool = False

    @field_validator("message")
    @classmethod
    def _message_not_blank(cls, v: str) -> str:
        return _not_blank(v, "message")


class ChatResponse(_CamelModel):
    response: str
    session_id: str
    timestamp: int

    @classmethod
    def from_domain(cls, reply: TutorReply) -> ChatResponse:
        return cls(response=reply.response, session_id=reply.session_id, timestamp=reply.timestamp)


# ── Analysis ────────────────────────────────────────────────────────────────


class AnalysisRequest(_CamelModel):
    """Request body for the free-text analysis endpoints."""

    query: str
    school_id: str
    context_data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, v: str) -> str:
        return _not_blank(v, "query")

    @field_validator("school_id")
    @classmethod
    def _school_not_blank(cls, v: str) -> str:
        return _not_blank(v, "schoolId")

    @field_validator("context_data", mode="before")
    @classmethod
    def _null_context_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v


class AnalysisResponse(_CamelModel):
    analysis: str
    recommendations: str
    timestamp: int
    analysis_id: str

    @classmethod
    def from_domain(cls, report: AnalysisReport) -> AnalysisResponse:
        return cls(
            analysis=report.analysis,
            recommendations=report.recommendations,
            timestamp=report.timestamp,
            analysis_id=report.analysis_id,
        )


class EquityAnalysisRequest(_CamelModel):
    """Request body for ``POST /analysis/equity``."""

    county: str

    @field_validator("county")
    @classmethod
    def _county_not_blank(cls, v: str) -> str:
        return _not_blank(v, "county")


class HeatmapEntry(_CamelModel):
    ward: str
    resource_level: ResourceLevel
    avg_score: float
    correlation: Correlation

    @classmethod
    def from_domain(cls, entry: EquityHeatmapEntry) -> HeatmapEntry:
        return cls(
            ward=entry.ward,
            resource_level=entry.resource_level,
            avg_score=entry.avg_score,
            correlation=entry.correlation,
        )


class EquityAnalysisResponse(_CamelModel):
    heatmap: list[HeatmapEntry]
    timestamp: int

    @classmethod
    def from_domain(cls, report: EquityReport) -> EquityAnalysisResponse:
        return cls(
            heatmap=[HeatmapEntry.from_domain(e) for e in report.heatmap],
            timestamp=report.timestamp,
        )


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
