"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ResourceTier(str, Enum):
    """How much access to technology a student has."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class SubjectArea(str, Enum):
    """Audience of an analysis request; selects the analysis prompt."""

    SCHOOL_HEAD = "SCHOOL_HEAD"
    TEACHER = "TEACHER"
    COUNTY_EQUITY = "COUNTY_EQUITY"
    COUNTY_STRATEGIC = "COUNTY_STRATEGIC"


class ResourceLevel(str, Enum):
    """Resource level of a ward in an equity heatmap."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Correlation(str, Enum):
    """Strength of the resource/score correlation in a ward."""

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    """One system + user exchange sent to the upstream provider."""

    system_prompt: str
    user_message: str
    streaming: bool = False


@dataclass(frozen=True, slots=True)
class AnalysisContext:
    """A free-text analysis question plus the data it should be answered from."""

    query: str
    subject_area: SubjectArea
    context_data: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class EquityHeatmapEntry:
    """One ward of a county equity heatmap."""

    ward: str
    resource_level: ResourceLevel
    avg_score: float
    correlation: Correlation


@dataclass(frozen=True, slots=True)
class TutorReply:
    """A complete tutoring answer returned to the caller."""

    response: str
    session_id: str
    timestamp: int  # epoch millis


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Free-text analysis returned to school heads, teachers and county officers."""

    analysis: str
    recommendations: str
    timestamp: int  # epoch millis
    analysis_id: str


@dataclass(frozen=True, slots=True)
class EquityReport:
    """Structured equity heatmap for a county."""

    heatmap: list[EquityHeatmapEntry]
    timestamp: int  # epoch millis
