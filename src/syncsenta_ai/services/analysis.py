"""Analysis use cases for school heads, teachers and county officers.

Free-text analyses are passed straight through from the gateway.  The equity
heatmap asks the model for JSON and parses it tolerantly: a model that
ignores the schema is an expected outcome and yields an empty heatmap.
"""

from __future__ import annotations

import json
import logging
import math
import time
import uuid
from typing import Any, Mapping

from syncsenta_ai.domain.entities import (
    AnalysisContext,
    AnalysisReport,
    Correlation,
    EquityHeatmapEntry,
    EquityReport,
    ResourceLevel,
    SubjectArea,
)
from syncsenta_ai.domain.ports.completion_gateway import CompletionGateway
from syncsenta_ai.services.prompt_builder import analysis_prompt, equity_prompt, equity_query

logger = logging.getLogger(__name__)

_RECOMMENDATION_POINTERS: dict[SubjectArea, str] = {
    SubjectArea.SCHOOL_HEAD: "See analysis above for actionable recommendations",
    SubjectArea.TEACHER: "Review the insights above for classroom improvement strategies",
    SubjectArea.COUNTY_STRATEGIC: "Strategic recommendations are included in the analysis above",
}


class AnalysisAdapter:
    """Runs analysis prompts through a :class:`CompletionGateway`."""

    def __init__(self, gateway: CompletionGateway) -> None:
        self._gateway = gateway

    # ── Free-text analyses ──────────────────────────────────────────────

    async def analyze(self, context: AnalysisContext) -> str:
        """Return the model's free-text answer for *context*.

        Raises :class:`UnsupportedAnalysisError` for ``COUNTY_EQUITY``, which
        only has a structured form (:meth:`equity_analysis`).
        """
        system_prompt = analysis_prompt(context.subject_area)
        logger.info("Generating %s analysis for query: %s", context.subject_area.value, context.query)
        completion = await self._gateway.analysis_completion(
            system_prompt, context.query, context.context_data
        )
        return completion.text

    async def school_head_analysis(self, query: str, school_data: Mapping[str, Any] | None) -> str:
        return await self.analyze(_context(query, SubjectArea.SCHOOL_HEAD, school_data))

    async def teacher_insights(self, query: str, class_data: Mapping[str, Any] | None) -> str:
        return await self.analyze(_context(query, SubjectArea.TEACHER, class_data))

    async def county_strategic_analysis(
        self, query: str, county_data: Mapping[str, Any] | None
    ) -> str:
        return await self.analyze(_context(query, SubjectArea.COUNTY_STRATEGIC, county_data))

    async def report(self, context: AnalysisContext) -> AnalysisReport:
        """Wrap :meth:`analyze` with an id, a timestamp and a recommendations pointer."""
        analysis = await self.analyze(context)
        return AnalysisReport(
            analysis=analysis,
            recommendations=_RECOMMENDATION_POINTERS[context.subject_area],
            timestamp=_now_millis(),
            analysis_id=str(uuid.uuid4()),
        )

    # ── Structured equity heatmap ───────────────────────────────────────

    async def equity_analysis(self, county: str) -> list[EquityHeatmapEntry]:
        """Return the ward heatmap for *county*, or ``[]`` if none could be parsed."""
        logger.info("Generating equity analysis for county: %s", county)
        completion = await self._gateway.analysis_completion(
            equity_prompt(county), equity_query(county), {"county": county}
        )
        if completion.degraded:
            return []

        entries = parse_equity_heatmap(completion.text)
        if entries is None:
            logger.warning("Equity analysis for %s did not match the heatmap schema", county)
            return []
        return entries

    async def equity_report(self, county: str) -> EquityReport:
        heatmap = await self.equity_analysis(county)
        return EquityReport(heatmap=heatmap, timestamp=_now_millis())


# ── Parsing ─────────────────────────────────────────────────────────────────


def parse_equity_heatmap(raw: str) -> list[EquityHeatmapEntry] | None:
    """Parse model output into heatmap entries.

    Accepts ``{"heatmap": [...]}`` or a bare list, optionally wrapped in
    markdown code fences.  Returns ``None`` if the text is not valid JSON or
    any entry breaks the schema.
    """
    text = _strip_code_fences(raw)

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError:
        return None

    if isinstance(data, dict):
        data = data.get("heatmap")
    if not isinstance(data, list):
        return None

    entries: list[EquityHeatmapEntry] = []
    for item in data:
        entry = _parse_entry(item)
        if entry is None:
            return None
        entries.append(entry)
    return entries


def _parse_entry(item: Any) -> EquityHeatmapEntry | None:
    if not isinstance(item, dict):
        return None

    ward = item.get("ward")
    if not isinstance(ward, str) or not ward.strip():
        return None

    score = item.get("avgScore")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return None
    if math.isnan(score) or not 0 <= score <= 100:
        return None

    try:
        resource_level = ResourceLevel(str(item.get("resourceLevel", "")).strip().lower())
        correlation = Correlation(str(item.get("correlation", "")).strip().lower())
    except ValueError:
        return None

    return EquityHeatmapEntry(
        ward=ward.strip(),
        resource_level=resource_level,
        avg_score=float(score),
        correlation=correlation,
    )


def _strip_code_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        first_nl = text.index("\n") if "\n" in text else 3
        text = text[first_nl + 1 :]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def _context(query: str, area: SubjectArea, data: Mapping[str, Any] | None) -> AnalysisContext:
    return AnalysisContext(query=query, subject_area=area, context_data=data or {})


def _now_millis() -> int:
    return int(time.time() * 1000)
