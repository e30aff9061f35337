"""
Tests for the analysis adapter:
- tolerant heatmap parsing
- equity fallback to an empty list
- free-text analyses
"""

import asyncio
import json

import httpx
import pytest

from syncsenta_ai.domain.entities import (
    AnalysisContext,
    Correlation,
    EquityHeatmapEntry,
    ResourceLevel,
    SubjectArea,
)
from syncsenta_ai.domain.exceptions import UnsupportedAnalysisError
from syncsenta_ai.services.analysis import AnalysisAdapter, parse_equity_heatmap


def _entry(**overrides):
    base = {"ward": "Central Ward", "resourceLevel": "high", "avgScore": 85.5, "correlation": "strong"}
    base.update(overrides)
    return base


def _heatmap_json(*entries):
    return json.dumps({"heatmap": list(entries)})


# ──────────────────────────────────────────────
# Parsing
# ──────────────────────────────────────────────

class TestParseEquityHeatmap:
    def test_valid(self):
        text = _heatmap_json(_entry(), _entry(ward="West Ward", resourceLevel="low", avgScore=58, correlation="weak"))
        assert parse_equity_heatmap(text) == [
            EquityHeatmapEntry("Central Ward", ResourceLevel.HIGH, 85.5, Correlation.STRONG),
            EquityHeatmapEntry("West Ward", ResourceLevel.LOW, 58.0, Correlation.WEAK),
        ]

    def test_bare_list(self):
        assert len(parse_equity_heatmap(json.dumps([_entry(), _entry()]))) == 2

    def test_markdown_fences(self):
        text = "```json\n" + _heatmap_json(_entry()) + "\n```"
        assert parse_equity_heatmap(text) == [
            EquityHeatmapEntry("Central Ward", ResourceLevel.HIGH, 85.5, Correlation.STRONG)
        ]

    def test_enum_values_are_case_insensitive(self):
        [entry] = parse_equity_heatmap(_heatmap_json(_entry(resourceLevel="Medium", correlation="MODERATE")))
        assert entry.resource_level is ResourceLevel.MEDIUM
        assert entry.correlation is Correlation.MODERATE

    def test_duplicates_are_kept_in_order(self):
        entries = parse_equity_heatmap(_heatmap_json(_entry(avgScore=1), _entry(avgScore=2)))
        assert [e.avg_score for e in entries] == [1.0, 2.0]

    def test_empty_heatmap(self):
        assert parse_equity_heatmap('{"heatmap": []}') == []

    @pytest.mark.parametrize(
        "text",
        [
            "not json at all",
            "Here is your data: {\"heatmap\": []",
            '{"wards": []}',
            '{"heatmap": "none"}',
            "42",
            '["Central Ward"]',
        ],
    )
    def test_wrong_shape(self, text):
        assert parse_equity_heatmap(text) is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"avgScore": 101},
            {"avgScore": -0.5},
            {"avgScore": "85"},
            {"avgScore": True},
            {"resourceLevel": "very high"},
            {"correlation": "none"},
            {"ward": ""},
            {"ward": None},
        ],
    )
    def test_invalid_entry_rejects_whole_result(self, overrides):
        assert parse_equity_heatmap(_heatmap_json(_entry(), _entry(**overrides))) is None

    @pytest.mark.parametrize("missing", ["ward", "resourceLevel", "avgScore", "correlation"])
    def test_missing_field(self, missing):
        entry = _entry()
        del entry[missing]
        assert parse_equity_heatmap(_heatmap_json(entry)) is None

    def test_score_bounds_are_inclusive(self):
        entries = parse_equity_heatmap(_heatmap_json(_entry(avgScore=0), _entry(avgScore=100)))
        assert [e.avg_score for e in entries] == [0.0, 100.0]


# ──────────────────────────────────────────────
# Equity analysis
# ──────────────────────────────────────────────

class TestEquityAnalysis:
    def test_parsed_entries(self, fake_gateway_cls):
        gateway = fake_gateway_cls(_heatmap_json(_entry(ward="Westlands")))
        entries = asyncio.run(AnalysisAdapter(gateway).equity_analysis("Nairobi"))

        assert [e.ward for e in entries] == ["Westlands"]
        _, system_prompt, query = gateway.calls[0]
        assert "Nairobi County" in system_prompt
        assert query == "Generate equity analysis heatmap data for Nairobi County"
        assert gateway.context_data == [{"county": "Nairobi"}]

    def test_malformed_json_yields_empty_list(self, fake_gateway_cls):
        gateway = fake_gateway_cls('{"heatmap": [{"ward": "Central", ')
        assert asyncio.run(AnalysisAdapter(gateway).equity_analysis("Nairobi")) == []

    def test_degraded_completion_yields_empty_list(self, fake_gateway_cls):
        gateway = fake_gateway_cls("Sorry, I'm having trouble thinking right now.", degraded=True)
        assert asyncio.run(AnalysisAdapter(gateway).equity_analysis("Nairobi")) == []

    def test_report_has_timestamp(self, fake_gateway_cls):
        gateway = fake_gateway_cls(_heatmap_json(_entry()))
        report = asyncio.run(AnalysisAdapter(gateway).equity_report("Mombasa"))
        assert len(report.heatmap) == 1
        assert report.timestamp > 0

    def test_against_simulated_upstream(self, make_gateway, envelope):
        def handler(request):
            return httpx.Response(200, json=envelope("I think Central Ward is {doing well"))

        entries = asyncio.run(AnalysisAdapter(make_gateway(handler)).equity_analysis("Nairobi"))
        assert entries == []

    def test_upstream_outage(self, make_gateway):
        def handler(request):
            return httpx.Response(502)

        assert asyncio.run(AnalysisAdapter(make_gateway(handler)).equity_analysis("Nairobi")) == []


# ──────────────────────────────────────────────
# Free-text analyses
# ──────────────────────────────────────────────

class TestFreeTextAnalysis:
    @pytest.mark.parametrize(
        "method, marker",
        [
            ("school_head_analysis", "Kenyan school head"),
            ("teacher_insights", "teacher support"),
            ("county_strategic_analysis", "County Education Officer"),
        ],
    )
    def test_passes_text_through(self, fake_gateway_cls, method, marker):
        gateway = fake_gateway_cls("Hire two more maths teachers.")
        adapter = AnalysisAdapter(gateway)
        data = {"students": 640, "teachers": 12}

        result = asyncio.run(getattr(adapter, method)("What should we fix first?", data))

        assert result == "Hire two more maths teachers."
        kind, system_prompt, query = gateway.calls[0]
        assert kind == "analysis_completion"
        assert marker in system_prompt
        assert query == "What should we fix first?"
        assert gateway.context_data == [data]

    def test_degraded_text_is_returned_not_raised(self, fake_gateway_cls):
        gateway = fake_gateway_cls("apology", degraded=True)
        result = asyncio.run(AnalysisAdapter(gateway).teacher_insights("q", None))
        assert result == "apology"
        assert gateway.context_data == [{}]

    def test_equity_is_not_free_text(self, fake_gateway_cls):
        adapter = AnalysisAdapter(fake_gateway_cls("x"))
        context = AnalysisContext(query="q", subject_area=SubjectArea.COUNTY_EQUITY)
        with pytest.raises(UnsupportedAnalysisError):
            asyncio.run(adapter.analyze(context))

    def test_report(self, fake_gateway_cls):
        adapter = AnalysisAdapter(fake_gateway_cls("Focus on attendance."))
        context = AnalysisContext(query="q", subject_area=SubjectArea.SCHOOL_HEAD)
        first = asyncio.run(adapter.report(context))
        second = asyncio.run(adapter.report(context))

        assert first.analysis == "Focus on attendance."
        assert first.recommendations == "See analysis above for actionable recommendations"
        assert first.analysis_id != second.analysis_id
