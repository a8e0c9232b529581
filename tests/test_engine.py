"""Tests for the impact analysis engine."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from regradar.analysis.engine import ImpactAnalyzer, analysis_statistics, basic_summary
from regradar.config import AnalysisConfig
from regradar.models import AnalysisErrorKind, RegulationType


@pytest.fixture
def analyzer():
    return ImpactAnalyzer(AnalysisConfig())


class TestScenarios:
    @pytest.mark.asyncio
    async def test_enforcement_action(self, analyzer, enforcement_item):
        result = await analyzer.analyze(enforcement_item)

        assert result.success is True
        analysis = result.analysis
        assert analysis.regulation_type == RegulationType.ENFORCEMENT
        assert analysis.severity_score >= 8
        assert analysis.estimated_penalty == 500_000
        assert any("90 days" in d.description for d in analysis.compliance_deadlines)
        assert "High severity regulation requires immediate attention" in result.warnings

    @pytest.mark.asyncio
    async def test_final_rule(self, analyzer, final_rule_item):
        result = await analyzer.analyze(final_rule_item)

        assert result.analysis.regulation_type == RegulationType.FINAL_RULE
        assert 5 <= result.analysis.severity_score < 8

    @pytest.mark.asyncio
    async def test_proposed_rule(self, analyzer, proposed_rule_item):
        result = await analyzer.analyze(proposed_rule_item)

        analysis = result.analysis
        assert analysis.regulation_type == RegulationType.PROPOSED_RULE
        assert analysis.severity_score < 5
        assert analysis.implementation_timeline_days > 180
        assert any("comment" in a.description for a in analysis.action_items)
        assert "Limited description available - manual review recommended" in result.warnings

    @pytest.mark.asyncio
    async def test_batch_with_invalid_item(self, analyzer, enforcement_item, make_item):
        results = await analyzer.analyze_batch([enforcement_item, make_item(title="")])

        assert len(results) == 2
        assert results[0].success is True
        assert results[1].success is False


class TestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, kind, word",
        [
            ({"title": ""}, AnalysisErrorKind.MISSING_TITLE, "title"),
            ({"description": "   "}, AnalysisErrorKind.MISSING_DESCRIPTION, "description"),
            ({"link": "not-a-valid-url"}, AnalysisErrorKind.INVALID_URL, "URL"),
            ({"published_at": None}, AnalysisErrorKind.INVALID_DATE, "date"),
        ],
    )
    async def test_rejects_invalid_field(self, analyzer, make_item, overrides, kind, word):
        result = await analyzer.analyze(make_item(**overrides))

        assert result.success is False
        assert result.analysis is None
        assert result.error_kinds == [kind]
        assert word in result.errors[0]
        assert result.processing_time_ms >= 0

    @pytest.mark.asyncio
    async def test_reports_every_invalid_field(self, analyzer, make_item):
        result = await analyzer.analyze(make_item(title="", description="", link="nope"))
        assert len(result.errors) == 3


class TestAnalyzerBehaviour:
    @pytest.mark.asyncio
    async def test_deterministic(self, analyzer, enforcement_item):
        first = (await analyzer.analyze(enforcement_item)).analysis
        second = (await analyzer.analyze(enforcement_item)).analysis

        assert first.severity_score == second.severity_score
        assert first.regulation_type == second.regulation_type
        assert first.business_impact_areas == second.business_impact_areas
        assert first.estimated_penalty == second.estimated_penalty

    @pytest.mark.asyncio
    async def test_action_item_cap(self, make_item):
        analyzer = ImpactAnalyzer(AnalysisConfig(max_action_items=1))
        item = make_item(description="AML and KYC reporting and disclosure for software systems.")
        result = await analyzer.analyze(item)
        assert len(result.analysis.action_items) == 1

    @pytest.mark.asyncio
    async def test_severity_adjustment(self, final_rule_item):
        analyzer = ImpactAnalyzer(AnalysisConfig(severity_adjustment_factor=1.5))
        result = await analyzer.analyze(final_rule_item)
        assert result.analysis.severity_score == 9

    @pytest.mark.asyncio
    async def test_translator_failure_uses_fallback(self, enforcement_item):
        translator = MagicMock()
        translator.translate = AsyncMock(side_effect=RuntimeError("translator down"))
        analyzer = ImpactAnalyzer(AnalysisConfig(), translator=translator)

        result = await analyzer.analyze(enforcement_item)

        assert result.success is True
        assert result.analysis.translation_confidence == 0.3
        assert "Translation confidence is low - manual review recommended" in result.warnings

    @pytest.mark.asyncio
    async def test_features_disabled_skip_translator(self, final_rule_item):
        translator = MagicMock()
        translator.translate = AsyncMock()
        config = AnalysisConfig(
            enable_plain_english_summary=False, enable_action_item_generation=False
        )
        analyzer = ImpactAnalyzer(config, translator=translator)

        result = await analyzer.analyze(final_rule_item)

        translator.translate.assert_not_awaited()
        assert result.analysis.plain_english_summary == basic_summary(
            final_rule_item, RegulationType.FINAL_RULE
        )
        assert result.analysis.action_items == ()

    @pytest.mark.asyncio
    async def test_summary_only(self, final_rule_item):
        analyzer = ImpactAnalyzer(AnalysisConfig(enable_action_item_generation=False))
        result = await analyzer.analyze(final_rule_item)
        assert result.analysis.action_items == ()
        assert result.analysis.plain_english_summary.startswith("The SEC has created new rules")

    @pytest.mark.asyncio
    async def test_penalty_and_multi_area_warnings(self, make_item):
        item = make_item(
            title="SEC Charges Broker",
            description="A $3 million penalty for compliance filing failures in trading software.",
        )
        result = await ImpactAnalyzer().analyze(item)

        assert "Significant penalty amounts identified in enforcement action" in result.warnings
        assert "Regulation affects multiple business areas - coordinate response" in result.warnings

    @pytest.mark.asyncio
    async def test_short_timeline_warning(self, make_item):
        item = make_item(
            title="SEC Issues Order",
            description="Firms must stop the practice within 10 days of this order.",
        )
        result = await ImpactAnalyzer().analyze(item)

        assert result.analysis.implementation_timeline_days == 10
        assert "Short implementation timeline may require urgent action" in result.warnings

    @pytest.mark.asyncio
    async def test_stage_failure_falls_back_to_default(self, final_rule_item):
        with patch(
            "regradar.analysis.engine.score_severity", side_effect=RuntimeError("scoring broke")
        ):
            result = await ImpactAnalyzer().analyze(final_rule_item)

        assert result.success is True
        assert result.analysis.severity_score == 5

    @pytest.mark.asyncio
    async def test_batch_isolates_unexpected_failures(self, analyzer, final_rule_item):
        with patch.object(analyzer, "analyze", AsyncMock(side_effect=RuntimeError("boom"))):
            results = await analyzer.analyze_batch([final_rule_item, final_rule_item])

        assert len(results) == 2
        assert all(r.error_kinds == [AnalysisErrorKind.BATCH_FAILURE] for r in results)
        assert results[0].errors == ["Batch analysis failed: boom"]


class TestAnalysisStatistics:
    @pytest.mark.asyncio
    async def test_distributions(
        self, analyzer, enforcement_item, final_rule_item, proposed_rule_item, make_item
    ):
        results = await analyzer.analyze_batch(
            [enforcement_item, final_rule_item, proposed_rule_item, make_item(title="")]
        )
        stats = analysis_statistics(results)

        assert stats["total_analyzed"] == 4
        assert stats["successful_analyses"] == 3
        assert stats["failed_analyses"] == 1
        assert stats["severity_distribution"] == {
            "High (8-10)": 1,
            "Medium (5-7)": 1,
            "Low (1-4)": 1,
        }
        assert stats["type_distribution"]["enforcement"] == 1
        assert stats["type_distribution"]["final-rule"] == 1
        assert stats["type_distribution"]["proposed-rule"] == 1

    def test_empty(self):
        stats = analysis_statistics([])
        assert stats["total_analyzed"] == 0
        assert stats["average_processing_time_ms"] == 0.0


@pytest.mark.asyncio
async def test_analyze_uses_reference_time(make_item):
    item = make_item(description="The compliance date is June 1, 2024.")
    result = await ImpactAnalyzer().analyze(item, now=datetime(2024, 1, 15, 12))
    assert result.analysis.implementation_timeline_days == 138
