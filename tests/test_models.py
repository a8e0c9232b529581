"""Tests for the RegulatorRadar data model."""

from datetime import datetime

from regradar.models import (
    ActionCategory,
    ActionItem,
    ActionPriority,
    AnalysisError,
    AnalysisErrorKind,
    AnalysisResult,
    BusinessImpactArea,
    FeedItem,
    RegulationAnalysis,
    RegulationType,
    generate_regulation_id,
)


def _analysis(**overrides):
    fields = dict(
        id="reg-1",
        title="Test Regulation",
        severity_score=5,
        regulation_type=RegulationType.FINAL_RULE,
        business_impact_areas=(BusinessImpactArea.OPERATIONS,),
        estimated_penalty=0.0,
        implementation_timeline_days=180,
        plain_english_summary="Summary",
        action_items=(),
        original_url="https://www.sec.gov/rules/final/test",
        processed_at=datetime(2024, 1, 15),
    )
    fields.update(overrides)
    return RegulationAnalysis(**fields)


class TestRegulationAnalysisInvariants:
    def test_clamps_high_severity(self):
        assert _analysis(severity_score=15).severity_score == 10

    def test_clamps_low_severity(self):
        assert _analysis(severity_score=0).severity_score == 1

    def test_empty_areas_default_to_operations(self):
        assert _analysis(business_impact_areas=()).business_impact_areas == (
            BusinessImpactArea.OPERATIONS,
        )

    def test_areas_deduplicated_in_canonical_order(self):
        analysis = _analysis(
            business_impact_areas=[
                BusinessImpactArea.TECHNOLOGY,
                BusinessImpactArea.OPERATIONS,
                BusinessImpactArea.TECHNOLOGY,
            ]
        )
        assert analysis.business_impact_areas == (
            BusinessImpactArea.OPERATIONS,
            BusinessImpactArea.TECHNOLOGY,
        )

    def test_negative_penalty_becomes_zero(self):
        assert _analysis(estimated_penalty=-100).estimated_penalty == 0.0

    def test_timeline_is_at_least_one_day(self):
        assert _analysis(implementation_timeline_days=0).implementation_timeline_days == 1

    def test_severity_bands(self):
        assert _analysis(severity_score=9).severity_band == "High (8-10)"
        assert _analysis(severity_score=5).severity_band == "Medium (5-7)"
        assert _analysis(severity_score=4).severity_band == "Low (1-4)"

    def test_dict_round_trip_preserves_nested_items(self):
        action = ActionItem(
            description="Review procedures",
            priority=ActionPriority.HIGH,
            estimated_hours=4,
            category=ActionCategory.LEGAL,
            deadline=datetime(2024, 2, 1),
        )
        analysis = _analysis(
            action_items=[action],
            business_impact_areas=(BusinessImpactArea.REPORTING,),
            key_requirements=["file reports quarterly"],
        )
        restored = RegulationAnalysis.from_dict(analysis.to_dict())
        assert restored == analysis


class TestActionItem:
    def test_hours_are_at_least_one(self):
        item = ActionItem("Do it", ActionPriority.LOW, 0, ActionCategory.OPERATIONAL)
        assert item.estimated_hours == 1

    def test_mark_completed_returns_copy(self):
        item = ActionItem("Do it", ActionPriority.LOW, 2, ActionCategory.OPERATIONAL)
        done = item.mark_completed()
        assert done.completed is True
        assert item.completed is False

    def test_priority_weights_order(self):
        assert ActionPriority.HIGH.weight > ActionPriority.MEDIUM.weight > ActionPriority.LOW.weight


class TestRegulationId:
    def test_id_from_guid(self):
        item = FeedItem("Title", "https://sec.gov/x", datetime(2024, 1, 1), "desc", guid="LR-123/45")
        assert generate_regulation_id(item) == "lr-123-45"

    def test_id_from_date_and_title(self):
        item = FeedItem("SEC Adopts Final Rule!", "https://sec.gov/x", datetime(2024, 1, 10), "desc")
        assert generate_regulation_id(item) == "2024-01-10-sec-adopts-final-rule"

    def test_title_slug_is_truncated(self):
        item = FeedItem("word " * 30, "https://sec.gov/x", datetime(2024, 1, 10), "desc")
        regulation_id = generate_regulation_id(item)
        assert len(regulation_id) <= len("2024-01-10-") + 50


class TestAnalysisResult:
    def test_add_error_records_kind(self):
        result = AnalysisResult()
        result.add_error(AnalysisError(AnalysisErrorKind.MISSING_TITLE, "Feed item missing title"))
        assert result.errors == ["Feed item missing title"]
        assert result.error_kinds == [AnalysisErrorKind.MISSING_TITLE]
        assert "missing title" in str(result)

    def test_regulation_type_labels(self):
        assert RegulationType.ENFORCEMENT.label == "enforcement action"
        assert RegulationType.FINAL_RULE.label == "final rule"
        assert RegulationType.PROPOSED_RULE.label == "proposed rule"
