"""
Tests for the feedback loop metrics and aggregates.
"""
import pytest

from claimassist.models.assessment import CostAdjustment
from claimassist.models.enums import InteractionType, OverrideDirection
from claimassist.models.feedback import AgentModifications, AssessmentSnapshot, FeedbackSubmission


def _submission(
    original: float = 1000.0,
    final: float = 1000.0,
    confidence: int = 90,
    adjusted: bool = False,
    removed: tuple = (),
    interaction: InteractionType = InteractionType.AGENT_REVIEWED,
) -> FeedbackSubmission:
    adjustments = (CostAdjustment(0, original, final, "Shop quote"),) if adjusted else ()
    return FeedbackSubmission(
        claim_id="CLM-TEST0001",
        ai_assessment=AssessmentSnapshot(
            damages=(),
            total_estimate=original,
            ai_confidence=confidence,
            overall_severity="Moderate",
        ),
        agent_modifications=AgentModifications(
            cost_adjustments=adjustments,
            removed_items=removed,
            final_total=final,
        ),
        interaction_type=interaction,
        review_time_seconds=42.0,
        agent_id="agent-1",
    )


class TestMetrics:
    """Test per-interaction metric derivation."""

    def test_increase_with_adjustment(self, feedback_loop):
        metrics = feedback_loop.calculate_metrics(_submission(final=1200.0, adjusted=True))
        assert metrics.estimate_accuracy_delta == pytest.approx(20.0)
        assert metrics.was_overridden is True
        assert metrics.override_direction == OverrideDirection.INCREASED

    def test_changed_total_without_modifications_is_not_override(self, feedback_loop):
        metrics = feedback_loop.calculate_metrics(_submission(final=1200.0))
        assert metrics.was_overridden is False
        assert metrics.override_direction == OverrideDirection.NONE

    def test_removal_counts_as_override(self, feedback_loop):
        metrics = feedback_loop.calculate_metrics(_submission(final=600.0, removed=(1,)))
        assert metrics.was_overridden is True
        assert metrics.override_direction == OverrideDirection.DECREASED

    def test_zero_original_total(self, feedback_loop):
        metrics = feedback_loop.calculate_metrics(_submission(original=0.0, final=0.0))
        assert metrics.estimate_accuracy_delta == 0.0


class TestCalibration:
    """High confidence is right when the estimate held; low when it didn't."""

    def test_high_confidence_small_change(self, feedback_loop):
        metrics = feedback_loop.calculate_metrics(_submission(final=1100.0, confidence=90, adjusted=True))
        assert metrics.confidence_was_accurate is True

    def test_high_confidence_large_change(self, feedback_loop):
        metrics = feedback_loop.calculate_metrics(_submission(final=1300.0, confidence=90, adjusted=True))
        assert metrics.confidence_was_accurate is False

    def test_low_confidence_large_change(self, feedback_loop):
        metrics = feedback_loop.calculate_metrics(_submission(final=1300.0, confidence=60, adjusted=True))
        assert metrics.confidence_was_accurate is True

    def test_low_confidence_no_change(self, feedback_loop):
        metrics = feedback_loop.calculate_metrics(_submission(confidence=60))
        assert metrics.confidence_was_accurate is False

    def test_exactly_fifteen_percent_is_not_significant(self, feedback_loop):
        metrics = feedback_loop.calculate_metrics(_submission(final=1150.0, confidence=85, adjusted=True))
        assert metrics.confidence_was_accurate is True


class TestStats:
    def test_empty_log(self, feedback_loop):
        stats = feedback_loop.get_stats()
        assert stats.total_assessments == 0
        assert stats.auto_approved_rate == 0.0
        assert stats.override_rate == 0.0
        assert stats.average_accuracy_delta == 0.0
        assert stats.confidence_calibration == 0.0
        assert stats.recent_feedback == []

    def test_aggregates(self, feedback_loop):
        feedback_loop.record(_submission(interaction=InteractionType.QUICK_APPROVED))
        feedback_loop.record(_submission(interaction=InteractionType.AUTO_APPROVED))
        feedback_loop.record(_submission(final=1200.0, adjusted=True))
        feedback_loop.record(_submission(final=800.0, adjusted=True, interaction=InteractionType.REJECTED))

        stats = feedback_loop.get_stats()
        assert stats.total_assessments == 4
        assert stats.auto_approved_rate == pytest.approx(50.0)
        assert stats.override_rate == pytest.approx(50.0)
        assert stats.average_accuracy_delta == pytest.approx(10.0)
        # Confidence 90 held for the two unchanged approvals only
        assert stats.confidence_calibration == pytest.approx(50.0)
        assert stats.by_interaction_type["rejected"] == 1

    def test_recent_newest_first(self, feedback_loop):
        entries = [feedback_loop.record(_submission()) for _ in range(12)]
        recent = feedback_loop.get_stats().recent_feedback
        assert len(recent) == 10
        assert recent[0].id == entries[-1].id

    def test_recent_limit_override(self, feedback_loop):
        for _ in range(3):
            feedback_loop.record(_submission())
        assert len(feedback_loop.get_stats(recent_limit=2).recent_feedback) == 2

    def test_training_candidates(self, feedback_loop):
        feedback_loop.record(_submission(final=1100.0, adjusted=True))
        big = feedback_loop.record(_submission(final=1300.0, adjusted=True))
        feedback_loop.record(_submission(final=1300.0))

        candidates = feedback_loop.get_training_candidates()
        assert [c.id for c in candidates] == [big.id]

    def test_record_assigns_identity(self, feedback_loop):
        entry = feedback_loop.record(_submission())
        assert entry.id.startswith("FB-")
        assert len(entry.id) == 13
        assert feedback_loop.export() == [entry]

    def test_clear(self, feedback_loop):
        feedback_loop.record(_submission())
        feedback_loop.clear()
        assert feedback_loop.get_stats().total_assessments == 0
