"""
Feedback Loop

Captures how agents treated each AI assessment. Metrics are computed when
an entry is recorded and aggregated on demand for the analytics dashboard.
"""
import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from claimassist.core.config import settings
from claimassist.core.logging import get_logger, log_audit_event
from claimassist.models.enums import InteractionType, OverrideDirection
from claimassist.models.feedback import (
    FeedbackEntry,
    FeedbackMetrics,
    FeedbackStats,
    FeedbackSubmission,
)
from claimassist.services.calculation import calculate_percentage_delta
from claimassist.services.feedback.store import FeedbackStore, InMemoryFeedbackStore

logger = get_logger("feedback")

APPROVED_WITHOUT_REVIEW = (InteractionType.AUTO_APPROVED, InteractionType.QUICK_APPROVED)


@dataclass
class FeedbackCutoffs:
    calibration_confidence: int = 85
    significant_change_pct: float = 15.0
    training_candidate_pct: float = 20.0
    recent_limit: int = 10

    @classmethod
    def from_settings(cls) -> "FeedbackCutoffs":
        return cls(
            calibration_confidence=settings.CALIBRATION_CONFIDENCE_CUTOFF,
            significant_change_pct=settings.SIGNIFICANT_CHANGE_PCT,
            training_candidate_pct=settings.TRAINING_CANDIDATE_DELTA_PCT,
            recent_limit=settings.RECENT_FEEDBACK_LIMIT,
        )


def generate_feedback_id() -> str:
    return f"FB-{uuid.uuid4().hex[:10].upper()}"


class FeedbackLoop:
    """Records feedback entries and aggregates them."""

    def __init__(self, store: FeedbackStore, cutoffs: Optional[FeedbackCutoffs] = None):
        self.store = store
        self.cutoffs = cutoffs or FeedbackCutoffs.from_settings()

    def calculate_metrics(self, submission: FeedbackSubmission) -> FeedbackMetrics:
        """
        Derive learning metrics for one interaction.

        - delta: percentage change from the AI total to the final total
        - was_overridden: any cost adjustment or removed item
        - direction: none unless overridden, else sign of the change
        - confidence_was_accurate: high confidence with a small change, or
          low confidence with a significant one
        """
        original_total = submission.ai_assessment.total_estimate
        final_total = submission.agent_modifications.final_total
        delta = calculate_percentage_delta(original_total, final_total)

        modifications = submission.agent_modifications
        was_overridden = bool(modifications.cost_adjustments) or bool(modifications.removed_items)

        if not was_overridden:
            direction = OverrideDirection.NONE
        elif final_total > original_total:
            direction = OverrideDirection.INCREASED
        else:
            direction = OverrideDirection.DECREASED

        significant_change = abs(delta) > self.cutoffs.significant_change_pct
        if submission.ai_assessment.ai_confidence >= self.cutoffs.calibration_confidence:
            confidence_was_accurate = not significant_change
        else:
            confidence_was_accurate = significant_change

        return FeedbackMetrics(
            estimate_accuracy_delta=delta,
            was_overridden=was_overridden,
            override_direction=direction,
            confidence_was_accurate=confidence_was_accurate,
        )

    def record(self, submission: FeedbackSubmission) -> FeedbackEntry:
        """Compute metrics, stamp the entry and append it to the store."""
        entry = FeedbackEntry(
            id=generate_feedback_id(),
            timestamp=datetime.utcnow(),
            claim_id=submission.claim_id,
            ai_assessment=submission.ai_assessment,
            agent_modifications=submission.agent_modifications,
            interaction_type=submission.interaction_type,
            review_time_seconds=submission.review_time_seconds,
            agent_id=submission.agent_id,
            metrics=self.calculate_metrics(submission),
        )
        self.store.append(entry)

        log_audit_event(
            "feedback_recorded",
            actor_id=entry.agent_id,
            actor_type="agent",
            details={
                "claim_id": entry.claim_id,
                "interaction_type": entry.interaction_type.value,
                "was_overridden": entry.metrics.was_overridden,
                "estimate_accuracy_delta": f"{entry.metrics.estimate_accuracy_delta:.1f}%",
            },
        )
        return entry

    def get_stats(self, recent_limit: Optional[int] = None) -> FeedbackStats:
        """Aggregate statistics; all zero on an empty log."""
        entries = self.store.list()
        if not entries:
            return FeedbackStats()

        limit = self.cutoffs.recent_limit if recent_limit is None else recent_limit
        total = len(entries)
        approved = sum(1 for e in entries if e.interaction_type in APPROVED_WITHOUT_REVIEW)
        overridden = sum(1 for e in entries if e.metrics.was_overridden)
        calibrated = sum(1 for e in entries if e.metrics.confidence_was_accurate)
        mean_delta = sum(abs(e.metrics.estimate_accuracy_delta) for e in entries) / total
        by_type = Counter(e.interaction_type.value for e in entries)

        return FeedbackStats(
            total_assessments=total,
            auto_approved_rate=approved / total * 100,
            override_rate=overridden / total * 100,
            average_accuracy_delta=mean_delta,
            confidence_calibration=calibrated / total * 100,
            by_interaction_type=dict(by_type),
            recent_feedback=list(reversed(entries[-limit:])) if limit > 0 else [],
        )

    def get_training_candidates(self) -> List[FeedbackEntry]:
        """Overridden entries whose estimate was off by more than the candidate threshold."""
        return [
            e for e in self.store.list()
            if e.metrics.was_overridden
            and abs(e.metrics.estimate_accuracy_delta) > self.cutoffs.training_candidate_pct
        ]

    def export(self) -> List[FeedbackEntry]:
        return self.store.list()

    def clear(self) -> None:
        self.store.clear()
        logger.info("Feedback log cleared")


# Singleton instance
_feedback_loop: Optional[FeedbackLoop] = None


def get_feedback_loop() -> FeedbackLoop:
    """Get or create the feedback loop singleton (in-memory store)."""
    global _feedback_loop
    if _feedback_loop is None:
        _feedback_loop = FeedbackLoop(InMemoryFeedbackStore())
    return _feedback_loop
