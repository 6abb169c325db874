"""
Feedback loop records

Captures how agents treated each AI assessment so estimate accuracy and
confidence calibration can be tracked over time.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Tuple

from claimassist.models.assessment import CostAdjustment
from claimassist.models.enums import InteractionType, OverrideDirection


@dataclass(frozen=True)
class AssessmentSnapshot:
    """The AI assessment as it was before any agent changes."""
    damages: Tuple[dict, ...]
    total_estimate: float
    ai_confidence: int
    overall_severity: str

    def to_dict(self) -> dict:
        return {
            "damages": [dict(d) for d in self.damages],
            "total_estimate": self.total_estimate,
            "ai_confidence": self.ai_confidence,
            "overall_severity": self.overall_severity,
        }


@dataclass(frozen=True)
class AgentModifications:
    cost_adjustments: Tuple[CostAdjustment, ...] = ()
    removed_items: Tuple[int, ...] = ()
    added_notes: str = ""
    final_total: float = 0.0

    def to_dict(self) -> dict:
        return {
            "cost_adjustments": [a.to_dict() for a in self.cost_adjustments],
            "removed_items": list(self.removed_items),
            "added_notes": self.added_notes,
            "final_total": self.final_total,
        }


@dataclass(frozen=True)
class FeedbackMetrics:
    estimate_accuracy_delta: float
    was_overridden: bool
    override_direction: OverrideDirection
    confidence_was_accurate: bool

    def to_dict(self) -> dict:
        return {
            "estimate_accuracy_delta": self.estimate_accuracy_delta,
            "was_overridden": self.was_overridden,
            "override_direction": self.override_direction.value,
            "confidence_was_accurate": self.confidence_was_accurate,
        }


@dataclass(frozen=True)
class FeedbackSubmission:
    """A completed interaction, before id, timestamp and metrics are assigned."""
    claim_id: str
    ai_assessment: AssessmentSnapshot
    agent_modifications: AgentModifications
    interaction_type: InteractionType
    review_time_seconds: float
    agent_id: str


@dataclass(frozen=True)
class FeedbackEntry:
    id: str
    timestamp: datetime
    claim_id: str
    ai_assessment: AssessmentSnapshot
    agent_modifications: AgentModifications
    interaction_type: InteractionType
    review_time_seconds: float
    agent_id: str
    metrics: FeedbackMetrics

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "claim_id": self.claim_id,
            "ai_assessment": self.ai_assessment.to_dict(),
            "agent_modifications": self.agent_modifications.to_dict(),
            "interaction_type": self.interaction_type.value,
            "review_time_seconds": self.review_time_seconds,
            "agent_id": self.agent_id,
            "metrics": self.metrics.to_dict(),
        }


@dataclass
class FeedbackStats:
    """Aggregates for the analytics dashboard."""
    total_assessments: int = 0
    auto_approved_rate: float = 0.0
    override_rate: float = 0.0
    average_accuracy_delta: float = 0.0
    confidence_calibration: float = 0.0
    by_interaction_type: Dict[str, int] = field(default_factory=dict)
    recent_feedback: List[FeedbackEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_assessments": self.total_assessments,
            "auto_approved_rate": self.auto_approved_rate,
            "override_rate": self.override_rate,
            "average_accuracy_delta": self.average_accuracy_delta,
            "confidence_calibration": self.confidence_calibration,
            "by_interaction_type": dict(self.by_interaction_type),
            "recent_feedback": [e.to_dict() for e in self.recent_feedback],
        }
