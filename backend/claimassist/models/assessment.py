"""
Damage assessment records
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from claimassist.models.enums import (
    ApprovalLevel,
    AssessmentMode,
    FlagSeverity,
    InconsistencyType,
    InteractionType,
    RejectionReason,
    Severity,
)


@dataclass
class DamageItem:
    """A single damaged component with its repair estimate."""
    area: str
    damage_type: str
    severity: Severity
    estimated_cost: float
    confidence: int
    # Detailed cost breakdown (simulated assessments always have one)
    parts_cost: Optional[float] = None
    labor_hours: Optional[float] = None
    labor_rate: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "area": self.area,
            "type": self.damage_type,
            "severity": self.severity.value,
            "estimated_cost": self.estimated_cost,
            "confidence": self.confidence,
            "parts_cost": self.parts_cost,
            "labor_hours": self.labor_hours,
            "labor_rate": self.labor_rate,
        }


@dataclass(frozen=True)
class InconsistencyFlag:
    """Signal that the photos may not show one consistent vehicle."""
    flag_type: InconsistencyType
    description: str
    severity: FlagSeverity
    confidence: int

    def to_dict(self) -> dict:
        return {
            "type": self.flag_type.value,
            "description": self.description,
            "severity": self.severity.value,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class CostAdjustment:
    """Agent override of one item's estimated cost."""
    damage_index: int
    original_cost: float
    adjusted_cost: float
    reason: str

    def to_dict(self) -> dict:
        return {
            "damage_index": self.damage_index,
            "original_cost": self.original_cost,
            "adjusted_cost": self.adjusted_cost,
            "reason": self.reason,
        }


@dataclass
class AssessmentResult:
    """Output of one analysis attempt, live or simulated."""
    claim_id: str
    has_damage: bool
    damages: List[DamageItem]
    overall_severity: Severity
    total_estimate: float
    labor_hours: float
    parts_required: List[str]
    ai_confidence: int
    recommendations: List[str]
    processing_time: float = 0.0
    summary: str = ""
    mode: AssessmentMode = AssessmentMode.SIMULATED
    human_assisted: bool = False
    degraded: bool = False
    error: Optional[str] = None
    inconsistencies: List[InconsistencyFlag] = field(default_factory=list)
    manual_overrides: List[CostAdjustment] = field(default_factory=list)
    override_notes: Optional[str] = None

    @property
    def has_inconsistencies(self) -> bool:
        return len(self.inconsistencies) > 0

    def to_dict(self) -> dict:
        return {
            "claim_id": self.claim_id,
            "has_damage": self.has_damage,
            "damages": [d.to_dict() for d in self.damages],
            "overall_severity": self.overall_severity.value,
            "total_estimate": self.total_estimate,
            "labor_hours": self.labor_hours,
            "parts_required": list(self.parts_required),
            "ai_confidence": self.ai_confidence,
            "recommendations": list(self.recommendations),
            "processing_time": self.processing_time,
            "summary": self.summary,
            "mode": self.mode.value,
            "human_assisted": self.human_assisted,
            "degraded": self.degraded,
            "error": self.error,
            "has_inconsistencies": self.has_inconsistencies,
            "inconsistencies": [f.to_dict() for f in self.inconsistencies],
            "manual_overrides": [o.to_dict() for o in self.manual_overrides],
            "override_notes": self.override_notes,
        }


@dataclass(frozen=True)
class FinalAssessment:
    """Approval record. Created once per claim, never modified."""
    assessment: AssessmentResult
    agent_notes: str
    adjusted_total: float
    adjustments: Tuple[CostAdjustment, ...]
    removed_items: Tuple[int, ...]
    approved_by: str
    approval_level: ApprovalLevel
    approved_at: datetime
    interaction_type: InteractionType

    def to_dict(self) -> dict:
        return {
            "assessment": self.assessment.to_dict(),
            "agent_notes": self.agent_notes,
            "adjusted_total": self.adjusted_total,
            "adjustments": [a.to_dict() for a in self.adjustments],
            "removed_items": list(self.removed_items),
            "approved_by": self.approved_by,
            "approval_level": self.approval_level.value,
            "approved_at": self.approved_at.isoformat(),
            "interaction_type": self.interaction_type.value,
        }


@dataclass(frozen=True)
class RejectionRecord:
    claim_id: str
    reason: RejectionReason
    details: str
    rejected_by: str
    rejected_at: datetime

    def to_dict(self) -> dict:
        return {
            "claim_id": self.claim_id,
            "reason": self.reason.value,
            "details": self.details,
            "rejected_by": self.rejected_by,
            "rejected_at": self.rejected_at.isoformat(),
        }
