"""
Domain models package
"""
from claimassist.models.enums import (
    Severity, InconsistencyType, FlagSeverity, AssessmentMode, AssessmentRoute,
    ApprovalLevel, InteractionType, OverrideDirection, WorkflowStep, RejectionReason,
)
from claimassist.models.claim import ClaimRecord, VehicleInfo, UploadedImage, DamageMarker
from claimassist.models.assessment import (
    DamageItem, InconsistencyFlag, CostAdjustment, AssessmentResult,
    FinalAssessment, RejectionRecord,
)
from claimassist.models.feedback import (
    AssessmentSnapshot, AgentModifications, FeedbackMetrics, FeedbackSubmission,
    FeedbackEntry, FeedbackStats,
)

__all__ = [
    # Enums
    "Severity",
    "InconsistencyType",
    "FlagSeverity",
    "AssessmentMode",
    "AssessmentRoute",
    "ApprovalLevel",
    "InteractionType",
    "OverrideDirection",
    "WorkflowStep",
    "RejectionReason",
    # Intake
    "ClaimRecord",
    "VehicleInfo",
    "UploadedImage",
    "DamageMarker",
    # Assessment
    "DamageItem",
    "InconsistencyFlag",
    "CostAdjustment",
    "AssessmentResult",
    "FinalAssessment",
    "RejectionRecord",
    # Feedback
    "AssessmentSnapshot",
    "AgentModifications",
    "FeedbackMetrics",
    "FeedbackSubmission",
    "FeedbackEntry",
    "FeedbackStats",
]
