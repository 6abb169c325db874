"""
Enumeration Types

These enums define the valid values used across the claim assessment workflow.
"""
from enum import Enum as PyEnum


class Severity(str, PyEnum):
    """Damage severity. NONE is only valid for an overall assessment."""
    NONE = "None"
    MINOR = "Minor"
    MODERATE = "Moderate"
    SEVERE = "Severe"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.NONE: 0,
    Severity.MINOR: 1,
    Severity.MODERATE: 2,
    Severity.SEVERE: 3,
}


class InconsistencyType(str, PyEnum):
    """Kind of cross-image inconsistency detected by the vision model."""
    COLOR_MISMATCH = "color_mismatch"
    MODEL_MISMATCH = "model_mismatch"
    MULTIPLE_VEHICLES = "multiple_vehicles"
    VIN_MISMATCH = "vin_mismatch"
    OTHER = "other"


class FlagSeverity(str, PyEnum):
    WARNING = "warning"
    CRITICAL = "critical"


class AssessmentMode(str, PyEnum):
    """Where an assessment came from."""
    LIVE = "live"            # External vision provider
    SIMULATED = "simulated"  # Locally generated (demo/test mode)


class AssessmentRoute(str, PyEnum):
    """Routing decision after an assessment."""
    HUMAN_MARKERS = "human_markers"    # Pause and ask the agent to mark damage
    FAST_PATH = "fast_path"            # One-click quick approval available
    STANDARD_REVIEW = "standard_review"


class ApprovalLevel(str, PyEnum):
    AGENT = "agent"
    SENIOR = "senior"


class InteractionType(str, PyEnum):
    """How a claim left the workflow."""
    AUTO_APPROVED = "auto_approved"
    QUICK_APPROVED = "quick_approved"
    AGENT_REVIEWED = "agent_reviewed"
    REJECTED = "rejected"


class OverrideDirection(str, PyEnum):
    INCREASED = "increased"
    DECREASED = "decreased"
    NONE = "none"


class WorkflowStep(str, PyEnum):
    """Steps of the claim workflow, in order."""
    CLAIM_FORM = "claim_form"
    UPLOAD = "upload"
    ASSESSMENT = "assessment"
    REVIEW = "review"
    CONFIRMATION = "confirmation"
    REJECTED = "rejected"


class RejectionReason(str, PyEnum):
    INSUFFICIENT_EVIDENCE = "insufficient_evidence"
    POLICY_NOT_COVERED = "policy_not_covered"
    PRE_EXISTING_DAMAGE = "pre_existing_damage"
    FRAUD_SUSPECTED = "fraud_suspected"
    POLICY_LAPSED = "policy_lapsed"
    DEDUCTIBLE_NOT_MET = "deductible_not_met"
    OTHER = "other"
