"""
Claim confirmation summary and print page context.
"""
from claimassist.models.enums import ApprovalLevel
from claimassist.services.calculation import MANUAL_ASSESSMENT_SECONDS, calculate_time_savings
from claimassist.services.exceptions import WorkflowError
from claimassist.services.workflow import ClaimSession

# A first-tier agent cannot grant senior approval; the claim is forwarded instead.
STATUS_APPROVED = "approved"
STATUS_PENDING_SENIOR = "pending_senior_approval"
STATUS_REJECTED = "rejected"

HEADINGS = {
    STATUS_APPROVED: "Claim Approved",
    STATUS_PENDING_SENIOR: "Submitted for Senior Approval",
    STATUS_REJECTED: "Claim Rejected",
}


def format_money(value: float) -> str:
    return f"${value:,.2f}"


def _status(session: ClaimSession) -> str:
    if not session.final:
        return STATUS_REJECTED
    if session.final.approval_level == ApprovalLevel.SENIOR:
        return STATUS_PENDING_SENIOR
    return STATUS_APPROVED


def build_summary(session: ClaimSession) -> dict:
    """
    Summarize a finalized claim.

    Raises:
        WorkflowError: If the claim was neither approved nor rejected
    """
    if not session.is_finalized:
        raise WorkflowError(f"Claim {session.claim_id} has not been finalized")

    assessment = session.assessment
    summary = {
        "claim_id": session.claim_id,
        "status": _status(session),
        "claim": session.claim.to_dict(),
        "image_count": len(session.images),
        "feedback_id": session.feedback_id,
        "assessment_summary": assessment.summary if assessment else "",
        "mode": assessment.mode.value if assessment else None,
        "degraded": assessment.degraded if assessment else False,
        "human_assisted": assessment.human_assisted if assessment else False,
    }

    if session.final:
        final = session.final
        processing = final.assessment.processing_time
        summary.update({
            "original_total": final.assessment.total_estimate,
            "adjusted_total": final.adjusted_total,
            "approval_level": final.approval_level.value,
            "approved_by": final.approved_by,
            "approved_at": final.approved_at.isoformat(),
            "interaction_type": final.interaction_type.value,
            "agent_notes": final.agent_notes,
            "line_items": session.review.line_items(),
            "adjustments": [a.to_dict() for a in final.adjustments],
            "removed_items": list(final.removed_items),
            "processing_time": processing,
            "manual_baseline_seconds": MANUAL_ASSESSMENT_SECONDS,
            "time_savings_pct": calculate_time_savings(processing),
        })
    else:
        summary["rejection"] = session.rejection.to_dict()

    return summary


def summary_page_context(session: ClaimSession) -> dict:
    """
    Values for the printable confirmation page.

    Raises:
        WorkflowError: If the claim was neither approved nor rejected
    """
    summary = build_summary(session)
    claim = session.claim
    vehicle = claim.vehicle_label + (f" {claim.vehicle_trim}" if claim.vehicle_trim else "")

    context = {
        "summary": summary,
        "heading": HEADINGS[summary["status"]],
        "pending_senior": summary["status"] == STATUS_PENDING_SENIOR,
        "details": [
            ("Claim ID", session.claim_id),
            ("Policy Number", claim.policy_number),
            ("Vehicle", vehicle),
            ("VIN", claim.vin or "-"),
            ("Accident Date", claim.accident_date.isoformat()),
            ("Description", claim.accident_description),
            ("Photos", str(summary["image_count"])),
        ],
        "final": session.final,
        "rejection": session.rejection,
    }
    if session.final:
        context["interaction"] = session.final.interaction_type.value.replace("_", " ")
    else:
        context["rejection_reason"] = session.rejection.reason.value.replace("_", " ")
    return context
