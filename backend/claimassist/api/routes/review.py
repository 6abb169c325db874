"""
Agent review API routes
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from claimassist.api.deps import get_workflow, service_errors
from claimassist.models.enums import RejectionReason
from claimassist.services.workflow import ClaimWorkflow

router = APIRouter()


class OverrideRequest(BaseModel):
    cost: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    reason: Optional[str] = None


class NotesRequest(BaseModel):
    notes: str = ""


class ApproveRequest(BaseModel):
    agent_id: str = "demo-agent"
    notes: Optional[str] = None


class RejectRequest(BaseModel):
    agent_id: str = "demo-agent"
    reason: RejectionReason
    details: str = ""


@router.post("/{claim_id}/review")
async def continue_to_review(claim_id: str, workflow: ClaimWorkflow = Depends(get_workflow)):
    """Move an assessed claim into full agent review."""
    with service_errors():
        return workflow.continue_to_review(claim_id).to_dict()


@router.get("/{claim_id}/review")
async def get_review(claim_id: str, workflow: ClaimWorkflow = Depends(get_workflow)):
    with service_errors():
        session = workflow.get(claim_id)
    return {
        "claim_id": claim_id,
        "step": session.step.value,
        "review": session.review.to_dict() if session.review else None,
        "routing": session.routing.to_dict() if session.routing else None,
    }


@router.put("/{claim_id}/review/items/{index}/override")
async def override_item(
    claim_id: str,
    index: int,
    request: OverrideRequest,
    workflow: ClaimWorkflow = Depends(get_workflow),
):
    """Enable a cost override; without a cost it starts at the original estimate."""
    with service_errors():
        session = workflow.override_item(claim_id, index, cost=request.cost, reason=request.reason)
    return session.to_dict()


@router.delete("/{claim_id}/review/items/{index}/override")
async def clear_override(claim_id: str, index: int, workflow: ClaimWorkflow = Depends(get_workflow)):
    with service_errors():
        return workflow.clear_override(claim_id, index).to_dict()


@router.post("/{claim_id}/review/items/{index}/remove")
async def remove_item(claim_id: str, index: int, workflow: ClaimWorkflow = Depends(get_workflow)):
    with service_errors():
        return workflow.remove_item(claim_id, index).to_dict()


@router.post("/{claim_id}/review/items/{index}/restore")
async def restore_item(claim_id: str, index: int, workflow: ClaimWorkflow = Depends(get_workflow)):
    with service_errors():
        return workflow.restore_item(claim_id, index).to_dict()


@router.put("/{claim_id}/review/notes")
async def set_notes(
    claim_id: str,
    request: NotesRequest,
    workflow: ClaimWorkflow = Depends(get_workflow),
):
    with service_errors():
        return workflow.set_notes(claim_id, request.notes).to_dict()


@router.post("/{claim_id}/review/approve")
async def approve(
    claim_id: str,
    request: Optional[ApproveRequest] = None,
    workflow: ClaimWorkflow = Depends(get_workflow),
):
    """Approve the reviewed estimate."""
    request = request or ApproveRequest()
    with service_errors():
        return workflow.approve(claim_id, request.agent_id, notes=request.notes).to_dict()


@router.post("/{claim_id}/review/reject")
async def reject(
    claim_id: str,
    request: RejectRequest,
    workflow: ClaimWorkflow = Depends(get_workflow),
):
    """Reject the claim."""
    with service_errors():
        session = workflow.reject(claim_id, request.agent_id, request.reason, request.details)
    return session.to_dict()
