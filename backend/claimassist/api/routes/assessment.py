"""
Assessment API routes
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from claimassist.api.deps import get_workflow, service_errors
from claimassist.models.claim import DamageMarker
from claimassist.models.enums import Severity
from claimassist.services.assessment.simulator import SimulationControls
from claimassist.services.workflow import ClaimWorkflow

router = APIRouter()


class AnalyzeRequest(BaseModel):
    """Test-mode controls; ignored when a live vision provider is configured."""
    confidence: Optional[int] = Field(None, ge=0, le=100)
    severity: Optional[Severity] = None
    has_damage: Optional[bool] = None
    has_inconsistency: Optional[bool] = None

    def to_controls(self) -> Optional[SimulationControls]:
        if all(v is None for v in (self.confidence, self.severity, self.has_damage, self.has_inconsistency)):
            return None
        return SimulationControls(
            confidence=self.confidence,
            severity=self.severity,
            has_damage=self.has_damage,
            has_inconsistency=self.has_inconsistency,
        )


class MarkerRequest(BaseModel):
    x: float = Field(..., ge=0, le=100)
    y: float = Field(..., ge=0, le=100)
    image_index: int = Field(..., ge=0)
    description: Optional[str] = None


class MarkersRequest(BaseModel):
    markers: List[MarkerRequest] = Field(..., min_length=1)


class QuickApproveRequest(BaseModel):
    agent_id: str = "demo-agent"
    auto: bool = False


@router.post("/{claim_id}/assessment")
async def run_assessment(
    claim_id: str,
    request: Optional[AnalyzeRequest] = None,
    workflow: ClaimWorkflow = Depends(get_workflow),
):
    """Run (or re-run) the damage assessment."""
    controls = request.to_controls() if request else None
    with service_errors():
        session = await workflow.analyze(claim_id, controls=controls)
    return session.to_dict()


@router.get("/{claim_id}/assessment")
async def get_assessment(claim_id: str, workflow: ClaimWorkflow = Depends(get_workflow)):
    with service_errors():
        session = workflow.get(claim_id)
    return {
        "claim_id": claim_id,
        "assessment": session.assessment.to_dict() if session.assessment else None,
        "routing": session.routing.to_dict() if session.routing else None,
        "needs_markers": session.needs_markers,
    }


@router.post("/{claim_id}/assessment/markers")
async def submit_markers(
    claim_id: str,
    request: MarkersRequest,
    workflow: ClaimWorkflow = Depends(get_workflow),
):
    """Re-run a low-confidence assessment with agent-marked damage locations."""
    markers = [
        DamageMarker(x=m.x, y=m.y, image_index=m.image_index, description=m.description)
        for m in request.markers
    ]
    with service_errors():
        session = await workflow.submit_markers(claim_id, markers)
    return session.to_dict()


@router.post("/{claim_id}/assessment/skip-markers")
async def skip_markers(claim_id: str, workflow: ClaimWorkflow = Depends(get_workflow)):
    with service_errors():
        return workflow.skip_markers(claim_id).to_dict()


@router.post("/{claim_id}/assessment/quick-approve")
async def quick_approve(
    claim_id: str,
    request: Optional[QuickApproveRequest] = None,
    workflow: ClaimWorkflow = Depends(get_workflow),
):
    """One-click approval for fast-path assessments."""
    request = request or QuickApproveRequest()
    with service_errors():
        return workflow.quick_approve(claim_id, request.agent_id, auto=request.auto).to_dict()


@router.post("/{claim_id}/assessment/back")
async def back_to_upload(claim_id: str, workflow: ClaimWorkflow = Depends(get_workflow)):
    """Discard the assessment and return to photo upload."""
    with service_errors():
        return workflow.return_to_upload(claim_id).to_dict()
