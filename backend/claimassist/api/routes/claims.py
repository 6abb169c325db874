"""
Claims API routes: intake and photo upload
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from pydantic import BaseModel, field_validator

from claimassist.api.deps import get_workflow, service_errors
from claimassist.services.intake import (
    build_claim_record,
    validate_accident_date,
    validate_vehicle_year,
    validate_vin,
)
from claimassist.services.workflow import ClaimWorkflow

router = APIRouter()


# Request/Response schemas
class CreateClaimRequest(BaseModel):
    policy_number: str
    vehicle_make: str
    vehicle_model: str
    vehicle_year: str
    accident_date: str
    accident_description: str
    vin: Optional[str] = None

    @field_validator("policy_number", "vehicle_make", "vehicle_model", "accident_description")
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("field is required")
        return v.strip()

    @field_validator("vehicle_year")
    @classmethod
    def validate_year(cls, v: str) -> str:
        return validate_vehicle_year(v)

    @field_validator("accident_date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        validate_accident_date(v)
        return v

    @field_validator("vin")
    @classmethod
    def validate_vin_format(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return validate_vin(v)


class ImageResponse(BaseModel):
    filename: str
    media_type: str
    label: str
    size_bytes: int


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_claim(
    request: CreateClaimRequest,
    workflow: ClaimWorkflow = Depends(get_workflow),
):
    """Submit the claim form and open a claim session."""
    record = build_claim_record(
        policy_number=request.policy_number,
        vehicle_make=request.vehicle_make,
        vehicle_model=request.vehicle_model,
        vehicle_year=request.vehicle_year,
        accident_date=validate_accident_date(request.accident_date),
        accident_description=request.accident_description,
        vin=request.vin,
    )
    session = workflow.create_claim(record)
    return session.to_dict()


@router.get("/{claim_id}")
async def get_claim(claim_id: str, workflow: ClaimWorkflow = Depends(get_workflow)):
    """Get the current state of a claim."""
    with service_errors():
        return workflow.get(claim_id).to_dict()


@router.delete("/{claim_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_claim(claim_id: str, workflow: ClaimWorkflow = Depends(get_workflow)):
    """Start over with a new claim."""
    with service_errors():
        workflow.get(claim_id)
        workflow.discard(claim_id)


@router.post("/{claim_id}/images", response_model=List[ImageResponse])
async def upload_images(
    claim_id: str,
    files: List[UploadFile] = File(...),
    workflow: ClaimWorkflow = Depends(get_workflow),
):
    """Upload one or more damage photos."""
    added = []
    with service_errors():
        for upload in files:
            content = await upload.read()
            image = workflow.add_image(claim_id, upload.filename, upload.content_type, content)
            added.append(ImageResponse(**image.to_dict()))
    return added


@router.get("/{claim_id}/images", response_model=List[ImageResponse])
async def list_images(claim_id: str, workflow: ClaimWorkflow = Depends(get_workflow)):
    with service_errors():
        session = workflow.get(claim_id)
    return [ImageResponse(**image.to_dict()) for image in session.images]


@router.delete("/{claim_id}/images/{index}")
async def remove_image(claim_id: str, index: int, workflow: ClaimWorkflow = Depends(get_workflow)):
    with service_errors():
        return workflow.remove_image(claim_id, index).to_dict()
