"""
Vehicle lookup routes
"""
from typing import List

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from claimassist.services.intake import DEMO_VINS, decode_vin, list_makes, list_models

router = APIRouter()


class VehicleResponse(BaseModel):
    vin: str
    year: int
    make: str
    model: str
    trim: str
    value: float


@router.get("/makes", response_model=List[str])
async def get_makes():
    return list_makes()


@router.get("/makes/{make}/models", response_model=List[str])
async def get_models(make: str):
    models = list_models(make)
    if not models:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown make: {make}",
        )
    return models


@router.get("/demo-vins", response_model=List[VehicleResponse])
async def get_demo_vins():
    return [VehicleResponse(vin=vin, **info.to_dict()) for vin, info in DEMO_VINS.items()]


@router.get("/vin/{vin}", response_model=VehicleResponse)
async def lookup_vin(vin: str):
    """Decode a VIN to fill in vehicle details."""
    vehicle = decode_vin(vin)
    if vehicle is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unable to decode VIN. Please enter vehicle details manually.",
        )
    return VehicleResponse(vin=vin.strip().upper(), **vehicle.to_dict())
