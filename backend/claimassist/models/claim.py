"""
Claim intake records
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class VehicleInfo:
    """Decoded vehicle identity."""
    year: int
    make: str
    model: str
    trim: str
    value: float

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "make": self.make,
            "model": self.model,
            "trim": self.trim,
            "value": self.value,
        }


@dataclass(frozen=True)
class ClaimRecord:
    """Policy, vehicle and accident details captured at intake."""
    policy_number: str
    vehicle_make: str
    vehicle_model: str
    vehicle_year: str
    accident_date: date
    accident_description: str
    vehicle_trim: Optional[str] = None
    vehicle_value: Optional[float] = None
    vin: Optional[str] = None

    @property
    def vehicle_label(self) -> str:
        return f"{self.vehicle_year} {self.vehicle_make} {self.vehicle_model}"

    def vehicle_hints(self) -> dict:
        """Vehicle identity passed to the vision model."""
        return {
            "make": self.vehicle_make,
            "model": self.vehicle_model,
            "year": self.vehicle_year,
        }

    def to_dict(self) -> dict:
        return {
            "policy_number": self.policy_number,
            "vehicle_make": self.vehicle_make,
            "vehicle_model": self.vehicle_model,
            "vehicle_year": self.vehicle_year,
            "vehicle_trim": self.vehicle_trim,
            "vehicle_value": self.vehicle_value,
            "vin": self.vin,
            "accident_date": self.accident_date.isoformat(),
            "accident_description": self.accident_description,
        }


@dataclass
class UploadedImage:
    """A damage photo held in memory for the life of the claim."""
    filename: str
    media_type: str
    data: bytes
    label: str

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "media_type": self.media_type,
            "label": self.label,
            "size_bytes": self.size_bytes,
        }


@dataclass(frozen=True)
class DamageMarker:
    """Agent-marked damage location, as a percentage of image width/height."""
    x: float
    y: float
    image_index: int
    description: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"x": self.x, "y": self.y, "imageIndex": self.image_index}
        if self.description:
            data["description"] = self.description
        return data
