"""
Claim intake: field validation, VIN decoding and the vehicle catalog.
"""
import re
from datetime import date
from typing import Dict, List, Optional

from claimassist.models.claim import ClaimRecord, VehicleInfo


VIN_PATTERN = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$")
MIN_VEHICLE_YEAR = 1980

# Demo VINs for quick fill; a production decoder would call the NHTSA vPIC API
DEMO_VINS: Dict[str, VehicleInfo] = {
    "5YJ3E1ET5RF847523": VehicleInfo(2024, "Tesla", "Model 3", "Performance", 52990),
    "1HGBH41JXMN109186": VehicleInfo(2021, "Honda", "Accord", "EX-L", 28000),
    "5YJSA1E14HF123456": VehicleInfo(2017, "Tesla", "Model S", "75D", 42000),
    "1FTFW1ET5DFC12345": VehicleInfo(2013, "Ford", "F-150", "XLT", 18500),
    "WVWZZZ3CZWE123456": VehicleInfo(2023, "Volkswagen", "ID.4", "Pro S", 48000),
    "1G1YY22G965109876": VehicleInfo(2022, "Chevrolet", "Corvette", "Stingray", 65000),
    "WBA8E9C55GK123456": VehicleInfo(2021, "BMW", "3 Series", "330i", 41000),
    "5TDKZ3DC8LS123456": VehicleInfo(2020, "Toyota", "Highlander", "XLE", 35000),
}

GENERIC_VEHICLE = VehicleInfo(2022, "Unknown", "Vehicle", "Base", 25000)

VEHICLE_CATALOG: Dict[str, List[str]] = {
    "Audi": ["A3", "A4", "A6", "e-tron GT", "Q3", "Q5", "Q7", "Q8", "RS6", "TT"],
    "BMW": ["2 Series", "3 Series", "4 Series", "5 Series", "7 Series", "i4", "iX", "X1", "X3", "X5", "X7"],
    "Chevrolet": ["Blazer", "Bolt EV", "Camaro", "Colorado", "Corvette", "Equinox", "Malibu", "Silverado", "Tahoe", "Traverse"],
    "Ford": ["Bronco", "Edge", "Escape", "Explorer", "F-150", "F-150 Lightning", "Maverick", "Mustang", "Mustang Mach-E", "Ranger"],
    "Honda": ["Accord", "Civic", "CR-V", "HR-V", "Odyssey", "Passport", "Pilot", "Ridgeline"],
    "Hyundai": ["Elantra", "Ioniq 5", "Ioniq 6", "Kona", "Palisade", "Santa Fe", "Sonata", "Tucson"],
    "Kia": ["EV6", "EV9", "Forte", "K5", "Seltos", "Sorento", "Sportage", "Telluride"],
    "Lexus": ["ES", "GX", "IS", "LC", "LS", "NX", "RX", "RZ", "TX", "UX"],
    "Mercedes-Benz": ["A-Class", "C-Class", "E-Class", "EQE", "EQS", "GLA", "GLC", "GLE", "GLS", "S-Class"],
    "Nissan": ["Altima", "Ariya", "Frontier", "Kicks", "Leaf", "Maxima", "Murano", "Pathfinder", "Rogue", "Sentra"],
    "Porsche": ["718 Boxster", "718 Cayman", "911", "Cayenne", "Macan", "Panamera", "Taycan"],
    "Rivian": ["R1S", "R1T"],
    "Subaru": ["Ascent", "BRZ", "Crosstrek", "Forester", "Impreza", "Legacy", "Outback", "Solterra", "WRX"],
    "Tesla": ["Model 3", "Model S", "Model X", "Model Y", "Cybertruck"],
    "Toyota": ["4Runner", "Camry", "Corolla", "GR86", "Highlander", "Prius", "RAV4", "Sequoia", "Supra", "Tacoma", "Tundra"],
    "Volkswagen": ["Atlas", "Golf", "ID.4", "ID.Buzz", "Jetta", "Passat", "Taos", "Tiguan"],
}


def normalize_vin(vin: str) -> str:
    return vin.strip().upper()


def validate_vin(vin: str) -> str:
    """
    Validate a VIN and return it uppercased.

    Raises:
        ValueError: If it is not 17 characters of A-Z/0-9 excluding I, O and Q
    """
    normalized = normalize_vin(vin)
    if len(normalized) != 17:
        raise ValueError("VIN must be 17 characters")
    if not VIN_PATTERN.match(normalized):
        raise ValueError("VIN may only contain letters and digits, excluding I, O and Q")
    return normalized


def decode_vin(vin: str) -> Optional[VehicleInfo]:
    """Look up a VIN. Unknown but valid VINs decode to a generic vehicle."""
    try:
        normalized = validate_vin(vin)
    except ValueError:
        return None
    return DEMO_VINS.get(normalized, GENERIC_VEHICLE)


def list_makes() -> List[str]:
    return sorted(VEHICLE_CATALOG)


def list_models(make: str) -> List[str]:
    return list(VEHICLE_CATALOG.get(make, []))


def validate_vehicle_year(year: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    value = year.strip()
    if not value.isdigit() or len(value) != 4:
        raise ValueError("vehicle_year must be a 4-digit year")
    if not MIN_VEHICLE_YEAR <= int(value) <= today.year + 1:
        raise ValueError(f"vehicle_year must be between {MIN_VEHICLE_YEAR} and {today.year + 1}")
    return value


def validate_accident_date(value: str, today: Optional[date] = None) -> date:
    today = today or date.today()
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        raise ValueError("accident_date must be in ISO format (YYYY-MM-DD)")
    if parsed > today:
        raise ValueError("accident_date cannot be in the future")
    return parsed


def build_claim_record(
    policy_number: str,
    vehicle_make: str,
    vehicle_model: str,
    vehicle_year: str,
    accident_date: date,
    accident_description: str,
    vin: Optional[str] = None,
) -> ClaimRecord:
    """Assemble the intake record, filling trim and value from the VIN when known."""
    vehicle = decode_vin(vin) if vin else None
    return ClaimRecord(
        policy_number=policy_number.strip(),
        vehicle_make=vehicle_make.strip(),
        vehicle_model=vehicle_model.strip(),
        vehicle_year=vehicle_year.strip(),
        accident_date=accident_date,
        accident_description=accident_description.strip(),
        vehicle_trim=vehicle.trim if vehicle else None,
        vehicle_value=vehicle.value if vehicle else None,
        vin=normalize_vin(vin) if vin else None,
    )
