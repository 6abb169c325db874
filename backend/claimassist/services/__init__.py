"""
Services package
"""
from claimassist.services.calculation import (
    calculate_adjusted_total,
    calculate_percentage_delta,
    requires_senior_approval,
)

__all__ = [
    "calculate_adjusted_total",
    "calculate_percentage_delta",
    "requires_senior_approval",
]
