"""
Deterministic Calculation Engine
All estimate totals and approval thresholds are computed here, NOT by the vision model.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping, Optional, Sequence

from claimassist.models.assessment import DamageItem
from claimassist.models.enums import Severity


MANUAL_ASSESSMENT_SECONDS = 15 * 60


def round_currency(amount: Decimal) -> Decimal:
    """Round to 2 decimal places for currency."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_money(value: float) -> float:
    """Round a float amount through Decimal so totals don't drift."""
    return float(round_currency(Decimal(str(value))))


def sum_costs(costs: Iterable[float]) -> float:
    total = Decimal("0")
    for cost in costs:
        total += Decimal(str(cost))
    return float(round_currency(total))


def item_contribution(
    item: DamageItem,
    override_cost: Optional[float] = None,
    removed: bool = False,
) -> float:
    """What one item adds to the adjusted total."""
    if removed:
        return 0.0
    if override_cost is not None:
        return override_cost
    return item.estimated_cost


def calculate_adjusted_total(
    damages: Sequence[DamageItem],
    overrides: Optional[Mapping[int, float]] = None,
    removed: Optional[Iterable[int]] = None,
) -> float:
    """
    Sum the active contribution of every damage item.

    Deterministic formula:
    total = sum(override if overridden else estimated_cost) over non-removed items

    Args:
        damages: Items produced by the assessment
        overrides: Active override values keyed by item index
        removed: Indexes of items excluded from the estimate

    Returns:
        Adjusted total rounded to cents

    Raises:
        ValueError: If an override value is negative
    """
    overrides = overrides or {}
    removed_set = set(removed or ())

    for index, value in overrides.items():
        if value < 0:
            raise ValueError(f"override for item {index} cannot be negative")

    return sum_costs(
        item_contribution(item, overrides.get(index), index in removed_set)
        for index, item in enumerate(damages)
    )


def calculate_percentage_delta(original_total: float, final_total: float) -> float:
    """Percentage change from the AI total to the final total (0 when the AI total is 0)."""
    if original_total <= 0:
        return 0.0
    return ((final_total - original_total) / original_total) * 100


def requires_senior_approval(
    total: float,
    overall_severity: Severity,
    threshold: float,
) -> bool:
    """Estimates above the ceiling or with severe damage need a second-tier approver."""
    return total > threshold or overall_severity == Severity.SEVERE


def calculate_time_savings(
    processing_seconds: float,
    manual_seconds: float = MANUAL_ASSESSMENT_SECONDS,
) -> int:
    """Percent of a manual assessment's duration saved by the AI pass."""
    if manual_seconds <= 0:
        return 0
    return round((1 - (processing_seconds / manual_seconds)) * 100)
