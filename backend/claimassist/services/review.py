"""
Agent Review State

Tracks per-item cost overrides, removals and notes for one assessment and
recomputes the adjusted total from them. Items are never deleted; removal
only excludes them from the total.
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from claimassist.models.assessment import AssessmentResult, CostAdjustment, DamageItem
from claimassist.services.calculation import (
    calculate_adjusted_total,
    item_contribution,
    sum_costs,
    to_money,
)
from claimassist.services.exceptions import ReviewValidationError


@dataclass
class ItemOverride:
    enabled: bool = False
    cost: Optional[float] = None
    reason: str = ""


class ReviewState:
    """Mutable review of one assessment's damage items."""

    def __init__(self, damages: Sequence[DamageItem]):
        self.damages: List[DamageItem] = list(damages)
        self.notes: str = ""
        self._overrides: Dict[int, ItemOverride] = {}
        self._removed: Set[int] = set()

    def _check_index(self, index: int) -> DamageItem:
        if index < 0 or index >= len(self.damages):
            raise ReviewValidationError(f"No damage item at index {index}")
        return self.damages[index]

    # Overrides

    def enable_override(self, index: int) -> None:
        """Turn on an override, seeded with the item's original cost."""
        item = self._check_index(index)
        if index in self._removed:
            raise ReviewValidationError(f"Item {index} is removed; restore it before overriding")
        override = self._overrides.setdefault(index, ItemOverride())
        if not override.enabled:
            override.enabled = True
            override.cost = item.estimated_cost

    def disable_override(self, index: int) -> None:
        """Turn off an override; the item contributes its original cost again."""
        self._check_index(index)
        self._overrides.pop(index, None)

    def set_override_cost(self, index: int, cost: float) -> None:
        self._check_index(index)
        override = self._overrides.get(index)
        if override is None or not override.enabled:
            raise ReviewValidationError(f"Override is not enabled for item {index}")
        if not math.isfinite(cost):
            raise ReviewValidationError("Override cost must be a finite amount")
        if cost < 0:
            raise ReviewValidationError("Override cost cannot be negative")
        override.cost = to_money(cost)

    def set_override_reason(self, index: int, reason: str) -> None:
        self._check_index(index)
        override = self._overrides.get(index)
        if override is None or not override.enabled:
            raise ReviewValidationError(f"Override is not enabled for item {index}")
        override.reason = reason.strip()

    def override(
        self,
        index: int,
        cost: Optional[float] = None,
        reason: Optional[str] = None,
    ) -> None:
        """Enable an override and set its cost and reason in one step."""
        self.enable_override(index)
        if cost is not None:
            self.set_override_cost(index, cost)
        if reason is not None:
            self.set_override_reason(index, reason)

    # Removal

    def remove_item(self, index: int) -> None:
        """Exclude an item from the total and drop any override on it."""
        self._check_index(index)
        self._removed.add(index)
        self._overrides.pop(index, None)

    def restore_item(self, index: int) -> None:
        self._check_index(index)
        self._removed.discard(index)

    def set_notes(self, notes: str) -> None:
        self.notes = notes.strip()

    # Derived values

    def is_removed(self, index: int) -> bool:
        return index in self._removed

    def active_overrides(self) -> Dict[int, float]:
        return {
            index: override.cost
            for index, override in self._overrides.items()
            if override.enabled and override.cost is not None and index not in self._removed
        }

    @property
    def original_total(self) -> float:
        return sum_costs(item.estimated_cost for item in self.damages)

    def adjusted_total(self) -> float:
        return calculate_adjusted_total(self.damages, self.active_overrides(), self._removed)

    def cost_adjustments(self) -> Tuple[CostAdjustment, ...]:
        """Overrides that actually change an item's cost."""
        adjustments = []
        for index, cost in sorted(self.active_overrides().items()):
            original = self.damages[index].estimated_cost
            if cost == original:
                continue
            adjustments.append(
                CostAdjustment(
                    damage_index=index,
                    original_cost=original,
                    adjusted_cost=cost,
                    reason=self._overrides[index].reason,
                )
            )
        return tuple(adjustments)

    def removed_items(self) -> Tuple[int, ...]:
        return tuple(sorted(self._removed))

    @property
    def has_modifications(self) -> bool:
        return bool(self.cost_adjustments() or self._removed)

    def validate(self) -> None:
        """
        Check the review can be submitted.

        Raises:
            ReviewValidationError: If a cost change has no reason
        """
        missing = [adj.damage_index for adj in self.cost_adjustments() if not adj.reason]
        if missing:
            items = ", ".join(str(i) for i in missing)
            raise ReviewValidationError(f"A reason is required for each cost override (items: {items})")

    def annotate(self, assessment: AssessmentResult) -> AssessmentResult:
        """Record the override audit trail on the assessment."""
        assessment.manual_overrides = list(self.cost_adjustments())
        assessment.override_notes = self.notes or None
        return assessment

    def line_items(self) -> List[dict]:
        items = []
        for index, item in enumerate(self.damages):
            override = self._overrides.get(index)
            removed = index in self._removed
            active_cost = self.active_overrides().get(index)
            items.append({
                "index": index,
                "damage": item.to_dict(),
                "removed": removed,
                "override_enabled": bool(override and override.enabled),
                "override_cost": override.cost if override else None,
                "override_reason": override.reason if override else "",
                "contribution": item_contribution(item, active_cost, removed),
            })
        return items

    def to_dict(self) -> dict:
        return {
            "items": self.line_items(),
            "original_total": self.original_total,
            "adjusted_total": self.adjusted_total(),
            "cost_adjustments": [a.to_dict() for a in self.cost_adjustments()],
            "removed_items": list(self.removed_items()),
            "notes": self.notes,
            "has_modifications": self.has_modifications,
        }
