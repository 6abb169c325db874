"""
Severity and confidence aggregation over damage items.
"""
import math
from typing import Sequence

from claimassist.models.assessment import AssessmentResult, DamageItem
from claimassist.models.enums import AssessmentMode, Severity


def overall_severity(damages: Sequence[DamageItem]) -> Severity:
    """Most severe item wins; no items means no damage."""
    result = Severity.NONE
    for item in damages:
        if item.severity.rank > result.rank:
            result = item.severity
    return result


def aggregate_confidence(damages: Sequence[DamageItem], no_damage_confidence: int) -> int:
    """Mean item confidence rounded down, or the fixed default when nothing was found."""
    if not damages:
        return no_damage_confidence
    mean = sum(item.confidence for item in damages) / len(damages)
    return max(0, min(100, math.floor(mean)))


def apply_human_assist(
    result: AssessmentResult,
    marker_count: int,
    boost: int,
    cap: int,
) -> AssessmentResult:
    """Raise confidence after the agent marked damage locations."""
    if marker_count <= 0:
        return result
    result.ai_confidence = min(cap, result.ai_confidence + boost)
    result.human_assisted = True
    # Live and degraded results keep the summary that explains them
    if result.mode == AssessmentMode.SIMULATED and not result.degraded:
        plural = "" if marker_count == 1 else "s"
        result.summary = (
            f"[Simulated] Human-assisted assessment with {marker_count} marked location{plural}"
        )
    return result
