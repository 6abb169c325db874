"""
Vision response parsing.

The model is asked for bare JSON but may wrap it in prose or markdown.
Any field may be missing; defaults keep the assessment usable.
"""
import json
import math
from typing import Any, Dict, List

from claimassist.models.assessment import AssessmentResult, DamageItem, InconsistencyFlag
from claimassist.models.enums import (
    AssessmentMode,
    FlagSeverity,
    InconsistencyType,
    Severity,
)
from claimassist.services.assessment.aggregation import aggregate_confidence, overall_severity
from claimassist.services.calculation import sum_costs, to_money
from claimassist.services.exceptions import VisionServiceError


def _reject_constant(name: str) -> Any:
    raise VisionServiceError(f"Vision model returned non-numeric value {name}")


def extract_json(content: str) -> Dict[str, Any]:
    """
    Parse the model output as a JSON object.

    Falls back to the outermost {...} block when the output carries prose.
    NaN and Infinity literals are not JSON and are rejected.

    Raises:
        VisionServiceError: If no JSON object can be parsed
    """
    if not content or not content.strip():
        raise VisionServiceError("Empty response from vision model")

    try:
        data = json.loads(content, parse_constant=_reject_constant)
    except json.JSONDecodeError:
        start = content.find("{")
        end = content.rfind("}")
        if start == -1 or end <= start:
            raise VisionServiceError("Invalid response format from vision model")
        try:
            data = json.loads(content[start : end + 1], parse_constant=_reject_constant)
        except json.JSONDecodeError as exc:
            raise VisionServiceError("Invalid response format from vision model", exc)

    if not isinstance(data, dict):
        raise VisionServiceError("Vision model response is not a JSON object")
    return data


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    # 1e400 parses as inf
    return number if math.isfinite(number) else default


def _as_confidence(value: Any) -> int:
    return max(0, min(100, int(_as_float(value))))


def _as_severity(value: Any, default: Severity) -> Severity:
    if isinstance(value, str):
        for severity in Severity:
            if severity.value.lower() == value.strip().lower():
                return severity
    return default


def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _parse_damage(raw: Dict[str, Any]) -> DamageItem:
    severity = _as_severity(raw.get("severity"), Severity.MINOR)
    if severity == Severity.NONE:
        severity = Severity.MINOR
    return DamageItem(
        area=str(raw.get("area") or "Unknown area"),
        damage_type=str(raw.get("type") or "Unspecified"),
        severity=severity,
        estimated_cost=to_money(max(0.0, _as_float(raw.get("estimatedCost")))),
        confidence=_as_confidence(raw.get("confidence")),
    )


def _parse_flag(raw: Dict[str, Any]) -> InconsistencyFlag:
    try:
        flag_type = InconsistencyType(str(raw.get("type", "")).lower())
    except ValueError:
        flag_type = InconsistencyType.OTHER
    try:
        flag_severity = FlagSeverity(str(raw.get("severity", "")).lower())
    except ValueError:
        flag_severity = FlagSeverity.WARNING
    return InconsistencyFlag(
        flag_type=flag_type,
        description=str(raw.get("description") or "Inconsistency detected"),
        severity=flag_severity,
        confidence=_as_confidence(raw.get("confidence")),
    )


def normalize_response(
    data: Dict[str, Any],
    claim_id: str,
    no_damage_confidence: int,
) -> AssessmentResult:
    """
    Build an AssessmentResult from the model's JSON.

    Totals, overall severity and aggregate confidence are derived from the
    damage items rather than trusted from the model.
    """
    damages = [
        _parse_damage(item)
        for item in data.get("damages") or []
        if isinstance(item, dict)
    ]
    inconsistencies = [
        _parse_flag(item)
        for item in data.get("inconsistencies") or []
        if isinstance(item, dict)
    ]
    if data.get("hasInconsistencies") is True and not inconsistencies:
        inconsistencies.append(
            InconsistencyFlag(
                flag_type=InconsistencyType.OTHER,
                description="Vision model reported inconsistencies without details",
                severity=FlagSeverity.WARNING,
                confidence=0,
            )
        )

    has_damage = bool(data.get("hasDamage", bool(damages))) and bool(damages)

    return AssessmentResult(
        claim_id=claim_id,
        has_damage=has_damage,
        damages=damages,
        overall_severity=overall_severity(damages),
        total_estimate=sum_costs(d.estimated_cost for d in damages),
        labor_hours=max(0.0, _as_float(data.get("laborHours"))),
        parts_required=_as_str_list(data.get("partsRequired")),
        ai_confidence=aggregate_confidence(damages, no_damage_confidence),
        recommendations=_as_str_list(data.get("recommendations")),
        summary=str(data.get("summary") or ""),
        mode=AssessmentMode.LIVE,
        inconsistencies=inconsistencies,
    )
