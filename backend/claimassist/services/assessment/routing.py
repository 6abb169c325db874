"""
Assessment Routing Engine

Deterministic rules deciding what happens after an assessment:
- HUMAN_MARKERS: Pause and ask the agent to mark damage locations
- FAST_PATH: One-click quick approval is offered
- STANDARD_REVIEW: Full agent review

Separately decides whether approval needs a senior adjuster.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from claimassist.core.config import settings
from claimassist.core.logging import get_logger
from claimassist.models.assessment import AssessmentResult
from claimassist.models.enums import ApprovalLevel, AssessmentRoute, Severity
from claimassist.services.calculation import requires_senior_approval

logger = get_logger("routing")


@dataclass
class RoutingThresholds:
    low_confidence: int = 70
    high_confidence: int = 85
    senior_approval: float = 5000.0

    @classmethod
    def from_settings(cls) -> "RoutingThresholds":
        return cls(
            low_confidence=settings.LOW_CONFIDENCE_THRESHOLD,
            high_confidence=settings.HIGH_CONFIDENCE_THRESHOLD,
            senior_approval=settings.SENIOR_APPROVAL_THRESHOLD,
        )


@dataclass
class RoutingContext:
    """Inputs the routing rules look at."""
    confidence: int
    total: float
    has_inconsistencies: bool
    has_damage: bool
    overall_severity: Severity
    markers_supplied: bool = False
    has_modifications: bool = False

    @classmethod
    def from_assessment(
        cls,
        assessment: AssessmentResult,
        total: Optional[float] = None,
        markers_supplied: bool = False,
        has_modifications: bool = False,
    ) -> "RoutingContext":
        return cls(
            confidence=assessment.ai_confidence,
            total=assessment.total_estimate if total is None else total,
            has_inconsistencies=assessment.has_inconsistencies,
            has_damage=assessment.has_damage,
            overall_severity=assessment.overall_severity,
            markers_supplied=markers_supplied or assessment.human_assisted,
            has_modifications=has_modifications,
        )


@dataclass
class RoutingDecision:
    route: AssessmentRoute
    approval_level: ApprovalLevel
    reasons: List[str] = field(default_factory=list)
    flags: List[str] = field(default_factory=list)
    rule_version: str = ""
    evaluated_at: str = ""

    @property
    def needs_markers(self) -> bool:
        return self.route == AssessmentRoute.HUMAN_MARKERS

    @property
    def fast_path_eligible(self) -> bool:
        return self.route == AssessmentRoute.FAST_PATH

    def to_dict(self) -> Dict[str, Any]:
        return {
            "route": self.route.value,
            "approval_level": self.approval_level.value,
            "reasons": list(self.reasons),
            "flags": list(self.flags),
            "rule_version": self.rule_version,
            "evaluated_at": self.evaluated_at,
        }


@dataclass
class RoutingRule:
    """A single routing rule. Rules that apply force their route."""
    rule_id: str
    description: str
    route: AssessmentRoute

    def evaluate(self, ctx: RoutingContext, thresholds: RoutingThresholds) -> Tuple[bool, List[str]]:
        """Evaluate if this rule applies. Returns (applies, reasons)."""
        raise NotImplementedError


class LowConfidenceMarkerRule(RoutingRule):
    """Low confidence on detected damage asks the agent for markers, once."""

    def __init__(self):
        super().__init__(
            rule_id="low_confidence_markers",
            description="Low confidence with damage detected - request damage markers",
            route=AssessmentRoute.HUMAN_MARKERS,
        )

    def evaluate(self, ctx: RoutingContext, thresholds: RoutingThresholds) -> Tuple[bool, List[str]]:
        if ctx.has_damage and not ctx.markers_supplied and ctx.confidence < thresholds.low_confidence:
            return True, [f"Confidence {ctx.confidence}% below {thresholds.low_confidence}%"]
        return False, []


class InconsistencyRule(RoutingRule):
    """Flagged claims never take the fast path."""

    def __init__(self):
        super().__init__(
            rule_id="inconsistencies",
            description="Vehicle inconsistencies detected - possible fraud",
            route=AssessmentRoute.STANDARD_REVIEW,
        )

    def evaluate(self, ctx: RoutingContext, thresholds: RoutingThresholds) -> Tuple[bool, List[str]]:
        if ctx.has_inconsistencies:
            return True, ["Vehicle inconsistencies detected"]
        return False, []


class NoDamageRule(RoutingRule):
    def __init__(self):
        super().__init__(
            rule_id="no_damage",
            description="No damage detected",
            route=AssessmentRoute.STANDARD_REVIEW,
        )

    def evaluate(self, ctx: RoutingContext, thresholds: RoutingThresholds) -> Tuple[bool, List[str]]:
        if not ctx.has_damage:
            return True, ["No damage detected - agent must confirm"]
        return False, []


class HighValueRule(RoutingRule):
    def __init__(self):
        super().__init__(
            rule_id="high_value",
            description="Estimate above senior approval threshold",
            route=AssessmentRoute.STANDARD_REVIEW,
        )

    def evaluate(self, ctx: RoutingContext, thresholds: RoutingThresholds) -> Tuple[bool, List[str]]:
        if ctx.total > thresholds.senior_approval:
            return True, [f"Estimate ${ctx.total:,.2f} exceeds ${thresholds.senior_approval:,.0f}"]
        return False, []


class SevereDamageRule(RoutingRule):
    def __init__(self):
        super().__init__(
            rule_id="severe_damage",
            description="Severe damage reported",
            route=AssessmentRoute.STANDARD_REVIEW,
        )

    def evaluate(self, ctx: RoutingContext, thresholds: RoutingThresholds) -> Tuple[bool, List[str]]:
        if ctx.overall_severity == Severity.SEVERE:
            return True, ["Severe damage reported"]
        return False, []


class BelowHighConfidenceRule(RoutingRule):
    def __init__(self):
        super().__init__(
            rule_id="below_high_confidence",
            description="Confidence below fast-path threshold",
            route=AssessmentRoute.STANDARD_REVIEW,
        )

    def evaluate(self, ctx: RoutingContext, thresholds: RoutingThresholds) -> Tuple[bool, List[str]]:
        if ctx.confidence < thresholds.high_confidence:
            return True, [f"Confidence {ctx.confidence}% below {thresholds.high_confidence}%"]
        return False, []


class ModifiedEstimateRule(RoutingRule):
    """An estimate the agent already changed goes through full review."""

    def __init__(self):
        super().__init__(
            rule_id="modified_estimate",
            description="Estimate modified by agent",
            route=AssessmentRoute.STANDARD_REVIEW,
        )

    def evaluate(self, ctx: RoutingContext, thresholds: RoutingThresholds) -> Tuple[bool, List[str]]:
        if ctx.has_modifications:
            return True, ["Estimate modified by agent"]
        return False, []


class RoutingEngine:
    """
    Assessment Routing Engine

    Every rule is evaluated so reasons and flags are complete; the highest
    priority route among applying rules wins, and the fast path is taken
    only when no rule applies.
    """

    RULE_VERSION = "v1.0"

    def __init__(self, thresholds: Optional[RoutingThresholds] = None):
        self.thresholds = thresholds or RoutingThresholds.from_settings()
        self.rules: List[RoutingRule] = [
            LowConfidenceMarkerRule(),
            InconsistencyRule(),
            NoDamageRule(),
            HighValueRule(),
            SevereDamageRule(),
            BelowHighConfidenceRule(),
            ModifiedEstimateRule(),
        ]

    def evaluate(self, ctx: RoutingContext) -> RoutingDecision:
        """
        Evaluate an assessment and determine routing.

        Args:
            ctx: Confidence, total and flags of the current assessment

        Returns:
            RoutingDecision with route, approval level, reasons and flags
        """
        reasons: List[str] = []
        flags: List[str] = []
        final_route: Optional[AssessmentRoute] = None

        for rule in self.rules:
            applies, rule_reasons = rule.evaluate(ctx, self.thresholds)
            if applies:
                logger.debug(f"Rule {rule.rule_id} applies: {rule.description}")
                flags.append(rule.rule_id)
                reasons.extend(rule_reasons)
                if final_route is None or self._route_priority(rule.route) > self._route_priority(final_route):
                    final_route = rule.route

        if final_route is None:
            final_route = AssessmentRoute.FAST_PATH
            reasons.append("High confidence, low value, no inconsistencies")

        return RoutingDecision(
            route=final_route,
            approval_level=self.approval_level(ctx.total, ctx.overall_severity),
            reasons=reasons,
            flags=flags,
            rule_version=self.RULE_VERSION,
            evaluated_at=datetime.utcnow().isoformat(),
        )

    def approval_level(self, total: float, overall_severity: Severity) -> ApprovalLevel:
        if requires_senior_approval(total, overall_severity, self.thresholds.senior_approval):
            return ApprovalLevel.SENIOR
        return ApprovalLevel.AGENT

    def _route_priority(self, route: AssessmentRoute) -> int:
        """Get priority of a route (higher = more urgent)."""
        priorities = {
            AssessmentRoute.FAST_PATH: 0,
            AssessmentRoute.STANDARD_REVIEW: 1,
            AssessmentRoute.HUMAN_MARKERS: 2,
        }
        return priorities.get(route, 0)


# Singleton instance
_routing_engine: Optional[RoutingEngine] = None


def get_routing_engine() -> RoutingEngine:
    """Get or create the routing engine singleton."""
    global _routing_engine
    if _routing_engine is None:
        _routing_engine = RoutingEngine()
    return _routing_engine
