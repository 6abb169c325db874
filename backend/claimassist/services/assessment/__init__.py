"""
Assessment Module

Simulated assessments, aggregation and routing. The live/fallback service
lives in claimassist.services.assessment.service.
"""
from claimassist.services.assessment.aggregation import (
    aggregate_confidence,
    apply_human_assist,
    overall_severity,
)
from claimassist.services.assessment.routing import (
    RoutingContext,
    RoutingDecision,
    RoutingEngine,
    RoutingThresholds,
    get_routing_engine,
)
from claimassist.services.assessment.simulator import MockAssessmentGenerator, SimulationControls

__all__ = [
    "aggregate_confidence",
    "apply_human_assist",
    "overall_severity",
    "RoutingContext",
    "RoutingDecision",
    "RoutingEngine",
    "RoutingThresholds",
    "get_routing_engine",
    "MockAssessmentGenerator",
    "SimulationControls",
]
