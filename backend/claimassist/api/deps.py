"""
API dependencies
"""
from contextlib import contextmanager

from fastapi import Depends, HTTPException, status

from claimassist.services.assessment.routing import RoutingEngine, get_routing_engine
from claimassist.services.assessment.service import AssessmentService, get_assessment_service
from claimassist.services.exceptions import ClaimNotFoundError, WorkflowError
from claimassist.services.feedback.loop import FeedbackLoop, get_feedback_loop
from claimassist.services.session_store import SessionStore, get_session_store
from claimassist.services.workflow import ClaimWorkflow


def get_workflow(
    store: SessionStore = Depends(get_session_store),
    assessment_service: AssessmentService = Depends(get_assessment_service),
    feedback_loop: FeedbackLoop = Depends(get_feedback_loop),
    routing_engine: RoutingEngine = Depends(get_routing_engine),
) -> ClaimWorkflow:
    return ClaimWorkflow(store, assessment_service, feedback_loop, routing_engine)


@contextmanager
def service_errors():
    """Translate service exceptions into HTTP errors."""
    try:
        yield
    except ClaimNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except WorkflowError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


__all__ = [
    "get_workflow",
    "get_session_store",
    "get_assessment_service",
    "get_feedback_loop",
    "get_routing_engine",
    "service_errors",
]
