"""
Feedback analytics routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from claimassist.services.feedback.loop import FeedbackLoop, get_feedback_loop

router = APIRouter()


@router.get("/stats")
async def get_stats(
    recent: Optional[int] = Query(None, ge=0, le=100),
    feedback_loop: FeedbackLoop = Depends(get_feedback_loop),
):
    """Dashboard statistics over all recorded feedback."""
    return feedback_loop.get_stats(recent_limit=recent).to_dict()


@router.get("/training-candidates")
async def get_training_candidates(feedback_loop: FeedbackLoop = Depends(get_feedback_loop)):
    """Overridden assessments with large estimate errors."""
    return [entry.to_dict() for entry in feedback_loop.get_training_candidates()]


@router.get("/export")
async def export_feedback(feedback_loop: FeedbackLoop = Depends(get_feedback_loop)):
    return [entry.to_dict() for entry in feedback_loop.export()]


@router.delete("/feedback", status_code=status.HTTP_204_NO_CONTENT)
async def clear_feedback(feedback_loop: FeedbackLoop = Depends(get_feedback_loop)):
    """Reset the feedback log."""
    feedback_loop.clear()
