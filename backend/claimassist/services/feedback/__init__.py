"""
Feedback loop package
"""
from claimassist.services.feedback.loop import (
    FeedbackCutoffs,
    FeedbackLoop,
    get_feedback_loop,
)
from claimassist.services.feedback.store import FeedbackStore, InMemoryFeedbackStore

__all__ = [
    "FeedbackCutoffs",
    "FeedbackLoop",
    "get_feedback_loop",
    "FeedbackStore",
    "InMemoryFeedbackStore",
]
