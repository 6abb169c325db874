"""
API routes package
"""
from claimassist.api.routes import claims, assessment, review, summary, vehicles, analytics

__all__ = [
    "claims",
    "assessment",
    "review",
    "summary",
    "vehicles",
    "analytics",
]
