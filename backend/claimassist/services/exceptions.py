"""
Service-layer exceptions. API routes translate these into HTTP errors.
"""


class VisionServiceError(Exception):
    """Exception raised when the vision provider call or its response fails."""

    def __init__(self, message: str, original_error: Exception = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)


class ClaimNotFoundError(LookupError):
    def __init__(self, claim_id: str):
        self.claim_id = claim_id
        super().__init__(f"Claim {claim_id} not found or expired")


class WorkflowError(Exception):
    """Operation not allowed in the claim's current workflow step."""


class ReviewValidationError(ValueError):
    """Invalid override, removal or approval input."""


class ImageValidationError(ValueError):
    """Rejected image upload."""
