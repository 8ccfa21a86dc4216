"""
Application error types and the shared error body shape.
Each error carries the HTTP status it is surfaced with at the API boundary.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# ==================== Canonical Messages ====================
MISSING_REQUIRED_FIELDS = "Missing required fields: reviewId and action"
INVALID_REVIEW_ID = "Invalid review ID"
INVALID_ACTION = "Invalid action"
RESPONSE_REQUIRED = "Response text is required for respond action"
REVIEW_NOT_FOUND = "Review not found"
PROPERTY_NOT_FOUND = "Property not found"
FAILED_TO_PROCESS_REVIEWS = "Failed to process reviews"
FAILED_TO_UPDATE_REVIEW = "Failed to update review"
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."


class ReviewDashboardError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ReviewDashboardError):
    """Malformed or missing input"""

    status_code = 400


class NotFoundError(ReviewDashboardError):
    """Identifier does not resolve to an existing record"""

    status_code = 404


class RateLimitExceeded(ReviewDashboardError):
    """Admission denied by the rate limiter"""

    status_code = 429

    def __init__(self, retry_after: int, limit: int, reset_at: int):
        super().__init__(RATE_LIMIT_MESSAGE)
        self.retry_after = retry_after
        self.limit = limit
        self.reset_at = reset_at


class StoreError(ReviewDashboardError):
    """Underlying record store read/write failure"""

    status_code = 500


def error_payload(message: str, status: int) -> Dict[str, Any]:
    """Build the error body returned by every failing endpoint"""
    return {
        "error": message,
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
