"""
Pydantic schemas for guest reviews, moderation requests and review statistics.
"""
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field

from review_dashboard.schemas.base import CamelModel
from review_dashboard.schemas.property import Property, PropertyStats
from review_dashboard.schemas.trend import ChannelPerformance, MonthlyStat, Trend


# ── Enums ──────────────────────────────────────────────────────────────────────

class ReviewAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    FLAG = "flag"
    UNFLAG = "unflag"
    RESPOND = "respond"


class ChannelType(str, Enum):
    HOSTAWAY = "Hostaway"
    GOOGLE = "Google"


class FilterValue(str, Enum):
    ALL = "All"
    FIVE_STARS = "5 Stars"
    FOUR_PLUS_STARS = "4+ Stars"
    THREE_PLUS_STARS = "3+ Stars"
    APPROVED = "Approved"
    PENDING = "Pending"
    FLAGGED = "Flagged"


# ── Records ────────────────────────────────────────────────────────────────────

class ReviewCategory(CamelModel):
    category: str
    rating: float = Field(..., ge=0, le=5)


class Review(CamelModel):
    id: int = Field(..., gt=0)
    property_id: int
    listing_name: str
    reviewer_name: str
    # None means no overall rating was supplied
    rating: Optional[float] = Field(None, ge=0, le=5)
    review_category: List[ReviewCategory] = []
    public_review: str = ""
    submitted_date: datetime
    channel: ChannelType
    is_approved: bool = False
    is_flagged: bool = False
    response: Optional[str] = None


# ── Requests ───────────────────────────────────────────────────────────────────

class ModerationRequest(CamelModel):
    """
    Body of PATCH /api/reviews/hostaway.
    Fields are untyped so the moderation service can report
    field-level validation errors with a 400 instead of a 422.
    """
    review_id: Any = None
    action: Any = None
    response: Any = None


class ReviewFilters(CamelModel):
    rating: str = FilterValue.ALL.value
    channel: str = FilterValue.ALL.value
    property: str = FilterValue.ALL.value
    status: str = FilterValue.ALL.value
    search: str = ""


# ── Responses ──────────────────────────────────────────────────────────────────

class ReviewStats(CamelModel):
    total_reviews: int = 0
    approved_reviews: int = 0
    flagged_reviews: int = 0
    average_rating: float = 0.0
    approval_rate: float = 0.0   # percentage 0-100


class ModerationResponse(CamelModel):
    success: bool = True
    review: Review
    previous_state: Review


class ReviewListResponse(CamelModel):
    normalized_reviews: List[Review]
    properties: List[Property]
    trends: Optional[Trend] = None
    total_count: int


class DashboardResponse(CamelModel):
    reviews: List[Review]
    total_count: int
    filtered_count: int
    stats: ReviewStats
    filtered_stats: ReviewStats
    property_performance: List[PropertyStats] = []
    channel_performance: List[ChannelPerformance] = []
    monthly_stats: List[MonthlyStat] = []
    trends: Optional[Trend] = None
