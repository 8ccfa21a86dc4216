from review_dashboard.schemas.base import CamelModel
from review_dashboard.schemas.dataset import Dataset, PropertyDetailResponse
from review_dashboard.schemas.property import (
    Amenity, AmenityCategory, BookingQuote, Coordinates, Policies,
    Property, PropertyStats, PropertyType,
)
from review_dashboard.schemas.review import (
    ChannelType, DashboardResponse, FilterValue, ModerationRequest,
    ModerationResponse, Review, ReviewAction, ReviewCategory, ReviewFilters,
    ReviewListResponse, ReviewStats,
)
from review_dashboard.schemas.trend import (
    ChannelPerformance, CommonIssue, MonthlyStat, Trend,
)

__all__ = [
    "CamelModel",
    "Dataset",
    "PropertyDetailResponse",
    "Amenity",
    "AmenityCategory",
    "BookingQuote",
    "Coordinates",
    "Policies",
    "Property",
    "PropertyStats",
    "PropertyType",
    "ChannelType",
    "DashboardResponse",
    "FilterValue",
    "ModerationRequest",
    "ModerationResponse",
    "Review",
    "ReviewAction",
    "ReviewCategory",
    "ReviewFilters",
    "ReviewListResponse",
    "ReviewStats",
    "ChannelPerformance",
    "CommonIssue",
    "MonthlyStat",
    "Trend",
]
