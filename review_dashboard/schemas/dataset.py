"""
Record store snapshot and composite property page payloads.
"""
from typing import List, Optional

from review_dashboard.schemas.base import CamelModel
from review_dashboard.schemas.property import Property
from review_dashboard.schemas.review import Review, ReviewStats
from review_dashboard.schemas.trend import Trend


class Dataset(CamelModel):
    """Full contents of the record store"""
    reviews: List[Review] = []
    properties: List[Property] = []
    trends: Optional[Trend] = None


class PropertyDetailResponse(CamelModel):
    property: Property
    display_price: float
    rating_label: str
    stats: ReviewStats
    reviews: List[Review]
