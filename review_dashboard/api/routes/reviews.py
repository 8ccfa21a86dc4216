"""
Review Routes

  GET    /api/reviews/hostaway              normalized reviews, properties, trends
  PATCH  /api/reviews/hostaway              moderate one review
  GET    /api/reviews/dashboard             filtered reviews + statistics
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from review_dashboard.core.deps import get_dataset, get_moderation_service
from review_dashboard.schemas.dataset import Dataset
from review_dashboard.schemas.review import (
    DashboardResponse,
    FilterValue,
    ModerationRequest,
    ModerationResponse,
    ReviewFilters,
    ReviewListResponse,
)
from review_dashboard.services import review_service
from review_dashboard.services.moderation_service import ReviewModerationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/hostaway", response_model=ReviewListResponse)
def list_reviews(
    property_id: Optional[int] = Query(None, alias="propertyId"),
    dataset: Dataset = Depends(get_dataset),
):
    """Get all reviews with derived ratings, optionally for one property"""
    reviews = review_service.normalize_reviews(dataset.reviews)
    if property_id is not None:
        reviews = review_service.property_reviews(reviews, property_id)

    return ReviewListResponse(
        normalized_reviews=reviews,
        properties=dataset.properties,
        trends=dataset.trends,
        total_count=len(reviews),
    )


@router.patch("/hostaway", response_model=ModerationResponse)
def moderate_review(
    payload: ModerationRequest,
    service: ReviewModerationService = Depends(get_moderation_service),
):
    """Approve, reject, flag, unflag or respond to a review"""
    result = service.moderate(payload.review_id, payload.action, payload.response)
    return ModerationResponse(
        success=True,
        review=result.review,
        previous_state=result.previous_state,
    )


@router.get("/dashboard", response_model=DashboardResponse)
def review_dashboard(
    rating: str = Query(FilterValue.ALL.value),
    channel: str = Query(FilterValue.ALL.value),
    property: str = Query(FilterValue.ALL.value),
    status: str = Query(FilterValue.ALL.value),
    search: str = Query(""),
    dataset: Dataset = Depends(get_dataset),
):
    """Filtered review list with overall, filtered and per-property statistics"""
    criteria = ReviewFilters(
        rating=rating, channel=channel, property=property, status=status, search=search,
    )
    reviews = review_service.normalize_reviews(dataset.reviews)
    filtered = review_service.filter_reviews(reviews, criteria)
    logger.debug(f"Dashboard filters {criteria.model_dump()} matched {len(filtered)}/{len(reviews)} reviews")

    return DashboardResponse(
        reviews=filtered,
        total_count=len(reviews),
        filtered_count=len(filtered),
        stats=review_service.compute_stats(reviews),
        filtered_stats=review_service.compute_stats(filtered),
        property_performance=review_service.rank_properties(dataset.properties, reviews),
        channel_performance=review_service.channel_performance(reviews),
        monthly_stats=review_service.monthly_stats(reviews),
        trends=dataset.trends,
    )
