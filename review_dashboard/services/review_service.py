"""
Review Service
Normalization, filtering and statistics over guest review collections.

Effective rating:
  - the stored overall rating when present
  - otherwise the mean of the per-category ratings
  - otherwise None ("No rating"), which is excluded from every average
    and treated as 0 by the rating-tier filter

Everything here is pure: inputs are never mutated and results are
recomputed from the current collection on every call.
"""
from __future__ import annotations

import logging
import math
import re
from collections import OrderedDict
from typing import Callable, Iterable, List, Optional, Sequence

from review_dashboard.core.errors import ValidationError
from review_dashboard.schemas.property import Property, PropertyStats
from review_dashboard.schemas.review import (
    FilterValue, Review, ReviewCategory, ReviewFilters, ReviewStats,
)
from review_dashboard.schemas.trend import ChannelPerformance, MonthlyStat

logger = logging.getLogger(__name__)

MIN_RATING = 0.0
MAX_RATING = 5.0
NO_RATING_LABEL = "No rating"

_RATING_TIER_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*\+?\s*stars?\s*$", re.IGNORECASE)
_STATUS_VALUES = {
    FilterValue.APPROVED.value,
    FilterValue.PENDING.value,
    FilterValue.FLAGGED.value,
}


# ── Normalization ──────────────────────────────────────────────────────────────

def is_valid_rating(rating: Optional[float]) -> bool:
    if rating is None or isinstance(rating, bool):
        return False
    if not isinstance(rating, (int, float)) or math.isnan(rating):
        return False
    return MIN_RATING <= rating <= MAX_RATING


def rating_from_categories(categories: Sequence[ReviewCategory]) -> Optional[float]:
    """Arithmetic mean of category ratings, or None when there are none."""
    if not categories:
        return None
    return sum(c.rating for c in categories) / len(categories)


def effective_rating(review: Review) -> Optional[float]:
    if review.rating is not None:
        return review.rating
    return rating_from_categories(review.review_category)


def tier_rating(review: Review) -> float:
    """Effective rating for star-tier filtering; absent or invalid counts as 0."""
    rating = effective_rating(review)
    return rating if is_valid_rating(rating) else 0.0


def normalize_review(review: Review) -> Review:
    """
    Return a copy of the review with a derived overall rating when the
    stored one is absent. The derived value keeps full precision.
    """
    if review.rating is None and review.review_category:
        return review.model_copy(update={"rating": rating_from_categories(review.review_category)})
    return review.model_copy()


def normalize_reviews(reviews: Iterable[Review]) -> List[Review]:
    return [normalize_review(r) for r in reviews]


def display_rating(rating: Optional[float]) -> str:
    """One-decimal label used by the property page and dashboard cards."""
    if rating is None:
        return NO_RATING_LABEL
    return f"{rating:.1f}"


# ── Statistics ─────────────────────────────────────────────────────────────────

def average_rating(ratings: Iterable[Optional[float]]) -> float:
    """Mean of present, valid ratings; 0 when none qualify."""
    valid = [r for r in ratings if is_valid_rating(r)]
    if not valid:
        return 0.0
    return sum(valid) / len(valid)


def _approval_rate(approved: int, total: int) -> float:
    return (approved / total) * 100 if total > 0 else 0.0


def compute_stats(reviews: Sequence[Review]) -> ReviewStats:
    total = len(reviews)
    approved = sum(1 for r in reviews if r.is_approved)
    flagged = sum(1 for r in reviews if r.is_flagged)

    return ReviewStats(
        total_reviews=total,
        approved_reviews=approved,
        flagged_reviews=flagged,
        average_rating=average_rating(effective_rating(r) for r in reviews),
        approval_rate=_approval_rate(approved, total),
    )


def compute_property_stats(reviews: Sequence[Review], property_id: int) -> ReviewStats:
    return compute_stats(property_reviews(reviews, property_id))


def rank_properties(properties: Sequence[Property], reviews: Sequence[Review]) -> List[PropertyStats]:
    """
    Per-property summaries ordered for the performance panel:
    highest approval rate first, ties broken by average rating.
    """
    ranked = []
    for prop in properties:
        stats = compute_property_stats(reviews, prop.id)
        ranked.append(PropertyStats(
            property_id=prop.id,
            name=prop.name,
            location=prop.location,
            **stats.model_dump(),
        ))
    ranked.sort(key=lambda s: (s.approval_rate, s.average_rating), reverse=True)
    return ranked


def _group_by(reviews: Iterable[Review], key: Callable[[Review], str]) -> "OrderedDict[str, List[Review]]":
    groups: "OrderedDict[str, List[Review]]" = OrderedDict()
    for review in reviews:
        groups.setdefault(key(review), []).append(review)
    return groups


def channel_performance(reviews: Sequence[Review]) -> List[ChannelPerformance]:
    """Live per-channel rollup, channels in first-seen order."""
    rollup = []
    for channel, group in _group_by(reviews, lambda r: r.channel.value).items():
        stats = compute_stats(group)
        rollup.append(ChannelPerformance(
            channel=channel,
            total_reviews=stats.total_reviews,
            average_rating=stats.average_rating,
            approval_rate=stats.approval_rate,
        ))
    return rollup


def monthly_stats(reviews: Sequence[Review]) -> List[MonthlyStat]:
    """Live per-month rollup keyed 'YYYY-MM', oldest month first."""
    groups = _group_by(reviews, lambda r: r.submitted_date.strftime("%Y-%m"))
    rollup = []
    for month in sorted(groups):
        stats = compute_stats(groups[month])
        rollup.append(MonthlyStat(
            month=month,
            total_reviews=stats.total_reviews,
            average_rating=stats.average_rating,
            approval_rate=stats.approval_rate,
        ))
    return rollup


# ── Filtering ──────────────────────────────────────────────────────────────────

def _is_all(value: Optional[str]) -> bool:
    return value is None or value.strip() == "" or value == FilterValue.ALL.value


def parse_rating_tier(value: Optional[str]) -> Optional[float]:
    """'5 Stars' -> 5, '4+ Stars' -> 4, 'All' -> None."""
    if _is_all(value):
        return None
    match = _RATING_TIER_RE.match(value)
    if not match:
        raise ValidationError(f"Invalid rating filter: {value}")
    return float(match.group(1))


def parse_property_filter(value: Optional[str]) -> Optional[int]:
    if _is_all(value):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid property filter: {value}")


def parse_status_filter(value: Optional[str]) -> Optional[str]:
    if _is_all(value):
        return None
    if value not in _STATUS_VALUES:
        raise ValidationError(f"Invalid status filter: {value}")
    return value


def matches_search(review: Review, query: str) -> bool:
    needle = query.lower()
    return (
        needle in review.listing_name.lower()
        or needle in review.reviewer_name.lower()
        or needle in review.public_review.lower()
    )


def _matches_status(review: Review, status: str) -> bool:
    if status == FilterValue.APPROVED.value:
        return review.is_approved
    if status == FilterValue.PENDING.value:
        return not review.is_approved
    return review.is_flagged


def filter_reviews(reviews: Sequence[Review], criteria: Optional[ReviewFilters] = None) -> List[Review]:
    """
    Apply every active criterion (logical AND) and keep the input order.
    Criteria are parsed before any review is examined, so a bad value
    fails without partial work.
    """
    criteria = criteria or ReviewFilters()
    min_rating = parse_rating_tier(criteria.rating)
    property_id = parse_property_filter(criteria.property)
    status = parse_status_filter(criteria.status)
    channel = None if _is_all(criteria.channel) else criteria.channel
    search = criteria.search or ""

    result = []
    for review in reviews:
        if min_rating is not None and tier_rating(review) < min_rating:
            continue
        if channel is not None and review.channel.value != channel:
            continue
        if property_id is not None and review.property_id != property_id:
            continue
        if status is not None and not _matches_status(review, status):
            continue
        if search and not matches_search(review, search):
            continue
        result.append(review)
    return result


# ── Selectors ──────────────────────────────────────────────────────────────────

def approved_reviews(reviews: Iterable[Review]) -> List[Review]:
    return [r for r in reviews if r.is_approved]


def property_reviews(reviews: Iterable[Review], property_id: int) -> List[Review]:
    return [r for r in reviews if r.property_id == property_id]


def approved_property_reviews(reviews: Iterable[Review], property_id: int) -> List[Review]:
    return [r for r in reviews if r.property_id == property_id and r.is_approved]

