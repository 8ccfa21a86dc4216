"""
Property Service
Public property page data: approved reviews, rating summary,
display price and booking quotes.

Estimated nightly price (used when a property has no stored price):
  round(average_rating × 30 + 50)

Booking quote:
  base     = nights × nightly price
  discount = round(base × 10%) for stays of 10 nights or more
  total    = base − discount + 45 cleaning fee
"""
import logging
import math
from datetime import date
from typing import List

from review_dashboard.core import errors
from review_dashboard.core.errors import NotFoundError, ValidationError
from review_dashboard.schemas.dataset import Dataset, PropertyDetailResponse
from review_dashboard.schemas.property import BookingQuote, Property
from review_dashboard.schemas.review import Review
from review_dashboard.services import review_service

logger = logging.getLogger(__name__)

PRICE_RATING_MULTIPLIER = 30
PRICE_BASE_ADDITION = 50
CLEANING_FEE = 45.0
DISCOUNT_THRESHOLD_NIGHTS = 10
DISCOUNT_PERCENTAGE = 0.1


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimated_price(average_rating: float) -> int:
    if not review_service.is_valid_rating(average_rating):
        raise ValidationError(f"Invalid rating provided: {average_rating}")
    return _round_half_up(average_rating * PRICE_RATING_MULTIPLIER + PRICE_BASE_ADDITION)


def display_price(prop: Property) -> float:
    """Stored nightly price, or the rating-derived estimate."""
    if prop.price:
        return prop.price
    return float(estimated_price(prop.average_rating))


def calculate_booking_price(price: float, check_in: date, check_out: date) -> BookingQuote:
    if isinstance(price, bool) or not isinstance(price, (int, float)) or price < 0:
        raise ValidationError(f"Invalid price provided: {price}")

    nights = (check_out - check_in).days
    if nights <= 0:
        raise ValidationError("Check-out must be after check-in")

    base_price = nights * price
    discount = float(_round_half_up(base_price * DISCOUNT_PERCENTAGE)) if nights >= DISCOUNT_THRESHOLD_NIGHTS else 0.0

    return BookingQuote(
        check_in=check_in,
        check_out=check_out,
        nights=nights,
        nightly_price=price,
        base_price=base_price,
        discount=discount,
        cleaning_fee=CLEANING_FEE,
        total=base_price - discount + CLEANING_FEE,
    )


def find_property(dataset: Dataset, property_id: int) -> Property:
    for prop in dataset.properties:
        if prop.id == property_id:
            return prop
    raise NotFoundError(errors.PROPERTY_NOT_FOUND)


def public_reviews(dataset: Dataset, property_id: int) -> List[Review]:
    """Approved, normalized reviews for the public property page."""
    approved = review_service.approved_property_reviews(dataset.reviews, property_id)
    return review_service.normalize_reviews(approved)


def get_property_detail(dataset: Dataset, property_id: int) -> PropertyDetailResponse:
    prop = find_property(dataset, property_id)
    reviews = public_reviews(dataset, property_id)
    stats = review_service.compute_stats(reviews)
    rated = any(review_service.is_valid_rating(r.rating) for r in reviews)

    return PropertyDetailResponse(
        property=prop,
        display_price=display_price(prop),
        rating_label=review_service.display_rating(stats.average_rating if rated else None),
        stats=stats,
        reviews=reviews,
    )


def quote_for_property(
    dataset: Dataset,
    property_id: int,
    check_in: date,
    check_out: date,
) -> BookingQuote:
    prop = find_property(dataset, property_id)
    price = display_price(prop)
    logger.debug(f"Quoting property {property_id}: {check_in} -> {check_out} at {price}")
    return calculate_booking_price(price, check_in, check_out)
