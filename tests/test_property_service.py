"""Tests for property page data and booking quotes."""

from datetime import date

import pytest

from review_dashboard.core.errors import NotFoundError, ValidationError
from review_dashboard.services import property_service


def test_estimated_price_from_rating():
    assert property_service.estimated_price(4.5) == 185
    assert property_service.estimated_price(0) == 50


def test_estimated_price_rejects_invalid_rating():
    with pytest.raises(ValidationError):
        property_service.estimated_price(7.0)


def test_display_price_prefers_stored_price(seed_dataset):
    stored = property_service.find_property(seed_dataset, 1)
    estimated = property_service.find_property(seed_dataset, 2)

    assert property_service.display_price(stored) == 145
    assert property_service.display_price(estimated) == 179


def test_booking_quote_short_stay():
    quote = property_service.calculate_booking_price(100, date(2024, 10, 1), date(2024, 10, 4))

    assert quote.nights == 3
    assert quote.base_price == 300
    assert quote.discount == 0
    assert quote.total == 345


def test_booking_quote_long_stay_discount():
    quote = property_service.calculate_booking_price(145, date(2024, 10, 1), date(2024, 10, 11))

    assert quote.nights == 10
    assert quote.base_price == 1450
    assert quote.discount == 145
    assert quote.total == 1350


@pytest.mark.parametrize("check_out", [date(2024, 10, 1), date(2024, 9, 30)])
def test_booking_quote_requires_positive_stay(check_out):
    with pytest.raises(ValidationError):
        property_service.calculate_booking_price(100, date(2024, 10, 1), check_out)


def test_booking_quote_rejects_negative_price():
    with pytest.raises(ValidationError):
        property_service.calculate_booking_price(-1, date(2024, 10, 1), date(2024, 10, 2))


def test_property_detail_shows_only_approved_reviews(seed_dataset):
    detail = property_service.get_property_detail(seed_dataset, 1)

    assert detail.property.id == 1
    assert [r.id for r in detail.reviews] == [7453]
    assert detail.reviews[0].rating == pytest.approx(5.0)
    assert detail.stats.total_reviews == 1
    assert detail.display_price == 145
    assert detail.rating_label == "5.0"


def test_property_detail_without_rated_reviews(seed_dataset):
    dataset = seed_dataset.model_copy(update={
        "reviews": [r for r in seed_dataset.reviews if r.id != 7453],
    })

    detail = property_service.get_property_detail(dataset, 1)

    assert detail.reviews == []
    assert detail.rating_label == "No rating"


def test_unknown_property(seed_dataset):
    with pytest.raises(NotFoundError):
        property_service.get_property_detail(seed_dataset, 99)
