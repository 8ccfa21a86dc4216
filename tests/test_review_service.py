"""Tests for review normalization, statistics and filtering."""

from datetime import datetime

import pytest
from pydantic import ValidationError as SchemaValidationError

from review_dashboard.core.errors import ValidationError
from review_dashboard.schemas import ReviewFilters
from review_dashboard.services import review_service


class TestNormalization:

    def test_rating_derived_from_category_mean(self, make_review):
        review = make_review(categories=[4, 5, 3])
        normalized = review_service.normalize_review(review)

        assert normalized.rating == pytest.approx(4.0)

    def test_derived_rating_keeps_full_precision(self, make_review):
        review = make_review(categories=[5, 4, 4])
        normalized = review_service.normalize_review(review)

        assert normalized.rating == pytest.approx(13 / 3)
        assert review_service.display_rating(normalized.rating) == "4.3"

    def test_stored_rating_is_kept(self, make_review):
        review = make_review(rating=2.0, categories=[5, 5])

        assert review_service.normalize_review(review).rating == 2.0

    def test_no_categories_leaves_rating_absent(self, make_review):
        review = make_review(categories=[])
        normalized = review_service.normalize_review(review)

        assert normalized.rating is None
        assert review_service.display_rating(normalized.rating) == "No rating"

    @pytest.mark.parametrize("overrides", [
        {"rating": 9.0},
        {"rating": -1.0},
        {"categories": [10, 10]},
    ])
    def test_ratings_outside_zero_to_five_are_rejected(self, make_review, overrides):
        with pytest.raises(SchemaValidationError):
            make_review(**overrides)

    def test_normalize_does_not_mutate_input(self, make_review):
        review = make_review(categories=[4, 2])
        review_service.normalize_reviews([review])

        assert review.rating is None


class TestComputeStats:

    def test_empty_collection_is_all_zero(self):
        stats = review_service.compute_stats([])

        assert stats.total_reviews == 0
        assert stats.approved_reviews == 0
        assert stats.flagged_reviews == 0
        assert stats.average_rating == 0
        assert stats.approval_rate == 0

    def test_average_excludes_absent_ratings(self, make_review):
        reviews = [
            make_review(1, rating=5.0),
            make_review(2),
            make_review(3, rating=3.0),
        ]
        stats = review_service.compute_stats(reviews)

        assert stats.total_reviews == 3
        assert stats.average_rating == pytest.approx(4.0)

    def test_average_excludes_out_of_range_ratings(self, make_review):
        # model_copy skips validation, as with records built outside the schema
        unchecked = make_review(2).model_copy(update={"rating": 9.0})
        reviews = [make_review(1, rating=4.0), unchecked]

        assert review_service.compute_stats(reviews).average_rating == pytest.approx(4.0)

    def test_average_uses_category_derived_ratings(self, make_review):
        reviews = [make_review(1, rating=5.0), make_review(2, categories=[2, 4])]

        assert review_service.compute_stats(reviews).average_rating == pytest.approx(4.0)

    def test_counts_and_approval_rate(self, make_review):
        reviews = [
            make_review(1, is_approved=True),
            make_review(2, is_approved=True, is_flagged=True),
            make_review(3, is_flagged=True),
            make_review(4),
        ]
        stats = review_service.compute_stats(reviews)

        assert stats.approved_reviews == 2
        assert stats.flagged_reviews == 2
        assert stats.approval_rate == pytest.approx(50.0)

    def test_no_valid_ratings_gives_zero_average(self, make_review):
        stats = review_service.compute_stats([make_review(1), make_review(2)])

        assert stats.total_reviews == 2
        assert stats.average_rating == 0

    def test_property_stats_only_counts_matching_property(self, make_review):
        reviews = [
            make_review(1, property_id=1, rating=5.0, is_approved=True),
            make_review(2, property_id=2, rating=1.0),
        ]
        stats = review_service.compute_property_stats(reviews, 1)

        assert stats.total_reviews == 1
        assert stats.average_rating == 5.0
        assert stats.approval_rate == 100.0

    def test_property_stats_unknown_property(self, make_review):
        stats = review_service.compute_property_stats([make_review(1)], 42)

        assert stats.total_reviews == 0
        assert stats.approval_rate == 0


class TestRollups:

    def test_rank_properties_by_approval_then_rating(self, seed_dataset):
        reviews = review_service.normalize_reviews(seed_dataset.reviews)
        ranked = review_service.rank_properties(seed_dataset.properties, reviews)

        assert [p.property_id for p in ranked] == [3, 2, 1]
        assert ranked[0].approval_rate == 100.0
        assert ranked[1].average_rating == pytest.approx(4.5)

    def test_channel_performance_in_first_seen_order(self, make_review):
        reviews = [
            make_review(1, channel="Google", rating=4.0, is_approved=True),
            make_review(2, channel="Hostaway", rating=2.0),
            make_review(3, channel="Google", rating=5.0),
        ]
        rollup = review_service.channel_performance(reviews)

        assert [c.channel for c in rollup] == ["Google", "Hostaway"]
        assert rollup[0].total_reviews == 2
        assert rollup[0].average_rating == pytest.approx(4.5)
        assert rollup[0].approval_rate == pytest.approx(50.0)

    def test_monthly_stats_sorted_chronologically(self, make_review):
        reviews = [
            make_review(1, submitted_date=datetime(2024, 9, 3), rating=3.0),
            make_review(2, submitted_date=datetime(2024, 7, 14), rating=5.0, is_approved=True),
            make_review(3, submitted_date=datetime(2024, 9, 20), rating=4.0),
        ]
        rollup = review_service.monthly_stats(reviews)

        assert [m.month for m in rollup] == ["2024-07", "2024-09"]
        assert rollup[0].approval_rate == 100.0
        assert rollup[1].total_reviews == 2
        assert rollup[1].average_rating == pytest.approx(3.5)


class TestFilterReviews:

    @pytest.fixture
    def reviews(self, make_review):
        return [
            make_review(1, rating=5.0, channel="Hostaway", property_id=1, is_approved=True,
                        reviewer_name="Shane Finkelstein"),
            make_review(2, rating=4.2, channel="Google", property_id=2, is_flagged=True,
                        public_review="Noisy street at night"),
            make_review(3, rating=None, channel="Hostaway", property_id=1,
                        listing_name="Studio S2 - Camden"),
            make_review(4, rating=3.0, channel="Google", property_id=3, is_approved=True, is_flagged=True),
        ]

    def ids(self, reviews):
        return [r.id for r in reviews]

    def test_default_criteria_return_everything(self, reviews):
        assert self.ids(review_service.filter_reviews(reviews)) == [1, 2, 3, 4]
        assert self.ids(review_service.filter_reviews(reviews, ReviewFilters())) == [1, 2, 3, 4]

    def test_filter_is_repeatable(self, reviews):
        criteria = ReviewFilters(channel="Google")
        first = review_service.filter_reviews(reviews, criteria)
        second = review_service.filter_reviews(reviews, criteria)

        assert self.ids(first) == self.ids(second) == [2, 4]

    def test_five_stars(self, reviews):
        result = review_service.filter_reviews(reviews, ReviewFilters(rating="5 Stars"))
        assert self.ids(result) == [1]

    def test_four_plus_stars(self, reviews):
        result = review_service.filter_reviews(reviews, ReviewFilters(rating="4+ Stars"))
        assert self.ids(result) == [1, 2]

    def test_three_plus_stars_excludes_unrated(self, reviews):
        result = review_service.filter_reviews(reviews, ReviewFilters(rating="3+ Stars"))
        assert self.ids(result) == [1, 2, 4]

    def test_out_of_range_rating_agrees_with_stats(self, make_review):
        unchecked = make_review(1).model_copy(update={"rating": 9.0})
        reviews = [unchecked, make_review(2, rating=5.0)]

        result = review_service.filter_reviews(reviews, ReviewFilters(rating="5 Stars"))

        assert self.ids(result) == [2]
        assert review_service.compute_stats(reviews).average_rating == pytest.approx(5.0)

    def test_invalid_rating_tier(self, reviews):
        with pytest.raises(ValidationError):
            review_service.filter_reviews(reviews, ReviewFilters(rating="lots"))

    def test_channel(self, reviews):
        result = review_service.filter_reviews(reviews, ReviewFilters(channel="Hostaway"))
        assert self.ids(result) == [1, 3]

    def test_property(self, reviews):
        result = review_service.filter_reviews(reviews, ReviewFilters(property="1"))
        assert self.ids(result) == [1, 3]

    def test_invalid_property(self, reviews):
        with pytest.raises(ValidationError):
            review_service.filter_reviews(reviews, ReviewFilters(property="first"))

    def test_status_pending(self, reviews):
        result = review_service.filter_reviews(reviews, ReviewFilters(status="Pending"))
        assert self.ids(result) == [2, 3]

    def test_approved_and_flagged_are_independent(self, reviews):
        approved = review_service.filter_reviews(reviews, ReviewFilters(status="Approved"))
        flagged = review_service.filter_reviews(reviews, ReviewFilters(status="Flagged"))

        assert self.ids(approved) == [1, 4]
        assert self.ids(flagged) == [2, 4]

    def test_invalid_status(self, reviews):
        with pytest.raises(ValidationError):
            review_service.filter_reviews(reviews, ReviewFilters(status="Archived"))

    def test_search_is_case_insensitive_across_fields(self, reviews):
        by_reviewer = review_service.filter_reviews(reviews, ReviewFilters(search="SHANE"))
        by_text = review_service.filter_reviews(reviews, ReviewFilters(search="noisy"))
        by_listing = review_service.filter_reviews(reviews, ReviewFilters(search="camden"))

        assert self.ids(by_reviewer) == [1]
        assert self.ids(by_text) == [2]
        assert self.ids(by_listing) == [3]

    def test_criteria_combine_with_and(self, reviews):
        criteria = ReviewFilters(channel="Google", status="Approved", rating="3+ Stars")
        assert self.ids(review_service.filter_reviews(reviews, criteria)) == [4]

    def test_filter_does_not_mutate_input(self, reviews):
        review_service.filter_reviews(reviews, ReviewFilters(channel="Google"))
        assert len(reviews) == 4


class TestSelectors:

    def test_approved_property_reviews(self, make_review):
        reviews = [
            make_review(1, property_id=1, is_approved=True),
            make_review(2, property_id=1),
            make_review(3, property_id=2, is_approved=True),
        ]

        assert [r.id for r in review_service.approved_reviews(reviews)] == [1, 3]
        assert [r.id for r in review_service.property_reviews(reviews, 1)] == [1, 2]
        assert [r.id for r in review_service.approved_property_reviews(reviews, 1)] == [1]
