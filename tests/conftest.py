import pytest
from datetime import datetime
from fastapi.testclient import TestClient

from review_dashboard.core.config import Settings
from review_dashboard.core.rate_limit import RateLimiter
from review_dashboard.db.store import MemoryRecordStore, load_seed_dataset
from review_dashboard.main import create_app
from review_dashboard.schemas import Dataset, Review, ReviewCategory


class FakeClock:
    """Manually advanced clock for rate limit windows"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _make_review(review_id: int = 1, categories=None, **overrides) -> Review:
    fields = {
        "id": review_id,
        "property_id": 1,
        "listing_name": "2B N1 A - 29 Shoreditch Heights",
        "reviewer_name": "Test Guest",
        "rating": None,
        "review_category": [
            ReviewCategory(category=f"category_{i}", rating=r)
            for i, r in enumerate(categories or [])
        ],
        "public_review": "Lovely stay",
        "submitted_date": datetime(2024, 8, 1, 12, 0, 0),
        "channel": "Hostaway",
        "is_approved": False,
        "is_flagged": False,
        "response": None,
    }
    fields.update(overrides)
    return Review(**fields)


@pytest.fixture
def make_review():
    return _make_review


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        STORAGE_BACKEND="memory",
        ENVIRONMENT="test",
        RATE_LIMIT_ENABLED=True,
        ALLOWED_ORIGINS=["http://localhost:3000"],
    )


@pytest.fixture
def seed_dataset() -> Dataset:
    return load_seed_dataset()


@pytest.fixture
def store(seed_dataset):
    return MemoryRecordStore(seed_dataset)


@pytest.fixture
def rate_limiter(clock):
    # rng pinned above the sweep probability: no random sweeps during tests
    return RateLimiter(clock=clock, rng=lambda: 1.0)


@pytest.fixture
def app(settings, store, rate_limiter):
    return create_app(settings=settings, store=store, rate_limiter=rate_limiter)


@pytest.fixture
def client(app):
    return TestClient(app)
