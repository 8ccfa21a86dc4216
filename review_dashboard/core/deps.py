from fastapi import Depends, Request
import logging

from review_dashboard.core.rate_limit import RateLimiter
from review_dashboard.db.store import RecordStore
from review_dashboard.schemas.dataset import Dataset
from review_dashboard.services.moderation_service import ReviewModerationService

logger = logging.getLogger(__name__)


def get_store(request: Request) -> RecordStore:
    """Record store owned by the running app instance."""
    return request.app.state.store


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_dataset(store: RecordStore = Depends(get_store)) -> Dataset:
    """
    Current snapshot of the record store.
    StoreError propagates to the app-level handler, which logs it and
    returns an opaque 500.
    """
    return store.get_all()


def get_moderation_service(store: RecordStore = Depends(get_store)) -> ReviewModerationService:
    return ReviewModerationService(store)
