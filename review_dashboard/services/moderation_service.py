"""
Review Moderation Service
Validates and applies a single moderation action to one review.

A review carries two independent facets plus an optional reply:
  approval : pending <-> approved   (approve / reject)
  flag     : unflagged <-> flagged  (flag / unflag)
  response : host reply text        (respond, overwrites)

Every action is validated before the store is written, so a failing
action never leaves a partial update behind.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from review_dashboard.core import errors
from review_dashboard.core.errors import NotFoundError, ValidationError
from review_dashboard.db.store import RecordStore
from review_dashboard.schemas.review import Review, ReviewAction

logger = logging.getLogger(__name__)


_ACTION_UPDATES: Dict[ReviewAction, Dict[str, Any]] = {
    ReviewAction.APPROVE: {"is_approved": True},
    ReviewAction.REJECT: {"is_approved": False},
    ReviewAction.FLAG: {"is_flagged": True},
    ReviewAction.UNFLAG: {"is_flagged": False},
}


@dataclass
class ModerationResult:
    review: Review
    previous_state: Review


def validate_review_id(review_id: Any) -> int:
    # JSON numbers like 7.0 are whole ids
    if isinstance(review_id, float) and review_id.is_integer():
        review_id = int(review_id)
    # bool is an int subclass; True must not resolve to review 1
    if isinstance(review_id, bool) or not isinstance(review_id, int) or review_id <= 0:
        raise ValidationError(errors.INVALID_REVIEW_ID)
    return review_id


def validate_action(action: Any) -> ReviewAction:
    try:
        return ReviewAction(action)
    except ValueError:
        raise ValidationError(f"{errors.INVALID_ACTION}: {action}")


def validate_response_text(response: Any) -> str:
    if not isinstance(response, str) or not response.strip():
        raise ValidationError(errors.RESPONSE_REQUIRED)
    return response


class ReviewModerationService:
    def __init__(self, store: RecordStore):
        self.store = store

    def build_update(self, action: ReviewAction, response: Any = None) -> Dict[str, Any]:
        """Field changes for an action; raises before anything is written."""
        if action is ReviewAction.RESPOND:
            return {"response": validate_response_text(response)}
        return dict(_ACTION_UPDATES[action])

    def moderate(self, review_id: Any, action: Any, response: Optional[Any] = None) -> ModerationResult:
        if review_id is None or action is None or action == "":
            raise ValidationError(errors.MISSING_REQUIRED_FIELDS)

        review_id = validate_review_id(review_id)
        action = validate_action(action)
        update = self.build_update(action, response)

        previous = self.store.get_review(review_id)
        if previous is None:
            raise NotFoundError(errors.REVIEW_NOT_FOUND)

        self.store.update_review(review_id, update)
        updated = self.store.get_review(review_id)
        logger.info(f"Review {review_id}: {action.value} applied ({', '.join(update)})")

        return ModerationResult(review=updated, previous_state=previous)
