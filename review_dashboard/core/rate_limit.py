"""
Rate Limiting
Fixed-window request counters keyed by caller address and route class.

Two windows apply to every caller:
  - general : 100 requests / 15 minutes, all traffic
  - api     : 30 requests / 1 minute, /api/ traffic only
A request must be admitted by every window that applies to it.

Fixed windows reset the whole counter at the window boundary, so a caller
can fit up to 2x the budget into a burst straddling that boundary. State is
process-local; a restart resets every quota.
"""
import logging
import math
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from review_dashboard.core.config import Settings

logger = logging.getLogger(__name__)

GENERAL_ROUTE_CLASS = "general"
API_ROUTE_CLASS = "api"


@dataclass
class WindowRecord:
    count: int
    reset_at: float


@dataclass
class RateLimitDecision:
    allowed: bool
    route_class: str
    limit: int
    count: int
    reset_at: float       # epoch seconds
    retry_after: int = 0  # whole seconds until reset, rejected requests only

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count)


class FixedWindowCounter:
    """One window policy (budget + width) over many keys."""

    def __init__(
        self,
        route_class: str,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        self.route_class = route_class
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._records: Dict[str, WindowRecord] = {}

    def hit(self, key: str) -> RateLimitDecision:
        now = self.clock()
        record = self._records.get(key)

        if record is None or now > record.reset_at:
            record = WindowRecord(count=1, reset_at=now + self.window_seconds)
            self._records[key] = record
            return self._decision(True, record)

        if record.count >= self.max_requests:
            retry_after = max(1, math.ceil(record.reset_at - now))
            return self._decision(False, record, retry_after)

        record.count += 1
        return self._decision(True, record)

    def peek(self, key: str) -> Optional[WindowRecord]:
        return self._records.get(key)

    def sweep(self) -> int:
        """Drop records whose window has already ended."""
        now = self.clock()
        expired = [key for key, record in self._records.items() if now > record.reset_at]
        for key in expired:
            del self._records[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._records)

    def _decision(self, allowed: bool, record: WindowRecord, retry_after: int = 0) -> RateLimitDecision:
        return RateLimitDecision(
            allowed=allowed,
            route_class=self.route_class,
            limit=self.max_requests,
            count=record.count,
            reset_at=record.reset_at,
            retry_after=retry_after,
        )


class RateLimiter:
    """
    Admission gate combining the general and API windows.

    Owned by the application instance; tests build their own with a fake
    clock and random source. Access is serialized with a lock so the
    counters stay consistent under a threaded server.
    """

    def __init__(
        self,
        general_max_requests: int = 100,
        general_window_seconds: float = 15 * 60,
        api_max_requests: int = 30,
        api_window_seconds: float = 60,
        sweep_probability: float = 0.01,
        clock: Callable[[], float] = time.time,
        rng: Callable[[], float] = random.random,
    ):
        self.general = FixedWindowCounter(GENERAL_ROUTE_CLASS, general_max_requests, general_window_seconds, clock)
        self.api = FixedWindowCounter(API_ROUTE_CLASS, api_max_requests, api_window_seconds, clock)
        self.sweep_probability = sweep_probability
        self.rng = rng
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "RateLimiter":
        return cls(
            general_max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            general_window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            api_max_requests=settings.API_RATE_LIMIT_MAX_REQUESTS,
            api_window_seconds=settings.API_RATE_LIMIT_WINDOW_SECONDS,
            sweep_probability=settings.RATE_LIMIT_SWEEP_PROBABILITY,
            **kwargs,
        )

    @staticmethod
    def make_key(client_ip: str, route_class: str) -> str:
        return f"{client_ip}:{route_class}"

    def admit(self, client_ip: str, is_api_route: bool = False) -> RateLimitDecision:
        """
        Check the API window first (API routes only), then the general window.
        Returns the rejecting decision, or the decision of the route's own
        class when admitted (used for X-RateLimit-* headers).
        """
        with self._lock:
            if self.rng() < self.sweep_probability:
                self._sweep_locked()

            api_decision = None
            if is_api_route:
                api_decision = self.api.hit(self.make_key(client_ip, API_ROUTE_CLASS))
                if not api_decision.allowed:
                    return api_decision

            general_decision = self.general.hit(self.make_key(client_ip, GENERAL_ROUTE_CLASS))
            if not general_decision.allowed:
                return general_decision

            return api_decision or general_decision

    def sweep(self) -> Tuple[int, int]:
        with self._lock:
            return self._sweep_locked()

    def _sweep_locked(self) -> Tuple[int, int]:
        removed = (self.general.sweep(), self.api.sweep())
        if any(removed):
            logger.debug(f"Rate limit sweep removed {removed[0]} general / {removed[1]} api records")
        return removed
