"""
Request Gate Middleware
Runs in front of every route:
  1. rate limiting (general window always, API window for /api/ paths)
  2. JSON content type required for API POST/PATCH
  3. request size limit by Content-Length
  4. security + X-RateLimit-* headers on the way out
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from review_dashboard.core.config import Settings
from review_dashboard.core.errors import RateLimitExceeded, error_payload
from review_dashboard.core.rate_limit import RateLimitDecision
from review_dashboard.core.security import (
    apply_security_headers,
    get_client_ip,
    is_json_content_type,
    rate_limit_headers,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"
JSON_BODY_METHODS = ("POST", "PATCH")


def is_api_path(path: str) -> bool:
    return path.startswith(API_PREFIX)


def _rate_limited_response(decision: RateLimitDecision) -> JSONResponse:
    exc = RateLimitExceeded(
        retry_after=decision.retry_after,
        limit=decision.limit,
        reset_at=int(decision.reset_at),
    )
    body = error_payload(exc.message, exc.status_code)
    body["retryAfter"] = exc.retry_after
    response = JSONResponse(status_code=exc.status_code, content=body, headers=rate_limit_headers(decision))
    apply_security_headers(response.headers)
    return response


def _rejected(status_code: int, message: str) -> JSONResponse:
    response = JSONResponse(status_code=status_code, content=error_payload(message, status_code))
    apply_security_headers(response.headers)
    return response


def install_request_gate(app: FastAPI, settings: Settings) -> None:
    """Register the gate as an HTTP middleware on the given app"""

    @app.middleware("http")
    async def request_gate(request: Request, call_next):
        path = request.url.path
        api_route = is_api_path(path)

        decision = None
        if settings.RATE_LIMIT_ENABLED:
            client_ip = get_client_ip(request)
            decision = request.app.state.rate_limiter.admit(client_ip, api_route)
            if not decision.allowed:
                logger.warning(
                    f"Rate limit exceeded for {client_ip} ({decision.route_class}) on {request.method} {path}"
                )
                return _rate_limited_response(decision)

        if api_route:
            if request.method in JSON_BODY_METHODS and not is_json_content_type(request.headers):
                return _rejected(status.HTTP_400_BAD_REQUEST, "Content-Type must be application/json")

            content_length = request.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > settings.MAX_REQUEST_BYTES:
                return _rejected(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Request too large")

        response = await call_next(request)

        apply_security_headers(response.headers)
        if decision is not None:
            for name, value in rate_limit_headers(decision).items():
                response.headers[name] = value
        return response
