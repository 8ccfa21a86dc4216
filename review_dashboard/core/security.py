"""
Security Headers and Client Identification
Header sets applied by the request gate, plus caller address resolution
used to key the rate limiter.
"""
from typing import Dict, Mapping, MutableMapping

from starlette.requests import Request

from review_dashboard.core.rate_limit import RateLimitDecision


SECURITY_HEADERS: Dict[str, str] = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Content-Security-Policy": "; ".join([
        "default-src 'self'",
        "script-src 'self' 'unsafe-eval' 'unsafe-inline' https://maps.googleapis.com",
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
        "img-src 'self' data: https: blob:",
        "font-src 'self' https://fonts.gstatic.com https://fonts.googleapis.com",
        "connect-src 'self' https://maps.googleapis.com https://fonts.googleapis.com https://fonts.gstatic.com",
        "frame-src 'none'",
        "object-src 'none'",
        "base-uri 'self'",
        "form-action 'self'",
        "frame-ancestors 'none'",
        "upgrade-insecure-requests",
    ]),
}

UNKNOWN_CLIENT = "unknown"


def get_client_ip(request: Request) -> str:
    """
    Caller address: first X-Forwarded-For hop, then X-Real-IP,
    then the socket peer.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def apply_security_headers(headers: MutableMapping[str, str]) -> None:
    for name, value in SECURITY_HEADERS.items():
        headers[name] = value


def rate_limit_headers(decision: RateLimitDecision) -> Dict[str, str]:
    headers = {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(0 if not decision.allowed else decision.remaining),
        "X-RateLimit-Reset": str(int(decision.reset_at)),
    }
    if not decision.allowed:
        headers["Retry-After"] = str(decision.retry_after)
    return headers


def is_json_content_type(headers: Mapping[str, str]) -> bool:
    content_type = headers.get("content-type") or ""
    return "application/json" in content_type.lower()
