"""
Property Reviews Dashboard API - Main Application
FastAPI application with CORS, rate limiting, security headers,
error handling and request logging
"""
import logging
import traceback
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from review_dashboard.api.routes import properties_router, reviews_router
from review_dashboard.core import errors
from review_dashboard.core.config import Settings, get_settings
from review_dashboard.core.deps import get_rate_limiter
from review_dashboard.core.errors import ReviewDashboardError, StoreError, error_payload
from review_dashboard.core.middleware import install_request_gate
from review_dashboard.core.rate_limit import RateLimiter
from review_dashboard.db.store import RecordStore, create_store


logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """
    Build an application instance.
    The record store and rate limiter belong to the instance, so each test
    can run against its own isolated state.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.PROJECT_DESCRIPTION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    app.state.settings = settings
    app.state.store = store if store is not None else create_store(settings)
    app.state.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter.from_settings(settings)

    # ==================== MIDDLEWARE ====================
    # Registration order matters: the last middleware added runs first.

    install_request_gate(app, settings)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all incoming requests"""
        if request.url.path in ["/health", "/status"]:
            return await call_next(request)

        start_time = datetime.now(timezone.utc)
        client_host = request.client.host if request.client else "unknown"
        logger.info(f">> {request.method} {request.url.path} - {client_host}")

        try:
            response = await call_next(request)
            duration = (datetime.now(timezone.utc) - start_time).total_seconds()
            logger.info(f"<< {request.method} {request.url.path} - {response.status_code} ({duration:.2f}s)")
            return response
        except Exception as e:
            duration = (datetime.now(timezone.utc) - start_time).total_seconds()
            logger.error(f"[ERROR] {request.method} {request.url.path} - Error: {str(e)} ({duration:.2f}s)")
            raise

    # Compression: GZip responses
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # CORS wraps everything so preflight requests are answered before rate limiting
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        max_age=86400,
    )

    # ==================== ROUTERS ====================

    app.include_router(reviews_router, prefix="/api/reviews", tags=["Reviews"])
    app.include_router(properties_router, prefix="/api/properties", tags=["Properties"])

    # ==================== ERROR HANDLERS ====================

    @app.exception_handler(StoreError)
    async def store_exception_handler(request: Request, exc: StoreError):
        """Log store failures with context and hide the details from callers"""
        operation = f"{request.method} {request.url.path}"
        logger.error(f"Record store failure during {operation}: {exc.message}")
        message = errors.FAILED_TO_PROCESS_REVIEWS if request.method == "GET" else errors.FAILED_TO_UPDATE_REVIEW
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(message, exc.status_code),
        )

    @app.exception_handler(ReviewDashboardError)
    async def app_exception_handler(request: Request, exc: ReviewDashboardError):
        """Client-facing errors carry their own status and message"""
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(exc.message, exc.status_code),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors with detailed response"""
        logger.warning(f"Validation error on {request.url}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "success": False,
                "detail": "Validation error",
                "errors": exc.errors(),
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions"""
        logger.error(f"Unhandled exception: {exc}\n{traceback.format_exc()}")

        # Don't expose internal errors in production
        error_message = str(exc) if settings.DEBUG else "Internal server error"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_payload(error_message, status.HTTP_500_INTERNAL_SERVER_ERROR),
        )

    # ==================== HEALTH & STATUS ENDPOINTS ====================

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint - API information"""
        return {
            "success": True,
            "message": f"Welcome to {settings.PROJECT_NAME}",
            "version": settings.VERSION,
            "docs": "/api/docs",
            "status": "operational",
        }

    @app.get("/health", tags=["System"])
    def health_check(request: Request):
        """Health check: the record store must be readable"""
        try:
            request.app.state.store.get_all()
        except StoreError as e:
            logger.error(f"Health check failed: {e.message}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "success": False,
                    "status": "unhealthy",
                    "store": "unavailable",
                    "timestamp": _utc_now(),
                }
            )
        return {
            "success": True,
            "status": "healthy",
            "store": "available",
            "timestamp": _utc_now(),
        }

    @app.get("/status", tags=["System"])
    def status_check(limiter: RateLimiter = Depends(get_rate_limiter)):
        """Detailed status check"""
        return {
            "success": True,
            "status": "operational",
            "timestamp": _utc_now(),
            "service": {
                "name": settings.PROJECT_NAME,
                "version": settings.VERSION,
                "environment": settings.ENVIRONMENT,
                "storage_backend": settings.resolved_storage_backend,
            },
            "rate_limit": {
                "enabled": settings.RATE_LIMIT_ENABLED,
                "tracked_general_clients": len(limiter.general),
                "tracked_api_clients": len(limiter.api),
            },
        }

    @app.on_event("startup")
    async def startup_event():
        """Run on application startup"""
        logger.info("=" * 70)
        logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
        logger.info("=" * 70)
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Record store: {type(app.state.store).__name__}")

    return app


configure_logging(get_settings())
app = create_app()
