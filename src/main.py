"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.gzip import GZipMiddleware

from src.api import api_router
from src.config import get_settings
from src.db import async_session_maker, init_db
from src.exceptions import TubeshelfError
from src.utils.cache import cache
from src.utils.http_client import close_all_clients
from src.utils.logging import get_logger, setup_logging
from src.utils.metrics import MetricsMiddleware, metrics

settings = get_settings()
setup_logging()
logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # JSON API only
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        # HSTS (only in production)
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    if settings.uses_memory_storage:
        logger.warning("Using in-memory storage - data is lost on restart")
    else:
        await init_db()
        logger.info("Database initialized")

    # Initialize Redis cache
    if await cache.connect():
        logger.info("Redis cache connected")
    else:
        logger.warning("Redis cache unavailable - running without caching")

    if not settings.youtube_api_key:
        logger.warning("YOUTUBE_API_KEY is not set - YouTube calls will be rejected")

    yield

    # Close Redis cache connection
    await cache.close()
    logger.info("Redis cache closed")

    # Close persistent HTTP clients
    await close_all_clients()
    logger.info("HTTP clients closed")

    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware (order matters - first added = last executed)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(MetricsMiddleware)  # Collect HTTP metrics
app.add_middleware(GZipMiddleware, minimum_size=500)  # Compress responses > 500 bytes

# CORS configuration for API access
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    # Production: only allow same origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.app_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type"],
    )

# Routers
app.include_router(api_router)


def _error_response(status_code: int, message: str, errors: list | None = None) -> JSONResponse:
    content: dict = {"message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(TubeshelfError)
async def app_error_handler(request: Request, exc: TubeshelfError) -> JSONResponse:
    """Render application errors with their own status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _error_response(exc.status_code, exc.message, exc.errors)


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPException details as {message}."""
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Invalid request bodies and query parameters are 400s."""
    return _error_response(400, "Validation error", jsonable_errors(exc.errors()))


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Provider data that fails schema validation is a 400."""
    return _error_response(400, "Validation error", jsonable_errors(exc.errors()))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error_response(500, "Internal server error")


def jsonable_errors(errors) -> list[dict]:
    """Keep the JSON-safe parts of pydantic error entries."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in errors
    ]


# Store app start time for uptime tracking
_app_start_time = datetime.now(UTC)


@app.get("/health", include_in_schema=True, tags=["monitoring"])
async def health_check() -> JSONResponse:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        JSONResponse with status, uptime, and service health checks.
    """
    from sqlalchemy import text

    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime_seconds": (datetime.now(UTC) - _app_start_time).total_seconds(),
        "version": "0.1.0",
        "checks": {}
    }

    # Check store
    if settings.uses_memory_storage:
        health_status["checks"]["storage"] = {"status": "healthy", "backend": "memory"}
    else:
        try:
            async with async_session_maker() as db:
                await db.execute(text("SELECT 1"))
            health_status["checks"]["storage"] = {"status": "healthy", "backend": "database"}
        except Exception:
            health_status["checks"]["storage"] = {"status": "unhealthy", "backend": "database"}
            health_status["status"] = "degraded"

    # Redis is optional: report it, never degrade on it
    redis_ok = await cache.ping()
    health_status["checks"]["redis"] = {"status": "healthy" if redis_ok else "unavailable"}

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/metrics", include_in_schema=True, tags=["monitoring"])
async def prometheus_metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Prometheus-formatted metrics text.
    """
    return Response(
        content=metrics.format_prometheus(),
        media_type="text/plain; charset=utf-8",
    )
