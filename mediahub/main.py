"""
FastAPI application entry point.
Main application instance with middleware, error mapping and route configuration.
"""
from fastapi import FastAPI, Request, status, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import logging
import time
import uuid

from mediahub.config import settings
from mediahub.database import get_db, init_db, close_db
from mediahub.errors import ContentError
from mediahub.routes import auth, events, gallery_events, images, texts, timeline
from mediahub.services.cloudinary_blobs import configure_cloudinary, validate_cloudinary_config
from mediahub.utils.rate_limit import limiter

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Domain error kind -> HTTP status
ERROR_STATUS = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "payload_too_large": status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    "decode_error": status.HTTP_400_BAD_REQUEST,
    "backend_error": status.HTTP_502_BAD_GATEWAY,
}

# Create FastAPI application instance
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Wildcard origins cannot be combined with credentials
_allow_all_origins = "*" in settings.CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=not _allow_all_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
    max_age=3600,  # Cache preflight requests for 1 hour
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and duration, tagging it with an X-Request-ID."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    method = request.method
    path = request.url.path
    started = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            f"[{request_id}] Error processing {method} {path}: {str(e)}\n"
            f"  Error type: {type(e).__name__}",
            exc_info=True
        )
        raise

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"[{request_id}] {method} {path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    response.headers["X-Request-ID"] = request_id
    return response


# Include routers
app.include_router(texts.router, prefix=API_PREFIX)
app.include_router(images.router, prefix=API_PREFIX)
app.include_router(timeline.router, prefix=API_PREFIX)
app.include_router(events.router, prefix=API_PREFIX)
app.include_router(gallery_events.router, prefix=API_PREFIX)
app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(auth.root_router)


def add_cors_headers(response: JSONResponse, request: Request) -> JSONResponse:
    """
    Add CORS headers to error responses.
    Handlers registered for Exception run outside CORSMiddleware, so their
    responses would otherwise be rejected by browsers.

    Args:
        response: The JSONResponse to add headers to
        request: The incoming request

    Returns:
        JSONResponse with CORS headers added
    """
    origin = request.headers.get("origin")
    if _allow_all_origins:
        response.headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in settings.CORS_ORIGINS:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Vary"] = "Origin"
    response.headers["Access-Control-Expose-Headers"] = "X-Request-ID"

    return response


# Exception Handlers
@app.exception_handler(ContentError)
async def content_error_handler(request: Request, exc: ContentError):
    """Map domain errors to their HTTP status and a uniform error body."""
    status_code = ERROR_STATUS.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"{type(exc).__name__} on {request.method} {request.url.path}: {str(exc)}"
        + (f"\n  Cause: {exc.__cause__!r}" if exc.__cause__ else "")
    )

    content = {"error": exc.kind, "detail": str(exc)}
    field = getattr(exc, "field", None)
    if field:
        content["field"] = field
    if exc.index is not None:
        content["index"] = exc.index

    response = JSONResponse(status_code=status_code, content=content)
    return add_cors_headers(response, request)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions (401, 403, 404, etc.) with CORS headers."""
    logger.error(
        f"HTTPException on {request.method} {request.url.path}:\n"
        f"  Status: {exc.status_code}\n"
        f"  Detail: {exc.detail}"
    )

    # Handle both string and dict detail formats
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail, "detail": str(exc.detail)}

    response = JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )

    return add_cors_headers(response, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """Handle request validation errors."""
    logger.error(
        f"Validation error on {request.method} {request.url.path}:\n"
        f"  Errors: {exc.errors()}"
    )
    response = JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "validation_error",
            "detail": str(exc.errors())
        }
    )
    return add_cors_headers(response, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}:\n"
        f"  Error: {str(exc)}\n"
        f"  Error type: {type(exc).__name__}",
        exc_info=True
    )
    response = JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred"
        }
    )
    return add_cors_headers(response, request)


# Root Endpoints
@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": settings.API_TITLE,
        "status": "healthy",
        "version": settings.API_VERSION
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/health/db")
async def health_check_db(db: AsyncSession = Depends(get_db)):
    """
    Database health check endpoint.
    Tests database connection and returns status.
    """
    try:
        result = await db.execute(text("SELECT 1"))
        return {
            "database": "connected",
            "status": "healthy",
            "result": result.scalar()
        }
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}", exc_info=True)
        return {
            "database": "error",
            "status": "unhealthy",
            "error": "Database connection failed"
        }


@app.get("/health/storage")
async def health_check_storage():
    """
    Object storage health check endpoint.
    Reports whether the configured blob backend is usable.
    """
    if settings.BLOB_BACKEND == "memory":
        return {"storage": "memory", "status": "healthy"}

    if validate_cloudinary_config():
        return {
            "storage": "cloudinary",
            "status": "healthy",
            "cloud_name": settings.CLOUDINARY_CLOUD_NAME
        }
    return {
        "storage": "cloudinary",
        "status": "warning",
        "message": "Cloudinary credentials not set in environment variables"
    }


@app.on_event("startup")
async def startup_event():
    """
    Initialize database and storage on application startup.
    Non-blocking: app will start even if the database is unreachable.
    """
    logger.info(f"CORS allowed origins: {settings.CORS_ORIGINS}")
    logger.info(f"Blob backend: {settings.BLOB_BACKEND}, auth enabled: {settings.AUTH_ENABLED}")

    if settings.BLOB_BACKEND == "cloudinary":
        configure_cloudinary()

    try:
        await init_db()
    except Exception as e:
        logger.error(
            f"Failed to initialize database on startup: {str(e)}\n"
            f"The application will continue to run, but database-dependent endpoints will fail."
        )


@app.on_event("shutdown")
async def shutdown_event():
    """Close database connections on application shutdown."""
    try:
        await close_db()
    except Exception as e:
        logger.warning(f"Error during database shutdown: {str(e)}")
