"""
FastAPI application entry point.
Main application instance with middleware, error handling and route configuration.
"""
from fastapi import FastAPI, Request, status, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import asyncio
import time
import traceback

from gallery_api.config import settings
from gallery_api.database import get_db, init_db, close_db
from gallery_api.routes import admin, auth, gallery
from gallery_api.utils.errors import ApiError, InternalError, error_envelope, format_validation_errors
from gallery_api.utils.rate_limit import charge_request, limiter, rate_limit_response

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}

# Create FastAPI application instance
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
)

app.state.limiter = limiter


# Registered before CORS so that 429 responses still carry CORS headers
@app.middleware("http")
async def enforce_rate_limits(request: Request, call_next):
    """Charge every /api request against the client's budgets before routing."""
    exhausted = charge_request(request)
    if exhausted is not None:
        return rate_limit_response(request, exhausted)
    return await call_next(request)


# CORS Middleware Configuration
# Explicit origins: the session cookie requires allow_credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,  # Cache preflight requests for 1 hour
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with its status and duration, and add security headers."""
    method = request.method
    path = request.url.path
    start = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            f"Error processing {method} {path}: {str(e)}\n"
            f"  Error type: {type(e).__name__}",
            exc_info=True
        )
        raise

    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)

    if path.startswith("/api"):
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{method} {path} {response.status_code} in {duration_ms:.0f}ms")

    return response


# Include routers
app.include_router(gallery.router, prefix="/api", tags=["gallery"])
app.include_router(admin.router, prefix="/api")
app.include_router(auth.router, prefix="/api")


def error_response(request: Request, message: str, status_code: int, headers=None, exc=None) -> JSONResponse:
    """
    Build a JSON error response in the shared envelope.
    The traceback is included only outside production.

    Security headers are set here as well: 500 responses are sent from
    outside the middleware stack.
    """
    stack = None
    if exc is not None and not settings.is_production:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return JSONResponse(
        status_code=status_code,
        content=error_envelope(message, status_code, request.url.path, stack),
        headers={**SECURITY_HEADERS, **(headers or {})},
    )


# Exception Handlers
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """Handle the API's own errors (400, 401, 404, ...)."""
    logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return error_response(request, exc.message, exc.status_code, headers=exc.headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle framework HTTP errors, such as unmatched routes (404) or wrong methods (405)."""
    if exc.status_code == status.HTTP_404_NOT_FOUND and request.url.path.startswith("/api"):
        message = "API endpoint not found"
    else:
        message = str(exc.detail)
    logger.info(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {message}")
    return error_response(request, message, exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors, listing every violated field."""
    message = format_validation_errors(exc.errors())
    logger.warning(f"Validation error on {request.method} {request.url.path}: {message}")
    return error_response(request, message, status.HTTP_400_BAD_REQUEST)



@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions without leaking internals in production."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}:\n"
        f"  Error: {str(exc)}\n"
        f"  Error type: {type(exc).__name__}",
        exc_info=exc
    )
    return error_response(
        request,
        InternalError.default_message,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        exc=exc,
    )


# Health Endpoints
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "message": "Service is healthy"}


@app.get("/api/health/db")
async def health_check_db(db: AsyncSession = Depends(get_db)):
    """
    Database health check endpoint.
    Tests database connection and returns status.
    """
    try:
        result = await db.execute(text("SELECT 1"))
        return {
            "database": "connected",
            "status": "ok",
            "result": result.scalar()
        }
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}", exc_info=True)
        return {
            "database": "error",
            "status": "unhealthy",
            "error": "Database connection failed"
        }


@app.on_event("startup")
async def startup_event():
    """
    Initialize the database on application startup.
    Non-blocking: the app will start even if database initialization fails.
    """
    logger.info(f"Starting {settings.API_TITLE} ({settings.ENVIRONMENT})")

    try:
        await init_db(settings.bootstrap_config())
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(
            f"Failed to initialize database on startup: {str(e)}\n"
            f"The application will continue to run, but database-dependent endpoints will fail.\n"
            f"Please check your DATABASE_URL configuration and network connectivity.",
            exc_info=True
        )
        # Don't raise - allow app to start without database for non-db endpoints


@app.on_event("shutdown")
async def shutdown_event():
    """Close database connections on application shutdown."""
    try:
        await close_db()
    except Exception as e:
        # Ignore cancellation errors during shutdown - they're expected
        if not isinstance(e, (KeyboardInterrupt, asyncio.CancelledError)):
            logger.warning(f"Error during database shutdown: {str(e)}")
