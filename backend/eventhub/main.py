from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventhub.core.config import settings
from eventhub.core.database import init_db, close_db
from eventhub.core.exceptions import EventHubError, error_response
from eventhub.core.logging_config import logger
from eventhub.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from eventhub.core.rate_limiter import limiter, rate_limit_exceeded_handler
from eventhub.core.redis_client import redis_client
from eventhub.api.router import api_router

APP_VERSION = "1.0.0"


def validate_config():
    """Warn about settings that disable features at runtime"""
    if not settings.razorpay_configured:
        logger.warning("[Startup] RAZORPAY_KEY_ID/RAZORPAY_KEY_SECRET not set - paid registration will fail")
    if not (settings.SMTP_USER and settings.SMTP_PASSWORD):
        logger.warning("[Startup] SMTP credentials not set - password reset emails will fail")
    if settings.is_production and not settings.SESSION_COOKIE_SECURE:
        logger.warning("[Startup] SESSION_COOKIE_SECURE is off in production")
    if settings.LEGACY_SCAN_QR_ENABLED:
        logger.warning("[Startup] Legacy unauthenticated /api/scan-qr is enabled")


async def ensure_database_ready() -> bool:
    """Create tables if they don't exist"""
    try:
        await init_db()
        logger.info("[Startup] Database tables ready")
        return True
    except Exception as e:
        logger.error(f"[Startup] Failed to ensure database ready: {e}")
        return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Session backend: {settings.SESSION_BACKEND}")
    logger.info("=" * 60)

    validate_config()

    db_ready = await ensure_database_ready()
    if not db_ready:
        logger.warning("[Startup] Database not ready - requests will fail")

    if settings.SESSION_BACKEND.lower() == "redis":
        await redis_client.connect()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    if settings.SESSION_BACKEND.lower() == "redis":
        await redis_client.disconnect()
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="College event management: events, clubs, registrations, attendance and payments",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False
)

# Add rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add middleware (order matters - last added runs first)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

# CORS - credentialed so the session cookie is sent by the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(EventHubError)
async def eventhub_exception_handler(request: Request, exc: EventHubError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}", extra={"error_details": exc.details})
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Database error"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


# Include API router
app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "eventhub.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG
    )
