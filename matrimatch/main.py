from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from matrimatch.config import settings
from matrimatch.logging_config import configure_logging
from matrimatch.api.v1.router import api_router
from matrimatch.core.exceptions import register_exception_handlers
from matrimatch.db.session import init_db, close_db, ping_database
from matrimatch.db.redis import init_redis, close_redis, ping_cache
from matrimatch.core.middleware import (
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    configure_logging()
    await init_db()
    await init_redis()
    logger.info(
        "%s started in %s mode (missing horoscope policy: %s)",
        settings.APP_NAME,
        settings.ENVIRONMENT,
        settings.MISSING_HOROSCOPE_POLICY,
    )

    yield

    # Shutdown
    await close_db()
    await close_redis()
    logger.info("%s shutting down", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    description="Compatibility scoring for matrimonial matches: profile, preferences, horoscope and activity",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID", "X-Correlation-ID", "Accept", "Origin"],
    expose_headers=["X-Request-ID"],
    max_age=600,  # Cache preflight requests for 10 minutes
)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
# Must stay outermost (added last)
app.add_middleware(RequestIDMiddleware)

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health")
async def health_check():
    """
    Checks the database and the score cache.
    The cache is optional, so an unconfigured cache does not degrade status.
    """
    services = {}
    status = "healthy"

    try:
        services["database"] = {"status": "healthy", "latency_ms": await ping_database()}
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        services["database"] = {"status": "unhealthy", "error": str(e)[:100]}
        status = "degraded"

    try:
        latency = ping_cache()
    except Exception as e:
        logger.warning("Cache health check failed: %s", e)
        services["cache"] = {"status": "unhealthy", "error": str(e)[:100]}
        status = "degraded"
    else:
        if latency is None:
            services["cache"] = {"status": "not_configured"}
        else:
            services["cache"] = {"status": "healthy", "latency_ms": latency}

    return {"status": status, "services": services}
