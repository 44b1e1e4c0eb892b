# desglose/main.py
"""
FastAPI application entry point.
"""

import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from desglose.core.logging_config import get_logger, is_production, setup_logging
from desglose.core.request_logging import REQUEST_ID_HEADER, RequestLoggingMiddleware
from desglose.core.sentry_config import init_sentry
from desglose.core.storage import validate_required_data_files
from desglose.routes.tracker import router as tracker_router

# Setup logging FIRST (before any other imports that might log)
setup_logging()
logger = get_logger(__name__)

# Initialize Sentry for error tracking (production only)
sentry_enabled = init_sentry()

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(
        "Application starting up",
        extra={
            "extra_fields": {
                "production": is_production(),
                "python_version": sys.version,
                "sentry": sentry_enabled,
            }
        },
    )

    try:
        validate_required_data_files()
    except Exception as e:
        logger.error(f"Data file validation failed: {e}", exc_info=True)
        raise

    yield

    # Shutdown
    logger.info("Application shutting down")


app = FastAPI(
    title="Desglose de horas",
    description="Work-hours register with extra, holiday and custom breakdown hours",
    version=VERSION,
    lifespan=lifespan,
)

# CORS Configuration
IS_PRODUCTION = is_production()
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()]

if IS_PRODUCTION:
    if not CORS_ORIGINS:
        logger.warning(
            "Production mode but no CORS_ORIGINS set. CORS will block all cross-origin requests. "
            "Set CORS_ORIGINS environment variable if you need to allow specific origins."
        )

    allowed_origins = CORS_ORIGINS
    allowed_methods = ["GET", "POST", "PUT", "DELETE"]
    logger.info(f"CORS configured for production with origins: {allowed_origins}")
else:
    # Development: Permissive CORS for easier testing
    allowed_origins = ["*"]
    allowed_methods = ["*"]
    logger.info("CORS configured for development (permissive)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=allowed_methods,
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER, "Content-Disposition"],
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

app.include_router(tracker_router)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint for monitoring."""
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "service": "desglose",
            "version": VERSION,
        },
    )
