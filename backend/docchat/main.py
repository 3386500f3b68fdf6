"""
FastAPI Application Entry Point.

This module initializes the FastAPI application and includes all routers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from docchat.config import settings
from docchat.api.v1.router import api_router
from docchat.core.metrics import router as metrics_router
from docchat.core.rate_limiter import limiter, rate_limit_exceeded_handler
from docchat.core.sentry import init_sentry
from docchat.db.session import init_db
from docchat.middleware.metrics_middleware import MetricsMiddleware
from docchat.services.extraction_worker import get_extraction_worker, shutdown_extraction_worker
from docchat.services.storage_service import get_storage_service

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database and extraction worker; stop the worker on exit."""
    configure_logging()
    init_sentry()
    init_db()

    worker = get_extraction_worker()
    if settings.RESUME_PENDING_ON_STARTUP:
        worker.resume_pending(get_storage_service())

    logger.info(f"{settings.APP_NAME} started")
    yield

    shutdown_extraction_worker(wait=True)


app = FastAPI(
    title=settings.APP_NAME,
    description="Upload PDFs and read back their extracted text",
    version="1.0.0",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 with a readable message."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(messages) or "Invalid request"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert anything unexpected into a JSON 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)
app.include_router(metrics_router)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns:
        dict: Status of the application.
    """
    return {"status": "healthy"}
