"""
PG Finder API - Main Application Entry Point

A shared-accommodation marketplace backend:
- Owners list properties with rooms and beds
- Tenants search listings and request beds
- A booking ledger keeps bed occupancy consistent with booking approvals
- Structured logging with request correlation and Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from pg_finder.core.config import get_settings
from pg_finder.core.exceptions import LedgerError, StoreUnavailable
from pg_finder.core.logging import setup_logging, get_logger
from pg_finder.core.metrics import metrics_endpoint, store_errors
from pg_finder.api.router import api_router
from pg_finder.api.middleware import RequestLoggingMiddleware
from pg_finder.services.cache_service import get_redis, close_redis, get_cache_stats
from pg_finder.services.strategy_factory import get_selection_policy

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        bed_selection_policy=get_selection_policy().name,
    )

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without listing cache")

    yield

    await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="PG listings, rooms, beds and booking approvals",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
        headers=exc.headers,
    )


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    store_errors.inc()
    logger.error("store_call_failed", error=str(exc), error_type=type(exc).__name__)
    unavailable = StoreUnavailable()
    return JSONResponse(
        status_code=unavailable.status_code,
        content={"detail": unavailable.detail, "error_code": unavailable.error_code},
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": cache_stats,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
