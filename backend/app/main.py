"""
Ticketing Back Office API - Main Application Entry Point

A multi-tenant back office for event ticketing:
- Cookie sessions with sliding expiration and role/plan/subscription guards
- Company-scoped CRUD for users, clients, events and ticket types
- Atomic stock registration and ticket lot cloning
- Public storefront carts and checkout snapshots
- Redis caching of event listings, structured logging, Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.errors import AppError, ValidationError, error_for_status
from app.core.logging import setup_logging, get_logger
from app.core.metrics import metrics_endpoint
from app.api.router import api_router
from app.api.middleware import RequestLoggingMiddleware
from app.db.session import Database
from app.services.cache_service import get_redis, close_redis, get_cache_stats

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
    )

    database = Database.from_url(settings.DATABASE_URL, settings)
    app.state.database = database

    # Initialize Redis connection
    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without cache")

    yield

    # Cleanup
    await close_redis()
    await database.close()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Multi-tenant event ticketing back office API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(RequestLoggingMiddleware)


def _error_response(error: AppError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(
            "request_error",
            name=exc.name,
            message=exc.message,
            cause=repr(exc.cause) if exc.cause else None,
        )
    else:
        logger.warning("request_rejected", name=exc.name, message=exc.message, status_code=exc.status_code)
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(
        ".".join(str(part) for part in err["loc"] if part != "body") or "body"
        for err in exc.errors()
    )
    error = ValidationError(
        message="Os dados enviados são inválidos.",
        action=f"Verifique os campos: {fields}.",
        cause=exc,
    )
    logger.warning("request_rejected", name=error.name, fields=fields)
    return _error_response(error)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(error_for_status(exc.status_code))


# Routes
app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Health check endpoint for Docker and load balancers."""
    database_ok = await request.app.state.database.ping()
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy" if database_ok else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "connected" if database_ok else "unavailable",
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
