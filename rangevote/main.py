"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.orm import Session
from sqlalchemy import text

from rangevote.api.v1.router import api_router
from rangevote.api.deps import get_db
from rangevote.core.config import settings
from rangevote.core.errors import HTTP_STATUS_BY_KIND, ServiceError
from rangevote.core.rate_limit import limiter
from rangevote.core.logging_config import setup_logging, get_logger
from rangevote.middleware import LoggingMiddleware
from rangevote.services.scheduler import AutoCloseScheduler

# Initialize structured logging
setup_logging(level=settings.LOG_LEVEL)
logger = get_logger(__name__)

# Validate production configuration after logging is configured
if settings.ENVIRONMENT == "production":
    settings.validate_production_config()

logger.info(
    "application_starting",
    app_title=settings.APP_TITLE,
    app_version=settings.APP_VERSION,
    environment=settings.ENVIRONMENT,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the auto-close scheduler for the lifetime of the app."""
    scheduler = None
    if settings.AUTO_CLOSE_ENABLED:
        scheduler = AutoCloseScheduler()
        scheduler.start()
    app.state.scheduler = scheduler

    yield

    if scheduler is not None:
        await scheduler.stop()
    logger.info("application_stopped")


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter

# Add rate limit exceeded exception handler
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Map typed service errors to their HTTP status."""
    status_code = HTTP_STATUS_BY_KIND[exc.kind]
    logger.info("service_error", kind=exc.kind.value, status_code=status_code, detail=exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


# Add logging middleware (must be added before other middleware for proper request tracking)
app.add_middleware(LoggingMiddleware)


# Add API versioning middleware
@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Add X-API-Version header to all responses for version tracking."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response

# CORS middleware - configured for cookie-based auth
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-API-Version"],
)

# Include API router
app.include_router(api_router)


@app.get("/health")
async def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
        - status: "healthy" or "unhealthy"
        - database: connection status
        - scheduler: whether the auto-close scheduler is running
        - environment: current environment setting

    Returns 503 if database is unreachable.
    """
    scheduler = getattr(request.app.state, "scheduler", None)
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "database": {"status": "connected"},
        "scheduler": {
            "enabled": scheduler is not None,
            "running": bool(scheduler and scheduler.running),
            "sweeps_completed": scheduler.sweeps_completed if scheduler else 0,
        },
    }

    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["database"]["status"] = f"error: {str(e)}"
        logger.error("health_check_failed", error=str(e))
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
