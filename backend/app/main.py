"""
FastAPI application entry point.

Uses structured logging from qa_routing.logging.
"""

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from qa_routing.logging import RequestLoggingMiddleware, configure_logging, get_logger
from qa_routing.redis_client import redis_client
from qa_routing.routing import get_lock_registry

from .config import get_settings
from .database import db
from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import jobs as jobs_router
from .routers import questions as questions_router
from .routers import routing as routing_router
from .scheduler import shutdown_scheduler, start_scheduler

# Configure structured logging
settings = get_settings()
log_level = "DEBUG" if settings.debug else "INFO"
configure_logging(level=log_level)
logger = get_logger("api")


def create_app() -> FastAPI:
    # API version prefix
    api_version = "v1"
    api_prefix = f"{settings.api_prefix}/{api_version}"

    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    # Request ID middleware (for tracing)
    app.add_middleware(RequestIDMiddleware)

    # Structured request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Exception handlers
    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        """Initialize services on startup."""
        logger.info("app_startup", app_name=settings.app_name)

        # No-op when already initialized (tests bind their own database)
        db.initialize(settings.database_url)
        db.create_all_tables()

        if settings.routing_lock_backend != "memory":
            if redis_client.initialize():
                logger.info("redis_initialized", redis_host=settings.redis_host)
            else:
                logger.warning("redis_unavailable", fallback="memory_locks")

        locks = get_lock_registry()
        logger.info("routing_ready", lock_backend=locks.backend)

        if settings.enable_scheduler:
            start_scheduler()
            logger.info("scheduler_started")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown."""
        logger.info("app_shutdown")

        if settings.enable_scheduler:
            shutdown_scheduler()
            logger.info("scheduler_stopped")

        redis_client.close()

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness plus database reachability; 503 when the database is down."""
        database = db.health_check()
        if not database["healthy"]:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "database": False},
            )
        return {"status": "ok", "database": True, "latency_ms": database["latency_ms"]}

    # Register routers with versioned API prefix
    # API is accessible at /api/v1/*
    app.include_router(questions_router.router, prefix=api_prefix)
    app.include_router(routing_router.router, prefix=api_prefix)
    app.include_router(jobs_router.router, prefix=api_prefix)

    return app


app = create_app()
