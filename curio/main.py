import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import api_router
from .config import get_settings
from .core.firebase import initialize_firebase
from .core.logging import apply_logging_preferences, configure_logging
from .exceptions import ConflictError, NotFoundError, ValidationError
from .jobs.scheduler import JobScheduler

settings = get_settings()

configure_logging(settings)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    apply_logging_preferences()
    logger.info("Starting Curio API", version="0.1.0")
    try:
        initialize_firebase()
    except Exception as e:
        logger.error("Failed to initialize Firebase", error=str(e))
        raise

    scheduler = None
    if settings.scheduler_enabled:
        scheduler = JobScheduler(settings)
        scheduler.start()

    yield

    if scheduler is not None:
        await scheduler.stop()
    logger.info("Shutting down Curio API")


def create_application() -> FastAPI:
    app = FastAPI(
        title="Curio",
        description="News aggregation backend: RSS ingestion, AI classification fan-out and category browsing",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(
            "Unhandled exception occurred",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
            }
        )

    # Health check at root
    from .api.v1.endpoints import health
    app.include_router(health.router, tags=["health"])

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "curio.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info",
        access_log=False,
    )
