"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from donezo.api.deps import authorize_matched_route
from donezo.api.routes import auth, tasks, web
from donezo.config import Settings, get_settings
from donezo.core.logging import setup_logging
from donezo.core.security import hash_password
from donezo.database import Database, init_db
from donezo.errors import AppError, StorageError
from donezo.services.session_service import sweep_expired_sessions
from donezo.telemetry import TelemetryManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Donezo application")

    # Best-effort cleanup; a failure must not prevent startup
    try:
        sweep_expired_sessions(app.state.db)
    except StorageError as exc:
        logger.warning(f"Expired session cleanup failed: {exc}")

    yield

    app.state.telemetry.shutdown()
    logger.info("Shutting down Donezo application")


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render application errors as {"error": message}."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as {"error": message}."""
    # Bodies are decoded before dependencies run; check auth before reporting bad JSON
    if any(error["type"] == "json_invalid" for error in exc.errors()):
        try:
            await run_in_threadpool(authorize_matched_route, request)
        except AppError as auth_error:
            return await app_error_handler(request, auth_error)

    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": message or "Request validation failed"},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def create_app(settings: Settings | None = None, db: Database | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Application settings, loaded from the environment if omitted
        db: Store handle, created from ``settings.database_url`` if omitted

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    telemetry_manager = TelemetryManager(settings)
    telemetry_manager.setup()

    app = FastAPI(
        title=settings.app_name,
        description="Single-user task list with session and API token authentication",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.telemetry = telemetry_manager
    app.state.db = db if db is not None else init_db(settings)
    # Hashed once per process; the plaintext secret is not kept around
    app.state.password_hash = hash_password(settings.password.get_secret_value())

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # Instrument FastAPI with OpenTelemetry
    if settings.otel_enabled:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumented with OpenTelemetry")

    api = APIRouter(prefix="/api")
    api.include_router(auth.router)
    api.include_router(tasks.router)

    root = APIRouter()
    root.include_router(web.router)
    root.include_router(api)

    @root.get("/health", tags=["health"])
    def health():
        """Health check endpoint."""
        return {"status": "ok"}

    app.include_router(root, prefix=settings.base_path)
    logger.info(f"base_path: {settings.base_path!r}")

    return app


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "donezo.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    run()
