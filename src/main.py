"""FastAPI application entry point."""

import logging
import pathlib
import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from src.api.steps import error_response, router as steps_router
from src.api.submissions import router as submissions_router
from src.config import settings
from src.database import engine, init_models
from src.landing.router import APP_VERSION, router as landing_router
from src.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.dev.ConsoleRenderer() if settings.environment == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info(
        "app_starting",
        environment=settings.environment,
        port=settings.port,
    )
    await init_models()
    logger.info("database_ready")
    yield
    logger.info("app_shutting_down")
    await engine.dispose()
    logger.info("database_closed")


app = FastAPI(
    title="Tameeni Quote API",
    description="Multi-step car insurance quote intake and submission dashboard API",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same {"error": ...} shape as every other failure."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    logger.warning("request_rejected", path=request.url.path, error=details)
    return error_response(400, f"Invalid data: {details}")

# Include routers
app.include_router(landing_router)
app.include_router(steps_router)
app.include_router(submissions_router)

# Dashboard static files, mounted after the API routes
_public_dir = pathlib.Path(settings.public_dir)
if _public_dir.is_dir():
    app.mount("/", StaticFiles(directory=str(_public_dir), html=True), name="public")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=settings.host, port=settings.port)
