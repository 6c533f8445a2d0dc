"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from webcalc.api.routes import calculator, health, metrics, pages
from webcalc.core.config import get_settings
from webcalc.core.logging_config import LoggingConfig
from webcalc.core.middleware import LoggingContextMiddleware
from webcalc.core.middleware_metrics import MetricsMiddleware
from webcalc.core.tracing import configure_tracing, shutdown_tracing

# Configure logging first
LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")
    configure_tracing(app)

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    shutdown_tracing()


_settings = get_settings()
app = FastAPI(
    title=_settings.app_name,
    description="Session-scoped web calculator with per-window history",
    version="0.1.0",
    lifespan=lifespan,
)

# Logging context middleware is added before CORS to capture all requests
app.add_middleware(LoggingContextMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors and return them as JSON"""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={
            "error": str(exc),
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc),
            "type": type(exc).__name__
        }
    )


app.include_router(pages.router)
app.include_router(calculator.router)
app.include_router(health.router)
app.include_router(metrics.router)
