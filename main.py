"""FastAPI application entry point.

Wires together: middleware, exception handlers, routes, metrics.
Validates config at startup.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from fasting.api import get_timer
from fasting.api import router as fasting_router
from shared.config import settings
from shared.exceptions import ProblemDetailError
from shared.logging import configure_logging
from shared.metrics import create_metrics_app
from shared.middleware import (
    RequestIdMiddleware,
    http_exception_handler,
    problem_detail_handler,
    request_validation_handler,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    configure_logging(json_output=settings.log_json, level=settings.log_level)
    logger.info(
        "app_starting",
        ticker_mode=settings.ticker_mode,
        tick_interval_seconds=settings.tick_interval_seconds,
        default_fasting_hours=settings.default_fasting_hours,
    )
    yield
    # Halt periodic ticks before the event loop goes away
    override = app.dependency_overrides.get(get_timer)
    if override is not None:
        override().shutdown()
    elif get_timer.cache_info().currsize:
        get_timer().shutdown()
    logger.info("app_shutting_down")


app = FastAPI(
    title="Fasting Cycle Tracker API",
    description=(
        "Tracks an intermittent-fasting cycle against wall-clock time and holds a "
        "weekly schedule of per-day fasting windows for a UI to render."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(RequestIdMiddleware)

# All errors emit application/problem+json (RFC 9457)
app.add_exception_handler(ProblemDetailError, problem_detail_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)

app.include_router(fasting_router)

metrics_app = create_metrics_app()
app.mount("/metrics", metrics_app)


@app.get("/health")
async def health():
    return {"status": "ok"}
