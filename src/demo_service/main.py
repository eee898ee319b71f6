from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.responses import HTMLResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from loguru import logger

from demo_service.core.config import settings

from .core.logging import setup_logging
from .core.metrics import REQUESTS, RequestTimer
from .core.pages import render_home
from .core.schemas import HealthResponse

router = APIRouter()


async def prometheus_mw(request: Request, call_next):
    path = request.url.path
    method = request.method
    with RequestTimer(path=path, method=method) as timer:
        resp = await call_next(request)
    REQUESTS.labels(path, method, str(resp.status_code)).inc()
    logger.debug(
        {
            "event": "request_served",
            "path": path,
            "method": method,
            "status": resp.status_code,
            "elapsed_seconds": round(timer.elapsed, 6),
        }
    )
    return resp


@router.get("/", response_class=HTMLResponse)
def home():
    return HTMLResponse(render_home())


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", service=settings.service_name, version=settings.version)


@router.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def create_app(configure_logging: Optional[bool] = None) -> FastAPI:
    """Build the demo app.

    ``configure_logging=False`` leaves the loguru sinks to the embedding
    process (the smoke CLI); ``None`` falls back to DEMO_CONFIGURE_LOGGING.
    """
    own_logging = settings.configure_logging if configure_logging is None else configure_logging

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if own_logging:
            setup_logging(settings.log_level, settings.service_name)
        logger.info(
            {
                "event": "service_started",
                "service": settings.service_name,
                "version": settings.version,
            }
        )
        yield
        logger.info({"event": "service_stopped", "service": settings.service_name})

    application = FastAPI(
        title=settings.service_name,
        description="CI/CD pipeline demonstration",
        version=settings.version,
        lifespan=lifespan,
    )
    application.middleware("http")(prometheus_mw)
    application.include_router(router)
    return application


app = create_app()
