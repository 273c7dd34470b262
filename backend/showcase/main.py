from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .bootstrap import bootstrap_database
from .config import settings
from .db import Database, get_database
from .logging_utils import configure_logging
from .metrics import CONTENT_TYPE_LATEST, REQUESTS_TOTAL, generate_latest
from .rendering import STATIC_DIR, render
from .routers.api import router as api_router
from .routers.pages import router as pages_router
from .schemas import HealthResponse

configure_logging()
logger = logging.getLogger("showcase.app")

UNMATCHED_ROUTE_LABEL = "<unmatched>"


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.bootstrap_on_startup:
        result = bootstrap_database()
        if not result.ok:
            logger.warning(
                "Serving with limited functionality",
                extra={"event": "startup_degraded", "step": result.step, "reason": result.error},
            )

    logger.info(
        "Backend startup complete",
        extra={"event": "startup", "db_backend": settings.db_backend},
    )
    yield

    get_database().dispose()
    logger.info("Backend shutdown complete", extra={"event": "shutdown"})


app = FastAPI(title="Graphit Showcase", version="1.0.0", lifespan=lifespan)


@app.middleware("http")
async def request_metrics_middleware(request: Request, call_next):
    response = await call_next(request)
    REQUESTS_TOTAL.labels(
        method=request.method,
        path=_route_label(request, response.status_code),
        status=str(response.status_code),
    ).inc()
    return response


def _route_label(request: Request, status_code: int) -> str:
    # Matched route template; every unknown path shares one label.
    route = request.scope.get("route")
    if route is not None:
        return route.path
    if status_code == 404:
        return UNMATCHED_ROUTE_LABEL
    return request.url.path


def not_found_page() -> HTMLResponse:
    return HTMLResponse(render("not_found.html", {"title": "Page Not Found"}), status_code=404)


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == 404:
        return not_found_page()
    return await http_exception_handler(request, exc)


@app.get("/health", response_model=HealthResponse)
def healthcheck(db: Database = Depends(get_database)) -> JSONResponse:
    ts = datetime.now(timezone.utc).isoformat()
    try:
        db.check_connection()
    except SQLAlchemyError:
        logger.warning("Health check failed", exc_info=True, extra={"event": "health_degraded", "path": "/health"})
        return JSONResponse(status_code=503, content={"status": "degraded", "ts": ts})
    return JSONResponse(content={"status": "ok", "ts": ts})


@app.get("/metrics")
async def metrics() -> Response:
    if not settings.enable_prometheus_metrics:
        raise HTTPException(status_code=404, detail="Metrics disabled")
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
app.include_router(api_router)
app.include_router(pages_router)
