"""
File: main.py
Purpose: Application entrypoint for val-search. Wires routers, logging, metrics,
         the record index, and the sync coordinator.
"""

import time
from datetime import timedelta
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

from .logging_setup import configure_logging
from .instrumentation import setup_metrics, REQUESTS, LATENCY
from .routers import health, metrics, search, sync
from .clients import init_clients, close_clients
from .db import init_index, close_index
from .pipeline import IngestionPipeline
from .query import QueryService
from .sync import SyncCoordinator
from .config import settings

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app startup/shutdown lifecycle."""
    configure_logging()
    setup_metrics(app)
    http = await init_clients(app)
    index = await init_index(app)  # create FTS table if missing
    pipeline = IngestionPipeline(index, http)
    coordinator = SyncCoordinator(
        pipeline.run_once,
        stale_after=timedelta(minutes=settings.SYNC_STALE_MINUTES),
    )
    app.state.query_service = QueryService(index)
    app.state.coordinator = coordinator
    if settings.SYNC_ON_STARTUP:
        coordinator.request_sync()
    yield
    await coordinator.stop()
    await close_index(app)
    await close_clients(app)

app = FastAPI(
    title="Val Town Search",
    version="1.0.0",
    lifespan=lifespan
)

def _route_label(request: Request) -> str:
    """Matched route template (e.g. "/sync"); unknown paths share one label."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"

@app.middleware("http")
async def prometheus_mw(request: Request, call_next):
    """Track request metrics and latency histograms."""
    start = time.perf_counter()
    resp = await call_next(request)
    route = _route_label(request)
    LATENCY.labels(route=route).observe(time.perf_counter() - start)
    REQUESTS.labels(route=route, method=request.method, status=str(resp.status_code)).inc()
    return resp

@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Plain-text 404 for unknown paths; everything else keeps FastAPI's JSON body."""
    if exc.status_code == 404:
        return PlainTextResponse("Not found", status_code=404)
    return await http_exception_handler(request, exc)

# Routers
app.include_router(search.router, prefix="", tags=["search"])
app.include_router(sync.router, prefix="", tags=["sync"])
app.include_router(health.router, prefix="", tags=["system"])
app.include_router(metrics.router, prefix="", tags=["system"])
