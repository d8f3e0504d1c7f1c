"""
File: instrumentation.py
Purpose: Prometheus metrics collectors used across the service

Exports:
  - REQUESTS(route, method, status): count HTTP requests
  - LATENCY(route): HTTP request duration histogram
  - DB_TIME(route): index operation timing histogram per logical route
  - SYNC_PASSES(outcome): sync passes by outcome in {"ok","failed","cancelled"}
  - SYNC_PAGES / SYNC_RECORDS: pages fetched and records upserted
  - SYNC_PAGE_ERRORS(kind): page failures with kind in {"fetch","parse"}
"""

from prometheus_client import Counter, Histogram, CollectorRegistry, CONTENT_TYPE_LATEST, generate_latest

REGISTRY = CollectorRegistry(auto_describe=True)

REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    labelnames=["route", "method", "status"],
    registry=REGISTRY,
)

LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=["route"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
    registry=REGISTRY,
)

DB_TIME = Histogram(
    "db_seconds",
    "Index operation durations in seconds",
    labelnames=["route"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2),
    registry=REGISTRY,
)

SYNC_PASSES = Counter(
    "sync_passes_total",
    "Completed sync passes",
    labelnames=["outcome"],
    registry=REGISTRY,
)

SYNC_PAGES = Counter(
    "sync_pages_total",
    "Remote pages fetched and indexed",
    registry=REGISTRY,
)

SYNC_RECORDS = Counter(
    "sync_records_upserted_total",
    "Records upserted into the index",
    registry=REGISTRY,
)

SYNC_PAGE_ERRORS = Counter(
    "sync_page_errors_total",
    "Failed page fetches (retried)",
    labelnames=["kind"],
    registry=REGISTRY,
)

def setup_metrics(app):
    """Attach registry to app.state for /metrics endpoint to read."""
    app.state.prom_registry = REGISTRY

def render_metrics():
    """Return (content_type, payload) for a Starlette/FastAPI Response."""
    return CONTENT_TYPE_LATEST, generate_latest(REGISTRY)
