"""
File: clients.py
Purpose: Initialize and manage the shared async HTTP client and fetch pages
         of the remote API.
"""

import httpx
from pydantic import ValidationError

from .config import settings
from .errors import PageFetchError, PageParseError
from .schemas.remote import RemotePage

def make_http_client(timeout: float | None = None, **kwargs) -> httpx.AsyncClient:
    """Build the AsyncClient used for remote page fetches."""
    headers = {"accept": "application/json"}
    return httpx.AsyncClient(
        headers=headers,
        timeout=httpx.Timeout(timeout or settings.HTTP_TIMEOUT_SECS),
        follow_redirects=True,
        **kwargs,
    )

async def init_clients(app) -> httpx.AsyncClient:
    """Create the shared async client and attach it to app.state."""
    app.state.http = make_http_client()
    return app.state.http

async def close_clients(app) -> None:
    """Close the shared async client on shutdown."""
    if hasattr(app.state, "http"):
        await app.state.http.aclose()

async def fetch_page(http: httpx.AsyncClient, url: str) -> RemotePage:
    """
    GET one page and validate it against the page schema.
    Raises PageFetchError for transport/status problems and PageParseError for bad bodies.
    """
    try:
        resp = await http.get(url)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        raise PageFetchError(f"GET {url} failed: {e}") from e

    try:
        payload = resp.json()
    except ValueError as e:
        raise PageParseError(f"GET {url} returned non-JSON body: {e}") from e

    try:
        return RemotePage.model_validate(payload)
    except ValidationError as e:
        raise PageParseError(f"GET {url} returned unexpected page shape: {e}") from e
