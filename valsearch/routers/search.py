"""
File: routers/search.py
Purpose: HTML search page.
"""

from typing import Optional
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from ..query import QueryService
from ..views import render_search_page

router = APIRouter()

@router.get("/", response_class=HTMLResponse)
def search_page(req: Request, q: Optional[str] = None) -> HTMLResponse:
    """Render the search form and, when `q` is given, the ranked matches."""
    service: QueryService = req.app.state.query_service
    q = q or None
    results = service.search(q)
    return HTMLResponse(render_search_page(q, results))
