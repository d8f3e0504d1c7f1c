"""
File: routers/sync.py
Purpose: Fire-and-forget sync trigger.
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()

@router.get("/sync", response_class=PlainTextResponse)
async def sync(req: Request) -> PlainTextResponse:
    """Ask the coordinator for a pass; the answer is the same whether one started or not."""
    req.app.state.coordinator.request_sync()
    return PlainTextResponse("Populating...")
