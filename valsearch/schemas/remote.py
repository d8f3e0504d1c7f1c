"""
File: schemas/remote.py
Purpose: Pydantic models for one page of the remote search API.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

class RemoteAuthor(BaseModel):
    """Val author block."""
    username: str

class RemoteRecord(BaseModel):
    """Single val as returned by the remote API."""
    id: str
    name: str
    author: RemoteAuthor
    code: Optional[str] = Field(None, description="Source code; may be null for some vals")

class RemoteLinks(BaseModel):
    """Pagination links; `next` is absent or null on the last page."""
    next: Optional[str] = None

class RemotePage(BaseModel):
    """One page of results."""
    data: List[RemoteRecord]
    links: RemoteLinks
