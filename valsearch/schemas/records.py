"""
File: schemas/records.py
Purpose: Pydantic model for an indexed record.
"""

from pydantic import BaseModel, Field

class Record(BaseModel):
    """One row of the full-text index."""
    id: str = Field(..., description="Stable val id (index primary key)")
    handle: str = Field(..., description="Author username")
    name: str = Field(..., description="Display name as authored")
    normalized_name: str = Field("", description="Name split into words for token matching")
    body: str = Field("", description="Val source code")
