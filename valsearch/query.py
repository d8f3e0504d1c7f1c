"""
File: query.py
Purpose: Translate a user search string into a ranked index lookup.
"""

import logging
from typing import List, Optional

from .repository import IndexQueryError, RecordIndex
from .schemas.records import Record

log = logging.getLogger("valsearch.query")

class QueryService:
    """Search front for the HTTP layer."""

    def __init__(self, index: RecordIndex):
        self.index = index

    def search(self, raw_query: Optional[str]) -> List[Record]:
        """Return matching records, best first. Empty query or unparseable query => []."""
        if not raw_query:
            return []
        try:
            return self.index.search(raw_query)
        except IndexQueryError as e:
            log.info(f"Rejected search query: {e}")
            return []
