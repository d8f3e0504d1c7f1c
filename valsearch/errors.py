"""
File: errors.py
Purpose: Exception taxonomy for the ingestion pipeline.
"""

class IngestionError(Exception):
    """Base class for failures while walking the remote collection."""

class PageFetchError(IngestionError):
    """Transport failure or non-2xx response for a page."""

class PageParseError(IngestionError):
    """Page body is not JSON or does not match the expected page schema."""

class PageRetriesExhausted(IngestionError):
    """A page kept failing past the configured attempt bound; the pass is aborted."""

    def __init__(self, url: str, attempts: int):
        super().__init__(f"giving up on {url} after {attempts} attempts")
        self.url = url
        self.attempts = attempts
