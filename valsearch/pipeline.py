"""
Ingestion pipeline.

Walks the remote paginated collection page by page:
1. Fetch a page (retrying the same page on fetch/parse failures)
2. Normalize each val's name
3. Upsert each record into the full-text index
4. Follow `links.next` until the remote reports no further pages
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Set

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    stop_never,
    wait_exponential,
)

from .clients import fetch_page
from .config import Settings, settings as default_settings
from .errors import PageFetchError, PageParseError, PageRetriesExhausted
from .instrumentation import SYNC_PAGE_ERRORS, SYNC_PAGES, SYNC_RECORDS
from .normalize import normalize_name
from .repository import RecordIndex
from .schemas.records import Record
from .schemas.remote import RemotePage, RemoteRecord

log = logging.getLogger("valsearch.pipeline")


@dataclass
class PassResult:
    """Counters for one complete pass."""
    pages: int = 0
    records: int = 0
    purged: int = 0


def to_record(item: RemoteRecord) -> Record:
    """Map a remote val onto an index record."""
    return Record(
        id=item.id,
        handle=item.author.username,
        name=item.name,
        normalized_name=normalize_name(item.name),
        body=item.code or "",
    )


class IngestionPipeline:
    """Full re-scan of the remote collection into the record index."""

    def __init__(self, index: RecordIndex, http: httpx.AsyncClient, config: Optional[Settings] = None):
        self.index = index
        self.http = http
        self.config = config or default_settings

    async def run_once(self) -> PassResult:
        """
        Run one pass from the first page to the last.

        Fetch and parse failures are retried on the same page and never
        escape, unless SYNC_PAGE_MAX_ATTEMPTS bounds them (PageRetriesExhausted).
        Index write errors propagate and abort the pass.
        """
        url: Optional[str] = self.config.REMOTE_FIRST_PAGE_URL
        purge = self.config.SYNC_PURGE_MISSING
        seen: Set[str] = set()
        result = PassResult()

        log.info("Sync pass started", extra={"url": url, "purge_missing": purge})
        while url:
            page = await self._fetch_with_retry(url)
            for item in page.data:
                self.index.upsert(to_record(item))
                if purge:
                    seen.add(item.id)

            result.pages += 1
            result.records += len(page.data)
            SYNC_PAGES.inc()
            SYNC_RECORDS.inc(len(page.data))
            log.info(f"Inserted {len(page.data)} vals", extra={"url": url, "page": result.pages})
            url = page.links.next

        if purge:
            result.purged = self.index.purge_except(seen)

        log.info(
            "Sync pass complete",
            extra={"pages": result.pages, "records": result.records, "purged": result.purged},
        )
        return result

    def _retrying(self) -> AsyncRetrying:
        max_attempts = self.config.SYNC_PAGE_MAX_ATTEMPTS
        wait_min = self.config.SYNC_RETRY_WAIT_MIN_SECS
        return AsyncRetrying(
            retry=retry_if_exception_type((PageFetchError, PageParseError)),
            wait=wait_exponential(multiplier=wait_min, min=wait_min, max=self.config.SYNC_RETRY_WAIT_MAX_SECS),
            stop=stop_after_attempt(max_attempts) if max_attempts > 0 else stop_never,
            after=_log_page_failure,
        )

    async def _fetch_with_retry(self, url: str) -> RemotePage:
        """Fetch `url` until it succeeds (or the attempt bound is reached). The cursor never advances on failure."""
        try:
            async for attempt in self._retrying():
                with attempt:
                    return await fetch_page(self.http, url)
        except RetryError as e:
            raise PageRetriesExhausted(url, e.last_attempt.attempt_number) from e.last_attempt.exception()


def _log_page_failure(state: RetryCallState) -> None:
    """Log each failed page attempt; runs before the stop/wait decision."""
    err = state.outcome.exception() if state.outcome else None
    kind = "parse" if isinstance(err, PageParseError) else "fetch"
    SYNC_PAGE_ERRORS.labels(kind=kind).inc()
    log.error(f"Page {kind} failed (attempt {state.attempt_number}): {err}")
