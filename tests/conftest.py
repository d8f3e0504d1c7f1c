"""
File: tests/conftest.py
Purpose: Shared fixtures: temporary index, fake remote API, one-pass runner.
"""

import asyncio
from collections import Counter

import httpx
import pytest

from valsearch.clients import make_http_client
from valsearch.config import Settings
from valsearch.db import open_index
from valsearch.pipeline import IngestionPipeline

FIRST_PAGE = "https://remote.test/page/1"


def val(id_, name, handle="alice", code=""):
    """One remote val in the API's wire shape."""
    return {"id": id_, "name": name, "author": {"username": handle}, "code": code}


def page(items, next_url=None):
    """One remote page in the API's wire shape."""
    return {"data": items, "links": {"next": next_url}}


class FakeRemote:
    """MockTransport handler serving pages by URL path, with scripted failures."""

    def __init__(self, pages):
        self.pages = pages
        self.hits = Counter()
        self.failures = {}

    def fail(self, path, times=1, make_response=None):
        """Answer the next `times` requests for `path` with make_response() (default: 503)."""
        make_response = make_response or (lambda: httpx.Response(503, text="busy"))
        self.failures[path] = [make_response for _ in range(times)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.hits[path] += 1
        pending = self.failures.get(path)
        if pending:
            return pending.pop(0)()
        return httpx.Response(200, json=self.pages[path])


def make_settings(**overrides) -> Settings:
    values = {
        "REMOTE_FIRST_PAGE_URL": FIRST_PAGE,
        "SYNC_RETRY_WAIT_MIN_SECS": 0,
        "SYNC_RETRY_WAIT_MAX_SECS": 0,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def index(tmp_path):
    idx = open_index(str(tmp_path / "index.db"))
    yield idx
    idx.close()


@pytest.fixture
def run_pass(index):
    """Run one pipeline pass against a FakeRemote and return the PassResult."""

    def _run(remote, **overrides):
        config = make_settings(**overrides)

        async def go():
            async with make_http_client(transport=httpx.MockTransport(remote)) as http:
                return await IngestionPipeline(index, http, config).run_once()

        return asyncio.run(go())

    return _run
