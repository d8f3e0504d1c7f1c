"""
File: tests/test_cli.py
Purpose: `valsearch sync` one-shot mode.
"""

import httpx
import pytest

from conftest import FIRST_PAGE, FakeRemote, page, val
from valsearch import cli
from valsearch.clients import make_http_client
from valsearch.config import settings
from valsearch.db import open_index


def test_sync_command_populates_index(tmp_path, monkeypatch):
    remote = FakeRemote({"/page/1": page([val("a1", "fooBar"), val("a2", "kebab-name")])})
    monkeypatch.setattr(settings, "REMOTE_FIRST_PAGE_URL", FIRST_PAGE)
    monkeypatch.setattr(cli, "make_http_client",
                        lambda: make_http_client(transport=httpx.MockTransport(remote)))
    db_path = str(tmp_path / "cli.db")

    assert cli.main(["sync", "--db", db_path]) == 0

    index = open_index(db_path)
    try:
        assert index.count() == 2
        assert [r.id for r in index.search("kebab")] == ["a2"]
    finally:
        index.close()


def test_sync_command_reports_failure(tmp_path, monkeypatch):
    remote = FakeRemote({"/page/1": page([])})
    remote.fail("/page/1", times=5)
    monkeypatch.setattr(settings, "REMOTE_FIRST_PAGE_URL", FIRST_PAGE)
    monkeypatch.setattr(settings, "SYNC_PAGE_MAX_ATTEMPTS", 2)
    monkeypatch.setattr(settings, "SYNC_RETRY_WAIT_MIN_SECS", 0)
    monkeypatch.setattr(settings, "SYNC_RETRY_WAIT_MAX_SECS", 0)
    monkeypatch.setattr(cli, "make_http_client",
                        lambda: make_http_client(transport=httpx.MockTransport(remote)))

    assert cli.main(["sync", "--db", str(tmp_path / "cli.db")]) == 1
    assert remote.hits["/page/1"] == 2


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])
