"""
File: tests/test_api.py
Purpose: HTTP surface: search page, sync trigger, 404, system routes.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import FIRST_PAGE, FakeRemote, page, val
from valsearch import clients
from valsearch.config import settings
from valsearch.instrumentation import LATENCY
from valsearch.main import app
from valsearch.schemas.records import Record


class RecordingCoordinator:
    def __init__(self):
        self.requests = 0

    def request_sync(self):
        self.requests += 1


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DB_PATH", str(tmp_path / "api.db"))
    monkeypatch.setattr(settings, "SYNC_ON_STARTUP", False)
    with TestClient(app) as c:
        c.app.state.coordinator = RecordingCoordinator()
        yield c


def seed(client, **fields):
    values = {"id": "a1", "handle": "alice", "name": "fooBar", "normalized_name": "foo Bar", "body": ""}
    values.update(fields)
    client.app.state.index.upsert(Record(**values))


def test_home_renders_without_query(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "Val Town Search" in resp.text
    assert "Search Results" not in resp.text


def test_search_renders_matches(client):
    seed(client, body="<script>alert(1)</script>")
    resp = client.get("/", params={"q": "foo"})
    assert resp.status_code == 200
    assert "Search Results" in resp.text
    assert 'href="https://val.town/v/a1"' in resp.text
    assert "alice.fooBar" in resp.text
    assert "&lt;script&gt;" in resp.text
    assert 'value="foo"' in resp.text


def test_search_page_survives_bad_query(client):
    seed(client)
    resp = client.get("/", params={"q": '"unterminated'})
    assert resp.status_code == 200
    assert "Search Results" not in resp.text


def test_sync_always_acknowledges(client):
    for _ in range(2):
        resp = client.get("/sync")
        assert resp.status_code == 200
        assert resp.text == "Populating..."
    assert client.app.state.coordinator.requests == 2


def test_unknown_path_is_404(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.text == "Not found"


def test_health_ok(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_metrics_exposed(client):
    client.get("/health")
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "http_requests_total" in resp.text


def _route_labels():
    return {s.labels["route"] for metric in LATENCY.collect() for s in metric.samples}


def test_metrics_label_by_route_template(client):
    client.get("/health")
    client.get("/nope-0")
    before = _route_labels()
    assert {"/health", "unmatched"} <= before

    for i in range(50):
        client.get(f"/random-{i}")
    assert _route_labels() == before


# ---------------- real coordinator + pipeline behind the app ----------------

@pytest.fixture
def remote():
    return FakeRemote({"/page/1": page([val("a1", "fooBar")])})


@pytest.fixture
def live_settings(tmp_path, monkeypatch, remote):
    """App wired to a fake remote through the shared HTTP client."""
    monkeypatch.setattr(settings, "DB_PATH", str(tmp_path / "live.db"))
    monkeypatch.setattr(settings, "REMOTE_FIRST_PAGE_URL", FIRST_PAGE)
    monkeypatch.setattr(settings, "SYNC_ON_STARTUP", False)
    monkeypatch.setattr(settings, "SYNC_STALE_MINUTES", 60)
    real_make_http_client = clients.make_http_client
    monkeypatch.setattr(clients, "make_http_client",
                        lambda: real_make_http_client(transport=httpx.MockTransport(remote)))
    return settings


def test_sync_route_populates_index(live_settings, remote):
    with TestClient(app) as c:
        assert c.get("/sync").text == "Populating..."
        coordinator = c.app.state.coordinator
        c.portal.call(coordinator.wait)

        assert coordinator.last_completed_at is not None
        resp = c.get("/", params={"q": "foo"})
        assert "alice.fooBar" in resp.text

        assert c.get("/sync").text == "Populating..."
        assert not coordinator.running
        assert remote.hits["/page/1"] == 1


def test_zero_staleness_window_allows_back_to_back_passes(live_settings, remote, monkeypatch):
    monkeypatch.setattr(settings, "SYNC_STALE_MINUTES", 0)
    with TestClient(app) as c:
        coordinator = c.app.state.coordinator
        c.get("/sync")
        c.portal.call(coordinator.wait)
        c.get("/sync")
        c.portal.call(coordinator.wait)
    assert remote.hits["/page/1"] == 2


def test_sync_on_startup_runs_one_pass(live_settings, remote, monkeypatch):
    monkeypatch.setattr(settings, "SYNC_ON_STARTUP", True)
    with TestClient(app) as c:
        coordinator = c.app.state.coordinator
        c.portal.call(coordinator.wait)
        assert coordinator.last_completed_at is not None
        assert [r.id for r in c.app.state.index.search("foo")] == ["a1"]
    assert remote.hits["/page/1"] == 1
