import re
import time

import httpx
import pytest
from fastapi.testclient import TestClient

import main
from config import settings
from models.view_state import GENERIC_ERROR_MESSAGE
from routers import pages
from services import country_service
from services.session_store import sessions

_SESSION_URL = re.compile(r'url=(/views/[0-9a-f]+)"')


@pytest.fixture(autouse=True)
def _fresh_rate_limits():
    pages.limiter.reset()
    yield
    pages.limiter.reset()


def _mock_remote(monkeypatch: pytest.MonkeyPatch, handler, calls: list | None = None) -> None:
    def counting(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(counting))
    monkeypatch.setattr(country_service, "get_client", lambda: client)


def _open_session(client: TestClient) -> str:
    res = client.get("/")
    assert res.status_code == 200
    assert "Country Flags" in res.text
    match = _SESSION_URL.search(res.text)
    assert match, "first render should still be loading"
    return match.group(1)


def _settle(client: TestClient, url: str) -> str:
    for _ in range(100):
        res = client.get(url)
        assert res.status_code == 200
        if "Loading..." not in res.text:
            return res.text
        time.sleep(0.01)
    raise AssertionError("view never left the loading state")


def test_page_renders_countries(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list = []
    _mock_remote(
        monkeypatch,
        lambda r: httpx.Response(200, json=[{"name": "Peru", "flag": "https://x/peru.svg"}]),
        calls,
    )

    with TestClient(main.app) as client:
        url = _open_session(client)
        html = _settle(client, url)
        again = client.get(url).text

    assert html.count('class="country-card"') == 1
    assert 'alt="Peru flag"' in html
    assert "http-equiv" not in html
    assert again == html
    assert len(calls) == 1


def test_page_renders_generic_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _mock_remote(monkeypatch, lambda r: httpx.Response(503))

    with TestClient(main.app) as client:
        html = _settle(client, _open_session(client))

    assert GENERIC_ERROR_MESSAGE in html


def test_each_page_load_is_a_new_session(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list = []
    _mock_remote(monkeypatch, lambda r: httpx.Response(200, json=[]), calls)

    with TestClient(main.app) as client:
        first = _open_session(client)
        second = _open_session(client)
        assert first != second
        assert "No countries found." in _settle(client, first)
        assert "No countries found." in _settle(client, second)

    assert len(calls) == 2


def test_delete_session(monkeypatch: pytest.MonkeyPatch) -> None:
    _mock_remote(monkeypatch, lambda r: httpx.Response(200, json=[]))

    with TestClient(main.app) as client:
        url = _open_session(client)
        assert client.delete(url).status_code == 204
        assert client.get(url).status_code == 404
        assert client.delete(url).status_code == 404


def test_unknown_session_is_404() -> None:
    with TestClient(main.app) as client:
        res = client.get("/views/doesnotexist")

    assert res.status_code == 404
    assert res.json()["detail"] == "View session not found"


def test_shutdown_closes_sessions(monkeypatch: pytest.MonkeyPatch) -> None:
    _mock_remote(monkeypatch, lambda r: httpx.Response(200, json=[]))

    with TestClient(main.app) as client:
        _open_session(client)
        assert len(sessions) >= 1

    assert len(sessions) == 0


def test_countries_json(monkeypatch: pytest.MonkeyPatch) -> None:
    _mock_remote(
        monkeypatch,
        lambda r: httpx.Response(200, json=[{"name": "Peru", "flag": "https://x/peru.svg", "extra": 1}]),
    )

    with TestClient(main.app) as client:
        res = client.get("/countries")

    assert res.status_code == 200
    assert res.json() == [{"name": "Peru", "flag": "https://x/peru.svg"}]


def test_countries_json_upstream_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    _mock_remote(monkeypatch, handler)

    with TestClient(main.app) as client:
        res = client.get("/countries")

    assert res.status_code == 502
    assert res.json()["detail"] == GENERIC_ERROR_MESSAGE


def test_health() -> None:
    with TestClient(main.app) as client:
        res = client.get("/health")

    assert res.status_code == 200
    payload = res.json()
    assert payload["status"] == "ok"
    assert payload["version"] == "0.1.0"
    assert isinstance(payload["active_sessions"], int)


def test_page_is_rate_limited(monkeypatch: pytest.MonkeyPatch) -> None:
    assert settings.page_rate_limit == "30/minute"
    _mock_remote(monkeypatch, lambda r: httpx.Response(200, json=[]))

    with TestClient(main.app) as client:
        codes = [client.get("/").status_code for _ in range(31)]
        # Only the page route is limited
        assert client.get("/health").status_code == 200

    assert codes[:30] == [200] * 30
    assert codes[30] == 429


def test_health_reports_only_liveness_fields() -> None:
    with TestClient(main.app) as client:
        payload = client.get("/health").json()

    assert set(payload) == {"status", "uptime_seconds", "active_sessions", "version"}
