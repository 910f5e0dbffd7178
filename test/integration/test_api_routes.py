"""
HTTP surface tests: routes, status mapping and error bodies, with fake adapters.
"""

from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi.testclient import TestClient

from app.application.interfaces import HttpResult, SearchPage
from app.core.config import settings
from app.core.exceptions import DecodeError, TransportError
from app.infrastructure.adapters.image_search_pinterest import PinterestImageSearch
from app.presentation.api.v1.dependencies.relay import get_relay_adapters
from app.presentation.main import create_application

BASE = "http://relay.test"
PNG = bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A])

pytestmark = pytest.mark.integration


@pytest.fixture
def app(fake_adapters, monkeypatch):
    monkeypatch.setattr(settings, "url", BASE, raising=False)
    monkeypatch.setattr(settings, "proxy_forward_content_type", False, raising=False)
    application = create_application()
    application.dependency_overrides[get_relay_adapters] = lambda: fake_adapters
    return application


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def test_search_returns_proxy_links_bookmark_and_echoes(client, fake_image_search):
    fake_image_search.page = SearchPage(
        image_urls=["https://i.pinimg.com/a.jpg", "https://evil.com/b.jpg"],
        bookmark="bm-2",
    )

    resp = client.get(
        "/search/pins/", params={"q": "red dress", "bookmark": "bm-1", "csrftoken": "tok"}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body == {
        "images": [f"{BASE}/image?url=https%3A%2F%2Fi.pinimg.com%2Fa.jpg"],
        "bookmark": "bm-2",
        "query": "red dress",
        "csrftoken": "tok",
    }
    assert fake_image_search.calls == [
        {"query": "red dress", "bookmark": "bm-1", "csrf_token": "tok"}
    ]


def test_search_without_params_sends_empty_values(client, fake_image_search):
    resp = client.get("/search/pins/")

    assert resp.status_code == 200
    assert resp.json()["images"] == []
    assert resp.json()["bookmark"] == ""
    assert fake_image_search.calls == [{"query": "", "bookmark": "", "csrf_token": None}]


def test_search_without_base_url_is_a_500(client, fake_image_search, monkeypatch):
    monkeypatch.setattr(settings, "url", "", raising=False)

    resp = client.get("/search/pins/", params={"q": "cats"})

    assert resp.status_code == 500
    assert resp.json()["detail"]["error_code"] == "CONFIGURATION_MISSING"
    assert fake_image_search.calls == []


@pytest.mark.parametrize(
    "error,code",
    [(DecodeError("bad"), "DECODE_FAILED"), (TransportError("down"), "TRANSPORT_FAILED")],
)
def test_search_upstream_failures_map_to_500(client, fake_image_search, error, code):
    fake_image_search.error = error

    resp = client.get("/search/pins/", params={"q": "cats"})

    assert resp.status_code == 500
    assert resp.json()["detail"]["error_code"] == code


def test_unexpected_error_becomes_structured_500(client, fake_image_search):
    fake_image_search.error = RuntimeError("kaboom")

    resp = client.get("/search/pins/", params={"q": "cats"})

    assert resp.status_code == 500
    assert resp.json()["detail"]["error"] == "Internal server error"


def test_image_proxy_streams_bytes_as_png(client, fake_transport):
    url = "https://i.pinimg.com/originals/a.jpg"
    fake_transport.responses[url] = HttpResult(200, PNG, "image/jpeg")

    resp = client.get("/image", params={"url": url})

    assert resp.status_code == 200
    assert resp.content == PNG
    assert resp.headers["content-type"] == "image/png"
    assert resp.headers["referrer-policy"] == "no-referrer"
    assert fake_transport.calls[0]["url"] == url


def test_image_proxy_forbids_other_hosts_without_fetching(client, fake_transport):
    resp = client.get("/image", params={"url": "https://evil.com/x.png"})

    assert resp.status_code == 403
    assert resp.json()["detail"]["error_code"] == "DOMAIN_NOT_ALLOWED"
    assert fake_transport.call_count == 0


def test_image_proxy_missing_url_is_forbidden(client, fake_transport):
    resp = client.get("/image")

    assert resp.status_code == 403
    assert fake_transport.call_count == 0


def test_image_proxy_origin_404_is_a_500(client, fake_transport):
    resp = client.get("/image", params={"url": "https://i.pinimg.com/gone.jpg"})

    assert resp.status_code == 500
    assert resp.json()["detail"]["error_code"] == "FETCH_FAILED"


def test_search_link_round_trips_through_image_route(client, fake_image_search, fake_transport):
    original = "https://i.pinimg.com/736x/a b/c+d.jpg?w=1&h=2"
    fake_image_search.page = SearchPage(image_urls=[original])
    fake_transport.responses[original] = HttpResult(200, PNG)

    link = client.get("/search/pins/", params={"q": "x"}).json()["images"][0]
    parts = urlsplit(link)
    assert parse_qs(parts.query)["url"] == [original]

    resp = client.get(f"{parts.path}?{parts.query}")

    assert resp.status_code == 200
    assert resp.content == PNG
    assert fake_transport.calls[-1]["url"] == original


def test_health_and_root(client):
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["search_configured"] is True

    root = client.get("/")
    assert root.status_code == 200
    assert "search" in root.json()


def test_rate_limit_applies_to_relay_routes(fake_adapters, monkeypatch):
    monkeypatch.setattr(settings, "url", BASE, raising=False)
    monkeypatch.setattr(settings, "rate_limit_calls", 2, raising=False)
    application = create_application()
    application.dependency_overrides[get_relay_adapters] = lambda: fake_adapters

    with TestClient(application) as c:
        codes = [c.get("/search/pins/", params={"q": "a"}).status_code for _ in range(3)]
        assert c.get("/health").status_code == 200

    assert codes == [200, 200, 429]


def test_image_requests_are_not_rate_limited(fake_adapters, fake_transport, monkeypatch):
    monkeypatch.setattr(settings, "url", BASE, raising=False)
    monkeypatch.setattr(settings, "rate_limit_calls", 2, raising=False)
    fake_transport.responses["https://i.pinimg.com/"] = HttpResult(200, PNG)
    application = create_application()
    application.dependency_overrides[get_relay_adapters] = lambda: fake_adapters

    with TestClient(application) as c:
        codes = [
            c.get("/image", params={"url": f"https://i.pinimg.com/{i}.jpg"}).status_code
            for i in range(25)
        ]

    assert codes == [200] * 25


def test_csrf_token_with_line_break_is_a_request_build_error(
    app, fake_adapters, fake_transport
):
    fake_adapters.image_search = PinterestImageSearch(fake_transport, "https://search.test/get/")

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.get("/search/pins/", params={"q": "x", "csrftoken": "tok\r\nX-Injected: 1"})

    assert resp.status_code == 500
    assert resp.json()["detail"] == {
        "error": "Failed to create request",
        "details": "CSRF token contains control characters",
        "error_code": "REQUEST_BUILD_FAILED",
    }
    assert fake_transport.call_count == 0


def test_image_redirect_off_allow_list_is_a_500(client, fake_transport):
    fake_transport.responses["https://i.pinimg.com/hop.png"] = HttpResult(
        302, b"", location="http://169.254.169.254/latest/meta-data"
    )

    resp = client.get("/image", params={"url": "https://i.pinimg.com/hop.png"})

    assert resp.status_code == 500
    assert resp.json()["detail"]["error_code"] == "FETCH_FAILED"
    assert [c["url"] for c in fake_transport.calls] == ["https://i.pinimg.com/hop.png"]
