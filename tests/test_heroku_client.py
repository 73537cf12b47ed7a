"""Tests for the httpx-backed Heroku API client."""

import base64
from urllib.parse import parse_qs

import httpx
import pytest

from liftoff.core.config import Settings
from liftoff.core.exceptions import ApiError
from liftoff.heroku.client import HerokuApi, HttpHerokuApi


@pytest.fixture
def captured():
    return []


@pytest.fixture
def make_api(captured):
    def _make(status=200, body=None, content_type="application/json"):
        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            if body is None:
                return httpx.Response(status)
            if content_type == "application/json":
                return httpx.Response(status, json=body)
            return httpx.Response(status, text=body, headers={"content-type": content_type})

        settings = Settings(api_key="KEY", api_url="https://api.example.test")
        return HttpHerokuApi("KEY", settings, transport=httpx.MockTransport(handler))

    return _make


def _form(request: httpx.Request) -> dict:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def test_http_client_satisfies_contract(make_api):
    with make_api() as api:
        assert isinstance(api, HerokuApi)


def test_requests_use_basic_auth_and_json(make_api, captured):
    with make_api(body=[]) as api:
        api.get_domains("my-app")

    request = captured[0]
    expected = base64.b64encode(b":KEY").decode()
    assert request.headers["authorization"] == f"Basic {expected}"
    assert request.headers["accept"] == "application/json"
    assert str(request.url) == "https://api.example.test/apps/my-app/domains"


def test_post_ps_restart(make_api, captured):
    with make_api(body={"status": "ok"}) as api:
        response = api.post_ps_restart("my-app")

    assert captured[0].method == "POST"
    assert captured[0].url.path == "/apps/my-app/ps/restart"
    assert response.body == {"status": "ok"}


def test_post_app_maintenance_sends_mode(make_api, captured):
    with make_api() as api:
        response = api.post_app_maintenance("my-app", "1")

    assert captured[0].url.path == "/apps/my-app/server/maintenance"
    assert _form(captured[0]) == {"maintenance_mode": "1"}
    assert response.body == ""


def test_post_ps_sends_command_and_attach(make_api, captured):
    body = {"process": "run.1", "rendezvous_url": "rendezvous://host:5000/secret"}
    with make_api(body=body) as api:
        response = api.post_ps("my-app", "rake db:migrate", attach="true")

    assert captured[0].url.path == "/apps/my-app/ps"
    assert _form(captured[0]) == {"command": "rake db:migrate", "attach": "true"}
    assert response.body["rendezvous_url"] == "rendezvous://host:5000/secret"


def test_post_ps_without_attach(make_api, captured):
    with make_api(body={}) as api:
        api.post_ps("my-app", "rake cache:clear")

    assert _form(captured[0]) == {"command": "rake cache:clear"}


def test_get_app_and_releases(make_api, captured):
    with make_api(body={"domain_name": {"domain": "my-app.herokuapp.com"}}) as api:
        api.get_app("my-app")
        api.get_releases("my-app")

    assert [r.url.path for r in captured] == ["/apps/my-app", "/apps/my-app/releases"]
    assert all(r.method == "GET" for r in captured)


def test_text_body_is_returned_as_text(make_api):
    with make_api(body="Running rake db:migrate", content_type="text/plain") as api:
        response = api.post_ps("my-app", "rake db:migrate", attach="true")
    assert response.body == "Running rake db:migrate"


def test_error_status_raises_api_error(make_api):
    with make_api(status=404, body={"error": "App not found."}) as api:
        with pytest.raises(ApiError) as exc_info:
            api.get_app("missing-app")

    assert exc_info.value.status_code == 404
    assert exc_info.value.code == "http_404"
    assert exc_info.value.body == {"error": "App not found."}


def test_transport_errors_propagate():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    settings = Settings(api_url="https://api.example.test")
    with HttpHerokuApi("KEY", settings, transport=httpx.MockTransport(handler)) as api:
        with pytest.raises(httpx.ConnectError):
            api.get_releases("my-app")



def test_error_with_non_json_body_still_raises_api_error():
    html = "<html><body>Application error</body></html>"

    def handler(request):
        return httpx.Response(502, content=html.encode(), headers={"content-type": "application/json"})

    settings = Settings(api_url="https://api.example.test")
    with HttpHerokuApi("KEY", settings, transport=httpx.MockTransport(handler)) as api:
        with pytest.raises(ApiError) as exc_info:
            api.get_app("my-app")

    assert exc_info.value.status_code == 502
    assert exc_info.value.body == html
