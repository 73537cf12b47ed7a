"""Heroku platform API client."""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, Field

from liftoff.core.config import Settings
from liftoff.core.exceptions import ApiError


logger = structlog.get_logger()


class ApiResponse(BaseModel):
    """Decoded API response; ``body`` is JSON when the server sent JSON, else text."""

    status: int = 200
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = ""


@runtime_checkable
class HerokuApi(Protocol):
    """Remote operations the deployment wrapper relies on."""

    def post_ps_restart(self, app: str) -> ApiResponse: ...

    def post_app_maintenance(self, app: str, mode: str) -> ApiResponse: ...

    def post_ps(self, app: str, command: str, attach: Optional[str] = None) -> ApiResponse: ...

    def get_domains(self, app: str) -> ApiResponse: ...

    def get_app(self, app: str) -> ApiResponse: ...

    def get_releases(self, app: str) -> ApiResponse: ...


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return ""
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.json()
    return response.text


def _decode_error_body(response: httpx.Response) -> Any:
    # Error pages from the router are often HTML despite a JSON content type
    try:
        return _decode_body(response)
    except ValueError:
        return response.text


class HttpHerokuApi:
    """httpx-backed client for the legacy Heroku API.

    Authenticates with HTTP basic auth (empty user, API key as password).
    Non-2xx answers raise ``ApiError``; transport errors surface as httpx
    exceptions.
    """

    def __init__(
        self,
        api_key: str,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.settings = settings or Settings()
        self._client = httpx.Client(
            base_url=self.settings.api_url,
            auth=("", api_key),
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(self.settings.request_timeout_seconds),
            transport=transport,
        )

    def __enter__(self) -> "HttpHerokuApi":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, data: Optional[Dict[str, str]] = None) -> ApiResponse:
        logger.debug("Heroku API request", method=method, path=path)
        response = self._client.request(method, path, data=data)
        if response.is_error:
            logger.warning("Heroku API error", method=method, path=path, status=response.status_code)
            raise ApiError(
                f"{method} {path} failed with status {response.status_code}",
                status_code=response.status_code,
                body=_decode_error_body(response),
            )
        body = _decode_body(response)
        return ApiResponse(status=response.status_code, headers=dict(response.headers), body=body)

    @staticmethod
    def _app_path(app: str, suffix: str = "") -> str:
        return f"/apps/{quote(app, safe='')}{suffix}"

    def post_ps_restart(self, app: str) -> ApiResponse:
        return self._request("POST", self._app_path(app, "/ps/restart"))

    def post_app_maintenance(self, app: str, mode: str) -> ApiResponse:
        return self._request(
            "POST", self._app_path(app, "/server/maintenance"), data={"maintenance_mode": mode}
        )

    def post_ps(self, app: str, command: str, attach: Optional[str] = None) -> ApiResponse:
        data = {"command": command}
        if attach is not None:
            data["attach"] = attach
        return self._request("POST", self._app_path(app, "/ps"), data=data)

    def get_domains(self, app: str) -> ApiResponse:
        return self._request("GET", self._app_path(app, "/domains"))

    def get_app(self, app: str) -> ApiResponse:
        return self._request("GET", self._app_path(app))

    def get_releases(self, app: str) -> ApiResponse:
        return self._request("GET", self._app_path(app, "/releases"))
