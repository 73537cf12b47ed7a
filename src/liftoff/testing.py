"""In-memory collaborators for exercising HerokuWrapper without the network."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Tuple

from liftoff.heroku.client import ApiResponse

_EMPTY_BODIES: Dict[str, Any] = {
    "get_domains": [],
    "get_releases": [],
    "get_app": {},
}


class StaticKeyExtractor:
    """Always returns the same key."""

    def __init__(self, key: str):
        self.key = key

    def get_credentials(self) -> str:
        return self.key


class RecordingRendezvous:
    """Records the URLs it was asked to attach to and returns immediately."""

    def __init__(self):
        self.urls: List[str] = []

    def start(self, *, url: str) -> None:
        self.urls.append(url)


class InMemoryHerokuApi:
    """Scripted Heroku API.

    Bodies are keyed by operation name (``get_domains``, ``post_ps``...);
    operations without a scripted body answer with an empty body shaped the
    way Heroku would send it. Bodies are handed out as copies. Every call
    is appended to ``calls`` as ``(operation, args, kwargs)``.
    """

    def __init__(self, bodies: Optional[Dict[str, Any]] = None):
        self.bodies: Dict[str, Any] = dict(bodies or {})
        self.calls: List[Tuple[str, tuple, Dict[str, Any]]] = []

    def _answer(self, operation: str, *args: Any, **kwargs: Any) -> ApiResponse:
        self.calls.append((operation, args, kwargs))
        if operation in self.bodies:
            body = self.bodies[operation]
        else:
            body = _EMPTY_BODIES.get(operation, "")
        return ApiResponse(body=copy.deepcopy(body))

    def calls_to(self, operation: str) -> List[Tuple[tuple, Dict[str, Any]]]:
        return [(args, kwargs) for name, args, kwargs in self.calls if name == operation]

    def post_ps_restart(self, app: str) -> ApiResponse:
        return self._answer("post_ps_restart", app)

    def post_app_maintenance(self, app: str, mode: str) -> ApiResponse:
        return self._answer("post_app_maintenance", app, mode)

    def post_ps(self, app: str, command: str, attach: Optional[str] = None) -> ApiResponse:
        return self._answer("post_ps", app, command, attach=attach)

    def get_domains(self, app: str) -> ApiResponse:
        return self._answer("get_domains", app)

    def get_app(self, app: str) -> ApiResponse:
        return self._answer("get_app", app)

    def get_releases(self, app: str) -> ApiResponse:
        return self._answer("get_releases", app)
