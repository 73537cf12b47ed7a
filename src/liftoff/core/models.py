"""Typed Heroku response bodies and the extraction helpers built on them.

Each helper takes a decoded response body and returns the single value the
wrapper needs. Bodies are validated with pydantic; anything that does not
match raises ``UnexpectedResponseError`` instead of failing on an index.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from liftoff.core.exceptions import UnexpectedResponseError


class HerokuModel(BaseModel):
    """Base for response bodies; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")


class Domain(HerokuModel):
    """Custom domain attached to an app."""

    domain: str = Field(..., min_length=1, description="Hostname of the custom domain")


class DomainName(HerokuModel):
    """Platform-assigned hostname of an app."""

    domain: str = Field(..., min_length=1)


class AppInfo(HerokuModel):
    """Application record returned by ``GET /apps/{app}``."""

    name: Optional[str] = None
    web_url: Optional[str] = None
    domain_name: Optional[DomainName] = None


class Release(HerokuModel):
    """Entry of the release history."""

    name: Optional[str] = None
    commit: Optional[str] = None
    descr: Optional[str] = None


class OneOffProcess(HerokuModel):
    """Process record returned when a one-off command is started."""

    process: Optional[str] = None
    command: Optional[str] = None
    state: Optional[str] = None
    rendezvous_url: Optional[str] = Field(
        None, description="Present when the process was started attached"
    )


_DOMAINS = TypeAdapter(List[Domain])
_RELEASES = TypeAdapter(List[Release])


def _validate(adapter_or_model: Any, body: Any, what: str) -> Any:
    try:
        if isinstance(adapter_or_model, TypeAdapter):
            return adapter_or_model.validate_python(body)
        return adapter_or_model.model_validate(body)
    except ValidationError as e:
        raise UnexpectedResponseError(f"Unexpected {what} response: {e}", body=body) from e


def process_from(body: Any) -> OneOffProcess:
    """Parse the body of a one-off process request.

    Attached requests may answer with plain text (or nothing at all), which
    yields an empty process record.
    """
    if body is None or isinstance(body, str):
        return OneOffProcess()
    return _validate(OneOffProcess, body, "process")


def rendezvous_url_from(body: Any) -> Optional[str]:
    """Rendezvous URL of a one-off process body, if any."""
    return process_from(body).rendezvous_url or None


def first_custom_domain(body: Any) -> Optional[str]:
    """Hostname of the first custom domain, or None when there are none."""
    domains = _validate(_DOMAINS, body, "domains")
    if not domains:
        return None
    return domains[0].domain


def default_domain(body: Any) -> str:
    """Platform-assigned hostname from an app record."""
    app = _validate(AppInfo, body, "app")
    if app.domain_name is None:
        raise UnexpectedResponseError("App record has no domain_name", body=body)
    return app.domain_name.domain


def latest_release_commit(body: Any) -> Optional[str]:
    """Commit of the most recent release.

    The release list is ordered oldest first.
    """
    releases = _validate(_RELEASES, body, "releases")
    if not releases:
        return None
    return releases[-1].commit
