"""Deployment lifecycle actions for a single Heroku app."""

from __future__ import annotations

from typing import Optional

import structlog

from liftoff.core import models
from liftoff.core.config import Settings
from liftoff.core.exceptions import CredentialsError
from liftoff.credentials import KeyExtractor, LocalApiKeyExtractor
from liftoff.heroku.client import HerokuApi, HttpHerokuApi
from liftoff.rendezvous import Rendezvous, TlsRendezvous

logger = structlog.get_logger()

MIGRATE_COMMAND = "rake db:migrate"


class HerokuWrapper:
    """Translates deployment actions into Heroku API calls.

    Collaborators are injected; anything omitted gets its production
    implementation. Errors raised by the API client are not caught here.
    """

    def __init__(
        self,
        app_name: str,
        *,
        api_key: Optional[str] = None,
        key_extractor: Optional[KeyExtractor] = None,
        rendezvous: Optional[Rendezvous] = None,
        heroku_api: Optional[HerokuApi] = None,
        settings: Optional[Settings] = None,
    ):
        self.app_name = app_name
        self.settings = settings or Settings()
        self._api_key = api_key
        self.key_extractor = key_extractor or LocalApiKeyExtractor(self.settings)
        self.rendezvous = rendezvous or TlsRendezvous(self.settings)
        self._owns_client = heroku_api is None
        self.heroku_api = (
            heroku_api if heroku_api is not None else HttpHerokuApi(self._require_api_key(), self.settings)
        )

    def __enter__(self) -> "HerokuWrapper":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this wrapper created it; injected clients are left alone."""
        if self._owns_client:
            self.heroku_api.close()

    def _require_api_key(self) -> str:
        key = self.api_key()
        if not key:
            raise CredentialsError("Resolved Heroku API key is empty", code="empty_api_key")
        return key

    def api_key(self) -> str:
        """Explicit key if one was given, otherwise whatever the extractor finds."""
        if self._api_key is not None:
            return self._api_key
        return self.key_extractor.get_credentials()

    def app_restart(self) -> None:
        logger.info("Restarting app", app=self.app_name)
        self.heroku_api.post_ps_restart(self.app_name)

    def app_maintenance_off(self) -> None:
        logger.info("Disabling maintenance mode", app=self.app_name)
        self.heroku_api.post_app_maintenance(self.app_name, "0")

    def app_maintenance_on(self) -> None:
        logger.info("Enabling maintenance mode", app=self.app_name)
        self.heroku_api.post_app_maintenance(self.app_name, "1")

    def run_migrations(self) -> None:
        """Run ``rake db:migrate`` attached and wait for it to finish."""
        logger.info("Running migrations", app=self.app_name)
        response = self.heroku_api.post_ps(self.app_name, MIGRATE_COMMAND, attach="true")
        url = models.rendezvous_url_from(response.body)
        if url:
            self.rendezvous.start(url=url)
            logger.info("Migrations finished", app=self.app_name)

    def run_task(self, task: str) -> models.OneOffProcess:
        """Start ``task`` as an attached one-off process.

        Unlike ``run_migrations`` this does not wait on the rendezvous; the
        returned process record carries the URL for callers that want to.
        """
        logger.info("Running task", app=self.app_name, task=task)
        response = self.heroku_api.post_ps(self.app_name, task, attach="true")
        return models.process_from(response.body)

    def app_url(self) -> str:
        """First custom domain, falling back to the platform hostname."""
        domain = models.first_custom_domain(self.heroku_api.get_domains(self.app_name).body)
        if domain:
            return domain
        return models.default_domain(self.heroku_api.get_app(self.app_name).body)

    def last_deploy_commit(self) -> Optional[str]:
        return models.latest_release_commit(self.heroku_api.get_releases(self.app_name).body)
