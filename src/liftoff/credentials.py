"""Heroku API key resolution."""

from __future__ import annotations

import netrc
from typing import Optional, Protocol, runtime_checkable

import structlog

from liftoff.core.config import Settings
from liftoff.core.exceptions import CredentialsError

logger = structlog.get_logger()


@runtime_checkable
class KeyExtractor(Protocol):
    """Produces the API key used to talk to Heroku."""

    def get_credentials(self) -> str: ...


class LocalApiKeyExtractor:
    """Reads the API key from the environment or the local netrc file.

    Lookup order:
    1. ``HEROKU_API_KEY`` / ``LIFTOFF_API_KEY``
    2. password of the ``api.heroku.com`` machine in ``~/.netrc``
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()

    def get_credentials(self) -> str:
        if self.settings.api_key:
            logger.debug("Using API key from environment")
            return self.settings.api_key

        key = self._read_netrc()
        if not key:
            raise CredentialsError(
                "No Heroku API key found; set HEROKU_API_KEY or run `heroku login`",
                code="missing_api_key",
            )
        return key

    def _read_netrc(self) -> Optional[str]:
        path = self.settings.resolved_netrc_path
        if not path.exists():
            logger.debug("netrc file not found", path=str(path))
            return None

        try:
            entries = netrc.netrc(str(path))
        except (netrc.NetrcParseError, OSError) as e:
            raise CredentialsError(f"Could not read {path}: {e}", code="netrc_unreadable") from e

        auth = entries.authenticators(self.settings.netrc_host)
        if auth is None:
            logger.debug("No netrc entry for host", host=self.settings.netrc_host)
            return None

        _login, _account, password = auth
        logger.debug("Using API key from netrc", path=str(path))
        return password or None
