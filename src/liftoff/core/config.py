"""Configuration management for Liftoff."""

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Liftoff configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="LIFTOFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Heroku API
    api_key: Optional[str] = Field(
        None,
        description="Heroku API key; overrides netrc lookup",
        validation_alias=AliasChoices("LIFTOFF_API_KEY", "HEROKU_API_KEY"),
    )
    api_url: str = Field("https://api.heroku.com", description="Heroku API base URL")
    request_timeout_seconds: float = Field(30.0, gt=0, description="Per-request timeout")

    # Credentials
    netrc_path: Optional[Path] = Field(None, description="netrc file, defaults to ~/.netrc")
    netrc_host: str = Field("api.heroku.com", description="netrc machine holding the API key")

    # Rendezvous
    rendezvous_connect_timeout_seconds: float = Field(10.0, gt=0)
    rendezvous_activity_timeout_seconds: Optional[float] = Field(
        None,
        gt=0,
        description="Abort a rendezvous session after this much silence; None waits forever",
    )

    # Observability
    log_level: str = Field("INFO")
    log_format: str = Field("console", pattern="^(json|console)$")

    @property
    def resolved_netrc_path(self) -> Path:
        """netrc file to read credentials from."""
        if self.netrc_path is not None:
            return Path(self.netrc_path).expanduser()
        return Path.home() / ".netrc"
